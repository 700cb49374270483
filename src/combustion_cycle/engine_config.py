"""
Engine Configuration Module
Defines engine geometry, working-fluid constants and solver settings.

Author: Mohith Sai Gorla
Date:   27-02-2026
"""

import math
import json
import warnings
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

# ── Geometry ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeometryParameters:
    """Engine geometry specifications (all in SI units).

    Attributes
    ----------
    bore                  : m
    stroke                : m
    connecting_rod_length : m
    compression_ratio     : dimensionless  (> 1)
    """

    bore: float
    stroke: float
    connecting_rod_length: float
    compression_ratio: float

    def __post_init__(self) -> None:
        if self.bore <= 0.0:
            raise ValueError(f"bore must be > 0 m, got {self.bore}")
        if self.stroke <= 0.0:
            raise ValueError(f"stroke must be > 0 m, got {self.stroke}")
        if self.connecting_rod_length <= 0.0:
            raise ValueError(
                f"connecting_rod_length must be > 0 m, got {self.connecting_rod_length}"
            )
        _r = self.stroke / 2.0
        if self.connecting_rod_length <= _r:
            raise ValueError(
                f"connecting_rod_length ({self.connecting_rod_length} m) must be > "
                f"crank_radius ({_r} m); otherwise slider-crank mechanism locks up."
            )
        if self.compression_ratio <= 1.0:
            raise ValueError(
                f"compression_ratio must be > 1, got {self.compression_ratio}"
            )

    # ── Derived properties ────────────────────────────────────────────────

    @property
    def crank_radius(self) -> float:
        """Crank radius  r = stroke / 2  [m]."""
        return self.stroke / 2.0

    @property
    def rod_ratio(self) -> float:
        """Rod ratio  l/r  [dimensionless]."""
        return self.connecting_rod_length / self.crank_radius

    @property
    def lambda_ratio(self) -> float:
        """Crank-to-rod ratio  λ = r / l  [dimensionless]."""
        return self.crank_radius / self.connecting_rod_length

    @property
    def piston_area(self) -> float:
        """Piston cross-sectional area  A = π·D²/4  [m²]."""
        return math.pi * self.bore**2 / 4.0


# ── Thermodynamics ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ThermodynamicParameters:
    """Working-fluid constants and boundary conditions.

    Specific heats and the gas constant are per unit mass in kJ/(kg·K), so the
    cycle summaries come out in kJ/kg.  Pressures are in Pa.

    The variable-gamma model uses  cv(T) = cv_a0 + cv_a1·T.
    """

    intake_pressure: float = 101_325.0  # Pa
    intake_temperature: float = 298.0  # K   (25 °C)
    peak_temperature: float = 3000.0  # K   imposed at TDC
    gamma: float = 1.4  # constant-gamma model
    cv: float = 0.71  # kJ/(kg·K)  constant-gamma model
    gas_constant: float = 0.287  # kJ/(kg·K)  air

    cv_a0: float = 0.71  # kJ/(kg·K)
    cv_a1: float = 1.9e-4  # kJ/(kg·K²)

    def __post_init__(self) -> None:
        if self.intake_pressure <= 0.0:
            raise ValueError(
                f"intake_pressure must be > 0 Pa, got {self.intake_pressure}"
            )
        if self.intake_temperature <= 0.0:
            raise ValueError(
                f"intake_temperature must be > 0 K, got {self.intake_temperature}"
            )
        if self.peak_temperature < self.intake_temperature:
            raise ValueError(
                f"peak_temperature ({self.peak_temperature} K) must not be below "
                f"intake_temperature ({self.intake_temperature} K)"
            )
        if self.gamma <= 1.0:
            raise ValueError(f"gamma must be > 1, got {self.gamma}")
        if self.cv <= 0.0:
            raise ValueError(f"cv must be > 0 kJ/(kg·K), got {self.cv}")
        if self.gas_constant <= 0.0:
            raise ValueError(
                f"gas_constant must be > 0 kJ/(kg·K), got {self.gas_constant}"
            )
        if self.cv_a0 <= 0.0:
            raise ValueError(f"cv_a0 must be > 0 kJ/(kg·K), got {self.cv_a0}")
        if self.cv_a1 < 0.0:
            raise ValueError(f"cv_a1 must be ≥ 0, got {self.cv_a1}")


# ── Operating conditions ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class OperatingConditions:
    """Engine operating conditions."""

    rpm: float = 1000.0

    def __post_init__(self) -> None:
        if self.rpm <= 0.0:
            raise ValueError(f"rpm must be > 0, got {self.rpm}")

    @property
    def angular_velocity(self) -> float:
        """Angular velocity  ω = 2π·N/60  [rad/s]."""
        return self.rpm * 2.0 * math.pi / 60.0


# ── Solver parameters ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SolverParameters:
    """Crank-angle grid and variable-gamma iteration settings.

    ``gamma_tolerance = None`` reproduces the fixed-count iteration; a
    positive value enables early exit and non-convergence reporting.
    """

    angular_resolution: float = 1.0  # degrees per step
    gamma_iterations: int = 20
    gamma_tolerance: Optional[float] = None

    def __post_init__(self) -> None:
        if self.angular_resolution <= 0.0:
            raise ValueError(
                f"angular_resolution must be > 0°, got {self.angular_resolution}"
            )
        steps = 180.0 / self.angular_resolution
        if abs(steps - round(steps)) > 1e-9:
            raise ValueError(
                f"angular_resolution ({self.angular_resolution}°) must divide 180° evenly"
            )
        if self.gamma_iterations < 1:
            raise ValueError(
                f"gamma_iterations must be ≥ 1, got {self.gamma_iterations}"
            )
        if self.gamma_tolerance is not None and self.gamma_tolerance <= 0.0:
            raise ValueError(
                f"gamma_tolerance must be > 0 when set, got {self.gamma_tolerance}"
            )

    @property
    def half_cycle_steps(self) -> int:
        """Number of steps from −180° to TDC."""
        return int(round(180.0 / self.angular_resolution))

    @property
    def num_samples(self) -> int:
        """Samples over −180° … +180° (both endpoints included)."""
        return 2 * self.half_cycle_steps + 1


# ── Top-level configuration ───────────────────────────────────────────────────


@dataclass(frozen=True)
class EngineConfiguration:
    """Complete, immutable engine configuration for one simulation run.

    All sub-configurations are validated individually upon construction.
    Atypical-but-valid values are reported as warnings.
    """

    geometry: GeometryParameters
    thermodynamics: ThermodynamicParameters
    operating: OperatingConditions
    solver: SolverParameters = field(default_factory=SolverParameters)

    def __post_init__(self) -> None:
        self._check_typical_ranges()

    def _check_typical_ranges(self) -> None:
        notices: List[str] = []

        cr = self.geometry.compression_ratio
        if not (6.0 <= cr <= 25.0):
            notices.append(f"Compression ratio {cr:.1f} outside typical range [6, 25]")

        rr = self.geometry.rod_ratio
        if not (2.0 <= rr <= 10.0):
            notices.append(f"Rod ratio {rr:.2f} outside typical range [2, 10]")

        rpm = self.operating.rpm
        if not (100 <= rpm <= 20_000):
            notices.append(f"RPM {rpm:.0f} outside typical range [100, 20000]")

        for msg in notices:
            warnings.warn(msg, stacklevel=3)

    def with_overrides(self, **changes) -> "EngineConfiguration":
        """Return a copy with individual parameters replaced.

        Keyword names are looked up across the sub-configurations, e.g.
        ``config.with_overrides(rpm=3000.0, peak_temperature=2500.0)``.

        Raises
        ------
        KeyError
            If a keyword does not name any configuration parameter.
        """
        sections = {
            "geometry": self.geometry,
            "thermodynamics": self.thermodynamics,
            "operating": self.operating,
            "solver": self.solver,
        }
        updates: Dict[str, Dict] = {name: {} for name in sections}
        for key, value in changes.items():
            for name, section in sections.items():
                if key in section.__dataclass_fields__:
                    updates[name][key] = value
                    break
            else:
                raise KeyError(f"Unknown configuration parameter: {key}")

        return replace(
            self,
            **{
                name: replace(section, **updates[name])
                for name, section in sections.items()
                if updates[name]
            },
        )

    # ── Serialisation ─────────────────────────────────────────────────────

    def to_dict(self) -> Dict:
        """Serialise configuration to a plain dictionary."""
        return {
            "geometry": {
                "bore": self.geometry.bore,
                "stroke": self.geometry.stroke,
                "connecting_rod_length": self.geometry.connecting_rod_length,
                "compression_ratio": self.geometry.compression_ratio,
            },
            "thermodynamics": {
                "intake_pressure": self.thermodynamics.intake_pressure,
                "intake_temperature": self.thermodynamics.intake_temperature,
                "peak_temperature": self.thermodynamics.peak_temperature,
                "gamma": self.thermodynamics.gamma,
                "cv": self.thermodynamics.cv,
                "gas_constant": self.thermodynamics.gas_constant,
                "cv_a0": self.thermodynamics.cv_a0,
                "cv_a1": self.thermodynamics.cv_a1,
            },
            "operating": {"rpm": self.operating.rpm},
            "solver": {
                "angular_resolution": self.solver.angular_resolution,
                "gamma_iterations": self.solver.gamma_iterations,
                "gamma_tolerance": self.solver.gamma_tolerance,
            },
        }

    def to_json(self, filepath: str) -> None:
        """Persist configuration to a JSON file."""
        with open(filepath, "w", encoding="utf-8") as fh:
            json.dump(self.to_dict(), fh, indent=2)

    @classmethod
    def from_dict(cls, data: Dict) -> "EngineConfiguration":
        """Build a configuration from a dictionary shaped like :meth:`to_dict`.

        The ``solver`` section is optional and falls back to the defaults.

        Raises
        ------
        KeyError
            If a required section is missing.
        ValueError
            If a field has an invalid value.
        """
        try:
            geo_data = dict(data["geometry"])
            thm_data = dict(data["thermodynamics"])
            op_data = dict(data["operating"])
        except KeyError as exc:
            raise KeyError(f"Missing section in configuration file: {exc}") from exc

        sol_data = dict(data.get("solver", {}))
        # JSON may hand back 20.0 for an int field
        if "gamma_iterations" in sol_data:
            sol_data["gamma_iterations"] = int(sol_data["gamma_iterations"])

        return cls(
            geometry=GeometryParameters(**geo_data),
            thermodynamics=ThermodynamicParameters(**thm_data),
            operating=OperatingConditions(**op_data),
            solver=SolverParameters(**sol_data),
        )

    @classmethod
    def from_json(cls, filepath: str) -> "EngineConfiguration":
        """Load configuration from a JSON file.

        Raises
        ------
        FileNotFoundError
            If filepath does not exist.
        KeyError
            If a required section is missing from the JSON.
        ValueError
            If a field has an invalid value.
        """
        with open(filepath, "r", encoding="utf-8") as fh:
            data = json.load(fh)
        return cls.from_dict(data)


# ── Factory functions ─────────────────────────────────────────────────────────


def create_reference_engine() -> EngineConfiguration:
    """Create the reference single-cylinder configuration.

        Stroke × Bore : 100 mm × 100 mm
        Rod length    : 400 mm (4 × stroke)
        CR            : 9 : 1
        Speed         : 1000 rpm
        Inlet         : 101 325 Pa, 298 K
        Peak T        : 3000 K
    """
    stroke = 0.1
    return EngineConfiguration(
        geometry=GeometryParameters(
            bore=stroke,
            stroke=stroke,
            connecting_rod_length=4.0 * stroke,
            compression_ratio=9.0,
        ),
        thermodynamics=ThermodynamicParameters(),
        operating=OperatingConditions(rpm=1000.0),
        solver=SolverParameters(),
    )
