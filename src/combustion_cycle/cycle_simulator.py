"""
Cycle Simulator
Steps kinematics and both thermodynamic models over one crank revolution.

Author: Mohith Sai Gorla
Date:   27-02-2026
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

import numpy as np
import numpy.typing as npt

from .cycle_summary import CycleSummary, PhaseBoundaries, summarize_cycle
from .engine_config import EngineConfiguration
from .geometry import CylinderGeometry
from .kinematics import CrankSample, SliderCrank
from .thermodynamics import (
    ConstantGammaModel,
    ThermodynamicState,
    VariableGammaModel,
    VariableGammaSolver,
    VariableGammaState,
    WorkingFluid,
)

logger = logging.getLogger(__name__)


# ── Phase state machine ───────────────────────────────────────────────────────


class CyclePhase(Enum):
    """Thermodynamic phase of a crank-angle sample."""

    COMPRESSION = "compression"
    TOP_DEAD_CENTER = "top_dead_center"
    EXPANSION = "expansion"

    @classmethod
    def from_angle(cls, angle_deg: float, half_step_deg: float) -> "CyclePhase":
        """Classify a crank angle; angles within half a step of 0° are TDC."""
        if abs(angle_deg) < half_step_deg:
            return cls.TOP_DEAD_CENTER
        if angle_deg < 0.0:
            return cls.COMPRESSION
        return cls.EXPANSION


_ALLOWED_TRANSITIONS: Dict[CyclePhase, tuple] = {
    CyclePhase.COMPRESSION: (CyclePhase.COMPRESSION, CyclePhase.TOP_DEAD_CENTER),
    CyclePhase.TOP_DEAD_CENTER: (CyclePhase.EXPANSION,),
    CyclePhase.EXPANSION: (CyclePhase.EXPANSION,),
}


class PhaseStateMachine:
    """Compression → top dead center → expansion, driven by crank angle.

    The machine starts in COMPRESSION.  Each call to :meth:`advance` moves it
    to the phase guarded by the new angle; a transition outside the allowed
    set (e.g. expansion back to compression, or skipping TDC) raises
    RuntimeError.
    """

    def __init__(self, angular_resolution: float) -> None:
        if angular_resolution <= 0.0:
            raise ValueError(
                f"angular_resolution must be > 0°, got {angular_resolution}"
            )
        self.half_step = 0.5 * angular_resolution
        self.phase = CyclePhase.COMPRESSION

    def advance(self, angle_deg: float) -> CyclePhase:
        target = CyclePhase.from_angle(angle_deg, self.half_step)
        if target not in _ALLOWED_TRANSITIONS[self.phase]:
            raise RuntimeError(
                f"Illegal phase transition {self.phase.name} → {target.name} "
                f"at {angle_deg:.3f}°"
            )
        if target is not self.phase:
            logger.debug(
                "phase %s -> %s at %.2f deg", self.phase.name, target.name, angle_deg
            )
        self.phase = target
        return target


# ── Results ───────────────────────────────────────────────────────────────────


@dataclass
class CycleResults:
    """Results of one cycle simulation.

    All arrays are aligned to ``crank_angles_deg`` and are read-only.
    Index 0 and the last index are the same physical crank position.
    """

    crank_angles_deg: npt.NDArray[np.float64]  # [deg]
    crank_angles_rad: npt.NDArray[np.float64]  # [rad]

    # Kinematics
    displacement: npt.NDArray[np.float64]  # [m]   from TDC
    velocity: npt.NDArray[np.float64]  # [m/s]
    acceleration: npt.NDArray[np.float64]  # [m/s²]

    volume: npt.NDArray[np.float64]  # [m³]

    # Constant gamma
    pressure: npt.NDArray[np.float64]  # [Pa]
    temperature: npt.NDArray[np.float64]  # [K]

    # Variable gamma
    pressure_variable: npt.NDArray[np.float64]  # [Pa]
    temperature_variable: npt.NDArray[np.float64]  # [K]
    gamma_variable: npt.NDArray[np.float64]  # [-]
    cv_variable: npt.NDArray[np.float64]  # [kJ/(kg·K)]
    gamma_residual: npt.NDArray[np.float64]  # [-]  last relative γ change

    clearance_volume: float
    swept_volume: float
    boundaries: PhaseBoundaries
    constant_summary: CycleSummary
    variable_summary: CycleSummary

    phases: List[CyclePhase] = field(default_factory=list)

    @property
    def num_samples(self) -> int:
        return len(self.crank_angles_deg)

    def crank_sample(self, index: int) -> CrankSample:
        return CrankSample(
            angle=float(self.crank_angles_rad[index]),
            displacement=float(self.displacement[index]),
            velocity=float(self.velocity[index]),
            acceleration=float(self.acceleration[index]),
        )

    def constant_state(self, index: int) -> ThermodynamicState:
        return ThermodynamicState(
            volume=float(self.volume[index]),
            pressure=float(self.pressure[index]),
            temperature=float(self.temperature[index]),
        )

    def variable_state(self, index: int) -> VariableGammaState:
        return VariableGammaState(
            volume=float(self.volume[index]),
            pressure=float(self.pressure_variable[index]),
            temperature=float(self.temperature_variable[index]),
            gamma=float(self.gamma_variable[index]),
            cv=float(self.cv_variable[index]),
        )


# ── Simulator ─────────────────────────────────────────────────────────────────


class CycleSimulator:
    """Simulates one crank revolution (−180° … +180°) of a single cylinder.

    Combines:
    - Slider-crank kinematics (SliderCrank)
    - Volume model with TDC pinned to the clearance volume (CylinderGeometry)
    - Constant-gamma isentropic stepper (ConstantGammaModel)
    - Variable-gamma fixed-point stepper (VariableGammaModel)
    - Instantaneous heat release to the peak temperature at TDC
    """

    def __init__(
        self,
        config: EngineConfiguration,
        solver: Optional[VariableGammaSolver] = None,
    ) -> None:
        """
        Parameters
        ----------
        config : EngineConfiguration
            Validated engine configuration; read-only for the run.
        solver : VariableGammaSolver, optional
            Replacement for the solver built from ``config.solver``.
        """
        self.config = config
        thermo = config.thermodynamics

        self.slider_crank = SliderCrank(
            config.geometry.crank_radius, config.geometry.connecting_rod_length
        )
        self.cylinder = CylinderGeometry(config.geometry, self.slider_crank)
        self.angular_velocity = config.operating.angular_velocity  # rad/s

        self.constant_model = ConstantGammaModel(gamma=thermo.gamma, cv=thermo.cv)

        self.working_fluid = WorkingFluid(
            gas_constant=thermo.gas_constant,
            cv_a0=thermo.cv_a0,
            cv_a1=thermo.cv_a1,
        )
        if solver is None:
            solver = VariableGammaSolver(
                self.working_fluid,
                iterations=config.solver.gamma_iterations,
                tolerance=config.solver.gamma_tolerance,
            )
        self.variable_model = VariableGammaModel(self.working_fluid, solver)

    def crank_angle_grid(self) -> npt.NDArray[np.float64]:
        """Sampled crank angles  [deg], −180 … +180 with TDC exactly at 0."""
        n = self.config.solver.num_samples
        angles = np.linspace(-180.0, 180.0, n)
        angles[n // 2] = 0.0
        return angles

    # ── Simulation ────────────────────────────────────────────────────────

    def simulate(self) -> CycleResults:
        """Run the cycle.

        Algorithm
        ---------
        index 0       : inlet state (p_in, T_in, γ and cv of the constant model)
        COMPRESSION   : isentropic step, both models
        TOP_DEAD_CENTER
                      : V pinned to V_c, T set to T_peak, p scaled by T ratio
        EXPANSION     : isentropic step, both models
        last index    : copy of index 0 (cycle closure)

        Returns
        -------
        CycleResults
        """
        thermo = self.config.thermodynamics
        crank_angles_deg = self.crank_angle_grid()
        crank_angles_rad = np.deg2rad(crank_angles_deg)
        num_samples = len(crank_angles_deg)
        last = num_samples - 1
        boundaries = PhaseBoundaries.for_samples(num_samples)

        # ── Kinematics over the whole grid ────────────────────────────────
        displacement = np.zeros(num_samples)
        velocity = np.zeros(num_samples)
        acceleration = np.zeros(num_samples)
        for i, theta in enumerate(crank_angles_rad):
            y, v, a = self.slider_crank.kinematics_at_angle(
                float(theta), self.angular_velocity
            )
            displacement[i] = y
            velocity[i] = v
            acceleration[i] = a

        # ── Inlet state ───────────────────────────────────────────────────
        constant_states: List[ThermodynamicState] = [
            ThermodynamicState(
                volume=self.cylinder.total_volume,
                pressure=thermo.intake_pressure,
                temperature=thermo.intake_temperature,
            )
        ]
        variable_states: List[VariableGammaState] = [
            VariableGammaState(
                volume=self.cylinder.total_volume,
                pressure=thermo.intake_pressure,
                temperature=thermo.intake_temperature,
                gamma=thermo.gamma,
                cv=thermo.cv,
            )
        ]
        gamma_residual = np.zeros(num_samples)

        machine = PhaseStateMachine(self.config.solver.angular_resolution)
        phases: List[CyclePhase] = [machine.advance(float(crank_angles_deg[0]))]

        # ── Main loop ─────────────────────────────────────────────────────
        for i in range(1, last):
            phase = machine.advance(float(crank_angles_deg[i]))
            phases.append(phase)
            constant_prev = constant_states[-1]
            variable_prev = variable_states[-1]

            if phase is CyclePhase.TOP_DEAD_CENTER:
                vol = self.cylinder.tdc_volume()
                constant_states.append(
                    self.constant_model.heat_to_peak(
                        constant_prev, thermo.peak_temperature, vol
                    )
                )
                variable_states.append(
                    self.variable_model.heat_to_peak(
                        variable_prev, thermo.peak_temperature, vol
                    )
                )
            else:
                vol = self.cylinder.volume_from_displacement(displacement[i])
                constant_states.append(
                    self.constant_model.isentropic_step(constant_prev, vol)
                )
                variable_state, solution = self.variable_model.isentropic_step(
                    variable_prev, vol
                )
                variable_states.append(variable_state)
                gamma_residual[i] = solution.residual

        # ── Cycle closure ─────────────────────────────────────────────────
        phases.append(machine.advance(float(crank_angles_deg[last])))
        constant_states.append(constant_states[0])
        variable_states.append(variable_states[0])
        gamma_residual[last] = gamma_residual[0]

        volume = np.array([s.volume for s in constant_states])
        pressure = np.array([s.pressure for s in constant_states])
        temperature = np.array([s.temperature for s in constant_states])
        pressure_var = np.array([s.pressure for s in variable_states])
        temperature_var = np.array([s.temperature for s in variable_states])
        gamma_var = np.array([s.gamma for s in variable_states])
        cv_var = np.array([s.cv for s in variable_states])

        # ── Summaries ─────────────────────────────────────────────────────
        swept_volume = self.cylinder.swept_volume
        constant_summary = summarize_cycle(
            temperature,
            pressure,
            volume,
            boundaries,
            self.constant_model.delta_internal_energy,
            swept_volume,
        )
        variable_summary = summarize_cycle(
            temperature_var,
            pressure_var,
            volume,
            boundaries,
            self.variable_model.delta_internal_energy,
            swept_volume,
        )

        # Hand out read-only views
        for arr in (
            crank_angles_deg,
            crank_angles_rad,
            displacement,
            velocity,
            acceleration,
            volume,
            pressure,
            temperature,
            pressure_var,
            temperature_var,
            gamma_var,
            cv_var,
            gamma_residual,
        ):
            arr.flags.writeable = False

        logger.info(
            "Simulated %d samples: efficiency %.4f (constant gamma), %.4f (variable gamma)",
            num_samples,
            constant_summary.thermal_efficiency,
            variable_summary.thermal_efficiency,
        )

        return CycleResults(
            crank_angles_deg=crank_angles_deg,
            crank_angles_rad=crank_angles_rad,
            displacement=displacement,
            velocity=velocity,
            acceleration=acceleration,
            volume=volume,
            pressure=pressure,
            temperature=temperature,
            pressure_variable=pressure_var,
            temperature_variable=temperature_var,
            gamma_variable=gamma_var,
            cv_variable=cv_var,
            gamma_residual=gamma_residual,
            clearance_volume=self.cylinder.clearance_volume,
            swept_volume=swept_volume,
            boundaries=boundaries,
            constant_summary=constant_summary,
            variable_summary=variable_summary,
            phases=phases,
        )

    # ── Performance metrics ───────────────────────────────────────────────

    def calculate_performance_metrics(self, results: CycleResults) -> Dict[str, float]:
        """Flatten the headline numbers of a run into one dictionary.

        Keys include efficiencies of both models, the air-standard Otto
        efficiency 1 − CR^(1−γ), and peak values.
        """
        cr = self.config.geometry.compression_ratio
        gamma = self.config.thermodynamics.gamma
        otto_efficiency = 1.0 - cr ** (1.0 - gamma)

        # Mean piston speed over one revolution  2·stroke·N/60
        stroke = self.config.geometry.stroke
        mean_piston_speed = 2.0 * stroke * self.config.operating.rpm / 60.0

        return {
            "thermal_efficiency_constant": results.constant_summary.thermal_efficiency,
            "thermal_efficiency_variable": results.variable_summary.thermal_efficiency,
            "otto_efficiency": otto_efficiency,
            "net_work_constant_kj_per_kg": results.constant_summary.net_work,
            "net_work_variable_kj_per_kg": results.variable_summary.net_work,
            "imep_constant_bar": results.constant_summary.imep / 1.0e5,
            "imep_variable_bar": results.variable_summary.imep / 1.0e5,
            "peak_pressure_constant_mpa": float(np.max(results.pressure)) / 1.0e6,
            "peak_pressure_variable_mpa": (
                float(np.max(results.pressure_variable)) / 1.0e6
            ),
            "clearance_volume_cm3": results.clearance_volume * 1.0e6,
            "swept_volume_cm3": results.swept_volume * 1.0e6,
            "mean_piston_speed_ms": mean_piston_speed,
            "max_piston_speed_ms": float(np.max(np.abs(results.velocity))),
            "max_piston_acceleration_ms2": float(np.max(np.abs(results.acceleration))),
        }


def simulate(config: EngineConfiguration) -> CycleResults:
    """Convenience wrapper: ``CycleSimulator(config).simulate()``."""
    return CycleSimulator(config).simulate()
