"""
Thermodynamics Module
Stepwise in-cylinder state advance for constant and variable heat-capacity ratio.

Author: Mohith Sai Gorla
Date:   27-02-2026

Mathematical Basis
------------------
Isentropic step between consecutive volumes (ideal gas):
    p_i = p_{i-1} · (V_{i-1}/V_i)^γ
    T_i = T_{i-1} · (V_{i-1}/V_i)^(γ - 1)

Constant-volume heat addition at TDC (ideal gas, V fixed):
    T_i = T_peak
    p_i = p_{i-1} · T_i / T_{i-1}

Variable specific heat (per unit mass, kJ/(kg·K)):
    cv(T) = a0 + a1·T
    u(T)  = a0·T + (a1/2)·T²
    cv̄(T1, T2) = [u(T2) − u(T1)] / (T2 − T1) = a0 + (a1/2)·(T1 + T2)
    γ = (cv + R) / cv

Because γ used to predict T_i depends on T_i itself, the variable-gamma step is
resolved by fixed-point iteration on γ (VariableGammaSolver).
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
from scipy.integrate import trapezoid

logger = logging.getLogger(__name__)


# ── Exceptions ───────────────────────────────────────────────────────────────


class DegenerateStepError(ArithmeticError):
    """Consecutive volumes are equal where an isentropic step is required.

    The secant-averaged specific heat is undefined over a zero-width
    temperature interval, so such a step signals an inconsistent geometry.
    """


class ConvergenceError(RuntimeError):
    """The variable-gamma iteration did not meet its tolerance."""


# ── Data classes ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ThermodynamicState:
    """Immutable in-cylinder state at one crank-angle sample.

    Attributes
    ----------
    volume      : m³  (must be > 0)
    pressure    : Pa  (must be > 0)
    temperature : K   (must be > 0)
    """

    volume: float
    pressure: float
    temperature: float

    def __post_init__(self) -> None:
        if self.volume <= 0.0:
            raise ValueError(f"Volume must be > 0 m³, got {self.volume}")
        if self.pressure <= 0.0:
            raise ValueError(f"Pressure must be > 0 Pa, got {self.pressure}")
        if self.temperature <= 0.0:
            raise ValueError(f"Temperature must be > 0 K, got {self.temperature}")


@dataclass(frozen=True)
class VariableGammaState(ThermodynamicState):
    """State of the variable-gamma model, with the γ and cv used to reach it.

    Attributes
    ----------
    gamma : dimensionless  (must be > 1)
    cv    : kJ/(kg·K)      (must be > 0)
    """

    gamma: float
    cv: float

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.gamma <= 1.0:
            raise ValueError(f"Gamma must be > 1, got {self.gamma}")
        if self.cv <= 0.0:
            raise ValueError(f"cv must be > 0, got {self.cv}")


@dataclass(frozen=True)
class GammaSolution:
    """Outcome of one variable-gamma fixed-point solve.

    Attributes
    ----------
    temperature : K          proposed temperature from the last iteration
    cv          : kJ/(kg·K)  secant-mean cv over [T_prev, temperature]
    gamma       : -          final γ estimate
    iterations  : int        iterations actually performed
    residual    : -          |γ_{k-1} − γ_k| / γ_k of the last iteration
    converged   : bool       False only when a tolerance was set and not met
    """

    temperature: float
    cv: float
    gamma: float
    iterations: int
    residual: float
    converged: bool


# ── Helpers ──────────────────────────────────────────────────────────────────


def _volume_ratio(volume_prev: float, volume_cur: float) -> float:
    """Return V_prev / V_cur for an isentropic step.

    Raises
    ------
    ValueError
        If either volume is ≤ 0.
    DegenerateStepError
        If the two volumes are equal.
    """
    if volume_prev <= 0.0 or volume_cur <= 0.0:
        raise ValueError(
            f"Volumes must be > 0 m³, got {volume_prev} and {volume_cur}"
        )
    if volume_cur == volume_prev:
        raise DegenerateStepError(
            f"Consecutive volumes are equal ({volume_cur} m³); "
            "isentropic step is undefined"
        )
    return volume_prev / volume_cur


# ── Working fluid ────────────────────────────────────────────────────────────


class WorkingFluid:
    """Working fluid with a specific heat linear in temperature.

        cv(T) = a0 + a1·T    [kJ/(kg·K)]

    The default coefficients (a0 = 0.71, a1 = 1.9e-4) give γ ≈ 1.37 at 300 K
    falling to ≈ 1.23 at 3000 K.
    """

    def __init__(
        self,
        gas_constant: float = 0.287,
        cv_a0: float = 0.71,
        cv_a1: float = 1.9e-4,
    ) -> None:
        """
        Parameters
        ----------
        gas_constant : float  Specific gas constant R  [kJ/(kg·K)]
        cv_a0        : float  Constant term  [kJ/(kg·K)]
        cv_a1        : float  Linear coefficient  [kJ/(kg·K²)]

        Raises
        ------
        ValueError
            If gas_constant ≤ 0 or cv_a0 ≤ 0.
        """
        if gas_constant <= 0.0:
            raise ValueError(f"gas_constant must be > 0, got {gas_constant}")
        if cv_a0 <= 0.0:
            raise ValueError(f"cv_a0 must be > 0, got {cv_a0}")

        self.R = gas_constant
        self.cv_a0 = cv_a0
        self.cv_a1 = cv_a1

    def cv(self, temperature: float) -> float:
        """Specific heat at constant volume  cv(T)  [kJ/(kg·K)]."""
        if temperature <= 0.0:
            raise ValueError(f"Temperature must be > 0 K, got {temperature}")
        return self.cv_a0 + self.cv_a1 * temperature

    def mean_cv(self, temperature_1: float, temperature_2: float) -> float:
        """Secant-average cv over [T1, T2]  [kJ/(kg·K)].

        Equal to [u(T2) − u(T1)] / (T2 − T1) but written without the division,
        so it is also defined for T1 == T2 (where it reduces to cv(T1)).
        """
        if temperature_1 <= 0.0 or temperature_2 <= 0.0:
            raise ValueError(
                f"Temperatures must be > 0 K, got {temperature_1} and {temperature_2}"
            )
        return self.cv_a0 + 0.5 * self.cv_a1 * (temperature_1 + temperature_2)

    def gamma_from_cv(self, cv: float) -> float:
        """γ = (cv + R) / cv."""
        if cv <= 0.0:
            raise ValueError(f"cv must be > 0, got {cv}")
        return (cv + self.R) / cv

    def gamma(self, temperature: float) -> float:
        """Local heat capacity ratio  γ(T)."""
        return self.gamma_from_cv(self.cv(temperature))

    def specific_internal_energy(self, temperature: float) -> float:
        """u(T) = a0·T + (a1/2)·T²  [kJ/kg]."""
        if temperature <= 0.0:
            raise ValueError(f"Temperature must be > 0 K, got {temperature}")
        return self.cv_a0 * temperature + 0.5 * self.cv_a1 * temperature**2

    def delta_internal_energy(
        self, temperature_1: float, temperature_2: float
    ) -> float:
        """Δu = u(T2) − u(T1) = cv̄(T1, T2)·(T2 − T1)  [kJ/kg]."""
        return self.mean_cv(temperature_1, temperature_2) * (
            temperature_2 - temperature_1
        )


# ── Constant gamma ───────────────────────────────────────────────────────────


class ConstantGammaModel:
    """Calorically-perfect ideal gas: fixed γ and cv."""

    def __init__(self, gamma: float, cv: float) -> None:
        if gamma <= 1.0:
            raise ValueError(f"gamma must be > 1, got {gamma}")
        if cv <= 0.0:
            raise ValueError(f"cv must be > 0, got {cv}")
        self.gamma = gamma
        self.cv = cv

    def isentropic_step(
        self, state: ThermodynamicState, volume: float
    ) -> ThermodynamicState:
        """Advance state to a new volume along the isentrope p·V^γ = const."""
        ratio = _volume_ratio(state.volume, volume)
        return ThermodynamicState(
            volume=volume,
            pressure=state.pressure * ratio**self.gamma,
            temperature=state.temperature * ratio ** (self.gamma - 1.0),
        )

    def heat_to_peak(
        self, state: ThermodynamicState, peak_temperature: float, volume: float
    ) -> ThermodynamicState:
        """Instantaneous heat release at TDC: T jumps to the peak value and p
        scales with T (isochoric ideal-gas response)."""
        return ThermodynamicState(
            volume=volume,
            pressure=state.pressure * peak_temperature / state.temperature,
            temperature=peak_temperature,
        )

    def delta_internal_energy(
        self, temperature_1: float, temperature_2: float
    ) -> float:
        """Δu = cv·(T2 − T1)  [kJ/kg]."""
        return self.cv * (temperature_2 - temperature_1)


# ── Variable gamma ───────────────────────────────────────────────────────────


class VariableGammaSolver:
    """Fixed-point iteration for a temperature-consistent γ.

    Each iteration:

        T'    = T_prev · (V_prev/V_cur)^(γ_est − 1)
        cv'   = cv̄(T_prev, T')
        γ_est = (cv' + R) / cv'

    With ``tolerance=None`` exactly ``iterations`` passes are made (the
    default).  With a tolerance the loop exits once the relative change in γ
    drops below it, and raises ConvergenceError if the budget runs out first.
    """

    DEFAULT_ITERATIONS: int = 20

    def __init__(
        self,
        fluid: WorkingFluid,
        iterations: int = DEFAULT_ITERATIONS,
        tolerance: Optional[float] = None,
    ) -> None:
        if iterations < 1:
            raise ValueError(f"iterations must be ≥ 1, got {iterations}")
        if tolerance is not None and tolerance <= 0.0:
            raise ValueError(f"tolerance must be > 0 when set, got {tolerance}")
        self.fluid = fluid
        self.iterations = iterations
        self.tolerance = tolerance

    def solve(
        self,
        temperature_prev: float,
        volume_prev: float,
        volume_cur: float,
        gamma_seed: float,
    ) -> GammaSolution:
        """Solve for the temperature, cv and γ at volume_cur.

        Parameters
        ----------
        temperature_prev : float  Converged temperature at the previous sample  [K]
        volume_prev      : float  Previous volume  [m³]
        volume_cur       : float  Current volume  [m³]
        gamma_seed       : float  Initial γ estimate (previous sample's γ)

        Raises
        ------
        ValueError
            If temperature_prev ≤ 0, gamma_seed ≤ 1 or a volume ≤ 0.
        DegenerateStepError
            If volume_prev == volume_cur.
        ConvergenceError
            If a tolerance is set and is not reached within the budget.
        """
        if temperature_prev <= 0.0:
            raise ValueError(f"temperature_prev must be > 0 K, got {temperature_prev}")
        if gamma_seed <= 1.0:
            raise ValueError(f"gamma_seed must be > 1, got {gamma_seed}")
        ratio = _volume_ratio(volume_prev, volume_cur)

        gamma_est = gamma_seed
        temperature = temperature_prev
        cv = self.fluid.cv(temperature_prev)
        residual = math.inf
        iteration = 0

        while iteration < self.iterations:
            iteration += 1
            temperature = temperature_prev * ratio ** (gamma_est - 1.0)
            cv = self.fluid.mean_cv(temperature_prev, temperature)
            gamma_new = self.fluid.gamma_from_cv(cv)
            residual = abs(gamma_est - gamma_new) / gamma_new
            gamma_est = gamma_new
            if self.tolerance is not None and residual < self.tolerance:
                break

        converged = self.tolerance is None or residual < self.tolerance
        if not converged:
            raise ConvergenceError(
                f"Variable-gamma iteration did not converge after {iteration} "
                f"iterations (residual {residual:.3e} ≥ tolerance {self.tolerance:.3e}; "
                f"T_prev={temperature_prev:.2f} K, V_ratio={ratio:.6f})"
            )

        logger.debug(
            "gamma solve: T %.2f -> %.2f K, gamma=%.6f, residual=%.2e after %d iterations",
            temperature_prev,
            temperature,
            gamma_est,
            residual,
            iteration,
        )
        return GammaSolution(
            temperature=temperature,
            cv=cv,
            gamma=gamma_est,
            iterations=iteration,
            residual=residual,
            converged=converged,
        )


class VariableGammaModel:
    """Ideal gas with temperature-dependent cv and γ."""

    def __init__(self, fluid: WorkingFluid, solver: VariableGammaSolver) -> None:
        self.fluid = fluid
        self.solver = solver

    def isentropic_step(
        self, state: VariableGammaState, volume: float
    ) -> Tuple[VariableGammaState, GammaSolution]:
        """Advance to a new volume using the locally converged γ.

        The pressure uses the sample's own converged γ:
            p_i = p_{i-1} · (V_{i-1}/V_i)^γ_i
        """
        solution = self.solver.solve(
            temperature_prev=state.temperature,
            volume_prev=state.volume,
            volume_cur=volume,
            gamma_seed=state.gamma,
        )
        new_state = VariableGammaState(
            volume=volume,
            pressure=state.pressure * (state.volume / volume) ** solution.gamma,
            temperature=solution.temperature,
            gamma=solution.gamma,
            cv=solution.cv,
        )
        return new_state, solution

    def heat_to_peak(
        self, state: VariableGammaState, peak_temperature: float, volume: float
    ) -> VariableGammaState:
        """TDC heat release with cv averaged between the prior and peak
        temperature."""
        cv = self.fluid.mean_cv(state.temperature, peak_temperature)
        return VariableGammaState(
            volume=volume,
            pressure=state.pressure * peak_temperature / state.temperature,
            temperature=peak_temperature,
            gamma=self.fluid.gamma_from_cv(cv),
            cv=cv,
        )

    def delta_internal_energy(
        self, temperature_1: float, temperature_2: float
    ) -> float:
        """Δu = cv̄(T1, T2)·(T2 − T1)  [kJ/kg]."""
        return self.fluid.delta_internal_energy(temperature_1, temperature_2)


# ── Work ─────────────────────────────────────────────────────────────────────


def calculate_work_pdv(pressure_array: np.ndarray, volume_array: np.ndarray) -> float:
    """Net indicated work from the P-V trace  W = ∮ P dV  [J].

    Uses the scipy trapezoidal rule over the ordered trace.

    Raises
    ------
    ValueError
        If arrays have different lengths or fewer than 2 elements.
    """
    if len(pressure_array) != len(volume_array):
        raise ValueError(
            f"pressure_array and volume_array must have the same length, "
            f"got {len(pressure_array)} and {len(volume_array)}"
        )
    if len(pressure_array) < 2:
        raise ValueError("Arrays must have at least 2 elements for integration")

    return float(trapezoid(pressure_array, volume_array))
