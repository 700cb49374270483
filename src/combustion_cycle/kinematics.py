"""
Kinematics Module
Calculates piston motion for the slider-crank mechanism.

Author: Mohith Sai Gorla
Date:   27-02-2026

Mathematical Basis
------------------
Slider-crank notation
    r  = crank radius = stroke / 2              [m]
    l  = connecting rod length                  [m]
    λ  = r / l                                  [-]
    θ  = crank angle from TDC                   [rad]
    ω  = dθ/dt  (angular velocity)              [rad/s]

Relations (second-order expansion in λ)
    y(θ)  = l·λ²·sin²(θ/2) + r(1 − cos θ)
    v(θ)  = r ω (sin θ + λ sin 2θ / 2)
    a(θ)  = r ω² (cos θ + λ cos 2θ)

The acceleration is the exact θ-derivative of the velocity (times ω), so the
pair is self-consistent.  All three are defined for every real θ.

References
----------
Heywood, J.B. (1988). Internal Combustion Engine Fundamentals, §2.2.
"""

import math
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class CrankSample:
    """Piston kinematics at one crank angle.

    Attributes
    ----------
    angle        : rad   (TDC = 0)
    displacement : m     from TDC
    velocity     : m/s   positive = moving away from TDC
    acceleration : m/s²
    """

    angle: float
    displacement: float
    velocity: float
    acceleration: float


class SliderCrank:
    """Slider-crank mechanism kinematics.

    Attributes
    ----------
    r            : float  Crank radius (= stroke / 2)  [m]
    l            : float  Connecting rod length         [m]
    lambda_ratio : float  λ = r / l                     [dimensionless]
    """

    def __init__(self, crank_radius: float, connecting_rod_length: float) -> None:
        """
        Parameters
        ----------
        crank_radius           : float  r = stroke / 2  [m]  (must be > 0)
        connecting_rod_length  : float  l               [m]  (must be > r)

        Raises
        ------
        ValueError
            If crank_radius ≤ 0, connecting_rod_length ≤ 0,
            or connecting_rod_length ≤ crank_radius (mechanism would lock up).
        """
        if crank_radius <= 0.0:
            raise ValueError(f"crank_radius must be > 0 m, got {crank_radius}")
        if connecting_rod_length <= 0.0:
            raise ValueError(
                f"connecting_rod_length must be > 0 m, got {connecting_rod_length}"
            )
        if connecting_rod_length <= crank_radius:
            raise ValueError(
                f"connecting_rod_length ({connecting_rod_length} m) must be > "
                f"crank_radius ({crank_radius} m); otherwise mechanism locks up."
            )

        self.r = crank_radius
        self.l = connecting_rod_length
        self.lambda_ratio = crank_radius / connecting_rod_length  # λ = r/l

    # ── Public kinematics ─────────────────────────────────────────────────

    def displacement(self, theta: float) -> float:
        """Piston displacement from TDC  y(θ)  [m].

            y(θ) = l·λ²·sin²(θ/2) + r(1 − cos θ)

        y(0) = 0 and y is even in θ, so y(−π) = y(π) = 2r + r²/l.
        """
        return (
            self.l * self.lambda_ratio**2 * math.sin(theta / 2.0) ** 2
            + self.r * (1.0 - math.cos(theta))
        )

    def velocity(self, theta: float, omega: float) -> float:
        """Piston velocity  v(θ, ω) = r ω (sin θ + λ sin 2θ / 2)  [m/s]."""
        return (
            self.r
            * omega
            * (math.sin(theta) + self.lambda_ratio * math.sin(2.0 * theta) / 2.0)
        )

    def acceleration(self, theta: float, omega: float) -> float:
        """Piston acceleration  a(θ, ω) = r ω² (cos θ + λ cos 2θ)  [m/s²]."""
        return (
            self.r
            * omega**2
            * (math.cos(theta) + self.lambda_ratio * math.cos(2.0 * theta))
        )

    def kinematics_at_angle(
        self, theta: float, omega: float
    ) -> Tuple[float, float, float]:
        """Displacement, velocity, and acceleration at a given crank angle.

        Returns
        -------
        Tuple[float, float, float]
            (displacement [m], velocity [m/s], acceleration [m/s²])
        """
        y = self.displacement(theta)
        v = self.velocity(theta, omega)
        a = self.acceleration(theta, omega)
        return y, v, a

    def sample(self, theta: float, omega: float) -> CrankSample:
        """Evaluate the mechanism at θ and package the result."""
        y, v, a = self.kinematics_at_angle(theta, omega)
        return CrankSample(angle=theta, displacement=y, velocity=v, acceleration=a)

    @property
    def max_displacement(self) -> float:
        """Displacement at BDC  y(π) = 2r + r²/l  [m]."""
        return self.displacement(math.pi)
