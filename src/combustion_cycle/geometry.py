"""
Cylinder Geometry Module
Maps piston displacement to instantaneous cylinder volume.

Author: Mohith Sai Gorla
Date:   27-02-2026

    V_max = (π/4)·D²·y(−π)          swept volume at the start of compression
    V_c   = V_max / (CR − 1)        clearance volume
    V(θ)  = V_c + (π/4)·D²·y(θ)

so that V(−π) / V_c = CR exactly.
"""

import math

from .engine_config import GeometryParameters
from .kinematics import SliderCrank


class CylinderGeometry:
    """Instantaneous cylinder volume for one slider-crank cylinder.

    Attributes
    ----------
    piston_area      : m²
    swept_volume     : m³   bore-swept volume between TDC and the start sample
    clearance_volume : m³   minimum (TDC) volume, always > 0
    """

    def __init__(self, geometry: GeometryParameters, slider_crank: SliderCrank) -> None:
        self.geometry = geometry
        self.slider_crank = slider_crank

        self.piston_area = geometry.piston_area
        self.swept_volume = self.piston_area * slider_crank.displacement(-math.pi)
        self.clearance_volume = self.swept_volume / (geometry.compression_ratio - 1.0)

    @property
    def total_volume(self) -> float:
        """Cylinder volume at the start of compression  V_c + V_max  [m³]."""
        return self.clearance_volume + self.swept_volume

    def volume_from_displacement(self, displacement: float) -> float:
        """Volume for a given piston displacement from TDC  [m³].

        Raises
        ------
        ValueError
            If displacement < 0 (piston cannot travel above TDC).
        """
        if displacement < 0.0:
            raise ValueError(f"displacement must be ≥ 0 m, got {displacement}")
        return self.clearance_volume + self.piston_area * displacement

    def volume_at_angle(self, theta: float) -> float:
        """Volume at crank angle θ  [m³]."""
        return self.volume_from_displacement(self.slider_crank.displacement(theta))

    def tdc_volume(self) -> float:
        """Volume at top dead center, pinned to the clearance volume."""
        return self.clearance_volume
