"""
Cycle Summary Module
Heat, work and efficiency of one simulated cycle.

Author: Mohith Sai Gorla
Date:   27-02-2026

Both thermodynamic models share one set of phase-boundary samples:

    start_of_compression  (−180°)
    end_of_compression    (last sample before TDC)
    top_dead_center       (0°, after heat release)
    end_of_expansion      (last sample before closure)
    closure               (+180°, copy of the inlet state)

Every quantity is a finite internal-energy difference per unit mass [kJ/kg].
"""

import warnings
from dataclasses import dataclass, asdict
from typing import Callable, Dict

import numpy as np

from .thermodynamics import calculate_work_pdv

# Heat input below this magnitude [kJ/kg] leaves efficiency undefined.
_HEAT_ADDED_EPSILON: float = 1.0e-9


@dataclass(frozen=True)
class PhaseBoundaries:
    """Sample indices delimiting the cycle phases."""

    start_of_compression: int
    end_of_compression: int
    top_dead_center: int
    end_of_expansion: int
    closure: int

    @classmethod
    def for_samples(cls, num_samples: int) -> "PhaseBoundaries":
        """Boundaries for a symmetric −180° … +180° grid of num_samples points.

        Raises
        ------
        ValueError
            If num_samples is even or smaller than 3.
        """
        if num_samples < 3 or num_samples % 2 == 0:
            raise ValueError(
                f"num_samples must be odd and ≥ 3 (TDC at the centre), got {num_samples}"
            )
        tdc = num_samples // 2
        last = num_samples - 1
        return cls(
            start_of_compression=0,
            end_of_compression=tdc - 1,
            top_dead_center=tdc,
            end_of_expansion=last - 1,
            closure=last,
        )


@dataclass(frozen=True)
class CycleSummary:
    """Aggregate energy balance for one thermodynamic model.

    Attributes
    ----------
    heat_added         : kJ/kg  Q_in at TDC
    heat_rejected      : kJ/kg  Q_out from end of expansion back to inlet state
    compression_work   : kJ/kg
    expansion_work     : kJ/kg
    net_work           : kJ/kg  expansion − compression
    thermal_efficiency : -      net_work / heat_added (0.0 when undefined)
    indicated_work     : J      ∮ p dV over the sampled trace
    imep               : Pa     indicated_work / swept volume
    """

    heat_added: float
    heat_rejected: float
    compression_work: float
    expansion_work: float
    net_work: float
    thermal_efficiency: float
    indicated_work: float = 0.0
    imep: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def summarize_cycle(
    temperature: np.ndarray,
    pressure: np.ndarray,
    volume: np.ndarray,
    boundaries: PhaseBoundaries,
    delta_internal_energy: Callable[[float, float], float],
    swept_volume: float,
) -> CycleSummary:
    """Build a CycleSummary from one model's per-angle arrays.

    Parameters
    ----------
    temperature, pressure, volume : per-sample arrays of one model
    boundaries            : phase boundary indices (shared by both models)
    delta_internal_energy : Δu(T1, T2) of the model  [kJ/kg]
    swept_volume          : m³, divisor for IMEP
    """
    t_soc = float(temperature[boundaries.start_of_compression])
    t_eoc = float(temperature[boundaries.end_of_compression])
    t_tdc = float(temperature[boundaries.top_dead_center])
    t_eoe = float(temperature[boundaries.end_of_expansion])
    t_closure = float(temperature[boundaries.closure])

    heat_added = delta_internal_energy(t_eoc, t_tdc)
    heat_rejected = delta_internal_energy(t_closure, t_eoe)
    compression_work = delta_internal_energy(t_soc, t_eoc)
    expansion_work = delta_internal_energy(t_eoe, t_tdc)
    net_work = expansion_work - compression_work

    if heat_added > _HEAT_ADDED_EPSILON:
        thermal_efficiency = net_work / heat_added
    else:
        warnings.warn(
            f"Heat added ({heat_added:.3e} kJ/kg) is not positive; "
            "thermal efficiency reported as 0.0",
            RuntimeWarning,
            stacklevel=2,
        )
        thermal_efficiency = 0.0

    indicated_work = calculate_work_pdv(pressure, volume)

    return CycleSummary(
        heat_added=heat_added,
        heat_rejected=heat_rejected,
        compression_work=compression_work,
        expansion_work=expansion_work,
        net_work=net_work,
        thermal_efficiency=thermal_efficiency,
        indicated_work=indicated_work,
        imep=indicated_work / swept_volume,
    )
