"""
Utilities Module
Data export and text reporting for cycle results.

Author: Mohith Sai Gorla
Date:   27-02-2026
"""

import csv
import json
import logging
from typing import Any, Dict, List, Optional

import numpy as np

from .cycle_simulator import CycleResults
from .engine_config import EngineConfiguration

logger = logging.getLogger(__name__)


class DataExporter:
    """
    Export simulation results to various formats.

    Supports: CSV (per-angle arrays), JSON (summaries and metrics)
    """

    @staticmethod
    def export_to_csv(
        results: CycleResults, filepath: str, variables: Optional[List[str]] = None
    ):
        """
        Export per-angle cycle results to a CSV file.

        Args:
            results: CycleResults of one simulation
            filepath: Output file path
            variables: Column names to export (None = all)
        """
        data_dict = {
            "crank_angle_deg": results.crank_angles_deg,
            "displacement_m": results.displacement,
            "velocity_ms": results.velocity,
            "acceleration_ms2": results.acceleration,
            "volume_m3": results.volume,
            "pressure_pa": results.pressure,
            "temperature_k": results.temperature,
            "pressure_variable_pa": results.pressure_variable,
            "temperature_variable_k": results.temperature_variable,
            "gamma_variable": results.gamma_variable,
            "cv_variable_kj_per_kg_k": results.cv_variable,
            "phase": [phase.value for phase in results.phases],
        }

        if variables:
            data_dict = {k: v for k, v in data_dict.items() if k in variables}

        if len(data_dict) == 0:
            raise ValueError("No data to export")

        num_rows = len(next(iter(data_dict.values())))

        with open(filepath, "w", newline="") as csvfile:
            writer = csv.writer(csvfile)
            writer.writerow(data_dict.keys())
            for i in range(num_rows):
                writer.writerow([data_dict[key][i] for key in data_dict.keys()])

        logger.info("Data exported to %s", filepath)

    @staticmethod
    def export_to_json(data: Dict[str, Any], filepath: str):
        """
        Export data dictionary to JSON file.

        Args:
            data: Dictionary of data to export
            filepath: Output file path
        """
        serializable_data = {}
        for key, value in data.items():
            if isinstance(value, np.ndarray):
                serializable_data[key] = value.tolist()
            elif isinstance(value, np.generic):
                serializable_data[key] = value.item()
            elif isinstance(value, (int, float, str, bool, list, dict, type(None))):
                serializable_data[key] = value
            else:
                serializable_data[key] = str(value)

        with open(filepath, "w") as f:
            json.dump(serializable_data, f, indent=2)

        logger.info("Data exported to %s", filepath)


def summaries_to_dict(results: CycleResults) -> Dict[str, Any]:
    """Both cycle summaries, keyed by model, ready for JSON export."""
    return {
        "constant_gamma": results.constant_summary.to_dict(),
        "variable_gamma": results.variable_summary.to_dict(),
    }


def create_cycle_report(results: CycleResults, config: EngineConfiguration) -> str:
    """
    Create formatted report string: input parameters and both summaries.

    Args:
        results: CycleResults of one simulation
        config: Configuration the results were produced from

    Returns:
        Formatted report string
    """
    geo = config.geometry
    thm = config.thermodynamics
    const = results.constant_summary
    var = results.variable_summary

    report = []
    report.append("=" * 60)
    report.append("ENGINE COMBUSTION CYCLE REPORT")
    report.append("=" * 60)
    report.append("")

    report.append("INPUT PARAMETERS:")
    report.append("-" * 60)
    report.append(f"  Stroke:                 {geo.stroke * 1000:.1f} mm")
    report.append(f"  Bore:                   {geo.bore * 1000:.1f} mm")
    report.append(f"  Connecting Rod:         {geo.connecting_rod_length * 1000:.1f} mm")
    report.append(f"  Compression Ratio:      {geo.compression_ratio:.2f}")
    report.append(f"  Engine Speed:           {config.operating.rpm:.0f} RPM")
    report.append(
        f"  Inlet State:            {thm.intake_pressure:.0f} Pa, "
        f"{thm.intake_temperature:.1f} K"
    )
    report.append(f"  Peak Temperature:       {thm.peak_temperature:.0f} K")
    report.append(
        f"  Constant Gamma / cv:    {thm.gamma:.3f} / {thm.cv:.3f} kJ/(kg·K)"
    )
    report.append("")

    report.append("VOLUMES:")
    report.append("-" * 60)
    report.append(f"  Clearance Volume:       {results.clearance_volume * 1e6:.2f} cm³")
    report.append(f"  Swept Volume:           {results.swept_volume * 1e6:.2f} cm³")
    report.append("")

    report.append(f"{'CYCLE SUMMARY':<26}{'CONSTANT γ':>16}{'VARIABLE γ':>16}")
    report.append("-" * 60)
    rows = [
        ("Heat Added [kJ/kg]", const.heat_added, var.heat_added),
        ("Heat Rejected [kJ/kg]", const.heat_rejected, var.heat_rejected),
        ("Compression Work [kJ/kg]", const.compression_work, var.compression_work),
        ("Expansion Work [kJ/kg]", const.expansion_work, var.expansion_work),
        ("Net Work [kJ/kg]", const.net_work, var.net_work),
    ]
    for label, a, b in rows:
        report.append(f"  {label:<24}{a:>16.2f}{b:>16.2f}")
    report.append(
        f"  {'Thermal Efficiency':<24}"
        f"{const.thermal_efficiency * 100:>15.2f}%{var.thermal_efficiency * 100:>15.2f}%"
    )
    report.append(
        f"  {'IMEP [bar]':<24}{const.imep / 1e5:>16.2f}{var.imep / 1e5:>16.2f}"
    )
    report.append(
        f"  {'Peak Pressure [MPa]':<24}"
        f"{float(np.max(results.pressure)) / 1e6:>16.2f}"
        f"{float(np.max(results.pressure_variable)) / 1e6:>16.2f}"
    )
    report.append("")

    report.append("=" * 60)

    return "\n".join(report)
