"""
Basic Cycle Simulation Example
Demonstrates simple usage of the simulation framework.

Author: Mohith Sai Gorla
Date: 27-02-2026
"""

import os

# Headless environment check for plot exports
if "DISPLAY" not in os.environ and os.name != "nt":
    import matplotlib

    matplotlib.use("Agg")
    print("Physical display not detected. Using 'Agg' backend for plot exports.")

from combustion_cycle.engine_config import (
    EngineConfiguration,
    GeometryParameters,
    ThermodynamicParameters,
    OperatingConditions,
    create_reference_engine,
)
from combustion_cycle.cycle_simulator import CycleSimulator
from combustion_cycle.visualization import CyclePlotter
from combustion_cycle.utilities import DataExporter, create_cycle_report


def example_1_reference_engine():
    """Example 1: Reference engine, both gamma models"""

    print("=" * 70)
    print("EXAMPLE 1: Reference Engine")
    print("=" * 70)
    print()

    config = create_reference_engine()
    simulator = CycleSimulator(config)
    results = simulator.simulate()

    print(create_cycle_report(results, config))

    exporter = DataExporter()
    exporter.export_to_csv(results, "reference_cycle.csv")
    print("Per-angle data saved to reference_cycle.csv")

    return results


def example_2_peak_temperature_sweep():
    """Example 2: Efficiency vs peak temperature"""

    print("=" * 70)
    print("EXAMPLE 2: Peak Temperature Sweep")
    print("=" * 70)
    print()

    base = create_reference_engine()
    print(f"{'T_peak (K)':>12}{'η const γ':>14}{'η var γ':>14}")
    for peak in (1500.0, 2000.0, 2500.0, 3000.0):
        results = CycleSimulator(base.with_overrides(peak_temperature=peak)).simulate()
        print(
            f"{peak:>12.0f}"
            f"{results.constant_summary.thermal_efficiency * 100:>13.2f}%"
            f"{results.variable_summary.thermal_efficiency * 100:>13.2f}%"
        )
    print()


def example_3_custom_engine():
    """Example 3: Custom geometry with plots"""

    print("=" * 70)
    print("EXAMPLE 3: Custom Engine")
    print("=" * 70)
    print()

    config = EngineConfiguration(
        geometry=GeometryParameters(
            bore=0.082,  # 82mm
            stroke=0.090,  # 90mm
            connecting_rod_length=0.150,  # 150mm
            compression_ratio=10.5,
        ),
        thermodynamics=ThermodynamicParameters(
            intake_pressure=101325.0,  # 1 atm
            intake_temperature=298.15,  # 25°C
            peak_temperature=2500.0,  # K
        ),
        operating=OperatingConditions(rpm=3000.0),
    )

    simulator = CycleSimulator(config)
    results = simulator.simulate()
    metrics = simulator.calculate_performance_metrics(results)

    print("\nPerformance Metrics:")
    print(f"  Efficiency (const γ): {metrics['thermal_efficiency_constant']*100:.2f}%")
    print(f"  Efficiency (var γ):   {metrics['thermal_efficiency_variable']*100:.2f}%")
    print(f"  Otto Efficiency:      {metrics['otto_efficiency']*100:.2f}%")
    print(f"  Peak Pressure:        {metrics['peak_pressure_constant_mpa']:.2f} MPa")
    print()

    plotter = CyclePlotter()
    plotter.plot_pv_diagram(results, save_path="custom_pv_diagram.png")
    plotter.plot_gamma_temperature(results, save_path="custom_gamma_temperature.png")


if __name__ == "__main__":
    example_1_reference_engine()
    example_2_peak_temperature_sweep()
    example_3_custom_engine()
