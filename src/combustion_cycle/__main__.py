"""
CLI entry point for combustion_cycle.
"""
import argparse
import logging
import os
import sys

from .cycle_simulator import CycleSimulator
from .engine_config import EngineConfiguration, create_reference_engine
from .utilities import DataExporter, create_cycle_report, summaries_to_dict


def build_config(args):
    if args.config:
        config = EngineConfiguration.from_json(args.config)
    else:
        config = create_reference_engine()

    overrides = {
        "rpm": args.rpm,
        "peak_temperature": args.peak_temperature,
        "compression_ratio": args.compression_ratio,
        "gamma_iterations": args.iterations,
        "gamma_tolerance": args.tolerance,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        config = config.with_overrides(**overrides)
    return config


def run(args):
    try:
        config = build_config(args)
    except (KeyError, TypeError, ValueError, OSError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    simulator = CycleSimulator(config)
    results = simulator.simulate()

    print(create_cycle_report(results, config))

    exporter = DataExporter()
    if args.csv:
        exporter.export_to_csv(results, args.csv)
    if args.json:
        summary = summaries_to_dict(results)
        summary["metrics"] = simulator.calculate_performance_metrics(results)
        summary["configuration"] = config.to_dict()
        exporter.export_to_json(summary, args.json)

    if args.plot_dir:
        # Deferred so runs without plots never touch the matplotlib backend
        from .visualization import CyclePlotter

        os.makedirs(args.plot_dir, exist_ok=True)
        plotter = CyclePlotter()
        plotter.plot_kinematics(
            results, os.path.join(args.plot_dir, "kinematics.png"), show=False
        )
        plotter.plot_pv_diagram(
            results, os.path.join(args.plot_dir, "pv_diagram.png"), show=False
        )
        plotter.plot_pressure_angle(
            results, os.path.join(args.plot_dir, "pressure_angle.png"), show=False
        )
        plotter.plot_gamma_temperature(
            results, os.path.join(args.plot_dir, "gamma_temperature.png"), show=False
        )

    return results


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Single-cylinder engine combustion cycle simulator"
    )
    parser.add_argument(
        "--config", help="JSON configuration file (default: reference engine)"
    )
    parser.add_argument("--rpm", type=float, help="Engine speed in RPM")
    parser.add_argument(
        "--peak-temperature", type=float, help="Peak cycle temperature in K"
    )
    parser.add_argument("--compression-ratio", type=float, help="Compression ratio")
    parser.add_argument(
        "--iterations", type=int, help="Variable-gamma iteration budget"
    )
    parser.add_argument(
        "--tolerance", type=float, help="Variable-gamma convergence tolerance"
    )
    parser.add_argument("--csv", help="Write per-angle results to this CSV file")
    parser.add_argument("--json", help="Write summaries and metrics to this JSON file")
    parser.add_argument("--plot-dir", help="Save plots as PNG files in this directory")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run(args)


if __name__ == "__main__":
    main()
