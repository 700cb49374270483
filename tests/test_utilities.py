"""
Unit Tests for Export and Reporting Utilities

Author: Mohith Sai Gorla
Date:   27-02-2026
"""

import csv
import json

import numpy as np
import pytest

from combustion_cycle.cycle_simulator import CycleSimulator
from combustion_cycle.engine_config import create_reference_engine
from combustion_cycle.utilities import (
    DataExporter,
    create_cycle_report,
    summaries_to_dict,
)


@pytest.fixture(scope="module")
def reference_run():
    config = create_reference_engine()
    simulator = CycleSimulator(config)
    return config, simulator, simulator.simulate()


class TestDataExporter:

    def test_csv_has_row_per_sample(self, reference_run, tmp_path):
        _, _, results = reference_run
        path = tmp_path / "cycle.csv"
        DataExporter.export_to_csv(results, str(path))

        with open(path, newline="") as f:
            rows = list(csv.DictReader(f))

        assert len(rows) == results.num_samples
        assert float(rows[0]["crank_angle_deg"]) == -180.0
        assert float(rows[180]["temperature_k"]) == 3000.0
        assert rows[180]["phase"] == "top_dead_center"
        assert float(rows[-1]["pressure_pa"]) == pytest.approx(101_325.0)

    def test_csv_column_selection(self, reference_run, tmp_path):
        _, _, results = reference_run
        path = tmp_path / "pv.csv"
        DataExporter.export_to_csv(
            results, str(path), variables=["volume_m3", "pressure_pa"]
        )
        with open(path, newline="") as f:
            header = next(csv.reader(f))
        assert header == ["volume_m3", "pressure_pa"]

    def test_csv_unknown_columns_raise(self, reference_run, tmp_path):
        _, _, results = reference_run
        with pytest.raises(ValueError):
            DataExporter.export_to_csv(
                results, str(tmp_path / "x.csv"), variables=["torque"]
            )

    def test_json_converts_numpy(self, tmp_path):
        path = tmp_path / "data.json"
        DataExporter.export_to_json(
            {
                "array": np.array([1.0, 2.0]),
                "scalar": np.float64(0.5),
                "name": "reference",
                "nested": {"a": 1},
            },
            str(path),
        )
        data = json.loads(path.read_text())
        assert data["array"] == [1.0, 2.0]
        assert data["scalar"] == 0.5
        assert data["name"] == "reference"
        assert data["nested"] == {"a": 1}

    def test_json_summaries(self, reference_run, tmp_path):
        _, _, results = reference_run
        path = tmp_path / "summary.json"
        DataExporter.export_to_json(summaries_to_dict(results), str(path))
        data = json.loads(path.read_text())
        assert data["constant_gamma"]["thermal_efficiency"] == pytest.approx(
            results.constant_summary.thermal_efficiency
        )
        assert set(data) == {"constant_gamma", "variable_gamma"}


class TestCycleReport:

    def test_report_contents(self, reference_run):
        config, _, results = reference_run
        report = create_cycle_report(results, config)
        assert "ENGINE COMBUSTION CYCLE REPORT" in report
        assert "Compression Ratio:      9.00" in report
        assert "1000 RPM" in report
        assert "Thermal Efficiency" in report
        assert f"{results.constant_summary.net_work:.2f}" in report
        assert f"{results.variable_summary.heat_added:.2f}" in report


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
