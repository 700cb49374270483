"""
Tests for the command-line entry point.

Author: Mohith Sai Gorla
Date:   27-02-2026
"""

import json

import matplotlib

matplotlib.use("Agg")

import pytest

from combustion_cycle.__main__ import main
from combustion_cycle.engine_config import create_reference_engine


class TestCommandLine:

    def test_default_run_prints_report(self, capsys):
        main([])
        out = capsys.readouterr().out
        assert "ENGINE COMBUSTION CYCLE REPORT" in out
        assert "Compression Ratio:      9.00" in out

    def test_overrides(self, capsys):
        main(["--rpm", "3000", "--compression-ratio", "10", "--peak-temperature", "2500"])
        out = capsys.readouterr().out
        assert "3000 RPM" in out
        assert "Compression Ratio:      10.00" in out
        assert "Peak Temperature:       2500 K" in out

    def test_exports(self, tmp_path, capsys):
        csv_path = tmp_path / "cycle.csv"
        json_path = tmp_path / "summary.json"
        main(["--csv", str(csv_path), "--json", str(json_path)])
        assert csv_path.exists()
        data = json.loads(json_path.read_text())
        assert {"constant_gamma", "variable_gamma", "metrics", "configuration"} <= set(
            data
        )
        assert data["configuration"]["geometry"]["compression_ratio"] == 9.0

    def test_config_file(self, tmp_path, capsys):
        path = tmp_path / "engine.json"
        create_reference_engine().with_overrides(rpm=2000.0).to_json(str(path))
        main(["--config", str(path)])
        assert "2000 RPM" in capsys.readouterr().out

    def test_plot_dir(self, tmp_path, capsys):
        plot_dir = tmp_path / "plots"
        main(["--plot-dir", str(plot_dir)])
        assert (plot_dir / "pv_diagram.png").exists()
        assert (plot_dir / "gamma_temperature.png").exists()

    def test_invalid_config_exits_1(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--peak-temperature", "100"])
        assert exc.value.code == 1
        assert "invalid configuration" in capsys.readouterr().err

    def test_missing_config_file_exits_1(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--config", str(tmp_path / "missing.json")])
        assert exc.value.code == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
