"""
Smoke Tests for Visualization Module
Figures are rendered with the non-interactive Agg backend.

Author: Mohith Sai Gorla
Date:   27-02-2026
"""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from combustion_cycle.cycle_simulator import CycleSimulator
from combustion_cycle.engine_config import create_reference_engine
from combustion_cycle.visualization import CyclePlotter


@pytest.fixture(scope="module")
def results():
    return CycleSimulator(create_reference_engine()).simulate()


class TestCyclePlotter:

    def setup_method(self):
        self.plotter = CyclePlotter()

    @pytest.mark.parametrize(
        "method",
        [
            "plot_kinematics",
            "plot_pv_diagram",
            "plot_pressure_angle",
            "plot_gamma_temperature",
            "plot_comprehensive_analysis",
        ],
    )
    def test_plot_saves_file(self, results, tmp_path, method):
        path = tmp_path / f"{method}.png"
        fig = getattr(self.plotter, method)(results, save_path=str(path), show=False)
        assert path.exists()
        assert path.stat().st_size > 0
        assert not plt.fignum_exists(fig.number)

    def test_pv_diagram_has_both_models(self, results):
        fig = self.plotter.plot_pv_diagram(results, show=False)
        labels = [line.get_label() for line in fig.axes[0].get_lines()]
        assert "Constant γ" in labels
        assert "Variable γ" in labels

    def test_gamma_temperature_segments(self, results):
        fig = self.plotter.plot_gamma_temperature(results, show=False)
        labels = [line.get_label() for line in fig.axes[0].get_lines()]
        assert labels == ["Compression", "Combustion", "Expansion"]

    def test_kinematics_has_three_panels(self, results):
        fig = self.plotter.plot_kinematics(results, show=False)
        assert len(fig.axes) == 3


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
