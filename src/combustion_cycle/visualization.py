"""
Visualization Module
Creates plots for engine cycle simulation results.

Author: Mohith Sai Gorla
Date: 27-02-2026
"""

import logging
from typing import Optional

import matplotlib.pyplot as plt
from matplotlib.gridspec import GridSpec

from .cycle_simulator import CycleResults

logger = logging.getLogger(__name__)


class CyclePlotter:
    """
    Creates publication-quality plots for cycle simulation results.

    Supports:
    - Piston displacement, velocity and acceleration vs crank angle
    - P-V diagrams for the constant- and variable-gamma models
    - Pressure vs crank angle for both models
    - Gamma vs temperature over compression, combustion and expansion
    """

    def __init__(self, style: str = "default"):
        """
        Initialize plotter with specified style.

        Args:
            style: Matplotlib style ('default', 'seaborn', 'ggplot')
        """
        if style != "default":
            try:
                plt.style.use(style)
            except OSError as e:
                logger.warning("Style '%s' not found, using default: %s", style, e)

        self.fig_size = (12, 8)
        self.dpi = 100

    def _finish(self, fig, save_path: Optional[str], show: bool, name: str):
        fig.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=300, bbox_inches="tight")
            logger.info("%s saved to %s", name, save_path)

        if show:
            plt.show()
        else:
            plt.close(fig)

    def plot_kinematics(
        self,
        results: CycleResults,
        save_path: Optional[str] = None,
        show: bool = True,
    ):
        """
        Plot piston displacement, velocity and acceleration vs crank angle.

        Args:
            results: Cycle simulation results
            save_path: Optional path to save figure
            show: Display the figure (closed instead when False)
        """
        fig = plt.figure(figsize=self.fig_size, dpi=self.dpi)
        gs = GridSpec(3, 1, figure=fig, hspace=0.4)

        panels = [
            (results.displacement * 1e3, "Displacement (mm)", "b-"),
            (results.velocity, "Velocity (m/s)", "g-"),
            (results.acceleration, "Acceleration (m/s²)", "r-"),
        ]
        for row, (data, label, style) in enumerate(panels):
            ax = fig.add_subplot(gs[row, 0])
            ax.plot(results.crank_angles_deg, data, style, linewidth=2)
            ax.axvline(0, color="k", linestyle="--", alpha=0.4)
            ax.set_ylabel(label, fontweight="bold")
            ax.grid(True, alpha=0.3)
            if row == len(panels) - 1:
                ax.set_xlabel("Crank Angle (deg)", fontweight="bold")

        fig.suptitle("Piston Kinematics", fontsize=14, fontweight="bold")

        self._finish(fig, save_path, show, "Kinematics plot")
        return fig

    def plot_pv_diagram(
        self,
        results: CycleResults,
        save_path: Optional[str] = None,
        show: bool = True,
    ):
        """
        Create P-V diagram comparing constant and variable gamma.

        Args:
            results: Cycle simulation results
            save_path: Optional path to save figure
            show: Display the figure (closed instead when False)
        """
        fig, ax = plt.subplots(figsize=(10, 8))

        # Convert to more convenient units
        volume_cm3 = results.volume * 1e6  # m³ to cm³

        ax.plot(
            volume_cm3,
            results.pressure / 1e5,
            "b-",
            linewidth=2,
            label="Constant γ",
        )
        ax.plot(
            volume_cm3,
            results.pressure_variable / 1e5,
            "r--",
            linewidth=2,
            label="Variable γ",
        )

        tdc_idx = results.boundaries.top_dead_center
        ax.plot(
            volume_cm3[tdc_idx],
            results.pressure[tdc_idx] / 1e5,
            "ko",
            markersize=8,
            label="TDC",
        )

        ax.set_xlabel("Volume (cm³)", fontsize=12, fontweight="bold")
        ax.set_ylabel("Pressure (bar)", fontsize=12, fontweight="bold")
        ax.set_title("P-V Diagram", fontsize=14, fontweight="bold")
        ax.grid(True, alpha=0.3)
        ax.legend(fontsize=10)

        ax.text(
            0.55,
            0.95,
            f"η (constant γ) = {results.constant_summary.thermal_efficiency:.3f}\n"
            f"η (variable γ) = {results.variable_summary.thermal_efficiency:.3f}",
            transform=ax.transAxes,
            fontsize=11,
            verticalalignment="top",
            bbox=dict(boxstyle="round", facecolor="wheat", alpha=0.5),
        )

        self._finish(fig, save_path, show, "P-V diagram")
        return fig

    def plot_pressure_angle(
        self,
        results: CycleResults,
        save_path: Optional[str] = None,
        show: bool = True,
    ):
        """
        Plot pressure vs crank angle for both models.

        Args:
            results: Cycle simulation results
            save_path: Optional path to save figure
            show: Display the figure (closed instead when False)
        """
        fig, ax = plt.subplots(figsize=(12, 6))

        ax.plot(
            results.crank_angles_deg,
            results.pressure / 1e5,
            "b-",
            linewidth=2,
            label="Constant γ",
        )
        ax.plot(
            results.crank_angles_deg,
            results.pressure_variable / 1e5,
            "r--",
            linewidth=2,
            label="Variable γ",
        )
        ax.axvline(0, color="k", linestyle="--", alpha=0.5, label="TDC")

        ax.set_xlabel("Crank Angle (degrees)", fontsize=12, fontweight="bold")
        ax.set_ylabel("Pressure (bar)", fontsize=12, fontweight="bold")
        ax.set_title("Cylinder Pressure vs Crank Angle", fontsize=14, fontweight="bold")
        ax.grid(True, alpha=0.3)
        ax.legend(fontsize=10)

        self._finish(fig, save_path, show, "Pressure-angle plot")
        return fig

    def plot_gamma_temperature(
        self,
        results: CycleResults,
        save_path: Optional[str] = None,
        show: bool = True,
    ):
        """
        Plot variable gamma against temperature, one segment per phase.

        The combustion segment joins the end of compression to TDC.

        Args:
            results: Cycle simulation results
            save_path: Optional path to save figure
            show: Display the figure (closed instead when False)
        """
        fig, ax = plt.subplots(figsize=(10, 7))

        b = results.boundaries
        temperature = results.temperature_variable
        gamma = results.gamma_variable

        segments = [
            (
                slice(b.start_of_compression, b.end_of_compression + 1),
                "b-",
                "Compression",
            ),
            (
                slice(b.end_of_compression, b.top_dead_center + 1),
                "r-",
                "Combustion",
            ),
            (
                slice(b.top_dead_center, b.end_of_expansion + 1),
                "g-",
                "Expansion",
            ),
        ]
        for window, style, label in segments:
            ax.plot(temperature[window], gamma[window], style, linewidth=2, label=label)

        ax.set_xlabel("Temperature (K)", fontsize=12, fontweight="bold")
        ax.set_ylabel("γ (-)", fontsize=12, fontweight="bold")
        ax.set_title("Heat Capacity Ratio vs Temperature", fontsize=14, fontweight="bold")
        ax.grid(True, alpha=0.3)
        ax.legend(fontsize=10)

        self._finish(fig, save_path, show, "Gamma-temperature plot")
        return fig

    def plot_comprehensive_analysis(
        self,
        results: CycleResults,
        save_path: Optional[str] = None,
        show: bool = True,
    ):
        """
        Create comprehensive 4-panel analysis plot.

        Args:
            results: Cycle simulation results
            save_path: Optional path to save figure
            show: Display the figure (closed instead when False)
        """
        fig = plt.figure(figsize=(16, 12))
        gs = GridSpec(2, 2, figure=fig, hspace=0.3, wspace=0.3)

        volume_cm3 = results.volume * 1e6
        pressure_bar = results.pressure / 1e5
        pressure_var_bar = results.pressure_variable / 1e5

        # P-V Diagram
        ax1 = fig.add_subplot(gs[0, 0])
        ax1.plot(volume_cm3, pressure_bar, "b-", linewidth=2, label="Constant γ")
        ax1.plot(volume_cm3, pressure_var_bar, "r--", linewidth=2, label="Variable γ")
        ax1.set_xlabel("Volume (cm³)", fontweight="bold")
        ax1.set_ylabel("Pressure (bar)", fontweight="bold")
        ax1.set_title("P-V Diagram", fontweight="bold")
        ax1.grid(True, alpha=0.3)
        ax1.legend()

        # Pressure vs Angle
        ax2 = fig.add_subplot(gs[0, 1])
        ax2.plot(results.crank_angles_deg, pressure_bar, "b-", linewidth=2)
        ax2.plot(results.crank_angles_deg, pressure_var_bar, "r--", linewidth=2)
        ax2.set_xlabel("Crank Angle (deg)", fontweight="bold")
        ax2.set_ylabel("Pressure (bar)", fontweight="bold")
        ax2.set_title("Pressure vs Crank Angle", fontweight="bold")
        ax2.grid(True, alpha=0.3)

        # Temperature vs Angle
        ax3 = fig.add_subplot(gs[1, 0])
        ax3.plot(results.crank_angles_deg, results.temperature, "b-", linewidth=2)
        ax3.plot(
            results.crank_angles_deg, results.temperature_variable, "r--", linewidth=2
        )
        ax3.set_xlabel("Crank Angle (deg)", fontweight="bold")
        ax3.set_ylabel("Temperature (K)", fontweight="bold")
        ax3.set_title("Temperature vs Crank Angle", fontweight="bold")
        ax3.grid(True, alpha=0.3)

        # Gamma vs Angle
        ax4 = fig.add_subplot(gs[1, 1])
        ax4.plot(results.crank_angles_deg, results.gamma_variable, "g-", linewidth=2)
        ax4.set_xlabel("Crank Angle (deg)", fontweight="bold")
        ax4.set_ylabel("γ (-)", fontweight="bold")
        ax4.set_title("Variable Gamma", fontweight="bold")
        ax4.grid(True, alpha=0.3)

        fig.suptitle(
            "Comprehensive Engine Cycle Analysis", fontsize=16, fontweight="bold"
        )

        self._finish(fig, save_path, show, "Comprehensive analysis")
        return fig
