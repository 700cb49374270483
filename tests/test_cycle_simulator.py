"""
Integration Tests for the Cycle Simulator
End-to-end runs of the reference engine and its boundary cases.

Author: Mohith Sai Gorla
Date:   27-02-2026
"""

import math

import numpy as np
import pytest

from combustion_cycle.cycle_simulator import (
    CyclePhase,
    CycleSimulator,
    PhaseStateMachine,
    simulate,
)
from combustion_cycle.engine_config import create_reference_engine
from combustion_cycle.kinematics import CrankSample
from combustion_cycle.thermodynamics import (
    ConvergenceError,
    VariableGammaSolver,
    WorkingFluid,
)


class TestCyclePhase:

    def test_from_angle(self):
        assert CyclePhase.from_angle(-180.0, 0.5) is CyclePhase.COMPRESSION
        assert CyclePhase.from_angle(-1.0, 0.5) is CyclePhase.COMPRESSION
        assert CyclePhase.from_angle(0.0, 0.5) is CyclePhase.TOP_DEAD_CENTER
        assert CyclePhase.from_angle(1e-9, 0.5) is CyclePhase.TOP_DEAD_CENTER
        assert CyclePhase.from_angle(1.0, 0.5) is CyclePhase.EXPANSION
        assert CyclePhase.from_angle(180.0, 0.5) is CyclePhase.EXPANSION


class TestPhaseStateMachine:

    def setup_method(self):
        self.machine = PhaseStateMachine(angular_resolution=1.0)

    def test_starts_in_compression(self):
        assert self.machine.phase is CyclePhase.COMPRESSION

    def test_normal_sequence(self):
        phases = [self.machine.advance(a) for a in (-2.0, -1.0, 0.0, 1.0, 2.0)]
        assert phases == [
            CyclePhase.COMPRESSION,
            CyclePhase.COMPRESSION,
            CyclePhase.TOP_DEAD_CENTER,
            CyclePhase.EXPANSION,
            CyclePhase.EXPANSION,
        ]

    def test_skipping_tdc_raises(self):
        self.machine.advance(-1.0)
        with pytest.raises(RuntimeError):
            self.machine.advance(1.0)

    def test_expansion_back_to_compression_raises(self):
        for a in (-1.0, 0.0, 1.0):
            self.machine.advance(a)
        with pytest.raises(RuntimeError):
            self.machine.advance(-1.0)

    def test_tdc_twice_raises(self):
        self.machine.advance(0.0)
        with pytest.raises(RuntimeError):
            self.machine.advance(0.0)

    def test_invalid_resolution(self):
        with pytest.raises(ValueError):
            PhaseStateMachine(angular_resolution=0.0)


class TestReferenceCycle:
    """Reference engine: stroke 0.1 m, CR 9, 101325 Pa / 298 K, 3000 K, 1000 rpm."""

    @classmethod
    def setup_class(cls):
        cls.config = create_reference_engine()
        cls.simulator = CycleSimulator(cls.config)
        cls.results = cls.simulator.simulate()
        cls.b = cls.results.boundaries

    # ── Grid ──────────────────────────────────────────────────────────────

    def test_grid(self):
        r = self.results
        assert r.num_samples == 361
        assert r.crank_angles_deg[0] == -180.0
        assert r.crank_angles_deg[180] == 0.0
        assert r.crank_angles_deg[-1] == 180.0
        assert np.allclose(np.diff(r.crank_angles_deg), 1.0)

    def test_boundaries(self):
        assert self.b.end_of_compression == 179
        assert self.b.top_dead_center == 180
        assert self.b.end_of_expansion == 359
        assert self.b.closure == 360

    def test_phases(self):
        phases = self.results.phases
        assert len(phases) == 361
        assert all(p is CyclePhase.COMPRESSION for p in phases[:180])
        assert phases[180] is CyclePhase.TOP_DEAD_CENTER
        assert all(p is CyclePhase.EXPANSION for p in phases[181:])

    # ── Volume ────────────────────────────────────────────────────────────

    def test_clearance_ratio(self):
        r = self.results
        assert r.clearance_volume / r.volume[0] == pytest.approx(1.0 / 9.0, rel=1e-12)

    def test_volume_bounded_below_by_clearance(self):
        r = self.results
        assert np.all(r.volume >= r.clearance_volume)
        assert r.volume[self.b.top_dead_center] == r.clearance_volume

    def test_volume_monotone(self):
        v = self.results.volume
        assert np.all(np.diff(v[: self.b.top_dead_center + 1]) < 0.0)
        assert np.all(np.diff(v[self.b.top_dead_center : self.b.closure]) > 0.0)

    # ── Constant gamma ────────────────────────────────────────────────────

    def test_isentropic_invariant(self):
        """p·V^γ is constant between consecutive non-TDC, non-closure samples."""
        r = self.results
        pv = r.pressure * r.volume**1.4
        skip = {self.b.end_of_compression, self.b.end_of_expansion}
        for i in range(r.num_samples - 1):
            if i in skip:
                continue
            assert pv[i + 1] == pytest.approx(pv[i], rel=1e-9), f"sample {i}"

    def test_end_of_compression_pressure(self):
        r = self.results
        eoc = self.b.end_of_compression
        assert r.pressure[eoc] == pytest.approx(
            101_325.0 * (r.volume[0] / r.volume[eoc]) ** 1.4, rel=1e-9
        )
        assert r.pressure[eoc] == pytest.approx(101_325.0 * 9.0**1.4, rel=2e-3)

    def test_tdc_state(self):
        r = self.results
        eoc, tdc = self.b.end_of_compression, self.b.top_dead_center
        assert r.temperature[tdc] == 3000.0
        assert r.pressure[tdc] == pytest.approx(
            r.pressure[eoc] * 3000.0 / r.temperature[eoc], rel=1e-12
        )
        assert r.pressure[tdc] == pytest.approx(101_325.0 * 9.0 * 3000.0 / 298.0, rel=2e-3)

    def test_energy_balance(self):
        s = self.results.constant_summary
        assert s.net_work == pytest.approx(s.heat_added - s.heat_rejected, rel=1e-12)

    def test_efficiency_near_otto(self):
        s = self.results.constant_summary
        assert s.thermal_efficiency == pytest.approx(1.0 - 9.0**-0.4, rel=5e-3)

    def test_indicated_work_positive(self):
        s = self.results.constant_summary
        assert s.indicated_work > 0.0
        assert s.imep > 0.0

    # ── Variable gamma ────────────────────────────────────────────────────

    def test_variable_inlet_state(self):
        r = self.results
        assert r.gamma_variable[0] == 1.4
        assert r.cv_variable[0] == 0.71
        assert r.pressure_variable[0] == r.pressure[0]

    def test_variable_tdc_temperature(self):
        assert self.results.temperature_variable[self.b.top_dead_center] == 3000.0

    def test_variable_gamma_range(self):
        gamma = self.results.gamma_variable[1:-1]
        assert np.all(gamma > 1.2)
        assert np.all(gamma < 1.4)

    def test_variable_cooler_after_compression(self):
        eoc = self.b.end_of_compression
        r = self.results
        assert r.temperature_variable[eoc] < r.temperature[eoc]

    def test_variable_efficiency_below_constant(self):
        r = self.results
        assert (
            r.variable_summary.thermal_efficiency
            < r.constant_summary.thermal_efficiency
        )
        assert r.variable_summary.thermal_efficiency > 0.0

    def test_solver_residuals_small(self):
        assert np.all(self.results.gamma_residual < 1e-10)

    # ── Closure and ownership ─────────────────────────────────────────────

    def test_cycle_closure(self):
        r = self.results
        two_pi = 2.0 * math.pi
        assert r.crank_angles_rad[-1] % two_pi == pytest.approx(
            r.crank_angles_rad[0] % two_pi
        )
        for arr in (
            r.volume,
            r.pressure,
            r.temperature,
            r.pressure_variable,
            r.temperature_variable,
            r.gamma_variable,
            r.cv_variable,
        ):
            assert arr[-1] == arr[0]

    def test_arrays_read_only(self):
        with pytest.raises(ValueError):
            self.results.pressure[0] = 0.0
        with pytest.raises(ValueError):
            self.results.gamma_variable[10] = 1.0

    def test_accessors(self):
        r = self.results
        s = r.crank_sample(90)
        assert isinstance(s, CrankSample)
        assert s.displacement == r.displacement[90]
        assert r.constant_state(180).temperature == 3000.0
        assert r.variable_state(0).gamma == 1.4

    def test_repeatable(self):
        again = simulate(self.config)
        assert np.array_equal(again.pressure_variable, self.results.pressure_variable)

    # ── Metrics ───────────────────────────────────────────────────────────

    def test_performance_metrics(self):
        m = self.simulator.calculate_performance_metrics(self.results)
        assert m["otto_efficiency"] == pytest.approx(1.0 - 9.0**-0.4)
        assert m["mean_piston_speed_ms"] == pytest.approx(2.0 * 0.1 * 1000.0 / 60.0)
        assert m["thermal_efficiency_constant"] == (
            self.results.constant_summary.thermal_efficiency
        )
        assert m["max_piston_speed_ms"] > m["mean_piston_speed_ms"]


class TestBoundaryCases:

    def setup_method(self):
        self.config = create_reference_engine()
        self.first = CycleSimulator(self.config).simulate()
        self.eoc = self.first.boundaries.end_of_compression

    def test_peak_equal_to_compression_temperature(self):
        """No heat added: efficiency is reported as 0.0 with a warning."""
        peak = float(self.first.temperature[self.eoc])
        config = self.config.with_overrides(peak_temperature=peak)
        with pytest.warns(RuntimeWarning):
            results = CycleSimulator(config).simulate()
        assert results.constant_summary.heat_added == 0.0
        assert results.constant_summary.thermal_efficiency == 0.0

    def test_peak_equal_to_variable_compression_temperature(self):
        peak = float(self.first.temperature_variable[self.eoc])
        config = self.config.with_overrides(peak_temperature=peak)
        with pytest.warns(RuntimeWarning):
            results = CycleSimulator(config).simulate()
        assert results.variable_summary.heat_added == 0.0
        assert results.variable_summary.thermal_efficiency == 0.0

    def test_tighter_tolerance_is_stable(self):
        config = self.config.with_overrides(gamma_iterations=500, gamma_tolerance=1e-13)
        tight = CycleSimulator(config).simulate()
        assert np.allclose(
            tight.temperature_variable, self.first.temperature_variable, rtol=1e-9
        )
        assert np.allclose(tight.gamma_variable, self.first.gamma_variable, rtol=1e-9)

    def test_unreachable_tolerance_raises(self):
        config = self.config.with_overrides(gamma_iterations=1, gamma_tolerance=1e-15)
        with pytest.raises(ConvergenceError):
            CycleSimulator(config).simulate()

    def test_injected_solver(self):
        fluid = WorkingFluid()
        solver = VariableGammaSolver(fluid, iterations=3)
        results = CycleSimulator(self.config, solver=solver).simulate()
        assert results.temperature_variable[self.eoc] == pytest.approx(
            self.first.temperature_variable[self.eoc], rel=1e-4
        )

    def test_coarser_grid(self):
        config = self.config.with_overrides(angular_resolution=2.0)
        results = CycleSimulator(config).simulate()
        assert results.num_samples == 181
        assert results.crank_angles_deg[90] == 0.0
        assert results.temperature[90] == 3000.0
        assert results.volume[0] / results.clearance_volume == pytest.approx(9.0)

    def test_constant_efficiency_independent_of_peak(self):
        """For the ideal Otto cycle, efficiency depends on CR and γ only."""
        hot = CycleSimulator(self.config.with_overrides(peak_temperature=2500.0))
        assert hot.simulate().constant_summary.thermal_efficiency == pytest.approx(
            self.first.constant_summary.thermal_efficiency, rel=1e-3
        )


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
