"""
Unit tests for the coaster simulator.

Tests parameter changes and their rejection, the feasibility check against the
track peak, pausing, the equation text and fixed-step runs.
"""

import logging
import math

import numpy as np
import pytest

from coaster import (
    CameraBounds,
    CoasterSimulator,
    ConfigurationError,
    LaunchEvent,
    Phase,
    SimulationParameters,
    TrackProfile,
    TrackSegment,
)
from coaster.projectile import EXPLICIT_PLACEHOLDER, PARAMETRIC_PLACEHOLDER
from coaster.simulator import STATE_COLUMNS


def ride_until(simulator: CoasterSimulator, phase: Phase, dt: float = 0.01, max_steps: int = 100000) -> None:
    """Advance until the simulator reports the given phase"""
    for _ in range(max_steps):
        if simulator.advance(dt).phase is phase:
            return
    raise AssertionError(f"ride never reached {phase}")


class TestCoasterSimulator:
    """Test suite for CoasterSimulator"""

    @pytest.fixture
    def simulator(self) -> CoasterSimulator:
        """Create simulator on the reference track with default parameters"""
        return CoasterSimulator()

    @pytest.fixture
    def hill_track(self) -> TrackProfile:
        """Create a track that climbs 3 m above its start"""
        return TrackProfile([
            TrackSegment(0.0, 5.0, origin=0.0, coefficients=(20.0, 0.0, 0.04)),
            TrackSegment(5.0, 10.0, origin=5.0, coefficients=(21.0, 0.4), closed=True),
        ])

    def test_default_initialization(self, simulator: CoasterSimulator) -> None:
        """Test the simulator starts on the track with base camera bounds"""
        assert simulator.params.g == 9.81
        assert simulator.params.v0 == 0.5
        assert simulator.state.phase is Phase.ON_TRACK
        assert simulator.camera_bounds() == CameraBounds(50.0, 22.0)
        assert simulator.peak_height == pytest.approx(20.0)
        assert not simulator.paused

    def test_set_gravity(self, simulator: CoasterSimulator, caplog: pytest.LogCaptureFixture) -> None:
        """Test a valid gravity is applied and logged"""
        with caplog.at_level(logging.INFO):
            applied = simulator.set_gravity(1.62)

        assert applied == 1.62
        assert simulator.params.g == 1.62
        assert simulator.params.energy_reference_height == pytest.approx(20.0 + 0.25 / 3.24)
        assert "Gravity set" in caplog.text

    @pytest.mark.parametrize("g", [0.0, -9.81, math.nan, math.inf, 2e9])
    def test_rejected_gravity_keeps_previous(
        self, simulator: CoasterSimulator, caplog: pytest.LogCaptureFixture, g: float
    ) -> None:
        """Test an invalid gravity raises, logs a warning and leaves g unchanged"""
        with caplog.at_level(logging.WARNING):
            with pytest.raises(ConfigurationError):
                simulator.set_gravity(g)

        assert simulator.params.g == 9.81
        assert "Rejected gravity" in caplog.text

    @pytest.mark.parametrize("v0", [-1.0, math.nan, math.inf, 2e9])
    def test_rejected_initial_speed_keeps_previous(self, simulator: CoasterSimulator, v0: float) -> None:
        """Test an invalid initial speed raises and leaves v0 unchanged"""
        with pytest.raises(ConfigurationError):
            simulator.set_initial_speed(v0)

        assert simulator.params.v0 == 0.5

    def test_reset_parameters_to_defaults(self, simulator: CoasterSimulator) -> None:
        """Test the reset helpers restore the default values"""
        simulator.set_gravity(3.71)
        simulator.set_initial_speed(4.0)

        assert simulator.reset_gravity() == 9.81
        assert simulator.reset_initial_speed() == 0.5
        assert simulator.params.g == 9.81
        assert simulator.params.v0 == 0.5

    def test_infeasible_track_rejected_at_construction(self, hill_track: TrackProfile) -> None:
        """Test a track peak above the energy ceiling is a configuration error"""
        with pytest.raises(ConfigurationError):
            CoasterSimulator(SimulationParameters(v0=0.5), track=hill_track)

    def test_infeasible_parameter_change_rejected(self, hill_track: TrackProfile) -> None:
        """Test changes that would strand the cart below the peak are refused"""
        simulator = CoasterSimulator(SimulationParameters(v0=10.0), track=hill_track)
        assert simulator.peak_height == pytest.approx(23.0)

        with pytest.raises(ConfigurationError):
            simulator.set_initial_speed(1.0)
        with pytest.raises(ConfigurationError):
            simulator.set_gravity(100.0)

        assert simulator.params.v0 == 10.0
        assert simulator.params.g == 9.81
        assert simulator.set_initial_speed(8.0) == 8.0

    def test_gravity_change_applies_mid_flight(self, simulator: CoasterSimulator) -> None:
        """Test a new gravity is used from the next flight tick"""
        ride_until(simulator, Phase.FLIGHT)
        simulator.set_gravity(1.0)
        before = simulator.state

        after = simulator.advance(0.1)

        assert after.vy == pytest.approx(before.vy - 0.1)
        assert after.vx == before.vx

    def test_pause_holds_physics(self, simulator: CoasterSimulator) -> None:
        """Test paused ticks do not move the cart"""
        simulator.advance(0.5)
        x = simulator.state.x

        simulator.pause()
        assert simulator.advance(1.0).x == x

        simulator.resume()
        assert simulator.advance(0.1).x > x

    def test_toggle_pause(self, simulator: CoasterSimulator) -> None:
        """Test toggling returns the new paused flag"""
        assert simulator.toggle_pause() is True
        assert simulator.paused
        assert simulator.toggle_pause() is False

    def test_equation_text_placeholders(self, simulator: CoasterSimulator) -> None:
        """Test placeholders are shown before the first launch"""
        assert simulator.last_equation is None
        assert simulator.equation_text() == (PARAMETRIC_PLACEHOLDER, EXPLICIT_PLACEHOLDER)

    def test_equation_text_after_launch(self, simulator: CoasterSimulator) -> None:
        """Test the last launch's equations are shown once the cart has flown"""
        events: list[LaunchEvent] = []
        simulator.add_launch_listener(events.append)

        ride_until(simulator, Phase.FLIGHT)
        parametric, explicit = simulator.equation_text()

        assert len(events) == 1
        assert parametric.startswith("x(t) = 35.00 + ")
        assert explicit.startswith("y(x) = 12.00 + 3.")
        assert "(x - 35.00)^2" in explicit

        simulator.reset()
        assert simulator.equation_text() == (PARAMETRIC_PLACEHOLDER, EXPLICIT_PLACEHOLDER)

    def test_camera_follows_flight(self, simulator: CoasterSimulator) -> None:
        """Test the camera grows past base to keep the landing in view"""
        ride_until(simulator, Phase.LANDED)

        bounds = simulator.camera_bounds()
        assert bounds.x_max == pytest.approx(simulator.state.landing_x + 5.0)
        assert 50.0 < bounds.x_max <= 100.0

    def test_reset_restores_camera(self, simulator: CoasterSimulator) -> None:
        """Test reset returns the camera to base"""
        ride_until(simulator, Phase.LANDED)

        simulator.reset()

        assert simulator.state.phase is Phase.ON_TRACK
        assert simulator.camera_bounds() == CameraBounds(50.0, 22.0)

    def test_run_until_landing(self, simulator: CoasterSimulator) -> None:
        """Test a fixed-step run stops at the landing"""
        t, state, phases = simulator.run(duration=60.0, dt=0.01, stop_at_landing=True)

        assert state.shape == (len(t), len(STATE_COLUMNS))
        assert phases.shape == t.shape
        assert phases[0] == Phase.ON_TRACK.value
        assert phases[-1] == Phase.LANDED.value
        assert np.sum(phases == Phase.LANDED.value) == 1
        assert state[-1, 1] == 0.0
        assert state[-1, 0] == pytest.approx(47.0, abs=0.5)

    def test_run_covers_full_cycle(self, simulator: CoasterSimulator) -> None:
        """Test a long run passes through every phase and back onto the track"""
        t, state, phases = simulator.run(duration=30.0, dt=0.01)

        assert len(t) == 3001
        assert t[-1] == pytest.approx(30.0)
        assert set(phases) == {phase.value for phase in Phase}
        assert not np.any(np.isnan(state))

    @pytest.mark.parametrize("dt", [0.0, -0.01, math.nan, math.inf])
    def test_run_rejects_invalid_time_step(self, simulator: CoasterSimulator, dt: float) -> None:
        """Test a fixed-step run needs a positive finite time step"""
        with pytest.raises(ConfigurationError):
            simulator.run(duration=1.0, dt=dt)

    def test_run_rejects_negative_duration(self, simulator: CoasterSimulator) -> None:
        """Test a run cannot last a negative time"""
        with pytest.raises(ValueError):
            simulator.run(duration=-1.0, dt=0.01)

    def test_track_start_height_sets_energy_ceiling(self) -> None:
        """Test explicit parameters on a lower track still start the cart at v0"""
        low_track = TrackProfile([TrackSegment(0.0, 10.0, origin=0.0, coefficients=(10.0, 0.0, -0.02), closed=True)])

        simulator = CoasterSimulator(SimulationParameters(v0=0.5), track=low_track)

        assert simulator.params.track_start_height == 10.0
        assert simulator.state.speed == pytest.approx(0.5)
        assert simulator.advance(0.01).phase is Phase.ON_TRACK

    def test_run_resets_previous_ride(self, simulator: CoasterSimulator) -> None:
        """Test consecutive runs start from the same state"""
        first = simulator.run(duration=2.0, dt=0.01)
        second = simulator.run(duration=2.0, dt=0.01)

        np.testing.assert_array_equal(first[1], second[1])
