"""
Main coaster simulator class
"""

import logging
import math
from typing import Optional, Tuple

import numpy as np

from coaster.camera import CameraBounds, CameraBoundsTracker, CameraConfig
from coaster.errors import ConfigurationError
from coaster.machine import LaunchListener, MachineConfig, RideStateMachine
from coaster.params import (
    DEFAULT_GRAVITY,
    DEFAULT_INITIAL_SPEED,
    SimulationParameters,
    energy_reference_height,
    validate_gravity,
    validate_initial_speed,
)
from coaster.projectile import EXPLICIT_PLACEHOLDER, PARAMETRIC_PLACEHOLDER, ProjectileEquation
from coaster.state import Phase, RideStateSnapshot
from coaster.track import TrackProfile

# Columns of the state history returned by run()
STATE_COLUMNS = ("x", "y", "vx", "vy", "speed", "g_force", "arc_length")


class CoasterSimulator:
    """Drives one cart around the track and keeps the camera in step"""

    def __init__(
        self,
        params: Optional[SimulationParameters] = None,
        track: Optional[TrackProfile] = None,
        machine_config: Optional[MachineConfig] = None,
        camera_config: Optional[CameraConfig] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize simulator

        Args:
            params: Gravity and initial speed; the start height is taken from the track
            track: Track profile, defaults to the reference ride
            machine_config: Ride cycle timings and landing policy
            camera_config: Viewport sizing parameters
            logger: Logger for parameter changes and transitions

        Raises:
            ConfigurationError: If the energy ceiling lies below the track peak
        """
        self.track = track or TrackProfile()
        self.params = params or SimulationParameters(track_start_height=self.track.start_height)
        self.logger = logger or logging.getLogger(__name__)
        self.peak_height = self.track.peak_height()
        self.machine = RideStateMachine(self.track, self.params, machine_config, logger=self.logger)
        self._check_feasible(self.params.g, self.params.v0)

        self.camera = CameraBoundsTracker(self.track, camera_config)
        self.paused = False
        self._snapshot = self.machine.snapshot()
        self.camera.update(self._snapshot)

    def _check_feasible(self, g: float, v0: float) -> None:
        ceiling = energy_reference_height(self.params.track_start_height, v0, g)
        if ceiling < self.peak_height:
            raise ConfigurationError(
                f"Energy reference height {ceiling:.4f} m is below the track peak {self.peak_height:.4f} m"
            )

    @property
    def state(self) -> RideStateSnapshot:
        """Snapshot from the most recent tick"""
        return self._snapshot

    @property
    def last_equation(self) -> Optional[ProjectileEquation]:
        """Equation of the most recent launch, None before the first one"""
        event = self.machine.last_launch_event
        return event.equation if event is not None else None

    def add_launch_listener(self, listener: LaunchListener) -> None:
        """Register a callback invoked with a LaunchEvent on every launch"""
        self.machine.add_launch_listener(listener)

    def advance(self, dt: float, speed_multiplier: float = 1.0) -> RideStateSnapshot:
        """
        Advance one tick; while paused the physics is held but bounds are refreshed

        Args:
            dt: Elapsed time since the previous tick (s)
            speed_multiplier: Playback speed factor

        Returns:
            Snapshot of the ride after the tick
        """
        if self.paused:
            dt = 0.0
        self._snapshot = self.machine.advance(dt, speed_multiplier)
        self.camera.update(self._snapshot)
        return self._snapshot

    def camera_bounds(self) -> CameraBounds:
        """Bounds computed on the most recent tick"""
        return self.camera.bounds

    def reset(self) -> None:
        """Return the cart to the start and the camera to base extents"""
        self.machine.reset()
        self.camera.reset()
        self._snapshot = self.machine.snapshot()
        self.camera.update(self._snapshot)

    def pause(self) -> None:
        """Hold the physics; ticks still refresh the snapshot and camera"""
        self.paused = True

    def resume(self) -> None:
        """Let ticks advance the physics again"""
        self.paused = False

    def toggle_pause(self) -> bool:
        """Flip the paused flag and return the new value"""
        self.paused = not self.paused
        return self.paused

    def set_gravity(self, g: float) -> float:
        """
        Apply a new gravitational acceleration

        Args:
            g: Candidate value (m/s²)

        Returns:
            The applied value

        Raises:
            ConfigurationError: If g is non-finite, outside (0, g_max], or leaves
                the energy ceiling below the track peak; the prior value is kept
        """
        try:
            value = validate_gravity(g, self.params.g_max)
            self._check_feasible(value, self.params.v0)
        except ConfigurationError:
            self.logger.warning("Rejected gravity %r, keeping %.4f", g, self.params.g)
            raise
        self.params.g = value
        self.logger.info("Gravity set to %.4f m/s²", value)
        return value

    def set_initial_speed(self, v0: float) -> float:
        """
        Apply a new initial speed

        Args:
            v0: Candidate value (m/s)

        Returns:
            The applied value

        Raises:
            ConfigurationError: If v0 is non-finite, outside [0, v0_max], or leaves
                the energy ceiling below the track peak; the prior value is kept
        """
        try:
            value = validate_initial_speed(v0, self.params.v0_max)
            self._check_feasible(self.params.g, value)
        except ConfigurationError:
            self.logger.warning("Rejected initial speed %r, keeping %.4f", v0, self.params.v0)
            raise
        self.params.v0 = value
        self.logger.info("Initial speed set to %.4f m/s", value)
        return value

    def reset_gravity(self) -> float:
        """Restore the default gravity"""
        return self.set_gravity(DEFAULT_GRAVITY)

    def reset_initial_speed(self) -> float:
        """Restore the default initial speed"""
        return self.set_initial_speed(DEFAULT_INITIAL_SPEED)

    def equation_text(self) -> Tuple[str, str]:
        """
        Display text for the last launch

        Returns:
            Tuple of (parametric_text, explicit_text), placeholders before the first launch
        """
        equation = self.last_equation
        if equation is None:
            return PARAMETRIC_PLACEHOLDER, EXPLICIT_PLACEHOLDER
        return equation.parametric_text(), equation.explicit_text()

    def run(
        self, duration: float = 30.0, dt: float = 0.01, stop_at_landing: bool = False
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Run the ride from the start with a fixed time step

        Args:
            duration: Maximum simulated time (s)
            dt: Time step (s)
            stop_at_landing: Stop at the first tick that ends in the landed phase

        Returns:
            Tuple of (time_array, state_history, phases) where state_history is
            [N x 7] with columns STATE_COLUMNS and phases holds Phase values

        Raises:
            ConfigurationError: If dt is not a positive finite number or duration is negative
        """
        if not (math.isfinite(dt) and dt > 0):
            raise ConfigurationError(f"Time step must be a positive finite value, got {dt!r}")
        if not (math.isfinite(duration) and duration >= 0):
            raise ConfigurationError(f"Duration must be a non-negative finite value, got {duration!r}")

        self.reset()
        self.resume()
        n_steps = int(np.floor(duration / dt + 1e-9))

        times = [0.0]
        rows = [self._row(self._snapshot)]
        phases = [self._snapshot.phase.value]

        for i in range(1, n_steps + 1):
            snapshot = self.advance(dt)
            times.append(i * dt)
            rows.append(self._row(snapshot))
            phases.append(snapshot.phase.value)
            if stop_at_landing and snapshot.phase is Phase.LANDED:
                break

        return np.array(times), np.array(rows), np.array(phases)

    @staticmethod
    def _row(snapshot: RideStateSnapshot) -> Tuple[float, ...]:
        return tuple(getattr(snapshot, name) for name in STATE_COLUMNS)

