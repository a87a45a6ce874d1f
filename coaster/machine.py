"""
Ride state machine: on track, flight, landed, teleporting
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from coaster.errors import PhaseInvariantError
from coaster.integrator import KinematicIntegrator, clamp_dt, g_force
from coaster.params import SimulationParameters
from coaster.projectile import ProjectileEquation, ProjectileEquationSolver
from coaster.state import (
    DEFAULT_TRAIL_LIMIT,
    Flight,
    Landed,
    LaunchSnapshot,
    OnTrack,
    RideState,
    RideStateSnapshot,
    Teleporting,
)
from coaster.track import TrackProfile

KPH_PER_MPS = 3.6


class LandingPolicy(Enum):
    """What happens once the cart has landed"""

    TELEPORT = "teleport"  # pause, move back to the start, ride again
    HALT = "halt"  # stay landed until reset()


@dataclass
class MachineConfig:
    """Timing and policy settings for the ride cycle"""

    landed_pause_duration: float = 1.5  # s
    teleport_duration: float = 1.5  # s
    trail_limit: int = DEFAULT_TRAIL_LIMIT  # flight points kept
    landing_policy: LandingPolicy = LandingPolicy.TELEPORT


@dataclass(frozen=True)
class LaunchEvent:
    """Published when the cart leaves the track"""

    launch: LaunchSnapshot
    equation: ProjectileEquation


LaunchListener = Callable[[LaunchEvent], None]


def teleport_position(
    landing_x: float, start_x: float, start_height: float, timer: float, duration: float
) -> Tuple[float, float, float]:
    """
    Scripted position on the straight line from the landing point to the start

    Args:
        landing_x: Where the cart touched down (m), at height 0
        start_x: Track start x (m)
        start_height: Track start height (m)
        timer: Time since the move began (s)
        duration: Total duration of the move (s)

    Returns:
        Tuple of (x, y, progress) with progress clamped to [0, 1]
    """
    progress = timer / duration if duration > 0 else 1.0
    progress = min(max(progress, 0.0), 1.0)
    x = landing_x + (start_x - landing_x) * progress
    y = start_height * progress
    return x, y, progress


class RideStateMachine:
    """Owns the ride phase and applies the transition rules once per tick"""

    def __init__(
        self,
        track: TrackProfile,
        params: SimulationParameters,
        config: Optional[MachineConfig] = None,
        solver: Optional[ProjectileEquationSolver] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize state machine

        Args:
            track: Track profile
            params: Simulation parameters, shared with the integrator; their
                track_start_height is set to the track's start height
            config: Ride cycle timings and landing policy
            solver: Projectile equation solver used at launch
            logger: Logger for transitions, defaults to the module logger
        """
        self.track = track
        self.params = params
        self.config = config or MachineConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.integrator = KinematicIntegrator(track, params)
        self.solver = solver or ProjectileEquationSolver()

        # The energy ceiling is measured from where this track starts
        if params.track_start_height != track.start_height:
            self.logger.info(
                "Energy reference follows the track start height %.4f m, not %.4f m",
                track.start_height, params.track_start_height,
            )
            params.track_start_height = track.start_height

        self._launch_listeners: List[LaunchListener] = []
        self._handlers: Dict[type, Callable[[Any, float], None]] = {
            OnTrack: self._advance_on_track,
            Flight: self._advance_flight,
            Landed: self._advance_landed,
            Teleporting: self._advance_teleporting,
        }

        self.state = self._fresh_state()
        self.last_launch_event: Optional[LaunchEvent] = None

    def _fresh_state(self) -> RideState:
        return RideState.at_start(self.track.start_x, self.track.start_height, self.config.trail_limit)

    def add_launch_listener(self, listener: LaunchListener) -> None:
        """Register a callback invoked with a LaunchEvent on every launch"""
        self._launch_listeners.append(listener)

    def remove_launch_listener(self, listener: LaunchListener) -> None:
        """Unregister a callback added with add_launch_listener"""
        self._launch_listeners.remove(listener)

    def reset(self) -> None:
        """Put the cart back at the start of the track and forget the last launch"""
        self.state = self._fresh_state()
        self.last_launch_event = None
        self.logger.info("Ride reset to x=%.2f", self.track.start_x)

    def advance(self, dt: float, speed_multiplier: float = 1.0) -> RideStateSnapshot:
        """
        Advance the ride by one tick

        Args:
            dt: Elapsed time since the previous tick (s)
            speed_multiplier: Playback speed factor applied to dt

        Returns:
            Snapshot of the ride after the tick
        """
        step = clamp_dt(dt, speed_multiplier)
        mode = self.state.mode
        handler = self._handlers.get(type(mode))
        if handler is None:
            raise PhaseInvariantError(f"Unknown ride phase {mode!r}")
        handler(mode, step)
        return self.snapshot()

    def _advance_on_track(self, mode: OnTrack, dt: float) -> None:
        self.integrator.step_on_track(self.state, dt)
        if self.state.x >= self.track.end_x:
            self._launch()

    def _launch(self) -> None:
        state = self.state
        state.x = self.track.end_x
        state.y = self.track.end_height
        # vx, vy keep the velocity of the final track step
        launch = LaunchSnapshot(state.x, state.y, state.vx, state.vy)
        state.trail.clear()
        state.trail.append((state.x, state.y))
        state.mode = Flight(launch)

        equation = self.solver.solve(launch.x, launch.y, launch.vx, launch.vy, self.params.g)
        event = LaunchEvent(launch, equation)
        self.last_launch_event = event
        self.logger.debug(
            "Launch at (%.3f, %.3f) with v=(%.3f, %.3f): %s",
            launch.x, launch.y, launch.vx, launch.vy, equation.parametric_text(),
        )
        for listener in list(self._launch_listeners):
            listener(event)

    def _advance_flight(self, mode: Flight, dt: float) -> None:
        if dt <= 0:
            return
        state = self.state
        self.integrator.step_flight(state, dt)
        if state.y <= 0:
            state.y = 0.0
            state.vx = 0.0
            state.vy = 0.0
            state.mode = Landed(landing_x=state.x)
            self.logger.debug("Landed at x=%.3f after %.2f s", state.x, state.ride_time)
        state.trail.append((state.x, state.y))

    def _advance_landed(self, mode: Landed, dt: float) -> None:
        self.state.x = mode.landing_x
        self.state.y = 0.0
        if self.config.landing_policy is LandingPolicy.HALT or dt <= 0:
            return
        mode.timer += dt
        if mode.timer >= self.config.landed_pause_duration:
            self.state.mode = Teleporting(landing_x=mode.landing_x)
            self.logger.debug("Teleporting from x=%.3f back to the start", mode.landing_x)

    def _advance_teleporting(self, mode: Teleporting, dt: float) -> None:
        if dt <= 0:
            return
        mode.timer += dt
        if mode.timer >= self.config.teleport_duration:
            self.state = self._fresh_state()
            self.logger.debug("Ride restarted at x=%.2f", self.track.start_x)
            return
        x, y, _ = teleport_position(
            mode.landing_x,
            self.track.start_x,
            self.track.start_height,
            mode.timer,
            self.config.teleport_duration,
        )
        self.state.x = x
        self.state.y = y

    def snapshot(self) -> RideStateSnapshot:
        """
        Current ride values for display collaborators

        G-force uses the same height, slope and curvature as the reported
        velocity: track values on the track, zero slope and curvature at the
        cart's height otherwise.
        """
        state = self.state
        mode = state.mode
        landing_x: Optional[float] = None
        phase_timer = 0.0
        teleport_progress: Optional[float] = None

        if isinstance(mode, OnTrack):
            kinematics = self.integrator.track_kinematics(state.x)
            height, slope, curvature = kinematics.height, kinematics.slope, kinematics.curvature
            vx, vy, speed = kinematics.vx, kinematics.vy, kinematics.speed
        elif isinstance(mode, Flight):
            height, slope, curvature = state.y, 0.0, 0.0
            vx, vy = state.vx, state.vy
            speed = math.hypot(vx, vy)
        elif isinstance(mode, (Landed, Teleporting)):
            height, slope, curvature = state.y, 0.0, 0.0
            vx = vy = speed = 0.0
            landing_x = mode.landing_x
            phase_timer = mode.timer
            if isinstance(mode, Teleporting):
                _, _, teleport_progress = teleport_position(
                    mode.landing_x,
                    self.track.start_x,
                    self.track.start_height,
                    mode.timer,
                    self.config.teleport_duration,
                )
        else:
            raise PhaseInvariantError(f"Unknown ride phase {mode!r}")

        return RideStateSnapshot(
            phase=mode.phase,
            x=state.x,
            y=state.y,
            vx=vx,
            vy=vy,
            speed=speed,
            speed_kph=speed * KPH_PER_MPS,
            g_force=g_force(height, slope, curvature, self.params.energy_reference_height),
            height=height,
            slope=slope,
            curvature=curvature,
            ride_time=state.ride_time,
            arc_length=state.arc_length,
            trail=tuple(state.trail),
            landing_x=landing_x,
            phase_timer=phase_timer,
            teleport_progress=teleport_progress,
        )
