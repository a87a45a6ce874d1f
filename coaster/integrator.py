"""
Equations of motion for the cart
"""

import math
from dataclasses import dataclass

from coaster.errors import ConfigurationError
from coaster.params import SimulationParameters
from coaster.state import RideState
from coaster.track import TrackProfile


@dataclass(frozen=True)
class TrackKinematics:
    """Track geometry and energy-derived velocity at one x-coordinate"""

    height: float  # m
    slope: float  # dh/dx
    curvature: float  # d²h/dx² (1/m)
    speed: float  # m/s along the tangent
    vx: float  # m/s
    vy: float  # m/s


def g_force(height: float, slope: float, curvature: float, energy_reference_height: float) -> float:
    """
    Normal acceleration felt by the rider, in multiples of g

    Gs = [(1 + s²) + 2 (E - h) k] / (1 + s²)^1.5, with s the slope, k the
    curvature and E the energy reference height. Zero slope and curvature
    give exactly 1.

    Args:
        height: Height at which the cart sits (m)
        slope: Track slope at that point
        curvature: Track curvature at that point (1/m)
        energy_reference_height: Energy ceiling as a height (m)

    Returns:
        G-force as a multiple of g
    """
    tangent_sq = 1.0 + slope * slope
    numerator = tangent_sq + 2.0 * (energy_reference_height - height) * curvature
    return numerator / tangent_sq ** 1.5


def clamp_dt(dt: float, speed_multiplier: float = 1.0) -> float:
    """
    Scaled time step, with negative, zero or non-finite values mapped to 0

    Args:
        dt: Elapsed wall time since the previous tick (s)
        speed_multiplier: Playback speed factor

    Returns:
        Simulated time to advance (s), never negative
    """
    scaled = dt * speed_multiplier
    if not math.isfinite(scaled) or scaled <= 0:
        return 0.0
    return scaled


class KinematicIntegrator:
    """Advances position and velocity for one time step"""

    def __init__(
        self,
        track: TrackProfile,
        params: SimulationParameters,
    ) -> None:
        """
        Initialize integrator

        Args:
            track: Track profile the cart rides on
            params: Simulation parameters, read on every step
        """
        self.track = track
        self.params = params

    def track_kinematics(self, x: float) -> TrackKinematics:
        """
        Velocity on the track at x from energy conservation

        v = sqrt(2g (E - h)), resolved along the tangent so that
        vx = v / sqrt(1 + slope²) and vy = slope · vx.

        Raises:
            ConfigurationError: If the energy ceiling lies below the track at x
        """
        height = self.track.height(x)
        slope = self.track.slope(x)
        curvature = self.track.curvature(x)
        energy_height = self.params.energy_reference_height
        headroom = energy_height - height
        if not headroom >= 0:
            raise ConfigurationError(
                f"Energy reference height {energy_height:.4f} m is below the track "
                f"({height:.4f} m) at x={x:.4f} m"
            )

        speed = math.sqrt(2.0 * self.params.g * headroom)
        vx = speed / math.sqrt(1.0 + slope * slope)
        return TrackKinematics(height, slope, curvature, speed, vx, slope * vx)

    def step_on_track(self, state: RideState, dt: float) -> TrackKinematics:
        """
        Forward Euler step along the track

        Arc length accumulates as v·dt, a first-order estimate that carries the
        same step-size error as the position update.

        Args:
            state: Ride state, updated in place
            dt: Time step (s), already clamped

        Returns:
            Kinematics at the position the step started from
        """
        kinematics = self.track_kinematics(state.x)
        state.vx = kinematics.vx
        state.vy = kinematics.vy
        if dt > 0:
            state.ride_time += dt
            state.arc_length += kinematics.speed * dt
            state.x += kinematics.vx * dt
        state.y = self.track.height(state.x)
        return kinematics

    def step_flight(self, state: RideState, dt: float) -> None:
        """
        Ballistic step: vy is updated first, then position with the new vy

        Horizontal velocity is constant (no drag).

        Args:
            state: Ride state, updated in place
            dt: Time step (s), already clamped
        """
        if dt <= 0:
            return
        state.vy -= self.params.g * dt
        state.x += state.vx * dt
        state.y += state.vy * dt
        state.ride_time += dt
        state.arc_length += math.hypot(state.vx, state.vy) * dt
