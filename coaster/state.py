"""
Ride state representation
"""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Deque, Optional, Tuple, Union

DEFAULT_TRAIL_LIMIT = 2000

Point = Tuple[float, float]


class Phase(Enum):
    """Motion regime of the cart"""

    ON_TRACK = "on_track"
    FLIGHT = "flight"
    LANDED = "landed"
    TELEPORTING = "teleporting"


@dataclass(frozen=True)
class LaunchSnapshot:
    """Position and velocity at the moment the cart leaves the track"""

    x: float  # m
    y: float  # m
    vx: float  # m/s
    vy: float  # m/s


@dataclass
class OnTrack:
    phase: ClassVar[Phase] = Phase.ON_TRACK


@dataclass
class Flight:
    phase: ClassVar[Phase] = Phase.FLIGHT

    launch: LaunchSnapshot


@dataclass
class Landed:
    phase: ClassVar[Phase] = Phase.LANDED

    landing_x: float  # m
    timer: float = 0.0  # s since touchdown


@dataclass
class Teleporting:
    phase: ClassVar[Phase] = Phase.TELEPORTING

    landing_x: float  # m
    timer: float = 0.0  # s since the move back started


PhaseState = Union[OnTrack, Flight, Landed, Teleporting]


@dataclass
class RideState:
    """Mutable state of one cart; owned by a single state machine"""

    mode: PhaseState
    x: float  # Horizontal position (m)
    y: float  # Height (m)
    vx: float = 0.0  # Horizontal velocity (m/s)
    vy: float = 0.0  # Vertical velocity (m/s)
    ride_time: float = 0.0  # s
    arc_length: float = 0.0  # m, sum of v·dt
    trail: Deque[Point] = field(default_factory=lambda: deque(maxlen=DEFAULT_TRAIL_LIMIT))

    @property
    def phase(self) -> Phase:
        return self.mode.phase

    @classmethod
    def at_start(cls, x: float, y: float, trail_limit: int = DEFAULT_TRAIL_LIMIT) -> "RideState":
        """Fresh on-track state at the given start point"""
        return cls(mode=OnTrack(), x=x, y=y, trail=deque(maxlen=trail_limit))


@dataclass(frozen=True)
class RideStateSnapshot:
    """Read-only view of the ride after a tick, for display collaborators"""

    phase: Phase
    x: float  # m
    y: float  # m
    vx: float  # m/s
    vy: float  # m/s
    speed: float  # m/s
    speed_kph: float  # km/h
    g_force: float  # multiples of g
    height: float  # m, height used for the G-force formula
    slope: float  # slope used for the G-force formula
    curvature: float  # 1/m, curvature used for the G-force formula
    ride_time: float  # s
    arc_length: float  # m
    trail: Tuple[Point, ...]
    landing_x: Optional[float] = None  # m, set while landed or teleporting
    phase_timer: float = 0.0  # s, landed or teleport timer
    teleport_progress: Optional[float] = None  # 0..1 while teleporting
