"""
Viewport bounds that follow the cart without jitter
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from coaster.state import Phase, RideStateSnapshot
from coaster.track import TrackProfile


class CameraPolicy(Enum):
    """How far the viewport may grow"""

    CAPPED = "capped"  # grow with the ride, up to max_zoom_factor × base
    STICKY = "sticky"  # grow without limit until reset()


@dataclass(frozen=True)
class CameraBounds:
    """Visible world extent, from 0 to x_max and 0 to y_max"""

    x_max: float  # m
    y_max: float  # m


@dataclass
class CameraConfig:
    """Viewport sizing parameters"""

    base_x_max: float = 50.0  # m
    base_y_max: float = 22.0  # m
    padding_x: float = 5.0  # m kept beyond the farthest point
    padding_y: float = 2.0  # m kept above the highest point
    max_zoom_factor: float = 2.0  # CAPPED only
    policy: CameraPolicy = CameraPolicy.CAPPED
    # Fraction of the teleport after which the view snaps back to base; None disables
    teleport_snap_fraction: Optional[float] = 1.0 / 3.0


class CameraBoundsTracker:
    """Derives viewport bounds from the extrema the cart has visited"""

    def __init__(self, track: TrackProfile, config: Optional[CameraConfig] = None) -> None:
        """
        Initialize camera tracker

        Args:
            track: Track profile, whose start and end heights are always kept in view
            config: Viewport sizing parameters
        """
        self.track = track
        self.config = config or CameraConfig()
        self._track_top = max(track.start_height, track.end_height)
        self.reset()

    def reset(self) -> None:
        """Forget visited extrema and return to the base extents"""
        self._farthest_x = float("-inf")
        self._farthest_y = self._track_top
        self._bounds = CameraBounds(self.config.base_x_max, self.config.base_y_max)

    @property
    def bounds(self) -> CameraBounds:
        """Bounds from the most recent update"""
        return self._bounds

    def update(self, snapshot: RideStateSnapshot) -> CameraBounds:
        """
        Fold one tick's position into the visited extrema and recompute bounds

        Args:
            snapshot: Ride snapshot after the tick

        Returns:
            Bounds for rendering this tick
        """
        config = self.config

        if (
            snapshot.phase is Phase.TELEPORTING
            and config.teleport_snap_fraction is not None
            and snapshot.teleport_progress is not None
            and snapshot.teleport_progress >= config.teleport_snap_fraction
        ):
            self.reset()
            return self._bounds

        self._farthest_x = max(self._farthest_x, snapshot.x)
        if snapshot.landing_x is not None:
            self._farthest_x = max(self._farthest_x, snapshot.landing_x)
        self._farthest_y = max(self._farthest_y, snapshot.y)

        x_max = max(config.base_x_max, self._farthest_x + config.padding_x)
        y_max = max(config.base_y_max, self._farthest_y + config.padding_y)
        if config.policy is CameraPolicy.CAPPED:
            x_max = min(x_max, config.base_x_max * config.max_zoom_factor)
            y_max = min(y_max, config.base_y_max * config.max_zoom_factor)

        self._bounds = CameraBounds(x_max, y_max)
        return self._bounds
