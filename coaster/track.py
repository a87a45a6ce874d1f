"""
Track profile: piecewise polynomial height with analytic slope and curvature
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

import numpy as np
from numpy.polynomial import Polynomial
from scipy.integrate import quad
from scipy.optimize import minimize_scalar


@dataclass(frozen=True)
class TrackSegment:
    """One polynomial piece of the track, in powers of (x - origin)"""

    start: float  # m
    end: float  # m
    origin: float  # m, local coordinate is x - origin
    coefficients: Tuple[float, ...]  # ascending powers
    closed: bool = False  # include x == end
    _height: Polynomial = field(init=False, repr=False, compare=False)
    _slope: Polynomial = field(init=False, repr=False, compare=False)
    _curvature: Polynomial = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Build the polynomial and its two analytic derivatives"""
        if not self.end > self.start:
            raise ValueError(f"Segment end {self.end} must be greater than start {self.start}")
        height = Polynomial(self.coefficients)
        object.__setattr__(self, "_height", height)
        object.__setattr__(self, "_slope", height.deriv(1))
        object.__setattr__(self, "_curvature", height.deriv(2))

    def contains(self, x: float) -> bool:
        """Whether x falls inside this segment's interval"""
        if self.closed:
            return self.start <= x <= self.end
        return self.start <= x < self.end

    def height(self, x: float) -> float:
        return float(self._height(x - self.origin))

    def slope(self, x: float) -> float:
        return float(self._slope(x - self.origin))

    def curvature(self, x: float) -> float:
        return float(self._curvature(x - self.origin))


def reference_segments() -> Tuple[TrackSegment, ...]:
    """
    The reference ride: drop, valley, second peak, shallower valley

    Height and slope are continuous at x = 5, 15 and 25.
    """
    return (
        # 20 - 0.32 x²
        TrackSegment(0.0, 5.0, origin=0.0, coefficients=(20.0, 0.0, -0.32)),
        # 0.0064 (x - 10)⁴ + 8
        TrackSegment(5.0, 15.0, origin=10.0, coefficients=(8.0, 0.0, 0.0, 0.0, 0.0064)),
        # 20 - 0.32 (x - 20)²
        TrackSegment(15.0, 25.0, origin=20.0, coefficients=(20.0, 0.0, -0.32)),
        # 0.32 (x - 30)² + 4
        TrackSegment(25.0, 35.0, origin=30.0, coefficients=(4.0, 0.0, 0.32), closed=True),
    )


class TrackProfile:
    """Height, slope and curvature of the track at any horizontal position"""

    def __init__(
        self,
        segments: Optional[Sequence[TrackSegment]] = None,
        fallback_height: Optional[float] = None,
    ) -> None:
        """
        Initialize track profile

        Args:
            segments: Contiguous segments ordered by x; the last one must be closed
            fallback_height: Height returned outside the track (m), defaults to the start height
        """
        self.segments: Tuple[TrackSegment, ...] = tuple(segments) if segments else reference_segments()

        for left, right in zip(self.segments, self.segments[1:]):
            if left.closed or left.end != right.start:
                raise ValueError(f"Segments must be contiguous and half-open: {left} then {right}")
        if not self.segments[-1].closed:
            raise ValueError("Last track segment must be closed")

        self.start_x = self.segments[0].start
        self.end_x = self.segments[-1].end
        self.start_height = self.segments[0].height(self.start_x)
        self.end_height = self.segments[-1].height(self.end_x)
        self.fallback_height = self.start_height if fallback_height is None else fallback_height

    @property
    def boundaries(self) -> Tuple[float, ...]:
        """Interior x-coordinates where one segment hands over to the next"""
        return tuple(segment.start for segment in self.segments[1:])

    def segment_for(self, x: float) -> Optional[TrackSegment]:
        """Segment containing x, or None outside the track (NaN included)"""
        for segment in self.segments:
            if segment.contains(x):
                return segment
        return None

    def height(self, x: float) -> float:
        """Track height at x (m)"""
        segment = self.segment_for(x)
        if segment is None:
            return self.fallback_height
        return segment.height(x)

    def slope(self, x: float) -> float:
        """dh/dx at x"""
        segment = self.segment_for(x)
        if segment is None:
            return 0.0
        return segment.slope(x)

    def curvature(self, x: float) -> float:
        """d²h/dx² at x (1/m)"""
        segment = self.segment_for(x)
        if segment is None:
            return 0.0
        return segment.curvature(x)

    def peak_height(self) -> float:
        """Highest point reachable on the track (m)"""
        return max(self._segment_extreme(segment, highest=True) for segment in self.segments)

    def lowest_height(self) -> float:
        """Lowest point on the track (m)"""
        return min(self._segment_extreme(segment, highest=False) for segment in self.segments)

    def _segment_extreme(self, segment: TrackSegment, highest: bool) -> float:
        sign = -1.0 if highest else 1.0
        result = minimize_scalar(
            lambda x: sign * segment.height(x),
            bounds=(segment.start, segment.end),
            method="bounded",
        )
        candidates = [segment.height(segment.start), segment.height(segment.end), float(sign * result.fun)]
        return max(candidates) if highest else min(candidates)

    def arc_length(self, x0: Optional[float] = None, x1: Optional[float] = None) -> float:
        """
        Length measured along the track between two x-coordinates

        Args:
            x0: Start x (m), defaults to the track start
            x1: End x (m), defaults to the track end

        Returns:
            Integral of sqrt(1 + slope²) dx in meters
        """
        lower = self.start_x if x0 is None else x0
        upper = self.end_x if x1 is None else x1
        if upper <= lower:
            return 0.0
        breakpoints = [b for b in self.boundaries if lower < b < upper]
        value, _ = quad(
            lambda x: math.sqrt(1.0 + self.slope(x) ** 2),
            lower,
            upper,
            points=breakpoints or None,
            limit=200,
        )
        return float(value)

    def sample(self, n: int = 351) -> Tuple[np.ndarray, np.ndarray]:
        """
        Sample the track for plotting

        Args:
            n: Number of evenly spaced points from start to end

        Returns:
            Tuple of (x_positions, heights)
        """
        xs = np.linspace(self.start_x, self.end_x, n)
        heights = np.array([self.height(float(x)) for x in xs])
        return xs, heights
