"""
Closed-form projectile equations for a launch
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from coaster.errors import UndefinedTrajectoryError

VERTICAL_EPSILON = 1e-6  # m/s, below this |vx0| the launch counts as vertical

UNAVAILABLE_TEXT = "Projectile equation unavailable for this launch."
VERTICAL_TEXT = "y(x) is undefined for vertical launch (vx ≈ 0)."
PARAMETRIC_PLACEHOLDER = "Launch the cart to see x(t) and y(t)."
EXPLICIT_PLACEHOLDER = "Launch the cart to see y(x)."


def format_number(n: float) -> str:
    """Two decimals for finite values, plain repr otherwise"""
    if math.isfinite(n):
        return f"{n:.2f}"
    return str(n)


@dataclass(frozen=True)
class ExplicitTrajectory:
    """y(x) = a·x² + b·x + c"""

    a: float
    b: float
    c: float

    def __call__(self, x: float) -> float:
        return (self.a * x + self.b) * x + self.c


@dataclass(frozen=True)
class ProjectileEquation:
    """Trajectory of a launch, parametric in t and, when defined, explicit in x"""

    x0: float  # m
    y0: float  # m
    vx0: float  # m/s
    vy0: float  # m/s
    g: float  # m/s²
    explicit: Optional[ExplicitTrajectory]
    undefined_reason: Optional[str] = None
    available: bool = True

    @property
    def is_defined(self) -> bool:
        """Whether y(x) exists for this launch"""
        return self.explicit is not None

    def position_at(self, t: float) -> Tuple[float, float]:
        """
        Position t seconds after launch

        Args:
            t: Time since launch (s)

        Returns:
            Tuple of (x, y) in meters
        """
        x = self.x0 + self.vx0 * t
        y = self.y0 + self.vy0 * t - 0.5 * self.g * t * t
        return x, y

    def y_at(self, x: float) -> float:
        """
        Height of the trajectory at horizontal position x

        Raises:
            UndefinedTrajectoryError: For vertical or unavailable launches
        """
        if self.explicit is None:
            raise UndefinedTrajectoryError(self.undefined_reason or VERTICAL_TEXT)
        return self.explicit(x)

    def parametric_text(self) -> str:
        if not self.available:
            return UNAVAILABLE_TEXT
        return (
            f"x(t) = {format_number(self.x0)} + {format_number(self.vx0)} t, "
            f"y(t) = {format_number(self.y0)} + {format_number(self.vy0)} t"
            f" - 0.5 * {format_number(self.g)} t^2"
        )

    def explicit_text(self) -> str:
        """y(x) written about the launch point, or the reason it is undefined"""
        if self.explicit is None:
            return self.undefined_reason or VERTICAL_TEXT
        launch_slope = self.vy0 / self.vx0
        drop = self.g / (2 * self.vx0 * self.vx0)
        x0 = format_number(self.x0)
        return (
            f"y(x) = {format_number(self.y0)} + {format_number(launch_slope)} (x - {x0})"
            f" - {format_number(drop)} (x - {x0})^2"
        )


class ProjectileEquationSolver:
    """Derives the trajectory equations for a launch; holds no state between calls"""

    def __init__(self, epsilon: float = VERTICAL_EPSILON) -> None:
        """
        Initialize solver

        Args:
            epsilon: Smallest |vx0| (m/s) for which y(x) is derived
        """
        self.epsilon = epsilon

    def solve(self, x0: float, y0: float, vx0: float, vy0: float, g: float) -> ProjectileEquation:
        """
        Parametric and explicit trajectory for a launch

        With A = -g / (2 vx0²) the explicit form is
        y(x) = A x² + (vy0/vx0 - 2 A x0) x + (y0 - (vy0/vx0) x0 + A x0²),
        which is y0 + (vy0/vx0)(x - x0) + A (x - x0)² expanded.

        Args:
            x0: Launch x (m)
            y0: Launch height (m)
            vx0: Horizontal launch velocity (m/s)
            vy0: Vertical launch velocity (m/s)
            g: Gravitational acceleration (m/s²)

        Returns:
            ProjectileEquation; explicit is None when |vx0| < epsilon or any input is non-finite
        """
        if not all(math.isfinite(v) for v in (x0, y0, vx0, vy0, g)):
            return ProjectileEquation(
                x0, y0, vx0, vy0, g, explicit=None, undefined_reason=UNAVAILABLE_TEXT, available=False
            )

        if abs(vx0) < self.epsilon:
            return ProjectileEquation(x0, y0, vx0, vy0, g, explicit=None, undefined_reason=VERTICAL_TEXT)

        launch_slope = vy0 / vx0
        a = -g / (2 * vx0 * vx0)
        b = launch_slope - 2 * a * x0
        c = y0 - launch_slope * x0 + a * x0 * x0
        return ProjectileEquation(x0, y0, vx0, vy0, g, explicit=ExplicitTrajectory(a, b, c))
