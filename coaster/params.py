"""
Simulation parameters and their validation
"""

import math
from dataclasses import dataclass

from coaster.errors import ConfigurationError

DEFAULT_GRAVITY = 9.81  # m/s²
DEFAULT_INITIAL_SPEED = 0.5  # m/s


@dataclass
class SimulationParameters:
    """Physical parameters of the ride"""

    g: float = DEFAULT_GRAVITY  # m/s²
    v0: float = DEFAULT_INITIAL_SPEED  # m/s at the track start
    track_start_height: float = 20.0  # m
    g_max: float = 1e9  # m/s²
    v0_max: float = 1e9  # m/s

    def __post_init__(self) -> None:
        """Validate the initial values"""
        self.g = validate_gravity(self.g, self.g_max)
        self.v0 = validate_initial_speed(self.v0, self.v0_max)

    @property
    def energy_reference_height(self) -> float:
        """
        Height at which the cart would be at rest with the same total energy

        Computed on every access, so it always follows the current g and v0.
        """
        return energy_reference_height(self.track_start_height, self.v0, self.g)


def energy_reference_height(track_start_height: float, v0: float, g: float) -> float:
    """
    Energy ceiling per unit mass expressed as a height

    Args:
        track_start_height: Height of the track start (m)
        v0: Initial speed at the track start (m/s)
        g: Gravitational acceleration (m/s²)

    Returns:
        track_start_height + v0² / (2g) in meters
    """
    return track_start_height + (v0 * v0) / (2 * g)


def _as_float(value: object, name: str) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc


def validate_gravity(g: float, g_max: float) -> float:
    """Return g as a float if it lies in (0, g_max], otherwise raise ConfigurationError"""
    value = _as_float(g, "Gravity")
    if not math.isfinite(value) or value <= 0 or value > g_max:
        raise ConfigurationError(f"Gravity must be a finite value in (0, {g_max:g}], got {g!r}")
    return value


def validate_initial_speed(v0: float, v0_max: float) -> float:
    """Return v0 as a float if it lies in [0, v0_max], otherwise raise ConfigurationError"""
    value = _as_float(v0, "Initial speed")
    if not math.isfinite(value) or value < 0 or value > v0_max:
        raise ConfigurationError(f"Initial speed must be a finite value in [0, {v0_max:g}], got {v0!r}")
    return value
