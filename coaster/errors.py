"""
Exception types raised by the coaster simulation
"""


class CoasterError(Exception):
    """Base class for coaster simulation errors"""


class ConfigurationError(CoasterError, ValueError):
    """Rejected parameter value, or a configuration the track cannot support"""


class UndefinedTrajectoryError(CoasterError, ArithmeticError):
    """Explicit y(x) requested for a launch that has none (vertical or non-finite)"""


class PhaseInvariantError(CoasterError, RuntimeError):
    """Tick arrived while the ride holds an unknown phase"""
