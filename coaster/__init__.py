"""
Roller Coaster Launch Simulation

This package simulates a cart riding an analytic track under gravity, launching
off the track end into projectile flight, landing, and returning to the start.
"""

from coaster.analysis import RideAnalyzer
from coaster.camera import CameraBounds, CameraBoundsTracker, CameraConfig, CameraPolicy
from coaster.errors import (
    CoasterError,
    ConfigurationError,
    PhaseInvariantError,
    UndefinedTrajectoryError,
)
from coaster.launch_sweep import run_launch_sweep
from coaster.machine import LandingPolicy, LaunchEvent, MachineConfig, RideStateMachine
from coaster.params import SimulationParameters
from coaster.projectile import ExplicitTrajectory, ProjectileEquation, ProjectileEquationSolver
from coaster.simulator import CoasterSimulator
from coaster.state import LaunchSnapshot, Phase, RideState, RideStateSnapshot
from coaster.track import TrackProfile, TrackSegment

__all__ = [
    "CameraBounds",
    "CameraBoundsTracker",
    "CameraConfig",
    "CameraPolicy",
    "CoasterError",
    "CoasterSimulator",
    "ConfigurationError",
    "ExplicitTrajectory",
    "LandingPolicy",
    "LaunchEvent",
    "LaunchSnapshot",
    "MachineConfig",
    "Phase",
    "PhaseInvariantError",
    "ProjectileEquation",
    "ProjectileEquationSolver",
    "RideAnalyzer",
    "RideState",
    "RideStateMachine",
    "RideStateSnapshot",
    "SimulationParameters",
    "TrackProfile",
    "TrackSegment",
    "UndefinedTrajectoryError",
    "run_launch_sweep",
]
