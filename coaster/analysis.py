"""
Ride analysis functions
"""

from typing import Any, Dict

import numpy as np

from coaster.params import SimulationParameters
from coaster.state import Phase
from coaster.track import TrackProfile


class RideAnalyzer:
    """Summarises a recorded ride: speeds, G-forces, flight and energy accuracy"""

    def __init__(self, track: TrackProfile, params: SimulationParameters) -> None:
        """
        Initialize ride analyzer

        Args:
            track: Track profile the ride was recorded on
            params: Parameters the ride was recorded with
        """
        self.track = track
        self.params = params
        self.high_g_threshold = 5.0  # Gs, sustained rides usually stay below
        self.airtime_threshold = 0.0  # Gs, below this riders leave the seat

    def analyze(self, t: np.ndarray, state: np.ndarray, phases: np.ndarray) -> Dict[str, Any]:
        """
        Analyze one recorded ride

        Args:
            t: Time array
            state: State history [N x 7] with columns x, y, vx, vy, speed, g_force, arc_length
            phases: Phase value for each sample

        Returns:
            Dictionary with analysis results
        """
        x = state[:, 0]
        y = state[:, 1]
        speed = state[:, 4]
        g_force = state[:, 5]
        arc_length = state[:, 6]

        on_track = phases == Phase.ON_TRACK.value
        in_flight = phases == Phase.FLIGHT.value
        landed = phases == Phase.LANDED.value

        # G-forces are only informative on the track; elsewhere they are exactly 1
        track_g = g_force[on_track]
        max_g = float(np.max(track_g)) if track_g.size else 1.0
        min_g = float(np.min(track_g)) if track_g.size else 1.0

        launched = bool(np.any(in_flight))
        has_landed = bool(np.any(landed))
        launch_idx = int(np.argmax(in_flight)) if launched else None
        land_idx = int(np.argmax(landed)) if has_landed else None

        launch_speed = float(speed[launch_idx]) if launch_idx is not None else 0.0
        track_time = float(t[launch_idx]) if launch_idx is not None else float(t[-1])
        flight_time = (
            float(t[land_idx] - t[launch_idx])
            if launch_idx is not None and land_idx is not None
            else 0.0
        )
        landing_x = float(x[land_idx]) if land_idx is not None else None
        flight_apex = float(np.max(y[in_flight])) if launched else None

        # Mechanical energy per unit mass: on the track against the energy ceiling,
        # in flight against the launch sample. The landing sample is at rest and excluded.
        g = self.params.g
        reference_energy = g * self.params.energy_reference_height
        energy = 0.5 * speed ** 2 + g * y
        errors = np.abs(energy[on_track] - reference_energy)
        if launch_idx is not None:
            errors = np.concatenate([errors, np.abs(energy[in_flight] - energy[launch_idx])])
        energy_drift = (
            float(np.max(errors)) / reference_energy
            if errors.size and reference_energy > 0
            else 0.0
        )

        # Sum of v·dt against the quadrature length of the track
        track_arc = self.track.arc_length()
        simulated_track_arc = float(arc_length[launch_idx]) if launch_idx is not None else None
        arc_length_error = (
            abs(simulated_track_arc - track_arc) / track_arc
            if simulated_track_arc is not None and track_arc > 0
            else None
        )

        return {
            "max_g": max_g,
            "min_g": min_g,
            "max_speed": float(np.max(speed)) if speed.size else 0.0,
            "max_speed_kph": float(np.max(speed)) * 3.6 if speed.size else 0.0,
            "launched": launched,
            "landed": has_landed,
            "launch_speed": launch_speed,
            "track_time": track_time,
            "flight_time": flight_time,
            "landing_x": landing_x,
            "flight_apex": flight_apex,
            "energy_drift": energy_drift,
            "track_arc_length": track_arc,
            "simulated_track_arc_length": simulated_track_arc,
            "arc_length_error": arc_length_error,
            "high_g": max_g > self.high_g_threshold,
            "airtime": min_g < self.airtime_threshold,
        }
