"""
Launch speed sweep
"""

from typing import Any, Dict

from coaster.analysis import RideAnalyzer
from coaster.params import DEFAULT_GRAVITY, SimulationParameters
from coaster.simulator import CoasterSimulator
from coaster.track import TrackProfile


def run_launch_sweep(
    initial_speeds: list[float],
    gravity: float = DEFAULT_GRAVITY,
    duration: float = 60.0,
    dt: float = 0.01,
) -> Dict[float, Dict[str, Any]]:
    """
    Ride once from the start to the landing for each initial speed

    Args:
        initial_speeds: Initial speeds at the track start (m/s)
        gravity: Gravitational acceleration (m/s²)
        duration: Maximum simulated time per ride (s)
        dt: Time step (s)

    Returns:
        Dictionary with results for each initial speed
    """
    track = TrackProfile()
    results: Dict[float, Dict[str, Any]] = {}

    for v0 in initial_speeds:
        params = SimulationParameters(g=gravity, v0=v0, track_start_height=track.start_height)
        simulator = CoasterSimulator(params, track=track)

        t, state, phases = simulator.run(duration=duration, dt=dt, stop_at_landing=True)
        analysis = RideAnalyzer(track, params).analyze(t, state, phases)

        results[v0] = {
            "time": t,
            "state": state,
            "phases": phases,
            "analysis": analysis,
            "equation": simulator.last_equation,
            "simulator": simulator,
        }

    return results


if __name__ == "__main__":
    speeds = [0.5, 2.0, 5.0, 10.0]  # m/s
    results = run_launch_sweep(speeds)

    print("Launch Sweep Results:")
    print("-" * 80)
    for v0, data in results.items():
        analysis = data["analysis"]
        equation = data["equation"]
        print(f"\nInitial speed: {v0} m/s")
        print(f"  Max G-force: {analysis['max_g']:.2f} Gs")
        print(f"  Min G-force: {analysis['min_g']:.2f} Gs")
        print(f"  Max speed: {analysis['max_speed_kph']:.1f} km/h")
        print(f"  Launch speed: {analysis['launch_speed']:.2f} m/s")
        print(f"  Flight time: {analysis['flight_time']:.2f} s")
        if analysis["landing_x"] is not None:
            print(f"  Landing x: {analysis['landing_x']:.2f} m")
        print(f"  Energy drift: {analysis['energy_drift']*100:.3f}%")
        if equation is not None:
            print(f"  {equation.parametric_text()}")
            print(f"  {equation.explicit_text()}")
