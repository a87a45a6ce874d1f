"""
Test suite for the Roller Coaster Launch Simulation.

This package contains unit tests organized by component:
- test_track_profile.py: Tests for TrackProfile height, slope and curvature
- test_simulation_params.py: Tests for SimulationParameters and validation
- test_integrator.py: Tests for the kinematic integrator
- test_projectile_equation.py: Tests for the launch equation solver
- test_state_machine.py: Tests for ride phases and transitions
- test_camera_bounds.py: Tests for the viewport bounds policy
- test_simulator.py: Tests for CoasterSimulator setters, pause and run
- test_ride_analysis.py: Tests for ride analysis
- test_integration.py: Integration tests for the launch speed sweep
"""
