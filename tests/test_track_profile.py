"""
Unit tests for the track profile.

Tests height, slope and curvature consistency, continuity at segment
boundaries, out-of-range behaviour and the derived track measurements.
"""

import math

import numpy as np
import pytest

from coaster import TrackProfile, TrackSegment


class TestTrackProfile:
    """Test suite for TrackProfile"""

    @pytest.fixture
    def track(self) -> TrackProfile:
        """Create the reference track"""
        return TrackProfile()

    def test_reference_layout(self, track: TrackProfile) -> None:
        """Test the reference track spans 0 to 35 with boundaries at 5, 15, 25"""
        assert track.start_x == 0.0
        assert track.end_x == 35.0
        assert track.boundaries == (5.0, 15.0, 25.0)
        assert track.start_height == pytest.approx(20.0)
        assert track.end_height == pytest.approx(12.0)

    def test_known_heights(self, track: TrackProfile) -> None:
        """Test heights at the peaks and valleys"""
        assert track.height(0.0) == pytest.approx(20.0)
        assert track.height(10.0) == pytest.approx(8.0)
        assert track.height(20.0) == pytest.approx(20.0)
        assert track.height(30.0) == pytest.approx(4.0)

    def test_slope_matches_numerical_derivative(self, track: TrackProfile) -> None:
        """Test slope equals the central difference of height inside every segment"""
        h = 1e-5
        for segment in track.segments:
            for x in np.linspace(segment.start + 0.01, segment.end - 0.01, 25):
                numerical = (track.height(x + h) - track.height(x - h)) / (2 * h)
                assert abs(track.slope(x) - numerical) < 1e-4

    def test_curvature_matches_numerical_derivative(self, track: TrackProfile) -> None:
        """Test curvature equals the central difference of slope inside every segment"""
        h = 1e-5
        for segment in track.segments:
            for x in np.linspace(segment.start + 0.01, segment.end - 0.01, 25):
                numerical = (track.slope(x + h) - track.slope(x - h)) / (2 * h)
                assert abs(track.curvature(x) - numerical) < 1e-4

    def test_height_continuous_at_boundaries(self, track: TrackProfile) -> None:
        """Test there is no jump in height where segments meet"""
        for boundary in track.boundaries:
            assert abs(track.height(boundary - 1e-9) - track.height(boundary)) < 1e-6

    def test_slope_continuous_at_boundaries(self, track: TrackProfile) -> None:
        """Test there is no jump in slope where segments meet"""
        for boundary in track.boundaries:
            assert abs(track.slope(boundary - 1e-9) - track.slope(boundary)) < 1e-6

    def test_boundaries_belong_to_next_segment(self, track: TrackProfile) -> None:
        """Test segments are half-open so a boundary maps to the segment that starts there"""
        for boundary in track.boundaries:
            assert track.segment_for(boundary).start == boundary

    def test_last_segment_is_closed(self, track: TrackProfile) -> None:
        """Test the track end belongs to the last segment"""
        assert track.segment_for(35.0) is track.segments[-1]
        assert track.height(35.0) == pytest.approx(12.0)
        assert track.slope(35.0) == pytest.approx(3.2)

    @pytest.mark.parametrize("x", [-1.0, -1e-12, 35.0001, 100.0, math.inf, -math.inf, math.nan])
    def test_out_of_range_returns_fallback(self, track: TrackProfile, x: float) -> None:
        """Test inputs outside the track give the fallback height and a flat profile"""
        assert track.height(x) == track.fallback_height == pytest.approx(20.0)
        assert track.slope(x) == 0.0
        assert track.curvature(x) == 0.0

    def test_returns_python_floats(self, track: TrackProfile) -> None:
        """Test the profile returns plain floats"""
        assert type(track.height(3.0)) is float
        assert type(track.slope(3.0)) is float
        assert type(track.curvature(3.0)) is float

    def test_peak_and_lowest_heights(self, track: TrackProfile) -> None:
        """Test the reachable extremes of the reference track"""
        assert track.peak_height() == pytest.approx(20.0, abs=1e-9)
        assert track.lowest_height() == pytest.approx(4.0, abs=1e-6)

    def test_arc_length_of_straight_segment(self) -> None:
        """Test arc length of a straight 3-4-5 ramp"""
        ramp = TrackProfile([TrackSegment(0.0, 3.0, origin=0.0, coefficients=(0.0, 4.0 / 3.0), closed=True)])

        assert ramp.arc_length() == pytest.approx(5.0, rel=1e-9)
        assert ramp.arc_length(3.0, 0.0) == 0.0

    def test_arc_length_exceeds_horizontal_span(self, track: TrackProfile) -> None:
        """Test the curved track is longer than its horizontal extent"""
        assert track.arc_length() > 35.0
        assert track.arc_length(0.0, 5.0) + track.arc_length(5.0, 35.0) == pytest.approx(track.arc_length())

    def test_sample_shape(self, track: TrackProfile) -> None:
        """Test sampling returns matching arrays over the track"""
        xs, heights = track.sample(101)

        assert xs.shape == (101,)
        assert heights.shape == (101,)
        assert xs[0] == 0.0
        assert xs[-1] == 35.0
        assert heights[-1] == pytest.approx(12.0)

    def test_rejects_gaps_between_segments(self) -> None:
        """Test segments must be contiguous"""
        with pytest.raises(ValueError):
            TrackProfile([
                TrackSegment(0.0, 1.0, origin=0.0, coefficients=(1.0,)),
                TrackSegment(2.0, 3.0, origin=0.0, coefficients=(1.0,), closed=True),
            ])

    def test_rejects_open_final_segment(self) -> None:
        """Test the final segment must be closed"""
        with pytest.raises(ValueError):
            TrackProfile([TrackSegment(0.0, 1.0, origin=0.0, coefficients=(1.0,))])

    def test_rejects_empty_interval(self) -> None:
        """Test a segment must have positive width"""
        with pytest.raises(ValueError):
            TrackSegment(1.0, 1.0, origin=0.0, coefficients=(1.0,), closed=True)
