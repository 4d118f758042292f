"""Tests for the simulated GPS route generator."""
import math
import random
from dataclasses import replace
from datetime import timedelta

import pytest

from conftest import ORIGIN, WORKOUT_START, make_parameters
from workoutgen.generation.route import (
    MAX_DELTA_LATITUDE,
    MAX_DELTA_LONGITUDE,
    SPEED_MULTIPLIERS,
    create_sample_route,
    route_points,
)
from workoutgen.generation.types import (
    ActivityType,
    LocationType,
    UnsupportedActivityTypeError,
)


class MaxRandom:
    """Always draws the high end."""

    def uniform(self, a, b):
        return b


OUTDOOR_ACTIVITIES = [
    ActivityType.WALKING,
    ActivityType.RUNNING,
    ActivityType.HIKING,
    ActivityType.CYCLING,
]


class TestPointCount:
    @pytest.mark.parametrize("activity_type", OUTDOOR_ACTIVITIES)
    @pytest.mark.parametrize("duration", [0.0, 0.9, 1.0, 59.5, 600.0])
    def test_one_point_per_whole_second_plus_origin(self, activity_type, duration):
        points = route_points(
            activity_type, LocationType.OUTDOOR, duration, ORIGIN, WORKOUT_START, random.Random(1)
        )
        assert len(points) == math.floor(duration) + 1

    def test_create_sample_route_uses_window_duration(self):
        params = make_parameters(activity_type=ActivityType.RUNNING, duration_seconds=125.5)
        assert len(create_sample_route(params, random.Random(1))) == 126


class TestNoRoute:
    @pytest.mark.parametrize("duration", [0.0, 10.0, 3600.0])
    def test_swimming_outdoor_is_empty(self, duration):
        points = route_points(
            ActivityType.SWIMMING, LocationType.OUTDOOR, duration, ORIGIN, WORKOUT_START
        )
        assert points == []

    @pytest.mark.parametrize("activity_type", OUTDOOR_ACTIVITIES + [ActivityType.SWIMMING])
    def test_indoor_is_empty(self, activity_type):
        params = make_parameters(
            activity_type=activity_type, location_type=LocationType.INDOOR, duration_seconds=3600
        )
        assert create_sample_route(params, random.Random(1)) == []

    def test_indoor_walking_ignores_duration(self):
        for duration in (1, 100, 10000):
            params = make_parameters(
                activity_type=ActivityType.WALKING,
                location_type=LocationType.INDOOR,
                duration_seconds=duration,
            )
            assert create_sample_route(params) == []


class TestGeometry:
    def test_first_point_is_origin(self):
        params = make_parameters(activity_type=ActivityType.CYCLING, duration_seconds=60)
        first = create_sample_route(params, random.Random(3))[0]
        assert (first.latitude, first.longitude) == (ORIGIN.latitude, ORIGIN.longitude)
        assert first.timestamp == WORKOUT_START

    def test_timestamps_advance_one_second(self):
        params = make_parameters(activity_type=ActivityType.HIKING, duration_seconds=30)
        points = create_sample_route(params, random.Random(3))
        for i, p in enumerate(points):
            assert p.timestamp == WORKOUT_START + timedelta(seconds=i)

    @pytest.mark.parametrize("activity_type", OUTDOOR_ACTIVITIES)
    def test_never_reverses(self, activity_type):
        params = make_parameters(activity_type=activity_type, duration_seconds=300)
        points = create_sample_route(params, random.Random(17))
        for prev, nxt in zip(points, points[1:]):
            assert nxt.latitude >= prev.latitude
            assert nxt.longitude >= prev.longitude

    @pytest.mark.parametrize("activity_type", OUTDOOR_ACTIVITIES)
    def test_constant_step_scaled_by_activity(self, activity_type):
        params = make_parameters(activity_type=activity_type, duration_seconds=100)
        points = create_sample_route(params, MaxRandom())
        multiplier = SPEED_MULTIPLIERS[activity_type]
        last = points[-1]
        assert last.latitude - ORIGIN.latitude == pytest.approx(100 * MAX_DELTA_LATITUDE * multiplier)
        assert last.longitude - ORIGIN.longitude == pytest.approx(100 * MAX_DELTA_LONGITUDE * multiplier)

    def test_step_stays_within_one_meter_times_multiplier(self):
        params = make_parameters(activity_type=ActivityType.RUNNING, duration_seconds=10)
        points = create_sample_route(params, random.Random(99))
        step_lat = points[1].latitude - points[0].latitude
        step_lon = points[1].longitude - points[0].longitude
        assert 0 <= step_lat <= MAX_DELTA_LATITUDE * 2.6 + 1e-12
        assert 0 <= step_lon <= MAX_DELTA_LONGITUDE * 2.6 + 1e-12

    def test_multipliers(self):
        assert SPEED_MULTIPLIERS == {
            ActivityType.WALKING: 1.7,
            ActivityType.RUNNING: 2.6,
            ActivityType.HIKING: 0.9,
            ActivityType.CYCLING: 4.9,
        }


class TestErrors:
    def test_unsupported_activity_rejected(self):
        params = replace(make_parameters(), activity_type="rowing")
        with pytest.raises(UnsupportedActivityTypeError):
            create_sample_route(params, random.Random(0))

    def test_unsupported_activity_rejected_indoors_too(self):
        with pytest.raises(UnsupportedActivityTypeError):
            route_points("rowing", LocationType.INDOOR, 60, ORIGIN, WORKOUT_START)

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            route_points(ActivityType.WALKING, LocationType.OUTDOOR, -1, ORIGIN, WORKOUT_START)
