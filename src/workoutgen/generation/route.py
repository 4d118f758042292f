"""
Simulated GPS route for outdoor workouts.

The route is a straight line from the start coordinate with one point per
elapsed second. A random per-second heading is drawn once per route as a
pair of non-negative degree deltas, so the track never reverses:

    going north/south, 1 m is about 0.000009 degrees of latitude
    going east/west,   1 m is about 0.000014 degrees of longitude

Each activity scales that 1 m step by a rough speed factor.
"""
import random
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from workoutgen.generation.types import (
    ActivityType,
    Coordinate,
    LocationType,
    RoutePoint,
    UnsupportedActivityTypeError,
    WorkoutParameters,
)

MAX_DELTA_LATITUDE = 0.000009
MAX_DELTA_LONGITUDE = 0.000014

# Meters travelled per second, roughly
SPEED_MULTIPLIERS: Dict[ActivityType, float] = {
    ActivityType.WALKING: 1.7,
    ActivityType.RUNNING: 2.6,
    ActivityType.HIKING: 0.9,
    ActivityType.CYCLING: 4.9,
}


def create_sample_route(
    parameters: WorkoutParameters,
    rng: Optional[random.Random] = None,
) -> List[RoutePoint]:
    """Route for the whole workout window, starting at parameters.origin."""
    return route_points(
        activity_type=parameters.activity_type,
        location_type=parameters.location_type,
        duration_seconds=parameters.window.duration_seconds,
        origin=parameters.origin,
        start=parameters.window.start,
        rng=rng,
    )


def route_points(
    activity_type: ActivityType,
    location_type: LocationType,
    duration_seconds: float,
    origin: Coordinate,
    start: datetime,
    rng: Optional[random.Random] = None,
) -> List[RoutePoint]:
    """
    Generate floor(duration_seconds) + 1 route points from `origin`.

    Args:
        activity_type: Selects the speed multiplier.
        location_type: Only outdoor workouts get a route.
        duration_seconds: Workout length; fractional seconds are ignored.
        origin: First point of the route, used unmodified.
        start: Timestamp of the first point; each later point is one second on.
        rng: Random source for the heading draw.

    Returns:
        The route, or an empty list for swimming and indoor workouts.

    Raises:
        UnsupportedActivityTypeError: for activity types without a multiplier.
        ValueError: if duration_seconds is negative.
    """
    if duration_seconds < 0:
        raise ValueError(f"Duration must not be negative, got {duration_seconds}")

    try:
        multiplier = SPEED_MULTIPLIERS.get(activity_type)
    except TypeError:
        multiplier = None
    if multiplier is None and activity_type != ActivityType.SWIMMING:
        raise UnsupportedActivityTypeError(activity_type)

    # Swimming is supported but never gets a route
    if multiplier is None or location_type != LocationType.OUTDOOR:
        return []

    rng = rng or random.Random()
    delta_lat = rng.uniform(0.0, MAX_DELTA_LATITUDE) * multiplier
    delta_lon = rng.uniform(0.0, MAX_DELTA_LONGITUDE) * multiplier

    latitude, longitude = origin.latitude, origin.longitude
    points = [RoutePoint(latitude, longitude, start)]
    for second in range(1, int(duration_seconds) + 1):
        latitude += delta_lat
        longitude += delta_lon
        points.append(RoutePoint(latitude, longitude, start + timedelta(seconds=second)))

    return points
