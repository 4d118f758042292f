"""
Plain value types shared by the sample and route generators.

Nothing here touches the database. The generators take a WorkoutParameters
snapshot and return lists of Sample / RoutePoint; callers (the creator and
the health store builders) handle persistence.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, List

COUNT_UNIT = "count"


def as_utc(value: datetime) -> datetime:
    """Aware UTC copy of `value`. Naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UnsupportedActivityTypeError(ValueError):
    """Raised when a generator is asked for an activity type it has no policy for."""

    def __init__(self, activity_type: Any):
        super().__init__(f"Unhandled activity type: {activity_type!r}")
        self.activity_type = activity_type


class ActivityType(str, Enum):
    WALKING = "walking"
    RUNNING = "running"
    HIKING = "hiking"
    CYCLING = "cycling"
    SWIMMING = "swimming"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class LocationType(str, Enum):
    OUTDOOR = "outdoor"
    INDOOR = "indoor"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class SwimmingLocationType(str, Enum):
    POOL = "pool"
    OPEN_WATER = "open_water"

    @property
    def label(self) -> str:
        return "Open water" if self is SwimmingLocationType.OPEN_WATER else "Pool"


class LengthUnit(str, Enum):
    METER = "meter"
    YARD = "yard"


class QuantityKind(str, Enum):
    DISTANCE_WALKING_RUNNING = "distance_walking_running"
    DISTANCE_CYCLING = "distance_cycling"
    DISTANCE_SWIMMING = "distance_swimming"
    STEP_COUNT = "step_count"
    SWIMMING_STROKE_COUNT = "swimming_stroke_count"

    @property
    def is_distance(self) -> bool:
        return self.value.startswith("distance_")


# Picker order
AVAILABLE_ACTIVITY_TYPES: List[ActivityType] = [
    ActivityType.WALKING,
    ActivityType.RUNNING,
    ActivityType.SWIMMING,
    ActivityType.CYCLING,
    ActivityType.HIKING,
]
AVAILABLE_LOCATION_TYPES: List[LocationType] = [LocationType.OUTDOOR, LocationType.INDOOR]
AVAILABLE_SWIMMING_LOCATION_TYPES: List[SwimmingLocationType] = [
    SwimmingLocationType.POOL,
    SwimmingLocationType.OPEN_WATER,
]
AVAILABLE_LAP_LENGTH_UNITS: List[LengthUnit] = [LengthUnit.METER, LengthUnit.YARD]


@dataclass(frozen=True)
class WorkoutWindow:
    """Start and end instant of a workout, in UTC. End is always later than start."""

    start: datetime
    end: datetime

    def __post_init__(self):
        object.__setattr__(self, "start", as_utc(self.start))
        object.__setattr__(self, "end", as_utc(self.end))
        if self.end <= self.start:
            raise ValueError(
                f"Workout end ({self.end.isoformat()}) must be after start "
                f"({self.start.isoformat()})"
            )

    @property
    def duration_seconds(self) -> float:
        return (self.end - self.start).total_seconds()

    def at(self, offset_seconds: float) -> datetime:
        """Instant `offset_seconds` after start; the full duration maps onto `end` exactly."""
        if offset_seconds >= self.duration_seconds:
            return self.end
        return self.start + timedelta(seconds=offset_seconds)


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self):
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise ValueError(f"Coordinate must be finite, got {self.latitude}, {self.longitude}")


@dataclass(frozen=True)
class SwimmingParameters:
    location_type: SwimmingLocationType = SwimmingLocationType.POOL
    lap_length: float = 25.0
    unit: LengthUnit = LengthUnit.METER

    def __post_init__(self):
        if not (math.isfinite(self.lap_length) and self.lap_length > 0):
            raise ValueError(f"Lap length must be a positive number, got {self.lap_length}")


@dataclass(frozen=True)
class WorkoutParameters:
    """Everything the generators need, captured by value at the start of a run."""

    activity_type: ActivityType
    location_type: LocationType
    window: WorkoutWindow
    origin: Coordinate = field(default_factory=lambda: Coordinate(50.1234, 8.1234))
    swimming: SwimmingParameters = field(default_factory=SwimmingParameters)

    @property
    def creates_route(self) -> bool:
        return (
            self.location_type == LocationType.OUTDOOR
            and self.activity_type != ActivityType.SWIMMING
        )


@dataclass(frozen=True)
class Sample:
    """One quantity measurement covering [start, end] of the workout."""

    kind: QuantityKind
    value: float
    unit: str
    start: datetime
    end: datetime

    @property
    def duration_seconds(self) -> float:
        return (self.end - self.start).total_seconds()


@dataclass(frozen=True)
class RoutePoint:
    latitude: float
    longitude: float
    timestamp: datetime
