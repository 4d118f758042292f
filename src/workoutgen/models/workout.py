"""Health store models: finished workouts, their quantity samples and routes."""
from datetime import datetime
from typing import List, Optional

from sqlmodel import Field, Relationship, SQLModel

from workoutgen.db.types import UTCDateTime, utc_now


class Workout(SQLModel, table=True):
    """One row per finished workout builder."""

    id: Optional[int] = Field(default=None, primary_key=True)
    activity_type: str = Field(index=True)  # "walking", "swimming", ...
    location_type: str  # "outdoor" / "indoor"
    start_time: datetime = Field(index=True, sa_type=UTCDateTime)
    end_time: datetime = Field(sa_type=UTCDateTime)
    duration_seconds: float

    # Totals summed from the samples, in the sample units
    total_distance: Optional[float] = None
    total_distance_unit: Optional[str] = None
    total_step_count: Optional[float] = None
    total_stroke_count: Optional[float] = None

    # Swimming configuration (None for other activities)
    swimming_location_type: Optional[str] = None
    lap_length: Optional[float] = None
    lap_length_unit: Optional[str] = None

    device: Optional[str] = None  # None means "this device"
    metadata_json: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    # Relationships
    samples: List["WorkoutSample"] = Relationship(back_populates="workout")
    routes: List["WorkoutRoute"] = Relationship(back_populates="workout")


class WorkoutSample(SQLModel, table=True):
    """One quantity sample (distance, steps or strokes) over a slice of a workout."""

    id: Optional[int] = Field(default=None, primary_key=True)
    workout_id: int = Field(foreign_key="workout.id", index=True)
    kind: str  # QuantityKind value
    value: float
    unit: str  # "meter", "yard", "count"
    start_time: datetime = Field(sa_type=UTCDateTime)
    end_time: datetime = Field(sa_type=UTCDateTime)

    # Relationship
    workout: Optional[Workout] = Relationship(back_populates="samples")


class WorkoutRoute(SQLModel, table=True):
    """A GPS route attached to a finished workout."""

    id: Optional[int] = Field(default=None, primary_key=True)
    workout_id: int = Field(foreign_key="workout.id", index=True)
    point_count: int = 0
    metadata_json: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)

    # Relationships
    workout: Optional[Workout] = Relationship(back_populates="routes")
    locations: List["RouteLocation"] = Relationship(back_populates="route")


class RouteLocation(SQLModel, table=True):
    """One route point, roughly one per second of the workout."""

    id: Optional[int] = Field(default=None, primary_key=True)
    route_id: int = Field(foreign_key="workoutroute.id", index=True)
    point_index: int
    latitude: float  # decimal degrees
    longitude: float
    timestamp: datetime = Field(sa_type=UTCDateTime)

    # Relationship
    route: Optional[WorkoutRoute] = Relationship(back_populates="locations")
