"""Generation audit log model."""
from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from workoutgen.db.types import UTCDateTime, utc_now


class GenerationLog(SQLModel, table=True):
    """Records each create-workout attempt for audit and debugging."""

    id: Optional[int] = Field(default=None, primary_key=True)
    started_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
    finished_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    status: str = "running"  # "running", "success", "partial", "error"
    activity_type: str
    location_type: str
    workout_id: Optional[int] = None
    samples_written: int = 0
    route_points_written: int = 0
    error_message: Optional[str] = None
