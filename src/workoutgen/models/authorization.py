"""Sharing authorization grants, one row per health data type."""
from datetime import datetime

from sqlmodel import Field, SQLModel

from workoutgen.db.types import UTCDateTime, utc_now


class SharingAuthorization(SQLModel, table=True):
    """Absence of a row means the user was never asked for that type."""

    data_type: str = Field(primary_key=True)  # HealthDataType value
    status: str  # "sharing_denied" / "sharing_authorized"
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCDateTime)
