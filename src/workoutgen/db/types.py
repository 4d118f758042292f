"""
UTC datetime column type.

SQLite has no timezone-aware datetime storage. Instants are written as naive
UTC and handed back with tzinfo=UTC, so callers only ever see aware values.
"""
from datetime import datetime, timezone

from sqlalchemy.types import DateTime, TypeDecorator

from workoutgen.generation.types import as_utc


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return as_utc(value).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)
