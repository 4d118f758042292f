"""
Device-local health data store.

Stands in for the platform health database: it keeps sharing
authorization per data type and is the persistence target of the workout
and route builders (see workoutgen.health.builders). Everything lives in
SQLite through SQLModel.

The public API is async because the real store is a long-latency,
I/O-bound collaborator. The SQLModel calls are synchronous, so they run in
the default thread pool executor and never block the event loop.
"""
import asyncio
import logging
from enum import Enum
from typing import Iterable

from sqlmodel import Session

from workoutgen.db.types import utc_now
from workoutgen.generation.types import QuantityKind
from workoutgen.models.authorization import SharingAuthorization

logger = logging.getLogger(__name__)

METADATA_KEY_TIME_ZONE = "HKTimeZone"


class HealthStoreError(RuntimeError):
    """Raised when a health store call fails."""


class HealthDataType(str, Enum):
    WORKOUT = "workout"
    WORKOUT_ROUTE = "workout_route"
    ACTIVITY_SUMMARY = "activity_summary"
    DISTANCE_WALKING_RUNNING = QuantityKind.DISTANCE_WALKING_RUNNING.value
    DISTANCE_CYCLING = QuantityKind.DISTANCE_CYCLING.value
    DISTANCE_SWIMMING = QuantityKind.DISTANCE_SWIMMING.value
    STEP_COUNT = QuantityKind.STEP_COUNT.value
    SWIMMING_STROKE_COUNT = QuantityKind.SWIMMING_STROKE_COUNT.value


class AuthorizationStatus(str, Enum):
    NOT_DETERMINED = "not_determined"
    SHARING_DENIED = "sharing_denied"
    SHARING_AUTHORIZED = "sharing_authorized"


# Types the workout creator writes
WORKOUT_SHARE_TYPES = frozenset({
    HealthDataType.WORKOUT,
    HealthDataType.WORKOUT_ROUTE,
    HealthDataType.DISTANCE_WALKING_RUNNING,
    HealthDataType.DISTANCE_CYCLING,
    HealthDataType.DISTANCE_SWIMMING,
    HealthDataType.STEP_COUNT,
    HealthDataType.SWIMMING_STROKE_COUNT,
})
WORKOUT_READ_TYPES = WORKOUT_SHARE_TYPES | {HealthDataType.ACTIVITY_SUMMARY}


class HealthStore:
    """
    SQLite-backed health store.

    Usage:
        store = HealthStore(engine)
        await store.request_authorization(WORKOUT_SHARE_TYPES, WORKOUT_READ_TYPES)
        if store.authorization_status(HealthDataType.WORKOUT) == AuthorizationStatus.SHARING_AUTHORIZED:
            builder = WorkoutBuilder(store, configuration)
    """

    def __init__(self, engine, auto_approve: bool = True):
        """
        Args:
            engine: SQLAlchemy engine (SQLModel create_engine result).
            auto_approve: Answer for authorization requests. The real store
                          asks the user; this one grants (True) or denies
                          (False) every newly requested share type.
        """
        self.engine = engine
        self.auto_approve = auto_approve

    def is_health_data_available(self) -> bool:
        """The local store is always present."""
        return True

    # ── Authorization ─────────────────────────────────────────────────────────

    def authorization_status(self, data_type) -> AuthorizationStatus:
        """Sharing status for one data type. Never-requested types are not_determined."""
        key = HealthDataType(data_type).value
        with Session(self.engine) as s:
            grant = s.get(SharingAuthorization, key)
            if grant is None:
                return AuthorizationStatus.NOT_DETERMINED
            return AuthorizationStatus(grant.status)

    def is_sharing_authorized(self, data_type) -> bool:
        return self.authorization_status(data_type) == AuthorizationStatus.SHARING_AUTHORIZED

    async def request_authorization(self, share: Iterable, read: Iterable) -> bool:
        """
        Ask for permission to write `share` and read `read`.

        Types that already have a decision keep it, the same way the platform
        only prompts once per type. Read access is never reported back, so
        nothing is recorded for `read`.

        Returns:
            True once the request has been answered (granted or denied).

        Raises:
            HealthStoreError: if nothing was requested or a type is unknown.
        """
        try:
            share_types = {HealthDataType(t) for t in share}
            read_types = {HealthDataType(t) for t in read}
        except ValueError as exc:
            raise HealthStoreError(str(exc)) from exc
        if not share_types and not read_types:
            raise HealthStoreError("Authorization request must include at least one type")

        await self.run_sync(self._record_decisions, share_types)
        return True

    def set_authorization_status(self, data_type, status: AuthorizationStatus) -> None:
        """Change a decision after the fact (the system settings toggle)."""
        key = HealthDataType(data_type).value
        with Session(self.engine) as s:
            grant = s.get(SharingAuthorization, key)
            if status == AuthorizationStatus.NOT_DETERMINED:
                if grant is not None:
                    s.delete(grant)
            elif grant is None:
                s.add(SharingAuthorization(data_type=key, status=status.value))
            else:
                grant.status = status.value
                grant.updated_at = utc_now()
                s.add(grant)
            s.commit()

    def _record_decisions(self, share_types) -> None:
        status = (
            AuthorizationStatus.SHARING_AUTHORIZED
            if self.auto_approve
            else AuthorizationStatus.SHARING_DENIED
        )
        with Session(self.engine) as s:
            for data_type in sorted(share_types, key=lambda t: t.value):
                if s.get(SharingAuthorization, data_type.value) is not None:
                    continue
                s.add(SharingAuthorization(data_type=data_type.value, status=status.value))
                logger.info("Sharing %s for %s", status.value, data_type.value)
            s.commit()

    # ── Executor ──────────────────────────────────────────────────────────────

    async def run_sync(self, fn, *args, **kwargs):
        """Run a sync DB call in the thread pool."""
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, lambda: fn(*args, **kwargs))
