"""
WorkoutCreator: builds one fake workout and writes it to the health store.

Flow for a single create_workout() call:
  1. Create GenerationLog (status="running")
  2. Generate samples (and a route for outdoor, non-swimming workouts)
  3. Builder phases: begin collection, add samples, add time zone metadata,
     end collection
  4. Finish the workout; a failure here aborts the run
  5. Insert and finish the route, if any
  6. Update GenerationLog (status="success", "partial" or "error")

Failures in steps 3 and 5 are logged and recorded but do not stop the
remaining phases. Nothing is retried.

Only one generation runs at a time: the creator moves idle -> running with
a compare-and-set and a concurrent call gets CreatorBusyError.
"""
import logging
import random
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Optional

from sqlmodel import Session

from workoutgen.config import Settings, get_settings
from workoutgen.db.types import utc_now
from workoutgen.generation.route import create_sample_route
from workoutgen.generation.samples import create_samples
from workoutgen.generation.types import (
    AVAILABLE_ACTIVITY_TYPES,
    AVAILABLE_LAP_LENGTH_UNITS,
    AVAILABLE_LOCATION_TYPES,
    AVAILABLE_SWIMMING_LOCATION_TYPES,
    ActivityType,
    Coordinate,
    LengthUnit,
    LocationType,
    SwimmingLocationType,
    SwimmingParameters,
    WorkoutParameters,
    WorkoutWindow,
)
from workoutgen.generation.window import random_workout_window
from workoutgen.health.builders import WorkoutBuilder, WorkoutConfiguration, WorkoutRouteBuilder
from workoutgen.health.store import (
    METADATA_KEY_TIME_ZONE,
    WORKOUT_READ_TYPES,
    WORKOUT_SHARE_TYPES,
    AuthorizationStatus,
    HealthDataType,
    HealthStore,
    HealthStoreError,
)
from workoutgen.models.generation import GenerationLog

logger = logging.getLogger(__name__)


class CreatorBusyError(RuntimeError):
    """Raised when create_workout() is called while another run is in flight."""


class CreatorState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class GenerationResult:
    """Outcome of one create_workout() call."""
    status: str                      # "success", "partial" or "error"
    workout_id: Optional[int] = None
    sample_count: int = 0
    route_point_count: int = 0
    errors: Dict[str, str] = field(default_factory=dict)  # phase -> message

    @property
    def saved(self) -> bool:
        return self.workout_id is not None


class WorkoutCreator:
    """Holds the picked workout settings and creates workouts from them."""

    available_activity_types = AVAILABLE_ACTIVITY_TYPES
    available_location_types = AVAILABLE_LOCATION_TYPES
    available_swimming_location_types = AVAILABLE_SWIMMING_LOCATION_TYPES
    available_lap_length_units = AVAILABLE_LAP_LENGTH_UNITS

    def __init__(
        self,
        store: HealthStore,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            store: HealthStore to write into.
            settings: Defaults for the form fields. Falls back to get_settings().
            rng: Random source for all generation. Defaults to a Random seeded
                 with settings.random_seed (unseeded when that is None).
            now: Clock used for the random default window.
        """
        self.store = store
        self.settings = settings or get_settings()
        self.rng = rng or random.Random(self.settings.random_seed)
        self._now = now or utc_now

        self._state = CreatorState.IDLE
        self._state_lock = threading.Lock()

        self.has_health_access = False
        self.need_to_ask_for_health_access = True

        self.activity_type = ActivityType.WALKING
        self.location_type = LocationType.OUTDOOR
        self.swimming_location_type = SwimmingLocationType.POOL
        self.lap_length_unit = LengthUnit(self.settings.default_lap_length_unit)
        self.lap_length = self.settings.default_lap_length
        self.workout_start_latitude = self.settings.default_start_latitude
        self.workout_start_longitude = self.settings.default_start_longitude

        self.workout_start_date: datetime = self._now()
        self.workout_end_date: datetime = self.workout_start_date
        self.set_random_date()

    # ── Health access ─────────────────────────────────────────────────────────

    @property
    def is_health_data_available(self) -> bool:
        return self.store.is_health_data_available()

    def check_health_access(self) -> bool:
        """Refresh has_health_access / need_to_ask_for_health_access from the store."""
        status = self.store.authorization_status(HealthDataType.WORKOUT)
        self.has_health_access = status == AuthorizationStatus.SHARING_AUTHORIZED
        self.need_to_ask_for_health_access = status == AuthorizationStatus.NOT_DETERMINED
        logger.info("Has sharing health access: %s", self.has_health_access)
        return self.has_health_access

    async def request_permission_to_health_data(self) -> bool:
        """
        Ask the store for write access to everything a workout needs.

        Returns:
            True if the request was answered (the user may still have denied
            access; check has_health_access). False if the request failed.
        """
        try:
            await self.store.request_authorization(WORKOUT_SHARE_TYPES, WORKOUT_READ_TYPES)
        except HealthStoreError as exc:
            logger.error("Health authorization request failed: %s", exc)
            return False
        self.check_health_access()
        return True

    # ── Form state ────────────────────────────────────────────────────────────

    @property
    def state(self) -> CreatorState:
        return self._state

    @property
    def is_creating_workout(self) -> bool:
        return self._state is CreatorState.RUNNING

    def set_random_date(self) -> None:
        """Pick a new default workout window in the last 30 days."""
        window = random_workout_window(now=self._now(), rng=self.rng)
        self.workout_start_date = window.start
        self.workout_end_date = window.end

    def current_parameters(self) -> WorkoutParameters:
        """
        Snapshot the form fields into WorkoutParameters.

        Raises:
            ValueError: if a text field does not parse, a number is not finite,
                the lap length is not positive or the end date is not after the
                start date.
        """
        return WorkoutParameters(
            activity_type=ActivityType(self.activity_type),
            location_type=LocationType(self.location_type),
            window=WorkoutWindow(self.workout_start_date, self.workout_end_date),
            origin=Coordinate(
                latitude=float(self.workout_start_latitude),
                longitude=float(self.workout_start_longitude),
            ),
            swimming=SwimmingParameters(
                location_type=SwimmingLocationType(self.swimming_location_type),
                lap_length=float(self.lap_length),
                unit=LengthUnit(self.lap_length_unit),
            ),
        )

    # ── Create workout ────────────────────────────────────────────────────────

    async def create_workout(self, parameters: Optional[WorkoutParameters] = None) -> GenerationResult:
        """
        Generate a workout and write it to the health store.

        Args:
            parameters: What to generate. Defaults to current_parameters().

        Returns:
            GenerationResult describing what was saved and which phases failed.

        Raises:
            CreatorBusyError: if another create_workout() is still running.
            ValueError: if the form fields do not parse.
        """
        self._begin_run()
        try:
            if parameters is None:
                parameters = self.current_parameters()
            return await self._create(parameters)
        finally:
            with self._state_lock:
                self._state = CreatorState.IDLE
            self.set_random_date()

    async def _create(self, parameters: WorkoutParameters) -> GenerationResult:
        # Raises UnsupportedActivityTypeError before anything touches the store
        samples = create_samples(parameters, self.rng)
        route = create_sample_route(parameters, self.rng) if parameters.creates_route else []

        log = await self.store.run_sync(self._create_generation_log, parameters)
        result = GenerationResult(status="error")

        try:
            builder = WorkoutBuilder(self.store, self._configuration(parameters), device=None)
            window = parameters.window
            metadata = {METADATA_KEY_TIME_ZONE: self.settings.time_zone}

            await self._attempt(result, "begin_collection", builder.begin_collection(window.start))
            await self._attempt(result, "add_samples", builder.add_samples(samples))
            await self._attempt(result, "add_metadata", builder.add_metadata(metadata))
            await self._attempt(result, "end_collection", builder.end_collection(window.end))

            try:
                workout = await builder.finish_workout()
            except HealthStoreError as exc:
                logger.error("finish_workout failed: %s", exc)
                result.errors["finish_workout"] = str(exc)
                workout = None
            else:
                if workout is None:
                    logger.error("Workout is nil..")
                    result.errors["finish_workout"] = "No workout was returned"

            if workout is None:
                result.status = "error"
                await self.store.run_sync(self._finish_generation_log, log, result)
                return result

            result.workout_id = workout.id
            result.sample_count = len(builder.samples)

            if parameters.creates_route:
                route_builder = WorkoutRouteBuilder(self.store, device=None)
                await self._attempt(result, "insert_route_data", route_builder.insert_route_data(route))
                if await self._attempt(result, "finish_route", route_builder.finish_route(workout, metadata)):
                    result.route_point_count = len(route)

            result.status = "partial" if result.errors else "success"
            await self.store.run_sync(self._finish_generation_log, log, result)
            return result

        except Exception as exc:
            result.status = "error"
            result.errors.setdefault("unexpected", str(exc))
            await self.store.run_sync(self._finish_generation_log, log, result)
            raise

    # ── Internal helpers ──────────────────────────────────────────────────────

    def _begin_run(self) -> None:
        with self._state_lock:
            if self._state is CreatorState.RUNNING:
                raise CreatorBusyError("A workout is already being created")
            self._state = CreatorState.RUNNING

    async def _attempt(self, result: GenerationResult, phase: str, call) -> bool:
        """Await one store call; log and record a HealthStoreError instead of raising."""
        try:
            await call
        except HealthStoreError as exc:
            logger.error("%s failed: %s", phase, exc)
            result.errors[phase] = str(exc)
            return False
        return True

    @staticmethod
    def _configuration(parameters: WorkoutParameters) -> WorkoutConfiguration:
        configuration = WorkoutConfiguration(
            activity_type=parameters.activity_type,
            location_type=parameters.location_type,
        )
        if parameters.activity_type == ActivityType.SWIMMING:
            configuration.swimming_location_type = parameters.swimming.location_type
            configuration.lap_length = parameters.swimming.lap_length
            configuration.lap_length_unit = parameters.swimming.unit
        return configuration

    def _create_generation_log(self, parameters: WorkoutParameters) -> GenerationLog:
        log = GenerationLog(
            started_at=utc_now(),
            status="running",
            activity_type=ActivityType(parameters.activity_type).value,
            location_type=LocationType(parameters.location_type).value,
        )
        with Session(self.store.engine) as s:
            s.add(log)
            s.commit()
            s.refresh(log)
        return log

    def _finish_generation_log(self, log: GenerationLog, result: GenerationResult) -> None:
        with Session(self.store.engine) as s:
            db_log = s.get(GenerationLog, log.id)
            db_log.status = result.status
            db_log.finished_at = utc_now()
            db_log.workout_id = result.workout_id
            db_log.samples_written = result.sample_count
            db_log.route_points_written = result.route_point_count
            db_log.error_message = (
                "; ".join(f"{phase}: {msg}" for phase, msg in result.errors.items())
                if result.errors else None
            )
            s.add(db_log)
            s.commit()
