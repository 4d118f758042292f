"""
Workout and route builders for the local health store.

A WorkoutBuilder collects one workout in phases:

  1. begin_collection(at)   - opens the workout at its start instant
  2. add_samples(samples)   - quantity samples inside the workout
  3. add_metadata(mapping)  - free-form JSON metadata (e.g. time zone)
  4. end_collection(at)     - closes the workout at its end instant
  5. finish_workout()       - persists Workout + WorkoutSample rows

A WorkoutRouteBuilder then attaches a GPS route to the finished workout.

Every call is async and fails on its own with HealthStoreError; nothing is
written until finish_workout() / finish_route().
"""
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlmodel import Session

from workoutgen.generation.types import (
    ActivityType,
    LengthUnit,
    LocationType,
    QuantityKind,
    RoutePoint,
    Sample,
    SwimmingLocationType,
    as_utc,
)
from workoutgen.health.store import HealthDataType, HealthStore, HealthStoreError
from workoutgen.models.workout import RouteLocation, Workout, WorkoutRoute, WorkoutSample

logger = logging.getLogger(__name__)


@dataclass
class WorkoutConfiguration:
    """What kind of workout a builder records."""

    activity_type: ActivityType
    location_type: LocationType = LocationType.OUTDOOR
    swimming_location_type: Optional[SwimmingLocationType] = None
    lap_length: Optional[float] = None
    lap_length_unit: Optional[LengthUnit] = None


class WorkoutBuilder:
    """Collects samples and metadata for one workout, then saves it."""

    def __init__(self, store: HealthStore, configuration: WorkoutConfiguration, device: Optional[str] = None):
        """
        Args:
            store: Target health store.
            configuration: Activity / location settings saved on the workout.
            device: Source device name. None means the current device.
        """
        self.store = store
        self.configuration = configuration
        self.device = device
        self._start: Optional[datetime] = None
        self._end: Optional[datetime] = None
        self._samples: List[Sample] = []
        self._metadata: Dict[str, Any] = {}
        self._finished = False

    @property
    def start_date(self) -> Optional[datetime]:
        return self._start

    @property
    def end_date(self) -> Optional[datetime]:
        return self._end

    @property
    def samples(self) -> List[Sample]:
        return list(self._samples)

    @property
    def metadata(self) -> Dict[str, Any]:
        return dict(self._metadata)

    async def begin_collection(self, at: datetime) -> None:
        self._ensure_open()
        if self._start is not None:
            raise HealthStoreError("Collection has already begun")
        await self._require_sharing([HealthDataType.WORKOUT])
        self._start = as_utc(at)

    async def add_samples(self, samples: Iterable[Sample]) -> None:
        """
        Queue samples for the workout.

        Raises:
            HealthStoreError: if collection has not begun, a sample type is
                not authorized for sharing, or a sample lies outside the
                workout.
        """
        self._ensure_open()
        if self._start is None:
            raise HealthStoreError("Cannot add samples before collection has begun")

        samples = list(samples)
        kinds = {QuantityKind(sample.kind) for sample in samples}
        await self._require_sharing([HealthDataType(kind.value) for kind in kinds])

        for sample in samples:
            start, end = as_utc(sample.start), as_utc(sample.end)
            if end < start:
                raise HealthStoreError(f"Sample ends before it starts: {sample}")
            if start < self._start or (self._end is not None and end > self._end):
                raise HealthStoreError(
                    f"Sample {sample.start.isoformat()}..{sample.end.isoformat()} "
                    "lies outside the workout"
                )
        self._samples.extend(samples)

    async def add_metadata(self, metadata: Dict[str, Any]) -> None:
        self._ensure_open()
        try:
            json.dumps(metadata)
        except TypeError as exc:
            raise HealthStoreError(f"Metadata is not serializable: {exc}") from exc
        self._metadata.update(metadata)

    async def end_collection(self, at: datetime) -> None:
        self._ensure_open()
        if self._start is None:
            raise HealthStoreError("Cannot end collection before it has begun")
        if self._end is not None:
            raise HealthStoreError("Collection has already ended")
        at = as_utc(at)
        if at <= self._start:
            raise HealthStoreError("Workout must end after it starts")
        if any(as_utc(sample.end) > at for sample in self._samples):
            raise HealthStoreError("Collected samples extend past the end date")
        self._end = at

    async def finish_workout(self) -> Optional[Workout]:
        """
        Persist the workout and all queued samples in one transaction.

        Returns:
            The saved Workout, or None if collection never began.

        Raises:
            HealthStoreError: if collection has not ended or the builder was
                already finished.
        """
        self._ensure_open()
        if self._start is None:
            return None
        if self._end is None:
            raise HealthStoreError("Cannot finish a workout whose collection has not ended")

        workout = await self.store.run_sync(self._persist)
        self._finished = True
        logger.info(
            "Saved %s workout %s with %d samples",
            workout.activity_type, workout.id, len(self._samples),
        )
        return workout

    # ── Internal helpers ──────────────────────────────────────────────────────

    def _ensure_open(self) -> None:
        if self._finished:
            raise HealthStoreError("Workout builder has already finished")

    async def _require_sharing(self, data_types) -> None:
        for data_type in data_types:
            authorized = await self.store.run_sync(self.store.is_sharing_authorized, data_type)
            if not authorized:
                raise HealthStoreError(f"Not authorized to share {HealthDataType(data_type).value}")

    def _totals(self) -> Dict[str, Optional[float]]:
        distances = [s for s in self._samples if QuantityKind(s.kind).is_distance]
        steps = [s.value for s in self._samples if s.kind == QuantityKind.STEP_COUNT]
        strokes = [s.value for s in self._samples if s.kind == QuantityKind.SWIMMING_STROKE_COUNT]
        return {
            "total_distance": sum(s.value for s in distances) if distances else None,
            "total_distance_unit": distances[0].unit if distances else None,
            "total_step_count": sum(steps) if steps else None,
            "total_stroke_count": sum(strokes) if strokes else None,
        }

    def _persist(self) -> Workout:
        config = self.configuration
        workout = Workout(
            activity_type=ActivityType(config.activity_type).value,
            location_type=LocationType(config.location_type).value,
            start_time=self._start,
            end_time=self._end,
            duration_seconds=(self._end - self._start).total_seconds(),
            swimming_location_type=(
                SwimmingLocationType(config.swimming_location_type).value
                if config.swimming_location_type else None
            ),
            lap_length=config.lap_length,
            lap_length_unit=LengthUnit(config.lap_length_unit).value if config.lap_length_unit else None,
            device=self.device,
            metadata_json=json.dumps(self._metadata) if self._metadata else None,
            **self._totals(),
        )
        with Session(self.store.engine) as s:
            s.add(workout)
            s.flush()
            for sample in self._samples:
                s.add(WorkoutSample(
                    workout_id=workout.id,
                    kind=QuantityKind(sample.kind).value,
                    value=sample.value,
                    unit=sample.unit,
                    start_time=sample.start,
                    end_time=sample.end,
                ))
            s.commit()
            s.refresh(workout)
        return workout


class WorkoutRouteBuilder:
    """Collects route points and attaches them to a finished workout."""

    def __init__(self, store: HealthStore, device: Optional[str] = None):
        self.store = store
        self.device = device
        self._points: List[RoutePoint] = []
        self._finished = False

    @property
    def points(self) -> List[RoutePoint]:
        return list(self._points)

    async def insert_route_data(self, points: Iterable[RoutePoint]) -> None:
        if self._finished:
            raise HealthStoreError("Route builder has already finished")
        authorized = await self.store.run_sync(
            self.store.is_sharing_authorized, HealthDataType.WORKOUT_ROUTE
        )
        if not authorized:
            raise HealthStoreError("Not authorized to share workout_route")
        self._points.extend(points)

    async def finish_route(self, workout: Workout, metadata: Optional[Dict[str, Any]] = None) -> WorkoutRoute:
        """
        Persist the inserted points as a route of `workout`.

        Raises:
            HealthStoreError: if no points were inserted, the workout was never
                saved, or the builder was already finished.
        """
        if self._finished:
            raise HealthStoreError("Route builder has already finished")
        if not self._points:
            raise HealthStoreError("No route data has been inserted")
        if workout is None or workout.id is None:
            raise HealthStoreError("Route must belong to a saved workout")
        try:
            metadata_json = json.dumps(metadata) if metadata else None
        except TypeError as exc:
            raise HealthStoreError(f"Metadata is not serializable: {exc}") from exc

        route = await self.store.run_sync(self._persist, workout.id, metadata_json)
        self._finished = True
        logger.info("Saved route %s with %d points for workout %s", route.id, route.point_count, workout.id)
        return route

    def _persist(self, workout_id: int, metadata_json: Optional[str]) -> WorkoutRoute:
        with Session(self.store.engine) as s:
            if s.get(Workout, workout_id) is None:
                raise HealthStoreError(f"Workout {workout_id} does not exist")
            route = WorkoutRoute(
                workout_id=workout_id,
                point_count=len(self._points),
                metadata_json=metadata_json,
            )
            s.add(route)
            s.flush()
            for i, point in enumerate(self._points):
                s.add(RouteLocation(
                    route_id=route.id,
                    point_index=i,
                    latitude=point.latitude,
                    longitude=point.longitude,
                    timestamp=point.timestamp,
                ))
            s.commit()
            s.refresh(route)
        return route
