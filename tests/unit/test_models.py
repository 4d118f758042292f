"""Tests for health store DB models."""
from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import Session, select

from workoutgen.models.authorization import SharingAuthorization
from workoutgen.models.generation import GenerationLog
from workoutgen.models.workout import RouteLocation, Workout, WorkoutRoute, WorkoutSample

START = datetime(2025, 1, 15, 7, 30, tzinfo=timezone.utc)


def make_workout(**overrides) -> Workout:
    fields = dict(
        activity_type="running",
        location_type="outdoor",
        start_time=START,
        end_time=START + timedelta(minutes=30),
        duration_seconds=1800.0,
    )
    fields.update(overrides)
    return Workout(**fields)


class TestWorkout:
    def test_optional_fields_default_to_none(self):
        workout = make_workout()
        assert workout.total_distance is None
        assert workout.lap_length is None
        assert workout.device is None
        assert workout.metadata_json is None

    def test_persists_with_samples(self, test_session: Session):
        workout = make_workout(total_distance=5000.0, total_distance_unit="meter")
        test_session.add(workout)
        test_session.commit()
        test_session.refresh(workout)

        test_session.add(WorkoutSample(
            workout_id=workout.id,
            kind="distance_walking_running",
            value=5000.0,
            unit="meter",
            start_time=START,
            end_time=START + timedelta(minutes=30),
        ))
        test_session.commit()
        test_session.refresh(workout)

        assert len(workout.samples) == 1
        assert workout.samples[0].value == 5000.0

    def test_route_relationship(self, test_session: Session):
        workout = make_workout()
        test_session.add(workout)
        test_session.commit()
        test_session.refresh(workout)

        route = WorkoutRoute(workout_id=workout.id, point_count=2)
        test_session.add(route)
        test_session.commit()
        test_session.refresh(route)
        for i in range(2):
            test_session.add(RouteLocation(
                route_id=route.id,
                point_index=i,
                latitude=50.1234 + i * 0.00001,
                longitude=8.1234,
                timestamp=START + timedelta(seconds=i),
            ))
        test_session.commit()
        test_session.refresh(route)

        assert [loc.point_index for loc in route.locations] == [0, 1]
        assert route.workout.id == workout.id


class TestSharingAuthorization:
    def test_one_row_per_type(self, test_session: Session):
        import sqlalchemy.exc

        test_session.add(SharingAuthorization(data_type="workout", status="sharing_authorized"))
        test_session.commit()
        test_session.add(SharingAuthorization(data_type="workout", status="sharing_denied"))
        with pytest.raises(sqlalchemy.exc.IntegrityError):
            test_session.commit()


class TestGenerationLog:
    def test_defaults(self):
        log = GenerationLog(activity_type="walking", location_type="outdoor")
        assert log.status == "running"
        assert log.samples_written == 0
        assert log.finished_at is None

    def test_round_trip(self, test_session: Session):
        test_session.add(GenerationLog(
            activity_type="cycling",
            location_type="indoor",
            status="partial",
            error_message="add_metadata: boom",
        ))
        test_session.commit()
        log = test_session.exec(select(GenerationLog)).one()
        assert log.status == "partial"
        assert log.error_message == "add_metadata: boom"


class TestUTCDateTime:
    def _saved(self, test_session: Session, **overrides) -> Workout:
        test_session.add(make_workout(**overrides))
        test_session.commit()
        test_session.expire_all()
        return test_session.exec(select(Workout)).one()

    def test_reads_back_aware_utc(self, test_session: Session):
        saved = self._saved(test_session)
        assert saved.start_time == START
        assert saved.start_time.tzinfo == timezone.utc
        assert saved.created_at.tzinfo == timezone.utc

    def test_offset_instants_stored_as_utc(self, test_session: Session):
        local = START.astimezone(timezone(timedelta(hours=-5)))
        saved = self._saved(test_session, start_time=local)
        assert saved.start_time == START
        assert saved.start_time.utcoffset() == timedelta(0)

    def test_naive_instants_taken_as_utc(self, test_session: Session):
        saved = self._saved(test_session, start_time=START.replace(tzinfo=None))
        assert saved.start_time == START

    def test_generation_log_timestamps_are_aware(self, test_session: Session):
        test_session.add(GenerationLog(
            activity_type="walking",
            location_type="outdoor",
            finished_at=START + timedelta(seconds=5),
        ))
        test_session.commit()
        test_session.expire_all()
        log = test_session.exec(select(GenerationLog)).one()
        assert log.started_at.tzinfo == timezone.utc
        assert log.finished_at == START + timedelta(seconds=5)
