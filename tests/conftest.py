"""Shared test fixtures."""
import random
from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Import all models so SQLModel.metadata knows about them
from workoutgen.models.authorization import SharingAuthorization  # noqa: F401
from workoutgen.models.generation import GenerationLog  # noqa: F401
from workoutgen.models.workout import RouteLocation, Workout, WorkoutRoute, WorkoutSample  # noqa: F401

from workoutgen.config import Settings
from workoutgen.generation.types import (
    ActivityType,
    Coordinate,
    LocationType,
    SwimmingParameters,
    WorkoutParameters,
    WorkoutWindow,
)
from workoutgen.health.store import (
    WORKOUT_SHARE_TYPES,
    AuthorizationStatus,
    HealthStore,
)

WORKOUT_START = datetime(2025, 1, 15, 7, 30, tzinfo=timezone.utc)
ORIGIN = Coordinate(50.1234, 8.1234)


def make_parameters(
    activity_type=ActivityType.WALKING,
    location_type=LocationType.OUTDOOR,
    duration_seconds: float = 600.0,
    swimming: SwimmingParameters = None,
) -> WorkoutParameters:
    """WorkoutParameters for a window of `duration_seconds` starting at WORKOUT_START."""
    return WorkoutParameters(
        activity_type=activity_type,
        location_type=location_type,
        window=WorkoutWindow(WORKOUT_START, WORKOUT_START + timedelta(seconds=duration_seconds)),
        origin=ORIGIN,
        swimming=swimming or SwimmingParameters(),
    )


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine. Tables recreated fresh for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="test_session")
def test_session_fixture(engine) -> Generator[Session, None, None]:
    """Provides a DB session connected to in-memory SQLite."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="store")
def store_fixture(engine) -> HealthStore:
    """A store where nothing has been requested yet."""
    return HealthStore(engine)


@pytest.fixture(name="authorized_store")
def authorized_store_fixture(store: HealthStore) -> HealthStore:
    """A store with sharing access granted for every workout type."""
    for data_type in WORKOUT_SHARE_TYPES:
        store.set_authorization_status(data_type, AuthorizationStatus.SHARING_AUTHORIZED)
    return store


@pytest.fixture(name="settings")
def settings_fixture() -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite:///:memory:",
        time_zone="Europe/Berlin",
        random_seed=None,
    )


@pytest.fixture(name="rng")
def rng_fixture() -> random.Random:
    return random.Random(1234)
