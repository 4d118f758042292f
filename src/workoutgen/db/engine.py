"""Health store database: engine singleton, table setup and the session dependency."""
from typing import Generator

from sqlalchemy.engine import make_url
from sqlmodel import Session, SQLModel, create_engine

from workoutgen.config import get_settings

_engine = None


def _connect_args(database_url: str) -> dict:
    # Store calls run in executor threads, so the SQLite connection is shared across them
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"check_same_thread": False}
    return {}


def init_db(engine) -> None:
    """Register every health store table and create the missing ones."""
    from workoutgen.models.authorization import SharingAuthorization  # noqa
    from workoutgen.models.generation import GenerationLog  # noqa
    from workoutgen.models.workout import RouteLocation, Workout, WorkoutRoute, WorkoutSample  # noqa
    SQLModel.metadata.create_all(engine)


def get_engine():
    """Engine for settings.database_url, created (with its tables) on first call."""
    global _engine
    if _engine is None:
        database_url = get_settings().database_url
        _engine = create_engine(database_url, connect_args=_connect_args(database_url))
        init_db(_engine)
    return _engine


def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency that yields a DB session."""
    with Session(get_engine()) as session:
        yield session
