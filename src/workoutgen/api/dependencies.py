"""Process-wide HealthStore / WorkoutCreator for the API."""
from typing import Optional

from workoutgen.config import get_settings
from workoutgen.creator import WorkoutCreator
from workoutgen.db.engine import get_engine
from workoutgen.health.store import HealthStore

_creator: Optional[WorkoutCreator] = None


def get_creator() -> WorkoutCreator:
    """FastAPI dependency returning the shared creator, built on first call."""
    global _creator
    if _creator is None:
        settings = get_settings()
        store = HealthStore(get_engine(), auto_approve=settings.authorization_auto_approve)
        _creator = WorkoutCreator(store, settings=settings)
        _creator.check_health_access()
    return _creator
