"""Random default workout window: somewhere in the last month, 20 to 90 minutes long."""
import random
from datetime import datetime, timedelta, timezone
from typing import Optional

from workoutgen.generation.types import WorkoutWindow

DAYS_AGO_RANGE = (1, 30)
START_OFFSET_RANGE_S = (2 * 60 * 60, 3 * 60 * 60)
DURATION_RANGE_S = (20 * 60, 90 * 60)


def random_workout_window(
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> WorkoutWindow:
    """
    Pick a plausible workout window relative to `now`.

    The workout lies 1 to 30 days in the past and finishes 2 to 3 hours
    before the current time of day. All draws are whole seconds. The window
    is in UTC; a naive `now` is taken to be UTC.
    """
    now = now or datetime.now(timezone.utc)
    rng = rng or random.Random()

    days_ago = rng.randint(*DAYS_AGO_RANGE)
    start_offset = rng.randint(*START_OFFSET_RANGE_S)
    duration = rng.randint(*DURATION_RANGE_S)

    start = now - timedelta(days=days_ago) - timedelta(seconds=start_offset + duration)
    return WorkoutWindow(start=start, end=start + timedelta(seconds=duration))
