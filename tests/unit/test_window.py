"""Tests for the random default workout window."""
import random
from datetime import datetime, timedelta, timezone

import pytest

from workoutgen.generation.window import random_workout_window

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class LowRandom:
    def randint(self, a, b):
        return a


class HighRandom:
    def randint(self, a, b):
        return b


class TestRandomWorkoutWindow:
    def test_earliest_draws(self):
        window = random_workout_window(now=NOW, rng=LowRandom())
        assert window.duration_seconds == 20 * 60
        assert window.end == NOW - timedelta(days=1, hours=2)

    def test_latest_draws(self):
        window = random_workout_window(now=NOW, rng=HighRandom())
        assert window.duration_seconds == 90 * 60
        assert window.end == NOW - timedelta(days=30, hours=3)

    @pytest.mark.parametrize("seed", range(20))
    def test_bounds_hold_for_any_draw(self, seed):
        window = random_workout_window(now=NOW, rng=random.Random(seed))
        assert 20 * 60 <= window.duration_seconds <= 90 * 60
        assert window.duration_seconds == int(window.duration_seconds)
        assert NOW - timedelta(days=30, hours=3) <= window.end <= NOW - timedelta(days=1, hours=2)
        assert window.start < window.end

    def test_defaults_to_current_time(self):
        window = random_workout_window()
        assert window.start.tzinfo == timezone.utc
        assert window.end < datetime.now(timezone.utc) - timedelta(days=1)

    def test_naive_now_is_read_as_utc(self):
        naive = random_workout_window(now=NOW.replace(tzinfo=None), rng=LowRandom())
        assert naive == random_workout_window(now=NOW, rng=LowRandom())
        assert naive.end.tzinfo == timezone.utc
