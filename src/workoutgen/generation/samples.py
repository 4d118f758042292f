"""
Randomized quantity-sample generation for a fake workout.

Each activity type has its own policy for how long one sample block lasts
and which quantities it carries:

  walking / hiking  random distance (3-6 m) at a random speed; the block
                    length follows from distance and speed
  running           fixed 5 minute blocks at a random integer speed
  cycling           fixed 2 minute blocks, distance only
  swimming          one block per lap; lap time scales with lap length

Blocks are laid end to end from the workout start. The block that would run
past the workout end is cut short so that, per quantity kind, the samples
cover the window exactly with no gaps and no overlaps.
"""
import math
import random
from typing import Callable, Dict, List, Optional

from workoutgen.generation.types import (
    COUNT_UNIT,
    ActivityType,
    LengthUnit,
    QuantityKind,
    Sample,
    UnsupportedActivityTypeError,
    WorkoutParameters,
)

RUNNING_BLOCK_SECONDS = 5 * 60
CYCLING_BLOCK_SECONDS = 2 * 60

# km/h
WALKING_SPEED_RANGE = (4.0, 6.0)
HIKING_SPEED_RANGE = (3.0, 6.0)
RUNNING_SPEED_RANGE = (7, 15)
CYCLING_SPEED_RANGE = (12, 25)

STEP_DISTANCE_RANGE = (3.0, 6.0)  # meters per walking/hiking block
STRIDE_LENGTH_RANGE = (0.7, 0.9)  # meters per step

# Swimming factors are drawn as integers and divided by this
SWIM_FACTOR_DIVISOR = 25
LAP_TIME_FACTOR_RANGE = (20, 65)
STROKE_FACTOR_RANGE = (7, 14)


def create_samples(
    parameters: WorkoutParameters,
    rng: Optional[random.Random] = None,
) -> List[Sample]:
    """
    Build the distance / step / stroke samples for a whole workout.

    Args:
        parameters: Workout snapshot. Only activity_type, window and (for
                    swimming) the swimming lap settings are used.
        rng: Random source. Pass a seeded random.Random for reproducible
             output; a fresh unseeded one is used when omitted.

    Returns:
        Samples in chronological order. Activities that record two
        quantities emit them as pairs covering the same block.

    Raises:
        UnsupportedActivityTypeError: if there is no policy for the activity.
    """
    try:
        generate = _GENERATORS[parameters.activity_type]
    except (KeyError, TypeError):
        raise UnsupportedActivityTypeError(parameters.activity_type) from None
    return generate(parameters, rng or random.Random())


def round_half_up(value: float) -> float:
    """Round to the nearest whole number, halves away from zero (not banker's rounding)."""
    return float(math.floor(value + 0.5)) if value >= 0 else -float(math.floor(-value + 0.5))


def steps_for_distance(distance_meters: float, rng: random.Random) -> float:
    """Step count for a distance, using a random stride length."""
    return round_half_up(distance_meters / rng.uniform(*STRIDE_LENGTH_RANGE))


def _walking(parameters: WorkoutParameters, rng: random.Random) -> List[Sample]:
    return _on_foot(parameters, rng, WALKING_SPEED_RANGE)


def _hiking(parameters: WorkoutParameters, rng: random.Random) -> List[Sample]:
    return _on_foot(parameters, rng, HIKING_SPEED_RANGE)


def _on_foot(parameters: WorkoutParameters, rng: random.Random, speed_range) -> List[Sample]:
    window = parameters.window
    duration = window.duration_seconds
    samples: List[Sample] = []

    used = 0.0
    while used < duration:
        distance = rng.uniform(*STEP_DISTANCE_RANGE)
        speed_kmh = rng.uniform(*speed_range)
        block_end = min(used + distance * 3.6 / speed_kmh, duration)
        steps = steps_for_distance(distance, rng)

        start, end = window.at(used), window.at(block_end)
        samples.append(Sample(
            QuantityKind.DISTANCE_WALKING_RUNNING, distance, LengthUnit.METER.value, start, end
        ))
        samples.append(Sample(QuantityKind.STEP_COUNT, steps, COUNT_UNIT, start, end))
        used = block_end

    return samples


def _running(parameters: WorkoutParameters, rng: random.Random) -> List[Sample]:
    window = parameters.window
    duration = window.duration_seconds
    samples: List[Sample] = []

    used = 0.0
    while used < duration:
        block_end = min(used + RUNNING_BLOCK_SECONDS, duration)
        speed_kmh = rng.randint(*RUNNING_SPEED_RANGE)
        distance = speed_kmh * 1000 / 3600 * (block_end - used)
        steps = steps_for_distance(distance, rng)

        start, end = window.at(used), window.at(block_end)
        samples.append(Sample(
            QuantityKind.DISTANCE_WALKING_RUNNING, distance, LengthUnit.METER.value, start, end
        ))
        samples.append(Sample(QuantityKind.STEP_COUNT, steps, COUNT_UNIT, start, end))
        used = block_end

    return samples


def _cycling(parameters: WorkoutParameters, rng: random.Random) -> List[Sample]:
    window = parameters.window
    duration = window.duration_seconds
    samples: List[Sample] = []

    used = 0.0
    while used < duration:
        block_end = min(used + CYCLING_BLOCK_SECONDS, duration)
        speed_kmh = rng.randint(*CYCLING_SPEED_RANGE)
        distance = speed_kmh * 1000 / 3600 * (block_end - used)

        samples.append(Sample(
            QuantityKind.DISTANCE_CYCLING,
            distance,
            LengthUnit.METER.value,
            window.at(used),
            window.at(block_end),
        ))
        used = block_end

    return samples


def _swimming(parameters: WorkoutParameters, rng: random.Random) -> List[Sample]:
    window = parameters.window
    duration = window.duration_seconds
    lap_length = parameters.swimming.lap_length
    unit = parameters.swimming.unit.value
    samples: List[Sample] = []

    used = 0.0
    while used < duration:
        lap_seconds = rng.randint(*LAP_TIME_FACTOR_RANGE) / SWIM_FACTOR_DIVISOR * lap_length
        block_end = min(used + lap_seconds, duration)
        strokes = round_half_up(
            rng.randint(*STROKE_FACTOR_RANGE) / SWIM_FACTOR_DIVISOR * lap_length
        )

        start, end = window.at(used), window.at(block_end)
        samples.append(Sample(QuantityKind.DISTANCE_SWIMMING, lap_length, unit, start, end))
        samples.append(Sample(QuantityKind.SWIMMING_STROKE_COUNT, strokes, COUNT_UNIT, start, end))
        used = block_end

    return samples


_GENERATORS: Dict[ActivityType, Callable[[WorkoutParameters, random.Random], List[Sample]]] = {
    ActivityType.WALKING: _walking,
    ActivityType.HIKING: _hiking,
    ActivityType.RUNNING: _running,
    ActivityType.CYCLING: _cycling,
    ActivityType.SWIMMING: _swimming,
}
