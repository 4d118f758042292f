"""
Command line entrypoint.

Usage:
    python -m workoutgen authorize                 # grant sharing access to the local store
    python -m workoutgen create                    # one random walking workout, outdoor
    python -m workoutgen create --activity swimming --lap-length 50 --lap-unit yard
    uvicorn workoutgen.api.main:app --port 8000    # HTTP API
"""
import argparse
import asyncio
import logging
import sys
from datetime import datetime
from typing import List, Optional

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    from workoutgen.generation.types import (
        ActivityType,
        LengthUnit,
        LocationType,
        SwimmingLocationType,
    )

    parser = argparse.ArgumentParser(prog="workoutgen", description="Create fake workout sample data")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("authorize", help="Request sharing access to the health store")

    create = sub.add_parser("create", help="Generate one workout and save it")
    create.add_argument(
        "--activity",
        choices=[t.value for t in ActivityType],
        default=ActivityType.WALKING.value,
    )
    create.add_argument(
        "--location",
        choices=[t.value for t in LocationType],
        default=LocationType.OUTDOOR.value,
    )
    create.add_argument(
        "--swimming-location",
        choices=[t.value for t in SwimmingLocationType],
        default=SwimmingLocationType.POOL.value,
    )
    create.add_argument("--lap-length", help="Pool lap length (default from settings)")
    create.add_argument("--lap-unit", choices=[u.value for u in LengthUnit])
    create.add_argument("--start", type=datetime.fromisoformat, help="ISO start time (default: random)")
    create.add_argument("--end", type=datetime.fromisoformat, help="ISO end time (default: random)")
    create.add_argument("--latitude", help="Route start latitude")
    create.add_argument("--longitude", help="Route start longitude")
    return parser


def _build_creator():
    from workoutgen.config import get_settings
    from workoutgen.creator import WorkoutCreator
    from workoutgen.db.engine import get_engine
    from workoutgen.health.store import HealthStore

    settings = get_settings()
    store = HealthStore(get_engine(), auto_approve=settings.authorization_auto_approve)
    creator = WorkoutCreator(store, settings=settings)
    creator.check_health_access()
    return creator


async def _authorize() -> int:
    creator = _build_creator()
    if not await creator.request_permission_to_health_data():
        return 1
    if not creator.has_health_access:
        logger.error("Sharing access was denied.")
        return 1
    logger.info("Sharing access granted.")
    return 0


async def _create(args: argparse.Namespace) -> int:
    creator = _build_creator()
    if creator.need_to_ask_for_health_access:
        logger.error("No health access yet. Run `python -m workoutgen authorize` first.")
        return 1
    if not creator.has_health_access:
        logger.error("Health access was denied. Grant access and try again.")
        return 1

    creator.activity_type = args.activity
    creator.location_type = args.location
    creator.swimming_location_type = args.swimming_location
    if args.lap_length is not None:
        creator.lap_length = args.lap_length
    if args.lap_unit is not None:
        creator.lap_length_unit = args.lap_unit
    if args.start is not None:
        creator.workout_start_date = args.start
    if args.end is not None:
        creator.workout_end_date = args.end
    if args.latitude is not None:
        creator.workout_start_latitude = args.latitude
    if args.longitude is not None:
        creator.workout_start_longitude = args.longitude

    try:
        result = await creator.create_workout()
    except ValueError as exc:
        logger.error("Invalid workout: %s", exc)
        return 2

    logger.info(
        "Workout %s: status=%s samples=%d route_points=%d",
        result.workout_id, result.status, result.sample_count, result.route_point_count,
    )
    return 0 if result.saved else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "authorize":
        return asyncio.run(_authorize())
    return asyncio.run(_create(args))


if __name__ == "__main__":
    sys.exit(main())
