"""
Local route preview.

Generates one sample route per outdoor activity type from the default start
coordinate (no DB needed) and renders them to /tmp/preview_route.png.

Usage:
    python scripts/preview_route.py [--minutes 30] [--seed 7]
"""
import argparse
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

# Allow running directly from repo root
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from workoutgen.generation.route import SPEED_MULTIPLIERS, create_sample_route  # noqa: E402
from workoutgen.generation.types import (  # noqa: E402
    Coordinate,
    LocationType,
    WorkoutParameters,
    WorkoutWindow,
)


def main():
    parser = argparse.ArgumentParser(description="Render sample routes to PNG")
    parser.add_argument("--minutes", type=int, default=30)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    rng = random.Random(args.seed)
    start = datetime(2026, 1, 15, 7, 30, tzinfo=timezone.utc)
    window = WorkoutWindow(start, start + timedelta(minutes=args.minutes))

    fig, ax = plt.subplots(figsize=(7, 7))
    for activity_type in SPEED_MULTIPLIERS:
        params = WorkoutParameters(
            activity_type=activity_type,
            location_type=LocationType.OUTDOOR,
            window=window,
            origin=Coordinate(50.1234, 8.1234),
        )
        route = create_sample_route(params, rng)
        print(f"  {activity_type.label:8s} {len(route)} points, "
              f"ends at {route[-1].latitude:.6f}, {route[-1].longitude:.6f}")
        ax.plot(
            [p.longitude for p in route],
            [p.latitude for p in route],
            label=activity_type.label,
        )

    ax.set_xlabel("Longitude")
    ax.set_ylabel("Latitude")
    ax.set_title(f"Sample routes, {args.minutes} min")
    ax.legend()

    out = Path("/tmp/preview_route.png")
    fig.savefig(out, dpi=100)
    print(f"\nSaved to {out}")


if __name__ == "__main__":
    main()
