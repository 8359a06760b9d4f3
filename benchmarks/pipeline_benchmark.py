"""Benchmark the trail enrichment stages on long synthetic tracks."""

from __future__ import annotations

import argparse
import math
import statistics
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Late imports rely on the adjusted sys.path above.
from trail_enrichment.config import (  # noqa: E402
    JUNCTION_MAX_DISTANCE_M,
    TARGET_DISPLAY_POINT_COUNT,
    WAYPOINT_ENTRY_THRESHOLD_M,
)
from trail_enrichment.enrichment import match_waypoints, resolve_variants  # noqa: E402
from trail_enrichment.geometry import (  # noqa: E402
    simplify_for_display,
    with_cumulative_distance,
)
from trail_enrichment.models import (  # noqa: E402
    RawPoint,
    VariantInput,
    VariantKind,
    Waypoint,
)


@dataclass(slots=True)
class StageDurations:
    """Timing measurements (in seconds) for one pipeline run."""

    cumulative: float
    simplify: float
    waypoints: float
    junctions: float

    @property
    def total(self) -> float:
        return self.cumulative + self.simplify + self.waypoints + self.junctions


@dataclass(slots=True)
class BenchmarkSummary:
    point_count: int
    waypoint_count: int
    iterations: int
    display_point_count: int
    mean_cumulative_ms: float
    mean_simplify_ms: float
    mean_waypoints_ms: float
    mean_junctions_ms: float
    mean_total_ms: float
    worst_total_ms: float


def _build_track(point_count: int) -> List[RawPoint]:
    """Generate a meandering track roughly 10 m between samples."""

    base_lat = -36.9
    base_lon = 147.1
    step_deg = 9.0e-5
    return [
        RawPoint(
            lat=base_lat + 0.004 * math.sin(idx / 120.0),
            lon=base_lon + idx * step_deg,
            elevation=1200.0 + 150.0 * math.sin(idx / 400.0),
        )
        for idx in range(point_count)
    ]


def _build_waypoints(track: List[RawPoint], count: int) -> List[Waypoint]:
    stride = max(1, len(track) // max(count, 1))
    return [
        Waypoint(name=f"wp{idx}", lat=p.lat + 0.0005, lon=p.lon)
        for idx, p in enumerate(track[::stride][:count])
    ]


def _build_variants(track: List[RawPoint]) -> List[VariantInput]:
    quarter = len(track) // 4
    return [
        VariantInput(
            name="Alternate",
            kind=VariantKind.ALTERNATE,
            points=tuple(track[quarter : 2 * quarter : 10]),
        ),
        VariantInput(
            name="Side trip",
            kind=VariantKind.SIDE_TRIP,
            points=(track[3 * quarter], track[3 * quarter + 2]),
        ),
    ]


def _run_iteration(
    raw: List[RawPoint],
    waypoints: List[Waypoint],
    variants: List[VariantInput],
) -> tuple[StageDurations, int]:
    start = time.perf_counter()
    track = with_cumulative_distance(raw)
    cumulative = time.perf_counter() - start

    start = time.perf_counter()
    display = simplify_for_display(
        track, TARGET_DISPLAY_POINT_COUNT, track[-1].cumulative_distance_km
    )
    simplify = time.perf_counter() - start

    start = time.perf_counter()
    match_waypoints(waypoints, track, WAYPOINT_ENTRY_THRESHOLD_M)
    waypoint_dur = time.perf_counter() - start

    start = time.perf_counter()
    resolve_variants(variants, track, JUNCTION_MAX_DISTANCE_M)
    junctions = time.perf_counter() - start

    durations = StageDurations(
        cumulative=cumulative,
        simplify=simplify,
        waypoints=waypoint_dur,
        junctions=junctions,
    )
    return durations, len(display.points)


def run_benchmark(
    point_count: int,
    waypoint_count: int,
    iterations: int,
) -> BenchmarkSummary:
    """Benchmark the enrichment stages and return aggregated timings."""

    if point_count < 10000:
        raise ValueError("point_count must be at least 10,000")
    if iterations <= 0:
        raise ValueError("iterations must be positive")

    raw = _build_track(point_count)
    waypoints = _build_waypoints(raw, waypoint_count)
    variants = _build_variants(raw)

    durations: List[StageDurations] = []
    display_count = 0
    for _ in range(iterations):
        item, display_count = _run_iteration(raw, waypoints, variants)
        durations.append(item)

    return BenchmarkSummary(
        point_count=point_count,
        waypoint_count=len(waypoints),
        iterations=iterations,
        display_point_count=display_count,
        mean_cumulative_ms=statistics.fmean(d.cumulative for d in durations) * 1000.0,
        mean_simplify_ms=statistics.fmean(d.simplify for d in durations) * 1000.0,
        mean_waypoints_ms=statistics.fmean(d.waypoints for d in durations) * 1000.0,
        mean_junctions_ms=statistics.fmean(d.junctions for d in durations) * 1000.0,
        mean_total_ms=statistics.fmean(d.total for d in durations) * 1000.0,
        worst_total_ms=max(d.total for d in durations) * 1000.0,
    )


def _format_summary(summary: BenchmarkSummary) -> Dict[str, float]:
    return {
        "point_count": summary.point_count,
        "waypoint_count": summary.waypoint_count,
        "iterations": summary.iterations,
        "display_point_count": summary.display_point_count,
        "mean_cumulative_ms": summary.mean_cumulative_ms,
        "mean_simplify_ms": summary.mean_simplify_ms,
        "mean_waypoints_ms": summary.mean_waypoints_ms,
        "mean_junctions_ms": summary.mean_junctions_ms,
        "mean_total_ms": summary.mean_total_ms,
        "worst_total_ms": summary.worst_total_ms,
    }


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark trail enrichment on long synthetic tracks",
    )
    parser.add_argument(
        "--points",
        type=int,
        default=50000,
        help="Number of samples in the synthetic main track",
    )
    parser.add_argument(
        "--waypoints",
        type=int,
        default=500,
        help="Number of waypoints spread along the track",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=3,
        help="Number of repetitions for averaging",
    )
    return parser.parse_args()


def main() -> None:
    """Entry point when running the module as a script."""

    args = _parse_args()
    summary = run_benchmark(args.points, args.waypoints, args.iterations)
    for key, value in _format_summary(summary).items():
        if isinstance(value, int):
            print(f"{key}: {value}")
        else:
            print(f"{key}: {value:.3f}")


if __name__ == "__main__":
    main()
