"""Distance / ascent / descent accumulation along ordered point sequences.

Pure helpers: every function walks consecutive pairs once and never mutates
its input.
"""

from __future__ import annotations

from typing import List, Protocol, Sequence

from ..models import RawPoint, RouteStats, TrackPoint
from .distance import distance_meters


class _Located(Protocol):
    lat: float
    lon: float
    elevation: float


def _accumulate(points: Sequence[_Located], start: int, stop: int) -> RouteStats:
    """Sum the steps ``points[i] -> points[i + 1]`` for ``start <= i < stop``."""

    distance_m = 0.0
    ascent = 0.0
    descent = 0.0
    for i in range(start, stop):
        p1 = points[i]
        p2 = points[i + 1]
        distance_m += distance_meters(p1.lat, p1.lon, p2.lat, p2.lon)
        elev_diff = p2.elevation - p1.elevation
        if elev_diff > 0:
            ascent += elev_diff
        else:
            descent += -elev_diff
    return RouteStats(
        distance_km=distance_m / 1000.0, ascent_m=ascent, descent_m=descent
    )


def accumulate_full(points: Sequence[_Located]) -> RouteStats:
    """Return total distance (km), ascent and descent (m) of a whole sequence."""

    return _accumulate(points, 0, max(len(points) - 1, 0))


def accumulate_segment(
    points: Sequence[_Located], from_index: int, to_index: int
) -> RouteStats:
    """Return stats for the stretch of track from ``from_index`` to ``to_index``.

    Steps are counted for ``from_index <= i < to_index``, so the result covers
    the path between the two points. Indices are clamped to the sequence; an
    empty or inverted range yields zeros.
    """

    start = max(from_index, 0)
    stop = min(to_index, len(points) - 1)
    if stop <= start:
        return RouteStats()
    return _accumulate(points, start, stop)


def with_cumulative_distance(points: Sequence[RawPoint]) -> List[TrackPoint]:
    """Return track points carrying the running distance from the first point."""

    augmented: List[TrackPoint] = []
    total_m = 0.0
    prev: RawPoint | None = None
    for point in points:
        if prev is not None:
            total_m += distance_meters(prev.lat, prev.lon, point.lat, point.lon)
        augmented.append(
            TrackPoint(
                lat=point.lat,
                lon=point.lon,
                elevation=point.elevation,
                cumulative_distance_km=total_m / 1000.0,
            )
        )
        prev = point
    return augmented
