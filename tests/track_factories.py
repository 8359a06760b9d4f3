"""Synthetic track builders shared by the test modules."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Tuple

from trail_enrichment.geometry.distance import EARTH_RADIUS_M
from trail_enrichment.geometry.stats import with_cumulative_distance
from trail_enrichment.models import RawPoint, TrackPoint, TrailInput

# Along a meridian the haversine distance is exactly R * dlat.
METERS_PER_DEGREE = EARTH_RADIUS_M * math.pi / 180.0


def north_of(lat: float, lon: float, meters: float) -> Tuple[float, float]:
    return lat + meters / METERS_PER_DEGREE, lon


def raw_points(coords: Iterable[Sequence[float]]) -> List[RawPoint]:
    points = []
    for coord in coords:
        ele = coord[2] if len(coord) > 2 else 0.0
        points.append(RawPoint(lat=coord[0], lon=coord[1], elevation=ele))
    return points


def make_track(coords: Iterable[Sequence[float]]) -> List[TrackPoint]:
    return with_cumulative_distance(raw_points(coords))


def equator_track(
    count: int, spacing_deg: float = 0.001, elevation: float = 0.0
) -> List[TrackPoint]:
    return make_track([(0.0, i * spacing_deg, elevation) for i in range(count)])


def meridian_track(distances_m: Sequence[float], lon: float = 0.0) -> List[TrackPoint]:
    """Track whose samples sit the given distances north of (0, lon)."""

    return make_track([north_of(0.0, lon, d) for d in distances_m])


def make_trail(trail_id: str = "test-trail", **kwargs) -> TrailInput:
    kwargs.setdefault("points", tuple(raw_points([(0, 0, 100), (0, 0.001, 110)])))
    return TrailInput(trail_id=trail_id, **kwargs)
