"""Snap alternates and side trips onto the main track.

Each variant end is matched to its nearest main-track sample. Ends further
than the junction limit stay unanchored. Alternates always record where they
rejoin; side trips only do so when they come back at a different place, as
an out-and-back spur ends within a few samples of where it left.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import List, Optional, Sequence

import numpy as np

from ..config import JUNCTION_MAX_DISTANCE_M, SIDE_TRIP_SAME_POINT_INDEX_SPAN
from ..geometry.distance import distances_to_point
from ..geometry.stats import accumulate_full
from ..models import (
    Junction,
    RouteVariant,
    TrackPoint,
    VariantInput,
    VariantKind,
)
from ..utils import round_half_up, round_int

_log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NearestTrackPoint:
    track_index: int
    distance_m: float


def find_nearest_track_point(
    lat: float, lon: float, track_points: Sequence[TrackPoint]
) -> Optional[NearestTrackPoint]:
    """Return the closest track sample to ``(lat, lon)``; the earliest on ties."""

    if not track_points:
        return None
    distances = distances_to_point(
        [p.lat for p in track_points], [p.lon for p in track_points], lat, lon
    )
    index = int(np.argmin(distances))
    return NearestTrackPoint(track_index=index, distance_m=float(distances[index]))


def resolve_variant(
    variant: VariantInput,
    track_points: Sequence[TrackPoint],
    max_junction_distance_m: float = JUNCTION_MAX_DISTANCE_M,
    same_point_index_span: int = SIDE_TRIP_SAME_POINT_INDEX_SPAN,
) -> RouteVariant:
    """Compute variant statistics and its branch/rejoin junctions."""

    points = tuple(variant.points)
    stats = accumulate_full(points)
    branch: Optional[Junction] = None
    rejoin: Optional[Junction] = None

    start = end = None
    if points:
        start = find_nearest_track_point(points[0].lat, points[0].lon, track_points)
        end = find_nearest_track_point(points[-1].lat, points[-1].lon, track_points)
    if start is not None and end is not None:
        if start.distance_m <= max_junction_distance_m:
            branch = _junction(start, track_points)
        if end.distance_m <= max_junction_distance_m:
            # Compared against the nearest start sample even when the start
            # itself was too far away to anchor.
            returns_to_start = (
                abs(end.track_index - start.track_index) < same_point_index_span
            )
            if variant.kind is VariantKind.ALTERNATE or not returns_to_start:
                rejoin = _junction(end, track_points)
        if branch is None and rejoin is None:
            _log.debug(
                "Variant %r has no junction within %.0fm of the main track",
                variant.name,
                max_junction_distance_m,
            )

    return RouteVariant(
        name=variant.name,
        kind=variant.kind,
        points=points,
        distance_km=round_half_up(stats.distance_km, 2),
        ascent_m=round_int(stats.ascent_m),
        descent_m=round_int(stats.descent_m),
        branch=branch,
        rejoin=rejoin,
    )


def resolve_variants(
    variants: Sequence[VariantInput],
    track_points: Sequence[TrackPoint],
    max_junction_distance_m: float = JUNCTION_MAX_DISTANCE_M,
    same_point_index_span: int = SIDE_TRIP_SAME_POINT_INDEX_SPAN,
) -> List[RouteVariant]:
    return [
        resolve_variant(
            variant, track_points, max_junction_distance_m, same_point_index_span
        )
        for variant in variants
    ]


def _junction(
    nearest: NearestTrackPoint, track_points: Sequence[TrackPoint]
) -> Junction:
    return Junction(
        track_index=nearest.track_index,
        distance_km=round_half_up(
            track_points[nearest.track_index].cumulative_distance_km, 2
        ),
    )
