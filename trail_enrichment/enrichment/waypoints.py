"""Waypoint-to-track matching and per-waypoint distance/elevation totals.

Visits are detected with hysteresis: a waypoint becomes active once the track
comes within the entry threshold and the visit is only closed after the track
moves beyond three times that distance. Switchbacks that wander near a
waypoint therefore produce one visit, recorded at the closest approach, while
a genuine return after leaving the area produces a second one.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Dict, List, Sequence

import numpy as np

from ..config import (
    VISIT_DISTANCE_CHUNK_ROWS,
    WAYPOINT_ENTRY_THRESHOLD_M,
    WAYPOINT_EXIT_MULTIPLIER,
)
from ..geometry.distance import pairwise_distances
from ..geometry.stats import accumulate_segment
from ..models import EnrichedWaypoint, RouteStats, TrackPoint, Waypoint, WaypointVisit
from ..utils import round_half_up, round_int

_log = logging.getLogger(__name__)


@dataclass(slots=True)
class _ProximityState:
    """Closest approach seen so far while a waypoint is active."""

    best_distance: float
    best_index: int


def find_waypoint_visits(
    waypoints: Sequence[Waypoint],
    track_points: Sequence[TrackPoint],
    entry_threshold_m: float = WAYPOINT_ENTRY_THRESHOLD_M,
    *,
    chunk_rows: int = VISIT_DISTANCE_CHUNK_ROWS,
) -> List[WaypointVisit]:
    """Return every visit of ``waypoints`` along the track, in track order.

    A single forward pass over the track drives a per-waypoint state table.
    Waypoints the track never comes within ``entry_threshold_m`` of are left
    out. Ties on track index keep the order in which visits were closed.
    """

    if not track_points or not waypoints:
        return []

    exit_threshold = entry_threshold_m * WAYPOINT_EXIT_MULTIPLIER
    wp_lats = np.asarray([wp.lat for wp in waypoints], dtype=float)
    wp_lons = np.asarray([wp.lon for wp in waypoints], dtype=float)
    trk_lats = np.asarray([p.lat for p in track_points], dtype=float)
    trk_lons = np.asarray([p.lon for p in track_points], dtype=float)

    # Insertion order doubles as activation order for the end-of-track flush.
    active: Dict[int, _ProximityState] = {}
    visits: List[WaypointVisit] = []
    rows = max(1, chunk_rows)

    for chunk_start in range(0, len(track_points), rows):
        chunk_end = min(chunk_start + rows, len(track_points))
        block = pairwise_distances(
            trk_lats[chunk_start:chunk_end],
            trk_lons[chunk_start:chunk_end],
            wp_lats,
            wp_lons,
        )
        for offset, row in enumerate(block):
            track_idx = chunk_start + offset
            for wp_idx in sorted(active):
                state = active[wp_idx]
                distance = float(row[wp_idx])
                if distance < state.best_distance:
                    state.best_distance = distance
                    state.best_index = track_idx
                if distance > exit_threshold:
                    visits.append(
                        WaypointVisit(
                            waypoint=waypoints[wp_idx],
                            track_index=state.best_index,
                            distance_from_track_m=state.best_distance,
                        )
                    )
                    del active[wp_idx]
            for wp_idx in np.flatnonzero(row <= entry_threshold_m):
                wp_idx = int(wp_idx)
                if wp_idx in active:
                    continue
                active[wp_idx] = _ProximityState(
                    best_distance=float(row[wp_idx]), best_index=track_idx
                )

    for wp_idx, state in active.items():
        visits.append(
            WaypointVisit(
                waypoint=waypoints[wp_idx],
                track_index=state.best_index,
                distance_from_track_m=state.best_distance,
            )
        )

    visits.sort(key=lambda visit: visit.track_index)
    _log.debug(
        "Matched %d visits for %d waypoints over %d track points",
        len(visits),
        len(waypoints),
        len(track_points),
    )
    return visits


def enrich_waypoints(
    visits: Sequence[WaypointVisit],
    track_points: Sequence[TrackPoint],
) -> List[EnrichedWaypoint]:
    """Annotate visits (in track order) with segment and cumulative totals.

    Segment values cover the track between the previous visit (or the track
    start) and this one. Distances are rounded to 0.01 km and elevations to
    whole metres; running totals are rounded from unrounded sums.
    """

    enriched: List[EnrichedWaypoint] = []
    prev_index = 0
    running = RouteStats()
    for visit in visits:
        segment = accumulate_segment(track_points, prev_index, visit.track_index)
        running = running + segment
        wp = visit.waypoint
        enriched.append(
            EnrichedWaypoint(
                name=wp.name,
                lat=wp.lat,
                lon=wp.lon,
                category=wp.category,
                description=wp.description,
                elevation=round_int(track_points[visit.track_index].elevation),
                segment_distance_km=round_half_up(segment.distance_km, 2),
                cumulative_distance_km=round_half_up(running.distance_km, 2),
                segment_ascent_m=round_int(segment.ascent_m),
                segment_descent_m=round_int(segment.descent_m),
                cumulative_ascent_m=round_int(running.ascent_m),
                cumulative_descent_m=round_int(running.descent_m),
                track_index=visit.track_index,
            )
        )
        prev_index = visit.track_index
    return enriched


def match_waypoints(
    waypoints: Sequence[Waypoint],
    track_points: Sequence[TrackPoint],
    entry_threshold_m: float = WAYPOINT_ENTRY_THRESHOLD_M,
) -> List[EnrichedWaypoint]:
    """Detect visits and enrich them in one call."""

    visits = find_waypoint_visits(waypoints, track_points, entry_threshold_m)
    return enrich_waypoints(visits, track_points)
