"""Stable JSON shape for enriched trail models.

Field names and units are consumed by the static site and map renderer:
distances in km rounded to 0.01, elevations and ascent/descent in whole
metres, indices 0-based into the unsimplified track. Unresolved junction
fields are omitted rather than written as null.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .models import EnrichedWaypoint, RouteVariant, TrackPoint, TrailModel
from .utils import round_half_up, round_int


def track_point_to_dict(point: TrackPoint) -> Dict[str, Any]:
    return {
        "lat": point.lat,
        "lon": point.lon,
        "elevation": round_int(point.elevation),
        "cumulativeDistanceKm": round_half_up(point.cumulative_distance_km, 2),
    }


def waypoint_to_dict(waypoint: EnrichedWaypoint) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "name": waypoint.name,
        "lat": waypoint.lat,
        "lon": waypoint.lon,
        "category": waypoint.category,
    }
    if waypoint.description is not None:
        data["description"] = waypoint.description
    data.update(
        {
            "elevation": waypoint.elevation,
            "segmentDistanceKm": waypoint.segment_distance_km,
            "cumulativeDistanceKm": waypoint.cumulative_distance_km,
            "segmentAscentM": waypoint.segment_ascent_m,
            "segmentDescentM": waypoint.segment_descent_m,
            "cumulativeAscentM": waypoint.cumulative_ascent_m,
            "cumulativeDescentM": waypoint.cumulative_descent_m,
            "trackIndex": waypoint.track_index,
        }
    )
    return data


def variant_to_dict(variant: RouteVariant) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "name": variant.name,
        "kind": variant.kind.value,
        "points": [
            {"lat": p.lat, "lon": p.lon, "elevation": round_int(p.elevation)}
            for p in variant.points
        ],
        "distanceKm": variant.distance_km,
        "ascentM": variant.ascent_m,
        "descentM": variant.descent_m,
    }
    if variant.branch is not None:
        data["branchTrackIndex"] = variant.branch.track_index
        data["branchDistanceKm"] = variant.branch.distance_km
    if variant.rejoin is not None:
        data["rejoinTrackIndex"] = variant.rejoin.track_index
        data["rejoinDistanceKm"] = variant.rejoin.distance_km
    return data


def trail_model_to_dict(model: TrailModel) -> Dict[str, Any]:
    """Return the JSON-ready representation of ``model``."""

    return {
        "trackPoints": [track_point_to_dict(p) for p in model.track_points],
        "displayPoints": [track_point_to_dict(p) for p in model.display_points],
        "totalDistanceKm": round_half_up(model.total_distance_km, 2),
        "totalAscentM": round_int(model.total_ascent_m),
        "totalDescentM": round_int(model.total_descent_m),
        "waypoints": [waypoint_to_dict(w) for w in model.waypoints],
        "alternates": [variant_to_dict(v) for v in model.alternates],
        "sideTrips": [variant_to_dict(v) for v in model.side_trips],
    }


def trail_index_entry(
    trail_id: str, name: Optional[str], model: TrailModel
) -> Dict[str, Any]:
    """Summary row for the generated trail index."""

    return {
        "id": trail_id,
        "name": name or trail_id,
        "lengthKm": round_half_up(model.total_distance_km, 1),
    }


def trail_index(entries: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(entries, key=lambda entry: entry["id"])
