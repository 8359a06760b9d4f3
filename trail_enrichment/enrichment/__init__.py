"""Waypoint and route-variant enrichment against a distance-augmented track."""

from .categories import clean_name, infer_category
from .junctions import (
    NearestTrackPoint,
    find_nearest_track_point,
    resolve_variant,
    resolve_variants,
)
from .waypoints import enrich_waypoints, find_waypoint_visits, match_waypoints

__all__ = [
    "clean_name",
    "infer_category",
    "NearestTrackPoint",
    "find_nearest_track_point",
    "resolve_variant",
    "resolve_variants",
    "enrich_waypoints",
    "find_waypoint_visits",
    "match_waypoints",
]
