"""Geometry primitives: great-circle distance, route statistics, simplification."""

from .distance import EARTH_RADIUS_M, distance_meters, distances_to_point
from .simplify import (
    DisplayGeometry,
    adaptive_tolerance_m,
    douglas_peucker_indices,
    reconcile_display_points,
    simplify_for_display,
)
from .stats import accumulate_full, accumulate_segment, with_cumulative_distance

__all__ = [
    "EARTH_RADIUS_M",
    "distance_meters",
    "distances_to_point",
    "DisplayGeometry",
    "adaptive_tolerance_m",
    "douglas_peucker_indices",
    "reconcile_display_points",
    "simplify_for_display",
    "accumulate_full",
    "accumulate_segment",
    "with_cumulative_distance",
]
