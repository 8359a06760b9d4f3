"""Per-trail enrichment pipeline.

Pure transformation: given one trail's already-classified points, waypoints
and variants it produces an immutable :class:`TrailModel`. Stages run in a
fixed order over the full-resolution track; the display copy is derived on
the side and never feeds back into waypoint or junction matching.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Iterable, List, Optional, Tuple

from .enrichment.junctions import resolve_variants
from .enrichment.waypoints import match_waypoints
from .errors import TrailEnrichmentError, TrailInputError
from .geometry.simplify import simplify_for_display
from .geometry.stats import accumulate_full, with_cumulative_distance
from .models import (
    PipelineConfig,
    RawPoint,
    TrailInput,
    TrailModel,
    TrailResult,
    VariantKind,
)

_log = logging.getLogger(__name__)

# Trail ids name the generated files, so they must be a single path component.
TRAIL_ID_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


def validate_trail_input(trail: TrailInput) -> None:
    """Raise :class:`TrailInputError` for ids or coordinates the build cannot use."""

    if not TRAIL_ID_PATTERN.fullmatch(trail.trail_id):
        raise TrailInputError(
            "trail id must be a single file name made of letters, digits, "
            "'.', '_' or '-'",
            trail.trail_id,
        )
    _check_points(trail.points, trail.trail_id, "track point")
    for wp in trail.waypoints:
        _check_coordinate(wp.lat, wp.lon, trail.trail_id, f"waypoint {wp.name!r}")
    for variant in trail.variants:
        _check_points(variant.points, trail.trail_id, f"variant {variant.name!r} point")


def build_trail_model(
    trail: TrailInput, config: Optional[PipelineConfig] = None
) -> Tuple[TrailModel, List[str]]:
    """Run every enrichment stage for one trail.

    Returns the model together with non-fatal warnings raised along the way
    (currently display-point reconciliation misses).
    """

    config = config or PipelineConfig()
    validate_trail_input(trail)

    track_points = with_cumulative_distance(trail.points)
    totals = accumulate_full(track_points)

    display = simplify_for_display(
        track_points, config.target_display_point_count, totals.distance_km
    )
    waypoints = match_waypoints(
        trail.waypoints, track_points, config.waypoint_entry_threshold_m
    )
    variants = resolve_variants(
        trail.variants,
        track_points,
        config.junction_max_distance_m,
        config.side_trip_same_point_index_span,
    )

    model = TrailModel(
        track_points=tuple(track_points),
        display_points=tuple(display.points),
        total_distance_km=totals.distance_km,
        total_ascent_m=totals.ascent_m,
        total_descent_m=totals.descent_m,
        waypoints=tuple(waypoints),
        alternates=tuple(v for v in variants if v.kind is VariantKind.ALTERNATE),
        side_trips=tuple(v for v in variants if v.kind is VariantKind.SIDE_TRIP),
    )
    _log.info(
        "Trail %s: %.1f km, +%dm/-%dm, %d/%d display points "
        "(tolerance %.1fm), %d waypoint visits, %d alternates, %d side trips",
        trail.trail_id,
        model.total_distance_km,
        round(model.total_ascent_m),
        round(model.total_descent_m),
        len(model.display_points),
        len(model.track_points),
        display.tolerance_m,
        len(model.waypoints),
        len(model.alternates),
        len(model.side_trips),
    )
    return model, list(display.warnings)


def process_trail(
    trail: TrailInput, config: Optional[PipelineConfig] = None
) -> TrailResult:
    """Build one trail, converting any failure into a failed :class:`TrailResult`."""

    try:
        model, warnings = build_trail_model(trail, config)
    except TrailEnrichmentError as exc:
        _log.error("Skipping trail %s: %s", trail.trail_id, exc)
        return TrailResult(trail_id=trail.trail_id, name=trail.name, error=exc)
    except Exception as exc:
        _log.error(
            "Trail %s failed due to unexpected error: %s",
            trail.trail_id,
            exc,
            exc_info=True,
        )
        return TrailResult(trail_id=trail.trail_id, name=trail.name, error=exc)
    for warning in warnings:
        _log.warning("Trail %s: %s", trail.trail_id, warning)
    return TrailResult(
        trail_id=trail.trail_id, name=trail.name, model=model, warnings=warnings
    )


def _check_points(points: Iterable[RawPoint], trail_id: str, label: str) -> None:
    for idx, point in enumerate(points):
        _check_coordinate(point.lat, point.lon, trail_id, f"{label} {idx}")
        if not math.isfinite(point.elevation):
            raise TrailInputError(
                f"{label} {idx} has non-finite elevation {point.elevation!r}",
                trail_id,
            )


def _check_coordinate(lat: float, lon: float, trail_id: str, label: str) -> None:
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise TrailInputError(f"{label} has non-finite coordinates", trail_id)
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        raise TrailInputError(
            f"{label} is out of range (lat={lat}, lon={lon})", trail_id
        )


__all__ = [
    "TRAIL_ID_PATTERN",
    "build_trail_model",
    "process_trail",
    "validate_trail_input",
]
