"""Display simplification for long, dense tracks.

The tolerance is derived from the track itself so callers never hand-tune it:
reduction pressure grows with how far the point count exceeds the display
target, and longer trails (viewed further zoomed out) are simplified harder.
Simplification always keeps original samples; display points are matched back
to the full-resolution track to recover their cumulative distance.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
import logging
import math
from typing import Dict, List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray
from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError

from ..config import (
    SIMPLIFY_DISTANCE_SCALE_KM,
    SIMPLIFY_MIN_TOLERANCE_M,
    SIMPLIFY_TOLERANCE_MULTIPLIER,
)
from ..models import RawPoint, TrackPoint

MetricArray = NDArray[np.float64]

_log = logging.getLogger(__name__)


@dataclass(slots=True)
class DisplayGeometry:
    """Simplified copy of a track plus the tolerance that produced it."""

    points: List[TrackPoint]
    tolerance_m: float
    warnings: List[str] = field(default_factory=list)


def adaptive_tolerance_m(
    point_count: int, target_count: int, total_distance_km: float
) -> float:
    """Return the simplification tolerance (metres) for a track.

    Zero means the track already fits the target and must not be simplified.
    """

    if point_count <= target_count:
        return 0.0
    ratio = point_count / float(target_count)
    return SIMPLIFY_MIN_TOLERANCE_M + SIMPLIFY_TOLERANCE_MULTIPLIER * math.log2(
        ratio
    ) * (1.0 + total_distance_km / SIMPLIFY_DISTANCE_SCALE_KM)


def project_to_local_metric(
    lats: Sequence[float], lons: Sequence[float]
) -> MetricArray:
    """Project lat/lon pairs into a local UTM coordinate system (metres)."""

    if len(lats) == 0:
        return np.empty((0, 2), dtype=float)
    lat_arr = np.asarray(lats, dtype=float)
    lon_arr = np.asarray(lons, dtype=float)
    transformer = _build_local_transformer(
        float(np.mean(lat_arr)), float(np.mean(lon_arr))
    )
    xs, ys = transformer.transform(lon_arr, lat_arr)
    return np.column_stack((xs, ys)).astype(float, copy=False)


def douglas_peucker_indices(
    points: MetricArray, tolerance_m: float
) -> NDArray[np.int_]:
    """Return indices of the points kept by Douglas-Peucker simplification.

    Uses an explicit stack of index ranges instead of recursion so tracks with
    tens of thousands of samples cannot exhaust the interpreter stack. The
    first and last indices are always kept.
    """

    count = len(points)
    if count < 3 or tolerance_m <= 0:
        return np.arange(count)

    keep = np.zeros(count, dtype=bool)
    keep[0] = True
    keep[count - 1] = True
    stack: List[Tuple[int, int]] = [(0, count - 1)]
    while stack:
        start, end = stack.pop()
        if end - start < 2:
            continue
        deviations = _segment_distances(points, start, end)
        offset = int(np.argmax(deviations))
        if float(deviations[offset]) > tolerance_m:
            split = start + 1 + offset
            keep[split] = True
            stack.append((start, split))
            stack.append((split, end))
    return np.flatnonzero(keep)


def simplify_coordinates(
    points: Sequence[RawPoint | TrackPoint],
    target_count: int,
    total_distance_km: float,
) -> Tuple[List[RawPoint], float]:
    """Reduce ``points`` towards ``target_count`` samples.

    Returns the kept samples (original coordinates, never interpolated) and
    the tolerance used. Sequences already within the target come back as-is.
    """

    tolerance = adaptive_tolerance_m(len(points), target_count, total_distance_km)
    if tolerance <= 0:
        return [_as_raw(p) for p in points], 0.0
    metric = project_to_local_metric(
        [p.lat for p in points], [p.lon for p in points]
    )
    indices = douglas_peucker_indices(metric, tolerance)
    _log.debug(
        "Simplified %d points to %d (tolerance=%.2fm, target=%d)",
        len(points),
        len(indices),
        tolerance,
        target_count,
    )
    return [_as_raw(points[int(i)]) for i in indices], tolerance


def reconcile_display_points(
    simplified: Sequence[RawPoint],
    track_points: Sequence[TrackPoint],
) -> Tuple[List[TrackPoint], List[str]]:
    """Map simplified samples back onto the full track by exact coordinates.

    Matches advance monotonically so a track that passes the same coordinate
    twice resolves each display point to the right pass. A sample with no
    exact match is replaced by a stand-in at its own position with zero
    cumulative distance and reported in the returned warnings; callers log
    them with the trail they belong to.
    """

    by_coord: Dict[Tuple[float, float], List[int]] = defaultdict(list)
    for idx, point in enumerate(track_points):
        by_coord[(point.lat, point.lon)].append(idx)

    resolved: List[TrackPoint] = []
    warnings: List[str] = []
    cursor = 0
    for point in simplified:
        candidates = by_coord.get((point.lat, point.lon))
        match = None
        if candidates:
            match = next((i for i in candidates if i >= cursor), candidates[-1])
        if match is None:
            message = (
                f"Display point ({point.lat}, {point.lon}) has no exact match "
                "in the track; using zero cumulative distance"
            )
            warnings.append(message)
            resolved.append(
                TrackPoint(
                    lat=point.lat,
                    lon=point.lon,
                    elevation=point.elevation,
                    cumulative_distance_km=0.0,
                )
            )
            continue
        cursor = max(cursor, match)
        resolved.append(track_points[match])
    return resolved, warnings


def simplify_for_display(
    track_points: Sequence[TrackPoint],
    target_count: int,
    total_distance_km: float,
) -> DisplayGeometry:
    """Return the display copy of a distance-augmented track."""

    if len(track_points) <= target_count:
        return DisplayGeometry(points=list(track_points), tolerance_m=0.0)
    simplified, tolerance = simplify_coordinates(
        track_points, target_count, total_distance_km
    )
    resolved, warnings = reconcile_display_points(simplified, track_points)
    return DisplayGeometry(points=resolved, tolerance_m=tolerance, warnings=warnings)


def _segment_distances(points: MetricArray, start: int, end: int) -> MetricArray:
    """Distances from ``points[start+1:end]`` to the chord ``start -> end``."""

    interior = points[start + 1 : end]
    origin = points[start]
    chord = points[end] - origin
    length_sq = float(chord @ chord)
    rel = interior - origin
    if length_sq == 0.0:
        return np.linalg.norm(rel, axis=1)
    t = np.clip((rel @ chord) / length_sq, 0.0, 1.0)
    return np.linalg.norm(rel - t[:, None] * chord, axis=1)


def _build_local_transformer(mean_lat: float, mean_lon: float) -> Transformer:
    """Build a local UTM transformer centred on the provided coordinates."""

    zone = int((mean_lon + 180.0) // 6.0) + 1
    zone = max(1, min(zone, 60))
    if mean_lat >= 0:
        epsg = 32600 + zone
    else:
        epsg = 32700 + zone
    try:
        target_crs = CRS.from_epsg(epsg)
    except CRSError:
        target_crs = CRS.from_epsg(3857)
    return Transformer.from_crs(CRS.from_epsg(4326), target_crs, always_xy=True)


def _as_raw(point: RawPoint | TrackPoint) -> RawPoint:
    if isinstance(point, RawPoint):
        return point
    return RawPoint(lat=point.lat, lon=point.lon, elevation=point.elevation)
