"""Great-circle distance helpers (haversine, spherical Earth)."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

EARTH_RADIUS_M = 6_371_000.0

MetricArray = NDArray[np.float64]


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the haversine distance in metres between two lat/lon pairs.

    Coordinates are not validated; out-of-range input is the caller's problem.
    """

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2.0) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    )
    # Floating point can push ``a`` marginally outside [0, 1] near antipodes.
    a = min(1.0, max(0.0, a))
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return EARTH_RADIUS_M * c


def distances_to_point(
    lats: Sequence[float] | MetricArray,
    lons: Sequence[float] | MetricArray,
    lat: float,
    lon: float,
) -> MetricArray:
    """Vectorised haversine distance (metres) from every (lats, lons) to a point."""

    lat_arr = np.radians(np.asarray(lats, dtype=float))
    lon_arr = np.radians(np.asarray(lons, dtype=float))
    phi = math.radians(lat)
    lam = math.radians(lon)
    d_phi = phi - lat_arr
    d_lambda = lam - lon_arr
    a = (
        np.sin(d_phi / 2.0) ** 2
        + np.cos(lat_arr) * math.cos(phi) * np.sin(d_lambda / 2.0) ** 2
    )
    a = np.clip(a, 0.0, 1.0)
    return EARTH_RADIUS_M * 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))


def pairwise_distances(
    row_lats: MetricArray,
    row_lons: MetricArray,
    col_lats: MetricArray,
    col_lons: MetricArray,
) -> MetricArray:
    """Return a ``(rows, cols)`` matrix of haversine distances in metres."""

    phi_r = np.radians(np.asarray(row_lats, dtype=float))[:, None]
    lam_r = np.radians(np.asarray(row_lons, dtype=float))[:, None]
    phi_c = np.radians(np.asarray(col_lats, dtype=float))[None, :]
    lam_c = np.radians(np.asarray(col_lons, dtype=float))[None, :]
    a = (
        np.sin((phi_c - phi_r) / 2.0) ** 2
        + np.cos(phi_r) * np.cos(phi_c) * np.sin((lam_c - lam_r) / 2.0) ** 2
    )
    a = np.clip(a, 0.0, 1.0)
    return EARTH_RADIUS_M * 2.0 * np.arctan2(np.sqrt(a), np.sqrt(1.0 - a))

