"""Central configuration for the trail enrichment pipeline.

All values are constants imported by the rest of the package. Each one can be
overridden through an environment variable of the same name (optionally via a
local `.env`).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Input/Output
# ---------------------------------------------------------------------------
# One subdirectory per trail, each holding a trail.json (and optionally a
# waypoints.csv fallback).
DATA_DIR = os.getenv("TRAIL_DATA_DIR", os.path.join("data", "trails"))
OUTPUT_DIR = os.getenv("TRAIL_OUTPUT_DIR", os.path.join("data", "generated"))

# Pretty-print generated JSON files.
OUTPUT_JSON_INDENT = _env_int("OUTPUT_JSON_INDENT", 2)

# Write per-trail JSON even when some trails in the batch failed.
WRITE_PARTIAL_RESULTS = _env_bool("WRITE_PARTIAL_RESULTS", True)


# ---------------------------------------------------------------------------
# Display simplification
# ---------------------------------------------------------------------------
# Tracks at or below this many points are rendered unsimplified.
TARGET_DISPLAY_POINT_COUNT = _env_int("TARGET_DISPLAY_POINT_COUNT", 3000)

# tolerance = MIN + MULTIPLIER * log2(N / target) * (1 + km / SCALE_KM)
SIMPLIFY_MIN_TOLERANCE_M = _env_float("SIMPLIFY_MIN_TOLERANCE_M", 5.0)
SIMPLIFY_TOLERANCE_MULTIPLIER = _env_float("SIMPLIFY_TOLERANCE_MULTIPLIER", 5.0)
SIMPLIFY_DISTANCE_SCALE_KM = _env_float("SIMPLIFY_DISTANCE_SCALE_KM", 500.0)


# ---------------------------------------------------------------------------
# Waypoint matching
# ---------------------------------------------------------------------------
# A waypoint becomes "active" once the track comes within this many metres.
WAYPOINT_ENTRY_THRESHOLD_M = _env_float("WAYPOINT_ENTRY_THRESHOLD_M", 200.0)

# The track must move beyond entry * multiplier before the visit is closed.
WAYPOINT_EXIT_MULTIPLIER = 3.0

# Track rows per vectorised distance block during visit detection. Bounds
# memory at rows * waypoints floats.
VISIT_DISTANCE_CHUNK_ROWS = _env_int("VISIT_DISTANCE_CHUNK_ROWS", 4096)


# ---------------------------------------------------------------------------
# Route variants
# ---------------------------------------------------------------------------
# Variant ends further than this from the main track are left unanchored.
JUNCTION_MAX_DISTANCE_M = _env_float("JUNCTION_MAX_DISTANCE_M", 500.0)

# Side trips whose ends snap within this many track indices of each other are
# treated as out-and-back spurs and get no rejoin marker.
SIDE_TRIP_SAME_POINT_INDEX_SPAN = _env_int("SIDE_TRIP_SAME_POINT_INDEX_SPAN", 10)


# ---------------------------------------------------------------------------
# Performance tuning
# ---------------------------------------------------------------------------
# Trails processed in parallel by the batch service.
MAX_WORKERS = _env_int("MAX_WORKERS", 4)
