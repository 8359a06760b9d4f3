"""Read already-classified trail inputs from disk.

Each trail lives in its own directory::

    data/trails/
        aawt/
            trail.json       # id, name, points, waypoints, variants
            waypoints.csv    # optional, used when trail.json lists none

Points may be objects (``{"lat", "lon", "ele"|"elevation"}``) or
``[lat, lon, ele?]`` arrays. Missing elevations become 0.
"""

from __future__ import annotations

import json
import logging
import math
import re
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd

from .enrichment.categories import clean_name, infer_category
from .errors import TrailInputError
from .models import RawPoint, TrailInput, VariantInput, VariantKind, Waypoint

PathLike = Union[str, Path]

TRAIL_FILE = "trail.json"
DEFAULT_WAYPOINTS_FILE = "waypoints.csv"

_log = logging.getLogger(__name__)


def discover_trail_dirs(data_dir: PathLike) -> List[Path]:
    """Return trail subdirectories of ``data_dir`` sorted by name."""

    root = Path(data_dir)
    if not root.is_dir():
        return []
    return sorted(p for p in root.iterdir() if p.is_dir())


def load_trail_dir(trail_dir: PathLike) -> TrailInput:
    """Load one trail directory into a :class:`TrailInput`."""

    trail_dir = Path(trail_dir)
    dir_id = re.sub(r"\s+", "-", trail_dir.name.strip().lower())
    config_path = trail_dir / TRAIL_FILE
    if not config_path.is_file():
        raise TrailInputError(f"missing {TRAIL_FILE}", dir_id)
    try:
        with open(config_path, "r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except json.JSONDecodeError as exc:
        raise TrailInputError(f"invalid {TRAIL_FILE}: {exc}", dir_id) from exc
    if not isinstance(payload, Mapping):
        raise TrailInputError(f"{TRAIL_FILE} must contain an object", dir_id)

    trail_id = str(payload.get("id") or dir_id)
    waypoints = parse_waypoints(payload.get("waypoints") or [], trail_id)
    if not waypoints:
        csv_name = str(payload.get("waypointsFile") or DEFAULT_WAYPOINTS_FILE)
        if Path(csv_name).name != csv_name:
            raise TrailInputError(
                f"waypointsFile must name a file inside the trail directory: "
                f"{csv_name!r}",
                trail_id,
            )
        csv_path = trail_dir / csv_name
        if csv_path.is_file():
            waypoints = read_waypoints_csv(csv_path, trail_id)
            _log.info(
                "Trail %s: loaded %d waypoints from %s",
                trail_id,
                len(waypoints),
                csv_name,
            )

    return TrailInput(
        trail_id=trail_id,
        name=payload.get("name") or None,
        points=parse_points(payload.get("points") or [], trail_id),
        waypoints=tuple(waypoints),
        variants=tuple(parse_variants(payload.get("variants") or [], trail_id)),
    )


def parse_points(
    raw_points: Iterable[Any], trail_id: Optional[str] = None
) -> Tuple[RawPoint, ...]:
    """Convert point objects or ``[lat, lon, ele]`` arrays into raw points."""

    _require_list(raw_points, "points", trail_id)
    points: List[RawPoint] = []
    for idx, raw in enumerate(raw_points):
        try:
            if isinstance(raw, Mapping):
                lat, lon = raw["lat"], raw["lon"]
                ele = raw.get("ele", raw.get("elevation"))
            else:
                lat, lon = raw[0], raw[1]
                ele = raw[2] if len(raw) > 2 else None
            points.append(
                RawPoint(lat=float(lat), lon=float(lon), elevation=_elevation(ele))
            )
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise TrailInputError(
                f"unparseable point {idx}: {raw!r}", trail_id
            ) from exc
    return tuple(points)


def parse_waypoints(
    raw_waypoints: Iterable[Any], trail_id: Optional[str] = None
) -> List[Waypoint]:
    _require_list(raw_waypoints, "waypoints", trail_id)
    waypoints: List[Waypoint] = []
    for idx, raw in enumerate(raw_waypoints):
        if not isinstance(raw, Mapping):
            raise TrailInputError(f"waypoint {idx} must be an object", trail_id)
        try:
            waypoints.append(
                make_waypoint(
                    name=str(raw["name"]),
                    lat=float(raw["lat"]),
                    lon=float(raw["lon"]),
                    category=raw.get("category") or raw.get("type"),
                    description=raw.get("description") or raw.get("desc"),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise TrailInputError(
                f"unparseable waypoint {idx}: {raw!r}", trail_id
            ) from exc
    return waypoints


def parse_variants(
    raw_variants: Iterable[Any], trail_id: Optional[str] = None
) -> List[VariantInput]:
    _require_list(raw_variants, "variants", trail_id)
    variants: List[VariantInput] = []
    for idx, raw in enumerate(raw_variants):
        if not isinstance(raw, Mapping):
            raise TrailInputError(f"variant {idx} must be an object", trail_id)
        name = str(raw.get("name") or "Unnamed")
        try:
            kind = VariantKind.parse(raw.get("kind") or raw.get("type") or "")
        except ValueError as exc:
            raise TrailInputError(
                f"variant {name!r} has unknown kind {raw.get('kind')!r}", trail_id
            ) from exc
        variants.append(
            VariantInput(
                name=name,
                kind=kind,
                points=parse_points(raw.get("points") or [], trail_id),
            )
        )
    return variants


def read_waypoints_csv(
    path: PathLike, trail_id: Optional[str] = None
) -> List[Waypoint]:
    """Read waypoints from a CSV with ``name, lat, lon[, type|category, description]``.

    Rows missing a name or coordinate are skipped.
    """

    try:
        frame = pd.read_csv(path, dtype=str)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise TrailInputError(
            f"unreadable waypoint CSV {Path(path).name}: {exc}", trail_id
        ) from exc
    missing = {"name", "lat", "lon"} - set(frame.columns)
    if missing:
        raise TrailInputError(
            f"waypoint CSV {Path(path).name} missing columns: {sorted(missing)}",
            trail_id,
        )
    frame["lat"] = pd.to_numeric(frame["lat"], errors="coerce")
    frame["lon"] = pd.to_numeric(frame["lon"], errors="coerce")
    frame = frame.dropna(subset=["name", "lat", "lon"])
    category_col = "category" if "category" in frame.columns else "type"

    waypoints: List[Waypoint] = []
    for row in frame.to_dict(orient="records"):
        name = str(row["name"]).strip()
        if not name:
            continue
        waypoints.append(
            make_waypoint(
                name=name,
                lat=float(row["lat"]),
                lon=float(row["lon"]),
                category=_optional_text(row.get(category_col)),
                description=_optional_text(row.get("description")),
            )
        )
    return waypoints


def make_waypoint(
    name: str,
    lat: float,
    lon: float,
    category: Optional[str] = None,
    description: Optional[str] = None,
) -> Waypoint:
    """Build a waypoint, inferring the category from the name when absent."""

    if category:
        return Waypoint(
            name=name, lat=lat, lon=lon, category=category, description=description
        )
    return Waypoint(
        name=clean_name(name),
        lat=lat,
        lon=lon,
        category=infer_category(name),
        description=description,
    )


def _require_list(value: Any, field: str, trail_id: Optional[str]) -> None:
    if not isinstance(value, (list, tuple)):
        raise TrailInputError(
            f"{field} must be a list, got {type(value).__name__}", trail_id
        )


def _elevation(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    elevation = float(value)
    return 0.0 if math.isnan(elevation) else elevation


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None
