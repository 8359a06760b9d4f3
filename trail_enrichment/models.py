"""Dataclasses describing trail inputs, configuration and the enriched model."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import math
from typing import List, Optional, Tuple

from .config import (
    JUNCTION_MAX_DISTANCE_M,
    SIDE_TRIP_SAME_POINT_INDEX_SPAN,
    TARGET_DISPLAY_POINT_COUNT,
    WAYPOINT_ENTRY_THRESHOLD_M,
)
from .errors import ConfigError


class VariantKind(str, Enum):
    ALTERNATE = "alternate"
    SIDE_TRIP = "sideTrip"

    @classmethod
    def parse(cls, value: str) -> "VariantKind":
        """Return the kind for ``value``, accepting the dashed side-trip spelling."""

        normalized = str(value).strip()
        if normalized in {"side-trip", "side_trip", "sidetrip"}:
            return cls.SIDE_TRIP
        return cls(normalized)


@dataclass(frozen=True, slots=True)
class RawPoint:
    """Raw GPS sample as delivered by the track classifier."""

    lat: float
    lon: float
    elevation: float = 0.0


@dataclass(frozen=True, slots=True)
class TrackPoint:
    """Main-route sample augmented with distance from the start of the track."""

    lat: float
    lon: float
    elevation: float
    cumulative_distance_km: float


@dataclass(frozen=True, slots=True)
class Waypoint:
    name: str
    lat: float
    lon: float
    category: str = "waypoint"
    description: Optional[str] = None


@dataclass(frozen=True, slots=True)
class WaypointVisit:
    """Closest approach of the track to a waypoint during one pass."""

    waypoint: Waypoint
    track_index: int
    distance_from_track_m: float


@dataclass(frozen=True, slots=True)
class EnrichedWaypoint:
    """Waypoint annotated with segment and running totals along the track."""

    name: str
    lat: float
    lon: float
    category: str
    description: Optional[str]
    elevation: int
    segment_distance_km: float
    cumulative_distance_km: float
    segment_ascent_m: int
    segment_descent_m: int
    cumulative_ascent_m: int
    cumulative_descent_m: int
    track_index: int


@dataclass(frozen=True, slots=True)
class RouteStats:
    """Distance and elevation totals over an ordered run of points."""

    distance_km: float = 0.0
    ascent_m: float = 0.0
    descent_m: float = 0.0

    def __add__(self, other: "RouteStats") -> "RouteStats":
        return RouteStats(
            distance_km=self.distance_km + other.distance_km,
            ascent_m=self.ascent_m + other.ascent_m,
            descent_m=self.descent_m + other.descent_m,
        )


@dataclass(frozen=True, slots=True)
class Junction:
    """Snapped connection between a variant end and the main track."""

    track_index: int
    distance_km: float


@dataclass(frozen=True, slots=True)
class VariantInput:
    name: str
    kind: VariantKind
    points: Tuple[RawPoint, ...] = ()


@dataclass(frozen=True, slots=True)
class RouteVariant:
    """Alternate or side trip with its statistics and optional junctions."""

    name: str
    kind: VariantKind
    points: Tuple[RawPoint, ...]
    distance_km: float
    ascent_m: int
    descent_m: int
    branch: Optional[Junction] = None
    rejoin: Optional[Junction] = None

    @property
    def branch_track_index(self) -> Optional[int]:
        return self.branch.track_index if self.branch else None

    @property
    def branch_distance_km(self) -> Optional[float]:
        return self.branch.distance_km if self.branch else None

    @property
    def rejoin_track_index(self) -> Optional[int]:
        return self.rejoin.track_index if self.rejoin else None

    @property
    def rejoin_distance_km(self) -> Optional[float]:
        return self.rejoin.distance_km if self.rejoin else None


@dataclass(frozen=True, slots=True)
class TrailInput:
    """Already-classified inputs for a single trail."""

    trail_id: str
    points: Tuple[RawPoint, ...]
    waypoints: Tuple[Waypoint, ...] = ()
    variants: Tuple[VariantInput, ...] = ()
    name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TrailModel:
    """Pipeline output for one trail."""

    track_points: Tuple[TrackPoint, ...]
    display_points: Tuple[TrackPoint, ...]
    total_distance_km: float
    total_ascent_m: float
    total_descent_m: float
    waypoints: Tuple[EnrichedWaypoint, ...]
    alternates: Tuple[RouteVariant, ...]
    side_trips: Tuple[RouteVariant, ...]


@dataclass(slots=True)
class PipelineConfig:
    """Per-run tuning for the enrichment pipeline."""

    target_display_point_count: int = TARGET_DISPLAY_POINT_COUNT
    waypoint_entry_threshold_m: float = WAYPOINT_ENTRY_THRESHOLD_M
    junction_max_distance_m: float = JUNCTION_MAX_DISTANCE_M
    side_trip_same_point_index_span: int = SIDE_TRIP_SAME_POINT_INDEX_SPAN

    def __post_init__(self) -> None:
        if self.target_display_point_count < 2:
            raise ConfigError("target_display_point_count must be at least 2")
        for name in ("waypoint_entry_threshold_m", "junction_max_distance_m"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise ConfigError(f"{name} must be a positive finite number")
        if self.side_trip_same_point_index_span < 0:
            raise ConfigError("side_trip_same_point_index_span must not be negative")


@dataclass(slots=True)
class TrailResult:
    """Outcome of processing one trail: a model or the error that stopped it."""

    trail_id: str
    model: Optional[TrailModel] = None
    error: Optional[Exception] = None
    name: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.model is not None and self.error is None
