"""Trail geometry enrichment package."""

from .errors import ConfigError, TrailEnrichmentError, TrailInputError
from .models import (
    EnrichedWaypoint,
    PipelineConfig,
    RawPoint,
    RouteVariant,
    TrackPoint,
    TrailInput,
    TrailModel,
    TrailResult,
    VariantInput,
    VariantKind,
    Waypoint,
)
from .pipeline import build_trail_model, process_trail

__all__ = [
    "ConfigError",
    "TrailEnrichmentError",
    "TrailInputError",
    "EnrichedWaypoint",
    "PipelineConfig",
    "RawPoint",
    "RouteVariant",
    "TrackPoint",
    "TrailInput",
    "TrailModel",
    "TrailResult",
    "VariantInput",
    "VariantKind",
    "Waypoint",
    "build_trail_model",
    "process_trail",
]
