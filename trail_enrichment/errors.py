"""Central error types used across the application."""

from __future__ import annotations


class TrailEnrichmentError(RuntimeError):
    """Base error for trail enrichment failures."""


class ConfigError(TrailEnrichmentError):
    """Raised when pipeline configuration values are out of range."""


class TrailInputError(TrailEnrichmentError):
    """Raised when trail input data is missing, corrupt or out of range."""

    def __init__(self, message: str, trail_id: str | None = None):
        self.trail_id = trail_id
        if trail_id:
            message = f"{trail_id}: {message}"
        super().__init__(message)


__all__ = [
    "TrailEnrichmentError",
    "ConfigError",
    "TrailInputError",
]
