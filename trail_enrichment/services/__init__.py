"""Service layer package.

Exports high-level services consumed by orchestration / presentation layers.
"""

from .trail_service import TrailBuildReport, TrailBuildService, TrailServiceConfig

__all__ = ["TrailBuildReport", "TrailBuildService", "TrailServiceConfig"]
