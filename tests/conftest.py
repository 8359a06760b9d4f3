"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable synthetic tracks so the
geometry, enrichment and pipeline tests share one set of builders.
"""
from __future__ import annotations

import os
import sys
from typing import List

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from trail_enrichment.models import TrackPoint, Waypoint

from track_factories import make_track


@pytest.fixture
def origin_waypoint() -> Waypoint:
    return Waypoint(name="Origin Hut", lat=0.0, lon=0.0, category="hut")


@pytest.fixture
def four_point_track() -> List[TrackPoint]:
    return make_track([(0, 0, 100), (0, 0.001, 110), (0, 0.002, 90), (0, 0.003, 130)])
