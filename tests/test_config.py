"""Tests for environment-driven configuration helpers."""

from __future__ import annotations

import pytest

from trail_enrichment import config


@pytest.mark.parametrize(
    "raw, expected", [("2.5", 2.5), ("not-a-number", 1.0), (None, 1.0)]
)
def test_env_float(monkeypatch, raw, expected) -> None:
    if raw is None:
        monkeypatch.delenv("TRAIL_TEST_FLOAT", raising=False)
    else:
        monkeypatch.setenv("TRAIL_TEST_FLOAT", raw)
    assert config._env_float("TRAIL_TEST_FLOAT", 1.0) == expected


@pytest.mark.parametrize("raw, expected", [("12", 12), ("1.5", 7), (None, 7)])
def test_env_int(monkeypatch, raw, expected) -> None:
    if raw is None:
        monkeypatch.delenv("TRAIL_TEST_INT", raising=False)
    else:
        monkeypatch.setenv("TRAIL_TEST_INT", raw)
    assert config._env_int("TRAIL_TEST_INT", 7) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [("yes", True), ("ON", True), ("0", False), ("off", False), ("maybe", True)],
)
def test_env_bool(monkeypatch, raw, expected) -> None:
    monkeypatch.setenv("TRAIL_TEST_BOOL", raw)
    assert config._env_bool("TRAIL_TEST_BOOL", True) is expected


def test_defaults_are_sane() -> None:
    assert config.WAYPOINT_EXIT_MULTIPLIER == 3.0
    assert config.TARGET_DISPLAY_POINT_COUNT >= 2
    assert config.JUNCTION_MAX_DISTANCE_M > 0
