"""Tests for the batch trail build service."""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from trail_enrichment.errors import TrailInputError
from trail_enrichment.models import RawPoint
from trail_enrichment.services import TrailBuildService, TrailServiceConfig

from track_factories import make_trail


def _write_trail(root: Path, name: str, points) -> Path:
    trail_dir = root / name
    trail_dir.mkdir()
    (trail_dir / "trail.json").write_text(
        json.dumps({"name": name.title(), "points": points}), encoding="utf-8"
    )
    return trail_dir


def test_results_keep_input_order() -> None:
    trails = [make_trail(f"trail-{i}") for i in range(6)]
    report = TrailBuildService(max_workers=3).process(trails)

    assert [r.trail_id for r in report.results] == [t.trail_id for t in trails]
    assert len(report.succeeded) == 6
    assert report.failures == []
    assert set(report.models) == {t.trail_id for t in trails}


def test_one_bad_trail_does_not_stop_the_others() -> None:
    trails = [
        make_trail("good-a"),
        make_trail("bad", points=(RawPoint(0.0, 0.0), RawPoint(0.0, 999.0))),
        make_trail("good-b"),
    ]
    report = TrailBuildService(max_workers=2).process(trails)

    assert [r.trail_id for r in report.succeeded] == ["good-a", "good-b"]
    assert [r.trail_id for r in report.failures] == ["bad"]
    assert isinstance(report.failures[0].error, TrailInputError)


def test_empty_batch_returns_empty_report() -> None:
    report = TrailBuildService().process([])
    assert report.results == []


def test_cancelled_batch_builds_nothing() -> None:
    cancel = threading.Event()
    cancel.set()
    report = TrailBuildService(max_workers=2).process(
        [make_trail("a"), make_trail("b")], cancel_event=cancel
    )
    assert report.results == []


@pytest.mark.parametrize("workers", [0, -1])
def test_invalid_worker_count_is_rejected(workers) -> None:
    with pytest.raises(ValueError):
        TrailBuildService(max_workers=workers)


def test_directories_with_load_errors_fail_individually(tmp_path) -> None:
    good = _write_trail(tmp_path, "alpine", [[0, 0, 100], [0, 0.001, 120]])
    broken = tmp_path / "Broken"
    broken.mkdir()
    (broken / "trail.json").write_text("{not json", encoding="utf-8")

    report = TrailBuildService(max_workers=2).process_directories([good, broken])

    assert [r.trail_id for r in report.results] == ["alpine", "broken"]
    assert report.results[0].ok
    assert report.results[0].name == "Alpine"
    assert isinstance(report.results[1].error, TrailInputError)


def test_custom_loader_is_used(tmp_path) -> None:
    calls = []

    def loader(path: Path):
        calls.append(path.name)
        return make_trail(path.name)

    service = TrailBuildService(TrailServiceConfig(loader=loader), max_workers=1)
    report = service.process_directories([tmp_path / "one", tmp_path / "two"])

    assert sorted(calls) == ["one", "two"]
    assert [r.trail_id for r in report.succeeded] == ["one", "two"]


def test_later_trail_reusing_an_id_fails() -> None:
    trails = [
        make_trail("same", name="First"),
        make_trail("other"),
        make_trail("same", name="Second"),
    ]
    report = TrailBuildService(max_workers=3).process(trails)

    assert [r.trail_id for r in report.results] == ["same", "other", "same"]
    assert report.results[0].ok
    assert report.results[0].name == "First"
    assert not report.results[2].ok
    assert report.results[2].name == "Second"
    assert isinstance(report.results[2].error, TrailInputError)
    assert "duplicate" in str(report.results[2].error)
    assert report.models["same"] is report.results[0].model


def test_failed_trail_does_not_reserve_its_id() -> None:
    trails = [
        make_trail("same", points=(RawPoint(0.0, 0.0), RawPoint(0.0, 999.0))),
        make_trail("same"),
    ]
    report = TrailBuildService(max_workers=2).process(trails)

    assert [r.ok for r in report.results] == [False, True]
