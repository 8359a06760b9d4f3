"""Batch trail build service.

Runs the per-trail pipeline for many trails, one worker per trail. Trails
share no state, so a failure in one is captured as a failed result and never
stops the others.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
import logging
from pathlib import Path
import threading
from typing import Callable, Dict, List, Optional, Sequence

from ..config import MAX_WORKERS
from ..errors import TrailInputError
from ..loaders import load_trail_dir
from ..models import PipelineConfig, TrailInput, TrailModel, TrailResult
from ..pipeline import process_trail

TrailLoader = Callable[[Path], TrailInput]


@dataclass(slots=True)
class TrailBuildReport:
    """Per-trail outcomes in input order."""

    results: List[TrailResult] = field(default_factory=list)

    @property
    def succeeded(self) -> List[TrailResult]:
        return [r for r in self.results if r.ok]

    @property
    def failures(self) -> List[TrailResult]:
        return [r for r in self.results if not r.ok]

    @property
    def models(self) -> Dict[str, TrailModel]:
        return {r.trail_id: r.model for r in self.results if r.model is not None}


@dataclass(slots=True)
class TrailServiceConfig:
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    loader: TrailLoader = load_trail_dir
    logger: logging.Logger | None = None


class TrailBuildService:
    def __init__(
        self,
        config: TrailServiceConfig | None = None,
        max_workers: int | None = None,
    ):
        self.config = config or TrailServiceConfig()
        self.max_workers = MAX_WORKERS if max_workers is None else max_workers
        if self.max_workers <= 0:
            raise ValueError("max_workers must be positive")
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)

    def process(
        self,
        trails: Sequence[TrailInput],
        cancel_event: threading.Event | None = None,
    ) -> TrailBuildReport:
        """Build every trail in ``trails``."""

        return self._run(
            [(trail.trail_id, lambda trail=trail: trail) for trail in trails],
            cancel_event,
        )

    def process_directories(
        self,
        trail_dirs: Sequence[Path],
        cancel_event: threading.Event | None = None,
    ) -> TrailBuildReport:
        """Load and build each trail directory; load errors fail only that trail."""

        loader = self.config.loader
        return self._run(
            [
                (Path(d).name.lower(), lambda d=d: loader(Path(d)))
                for d in trail_dirs
            ],
            cancel_event,
        )

    def _run(
        self,
        jobs: Sequence[tuple[str, Callable[[], TrailInput]]],
        cancel_event: threading.Event | None,
    ) -> TrailBuildReport:
        if not jobs:
            return TrailBuildReport()
        self._log.info(
            "Building %d trails (max_workers=%d)", len(jobs), self.max_workers
        )
        results: Dict[int, TrailResult] = {}

        def build(
            job_id: str, fetch: Callable[[], TrailInput]
        ) -> Optional[TrailResult]:
            if cancel_event and cancel_event.is_set():
                return None
            try:
                trail = fetch()
            except TrailInputError as exc:
                self._log.error("Skipping trail %s: %s", job_id, exc)
                return TrailResult(trail_id=exc.trail_id or job_id, error=exc)
            return process_trail(trail, self.config.pipeline)

        workers = min(self.max_workers, len(jobs))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_map = {
                executor.submit(build, job_id, fetch): (position, job_id)
                for position, (job_id, fetch) in enumerate(jobs)
            }
            for future in as_completed(future_map):
                position, job_id = future_map[future]
                try:
                    result = future.result()
                except Exception as exc:
                    self._log.error(
                        "Trail %s failed: %s", job_id, exc, exc_info=True
                    )
                    result = TrailResult(trail_id=job_id, error=exc)
                if result is None:
                    self._log.info(
                        "Cancellation requested; trail %s not built", job_id
                    )
                    continue
                results[position] = result

        report = TrailBuildReport(
            results=self._reject_duplicate_ids([results[k] for k in sorted(results)])
        )
        if report.failures:
            self._log.warning(
                "%d of %d trails failed (%s)",
                len(report.failures),
                len(jobs),
                ", ".join(r.trail_id for r in report.failures),
            )
        self._log.info("Built %d trails", len(report.succeeded))
        return report

    def _reject_duplicate_ids(self, results: List[TrailResult]) -> List[TrailResult]:
        """Fail successful results whose id an earlier success already uses."""

        seen: set[str] = set()
        checked: List[TrailResult] = []
        for result in results:
            if result.ok and result.trail_id in seen:
                error = TrailInputError(
                    "duplicate trail id; an earlier input already built it",
                    result.trail_id,
                )
                self._log.error("Skipping trail %s: %s", result.trail_id, error)
                result = TrailResult(
                    trail_id=result.trail_id, name=result.name, error=error
                )
            elif result.ok:
                seen.add(result.trail_id)
            checked.append(result)
        return checked


__all__ = ["TrailBuildService", "TrailBuildReport", "TrailServiceConfig"]
