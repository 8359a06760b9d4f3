"""Command line entry point: build enriched trail JSON for every trail directory."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, List, Sequence

from .config import (
    DATA_DIR,
    JUNCTION_MAX_DISTANCE_M,
    MAX_WORKERS,
    OUTPUT_DIR,
    OUTPUT_JSON_INDENT,
    TARGET_DISPLAY_POINT_COUNT,
    WAYPOINT_ENTRY_THRESHOLD_M,
    WRITE_PARTIAL_RESULTS,
)
from .errors import ConfigError
from .loaders import discover_trail_dirs
from .models import PipelineConfig
from .serialization import trail_index, trail_index_entry, trail_model_to_dict
from .services import TrailBuildReport, TrailBuildService, TrailServiceConfig
from .utils import json_dumps_sorted

INDEX_FILE = "index.json"


def _setup_logging(level: str = "INFO") -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=getattr(logging, level),
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Enrich classified GPS trail data into renderable trail models"
    )
    parser.add_argument(
        "--data-dir",
        default=DATA_DIR,
        help=f"Directory of trail subdirectories (default: {DATA_DIR})",
    )
    parser.add_argument(
        "--output-dir",
        default=OUTPUT_DIR,
        help=f"Directory for generated JSON (default: {OUTPUT_DIR})",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=MAX_WORKERS,
        help="Trails built in parallel",
    )
    parser.add_argument(
        "--target-points",
        type=int,
        default=TARGET_DISPLAY_POINT_COUNT,
        help="Approximate number of display points per trail",
    )
    parser.add_argument(
        "--entry-threshold",
        type=float,
        default=WAYPOINT_ENTRY_THRESHOLD_M,
        help="Distance (m) at which the track counts as visiting a waypoint",
    )
    parser.add_argument(
        "--junction-distance",
        type=float,
        default=JUNCTION_MAX_DISTANCE_M,
        help="Maximum distance (m) for snapping variant ends to the main track",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Python logging level",
    )
    return parser


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(json_dumps_sorted(payload, indent=OUTPUT_JSON_INDENT or None))
        fh.write("\n")


def write_outputs(report: TrailBuildReport, output_dir: Path) -> List[dict]:
    """Write ``<id>.json`` per built trail and the trail index; return the index."""

    entries: List[dict] = []
    if report.failures and not WRITE_PARTIAL_RESULTS:
        logging.warning(
            "Not writing trail files: %d trails failed", len(report.failures)
        )
    else:
        for result in report.succeeded:
            _write_json(
                output_dir / f"{result.trail_id}.json",
                {
                    "id": result.trail_id,
                    "name": result.name or result.trail_id,
                    **trail_model_to_dict(result.model),
                },
            )
            entries.append(
                trail_index_entry(result.trail_id, result.name, result.model)
            )
    index = trail_index(entries)
    _write_json(output_dir / INDEX_FILE, index)
    logging.info(
        "Trail index written to %s (%d trails)", output_dir / INDEX_FILE, len(index)
    )
    return index


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _setup_logging(args.log_level)

    try:
        pipeline_config = PipelineConfig(
            target_display_point_count=args.target_points,
            waypoint_entry_threshold_m=args.entry_threshold,
            junction_max_distance_m=args.junction_distance,
        )
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 2
    if args.max_workers < 1:
        logging.error("Invalid configuration: --max-workers must be at least 1")
        return 2

    output_dir = Path(args.output_dir)
    trail_dirs = discover_trail_dirs(args.data_dir)
    if not trail_dirs:
        logging.info(
            "No trail directories found in %s; writing empty index", args.data_dir
        )
        write_outputs(TrailBuildReport(), output_dir)
        return 0

    logging.info("Found %d trail directories in %s", len(trail_dirs), args.data_dir)
    service = TrailBuildService(
        TrailServiceConfig(pipeline=pipeline_config), max_workers=args.max_workers
    )
    report = service.process_directories(trail_dirs)
    write_outputs(report, output_dir)
    return 1 if report.failures else 0
