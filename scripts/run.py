# scripts/run.py
from __future__ import annotations

import argparse
import logging
import sys
import time
import traceback
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from wardplan.dataloader.config_loader import ConfigLoader
from wardplan.dataloader.postload_handler import LoadResultHandler
from wardplan.dataloader.rooms_loader import RoomsLoader
from wardplan.engine.scheduler import Scheduler
from wardplan.errors import DataError, WardplanError
from wardplan.layout.floor import default_nurse_names, make_floor

DEFAULT_ROSTER_SIZE = 5


def _setup_logging() -> None:
    """
    @brief
    Initializes global logging configuration.

    @details
    INFO level with a short console format, shared by every pipeline step.
    """
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """
    @brief
    Parses command-line arguments for the shift planning pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="wardplan-run",
        description="Plan one nursing shift: load → assign → validate → metrics → export",
    )

    # (1) Config path
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config YAML (default: built-in defaults)",
    )

    # (2) Rooms CSV; falls back to cfg.rooms_csv, then to a fully occupied default floor
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="Path to rooms CSV (default: rooms_csv from config)",
    )

    # (3) Roster
    parser.add_argument(
        "--nurses",
        type=str,
        default=None,
        help="Comma-separated roster of 5, 6 or 7 names (default: nurse_names from config)",
    )

    # (4) Output directory
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory for artifacts (default: output_dir from config)",
    )

    # (5) Continuity switch
    parser.add_argument(
        "--no-continuity",
        action="store_true",
        help="Ignore previous_nurse when assigning rooms",
    )

    return parser.parse_args(argv)


def run_pipeline(
    config_path: Path | None,
    input_path: Path | None,
    output_dir: Path | None,
    nurse_names: Sequence[str] | None = None,
    prioritize_continuity: bool | None = None,
) -> dict[str, Any]:
    """
    @brief
    Executes the full planning pipeline.

    @details
    (1) Load configuration and apply CLI overrides.
    (2) Load rooms (CSV) or use the default fully occupied floor.
    (3) Plan the shift and persist schedule.json, assignments.csv, metrics.json.
    Raises WardplanError on controlled failures so the pipeline can be
    embedded in batch workflows.

    @returns
        Dictionary with success flag, warnings, room counts and artifact paths.

    @raises
        WardplanError
            On configuration or data issues.
    """
    t0 = time.perf_counter()

    # (1) Configuration with overrides
    cfg = ConfigLoader().load(config_path)
    overrides: dict[str, Any] = {}
    if output_dir is not None:
        overrides["output_dir"] = str(output_dir)
    if prioritize_continuity is not None:
        overrides["prioritize_continuity"] = prioritize_continuity
    if overrides:
        cfg = cfg.model_copy(update=overrides)
    out_dir = Path(cfg.output_dir or "data/output")

    # (2) Rooms
    rooms_path = input_path or (Path(cfg.rooms_csv) if cfg.rooms_csv else None)
    load_errors_path: Path | None = None
    if rooms_path is None:
        logging.info("No rooms CSV given, using the default fully occupied floor.")
        rooms = make_floor()
    else:
        logging.info("Loading rooms: %s", rooms_path)
        handler = LoadResultHandler(output_dir=out_dir)
        loaded = handler.handle(RoomsLoader().load(rooms_path))
        if loaded is None:
            load_errors_path = out_dir / "load_errors.json"
            raise DataError(
                message=f"Rooms load failed, see {load_errors_path.as_posix()}",
                source="scripts.run",
                suggested_action="Fix CSV issues reported in load_errors.json and rerun.",
            )
        rooms = loaded

    # (3) Plan and persist
    scheduler = Scheduler(cfg)
    names = list(nurse_names or cfg.nurse_names or default_nurse_names(DEFAULT_ROSTER_SIZE))
    result = scheduler.plan(rooms, nurse_names=names)

    for warning in result.warnings:
        logging.warning("%s", warning)
    for assignment in result.assignments:
        logging.info(
            "%-14s rooms=%-30s difficulty=%d chemo=%d",
            assignment.name,
            ",".join(assignment.room_numbers) or "-",
            assignment.difficulty_score,
            assignment.chemo_count,
        )

    logging.info("Pipeline finished in %.2f s", time.perf_counter() - t0)
    return {
        "success": result.success,
        "source": result.source,
        "warnings": list(result.warnings),
        "total_rooms": result.total_rooms,
        "unassigned_rooms": list(result.unassigned_rooms),
        "artifacts": dict(scheduler.artifacts),
    }


def main(argv: Sequence[str] | None = None) -> int:
    """
    @brief
    CLI entry point.

    @details
    Exit codes:
      0 – plan produced without warnings
      1 – plan produced with warnings, or controlled failure (config/data)
      2 – unexpected crash
    """
    _setup_logging()
    args = _parse_args(argv)

    nurse_names = (
        [n.strip() for n in args.nurses.split(",") if n.strip()] if args.nurses else None
    )

    try:
        result = run_pipeline(
            Path(args.config) if args.config else None,
            Path(args.input) if args.input else None,
            Path(args.output) if args.output else None,
            nurse_names=nurse_names,
            prioritize_continuity=False if args.no_continuity else None,
        )
        if result["artifacts"]:
            logging.info("Artifacts: %s", ", ".join(sorted(result["artifacts"].values())))
        return 0 if result["success"] else 1

    except WardplanError as e:
        logging.error(str(e))
        return 1
    except Exception:
        logging.error("Unexpected error occurred:")
        traceback.print_exc()
        return 2


if __name__ == "__main__":
    sys.exit(main())
