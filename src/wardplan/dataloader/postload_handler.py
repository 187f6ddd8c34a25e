# src/wardplan/dataloader/postload_handler.py
from __future__ import annotations

import json
import logging
from pathlib import Path

from wardplan.dataloader.types import LoadResult
from wardplan.errors import DataError
from wardplan.metrics.logger import atomic_write_text
from wardplan.schemas.models import Room

logger = logging.getLogger(__name__)


class LoadResultHandler:
    """
    @brief
    Gate between the rooms loader and the scheduler.

    @details
    A successful LoadResult yields its rooms. A failed one is written to
    'load_errors.json' in the output directory and yields None, so the
    pipeline can stop with the per-row issues preserved on disk.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)
        self.report_path: Path | None = None

    def handle(self, result: LoadResult) -> list[Room] | None:
        """
        @brief
        Return the loaded rooms or write the error report.

        @details
        A failure to write the report is logged and does not raise; the
        return value is still None.
        """
        # (1) Success path
        if result.success:
            occupied = sum(1 for r in result.rooms if r.is_occupied)
            logger.info(
                "PostLoad: %d rooms ready (%d occupied).", result.kept_rows, occupied
            )
            return result.rooms

        # (2) Failure path: structured report
        out_path = self.output_dir / "load_errors.json"
        payload = json.dumps(result.errors, ensure_ascii=False, indent=2) + "\n"
        try:
            atomic_write_text(out_path, payload)
            self.report_path = out_path
            logger.error(
                "PostLoad: input validation failed, %d issue(s). See %s",
                len(result.errors),
                out_path,
            )
        except DataError as e:
            logger.error("PostLoad: failed to write error report: %s", e)

        return None
