# src/wardplan/engine/result_store.py
from __future__ import annotations

import logging
from pathlib import Path

from wardplan.export.schedule_export import write_assignments_csv, write_schedule_json
from wardplan.metrics.logger import write_metrics
from wardplan.metrics.metrics import collect_metrics
from wardplan.schemas.models import Config, SchedulingResult

logger = logging.getLogger(__name__)


class ResultStore:
    """
    Single point of side effects for a scheduling run.

    Controlled by config:
      io_policy.write_artifacts: bool (default True)
      output_dir: str (default "data/output")

    Knows nothing about allocation rules, only how results are written.
    """

    def __init__(self, cfg: Config) -> None:
        """
        Initializes the store and resolves the output directory.

        Args:
            cfg: Global configuration object.

        Notes:
            The output directory is created lazily, on the first write.
        """
        # (1) Store config reference
        self.cfg = cfg

        # (2) Resolve I/O policy and destination
        self.write_artifacts = cfg.io_policy.write_artifacts
        self.output_dir = Path(cfg.output_dir or "data/output")

    # --------------- Public facade ---------------

    def persist(self, result: SchedulingResult) -> dict[str, str]:
        """
        Writes schedule.json, assignments.csv and metrics.json according to
        the I/O policy.

        Args:
            result: Final SchedulingResult.

        Returns:
            Mapping of artifact name to written path; empty when writing is disabled.
        """
        if not self.write_artifacts:
            logger.debug("Artifact writing disabled by io_policy")
            return {}

        # (1) Schedule and flat assignment table
        paths = {
            "schedule": write_schedule_json(
                result, self.output_dir / "schedule.json", shift_type=self.cfg.shift_type
            ),
            "assignments": write_assignments_csv(result, self.output_dir / "assignments.csv"),
        }

        # (2) Run metrics
        paths["metrics"] = write_metrics(collect_metrics(result), self.output_dir)

        for name, path in paths.items():
            logger.debug("%s written to %s", name, path)
        return {name: str(path) for name, path in paths.items()}
