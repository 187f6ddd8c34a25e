# src/wardplan/engine/scheduler.py
from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from wardplan.engine.engine import SchedulingEngine
from wardplan.engine.result_store import ResultStore
from wardplan.errors import ConfigError
from wardplan.proposal.fallback import schedule_with_proposal
from wardplan.schemas.models import Config, Room, SchedulingResult

logger = logging.getLogger(__name__)


class Scheduler:
    """
    @brief
    Facade providing a stable interface for planning one shift.

    @details
    Separates compute logic from side effects:
        - delegates allocation to SchedulingEngine (pure, no I/O)
        - optionally routes through an external proposal source with
          deterministic fallback
        - delegates artifact persistence to ResultStore

    Public API:
        plan(rooms, nurse_names=None, source=None) -> SchedulingResult
    """

    def __init__(self, cfg: Config | None = None) -> None:
        """
        @brief
        Initializes the facade with configuration.

        @params
            cfg : Config
                Global configuration shared by engine and result store.
        """
        # (1) Store configuration reference
        self.cfg = cfg or Config()

        # (2) Internal components
        self._engine = SchedulingEngine(self.cfg)
        self._store = ResultStore(self.cfg)
        self.artifacts: dict[str, str] = {}

    def plan(
        self,
        rooms: Sequence[Room],
        nurse_names: Sequence[str] | None = None,
        source: Callable[[str, str], str] | None = None,
    ) -> SchedulingResult:
        """
        @brief
        Plans the shift and persists artifacts.

        @details
        The roster falls back to `cfg.nurse_names` when none is passed. With a
        `source` the external proposal path runs first; without one the engine
        plans directly. Paths of written artifacts are kept in `self.artifacts`.

        @raises
            ConfigError
                No roster given or roster size outside 5, 6 or 7.
            DataError
                Artifact writing failed.
        """
        # (1) Resolve roster
        names = list(nurse_names) if nurse_names is not None else self.cfg.nurse_names
        if not names:
            raise ConfigError(
                "No nurse roster supplied",
                source="scheduler.plan",
                suggested_action="Pass nurse names or set nurse_names in config.yaml.",
            )

        # (2) Compute
        if source is None:
            result = self._engine.generate(names, rooms)
        else:
            result = schedule_with_proposal(names, rooms, source, self.cfg)

        logger.info(
            "Shift planned by %s: %d room(s), %d warning(s)",
            result.source,
            result.total_rooms,
            len(result.warnings),
        )

        # (3) Persist
        self.artifacts = self._store.persist(result)
        return result
