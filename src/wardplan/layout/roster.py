# src/wardplan/layout/roster.py
from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence

from wardplan.errors import ConfigError
from wardplan.schemas.models import NurseRole

logger = logging.getLogger(__name__)

ROSTER_SIZES: tuple[int, ...] = (5, 6, 7)
CHARGE_ROSTER_SIZE = 6
OFF_CARE_ROSTER_SIZE = 7
CHARGE_ROOM_COUNT = 3


def build_roster(nurse_names: Sequence[str]) -> list[NurseRole]:
    """
    @brief
    Derive roster roles from the ordered nurse names.

    @details
    Index 0 becomes the charge nurse for six names and the off-care nurse for
    seven; five names carry no special role. Duplicate names are accepted but
    logged, since results are keyed by name.

    @raises
        ConfigError
            Roster size outside 5, 6 or 7.
    """
    names = list(nurse_names)
    if len(names) not in ROSTER_SIZES:
        raise ConfigError(
            message=f"Unsupported roster size: {len(names)}",
            source="roster.build_roster",
            suggested_action="Provide 5, 6 or 7 nurse names.",
        )

    dupes = sorted(name for name, n in Counter(names).items() if n > 1)
    if dupes:
        logger.warning("Roster contains duplicate names, results will collide: %s", dupes)

    size = len(names)
    return [
        NurseRole(
            name=name,
            is_charge=(index == 0 and size == CHARGE_ROSTER_SIZE),
            is_off_care=(index == 0 and size == OFF_CARE_ROSTER_SIZE),
        )
        for index, name in enumerate(names)
    ]


__all__ = ["CHARGE_ROOM_COUNT", "ROSTER_SIZES", "build_roster"]
