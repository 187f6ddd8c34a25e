# src/wardplan/dataloader/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from wardplan.schemas.models import Room


@dataclass(slots=True)
class LoadResult:
    """
    Structured result of a data loading step.

    Fields:
        success: True if no row-level issues were found, False otherwise.
        rooms: Validated rooms in file order (empty if success=False).
        errors: Issue dicts with per-row context (used for reporting).
                Each item contains: kind, line_no, room_number (may be None), message.
        total_rows: Number of data rows in the CSV (excludes header).
        kept_rows: Number of rooms kept (len(rooms)).
    """

    success: bool
    rooms: list[Room] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)
    total_rows: int = 0
    kept_rows: int = 0
