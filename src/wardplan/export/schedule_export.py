# src/wardplan/export/schedule_export.py
from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Any

from wardplan.errors import DataError
from wardplan.metrics.logger import atomic_write_text
from wardplan.schemas.models import SchedulingResult

ASSIGNMENT_COLUMNS = (
    "nurse_id",
    "nurse_name",
    "is_charge",
    "is_off_care",
    "room_number",
    "difficulty",
    "is_chemo",
)


def _require_result(result: Any, source: str) -> SchedulingResult:
    """
    @brief
    Rejects anything that is not a SchedulingResult.

    @raises
        DataError if `result` has the wrong type.
    """
    if not isinstance(result, SchedulingResult):
        raise DataError(
            f"Unsupported result type: {type(result).__name__}",
            source=source,
            suggested_action="Pass the SchedulingResult returned by the engine or validator.",
        )
    return result


def assignment_rows(result: SchedulingResult) -> list[dict[str, str]]:
    """
    @brief
    Flattens a result into one row per (nurse, room).

    @details
    Nurses keep roster order and rooms keep assignment order. Nurses without
    rooms produce no rows. Booleans are written as lowercase "true"/"false".
    """
    rows: list[dict[str, str]] = []
    for a in result.assignments:
        for room in a.rooms:
            rows.append(
                {
                    "nurse_id": a.nurse_id,
                    "nurse_name": a.name,
                    "is_charge": _bool(a.is_charge),
                    "is_off_care": _bool(a.is_off_care),
                    "room_number": room.number,
                    "difficulty": str(room.difficulty),
                    "is_chemo": _bool(room.is_chemo),
                }
            )
    return rows


def write_assignments_csv(result: SchedulingResult, out_path: Path) -> Path:
    """
    @brief
    Exports the nurse → room assignments into a CSV file.

    @details
    Columns: nurse_id, nurse_name, is_charge, is_off_care, room_number,
    difficulty, is_chemo. UTF-8, readable by pandas.read_csv. Output is
    written atomically; an empty result still gets the header row.

    @params
        result : SchedulingResult
            Outcome of an engine run or a validated proposal.
        out_path : Path
            Destination CSV file path.

    @returns
        Path to the written CSV file.

    @raises
        DataError for a wrong input type or a failed write.
    """
    # (1) Validate and flatten
    rows = assignment_rows(_require_result(result, "export.write_assignments_csv"))

    # (2) Render, then swap into place via temporary file replacement
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=ASSIGNMENT_COLUMNS)
    writer.writeheader()
    writer.writerows(rows)

    atomic_write_text(Path(out_path), buf.getvalue(), encoding="utf-8")
    return Path(out_path)


def write_schedule_json(
    result: SchedulingResult, out_path: Path, shift_type: str | None = None
) -> Path:
    """
    @brief
    Writes the full result (assignments, warnings, rooms) as JSON.

    @details
    The dump is the pydantic JSON view of the result plus an optional
    `shift_type` key, so it can be reloaded with SchedulingResult after
    dropping that key.
    """
    result = _require_result(result, "export.write_schedule_json")
    payload = result.model_dump(mode="json")
    if shift_type is not None:
        payload["shift_type"] = shift_type

    text = json.dumps(payload, ensure_ascii=False, indent=2) + "\n"
    atomic_write_text(Path(out_path), text, encoding="utf-8")
    return Path(out_path)


def _bool(value: bool) -> str:
    return "true" if value else "false"
