# src/wardplan/dataloader/rooms_loader.py
from __future__ import annotations

import csv
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from wardplan.dataloader.types import LoadResult
from wardplan.errors import DataError
from wardplan.schemas.models import Difficulty, Room

logger = logging.getLogger(__name__)

_TRUE = {"true", "1", "yes", "y"}
_FALSE = {"false", "0", "no", "n"}


class RoomsLoader:
    """
    CSV → LoadResult[Room].

    Rules:
      - Format: UTF-8 CSV, delimiter=','
      - Required column: number
      - Optional columns: id, is_occupied, difficulty, is_chemo, previous_nurse
        (blank cells take the Room defaults)
      - Row-level validation:
          * empty number          → issue + continue
          * invalid boolean       → issue + continue
          * invalid difficulty    → issue + continue
          * duplicate number      → issue + continue (FIRST valid row is kept)
      - On completion:
          * any issues → success=False, rooms=[], errors=[...]
          * otherwise  → success=True, rooms in file order

    Fatal errors (raise DataError immediately):
      - file missing / unreadable
      - no CSV header
      - required column missing
    """

    REQUIRED_COLUMNS = ("number",)

    def load(self, path: Path) -> LoadResult:
        rows = self._read_csv(path)
        result = self._rows_to_result(rows)
        self._report_summary(path, result)
        return result

    # ------------------------------
    # Internal helpers
    # ------------------------------
    def _read_csv(self, path: Path) -> list[dict[str, str]]:
        if not isinstance(path, Path):
            raise DataError(
                message=f"Invalid path type: expected pathlib.Path, got {type(path).__name__}",
                source="RoomsLoader._read_csv",
                suggested_action="Pass a pathlib.Path pointing to rooms.csv",
            )
        if not path.exists():
            raise DataError(
                message=f"Input CSV not found: {path}",
                source="RoomsLoader._read_csv",
                suggested_action="Verify file path and ensure the CSV is present.",
            )

        try:
            with path.open("r", encoding="utf-8", newline="") as f:
                reader = csv.DictReader(f, delimiter=",")
                if reader.fieldnames is None:
                    raise DataError(
                        message="CSV has no header row.",
                        source="RoomsLoader._read_csv",
                        suggested_action="Ensure the first line contains column names.",
                    )
                reader.fieldnames = [(name or "").strip() for name in reader.fieldnames]
                self._validate_header(reader.fieldnames)
                return [self._strip_row(r) for r in reader]
        except OSError as e:
            raise DataError(
                message=f"Unable to read CSV: {e}",
                source="RoomsLoader._read_csv",
                suggested_action="Check file permissions and that the file is not locked.",
            ) from e

    def _validate_header(self, header: Iterable[str]) -> None:
        missing = [c for c in self.REQUIRED_COLUMNS if c not in header]
        if missing:
            raise DataError(
                message=f"Invalid CSV header: missing required column(s): {', '.join(missing)}",
                source="RoomsLoader._validate_header",
                suggested_action="Add required column: number",
            )

    def _strip_row(self, row: dict[str, Any]) -> dict[str, str]:
        return {k: (v.strip() if isinstance(v, str) else "") for k, v in row.items() if k}

    def _rows_to_result(self, rows: list[dict[str, str]]) -> LoadResult:
        issues: list[dict[str, Any]] = []
        rooms: list[Room] = []
        seen_numbers: set[str] = set()

        for idx, row in enumerate(rows, start=2):  # header = line 1
            number = row.get("number") or ""

            # empty number
            if not number:
                issues.append(_issue("missing_number", idx, None, "Missing room number"))
                continue

            # flags and difficulty
            try:
                is_occupied = _parse_bool(row.get("is_occupied"), default=True)
                is_chemo = _parse_bool(row.get("is_chemo"), default=False)
            except ValueError as e:
                issues.append(_issue("invalid_bool", idx, number, str(e)))
                continue

            difficulty_raw = (row.get("difficulty") or Difficulty.MEDIUM.value).lower()
            if difficulty_raw not in {d.value for d in Difficulty}:
                issues.append(
                    _issue(
                        "invalid_difficulty",
                        idx,
                        number,
                        f"Invalid difficulty {row.get('difficulty')!r} (expected easy|medium|hard)",
                    )
                )
                continue

            # duplicates: keep first valid, later are issues
            if number in seen_numbers:
                issues.append(
                    _issue(
                        "duplicate_number",
                        idx,
                        number,
                        "Duplicate room number (later occurrence skipped)",
                    )
                )
                continue

            # construct model
            try:
                room = Room(
                    id=row.get("id") or f"room-{len(rooms)}",
                    number=number,
                    is_occupied=is_occupied,
                    difficulty=difficulty_raw,
                    is_chemo=is_chemo,
                    previous_nurse=row.get("previous_nurse") or None,
                )
            except ValidationError as e:
                issues.append(_issue("schema_error", idx, number, f"Room construction failed: {e}"))
                continue

            rooms.append(room)
            seen_numbers.add(number)

        if issues:
            # any issue stops the pipeline; the report carries the details
            return LoadResult(
                success=False,
                rooms=[],
                errors=issues,
                total_rows=len(rows),
                kept_rows=0,
            )

        return LoadResult(
            success=True,
            rooms=rooms,
            errors=[],
            total_rows=len(rows),
            kept_rows=len(rooms),
        )

    def _report_summary(self, path: Path, result: LoadResult) -> None:
        if result.success:
            logger.info(
                "RoomsLoader OK: kept=%d/%d from %s",
                result.kept_rows,
                result.total_rows,
                path,
            )
        else:
            # aggregate by kind
            counts: dict[str, int] = {}
            for it in result.errors:
                counts[it["kind"]] = counts.get(it["kind"], 0) + 1
            summary = ", ".join(f"{k}={v}" for k, v in counts.items())
            logger.error(
                "RoomsLoader failed: %d issue(s) across %d row(s) in %s [%s]",
                len(result.errors),
                result.total_rows,
                path,
                summary or "no-summary",
            )


def _issue(kind: str, line_no: int, number: str | None, message: str) -> dict[str, Any]:
    return {"kind": kind, "line_no": line_no, "room_number": number, "message": message}


def _parse_bool(raw: str | None, default: bool) -> bool:
    if not raw:
        return default
    value = raw.lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"Invalid boolean {raw!r} (expected true/false)")


__all__ = ["RoomsLoader"]
