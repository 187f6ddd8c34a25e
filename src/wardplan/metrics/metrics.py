# src/wardplan/metrics/metrics.py
from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from typing import Any

import pandas as pd

from wardplan.errors import DataError
from wardplan.schemas.models import SchedulingResult

_NURSE_COLUMNS = (
    "nurse_id",
    "name",
    "is_charge",
    "is_off_care",
    "room_count",
    "chemo_count",
    "difficulty_score",
    "proximity_score",
    "warning_count",
)


def assignments_frame(result: SchedulingResult) -> pd.DataFrame:
    """
    @brief
    One row per nurse with the scores of a SchedulingResult.

    @details
    Column order follows _NURSE_COLUMNS; an empty roster yields an empty
    frame with the same columns.
    """
    rows = [
        {
            "nurse_id": a.nurse_id,
            "name": a.name,
            "is_charge": a.is_charge,
            "is_off_care": a.is_off_care,
            "room_count": len(a.rooms),
            "chemo_count": a.chemo_count,
            "difficulty_score": a.difficulty_score,
            "proximity_score": a.proximity_score,
            "warning_count": len(a.warnings),
        }
        for a in result.assignments
    ]
    return pd.DataFrame(rows, columns=list(_NURSE_COLUMNS))


def collect_metrics(result: SchedulingResult) -> dict[str, Any]:
    """
    @brief
    Builds a JSON-serializable dictionary of run metrics.

    @details
    Difficulty statistics are taken over active nurses (off-care excluded),
    matching the balance check of the assignment validator.

    @raises
        DataError
            If result is not a SchedulingResult or a metric is non-finite.
    """
    if not isinstance(result, SchedulingResult):
        raise DataError(
            f"Expected SchedulingResult, got {type(result).__name__}",
            source="metrics.collect_metrics",
            suggested_action="Pass the object returned by the engine or the validator.",
        )

    # (1) Per-nurse frame, active nurses only for load statistics
    df = assignments_frame(result)
    active = df.loc[~df["is_off_care"].astype(bool)]

    if active.empty:
        difficulty_mean = 0.0
        difficulty_max_dev = 0.0
    else:
        scores = active["difficulty_score"].astype(float)
        difficulty_mean = float(scores.mean())
        difficulty_max_dev = float((scores - difficulty_mean).abs().max())

    # (2) Compose metrics dictionary
    metrics = {
        "timestamp": _utc_now_iso(),
        "success": bool(result.success),
        "source": result.source,
        "total_rooms": int(result.total_rooms),
        "assigned_rooms": int(df["room_count"].sum()) if not df.empty else 0,
        "unassigned_rooms": len(result.unassigned_rooms),
        "num_nurses": int(len(df)),
        "num_active_nurses": int(len(active)),
        "chemo_rooms": int(df["chemo_count"].sum()) if not df.empty else 0,
        "difficulty_mean": _f(difficulty_mean),
        "difficulty_max_deviation": _f(difficulty_max_dev),
        "global_warnings": len(result.warnings),
        "nurse_warnings": int(df["warning_count"].sum()) if not df.empty else 0,
    }

    # (3) Sanity: finite and serializable
    _assert_finite(metrics)
    json.dumps(metrics, ensure_ascii=False)
    return metrics


def _assert_finite(obj: Any) -> None:
    """Recursively reject NaN / Inf values."""
    if isinstance(obj, float) and (math.isnan(obj) or math.isinf(obj)):
        raise DataError("NaN/Inf encountered in metrics", source="metrics.collect_metrics")
    if isinstance(obj, dict):
        for v in obj.values():
            _assert_finite(v)


def _utc_now_iso() -> str:
    """
    @brief
    Returns current UTC timestamp in ISO-8601 format (Z-suffix).

    @details
    Microseconds are stripped to keep logs and artifacts readable.
    """
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _f(x: float) -> float:
    """Round to 4 places and flush tiny values to zero."""
    return 0.0 if abs(x) < 1e-15 else round(float(x), 4)
