# scripts/gen_synthetic_data.py
from __future__ import annotations

import csv
import sys
from collections.abc import Iterable
from pathlib import Path

from wardplan.layout.floor import make_random_floor
from wardplan.schemas.models import Room

"""
Synthetic rooms generator (single run → single CSV file).

- Parameters are hard-coded as constants below (no CLI args).
- Every room of the unit is written in walking order; occupancy, difficulty
  and chemo flags are drawn by make_random_floor with a fixed seed.
- A share of occupied rooms gets a previous_nurse from PREVIOUS_ROSTER so the
  continuity pass has something to keep.
- Output CSV columns: id,number,is_occupied,difficulty,is_chemo,previous_nurse

Edit the constants in the "CONFIG" section to produce different datasets.
"""

# =========================
# CONFIG: EDIT THESE
# =========================
OCCUPANCY_RATE: float = 0.8  # probability that a room is occupied
CHEMO_RATE: float = 0.2  # probability that a room holds a chemo patient
RANDOM_SEED: int = 42
PREVIOUS_ROSTER: tuple[str, ...] = ("Nurse Adams", "Nurse Brown", "Nurse Chen")
CONTINUITY_EVERY: int = 4  # every N-th occupied room keeps a previous nurse (0 = none)
OUTPUT: str = f"data/input/rooms_seed{RANDOM_SEED}.csv"
# =========================

COLUMNS = ("id", "number", "is_occupied", "difficulty", "is_chemo", "previous_nurse")


def _with_previous_nurses(rooms: list[Room]) -> list[Room]:
    if CONTINUITY_EVERY <= 0 or not PREVIOUS_ROSTER:
        return rooms
    out: list[Room] = []
    k = 0
    for room in rooms:
        if room.is_occupied:
            if k % CONTINUITY_EVERY == 0:
                nurse = PREVIOUS_ROSTER[(k // CONTINUITY_EVERY) % len(PREVIOUS_ROSTER)]
                room = room.model_copy(update={"previous_nurse": nurse})
            k += 1
        out.append(room)
    return out


def _write_csv(path: Path, rooms: Iterable[Room]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(COLUMNS)
        for r in rooms:
            writer.writerow(
                [
                    r.id,
                    r.number,
                    "true" if r.is_occupied else "false",
                    r.difficulty,
                    "true" if r.is_chemo else "false",
                    r.previous_nurse or "",
                ]
            )


def _validate_config_or_die() -> None:
    problems: list[str] = []
    if not 0.0 <= OCCUPANCY_RATE <= 1.0:
        problems.append("OCCUPANCY_RATE must be within [0, 1]")
    if not 0.0 <= CHEMO_RATE <= 1.0:
        problems.append("CHEMO_RATE must be within [0, 1]")
    if CONTINUITY_EVERY < 0:
        problems.append("CONTINUITY_EVERY must be >= 0")
    if problems:
        msg = "Invalid generator configuration:\n- " + "\n- ".join(problems)
        print(msg, file=sys.stderr)
        sys.exit(2)


def main() -> int:
    _validate_config_or_die()

    rooms = make_random_floor(
        seed=RANDOM_SEED, occupancy_rate=OCCUPANCY_RATE, chemo_rate=CHEMO_RATE
    )
    rooms = _with_previous_nurses(rooms)

    output = Path(OUTPUT)
    _write_csv(output, rooms)

    occupied = sum(1 for r in rooms if r.is_occupied)
    chemo = sum(1 for r in rooms if r.is_occupied and r.is_chemo)
    print(f"[GEN] rooms={len(rooms)}, occupied={occupied}, chemo={chemo}")
    print(f"[GEN] wrote: {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
