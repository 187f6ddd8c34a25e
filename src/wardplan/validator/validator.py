# src/wardplan/validator/validator.py
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from wardplan.layout.proximity import proximity_score
from wardplan.layout.roster import CHARGE_ROOM_COUNT, build_roster
from wardplan.schemas.models import Assignment, NurseProposal, NurseRole, Room, SchedulingResult

logger = logging.getLogger(__name__)

MAX_CHEMO_PER_NURSE = 1
BALANCE_TOLERANCE = 2.0

NO_OCCUPIED_ROOMS = "No occupied rooms to assign"
SPREAD_ROOMS = "Rooms are spread across multiple areas"
UNBALANCED_DIFFICULTY = "Difficulty distribution is unbalanced across nurses"
MISSING_NURSE_NAME = "(missing name)"


# ----------------------------
# AUXILIARY STRUCTURES / FUNCTIONS
# ----------------------------
@dataclass(frozen=True)
class NurseScore:
    """
    @brief
    Recomputed statistics and nurse-scoped warnings for one room list.

    @details
    Produced by `score_and_warn`; consumed by both the engine post-processing
    and the external proposal path so the rules live in one place.
    """

    chemo_count: int
    difficulty_score: int
    proximity_score: int
    warnings: tuple[str, ...] = ()


def score_and_warn(role: NurseRole, rooms: Sequence[Room]) -> NurseScore:
    """
    @brief
    Score one nurse's assigned rooms and list the policy rules they break.

    @details
    Pure function over the room list:
      - more than MAX_CHEMO_PER_NURSE chemo rooms;
      - a charge nurse without exactly CHARGE_ROOM_COUNT rooms;
      - an off-care nurse holding any room;
      - rooms spread over several proximity blocks (proximity score below the
        room count).

    @params
        role : NurseRole
            Roster entry the rooms belong to.
        rooms : Sequence[Room]
            Rooms held by the nurse.

    @returns
        NurseScore with chemo count, difficulty score, proximity score and warnings.
    """
    chemo = sum(1 for r in rooms if r.is_chemo)
    difficulty = sum(r.weight for r in rooms)
    proximity = proximity_score(r.number for r in rooms)
    count = len(rooms)

    warnings: list[str] = []
    if chemo > MAX_CHEMO_PER_NURSE:
        warnings.append(f"Has {chemo} chemo patients (max {MAX_CHEMO_PER_NURSE} allowed)")
    if role.is_charge and count != CHARGE_ROOM_COUNT:
        warnings.append(
            f"Charge nurse should have {CHARGE_ROOM_COUNT} patients, has {count}"
        )
    if role.is_off_care and count > 0:
        warnings.append(f"Off-care nurse should have 0 patients, has {count}")
    if proximity < count:
        warnings.append(SPREAD_ROOMS)

    return NurseScore(
        chemo_count=chemo,
        difficulty_score=difficulty,
        proximity_score=proximity,
        warnings=tuple(warnings),
    )


def build_assignment(index: int, role: NurseRole, rooms: Sequence[Room]) -> Assignment:
    """Freeze a nurse's rooms into an Assignment scored by `score_and_warn`."""
    score = score_and_warn(role, rooms)
    return Assignment(
        nurse_id=f"nurse-{index}",
        name=role.name,
        is_charge=role.is_charge,
        is_off_care=role.is_off_care,
        rooms=list(rooms),
        chemo_count=score.chemo_count,
        difficulty_score=score.difficulty_score,
        proximity_score=score.proximity_score,
        warnings=list(score.warnings),
    )


def empty_assignments(roster: Sequence[NurseRole]) -> list[Assignment]:
    return [build_assignment(i, role, []) for i, role in enumerate(roster)]


def multiple_chemo_warning(assignments: Iterable[Assignment]) -> str | None:
    over = sum(1 for a in assignments if a.chemo_count > MAX_CHEMO_PER_NURSE)
    if over:
        return f"{over} nurses have multiple chemo patients"
    return None


def balance_warning(difficulty_scores: Sequence[int]) -> str | None:
    """
    @brief
    Flag an uneven spread of difficulty points.

    @details
    Unbalanced when any score deviates from the mean of `difficulty_scores`
    by more than BALANCE_TOLERANCE points.
    """
    if not difficulty_scores:
        return None
    mean = sum(difficulty_scores) / len(difficulty_scores)
    max_deviation = max(abs(s - mean) for s in difficulty_scores)
    if max_deviation > BALANCE_TOLERANCE:
        return UNBALANCED_DIFFICULTY
    return None


def unassigned_warning(room_numbers: Sequence[str]) -> str | None:
    if room_numbers:
        return f"{len(room_numbers)} rooms left unassigned: {', '.join(room_numbers)}"
    return None


# ---------------------------
# VALIDATOR CLASS (external proposals)
# ----------------------------
class AssignmentValidator:
    """
    @brief
    Gatekeeper for untrusted room → nurse proposals.

    @details
    Converts a list of (nurse name, room numbers) entries into a
    SchedulingResult. Structurally invalid entries (unknown nurse, unknown
    room, room claimed twice) are skipped and recorded as global warnings;
    committed rooms are then scored with the same rules the engine uses.
    Nothing here raises for bad proposal content.
    """

    # ---------- Constructor ----------
    def __init__(self, nurse_names: Sequence[str], rooms: Sequence[Room]) -> None:
        """
        @brief
        Initialize validation context.

        @details
        Derives roster roles exactly as the engine does and indexes the
        occupied rooms by number (first occurrence wins). Unoccupied rooms
        are kept only so the result lists every input room.

        @raises
            ConfigError
                Roster size outside 5, 6 or 7.
        """
        self.roster = build_roster(nurse_names)
        self.all_rooms = list(rooms)
        self.occupied_rooms = [r for r in self.all_rooms if r.is_occupied]

        self.room_by_number: dict[str, Room] = {}
        for room in self.occupied_rooms:
            self.room_by_number.setdefault(room.number, room)

        # Accumulators, reset by validate()
        self.warnings: list[str] = []
        self._rooms_by_nurse: dict[str, list[Room]] = {}
        self._claimed: set[str] = set()

    # ---------- Public lifecycle API ----------
    def validate(
        self,
        proposals: Iterable[NurseProposal],
        reported_warnings: Iterable[str] = (),
    ) -> SchedulingResult:
        """
        @brief
        Commit the acceptable parts of a proposal and score the outcome.

        @details
        Warnings the source reported about its own answer come first, then
        one warning per rejected entry, then per-nurse violations escalated to
        run level, then the list of occupied rooms nobody claimed.

        @returns
            SchedulingResult with source="proposal".
        """
        self.warnings = [str(w) for w in reported_warnings]
        self._rooms_by_nurse = {role.name: [] for role in self.roster}
        self._claimed = set()

        for proposal in proposals:
            self._commit_proposal(proposal)

        assignments = [
            build_assignment(i, role, self._rooms_by_nurse[role.name])
            for i, role in enumerate(self.roster)
        ]
        for assignment in assignments:
            self._escalate(assignment)

        unassigned = [r.number for r in self.occupied_rooms if r.number not in self._claimed]
        self._add_warning(unassigned_warning(unassigned))

        owner = {r.number: a.name for a in assignments for r in a.rooms}
        rooms = [
            r.model_copy(
                update={"assigned_nurse": owner.get(r.number) if self._indexed(r) else None}
            )
            for r in self.all_rooms
        ]

        if self.warnings:
            logger.info("External proposal accepted with %d warning(s)", len(self.warnings))

        return SchedulingResult(
            assignments=assignments,
            warnings=list(self.warnings),
            total_rooms=len(self.occupied_rooms),
            success=not self.warnings,
            rooms=rooms,
            unassigned_rooms=unassigned,
            source="proposal",
        )

    # ---------- Steps ----------
    def _commit_proposal(self, proposal: NurseProposal) -> None:
        name = proposal.nurse_name
        held = self._rooms_by_nurse.get(name) if name else None
        if held is None:
            self._add_warning(f"Unknown nurse: {name or MISSING_NURSE_NAME}")
            return

        for number in proposal.assigned_rooms:
            room = self.room_by_number.get(number)
            if room is None:
                self._add_warning(f"Unknown room: {number}")
                continue
            if number in self._claimed:
                self._add_warning(f"Room {number} assigned to multiple nurses")
                continue

            self._claimed.add(number)
            held.append(room.model_copy(update={"assigned_nurse": proposal.nurse_name}))

    def _indexed(self, room: Room) -> bool:
        # Only the first occupied room with a given number can be claimed.
        return self.room_by_number.get(room.number) is room

    def _escalate(self, a: Assignment) -> None:
        count = len(a.rooms)
        if a.chemo_count > MAX_CHEMO_PER_NURSE:
            self._add_warning(f"{a.name} assigned {a.chemo_count} chemo patients")
        if a.is_charge and count != CHARGE_ROOM_COUNT:
            self._add_warning(
                f"Charge nurse {a.name} has {count} patients instead of {CHARGE_ROOM_COUNT}"
            )
        if a.is_off_care and count > 0:
            self._add_warning(f"Off-care nurse {a.name} assigned {count} patients")

    def _add_warning(self, message: str | None) -> None:
        if message:
            self.warnings.append(message)


# ----------------------------
# THIN FACADE
# ----------------------------
def validate_external_proposal(
    nurse_names: Sequence[str],
    rooms: Sequence[Room],
    proposals: Iterable[NurseProposal],
    reported_warnings: Iterable[str] = (),
) -> SchedulingResult:
    """
    @brief
    High-level convenience wrapper for untrusted proposal validation.

    @params
        nurse_names : Sequence[str]
            Ordered roster (5, 6 or 7 names).
        rooms : Sequence[Room]
            Every room of the unit; only occupied ones may be claimed.
        proposals : Iterable[NurseProposal]
            Proposed (nurse name, room numbers) entries, in source order.
        reported_warnings : Iterable[str]
            Warnings the source attached to its own answer.

    @returns
        SchedulingResult built from the accepted entries.
    """
    return AssignmentValidator(nurse_names, rooms).validate(
        proposals, reported_warnings
    )


__all__ = [
    "AssignmentValidator",
    "BALANCE_TOLERANCE",
    "MAX_CHEMO_PER_NURSE",
    "NO_OCCUPIED_ROOMS",
    "NurseScore",
    "balance_warning",
    "build_assignment",
    "empty_assignments",
    "multiple_chemo_warning",
    "score_and_warn",
    "unassigned_warning",
    "validate_external_proposal",
]
