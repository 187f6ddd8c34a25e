# src/wardplan/engine/engine.py
"""
SchedulingEngine: greedy multi-pass room → nurse allocator.

Passes, in order:
- continuity: rooms go back to the nurse who held them last shift
- chemo cap: at most one chemo room per nurse within this pass
- locality: remaining rooms allocated block by block, split only when no
  nurse can take a whole block
Scoring and warnings are delegated to the assignment validator.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from wardplan.engine.allocation import AllocationContext, NurseSlot
from wardplan.layout.proximity import group_key
from wardplan.layout.roster import build_roster
from wardplan.schemas.models import Config, Room, SchedulingResult
from wardplan.validator.validator import (
    NO_OCCUPIED_ROOMS,
    balance_warning,
    build_assignment,
    empty_assignments,
    multiple_chemo_warning,
    unassigned_warning,
)

logger = logging.getLogger(__name__)


class SchedulingEngine:
    """
    Core scheduling engine: allocates occupied rooms to the roster from
    scratch and returns a new SchedulingResult. Performs no file I/O and never
    mutates the caller's rooms.

    Public interface:
        generate(nurse_names, rooms, prioritize_continuity) -> SchedulingResult
    """

    def __init__(self, cfg: Config | None = None) -> None:
        """
        Initializes the engine with configuration.

        Args:
            cfg: Global Config; only `prioritize_continuity` is read here.
        """
        self.cfg = cfg or Config()

    def generate(
        self,
        nurse_names: Sequence[str],
        rooms: Sequence[Room],
        prioritize_continuity: bool | None = None,
    ) -> SchedulingResult:
        """
        Allocates rooms to nurses and annotates the draft with warnings.

        Args:
            nurse_names: Ordered roster of 5, 6 or 7 names.
            rooms: Every room of the unit; unoccupied rooms are ignored.
            prioritize_continuity: Overrides cfg.prioritize_continuity when given.

        Returns:
            SchedulingResult with source="engine".

        Raises:
            ConfigError: Roster size outside 5, 6 or 7.
        """
        continuity = (
            self.cfg.prioritize_continuity
            if prioritize_continuity is None
            else prioritize_continuity
        )

        # (1) Roles and working copies of the rooms
        roster = build_roster(nurse_names)
        ctx = AllocationContext.create(roster, rooms)
        occupied = ctx.occupied_positions()

        # (2) Empty floor is a valid configuration, not an error
        if not occupied:
            logger.info("No occupied rooms, returning empty assignments.")
            return SchedulingResult(
                assignments=empty_assignments(roster),
                warnings=[NO_OCCUPIED_ROOMS],
                total_rooms=0,
                success=True,
                rooms=ctx.final_rooms(),
            )

        # (3) Hardest rooms first; sorted() is stable so ties keep input order
        ordered = sorted(occupied, key=lambda p: ctx.rooms[p].weight, reverse=True)
        chemo = [p for p in ordered if ctx.rooms[p].is_chemo]
        non_chemo = [p for p in ordered if not ctx.rooms[p].is_chemo]
        logger.debug("Quotas: %s", {s.name: s.quota for s in ctx.active})

        # (4) Allocation passes
        if continuity:
            self._continuity_pass(ctx, occupied)
        unplaced_chemo = self._chemo_pass(ctx, chemo)
        unplaced = self._locality_pass(ctx, [p for p in non_chemo if not ctx.is_assigned(p)])

        # (5) Score every nurse and collect run-level warnings
        assignments = [build_assignment(s.index, s.role, ctx.rooms_of(s)) for s in ctx.slots]
        active = [a for a in assignments if not a.is_off_care]

        warnings: list[str] = []
        if unplaced_chemo:
            warnings.append(
                f"{len(unplaced_chemo)} chemo rooms could not be assigned (max 1 per nurse)"
            )
        for message in (
            multiple_chemo_warning(active),
            balance_warning([a.difficulty_score for a in active]),
            unassigned_warning([ctx.rooms[p].number for p in unplaced]),
        ):
            if message:
                warnings.append(message)

        unassigned_rooms = [ctx.rooms[p].number for p in occupied if not ctx.is_assigned(p)]
        logger.info(
            "Assigned %d/%d occupied rooms to %d nurses (%d warning(s))",
            len(occupied) - len(unassigned_rooms),
            len(occupied),
            len(active),
            len(warnings),
        )

        return SchedulingResult(
            assignments=assignments,
            warnings=warnings,
            total_rooms=len(occupied),
            success=not warnings,
            rooms=ctx.final_rooms(),
            unassigned_rooms=unassigned_rooms,
        )

    # -------------------- Passes --------------------

    def _continuity_pass(self, ctx: AllocationContext, occupied: list[int]) -> None:
        """
        Gives rooms back to their previous nurse when that nurse is active.
        Quotas are ignored here; later passes see the reduced capacity.
        """
        kept = 0
        for position in occupied:
            slot = ctx.active_slot_named(ctx.rooms[position].previous_nurse)
            if slot is not None:
                ctx.assign(slot, position)
                kept += 1
        logger.debug("Continuity pass kept %d room(s)", kept)

    def _chemo_pass(self, ctx: AllocationContext, chemo: list[int]) -> list[int]:
        """
        Places unassigned chemo rooms, one per nurse within this pass, on the
        first nurse in roster order still below quota.

        Chemo rooms kept by continuity do not block a nurse here; the
        validator reports any resulting overflow.

        Returns:
            Positions of chemo rooms no nurse could take.
        """
        received: set[int] = set()
        unplaced: list[int] = []

        for position in chemo:
            if ctx.is_assigned(position):
                continue
            slot = next(
                (
                    s
                    for s in ctx.active
                    if s.index not in received and s.room_count < s.quota
                ),
                None,
            )
            if slot is None:
                unplaced.append(position)
                continue
            ctx.assign(slot, position)
            received.add(slot.index)

        if unplaced:
            logger.warning("%d chemo room(s) left unassigned", len(unplaced))
        return unplaced

    def _locality_pass(self, ctx: AllocationContext, remaining: list[int]) -> list[int]:
        """
        Allocates the remaining rooms block by block, largest block first.

        A block goes whole to the nurse with the most spare capacity that can
        hold all of it. Otherwise its rooms are handed out one at a time,
        hardest first, each to the nurse with the most spare capacity.

        Returns:
            Positions of rooms no nurse had capacity for.
        """
        # (1) Group by proximity block in first-seen order
        groups: dict[str, list[int]] = {}
        for position in remaining:
            groups.setdefault(group_key(ctx.rooms[position].number), []).append(position)

        unplaced: list[int] = []

        # (2) Largest groups first; sort is stable on ties
        for block_id, members in sorted(groups.items(), key=lambda kv: len(kv[1]), reverse=True):
            slot = self._roomiest(ctx, minimum=len(members))
            if slot is not None:
                for position in members:
                    ctx.assign(slot, position)
                logger.debug("Block %s (%d) -> %s", block_id, len(members), slot.name)
                continue

            # (3) Split the block
            by_difficulty = sorted(members, key=lambda p: ctx.rooms[p].weight, reverse=True)
            for position in by_difficulty:
                slot = self._roomiest(ctx, minimum=1)
                if slot is None:
                    unplaced.append(position)
                    continue
                ctx.assign(slot, position)
            logger.debug("Block %s (%d) split across nurses", block_id, len(members))

        return unplaced

    @staticmethod
    def _roomiest(ctx: AllocationContext, minimum: int) -> NurseSlot | None:
        """Active nurse with the greatest capacity >= minimum; first in roster order on ties."""
        best: NurseSlot | None = None
        for slot in ctx.active:
            if slot.capacity >= minimum and (best is None or slot.capacity > best.capacity):
                best = slot
        return best


def generate_schedule(
    nurse_names: Sequence[str],
    rooms: Sequence[Room],
    prioritize_continuity: bool = True,
) -> SchedulingResult:
    """Convenience wrapper: run the engine with default configuration."""
    return SchedulingEngine().generate(
        nurse_names, rooms, prioritize_continuity=prioritize_continuity
    )


__all__ = ["SchedulingEngine", "generate_schedule"]
