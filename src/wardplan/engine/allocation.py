# src/wardplan/engine/allocation.py
"""
Room quotas and the mutable allocation context shared by the scheduling
passes.

Every nurse gets one NurseSlot carrying its own quota and counters, so the
passes never index parallel arrays by roster position.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from wardplan.layout.roster import CHARGE_ROOM_COUNT
from wardplan.schemas.models import NurseRole, Room


def room_quotas(roster: Sequence[NurseRole], occupied_count: int) -> list[int]:
    """
    @brief
    Soft per-nurse room targets for the active nurses, in roster order.

    @details
    With a charge nurse the charge quota is fixed at CHARGE_ROOM_COUNT and the
    remaining rooms are split by floor division over the other active nurses.
    Otherwise all active nurses share the rooms equally. In both cases the
    remainder goes one room each to the first eligible nurses.
    """
    active = [r for r in roster if not r.is_off_care]
    if not active:
        return []

    if active[0].is_charge:
        regular = len(active) - 1
        remaining = max(occupied_count - CHARGE_ROOM_COUNT, 0)
        base, extra = divmod(remaining, regular)
        return [CHARGE_ROOM_COUNT] + [base + (1 if i < extra else 0) for i in range(regular)]

    base, extra = divmod(occupied_count, len(active))
    return [base + (1 if i < extra else 0) for i in range(len(active))]


@dataclass(slots=True)
class NurseSlot:
    """Allocation state of one nurse during a run."""

    index: int
    role: NurseRole
    quota: int = 0
    room_positions: list[int] = field(default_factory=list)
    chemo_count: int = 0

    @property
    def name(self) -> str:
        return self.role.name

    @property
    def is_active(self) -> bool:
        return not self.role.is_off_care

    @property
    def room_count(self) -> int:
        return len(self.room_positions)

    @property
    def capacity(self) -> int:
        # Negative once continuity pushed the nurse over quota.
        return self.quota - self.room_count


@dataclass
class AllocationContext:
    """
    @brief
    Working state of a single engine run.

    @details
    Holds the run's own list of rooms (positions index into it), one NurseSlot
    per roster entry and the room → nurse ownership map. Nothing here is
    shared with the caller.
    """

    rooms: list[Room]
    slots: list[NurseSlot]
    owner: dict[int, NurseSlot] = field(default_factory=dict)

    @classmethod
    def create(cls, roster: Sequence[NurseRole], rooms: Sequence[Room]) -> AllocationContext:
        # Working copies with any stale assignment cleared.
        working = [r.model_copy(update={"assigned_nurse": None}) for r in rooms]
        slots = [NurseSlot(index=i, role=role) for i, role in enumerate(roster)]

        occupied_count = sum(1 for r in working if r.is_occupied)
        active = [s for s in slots if s.is_active]
        for slot, quota in zip(active, room_quotas(roster, occupied_count)):
            slot.quota = quota

        return cls(rooms=working, slots=slots)

    @property
    def active(self) -> list[NurseSlot]:
        return [s for s in self.slots if s.is_active]

    def occupied_positions(self) -> list[int]:
        return [i for i, r in enumerate(self.rooms) if r.is_occupied]

    def active_slot_named(self, name: str | None) -> NurseSlot | None:
        if not name:
            return None
        return next((s for s in self.slots if s.name == name and s.is_active), None)

    def is_assigned(self, position: int) -> bool:
        return position in self.owner

    def assign(self, slot: NurseSlot, position: int) -> None:
        """Give room `position` to `slot`, keeping chemo count in step."""
        if position in self.owner:
            raise ValueError(f"room {self.rooms[position].number} is already assigned")
        self.owner[position] = slot
        slot.room_positions.append(position)
        if self.rooms[position].is_chemo:
            slot.chemo_count += 1

    def rooms_of(self, slot: NurseSlot) -> list[Room]:
        """Rooms held by `slot`, in assignment order, with `assigned_nurse` set."""
        return [
            self.rooms[p].model_copy(update={"assigned_nurse": slot.name})
            for p in slot.room_positions
        ]

    def final_rooms(self) -> list[Room]:
        """All rooms in input order with the run's ownership written back."""
        out: list[Room] = []
        for position, room in enumerate(self.rooms):
            slot = self.owner.get(position)
            out.append(room.model_copy(update={"assigned_nurse": slot.name if slot else None}))
        return out


__all__ = ["AllocationContext", "NurseSlot", "room_quotas"]
