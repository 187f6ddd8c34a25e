# src/wardplan/layout/proximity.py
"""
Proximity catalog: fixed mapping from room number to one of eight
physically contiguous blocks of the unit.

Room numbers absent from every block belong to an implicit "other" bucket
for locality purposes; `block_of` returns None for them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

PROXIMITY_BLOCKS: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        "block-1": frozenset({"600", "601", "602", "603"}),
        "block-2": frozenset({"604", "605A", "605B", "606A", "606B"}),
        "block-3": frozenset({"607", "608", "609", "610"}),
        "block-4": frozenset({"611", "612", "613", "614"}),
        "block-5": frozenset({"615A", "615B", "616A", "616B"}),
        "block-6": frozenset({"617A", "617B", "618A", "618B"}),
        "block-7": frozenset({"619", "620", "621"}),
        "block-8": frozenset({"622", "623"}),
    }
)

# Display order of room labels inside each block (frozensets are unordered).
BLOCK_LAYOUT: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "block-1": ("600", "601", "602", "603"),
        "block-2": ("604", "605A", "605B", "606A", "606B"),
        "block-3": ("607", "608", "609", "610"),
        "block-4": ("611", "612", "613", "614"),
        "block-5": ("615A", "615B", "616A", "616B"),
        "block-6": ("617A", "617B", "618A", "618B"),
        "block-7": ("619", "620", "621"),
        "block-8": ("622", "623"),
    }
)

OTHER_BLOCK = "other"

_BLOCK_BY_ROOM: dict[str, str] = {
    number: block_id for block_id, numbers in PROXIMITY_BLOCKS.items() for number in numbers
}


def block_of(room_number: str) -> str | None:
    """Return the block id holding `room_number`, or None if it is in no block."""
    return _BLOCK_BY_ROOM.get(room_number)


def group_key(room_number: str) -> str:
    """Block id used for grouping; unknown rooms share the OTHER_BLOCK key."""
    return _BLOCK_BY_ROOM.get(room_number, OTHER_BLOCK)


def proximity_score(room_numbers: Iterable[str]) -> int:
    """
    @brief
    Count rooms that share a block with at least one other room of the same list.

    @details
    For each block holding two or more of the given rooms, the number of those
    rooms is added to the score. Rooms outside every block never score.
    A list with zero or one room scores its own length, so a single room is
    never reported as spread out.

    @params
        room_numbers : Iterable[str]
            Room labels held by one nurse.

    @returns
        Proximity score in [0, len(room_numbers)].
    """
    numbers = list(room_numbers)
    if len(numbers) <= 1:
        return len(numbers)

    counts: dict[str, int] = {}
    for number in numbers:
        block_id = block_of(number)
        if block_id is not None:
            counts[block_id] = counts.get(block_id, 0) + 1

    return sum(n for n in counts.values() if n >= 2)


__all__ = [
    "BLOCK_LAYOUT",
    "OTHER_BLOCK",
    "PROXIMITY_BLOCKS",
    "block_of",
    "group_key",
    "proximity_score",
]
