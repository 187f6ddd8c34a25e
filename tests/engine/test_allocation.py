# tests/engine/test_allocation.py
import pytest

from wardplan.engine.allocation import AllocationContext, room_quotas
from wardplan.layout.floor import default_nurse_names, make_floor
from wardplan.layout.roster import build_roster
from wardplan.schemas.models import Room


@pytest.mark.parametrize(
    ("size", "occupied", "expected"),
    [
        (6, 30, [3, 6, 6, 5, 5, 5]),
        (6, 3, [3, 0, 0, 0, 0, 0]),
        (6, 2, [3, 0, 0, 0, 0, 0]),
        (5, 30, [6, 6, 6, 6, 6]),
        (5, 7, [2, 2, 1, 1, 1]),
        (7, 30, [5, 5, 5, 5, 5, 5]),
        (7, 8, [2, 2, 1, 1, 1, 1]),
    ],
)
def test_room_quotas(size, occupied, expected):
    """
    @brief
    Quotas follow roster roles; the remainder goes to the first nurses.

    @details
    Off-care nurses get no quota entry. The charge quota stays fixed even
    when fewer rooms are occupied.
    """
    # --- Arrange ---
    roster = build_roster(default_nurse_names(size))

    # --- Act ---
    quotas = room_quotas(roster, occupied)

    # --- Assert ---
    assert quotas == expected


def test_context_works_on_copies_and_tracks_ownership():
    # --- Arrange ---
    roster = build_roster(default_nurse_names(5))
    rooms = [
        Room(id="r0", number="600", assigned_nurse="Stale"),
        Room(id="r1", number="601", is_chemo=True),
        Room(id="r2", number="602", is_occupied=False),
    ]

    # --- Act ---
    ctx = AllocationContext.create(roster, rooms)
    first = ctx.slots[0]
    ctx.assign(first, 0)
    ctx.assign(first, 1)

    # --- Assert ---
    assert rooms[0].assigned_nurse == "Stale"
    assert ctx.occupied_positions() == [0, 1]
    assert first.room_count == 2
    assert first.chemo_count == 1
    assert first.quota == 1
    assert first.capacity == -1
    assert [r.assigned_nurse for r in ctx.rooms_of(first)] == ["Nurse Adams"] * 2
    assert [r.assigned_nurse for r in ctx.final_rooms()] == ["Nurse Adams", "Nurse Adams", None]


def test_assign_twice_raises():
    roster = build_roster(default_nurse_names(5))
    ctx = AllocationContext.create(roster, make_floor())
    ctx.assign(ctx.slots[0], 0)
    with pytest.raises(ValueError):
        ctx.assign(ctx.slots[1], 0)


def test_off_care_slot_is_inactive():
    roster = build_roster(default_nurse_names(7))
    ctx = AllocationContext.create(roster, make_floor())

    assert [s.index for s in ctx.active] == [1, 2, 3, 4, 5, 6]
    assert ctx.slots[0].quota == 0
    assert ctx.active_slot_named("Nurse Adams") is None
    assert ctx.active_slot_named("Nurse Brown") is ctx.slots[1]
    assert ctx.active_slot_named(None) is None
