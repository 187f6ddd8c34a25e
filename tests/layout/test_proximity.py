# tests/layout/test_proximity.py
import pytest

from wardplan.errors import ConfigError
from wardplan.layout.floor import (
    DEFAULT_ROOM_NUMBERS,
    default_nurse_names,
    make_floor,
    make_random_floor,
)
from wardplan.layout.proximity import (
    OTHER_BLOCK,
    PROXIMITY_BLOCKS,
    block_of,
    group_key,
    proximity_score,
)
from wardplan.layout.roster import build_roster


def test_catalog_has_eight_disjoint_blocks_covering_the_floor():
    """
    @brief
    Blocks partition the thirty rooms of the unit.
    """
    # --- Act ---
    members = [n for block in PROXIMITY_BLOCKS.values() for n in block]

    # --- Assert ---
    assert len(PROXIMITY_BLOCKS) == 8
    assert len(members) == len(set(members)) == 30
    assert set(members) == set(DEFAULT_ROOM_NUMBERS)


def test_block_lookup_and_group_key():
    assert block_of("605A") == block_of("606B") == "block-2"
    assert block_of("623") == "block-8"
    assert block_of("700") is None
    assert group_key("700") == OTHER_BLOCK
    assert group_key("600") == "block-1"


@pytest.mark.parametrize(
    ("rooms", "expected"),
    [
        ([], 0),
        (["600"], 1),
        (["999"], 1),
        (["600", "601"], 2),
        (["600", "604"], 0),
        (["600", "601", "604"], 2),
        (["607", "608", "609", "610", "619"], 4),
        (["999", "998"], 0),
    ],
)
def test_proximity_score(rooms, expected):
    """
    @brief
    Rooms score only when they share a block with another held room.

    @details
    Zero or one room scores its own length; rooms outside every block
    never score once the list has two or more entries.
    """
    assert proximity_score(rooms) == expected


def test_proximity_score_accepts_generators():
    assert proximity_score(n for n in ("611", "612")) == 2


@pytest.mark.parametrize("size", [5, 6, 7])
def test_build_roster_roles(size):
    # --- Arrange ---
    names = default_nurse_names(size)

    # --- Act ---
    roster = build_roster(names)

    # --- Assert ---
    assert [r.name for r in roster] == names
    assert roster[0].is_charge is (size == 6)
    assert roster[0].is_off_care is (size == 7)
    assert not any(r.is_charge or r.is_off_care for r in roster[1:])


@pytest.mark.parametrize("size", [0, 4, 8])
def test_build_roster_rejects_unsupported_sizes(size):
    names = [f"Nurse {i}" for i in range(size)]
    with pytest.raises(ConfigError) as e:
        build_roster(names)
    assert f"Unsupported roster size: {size}" in str(e.value)


def test_build_roster_logs_duplicate_names(caplog):
    names = ["Nurse A", "Nurse A", "Nurse B", "Nurse C", "Nurse D"]
    with caplog.at_level("WARNING"):
        roster = build_roster(names)
    assert len(roster) == 5
    assert "duplicate" in caplog.text


def test_default_floor_and_random_floor():
    # --- Act ---
    floor = make_floor()
    a = make_random_floor(seed=7)
    b = make_random_floor(seed=7)

    # --- Assert ---
    assert [r.number for r in floor] == list(DEFAULT_ROOM_NUMBERS)
    assert all(r.is_occupied and not r.is_chemo for r in floor)
    assert a == b
    assert len({r.id for r in a}) == 30

    with pytest.raises(ConfigError):
        default_nurse_names(8)
