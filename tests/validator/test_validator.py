# tests/validator/test_validator.py
from __future__ import annotations

import pytest

from wardplan.errors import ConfigError
from wardplan.layout.floor import default_nurse_names
from wardplan.schemas.models import NurseProposal, NurseRole, Room
from wardplan.validator.validator import (
    SPREAD_ROOMS,
    UNBALANCED_DIFFICULTY,
    AssignmentValidator,
    balance_warning,
    score_and_warn,
    validate_external_proposal,
)

# ----------------- helpers -----------------


def _rooms(*numbers: str, chemo: tuple[str, ...] = ()) -> list[Room]:
    return [
        Room(id=f"room-{i}", number=n, is_chemo=n in chemo) for i, n in enumerate(numbers)
    ]


def _p(name: str, *rooms: str) -> NurseProposal:
    return NurseProposal(nurseName=name, assignedRooms=list(rooms))


# ----------------- score_and_warn -----------------


def test_score_and_warn_clean_nurse():
    # --- Arrange ---
    role = NurseRole(name="Nurse Brown")
    rooms = [
        Room(id="a", number="600", difficulty="hard"),
        Room(id="b", number="601", difficulty="easy", is_chemo=True),
    ]

    # --- Act ---
    score = score_and_warn(role, rooms)

    # --- Assert ---
    assert score.chemo_count == 1
    assert score.difficulty_score == 4
    assert score.proximity_score == 2
    assert score.warnings == ()


def test_score_and_warn_lists_every_violation_in_order():
    # --- Arrange ---
    role = NurseRole(name="Nurse Adams", is_charge=True)
    rooms = _rooms("600", "604", chemo=("600", "604"))

    # --- Act ---
    score = score_and_warn(role, rooms)

    # --- Assert ---
    assert score.warnings == (
        "Has 2 chemo patients (max 1 allowed)",
        "Charge nurse should have 3 patients, has 2",
        SPREAD_ROOMS,
    )


def test_off_care_nurse_with_rooms_is_warned():
    score = score_and_warn(NurseRole(name="Nurse Adams", is_off_care=True), _rooms("600"))
    assert score.warnings == ("Off-care nurse should have 0 patients, has 1",)


@pytest.mark.parametrize(
    ("scores", "expected"),
    [
        ([], None),
        ([4, 5, 6], None),
        ([4, 4, 7], None),
        ([2, 2, 8], UNBALANCED_DIFFICULTY),
        ([10, 10, 10, 10, 10, 8], None),
        ([12, 12, 12, 12, 12, 6], UNBALANCED_DIFFICULTY),
    ],
)
def test_balance_warning(scores, expected):
    """
    @brief
    Unbalanced when any score is more than two points from the mean.
    """
    assert balance_warning(scores) == expected


# ----------------- external proposals -----------------


def test_clean_proposal_is_accepted_without_warnings():
    # --- Arrange ---
    names = default_nurse_names(5)
    rooms = _rooms("600", "604", "607", "611", "619")
    proposals = [_p(n, r.number) for n, r in zip(names, rooms)]

    # --- Act ---
    result = validate_external_proposal(names, rooms, proposals)

    # --- Assert ---
    assert result.success is True
    assert result.warnings == []
    assert result.source == "proposal"
    assert [a.room_numbers for a in result.assignments] == [[r.number] for r in rooms]
    assert [r.assigned_nurse for r in result.rooms] == names


def test_duplicate_room_keeps_first_claim():
    """
    @brief
    A room claimed by two nurses stays with the first.

    @details
    The second claim is dropped with a warning naming the room; the rest of
    the second nurse's entry is still committed.
    """
    # --- Arrange ---
    names = default_nurse_names(5)
    rooms = _rooms("600", "601")
    proposals = [_p("Nurse Adams", "600"), _p("Nurse Brown", "600", "601")]

    # --- Act ---
    result = validate_external_proposal(names, rooms, proposals)

    # --- Assert ---
    assert result.assignment_for("Nurse Adams").room_numbers == ["600"]
    assert result.assignment_for("Nurse Brown").room_numbers == ["601"]
    assert "Room 600 assigned to multiple nurses" in result.warnings
    assert result.unassigned_rooms == []
    assert result.success is False


def test_unknown_nurse_and_unknown_room_are_skipped():
    # --- Arrange ---
    names = default_nurse_names(5)
    rooms = _rooms("600", "601", "602")
    proposals = [_p("Nurse Zed", "600"), _p("Nurse Adams", "601", "999")]

    # --- Act ---
    result = validate_external_proposal(names, rooms, proposals)

    # --- Assert ---
    assert result.warnings == [
        "Unknown nurse: Nurse Zed",
        "Unknown room: 999",
        "2 rooms left unassigned: 600, 602",
    ]
    assert result.unassigned_rooms == ["600", "602"]
    assert result.assignment_for("Nurse Adams").room_numbers == ["601"]


def test_unoccupied_rooms_are_unknown_to_proposals():
    names = default_nurse_names(5)
    rooms = _rooms("600") + [Room(id="x", number="601", is_occupied=False)]

    result = validate_external_proposal(names, rooms, [_p("Nurse Adams", "600", "601")])

    assert result.warnings == ["Unknown room: 601"]
    assert result.total_rooms == 1
    assert [(r.number, r.assigned_nurse) for r in result.rooms] == [
        ("600", "Nurse Adams"),
        ("601", None),
    ]


def test_entry_without_nurse_name_is_skipped():
    """
    @brief
    A nameless entry is dropped with a warning; the other entries stand.
    """
    # --- Arrange ---
    names = default_nurse_names(5)
    rooms = _rooms("600", "601", "602")
    proposals = [
        _p("Nurse Adams", "600", "601"),
        NurseProposal.model_validate({"assignedRooms": ["602"]}),
    ]

    # --- Act ---
    result = validate_external_proposal(names, rooms, proposals)

    # --- Assert ---
    assert result.warnings == [
        "Unknown nurse: (missing name)",
        "1 rooms left unassigned: 602",
    ]
    assert result.assignment_for("Nurse Adams").room_numbers == ["600", "601"]
    assert result.unassigned_rooms == ["602"]


def test_reported_warnings_come_first_and_roles_are_escalated():
    # --- Arrange ---
    names = default_nurse_names(6)
    rooms = _rooms("600", "601", "604", "605A", chemo=("604", "605A"))
    proposals = [_p("Nurse Adams", "600", "601"), _p("Nurse Brown", "604", "605A")]

    # --- Act ---
    result = validate_external_proposal(names, rooms, proposals, ["Tight staffing"])

    # --- Assert ---
    assert result.warnings == [
        "Tight staffing",
        "Charge nurse Nurse Adams has 2 patients instead of 3",
        "Nurse Brown assigned 2 chemo patients",
    ]
    brown = result.assignment_for("Nurse Brown")
    assert "Has 2 chemo patients (max 1 allowed)" in brown.warnings


def test_off_care_nurse_in_proposal_is_escalated():
    names = default_nurse_names(7)
    rooms = _rooms("600")

    result = validate_external_proposal(names, rooms, [_p("Nurse Adams", "600")])

    assert result.warnings == ["Off-care nurse Nurse Adams assigned 1 patients"]
    assert result.assignments[0].warnings == ["Off-care nurse should have 0 patients, has 1"]


def test_validator_is_reusable_between_calls():
    validator = AssignmentValidator(default_nurse_names(5), _rooms("600"))

    first = validator.validate([_p("Nurse Zed", "600")])
    second = validator.validate([_p("Nurse Adams", "600")])

    assert first.success is False
    assert second.success is True
    assert second.warnings == []


def test_validator_rejects_unsupported_roster():
    with pytest.raises(ConfigError):
        AssignmentValidator(default_nurse_names(4), _rooms("600"))
