# src/wardplan/schemas/models.py
"""
@brief
Pydantic data models for the Wardplan shift-planning project.

@details
Defines the canonical model types:
    - Room: one hospital room as configured by the operator (from rooms.csv)
    - NurseRole / Assignment: roster entries and their per-run allocation
    - SchedulingResult: full outcome of an engine run or a validated proposal
    - NurseProposal / ExternalProposal: untrusted room lists from an external source
    - Config: runtime configuration (from config.yaml), including nested blocks

Input and result models are frozen: the engine works on its own copies and
returns new objects instead of mutating the caller's rooms.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class _StrictBaseModel(BaseModel):
    """
    @brief
    Base model enforcing strict defaults for configuration and data contracts.

    @details
    Forbids unknown fields and preserves exact naming rules.
    Designed as a foundation for all other Wardplan models.
    """

    model_config = {
        "extra": "forbid",  # Reject unknown fields
        "populate_by_name": True,  # Allow population by field name
        "use_enum_values": True,  # Export raw enum values (difficulty as "hard")
    }


class _FrozenModel(_StrictBaseModel):
    """Strict model that cannot be modified after construction."""

    model_config = {**_StrictBaseModel.model_config, "frozen": True}


class Difficulty(str, Enum):
    """Care difficulty of an occupied room."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


DIFFICULTY_WEIGHTS: dict[str, int] = {
    Difficulty.EASY.value: 1,
    Difficulty.MEDIUM.value: 2,
    Difficulty.HARD.value: 3,
}

ResultSource = Literal["engine", "proposal", "fallback"]
ShiftType = Literal["day", "night"]


class Room(_FrozenModel):
    """
    @brief
    Represents one room of the nursing unit.

    @details
    Rooms are configured by the operator. Only occupied rooms take part in
    allocation. `assigned_nurse` is rewritten on the copies returned by a run;
    `previous_nurse` is set by the continuity workflow and only read here.

    @params
        id : str
            Stable identifier of the room record.
        number : str
            Room label, may carry a bed suffix (e.g. "605A").
        difficulty : Difficulty
            Care difficulty, weighted easy=1 / medium=2 / hard=3.
    """

    id: str = Field(..., description="Stable room identifier")
    number: str = Field(..., min_length=1, description="Room label, e.g. '605A'")
    is_occupied: bool = Field(True, description="Only occupied rooms are allocated")
    difficulty: Difficulty = Field(
        Difficulty.MEDIUM, validate_default=True, description="easy | medium | hard"
    )
    is_chemo: bool = Field(False, description="Room holds a chemotherapy patient")
    assigned_nurse: str | None = Field(None, description="Nurse holding the room in this run")
    previous_nurse: str | None = Field(None, description="Nurse holding the room last shift")

    @field_validator("assigned_nurse", "previous_nurse", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def weight(self) -> int:
        return DIFFICULTY_WEIGHTS[Difficulty(self.difficulty).value]


class NurseRole(_FrozenModel):
    """
    @brief
    One roster entry and its special role, if any.

    @details
    Roles depend on roster size only: index 0 is the charge nurse when six
    nurses are on shift, the off-care nurse when seven are.
    """

    name: str = Field(..., description="Nurse name as supplied in the roster")
    is_charge: bool = Field(False, description="Charge nurse (holds exactly 3 rooms)")
    is_off_care: bool = Field(False, description="Off-care nurse (holds no rooms)")

    @model_validator(mode="after")
    def _single_role(self) -> NurseRole:
        if self.is_charge and self.is_off_care:
            raise ValueError("a nurse cannot be both charge and off-care")
        return self


class Assignment(NurseRole):
    """
    @brief
    Rooms held by one nurse together with their scores and warnings.

    @details
    Rooms keep assignment order (not room order). Scores are recomputed by the
    assignment validator; warnings are nurse-scoped policy violations.
    """

    nurse_id: str = Field(..., description="Positional identifier, e.g. 'nurse-0'")
    rooms: list[Room] = Field(default_factory=list, description="Rooms in assignment order")
    chemo_count: int = Field(0, ge=0, description="Number of chemo rooms held")
    difficulty_score: int = Field(0, ge=0, description="Sum of difficulty weights")
    proximity_score: int = Field(0, ge=0, description="Rooms sharing a block with another")
    warnings: list[str] = Field(default_factory=list, description="Nurse-scoped warnings")

    @property
    def room_numbers(self) -> list[str]:
        return [r.number for r in self.rooms]

    @property
    def role(self) -> NurseRole:
        return NurseRole(name=self.name, is_charge=self.is_charge, is_off_care=self.is_off_care)


class SchedulingResult(_FrozenModel):
    """
    @brief
    Outcome of one scheduling run or of a validated external proposal.

    @details
    `success` is advisory: it is True when the global warning list is empty
    (and for an empty floor), never an exception signal.
    """

    assignments: list[Assignment] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list, description="Run-scoped warnings")
    total_rooms: int = Field(0, ge=0, description="Occupied rooms considered")
    success: bool = Field(True)
    rooms: list[Room] = Field(default_factory=list, description="All rooms after the run")
    unassigned_rooms: list[str] = Field(
        default_factory=list, description="Occupied room numbers no nurse holds"
    )
    source: ResultSource = Field("engine", description="engine | proposal | fallback")

    def assignment_for(self, name: str) -> Assignment | None:
        return next((a for a in self.assignments if a.name == name), None)

    @property
    def assigned_count(self) -> int:
        return sum(len(a.rooms) for a in self.assignments)


# ------------------------------------------------------------
# Untrusted external proposal (e.g. LLM output)
# ------------------------------------------------------------
class NurseProposal(BaseModel):
    """One proposed nurse entry; tolerant of extra keys and loose typing."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    nurse_name: str | None = Field(None, alias="nurseName")
    assigned_rooms: list[str] = Field(default_factory=list, alias="assignedRooms")
    reasoning: str | None = None

    @field_validator("nurse_name", mode="before")
    @classmethod
    def _name_to_str(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("assigned_rooms", mode="before")
    @classmethod
    def _rooms_to_str(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (str, int)):
            value = [value]
        if isinstance(value, list):
            return [str(v).strip() for v in value]
        return value


class ExternalProposal(BaseModel):
    """Parsed shape of an external assignment proposal."""

    model_config = {"extra": "ignore"}

    assignments: list[NurseProposal] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @field_validator("assignments", "warnings", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("assignments", mode="before")
    @classmethod
    def _entries_to_objects(cls, value: Any) -> Any:
        # Non-object entries become nameless ones and are reported by the validator.
        if isinstance(value, list):
            return [v if isinstance(v, (dict, NurseProposal)) else {} for v in value]
        return value

    @field_validator("warnings", mode="before")
    @classmethod
    def _warnings_to_str(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [str(v) for v in value]
        return value


# ------------------------------------------------------------
# Runtime configuration
# ------------------------------------------------------------
class IOPolicy(BaseModel):
    """
    @brief
    Controls runtime behavior for artifact writing.

    @details
    Used by the scheduler facade and ResultStore to decide whether
    schedule.json, assignments.csv and metrics.json are written.
    """

    write_artifacts: bool = Field(
        True,
        description="If False, disables writing schedule.json, assignments.csv, metrics.json.",
    )


class ProposalConfig(_StrictBaseModel):
    """
    @brief
    Retry policy for an external proposal source.

    @details
    The transport itself belongs to the caller; these values bound how often
    it is retried before the deterministic engine takes over.
    """

    max_attempts: int = Field(3, ge=1, description="Calls to the source before falling back")
    backoff_seconds: float = Field(
        2.0, ge=0.0, description="Base delay, doubled after every failed attempt"
    )


class Config(_StrictBaseModel):
    """
    @brief
    Represents the full runtime configuration loaded from config.yaml.

    @details
    Combines scheduling defaults, input/output locations and the retry policy
    of the external proposal path.
    """

    prioritize_continuity: bool = Field(
        True, description="Give rooms back to the nurse who held them last shift"
    )
    shift_type: ShiftType = Field("day", description="Shift designator stored with artifacts")
    nurse_names: list[str] | None = Field(
        None, description="Default roster (5, 6 or 7 names) used when none is passed"
    )

    rooms_csv: str | None = None
    output_dir: str | None = "data/output"
    io_policy: IOPolicy = Field(default_factory=IOPolicy.model_construct)
    proposal: ProposalConfig = Field(default_factory=ProposalConfig.model_construct)


__all__ = [
    "Assignment",
    "Config",
    "DIFFICULTY_WEIGHTS",
    "Difficulty",
    "ExternalProposal",
    "IOPolicy",
    "NurseProposal",
    "NurseRole",
    "ProposalConfig",
    "Room",
    "SchedulingResult",
]
