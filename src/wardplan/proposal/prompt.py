# src/wardplan/proposal/prompt.py
"""Prompt text sent to an external (LLM) proposal source."""

from __future__ import annotations

import json
from collections.abc import Sequence

from wardplan.layout.proximity import BLOCK_LAYOUT
from wardplan.layout.roster import CHARGE_ROOM_COUNT, build_roster
from wardplan.schemas.models import Room
from wardplan.validator.validator import MAX_CHEMO_PER_NURSE


def _block_lines() -> str:
    return "\n".join(
        f"- Block {i}: {', '.join(numbers)}"
        for i, numbers in enumerate(BLOCK_LAYOUT.values(), start=1)
    )


HOSPITAL_POLICIES = f"""
CRITICAL HOSPITAL ASSIGNMENT POLICIES:
1. CHEMO SAFETY: Maximum {MAX_CHEMO_PER_NURSE} chemo patient per nurse (NEVER exceed this)
2. CHARGE NURSE: If 6 nurses total, first nurse is charge nurse with exactly {CHARGE_ROOM_COUNT} patients (usually hardest cases)
3. OFF-CARE NURSE: If 7 nurses total, first nurse is off-care with 0 patients
4. WORKLOAD BALANCE: Distribute difficulty evenly (easy=1pt, medium=2pts, hard=3pts)
5. PROXIMITY: Keep each nurse's rooms in contiguous blocks when possible
6. CONTINUITY: Maintain nurse-patient relationships from previous shifts when specified

ROOM LAYOUT (contiguous blocks):
{_block_lines()}
"""

SYSTEM_PROMPT = f"""You are an expert hospital nurse assignment system. Your job is to create optimal room assignments following strict hospital policies and safety requirements.

{HOSPITAL_POLICIES}

You must return a valid JSON object with the exact structure shown in the user prompt. Be extremely careful with chemo limits and charge nurse requirements."""

ANSWER_FORMAT = """{
  "assignments": [
    {
      "nurseName": "Nurse Name",
      "assignedRooms": ["600", "601"],
      "reasoning": "Brief explanation of assignment logic"
    }
  ],
  "warnings": ["Any policy violations or concerns"]
}"""


def build_user_prompt(
    nurse_names: Sequence[str],
    occupied_rooms: Sequence[Room],
    prioritize_continuity: bool = True,
) -> str:
    """
    @brief
    Describe one planning request: roster, occupied rooms and role requirements.

    @details
    Room data is serialized as JSON with only the fields the source needs
    (number, difficulty, chemo flag, previous nurse).

    @raises
        ConfigError
            Roster size outside 5, 6 or 7.
    """
    roster = build_roster(nurse_names)
    rooms_data = [
        {
            "number": r.number,
            "difficulty": r.difficulty,
            "isChemo": r.is_chemo,
            "previousNurse": r.previous_nurse,
        }
        for r in occupied_rooms
    ]

    requirements: list[str] = []
    first = roster[0]
    if first.is_charge:
        requirements.append(f"{first.name} is CHARGE NURSE (exactly {CHARGE_ROOM_COUNT} patients)")
    if first.is_off_care:
        requirements.append(f"{first.name} is OFF-CARE (0 patients)")
    requirements += [
        f"Maximum {MAX_CHEMO_PER_NURSE} chemo patient per nurse",
        "Balance difficulty scores across nurses",
        "Keep rooms contiguous when possible",
        "Prioritize continuity from previous shifts"
        if prioritize_continuity
        else "Ignore previous assignments",
    ]

    return (
        f"Create optimal nurse assignments for {len(roster)} nurses managing "
        f"{len(occupied_rooms)} occupied rooms.\n\n"
        f"NURSES: {', '.join(r.name for r in roster)}\n\n"
        f"ROOMS DATA:\n{json.dumps(rooms_data, indent=2)}\n\n"
        "ASSIGNMENT REQUIREMENTS:\n"
        + "\n".join(f"- {line}" for line in requirements)
        + f"\n\nReturn ONLY valid JSON in this exact format:\n{ANSWER_FORMAT}"
    )


def build_prompts(
    nurse_names: Sequence[str],
    occupied_rooms: Sequence[Room],
    prioritize_continuity: bool = True,
) -> tuple[str, str]:
    """(system, user) prompt pair for one planning request."""
    return SYSTEM_PROMPT, build_user_prompt(nurse_names, occupied_rooms, prioritize_continuity)


__all__ = ["HOSPITAL_POLICIES", "SYSTEM_PROMPT", "build_prompts", "build_user_prompt"]
