# src/wardplan/layout/floor.py
from __future__ import annotations

import random

from wardplan.errors import ConfigError
from wardplan.layout.proximity import BLOCK_LAYOUT
from wardplan.schemas.models import Difficulty, Room

# Room labels of the unit in walking order.
DEFAULT_ROOM_NUMBERS: tuple[str, ...] = tuple(
    number for numbers in BLOCK_LAYOUT.values() for number in numbers
)

DEFAULT_NURSE_NAMES: tuple[str, ...] = (
    "Nurse Adams",
    "Nurse Brown",
    "Nurse Chen",
    "Nurse Davis",
    "Nurse Evans",
    "Nurse Foster",
    "Nurse Garcia",
)


def default_nurse_names(count: int) -> list[str]:
    """First `count` placeholder roster names."""
    if count < 0 or count > len(DEFAULT_NURSE_NAMES):
        raise ConfigError(
            message=f"No default roster for {count} nurses",
            source="floor.default_nurse_names",
            suggested_action=f"Request between 0 and {len(DEFAULT_NURSE_NAMES)} names.",
        )
    return list(DEFAULT_NURSE_NAMES[:count])


def make_floor(
    *,
    occupied: bool = True,
    difficulty: Difficulty = Difficulty.MEDIUM,
) -> list[Room]:
    """Every room of the unit with the same occupancy and difficulty, no chemo."""
    return [
        Room(id=f"room-{i}", number=number, is_occupied=occupied, difficulty=difficulty)
        for i, number in enumerate(DEFAULT_ROOM_NUMBERS)
    ]


def make_random_floor(
    seed: int | None = None,
    occupancy_rate: float = 0.8,
    chemo_rate: float = 0.2,
) -> list[Room]:
    """
    @brief
    Build a randomly populated unit for demos and synthetic input files.

    @details
    Each room is occupied with probability `occupancy_rate`, receives a
    uniformly drawn difficulty and holds a chemo patient with probability
    `chemo_rate`. A fixed seed gives a reproducible floor.
    """
    rng = random.Random(seed)
    difficulties = list(Difficulty)
    rooms: list[Room] = []
    for i, number in enumerate(DEFAULT_ROOM_NUMBERS):
        rooms.append(
            Room(
                id=f"room-{i}",
                number=number,
                is_occupied=rng.random() < occupancy_rate,
                difficulty=rng.choice(difficulties),
                is_chemo=rng.random() < chemo_rate,
            )
        )
    return rooms


__all__ = [
    "DEFAULT_NURSE_NAMES",
    "DEFAULT_ROOM_NUMBERS",
    "default_nurse_names",
    "make_floor",
    "make_random_floor",
]
