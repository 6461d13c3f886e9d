"""Difficulty table, seedable event selection and hazard/difficulty parsing."""

import random
from typing import Optional, Sequence, TypeVar, Union

from sim.base import Hazard, Difficulty, DifficultyProfile, EmergencyEvent
from sim.content import event_pool

T = TypeVar("T")

DIFFICULTY_PROFILES: dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(event_count=3, initial_time_s=300, initial_panic=10, panic_relief=10, panic_penalty=5),
    Difficulty.MEDIUM: DifficultyProfile(event_count=4, initial_time_s=240, initial_panic=20, panic_relief=5, panic_penalty=10),
    Difficulty.HARD: DifficultyProfile(event_count=5, initial_time_s=150, initial_panic=40, panic_relief=3, panic_penalty=20),
}


def get_profile(difficulty: Difficulty) -> DifficultyProfile:
    return DIFFICULTY_PROFILES[difficulty]


def seeded_shuffle(items: Sequence[T], rng: random.Random) -> list[T]:
    """Fisher-Yates shuffle of a copy. Same rng state => same order."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = rng.randint(0, i)
        out[i], out[j] = out[j], out[i]
    return out


def select_events(
    hazard: Hazard,
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> list[EmergencyEvent]:
    """Draw the session's events without replacement, in random order."""
    rng = rng or random.Random()
    pool = event_pool(hazard)
    count = get_profile(difficulty).event_count
    return seeded_shuffle(pool, rng)[: min(len(pool), count)]


def parse_hazard(value: Union[str, Hazard, None], default: Hazard = Hazard.TYPHOON) -> Hazard:
    if isinstance(value, Hazard):
        return value
    try:
        return Hazard((value or "").strip().lower())
    except ValueError:
        return default


def parse_difficulty(value: Union[str, Difficulty, None], default: Difficulty = Difficulty.MEDIUM) -> Difficulty:
    if isinstance(value, Difficulty):
        return value
    try:
        return Difficulty((value or "").strip().lower())
    except ValueError:
        return default
