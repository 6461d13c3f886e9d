"""Hazard scenarios: content tables and event selection."""

from sim.base import (
    Hazard,
    Difficulty,
    Severity,
    CenterStatus,
    Cue,
    EventOption,
    EmergencyEvent,
    DifficultyProfile,
)
from sim.content import AGENCIES, GO_BAG_ITEMS, EVACUATION_CENTERS, INFRASTRUCTURE_TASKS, event_pool
from sim.scenarios import DIFFICULTY_PROFILES, get_profile, seeded_shuffle, select_events, parse_hazard, parse_difficulty

__all__ = [
    "Hazard",
    "Difficulty",
    "Severity",
    "CenterStatus",
    "Cue",
    "EventOption",
    "EmergencyEvent",
    "DifficultyProfile",
    "AGENCIES",
    "GO_BAG_ITEMS",
    "EVACUATION_CENTERS",
    "INFRASTRUCTURE_TASKS",
    "event_pool",
    "DIFFICULTY_PROFILES",
    "get_profile",
    "seeded_shuffle",
    "select_events",
    "parse_hazard",
    "parse_difficulty",
]
