"""Base types for hazard scenarios and their content tables."""

from dataclasses import dataclass
from enum import Enum


class Hazard(str, Enum):
    TYPHOON = "typhoon"
    EARTHQUAKE = "earthquake"
    FLOOD = "flood"
    VOLCANO = "volcano"
    LANDSLIDE = "landslide"
    FIRE = "fire"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CenterStatus(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    OVERWHELMED = "overwhelmed"


class Cue(str, Enum):
    """Named audio cues signalled by the engine."""
    START = "start"
    SUCCESS = "success"
    ERROR = "error"
    ALERT = "alert"
    CLICK = "click"


@dataclass(frozen=True)
class EventOption:
    action: str
    outcome: str
    correct: bool


@dataclass(frozen=True)
class EmergencyEvent:
    id: str
    hazard: Hazard
    title: str
    severity: Severity
    description: str
    options: tuple[EventOption, ...]

    def correct_index(self) -> int:
        for i, opt in enumerate(self.options):
            if opt.correct:
                return i
        return 0


@dataclass(frozen=True)
class HazardBrief:
    name: str
    description: str


@dataclass(frozen=True)
class HazardAlert:
    agency: str
    signal: str
    advisory: str


@dataclass(frozen=True)
class HazardLesson:
    real_world: str
    lesson: str
    key_takeaway: str


@dataclass(frozen=True)
class GoBagItem:
    id: str
    name: str
    category: str
    points: int


@dataclass(frozen=True)
class EvacuationCenter:
    id: str
    name: str
    capacity: int
    readiness: str
    points: int


@dataclass(frozen=True)
class InfrastructureTask:
    id: str
    name: str
    description: str
    points: int


@dataclass(frozen=True)
class DifficultyProfile:
    """Per-difficulty phase 2 tuning: events drawn, countdown, starting panic and panic deltas."""
    event_count: int
    initial_time_s: int
    initial_panic: int
    panic_relief: int
    panic_penalty: int
