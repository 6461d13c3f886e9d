"""Game orchestration: session state machine, report, storage, cues, scheduler."""

from game.config import GameConfig
from game.schemas import Phase, ScenarioSelection, SessionRecord, HistoryEntry
from game.storage import StoragePort, MemoryStorage, JsonFileStorage
from game.cues import CueEmitter, RecordingCueEmitter, get_cue_emitter
from game.clock import CallbackScheduler
from game.report import GameReport, generate_report, calculate_final_score, grade_for
from game.session import GameSession

__all__ = [
    "GameConfig",
    "Phase",
    "ScenarioSelection",
    "SessionRecord",
    "HistoryEntry",
    "StoragePort",
    "MemoryStorage",
    "JsonFileStorage",
    "CueEmitter",
    "RecordingCueEmitter",
    "get_cue_emitter",
    "CallbackScheduler",
    "GameReport",
    "generate_report",
    "calculate_final_score",
    "grade_for",
    "GameSession",
]
