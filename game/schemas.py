"""Schemas for the session record and history (pydantic-validated at the storage boundary)."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from sim.base import Hazard, Difficulty
from phases.preparedness import PreparednessRecord, preparedness_record_valid
from phases.response import ResponseRecord, response_record_valid
from phases.recovery import RecoveryRecord, recovery_record_valid


class Phase(str, Enum):
    INTRO = "intro"
    TUTORIAL = "tutorial"
    PHASE1 = "phase1"
    PHASE2 = "phase2"
    PHASE3 = "phase3"
    REPORT = "report"


@dataclass(frozen=True)
class ScenarioSelection:
    hazard: Hazard
    difficulty: Difficulty = Difficulty.MEDIUM


class SessionRecord(BaseModel):
    """Everything the orchestrator persists about the game in progress."""

    phase: Phase = Phase.INTRO
    selection: Optional[ScenarioSelection] = None
    preparedness: Optional[PreparednessRecord] = None
    response: Optional[ResponseRecord] = None
    recovery: Optional[RecoveryRecord] = None

    def is_consistent(self) -> bool:
        """Each phase needs the records of the phases before it, and every record must be reachable by play."""
        if self.preparedness is not None and not preparedness_record_valid(self.preparedness):
            return False
        if self.response is not None and not response_record_valid(self.response):
            return False
        if self.recovery is not None and not recovery_record_valid(self.recovery):
            return False
        if self.phase in (Phase.INTRO, Phase.TUTORIAL):
            return True
        if self.selection is None or self.preparedness is None:
            return False
        if self.phase == Phase.PHASE1:
            return True
        if self.preparedness.preparedness_score is None:
            return False
        if self.phase == Phase.PHASE2:
            return True
        if self.response is None or self.recovery is None:
            return False
        if self.phase == Phase.PHASE3:
            return True
        return self.recovery.recovery_score is not None


class HistoryEntry(BaseModel):
    timestamp: str
    hazard: Hazard
    difficulty: Difficulty
    final_score: int = Field(ge=0, le=100)
