"""Phase 3 (after the disaster): recovery record, score and advance gate."""

from dataclasses import dataclass, field, replace
from typing import Optional

from sim.content import INFRASTRUCTURE_TASKS, get_infrastructure_task
from phases.preparedness import PreparednessRecord
from phases.response import ResponseRecord
from phases.scoring import clamp_int

# Nominal weights sum to 125; the score is clamped to this cap.
RECOVERY_SCORE_CAP = 100

RDANA_POINTS = 20
RELIEF_POINTS = 15
MEDICAL_POINTS = 10
PSYCHOSOCIAL_POINTS = 10
BUILD_BACK_BETTER_POINTS = 10
DRRM_PLAN_POINTS = 10
MIN_INFRASTRUCTURE_TASKS = 2

RECOVERY_ACTIONS = (
    "rdana",
    "relief",
    "medical_care",
    "psychosocial_support",
    "build_back_better",
    "drrm_plan",
)


@dataclass
class RecoveryRecord:
    rdana_completed: bool = False
    infrastructure_tasks_completed: list[str] = field(default_factory=list)
    relief_distributed: bool = False
    medical_care_provided: bool = False
    psychosocial_support_provided: bool = False
    build_back_better_committed: bool = False
    drrm_plan_updated: bool = False
    recovery_score: Optional[int] = None  # set by finalize_recovery

    def toggle_infrastructure_task(self, task_id: str) -> bool:
        if task_id in self.infrastructure_tasks_completed:
            self.infrastructure_tasks_completed.remove(task_id)
            return True
        if get_infrastructure_task(task_id) is None:
            return False
        self.infrastructure_tasks_completed.append(task_id)
        return True

    def complete_action(self, name: str) -> bool:
        """Set one of the one-way recovery flags. Unknown names are refused."""
        attr = {
            "rdana": "rdana_completed",
            "relief": "relief_distributed",
            "medical_care": "medical_care_provided",
            "psychosocial_support": "psychosocial_support_provided",
            "build_back_better": "build_back_better_committed",
            "drrm_plan": "drrm_plan_updated",
        }.get(name)
        if attr is None or getattr(self, attr):
            return False
        setattr(self, attr, True)
        return True


def infrastructure_points(task_ids: list[str]) -> int:
    return sum(t.points for t in INFRASTRUCTURE_TASKS if t.id in task_ids)


def calculate_recovery_score(record: RecoveryRecord, cap: int = RECOVERY_SCORE_CAP) -> int:
    score = 0
    if record.rdana_completed:
        score += RDANA_POINTS
    score += infrastructure_points(record.infrastructure_tasks_completed)
    if record.relief_distributed:
        score += RELIEF_POINTS
    if record.medical_care_provided:
        score += MEDICAL_POINTS
    if record.psychosocial_support_provided:
        score += PSYCHOSOCIAL_POINTS
    if record.build_back_better_committed:
        score += BUILD_BACK_BETTER_POINTS
    if record.drrm_plan_updated:
        score += DRRM_PLAN_POINTS
    return clamp_int(score, 0, cap)


def can_advance_recovery(record: RecoveryRecord) -> bool:
    return (
        record.rdana_completed
        and record.relief_distributed
        and len(record.infrastructure_tasks_completed) >= MIN_INFRASTRUCTURE_TASKS
    )


def finalize_recovery(record: RecoveryRecord, cap: int = RECOVERY_SCORE_CAP) -> RecoveryRecord:
    return replace(
        record,
        infrastructure_tasks_completed=list(record.infrastructure_tasks_completed),
        recovery_score=calculate_recovery_score(record, cap),
    )


def recovery_briefing(preparedness: PreparednessRecord, response: ResponseRecord) -> list[str]:
    """RDANA context notes: how the earlier phases shaped the recovery situation."""
    notes = []
    if (preparedness.preparedness_score or 0) >= 70:
        notes.append("Excellent preparedness significantly reduced casualties and damage!")
        notes.append("Well-prepared Go Bags meant families evacuated quickly and safely")
        notes.append("Pre-identified evacuation centers operated smoothly")
        if preparedness.drills_completed:
            notes.append("Community drills resulted in orderly evacuation and high compliance")
        notes.append("Early warning understanding saved lives through timely action")
    else:
        notes.append("Limited preparedness resulted in higher casualties and damage")
        notes.append("Lack of Go Bags caused delays and confusion during evacuation")
        notes.append("Evacuation centers were unprepared, causing additional stress")
        notes.append("Better preparedness in the future will save more lives!")
    if not response.evacuation_ordered:
        notes.append("No evacuation order was issued; expect more families needing rescue and relief")
    if response.casualties > 0:
        notes.append(f"Estimated casualties: {response.casualties}. Prioritize medical and psychosocial care")
    return notes


def recovery_record_valid(record: RecoveryRecord) -> bool:
    tasks = record.infrastructure_tasks_completed
    if len(set(tasks)) != len(tasks) or any(get_infrastructure_task(t) is None for t in tasks):
        return False
    return record.recovery_score is None or 0 <= record.recovery_score <= RECOVERY_SCORE_CAP
