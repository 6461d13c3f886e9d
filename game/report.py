"""Report generator: weighted final score, grade, decision feedback, RA 10121 checklist, history."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from sim.base import Hazard, Difficulty, HazardLesson
from sim.content import DISASTER_LESSONS
from phases.preparedness import PreparednessRecord, calculate_preparedness_score
from phases.response import ResponseRecord
from phases.recovery import RecoveryRecord, calculate_recovery_score
from phases.scoring import round_half_up, clamp_int
from game.schemas import ScenarioSelection, HistoryEntry

PREPAREDNESS_WEIGHT = 0.30
RESPONSE_WEIGHT = 0.40
RECOVERY_WEIGHT = 0.30
DEFAULT_RECOVERY_ESTIMATE = 80
HISTORY_LIMIT = 10

_GRADES = (
    (90, "A", "Outstanding"),
    (80, "B", "Very Good"),
    (70, "C", "Good"),
    (60, "D", "Fair"),
)


@dataclass(frozen=True)
class Grade:
    letter: str
    label: str


@dataclass
class FeedbackEntry:
    category: str  # preparedness | response | recovery
    text: str
    correct: bool
    improvement: Optional[str] = None


@dataclass
class ComplianceItem:
    requirement: str
    description: str
    met: bool
    detail: str


@dataclass
class GameReport:
    hazard: Hazard
    difficulty: Difficulty
    final_score: int
    grade: Grade
    preparedness_score: int
    response_score: int
    recovery_score: int
    correct_decisions: list[FeedbackEntry] = field(default_factory=list)
    mistakes: list[FeedbackEntry] = field(default_factory=list)
    compliance: list[ComplianceItem] = field(default_factory=list)
    lesson: Optional[HazardLesson] = None


def calculate_final_score(
    preparedness_score: int,
    response_score: int,
    recovery_score: Optional[int] = None,
    default_recovery: int = DEFAULT_RECOVERY_ESTIMATE,
) -> int:
    """30% preparedness + 40% response + 30% recovery; recovery defaults to an estimate until finalized."""
    recovery = default_recovery if recovery_score is None else recovery_score
    total = PREPAREDNESS_WEIGHT * preparedness_score + RESPONSE_WEIGHT * response_score + RECOVERY_WEIGHT * recovery
    return clamp_int(round_half_up(total), 0, 100)


def grade_for(score: int) -> Grade:
    for threshold, letter, label in _GRADES:
        if score >= threshold:
            return Grade(letter, label)
    return Grade("F", "Needs Improvement")


def _prep_score(prep: PreparednessRecord) -> int:
    return prep.preparedness_score if prep.preparedness_score is not None else calculate_preparedness_score(prep)


def decision_feedback(
    prep: PreparednessRecord,
    resp: ResponseRecord,
    recovery: Optional[RecoveryRecord] = None,
) -> list[FeedbackEntry]:
    """Evaluate the fixed, ordered set of decision predicates."""
    out: list[FeedbackEntry] = []
    if _prep_score(prep) >= 70:
        out.append(FeedbackEntry("preparedness", "Excellent preparedness planning (Go Bags, drills, risk assessment)", True))
    else:
        out.append(FeedbackEntry(
            "preparedness", "Insufficient preparedness reduced effectiveness", False,
            "Always complete comprehensive preparedness: Go Bags, evacuation plans, drills, and risk assessments as required by RA 10121.",
        ))

    if len(prep.go_bag_items) >= 8:
        out.append(FeedbackEntry("preparedness", "Comprehensive Go Bags prepared following NDRRMC guidelines", True))
    elif len(prep.go_bag_items) < 5:
        out.append(FeedbackEntry(
            "preparedness", "Go Bags were incomplete", False,
            "NDRRMC recommends Go Bags with at least 72-hour supplies: water, food, first aid, documents, flashlight, radio, and medicines.",
        ))

    if prep.drills_completed:
        out.append(FeedbackEntry("preparedness", "Community drills conducted - resulted in orderly evacuation", True))

    if resp.evacuation_ordered:
        out.append(FeedbackEntry("response", "Timely evacuation orders issued - saved lives", True))
    else:
        out.append(FeedbackEntry(
            "response", "Failed to issue evacuation orders", False,
            "As Barangay DRRM Officer, you must issue clear evacuation orders when advisories indicate danger (RA 10121, Section 12).",
        ))

    if len(resp.agencies_contacted) >= 4:
        out.append(FeedbackEntry("response", "Excellent inter-agency coordination (BFP, PNP, DOH, etc.)", True))
    else:
        out.append(FeedbackEntry(
            "response", "Limited coordination with emergency agencies", False,
            "NDRRMC framework emphasizes multi-agency coordination. Always work with BFP, PNP, AFP, DOH, and DSWD during disasters.",
        ))

    if resp.casualties == 0:
        out.append(FeedbackEntry("response", "Zero casualties - outstanding life-saving actions!", True))
    elif resp.casualties < 5:
        out.append(FeedbackEntry("response", f"Minimal casualties ({resp.casualties}) - good response", True))
    else:
        out.append(FeedbackEntry(
            "response", f"{resp.casualties} casualties could have been prevented", False,
            "Better preparedness and earlier evacuation reduces casualties. Every life matters!",
        ))

    if recovery is not None:
        if recovery.build_back_better_committed:
            out.append(FeedbackEntry("recovery", "Committed to Build Back Better - safer, more resilient reconstruction", True))
        else:
            out.append(FeedbackEntry(
                "recovery", "Rebuilt without resilience measures", False,
                "Don't just rebuild - make communities safer and more resilient than before!",
            ))
        if recovery.drrm_plan_updated:
            out.append(FeedbackEntry("recovery", "DRRM plan updated with lessons learned", True))
        else:
            out.append(FeedbackEntry(
                "recovery", "DRRM plan was not updated", False,
                "Incorporate lessons learned from this disaster into the DRRM plan so the next response is better.",
            ))
    return out


def compliance_checklist(prep: PreparednessRecord, resp: ResponseRecord) -> list[ComplianceItem]:
    """RA 10121 (Philippine DRRM Act) obligations checked against the player's record."""
    n_agencies = len(resp.agencies_contacted)
    return [
        ComplianceItem(
            "Risk Assessment",
            "LGUs must conduct hazard and risk assessments to identify vulnerable areas and populations.",
            prep.risk_assessment_done,
            "You conducted proper risk assessment" if prep.risk_assessment_done else "You skipped risk assessment",
        ),
        ComplianceItem(
            "Drills and Simulations",
            "Conduct disaster drills and simulations to enhance community preparedness.",
            prep.drills_completed,
            "You conducted community drills" if prep.drills_completed else "You did not conduct drills",
        ),
        ComplianceItem(
            "Early Warning and Evacuation",
            "Issue timely warnings and evacuation orders to save lives during disasters.",
            resp.evacuation_ordered,
            "You issued evacuation orders" if resp.evacuation_ordered else "You failed to issue evacuation orders",
        ),
        ComplianceItem(
            "Multi-agency Coordination",
            "DRRM requires coordination among national agencies, LGUs, and civil society.",
            n_agencies >= 3,
            f"Good coordination with {n_agencies} agencies" if n_agencies >= 3 else f"Limited coordination (only {n_agencies} agencies)",
        ),
        ComplianceItem(
            "DRRM Fund",
            "LGUs must allocate at least 5% of estimated revenue for DRRM (70% for preparedness).",
            prep.budget_allocated >= 30000,
            "Adequate budget allocated" if prep.budget_allocated >= 30000 else "Insufficient budget allocation",
        ),
    ]


def generate_report(
    selection: ScenarioSelection,
    prep: PreparednessRecord,
    resp: ResponseRecord,
    recovery: Optional[RecoveryRecord] = None,
    default_recovery: int = DEFAULT_RECOVERY_ESTIMATE,
) -> GameReport:
    recovery_score = None
    if recovery is not None:
        recovery_score = recovery.recovery_score if recovery.recovery_score is not None else calculate_recovery_score(recovery)
    prep_score = _prep_score(prep)
    final = calculate_final_score(prep_score, resp.response_score, recovery_score, default_recovery)
    feedback = decision_feedback(prep, resp, recovery)
    return GameReport(
        hazard=selection.hazard,
        difficulty=selection.difficulty,
        final_score=final,
        grade=grade_for(final),
        preparedness_score=prep_score,
        response_score=resp.response_score,
        recovery_score=default_recovery if recovery_score is None else recovery_score,
        correct_decisions=[f for f in feedback if f.correct],
        mistakes=[f for f in feedback if not f.correct],
        compliance=compliance_checklist(prep, resp),
        lesson=DISASTER_LESSONS.get(selection.hazard),
    )


def history_entry_for(report: GameReport, now: Optional[datetime] = None, score: Optional[int] = None) -> HistoryEntry:
    """History row for a finished game; `score` overrides the report's final score."""
    ts = (now or datetime.now(tz=timezone.utc)).isoformat()
    final = report.final_score if score is None else score
    return HistoryEntry(timestamp=ts, hazard=report.hazard, difficulty=report.difficulty, final_score=final)


def append_history(history: list[HistoryEntry], entry: HistoryEntry, limit: int = HISTORY_LIMIT) -> list[HistoryEntry]:
    """Newest first; the oldest entries fall off past `limit`."""
    return ([entry] + list(history))[:limit]
