"""Tests for the final score, grade, feedback, compliance checklist and history."""

import sys
from datetime import datetime, timezone
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pytest

from sim.base import Hazard, Difficulty
from phases.scoring import round_half_up
from phases.preparedness import PreparednessRecord
from phases.response import ResponseRecord
from phases.recovery import RecoveryRecord
from game.schemas import ScenarioSelection, HistoryEntry
from game.report import (
    calculate_final_score,
    grade_for,
    decision_feedback,
    compliance_checklist,
    generate_report,
    history_entry_for,
    append_history,
)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(0.49) == 0
    assert round_half_up(99.5) == 100


def test_final_score_weights_and_default_recovery():
    assert calculate_final_score(80, 90, 70) == 24 + 36 + 21
    assert calculate_final_score(80, 90) == 24 + 36 + 24
    assert calculate_final_score(80, 90, None, default_recovery=0) == 60
    assert calculate_final_score(0, 0, 0) == 0
    assert calculate_final_score(100, 100, 100) == 100


@pytest.mark.parametrize("score,letter,label", [
    (100, "A", "Outstanding"),
    (90, "A", "Outstanding"),
    (89, "B", "Very Good"),
    (80, "B", "Very Good"),
    (70, "C", "Good"),
    (60, "D", "Fair"),
    (59, "F", "Needs Improvement"),
    (0, "F", "Needs Improvement"),
])
def test_grade_thresholds(score, letter, label):
    g = grade_for(score)
    assert (g.letter, g.label) == (letter, label)


def _good():
    prep = PreparednessRecord(
        go_bag_items=["water", "food", "firstaid", "flashlight", "radio", "whistle", "documents", "cash"],
        evacuation_center_id="school", budget_allocated=50000, drills_completed=True,
        risk_assessment_done=True, alert_understood=True, preparedness_score=90,
    )
    resp = ResponseRecord(evacuation_ordered=True, agencies_contacted=["BFP", "PNP", "AFP", "DOH"],
                          correct_decisions=3, total_events=3, casualties=0, response_score=100)
    rec = RecoveryRecord(rdana_completed=True, relief_distributed=True, build_back_better_committed=True,
                         drrm_plan_updated=True, infrastructure_tasks_completed=["power", "water"], recovery_score=85)
    return prep, resp, rec


def test_feedback_all_good():
    prep, resp, rec = _good()
    fb = decision_feedback(prep, resp, rec)
    assert all(f.correct for f in fb)
    assert [f.category for f in fb] == ["preparedness"] * 3 + ["response"] * 3 + ["recovery"] * 2


def test_feedback_mistakes_carry_improvements():
    prep = PreparednessRecord(go_bag_items=["water"], preparedness_score=20)
    resp = ResponseRecord(evacuation_ordered=False, agencies_contacted=["BFP"], casualties=12)
    fb = decision_feedback(prep, resp)
    mistakes = [f for f in fb if not f.correct]
    assert len(mistakes) == 5
    assert all(f.improvement for f in mistakes)
    assert any("12 casualties" in f.text for f in mistakes)
    assert not any(f.category == "recovery" for f in fb)


def test_medium_go_bag_and_few_casualties():
    prep = PreparednessRecord(go_bag_items=["water", "food", "firstaid", "radio", "cash", "phone"], preparedness_score=75)
    resp = ResponseRecord(evacuation_ordered=True, casualties=3)
    texts = [f.text for f in decision_feedback(prep, resp)]
    assert not any(t.startswith("Comprehensive Go Bags") or t.startswith("Go Bags were") for t in texts)
    assert any("Minimal casualties (3)" in t for t in texts)


def test_compliance_checklist():
    prep, resp, _ = _good()
    items = compliance_checklist(prep, resp)
    assert len(items) == 5
    assert all(c.met for c in items)
    prep.budget_allocated = 20000
    resp.agencies_contacted = ["BFP", "PNP"]
    by_req = {c.requirement: c for c in compliance_checklist(prep, resp)}
    assert by_req["DRRM Fund"].met is False
    assert by_req["Multi-agency Coordination"].met is False
    assert "only 2" in by_req["Multi-agency Coordination"].detail


def test_generate_report():
    prep, resp, rec = _good()
    report = generate_report(ScenarioSelection(Hazard.FIRE, Difficulty.EASY), prep, resp, rec)
    assert report.final_score == calculate_final_score(90, 100, 85)
    assert report.grade.letter == "A"
    assert report.recovery_score == 85
    assert not report.mistakes
    assert report.lesson is not None
    estimate = generate_report(ScenarioSelection(Hazard.FIRE), prep, resp)
    assert estimate.recovery_score == 80


def test_history_capped_newest_first():
    history = []
    for i in range(12):
        entry = HistoryEntry(timestamp=f"t{i}", hazard=Hazard.TYPHOON, difficulty=Difficulty.EASY, final_score=i)
        history = append_history(history, entry)
        assert len(history) <= 10
    assert len(history) == 10
    assert history[0].final_score == 11
    assert history[-1].final_score == 2


def test_history_entry_for_report():
    prep, resp, rec = _good()
    report = generate_report(ScenarioSelection(Hazard.VOLCANO, Difficulty.HARD), prep, resp, rec)
    now = datetime(2024, 1, 2, tzinfo=timezone.utc)
    entry = history_entry_for(report, now)
    assert entry.timestamp.startswith("2024-01-02")
    assert entry.hazard == Hazard.VOLCANO
    assert entry.final_score == report.final_score
    assert history_entry_for(report, now, score=42).final_score == 42
