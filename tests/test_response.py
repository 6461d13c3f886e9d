"""Tests for the phase 2 reducer, response score and casualty estimate."""

import random
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pytest

from sim.base import Hazard, Difficulty, CenterStatus
from sim.content import AGENCIES
from phases.response import (
    ResponseStatus,
    Tick,
    ResolveEvent,
    AdvanceEvent,
    OrderEvacuation,
    ContactAgency,
    new_response_state,
    initialize_response,
    reduce,
    calculate_response_score,
    estimate_casualties,
    finalize_response,
    response_record_valid,
    ResponseRecord,
)


def _started(hazard=Hazard.FIRE, difficulty=Difficulty.EASY, seed=1):
    return initialize_response(new_response_state(hazard, difficulty), random.Random(seed))


def _wrong_index(event):
    return next(i for i, o in enumerate(event.options) if not o.correct)


def test_initialize_fire_easy():
    s = _started()
    assert s.status == ResponseStatus.IN_PROGRESS
    assert s.total_events == 3
    assert s.time_remaining == 300
    assert s.public_panic == 10
    assert s.current_index == 0


def test_initialize_twice_is_noop():
    s = _started()
    assert initialize_response(s, random.Random(9)) is s


def test_full_correct_run_scores_100():
    s = _started()
    s = reduce(s, OrderEvacuation())
    for agency in AGENCIES[:3]:
        s = reduce(s, ContactAgency(agency))
    while not s.is_complete:
        s = reduce(s, ResolveEvent(s.current_event.correct_index()))
        s = reduce(s, AdvanceEvent())
    assert s.correct_decisions == 3
    assert s.events_resolved == 3
    rec = finalize_response(s, preparedness_score=80)
    assert rec.response_score == 100
    assert rec.casualties == 0
    assert rec.evacuation_center_managed is True
    assert calculate_response_score(3, 3, 10, 3) == 100


def test_resolve_refused_while_outcome_pending_or_bad_index():
    s = _started()
    assert reduce(s, ResolveEvent(99)) is s
    assert reduce(s, ResolveEvent(-1)) is s
    s1 = reduce(s, ResolveEvent(0))
    assert s1.pending_outcome is not None
    assert reduce(s1, ResolveEvent(0)) is s1
    assert reduce(s, AdvanceEvent()) is s


def test_correct_and_incorrect_panic_deltas():
    s = _started(difficulty=Difficulty.MEDIUM)
    ev = s.current_event
    good = reduce(s, ResolveEvent(ev.correct_index()))
    assert good.public_panic == 15
    assert good.pending_outcome.correct
    bad = reduce(s, ResolveEvent(_wrong_index(ev)))
    assert bad.public_panic == 30
    assert bad.correct_decisions == 0
    assert not bad.pending_outcome.correct
    assert s.public_panic == 20


def test_center_overwhelmed_on_mistake_with_high_panic():
    s = _started(difficulty=Difficulty.HARD)
    s = reduce(s, OrderEvacuation())
    assert s.center_status == CenterStatus.ACTIVE
    assert s.public_panic == 30
    s = reduce(s, ResolveEvent(_wrong_index(s.current_event)))
    assert s.public_panic == 50
    assert s.center_status == CenterStatus.ACTIVE
    s = reduce(s, AdvanceEvent())
    s = reduce(s, ResolveEvent(_wrong_index(s.current_event)))
    assert s.public_panic == 70
    assert s.center_status == CenterStatus.OVERWHELMED


def test_evacuation_and_agencies_idempotent():
    s = _started()
    s1 = reduce(s, OrderEvacuation())
    assert s1.public_panic == 0
    assert reduce(s1, OrderEvacuation()) is s1
    s2 = reduce(s1, ContactAgency("BFP"))
    assert reduce(s2, ContactAgency("BFP")) is s2
    assert reduce(s2, ContactAgency("FBI")) is s2
    assert s2.agencies_contacted == ("BFP",)
    assert s1.event_log == ("Evacuation order issued successfully",)


def test_high_preparedness_smooth_evacuation_log():
    s = initialize_response(new_response_state(Hazard.FIRE, Difficulty.EASY, preparedness_score=70), random.Random(1))
    s = reduce(s, OrderEvacuation())
    assert s.event_log[:2] == ("High preparedness resulted in smooth evacuation!", "Evacuation order issued successfully")
    low = initialize_response(new_response_state(Hazard.FIRE, Difficulty.EASY, preparedness_score=69), random.Random(1))
    assert len(reduce(low, OrderEvacuation()).event_log) == 1


def test_panic_always_clamped():
    rng = random.Random(11)
    for seed in range(15):
        s = _started(difficulty=rng.choice(list(Difficulty)), seed=seed)
        steps = 0
        while not s.is_complete and steps < 50:
            roll = rng.random()
            if roll < 0.1:
                s = reduce(s, OrderEvacuation())
            elif s.pending_outcome is not None:
                s = reduce(s, AdvanceEvent())
            else:
                s = reduce(s, ResolveEvent(rng.randrange(len(s.current_event.options))))
            assert 0 <= s.public_panic <= 100
            steps += 1


def test_tick_counts_down_and_expires_without_completing():
    s = _started()
    for _ in range(299):
        s = reduce(s, Tick())
    assert s.time_remaining == 1
    assert not s.timer_expired
    s = reduce(s, Tick())
    assert s.time_remaining == 0
    assert s.timer_expired
    assert s.status == ResponseStatus.IN_PROGRESS
    assert "Time is up" in s.event_log[0]
    assert reduce(s, Tick()) is s
    s = reduce(s, ResolveEvent(0))
    assert s.pending_outcome is not None


def test_nothing_changes_after_completion():
    s = _started()
    while not s.is_complete:
        s = reduce(reduce(s, ResolveEvent(0)), AdvanceEvent())
    for action in (Tick(), OrderEvacuation(), ContactAgency("PNP"), ResolveEvent(0), AdvanceEvent()):
        assert reduce(s, action) is s


def test_event_log_capped():
    s = _started()
    for agency in AGENCIES:
        s = reduce(s, ContactAgency(agency))
    s = reduce(s, OrderEvacuation())
    while not s.is_complete:
        s = reduce(reduce(s, ResolveEvent(1)), AdvanceEvent())
    assert len(s.event_log) <= 10
    assert s.event_log[0].endswith("Suboptimal decision")


def test_finalize_incomplete_raises():
    with pytest.raises(ValueError):
        finalize_response(_started(), 80)


@pytest.mark.parametrize("prep,evac,correct,total,expected", [
    (70, True, 3, 3, 0),
    (69, True, 3, 3, 10),
    (50, True, 3, 3, 10),
    (49, True, 3, 3, 25),
    (49, False, 0, 3, 50),
    (80, False, 1, 4, 35),
])
def test_casualties(prep, evac, correct, total, expected):
    assert estimate_casualties(prep, evac, correct, total) == expected


def test_casualties_and_score_bounds():
    rng = random.Random(2)
    for _ in range(200):
        total = rng.randint(1, 5)
        correct = rng.randint(0, total)
        c = estimate_casualties(rng.choice([0, 49, 50, 69, 70, 100]), rng.random() < 0.5, correct, total)
        assert 0 <= c <= 50
        score = calculate_response_score(correct, total, rng.randint(0, 100), rng.randint(0, 5))
        assert 0 <= score <= 100
    assert calculate_response_score(0, 0, 100, 0) == 0


def test_record_validity():
    assert response_record_valid(ResponseRecord(agencies_contacted=["BFP", "PNP"], correct_decisions=2, events_resolved=2, total_events=3))
    assert not response_record_valid(ResponseRecord(agencies_contacted=["BFP", "BFP"]))
    assert not response_record_valid(ResponseRecord(agencies_contacted=["FBI"]))
    assert not response_record_valid(ResponseRecord(correct_decisions=4, events_resolved=4, total_events=3))
    assert not response_record_valid(ResponseRecord(casualties=80))
