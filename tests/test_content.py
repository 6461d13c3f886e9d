"""Tests for content tables, difficulty table and seeded event selection."""

import random
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pytest

from sim.base import Hazard, Difficulty
from sim.content import (
    EVENT_POOLS,
    GO_BAG_ITEMS,
    EVACUATION_CENTERS,
    HAZARD_BRIEFS,
    DISASTER_ALERTS,
    DISASTER_LESSONS,
    event_pool,
    get_go_bag_item,
    get_center,
    get_infrastructure_task,
)
from sim.scenarios import get_profile, seeded_shuffle, select_events, parse_hazard, parse_difficulty


@pytest.mark.parametrize("difficulty,expected", [
    (Difficulty.EASY, (3, 300, 10)),
    (Difficulty.MEDIUM, (4, 240, 20)),
    (Difficulty.HARD, (5, 150, 40)),
])
def test_difficulty_table(difficulty, expected):
    p = get_profile(difficulty)
    assert (p.event_count, p.initial_time_s, p.initial_panic) == expected


def test_every_hazard_has_brief_alert_and_lesson():
    for h in Hazard:
        assert h in HAZARD_BRIEFS
        assert h in DISASTER_ALERTS
        assert h in DISASTER_LESSONS


def test_event_pools_have_one_correct_option_and_unique_ids():
    for hazard, pool in EVENT_POOLS.items():
        ids = [e.id for e in pool]
        assert len(ids) == len(set(ids))
        for e in pool:
            assert e.hazard == hazard
            assert sum(1 for o in e.options if o.correct) == 1
            assert e.options[e.correct_index()].correct


def test_pools_cover_hard_difficulty():
    for h in Hazard:
        assert len(event_pool(h)) >= get_profile(Difficulty.HARD).event_count


def test_flood_falls_back_to_typhoon_pool():
    assert event_pool(Hazard.FLOOD) == event_pool(Hazard.TYPHOON)


def test_lookups_unknown_ids():
    assert get_go_bag_item("water").points == 10
    assert get_go_bag_item("jetpack") is None
    assert get_center("school").points == 10
    assert get_center(None) is None
    assert get_infrastructure_task("power").points == 15
    assert get_infrastructure_task("bridge") is None
    assert len(GO_BAG_ITEMS) == 17
    assert len(EVACUATION_CENTERS) == 4


def test_seeded_shuffle_is_a_permutation_and_deterministic():
    items = list(range(10))
    a = seeded_shuffle(items, random.Random(3))
    b = seeded_shuffle(items, random.Random(3))
    assert a == b
    assert sorted(a) == items
    assert items == list(range(10))


def test_select_events_counts_and_no_duplicates():
    for d in Difficulty:
        events = select_events(Hazard.FIRE, d, random.Random(1))
        assert len(events) == get_profile(d).event_count
        assert len({e.id for e in events}) == len(events)


def test_select_events_same_seed_same_order():
    a = [e.id for e in select_events(Hazard.TYPHOON, Difficulty.HARD, random.Random(42))]
    b = [e.id for e in select_events(Hazard.TYPHOON, Difficulty.HARD, random.Random(42))]
    assert a == b


def test_parse_hazard_and_difficulty_fall_back():
    assert parse_hazard("FIRE") == Hazard.FIRE
    assert parse_hazard(" volcano ") == Hazard.VOLCANO
    assert parse_hazard("tsunami") == Hazard.TYPHOON
    assert parse_hazard(None) == Hazard.TYPHOON
    assert parse_difficulty("hard") == Difficulty.HARD
    assert parse_difficulty("nightmare") == Difficulty.MEDIUM
    assert parse_difficulty(Difficulty.EASY) == Difficulty.EASY
