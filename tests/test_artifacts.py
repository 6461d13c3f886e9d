"""Tests for report/history export."""

import json
import os
import random
import tempfile
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from sim.base import Hazard, Difficulty
from game.session import GameSession
from game.storage import MemoryStorage
from game.cues import RecordingCueEmitter
from game.artifacts import (
    report_to_dict,
    report_to_dataframe,
    history_to_dataframe,
    write_report_json,
    write_report_pdf,
)
from agent.players import PerfectPlayer
from agent.runner import play_session


def _finished():
    s = GameSession(MemoryStorage(), cues=RecordingCueEmitter(), rng=random.Random(4))
    report = play_session(s, PerfectPlayer(), Hazard.TYPHOON, Difficulty.MEDIUM)
    return s, report


def test_report_dataframe_and_dict():
    _, report = _finished()
    df = report_to_dataframe(report)
    assert list(df["component"]) == ["preparedness", "response", "recovery", "final"]
    assert df.loc[df["component"] == "final", "score"].iloc[0] == report.final_score
    d = report_to_dict(report)
    assert d["hazard"] == "typhoon"
    assert d["grade"]["letter"] == report.grade.letter
    assert len(d["compliance"]) == 5


def test_history_dataframe():
    assert list(history_to_dataframe([]).columns) == ["timestamp", "hazard", "difficulty", "final_score"]
    s, report = _finished()
    df = history_to_dataframe(s.history)
    assert len(df) == 1
    assert df.iloc[0]["hazard"] == "typhoon"
    assert df.iloc[0]["final_score"] == s.history[0].final_score


def test_write_report_json_and_pdf():
    _, report = _finished()
    with tempfile.TemporaryDirectory() as tmp:
        jpath = write_report_json(report, tmp)
        with open(jpath) as f:
            assert json.load(f)["final_score"] == report.final_score
        ppath = write_report_pdf(report, tmp)
        assert os.path.exists(ppath)
        with open(ppath, "rb") as f:
            assert f.read(4) == b"%PDF"
