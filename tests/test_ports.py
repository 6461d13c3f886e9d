"""Tests for storage, cue emitters and the cooperative scheduler."""

import os
import tempfile
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import pytest

from sim.base import Cue
from game.config import MUTED_KEY
from game.storage import MemoryStorage, JsonFileStorage
from game.cues import (
    SilentCueEmitter,
    LoggingCueEmitter,
    RecordingCueEmitter,
    MutableCueEmitter,
    get_cue_emitter,
)
from game.clock import CallbackScheduler


def test_memory_storage():
    st = MemoryStorage({"a": "1"})
    assert st.get("a") == "1"
    st.set("b", "2")
    assert sorted(st.keys()) == ["a", "b"]
    st.remove("a")
    st.remove("missing")
    assert st.get("a") is None


def test_json_file_storage_round_trip_and_corruption():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "sub", "state.json")
        st = JsonFileStorage(path)
        assert st.get("k") is None
        st.set("k", "v")
        st.set("k2", "v2")
        assert JsonFileStorage(path).get("k") == "v"
        st.remove("k")
        assert st.get("k") is None
        assert st.get("k2") == "v2"
        assert not os.path.exists(path + ".tmp")
        with open(path, "w") as f:
            f.write("{broken")
        assert st.get("k2") is None
        st.set("k3", "v3")
        assert st.get("k3") == "v3"


def test_get_cue_emitter_modes():
    assert isinstance(get_cue_emitter("silent").inner, SilentCueEmitter)
    assert isinstance(get_cue_emitter("log").inner, LoggingCueEmitter)
    assert isinstance(get_cue_emitter("recording").inner, RecordingCueEmitter)
    assert isinstance(get_cue_emitter("anything").inner, LoggingCueEmitter)


def test_mutable_emitter_reads_and_writes_flag():
    storage = MemoryStorage({MUTED_KEY: "true"})
    rec = RecordingCueEmitter()
    em = MutableCueEmitter(rec, storage)
    assert em.muted
    em.emit(Cue.ALERT)
    assert rec.cues == []
    em.set_muted(False)
    assert storage.get(MUTED_KEY) == "false"
    em.emit(Cue.ALERT)
    assert rec.cues == [Cue.ALERT]


def test_scheduler_call_later_and_cancel():
    sch = CallbackScheduler()
    fired = []
    sch.call_later(2.0, lambda: fired.append("b"))
    sch.call_later(1.0, lambda: fired.append("a"))
    h = sch.call_later(1.5, lambda: fired.append("x"))
    sch.cancel(h)
    assert sch.advance(0.5) == 0
    assert sch.advance(2.0) == 2
    assert fired == ["a", "b"]
    assert sch.now == 2.5
    assert sch.pending() == 0


def test_scheduler_call_every_and_same_due_order():
    sch = CallbackScheduler()
    fired = []
    tick = sch.call_every(1.0, lambda: fired.append("tick"))
    sch.call_later(2.0, lambda: fired.append("once"))
    assert sch.advance(3.0) == 4
    assert fired == ["tick", "tick", "once", "tick"]
    assert sch.pending() == 1
    tick.cancel()
    assert sch.advance(5.0) == 0


def test_scheduler_callbacks_can_schedule_and_cancel():
    sch = CallbackScheduler()
    fired = []
    handles = {}

    def first():
        fired.append("first")
        sch.call_later(0.5, lambda: fired.append("chained"))
        handles["late"].cancel()

    sch.call_later(1.0, first)
    handles["late"] = sch.call_later(2.0, lambda: fired.append("late"))
    sch.advance(5.0)
    assert fired == ["first", "chained"]


def test_scheduler_cancel_all_and_bad_interval():
    sch = CallbackScheduler()
    sch.call_every(1.0, lambda: None)
    sch.call_later(1.0, lambda: None)
    sch.cancel_all()
    assert sch.pending() == 0
    assert sch.advance(10) == 0
    with pytest.raises(ValueError):
        sch.call_every(0, lambda: None)
