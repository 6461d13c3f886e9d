"""FastAPI: one single-player DRRM game session over HTTP. Refused intents answer 409.

Game endpoints are coroutines so every session mutation runs on the event loop thread.
"""

import sys
from dataclasses import asdict
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from typing import Optional

from sim.base import Hazard, Difficulty
from sim.content import HAZARD_BRIEFS, DISASTER_ALERTS
from game.config import GameConfig
from game.session import GameSession
from game.storage import JsonFileStorage
from game.artifacts import report_to_dict
from game.logging_utils import configure_root_logging, set_session_log_dir, read_session_log


app = FastAPI(title="Barangay DRRM Simulation API", version="0.1.0")

# Upper bound on game seconds per /response/wait call.
MAX_WAIT_S = 600

_session: Optional[GameSession] = None


def get_session() -> GameSession:
    global _session
    if _session is None:
        config = GameConfig.from_env()
        configure_root_logging(config.log_level)
        set_session_log_dir(Path(config.data_dir) / "logs")
        _session = GameSession(JsonFileStorage(config.state_path), config=config)
    return _session


def set_session(session: Optional[GameSession]) -> None:
    """Swap the served session (tests inject one over in-memory storage)."""
    global _session
    if _session is not None:
        _session.teardown()
    _session = session


class StartGameParams(BaseModel):
    hazard: str = Hazard.TYPHOON.value
    difficulty: str = Difficulty.MEDIUM.value


class CenterParams(BaseModel):
    center_id: str


class BudgetParams(BaseModel):
    amount: int


class ResolveParams(BaseModel):
    option_index: int


class AgencyParams(BaseModel):
    agency: str


class WaitParams(BaseModel):
    seconds: float = Field(default=1.0, ge=0, le=MAX_WAIT_S)


class MuteParams(BaseModel):
    muted: bool


def _snapshot(s: GameSession) -> dict:
    rec = s.record
    out = {
        "phase": rec.phase.value,
        "selection": asdict(rec.selection) if rec.selection else None,
        "preparedness": asdict(rec.preparedness) if rec.preparedness else None,
        "preparedness_score": s.preparedness_score(),
        "checklist": s.preparedness_checklist(),
        "response": asdict(rec.response) if rec.response else None,
        "recovery": asdict(rec.recovery) if rec.recovery else None,
        "recovery_score": s.recovery_score(),
        "can_advance": s.can_advance(),
        "summary_estimate": s.summary_estimate(),
    }
    if rec.selection is not None:
        out["brief"] = asdict(HAZARD_BRIEFS[rec.selection.hazard])
        out["alert"] = asdict(DISASTER_ALERTS[rec.selection.hazard])
    st = s.response_state
    if st is not None:
        ev = st.current_event
        out["live"] = {
            "status": st.status.value,
            "event_index": st.current_index,
            "total_events": st.total_events,
            "current_event": asdict(ev) if ev else None,
            "time_remaining": st.time_remaining,
            "timer_expired": st.timer_expired,
            "public_panic": st.public_panic,
            "evacuation_ordered": st.evacuation_ordered,
            "agencies_contacted": list(st.agencies_contacted),
            "center_status": st.center_status.value,
            "pending_outcome": asdict(st.pending_outcome) if st.pending_outcome else None,
            "event_log": list(st.event_log),
        }
    return out


def _accept(ok: bool, s: GameSession) -> dict:
    if not ok:
        raise HTTPException(status_code=409, detail=f"Refused in phase {s.phase.value}")
    return _snapshot(s)


@app.get("/health")
def health():
    return {"status": "ok", "message": "Barangay DRRM Simulation API"}


@app.get("/state")
async def api_state():
    return _snapshot(get_session())


@app.post("/tutorial/start")
async def api_start_tutorial():
    s = get_session()
    return _accept(s.start_tutorial(), s)


@app.post("/tutorial/exit")
async def api_exit_tutorial():
    s = get_session()
    return _accept(s.exit_tutorial(), s)


@app.post("/game/start")
async def api_start_game(params: StartGameParams):
    s = get_session()
    return _accept(s.start_game(params.hazard, params.difficulty), s)


@app.post("/preparedness/go_bag/{item_id}")
async def api_toggle_go_bag(item_id: str):
    s = get_session()
    return _accept(s.toggle_go_bag_item(item_id), s)


@app.post("/preparedness/center")
async def api_select_center(params: CenterParams):
    s = get_session()
    return _accept(s.select_evacuation_center(params.center_id), s)


@app.post("/preparedness/budget")
async def api_set_budget(params: BudgetParams):
    s = get_session()
    return _accept(s.set_budget(params.amount), s)


@app.post("/preparedness/{action}")
async def api_preparedness_action(action: str):
    s = get_session()
    intents = {
        "drills": s.mark_drills_completed,
        "risk_assessment": s.mark_risk_assessment_done,
        "alert": s.mark_alert_understood,
    }
    if action not in intents:
        raise HTTPException(status_code=404, detail=f"Unknown preparedness action: {action}")
    return _accept(intents[action](), s)


@app.post("/advance")
async def api_advance():
    s = get_session()
    return _accept(s.advance(), s)


@app.post("/response/resolve")
async def api_resolve(params: ResolveParams):
    s = get_session()
    return _accept(s.resolve_event(params.option_index), s)


@app.post("/response/evacuate")
async def api_evacuate():
    s = get_session()
    return _accept(s.order_evacuation(), s)


@app.post("/response/agency")
async def api_contact_agency(params: AgencyParams):
    s = get_session()
    return _accept(s.contact_agency(params.agency), s)


@app.post("/response/tick")
async def api_tick():
    s = get_session()
    return _accept(s.tick(), s)


@app.post("/response/wait")
async def api_wait(params: WaitParams):
    """Let game time pass: countdown ticks and the outcome-display delay fire."""
    s = get_session()
    fired = s.advance_time(params.seconds)
    return {"fired": fired, **_snapshot(s)}


@app.post("/recovery/task/{task_id}")
async def api_toggle_task(task_id: str):
    s = get_session()
    return _accept(s.toggle_infrastructure_task(task_id), s)


@app.post("/recovery/action/{name}")
async def api_recovery_action(name: str):
    s = get_session()
    return _accept(s.complete_recovery_action(name), s)


@app.get("/report")
async def api_report():
    s = get_session()
    report = s.report()
    if report is None:
        raise HTTPException(status_code=409, detail=f"No report in phase {s.phase.value}")
    return report_to_dict(report)


@app.post("/play_again")
async def api_play_again():
    s = get_session()
    return _accept(s.play_again(), s)


@app.post("/menu")
async def api_back_to_menu():
    s = get_session()
    return _accept(s.back_to_menu(), s)


@app.get("/history")
async def api_history():
    return [h.model_dump(mode="json") for h in get_session().history]


@app.delete("/history")
async def api_clear_history():
    get_session().clear_history()
    return []


@app.post("/mute")
async def api_mute(params: MuteParams):
    s = get_session()
    s.set_muted(params.muted)
    return {"muted": params.muted}


@app.get("/log")
async def api_session_log():
    """Events logged so far for the served session (empty when file logging is off)."""
    return read_session_log(get_session().session_id)
