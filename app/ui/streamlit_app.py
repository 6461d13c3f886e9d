"""Barangay DRRM Simulation: Streamlit front end over a persisted GameSession."""

import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import streamlit as st
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from sim.base import Hazard, Difficulty, Cue
from sim.content import (
    AGENCIES,
    GO_BAG_ITEMS,
    EVACUATION_CENTERS,
    INFRASTRUCTURE_TASKS,
    HAZARD_BRIEFS,
    DISASTER_ALERTS,
    MAX_GO_BAG_ITEMS,
)
from sim.scenarios import DIFFICULTY_PROFILES
from phases.preparedness import BUDGET_MAX, BUDGET_STEP
from game.config import GameConfig
from game.schemas import Phase
from game.session import GameSession
from game.storage import JsonFileStorage
from game.artifacts import history_to_dataframe, report_to_dataframe, write_report_pdf
from game.logging_utils import configure_root_logging, set_session_log_dir
from agent.players import PerfectPlayer, RulePlayer
from agent.runner import run_batch

CUE_ICONS = {Cue.START: "🚨", Cue.SUCCESS: "✅", Cue.ERROR: "❌", Cue.ALERT: "⚠️", Cue.CLICK: "🔘"}

st.set_page_config(page_title="Barangay DRRM Simulation", layout="wide", initial_sidebar_state="expanded")
st.markdown("<style>.block-container { padding-top: 0.5rem; }</style>", unsafe_allow_html=True)

# Session state
if "game" not in st.session_state:
    config = GameConfig.from_env().model_copy(update={"cue_mode": "recording"})
    configure_root_logging(config.log_level)
    set_session_log_dir(Path(config.data_dir) / "logs")
    st.session_state.game = GameSession(JsonFileStorage(config.state_path), config=config)
    st.session_state.last_clock = time.monotonic()
if "batch_df" not in st.session_state:
    st.session_state.batch_df = None

game: GameSession = st.session_state.game
DATA_DIR = Path(game.config.data_dir)
DATA_DIR.mkdir(parents=True, exist_ok=True)

# Let the wall-clock time since the last rerun pass in game time.
_now = time.monotonic()
game.advance_time(_now - st.session_state.last_clock)
st.session_state.last_clock = _now

# Cues become toasts (the recording emitter keeps them until shown).
_recorder = getattr(game.cues, "inner", None)
if _recorder is not None and hasattr(_recorder, "cues"):
    for cue in _recorder.cues[-3:]:
        st.toast(f"{CUE_ICONS.get(cue, '')} {cue.value}")
    _recorder.clear()


def _act(ok: bool, refused: str = "Not allowed right now.") -> None:
    if ok:
        st.rerun()
    st.warning(refused)


def _on_go_bag_toggle(item_id: str) -> None:
    # Runs before the rerun, so a refused toggle can still reset its checkbox.
    key = f"gb_{item_id}"
    if not game.toggle_go_bag_item(item_id):
        st.session_state[key] = item_id in game.record.preparedness.go_bag_items
        st.session_state["go_bag_refused"] = True


# ---------- Sidebar ----------
with st.sidebar:
    st.header("Barangay DRRM Officer")
    st.caption(f"Phase: `{game.phase.value}`")
    muted = st.checkbox("Mute sounds", value=getattr(game.cues, "muted", False), key="sb_muted")
    if muted != getattr(game.cues, "muted", False):
        game.set_muted(muted)

    est = game.summary_estimate()
    if est is not None:
        st.metric("Estimated final score", est)

    st.subheader("History")
    hist_df = history_to_dataframe(game.history)
    if hist_df.empty:
        st.caption("No finished games yet.")
    else:
        st.dataframe(hist_df, use_container_width=True, hide_index=True)
        st.download_button("Download history CSV", hist_df.to_csv(index=False), file_name="drrm_history.csv", mime="text/csv")
        if st.button("Clear history"):
            game.clear_history()
            st.rerun()


# ---------- Intro ----------
if game.phase == Phase.INTRO:
    st.title("Barangay DRRM Simulation")
    st.write("Prepare, respond and recover. Your decisions are scored against RA 10121 (Philippine DRRM Act).")
    c1, c2 = st.columns(2)
    with c1:
        hazard = st.selectbox("Hazard", list(Hazard), format_func=lambda h: HAZARD_BRIEFS[h].name, key="sel_hazard")
        st.caption(HAZARD_BRIEFS[hazard].description)
    with c2:
        difficulty = st.radio("Difficulty", list(Difficulty), index=1, format_func=lambda d: d.value.title(), horizontal=True)
        p = DIFFICULTY_PROFILES[difficulty]
        st.caption(f"{p.event_count} emergencies · {p.initial_time_s // 60} min · starting panic {p.initial_panic}%")
    b1, b2 = st.columns(2)
    if b1.button("Start game", type="primary"):
        _act(game.start_game(hazard, difficulty))
    if b2.button("How to play"):
        _act(game.start_tutorial())

    with st.expander("Batch simulation (automated players)"):
        hz = st.multiselect("Hazards", list(Hazard), default=[Hazard.TYPHOON, Hazard.FIRE], format_func=lambda h: h.value)
        df_sel = st.multiselect("Difficulties", list(Difficulty), default=list(Difficulty), format_func=lambda d: d.value)
        seeds_text = st.text_input("Seeds", "1, 2, 3")
        player_kind = st.radio("Player", ["perfect", "rule"], horizontal=True)
        if st.button("Run batch"):
            try:
                seeds = [int(x.strip()) for x in seeds_text.split(",") if x.strip()]
            except ValueError:
                seeds = [1]
            factory = PerfectPlayer if player_kind == "perfect" else (lambda seed: RulePlayer(seed=seed))
            with st.spinner("Playing..."):
                st.session_state.batch_df = run_batch(hz, df_sel, seeds or [1], factory)
        bdf = st.session_state.batch_df
        if bdf is not None and not bdf.empty:
            st.dataframe(bdf, use_container_width=True, hide_index=True)
            agg = bdf.groupby(["hazard", "difficulty"])["final_score"].mean().unstack()
            fig, ax = plt.subplots()
            agg.plot(kind="bar", ax=ax)
            ax.set_ylabel("Mean final score")
            ax.set_ylim(0, 100)
            st.pyplot(fig)
            plt.close()

# ---------- Tutorial ----------
elif game.phase == Phase.TUTORIAL:
    st.title("How to play")
    st.markdown(
        "1. **Before** the disaster: pack Go Bags (at least 5), choose an evacuation center, "
        "read the official alert and complete the risk assessment.\n"
        "2. **During** the disaster: decide on each emergency before the clock runs out. "
        "Order evacuation and coordinate with BFP, PNP, AFP, DOH and DSWD.\n"
        "3. **After** the disaster: run the RDANA, distribute relief and restore at least two infrastructure systems.\n\n"
        "Final score = 30% preparedness + 40% response + 30% recovery."
    )
    if st.button("Got it, back to menu", type="primary"):
        _act(game.complete_tutorial())

# ---------- Phase 1 ----------
elif game.phase == Phase.PHASE1:
    sel = game.selection
    prep = game.record.preparedness
    st.title(f"Phase 1: Preparedness · {HAZARD_BRIEFS[sel.hazard].name}")
    alert = DISASTER_ALERTS[sel.hazard]
    with st.container(border=True):
        st.subheader(f"{alert.agency}: {alert.signal}")
        st.write(alert.advisory)
        if not prep.alert_understood and st.button("I understand this alert"):
            _act(game.mark_alert_understood())

    c1, c2 = st.columns(2)
    with c1:
        st.subheader(f"Go Bag ({len(prep.go_bag_items)}/{MAX_GO_BAG_ITEMS})")
        if st.session_state.pop("go_bag_refused", False):
            st.warning(f"A Go Bag holds at most {MAX_GO_BAG_ITEMS} items.")
        for item in GO_BAG_ITEMS:
            key = f"gb_{item.id}"
            st.session_state[key] = item.id in prep.go_bag_items
            st.checkbox(f"{item.name} ({item.points} pts)", key=key, on_change=_on_go_bag_toggle, args=(item.id,))
    with c2:
        st.subheader("Evacuation center")
        ids = [c.id for c in EVACUATION_CENTERS]
        current = ids.index(prep.evacuation_center_id) if prep.evacuation_center_id in ids else None
        choice = st.radio(
            "Center", ids, index=current,
            format_func=lambda cid: next(f"{c.name} (cap. {c.capacity}, {c.readiness})" for c in EVACUATION_CENTERS if c.id == cid),
        )
        if choice is not None and choice != prep.evacuation_center_id:
            _act(game.select_evacuation_center(choice))

        st.subheader("DRRM budget")
        budget = st.slider("Allocated (PHP)", 0, BUDGET_MAX, prep.budget_allocated, BUDGET_STEP)
        if budget != prep.budget_allocated:
            _act(game.set_budget(budget))

        st.subheader("Readiness")
        if not prep.risk_assessment_done and st.button("Conduct risk assessment"):
            _act(game.mark_risk_assessment_done())
        if not prep.drills_completed and st.button("Run community drill"):
            _act(game.mark_drills_completed())

    st.divider()
    checklist = game.preparedness_checklist()
    cols = st.columns(len(checklist) + 1)
    for col, (name, done) in zip(cols, checklist.items()):
        col.markdown(f"{'✅' if done else '⬜'} {name.replace('_', ' ')}")
    cols[-1].metric("Preparedness", game.preparedness_score())
    if st.button("Proceed to response", type="primary", disabled=not game.can_advance()):
        _act(game.advance())

# ---------- Phase 2 ----------
elif game.phase == Phase.PHASE2:
    rs = game.response_state
    st.title(f"Phase 2: Response · {HAZARD_BRIEFS[rs.hazard].name}")
    m1, m2, m3, m4 = st.columns(4)
    mins, secs = divmod(rs.time_remaining, 60)
    m1.metric("Time", f"{mins}:{secs:02d}")
    m2.metric("Public panic", f"{rs.public_panic}%")
    m3.metric("Event", f"{min(rs.current_index + 1, rs.total_events)}/{rs.total_events}")
    m4.metric("Evacuation center", rs.center_status.value)
    if rs.timer_expired:
        st.error("Time is up! The situation is escalating.")

    left, right = st.columns([2, 1])
    with left:
        ev = rs.current_event
        if rs.pending_outcome is not None:
            (st.success if rs.pending_outcome.correct else st.error)(rs.pending_outcome.text)
        elif ev is not None:
            with st.container(border=True):
                st.subheader(f"{ev.title} [{ev.severity.value}]")
                st.write(ev.description)
                for i, opt in enumerate(ev.options):
                    if st.button(opt.action, key=f"opt_{ev.id}_{i}"):
                        _act(game.resolve_event(i))
        elif rs.is_complete:
            st.success("All emergencies handled.")
            if st.button("Proceed to recovery", type="primary"):
                _act(game.advance())
    with right:
        st.subheader("Command")
        if st.button("Order evacuation", disabled=rs.evacuation_ordered or rs.is_complete):
            _act(game.order_evacuation())
        for agency in AGENCIES:
            done = agency in rs.agencies_contacted
            if st.button(f"{'✔ ' if done else ''}Contact {agency}", key=f"ag_{agency}", disabled=done or rs.is_complete):
                _act(game.contact_agency(agency))
        st.subheader("Log")
        for line in rs.event_log:
            st.caption(line)

    if not rs.is_complete:
        time.sleep(1.0)
        st.rerun()

# ---------- Phase 3 ----------
elif game.phase == Phase.PHASE3:
    rec = game.record.recovery
    st.title("Phase 3: Recovery")
    with st.container(border=True):
        st.subheader("RDANA briefing")
        for note in game.recovery_briefing():
            st.markdown(f"- {note}")

    c1, c2 = st.columns(2)
    with c1:
        st.subheader("Infrastructure")
        for task in INFRASTRUCTURE_TASKS:
            checked = task.id in rec.infrastructure_tasks_completed
            if st.checkbox(f"{task.name} ({task.points} pts)", value=checked, key=f"it_{task.id}", help=task.description) != checked:
                _act(game.toggle_infrastructure_task(task.id))
    with c2:
        st.subheader("Actions")
        labels = {
            "rdana": ("Conduct RDANA", rec.rdana_completed),
            "relief": ("Distribute relief goods", rec.relief_distributed),
            "medical_care": ("Provide medical care", rec.medical_care_provided),
            "psychosocial_support": ("Psychosocial support", rec.psychosocial_support_provided),
            "build_back_better": ("Commit to Build Back Better", rec.build_back_better_committed),
            "drrm_plan": ("Update DRRM plan", rec.drrm_plan_updated),
        }
        for name, (label, done) in labels.items():
            if st.button(f"{'✔ ' if done else ''}{label}", key=f"rc_{name}", disabled=done):
                _act(game.complete_recovery_action(name))
    st.metric("Recovery", game.recovery_score())
    if st.button("Finish and see report", type="primary", disabled=not game.can_advance()):
        _act(game.advance())

# ---------- Report ----------
elif game.phase == Phase.REPORT:
    report = game.report()
    st.title(f"After-action report · Grade {report.grade.letter} ({report.grade.label})")
    q1, q2, q3, q4 = st.columns(4)
    q1.metric("Final", report.final_score)
    q2.metric("Preparedness", report.preparedness_score)
    q3.metric("Response", report.response_score)
    q4.metric("Recovery", report.recovery_score)

    df = report_to_dataframe(report)
    phase_df = df[df["component"] != "final"]
    fig, ax = plt.subplots(figsize=(6, 2.5))
    ax.barh(phase_df["component"], phase_df["score"], color=["#4c78a8", "#f58518", "#54a24b"])
    ax.set_xlim(0, 100)
    st.pyplot(fig)
    plt.close()

    c1, c2 = st.columns(2)
    with c1:
        st.subheader("What went well")
        for f in report.correct_decisions:
            st.markdown(f"- {f.text}")
    with c2:
        st.subheader("Areas to improve")
        for f in report.mistakes:
            st.markdown(f"- {f.text}")
            if f.improvement:
                st.caption(f.improvement)

    st.subheader("RA 10121 compliance")
    st.dataframe(
        pd.DataFrame([{"Requirement": c.requirement, "Met": c.met, "Detail": c.detail} for c in report.compliance]),
        use_container_width=True, hide_index=True,
    )
    if report.lesson:
        with st.expander("Real-world lesson"):
            st.write(report.lesson.real_world)
            st.write(report.lesson.lesson)
            st.info(report.lesson.key_takeaway)

    e1, e2 = st.columns(2)
    with e1:
        st.download_button("Download CSV", df.to_csv(index=False), file_name="drrm_report.csv", mime="text/csv")
    with e2:
        if st.button("Generate PDF report"):
            try:
                pdf_path = write_report_pdf(report, str(DATA_DIR))
                with open(pdf_path, "rb") as f:
                    st.download_button("Download PDF report", f.read(), file_name=Path(pdf_path).name, mime="application/pdf")
            except Exception as e:
                st.warning(f"PDF export failed: {e}. Install reportlab.")

    b1, b2 = st.columns(2)
    if b1.button("Play again", type="primary"):
        _act(game.play_again())
    if b2.button("Back to menu"):
        _act(game.back_to_menu())
