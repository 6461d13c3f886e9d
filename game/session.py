"""GameSession: the phase state machine that owns and persists the session record.

intro -> tutorial -> intro
intro -> phase1 -> phase2 -> phase3 -> report -> intro

Every intent returns True when it changed something and False when it was
refused (wrong phase, gate not satisfied, invalid input). Refusals are never
exceptions. The session record is written to storage after each mutation and
restored on construction; anything unreadable restores as a fresh intro.
"""

import json
import logging
import random
import uuid
from typing import Callable, Optional, Union

from pydantic import ValidationError

from sim.base import Hazard, Difficulty, Cue
from sim.scenarios import parse_hazard, parse_difficulty
from phases.preparedness import (
    PreparednessRecord,
    calculate_preparedness_score,
    can_advance_preparedness,
    finalize_preparedness,
    preparedness_checklist,
)
from phases.response import (
    ResponseState,
    ResponseStatus,
    ResponseAction,
    Tick,
    ResolveEvent,
    AdvanceEvent,
    OrderEvacuation,
    ContactAgency,
    new_response_state,
    initialize_response,
    reduce,
    finalize_response,
)
from phases.recovery import (
    RecoveryRecord,
    calculate_recovery_score,
    can_advance_recovery,
    finalize_recovery,
    recovery_briefing,
)
from game.config import GameConfig, SESSION_KEY, HISTORY_KEY
from game.schemas import Phase, ScenarioSelection, SessionRecord, HistoryEntry
from game.storage import StoragePort, MemoryStorage
from game.cues import CueEmitter, get_cue_emitter
from game.clock import CallbackScheduler, TimerHandle
from game.report import GameReport, generate_report, calculate_final_score, history_entry_for, append_history
from game.logging_utils import session_log

logger = logging.getLogger(__name__)


class GameSession:
    def __init__(
        self,
        storage: Optional[StoragePort] = None,
        cues: Optional[CueEmitter] = None,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[CallbackScheduler] = None,
        session_id: Optional[str] = None,
    ):
        self.config = config or GameConfig()
        self.storage = storage if storage is not None else MemoryStorage()
        self.cues = cues if cues is not None else get_cue_emitter(self.config.cue_mode, storage=self.storage)
        self.rng = rng or random.Random(self.config.seed)
        self.scheduler = scheduler or CallbackScheduler()
        self.session_id = session_id or str(uuid.uuid4())[:8]
        self.response_state: Optional[ResponseState] = None
        self._countdown: Optional[TimerHandle] = None
        self._outcome_timer: Optional[TimerHandle] = None
        self._epoch = 0
        self.record = self._load_record()
        self.history = self._load_history()
        if self.record.phase == Phase.PHASE2:
            self._enter_response()

    # ---------- persistence ----------

    def _load_record(self) -> SessionRecord:
        try:
            raw = self.storage.get(SESSION_KEY)
        except Exception as e:
            logger.warning("Could not read session state: %s", e)
            return SessionRecord()
        if not raw:
            return SessionRecord()
        try:
            record = SessionRecord.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning("Discarding malformed session state: %s", e)
            return SessionRecord()
        if not record.is_consistent():
            logger.warning("Discarding inconsistent session state in phase %s", record.phase.value)
            return SessionRecord()
        return record

    def _load_history(self) -> list[HistoryEntry]:
        try:
            raw = self.storage.get(HISTORY_KEY)
            if not raw:
                return []
            data = json.loads(raw)
            if not isinstance(data, list):
                return []
            return [HistoryEntry.model_validate(x) for x in data][: self.config.history_limit]
        except Exception as e:
            logger.warning("Discarding malformed history: %s", e)
            return []

    def _persist(self) -> None:
        try:
            self.storage.set(SESSION_KEY, self.record.model_dump_json())
        except Exception as e:
            logger.warning("Could not persist session state: %s", e)

    def _persist_history(self) -> None:
        try:
            self.storage.set(HISTORY_KEY, json.dumps([h.model_dump(mode="json") for h in self.history]))
        except Exception as e:
            logger.warning("Could not persist history: %s", e)

    def _emit(self, cue: Cue) -> None:
        try:
            self.cues.emit(cue)
        except Exception as e:
            logger.warning("Cue %s failed: %s", cue.value, e)

    def _log(self, event: str, **kwargs) -> None:
        session_log(event, session_id=self.session_id, **kwargs)

    # ---------- queries ----------

    @property
    def phase(self) -> Phase:
        return self.record.phase

    @property
    def selection(self) -> Optional[ScenarioSelection]:
        return self.record.selection

    def preparedness_score(self) -> Optional[int]:
        prep = self.record.preparedness
        if prep is None:
            return None
        return prep.preparedness_score if prep.preparedness_score is not None else calculate_preparedness_score(prep)

    def preparedness_checklist(self) -> dict[str, bool]:
        if self.record.preparedness is None:
            return {}
        return preparedness_checklist(self.record.preparedness)

    def recovery_score(self) -> Optional[int]:
        rec = self.record.recovery
        if rec is None:
            return None
        if rec.recovery_score is not None:
            return rec.recovery_score
        return calculate_recovery_score(rec, self.config.recovery_score_cap)

    def recovery_briefing(self) -> list[str]:
        if self.record.preparedness is None or self.record.response is None:
            return []
        return recovery_briefing(self.record.preparedness, self.record.response)

    def can_advance(self) -> bool:
        phase = self.record.phase
        if phase == Phase.PHASE1:
            return self.record.preparedness is not None and can_advance_preparedness(self.record.preparedness)
        if phase == Phase.PHASE2:
            return self.response_state is not None and self.response_state.is_complete
        if phase == Phase.PHASE3:
            return self.record.recovery is not None and can_advance_recovery(self.record.recovery)
        return False

    def summary_estimate(self) -> Optional[int]:
        """Running final-score estimate; recovery counts as the default estimate until finalized."""
        prep, resp, rec = self.record.preparedness, self.record.response, self.record.recovery
        if prep is None or resp is None or prep.preparedness_score is None:
            return None
        recovery = rec.recovery_score if rec is not None else None
        return calculate_final_score(prep.preparedness_score, resp.response_score, recovery, self.config.default_recovery_estimate)

    def report(self) -> Optional[GameReport]:
        if self.record.phase != Phase.REPORT:
            return None
        return generate_report(
            self.record.selection,
            self.record.preparedness,
            self.record.response,
            self.record.recovery,
            self.config.default_recovery_estimate,
        )

    # ---------- intro / tutorial ----------

    def start_tutorial(self) -> bool:
        if self.record.phase != Phase.INTRO:
            return False
        self.record.phase = Phase.TUTORIAL
        self._persist()
        return True

    def complete_tutorial(self) -> bool:
        return self.exit_tutorial()

    def exit_tutorial(self) -> bool:
        if self.record.phase != Phase.TUTORIAL:
            return False
        self.record.phase = Phase.INTRO
        self._persist()
        return True

    def start_game(self, hazard: Union[Hazard, str], difficulty: Union[Difficulty, str] = Difficulty.MEDIUM) -> bool:
        if self.record.phase != Phase.INTRO:
            return False
        selection = ScenarioSelection(hazard=parse_hazard(hazard), difficulty=parse_difficulty(difficulty))
        self.record = SessionRecord(phase=Phase.PHASE1, selection=selection, preparedness=PreparednessRecord())
        self._persist()
        self._emit(Cue.START)
        self._log("game_start", hazard=selection.hazard.value, difficulty=selection.difficulty.value)
        return True

    # ---------- phase 1 ----------

    def _preparedness_intent(self, fn: Callable[[PreparednessRecord], bool]) -> bool:
        if self.record.phase != Phase.PHASE1 or self.record.preparedness is None:
            return False
        changed = fn(self.record.preparedness)
        if changed:
            self._emit(Cue.CLICK)
            self._persist()
        return changed

    def toggle_go_bag_item(self, item_id: str) -> bool:
        return self._preparedness_intent(lambda p: p.toggle_go_bag_item(item_id))

    def select_evacuation_center(self, center_id: str) -> bool:
        return self._preparedness_intent(lambda p: p.select_evacuation_center(center_id))

    def set_budget(self, amount: int) -> bool:
        return self._preparedness_intent(lambda p: p.set_budget(amount))

    def mark_drills_completed(self) -> bool:
        return self._preparedness_intent(lambda p: p.mark_drills_completed())

    def mark_risk_assessment_done(self) -> bool:
        return self._preparedness_intent(lambda p: p.mark_risk_assessment_done())

    def mark_alert_understood(self) -> bool:
        return self._preparedness_intent(lambda p: p.mark_alert_understood())

    # ---------- phase 2 ----------

    def _cancel_timers(self) -> None:
        self.scheduler.cancel(self._countdown)
        self.scheduler.cancel(self._outcome_timer)
        self._countdown = None
        self._outcome_timer = None

    def _enter_response(self) -> None:
        self._cancel_timers()
        self._epoch += 1
        epoch = self._epoch
        sel = self.record.selection
        prep_score = self.record.preparedness.preparedness_score or 0
        self.response_state = initialize_response(new_response_state(sel.hazard, sel.difficulty, prep_score), self.rng)
        if self.response_state.status == ResponseStatus.IN_PROGRESS:
            self._countdown = self.scheduler.call_every(self.config.tick_interval_s, lambda: self._scheduled(epoch, Tick()))
        self._emit(Cue.START)
        self._log(
            "response_start",
            events=[e.id for e in self.response_state.events],
            time_remaining=self.response_state.time_remaining,
            public_panic=self.response_state.public_panic,
        )

    def _scheduled(self, epoch: int, action: ResponseAction) -> None:
        # Callbacks from a torn-down or replaced response phase must not touch state.
        if epoch != self._epoch or self.record.phase != Phase.PHASE2 or self.response_state is None:
            return
        self.dispatch(action)

    def dispatch(self, action: ResponseAction) -> bool:
        if self.record.phase != Phase.PHASE2 or self.response_state is None:
            return False
        before = self.response_state
        after = reduce(before, action)
        if after is before:
            return False
        self.response_state = after

        if isinstance(action, ResolveEvent):
            outcome = after.pending_outcome
            self._emit(Cue.SUCCESS if outcome.correct else Cue.ERROR)
            epoch = self._epoch
            self._outcome_timer = self.scheduler.call_later(
                self.config.outcome_display_s, lambda: self._scheduled(epoch, AdvanceEvent())
            )
            self._log("decision", event_id=outcome.event_id, option_index=action.option_index,
                      correct=outcome.correct, public_panic=after.public_panic)
        elif isinstance(action, AdvanceEvent):
            self.scheduler.cancel(self._outcome_timer)
            self._outcome_timer = None
            if after.is_complete:
                self.scheduler.cancel(self._countdown)
                self._countdown = None
                self._log("response_complete", correct_decisions=after.correct_decisions, total_events=after.total_events)
            else:
                self._emit(Cue.ALERT)
        elif isinstance(action, Tick):
            if after.timer_expired and not before.timer_expired:
                self.scheduler.cancel(self._countdown)
                self._countdown = None
                self._emit(Cue.ALERT)
                self._log("timer_expired", current_index=after.current_index)
        else:
            self._emit(Cue.CLICK)
        return True

    def resolve_event(self, option_index: int) -> bool:
        return self.dispatch(ResolveEvent(option_index))

    def order_evacuation(self) -> bool:
        return self.dispatch(OrderEvacuation())

    def contact_agency(self, agency: str) -> bool:
        return self.dispatch(ContactAgency(agency))

    def tick(self) -> bool:
        return self.dispatch(Tick())

    def advance_time(self, seconds: float) -> int:
        """Let `seconds` of game time pass: countdown ticks and pending outcome transitions fire."""
        return self.scheduler.advance(seconds)

    # ---------- phase 3 ----------

    def _recovery_intent(self, fn: Callable[[RecoveryRecord], bool]) -> bool:
        if self.record.phase != Phase.PHASE3 or self.record.recovery is None:
            return False
        changed = fn(self.record.recovery)
        if changed:
            self._emit(Cue.CLICK)
            self._persist()
        return changed

    def toggle_infrastructure_task(self, task_id: str) -> bool:
        return self._recovery_intent(lambda r: r.toggle_infrastructure_task(task_id))

    def complete_recovery_action(self, name: str) -> bool:
        return self._recovery_intent(lambda r: r.complete_action(name))

    # ---------- transitions ----------

    def advance(self) -> bool:
        """Gate-checked move to the next phase, carrying the finalized record."""
        if not self.can_advance():
            return False
        phase = self.record.phase
        if phase == Phase.PHASE1:
            self.record.preparedness = finalize_preparedness(self.record.preparedness)
            self.record.phase = Phase.PHASE2
            self._persist()
            self._log("phase_complete", phase="phase1", score=self.record.preparedness.preparedness_score)
            self._enter_response()
        elif phase == Phase.PHASE2:
            self.record.response = finalize_response(self.response_state, self.record.preparedness.preparedness_score)
            self.record.recovery = RecoveryRecord()
            self.record.phase = Phase.PHASE3
            self.teardown()
            self.response_state = None
            self._persist()
            self._emit(Cue.START)
            self._log("phase_complete", phase="phase2", score=self.record.response.response_score,
                      casualties=self.record.response.casualties)
        elif phase == Phase.PHASE3:
            self.record.recovery = finalize_recovery(self.record.recovery, self.config.recovery_score_cap)
            self.record.phase = Phase.REPORT
            self._persist()
            report = self.report()
            # History keeps the headline estimate (default recovery); the report keeps the real score.
            estimate = calculate_final_score(
                report.preparedness_score, report.response_score, None, self.config.default_recovery_estimate
            )
            entry = history_entry_for(report, score=estimate)
            self.history = append_history(self.history, entry, self.config.history_limit)
            self._persist_history()
            self._log("history_write", entries=len(self.history), final_score=entry.final_score)
            self._emit(Cue.SUCCESS)
            self._log("phase_complete", phase="phase3", score=self.record.recovery.recovery_score,
                      final_score=report.final_score, grade=report.grade.letter)
        return True

    def _reset(self) -> None:
        self.teardown()
        self.response_state = None
        self.record = SessionRecord()
        self._persist()

    def play_again(self) -> bool:
        if self.record.phase != Phase.REPORT:
            return False
        self._reset()
        self._log("play_again")
        return True

    def back_to_menu(self) -> bool:
        if self.record.phase != Phase.REPORT:
            return False
        self._reset()
        return True

    def clear_history(self) -> None:
        self.history = []
        try:
            self.storage.remove(HISTORY_KEY)
        except Exception as e:
            logger.warning("Could not clear history: %s", e)
        self._log("history_cleared")

    def set_muted(self, muted: bool) -> None:
        set_muted = getattr(self.cues, "set_muted", None)
        if set_muted is not None:
            set_muted(muted)

    def teardown(self) -> None:
        """Cancel the countdown and any pending outcome transition; stale callbacks become no-ops."""
        self._cancel_timers()
        self._epoch += 1
