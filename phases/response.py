"""Phase 2 (during the disaster): timed event state machine as a pure reducer.

The response phase is modelled as an immutable ResponseState and a handful of
discrete actions. `reduce(state, action)` applies the business rules; the
countdown and the outcome display delay are driven from outside by a scheduler
that dispatches Tick and AdvanceEvent.

Actions that are not valid in the current state return the state unchanged:
resolving while an outcome is still displayed, an option index out of range,
an unknown agency, ordering evacuation twice, anything after completion.
"""

import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Union

from sim.base import Hazard, Difficulty, CenterStatus, EmergencyEvent
from sim.content import AGENCIES
from sim.scenarios import get_profile, select_events
from phases.scoring import round_half_up, clamp, clamp_int

EVACUATION_PANIC_RELIEF = 10
SMOOTH_EVACUATION_PREPAREDNESS = 70
OVERWHELMED_PANIC = 60
EVENT_LOG_LIMIT = 10
PANIC_SCORE_WEIGHT = 0.3
AGENCY_BONUS = 5
MAX_CASUALTIES = 50


class ResponseStatus(str, Enum):
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


@dataclass(frozen=True)
class EventOutcome:
    event_id: str
    text: str
    correct: bool


@dataclass(frozen=True)
class DecisionRecord:
    event_id: str
    option_index: int
    correct: bool


@dataclass(frozen=True)
class ResponseState:
    hazard: Hazard
    difficulty: Difficulty
    status: ResponseStatus = ResponseStatus.LOADING
    events: tuple[EmergencyEvent, ...] = ()
    current_index: int = 0
    time_remaining: int = 0
    public_panic: int = 0
    evacuation_ordered: bool = False
    agencies_contacted: tuple[str, ...] = ()
    correct_decisions: int = 0
    events_resolved: int = 0
    center_status: CenterStatus = CenterStatus.IDLE
    pending_outcome: Optional[EventOutcome] = None
    decisions: tuple[DecisionRecord, ...] = ()
    event_log: tuple[str, ...] = ()
    timer_expired: bool = False
    preparedness_score: int = 0

    @property
    def total_events(self) -> int:
        return len(self.events)

    @property
    def current_event(self) -> Optional[EmergencyEvent]:
        if self.status != ResponseStatus.IN_PROGRESS or self.current_index >= len(self.events):
            return None
        return self.events[self.current_index]

    @property
    def is_complete(self) -> bool:
        return self.status == ResponseStatus.COMPLETE


# ---------- Actions ----------

@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class ResolveEvent:
    option_index: int


@dataclass(frozen=True)
class AdvanceEvent:
    pass


@dataclass(frozen=True)
class OrderEvacuation:
    pass


@dataclass(frozen=True)
class ContactAgency:
    agency: str


ResponseAction = Union[Tick, ResolveEvent, AdvanceEvent, OrderEvacuation, ContactAgency]


@dataclass
class ResponseRecord:
    evacuation_ordered: bool = False
    agencies_contacted: list[str] = field(default_factory=list)
    events_resolved: int = 0
    correct_decisions: int = 0
    total_events: int = 0
    public_panic: int = 0
    public_compliance: int = 100
    evacuation_center_status: CenterStatus = CenterStatus.IDLE
    evacuation_center_managed: bool = False
    casualties: int = 0
    response_score: int = 0
    time_remaining: int = 0


def _panic(value: int) -> int:
    return clamp_int(value, 0, 100)


def _log(state: ResponseState, message: str) -> tuple[str, ...]:
    return ((message,) + state.event_log)[:EVENT_LOG_LIMIT]


def new_response_state(hazard: Hazard, difficulty: Difficulty, preparedness_score: int = 0) -> ResponseState:
    return ResponseState(hazard=hazard, difficulty=difficulty, preparedness_score=preparedness_score)


def initialize_response(state: ResponseState, rng: Optional[random.Random] = None) -> ResponseState:
    """Loading -> InProgress: draw events, set countdown and starting panic."""
    if state.status != ResponseStatus.LOADING:
        return state
    profile = get_profile(state.difficulty)
    events = tuple(select_events(state.hazard, state.difficulty, rng))
    return replace(
        state,
        status=ResponseStatus.IN_PROGRESS if events else ResponseStatus.COMPLETE,
        events=events,
        current_index=0,
        time_remaining=profile.initial_time_s,
        public_panic=profile.initial_panic,
    )


def _tick(state: ResponseState) -> ResponseState:
    if state.status != ResponseStatus.IN_PROGRESS or state.time_remaining <= 0:
        return state
    remaining = state.time_remaining - 1
    if remaining > 0:
        return replace(state, time_remaining=remaining)
    return replace(state, time_remaining=0, timer_expired=True, event_log=_log(state, "Time is up! The situation is escalating."))


def _resolve(state: ResponseState, option_index: int) -> ResponseState:
    event = state.current_event
    if event is None or state.pending_outcome is not None:
        return state
    if option_index < 0 or option_index >= len(event.options):
        return state
    option = event.options[option_index]
    profile = get_profile(state.difficulty)
    decision = DecisionRecord(event_id=event.id, option_index=option_index, correct=option.correct)
    outcome = EventOutcome(event_id=event.id, text=option.outcome, correct=option.correct)
    if option.correct:
        return replace(
            state,
            correct_decisions=state.correct_decisions + 1,
            events_resolved=state.events_resolved + 1,
            public_panic=_panic(state.public_panic - profile.panic_relief),
            pending_outcome=outcome,
            decisions=state.decisions + (decision,),
            event_log=_log(state, f"{event.title}: Correct action taken"),
        )
    panic = _panic(state.public_panic + profile.panic_penalty)
    center = state.center_status
    if center == CenterStatus.ACTIVE and panic > OVERWHELMED_PANIC:
        center = CenterStatus.OVERWHELMED
    return replace(
        state,
        public_panic=panic,
        center_status=center,
        pending_outcome=outcome,
        decisions=state.decisions + (decision,),
        event_log=_log(state, f"{event.title}: Suboptimal decision"),
    )


def _advance(state: ResponseState) -> ResponseState:
    if state.status != ResponseStatus.IN_PROGRESS or state.pending_outcome is None:
        return state
    next_index = state.current_index + 1
    status = ResponseStatus.COMPLETE if next_index >= len(state.events) else ResponseStatus.IN_PROGRESS
    return replace(state, current_index=next_index, pending_outcome=None, status=status)


def _order_evacuation(state: ResponseState) -> ResponseState:
    if state.status == ResponseStatus.COMPLETE or state.evacuation_ordered:
        return state
    state = replace(
        state,
        evacuation_ordered=True,
        center_status=CenterStatus.ACTIVE,
        public_panic=_panic(state.public_panic - EVACUATION_PANIC_RELIEF),
        event_log=_log(state, "Evacuation order issued successfully"),
    )
    if state.preparedness_score >= SMOOTH_EVACUATION_PREPAREDNESS:
        state = replace(state, event_log=_log(state, "High preparedness resulted in smooth evacuation!"))
    return state


def _contact_agency(state: ResponseState, agency: str) -> ResponseState:
    if state.status == ResponseStatus.COMPLETE or agency not in AGENCIES or agency in state.agencies_contacted:
        return state
    return replace(
        state,
        agencies_contacted=state.agencies_contacted + (agency,),
        event_log=_log(state, f"Coordinated with {agency}"),
    )


def reduce(state: ResponseState, action: ResponseAction) -> ResponseState:
    """Apply one action. Pure: the input state is never mutated."""
    if isinstance(action, Tick):
        return _tick(state)
    if isinstance(action, ResolveEvent):
        return _resolve(state, action.option_index)
    if isinstance(action, AdvanceEvent):
        return _advance(state)
    if isinstance(action, OrderEvacuation):
        return _order_evacuation(state)
    if isinstance(action, ContactAgency):
        return _contact_agency(state, action.agency)
    return state


def calculate_response_score(correct: int, total: int, panic: int, agencies: int) -> int:
    base = (correct / total) * 100 if total else 0.0
    return round_half_up(clamp(base - panic * PANIC_SCORE_WEIGHT + agencies * AGENCY_BONUS, 0, 100))


def estimate_casualties(preparedness_score: int, evacuation_ordered: bool, correct: int, total: int) -> int:
    casualties = 0
    if preparedness_score < 50:
        casualties += 15
    if preparedness_score < 70:
        casualties += 10
    if not evacuation_ordered:
        casualties += 20
    if correct < total * 0.5:
        casualties += 15
    return clamp_int(casualties, 0, MAX_CASUALTIES)


def finalize_response(state: ResponseState, preparedness_score: int) -> ResponseRecord:
    if state.status != ResponseStatus.COMPLETE:
        raise ValueError(f"cannot finalize response in status {state.status.value}")
    total = state.total_events
    return ResponseRecord(
        evacuation_ordered=state.evacuation_ordered,
        agencies_contacted=list(state.agencies_contacted),
        events_resolved=state.events_resolved,
        correct_decisions=state.correct_decisions,
        total_events=total,
        public_panic=state.public_panic,
        public_compliance=100 - state.public_panic,
        evacuation_center_status=state.center_status,
        evacuation_center_managed=state.center_status != CenterStatus.IDLE,
        casualties=estimate_casualties(preparedness_score, state.evacuation_ordered, state.correct_decisions, total),
        response_score=calculate_response_score(state.correct_decisions, total, state.public_panic, len(state.agencies_contacted)),
        time_remaining=state.time_remaining,
    )


def response_record_valid(record: ResponseRecord) -> bool:
    agencies = record.agencies_contacted
    if len(set(agencies)) != len(agencies) or any(a not in AGENCIES for a in agencies):
        return False
    if not 0 <= record.correct_decisions <= record.events_resolved <= record.total_events:
        return False
    return 0 <= record.response_score <= 100 and 0 <= record.casualties <= MAX_CASUALTIES
