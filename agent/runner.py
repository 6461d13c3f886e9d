"""Drive a GameSession end to end with a player, one game or a whole batch."""

import random
import uuid
from dataclasses import dataclass, asdict
from typing import Callable, Optional

import pandas as pd

from sim.base import Hazard, Difficulty
from game.config import GameConfig
from game.cues import get_cue_emitter
from game.report import GameReport
from game.schemas import Phase
from game.session import GameSession
from game.storage import MemoryStorage
from game.logging_utils import session_log
from agent.players import BasePlayer, PerfectPlayer


@dataclass
class PlayResult:
    hazard: str
    difficulty: str
    seed: Optional[int]
    player: str
    completed: bool
    final_score: Optional[int] = None
    grade: Optional[str] = None
    preparedness_score: Optional[int] = None
    response_score: Optional[int] = None
    recovery_score: Optional[int] = None
    correct_decisions: int = 0
    total_events: int = 0
    casualties: int = 0
    mistakes: int = 0


def _play_response(session: GameSession, player: BasePlayer) -> None:
    player.coordinate(session)
    state = session.response_state
    # Each event needs one resolve plus one outcome delay; the bound guards against a stuck loop.
    for _ in range(state.total_events + 1 if state else 0):
        state = session.response_state
        if state is None or state.is_complete:
            break
        event = state.current_event
        if event is None:
            break
        session.resolve_event(player.choose_option(event))
        session.advance_time(session.config.outcome_display_s)


def play_session(
    session: GameSession,
    player: BasePlayer,
    hazard: Hazard = Hazard.TYPHOON,
    difficulty: Difficulty = Difficulty.MEDIUM,
) -> Optional[GameReport]:
    """Play from wherever the session is to the report. Returns None if a gate could not be passed."""
    if session.phase == Phase.REPORT:
        return session.report()
    if session.phase == Phase.TUTORIAL:
        session.exit_tutorial()
    if session.phase == Phase.INTRO:
        session.start_game(hazard, difficulty)
    if session.phase == Phase.PHASE1:
        player.prepare(session)
        if not session.advance():
            return None
    if session.phase == Phase.PHASE2:
        _play_response(session, player)
        if not session.advance():
            return None
    if session.phase == Phase.PHASE3:
        player.recover(session)
        if not session.advance():
            return None
    return session.report()


def play_one(
    hazard: Hazard,
    difficulty: Difficulty,
    seed: Optional[int],
    player: BasePlayer,
    config: Optional[GameConfig] = None,
) -> PlayResult:
    config = config or GameConfig(cue_mode="silent")
    storage = MemoryStorage()
    session = GameSession(
        storage,
        cues=get_cue_emitter(config.cue_mode, storage=storage),
        config=config,
        rng=random.Random(seed),
        session_id=str(uuid.uuid4())[:8],
    )
    report = play_session(session, player, hazard, difficulty)
    result = PlayResult(hazard=hazard.value, difficulty=difficulty.value, seed=seed, player=player.name, completed=report is not None)
    if report is not None:
        resp = session.record.response
        result.final_score = report.final_score
        result.grade = report.grade.letter
        result.preparedness_score = report.preparedness_score
        result.response_score = report.response_score
        result.recovery_score = report.recovery_score
        result.correct_decisions = resp.correct_decisions
        result.total_events = resp.total_events
        result.casualties = resp.casualties
        result.mistakes = len(report.mistakes)
    session.teardown()
    return result


def run_batch(
    hazards: list[Hazard],
    difficulties: list[Difficulty],
    seeds: list[Optional[int]],
    player_factory: Callable[[Optional[int]], BasePlayer] = PerfectPlayer,
    config: Optional[GameConfig] = None,
) -> pd.DataFrame:
    """Play every hazard x difficulty x seed combination; one row per game."""
    batch_id = str(uuid.uuid4())[:8]
    rows = []
    for hazard in hazards:
        for difficulty in difficulties:
            for seed in seeds:
                player = player_factory(seed)
                result = play_one(hazard, difficulty, seed, player, config)
                session_log("batch_game", session_id=batch_id, hazard=hazard.value, difficulty=difficulty.value,
                            seed=seed, final_score=result.final_score, completed=result.completed)
                rows.append(asdict(result))
    return pd.DataFrame(rows)
