"""Audio cue emitters: fire-and-forget signals with no effect on game state."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from sim.base import Cue
from game.config import MUTED_KEY
from game.storage import StoragePort

logger = logging.getLogger(__name__)


class CueEmitter(ABC):
    @abstractmethod
    def emit(self, cue: Cue) -> None:
        pass


class SilentCueEmitter(CueEmitter):
    def emit(self, cue: Cue) -> None:
        return None


class LoggingCueEmitter(CueEmitter):
    def emit(self, cue: Cue) -> None:
        logger.debug("cue %s", cue.value)


class RecordingCueEmitter(CueEmitter):
    """Keeps every emitted cue in order (used by tests and the UI's sound hook)."""

    def __init__(self):
        self.cues: list[Cue] = []

    def emit(self, cue: Cue) -> None:
        self.cues.append(cue)

    def clear(self) -> None:
        self.cues.clear()


class MutableCueEmitter(CueEmitter):
    """Wraps another emitter with a mute flag persisted under its own storage key."""

    def __init__(self, inner: CueEmitter, storage: Optional[StoragePort] = None):
        self.inner = inner
        self.storage = storage
        self.muted = False
        if storage is not None:
            try:
                self.muted = storage.get(MUTED_KEY) == "true"
            except Exception as e:
                logger.warning("Could not read mute flag: %s", e)

    def set_muted(self, muted: bool) -> None:
        self.muted = bool(muted)
        if self.storage is not None:
            try:
                self.storage.set(MUTED_KEY, "true" if self.muted else "false")
            except Exception as e:
                logger.warning("Could not persist mute flag: %s", e)

    def emit(self, cue: Cue) -> None:
        if self.muted:
            return
        self.inner.emit(cue)


def get_cue_emitter(mode: str = "log", storage: Optional[StoragePort] = None) -> MutableCueEmitter:
    if mode == "recording":
        inner: CueEmitter = RecordingCueEmitter()
    elif mode == "silent":
        inner = SilentCueEmitter()
    else:
        inner = LoggingCueEmitter()
    return MutableCueEmitter(inner, storage=storage)
