"""GameConfig (pydantic): tunables, storage location and cue mode, overridable from DRRM_* env vars."""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

SESSION_KEY = "drrm-game-state"
HISTORY_KEY = "drrm-game-history"
MUTED_KEY = "drrm-game-muted"

_ENV_FIELDS = {
    "DRRM_DATA_DIR": "data_dir",
    "DRRM_SEED": "seed",
    "DRRM_OUTCOME_DISPLAY_S": "outcome_display_s",
    "DRRM_TICK_INTERVAL_S": "tick_interval_s",
    "DRRM_DEFAULT_RECOVERY": "default_recovery_estimate",
    "DRRM_RECOVERY_CAP": "recovery_score_cap",
    "DRRM_HISTORY_LIMIT": "history_limit",
    "DRRM_CUE_MODE": "cue_mode",
    "DRRM_LOG_LEVEL": "log_level",
}


class GameConfig(BaseModel):
    """Engine configuration. Same config + seed => same event order."""

    data_dir: str = Field(default="data", description="Directory for the JSON state file and exports")
    seed: Optional[int] = Field(default=None, description="Seed for event selection; None = random")
    outcome_display_s: float = Field(default=3.0, ge=0.0, le=30.0)
    tick_interval_s: float = Field(default=1.0, gt=0.0, le=10.0)
    default_recovery_estimate: int = Field(default=80, ge=0, le=100)
    recovery_score_cap: int = Field(default=100, ge=1, le=125)
    history_limit: int = Field(default=10, ge=1, le=100)
    cue_mode: str = Field(default="log", pattern="^(log|silent|recording)$", description="log | silent | recording")
    log_level: str = Field(default="INFO")

    @property
    def state_path(self) -> str:
        return os.path.join(self.data_dir, "drrm_state.json")

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "GameConfig":
        """Build from DRRM_* variables; an invalid value is dropped with a warning."""
        env = os.environ if environ is None else environ
        values = {}
        for var, name in _ENV_FIELDS.items():
            raw = env.get(var)
            if raw is None or raw == "":
                continue
            try:
                cls(**{name: raw})
            except ValidationError as e:
                logger.warning("Ignoring %s=%r: %s", var, raw, e.errors()[0].get("msg"))
                continue
            values[name] = raw
        return cls(**values)
