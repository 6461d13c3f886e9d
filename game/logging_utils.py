"""Root logging setup and per-session JSON-lines event logs.

With a log directory set, every game session appends its events to
`<dir>/<session_id>.jsonl`; events without a session id go to `<dir>/events.jsonl`.
Events are always mirrored to the `game.session` logger.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

logger = logging.getLogger("game.session")

_log_dir: Optional[Path] = None


def configure_root_logging(level: Union[int, str] = logging.INFO) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root = logging.getLogger()
    root.setLevel(level)
    if not root.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        root.addHandler(h)


def set_session_log_dir(path: Union[str, Path, None]) -> None:
    """Write session event files under `path` from now on; None turns files off."""
    global _log_dir
    _log_dir = Path(path) if path else None
    if _log_dir is not None:
        _log_dir.mkdir(parents=True, exist_ok=True)


def session_log_file(session_id: Optional[str] = None) -> Optional[Path]:
    if _log_dir is None:
        return None
    return _log_dir / f"{session_id or 'events'}.jsonl"


def session_log(event: str, session_id: Optional[str] = None, **fields: Any) -> None:
    payload = {"ts": datetime.now(tz=timezone.utc).isoformat(), "event": event, **fields}
    if session_id is not None:
        payload["session_id"] = session_id
    path = session_log_file(session_id)
    if path is not None:
        try:
            with open(path, "a", encoding="utf-8") as f:
                f.write(json.dumps(payload, default=str) + "\n")
        except OSError as e:
            logger.warning("Could not write session log %s: %s", path, e)
    logger.info("%s %s %s", session_id or "-", event, fields)


def read_session_log(session_id: Optional[str] = None) -> list[dict]:
    """Events logged so far for one session, oldest first. Unreadable lines are skipped."""
    path = session_log_file(session_id)
    if path is None or not path.exists():
        return []
    events = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            try:
                events.append(json.loads(line))
            except ValueError:
                continue
    return events
