import json
import sys
from datetime import datetime, timezone


_LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40, "critical": 50}
_min_level = _LEVELS["info"]


def configure(level: str) -> None:
    global _min_level
    key = (level or "info").strip().lower()
    if key == "warn":
        key = "warning"
    if key not in _LEVELS:
        raise ValueError(f"Unknown log level: {level!r}")
    _min_level = _LEVELS[key]


def log_event(level: str, event: str, **fields) -> None:
    lvl = level.lower()
    if _LEVELS.get(lvl, _LEVELS["info"]) < _min_level:
        return
    payload = {
        "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "level": lvl,
        "event": event,
    }
    payload.update(fields or {})
    try:
        sys.stdout.write(json.dumps(payload, ensure_ascii=False, default=str) + "\n")
    except (OSError, ValueError):
        # stdout closed or unwritable; logging is best-effort
        pass
