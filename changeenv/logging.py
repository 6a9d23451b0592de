"""Append-only JSONL history of directory switches."""

from __future__ import annotations

import datetime as _dt
import json
import os
from typing import Any, Dict, Optional

_HISTORY_PATH_ENV = "CHANGEENV_HISTORY_PATH"


def log_jsonl(path: str, record: Dict[str, Any]) -> None:
    """Write one history entry to the switch log at *path*.

    Entries accumulate one per line so the log can be tailed or grepped for
    past ``from``/``to`` pairs. Missing parent directories are created.
    """

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, "a", encoding="utf-8") as handle:
        handle.write(json.dumps(record, sort_keys=True))
        handle.write("\n")


def history_path() -> Optional[str]:
    value = os.getenv(_HISTORY_PATH_ENV, "").strip()
    return os.path.expanduser(value) if value else None


def log_switch(record: Dict[str, Any], *, path: Optional[str] = None) -> bool:
    """Append *record* to the switch history, if one is configured.

    Returns False without writing when neither *path* nor
    ``$CHANGEENV_HISTORY_PATH`` is set.
    """

    target = path or history_path()
    if not target:
        return False

    payload = dict(record)
    payload.setdefault("timestamp", _dt.datetime.now(tz=_dt.timezone.utc).isoformat())
    log_jsonl(target, payload)
    return True


__all__ = ["history_path", "log_jsonl", "log_switch"]
