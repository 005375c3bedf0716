"""Structured event logging for the engine.

Every record is one line: ``level=info ts=... logger=... event=... k=v ...``,
or a compact JSON object when ``LABYRINTH_LOG_JSON`` is on. Loggers are cheap
named wrappers around ``print``; ``bind`` returns a child that stamps the
same context (seed, username, ...) on every record it emits.

Usage:
    from labyrinth.logging_utils import get_logger
    logger = get_logger("labyrinth.session").bind(seed=1234)
    logger.info(event="game_over", outcome="won", steps=42, pos=(3, 5))

Coordinates (tuples) render as ``x,y``; floats are rounded to two places;
``None`` values are dropped. Reserved keys: level, ts.
"""

from __future__ import annotations

import json
import os
import sys
import time
from typing import Any, Dict, Optional, TextIO

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("LABYRINTH_LOG_LEVEL", "info"), 20)
JSON_MODE = os.getenv("LABYRINTH_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")
# None means stdout for debug..warn and stderr for error
STREAM: Optional[TextIO] = None


def _render(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.2f}".rstrip("0").rstrip(".")
    if isinstance(value, (tuple, list)):
        return ",".join(_render(v) for v in value)
    if isinstance(value, int):
        return str(value)
    return str(value).replace(" ", "_")


def _format(level: str, fields: Dict[str, Any]) -> str:
    ts = int(time.time())
    fields = {k: v for k, v in fields.items() if v is not None}
    if JSON_MODE:
        rec = {"level": level, "ts": ts, **fields}
        try:
            return json.dumps(rec, separators=(",", ":"), default=str)
        except (TypeError, ValueError):
            return json.dumps({"level": level, "ts": ts, "error": "json_encode_failed"})
    head = [f"level={level}", f"ts={ts}"]
    # logger and event lead so lines sort and grep by source first
    for key in ("logger", "event"):
        if key in fields:
            head.append(f"{key}={_render(fields.pop(key))}")
    return " ".join(head + [f"{k}={_render(v)}" for k, v in fields.items()])


class _Logger:
    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None):
        self.name = name
        self.context: Dict[str, Any] = dict(context or {})

    def bind(self, **context) -> "_Logger":
        """Child logger that adds ``context`` to every record."""
        return _Logger(self.name, {**self.context, **context})

    def _emit(self, level: str, fields: Dict[str, Any]) -> None:
        if LEVELS[level] < CURRENT_LEVEL:
            return
        record = {"logger": self.name, **self.context, **fields}
        stream = STREAM or (sys.stderr if level == "error" else sys.stdout)
        print(_format(level, record), file=stream)

    def debug(self, **fields):
        self._emit("debug", fields)

    def info(self, **fields):
        self._emit("info", fields)

    def warn(self, **fields):
        self._emit("warn", fields)

    def error(self, **fields):
        self._emit("error", fields)


_LOGGERS: Dict[str, _Logger] = {}


def get_logger(name: str = "labyrinth") -> _Logger:
    if name not in _LOGGERS:
        _LOGGERS[name] = _Logger(name)
    return _LOGGERS[name]


def configure(level: Optional[str] = None, json_mode: Optional[bool] = None, stream: Optional[TextIO] = None) -> None:
    """Adjust logging at runtime (``run.py --log-level``); unknown levels are ignored."""
    global CURRENT_LEVEL, JSON_MODE, STREAM
    if level is not None:
        CURRENT_LEVEL = LEVELS.get(level.lower(), CURRENT_LEVEL)
    if json_mode is not None:
        JSON_MODE = json_mode
    if stream is not None:
        STREAM = stream


log = get_logger("labyrinth")

__all__ = ["LEVELS", "get_logger", "configure", "log"]
