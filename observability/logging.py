from __future__ import annotations

import json
import logging
import os
import sys
import time
from typing import Any, Dict, Optional

LOGGER_NAME = "offline_tx"

_logger = logging.getLogger(LOGGER_NAME)

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def now_ms() -> int:
    return int(time.time() * 1000)


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever `sys.stderr` is at emit time."""

    @property
    def stream(self):  # type: ignore[override]
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


def configure_logging(level: str = "info") -> logging.Logger:
    """
    Route structured events to stderr; stdout is reserved for command output.
    """
    if not any(getattr(h, "_offline_tx", False) for h in _logger.handlers):
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._offline_tx = True  # type: ignore[attr-defined]
        _logger.addHandler(handler)
    _logger.setLevel(_LEVELS.get((level or "info").strip().lower(), logging.INFO))
    _logger.propagate = False
    return _logger


def build_log_context(**fields: Any) -> Dict[str, Any]:
    ctx: Dict[str, Any] = {"service": os.getenv("TXTOOL_SERVICE_NAME", "offline-tx")}
    ctx.update({k: v for k, v in fields.items() if v is not None})
    return ctx


def log_event(
    event: str,
    *,
    ctx: Optional[Dict[str, Any]] = None,
    data: Optional[Dict[str, Any]] = None,
    level: str = "info",
) -> None:
    """
    Emit one JSON object per line. Never pass key material in `data`.
    """
    lvl = _LEVELS.get(level, logging.INFO)
    if not _logger.isEnabledFor(lvl):
        return
    payload: Dict[str, Any] = {"ts_ms": now_ms(), "event": event, "level": level}
    payload.update(ctx or {})
    if data:
        payload["data"] = data
    _logger.log(lvl, json.dumps(payload, sort_keys=True, default=str))
