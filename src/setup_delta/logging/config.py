"""Structured logging setup shared by the CLI and library modules."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping

__all__ = ["JsonFormatter", "ROOT_LOGGER_NAME", "setup_logging"]

ROOT_LOGGER_NAME = "setup_delta"

_HANDLER_MARKER = "_setup_delta_handler"

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_"):
                continue
            payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, sort_keys=True)


def _resolve_level(value: Any) -> int:
    if isinstance(value, int):
        return value
    name = str(value or "info").strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{value}'")
    return level


def _build_handler(output: str) -> logging.Handler:
    target = (output or "stderr").strip()
    if target.lower() == "stdout":
        return logging.StreamHandler(sys.stdout)
    if target.lower() == "stderr":
        return logging.StreamHandler(sys.stderr)
    path = Path(target).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, encoding="utf-8")


def setup_logging(config: Mapping[str, Any] | None = None) -> logging.Logger:
    """Configure the ``setup_delta`` logger from the ``logging`` table of ``config``.

    Calling this again replaces the handler installed by the previous call so
    repeated CLI invocations in one process do not duplicate output.
    """

    logging_cfg = dict((config or {}).get("logging", {}) or {})
    level = _resolve_level(logging_cfg.get("level", "info"))
    fmt = str(logging_cfg.get("format", "json")).lower()
    if fmt not in {"json", "text"}:
        raise ValueError(f"Unknown log format '{fmt}'")

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    handler = _build_handler(str(logging_cfg.get("output", "stderr")))
    handler.setFormatter(JsonFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT))
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
