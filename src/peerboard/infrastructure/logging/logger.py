# src/peerboard/infrastructure/logging/logger.py
# Copyright (c) Peerboard.
# SPDX-License-Identifier: MIT
"""Structured JSON logging for the Peerboard CLI.

Every log line is one JSON object on stderr, so command output on stdout
(CSV, JSON, catalogue text) stays machine-readable.

Features:
    * Stable keys: ``ts``, ``level``, ``logger``, ``message``.
    * Command context: :func:`command_context` binds a ``run_id``, the
      command name, and inputs such as the snapshot path or export format.
      Every line logged inside the block carries them, including lines from
      the application layer, which only uses plain ``logging``.
    * Structured fields passed as ``extra={"extra": {...}}`` are merged last
      and win over context fields of the same name.

Typical usage:
    configure_root_logging()
    log = get_json_logger(__name__)

    with command_context("export", snapshot=str(path), format="csv"):
        log.info("export.done")
"""

from __future__ import annotations

import json
import logging
import os
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

__all__ = [
    "command_context",
    "configure_root_logging",
    "current_context",
    "get_json_logger",
]

_COMMAND_CTX: ContextVar[dict[str, Any] | None] = ContextVar("peerboard_command", default=None)


@contextmanager
def command_context(command: str, **fields: Any) -> Iterator[str]:
    """Bind a command run to every log line emitted inside the block.

    Nested blocks inherit the outer fields and the outer ``run_id``.

    Args:
        command: CLI command name (``evaluate``, ``export``, ``score``, ...).
        **fields: Extra context, e.g. ``snapshot`` or ``format``. ``None``
            values are dropped.

    Yields:
        str: The run id shared by every line of this command.
    """
    outer = _COMMAND_CTX.get() or {}
    run_id = outer.get("run_id") or uuid.uuid4().hex[:12]
    bound = {
        **outer,
        "run_id": run_id,
        "command": command,
        **{key: value for key, value in fields.items() if value is not None},
    }
    token = _COMMAND_CTX.set(bound)
    try:
        yield run_id
    finally:
        _COMMAND_CTX.reset(token)


def current_context() -> dict[str, Any]:
    """Return a copy of the fields bound by the innermost :func:`command_context`."""
    return dict(_COMMAND_CTX.get() or {})


class _JsonFormatter(logging.Formatter):
    """JSON log formatter emitting stable keys, command context, and extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_COMMAND_CTX.get() or {})

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            if exc_type is not None:
                payload["exc_type"] = exc_type.__name__
            if exc_value is not None:
                payload["exc_message"] = str(exc_value)

        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def configure_root_logging(level: str | int | None = None) -> None:
    """Install the JSON stderr handler on the root logger (idempotent).

    Args:
        level: Logging level or level name. If ``None``, use env ``LOG_LEVEL`` or ``INFO``.
    """
    root = logging.getLogger()

    env_level = os.getenv("LOG_LEVEL")
    resolved: int | str = (
        level if level is not None else (env_level.upper() if env_level else "INFO")
    )
    root.setLevel(resolved.upper() if isinstance(resolved, str) else resolved)

    if any(isinstance(h.formatter, _JsonFormatter) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_JsonFormatter())
    root.addHandler(handler)


def get_json_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``; records reach the root JSON handler.

    This does *not* configure the root logger. Call
    :func:`configure_root_logging` once at startup.
    """
    return logging.getLogger(name)
