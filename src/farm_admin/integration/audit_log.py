"""
Audit logging for admin commands.

Every gateway command produces exactly one record on the logger named after
its component: INFO when accepted, WARNING when rejected. Records carry the
command's event name and its arguments as structured fields, and render as one
JSON object per line through `JsonFormatter`.

`configure_logging(settings)` wires the root logger from `LoggingSettings`
(stdout, plus a daily-rotating file when `settings.file` is set).
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler
from typing import IO, List, Optional

from .config import LoggingSettings


def _iso_utc(ts: float) -> str:
    """ISO-8601 with milliseconds in UTC, e.g. 2025-08-30T10:12:05.123Z"""
    return (
        datetime.fromtimestamp(ts, tz=timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class JsonFormatter(logging.Formatter):
    """One JSON object per record; command fields are merged at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        out = {
            "time": _iso_utc(record.created),
            "lvl": record.levelname,
            "component": getattr(record, "component", record.name),
            "event": getattr(record, "event", None),
            "msg": record.getMessage(),
        }
        fields = getattr(record, "fields", None)
        if isinstance(fields, dict):
            # Fixed keys win over command arguments of the same name.
            out.update({k: v for k, v in fields.items() if k not in out})
        if record.exc_info:
            out["exc"] = self.formatException(record.exc_info)
        # Identities and pool ids are str/int; anything else is rendered with str().
        return json.dumps(out, ensure_ascii=False, default=str)


def configure_logging(
    settings: Optional[LoggingSettings] = None,
    *,
    stream: Optional[IO[str]] = None,
) -> List[logging.Handler]:
    """
    Install JSON handlers on the root logger, replacing any existing ones.

    Returns the installed handlers (stream first, then the file handler if any).
    """
    settings = settings or LoggingSettings()
    root = logging.getLogger()
    root.setLevel(settings.level.upper())
    fmt = JsonFormatter()

    console = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console.setFormatter(fmt)
    handlers: List[logging.Handler] = [console]

    if settings.file:
        log_dir = os.path.dirname(settings.file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        rotating = TimedRotatingFileHandler(
            settings.file, when="midnight", backupCount=settings.retention_days, encoding="utf-8"
        )
        rotating.setFormatter(fmt)
        handlers.append(rotating)

    root.handlers[:] = handlers
    return handlers


def log_event(component: str, event: str, msg: str, *, level: int = logging.INFO, **fields) -> None:
    """Emit one audit record for `event` on the `component` logger."""
    logging.getLogger(component).log(
        level, msg, extra={"component": component, "event": event, "fields": fields}
    )
