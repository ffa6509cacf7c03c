"""Structured Logging — ledger-aware formatters and one-time logging setup.

Invariants:
    - Every record carries timestamp, level, logger name, and message
    - Ledger identifiers passed via extra= (team_id, user_id, expense_id) plus error_code
      and path are surfaced by both formatters, stringified (UUIDs, ints)
    - setup_logging is idempotent: calling it again replaces its own handler, never stacks

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - Timestamps come from record.created so queued records keep their emit time
    - Driver loggers (sqlalchemy.engine, aiosqlite) pinned to WARNING: per-statement noise
"""

import logging
import json
from datetime import datetime, timezone

LEDGER_FIELDS = ("team_id", "user_id", "expense_id", "error_code", "path")
QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncpg")


def ledger_extras(record: logging.LogRecord) -> dict[str, str]:
    """Ledger identifiers attached to a record, in a stable order."""
    extras = {}
    for key in LEDGER_FIELDS:
        val = record.__dict__.get(key)
        if val is not None:
            extras[key] = str(val)
    return extras


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **ledger_extras(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class KeyValueFormatter(logging.Formatter):
    """Human-readable lines with ledger identifiers appended as key=value."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = ledger_extras(record)
        if extras:
            line += " " + " ".join(f"{k}={v}" for k, v in extras.items())
        return line


class _LedgerHandler(logging.StreamHandler):
    """Marker type so setup_logging can find the handler it installed."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure root logging once per process; returns the installed handler."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _LedgerHandler)]:
        root.removeHandler(existing)

    handler = _LedgerHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else KeyValueFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
