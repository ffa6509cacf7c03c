"""Structured Logging — formatter output and idempotent setup."""

import json
import logging
from uuid import UUID

from teampool.infrastructure.observability import (
    JSONFormatter, KeyValueFormatter, setup_logging,
)

TEAM = UUID("7c9e6679-7425-40de-944b-e07fc1f90ae7")


def _record(**extra):
    record = logging.LogRecord(
        "teampool.services.team_registry", logging.INFO, __file__, 1,
        "Team deleted", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_surfaces_ledger_fields():
    line = JSONFormatter().format(_record(team_id=TEAM, expense_id=3))
    payload = json.loads(line)
    assert payload["message"] == "Team deleted"
    assert payload["level"] == "INFO"
    assert payload["team_id"] == str(TEAM)
    assert payload["expense_id"] == "3"
    assert "user_id" not in payload


def test_key_value_formatter_appends_fields():
    line = KeyValueFormatter().format(_record(user_id="u1"))
    assert line.endswith("Team deleted user_id=u1")


def test_setup_logging_does_not_stack_handlers():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    try:
        first = setup_logging("DEBUG", "text")
        second = setup_logging("INFO", "json")
        assert first not in root.handlers
        assert second in root.handlers
        assert isinstance(second.formatter, JSONFormatter)
        assert root.level == logging.INFO
    finally:
        root.handlers[:] = before
        root.setLevel(level)
