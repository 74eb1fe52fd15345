"""Structured Logging — tests for JSON log lines and handler setup."""

import json
import logging

import pytest

from countdown_todo.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "countdown_todo.services", logging.WARNING, __file__, 1,
        "Command %s failed", ("timer_create",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_extras():
    line = JSONFormatter().format(_record(command="timer_create", error_code="COMMAND_FAILED"))
    log = json.loads(line)
    assert log["level"] == "WARNING"
    assert log["message"] == "Command timer_create failed"
    assert log["command"] == "timer_create"
    assert log["error_code"] == "COMMAND_FAILED"
    assert "timer_id" not in log


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_does_not_stack_handlers(root_logger):
    root = root_logger
    before = len(root.handlers)
    setup_logging("DEBUG", "json")
    setup_logging("INFO", "text")
    assert len(root.handlers) == before + 1
    assert root.level == logging.INFO
