"""Test structured logging setup and message-id propagation."""

import json
import logging

import pytest
import structlog

from message_mapping.observability.logger import (
    _add_message_id,
    _StderrHandler,
    get_logger,
    get_message_id,
    reset_message_id,
    set_message_id,
    setup_logging,
)


@pytest.fixture
def configured_logging():
    root = logging.getLogger()
    level = root.level
    yield
    for handler in [h for h in root.handlers if isinstance(h, _StderrHandler)]:
        root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()


class TestMessageIdProcessor:
    def test_adds_bound_message_id(self):
        token = set_message_id("msg-123")
        try:
            event = _add_message_id(None, "info", {"event": "x"})
            assert event["message_id"] == "msg-123"
            assert get_message_id() == "msg-123"
        finally:
            reset_message_id(token)

    def test_omits_empty_message_id(self):
        assert get_message_id() == ""
        assert "message_id" not in _add_message_id(None, "info", {"event": "x"})

    def test_reset_restores_previous_id(self):
        outer = set_message_id("outer")
        inner = set_message_id("inner")
        reset_message_id(inner)
        assert get_message_id() == "outer"
        reset_message_id(outer)
        assert get_message_id() == ""


class TestSetupLogging:
    def test_stdlib_records_carry_message_id(self, configured_logging, capsys):
        setup_logging(level="DEBUG", format="json")
        token = set_message_id("msg-9")
        try:
            logging.getLogger("message_mapping.bus").info("dispatched")
        finally:
            reset_message_id(token)

        line = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert line["event"] == "dispatched"
        assert line["message_id"] == "msg-9"
        assert line["logger"] == "message_mapping.bus"

    def test_structlog_logger_uses_same_renderer(self, configured_logging, capsys):
        setup_logging(level="INFO", format="json")
        get_logger("message_mapping.cli").info("described", parameters=2)

        line = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert line["event"] == "described"
        assert line["parameters"] == 2
        assert line["level"] == "info"

    def test_setup_twice_keeps_one_handler(self, configured_logging):
        setup_logging(level="INFO", format="console")
        setup_logging(level="WARNING", format="console")
        ours = [h for h in logging.getLogger().handlers if isinstance(h, _StderrHandler)]
        assert len(ours) == 1
        assert logging.getLogger().level == logging.WARNING
