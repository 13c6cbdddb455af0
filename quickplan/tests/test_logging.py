"""
Tests for service logging configuration and state transition logs.
"""

import json
import logging

import pytest

from quickplan.shared.logging import StructuredFormatter, configure_logging, log_state_transition


@pytest.fixture
def restore_root_logging():
    """Put the root logger's handlers and level back after the test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


def _state():
    return {
        "phase": "enriching",
        "question_history": ["destination", "dates"],
        "confidence": {"destination": "complete", "dates": "complete", "party": "unknown"},
        "active_tradeoffs": [],
    }


class TestLogStateTransition:
    """Tests for log_state_transition."""

    def test_summary_attached_to_record(self, caplog):
        """The record carries the event and a state summary."""
        with caplog.at_level(logging.INFO, logger="quickplan.test"):
            log_state_transition(
                "phase_change",
                _state(),
                extra={"from": "gathering", "to": "enriching"},
                logger=logging.getLogger("quickplan.test"),
            )

        record = caplog.records[-1]
        assert record.getMessage() == "State transition: phase_change"
        assert record.transition["state_summary"] == {
            "phase": "enriching",
            "answered_fields": 2,
            "known_fields": 2,
            "active_tradeoffs": 0,
        }
        assert record.transition["extra"]["to"] == "enriching"


class TestStructuredFormatter:
    """Tests for StructuredFormatter."""

    def test_transition_serialized_as_json(self):
        """Transition summaries appear in the JSON line."""
        record = logging.LogRecord("quickplan", logging.INFO, __file__, 1, "State transition: go_back", None, None)
        record.transition = {"event": "go_back"}

        entry = json.loads(StructuredFormatter().format(record))

        assert entry["level"] == "INFO"
        assert entry["message"] == "State transition: go_back"
        assert entry["transition"] == {"event": "go_back"}

    def test_plain_record_has_no_transition(self):
        """Ordinary log lines only carry the base fields."""
        record = logging.LogRecord("quickplan", logging.WARNING, __file__, 1, "hello %s", ("there",), None)

        entry = json.loads(StructuredFormatter().format(record))

        assert entry["message"] == "hello there"
        assert "transition" not in entry


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_format_installs_structured_handler(self, restore_root_logging):
        """JSON mode puts the structured formatter on the root handler."""
        handler = configure_logging(level=logging.DEBUG, json_format=True)

        root = logging.getLogger()
        assert handler in root.handlers
        assert isinstance(handler.formatter, StructuredFormatter)
        assert root.level == logging.DEBUG
        assert logging.getLogger("openai").level == logging.WARNING

    def test_text_format_by_default(self, restore_root_logging):
        """Text mode keeps the pipe separated format."""
        handler = configure_logging()

        assert not isinstance(handler.formatter, StructuredFormatter)
        assert "%(levelname)-8s" in handler.formatter._fmt
