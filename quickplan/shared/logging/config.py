"""
Service logging configuration.

One place sets up the root handler for the service, either as the pipe
separated text lines used in development or as JSON lines for log
collectors. Orchestrator phase transitions are logged through
log_state_transition so both formats carry the same summary.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-35s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("httpcore", "httpx", "openai")


class StructuredFormatter(logging.Formatter):
    """
    Formats records as one JSON object per line.

    State transitions logged through log_state_transition add their
    summary under "transition".
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        transition = getattr(record, "transition", None)
        if transition is not None:
            log_entry["transition"] = transition

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def configure_logging(level: int = logging.INFO, json_format: bool = False) -> logging.Handler:
    """
    Install the service's root log handler, replacing existing ones.

    Args:
        level: Root logging level
        json_format: Emit JSON lines instead of pipe separated text

    Returns:
        The installed stdout handler
    """
    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    logging.basicConfig(level=level, handlers=[handler], force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler


def summarize_state(state: Dict[str, Any]) -> Dict[str, Any]:
    confidence = state.get("confidence") or {}
    return {
        "phase": state.get("phase"),
        "answered_fields": len(state.get("question_history") or []),
        "known_fields": sum(1 for level in confidence.values() if level != "unknown"),
        "active_tradeoffs": len(state.get("active_tradeoffs") or []),
    }


def log_state_transition(
    event: str,
    state: Dict[str, Any],
    extra: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log an orchestrator state transition event.

    Args:
        event: Name of the event (e.g., "phase_change")
        state: Session state as a dict; only a summary is logged
        extra: Additional context such as the previous and next phase
        logger: Logger to use, defaults to the "quickplan" logger
    """
    logger = logger or logging.getLogger("quickplan")
    transition = {"event": event, "state_summary": summarize_state(state)}
    if extra:
        transition["extra"] = extra
    logger.info(f"State transition: {event}", extra={"transition": transition})
