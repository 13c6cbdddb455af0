"""
Debug logger for tracking orchestrator events, chat calls, and API timing.

Writes per-session JSON Lines files to the logs/ directory.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


# Session-based logger registry to ensure same instance is reused
_logger_registry: Dict[str, "DebugLogger"] = {}


def get_or_create_logger(session_id: str, logs_dir: str = "logs") -> "DebugLogger":
    """
    Get an existing logger for the session or create a new one.

    Keeps one DebugLogger per session so counters accumulate across
    every API call made against that session.

    Args:
        session_id: Unique session identifier
        logs_dir: Directory to store log files (default: "logs")

    Returns:
        DebugLogger instance for this session
    """
    if session_id not in _logger_registry:
        _logger_registry[session_id] = DebugLogger(session_id, logs_dir)
    return _logger_registry[session_id]


def remove_logger(session_id: str) -> None:
    """Remove a logger from the registry (e.g., after the session ends)."""
    _logger_registry.pop(session_id, None)


class DebugLogger:
    """
    Debug logger that writes per-session JSON log files.

    Each session gets its own folder; entries are appended one JSON
    object per line.
    """

    def __init__(self, session_id: str, logs_dir: str = "logs"):
        self.session_id = session_id
        self.base_logs_dir = Path(logs_dir)
        self.session_dir = self.base_logs_dir / session_id
        self.log_file = self.session_dir / "session_logs.json"

        self.session_dir.mkdir(parents=True, exist_ok=True)

        self._event_count = 0
        self._chat_call_count = 0
        self._failed_chat_calls = 0
        self._total_chat_duration_ms = 0.0
        self._total_api_duration_ms = 0.0

    def _get_timestamp(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    def _append_to_log(self, entry: Dict[str, Any]) -> None:
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, ensure_ascii=False, default=str) + "\n")

    def log_event(
        self,
        event_type: str,
        action: str,
        details: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
    ) -> None:
        """
        Log an orchestrator debug event.

        Args:
            event_type: Source of the event (e.g., "orchestrator", "llm")
            action: Short description of what happened
            details: Structured context for the event
            duration_ms: Optional duration of the action
        """
        self._event_count += 1
        entry = {
            "type": "event",
            "timestamp": self._get_timestamp(),
            "session_id": self.session_id,
            "event_type": event_type,
            "action": action,
            "details": details or {},
        }
        if duration_ms is not None:
            entry["duration_ms"] = round(duration_ms, 2)
        self._append_to_log(entry)

    def log_chat_call(
        self,
        purpose: str,
        duration_ms: float,
        success: bool = True,
        error: Optional[str] = None,
    ) -> None:
        """
        Log a chat-completion call with its timing.

        Args:
            purpose: What the call was for (e.g., "free_text_answer")
            duration_ms: Time taken for the call in milliseconds
            success: Whether the call returned real content
            error: Error message if the call failed
        """
        self._chat_call_count += 1
        self._total_chat_duration_ms += duration_ms
        if not success:
            self._failed_chat_calls += 1

        entry = {
            "type": "chat_call",
            "timestamp": self._get_timestamp(),
            "session_id": self.session_id,
            "purpose": purpose,
            "duration_ms": round(duration_ms, 2),
            "success": success,
        }
        if error:
            entry["error"] = error
        self._append_to_log(entry)

    def log_api_timing(
        self,
        endpoint: str,
        duration_ms: float,
        phase: Optional[str] = None,
        success: bool = True,
        error: Optional[str] = None,
    ) -> None:
        """
        Log API endpoint timing.

        Args:
            endpoint: API endpoint path (e.g., "/api/quick-plan/respond")
            duration_ms: Total time for the API call in milliseconds
            phase: Session phase after the call (if applicable)
            success: Whether the API call succeeded
            error: Error message if the call failed
        """
        self._total_api_duration_ms += duration_ms

        entry = {
            "type": "api_timing",
            "timestamp": self._get_timestamp(),
            "session_id": self.session_id,
            "endpoint": endpoint,
            "duration_ms": round(duration_ms, 2),
            "success": success,
        }
        if phase is not None:
            entry["phase"] = phase
        if error:
            entry["error"] = error

        self._append_to_log(entry)

    def log_session_summary(self, final_phase: str, answered_fields: int) -> Dict[str, Any]:
        """
        Log and return a session summary with totals.

        Args:
            final_phase: Phase the session ended in
            answered_fields: Number of answered questions in the history

        Returns:
            Summary dictionary with all totals
        """
        summary = {
            "type": "session_summary",
            "timestamp": self._get_timestamp(),
            "session_id": self.session_id,
            "final_phase": final_phase,
            "answered_fields": answered_fields,
            **self.get_accumulated_stats(),
        }

        self._append_to_log(summary)
        return summary

    def get_accumulated_stats(self) -> Dict[str, Any]:
        """Get current accumulated statistics without logging."""
        return {
            "event_count": self._event_count,
            "chat_call_count": self._chat_call_count,
            "failed_chat_calls": self._failed_chat_calls,
            "total_chat_duration_ms": round(self._total_chat_duration_ms, 2),
            "total_api_duration_ms": round(self._total_api_duration_ms, 2),
        }
