"""Logging configuration and utilities."""

from quickplan.shared.logging.config import configure_logging, log_state_transition, StructuredFormatter
from quickplan.shared.logging.debug_logger import (
    DebugLogger,
    get_or_create_logger,
    remove_logger,
)

__all__ = [
    "configure_logging",
    "log_state_transition",
    "StructuredFormatter",
    "DebugLogger",
    "get_or_create_logger",
    "remove_logger",
]
