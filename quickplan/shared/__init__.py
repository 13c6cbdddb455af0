"""
Shared infrastructure for the planner.

Modules:
- llm: OpenAI client with retry logic
- logging: Structured JSON logging and per-session debug logs
- contracts: Session snapshot contract for export/import
"""

from quickplan.shared.llm.client import get_cached_client, call_llm
from quickplan.shared.logging.config import configure_logging, log_state_transition

__all__ = [
    "get_cached_client",
    "call_llm",
    "configure_logging",
    "log_state_transition",
]
