"""LLM client utilities."""

from quickplan.shared.llm.client import (
    get_cached_client,
    call_llm,
    request_chat_completion,
    ChatCompletionError,
    FALLBACK_CHAT_RESPONSE,
)

__all__ = [
    "get_cached_client",
    "call_llm",
    "request_chat_completion",
    "ChatCompletionError",
    "FALLBACK_CHAT_RESPONSE",
]
