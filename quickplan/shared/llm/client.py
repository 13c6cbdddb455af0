"""
OpenAI client with retry logic.

Provides a cached async client instance and a chat-completion wrapper
that retries with capped exponential backoff using tenacity. The wrapper
never raises: after the last attempt it logs the failure and returns a
canned apology string.
"""

import logging
import os
from typing import List, Dict, Optional

from openai import AsyncOpenAI
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)
from dotenv import load_dotenv
load_dotenv()


logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4.1-mini"

FALLBACK_CHAT_RESPONSE = (
    "I'm having a bit of trouble processing that. Let me try a different approach."
)

# Module-level cache for OpenAI client
_client: Optional[AsyncOpenAI] = None


class ChatCompletionError(Exception):
    """Raised when the chat-completion service returns no usable content."""

    pass


def get_cached_client() -> AsyncOpenAI:
    """
    Returns a cached instance of the async OpenAI client.

    Uses OPENAI_API_KEY_1 environment variable for authentication.
    The client is created once and reused for all subsequent calls.
    """
    global _client
    if _client is None:
        api_key = os.environ.get("OPENAI_API_KEY_1")
        if not api_key:
            raise ValueError(
                "OPENAI_API_KEY_1 environment variable is not set. "
                "Please set it to your OpenAI API key."
            )
        _client = AsyncOpenAI(api_key=api_key)
    return _client


async def request_chat_completion(
    messages: List[Dict[str, str]],
    temperature: float = 0.7,
    model: str = DEFAULT_MODEL,
    client: Optional[AsyncOpenAI] = None,
) -> str:
    """
    Make a single chat-completion request.

    Args:
        messages: List of message dicts with 'role' and 'content' keys
        temperature: Sampling temperature
        model: Model identifier to use
        client: Optional client instance. If not provided, uses cached client.

    Returns:
        The assistant's response content as a string.

    Raises:
        ChatCompletionError: If the response carries no content.
    """
    if client is None:
        client = get_cached_client()

    response = await client.chat.completions.create(
        model=model,
        messages=messages,
        temperature=temperature,
    )

    content = response.choices[0].message.content if response.choices else None
    if not content or not content.strip():
        raise ChatCompletionError("Empty chat-completion response")

    return content.strip()


async def call_llm(
    messages: List[Dict[str, str]],
    temperature: float = 0.7,
    model: str = DEFAULT_MODEL,
    client: Optional[AsyncOpenAI] = None,
    max_attempts: int = 3,
    backoff_multiplier: float = 0.5,
    backoff_cap: float = 4.0,
) -> str:
    """
    Call the chat-completion API with bounded retries.

    Every exception (network error, non-success status, empty content) is
    retryable. Waits grow as backoff_multiplier * 2**n seconds, capped at
    backoff_cap.

    Args:
        messages: List of message dicts with 'role' and 'content' keys
        temperature: Sampling temperature
        model: Model identifier to use (default: gpt-4.1-mini)
        client: Optional client instance. If not provided, uses cached client.
        max_attempts: Total number of attempts before giving up
        backoff_multiplier: Base wait in seconds
        backoff_cap: Maximum wait between attempts in seconds

    Returns:
        The assistant's response, or FALLBACK_CHAT_RESPONSE once every
        attempt has failed.
    """
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=backoff_multiplier, max=backoff_cap),
            retry=retry_if_exception_type((Exception,)),
            reraise=True,
        ):
            with attempt:
                return await request_chat_completion(
                    messages,
                    temperature=temperature,
                    model=model,
                    client=client,
                )
    except Exception as e:
        logger.error(f"[llm] All {max_attempts} chat attempts exhausted: {e}")
    return FALLBACK_CHAT_RESPONSE
