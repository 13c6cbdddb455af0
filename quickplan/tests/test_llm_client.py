"""
Tests for the chat-completion client wrapper.
"""

import asyncio
from types import SimpleNamespace

import pytest

from quickplan.shared.llm.client import (
    FALLBACK_CHAT_RESPONSE,
    ChatCompletionError,
    call_llm,
    request_chat_completion,
)


MESSAGES = [{"role": "user", "content": "Hello"}]


def _response(content):
    """Build an object shaped like a chat-completion response."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeClient:
    """Async client stand-in that replays scripted outcomes."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.requests = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    async def _create(self, **kwargs):
        self.requests.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return _response(outcome)


class TestRequestChatCompletion:
    """Tests for a single chat-completion request."""

    def test_returns_stripped_content(self):
        """Content is returned without surrounding whitespace."""
        client = FakeClient(["  Hi there!  "])

        result = asyncio.run(request_chat_completion(MESSAGES, temperature=0.2, model="m", client=client))

        assert result == "Hi there!"
        assert client.requests[0] == {"model": "m", "messages": MESSAGES, "temperature": 0.2}

    def test_empty_content_raises(self):
        """Blank content is an error so the caller can retry."""
        client = FakeClient(["   "])
        with pytest.raises(ChatCompletionError):
            asyncio.run(request_chat_completion(MESSAGES, client=client))


class TestCallLLM:
    """Tests for call_llm retries and fallback."""

    def test_retries_until_success(self):
        """Failures before the last attempt are retried."""
        client = FakeClient([RuntimeError("network"), None, "Finally"])

        result = asyncio.run(call_llm(MESSAGES, client=client, max_attempts=3, backoff_multiplier=0))

        assert result == "Finally"
        assert len(client.requests) == 3

    def test_exhausted_attempts_return_fallback(self):
        """Once every attempt fails the canned response is returned."""
        client = FakeClient([RuntimeError("down")] * 2)

        result = asyncio.run(call_llm(MESSAGES, client=client, max_attempts=2, backoff_multiplier=0))

        assert result == FALLBACK_CHAT_RESPONSE
        assert len(client.requests) == 2
