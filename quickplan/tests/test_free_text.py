"""
Tests for free-text interpretation through the orchestrator.
"""

import asyncio

from quickplan.orchestrator.free_text import (
    GENERAL_NOTE_MESSAGE,
    NOTED_MESSAGE,
    QUESTION_FALLBACK_MESSAGE,
    detect_command,
)
from quickplan.orchestrator.go_back import GO_BACK_FAILED_MESSAGE
from quickplan.tests.factories import FakeChat, drive, make_orchestrator


class TestDetectCommand:
    """Tests for detect_command."""

    def test_commands(self):
        """Navigation phrases map to commands."""
        assert detect_command("Let's start over") == "restart"
        assert detect_command("go back please") == "go_back"
        assert detect_command("  Skip ") == "skip"
        assert detect_command("I love beaches") is None


class TestProcessFreeText:
    """Tests for PlanningOrchestrator.process_free_text."""

    def test_go_back_at_start_fails(self):
        """Go back with nothing answered reports failure."""
        orchestrator = make_orchestrator()

        result = asyncio.run(orchestrator.process_free_text("go back"))

        assert result.type == "command"
        assert result.action_taken == "go_back_failed"
        assert result.response == GO_BACK_FAILED_MESSAGE

    def test_restart_resets_session(self):
        """Restart discards everything gathered so far."""
        orchestrator = make_orchestrator()

        async def run():
            await drive(orchestrator, stop_at="party")
            return await orchestrator.process_free_text("restart")

        result = asyncio.run(run())

        assert result.action_taken == "restart"
        assert orchestrator.state.question_history == []
        assert not orchestrator.state.is_known("destination")

    def test_skip_optional_question(self):
        """Skip works on an optional question."""
        orchestrator = make_orchestrator()

        async def run():
            await drive(orchestrator, stop_at="trip_occasion")
            return await orchestrator.process_free_text("skip")

        result = asyncio.run(run())

        assert result.action_taken == "skip"
        assert orchestrator.state.get_confidence("trip_occasion") == "inferred"

    def test_skip_required_question_fails(self):
        """Required questions cannot be skipped."""
        orchestrator = make_orchestrator()

        async def run():
            await orchestrator.get_next_question()
            return await orchestrator.process_free_text("skip")

        result = asyncio.run(run())

        assert result.action_taken == "skip_failed"
        assert not orchestrator.state.is_known("destination")

    def test_preference_note_attached_to_current_field(self):
        """Correction phrasing is noted against the field being asked."""
        orchestrator = make_orchestrator()

        async def run():
            await orchestrator.get_next_question()
            return await orchestrator.process_free_text("Actually we want somewhere warm")

        result = asyncio.run(run())

        assert result.type == "preference"
        assert result.action_taken == "added_note:destination"
        assert result.response == NOTED_MESSAGE
        assert orchestrator.state.preferences["user_notes"][0]["field"] == "destination"

    def test_question_answered_by_chat(self):
        """Questions are passed to the chat model."""
        chat = FakeChat(reply="Bali is lovely in June.")
        orchestrator = make_orchestrator(chat=chat)

        result = asyncio.run(orchestrator.process_free_text("Is June a good month?"))

        assert result.type == "question"
        assert result.response == "Bali is lovely in June."
        assert chat.prompts[0][-1]["content"] == "Is June a good month?"
        assert [m.role for m in orchestrator.state.messages] == ["user", "assistant"]

    def test_chat_failure_uses_fallback(self):
        """A failing chat model yields the canned reply."""
        orchestrator = make_orchestrator(chat=FakeChat(error=RuntimeError("offline")))

        result = asyncio.run(orchestrator.process_free_text("Do I need a visa?"))

        assert result.response == QUESTION_FALLBACK_MESSAGE

    def test_plain_text_is_general_note(self):
        """Anything else is remembered as a general note."""
        orchestrator = make_orchestrator()

        result = asyncio.run(orchestrator.process_free_text("We love street food"))

        assert result.response == GENERAL_NOTE_MESSAGE
        assert orchestrator.state.preferences["user_notes"][0]["field"] == "general"
