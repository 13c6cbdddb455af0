"""Prompt templates and builders for the planning orchestrator."""

from quickplan.orchestrator.prompts.templates import (
    SuggestionPromptConfig,
    MESSAGE_TEMPLATES,
    MESSAGE_FALLBACK,
    pick_template,
)
from quickplan.orchestrator.prompts.builders import (
    destination_name,
    summarize_known_preferences,
    build_community_suggestion_messages,
    build_activity_suggestion_messages,
    build_persona_messages,
    build_free_text_messages,
)

__all__ = [
    "SuggestionPromptConfig",
    "MESSAGE_TEMPLATES",
    "MESSAGE_FALLBACK",
    "pick_template",
    "destination_name",
    "summarize_known_preferences",
    "build_community_suggestion_messages",
    "build_activity_suggestion_messages",
    "build_persona_messages",
    "build_free_text_messages",
]
