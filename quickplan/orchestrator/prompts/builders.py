"""
Prompt builders for the planning orchestrator.

These functions turn session preferences into the chat messages sent to
the LLM.
"""

from typing import Dict, Any, List, Optional

from quickplan.orchestrator.prompts.templates import (
    SuggestionPromptConfig,
    PERSONA_SYSTEM_PROMPT,
    FREE_TEXT_SYSTEM_PROMPT,
    COMMUNITY_SUGGESTION_SYSTEM_PROMPT,
    COMMUNITY_SUGGESTION_PROMPT_TEMPLATE,
    ACTIVITY_SUGGESTION_SYSTEM_PROMPT,
    ACTIVITY_SUGGESTION_PROMPT_TEMPLATE,
)


def destination_name(preferences: Dict[str, Any]) -> str:
    """Canonical destination name, falling back to the raw input."""
    context = preferences.get("destination_context") or {}
    return context.get("canonical_name") or context.get("raw_input") or ""


def summarize_known_preferences(preferences: Dict[str, Any]) -> str:
    """
    Summarize gathered preferences as a bullet list for LLM context.

    Args:
        preferences: Session preferences dict

    Returns:
        Bullet lines, or "- Nothing yet" when nothing is known
    """
    lines = []
    if preferences.get("destination_context"):
        lines.append(f"- Destination: {destination_name(preferences)}")
    if preferences.get("start_date") and preferences.get("end_date"):
        lines.append(f"- Dates: {preferences['start_date']} to {preferences['end_date']}")
    if preferences.get("adults"):
        lines.append(
            f"- Party: {preferences['adults']} adults, {preferences.get('children') or 0} children"
        )
    budget = preferences.get("budget_per_night")
    if budget:
        lines.append(f"- Budget: ${budget['min']}-{budget['max']}/night")
    if preferences.get("pace"):
        lines.append(f"- Pace: {preferences['pace']}")
    activities = preferences.get("selected_activities") or []
    if activities:
        lines.append(f"- Activities: {', '.join(a['type'] for a in activities)}")

    return "\n".join(lines) if lines else "- Nothing yet"


# =============================================================================
# Suggestion Messages
# =============================================================================


def build_community_suggestion_messages(destination: str) -> List[Dict[str, str]]:
    config = SuggestionPromptConfig(destination=destination)
    return [
        {"role": "system", "content": COMMUNITY_SUGGESTION_SYSTEM_PROMPT},
        {"role": "user", "content": config.format_prompt(COMMUNITY_SUGGESTION_PROMPT_TEMPLATE)},
    ]


def build_activity_suggestion_messages(destination: str) -> List[Dict[str, str]]:
    config = SuggestionPromptConfig(destination=destination)
    return [
        {"role": "system", "content": ACTIVITY_SUGGESTION_SYSTEM_PROMPT},
        {"role": "user", "content": config.format_prompt(ACTIVITY_SUGGESTION_PROMPT_TEMPLATE)},
    ]


# =============================================================================
# Persona Messages
# =============================================================================


def build_persona_prompt(
    message_type: str,
    preferences: Dict[str, Any],
    data: Optional[List[Dict[str, Any]]] = None,
) -> str:
    """
    Build the user prompt for a context-aware assistant message.

    Args:
        message_type: area_recommendation, activity_suggestion, follow_up, ...
        preferences: Session preferences dict
        data: Areas or activities the message should present

    Returns:
        Prompt string
    """
    destination = destination_name(preferences) or "your destination"
    data = data or []

    if message_type == "area_recommendation":
        area_lines = "\n".join(
            f"- {a.get('name')}: {a.get('description', '')} ({', '.join(a.get('best_for') or [])})"
            for a in data
        )
        return (
            f"Write a friendly message presenting these area options for a trip to {destination}:\n"
            f"{area_lines}\n\n"
            "Mention why each area might be good based on what the user wants. Keep it to 2-3 sentences."
        )

    if message_type == "activity_suggestion":
        activity_lines = "\n".join(
            f"- {a.get('name')} ({a.get('reddit_mentions', 0)} Reddit mentions)" for a in data[:3]
        )
        return (
            f"Suggest these verified activities for {destination}:\n"
            f"{activity_lines}\n\n"
            "Be enthusiastic but not over the top. Mention these are from Reddit. 2-3 sentences."
        )

    if message_type == "follow_up":
        return (
            f"Generate a natural follow-up question about the user's trip to {destination}.\n"
            f"Current context: {summarize_known_preferences(preferences)}\n\n"
            "Ask something that would help personalize their experience. Keep it casual."
        )

    return f"Write a brief, friendly message helping with trip planning to {destination}."


def build_persona_messages(
    message_type: str,
    preferences: Dict[str, Any],
    data: Optional[List[Dict[str, Any]]] = None,
) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": PERSONA_SYSTEM_PROMPT},
        {"role": "user", "content": build_persona_prompt(message_type, preferences, data)},
    ]


def build_free_text_messages(text: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": FREE_TEXT_SYSTEM_PROMPT},
        {"role": "user", "content": text},
    ]
