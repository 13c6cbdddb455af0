"""
Response parser for suggestion fetches.

Extracts the first JSON array literal from a free-form model reply and
validates it as a non-empty list of option dicts.
"""

import json
import logging
import re
from typing import Dict, Any, List


logger = logging.getLogger(__name__)

ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")


class ParseError(Exception):
    """Raised when response parsing fails."""

    pass


def extract_json_array(raw_response: str) -> str:
    """
    Extract the outermost JSON array from an LLM response.

    Args:
        raw_response: Raw LLM response string, possibly wrapped in prose
            or markdown code fences

    Returns:
        The array literal as a string

    Raises:
        ParseError: If the response contains no array literal
    """
    match = ARRAY_PATTERN.search(raw_response or "")
    if not match:
        raise ParseError(f"No JSON array found in response: {raw_response!r}")
    return match.group(0)


def parse_option_list(raw_response: str) -> List[Dict[str, Any]]:
    """
    Parse a suggestion reply into a list of option dicts.

    Entries without an id are dropped; a label defaults to the id.

    Raises:
        ParseError: If the JSON is malformed or yields no usable options
    """
    json_str = extract_json_array(raw_response)

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse suggestion JSON: {e}\nContent: {json_str}")

    if not isinstance(data, list) or not data:
        raise ParseError("Suggestion response is not a non-empty array")

    options = []
    for item in data:
        if not isinstance(item, dict) or not item.get("id"):
            continue
        option = dict(item)
        option["id"] = str(option["id"])
        option.setdefault("label", option["id"])
        options.append(option)

    if not options:
        raise ParseError("Suggestion response contained no options with an id")
    return options
