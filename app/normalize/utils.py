from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import Any


class AIResponseFormatError(ValueError):
    pass


def round_half_up(value: float) -> int:
    """Round like a browser's Math.round: halves go towards +infinity."""
    return int(math.floor(value + 0.5))


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def clamp_score(value: float, low: int = 0, high: int = 100) -> int:
    if value >= high:
        return high
    if value <= low:
        return low
    return max(low, min(high, round_half_up(value)))


def get_field(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key)
    return None


def string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def extract_response_text(response: Any) -> str:
    """Return the text payload of an AI completion response.

    The completion collaborator answers ``{"message": {"content": ...}}`` where
    content is either a string or a list of ``{"text": ...}`` parts, of which
    only the first is used.
    """
    message = get_field(response, "message")
    content = get_field(message, "content")
    if isinstance(content, str):
        return content
    if isinstance(content, list) and content:
        text = get_field(content[0], "text")
        if isinstance(text, str):
            return text
    raise AIResponseFormatError("AI response has no text content")


def parse_json_object(text: str) -> dict[str, Any]:
    parsed = json.loads(text)
    if not isinstance(parsed, dict):
        raise AIResponseFormatError("AI response is not a JSON object")
    return parsed
