"""Model response parsing utilities.

Gemini is asked for JSON via ``response_mime_type`` but still occasionally
wraps it in markdown fences or prose; these helpers recover the payload.
"""

import json
import re
from typing import Any

# Precompiled regex for JSON extraction
_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)

# Lenient decoder that allows control characters (raw newlines, tabs) inside
# JSON strings: models frequently produce these instead of proper \n escapes.
_LENIENT_DECODER = json.JSONDecoder(strict=False)

_WRAPPING_QUOTES = "\"'“”"


def _try_loads(text: str) -> Any:
    """Try parsing JSON, first strictly then leniently."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    try:
        return _LENIENT_DECODER.decode(text)
    except json.JSONDecodeError:
        pass
    raise json.JSONDecodeError("", text, 0)


def parse_json_response(text: str) -> Any:
    """Extract and parse JSON from model response text.

    Handles cases where JSON is wrapped in markdown code fences or
    surrounded by prose, and tolerates unescaped newlines inside strings.

    Raises:
        ValueError: If no JSON value can be recovered.
    """
    text = text.strip()

    try:
        return _try_loads(text)
    except json.JSONDecodeError:
        pass

    match = _JSON_FENCE_RE.search(text)
    if match:
        try:
            return _try_loads(match.group(1).strip())
        except json.JSONDecodeError:
            pass

    # Try finding JSON array or object boundaries
    for start_char, end_char in [("[", "]"), ("{", "}")]:
        start = text.find(start_char)
        end = text.rfind(end_char)
        if start != -1 and end != -1 and end > start:
            try:
                return _try_loads(text[start:end + 1])
            except json.JSONDecodeError:
                continue

    raise ValueError(f"Failed to parse JSON from model response: {text[:200]}...")


def as_string_list(result: Any) -> list[str]:
    """Normalize a parsed JSON value to a list of non-blank strings.

    A dict holding a single list value (``{"scenes": [...]}``) is unwrapped.

    Raises:
        ValueError: If the value holds no array.
    """
    if isinstance(result, dict):
        lists = [v for v in result.values() if isinstance(v, list)]
        if len(lists) != 1:
            raise ValueError(f"Expected a JSON array, got object with keys {list(result)[:5]}")
        result = lists[0]
    if not isinstance(result, list):
        raise ValueError(f"Expected a JSON array, got {type(result).__name__}")
    return [item.strip() for item in result if isinstance(item, str) and item.strip()]


def clean_plain_text(text: str) -> str:
    """Trim whitespace and one pair of wrapping quotes from a one-line answer."""
    text = text.strip()
    if len(text) >= 2 and text[0] in _WRAPPING_QUOTES and text[-1] in _WRAPPING_QUOTES:
        text = text[1:-1].strip()
    return text
