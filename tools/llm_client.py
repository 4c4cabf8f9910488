"""Model response parsing utilities.

Structured requests to the writing assistant ask for JSON, but models
often wrap it in markdown fences or surround it with prose. These helpers
dig the JSON value out.
"""

import json
import re
from typing import Any

# Precompiled regex for JSON extraction
_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)

# Lenient decoder that allows raw newlines and tabs inside JSON strings
_LENIENT_DECODER = json.JSONDecoder(strict=False)


def _try_loads(text: str) -> Any:
    """Try parsing JSON, first strictly then leniently."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    return _LENIENT_DECODER.decode(text)


def _candidates(text: str):
    yield text
    match = _JSON_FENCE_RE.search(text)
    if match:
        yield match.group(1).strip()
    for start_char, end_char in [("{", "}"), ("[", "]")]:
        start = text.find(start_char)
        end = text.rfind(end_char)
        if start != -1 and end > start:
            yield text[start:end + 1]


def parse_json_response(text: str) -> Any:
    """Extract and parse the JSON value in a model response.

    Tries the whole text, then a fenced code block, then the outermost
    object or array boundaries.

    Raises:
        ValueError: No candidate parses as JSON.
    """
    text = text.strip()
    for candidate in _candidates(text):
        try:
            return _try_loads(candidate)
        except json.JSONDecodeError:
            continue
    raise ValueError(f"Failed to parse JSON from model response: {text[:200]}...")


def parse_json_object(text: str) -> dict:
    """Parse a response that must be a JSON object.

    A list holding one object is unwrapped, since models sometimes return
    ``[{...}]`` when asked for ``{...}``.
    """
    result = parse_json_response(text)
    if isinstance(result, list) and len(result) == 1 and isinstance(result[0], dict):
        result = result[0]
    if not isinstance(result, dict):
        raise ValueError(f"Expected a JSON object, got {type(result).__name__}")
    return result


def parse_json_list(text: str, key: str = "items") -> list:
    """Parse a response that must be a JSON array.

    An object holding the array under ``key`` is accepted too.
    """
    result = parse_json_response(text)
    if isinstance(result, dict) and isinstance(result.get(key), list):
        result = result[key]
    if not isinstance(result, list):
        raise ValueError(f"Expected a JSON array, got {type(result).__name__}")
    return result
