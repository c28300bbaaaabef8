"""
JSON helpers for model output.

Planner replies are supposed to be a bare JSON object but arrive fenced,
wrapped in chatter, or with trailing commas. ``extract_json`` tolerates all
three; anything else is a ``JSONParseError``.
"""

from typing import Any
import json
import re

import msgspec
import orjson
from json_repair import repair_json


_FENCE_OPEN = re.compile(r"^```[A-Za-z]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")


class JSONParseError(Exception):
    """Model output did not contain a usable JSON object."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def strip_code_fence(text: str) -> str:
    """
    Remove a surrounding markdown code fence (```json, ```tsx, bare ```).

    Text that does not start with a fence is returned trimmed but otherwise
    untouched.
    """
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    stripped = _FENCE_OPEN.sub("", stripped, count=1)
    stripped = _FENCE_CLOSE.sub("", stripped, count=1)
    return stripped.strip()


def _object_span(text: str) -> str:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        raise JSONParseError("No JSON object found in text")
    return text[start:end + 1]


def extract_json(text: str, repair: bool = True) -> dict[str, Any]:
    """
    Parse the outermost JSON object in model output.

    Args:
        text: Model reply, optionally fenced or surrounded by prose
        repair: Fall back to json_repair when strict decoding fails

    Raises:
        JSONParseError: No object found, or it could not be decoded
    """
    candidate = _object_span(strip_code_fence(text))

    try:
        result = msgspec.json.decode(candidate)
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e)
        try:
            result = json.loads(repair_json(candidate))
        except ValueError as repair_error:
            raise JSONParseError(f"JSON repair failed: {repair_error}", repair_error)

    if not isinstance(result, dict):
        raise JSONParseError(f"Expected dict, got {type(result).__name__}")
    return result


def safe_json_dumps(obj: Any, indent: int = 0) -> str:
    """
    Encode ``obj`` for embedding in a prompt.

    orjson handles the common case; values it rejects (big ints, odd types)
    go through the stdlib encoder with ``str`` as the fallback.
    """
    option = orjson.OPT_INDENT_2 if indent == 2 else 0
    if indent in (0, 2):
        try:
            return orjson.dumps(obj, option=option).decode("utf-8")
        except TypeError:
            pass
    return json.dumps(obj, indent=indent or None, default=str)
