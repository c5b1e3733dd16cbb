"""Tolerant JSON extraction from LLM output, with multiple decoding backends."""

from typing import Any
import json
import re

import msgspec
import orjson
from json_repair import repair_json

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n?(.*?)\n?```\s*$", re.DOTALL)
_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence (```json, ```html, ...) if present."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()

    # Fence somewhere inside chatty output
    if "```" in stripped:
        start = stripped.find("```")
        newline = stripped.find("\n", start)
        end = stripped.find("```", start + 3)
        if newline != -1 and end != -1 and newline < end:
            return stripped[newline + 1 : end].strip()
    return stripped


def _decode(payload: str, repair: bool) -> Any:
    # msgspec first (fastest), then stdlib, then json_repair
    try:
        return msgspec.json.decode(payload.encode("utf-8"))
    except msgspec.DecodeError as e:
        if not repair:
            raise JSONParseError(f"Invalid JSON: {e}", e)

    try:
        return json.loads(payload)
    except json.JSONDecodeError:
        pass

    try:
        return json.loads(repair_json(payload))
    except Exception as repair_error:
        raise JSONParseError(f"JSON repair failed: {repair_error}", repair_error)


def extract_json(text: str, repair: bool = True) -> dict[str, Any]:
    """
    Extract and parse a JSON object from model output.

    Args:
        text: Text containing JSON, possibly wrapped in prose or code fences
        repair: Attempt to repair invalid JSON with json_repair

    Returns:
        Parsed JSON dictionary

    Raises:
        JSONParseError: If no object can be decoded
    """
    working = strip_code_fences(text)
    start = working.find("{")
    end = working.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise JSONParseError("No JSON object found in text")

    result = _decode(working[start : end + 1], repair)
    if not isinstance(result, dict):
        raise JSONParseError(f"Expected dict, got {type(result).__name__}")
    return result


def extract_json_array(text: str, repair: bool = True) -> list[Any]:
    """
    Extract the first JSON array span from model output.

    Raises:
        JSONParseError: If no array can be decoded
    """
    match = _ARRAY_RE.search(strip_code_fences(text))
    if match is None:
        raise JSONParseError("No JSON array found in text")

    result = _decode(match.group(0), repair)
    if not isinstance(result, list):
        raise JSONParseError(f"Expected list, got {type(result).__name__}")
    return result


def safe_json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    Encode object to a JSON string.

    Compact output goes through orjson; ``indent`` falls back to stdlib.
    """
    indent = kwargs.get("indent", 0)

    if indent == 0:
        try:
            return orjson.dumps(obj).decode("utf-8")
        except (TypeError, ValueError):
            # e.g. integers outside the 64-bit range
            pass

    return json.dumps(obj, indent=indent if indent > 0 else None, default=str)
