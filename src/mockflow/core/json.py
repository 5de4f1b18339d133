"""Fast, strict JSON encoding and decoding for project documents."""

from typing import Any
import json

import msgspec
import orjson


class JSONParseError(Exception):
    """JSON parsing failed."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


_decoder = msgspec.json.Decoder()


def decode_json(data: str | bytes) -> Any:
    """
    Decode a JSON document.

    msgspec is tried first; on failure the stdlib decoder is consulted only to
    produce a line/column error message.

    Args:
        data: JSON text or UTF-8 bytes

    Returns:
        Decoded Python value

    Raises:
        JSONParseError: If the document is not valid JSON
    """
    raw = data.encode("utf-8") if isinstance(data, str) else data

    try:
        return _decoder.decode(raw)
    except msgspec.DecodeError as e:
        try:
            json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as detailed:
            raise JSONParseError(f"Invalid JSON: {detailed}", detailed) from e
        raise JSONParseError(f"Invalid JSON: {e}", e) from e


def safe_json_dumps(obj: Any, **kwargs: Any) -> str:
    """
    Encode object to JSON string using the fastest available library.

    Args:
        obj: Object to encode
        **kwargs: indent (int), sort_keys (bool)

    Returns:
        JSON string
    """
    indent = kwargs.get("indent", 0)
    sort_keys = kwargs.get("sort_keys", False)

    options = 0
    if sort_keys:
        options |= orjson.OPT_SORT_KEYS
    if indent == 2:
        options |= orjson.OPT_INDENT_2

    if indent in (0, 2):
        try:
            return orjson.dumps(obj, option=options).decode("utf-8")
        except TypeError:
            # Fallback for edge cases (e.g., integers outside 64-bit range)
            pass

    if indent == 0 and not sort_keys:
        try:
            return msgspec.json.encode(obj).decode("utf-8")
        except (TypeError, ValueError):
            pass

    # Stdlib for other indents or as fallback (most compatible)
    return json.dumps(obj, indent=indent if indent > 0 else None, sort_keys=sort_keys)


def validate_json_size(data: str | bytes, max_size: int, name: str = "JSON") -> None:
    """
    Validate payload size before decoding.

    Raises:
        JSONParseError: If size exceeds limit
    """
    size = len(data.encode("utf-8")) if isinstance(data, str) else len(data)
    if size > max_size:
        raise JSONParseError(f"{name} size {size} bytes exceeds maximum {max_size} bytes")


def validate_json_depth(obj: Any, max_depth: int = 64, current_depth: int = 0) -> None:
    """
    Validate JSON nesting depth.

    Args:
        obj: Object to validate
        max_depth: Maximum allowed nesting depth
        current_depth: Current depth (internal)

    Raises:
        JSONParseError: If depth exceeds limit
    """
    if current_depth > max_depth:
        raise JSONParseError(f"JSON nesting depth {current_depth} exceeds maximum {max_depth}")

    if isinstance(obj, dict):
        for value in obj.values():
            validate_json_depth(value, max_depth, current_depth + 1)
    elif isinstance(obj, list):
        for item in obj:
            validate_json_depth(item, max_depth, current_depth + 1)
