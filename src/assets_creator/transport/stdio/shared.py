import json
import math
from typing import Any


class MessageParseError(ValueError):
    """Raised when a line is not valid JSON."""


def _reject_constant(name: str) -> Any:
    raise MessageParseError(f"Invalid JSON received: {name} is not a JSON value")


def _parse_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise MessageParseError(f"Invalid JSON received: {text} is out of range")
    return value


def parse_json_message(line: str) -> dict[str, Any] | None:
    """Parse a line as JSON message.

    NaN and Infinity are rejected, as are numbers too large for a float.

    Args:
        line: Raw line from stdin

    Returns:
        Parsed message dict, or None if the line is empty or the JSON value
        is not an object (both are ignored without a response)

    Raises:
        MessageParseError: If the line is not valid JSON
    """
    line = line.strip()
    if not line:
        return None  # Ignore empty lines

    try:
        message = json.loads(
            line, parse_constant=_reject_constant, parse_float=_parse_float
        )
    except json.JSONDecodeError as e:
        raise MessageParseError(f"Invalid JSON received: {e}") from e
    except RecursionError as e:
        raise MessageParseError("Invalid JSON received: nested too deeply") from e

    if not isinstance(message, dict):
        return None
    return message


def serialize_message(message: dict[str, Any]) -> str:
    """Serialize message to JSON string with validation.

    Non-ASCII text is written as-is unless it cannot be encoded as UTF-8
    (lone surrogates from client escapes or undecodable file names), in
    which case the whole message is ASCII-escaped.

    Args:
        message: JSON-RPC message to serialize

    Returns:
        JSON string representation, without embedded newlines

    Raises:
        ValueError: If message cannot be serialized
    """
    try:
        text = json.dumps(
            message, separators=(",", ":"), ensure_ascii=False, allow_nan=False
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise ValueError(f"Failed to serialize message to JSON: {e}") from e

    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        text = json.dumps(message, separators=(",", ":"), allow_nan=False)
    return text
