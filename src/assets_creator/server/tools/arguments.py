"""Strict argument checking against a tool's input schema.

Clients are free to ignore the advertised schema, so handlers run every call
through `validate_arguments` before doing any I/O.
"""

from typing import Any

from jsonschema import Draft7Validator, ValidationError

from assets_creator.protocol.tools import JSONSchema
from assets_creator.server.exceptions import InvalidArgumentError

# Unknown fields are reported first, then missing ones, then bad values.
_KEYWORD_ORDER = {"additionalProperties": 0, "required": 1}

_TYPE_NOUNS = {
    "string": "a string",
    "boolean": "a boolean",
    "number": "a number",
    "integer": "an integer",
}


def validate_arguments(
    arguments: dict[str, Any], schema: JSONSchema
) -> dict[str, Any]:
    """Check arguments against a schema and fill in declared defaults.

    Booleans are never accepted where a number is expected, and null is never
    accepted for any declared field.

    Args:
        arguments: Raw arguments object from the `tools/call` request.
        schema: The tool's input schema.

    Returns:
        dict: A new dict with the validated arguments plus any defaults
            declared in the schema for absent optional fields.

    Raises:
        InvalidArgumentError: On a missing required field, an unknown field
            when `additionalProperties` is false, or a type mismatch. The
            message names the offending field.
    """
    validator = Draft7Validator(schema.to_protocol())
    field_order = list(schema.properties)

    def sort_key(error: ValidationError) -> tuple[int, int]:
        if error.validator in _KEYWORD_ORDER:
            return _KEYWORD_ORDER[error.validator], 0
        name = error.path[0] if error.path else None
        position = field_order.index(name) if name in field_order else len(field_order)
        return len(_KEYWORD_ORDER), position

    errors = sorted(validator.iter_errors(arguments), key=sort_key)
    if errors:
        raise InvalidArgumentError(_describe(errors[0], arguments, schema))

    validated: dict[str, Any] = {}
    for name, property_schema in schema.properties.items():
        if name in arguments:
            validated[name] = arguments[name]
        elif "default" in property_schema:
            validated[name] = property_schema["default"]
    return validated


def _describe(
    error: ValidationError, arguments: dict[str, Any], schema: JSONSchema
) -> str:
    if error.validator == "additionalProperties":
        unknown = next(name for name in arguments if name not in schema.properties)
        return f"Unknown argument '{unknown}'."

    if error.validator == "required":
        missing = next(name for name in error.validator_value if name not in arguments)
        return f"'{missing}' is required."

    if error.validator == "type" and error.path and isinstance(error.validator_value, str):
        expected = error.validator_value
        noun = _TYPE_NOUNS.get(expected, f"of type {expected}")
        return f"'{error.path[0]}' must be {noun}."

    if error.path:
        return f"'{error.path[0]}': {error.message}"
    return error.message
