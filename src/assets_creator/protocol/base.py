"""
Base types shared by every protocol message.

Everything that crosses the wire is a pydantic model. Fields use snake_case
in Python and are serialized with their camelCase aliases.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

PROTOCOL_VERSION = "2024-01-01"

# JSON-RPC error codes
PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

JSONRPC_VERSION = "2.0"


class ProtocolModel(BaseModel):
    """Base model for protocol types.

    Accepts both field names and aliases on input, dumps aliases on output.
    """

    model_config = ConfigDict(populate_by_name=True)

    def to_protocol(self) -> dict[str, Any]:
        """Dump to a wire-ready dict, dropping unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Result(ProtocolModel):
    """
    Base class for the `result` payload of a successful response.
    """


class Error(ProtocolModel):
    """
    Protocol-level failure reported in the `error` member of a response.

    Tool failures never use this type. They travel inside a successful
    result with `isError` set.
    """

    code: int
    """
    JSON-RPC error code.
    """

    message: str
    """
    Short human-readable description of the failure.
    """

    data: Any | None = None
    """
    Optional extra detail about the failure.
    """
