"""
Tool discovery and invocation types.

Tools are named operations a client can call with a JSON object of
arguments. Each tool advertises the shape of those arguments with a small
JSON Schema so clients know what to send.

## Invocation Flow

1. **Client discovers** - `tools/list` returns every registered `Tool`
2. **Client calls** - `tools/call` names a tool and passes its arguments
3. **Server answers** - a `CallToolResult` carrying text content

A tool that fails still produces a `CallToolResult`, with `is_error` set, so
the caller can read what went wrong. Only malformed calls (unknown tool,
arguments that are not an object) surface as protocol errors.
"""

from typing import Any, Literal

from pydantic import Field

from assets_creator.protocol.base import ProtocolModel, Result
from assets_creator.protocol.content import ContentList


class JSONSchema(ProtocolModel):
    """
    Object schema describing the arguments a tool accepts.
    """

    type: Literal["object"] = "object"
    properties: dict[str, dict[str, Any]] = Field(default_factory=dict)
    """
    Argument name to property schema, e.g. `{"type": "string"}`.
    """

    required: list[str] = Field(default_factory=list)
    """
    Arguments that must be present.
    """

    additional_properties: bool | None = Field(
        default=None, alias="additionalProperties"
    )
    """
    False when arguments outside `properties` are rejected.
    """


class Tool(ProtocolModel):
    """
    A named operation the server exposes to clients.
    """

    name: str
    """
    Unique snake_case identifier.
    """

    description: str | None = None
    """
    Human-readable summary shown to the client.
    """

    input_schema: JSONSchema = Field(alias="inputSchema")
    """
    Shape of the arguments object.
    """


class CallToolRequest(ProtocolModel):
    """
    A validated `tools/call` invocation.

    The session builds this only after confirming the tool exists and the
    arguments are an object.
    """

    method: Literal["tools/call"] = "tools/call"
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ListToolsResult(Result):
    """
    Catalog of tools, in registration order.
    """

    tools: list[Tool]
    next_cursor: str | None = Field(default=None, alias="nextCursor")
    """
    Continuation cursor. Always null since the catalog is never paginated.
    """

    def to_protocol(self) -> dict[str, Any]:
        data = super().to_protocol()
        data["nextCursor"] = self.next_cursor
        return data


class CallToolResult(Result):
    """
    Outcome of a tool call.

    Check `is_error` to tell a failed tool from a successful one. Both arrive
    as successful responses.
    """

    content: ContentList
    is_error: bool = Field(default=False, alias="isError")
