"""JSON-RPC envelopes for outbound responses."""

from typing import Any, Literal, Self

from assets_creator.protocol.base import JSONRPC_VERSION, Error, ProtocolModel, Result

# Correlation tokens are echoed back verbatim, whatever JSON type they are.
RequestId = Any


class JSONRPCResponse(ProtocolModel):
    """Successful response to a request."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId
    result: Any = None

    @classmethod
    def from_result(cls, result: Result | Any, request_id: RequestId) -> Self:
        """Wrap a handler result for the given request.

        Result models are dumped to their wire form. Plain JSON values such as
        the "pong" of a ping or the null of a shutdown pass through unchanged.
        """
        payload = result.to_protocol() if isinstance(result, Result) else result
        return cls(id=request_id, result=payload)

    def to_wire(self) -> dict[str, Any]:
        # `result` must be present even when it is null.
        return {"jsonrpc": self.jsonrpc, "id": self.id, "result": self.result}


class JSONRPCError(ProtocolModel):
    """Error response to a request, or to a line that could not be parsed."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId = None
    error: Error

    @classmethod
    def from_error(cls, error: Error, request_id: RequestId = None) -> Self:
        return cls(id=request_id, error=error)

    def to_wire(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "error": self.error.to_protocol(),
        }
