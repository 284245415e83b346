"""Protocol engine for a single stdio session.

Reads one message at a time from the transport, routes it, and writes the
response before reading the next one. Requests (messages with an `id`) get
exactly one response each, in the order they arrived. Notifications never
get one.
"""

import logging
import sys
from typing import Any, Awaitable, Callable

from assets_creator.generation.gemini import GeminiClient, GeminiError
from assets_creator.protocol.base import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    Error,
    Result,
)
from assets_creator.protocol.initialization import InitializeResult
from assets_creator.protocol.jsonrpc import JSONRPCError, JSONRPCResponse, RequestId
from assets_creator.protocol.tools import (
    CallToolRequest,
    CallToolResult,
    ListToolsResult,
)
from assets_creator.sandbox.paths import PathResolver
from assets_creator.server.config import ServerConfig
from assets_creator.server.managers.tools import ToolManager
from assets_creator.server.tools.filesystem import FilesystemTools
from assets_creator.server.tools.generation import GenerationTools
from assets_creator.transport.base import Transport, TransportMessage

logger = logging.getLogger(__name__)

# Handler signatures - separate for requests vs notifications
RequestHandler = Callable[[dict[str, Any]], Awaitable[Result | Error | Any]]
NotificationHandler = Callable[[dict[str, Any]], Awaitable[None]]


class ServerSession:
    def __init__(
        self,
        transport: Transport,
        config: ServerConfig,
        generator: GeminiClient | None = None,
    ):
        """Build the session and its tool registry.

        Args:
            transport: Message stream to the client.
            config: Root, model and server identity.
            generator: Gemini client to use. When omitted, one is built from
                the config; if that fails, generation is disabled and
                `call_gemini` reports it per call.
        """
        self.transport = transport
        self.server_config = config
        self.paths = PathResolver(config.root)
        self.generator = generator if generator is not None else self._create_generator()

        logger.debug(f"Using root: {self.paths.root}")

        self.tools = ToolManager()
        FilesystemTools(self.paths).register(self.tools)
        GenerationTools(self.generator).register(self.tools)

    def _create_generator(self) -> GeminiClient | None:
        try:
            return GeminiClient(self.server_config.model, self.server_config.api_key)
        except GeminiError as e:
            logger.debug(str(e))
            return None

    # ================================
    # Message loop
    # ================================

    async def run(self) -> None:
        """Process messages until the client closes stdin.

        Each message is fully handled, and its response written, before the
        next one is read. Failures while handling one message are logged and
        don't stop the loop. Transport failures do.
        """
        async for message in self.transport.messages():
            try:
                await self.handle_message(message)
            except Exception:
                logger.exception("Error handling message")

    async def close(self) -> None:
        """Release the transport and the Gemini client."""
        await self.transport.close()
        if self.generator is not None:
            await self.generator.close()

    async def handle_message(self, message: TransportMessage) -> None:
        """Route one incoming message.

        Lines that failed to parse get a parse error with a null id. Objects
        without a `method` are dropped silently.
        """
        if message.parse_failed:
            logger.debug(f"Parse error: {message.metadata.get('parse_error')}")
            error = Error(code=PARSE_ERROR, message="Invalid JSON received.")
            await self.transport.send(JSONRPCError.from_error(error).to_wire())
            return

        payload = message.payload
        if "method" not in payload:
            logger.debug(f"Ignoring unknown message: {payload}")
            return

        method = payload["method"]
        params = payload.get("params")
        if params is None:
            params = {}

        if "id" in payload:
            response = await self._handle_request(payload["id"], method, params)
            await self._send_response(payload["id"], response)
        else:
            await self._handle_notification(method, params)

    async def _send_response(
        self, request_id: RequestId, response: dict[str, Any]
    ) -> None:
        """Send a response, replacing it with an internal error if it can't go out.

        A second failure propagates to the message loop.
        """
        try:
            await self.transport.send(response)
        except (ValueError, ConnectionError) as e:
            logger.exception(f"Failed to send response for request {request_id!r}")
            error = Error(code=INTERNAL_ERROR, message=f"Failed to send response: {e}")
            await self.transport.send(JSONRPCError.from_error(error, request_id).to_wire())

    # ================================
    # Request routing
    # ================================

    async def _handle_request(
        self, request_id: RequestId, method: Any, params: Any
    ) -> dict[str, Any]:
        """Run a request handler and shape its outcome into a response.

        Args:
            request_id: Correlation id, echoed back verbatim.
            method: Method name from the message.
            params: Params from the message, {} when absent or null.

        Returns:
            Wire-ready response or error message.
        """
        handler = None
        if isinstance(method, str):
            handler = self._get_request_handlers().get(method)
        if handler is None:
            error = Error(code=METHOD_NOT_FOUND, message=f"Unsupported method '{method}'.")
            return JSONRPCError.from_error(error, request_id).to_wire()

        if not isinstance(params, dict):
            error = Error(code=INVALID_PARAMS, message="params must be an object.")
            return JSONRPCError.from_error(error, request_id).to_wire()

        try:
            result_or_error = await handler(params)
        except Exception as e:
            logger.exception(f"Handler for '{method}' failed")
            error = Error(code=INTERNAL_ERROR, message=f"Handler error: {e}")
            return JSONRPCError.from_error(error, request_id).to_wire()

        if isinstance(result_or_error, Error):
            return JSONRPCError.from_error(result_or_error, request_id).to_wire()
        return JSONRPCResponse.from_result(result_or_error, request_id).to_wire()

    def _get_request_handlers(self) -> dict[str, RequestHandler]:
        """Maps request methods to their handler functions."""
        return {
            "initialize": self._handle_initialize,
            "tools/list": self._handle_list_tools,
            "tools/call": self._handle_call_tool,
            "ping": self._handle_ping,
            "shutdown": self._handle_shutdown,
        }

    async def _handle_initialize(self, params: dict[str, Any]) -> InitializeResult:
        """Report protocol version, capabilities and server identity.

        Has no side effects. Tools are usable whether or not this is called.
        """
        client_info = params.get("clientInfo")
        if isinstance(client_info, dict):
            logger.debug(
                f"Initialize from {client_info.get('name')} {client_info.get('version')}"
            )
        return InitializeResult(
            capabilities=self.server_config.capabilities,
            server_info=self.server_config.info,
            protocol_version=self.server_config.protocol_version,
            instructions=self.server_config.instructions,
        )

    async def _handle_list_tools(self, params: dict[str, Any]) -> ListToolsResult:
        return ListToolsResult(tools=self.tools.list_tools())

    async def _handle_call_tool(
        self, params: dict[str, Any]
    ) -> CallToolResult | Error:
        """Validate the call shape and run the tool.

        Unknown tools and non-object arguments are protocol errors. Anything
        that goes wrong inside the tool comes back as a result with
        `isError: true`.
        """
        name = params.get("name")
        if not isinstance(name, str) or self.tools.get_tool(name) is None:
            return Error(code=METHOD_NOT_FOUND, message=f"Unknown tool '{name}'.")

        arguments = params.get("arguments", {})
        if not isinstance(arguments, dict):
            return Error(code=INVALID_PARAMS, message="arguments must be an object.")

        request = CallToolRequest(name=name, arguments=arguments)
        logger.debug(f"Calling tool '{name}'")
        return await self.tools.handle_call(request)

    async def _handle_ping(self, params: dict[str, Any]) -> str:
        return "pong"

    async def _handle_shutdown(self, params: dict[str, Any]) -> None:
        # The client follows up with an `exit` notification to end the process.
        logger.debug("Shutdown requested")
        return None

    # ================================
    # Notification routing
    # ================================

    async def _handle_notification(self, method: Any, params: Any) -> None:
        """Dispatch a notification. Never produces a response."""
        handler = None
        if isinstance(method, str):
            handler = self._get_notification_handlers().get(method)
        if handler is None:
            logger.debug(f"Unhandled notification '{method}' ({params})")
            return

        try:
            await handler(params if isinstance(params, dict) else {})
        except Exception:
            logger.exception(f"Notification handler for '{method}' failed")

    def _get_notification_handlers(self) -> dict[str, NotificationHandler]:
        return {
            "initialized": self._handle_initialized,
            "notifications/initialized": self._handle_initialized,
            "exit": self._handle_exit,
        }

    async def _handle_initialized(self, params: dict[str, Any]) -> None:
        logger.debug("Client initialized.")

    async def _handle_exit(self, params: dict[str, Any]) -> None:
        logger.debug("Exit requested")
        sys.exit(0)
