import logging
from typing import Awaitable, Callable

from assets_creator.protocol.content import TextContent
from assets_creator.protocol.tools import CallToolRequest, CallToolResult, Tool
from assets_creator.server.exceptions import ToolError

logger = logging.getLogger(__name__)

ToolHandler = Callable[[CallToolRequest], Awaitable[CallToolResult]]


class ToolManager:
    """Registry of the tools a session exposes.

    Tools are registered while the session is being built and only looked up
    afterwards. Listing preserves registration order.
    """

    def __init__(self):
        self.registered: dict[str, Tool] = {}
        self.handlers: dict[str, ToolHandler] = {}

    def register(self, tool: Tool, handler: ToolHandler) -> None:
        """Register a tool with its handler function.

        Handlers report failures by raising `ToolError`; the message becomes
        the text of an error result. Any other exception is reported as a
        generic "Tool failed" result.

        Args:
            tool: Tool definition with name, description, and schema.
            handler: Async function that processes tool calls.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        if tool.name in self.registered:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self.registered[tool.name] = tool
        self.handlers[tool.name] = handler

    def get_tool(self, name: str) -> Tool | None:
        """Get a registered tool by name, or None if it doesn't exist."""
        return self.registered.get(name)

    def list_tools(self) -> list[Tool]:
        """All registered tools, in registration order."""
        return list(self.registered.values())

    async def handle_call(self, request: CallToolRequest) -> CallToolResult:
        """Execute a tool call request.

        Tool failures return CallToolResult with is_error=True so the client
        can see what went wrong. Unknown tools raise KeyError for the session
        to convert to a protocol error.

        Args:
            request: Tool call request with name and arguments.

        Returns:
            CallToolResult: Tool output or failure details.

        Raises:
            KeyError: If the requested tool is not registered.
        """
        handler = self.handlers[request.name]  # Can raise KeyError
        try:
            return await handler(request)
        except ToolError as e:
            logger.debug(f"Tool '{request.name}' failed: {e}")
            return CallToolResult(content=[TextContent(text=str(e))], is_error=True)
        except Exception as e:
            logger.exception(f"Tool '{request.name}' raised unexpectedly")
            return CallToolResult(
                content=[TextContent(text=f"Tool failed: {e}")],
                is_error=True,
            )
