from assets_creator.generation.gemini import GeminiClient, GeminiError
from assets_creator.protocol.content import TextContent
from assets_creator.protocol.tools import (
    CallToolRequest,
    CallToolResult,
    JSONSchema,
    Tool,
)
from assets_creator.server.exceptions import NotConfiguredError, UpstreamError
from assets_creator.server.managers.tools import ToolManager
from assets_creator.server.tools.arguments import validate_arguments

call_gemini_tool = Tool(
    name="call_gemini",
    description="Send a prompt to the Gemini Nano Banana model to create game assets.",
    input_schema=JSONSchema(
        properties={
            "prompt": {
                "type": "string",
                "description": "User prompt sent to Gemini.",
            },
            "system_prompt": {
                "type": "string",
                "description": "Optional system prompt to guide Gemini.",
            },
            "temperature": {
                "type": "number",
                "description": "Sampling temperature (0.0-1.0).",
            },
            "top_p": {
                "type": "number",
                "description": "Top-p nucleus sampling threshold.",
            },
        },
        required=["prompt"],
        additional_properties=False,
    ),
)


class GenerationTools:
    """Handler for `call_gemini`.

    The client is None when it could not be built at startup. The tool is
    still listed and reports the missing configuration on every call.
    """

    def __init__(self, client: GeminiClient | None):
        self.client = client

    def register(self, manager: ToolManager) -> None:
        manager.register(call_gemini_tool, self.call_gemini)

    async def call_gemini(self, request: CallToolRequest) -> CallToolResult:
        # Missing configuration wins over bad arguments.
        if self.client is None:
            raise NotConfiguredError(
                "Gemini client is not configured. Ensure GOOGLE_API_KEY is "
                "exported before launching the server."
            )

        arguments = validate_arguments(
            request.arguments, call_gemini_tool.input_schema
        )

        try:
            text = await self.client.generate(
                prompt=arguments["prompt"],
                system_prompt=arguments.get("system_prompt"),
                temperature=arguments.get("temperature"),
                top_p=arguments.get("top_p"),
            )
        except GeminiError as e:
            raise UpstreamError(str(e)) from e
        except Exception as e:
            raise UpstreamError(f"Gemini call failed: {e}") from e

        if not text:
            raise UpstreamError("Gemini response did not contain text output.")
        return CallToolResult(content=[TextContent(text=text)])
