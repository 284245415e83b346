"""
Tests for response envelopes and the result types they carry.
"""

from assets_creator.protocol.base import METHOD_NOT_FOUND, PARSE_ERROR, Error
from assets_creator.protocol.content import TextContent
from assets_creator.protocol.initialization import (
    Implementation,
    InitializeResult,
    ServerCapabilities,
)
from assets_creator.protocol.jsonrpc import JSONRPCError, JSONRPCResponse
from assets_creator.protocol.tools import CallToolResult, JSONSchema, ListToolsResult, Tool


class TestJSONRPCResponse:
    def test_null_result_is_kept_on_the_wire(self):
        # Act
        wire = JSONRPCResponse.from_result(None, request_id=7).to_wire()

        # Assert
        assert wire == {"jsonrpc": "2.0", "id": 7, "result": None}

    def test_plain_values_pass_through(self):
        # Act
        wire = JSONRPCResponse.from_result("pong", request_id="abc").to_wire()

        # Assert
        assert wire["result"] == "pong"
        assert wire["id"] == "abc"

    def test_result_models_are_dumped_with_aliases(self):
        # Arrange
        result = CallToolResult(content=[TextContent(text="hi")], is_error=True)

        # Act
        wire = JSONRPCResponse.from_result(result, request_id=1).to_wire()

        # Assert
        assert wire["result"] == {
            "content": [{"type": "text", "text": "hi"}],
            "isError": True,
        }

    def test_structured_ids_are_echoed_verbatim(self):
        # Arrange
        request_id = {"session": [1, 2]}

        # Act
        wire = JSONRPCResponse.from_result("pong", request_id=request_id).to_wire()

        # Assert
        assert wire["id"] == {"session": [1, 2]}


class TestJSONRPCError:
    def test_parse_error_has_null_id(self):
        # Arrange
        error = Error(code=PARSE_ERROR, message="Invalid JSON received.")

        # Act
        wire = JSONRPCError.from_error(error).to_wire()

        # Assert
        assert wire == {
            "jsonrpc": "2.0",
            "id": None,
            "error": {"code": -32700, "message": "Invalid JSON received."},
        }

    def test_error_data_included_only_when_set(self):
        # Arrange
        error = Error(code=METHOD_NOT_FOUND, message="nope", data={"method": "x"})

        # Act
        wire = JSONRPCError.from_error(error, request_id=2).to_wire()

        # Assert
        assert wire["error"]["data"] == {"method": "x"}
        assert "result" not in wire


class TestResultTypes:
    def test_list_tools_result_always_carries_next_cursor(self):
        # Arrange
        tool = Tool(
            name="read_file",
            description="Read a file.",
            input_schema=JSONSchema(
                properties={"path": {"type": "string"}},
                required=["path"],
                additional_properties=False,
            ),
        )

        # Act
        data = ListToolsResult(tools=[tool]).to_protocol()

        # Assert
        assert data == {
            "tools": [
                {
                    "name": "read_file",
                    "description": "Read a file.",
                    "inputSchema": {
                        "type": "object",
                        "properties": {"path": {"type": "string"}},
                        "required": ["path"],
                        "additionalProperties": False,
                    },
                }
            ],
            "nextCursor": None,
        }

    def test_call_tool_result_defaults_to_success(self):
        # Act
        data = CallToolResult(content=[TextContent(text="ok")]).to_protocol()

        # Assert
        assert data["isError"] is False

    def test_initialize_result_uses_camel_case(self):
        # Arrange
        result = InitializeResult(
            capabilities=ServerCapabilities(tools=True),
            server_info=Implementation(name="assets-creator", version="0.1.0"),
        )

        # Act
        data = result.to_protocol()

        # Assert
        assert data == {
            "protocolVersion": "2024-01-01",
            "capabilities": {"tools": True},
            "serverInfo": {"name": "assets-creator", "version": "0.1.0"},
        }

    def test_aliases_are_accepted_on_input(self):
        # Act
        tool = Tool.model_validate(
            {"name": "t", "inputSchema": {"additionalProperties": False}}
        )

        # Assert
        assert tool.input_schema.additional_properties is False
