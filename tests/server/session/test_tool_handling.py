from assets_creator.protocol.base import INVALID_PARAMS, METHOD_NOT_FOUND


def tools_call(request_id, name, arguments=None, include_arguments=True):
    params = {"name": name}
    if include_arguments:
        params["arguments"] = arguments
    return {"jsonrpc": "2.0", "id": request_id, "method": "tools/call", "params": params}


class TestListTools:
    async def test_lists_four_tools_in_order_with_null_cursor(
        self, session, mock_transport
    ):
        # Arrange
        mock_transport.receive_message({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})

        # Act
        await session.run()

        # Assert
        result = mock_transport.sent_messages[0]["result"]
        assert [tool["name"] for tool in result["tools"]] == [
            "read_file",
            "write_file",
            "list_dir",
            "call_gemini",
        ]
        assert result["nextCursor"] is None

    async def test_schemas_are_closed_objects(self, session, mock_transport):
        # Arrange
        mock_transport.receive_message({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})

        # Act
        await session.run()

        # Assert
        tools = {t["name"]: t for t in mock_transport.sent_messages[0]["result"]["tools"]}
        write_schema = tools["write_file"]["inputSchema"]
        assert write_schema["type"] == "object"
        assert write_schema["required"] == ["path", "content"]
        assert write_schema["additionalProperties"] is False
        assert write_schema["properties"]["create_parents"]["type"] == "boolean"
        assert tools["list_dir"]["inputSchema"]["required"] == []
        assert tools["call_gemini"]["inputSchema"]["properties"]["top_p"] == {
            "type": "number",
            "description": "Top-p nucleus sampling threshold.",
        }


class TestCallTool:
    async def test_write_then_read_round_trip(self, session, mock_transport, sandbox):
        # Arrange
        mock_transport.receive_message(
            tools_call(
                1,
                "write_file",
                {"path": "a/b.txt", "content": "hi", "create_parents": True},
            )
        )
        mock_transport.receive_message(tools_call(2, "read_file", {"path": "a/b.txt"}))

        # Act
        await session.run()

        # Assert
        wrote, read = mock_transport.sent_messages
        assert wrote == {
            "jsonrpc": "2.0",
            "id": 1,
            "result": {
                "content": [{"type": "text", "text": "Wrote a/b.txt"}],
                "isError": False,
            },
        }
        assert read["result"]["content"][0]["text"] == "hi"
        assert (sandbox / "a" / "b.txt").read_text() == "hi"

    async def test_list_dir_marks_directories(self, session, mock_transport, sandbox):
        # Arrange
        (sandbox / "b.txt").write_text("b")
        (sandbox / "a").mkdir()
        mock_transport.receive_message(tools_call(1, "list_dir", {"path": "."}))

        # Act
        await session.run()

        # Assert
        assert mock_transport.sent_messages[0]["result"]["content"][0]["text"] == (
            "a/\nb.txt"
        )

    async def test_escape_is_a_tool_error_not_a_protocol_error(
        self, session, mock_transport
    ):
        # Arrange
        mock_transport.receive_message(
            tools_call(1, "read_file", {"path": "../../etc/passwd"})
        )

        # Act
        await session.run()

        # Assert
        response = mock_transport.sent_messages[0]
        assert "error" not in response
        assert response["result"]["isError"] is True
        assert "outside of the server root" in response["result"]["content"][0]["text"]

    async def test_unknown_tool_is_method_not_found(self, session, mock_transport):
        # Arrange
        mock_transport.receive_message(tools_call(1, "nonexistent_tool", {}))

        # Act
        await session.run()

        # Assert
        response = mock_transport.sent_messages[0]
        assert "result" not in response
        assert response["error"]["code"] == METHOD_NOT_FOUND
        assert "nonexistent_tool" in response["error"]["message"]

    async def test_missing_tool_name_is_method_not_found(self, session, mock_transport):
        # Arrange
        mock_transport.receive_message(
            {"jsonrpc": "2.0", "id": 1, "method": "tools/call", "params": {}}
        )

        # Act
        await session.run()

        # Assert
        assert mock_transport.sent_messages[0]["error"]["code"] == METHOD_NOT_FOUND

    async def test_array_arguments_are_invalid_params(self, session, mock_transport):
        # Arrange
        mock_transport.receive_message(tools_call(1, "read_file", ["a.txt"]))

        # Act
        await session.run()

        # Assert
        assert mock_transport.sent_messages[0]["error"]["code"] == INVALID_PARAMS

    async def test_null_arguments_are_invalid_params(self, session, mock_transport):
        # Arrange
        mock_transport.receive_message(tools_call(1, "list_dir", None))

        # Act
        await session.run()

        # Assert
        assert mock_transport.sent_messages[0]["error"]["code"] == INVALID_PARAMS

    async def test_absent_arguments_default_to_empty_object(
        self, session, mock_transport
    ):
        # Arrange
        mock_transport.receive_message(
            tools_call(1, "list_dir", include_arguments=False)
        )

        # Act
        await session.run()

        # Assert
        assert mock_transport.sent_messages[0]["result"] == {
            "content": [{"type": "text", "text": "(empty)"}],
            "isError": False,
        }

    async def test_wrong_argument_type_is_tool_error(self, session, mock_transport):
        # Arrange
        mock_transport.receive_message(tools_call(1, "read_file", {"path": 12}))

        # Act
        await session.run()

        # Assert
        result = mock_transport.sent_messages[0]["result"]
        assert result["isError"] is True
        assert result["content"][0]["text"] == "'path' must be a string."

    async def test_unknown_argument_is_tool_error(self, session, mock_transport):
        # Arrange
        mock_transport.receive_message(
            tools_call(1, "read_file", {"path": "a", "encoding": "latin-1"})
        )

        # Act
        await session.run()

        # Assert
        result = mock_transport.sent_messages[0]["result"]
        assert result["isError"] is True
        assert "encoding" in result["content"][0]["text"]


class TestCallGeminiThroughSession:
    async def test_unconfigured_generation_is_a_tool_error(
        self, session, mock_transport
    ):
        # Arrange
        mock_transport.receive_message(tools_call(1, "call_gemini", {"prompt": "x"}))

        # Act
        await session.run()

        # Assert
        response = mock_transport.sent_messages[0]
        assert response["result"]["isError"] is True
        assert "not configured" in response["result"]["content"][0]["text"]

    async def test_configured_generation_returns_text(
        self, generating_session, mock_transport, fake_generator
    ):
        # Arrange
        mock_transport.receive_message(
            tools_call(1, "call_gemini", {"prompt": "sword", "temperature": 0.3})
        )

        # Act
        await generating_session.run()

        # Assert
        assert mock_transport.sent_messages[0]["result"] == {
            "content": [{"type": "text", "text": "generated text"}],
            "isError": False,
        }
        fake_generator.generate.assert_awaited_once_with(
            prompt="sword", system_prompt=None, temperature=0.3, top_p=None
        )
