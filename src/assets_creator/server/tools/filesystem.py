"""File tools confined to the server root.

Each handler validates its arguments and resolves the path before touching
the filesystem, so rejected calls have no side effects. OS errors are
translated into `ToolError` subclasses with messages that name the path the
client sent.
"""

import asyncio
import locale
import logging
import os
from pathlib import Path

from assets_creator.protocol.content import TextContent
from assets_creator.protocol.tools import (
    CallToolRequest,
    CallToolResult,
    JSONSchema,
    Tool,
)
from assets_creator.sandbox.paths import PathResolver
from assets_creator.server.exceptions import (
    NotFoundError,
    PathIsDirectoryError,
    ToolIOError,
)
from assets_creator.server.managers.tools import ToolManager
from assets_creator.server.tools.arguments import validate_arguments

logger = logging.getLogger(__name__)

EMPTY_LISTING = "(empty)"

read_file_tool = Tool(
    name="read_file",
    description="Read a UTF-8 encoded text file relative to the server root.",
    input_schema=JSONSchema(
        properties={
            "path": {
                "type": "string",
                "description": "Path relative to the configured root.",
            },
        },
        required=["path"],
        additional_properties=False,
    ),
)

write_file_tool = Tool(
    name="write_file",
    description="Write UTF-8 encoded content to a file relative to the server root.",
    input_schema=JSONSchema(
        properties={
            "path": {
                "type": "string",
                "description": "Path relative to the configured root.",
            },
            "content": {
                "type": "string",
                "description": "Content that will replace the file.",
            },
            "create_parents": {
                "type": "boolean",
                "description": "Create parent directories when missing.",
                "default": False,
            },
        },
        required=["path", "content"],
        additional_properties=False,
    ),
)

list_dir_tool = Tool(
    name="list_dir",
    description="List files at a path relative to the server root.",
    input_schema=JSONSchema(
        properties={
            "path": {
                "type": "string",
                "description": "Directory path relative to the root. Defaults to '.'.",
                "default": ".",
            },
        },
        required=[],
        additional_properties=False,
    ),
)


class FilesystemTools:
    """Handlers for `read_file`, `write_file` and `list_dir`."""

    def __init__(self, paths: PathResolver):
        self.paths = paths

    def register(self, manager: ToolManager) -> None:
        manager.register(read_file_tool, self.read_file)
        manager.register(write_file_tool, self.write_file)
        manager.register(list_dir_tool, self.list_dir)

    async def read_file(self, request: CallToolRequest) -> CallToolResult:
        arguments = validate_arguments(request.arguments, read_file_tool.input_schema)
        user_path = arguments["path"]
        resolved = self.paths.resolve(user_path)

        try:
            # Bytes, not text mode, so line endings come back untouched.
            data = await asyncio.to_thread(resolved.read_bytes)
        except FileNotFoundError:
            raise NotFoundError(f"File not found: {user_path}") from None
        except IsADirectoryError:
            raise PathIsDirectoryError(f"Path is a directory: {user_path}") from None
        except OSError as e:
            raise ToolIOError(f"Failed to read file {user_path}: {e}") from e

        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ToolIOError(f"Failed to read file {user_path}: {e}") from e

        logger.debug(f"Read {len(data)} bytes from {resolved}")
        return CallToolResult(content=[TextContent(text=text)])

    async def write_file(self, request: CallToolRequest) -> CallToolResult:
        arguments = validate_arguments(
            request.arguments, write_file_tool.input_schema
        )
        user_path = arguments["path"]
        resolved = self.paths.resolve(user_path)

        if await asyncio.to_thread(resolved.is_dir):
            raise PathIsDirectoryError(f"Cannot write to directory path: {user_path}")

        if arguments["create_parents"]:
            try:
                await asyncio.to_thread(
                    resolved.parent.mkdir, parents=True, exist_ok=True
                )
            except OSError as e:
                raise ToolIOError(
                    f"Failed to create parent directories for {user_path}: {e}"
                ) from e

        try:
            await asyncio.to_thread(
                resolved.write_bytes, arguments["content"].encode("utf-8")
            )
        except IsADirectoryError:
            raise PathIsDirectoryError(
                f"Cannot write to directory path: {user_path}"
            ) from None
        except OSError as e:
            raise ToolIOError(f"Failed to write file {user_path}: {e}") from e

        logger.debug(f"Wrote {resolved}")
        return CallToolResult(
            content=[TextContent(text=f"Wrote {self.paths.relative(resolved)}")]
        )

    async def list_dir(self, request: CallToolRequest) -> CallToolResult:
        arguments = validate_arguments(request.arguments, list_dir_tool.input_schema)
        user_path = arguments["path"]
        resolved = self.paths.resolve(user_path)

        try:
            names = await asyncio.to_thread(_scan_directory, resolved)
        except FileNotFoundError:
            raise NotFoundError(f"Directory not found: {user_path}") from None
        except OSError as e:
            raise ToolIOError(f"Failed to list directory {user_path}: {e}") from e

        names.sort(key=locale.strxfrm)
        return CallToolResult(
            content=[TextContent(text="\n".join(names) or EMPTY_LISTING)]
        )


def _scan_directory(path: Path) -> list[str]:
    """Direct children of `path`, with a trailing slash on directories."""
    with os.scandir(path) as entries:
        return [
            f"{entry.name}/" if entry.is_dir(follow_symlinks=False) else entry.name
            for entry in entries
        ]
