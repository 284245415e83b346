import asyncio
import logging
import sys
from typing import Any, AsyncIterator, TextIO

from assets_creator.transport.base import Transport, TransportMessage
from assets_creator.transport.stdio.shared import (
    MessageParseError,
    parse_json_message,
    serialize_message,
)

logger = logging.getLogger(__name__)

# A single write_file call carries its whole content on one line.
MAX_LINE_BYTES = 64 * 1024 * 1024


class StdioServerTransport(Transport):
    """Stdio server transport for 1:1 client-server communication.

    Reads newline-delimited JSON messages from stdin and writes responses to
    stdout. The client manages our process lifecycle by launching us as a
    subprocess. Diagnostics never go to stdout.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        """Initialize stdio server transport.

        Args:
            reader: Pre-built reader, mainly for tests. When omitted, one is
                connected to sys.stdin on first iteration.
            stdout: Stream responses are written to. Defaults to sys.stdout.
        """
        self._stdin_reader = reader
        self._stdout = stdout
        self._closed = False

    @property
    def is_open(self) -> bool:
        return not self._closed

    async def _setup_stdin_reader(self) -> asyncio.StreamReader:
        """Set up async stdin reader using protocol."""
        if self._stdin_reader is not None:
            return self._stdin_reader  # Already set up

        reader = asyncio.StreamReader(limit=MAX_LINE_BYTES)
        protocol = asyncio.StreamReaderProtocol(reader)
        await asyncio.get_running_loop().connect_read_pipe(lambda: protocol, sys.stdin)
        self._stdin_reader = reader
        return reader

    async def send(self, payload: dict[str, Any]) -> None:
        """Send message to the client via stdout.

        Args:
            payload: JSON-RPC message to send

        Raises:
            ValueError: If message is invalid
            ConnectionError: If stdout is closed or write fails
        """
        if self._closed:
            raise ConnectionError("Cannot send message: transport is closed")

        json_str = serialize_message(payload)
        try:
            print(json_str, file=self._stdout or sys.stdout, flush=True)
        except Exception as e:
            raise ConnectionError(f"Failed to send message: {e}") from e

    def messages(self) -> AsyncIterator[TransportMessage]:
        """Stream of messages from the client.

        Empty lines and JSON values that are not objects are skipped. Lines
        that are not valid JSON are yielded with no payload so the session
        can answer them with a parse error.

        Yields:
            TransportMessage: Message with metadata
        """
        return self._message_iterator()

    async def _message_iterator(self) -> AsyncIterator[TransportMessage]:
        """Async iterator implementation for client messages."""
        reader = await self._setup_stdin_reader()

        while not self._closed:
            try:
                line_bytes = await reader.readline()
            except (ValueError, asyncio.LimitOverrunError) as e:
                raise ConnectionError(f"Failed to read from stdin: {e}") from e

            if not line_bytes:
                logger.debug("stdin closed")
                return

            try:
                line = line_bytes.decode("utf-8")
                message = parse_json_message(line)
            except (UnicodeDecodeError, MessageParseError) as e:
                logger.debug(f"Unparseable line: {line_bytes.strip()!r}")
                yield TransportMessage(
                    payload=None,
                    metadata={"parse_error": str(e)},
                )
                continue

            if message is None:
                if line.strip():
                    logger.debug(f"Ignoring non-object message: {line.strip()}")
                continue

            yield TransportMessage(payload=message)

    async def close(self) -> None:
        """Stop reading and flush stdout."""
        self._closed = True
        try:
            (self._stdout or sys.stdout).flush()
        except (OSError, ValueError):
            pass
