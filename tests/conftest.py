import json
from collections.abc import AsyncIterator
from typing import Any
from unittest.mock import AsyncMock

import pytest

from assets_creator.server.config import ServerConfig
from assets_creator.server.session import ServerSession
from assets_creator.transport.base import Transport, TransportMessage
from assets_creator.transport.stdio.shared import MessageParseError, parse_json_message


class MockTransport(Transport):
    """In-memory transport fed with raw lines, the way stdin would be."""

    def __init__(self):
        self.sent_messages: list[dict[str, Any]] = []
        self.incoming: list[TransportMessage] = []
        self.closed = False

    def receive_line(self, line: str) -> None:
        """Queue a raw line, applying the same parsing rules as stdio."""
        try:
            payload = parse_json_message(line)
        except MessageParseError as e:
            self.incoming.append(
                TransportMessage(payload=None, metadata={"parse_error": str(e)})
            )
            return
        if payload is not None:
            self.incoming.append(TransportMessage(payload=payload))

    def receive_message(self, payload: dict[str, Any]) -> None:
        self.receive_line(json.dumps(payload))

    @property
    def is_open(self) -> bool:
        return not self.closed

    async def send(self, payload: dict[str, Any]) -> None:
        if self.closed:
            raise ConnectionError("Transport closed")
        self.sent_messages.append(payload)

    async def messages(self) -> AsyncIterator[TransportMessage]:
        """Yield queued messages, then end like stdin reaching EOF."""
        while self.incoming:
            yield self.incoming.pop(0)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def sandbox(tmp_path):
    """Empty root directory for a session."""
    root = tmp_path / "sandbox"
    root.mkdir()
    return root


@pytest.fixture
def config(sandbox):
    return ServerConfig(root=sandbox, model="fake-model", api_key=None)


@pytest.fixture
def mock_transport():
    return MockTransport()


@pytest.fixture
def fake_generator():
    """Stand-in for GeminiClient."""
    generator = AsyncMock()
    generator.generate.return_value = "generated text"
    return generator


@pytest.fixture
def session(mock_transport, config):
    """Session with generation unconfigured (no API key)."""
    return ServerSession(transport=mock_transport, config=config)


@pytest.fixture
def generating_session(mock_transport, config, fake_generator):
    return ServerSession(
        transport=mock_transport, config=config, generator=fake_generator
    )
