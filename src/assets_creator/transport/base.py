from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any, Self


@dataclass
class TransportMessage:
    """Container for messages with transport-specific metadata.

    `payload` is None when the raw line could not be parsed; the reason is
    then in `metadata["parse_error"]`.
    """

    payload: dict[str, Any] | None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def parse_failed(self) -> bool:
        return self.payload is None


class Transport(ABC):
    """Abstract transport for message delivery.

    Handles the mechanics of sending and receiving messages
    without knowledge of protocol semantics.

    Transports are bidirectional message streams:
    - Send messages via send()
    - Receive messages by iterating over messages()

    The iterator ends when the peer closes its side of the stream.
    """

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """True if the transport is open and ready for message processing."""

    @abstractmethod
    async def send(self, payload: dict[str, Any]) -> None:
        """Send a message.

        Args:
            payload: The message to send

        Raises:
            ValueError: If the message cannot be serialized
            ConnectionError: If transport is closed or the write failed
        """

    @abstractmethod
    def messages(self) -> AsyncIterator[TransportMessage]:
        """Stream of incoming messages, one per non-empty line.

        Yields:
            TransportMessage: Each incoming message with metadata

        Raises:
            ConnectionError: When reading from the stream fails
        """

    @abstractmethod
    async def close(self) -> None:
        """Close the transport and stop message iteration."""

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
        return None
