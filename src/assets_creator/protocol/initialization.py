from pydantic import Field

from assets_creator.protocol.base import PROTOCOL_VERSION, ProtocolModel, Result


class Implementation(ProtocolModel):
    """Name and version string of the server or client."""

    name: str
    version: str


class ServerCapabilities(ProtocolModel):
    """Capabilities that the server supports, sent during initialization."""

    tools: bool | None = None
    """
    Whether tools can be listed and called.
    """


class InitializeResult(Result):
    """
    Server's answer to `initialize`.

    There is no handshake to complete: tools can be listed and called whether
    or not the client ever initializes.
    """

    protocol_version: str = Field(default=PROTOCOL_VERSION, alias="protocolVersion")
    capabilities: ServerCapabilities
    """
    Capabilities the server supports.
    """

    server_info: Implementation = Field(alias="serverInfo")
    """
    Information about the server software.
    """

    instructions: str | None = None
    """
    Optional setup or usage instructions for the client.
    """
