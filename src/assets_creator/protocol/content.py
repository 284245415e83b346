from typing import Literal

from assets_creator.protocol.base import ProtocolModel


class TextContent(ProtocolModel):
    """
    Plain text content for tool results.

    Every tool this server exposes answers with a single text block, whether
    it succeeded or failed.
    """

    type: Literal["text"] = "text"
    text: str
    """The text content."""


ContentList = list[TextContent]
