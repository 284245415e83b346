import os
from dataclasses import dataclass, field
from pathlib import Path

from assets_creator.protocol.base import PROTOCOL_VERSION
from assets_creator.protocol.initialization import Implementation, ServerCapabilities

SERVER_NAME = "assets-creator"
SERVER_VERSION = "0.1.0"

DEFAULT_MODEL = "gemini-nano-banana"

API_KEY_ENV = "GOOGLE_API_KEY"
MODEL_ENV = "GEMINI_MODEL"


def default_model() -> str:
    """Model from $GEMINI_MODEL, falling back to the built-in default."""
    return os.environ.get(MODEL_ENV) or DEFAULT_MODEL


@dataclass
class ServerConfig:
    """Everything a session needs, fixed at construction."""

    root: Path
    model: str = DEFAULT_MODEL
    api_key: str | None = None

    info: Implementation = field(
        default_factory=lambda: Implementation(name=SERVER_NAME, version=SERVER_VERSION)
    )
    capabilities: ServerCapabilities = field(
        default_factory=lambda: ServerCapabilities(tools=True)
    )
    protocol_version: str = PROTOCOL_VERSION
    instructions: str | None = None

    def __post_init__(self) -> None:
        # Absolute and normalized, but symlinks are left alone.
        self.root = Path(os.path.normpath(os.path.abspath(self.root)))
        if not self.root.is_dir():
            raise ValueError(f"Root directory does not exist: {self.root}")

    @classmethod
    def from_env(
        cls, root: str | Path, model: str | None = None
    ) -> "ServerConfig":
        """Build a config, reading the API key and default model from env.

        Raises:
            ValueError: If root is not an existing directory.
        """
        return cls(
            root=Path(root),
            model=model or default_model(),
            api_key=os.environ.get(API_KEY_ENV) or None,
        )
