"""Confinement of client-supplied paths to the server root.

The check is purely lexical: the path is joined to the root and normalized
without touching the filesystem, so it runs before any I/O happens. Symlinks
inside the root are not followed or inspected.
"""

import os
from pathlib import Path

from assets_creator.server.exceptions import InvalidArgumentError, OutOfRootError


class PathResolver:
    """Resolves relative paths against a fixed root directory.

    Every path handed back is either the root itself or nested under it.
    """

    def __init__(self, root: str | Path):
        """Initialize the resolver.

        Args:
            root: Directory all resolved paths are confined to. Made absolute
                and normalized, but not checked for existence.
        """
        self._root = os.path.normpath(os.path.abspath(os.fspath(root)))

    @property
    def root(self) -> Path:
        return Path(self._root)

    def resolve(self, user_path: str) -> Path:
        """Resolve a client path to an absolute path inside the root.

        Traversal segments, absolute inputs and redundant separators are all
        collapsed before the containment check.

        Args:
            user_path: Path as sent by the client, normally relative to root.

        Returns:
            Path: Normalized absolute path, equal to or under the root.

        Raises:
            InvalidArgumentError: If the path contains a NUL byte.
            OutOfRootError: If the normalized path leaves the root.
        """
        if "\x00" in user_path:
            raise InvalidArgumentError("'path' must not contain NUL bytes.")

        candidate = os.path.normpath(os.path.join(self._root, user_path))
        if candidate == self._root:
            return Path(candidate)

        try:
            relative = os.path.relpath(candidate, self._root)
        except ValueError:
            # Different drives on Windows
            raise OutOfRootError(
                f"Path '{user_path}' is outside of the server root."
            ) from None

        if self._escapes(relative):
            raise OutOfRootError(f"Path '{user_path}' is outside of the server root.")
        return Path(candidate)

    def relative(self, path: str | Path) -> str:
        """Render a resolved path relative to the root, for messages."""
        return os.path.relpath(os.fspath(path), self._root)

    @staticmethod
    def _escapes(relative: str) -> bool:
        if os.path.isabs(relative):
            return True
        first_segment = relative.replace("\\", "/").split("/", 1)[0]
        return first_segment == os.pardir
