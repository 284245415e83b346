"""Exception hierarchy for tool failures.

Tool handlers raise these; the tool manager turns them into a
`CallToolResult` with `is_error=True` whose text is the exception message.
None of them ever becomes a protocol-level error.
"""


class ToolError(Exception):
    """Base exception for failures reported back through a tool result."""

    pass


class InvalidArgumentError(ToolError):
    """Raised when a tool argument is missing, unknown, or the wrong type."""

    pass


class OutOfRootError(ToolError):
    """Raised when a path resolves outside the server root."""

    pass


class NotFoundError(ToolError):
    """Raised when the target file or directory does not exist."""

    pass


class PathIsDirectoryError(ToolError):
    """Raised when a file operation targets a directory."""

    pass


class ToolIOError(ToolError):
    """Raised for filesystem failures with no more specific translation."""

    pass


class NotConfiguredError(ToolError):
    """Raised when the Gemini client was not available at startup."""

    pass


class UpstreamError(ToolError):
    """Raised when the Gemini call fails or returns no text."""

    pass
