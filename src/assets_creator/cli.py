"""
assets-creator - local tool server for creating game assets with Gemini.

Speaks newline-delimited JSON-RPC on stdin/stdout. Launch it as a subprocess
of the client.

Usage:
    assets-creator --root ./assets
    assets-creator --root ./assets --model gemini-2.0-flash --debug
"""

import asyncio
import locale
import logging
import os
import sys
from pathlib import Path

import typer
from dotenv import load_dotenv

from assets_creator.server.config import ServerConfig, default_model
from assets_creator.server.session import ServerSession
from assets_creator.transport.stdio.server import StdioServerTransport

LOG_FORMAT = "[assets-creator] %(message)s"

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="assets-creator",
    help="Local MCP server for creating game assets with Gemini Nano Banana.",
    add_completion=False,
)


def configure_logging(debug: bool) -> None:
    """Send diagnostics to stderr when debugging, nowhere otherwise.

    stdout carries the protocol and never receives log lines.
    """
    package_logger = logging.getLogger("assets_creator")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)

    if debug:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.setLevel(logging.DEBUG)
    else:
        handler = logging.NullHandler()
    package_logger.addHandler(handler)
    package_logger.propagate = False


async def run_server(config: ServerConfig) -> None:
    session = ServerSession(transport=StdioServerTransport(), config=config)
    try:
        await session.run()
    finally:
        await session.close()


@app.command()
def main(
    root: Path = typer.Option(
        Path(os.getcwd()),
        "--root",
        help="Directory the server is allowed to access (default: current directory).",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    model: str = typer.Option(
        None,
        "--model",
        help="Gemini model name (default: $GEMINI_MODEL or gemini-nano-banana).",
    ),
    debug: bool = typer.Option(False, "--debug", help="Log debug information to stderr."),
):
    """Serve file and Gemini tools over stdio."""
    configure_logging(debug)

    # list_dir sorts with the user's collation rules
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.debug("Unsupported locale, list_dir sorts by code point")

    try:
        config = ServerConfig.from_env(root, model=model or default_model())
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--root")

    asyncio.run(run_server(config))


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    app()


if __name__ == "__main__":
    run()
