"""Command-line interface for termshell.

Provides the main entry point for serving shell sessions over WebSockets
or attaching a session to the local console.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="termshell",
        description="Single-session interactive command shell",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/termshell.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Serve shell sessions over WebSockets")
    serve_parser.add_argument("--host", type=str, default=None, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port")

    subparsers.add_parser("console", help="Attach a shell session to this terminal")

    return parser.parse_args(argv)


async def _run_console(settings) -> None:
    """Run one session on the local tty until Ctrl+D."""
    from termshell.commands import default_registry
    from termshell.shell.host import ConfigHost
    from termshell.shell.session import ShellSession
    from termshell.terminal.console import ConsoleTerminal, attach_console

    session = ShellSession(
        default_registry(),
        ConfigHost.from_settings(settings),
        ConsoleTerminal(),
        config=settings.shell,
    )
    await attach_console(session)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the termshell CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from termshell.config.settings import load_settings
    from termshell.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "serve":
        from termshell.endpoint.server import create_app
        import uvicorn

        host = args.host or settings.endpoint.host
        port = args.port or settings.endpoint.port
        logger.info("Starting endpoint server on %s:%d", host, port)
        uvicorn.run(create_app(settings), host=host, port=port)

    elif args.command == "console":
        logger.info("Starting console session")
        asyncio.run(_run_console(settings))


if __name__ == "__main__":
    main()
