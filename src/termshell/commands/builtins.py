"""Built-in commands.

A small catalog covering every way a handler may complete: settling the
context (banner, echo, clear, help), returning a value (pwd, cd) and
returning a coroutine (whoami).
"""

from __future__ import annotations

import posixpath
from pathlib import PurePosixPath

from termshell.commands.registry import CommandRegistry
from termshell.domain.models import DirectoryChange, ParsedOptions
from termshell.shell.base import HostHandle, TerminalSurface
from termshell.shell.context import ExecutionContext
from termshell.shell.dispatcher import CommandHandler


def banner(context: ExecutionContext, host: HostHandle, terminal: TerminalSurface) -> CommandHandler:
    def run(options: ParsedOptions, raw_input: str) -> None:
        app_name = host.config_value("app_name") or "termshell"
        version = host.config_value("version") or "latest"
        context.write_line(f"Welcome to {app_name} {version}")
        context.write_line(
            f"Logged in as {host.current_user().username}. Type 'help' for a list of commands."
        )
        context.close()

    return run


def echo(context: ExecutionContext, host: HostHandle, terminal: TerminalSurface) -> CommandHandler:
    def run(options: ParsedOptions, raw_input: str) -> None:
        context.emit("data", " ".join(options.positional))
        context.close()

    return run


def clear(context: ExecutionContext, host: HostHandle, terminal: TerminalSurface) -> CommandHandler:
    def run(options: ParsedOptions, raw_input: str) -> None:
        context.clear()
        context.close()

    return run


def pwd(context: ExecutionContext, host: HostHandle, terminal: TerminalSurface) -> CommandHandler:
    def run(options: ParsedOptions, raw_input: str) -> PurePosixPath:
        context.write(str(context.working_directory))
        return context.working_directory

    return run


def resolve_directory(current: PurePosixPath, target: str) -> PurePosixPath:
    """Resolve ``target`` against ``current`` lexically (``..`` and ``.``)."""
    joined = posixpath.join(str(current), target)
    normalized = posixpath.normpath(joined)
    # normpath keeps a leading "//"
    if normalized.startswith("//"):
        normalized = "/" + normalized.lstrip("/")
    return PurePosixPath(normalized)


def cd(context: ExecutionContext, host: HostHandle, terminal: TerminalSurface) -> CommandHandler:
    def run(options: ParsedOptions, raw_input: str) -> DirectoryChange:
        if len(options.positional) > 1:
            raise ValueError("cd: too many arguments")
        target = options.positional[0] if options.positional else "/"
        return DirectoryChange(path=resolve_directory(context.working_directory, target))

    return run


def whoami(context: ExecutionContext, host: HostHandle, terminal: TerminalSurface) -> CommandHandler:
    async def run(options: ParsedOptions, raw_input: str) -> str:
        username = host.current_user().username
        context.write(username)
        return username

    return run


def default_registry() -> CommandRegistry:
    """Build a frozen registry holding the built-in commands."""
    registry = CommandRegistry()
    registry.register("banner", banner, description="Show the welcome banner")
    registry.register("echo", echo, description="Print the arguments")
    registry.register("clear", clear, description="Clear the screen")
    registry.register("pwd", pwd, description="Print the working directory")
    registry.register("cd", cd, description="Change the working directory")
    registry.register("whoami", whoami, description="Print the current user")

    @registry.register("help", description="List available commands")
    def help_command(context: ExecutionContext, host: HostHandle, terminal: TerminalSurface) -> CommandHandler:
        def run(options: ParsedOptions, raw_input: str) -> None:
            width = max(len(name) for name in registry)
            for name in sorted(registry):
                context.write_line(f"  {name.ljust(width)}  {registry.describe(name)}")
            context.close()

        return run

    return registry.freeze()
