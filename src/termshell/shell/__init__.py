"""Interactive shell core for termshell.

Public API:
    ShellSession -- Session loop and prompt controller
    CommandDispatcher -- Resolves and runs command lines
    ExecutionContext -- Per-dispatch handle given to command handlers
    KeyInterpreter -- Line buffer driven by key events
    TerminalSurface / HostHandle -- Interfaces the host environment provides
"""

from termshell.shell.base import HostHandle, TerminalSurface
from termshell.shell.context import ExecutionContext, ExecutionContextFactory
from termshell.shell.dispatcher import CommandDispatcher, CommandFactory, CommandHandler
from termshell.shell.errors import (
    ArgumentError,
    CommandNotFound,
    HandlerAsyncFailure,
    HandlerSyncFailure,
    ShellError,
    serialize_error,
)
from termshell.shell.host import ConfigHost
from termshell.shell.keys import KeyInterpreter
from termshell.shell.session import ShellSession

__all__ = [
    "ArgumentError",
    "CommandDispatcher",
    "CommandFactory",
    "CommandHandler",
    "CommandNotFound",
    "ConfigHost",
    "ExecutionContext",
    "ExecutionContextFactory",
    "HandlerAsyncFailure",
    "HandlerSyncFailure",
    "HostHandle",
    "KeyInterpreter",
    "ShellError",
    "ShellSession",
    "TerminalSurface",
    "serialize_error",
]
