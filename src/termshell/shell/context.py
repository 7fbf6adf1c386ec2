"""Per-dispatch execution contexts.

An :class:`ExecutionContext` is the only handle a command handler gets to
the shell. It forwards output straight to the terminal and carries a
one-shot completion signal the handler settles with :meth:`close`.
Contexts are created fresh for every submitted line and never reused.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections import defaultdict
from pathlib import PurePosixPath
from typing import Any, Callable

from termshell.domain.models import SessionState
from termshell.shell.base import TerminalSurface
from termshell.shell.errors import ShellError

logger = logging.getLogger(__name__)


class ExecutionContext:
    """Isolated handle for one command dispatch.

    Events:
        ``data``  -- text the handler wants shown; the dispatcher binds this
                     to the terminal before the handler runs.
        ``close`` -- successful completion.
        ``error`` -- failed completion, with the error as argument.

    Completion is one-shot: the first ``close``/``error`` wins and later
    ones are ignored.
    """

    def __init__(
        self,
        input: str,
        working_directory: PurePosixPath,
        terminal: TerminalSurface,
        context_id: int = 0,
    ) -> None:
        self.input = input
        self.working_directory = working_directory
        self.context_id = context_id
        self._terminal = terminal
        self._listeners: defaultdict[str, list[Callable[..., Any]]] = defaultdict(list)
        self._completion: asyncio.Future[None] = asyncio.get_running_loop().create_future()

    @property
    def settled(self) -> bool:
        return self._completion.done()

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        """Subscribe ``handler`` to ``event`` on this context only."""
        self._listeners[event].append(handler)

    def emit(self, event: str, *args: Any) -> None:
        """Emit an event; ``close`` and ``error`` also settle completion."""
        if event == "close":
            self._settle(None)
        elif event == "error":
            self._settle(args[0] if args else ShellError("Command failed"))
        for handler in list(self._listeners.get(event, ())):
            handler(*args)

    def close(self, error: BaseException | None = None) -> None:
        """Signal completion: success without an error, failure with one."""
        if error is None:
            self.emit("close")
        else:
            self.emit("error", error)

    def write(self, text: str) -> None:
        self._terminal.write(text)

    def write_line(self, text: str = "") -> None:
        self._terminal.write_line(text)

    def clear(self) -> None:
        self._terminal.clear()

    async def wait(self) -> None:
        """Wait for completion; raises the error passed to ``close``."""
        await self._completion

    def discard(self) -> None:
        """Drop the context, consuming any failure nobody awaited."""
        self._listeners.clear()
        if self._completion.done() and not self._completion.cancelled():
            self._completion.exception()
        elif not self._completion.done():
            self._completion.cancel()

    def _settle(self, error: Any) -> None:
        if self._completion.done():
            logger.debug("Context %d already settled, ignoring repeat signal", self.context_id)
            return
        if error is None:
            self._completion.set_result(None)
            return
        if not isinstance(error, Exception):
            error = ShellError(str(error))
        self._completion.set_exception(error)


class ExecutionContextFactory:
    """Creates contexts that snapshot the session's working directory."""

    def __init__(self, state: SessionState, terminal: TerminalSurface) -> None:
        self._state = state
        self._terminal = terminal
        self._ids = itertools.count(1)

    def create(self, input: str) -> ExecutionContext:
        """Build a fresh context for ``input``. Must run inside an event loop."""
        return ExecutionContext(
            input=input,
            working_directory=self._state.working_directory,
            terminal=self._terminal,
            context_id=next(self._ids),
        )
