"""Session loop and prompt controller.

Sequences banner -> prompt -> read -> dispatch -> report -> prompt for one
terminal. Keys are interpreted as they arrive; completed lines queue up
and are dispatched strictly one at a time.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from pathlib import PurePosixPath
from typing import Any, Callable

from termshell.config.settings import ShellConfig
from termshell.domain.models import DirectoryChange, KeyEvent, SessionPhase, SessionState
from termshell.shell.base import HostHandle, TerminalSurface
from termshell.shell.dispatcher import CommandDispatcher, CommandFactory
from termshell.shell.errors import ShellError, serialize_error
from termshell.shell.keys import KeyInterpreter

logger = logging.getLogger(__name__)

PROMPT_RESET = "\x1b[0m"


class ShellSession:
    """One interactive shell bound to one terminal surface.

    Example usage::

        session = ShellSession(default_registry(), host, terminal)
        runner = asyncio.create_task(session.run())
        session.handle_key("l", KeyEvent(key_code=76))
    """

    def __init__(
        self,
        registry: Mapping[str, CommandFactory],
        host: HostHandle,
        terminal: TerminalSurface,
        config: ShellConfig | None = None,
        state: SessionState | None = None,
        error_serializer: Callable[[BaseException], str] = serialize_error,
    ) -> None:
        self._config = config or ShellConfig()
        self._host = host
        self._terminal = terminal
        self._serialize_error = error_serializer
        self.state = state or SessionState(
            working_directory=PurePosixPath(self._config.initial_directory)
        )
        self._dispatcher = CommandDispatcher(registry, self.state, host, terminal)
        self._lines: asyncio.Queue[str] = asyncio.Queue()
        self._phase = SessionPhase.IDLE
        self.keys = KeyInterpreter(
            self.state,
            terminal,
            on_submit=self.submit,
            on_empty_submit=self.prompt,
        )

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def pending_lines(self) -> int:
        return self._lines.qsize()

    def handle_key(self, key: str, event: KeyEvent) -> None:
        """Feed one key event from the terminal surface."""
        self.keys.feed(key, event)

    def handle_paste(self, data: str) -> None:
        """Write pasted text to the terminal verbatim."""
        self._terminal.write(data)

    def submit(self, line: str) -> None:
        """Queue a completed line for dispatch."""
        self._lines.put_nowait(line)

    async def run(self) -> None:
        """Run the banner, then dispatch submitted lines forever."""
        logger.info("Shell session started in %s", self.state.working_directory)
        await self.execute(self._config.banner_command)
        while True:
            line = await self._lines.get()
            await self.execute(line)

    async def execute(self, raw_input: str) -> bool:
        """Dispatch one line, report its outcome, and re-prompt.

        Returns True when the command succeeded. Never raises for
        command failures.
        """
        self._phase = SessionPhase.DISPATCHING
        self._terminal.write_line("")

        succeeded = True
        try:
            outcome = await self._dispatcher.dispatch(raw_input)
        except ShellError as e:
            succeeded = False
            self._phase = SessionPhase.REPORTING
            self._report(e)
        else:
            self._phase = SessionPhase.REPORTING
            self._terminal.write_line("")
            self._apply(outcome)

        await asyncio.sleep(self._config.reprompt_delay)
        self.prompt()
        self._phase = SessionPhase.IDLE
        return succeeded

    def render_prompt(self) -> str:
        user = self._host.current_user()
        version = self._host.config_value("version") or "latest"
        return (
            f"\x1b[48;5;{self._config.prompt_color}m"
            f"{user.username}@{self._config.app_name}-{version}:"
            f"{self.state.working_directory} > {PROMPT_RESET} "
        )

    def prompt(self) -> None:
        """Write a fresh prompt on a new line."""
        self._terminal.write_line("")
        self._terminal.write(self.render_prompt())

    def _report(self, error: ShellError) -> None:
        logger.warning("Command failed: %s", error)
        self._terminal.write_line("")
        try:
            rendered = self._serialize_error(error)
        except Exception as e:
            logger.debug("Structured rendering failed (%s), using raw text", e)
            rendered = str(error)
        self._terminal.write_line(rendered)

    def _apply(self, outcome: Any) -> None:
        if isinstance(outcome, DirectoryChange):
            self.state.working_directory = outcome.path
            logger.debug("Working directory is now %s", outcome.path)
