"""Command dispatcher.

Resolves the leading token of a line against the command registry,
invokes the handler, and collapses its result into one awaitable
outcome that either returns the handler's value or raises a
:class:`~termshell.shell.errors.ShellError`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Callable

from termshell.domain.models import ParsedOptions, SessionState
from termshell.shell.arguments import ArgumentSchema, parse_arguments
from termshell.shell.base import HostHandle, TerminalSurface
from termshell.shell.completion import (
    ImmediateCompletion,
    PendingCompletion,
    completion_policy,
)
from termshell.shell.context import ExecutionContext, ExecutionContextFactory
from termshell.shell.errors import (
    CommandNotFound,
    HandlerAsyncFailure,
    HandlerSyncFailure,
)

logger = logging.getLogger(__name__)

CommandHandler = Callable[[ParsedOptions, str], Any]
CommandFactory = Callable[[ExecutionContext, HostHandle, TerminalSurface], CommandHandler]


class CommandDispatcher:
    """Runs submitted lines against a read-only command registry.

    Only one dispatch may be in flight at a time; the session loop
    guarantees this by awaiting each outcome before taking the next line.
    """

    def __init__(
        self,
        registry: Mapping[str, CommandFactory],
        state: SessionState,
        host: HostHandle,
        terminal: TerminalSurface,
        schema: ArgumentSchema | None = None,
    ) -> None:
        self._registry = registry
        self._state = state
        self._host = host
        self._terminal = terminal
        self._schema: ArgumentSchema = schema or {}
        self._contexts = ExecutionContextFactory(state, terminal)
        self._active: ExecutionContext | None = None

    @property
    def active_context(self) -> ExecutionContext | None:
        return self._active

    async def dispatch(self, raw_input: str) -> Any:
        """Dispatch one line and return the handler's outcome value.

        Raises:
            CommandNotFound: No command is registered under the first token.
            ArgumentError: The arguments do not fit the schema.
            HandlerSyncFailure: The handler raised when invoked.
            HandlerAsyncFailure: The handler's outcome reported failure.
        """
        if self._active is not None:
            raise RuntimeError(
                f"Dispatch of {self._active.input!r} is still pending"
            )

        name, *args = raw_input.split() or [""]
        self._state.record(raw_input)

        factory = self._registry.get(name)
        if factory is None:
            raise CommandNotFound(raw_input)

        options = parse_arguments(self._schema, args)
        context = self._contexts.create(raw_input)
        context.on("data", self._terminal.write)

        self._active = context
        logger.debug("Dispatching %r (context %d)", raw_input, context.context_id)
        try:
            return await self._complete(factory, context, options, raw_input)
        finally:
            self._active = None
            context.discard()
            logger.debug("Context %d finished", context.context_id)

    async def _complete(
        self,
        factory: CommandFactory,
        context: ExecutionContext,
        options: ParsedOptions,
        raw_input: str,
    ) -> Any:
        try:
            handler = factory(context, self._host, self._terminal)
            result = handler(options, raw_input)
        except (Exception, SystemExit) as e:
            raise HandlerSyncFailure(e) from e

        policy = completion_policy(result)

        if isinstance(policy, ImmediateCompletion):
            return policy.value

        # A returned awaitable takes precedence over context signals.
        if isinstance(policy, PendingCompletion):
            try:
                return await policy.awaitable
            except asyncio.CancelledError as e:
                # Only a cancelled outcome is a failure; cancelling the dispatch itself propagates.
                task = asyncio.current_task()
                if task is not None and task.cancelling():
                    raise
                raise HandlerAsyncFailure(e) from e
            except (Exception, SystemExit) as e:
                raise HandlerAsyncFailure(e) from e

        try:
            await context.wait()
        except Exception as e:
            raise HandlerAsyncFailure(e) from e
        return None
