"""Shared test fixtures for the termshell test suite.

Provides common fixtures used across unit tests: an in-memory terminal,
a host with a known user, fresh session state, and a registry of
commands covering each completion mode.
"""

from __future__ import annotations

import asyncio
from pathlib import PurePosixPath

import pytest

from termshell.commands.registry import CommandRegistry
from termshell.config.settings import ShellConfig
from termshell.domain.models import SessionState
from termshell.shell.host import ConfigHost
from termshell.terminal.buffer import BufferedTerminal


# ---------------------------------------------------------------------------
# Host Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def terminal() -> BufferedTerminal:
    """An empty in-memory terminal."""
    return BufferedTerminal()


@pytest.fixture
def host() -> ConfigHost:
    """A host logged in as alice, reporting version 1.0."""
    return ConfigHost(username="alice", values={"version": "1.0"})


@pytest.fixture
def state() -> SessionState:
    """Fresh session state rooted at /home/alice."""
    return SessionState(working_directory=PurePosixPath("/home/alice"))


@pytest.fixture
def shell_config() -> ShellConfig:
    """Shell config that re-prompts without delay."""
    return ShellConfig(reprompt_delay=0)


# ---------------------------------------------------------------------------
# Registry Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def held_contexts() -> list:
    """Contexts captured by the ``hold`` command, left unsettled."""
    return []


@pytest.fixture
def registry(held_contexts: list) -> CommandRegistry:
    """A registry with one command per completion mode.

    echo   -- writes its arguments and closes the context
    value  -- returns a plain value
    later  -- returns a coroutine
    fail   -- closes the context with ValueError('x')
    boom   -- raises while invoked
    hold   -- never settles on its own; the test closes it
    """
    registry = CommandRegistry()

    @registry.register("echo")
    def echo(context, host, terminal):
        def run(options, raw_input):
            context.write(" ".join(options.positional))
            context.close()
        return run

    @registry.register("value")
    def value(context, host, terminal):
        return lambda options, raw_input: 42

    @registry.register("later")
    def later(context, host, terminal):
        async def run(options, raw_input):
            await asyncio.sleep(0)
            return "done"
        return run

    @registry.register("fail")
    def fail(context, host, terminal):
        def run(options, raw_input):
            context.close(ValueError("x"))
        return run

    @registry.register("boom")
    def boom(context, host, terminal):
        def run(options, raw_input):
            raise RuntimeError("handler exploded")
        return run

    @registry.register("hold")
    def hold(context, host, terminal):
        def run(options, raw_input):
            held_contexts.append(context)
        return run

    return registry.freeze()

