"""Tests for the built-in command catalog."""

from __future__ import annotations

from pathlib import PurePosixPath

import pytest

from termshell.commands import default_registry
from termshell.commands.builtins import resolve_directory
from termshell.domain.models import DirectoryChange, SessionState
from termshell.shell.dispatcher import CommandDispatcher
from termshell.shell.errors import HandlerSyncFailure
from termshell.shell.host import ConfigHost
from termshell.terminal.buffer import BufferedTerminal


@pytest.fixture
def dispatcher(state: SessionState, host: ConfigHost, terminal: BufferedTerminal) -> CommandDispatcher:
    return CommandDispatcher(default_registry(), state, host, terminal)


class TestBuiltins:
    def test_catalog(self) -> None:
        assert set(default_registry()) == {"banner", "echo", "clear", "pwd", "cd", "whoami", "help"}

    @pytest.mark.asyncio
    async def test_echo_joins_arguments(self, dispatcher: CommandDispatcher, terminal: BufferedTerminal) -> None:
        assert await dispatcher.dispatch("echo hello world") is None
        assert terminal.output == "hello world"

    @pytest.mark.asyncio
    async def test_banner_greets_user(self, dispatcher: CommandDispatcher, terminal: BufferedTerminal) -> None:
        await dispatcher.dispatch("banner")
        assert "Welcome to termshell 1.0" in terminal.output
        assert "Logged in as alice" in terminal.output

    @pytest.mark.asyncio
    async def test_clear(self, dispatcher: CommandDispatcher, terminal: BufferedTerminal) -> None:
        terminal.write("old output")
        await dispatcher.dispatch("clear")
        assert terminal.output == ""
        assert terminal.clear_count == 1

    @pytest.mark.asyncio
    async def test_pwd_returns_working_directory(
        self, dispatcher: CommandDispatcher, terminal: BufferedTerminal
    ) -> None:
        assert await dispatcher.dispatch("pwd") == PurePosixPath("/home/alice")
        assert terminal.output == "/home/alice"

    @pytest.mark.asyncio
    async def test_whoami_is_asynchronous(self, dispatcher: CommandDispatcher, terminal: BufferedTerminal) -> None:
        assert await dispatcher.dispatch("whoami") == "alice"
        assert terminal.output == "alice"

    @pytest.mark.asyncio
    async def test_cd_returns_directory_change(self, dispatcher: CommandDispatcher) -> None:
        outcome = await dispatcher.dispatch("cd projects")
        assert outcome == DirectoryChange(path=PurePosixPath("/home/alice/projects"))

    @pytest.mark.asyncio
    async def test_cd_without_argument_goes_to_root(self, dispatcher: CommandDispatcher) -> None:
        outcome = await dispatcher.dispatch("cd")
        assert outcome.path == PurePosixPath("/")

    @pytest.mark.asyncio
    async def test_cd_rejects_extra_arguments(self, dispatcher: CommandDispatcher) -> None:
        with pytest.raises(HandlerSyncFailure, match="too many arguments"):
            await dispatcher.dispatch("cd a b")

    @pytest.mark.asyncio
    async def test_help_lists_every_command(self, dispatcher: CommandDispatcher, terminal: BufferedTerminal) -> None:
        await dispatcher.dispatch("help")
        for name in default_registry():
            assert name in terminal.output
        assert "Print the arguments" in terminal.output


class TestResolveDirectory:
    @pytest.mark.parametrize(
        ("current", "target", "expected"),
        [
            ("/home/alice", "docs", "/home/alice/docs"),
            ("/home/alice", "..", "/home"),
            ("/", "..", "/"),
            ("/home", "/etc/./ssh/", "/etc/ssh"),
            ("/home", "//srv", "/srv"),
        ],
    )
    def test_resolution(self, current: str, target: str, expected: str) -> None:
        assert resolve_directory(PurePosixPath(current), target) == PurePosixPath(expected)
