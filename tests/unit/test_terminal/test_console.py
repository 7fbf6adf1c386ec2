"""Tests for the local console surface and key decoding."""

from __future__ import annotations

import asyncio
import io
import os
import termios
from typing import Callable, Iterator

import pytest

from termshell.commands.registry import CommandRegistry
from termshell.config.settings import ShellConfig
from termshell.shell.host import ConfigHost
from termshell.shell.session import ShellSession
from termshell.terminal.buffer import BufferedTerminal
from termshell.terminal.console import ConsoleTerminal, KeyDecoder, attach_console, decode_keys


class TestDecodeKeys:
    def test_printable_characters(self) -> None:
        keys = decode_keys("ls -a")
        assert [key for key, _ in keys] == ["l", "s", " ", "-", "a"]
        assert all(event.printable for _, event in keys)

    def test_punctuation_never_looks_like_arrows(self) -> None:
        for _, event in decode_keys("%&'("):
            assert event.key_code == 0

    def test_enter_and_backspace(self) -> None:
        codes = [event.key_code for _, event in decode_keys("\r\n\x7f\b")]
        assert codes == [13, 13, 8, 8]

    def test_arrow_sequences(self) -> None:
        keys = decode_keys("\x1b[A\x1b[B\x1b[C\x1b[D")
        assert [event.key_code for _, event in keys] == [38, 40, 39, 37]
        assert keys[0][0] == "\x1b[A"

    def test_control_characters_carry_ctrl(self) -> None:
        [(key, event)] = decode_keys("\x03")
        assert key == "c"
        assert event.ctrl_key is True
        assert event.key_code == ord("C")

    def test_escape_prefix_carries_alt(self) -> None:
        [(key, event)] = decode_keys("\x1bf")
        assert key == "f"
        assert event.alt_key is True

    def test_lone_escape_is_dropped(self) -> None:
        assert decode_keys("\x1b") == []

    def test_tab_is_printable(self) -> None:
        [(key, event)] = decode_keys("\t")
        assert key == "\t"
        assert event.printable


class TestConsoleTerminal:
    def test_writes_go_to_stream(self) -> None:
        stream = io.StringIO()
        terminal = ConsoleTerminal(stream)
        terminal.write("a")
        terminal.write_line("b")
        terminal.clear()
        assert stream.getvalue() == "ab\r\n\x1b[2J\x1b[H"


class TestKeyDecoder:
    def test_multibyte_character_split_across_reads(self) -> None:
        decoder = KeyDecoder()
        assert decoder.feed("é".encode()[:1]) == []
        [(key, event)] = decoder.feed("é".encode()[1:])
        assert key == "é"
        assert event.printable

    def test_escape_sequence_split_across_reads(self) -> None:
        decoder = KeyDecoder()
        assert decoder.feed(b"ab\x1b") != []
        [(key, event)] = decoder.feed(b"[A")
        assert key == "\x1b[A"
        assert event.key_code == 38

    def test_partial_csi_is_held(self) -> None:
        decoder = KeyDecoder()
        assert decoder.feed(b"\x1b[") == []
        assert [event.key_code for _, event in decoder.feed(b"D")] == [37]


async def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not reached before timeout")
        await asyncio.sleep(0.001)


@pytest.fixture
def pty_pair() -> Iterator[tuple[int, io.FileIO]]:
    """A pseudo-terminal: the master fd and the slave as a readable file."""
    master, slave = os.openpty()
    slave_file = io.FileIO(slave, "rb", closefd=True)
    try:
        yield master, slave_file
    finally:
        slave_file.close()
        os.close(master)


class FailingSession:
    async def run(self) -> None:
        raise RuntimeError("session crashed")

    def handle_key(self, key, event) -> None:
        pass


class TestAttachConsole:
    @pytest.mark.asyncio
    async def test_keys_arrive_across_split_reads_and_ctrl_d_detaches(
        self, pty_pair: tuple[int, io.FileIO], registry: CommandRegistry, host: ConfigHost
    ) -> None:
        master, slave = pty_pair
        before = termios.tcgetattr(slave.fileno())
        session = ShellSession(registry, host, BufferedTerminal(), config=ShellConfig(reprompt_delay=0))
        attached = asyncio.create_task(attach_console(session, slave))

        await asyncio.sleep(0.01)
        os.write(master, "é".encode()[:1])
        await asyncio.sleep(0.01)
        os.write(master, "é".encode()[1:] + b"x")
        await wait_for(lambda: session.state.input_buffer == "éx")

        os.write(master, b"\x04")
        await asyncio.wait_for(attached, timeout=2.0)
        assert termios.tcgetattr(slave.fileno()) == before

    @pytest.mark.asyncio
    async def test_tty_restored_when_session_fails(self, pty_pair: tuple[int, io.FileIO]) -> None:
        master, slave = pty_pair
        before = termios.tcgetattr(slave.fileno())
        with pytest.raises(RuntimeError, match="session crashed"):
            await asyncio.wait_for(attach_console(FailingSession(), slave), timeout=2.0)
        assert termios.tcgetattr(slave.fileno()) == before
