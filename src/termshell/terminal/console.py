"""Local console surface.

Puts the controlling tty into raw mode, decodes incoming bytes into the
key events the shell understands, and writes output straight to stdout.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import sys
import termios
import tty
from typing import IO, TextIO

from termshell.domain.models import KeyCode, KeyEvent
from termshell.shell.base import TerminalSurface
from termshell.shell.session import ShellSession
from termshell.terminal.buffer import LINE_BREAK

logger = logging.getLogger(__name__)

ESCAPE = "\x1b"
END_OF_TRANSMISSION = "\x04"  # Ctrl+D

ARROW_SEQUENCES = {
    "A": KeyCode.UP,
    "B": KeyCode.DOWN,
    "C": KeyCode.RIGHT,
    "D": KeyCode.LEFT,
}


class ConsoleTerminal(TerminalSurface):
    """Writes terminal output to a text stream, flushing every call."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdout

    def write(self, text: str) -> None:
        self._stream.write(text)
        self._stream.flush()

    def write_line(self, text: str) -> None:
        self.write(text + LINE_BREAK)

    def clear(self) -> None:
        self.write("\x1b[2J\x1b[H")


def _printable_key_code(char: str) -> int:
    if char.isascii() and char.isalnum():
        return ord(char.upper())
    return 0


def decode_keys(data: str) -> list[tuple[str, KeyEvent]]:
    """Translate raw terminal input into ``(key, event)`` pairs.

    A lone escape byte carries no key and is dropped.
    """
    keys: list[tuple[str, KeyEvent]] = []
    i = 0
    while i < len(data):
        char = data[i]

        if char in "\r\n":
            keys.append((char, KeyEvent(key_code=KeyCode.ENTER)))
            i += 1
        elif char in "\x7f\b":
            keys.append((char, KeyEvent(key_code=KeyCode.BACKSPACE)))
            i += 1
        elif char == ESCAPE:
            if data[i + 1:i + 2] == "[" and data[i + 2:i + 3] in ARROW_SEQUENCES:
                sequence = data[i:i + 3]
                keys.append((sequence, KeyEvent(key_code=ARROW_SEQUENCES[data[i + 2]])))
                i += 3
            elif i + 1 < len(data):
                # Meta sends ESC followed by the key
                nxt = data[i + 1]
                keys.append((nxt, KeyEvent(key_code=_printable_key_code(nxt), alt_key=True)))
                i += 2
            else:
                i += 1
        elif char != "\t" and ord(char) < 32:
            letter = chr(ord(char) + 64)
            keys.append((letter.lower(), KeyEvent(key_code=ord(letter), ctrl_key=True)))
            i += 1
        else:
            keys.append((char, KeyEvent(key_code=_printable_key_code(char))))
            i += 1
    return keys


class KeyDecoder:
    """Decodes a byte stream into key events across read boundaries.

    Holds back an incomplete UTF-8 sequence and an unfinished escape
    prefix until the rest arrives.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""

    def feed(self, data: bytes) -> list[tuple[str, KeyEvent]]:
        text = self._pending + self._decoder.decode(data)
        self._pending = ""
        if text.endswith(ESCAPE):
            self._pending = ESCAPE
        elif text.endswith(ESCAPE + "["):
            self._pending = ESCAPE + "["
        if self._pending:
            text = text[:-len(self._pending)]
        return decode_keys(text)


async def attach_console(session: ShellSession, stdin: IO | None = None) -> None:
    """Drive ``session`` from the local tty until Ctrl+D.

    The tty's attributes are restored however the session ends.
    """
    fd = (stdin or sys.stdin).fileno()
    saved = termios.tcgetattr(fd)
    loop = asyncio.get_running_loop()
    finished: asyncio.Future[None] = loop.create_future()
    decoder = KeyDecoder()

    def detach() -> None:
        if not finished.done():
            finished.set_result(None)

    def on_readable() -> None:
        data = os.read(fd, 1024)
        if not data or END_OF_TRANSMISSION.encode() in data:
            detach()
            return
        for key, event in decoder.feed(data):
            session.handle_key(key, event)

    runner: asyncio.Task[None] | None = None
    try:
        tty.setraw(fd)
        loop.add_reader(fd, on_readable)
        runner = asyncio.create_task(session.run())
        runner.add_done_callback(lambda task: detach())
        logger.info("Console attached")
        await finished
    finally:
        loop.remove_reader(fd)
        try:
            if runner is not None:
                runner.cancel()
                try:
                    await runner
                except asyncio.CancelledError:
                    pass
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
            logger.info("Console detached")
