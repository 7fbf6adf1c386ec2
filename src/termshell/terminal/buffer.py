"""In-memory terminal surface."""

from __future__ import annotations

from termshell.shell.base import TerminalSurface

LINE_BREAK = "\r\n"


class BufferedTerminal(TerminalSurface):
    """Records everything written since the last clear."""

    def __init__(self) -> None:
        self.output = ""
        self.clear_count = 0

    def write(self, text: str) -> None:
        self.output += text

    def write_line(self, text: str) -> None:
        self.output += text + LINE_BREAK

    def clear(self) -> None:
        self.output = ""
        self.clear_count += 1

    @property
    def lines(self) -> list[str]:
        return self.output.split(LINE_BREAK)
