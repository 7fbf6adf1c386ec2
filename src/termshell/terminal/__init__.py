"""Terminal surfaces for termshell.

Public API:
    BufferedTerminal -- In-memory surface
    ConsoleTerminal -- Local raw-mode console (lazy import, POSIX only)
"""

from termshell.terminal.buffer import BufferedTerminal

__all__ = ["BufferedTerminal", "ConsoleTerminal"]


def __getattr__(name: str) -> type:
    """Lazy import for the console surface, which needs termios."""
    if name == "ConsoleTerminal":
        from termshell.terminal.console import ConsoleTerminal
        return ConsoleTerminal
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
