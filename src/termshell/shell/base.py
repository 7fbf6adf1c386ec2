"""Abstract interfaces the shell consumes from its host environment.

The shell never touches a window, a socket or stdout directly. It writes
through a :class:`TerminalSurface` and asks a :class:`HostHandle` who the
user is, so the same session logic runs in a browser terminal, a local
console, or a test buffer.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from termshell.domain.models import User

logger = logging.getLogger(__name__)


class TerminalSurface(ABC):
    """Output primitives of a terminal.

    Every call must reach the terminal synchronously: no buffering or
    batching that would delay echo behind command execution.
    """

    @abstractmethod
    def write(self, text: str) -> None:
        """Write text at the cursor without a trailing newline."""
        ...

    @abstractmethod
    def write_line(self, text: str) -> None:
        """Write text followed by a line break."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Clear the visible screen."""
        ...


class HostHandle(ABC):
    """Host services the prompt needs."""

    @abstractmethod
    def current_user(self) -> User:
        """Return the user the session runs as."""
        ...

    @abstractmethod
    def config_value(self, key: str) -> Any | None:
        """Return a host configuration value, or None if it is not set."""
        ...
