"""Core domain models for the termshell system.

These models represent the data flowing through the shell: key events
from the terminal surface, the mutable session state, parsed command
options, and effects returned by command handlers.
"""

from __future__ import annotations

import enum
from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class SessionPhase(str, enum.Enum):
    """Where the session loop currently is in its prompt cycle."""

    IDLE = "idle"  # Prompt shown, waiting for a completed line
    DISPATCHING = "dispatching"  # A command outcome is pending
    REPORTING = "reporting"  # Outcome settled, re-prompt scheduled


class KeyCode(enum.IntEnum):
    """Key codes the key interpreter gives special meaning to."""

    BACKSPACE = 8
    ENTER = 13
    LEFT = 37
    UP = 38
    RIGHT = 39
    DOWN = 40


ARROW_KEYS = frozenset(int(k) for k in (KeyCode.LEFT, KeyCode.UP, KeyCode.RIGHT, KeyCode.DOWN))


# ---------------------------------------------------------------------------
# Input Models
# ---------------------------------------------------------------------------


class KeyEvent(BaseModel):
    """Metadata accompanying a single physical key press.

    Field aliases follow the browser/xterm event naming so frames from a
    web terminal validate directly.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key_code: int = Field(default=0, alias="keyCode", description="Browser-style key code")
    alt_key: bool = Field(default=False, alias="altKey")
    alt_graph_key: bool = Field(default=False, alias="altGraphKey")
    ctrl_key: bool = Field(default=False, alias="ctrlKey")
    meta_key: bool = Field(default=False, alias="metaKey")

    @property
    def printable(self) -> bool:
        """True when no modifier that turns a key into a shortcut is held."""
        return not (self.alt_key or self.alt_graph_key or self.ctrl_key or self.meta_key)


class User(BaseModel):
    """The user the host reports as logged in."""

    model_config = ConfigDict(frozen=True)

    username: str


class ParsedOptions(BaseModel):
    """Structured result of parsing a command's raw argument list."""

    model_config = ConfigDict(frozen=True)

    positional: list[str] = Field(default_factory=list)
    flags: dict[str, str | bool] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Session Models
# ---------------------------------------------------------------------------


class SessionState(BaseModel):
    """Mutable state owned by one shell session.

    ``input_buffer`` is only touched by the key interpreter and ``history``
    only grows through :meth:`record`.
    """

    working_directory: PurePosixPath = Field(default=PurePosixPath("/"))
    input_buffer: str = Field(default="")
    history: list[str] = Field(default_factory=list)

    def record(self, line: str) -> None:
        """Append a submitted line to the history."""
        self.history.append(line)


class DirectoryChange(BaseModel):
    """Effect a handler returns to move the session's working directory."""

    model_config = ConfigDict(frozen=True)

    path: PurePosixPath
