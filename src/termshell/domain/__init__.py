"""Core domain models for termshell."""

from termshell.domain.models import (
    DirectoryChange,
    KeyEvent,
    ParsedOptions,
    SessionPhase,
    SessionState,
    User,
)

__all__ = [
    "DirectoryChange",
    "KeyEvent",
    "ParsedOptions",
    "SessionPhase",
    "SessionState",
    "User",
]
