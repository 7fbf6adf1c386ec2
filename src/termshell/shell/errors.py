"""Error taxonomy for command dispatch.

Every failure a dispatch can end in is a :class:`ShellError`. None of them
are fatal: the session renders them and returns to the prompt.
"""

from __future__ import annotations

import json
from typing import Any


class ShellError(Exception):
    """Base class for errors surfaced to the terminal user."""


class CommandNotFound(ShellError):
    """The leading token of a line names no registered command."""

    def __init__(self, input: str) -> None:
        super().__init__(f"Command not found: {input}")
        self.input = input


class ArgumentError(ShellError):
    """The argument list could not be parsed against the command schema."""


class HandlerFailure(ShellError):
    """A command handler failed; ``error`` holds what it raised or reported."""

    def __init__(self, error: BaseException) -> None:
        super().__init__(str(error) or type(error).__name__)
        self.error = error


class HandlerSyncFailure(HandlerFailure):
    """The handler raised while being invoked."""


class HandlerAsyncFailure(HandlerFailure):
    """The handler's pending outcome or completion channel reported failure."""


def _error_payload(error: BaseException) -> dict[str, Any]:
    payload: dict[str, Any] = {"name": type(error).__name__, "message": str(error)}
    for key, value in vars(error).items():
        if key.startswith("_"):
            continue
        payload[key] = _error_payload(value) if isinstance(value, BaseException) else value
    return payload


def serialize_error(error: BaseException) -> str:
    """Render an error as a JSON document.

    Raises TypeError when the error carries attributes that have no JSON
    form; callers fall back to ``str(error)`` in that case.
    """
    return json.dumps(_error_payload(error))
