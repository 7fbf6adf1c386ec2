"""Line buffer and key interpreter.

Turns raw key events into edits of the session's input buffer, echoing
every handled key to the terminal immediately, and hands completed lines
to a submit callback.
"""

from __future__ import annotations

import logging
from typing import Callable

from termshell.domain.models import ARROW_KEYS, KeyCode, KeyEvent, SessionState
from termshell.shell.base import TerminalSurface

logger = logging.getLogger(__name__)

ERASE_SEQUENCE = "\b \b"


class KeyInterpreter:
    """Maintains the in-progress input line for one session.

    Example usage::

        keys = KeyInterpreter(state, terminal, on_submit=queue.put_nowait,
                              on_empty_submit=session.prompt)
        keys.feed("l", KeyEvent(key_code=76))
        keys.feed("s", KeyEvent(key_code=83))
        keys.feed("\\r", KeyEvent(key_code=13))   # submits "ls"
    """

    def __init__(
        self,
        state: SessionState,
        terminal: TerminalSurface,
        on_submit: Callable[[str], None],
        on_empty_submit: Callable[[], None],
        on_arrow: Callable[[int], None] | None = None,
    ) -> None:
        self._state = state
        self._terminal = terminal
        self._on_submit = on_submit
        self._on_empty_submit = on_empty_submit
        self._on_arrow = on_arrow

    @property
    def buffer(self) -> str:
        return self._state.input_buffer

    def feed(self, key: str, event: KeyEvent) -> None:
        """Handle one physical key press."""
        code = event.key_code

        if code == KeyCode.ENTER:
            line = self._state.input_buffer
            self._state.input_buffer = ""
            if line:
                self._on_submit(line)
            else:
                self._on_empty_submit()
        elif code == KeyCode.BACKSPACE:
            if self._state.input_buffer:
                self._state.input_buffer = self._state.input_buffer[:-1]
                self._terminal.write(ERASE_SEQUENCE)
        elif code in ARROW_KEYS:
            self.on_arrow(code)
        elif event.printable:
            self._state.input_buffer += key
            self._terminal.write(key)

    def on_arrow(self, key_code: int) -> None:
        """Extension point for history recall and cursor movement.

        Arrow keys never edit the buffer here; pass ``on_arrow`` to the
        constructor to give them behaviour.
        """
        if self._on_arrow is not None:
            self._on_arrow(key_code)
        else:
            logger.debug("Arrow key %d has no binding", key_code)
