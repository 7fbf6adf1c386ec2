"""Registry of command handler factories.

Each entry maps a command name to a factory with the calling contract
``factory(context, host, terminal) -> handler`` where
``handler(options, raw_input)`` returns a value, an awaitable, or None
(and then settles through ``context.close``).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Callable

from termshell.shell.dispatcher import CommandFactory

logger = logging.getLogger(__name__)


class CommandRegistry(Mapping[str, CommandFactory]):
    """Read-only mapping once :meth:`freeze` has been called."""

    def __init__(self) -> None:
        self._factories: dict[str, CommandFactory] = {}
        self._descriptions: dict[str, str] = {}
        self._frozen = False

    def register(
        self,
        name: str,
        factory: CommandFactory | None = None,
        *,
        description: str = "",
    ) -> CommandFactory | Callable[[CommandFactory], CommandFactory]:
        """Register ``factory`` under ``name``; usable as a decorator."""
        if factory is None:
            def decorator(f: CommandFactory) -> CommandFactory:
                self.register(name, f, description=description)
                return f
            return decorator

        if self._frozen:
            raise RuntimeError(f"Registry is frozen, cannot add {name!r}")
        if not name or any(c.isspace() for c in name):
            raise ValueError(f"Invalid command name: {name!r}")
        if name in self._factories:
            raise ValueError(f"Command already registered: {name}")

        self._factories[name] = factory
        self._descriptions[name] = description
        logger.debug("Registered command %s", name)
        return factory

    def freeze(self) -> CommandRegistry:
        self._frozen = True
        return self

    def describe(self, name: str) -> str:
        return self._descriptions.get(name, "")

    def __getitem__(self, name: str) -> CommandFactory:
        return self._factories[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)

    def __len__(self) -> int:
        return len(self._factories)
