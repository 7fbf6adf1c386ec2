"""Host handle backed by termshell settings."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from termshell.config.settings import Settings
from termshell.domain.models import User
from termshell.shell.base import HostHandle

logger = logging.getLogger(__name__)

DEFAULT_USERNAME = "guest"


class ConfigHost(HostHandle):
    """Serves the current user and flat config values from memory."""

    def __init__(self, username: str = DEFAULT_USERNAME, values: Mapping[str, Any] | None = None) -> None:
        self._user = User(username=username)
        self._values = dict(values or {})

    @classmethod
    def from_settings(cls, settings: Settings) -> ConfigHost:
        shell = settings.shell
        values = {"app_name": shell.app_name}
        if shell.version:
            values["version"] = shell.version
        return cls(username=shell.username or DEFAULT_USERNAME, values=values)

    def current_user(self) -> User:
        return self._user

    def config_value(self, key: str) -> Any | None:
        return self._values.get(key)
