"""Logging setup utilities for termshell.

Configures logging for the entire application based on the logging
configuration settings.
"""

from __future__ import annotations

import logging
import sys

from termshell.config.settings import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure logging for the termshell application.

    Sets up the root 'termshell' logger with the specified level, format,
    and optional file handler. Logs go to stderr so they never interleave
    with terminal output on stdout. Calling it again only updates the level.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stderr output).
    """
    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger("termshell")
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))
    if root_logger.handlers:
        return

    formatter = logging.Formatter(config.format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.file:
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.info("Logging initialized at %s level", config.level)
