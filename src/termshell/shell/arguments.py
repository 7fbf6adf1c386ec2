"""Argument-list parsing for command handlers.

A schema maps long flag names to ``bool`` (a switch) or ``str`` (takes a
value). Anything the schema does not declare passes through as a
positional argument, so an empty schema leaves the list untouched.
"""

from __future__ import annotations

import argparse
from collections.abc import Mapping, Sequence
from typing import NoReturn

from termshell.domain.models import ParsedOptions
from termshell.shell.errors import ArgumentError

ArgumentSchema = Mapping[str, type]

END_OF_FLAGS = "--"


class _CommandArgumentParser(argparse.ArgumentParser):
    """An ArgumentParser that raises instead of printing and exiting."""

    def error(self, message: str) -> NoReturn:
        raise ArgumentError(message)


def build_parser(schema: ArgumentSchema) -> argparse.ArgumentParser:
    """Build a parser declaring one long option per schema entry."""
    parser = _CommandArgumentParser(add_help=False, allow_abbrev=False, exit_on_error=False)
    for name, kind in schema.items():
        if kind is bool:
            parser.add_argument(f"--{name}", dest=name, action="store_true", default=argparse.SUPPRESS)
        else:
            parser.add_argument(f"--{name}", dest=name, default=argparse.SUPPRESS)
    return parser


def parse_arguments(schema: ArgumentSchema, args: Sequence[str]) -> ParsedOptions:
    """Parse ``args`` against ``schema``.

    Supports ``--flag``, ``--name value`` and ``--name=value``. A bare
    ``--`` ends flag parsing.

    Raises:
        ArgumentError: The list does not fit the schema.
    """
    tokens = list(args)
    if not schema:
        return ParsedOptions(positional=tokens)

    rest: list[str] = []
    if END_OF_FLAGS in tokens:
        split = tokens.index(END_OF_FLAGS)
        tokens, rest = tokens[:split], tokens[split + 1:]

    try:
        namespace, extras = build_parser(schema).parse_known_args(tokens)
    except argparse.ArgumentError as e:
        raise ArgumentError(str(e)) from e

    return ParsedOptions(positional=extras + rest, flags=vars(namespace))
