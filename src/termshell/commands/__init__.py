"""Command catalog for termshell.

Public API:
    CommandRegistry -- Name to handler-factory mapping
    default_registry -- Registry populated with the built-in commands
"""

from termshell.commands.builtins import default_registry
from termshell.commands.registry import CommandRegistry

__all__ = ["CommandRegistry", "default_registry"]
