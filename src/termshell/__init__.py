"""termshell -- Single-session interactive command shell.

Reads keystrokes from a terminal surface, assembles them into a line
buffer, dispatches completed lines to named command handlers, and
streams handler output back to the terminal asynchronously.
"""

__version__ = "0.1.0"
