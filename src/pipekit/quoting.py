"""Argument quoting for display.

Quoting here favours readability over shell compatibility: the output is
meant for humans reading an echoed pipeline, not for pasting into a shell.
Use :func:`shlex.join` when a shell-safe string is needed.
"""

from __future__ import annotations

import os
from typing import Iterable

# Characters that make an argument ambiguous when printed bare.
_SPECIAL = frozenset(" \t\n\r\"'*?[]{}~$`|&;()<>#!=")

_ESCAPES = {
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
    "\0": "\\0",
}


def _escape_control(text: str) -> str:
    parts = []
    for char in text:
        if char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            parts.append(f"\\x{ord(char):02x}")
        else:
            parts.append(char)
    return "".join(parts)


def _needs_quoting(text: str) -> bool:
    return any(
        char in _SPECIAL or ord(char) < 0x20 or ord(char) == 0x7F
        for char in text
    )


def quote_argument(arg: str | os.PathLike[str]) -> str:
    """Quote a single argument for display.

    - empty arguments render as ``""``
    - arguments containing a single quote are wrapped in double quotes,
      with backslashes and double quotes escaped
    - arguments containing whitespace, control or shell-special characters
      are wrapped in single quotes
    - control characters are always shown as escapes (``\\n``, ``\\x1b``)

    Examples:
        >>> quote_argument("hello")
        'hello'
        >>> quote_argument("hello world")
        "'hello world'"
        >>> quote_argument("it's")
        '"it\\'s"'
    """
    text = os.fspath(arg)
    if not text:
        return '""'

    if "'" in text:
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{_escape_control(escaped)}"'

    if _needs_quoting(text):
        return f"'{_escape_control(text)}'"

    return text


def join_arguments(args: Iterable[str | os.PathLike[str]]) -> str:
    """Quote and join arguments with single spaces."""
    return " ".join(quote_argument(arg) for arg in args)


__all__ = ["join_arguments", "quote_argument"]
