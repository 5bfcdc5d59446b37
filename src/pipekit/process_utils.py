"""Thin wrappers around subprocess.Popen used by the orchestrator."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Sequence
from typing import Any

from .models.command import Command

CommandArg = str | os.PathLike[str]


def _normalize_command(cmd: Sequence[CommandArg]) -> list[str]:
    """Normalize argv entries to strings.

    Empty entries are passed through unchanged: an empty program is reported
    by the OS at spawn time, not here.
    """
    if not cmd:
        msg = "Command must include at least one argument"
        raise ValueError(msg)

    normalized: list[str] = []
    for arg in cmd:
        if isinstance(arg, os.PathLike):
            value = os.fspath(arg)
        elif isinstance(arg, str):
            value = arg
        else:
            msg = "Command arguments must be strings or os.PathLike"
            raise TypeError(msg)
        normalized.append(value)

    return normalized


def popen_command(command: Command, **kwargs: Any) -> subprocess.Popen[bytes]:
    """Start ``command`` with its env and cwd applied.

    Streams are passed straight through to Popen. ``close_fds`` stays on so
    no child inherits another stage's pipe ends; a stray write end would
    keep a downstream reader from ever seeing EOF.

    Raises:
        OSError: The program could not be executed (empty name, missing,
            not executable, bad working directory)
    """
    argv = _normalize_command(command.argv)
    return subprocess.Popen(  # noqa: S603
        argv,
        env=command.resolve_env(),
        cwd=command.cwd,
        close_fds=True,
        **kwargs,
    )


__all__ = ["popen_command"]
