"""pipekit settings and CLI context."""

import os
from dataclasses import dataclass
from typing import Optional

import click

DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class Settings:
    """Resolved runtime settings."""

    echo: bool
    color: bool


def _env_flag(*names: str) -> bool:
    """True if any of the named environment variables is set."""
    return any(os.environ.get(name) is not None for name in names)


def echo_enabled() -> bool:
    """Echo is on unless $PIPEKIT_NO_ECHO or $NO_ECHO is set."""
    return not _env_flag("PIPEKIT_NO_ECHO", "NO_ECHO")


def color_enabled() -> bool:
    """Colour is on unless $NO_COLOR is set (https://no-color.org)."""
    return not _env_flag("NO_COLOR")


def chunk_size() -> int:
    """Copy chunk size for forwarding threads.

    Reads $PIPEKIT_CHUNK_SIZE; missing, non-numeric or non-positive values
    fall back to DEFAULT_CHUNK_SIZE.
    """
    raw = os.environ.get("PIPEKIT_CHUNK_SIZE")
    if not raw:
        return DEFAULT_CHUNK_SIZE
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_CHUNK_SIZE
    return value if value > 0 else DEFAULT_CHUNK_SIZE


def resolve_settings(
    no_echo: Optional[bool] = None, no_color: Optional[bool] = None
) -> Settings:
    """Resolve settings.

    Resolution order:
    1. Explicit flags (CLI --no-echo / --no-color)
    2. Environment variables
    3. Defaults (echo and colour on)

    Reads fresh from the environment each time; nothing is cached.

    Args:
        no_echo: Value of --no-echo if given
        no_color: Value of --no-color if given

    Returns:
        Settings for this invocation
    """
    echo = echo_enabled() if not no_echo else False
    color = color_enabled() if not no_color else False
    return Settings(echo=echo, color=color)


class PipekitContext:
    def __init__(self):
        self.settings = resolve_settings()


pass_context = click.make_pass_decorator(PipekitContext, ensure=True)
