"""Console echo of pipelines before they run.

The default pipeline observer. It renders one line per pipeline on stderr:

    cmd cd: /tmp env: LC_ALL=C sort -u | head -n 3
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import click

from .context import color_enabled
from .quoting import quote_argument

if TYPE_CHECKING:
    from .pipeline import Pipeline


def _label(text: str) -> str:
    return click.style(text, fg="bright_blue")


def _value(text: str) -> str:
    return click.style(text, fg="bright_blue", underline=True)


def render_pipeline(pipeline: "Pipeline") -> str:
    """Render a pipeline with ANSI styles (strip with click.unstyle)."""
    parts = [click.style("cmd", fg="bright_black")]

    for command, mode in pipeline.connections():
        if mode is not None:
            parts.append(click.style(mode.symbol, fg="magenta"))

        if command.cwd is not None:
            parts.append(_label("cd:"))
            parts.append(_value(quote_argument(command.cwd)))

        if command.clear_env:
            parts.append(_label("env:"))
            parts.append(_value("--clear"))

        for key, value in command.env_pairs:
            parts.append(_label("env:"))
            if value is None:
                parts.append(_value(f"-{quote_argument(key)}"))
            else:
                parts.append(
                    _value(f"{quote_argument(key)}={quote_argument(value)}")
                )

        parts.append(click.style(quote_argument(command.program), fg="cyan", bold=True))
        for arg in command.arguments:
            parts.append(click.style(quote_argument(arg), bold=True, underline=True))

    return " ".join(parts)


def echo_pipeline(
    pipeline: "Pipeline", enabled: bool, color: Optional[bool] = None
) -> None:
    """Default observer: print the pipeline to stderr when enabled.

    Args:
        pipeline: Pipeline about to be spawned
        enabled: Whether echo is on for this pipeline
        color: Force styling on or off; None follows $NO_COLOR and whether
            stderr is a terminal
    """
    if not enabled:
        return
    if color is None and not color_enabled():
        color = False
    click.echo(render_pipeline(pipeline), err=True, color=color)


__all__ = ["echo_pipeline", "render_pipeline"]
