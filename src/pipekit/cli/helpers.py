"""CLI helper utilities shared across commands."""

import sys
from typing import List, Sequence

import click

from ..exceptions import SpawnFailure, StageFailure, Terminated
from ..models import Command, PipeMode
from ..pipeline import Pipeline


def build_pipeline(tokens: Sequence[str]) -> Pipeline:
    """Build a pipeline from argv tokens split on pipe symbols.

    Tokens equal to a pipe symbol (``|``, ``2|``, ``&|``) separate stages;
    everything else is passed to the stage verbatim. No quoting, globbing
    or other shell syntax is interpreted.

    Example:
        build_pipeline(["echo", "hi", "|", "tr", "a-z", "A-Z"])

    Raises:
        ValueError: A stage is empty
    """
    symbols = PipeMode.symbols()
    groups: List[List[str]] = [[]]
    modes: List[PipeMode] = []

    for token in tokens:
        if token in symbols:
            modes.append(PipeMode.from_symbol(token))
            groups.append([])
        else:
            groups[-1].append(token)

    for position, group in enumerate(groups):
        if not group:
            raise ValueError(f"Stage {position} is empty")

    commands = [Command(group[0]).args(group[1:]) for group in groups]
    pipeline = Pipeline(commands[0])
    for command, mode in zip(commands[1:], modes):
        if mode is PipeMode.STDERR:
            pipeline.pipe_stderr(command)
        elif mode is PipeMode.BOTH:
            pipeline.pipe_both(command)
        else:
            pipeline.pipe(command)
    return pipeline


def exit_code_for(error: Exception) -> int:
    """Shell-style exit code for a pipeline error."""
    if isinstance(error, SpawnFailure):
        return 127 if isinstance(error.error, FileNotFoundError) else 126
    if isinstance(error, Terminated):
        return 128 + error.signal
    if isinstance(error, StageFailure):
        return getattr(error, "code", 1) or 1
    return 1


def fail(error: Exception) -> None:
    """Report ``error`` on stderr and exit with its code."""
    click.echo(f"Error: {error}", err=True)
    sys.exit(exit_code_for(error))
