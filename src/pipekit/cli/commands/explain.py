"""Explain command - show the resolved plan for a pipeline without running it."""

import click

from ...models import PipeMode
from ..helpers import build_pipeline


@click.command(context_settings=dict(ignore_unknown_options=True))
@click.option(
    "--capture",
    type=click.Choice([mode.value for mode in PipeMode]),
    default=PipeMode.STDOUT.value,
    show_default=True,
)
@click.argument("stages", nargs=-1, required=True, type=click.UNPROCESSED)
def explain(capture, stages):
    """Print a pipeline's stages and edges as JSON.

    Example:
        pipekit explain -- ls -l '|' sort '2|' wc -c
    """
    try:
        pipeline = build_pipeline(stages).capture(PipeMode(capture))
    except ValueError as e:
        click.echo(f"Error: Invalid pipeline: {e}", err=True)
        raise SystemExit(2)

    click.echo(pipeline.plan().model_dump_json(indent=2))
