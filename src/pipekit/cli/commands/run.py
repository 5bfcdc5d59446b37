"""Run command - execute a pipeline and stream its output to stdout."""

import functools

import click

from ...context import pass_context, resolve_settings
from ...echo import echo_pipeline
from ...exceptions import PipelineError
from ...models import PipeMode
from ..helpers import build_pipeline, fail


@click.command(context_settings=dict(ignore_unknown_options=True))
@click.option("--no-echo", is_flag=True, help="Do not echo the pipeline")
@click.option("--no-color", is_flag=True, help="Echo without ANSI styles")
@click.option(
    "--capture",
    type=click.Choice([mode.value for mode in PipeMode]),
    default=PipeMode.STDOUT.value,
    show_default=True,
    help="Stream(s) of the last stage to write to stdout",
)
@click.option(
    "--input",
    "input_file",
    type=click.File("rb"),
    help="File fed to the first stage's stdin ('-' for stdin)",
)
@click.argument("stages", nargs=-1, required=True, type=click.UNPROCESSED)
@pass_context
def run(ctx, no_echo, no_color, capture, input_file, stages):
    """Run a pipeline of commands.

    Stages are separated by pipe symbols given as separate arguments:
    '|' pipes stdout, '2|' pipes stderr, '&|' pipes both.
    Quote the symbols so your shell does not interpret them.

    Examples:
        pipekit run -- echo hello '|' tr a-z A-Z
        pipekit run -- sh -c 'echo out; echo err >&2' '&|' wc -l
        pipekit run --input data.txt -- sort '|' uniq -c

    Exits with the code of the earliest failing stage (128 + signal for a
    stage killed by a signal, 127 when a program cannot be found).
    """
    try:
        pipeline = build_pipeline(stages).capture(PipeMode(capture))
    except ValueError as e:
        click.echo(f"Error: Invalid pipeline: {e}", err=True)
        raise SystemExit(2)

    ctx.settings = resolve_settings(no_echo=no_echo, no_color=no_color)
    if not ctx.settings.echo:
        pipeline.no_echo()
    if not ctx.settings.color:
        pipeline.on_spawn(functools.partial(echo_pipeline, color=False))
    if input_file is not None:
        pipeline.input_reader(input_file)

    try:
        status = pipeline.stream_to(
            click.get_binary_stream("stdout"), check=False
        )
        status.check()
    except PipelineError as e:
        fail(e)
