"""pipekit CLI main entry point with global options."""

import logging

import click

from ..context import PipekitContext


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log spawn and I/O details")
@click.pass_context
def cli(ctx, verbose):
    """pipekit - run shell-style pipelines without a shell."""
    ctx.ensure_object(PipekitContext)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s: %(message)s",
        )


# Register commands at module level so tests can import cli with commands attached
from .commands.explain import explain  # noqa: E402
from .commands.run import run  # noqa: E402

cli.add_command(run)
cli.add_command(explain)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
