import logging

import click

from .cli_preview import preview


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log request assembly to stderr")
def cli(verbose: bool) -> None:
    """Build and inspect requests declared by action clients."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


cli.add_command(preview)

__all__ = ["cli"]
