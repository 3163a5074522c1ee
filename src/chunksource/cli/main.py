"""chunksource CLI entry point: Click group with subcommands."""

import logging

import click

from chunksource import __version__


def configure_logging(verbose: int = 0, quiet: bool = False) -> None:
    """Configure root logging for CLI runs."""
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.version_option(version=__version__, prog_name="chunksource")
def cli() -> None:
    """chunksource - server-sent-style events over chunked HTTP responses."""


# Import and register subcommands
from chunksource.cli.tail import tail  # noqa: E402
from chunksource.cli.serve import serve  # noqa: E402

cli.add_command(tail)
cli.add_command(serve)
