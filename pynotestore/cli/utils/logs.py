"""Logging setup shared by the CLI commands."""

import logging

from rich.logging import RichHandler


def configure_logging(verbose: bool = False) -> None:
    """Route library logs through rich; DEBUG when ``verbose``."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[
            RichHandler(
                rich_tracebacks=True,
                markup=False,
                show_time=True,
                log_time_format="%H:%M:%S",
            )
        ],
        force=True,
    )
