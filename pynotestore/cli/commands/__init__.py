"""Command modules for the pynotestore CLI."""

from pynotestore.cli.commands import export, inspect

__all__ = ["export", "inspect"]
