#!/usr/bin/env python
"""Command line interface for pynotestore."""

import typer

from pynotestore.cli.commands import export, inspect

app = typer.Typer(help="Export the local Apple Notes store to Markdown")

app.command("export")(export.export_notes)
app.command("inspect")(inspect.inspect_blob)


@app.callback()
def callback():
    """Read NoteStore.sqlite and write one Markdown file per note."""
    pass


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
