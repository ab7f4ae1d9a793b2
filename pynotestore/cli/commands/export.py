"""Export command for the pynotestore CLI."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from pynotestore.cli.utils.logs import configure_logging
from pynotestore.exceptions import NoteStoreAccessError, NoteStoreNotFound
from pynotestore.rendering.options import ExportConfig, default_data_path
from pynotestore.service import NoteStoreExporter

console = Console()


def export_notes(
    output_dir: str = typer.Argument(
        "./notes", help="Directory that receives the Markdown files"
    ),
    include_first_line: bool = typer.Option(
        False,
        "--include-first-line",
        help="Keep the first line of each note (it usually repeats the title)",
    ),
    include_trashed: bool = typer.Option(
        False, "--include-trashed", help="Also export notes in Recently Deleted"
    ),
    include_handwriting: bool = typer.Option(
        False,
        "--include-handwriting",
        help="Quote recognized handwriting above exported drawings",
    ),
    data_path: Optional[str] = typer.Option(
        None,
        "--data-path",
        help="Notes group container (default: $PYNOTESTORE_DATA_PATH or ~/Library/...)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Export every note in the local store to Markdown."""
    configure_logging(verbose)
    config = ExportConfig(
        omit_first_line=not include_first_line,
        include_trashed=include_trashed,
        include_handwriting=include_handwriting,
        data_path=data_path or default_data_path(),
    )
    console.print(f"Output directory: [bold]{output_dir}[/bold]")

    try:
        stats = NoteStoreExporter(output_dir, config).run()
    except (NoteStoreAccessError, NoteStoreNotFound) as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)

    table = Table("Notes found", "Exported", "Failed", "Skipped", "Attachments")
    table.add_row(
        str(stats.notes_found),
        str(stats.notes_exported),
        str(stats.notes_failed),
        str(stats.notes_skipped),
        str(stats.attachments_exported),
    )
    console.print(table)
