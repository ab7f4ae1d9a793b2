"""Inspect command: decode a single body or table blob from a file."""

import typer
from rich.console import Console
from rich.table import Table

from pynotestore.cli.utils.logs import configure_logging
from pynotestore.decoding import BodyDecoder, decompress
from pynotestore.exceptions import DecodingError
from pynotestore.rendering.debug_tools import dump_runs_text, map_attribute_runs
from pynotestore.rendering.renderer import render_plain_body
from pynotestore.rendering.table_builder import render_table_from_payload

console = Console()


def _read_blob(path: str, is_hex: bool) -> bytes:
    with open(path, "rb") as f:
        raw = f.read()
    if is_hex:
        return bytes.fromhex(raw.decode("ascii").strip())
    return raw


def inspect_blob(
    blob_file: str = typer.Argument(..., help="File holding a ZDATA or table blob"),
    is_hex: bool = typer.Option(
        False, "--hex", help="The file holds hex text, as printed by SQL hex()"
    ),
    table: bool = typer.Option(
        False, "--table", help="Treat the blob as table MergeableData"
    ),
    raw: bool = typer.Option(
        False, "--raw", help="Print each run with visible whitespace markers"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Decode one blob and print its attribute runs or reconstructed table."""
    configure_logging(verbose)
    try:
        payload = decompress(_read_blob(blob_file, is_hex))
        if table:
            markdown = render_table_from_payload(payload)
            if markdown is None:
                console.print("[yellow]Warning:[/yellow] No table found in blob")
                raise typer.Exit(1)
            console.print(markdown, markup=False)
            return
        note = BodyDecoder().decode_payload(payload)
    except (OSError, ValueError, DecodingError) as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)

    if raw:
        console.print(dump_runs_text(note), markup=False, highlight=False)
        return

    runs = Table("#", "Start", "Len", "Attachment", "UTI", "Text")
    for row in map_attribute_runs(note):
        runs.add_row(
            str(row["index"]),
            str(row["utf16_start"]),
            str(row["utf16_len"]),
            str(row["attachment_id"] or ""),
            str(row["uti"] or ""),
            repr(row["text"]),
        )
    console.print(runs)
    console.rule("Body")
    console.print(render_plain_body(note, omit_first_line=False), markup=False)
