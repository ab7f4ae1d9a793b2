"""
High-level export service.

Public API:
  - NoteStoreExporter(output_dir, config=None).run() -> ExportStats
  - NoteStoreExporter.export_from(datasource, exporter=None) -> ExportStats
  - NoteStoreExporter.export_note(datasource, renderer, note) -> Optional[str]

`run` clones the local store, exports every note sequentially, and returns the
counters. Only store access problems abort a run; everything that goes wrong
inside a single note is logged and counted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .datasource import SQLiteNoteDataSource, open_note_store
from .decoding import BodyDecoder
from .exceptions import NoteStoreAccessError, NoteStoreNotFound
from .files import LocalAttachmentExporter, discover_accounts
from .models import NoteRow
from .rendering.exporter import render_note_markdown, write_note_file
from .rendering.options import ExportConfig
from .rendering.renderer import NoteRenderer
from .rendering.renderer_iface import AttachmentExporter

LOGGER = logging.getLogger(__name__)

PROGRESS_EVERY = 10


@dataclass
class ExportStats:
    notes_found: int = 0
    notes_exported: int = 0
    notes_failed: int = 0
    # listed notes without a body row
    notes_skipped: int = 0
    attachments_exported: int = 0

    @property
    def notes_processed(self) -> int:
        return self.notes_exported + self.notes_failed + self.notes_skipped


class NoteStoreExporter:
    """Exports the local Apple Notes store to a directory of Markdown files."""

    def __init__(
        self,
        output_dir: str,
        config: Optional[ExportConfig] = None,
        decoder: Optional[BodyDecoder] = None,
    ):
        self.output_dir = output_dir
        self.config = config or ExportConfig()
        self.decoder = decoder or BodyDecoder()

    def run(self) -> ExportStats:
        data_path = self.config.data_path
        LOGGER.info("Exporting notes from %s to %s", data_path, self.output_dir)
        exporter = LocalAttachmentExporter(
            data_path,
            self.output_dir,
            accounts=discover_accounts(data_path),
            attachments_dirname=self.config.attachments_dirname,
        )
        with open_note_store(data_path) as datasource:
            return self.export_from(datasource, exporter)

    def export_from(
        self,
        datasource: SQLiteNoteDataSource,
        exporter: Optional[AttachmentExporter] = None,
    ) -> ExportStats:
        if exporter is None:
            exporter = LocalAttachmentExporter(
                self.config.data_path,
                self.output_dir,
                attachments_dirname=self.config.attachments_dirname,
            )
        renderer = NoteRenderer(datasource, exporter, self.config)
        stats = ExportStats()

        notes = datasource.list_notes(include_trashed=self.config.include_trashed)
        stats.notes_found = len(notes)
        LOGGER.info("Found %d notes to export", stats.notes_found)

        for note in notes:
            try:
                path = self.export_note(datasource, renderer, note)
            except (NoteStoreAccessError, NoteStoreNotFound):
                raise
            except Exception as e:
                LOGGER.warning("Failed to process note %r: %s", note.title, e)
                stats.notes_failed += 1
            else:
                if path is None:
                    stats.notes_skipped += 1
                else:
                    stats.notes_exported += 1
            done = stats.notes_processed
            if done % PROGRESS_EVERY == 0 or done == stats.notes_found:
                LOGGER.info("Progress: %d/%d notes processed", done, stats.notes_found)

        stats.attachments_exported = exporter.exported
        LOGGER.info(
            "Export completed: %d notes and %d attachments exported to %s",
            stats.notes_exported,
            stats.attachments_exported,
            self.output_dir,
        )
        return stats

    def export_note(
        self,
        datasource: SQLiteNoteDataSource,
        renderer: NoteRenderer,
        note: NoteRow,
    ) -> Optional[str]:
        """Export one note; returns the written path, or None without a body."""
        body = datasource.get_note_body(note.pk)
        if body is None or not body.hex_data:
            LOGGER.warning("No data found for note: %s", note.title)
            return None
        content = render_note_markdown(renderer, note.title, body.data, self.decoder)
        return write_note_file(
            self.output_dir, note.title, content, body.created, body.modified
        )
