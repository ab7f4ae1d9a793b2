"""Public API for pynotestore."""

from .decoding import BodyDecoder, decompress, scrape_text
from .domain import AttachmentRef, AttributeRun, DecodedNote
from .graph import ObjectGraph
from .rendering.options import ExportConfig
from .rendering.renderer import NoteRenderer
from .rendering.table_builder import render_table_from_mergeable
from .service import ExportStats, NoteStoreExporter

__all__ = [
    "NoteStoreExporter",
    "ExportStats",
    "ExportConfig",
    "BodyDecoder",
    "NoteRenderer",
    "ObjectGraph",
    "DecodedNote",
    "AttributeRun",
    "AttachmentRef",
    "decompress",
    "scrape_text",
    "render_table_from_mergeable",
]
