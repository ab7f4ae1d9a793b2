"""
Exporter helpers for Apple Notes -> Markdown.

Thin, testable wrappers around decoding, rendering, and file I/O. They keep no
global state; the service composes them per note.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from ..decoding import BodyDecoder, decompress, scrape_text
from ..exceptions import ContentExtractionError, DecompressionError
from ..files import apply_times, sanitize_filename
from .renderer import NoteRenderer, render_document

LOGGER = logging.getLogger(__name__)

UNDECODABLE_BODY = "*Content could not be extracted*"
UNREADABLE_BODY = (
    "*Note content could not be extracted - may contain rich content, "
    "attachments, or encrypted data*"
)


def render_note_markdown(
    renderer: NoteRenderer,
    title: str,
    blob: bytes,
    decoder: Optional[BodyDecoder] = None,
) -> str:
    """Decode a ZDATA blob and render the full Markdown document.

    Never raises for bad content: a blob that does not inflate gets a fixed
    placeholder body, and a payload with no recognizable note falls back to
    scraping printable text out of it.
    """
    try:
        payload = decompress(blob)
    except DecompressionError as e:
        LOGGER.warning("Failed to decode data for note %r: %s", title, e)
        return render_document(title, UNDECODABLE_BODY)

    try:
        note = (decoder or BodyDecoder()).decode_payload(payload)
    except ContentExtractionError as e:
        LOGGER.warning("Protobuf decoding failed for %r: %s", title, e)
        text = scrape_text(payload, omit_first_line=renderer.config.omit_first_line)
        return render_document(title, text if text is not None else UNREADABLE_BODY)

    return renderer.render_document(title, note, sanitize_filename(title))


def note_path(output_dir: str, title: str) -> str:
    return os.path.join(output_dir, f"{sanitize_filename(title)}.md")


def write_note_file(
    output_dir: str,
    title: str,
    content: str,
    created: Optional[float] = None,
    modified: Optional[float] = None,
) -> str:
    """Write ``{title}.md`` and stamp the note's dates on it. Returns the path."""
    path = note_path(output_dir, title)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    apply_times(path, created, modified)
    LOGGER.debug("notes.export.wrote %s (%d chars)", path, len(content))
    return path
