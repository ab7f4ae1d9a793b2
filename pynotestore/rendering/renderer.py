"""
Pure renderer for Apple Notes bodies.

Converts a DecodedNote into Markdown by walking its attribute runs and
replacing attachment runs with the classifier's output. Run lengths count
UTF-16 code units, so slicing goes through `Utf16Text` rather than Python
string indices.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ..domain import AttachmentRef, DecodedNote
from .attachments import AttachmentContext, render_attachment
from .options import ExportConfig
from .renderer_iface import AttachmentExporter, NoteDataSource

LOGGER = logging.getLogger(__name__)


def utf16_len(s: str) -> int:
    return len(s.encode("utf-16-le")) // 2


class Utf16Text:
    """A string addressed in UTF-16 code units."""

    def __init__(self, text: str):
        self._units = text.encode("utf-16-le")

    def __len__(self) -> int:
        return len(self._units) // 2

    def slice(self, start: int, end: Optional[int] = None) -> str:
        # A boundary inside a surrogate pair decodes to U+FFFD.
        stop = None if end is None else 2 * end
        return self._units[2 * start : stop].decode("utf-16-le", errors="replace")


def _normalize_newlines(s: str) -> str:
    return s.replace("\r\n", "\n").replace("\r", "\n")


def body_offset(text: str, omit_first_line: bool) -> int:
    """UTF-16 offset where the exported body starts."""
    if not omit_first_line:
        return 0
    nl = text.find("\n")
    if nl == -1:
        return 0
    return utf16_len(text[:nl]) + 1


def render_note_body(
    note: DecodedNote,
    render_attachment_cb: Callable[[AttachmentRef], str],
    *,
    omit_first_line: bool = True,
) -> str:
    """Interleave note text with rendered attachments.

    The run cursor starts at the body offset rather than at zero, so when the
    first line is dropped every run is read shifted by that many code units.
    Existing exports were produced this way and are kept byte-for-byte.
    """
    text = Utf16Text(note.text)
    text_offset = body_offset(note.text, omit_first_line)

    parts: List[str] = []
    cursor = text_offset
    for run in note.runs:
        start = cursor
        end = cursor + run.length
        cursor = end
        if start < text_offset:
            continue
        if run.attachment is not None:
            parts.append(render_attachment_cb(run.attachment))
        else:
            parts.append(text.slice(start, end))
    if cursor < len(text):
        parts.append(text.slice(cursor))

    out = "".join(parts)
    if not note.runs or not out.strip():
        out = text.slice(text_offset)
    return _normalize_newlines(out).strip()


def render_plain_body(note: DecodedNote, *, omit_first_line: bool = True) -> str:
    """Body text with attachments dropped, for callers without a datasource."""
    text = Utf16Text(note.text)
    return _normalize_newlines(text.slice(body_offset(note.text, omit_first_line))).strip()


def render_document(title: str, body: str) -> str:
    return f"# {title}\n\n{body}"


class NoteRenderer:
    """Class-based interface for note rendering."""

    def __init__(
        self,
        datasource: NoteDataSource,
        exporter: Optional[AttachmentExporter] = None,
        config: Optional[ExportConfig] = None,
    ):
        self.datasource = datasource
        self.exporter = exporter
        self.config = config or ExportConfig()

    def render_attachment(self, ref: AttachmentRef, note_title: str = "") -> str:
        ctx = AttachmentContext(
            identifier=ref.identifier,
            uti=ref.type_uti or "",
            datasource=self.datasource,
            exporter=self.exporter,
            note_title=note_title,
            include_handwriting=self.config.include_handwriting,
            attachments_dirname=self.config.attachments_dirname,
        )
        LOGGER.debug("notes.render.attachment id=%s uti=%s", ctx.identifier, ctx.uti)
        return render_attachment(ctx)

    def render(self, note: DecodedNote, note_title: str = "") -> str:
        """Render the note body to Markdown."""
        return render_note_body(
            note,
            lambda ref: self.render_attachment(ref, note_title),
            omit_first_line=self.config.omit_first_line,
        )

    def render_document(
        self, title: str, note: DecodedNote, note_title: Optional[str] = None
    ) -> str:
        """Full Markdown document; ``note_title`` prefixes exported attachment names."""
        return render_document(title, self.render(note, note_title or title))
