"""
UTI-based attachment rendering strategies for Apple Notes.

This module maps a note attachment's type_uti to a Markdown fragment. Row
lookups go through the `NoteDataSource` and file copies through the
`AttachmentExporter` supplied in the AttachmentContext; nothing here opens the
database or the filesystem itself.

Design:
  - AttachmentContext: immutable bundle of what the strategies may use
  - Renderers: small classes implementing `render(ctx)`
  - Dispatcher: exact UTI map, then the generic media fallback

A failing attachment never fails the note: every error is turned into an
inline placeholder.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from ..decoding import decompress
from ..exceptions import AttachmentExportError, DecompressionError, QueryError
from .renderer_iface import AttachmentExporter, ExportRequest, NoteDataSource
from .table_builder import render_table_from_payload

LOGGER = logging.getLogger(__name__)


class AttachmentUti(str, Enum):
    DRAWING = "com.apple.paper"
    DRAWING_LEGACY = "com.apple.drawing"
    DRAWING_LEGACY2 = "com.apple.drawing.2"
    HASHTAG = "com.apple.notes.inlinetextattachment.hashtag"
    MENTION = "com.apple.notes.inlinetextattachment.mention"
    INTERNAL_LINK = "com.apple.notes.inlinetextattachment.link"
    MODIFIED_SCAN = "com.apple.paper.doc.scan"
    SCAN = "com.apple.notes.gallery"
    TABLE = "com.apple.notes.table"
    URL_CARD = "public.url"


@dataclass(frozen=True)
class AttachmentContext:
    identifier: str
    uti: str
    datasource: NoteDataSource
    # None disables file export (e.g. when inspecting a single blob)
    exporter: Optional[AttachmentExporter] = None
    note_title: str = ""
    include_handwriting: bool = False
    attachments_dirname: str = "attachments"


def _placeholder(message: str) -> str:
    return f"\n\n*[{message}]*\n\n"


class _Renderer:
    def render(self, ctx: AttachmentContext) -> str:  # pragma: no cover - interface
        raise NotImplementedError


class _InlineTextRenderer(_Renderer):
    """Hashtags and mentions: the stored display text, else ``#identifier``."""

    def render(self, ctx: AttachmentContext) -> str:
        return ctx.datasource.get_alt_text(ctx.identifier) or f"#{ctx.identifier}"


class _UrlCardRenderer(_Renderer):
    def render(self, ctx: AttachmentContext) -> str:
        row = ctx.datasource.get_url_card(ctx.identifier)
        if row is None:
            return "[URL Card]"
        return f"[**{row.title or ''}**]({row.url or ''})"


class _TableRenderer(_Renderer):
    def render(self, ctx: AttachmentContext) -> str:
        gz = ctx.datasource.get_mergeable_gz(ctx.identifier)
        if not gz:
            return _placeholder("Table data not found")
        try:
            payload = decompress(gz)
        except DecompressionError as e:
            LOGGER.warning("Failed to process table %s: %s", ctx.identifier, e)
            return _placeholder("Table processing failed")
        table = render_table_from_payload(payload)
        if table is None:
            return _placeholder("Table could not be processed")
        return f"\n{table}\n"


class _ExportRenderer(_Renderer):
    """Attachments backed by a file in the store's container."""

    missing = "Attachment data not found"

    def lookup(
        self, ctx: AttachmentContext, media_pk: Optional[int] = None
    ) -> Optional[ExportRequest]:  # pragma: no cover - interface
        raise NotImplementedError

    def render(self, ctx: AttachmentContext) -> str:
        return self.export(ctx)

    def export(self, ctx: AttachmentContext, media_pk: Optional[int] = None) -> str:
        if ctx.exporter is None:
            return _placeholder(f"Attachment: {ctx.uti}")
        try:
            request = self.lookup(ctx, media_pk)
            if request is None:
                return _placeholder(self.missing)
            filename = ctx.exporter.export(request, ctx.note_title)
        except AttachmentExportError as e:
            LOGGER.warning("Could not copy attachment %s: %s", ctx.identifier, e)
            return _placeholder(
                f"Attachment file could not be exported: {e.filename or ''}"
            )
        except (QueryError, OSError) as e:
            LOGGER.warning("Failed to export attachment %s: %s", ctx.identifier, e)
            return _placeholder("Attachment export failed")

        link = f"![{request.name}]({ctx.attachments_dirname}/{filename})"
        if ctx.include_handwriting and request.handwriting:
            quoted = request.handwriting.replace("\n", "\n> ")
            return f"\n\n> [!note] Handwriting\n> {quoted}\n\n{link}\n\n"
        return f"\n\n{link}\n\n"


class _ModifiedScanRenderer(_ExportRenderer):
    def lookup(self, ctx, media_pk=None):
        row = ctx.datasource.get_modified_scan(ctx.identifier)
        if row is None:
            return None
        return ExportRequest(
            source_path=os.path.join(
                "FallbackPDFs",
                row.identifier,
                row.fallback_pdf_generation or "",
                "FallbackPDF.pdf",
            ),
            name="Scan",
            extension="pdf",
            created=row.created,
            modified=row.modified,
        )


class _ScanRenderer(_ExportRenderer):
    def lookup(self, ctx, media_pk=None):
        row = ctx.datasource.get_scan(ctx.identifier)
        if row is None:
            return None
        return ExportRequest(
            source_path=os.path.join(
                "Previews",
                f"{row.identifier}-1-{row.size_width}x{row.size_height}-0.jpeg",
            ),
            name="Scan Page",
            extension="jpg",
            created=row.created,
            modified=row.modified,
        )


class _DrawingRenderer(_ExportRenderer):
    def lookup(self, ctx, media_pk=None):
        row = ctx.datasource.get_drawing(ctx.identifier)
        if row is None:
            return None
        if row.fallback_image_generation:
            source = os.path.join(
                "FallbackImages",
                row.identifier,
                row.fallback_image_generation,
                "FallbackImage.png",
            )
        else:
            source = os.path.join("FallbackImages", f"{row.identifier}.jpg")
        return ExportRequest(
            source_path=source,
            name="Drawing",
            extension="png",
            created=row.created,
            modified=row.modified,
            handwriting=row.handwriting_summary,
        )


class _MediaRenderer(_ExportRenderer):
    """Everything else: images, audio, video, PDFs, internal links."""

    missing = "Media file not found"

    def render(self, ctx: AttachmentContext) -> str:
        media_pk = ctx.datasource.get_media_pk(ctx.identifier)
        if not media_pk:
            return _placeholder(f"Attachment: {ctx.uti}")
        return self.export(ctx, media_pk)

    def lookup(self, ctx, media_pk=None):
        if media_pk is None:
            return None
        row = ctx.datasource.get_media(media_pk)
        if row is None:
            return None
        stem, dot, ext = row.filename.rpartition(".")
        if not dot:
            stem, ext = row.filename, "bin"
        return ExportRequest(
            source_path=os.path.join(
                "Media", row.identifier, row.generation or "", row.filename
            ),
            name=stem or "attachment",
            extension=ext,
            created=row.created,
            modified=row.modified,
        )


# Singletons
_INLINE_TEXT = _InlineTextRenderer()
_URL_CARD = _UrlCardRenderer()
_TABLE = _TableRenderer()
_MODIFIED_SCAN = _ModifiedScanRenderer()
_SCAN = _ScanRenderer()
_DRAWING = _DrawingRenderer()
_MEDIA = _MediaRenderer()


# Exact UTI mappings
_EXACT: Dict[str, _Renderer] = {
    AttachmentUti.HASHTAG.value: _INLINE_TEXT,
    AttachmentUti.MENTION.value: _INLINE_TEXT,
    AttachmentUti.URL_CARD.value: _URL_CARD,
    AttachmentUti.TABLE.value: _TABLE,
    AttachmentUti.SCAN.value: _SCAN,
    AttachmentUti.MODIFIED_SCAN.value: _MODIFIED_SCAN,
    AttachmentUti.DRAWING.value: _DRAWING,
    AttachmentUti.DRAWING_LEGACY.value: _DRAWING,
    AttachmentUti.DRAWING_LEGACY2.value: _DRAWING,
}


def render_attachment(ctx: AttachmentContext) -> str:
    r = _EXACT.get(ctx.uti or "", _MEDIA)
    try:
        return r.render(ctx)
    except Exception as e:
        LOGGER.warning("Failed to process attachment %s: %s", ctx.identifier, e)
        return _placeholder(f"Attachment processing failed: {ctx.uti}")
