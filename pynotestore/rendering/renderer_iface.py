"""
Storage-agnostic renderer interface for Apple Notes.

Defines the seams the attachment classifier needs:
  - `NoteDataSource`: row lookups keyed by attachment identifier, and
  - `AttachmentExporter`: copies an attachment file out of the store.

The renderer never touches the database or the filesystem directly; it only
calls these interfaces.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..models import AttachmentRow, MediaRow, UrlCardRow


class NoteDataSource(Protocol):
    """Attachment lookups required by the renderer."""

    def get_alt_text(self, identifier: str) -> Optional[str]: ...

    def get_url_card(self, identifier: str) -> Optional[UrlCardRow]: ...

    def get_mergeable_gz(self, identifier: str) -> Optional[bytes]: ...

    def get_media_pk(self, identifier: str) -> Optional[int]: ...

    def get_modified_scan(self, identifier: str) -> Optional[AttachmentRow]: ...

    def get_scan(self, identifier: str) -> Optional[AttachmentRow]: ...

    def get_drawing(self, identifier: str) -> Optional[AttachmentRow]: ...

    def get_media(self, media_pk: int) -> Optional[MediaRow]: ...


@dataclass(frozen=True)
class ExportRequest:
    """A file to copy out of the store, described relative to an account root."""

    source_path: str
    name: str
    extension: str
    # Core Data seconds
    created: Optional[float] = None
    modified: Optional[float] = None
    handwriting: Optional[str] = None


class AttachmentExporter(Protocol):
    # files actually copied; identical targets that were skipped do not count
    exported: int

    def export(self, request: ExportRequest, note_title: str) -> str:
        """Copy the file and return its name inside the attachments directory.

        Raises AttachmentExportError when the copy fails.
        """
        ...
