"""Library exceptions."""

from __future__ import annotations

from typing import Optional


class NoteStoreError(Exception):
    """Base error for pynotestore."""


# ----------------------------- Store access ----------------------------------


class NoteStoreAccessError(NoteStoreError):
    """The note store could not be read (e.g. permission denied). Fatal."""


class NoteStoreNotFound(NoteStoreError):
    """No NoteStore.sqlite at the expected location. Fatal."""


class QueryError(NoteStoreError):
    """A lookup against the opened store failed or returned a malformed row."""


# ----------------------------- Decoding --------------------------------------


class DecodingError(NoteStoreError):
    """Base error for body decoding failures."""


class DecompressionError(DecodingError):
    """The blob is not validly gzip-framed."""


class ContentExtractionError(DecodingError):
    """A top-level schema matched but carried no note text."""


class SchemaDecodeError(ContentExtractionError):
    """Neither top-level schema could be parsed."""


# ----------------------------- Object graph ----------------------------------


class GraphResolutionError(NoteStoreError):
    """A reference into the mergeable object graph could not be followed."""


class IndexOutOfRange(GraphResolutionError):
    def __init__(self, index: int, size: int):
        super().__init__(f"object index {index} outside graph of {size} entries")
        self.index = index
        self.size = size


# ----------------------------- Tables ----------------------------------------


class TableError(NoteStoreError):
    """Base error for table reconstruction."""


class NoTableFound(TableError):
    """The object graph has no table root."""


class TableReconstructionError(TableError):
    """The table root exists but its structure is incomplete."""


# ----------------------------- Attachments -----------------------------------


class AttachmentExportError(NoteStoreError):
    """An attachment file could not be copied to the output directory."""

    def __init__(self, message: str, filename: Optional[str] = None):
        super().__init__(message)
        self.filename = filename
