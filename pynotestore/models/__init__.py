from .rows import (
    CORETIME_OFFSET,
    AttachmentRow,
    MediaRow,
    NoteBodyRow,
    NoteRow,
    UrlCardRow,
    coretime_to_unix,
    file_times,
)

__all__ = [
    "CORETIME_OFFSET",
    "AttachmentRow",
    "MediaRow",
    "NoteBodyRow",
    "NoteRow",
    "UrlCardRow",
    "coretime_to_unix",
    "file_times",
]
