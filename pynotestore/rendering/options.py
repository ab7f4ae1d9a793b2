"""
Export configuration for Apple Notes Markdown output.

Centralizes behavior flags so callers can tune defaults without touching
core logic. ``data_path`` falls back to ``PYNOTESTORE_DATA_PATH`` and then to
the Notes group container of the current user.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DATA_PATH_ENV = "PYNOTESTORE_DATA_PATH"

NOTES_CONTAINER = os.path.join(
    "~", "Library", "Group Containers", "group.com.apple.notes"
)


def default_data_path() -> str:
    return os.path.expanduser(os.environ.get(DATA_PATH_ENV) or NOTES_CONTAINER)


@dataclass(frozen=True)
class ExportConfig:
    # Drop the first line of the body; the title already heads the document.
    omit_first_line: bool = True

    # Export notes sitting in "Recently Deleted".
    include_trashed: bool = False

    # Quote the recognized handwriting of drawings above the image.
    include_handwriting: bool = False

    data_path: str = field(default_factory=default_data_path)

    # Directory, relative to the output root, that receives attachment files.
    attachments_dirname: str = "attachments"
