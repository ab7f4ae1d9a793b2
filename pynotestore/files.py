"""
Filesystem side of the export: account discovery and attachment copies.
"""

from __future__ import annotations

import filecmp
import logging
import os
import re
import shutil
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .exceptions import AttachmentExportError
from .models import file_times
from .rendering.renderer_iface import ExportRequest

LOGGER = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE = re.compile(r"\s+")


def sanitize_filename(name: str) -> str:
    return _WHITESPACE.sub(" ", _UNSAFE_CHARS.sub("", name)).strip()


def apply_times(path: str, created: Optional[float], modified: Optional[float]) -> None:
    """Stamp Core Data creation/modification dates on ``path``; best effort."""
    if not created and not modified:
        return
    try:
        os.utime(path, file_times(created, modified))
    except OSError as e:
        LOGGER.debug("notes.files.utime_failed %s: %s", path, e)


@dataclass(frozen=True)
class Account:
    uuid: str
    path: str
    media_path: Optional[str] = None


def discover_accounts(data_path: str) -> List[Account]:
    """One Account per directory under ``Accounts/``.

    Falls back to a single ``default`` account rooted at ``data_path`` when
    the directory cannot be read.
    """
    accounts_dir = os.path.join(data_path, "Accounts")
    try:
        names = sorted(os.listdir(accounts_dir))
    except OSError as e:
        LOGGER.warning("Could not read accounts directory: %s", e)
        return [
            Account(
                uuid="default",
                path=data_path,
                media_path=os.path.join(data_path, "Media"),
            )
        ]
    accounts = []
    for name in names:
        if name.startswith("."):
            continue
        path = os.path.join(accounts_dir, name)
        if not os.path.isdir(path):
            continue
        media = os.path.join(path, "Media")
        has_media = os.path.exists(media)
        accounts.append(Account(uuid=name, path=path, media_path=media if has_media else None))
        LOGGER.info("Found account: %s (Media: %s)", name, "Yes" if has_media else "No")
    return accounts


def should_copy(source: str, target: str) -> bool:
    """True unless ``target`` already holds the same bytes as ``source``."""
    if not os.path.exists(target):
        return True
    try:
        if os.path.getsize(source) != os.path.getsize(target):
            return True
        return not filecmp.cmp(source, target, shallow=False)
    except OSError as e:
        LOGGER.warning("Error comparing attachments: %s", e)
        return True


class LocalAttachmentExporter:
    """Copies attachment files from the Notes container into the output tree."""

    def __init__(
        self,
        data_path: str,
        output_dir: str,
        accounts: Optional[Sequence[Account]] = None,
        attachments_dirname: str = "attachments",
    ):
        self.data_path = data_path
        self.attachments_dir = os.path.join(output_dir, attachments_dirname)
        self.accounts = list(accounts) if accounts is not None else discover_accounts(data_path)
        self.exported = 0

    def locate(self, source_path: str) -> str:
        for account in self.accounts:
            if not account.media_path:
                continue
            candidate = os.path.join(account.path, source_path)
            if os.path.exists(candidate):
                return candidate
        return os.path.join(self.data_path, source_path)

    def export(self, request: ExportRequest, note_title: str) -> str:
        source = self.locate(request.source_path)
        base = sanitize_filename(request.name)
        if note_title:
            base = f"{note_title}_{base}"
        filename = f"{base}.{request.extension}"
        target = os.path.join(self.attachments_dir, filename)

        os.makedirs(self.attachments_dir, exist_ok=True)
        if not should_copy(source, target):
            LOGGER.info("Attachment already exists with same content: %s", filename)
            return filename
        try:
            shutil.copyfile(source, target)
        except OSError as e:
            raise AttachmentExportError(
                f"could not copy {request.source_path}: {e}", filename=filename
            ) from e
        self.exported += 1
        apply_times(target, request.created, request.modified)
        LOGGER.info("Exported attachment: %s", filename)
        return filename
