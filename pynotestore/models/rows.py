"""Typed rows for the NoteStore.sqlite queries."""

from __future__ import annotations

import time
from typing import Optional

from pydantic import Field

from ._base import RowModel

# Core Data stores seconds since 2001-01-01T00:00:00Z.
CORETIME_OFFSET = 978307200


def coretime_to_unix(value: Optional[float]) -> Optional[float]:
    if not value:
        return None
    return value + CORETIME_OFFSET


def file_times(
    created: Optional[float], modified: Optional[float]
) -> tuple[float, float]:
    """(atime, mtime) for os.utime from Core Data creation/modification dates.

    Missing creation falls back to now; missing modification to creation.
    """
    ctime = coretime_to_unix(created) or time.time()
    mtime = coretime_to_unix(modified) or ctime
    return ctime, mtime


class NoteRow(RowModel):
    pk: int = Field(alias="z_pk")
    folder: Optional[int] = Field(default=None, alias="zfolder")
    title: str = Field(alias="ztitle1")


class NoteBodyRow(RowModel):
    pk: int = Field(alias="z_pk")
    hex_data: Optional[str] = Field(default=None, alias="zhexdata")
    title: Optional[str] = Field(default=None, alias="ztitle1")
    created: Optional[float] = Field(default=None, alias="zcreationdate1")
    modified: Optional[float] = Field(default=None, alias="zmodificationdate1")

    @property
    def data(self) -> bytes:
        return bytes.fromhex(self.hex_data or "")


class UrlCardRow(RowModel):
    title: Optional[str] = Field(default=None, alias="ztitle")
    url: Optional[str] = Field(default=None, alias="zurlstring")


class AttachmentRow(RowModel):
    """ICAttachment row; which optional columns are set depends on the query."""

    identifier: str = Field(alias="zidentifier")
    fallback_pdf_generation: Optional[str] = Field(
        default=None, alias="zfallbackpdfgeneration"
    )
    fallback_image_generation: Optional[str] = Field(
        default=None, alias="zfallbackimagegeneration"
    )
    size_width: Optional[int] = Field(default=None, alias="zsizewidth")
    size_height: Optional[int] = Field(default=None, alias="zsizeheight")
    handwriting_summary: Optional[str] = Field(
        default=None, alias="zhandwritingsummary"
    )
    created: Optional[float] = Field(default=None, alias="zcreationdate")
    modified: Optional[float] = Field(default=None, alias="zmodificationdate")


class MediaRow(RowModel):
    identifier: str = Field(alias="zidentifier")
    filename: str = Field(alias="zfilename")
    generation: Optional[str] = Field(default=None, alias="zgeneration1")
    created: Optional[float] = Field(default=None, alias="zcreationdate")
    modified: Optional[float] = Field(default=None, alias="zmodificationdate")
