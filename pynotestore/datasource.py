"""
SQLite-backed NoteDataSource over a private copy of NoteStore.sqlite.

Notes keeps the store open while it runs, so the database (with its -shm and
-wal companions when present) is cloned into a temporary directory and the
clone is opened read-only. All rows are validated into `pynotestore.models`.
"""

from __future__ import annotations

import logging
import os
import shutil
import sqlite3
import tempfile
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Type, TypeVar

from pydantic import ValidationError

from .exceptions import NoteStoreAccessError, NoteStoreNotFound, QueryError
from .models import AttachmentRow, MediaRow, NoteBodyRow, NoteRow, UrlCardRow
from .models._base import RowModel

LOGGER = logging.getLogger(__name__)

STORE_FILENAME = "NoteStore.sqlite"
STORE_COMPANIONS = ("-shm", "-wal")

# ZFOLDERTYPE of the "Recently Deleted" folder
TRASH_FOLDER_TYPE = 1

PERMISSION_HINT = (
    "Permission denied accessing the Apple Notes database. Quit Notes and "
    "grant your terminal Full Disk Access (System Settings > Privacy & "
    "Security > Full Disk Access)."
)

M = TypeVar("M", bound=RowModel)


class SQLiteNoteDataSource:
    """Row lookups against an open NoteStore connection."""

    def __init__(self, conn: sqlite3.Connection):
        conn.row_factory = sqlite3.Row
        self._conn = conn
        self._keys: Optional[Dict[str, int]] = None

    @classmethod
    def open(cls, path: str) -> "SQLiteNoteDataSource":
        try:
            conn = sqlite3.connect(f"file:{path}?mode=ro", uri=True)
            conn.execute("SELECT 1 FROM z_primarykey LIMIT 1")
        except sqlite3.Error as e:
            raise NoteStoreAccessError(f"cannot open note store {path}: {e}") from e
        return cls(conn)

    def close(self) -> None:
        self._conn.close()

    # ------------------------------------------------------------ plumbing

    def _all(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        try:
            return self._conn.execute(sql, tuple(params)).fetchall()
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e

    def _one(self, sql: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        try:
            return self._conn.execute(sql, tuple(params)).fetchone()
        except sqlite3.Error as e:
            raise QueryError(str(e)) from e

    @staticmethod
    def _model(model: Type[M], row: Optional[sqlite3.Row]) -> Optional[M]:
        if row is None:
            return None
        try:
            return model.model_validate({k.lower(): row[k] for k in row.keys()})
        except ValidationError as e:
            raise QueryError(f"malformed {model.__name__} row: {e}") from e

    @property
    def entity_keys(self) -> Dict[str, int]:
        """Core Data entity name -> Z_ENT (e.g. ICNote, ICAttachment, ICMedia)."""
        if self._keys is None:
            rows = self._all("SELECT z_ent, z_name FROM z_primarykey")
            self._keys = {r["z_name"]: r["z_ent"] for r in rows}
            LOGGER.debug("notes.store.entities %s", self._keys)
        return self._keys

    def _entity(self, name: str) -> Optional[int]:
        return self.entity_keys.get(name)

    # ------------------------------------------------------------ notes

    def list_notes(self, include_trashed: bool = False) -> List[NoteRow]:
        ent = self._entity("ICNote")
        if ent is None:
            return []
        rows = self._all(
            """
            SELECT n.z_pk, n.zfolder, n.ztitle1
            FROM ziccloudsyncingobject AS n
            LEFT JOIN ziccloudsyncingobject AS f ON f.z_pk = n.zfolder
            WHERE n.z_ent = ?
              AND n.ztitle1 IS NOT NULL
              AND (? OR f.zfoldertype IS NULL OR f.zfoldertype != ?)
            ORDER BY n.z_pk
            """,
            (ent, int(include_trashed), TRASH_FOLDER_TYPE),
        )
        return [self._model(NoteRow, r) for r in rows]

    def get_note_body(self, note_pk: int) -> Optional[NoteBodyRow]:
        row = self._one(
            """
            SELECT nd.z_pk, hex(nd.zdata) AS zhexdata, zcso.ztitle1,
                   zcso.zcreationdate1, zcso.zmodificationdate1
            FROM zicnotedata AS nd, ziccloudsyncingobject AS zcso
            WHERE zcso.z_pk = nd.znote AND zcso.z_pk = ?
            """,
            (note_pk,),
        )
        return self._model(NoteBodyRow, row)

    # ------------------------------------------------------------ attachments

    def get_alt_text(self, identifier: str) -> Optional[str]:
        row = self._one(
            "SELECT zalttext FROM ziccloudsyncingobject WHERE zidentifier = ?",
            (identifier,),
        )
        return row["zalttext"] if row is not None else None

    def get_url_card(self, identifier: str) -> Optional[UrlCardRow]:
        row = self._one(
            "SELECT ztitle, zurlstring FROM ziccloudsyncingobject WHERE zidentifier = ?",
            (identifier,),
        )
        return self._model(UrlCardRow, row)

    def get_mergeable_gz(self, identifier: str) -> Optional[bytes]:
        row = self._one(
            """
            SELECT hex(zmergeabledata1) AS zhexdata
            FROM ziccloudsyncingobject WHERE zidentifier = ?
            """,
            (identifier,),
        )
        if row is None or not row["zhexdata"]:
            return None
        return bytes.fromhex(row["zhexdata"])

    def get_media_pk(self, identifier: str) -> Optional[int]:
        row = self._one(
            "SELECT zmedia FROM ziccloudsyncingobject WHERE zidentifier = ?",
            (identifier,),
        )
        return row["zmedia"] if row is not None else None

    def _attachment(self, columns: str, identifier: str) -> Optional[AttachmentRow]:
        ent = self._entity("ICAttachment")
        if ent is None:
            return None
        row = self._one(
            f"""
            SELECT zidentifier, {columns}, zcreationdate, zmodificationdate
            FROM ziccloudsyncingobject
            WHERE z_ent = ? AND zidentifier = ?
            """,
            (ent, identifier),
        )
        return self._model(AttachmentRow, row)

    def get_modified_scan(self, identifier: str) -> Optional[AttachmentRow]:
        return self._attachment("zfallbackpdfgeneration", identifier)

    def get_scan(self, identifier: str) -> Optional[AttachmentRow]:
        return self._attachment("zsizeheight, zsizewidth", identifier)

    def get_drawing(self, identifier: str) -> Optional[AttachmentRow]:
        return self._attachment(
            "zfallbackimagegeneration, zhandwritingsummary", identifier
        )

    def get_media(self, media_pk: int) -> Optional[MediaRow]:
        ent = self._entity("ICMedia")
        if ent is None:
            return None
        row = self._one(
            """
            SELECT a.zidentifier, a.zfilename, a.zgeneration1,
                   b.zcreationdate, b.zmodificationdate
            FROM ziccloudsyncingobject AS a, ziccloudsyncingobject AS b
            WHERE a.z_ent = ? AND a.z_pk = ? AND a.z_pk = b.zmedia
            """,
            (ent, media_pk),
        )
        return self._model(MediaRow, row)


def clone_store(data_path: str, workdir: str) -> str:
    """Copy NoteStore.sqlite and its companions into ``workdir``."""
    source = os.path.join(data_path, STORE_FILENAME)
    if not os.path.exists(source):
        raise NoteStoreNotFound(f"no {STORE_FILENAME} under {data_path}")
    target = os.path.join(workdir, STORE_FILENAME)
    try:
        shutil.copyfile(source, target)
        for suffix in STORE_COMPANIONS:
            if os.path.exists(source + suffix):
                shutil.copyfile(source + suffix, target + suffix)
    except PermissionError as e:
        raise NoteStoreAccessError(f"{PERMISSION_HINT} ({e})") from e
    LOGGER.debug("notes.store.cloned %s -> %s", source, target)
    return target


@contextmanager
def open_note_store(data_path: str) -> Iterator[SQLiteNoteDataSource]:
    """Clone the store, open the clone read-only, and remove it afterwards."""
    workdir = tempfile.mkdtemp(prefix="pynotestore-")
    try:
        ds = SQLiteNoteDataSource.open(clone_store(data_path, workdir))
        try:
            yield ds
        finally:
            ds.close()
    finally:
        shutil.rmtree(workdir, ignore_errors=True)
