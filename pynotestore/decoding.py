from __future__ import annotations

import gzip
import logging
import re
import zlib
from typing import Callable, Optional, Sequence, Tuple

from google.protobuf.message import DecodeError

from .domain import AttachmentRef, AttributeRun, DecodedNote
from .exceptions import (
    ContentExtractionError,
    DecompressionError,
    SchemaDecodeError,
)
from .protobuf import notes_pb2 as pb

LOGGER = logging.getLogger(__name__)

_GZIP_MAGIC = b"\x1f\x8b"

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_READABLE_RUN = re.compile(r"[a-zA-Z0-9\s.,!?;:'\"()\-+=<>@#$%^&*{}\[\]|\\/]{10,}")


def decompress(blob: bytes) -> bytes:
    """Inflate a gzip-framed blob; anything else raises DecompressionError."""
    if bytes(blob[:2]) != _GZIP_MAGIC:
        raise DecompressionError("blob is not gzip-framed")
    try:
        out = gzip.decompress(bytes(blob))
    except (OSError, EOFError, zlib.error) as e:
        raise DecompressionError(f"corrupt gzip blob: {e}") from e
    LOGGER.debug("notes.decoder.inflate len=%d -> %d", len(blob), len(out))
    return out


def note_from_proto(note: pb.Note) -> DecodedNote:
    runs = []
    for run in note.attribute_run:
        attachment = None
        if run.HasField("attachment_info"):
            ai = run.attachment_info
            attachment = AttachmentRef(
                identifier=ai.attachment_identifier, type_uti=ai.type_uti or None
            )
        runs.append(AttributeRun(length=run.length, attachment=attachment))
    return DecodedNote(text=note.note_text, runs=tuple(runs))


def _from_document(payload: bytes) -> Optional[pb.Note]:
    msg = pb.Document()
    msg.ParseFromString(payload)
    note = msg.note
    return note if note.note_text else None


def _from_note_store(payload: bytes) -> Optional[pb.Note]:
    msg = pb.NoteStoreProto()
    msg.ParseFromString(payload)
    note = msg.document.note
    return note if note.note_text else None


def _from_mergeable_data(payload: bytes) -> Optional[pb.Note]:
    msg = pb.MergableDataProto()
    msg.ParseFromString(payload)
    entries = (
        msg.mergable_data_object.mergeable_data_object_data.mergeable_data_object_entry
    )
    for entry in entries:
        if entry.HasField("note") and entry.note.note_text:
            return entry.note
    for entry in entries:
        contents = entry.ordered_set.ordering.array.contents
        if contents.note_text:
            return contents
    return None


SchemaAttempt = Tuple[str, Callable[[bytes], Optional[pb.Note]]]

# Order matters: a bare Document first, then the NoteStoreProto wrapper that
# current stores write, then the generic mergeable shape.
SCHEMA_CHAIN: Tuple[SchemaAttempt, ...] = (
    ("document", _from_document),
    ("note_store", _from_note_store),
    ("mergeable_data", _from_mergeable_data),
)


class BodyDecoder:
    """Decode a compressed note body (ZDATA) to a DecodedNote."""

    def __init__(self, attempts: Optional[Sequence[SchemaAttempt]] = None):
        self._attempts = tuple(attempts) if attempts is not None else SCHEMA_CHAIN

    def decode(self, blob: bytes) -> DecodedNote:
        return self.decode_payload(decompress(blob))

    def decode_payload(self, payload: bytes) -> DecodedNote:
        parse_failures = 0
        for name, attempt in self._attempts:
            try:
                note = attempt(payload)
            except DecodeError as e:
                parse_failures += 1
                LOGGER.debug("notes.decoder.%s.parse_fail %s", name, e)
                continue
            if note is None:
                LOGGER.debug("notes.decoder.%s.no_text", name)
                continue
            decoded = note_from_proto(note)
            LOGGER.debug(
                "notes.decoder.%s.ok text=%d runs=%d attachments=%d",
                name,
                len(decoded.text),
                len(decoded.runs),
                len(decoded.attachments),
            )
            return decoded
        if self._attempts and parse_failures == len(self._attempts):
            raise SchemaDecodeError("payload matches no known note schema")
        raise ContentExtractionError("no note text found in payload")


def scrape_text(payload: bytes, *, omit_first_line: bool = True) -> Optional[str]:
    """Best-effort text from an undecodable payload.

    Collects printable runs of at least 10 characters. Returns None when
    nothing readable is left.
    """
    text = _CONTROL_CHARS.sub("", payload.decode("utf-8", errors="replace")).strip()
    chunks = _READABLE_RUN.findall(text)
    if not chunks:
        return None
    extracted = "\n".join(chunks).strip()
    if omit_first_line and "\n" in extracted:
        return "\n".join(extracted.split("\n")[1:])
    return extracted
