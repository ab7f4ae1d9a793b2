"""
Object graph resolver for Apple Notes MergeableData payloads.

A MergeableData payload is a flat arena: a list of entries plus three lookup
tables (key names, type names, UUIDs). Entries point at each other only by
their position in the entry list. This module turns the protobuf rows into an
explicit sum type and exposes the reference resolution primitives the table
builder needs.

UUIDs are never stored inline. A reference that "is" a UUID points at a
custom-map entry whose first map item holds a literal unsigned integer, and
that integer indexes the UUID table:

    ObjectRef.object_index -> CustomMapEntry.items[0].value.unsigned_integer
                           -> uuids[n]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

from .exceptions import IndexOutOfRange
from .protobuf import notes_pb2 as pb

LOGGER = logging.getLogger(__name__)

UUID_BYTES = 16


@dataclass(frozen=True)
class ObjectRef:
    """Exactly one of the fields is populated in well-formed data."""

    object_index: Optional[int] = None
    unsigned_integer: Optional[int] = None
    string_value: Optional[str] = None

    @classmethod
    def from_proto(cls, oid: pb.ObjectID) -> "ObjectRef":
        return cls(
            object_index=oid.object_index if oid.HasField("object_index") else None,
            unsigned_integer=(
                oid.unsigned_integer_value
                if oid.HasField("unsigned_integer_value")
                else None
            ),
            string_value=oid.string_value if oid.HasField("string_value") else None,
        )


@dataclass(frozen=True)
class MapItem:
    key: int
    value: ObjectRef


@dataclass(frozen=True)
class DictItem:
    key: ObjectRef
    value: ObjectRef


def _dict_items(d: pb.Dictionary) -> Tuple[DictItem, ...]:
    return tuple(
        DictItem(key=ObjectRef.from_proto(el.key), value=ObjectRef.from_proto(el.value))
        for el in d.element
    )


@dataclass(frozen=True)
class OrderedSetEntry:
    # ordering.array.attachment[*].uuid, in canonical order
    ordering: Tuple[bytes, ...]
    # ordering.contents: ephemeral id -> canonical id
    contents: Tuple[DictItem, ...]
    # ordering.array.contents.note_text, set when the ordered set wraps a note
    note_text: Optional[str] = None


@dataclass(frozen=True)
class DictionaryEntry:
    elements: Tuple[DictItem, ...]


@dataclass(frozen=True)
class CustomMapEntry:
    type_index: int
    items: Tuple[MapItem, ...]


@dataclass(frozen=True)
class NoteEntry:
    text: str


@dataclass(frozen=True)
class UnknownEntry:
    """An entry kind the decoder does not model; skipped by every consumer."""


Entry = Union[OrderedSetEntry, DictionaryEntry, CustomMapEntry, NoteEntry, UnknownEntry]

_UNKNOWN = UnknownEntry()


def entry_from_proto(row: pb.MergeableDataObjectEntry) -> Entry:
    if row.HasField("custom_map"):
        cm = row.custom_map
        return CustomMapEntry(
            type_index=cm.type,
            items=tuple(
                MapItem(key=item.key, value=ObjectRef.from_proto(item.value))
                for item in cm.map_entry
            ),
        )
    if row.HasField("dictionary"):
        return DictionaryEntry(elements=_dict_items(row.dictionary))
    if row.HasField("ordered_set"):
        ordering = row.ordered_set.ordering
        return OrderedSetEntry(
            ordering=tuple(att.uuid for att in ordering.array.attachment),
            contents=_dict_items(ordering.contents),
            note_text=ordering.array.contents.note_text or None,
        )
    if row.HasField("note"):
        return NoteEntry(text=row.note.note_text)
    return _UNKNOWN


@dataclass(frozen=True)
class ObjectGraph:
    entries: Tuple[Entry, ...]
    key_names: Tuple[str, ...] = ()
    type_names: Tuple[str, ...] = ()
    uuids: Tuple[bytes, ...] = ()

    @classmethod
    def from_proto(cls, data: pb.MergeableDataObjectData) -> "ObjectGraph":
        graph = cls(
            entries=tuple(entry_from_proto(e) for e in data.mergeable_data_object_entry),
            key_names=tuple(data.mergeable_data_object_key_item),
            type_names=tuple(data.mergeable_data_object_type_item),
            uuids=tuple(data.mergeable_data_object_uuid_item),
        )
        LOGGER.debug(
            "notes.graph.built entries=%d keys=%d types=%d uuids=%d",
            len(graph.entries),
            len(graph.key_names),
            len(graph.type_names),
            len(graph.uuids),
        )
        return graph

    @classmethod
    def from_payload(cls, payload: bytes) -> "ObjectGraph":
        """Parse an inflated MergableDataProto payload.

        Raises google.protobuf.message.DecodeError on malformed input.
        """
        msg = pb.MergableDataProto()
        msg.ParseFromString(payload)
        return cls.from_proto(msg.mergable_data_object.mergeable_data_object_data)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    # ------------------------------------------------------------ lookups

    def resolve_index(self, index: int) -> Entry:
        if not 0 <= index < len(self.entries):
            raise IndexOutOfRange(index, len(self.entries))
        return self.entries[index]

    def resolve(self, ref: ObjectRef) -> Optional[Entry]:
        """Follow ``ref.object_index``; None for literals and dangling refs."""
        if ref.object_index is None:
            return None
        try:
            return self.resolve_index(ref.object_index)
        except IndexOutOfRange as e:
            LOGGER.debug("notes.graph.dangling_ref %s", e)
            return None

    def uuid_hex(self, index: int) -> str:
        if not 0 <= index < len(self.uuids):
            return ""
        raw = self.uuids[index]
        return raw.hex() if len(raw) == UUID_BYTES else ""

    def resolve_uuid(self, ref: ObjectRef) -> str:
        """Resolve a boxed UUID reference to lowercase hex, or "".

        Never raises: unknown entry kinds and malformed boxes degrade to an
        empty association.
        """
        target = self.resolve(ref)
        if not isinstance(target, CustomMapEntry) or not target.items:
            return ""
        literal = target.items[0].value.unsigned_integer
        if literal is None:
            return ""
        return self.uuid_hex(literal)

    def type_name(self, entry: CustomMapEntry) -> Optional[str]:
        if 0 <= entry.type_index < len(self.type_names):
            return self.type_names[entry.type_index]
        return None

    def key_name(self, item: MapItem) -> Optional[str]:
        if 0 <= item.key < len(self.key_names):
            return self.key_names[item.key]
        return None

    def find_custom_map(self, type_name: str) -> Optional[CustomMapEntry]:
        for entry in self.entries:
            if isinstance(entry, CustomMapEntry) and self.type_name(entry) == type_name:
                return entry
        return None
