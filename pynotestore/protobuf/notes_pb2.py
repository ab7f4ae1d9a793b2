"""
Apple Notes protobuf schema (proto2), registered once per process.

The store writes note bodies and table attachments with an undocumented
schema; the field numbers below follow the reverse-engineered layout used by
forensic tooling. Message classes are exposed as module attributes the same
way a protoc-generated ``_pb2`` module exposes them, so callers can write::

    from pynotestore.protobuf import notes_pb2 as pb

    msg = pb.NoteStoreProto()
    msg.ParseFromString(payload)
"""

from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

_PACKAGE = "pynotestore.notes"
_FILE_NAME = "pynotestore/notes.proto"

_F = descriptor_pb2.FieldDescriptorProto

# name, number, scalar type or message name, repeated, default
_FieldSpec = Tuple[str, int, object, bool, Optional[str]]


def _f(
    name: str,
    number: int,
    kind: object,
    *,
    repeated: bool = False,
    default: Optional[str] = None,
) -> _FieldSpec:
    return (name, number, kind, repeated, default)


_SCHEMA: Dict[str, Sequence[_FieldSpec]] = {
    "Color": [
        _f("red", 1, _F.TYPE_FLOAT),
        _f("green", 2, _F.TYPE_FLOAT),
        _f("blue", 3, _F.TYPE_FLOAT),
        _f("alpha", 4, _F.TYPE_FLOAT),
    ],
    "AttachmentInfo": [
        _f("attachment_identifier", 1, _F.TYPE_STRING),
        _f("type_uti", 2, _F.TYPE_STRING),
    ],
    "Font": [
        _f("font_name", 1, _F.TYPE_STRING),
        _f("point_size", 2, _F.TYPE_FLOAT),
        _f("font_hints", 3, _F.TYPE_INT32),
    ],
    "ParagraphStyle": [
        _f("style_type", 1, _F.TYPE_INT32, default="-1"),
        _f("alignment", 2, _F.TYPE_INT32),
        _f("indent_amount", 4, _F.TYPE_INT32),
        _f("checklist", 5, "Checklist"),
        _f("block_quote", 8, _F.TYPE_INT32),
    ],
    "Checklist": [
        _f("uuid", 1, _F.TYPE_BYTES),
        _f("done", 2, _F.TYPE_INT32),
    ],
    "DictionaryElement": [
        _f("key", 1, "ObjectID"),
        _f("value", 2, "ObjectID"),
    ],
    "Dictionary": [
        _f("element", 1, "DictionaryElement", repeated=True),
    ],
    "ObjectID": [
        _f("unsigned_integer_value", 2, _F.TYPE_UINT64),
        _f("string_value", 4, _F.TYPE_STRING),
        _f("object_index", 6, _F.TYPE_INT32),
    ],
    "RegisterLatest": [
        _f("contents", 2, "ObjectID"),
    ],
    "MapItem": [
        _f("key", 1, _F.TYPE_INT32),
        _f("value", 2, "ObjectID"),
    ],
    "AttributeRun": [
        _f("length", 1, _F.TYPE_INT32),
        _f("paragraph_style", 2, "ParagraphStyle"),
        _f("font", 3, "Font"),
        _f("font_weight", 5, _F.TYPE_INT32),
        _f("underlined", 6, _F.TYPE_INT32),
        _f("strikethrough", 7, _F.TYPE_INT32),
        _f("superscript", 8, _F.TYPE_INT32),
        _f("link", 9, _F.TYPE_STRING),
        _f("color", 10, "Color"),
        _f("attachment_info", 12, "AttachmentInfo"),
    ],
    "NoteStoreProto": [
        _f("document", 2, "Document"),
    ],
    "Document": [
        _f("version", 2, _F.TYPE_INT32),
        _f("note", 3, "Note"),
    ],
    "Note": [
        _f("note_text", 2, _F.TYPE_STRING),
        _f("attribute_run", 5, "AttributeRun", repeated=True),
    ],
    "MergableDataProto": [
        _f("mergable_data_object", 2, "MergableDataObject"),
    ],
    "MergableDataObject": [
        _f("version", 2, _F.TYPE_INT32),
        _f("mergeable_data_object_data", 3, "MergeableDataObjectData"),
    ],
    "MergeableDataObjectData": [
        _f(
            "mergeable_data_object_entry",
            3,
            "MergeableDataObjectEntry",
            repeated=True,
        ),
        _f("mergeable_data_object_key_item", 4, _F.TYPE_STRING, repeated=True),
        _f("mergeable_data_object_type_item", 5, _F.TYPE_STRING, repeated=True),
        _f("mergeable_data_object_uuid_item", 6, _F.TYPE_BYTES, repeated=True),
    ],
    "MergeableDataObjectEntry": [
        _f("register_latest", 1, "RegisterLatest"),
        _f("list", 5, "List"),
        _f("dictionary", 6, "Dictionary"),
        _f("unknown_message", 9, "UnknownMergeableDataObjectEntryMessage"),
        _f("note", 10, "Note"),
        _f("custom_map", 13, "MergeableDataObjectMap"),
        _f("ordered_set", 16, "OrderedSet"),
    ],
    "UnknownMergeableDataObjectEntryMessage": [
        _f("unknown_entry", 1, "UnknownMergeableDataObjectEntryMessageEntry"),
    ],
    "UnknownMergeableDataObjectEntryMessageEntry": [
        _f("unknown_int1", 1, _F.TYPE_INT32),
        _f("unknown_int2", 2, _F.TYPE_INT64),
    ],
    "MergeableDataObjectMap": [
        _f("type", 1, _F.TYPE_INT32),
        _f("map_entry", 3, "MapItem", repeated=True),
    ],
    "OrderedSet": [
        _f("ordering", 1, "OrderedSetOrdering"),
        _f("elements", 2, "Dictionary"),
    ],
    "OrderedSetOrdering": [
        _f("array", 1, "OrderedSetOrderingArray"),
        _f("contents", 2, "Dictionary"),
    ],
    "OrderedSetOrderingArray": [
        _f("contents", 1, "Note"),
        _f("attachment", 2, "OrderedSetOrderingArrayAttachment", repeated=True),
    ],
    "OrderedSetOrderingArrayAttachment": [
        _f("index", 1, _F.TYPE_INT32),
        _f("uuid", 2, _F.TYPE_BYTES),
    ],
    "List": [
        _f("list_entry", 1, "ListItem", repeated=True),
    ],
    "ListItem": [
        _f("id", 2, "ObjectID"),
        _f("details", 3, "ListEntryDetails"),
        _f("additional_details", 4, "ListEntryDetails"),
    ],
    "ListEntryDetails": [
        _f("list_entry_details_key", 1, "ListEntryDetailsKey"),
        _f("id", 2, "ObjectID"),
    ],
    "ListEntryDetailsKey": [
        _f("list_entry_details_type_index", 1, _F.TYPE_INT32),
        _f("list_entry_details_key", 2, _F.TYPE_INT32),
    ],
}


def _build_file_proto() -> descriptor_pb2.FileDescriptorProto:
    fdp = descriptor_pb2.FileDescriptorProto(
        name=_FILE_NAME, package=_PACKAGE, syntax="proto2"
    )
    for msg_name, fields in _SCHEMA.items():
        msg = fdp.message_type.add(name=msg_name)
        for name, number, kind, repeated, default in fields:
            field = msg.field.add(
                name=name,
                number=number,
                label=_F.LABEL_REPEATED if repeated else _F.LABEL_OPTIONAL,
            )
            if isinstance(kind, str):
                field.type = _F.TYPE_MESSAGE
                field.type_name = f".{_PACKAGE}.{kind}"
            else:
                field.type = kind
            if default is not None:
                field.default_value = default
    return fdp


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_file_proto().SerializeToString())
DESCRIPTOR = _POOL.FindFileByName(_FILE_NAME)


def _message(name: str):
    return message_factory.GetMessageClass(
        _POOL.FindMessageTypeByName(f"{_PACKAGE}.{name}")
    )


Color = _message("Color")
AttachmentInfo = _message("AttachmentInfo")
Font = _message("Font")
ParagraphStyle = _message("ParagraphStyle")
Checklist = _message("Checklist")
DictionaryElement = _message("DictionaryElement")
Dictionary = _message("Dictionary")
ObjectID = _message("ObjectID")
RegisterLatest = _message("RegisterLatest")
MapItem = _message("MapItem")
AttributeRun = _message("AttributeRun")
NoteStoreProto = _message("NoteStoreProto")
Document = _message("Document")
Note = _message("Note")
MergableDataProto = _message("MergableDataProto")
MergableDataObject = _message("MergableDataObject")
MergeableDataObjectData = _message("MergeableDataObjectData")
MergeableDataObjectEntry = _message("MergeableDataObjectEntry")
UnknownMergeableDataObjectEntryMessage = _message(
    "UnknownMergeableDataObjectEntryMessage"
)
UnknownMergeableDataObjectEntryMessageEntry = _message(
    "UnknownMergeableDataObjectEntryMessageEntry"
)
MergeableDataObjectMap = _message("MergeableDataObjectMap")
OrderedSet = _message("OrderedSet")
OrderedSetOrdering = _message("OrderedSetOrdering")
OrderedSetOrderingArray = _message("OrderedSetOrderingArray")
OrderedSetOrderingArrayAttachment = _message("OrderedSetOrderingArrayAttachment")
List = _message("List")
ListItem = _message("ListItem")
ListEntryDetails = _message("ListEntryDetails")
ListEntryDetailsKey = _message("ListEntryDetailsKey")
