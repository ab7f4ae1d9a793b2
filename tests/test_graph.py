"""Tests for the mergeable object graph resolver."""

import unittest

from notes_fixtures import ICTABLE, row_uuid, table_proto, uuid_box

from pynotestore.exceptions import GraphResolutionError, IndexOutOfRange
from pynotestore.graph import (
    CustomMapEntry,
    DictionaryEntry,
    NoteEntry,
    ObjectGraph,
    ObjectRef,
    OrderedSetEntry,
    UnknownEntry,
)
from pynotestore.protobuf import notes_pb2 as pb


def _data():
    return pb.MergeableDataObjectData()


class ObjectGraphTest(unittest.TestCase):
    def setUp(self):
        msg = pb.MergableDataProto()
        data = msg.mergable_data_object.mergeable_data_object_data
        data.mergeable_data_object_type_item.append("com.apple.CRDT.NSUUID")
        self.box = uuid_box(data, row_uuid(0))  # entry 0, uuid 0
        # entry 1: a box pointing past the uuid table
        bad = data.mergeable_data_object_entry.add()
        bad.custom_map.type = 0
        bad.custom_map.map_entry.add(key=0).value.unsigned_integer_value = 7
        # entry 2: a box around a short uuid
        short = uuid_box(data, b"\x01\x02")
        # entry 3: a note
        data.mergeable_data_object_entry.add().note.note_text = "cell"
        # entry 4: an entry kind that is not modelled
        data.mergeable_data_object_entry.add().register_latest.SetInParent()
        # entry 5: a custom map whose first value is an object reference
        ref_map = data.mergeable_data_object_entry.add()
        ref_map.custom_map.map_entry.add(key=0).value.object_index = 0
        self.short = short
        self.graph = ObjectGraph.from_payload(msg.SerializeToString())

    def test_entry_kinds(self):
        self.assertIsInstance(self.graph.resolve_index(0), CustomMapEntry)
        self.assertIsInstance(self.graph.resolve_index(3), NoteEntry)
        self.assertEqual(self.graph.resolve_index(3).text, "cell")
        self.assertIsInstance(self.graph.resolve_index(4), UnknownEntry)
        self.assertEqual(len(self.graph), 6)

    def test_resolve_uuid(self):
        self.assertEqual(
            self.graph.resolve_uuid(ObjectRef(object_index=self.box)), "10" * 16
        )

    def test_resolve_uuid_is_total(self):
        cases = [
            ObjectRef(object_index=1),  # uuid index out of range
            ObjectRef(object_index=self.short),  # not 16 bytes
            ObjectRef(object_index=3),  # not a custom map
            ObjectRef(object_index=4),  # unknown entry
            ObjectRef(object_index=5),  # first value is not a literal
            ObjectRef(object_index=99),  # dangling
            ObjectRef(object_index=-1),
            ObjectRef(unsigned_integer=0),  # a literal, not a reference
            ObjectRef(),
        ]
        for ref in cases:
            with self.subTest(ref=ref):
                self.assertEqual(self.graph.resolve_uuid(ref), "")

    def test_resolve_index_out_of_range(self):
        with self.assertRaises(IndexOutOfRange) as cm:
            self.graph.resolve_index(6)
        self.assertEqual((cm.exception.index, cm.exception.size), (6, 6))
        self.assertIsInstance(cm.exception, GraphResolutionError)
        with self.assertRaises(IndexOutOfRange):
            self.graph.resolve_index(-1)

    def test_resolve_returns_none_for_dangling(self):
        self.assertIsNone(self.graph.resolve(ObjectRef(object_index=42)))
        self.assertIsNone(self.graph.resolve(ObjectRef(string_value="x")))

    def test_object_ref_from_proto(self):
        oid = pb.ObjectID(object_index=0)
        self.assertEqual(ObjectRef.from_proto(oid), ObjectRef(object_index=0))
        oid = pb.ObjectID(unsigned_integer_value=0)
        self.assertEqual(ObjectRef.from_proto(oid), ObjectRef(unsigned_integer=0))
        oid = pb.ObjectID(string_value="k")
        self.assertEqual(ObjectRef.from_proto(oid), ObjectRef(string_value="k"))


class GraphLookupTest(unittest.TestCase):
    def setUp(self):
        msg = table_proto({(0, 0): "A"}, 1, 1)
        self.graph = ObjectGraph.from_proto(
            msg.mergable_data_object.mergeable_data_object_data
        )

    def test_find_custom_map(self):
        root = self.graph.find_custom_map(ICTABLE)
        self.assertIsNotNone(root)
        self.assertEqual(self.graph.type_name(root), ICTABLE)
        self.assertEqual(
            [self.graph.key_name(item) for item in root.items],
            ["crRows", "crColumns", "cellColumns"],
        )
        self.assertIsNone(self.graph.find_custom_map("com.apple.notes.Other"))

    def test_axis_and_cells_are_typed(self):
        kinds = {type(e) for e in self.graph}
        self.assertTrue({OrderedSetEntry, DictionaryEntry, NoteEntry} <= kinds)

    def test_unknown_type_and_key_indices(self):
        self.assertIsNone(self.graph.type_name(CustomMapEntry(type_index=9, items=())))

    def test_empty_graph(self):
        graph = ObjectGraph.from_proto(_data())
        self.assertEqual(len(graph), 0)
        self.assertIsNone(graph.find_custom_map(ICTABLE))


if __name__ == "__main__":
    unittest.main()
