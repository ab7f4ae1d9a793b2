"""
Table reconstruction for Apple Notes MergeableData payloads.

Given a gzipped MergeableData payload for a table attachment, reconstructs the
row/column ordering and renders a Markdown pipe table with the cell text.

Tables are CRDTs: rows and columns are identified by UUIDs, and the visible
order lives in an ordered set per axis (``crRows`` / ``crColumns``). Cells are
a two level dictionary under ``cellColumns``: column UUID -> (row UUID -> note).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from google.protobuf.message import DecodeError

from ..decoding import decompress
from ..exceptions import (
    DecodingError,
    NoTableFound,
    TableError,
    TableReconstructionError,
)
from ..graph import (
    CustomMapEntry,
    DictionaryEntry,
    NoteEntry,
    ObjectGraph,
    OrderedSetEntry,
)

LOGGER = logging.getLogger(__name__)


class TypeName(str, Enum):
    ICTABLE = "com.apple.notes.ICTable"


class MapKey(str, Enum):
    CR_ROWS = "crRows"
    CR_COLUMNS = "crColumns"
    CELL_COLUMNS = "cellColumns"


@dataclass
class AxisState:
    # resolved UUID hex -> position in the canonical order (-1 when unknown)
    indices: Dict[str, int] = field(default_factory=dict)
    total: int = 0

    def position(self, uuid_hex: str) -> int:
        return self.indices.get(uuid_hex, -1)


@dataclass(frozen=True)
class Table:
    cells: List[List[str]]

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def columns(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def to_markdown(self) -> str:
        return render_markdown_table(self.cells)


@dataclass
class TableBuilder:
    graph: ObjectGraph

    rows: AxisState = field(default_factory=AxisState)
    cols: AxisState = field(default_factory=AxisState)
    cells: List[List[str]] = field(default_factory=list)

    def parse_axis(self, entry: Optional[object], axis: AxisState) -> None:
        axis.indices.clear()
        axis.total = 0
        if not isinstance(entry, OrderedSetEntry):
            return
        ordering = [u.hex() for u in entry.ordering]
        for item in entry.contents:
            key_uuid = self.graph.resolve_uuid(item.key)
            value_uuid = self.graph.resolve_uuid(item.value)
            pos = ordering.index(key_uuid) if key_uuid in ordering else -1
            axis.indices[value_uuid] = pos
        axis.total = len(ordering)

    def init_table_buffers(self) -> None:
        self.cells = [["" for _ in range(self.cols.total)] for _ in range(self.rows.total)]

    def parse_cell_columns(self, entry: Optional[object]) -> None:
        if not isinstance(entry, DictionaryEntry):
            return
        for col in entry.elements:
            col_pos = self.cols.position(self.graph.resolve_uuid(col.key))
            col_dict = self.graph.resolve(col.value)
            if not isinstance(col_dict, DictionaryEntry):
                continue
            for row in col_dict.elements:
                row_pos = self.rows.position(self.graph.resolve_uuid(row.key))
                cell = self.graph.resolve(row.value)
                if not isinstance(cell, NoteEntry):
                    continue
                if 0 <= row_pos < self.rows.total and 0 <= col_pos < self.cols.total:
                    self.cells[row_pos][col_pos] = cell.text.strip()

    def build(self, root: CustomMapEntry) -> Table:
        cell_columns = None
        found_cells = False
        for item in root.items:
            kname = self.graph.key_name(item)
            target = self.graph.resolve(item.value)
            if kname == MapKey.CR_ROWS.value:
                self.parse_axis(target, self.rows)
            elif kname == MapKey.CR_COLUMNS.value:
                self.parse_axis(target, self.cols)
            elif kname == MapKey.CELL_COLUMNS.value:
                cell_columns = target
                found_cells = True
        if not found_cells:
            raise TableReconstructionError("table root has no cellColumns entry")
        self.init_table_buffers()
        self.parse_cell_columns(cell_columns)
        LOGGER.debug(
            "notes.table.built rows=%d cols=%d", self.rows.total, self.cols.total
        )
        return Table(cells=self.cells)


def build_table(graph: ObjectGraph) -> Table:
    root = graph.find_custom_map(TypeName.ICTABLE.value)
    if root is None:
        raise NoTableFound("no com.apple.notes.ICTable root in payload")
    return TableBuilder(graph).build(root)


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|")


def render_markdown_table(cells: List[List[str]]) -> str:
    """Render rows as a pipe table.

    The separator row is emitted after the first row regardless of content;
    the first row acts as the header.
    """
    out = []
    for r, row in enumerate(cells):
        out.append("| " + " | ".join(_escape_cell(c) for c in row) + " |\n")
        if r == 0:
            out.append("|" + " -- |" * len(row) + "\n")
    return "".join(out)


def render_table_from_payload(payload: bytes) -> Optional[str]:
    """Render an inflated MergableDataProto payload; None when it holds no table."""
    try:
        table = build_table(ObjectGraph.from_payload(payload))
    except (DecodeError, TableError) as e:
        LOGGER.debug("notes.table.failed %s: %s", type(e).__name__, e)
        return None
    if table.rows == 0 or table.columns == 0:
        LOGGER.debug("notes.table.empty")
        return None
    return table.to_markdown()


def render_table_from_mergeable(gz_bytes: Optional[bytes]) -> Optional[str]:
    """Decode a gzipped table payload to Markdown; None when anything fails."""
    if not gz_bytes:
        return None
    try:
        payload = decompress(gz_bytes)
    except DecodingError as e:
        LOGGER.debug("notes.table.inflate_failed %s", e)
        return None
    return render_table_from_payload(payload)
