"""
Debug helpers for mapping attribute runs to the exact text slices they cover.

These utilities are intended for troubleshooting renderer issues. They do no
database or filesystem access and can be safely used in tests.
"""

from __future__ import annotations

from typing import Dict, List

from ..domain import DecodedNote
from .renderer import Utf16Text


def map_attribute_runs(note: DecodedNote) -> List[Dict[str, object]]:
    """Return a list of dictionaries mapping each run to its text.

    Offsets here start at zero, unlike the exporter which seeds its cursor
    after a suppressed first line.

    Each dict contains:
      - index: run index
      - utf16_start: start offset in UTF-16 code units
      - utf16_len: run length
      - text: the slice the run covers
      - attachment_id, uti: set for attachment runs
    """
    text = Utf16Text(note.text)
    pos = 0
    out: List[Dict[str, object]] = []
    for idx, run in enumerate(note.runs):
        att = run.attachment
        out.append(
            {
                "index": idx,
                "utf16_start": pos,
                "utf16_len": run.length,
                "text": text.slice(pos, pos + run.length),
                "attachment_id": att.identifier if att is not None else None,
                "uti": att.type_uti if att is not None else None,
            }
        )
        pos += run.length
    return out


def dump_runs_text(note: DecodedNote) -> str:
    """Return a human-readable dump of runs with escaped whitespace markers."""
    rows = []
    for row in map_attribute_runs(note):
        pretty = (
            str(row["text"])
            .replace("\n", "⏎\n")
            .replace("\u2028", "⤶\n")
            .replace("\x00", "␀")
            .replace("\ufffc", "{OBJ}")
        )
        head = f"[{row['index']}] @{row['utf16_start']}+{row['utf16_len']}"
        if row["attachment_id"]:
            head += f" attachment={row['attachment_id']} uti={row['uti']}"
        rows.append(f"{head}\n{pretty}")
    return "\n".join(rows)
