from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict


def _env_extra_mode(default: str = "ignore") -> str:
    """
    Determine the extra-mode from the environment.

    PYNOTESTORE_ROWS_EXTRA: allow|forbid|ignore
    Convenience booleans: "true/1/on" -> forbid (strict), "false/0/off" -> allow
    """
    raw = (os.getenv("PYNOTESTORE_ROWS_EXTRA") or default).strip().lower()

    if raw in {"allow", "forbid", "ignore"}:
        return raw

    if raw in {"1", "true", "yes", "on", "strict"}:
        return "forbid"
    if raw in {"0", "false", "no", "off", "lenient"}:
        return "allow"

    return default


_EXTRA = _env_extra_mode()


class RowModel(BaseModel):
    """
    Base model for rows read from NoteStore.sqlite.

    Fields are declared under readable names and aliased to the Core Data
    column names. Extra columns are ignored by default; set
    ``PYNOTESTORE_ROWS_EXTRA=forbid`` before import to surface schema drift.
    """

    model_config = ConfigDict(
        extra=_EXTRA,
        populate_by_name=True,
        frozen=True,
        # generation columns are TEXT but older stores hold integers
        coerce_numbers_to_str=True,
    )


__all__ = ["RowModel", "_env_extra_mode"]
