# pynotestore/domain.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class AttachmentRef:
    identifier: str
    type_uti: Optional[str] = None


@dataclass(frozen=True)
class AttributeRun:
    # length counts UTF-16 code units
    length: int
    attachment: Optional[AttachmentRef] = None


@dataclass(frozen=True)
class DecodedNote:
    text: str
    runs: Tuple[AttributeRun, ...] = ()

    @property
    def attachments(self) -> Tuple[AttachmentRef, ...]:
        return tuple(r.attachment for r in self.runs if r.attachment is not None)
