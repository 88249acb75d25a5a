from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Tuple


class BreakdownKind(str, Enum):
    STEP = "STEP"
    META = "META"


_CODE_RE = re.compile(r"^[A-Z][A-Z0-9_]{2,63}$")  # e.g. AREA, TRIP_CHARGE, MINIMUM


def _validate_code(code: str) -> str:
    code = str(code).strip()
    if not _CODE_RE.match(code):
        raise ValueError(f"invalid breakdown code '{code}'. Expected UPPER_SNAKE (3-64 chars)")
    return code


def _validate_message(message: str) -> str:
    msg = str(message).strip()
    if not msg:
        raise ValueError("breakdown message must be non-empty")
    # Render-safe for UI/PDF/mail
    if "\n" in msg or "\r" in msg or "\t" in msg:
        raise ValueError("breakdown message may not contain newlines or tabs")
    return msg


@dataclass(frozen=True)
class BreakdownEntry:
    seq: int
    kind: BreakdownKind
    code: str
    message: str


@dataclass
class Breakdown:
    """
    Ordered, human-readable explanation of a quote. STEP entries carry money
    ("Patio: $800.00 (Preset Package)"); META entries are notes that render
    in the same list but never carry a price.
    """

    _entries: List[BreakdownEntry] = field(default_factory=list)

    @property
    def entries(self) -> List[BreakdownEntry]:
        return list(self._entries)

    def add_step(self, code: str, message: str) -> None:
        self._append(BreakdownKind.STEP, code, message)

    def add_meta(self, code: str, message: str) -> None:
        self._append(BreakdownKind.META, code, message)

    def codes(self) -> List[str]:
        return [e.code for e in self._entries]

    def as_lines(self) -> Tuple[str, ...]:
        return tuple(e.message for e in self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.as_lines())

    def __len__(self) -> int:
        return len(self._entries)

    def _append(self, kind: BreakdownKind, code: str, message: str) -> None:
        self._entries.append(
            BreakdownEntry(
                seq=len(self._entries) + 1,
                kind=kind,
                code=_validate_code(code),
                message=_validate_message(message),
            )
        )
