from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, NamedTuple

# e.g. NODE_COST, TIER_OT1, NO_CHARGE_OUT_RATE
_CODE_RE = re.compile(r"^[A-Z][A-Z0-9_]{2,63}$")
_MAX_MESSAGE_LEN = 240

# Render prefix per entry kind; a step is rendered bare.
STEP = ""
CHECK = "OK: "
WARNING = "WARNING: "
META = "META: "


class TrailEntry(NamedTuple):
    code: str
    prefix: str
    message: str

    def render(self) -> str:
        return self.prefix + self.message


def _entry(code: str, message: str, prefix: str) -> TrailEntry:
    code = str(code).strip()
    if not _CODE_RE.match(code):
        raise ValueError(f"invalid breakdown code {code!r}, expected UPPER_SNAKE like TIER_OT1")

    msg = str(message).strip()
    if not msg:
        raise ValueError(f"{code}: empty breakdown message")
    # Een regel per entry: Excel cellen en mail bullets splitsen op newline
    if any(ch in msg for ch in "\n\r\t"):
        raise ValueError(f"{code}: breakdown message may not contain newlines or tabs")
    if len(msg) > _MAX_MESSAGE_LEN:
        raise ValueError(f"{code}: breakdown message longer than {_MAX_MESSAGE_LEN} chars")
    return TrailEntry(code=code, prefix=prefix, message=msg)


@dataclass
class Breakdown:
    """
    Explain trail for one quote line, in calculation order.

    Calculators add entries under an UPPER_SNAKE code; `as_strings()`
    gives the rendered lines for the payload, Excel and mail. Iterating
    yields the same strings, so `any("OT1" in s for s in ls.breakdown)`
    works in tests.
    """

    _entries: List[TrailEntry] = field(default_factory=list)

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._entries]

    def as_strings(self) -> List[str]:
        return [e.render() for e in self._entries]

    def __iter__(self) -> Iterator[str]:
        return iter(self.as_strings())

    def __len__(self) -> int:
        return len(self._entries)

    def add_step(self, code: str, message: str) -> None:
        self._add(code, message, STEP)

    def add_check(self, code: str, message: str) -> None:
        """A rate or amount that was verified; rendered as `OK: ...`."""
        self._add(code, message, CHECK)

    def add_warning(self, code: str, message: str) -> None:
        self._add(code, message, WARNING)

    def add_meta(self, code: str, message: str) -> None:
        self._add(code, message, META)

    def _add(self, code: str, message: str, prefix: str) -> None:
        self._entries.append(_entry(code, message, prefix))
