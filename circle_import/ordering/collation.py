from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Protocol

"""Pluggable string collation.

The ordering engine never compares strings with ``<`` directly; it asks a
Collator. Two implementations ship here:

- UnicodeCollator: deterministic collation built on NFD decomposition.
  Understands the sensitivity levels used by the ordering rules and a
  numeric mode in which digit runs compare by value ("2" < "10", also for
  full-width digits such as "２" < "１０").
- CodepointCollator: plain code point order, for tests that only care about
  the structure of the ordering rules.

Sensitivity levels follow the usual collation vocabulary:
  base    - a == á == A (diacritics, voicing marks and case ignored)
  accent  - a != á, a == A
  case    - a == á, a != A
  variant - everything distinguishes
"""

__all__ = [
    "Sensitivity",
    "CollationOptions",
    "Collator",
    "UnicodeCollator",
    "CodepointCollator",
]

# \d は全角数字など Unicode の Nd 全体にマッチする
_DIGIT_RUN = re.compile(r"\d+")


class Sensitivity:
    BASE = "base"
    ACCENT = "accent"
    CASE = "case"
    VARIANT = "variant"

    ALL = (BASE, ACCENT, CASE, VARIANT)


@dataclass(frozen=True)
class CollationOptions:
    locale: str | None = None
    sensitivity: str = Sensitivity.VARIANT
    numeric: bool = False

    def __post_init__(self) -> None:
        if self.sensitivity not in Sensitivity.ALL:
            raise ValueError(f"unknown sensitivity: {self.sensitivity}")


class Collator(Protocol):
    def collate(self, a: str | None, b: str | None, options: CollationOptions | None = None) -> int:
        """Return -1, 0 or 1."""
        ...


def _sign(a: object, b: object) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


class UnicodeCollator:
    """Deterministic collator over Unicode code points.

    Comparison key per character class: whitespace/punctuation < digits <
    everything else, then by (folded) code point. The locale is accepted for
    interface compatibility; the rules are the same for every locale.
    """

    def collate(self, a: str | None, b: str | None, options: CollationOptions | None = None) -> int:
        opts = options or CollationOptions()
        a = a or ""
        b = b or ""
        primary = _sign(self._key(a, opts), self._key(b, opts))
        if primary != 0 or opts.sensitivity != Sensitivity.VARIANT:
            return primary
        # variant: 同値キーでもコードポイント順で決着をつける
        return _sign(a, b)

    def _key(self, text: str, opts: CollationOptions) -> list[tuple]:
        text = unicodedata.normalize("NFD", text)
        if opts.sensitivity in (Sensitivity.BASE, Sensitivity.CASE):
            text = "".join(ch for ch in text if unicodedata.category(ch) != "Mn")
        if opts.sensitivity in (Sensitivity.BASE, Sensitivity.ACCENT):
            text = text.casefold()

        key: list[tuple] = []
        pos = 0
        while pos < len(text):
            if opts.numeric:
                m = _DIGIT_RUN.match(text, pos)
                if m:
                    key.append((1, int(m.group()), ""))
                    pos = m.end()
                    continue
            ch = text[pos]
            key.append((self._rank(ch), 0, ch))
            pos += 1
        return key

    @staticmethod
    def _rank(ch: str) -> int:
        category = unicodedata.category(ch)
        if category == "Nd":
            return 1
        if category[0] in ("Z", "P", "C"):
            return 0
        return 2


class CodepointCollator:
    """Byte-order fallback: ignores options, compares raw code points."""

    def collate(self, a: str | None, b: str | None, options: CollationOptions | None = None) -> int:
        return _sign(a or "", b or "")
