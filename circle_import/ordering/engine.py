from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable, Sequence
from functools import cmp_to_key
from typing import TypeVar

from ..config.loader import DEFAULT_COLLATION_LOCALE
from ..models.item import CandidateItem
from .collation import CollationOptions, Collator, Sensitivity, UnicodeCollator

"""Ordering engine for shopping items.

Items are ordered by event date, then block, then number:

1. event date: locale-aware string collation
2. block: category of the first character decides first
   (A-Z < a-z < hiragana < katakana < other, empty block last), then
   base-sensitivity collation after handakuten normalization
   (パ -> ハ + ゜ so that パ sorts right after the ハ blocks)
3. number: leading digits zero-padded to 10 places plus letter suffix,
   compared with numeric, base-sensitivity collation

insert_sorted() places one new item into an already sorted list without
re-sorting it.
"""

__all__ = [
    "NUMBER_PAD_WIDTH",
    "HANDAKU_MAP",
    "block_category",
    "block_sort_key",
    "number_sort_key",
    "compare_blocks",
    "compare_items",
    "insert_sorted",
    "sort_items",
    "OrderingEngine",
]

T = TypeVar("T", bound=CandidateItem)

NUMBER_PAD_WIDTH = 10

# 半濁音: 基底の清音 + 半濁点 (U+309C) に展開して清音の直後に並べる
# TODO: 濁音 (ガ/カ 等) も同様の扱いが必要かは実データで確認する
HANDAKU_MAP = {
    "パ": "ハ゜",
    "ピ": "ヒ゜",
    "プ": "フ゜",
    "ペ": "ヘ゜",
    "ポ": "ホ゜",
}

_NUMBER_PATTERN = re.compile(r"^([0-9]+)([a-zA-Z]*)$")

_DEFAULT_COLLATOR = UnicodeCollator()


def block_category(block: str | None) -> int:
    """Category of a block by its first character (1..5), 0 for empty."""
    if not block:
        return 0
    first = block[0]
    if "A" <= first <= "Z":
        return 1
    if "a" <= first <= "z":
        return 2
    if "ぁ" <= first <= "ん":
        return 3
    if "ァ" <= first <= "ヶ":
        return 4
    return 5


def block_sort_key(block: str | None) -> str:
    if not block:
        return ""
    return "".join(HANDAKU_MAP.get(ch, ch) for ch in block)


def number_sort_key(number: str | None) -> str:
    """Zero-pad the leading digit run: "12a" -> "0000000012a".

    Full-width input is read through NFKC ("１２ａ" -> "0000000012a"). Values
    not shaped digits + letters are returned unchanged.
    """
    if not number:
        return ""
    m = _NUMBER_PATTERN.match(unicodedata.normalize("NFKC", number))
    if m is None:
        return number
    return m.group(1).zfill(NUMBER_PAD_WIDTH) + m.group(2)


def compare_blocks(
    a: str | None,
    b: str | None,
    collator: Collator = _DEFAULT_COLLATOR,
    locale: str | None = DEFAULT_COLLATION_LOCALE,
) -> int:
    """Compare two block codes. Empty blocks sort after every non-empty block."""
    a = a or ""
    b = b or ""
    if not a and not b:
        return 0
    if not a:
        return 1
    if not b:
        return -1

    cat_a = block_category(a)
    cat_b = block_category(b)
    if cat_a != cat_b:
        return -1 if cat_a < cat_b else 1

    return collator.collate(
        block_sort_key(a),
        block_sort_key(b),
        CollationOptions(locale=locale, sensitivity=Sensitivity.BASE),
    )


def compare_items(
    a: CandidateItem,
    b: CandidateItem,
    collator: Collator = _DEFAULT_COLLATOR,
    locale: str | None = DEFAULT_COLLATION_LOCALE,
) -> int:
    """Total order over items: event date -> block -> number."""
    result = collator.collate(a.event_date or "", b.event_date or "", CollationOptions(locale=locale))
    if result != 0:
        return result

    result = compare_blocks(a.block, b.block, collator=collator, locale=locale)
    if result != 0:
        return result

    # ナンバーはロケール非依存の数値モードで比較
    return collator.collate(
        number_sort_key(a.number),
        number_sort_key(b.number),
        CollationOptions(locale=None, sensitivity=Sensitivity.BASE, numeric=True),
    )


def insert_sorted(
    items: Sequence[T],
    new_item: T,
    collator: Collator = _DEFAULT_COLLATOR,
    locale: str | None = DEFAULT_COLLATION_LOCALE,
) -> list[T]:
    """Return a new list with new_item inserted before the first item it sorts before.

    Existing items keep their relative order; an item comparing equal to a
    run of existing items is appended after that run.
    """
    result = list(items)
    index = len(result)
    for i, existing in enumerate(result):
        if compare_items(new_item, existing, collator=collator, locale=locale) < 0:
            index = i
            break
    result.insert(index, new_item)
    return result


def sort_items(
    items: Iterable[T],
    collator: Collator = _DEFAULT_COLLATOR,
    locale: str | None = DEFAULT_COLLATION_LOCALE,
) -> list[T]:
    """Stable full sort with compare_items."""
    return sorted(items, key=cmp_to_key(lambda a, b: compare_items(a, b, collator=collator, locale=locale)))


class OrderingEngine:
    """Ordering rules bound to one collator and locale."""

    def __init__(self, collator: Collator | None = None, locale: str | None = DEFAULT_COLLATION_LOCALE) -> None:
        self.collator = collator or _DEFAULT_COLLATOR
        self.locale = locale

    def compare(self, a: CandidateItem, b: CandidateItem) -> int:
        return compare_items(a, b, collator=self.collator, locale=self.locale)

    def compare_blocks(self, a: str | None, b: str | None) -> int:
        return compare_blocks(a, b, collator=self.collator, locale=self.locale)

    def insert_sorted(self, items: Sequence[T], new_item: T) -> list[T]:
        return insert_sorted(items, new_item, collator=self.collator, locale=self.locale)

    def sort(self, items: Iterable[T]) -> list[T]:
        return sort_items(items, collator=self.collator, locale=self.locale)
