from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from ..config.loader import DEFAULT_EVENT_DATES
from ..models.item import CandidateItem
from ..models.row import Row

"""Column mapper: positional rows -> candidate items.

Column order used by every import source:
  0 サークル名 | 1 参加日 | 2 ブロック | 3 ナンバー | 4 タイトル | 5 頒布価格 | 6 (購入状態) | 7 備考

Clipboard paste carries only the first six columns. The status column is
never read on import.

Mapping is two-staged:
- map_rows(): positional mapping and price sanitizing. File/URL sources trim
  immediately; clipboard text is kept as pasted.
- commit_candidates(): trimming, event-date default and blank-row dropping,
  shared by every source at commit time.
"""

__all__ = [
    "ColumnLayout",
    "EXPORT_LAYOUT",
    "PASTE_LAYOUT",
    "ItemValidationError",
    "sanitize_price",
    "map_row",
    "map_rows",
    "commit_candidates",
    "build_single_item",
]

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"[^0-9]")


class ItemValidationError(Exception):
    """Raised when a single item entered by hand has neither circle nor title."""


@dataclass(frozen=True)
class ColumnLayout:
    """Column index for each item field. None means the source lacks it."""
    circle: int = 0
    event_date: int = 1
    block: int = 2
    number: int = 3
    title: int = 4
    price: int = 5
    status: int | None = 6  # 取り込み時は未使用
    remarks: int | None = 7


EXPORT_LAYOUT = ColumnLayout()
PASTE_LAYOUT = ColumnLayout(status=None, remarks=None)


def sanitize_price(value: str | int | None) -> int:
    """Strip every non-digit character and parse the rest as an integer.

    "¥1,000" -> 1000, "" -> 0, "abc" -> 0. Never negative: "-" is stripped too.
    """
    if value is None:
        return 0
    digits = _NON_DIGITS.sub("", str(value))
    if not digits:
        return 0
    return int(digits)


def map_row(row: Row, layout: ColumnLayout = EXPORT_LAYOUT, trim: bool = True) -> CandidateItem:
    """Map one row onto a candidate item. Short rows are padded with ""."""

    def text(index: int | None) -> str:
        if index is None:
            return ""
        value = row.cell(index)
        return value.strip() if trim else value

    price_cell = row.cell(layout.price) or "0"
    return CandidateItem(
        circle=text(layout.circle),
        event_date=text(layout.event_date),
        block=text(layout.block),
        number=text(layout.number),
        title=text(layout.title),
        price=sanitize_price(price_cell),
        remarks=text(layout.remarks),
    )


def map_rows(
    rows: Iterable[Row], layout: ColumnLayout = EXPORT_LAYOUT, trim: bool = True
) -> list[CandidateItem]:
    """Map rows to candidates. Nothing is dropped here; see commit_candidates."""
    return [map_row(row, layout=layout, trim=trim) for row in rows]


def commit_candidates(
    candidates: Iterable[CandidateItem],
    default_event_date: str = DEFAULT_EVENT_DATES[0],
) -> tuple[list[CandidateItem], int]:
    """Finalize candidates for bulk add.

    - trims every text field
    - empty event date -> default_event_date
    - drops candidates whose circle, block, number and title are all empty

    Returns:
        (committed items, number of dropped blank candidates)
    """
    committed: list[CandidateItem] = []
    skipped = 0
    for c in candidates:
        item = CandidateItem(
            circle=(c.circle or "").strip(),
            event_date=(c.event_date or "").strip() or default_event_date,
            block=(c.block or "").strip(),
            number=(c.number or "").strip(),
            title=(c.title or "").strip(),
            price=max(int(c.price or 0), 0),
            remarks=(c.remarks or "").strip(),
        )
        if item.is_blank():
            skipped += 1
            continue
        committed.append(item)
    if skipped:
        logger.debug(f"blank rows dropped: {skipped}")
    return committed, skipped


def build_single_item(
    circle: str = "",
    event_date: str = "",
    block: str = "",
    number: str = "",
    title: str = "",
    price: str | int | None = "0",
    remarks: str = "",
    default_event_date: str = DEFAULT_EVENT_DATES[0],
) -> CandidateItem:
    """Build an item from hand-entered form values.

    Raises:
        ItemValidationError: If both circle and title are empty after trimming
    """
    circle = (circle or "").strip()
    title = (title or "").strip()
    if not circle and not title:
        raise ItemValidationError("circle or title is required")
    return CandidateItem(
        circle=circle,
        event_date=(event_date or "").strip() or default_event_date,
        block=(block or "").strip(),
        number=(number or "").strip(),
        title=title,
        price=sanitize_price(price),
        remarks=(remarks or "").strip(),
    )
