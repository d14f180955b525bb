from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import pandas as pd

from ..models.item import CandidateItem, PurchaseStatus, ShoppingItem

"""CSV export of a shopping list.

Writes the same eight-column layout the file importer reads, with a Japanese
header row whose first cell is "サークル名", so an exported file can be
imported again on another device.
"""

__all__ = [
    "EXPORT_COLUMNS",
    "EXPORT_ENCODING",
    "items_to_frame",
    "export_csv",
]

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "サークル名",
    "参加日",
    "ブロック",
    "ナンバー",
    "タイトル",
    "頒布価格",
    "購入状態",
    "備考",
]
EXPORT_ENCODING = "utf-8-sig"


def _status_value(item: CandidateItem) -> str:
    if isinstance(item, ShoppingItem):
        return item.purchase_status.value
    return PurchaseStatus.NONE.value


def items_to_frame(items: Iterable[CandidateItem]) -> pd.DataFrame:
    records = [
        [
            item.circle,
            item.event_date,
            item.block,
            item.number,
            item.title,
            int(item.price),
            _status_value(item),
            item.remarks,
        ]
        for item in items
    ]
    return pd.DataFrame(records, columns=EXPORT_COLUMNS)


def export_csv(items: Iterable[CandidateItem], path: Path | None = None) -> str | None:
    """Write items in their current order.

    Returns:
        The CSV text when path is None, otherwise None after writing the file
    """
    df = items_to_frame(items)
    if path is None:
        return df.to_csv(index=False, lineterminator="\n")
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, encoding=EXPORT_ENCODING, lineterminator="\n")
    logger.info(f"exported {len(df)} items to {path}")
    return None
