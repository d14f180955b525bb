from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from ..models.item import CandidateItem, PurchaseStatus, ShoppingItem
from ..ordering.engine import OrderingEngine
from ..ordering.keys import FullKey, PositionalKey, full_key, key_text, positional_key
from .progress import ProgressTracker

"""In-memory shopping list for one event.

Receives committed candidates from the importer, assigns identity and status,
merges them with what is already on the list and keeps the list ordered.

Merge rules for each incoming candidate, in input order:
- same full key (circle, date, block, number, title) -> duplicate, skipped
- same positional key (title differs) -> existing item updated in place
  (title, price, remarks); identity and status are kept
- otherwise -> new item placed with the ordering engine's sorted insertion

Single writer only: callers must serialize access to one list.
"""

__all__ = [
    "MergeReport",
    "ShoppingList",
]

logger = logging.getLogger(__name__)


@dataclass
class MergeReport:
    added: list[ShoppingItem] = field(default_factory=list)
    updated: list[ShoppingItem] = field(default_factory=list)
    duplicates: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.added or self.updated)


class ShoppingList:
    def __init__(
        self,
        event_name: str,
        engine: OrderingEngine | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.event_name = event_name
        self.engine = engine or OrderingEngine()
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._items: list[ShoppingItem] = []

    @property
    def items(self) -> list[ShoppingItem]:
        """Ordered snapshot of the list."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def get(self, item_id: str) -> ShoppingItem | None:
        return next((i for i in self._items if i.id == item_id), None)

    def _index_keys(self) -> tuple[set[FullKey], dict[PositionalKey, ShoppingItem]]:
        full_keys = {full_key(i) for i in self._items}
        by_position: dict[PositionalKey, ShoppingItem] = {}
        for i in self._items:
            by_position.setdefault(positional_key(i), i)
        return full_keys, by_position

    def bulk_add(self, candidates: Iterable[CandidateItem]) -> MergeReport:
        """Merge candidates into the list; see module docstring for the rules."""
        candidates = list(candidates)
        report = MergeReport()
        full_keys, by_position = self._index_keys()

        with ProgressTracker(len(candidates), description=f"Adding to {self.event_name}") as progress:
            for candidate in candidates:
                fk = full_key(candidate)
                pk = positional_key(candidate)
                if fk in full_keys:
                    report.duplicates += 1
                    logger.debug(f"duplicate skipped: {key_text(fk)}")
                elif pk in by_position:
                    existing = by_position[pk]
                    full_keys.discard(full_key(existing))
                    existing.title = candidate.title
                    existing.price = candidate.price
                    existing.remarks = candidate.remarks
                    full_keys.add(full_key(existing))
                    # 同じ位置の訂正が1回の取込で複数あっても1件として数える
                    if not any(u is existing for u in report.updated):
                        report.updated.append(existing)
                    logger.debug(f"title updated: {key_text(pk)} -> {candidate.title}")
                else:
                    item = ShoppingItem.from_candidate(candidate, self._id_factory(), PurchaseStatus.NONE)
                    self._items = self.engine.insert_sorted(self._items, item)
                    full_keys.add(fk)
                    by_position[pk] = item
                    report.added.append(item)
                progress.advance(added=len(report.added), updated=len(report.updated))

        logger.info(
            f"bulk add {self.event_name}: added={len(report.added)} "
            f"updated={len(report.updated)} duplicates={report.duplicates}"
        )
        return report

    def add_item(self, candidate: CandidateItem) -> ShoppingItem:
        """Add one hand-entered item at its sorted position."""
        item = ShoppingItem.from_candidate(candidate, self._id_factory(), PurchaseStatus.NONE)
        self._items = self.engine.insert_sorted(self._items, item)
        return item

    def update_item(self, item: ShoppingItem) -> ShoppingItem:
        """Replace the fields of the item with the same id and reposition it.

        Raises:
            KeyError: If no item with that id is on the list
        """
        existing = self.get(item.id)
        if existing is None:
            raise KeyError(item.id)
        existing.circle = item.circle
        existing.event_date = item.event_date
        existing.block = item.block
        existing.number = item.number
        existing.title = item.title
        existing.price = item.price
        existing.remarks = item.remarks
        existing.purchase_status = item.purchase_status
        # 編集で並び位置が変わり得るので、その1件だけ抜いて挿入し直す
        rest = [i for i in self._items if i is not existing]
        self._items = self.engine.insert_sorted(rest, existing)
        return existing

    def set_status(self, item_id: str, status: PurchaseStatus) -> ShoppingItem:
        existing = self.get(item_id)
        if existing is None:
            raise KeyError(item_id)
        existing.purchase_status = status
        return existing

    def remove_item(self, item_id: str) -> bool:
        before = len(self._items)
        self._items = [i for i in self._items if i.id != item_id]
        return len(self._items) != before
