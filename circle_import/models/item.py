from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum

"""Item domain models for the circle shopping list.

CandidateItem is what the import path produces: the seven user-facing fields
with no identity. ShoppingItem adds the identity and purchase status that the
shopping list assigns once a candidate is accepted.
"""

__all__ = [
    "PurchaseStatus",
    "CandidateItem",
    "ShoppingItem",
]


class PurchaseStatus(Enum):
    """Lifecycle status of a shopping item.

    New items start as NONE. The value is what the export writes into the
    status column, which the importer itself never reads back.
    """
    NONE = "None"
    PURCHASED = "Purchased"
    SOLD_OUT = "SoldOut"
    ABSENT = "Absent"
    POSTPONED = "Postponed"


@dataclass
class CandidateItem:
    """Imported item before identity and status are assigned."""
    circle: str = ""  # サークル名
    event_date: str = ""  # 参加日 (例: 1日目)
    block: str = ""  # ブロック (先頭文字で照合カテゴリが決まる)
    number: str = ""  # ナンバー (数字 + 任意の英字サフィックス)
    title: str = ""
    price: int = 0  # 頒布価格 (最小通貨単位, 非負整数)
    remarks: str = ""  # 備考

    def is_blank(self) -> bool:
        """True when circle, block, number and title are all empty."""
        return not (self.circle or self.block or self.number or self.title)


@dataclass
class ShoppingItem(CandidateItem):
    """Item held by the shopping list.

    Fields are edited in place; ``id`` never changes after creation.
    """
    id: str = ""
    purchase_status: PurchaseStatus = PurchaseStatus.NONE

    @classmethod
    def from_candidate(
        cls,
        candidate: CandidateItem,
        item_id: str,
        status: PurchaseStatus = PurchaseStatus.NONE,
    ) -> ShoppingItem:
        values = {f.name: getattr(candidate, f.name) for f in fields(CandidateItem)}
        return cls(**values, id=item_id, purchase_status=status)
