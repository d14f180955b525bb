from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from enum import Enum

from .item import CandidateItem

"""Import result models.

Every import path reports its outcome as an ImportResult value instead of
raising: success with items, an empty import, or a source error (bad URL,
failed fetch, unreadable file). Row-level problems that did not stop the
import are collected as ImportIssue records.
"""

__all__ = [
    "ImportStatus",
    "ImportSource",
    "ImportIssue",
    "ImportResult",
]


class ImportStatus(Enum):
    SUCCESS = "success"
    EMPTY = "empty"  # 有効な行が1件もない (例外ではなく結果状態)
    SOURCE_ERROR = "source_error"


class ImportSource(Enum):
    PASTE = "paste"
    FILE = "csv"
    SHEETS = "sheets"


@dataclass(frozen=True)
class ImportIssue:
    """Non-fatal problem found while importing a single line.

    Attributes:
        line: 1-based line number in the source text. Use -1 when unknown
        issue_type: Classification in UPPER_SNAKE_CASE
        detail: Human readable description
    """
    line: int
    issue_type: str  # UPPER_SNAKE
    detail: str

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one import run."""
    source: ImportSource
    status: ImportStatus
    items: list[CandidateItem] = field(default_factory=list)
    rows_read: int = 0  # パース済み行数 (ヘッダ除く)
    skipped_blank: int = 0  # 空行として除外した件数
    issues: list[ImportIssue] = field(default_factory=list)
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == ImportStatus.SUCCESS
