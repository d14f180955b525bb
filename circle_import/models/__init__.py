"""Domain models for the circle shopping-list importer.

This package contains the row, item and import-result types shared by the
parsing, ordering and service layers.
"""

from .import_result import ImportIssue, ImportResult, ImportSource, ImportStatus
from .item import CandidateItem, PurchaseStatus, ShoppingItem
from .row import Row

__all__ = [
    # Parsing models
    "Row",
    # Item models
    "CandidateItem",
    "ShoppingItem",
    "PurchaseStatus",
    # Import results
    "ImportIssue",
    "ImportResult",
    "ImportSource",
    "ImportStatus",
]
