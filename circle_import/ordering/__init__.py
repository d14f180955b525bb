from .collation import CodepointCollator, CollationOptions, Collator, Sensitivity, UnicodeCollator
from .engine import (
    OrderingEngine,
    compare_blocks,
    compare_items,
    insert_sorted,
    number_sort_key,
    sort_items,
)
from .keys import FullKey, PositionalKey, full_key, key_text, positional_key

__all__ = [
    "CodepointCollator",
    "CollationOptions",
    "Collator",
    "Sensitivity",
    "UnicodeCollator",
    "OrderingEngine",
    "compare_blocks",
    "compare_items",
    "insert_sorted",
    "number_sort_key",
    "sort_items",
    "FullKey",
    "PositionalKey",
    "full_key",
    "key_text",
    "positional_key",
]
