from __future__ import annotations

from typing import NamedTuple

from ..models.item import CandidateItem

"""Identity keys for matching imported items against existing ones.

Keys are tuples compared field by field, so a "|" inside a field can never make
two different items collide. key_text() renders the joined form for logs.
"""

__all__ = [
    "FullKey",
    "PositionalKey",
    "full_key",
    "positional_key",
    "key_text",
]


class PositionalKey(NamedTuple):
    """Location of an item at the event; stays stable when the title is corrected."""
    circle: str
    event_date: str
    block: str
    number: str


class FullKey(NamedTuple):
    circle: str
    event_date: str
    block: str
    number: str
    title: str


def positional_key(item: CandidateItem) -> PositionalKey:
    return PositionalKey(item.circle or "", item.event_date or "", item.block or "", item.number or "")


def full_key(item: CandidateItem) -> FullKey:
    return FullKey(*positional_key(item), item.title or "")


def key_text(key: tuple[str, ...]) -> str:
    return "|".join(key)
