from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

Bulk adds of a few thousand rows are noticeably slow because every item is
placed with a linear sorted insertion, so a progress bar is shown when stdout
is a terminal. In non-TTY environments (CI, pipes) the bar is disabled to
avoid ANSI control sequence spam.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress tracker for per-item processing."""

    def __init__(self, total_items: int, *, description: str = "Adding items") -> None:
        self.total_items = total_items
        self.description = description
        self.current_item = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_items,
                desc=description,
                unit="item",
                disable=False,
                leave=False,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, **postfix: Any) -> None:
        """Mark one item done, optionally updating the postfix stats."""
        self.current_item += 1
        if self.enabled and self.pbar is not None:
            if postfix:
                self.pbar.set_postfix(**postfix)
            self.pbar.update(1)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
