from __future__ import annotations

from dataclasses import dataclass, field

"""Row model for delimited text parsing.

A Row is one parsed line of input: an ordered list of string cells with no
semantic meaning attached. Column semantics are applied later by the column
mapper.
"""

__all__ = [
    "Row",
]


@dataclass(frozen=True)
class Row:
    """Positional field-vector produced from a single source line.

    The line_number refers to the position of the line in the raw text
    (1-based, blank lines included) so that import issues can point back to it.
    """
    line_number: int  # 元テキストでの行番号 (1始まり)
    cells: list[str] = field(default_factory=list)
    unterminated_quote: bool = False  # 引用符が閉じられないまま行末に到達

    def cell(self, index: int, default: str = "") -> str:
        """Return the cell at index, or default when the row is shorter."""
        if 0 <= index < len(self.cells):
            return self.cells[index]
        return default

    def __len__(self) -> int:
        return len(self.cells)
