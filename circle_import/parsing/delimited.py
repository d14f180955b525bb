from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from enum import Enum

from ..models.row import Row

"""Delimited text parser.

Turns raw text into Row objects. Two dialects are supported:

- TAB: clipboard paste from a spreadsheet. Literal split on "\\t", no quoting.
- COMMA_QUOTED: CSV file / spreadsheet export. Comma separated with
  double-quote quoting and "" as an escaped quote inside a quoted field.

Quoted cells spanning several lines are not supported; every physical line is
one row. Malformed quoting never raises: an unterminated quote swallows the
rest of the line into the current cell and the row is flagged.
"""

__all__ = [
    "DelimiterMode",
    "split_lines",
    "parse_tab",
    "parse_quoted_line",
    "parse_quoted",
    "parse_delimited",
    "is_header_cell",
]

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_BOM = "\ufeff"


class DelimiterMode(Enum):
    TAB = "tab"
    COMMA_QUOTED = "comma-with-quotes"


def split_lines(text: str | None) -> list[tuple[int, str]]:
    """Split text on line breaks and drop blank lines.

    Returns:
        (line_number, line) pairs; line_number is 1-based and counts the
        dropped blank lines too.
    """
    if not text:
        return []
    return [
        (i, line)
        for i, line in enumerate(_LINE_BREAK.split(text), start=1)
        if line.strip() != ""
    ]


def parse_tab(text: str | None) -> list[Row]:
    """Parse clipboard text: one row per non-blank line, cells split on tab."""
    return [Row(line_number=n, cells=line.split("\t")) for n, line in split_lines(text)]


def parse_quoted_line(line: str) -> tuple[list[str], bool]:
    """Scan one comma-separated line honouring double-quote quoting.

    Returns:
        (cells, unterminated) where unterminated is True when the line ended
        while still inside a quoted field.
    """
    cells: list[str] = []
    current: list[str] = []
    inside_quotes = False
    i = 0
    length = len(line)
    while i < length:
        char = line[i]
        if char == '"':
            if inside_quotes and i + 1 < length and line[i + 1] == '"':
                # "" はリテラルの " として1文字扱い
                current.append('"')
                i += 1
            else:
                inside_quotes = not inside_quotes
        elif char == "," and not inside_quotes:
            cells.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1
    cells.append("".join(current))
    return cells, inside_quotes


def is_header_cell(cell: str, header_tokens: Iterable[str]) -> bool:
    """True when the first cell of a line is exactly one of the header labels.

    The cell is compared after BOM and whitespace removal; case is significant,
    so a circle named "Circle Moon" is never taken for a header.
    """
    label = cell.lstrip(_BOM).strip()
    return any(label == token for token in header_tokens if token)


def parse_quoted(
    text: str | None,
    header_tokens: Iterable[str] = (),
    skip_header: bool | None = None,
) -> list[Row]:
    """Parse comma-separated text into rows.

    Args:
        text: Raw decoded text
        header_tokens: Tokens identifying a header row by its first cell
        skip_header: None detects the header from header_tokens, True always
            drops the first non-blank line, False never drops it

    Returns:
        Parsed rows, header excluded
    """
    lines = split_lines(text)
    if not lines:
        return []

    start = 0
    if skip_header is True:
        start = 1
    elif skip_header is None:
        first_cells, _ = parse_quoted_line(lines[0][1])
        if is_header_cell(first_cells[0], header_tokens):
            start = 1
    if start:
        logger.debug(f"header row skipped: line={lines[0][0]}")

    rows: list[Row] = []
    for line_number, line in lines[start:]:
        if line_number == 1:
            line = line.lstrip(_BOM)
        cells, unterminated = parse_quoted_line(line)
        if unterminated:
            logger.debug(f"unterminated quote: line={line_number}")
        rows.append(Row(line_number=line_number, cells=cells, unterminated_quote=unterminated))
    return rows


def parse_delimited(
    text: str | None,
    mode: DelimiterMode,
    header_tokens: Iterable[str] = (),
    skip_header: bool | None = None,
) -> list[Row]:
    """Parse text with the given delimiter mode.

    Header handling only applies to COMMA_QUOTED; clipboard paste never
    carries a header row.
    """
    if mode is DelimiterMode.TAB:
        return parse_tab(text)
    return parse_quoted(text, header_tokens=header_tokens, skip_header=skip_header)
