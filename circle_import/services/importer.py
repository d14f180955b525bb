from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import requests

from ..config.loader import ImportConfig, default_config
from ..models.import_result import ImportIssue, ImportResult, ImportSource, ImportStatus
from ..models.row import Row
from ..parsing.column_mapper import EXPORT_LAYOUT, PASTE_LAYOUT, ColumnLayout, commit_candidates, map_rows
from ..parsing.delimited import DelimiterMode, parse_delimited
from ..sources.sheets import SheetsFetchError, fetch_sheet_csv

"""Import orchestration.

Each entry point runs text -> rows -> candidates -> committed items and
returns an ImportResult. Failures of the source itself (unreadable file,
bad spreadsheet URL, HTTP error) become SOURCE_ERROR results; an import in
which every row turned out blank becomes EMPTY. Nothing is raised to the
caller for bad input.
"""

__all__ = [
    "import_paste",
    "import_paste_file",
    "import_text",
    "import_file_bytes",
    "import_file",
    "import_sheets",
]

logger = logging.getLogger(__name__)


def _collect_issues(rows: Sequence[Row]) -> list[ImportIssue]:
    return [
        ImportIssue(
            line=row.line_number,
            issue_type="UNTERMINATED_QUOTE",
            detail="line ended inside a quoted field; rest of line kept in last cell",
        )
        for row in rows
        if row.unterminated_quote
    ]


def _build_result(
    source: ImportSource,
    rows: Sequence[Row],
    layout: ColumnLayout,
    trim: bool,
    config: ImportConfig,
    issues: list[ImportIssue] | None = None,
) -> ImportResult:
    candidates = map_rows(rows, layout=layout, trim=trim)
    items, skipped = commit_candidates(candidates, default_event_date=config.default_event_date)
    status = ImportStatus.SUCCESS if items else ImportStatus.EMPTY
    message = None if items else "no importable rows found"
    logger.info(f"import {source.value}: rows={len(rows)} items={len(items)} skipped_blank={skipped}")
    return ImportResult(
        source=source,
        status=status,
        items=items,
        rows_read=len(rows),
        skipped_blank=skipped,
        issues=issues or [],
        message=message,
    )


def _source_error(source: ImportSource, message: str) -> ImportResult:
    logger.error(f"import {source.value}: {message}")
    return ImportResult(source=source, status=ImportStatus.SOURCE_ERROR, message=message)


def import_paste(text: str | None, config: ImportConfig | None = None) -> ImportResult:
    """Import tab-separated clipboard text (no header, six columns)."""
    cfg = config or default_config()
    rows = parse_delimited(text, DelimiterMode.TAB)
    # クリップボード経由はマッピング時にトリムせず、確定時にまとめてトリム
    return _build_result(ImportSource.PASTE, rows, PASTE_LAYOUT, trim=False, config=cfg)


def import_paste_file(path: Path, config: ImportConfig | None = None) -> ImportResult:
    """Import clipboard text that was saved to a file."""
    cfg = config or default_config()
    try:
        text = path.read_text(encoding=cfg.file_encoding, errors="replace")
    except OSError as e:
        return _source_error(ImportSource.PASTE, f"cannot read file {path}: {e}")
    return import_paste(text, config=cfg)


def import_text(
    text: str | None,
    config: ImportConfig | None = None,
    source: ImportSource = ImportSource.FILE,
    skip_header: bool | None = None,
) -> ImportResult:
    """Import comma-separated text with quote escaping (file or export body)."""
    cfg = config or default_config()
    rows = parse_delimited(
        text,
        DelimiterMode.COMMA_QUOTED,
        header_tokens=cfg.header_tokens,
        skip_header=skip_header,
    )
    return _build_result(source, rows, EXPORT_LAYOUT, trim=True, config=cfg, issues=_collect_issues(rows))


def import_file_bytes(raw: bytes, config: ImportConfig | None = None) -> ImportResult:
    """Decode file content with the configured encoding and import it."""
    cfg = config or default_config()
    # 固定エンコーディング。不正バイトは置換して取り込みを続行
    text = raw.decode(cfg.file_encoding, errors="replace")
    return import_text(text, config=cfg, source=ImportSource.FILE)


def import_file(path: Path, config: ImportConfig | None = None) -> ImportResult:
    try:
        raw = path.read_bytes()
    except OSError as e:
        return _source_error(ImportSource.FILE, f"cannot read file {path}: {e}")
    return import_file_bytes(raw, config=config)


def import_sheets(
    url: str,
    sheet_name: str | None = None,
    config: ImportConfig | None = None,
    session: requests.Session | None = None,
) -> ImportResult:
    """Fetch a published spreadsheet export and import it.

    The first row of the export is always treated as the header.
    """
    cfg = config or default_config()
    try:
        text = fetch_sheet_csv(url, sheet_name=sheet_name, config=cfg, session=session)
    except SheetsFetchError as e:
        return _source_error(ImportSource.SHEETS, str(e))
    return import_text(text, config=cfg, source=ImportSource.SHEETS, skip_header=True)
