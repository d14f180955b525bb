from __future__ import annotations

import logging
import re

import requests

from ..config.loader import ImportConfig, default_config

"""Published spreadsheet CSV export fetch.

The sheet must be shared as "anyone with the link can view"; otherwise the
export endpoint answers with a non-2xx status or a login page. No retries are
made here; the caller decides whether to try again.
"""

__all__ = [
    "SheetsFetchError",
    "extract_sheet_id",
    "build_export_url",
    "fetch_sheet_csv",
]

logger = logging.getLogger(__name__)

_SHEET_ID_PATTERN = re.compile(r"/spreadsheets/d/([a-zA-Z0-9_-]+)")


class SheetsFetchError(Exception):
    """Raised when the export text could not be obtained."""


def extract_sheet_id(url: str | None) -> str | None:
    if not url:
        return None
    m = _SHEET_ID_PATTERN.search(url)
    return m.group(1) if m else None


def build_export_url(
    sheet_id: str, sheet_name: str | None = None, export_url: str | None = None
) -> tuple[str, dict[str, str]]:
    """Return (url, query params) for the CSV export of one sheet.

    An empty sheet_name selects the first sheet.
    """
    base = (export_url or default_config().sheets.export_url).format(sheet_id=sheet_id)
    params = {"tqx": "out:csv"}
    if sheet_name:
        params["sheet"] = sheet_name
    return base, params


def fetch_sheet_csv(
    url: str,
    sheet_name: str | None = None,
    config: ImportConfig | None = None,
    session: requests.Session | None = None,
) -> str:
    """Download the CSV export text for a published spreadsheet URL.

    Raises:
        SheetsFetchError: If the URL does not contain a sheet id, the request
            fails, or the server answers with a non-2xx status
    """
    cfg = config or default_config()
    sheet_id = extract_sheet_id(url)
    if sheet_id is None:
        raise SheetsFetchError(f"not a spreadsheet URL: {url}")

    export_url, params = build_export_url(sheet_id, sheet_name, cfg.sheets.export_url)
    http = session or requests
    logger.debug(f"sheets fetch: id={sheet_id} sheet={sheet_name or '(first)'}")
    try:
        response = http.get(export_url, params=params, timeout=cfg.sheets.timeout_seconds)
    except requests.RequestException as e:
        raise SheetsFetchError(f"spreadsheet request failed: {e}") from e

    # response.ok は 3xx も真になるので 2xx のみ成功とする
    if not 200 <= response.status_code < 300:
        raise SheetsFetchError(
            f"spreadsheet request failed: HTTP {response.status_code} "
            "(check that the sheet is shared as 'anyone with the link can view')"
        )
    # エクスポートは常に UTF-8
    response.encoding = "utf-8"
    return response.text
