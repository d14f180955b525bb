from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from circle_import.config.loader import ConfigError, ImportConfig, default_config, load_config
from circle_import.logging.init import log_summary, setup_logging
from circle_import.models.import_result import ImportResult, ImportStatus
from circle_import.ordering.engine import OrderingEngine
from circle_import.services.export import export_csv
from circle_import.services.importer import import_file, import_paste_file, import_sheets
from circle_import.services.shopping_list import ShoppingList
from circle_import.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then config (--config > CIRCLE_IMPORT_CONFIG > config/import.yml,
  built-in defaults when the default path does not exist)
- Import from one source (clipboard text file, CSV file or spreadsheet URL)
- Merge into a fresh shopping list and print the SUMMARY line
- Optionally export the ordered list as CSV
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_EMPTY = 2

DEFAULT_CONFIG_PATH = Path("config/import.yml")
CONFIG_ENV = "CIRCLE_IMPORT_CONFIG"


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env using python-dotenv. A missing file is not an error."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Import a circle shopping list and print it in event order")
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--paste", type=Path, metavar="FILE", help="Tab-separated text copied from a spreadsheet")
    src.add_argument("--csv", type=Path, metavar="FILE", help="CSV file (header row optional)")
    src.add_argument("--sheets", metavar="URL", help="Published spreadsheet URL")
    p.add_argument("--sheet-name", default=None, help="Sheet name for --sheets (first sheet if omitted)")
    p.add_argument("--event", default="event", help="Event name for the list")
    p.add_argument("--config", type=Path, default=None, help="Config YAML path")
    p.add_argument("--out", type=Path, default=None, help="Write the ordered list to this CSV file")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_config(arg_path: Path | None) -> ImportConfig:
    """Explicit paths must exist; the default path falls back to built-in defaults."""
    if arg_path is not None:
        return load_config(arg_path)
    env_path = os.getenv(CONFIG_ENV)
    if env_path:
        return load_config(Path(env_path))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return default_config()


def _run_import(args: argparse.Namespace, cfg: ImportConfig) -> ImportResult:
    if args.paste is not None:
        return import_paste_file(args.paste, config=cfg)
    if args.csv is not None:
        return import_file(args.csv, config=cfg)
    return import_sheets(args.sheets, sheet_name=args.sheet_name, config=cfg)


def main(argv: list[str] | None = None) -> int:
    # NOTE: 空リスト [] が渡された場合に sys.argv[1:] (pytest の引数) が混入しないよう None のときのみ読む
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))
    try:
        cfg = _resolve_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    result = _run_import(args, cfg)
    for issue in result.issues:
        logger.warning(f"line {issue.line}: {issue.issue_type} {issue.detail}")

    if result.status == ImportStatus.SOURCE_ERROR:
        log_summary(render_summary_line(result)[len("SUMMARY "):])
        return EXIT_FATAL

    shopping_list = ShoppingList(args.event, engine=OrderingEngine(locale=cfg.collation_locale))
    report = shopping_list.bulk_add(result.items)

    for item in shopping_list.items:
        logger.info(f"{item.event_date} {item.block}-{item.number} {item.circle} / {item.title} {item.price}")

    if args.out is not None:
        export_csv(shopping_list.items, args.out)

    # log_summary が "SUMMARY " を付けるので先頭を除去
    log_summary(render_summary_line(result, report)[len("SUMMARY "):])

    if result.status == ImportStatus.EMPTY:
        return EXIT_EMPTY
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
