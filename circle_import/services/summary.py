from __future__ import annotations

from ..models.import_result import ImportResult
from .shopping_list import MergeReport

"""Summary line rendering for the SUMMARY output.

Format:
SUMMARY source={source} status={status} rows={rows} items={items}
skipped_blank={skipped} added={added} updated={updated} duplicates={dup} issues={issues}
"""


def render_summary_line(result: ImportResult, report: MergeReport | None = None) -> str:
    """Render a SUMMARY line from an import result and optional merge report.

    Examples:
        >>> from circle_import.models.import_result import ImportResult, ImportSource, ImportStatus
        >>> render_summary_line(ImportResult(source=ImportSource.PASTE, status=ImportStatus.EMPTY))
        'SUMMARY source=paste status=empty rows=0 items=0 skipped_blank=0 added=0 updated=0 duplicates=0 issues=0'
    """
    added = len(report.added) if report else 0
    updated = len(report.updated) if report else 0
    duplicates = report.duplicates if report else 0
    return (
        f"SUMMARY source={result.source.value} "
        f"status={result.status.value} "
        f"rows={result.rows_read} "
        f"items={len(result.items)} "
        f"skipped_blank={result.skipped_blank} "
        f"added={added} "
        f"updated={updated} "
        f"duplicates={duplicates} "
        f"issues={len(result.issues)}"
    )
