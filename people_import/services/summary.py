from __future__ import annotations

from ..models.import_result import ImportPreview, ImportResult

"""Preview report and SUMMARY line rendering.

Pure aggregation over ImportPreview / ImportResult; nothing here changes counts.
"""

DEFAULT_MAX_ERRORS = 5


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{value:.6f}".rstrip('0').rstrip('.')
    return f"{value:.3f}".rstrip('0').rstrip('.')


def render_preview_report(preview: ImportPreview, max_errors: int = DEFAULT_MAX_ERRORS) -> list[str]:
    """Human readable preview lines: counts, then the first max_errors errors.

    Examples:
        >>> p = ImportPreview(total=3, valid=2, duplicates=1, errors=["Row 3: Missing first or last name"], records=[])
        >>> render_preview_report(p)[0]
        'preview total=3 valid=2 duplicates=1 errors=1'
    """
    lines = [
        f"preview total={preview.total} valid={preview.valid} "
        f"duplicates={preview.duplicates} errors={preview.error_count}"
    ]
    if preview.duplicate_rows:
        shown = ", ".join(str(r) for r in preview.duplicate_rows[:max_errors])
        more = len(preview.duplicate_rows) - max_errors
        lines.append(f"duplicate rows: {shown}" + (f" (+{more} more)" if more > 0 else ""))
    for error in preview.errors[:max_errors]:
        lines.append(f"  {error}")
    remaining = preview.error_count - max_errors
    if remaining > 0:
        lines.append(f"  ... and {remaining} more errors")
    return lines


def render_summary_line(preview: ImportPreview, result: ImportResult | None = None) -> str:
    """Render the SUMMARY line.

    Format:
    SUMMARY total={n} valid={n} duplicates={n} errors={n} imported={n}
    failed={n} batches={n} elapsed_sec={s}

    A preview-only run (result=None) reports imported=0 failed=0 batches=0.
    """
    result = result or ImportResult(success=0, failed=0)
    return (
        f"SUMMARY total={preview.total} "
        f"valid={preview.valid} "
        f"duplicates={preview.duplicates} "
        f"errors={preview.error_count} "
        f"imported={result.success} "
        f"failed={result.failed} "
        f"batches={result.total_batches} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
