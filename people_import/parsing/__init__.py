from __future__ import annotations

from pathlib import Path

from ..models.raw_record import RawRecord
from .csv_parser import FormatError, parse_csv, parse_csv_line
from .excel_reader import read_excel_export
from .json_export import parse_json_export

"""Source readers: CSV, Planning Center JSON export, .xlsx spreadsheet."""

__all__ = [
    "FormatError",
    "parse_csv",
    "parse_csv_line",
    "parse_json_export",
    "read_excel_export",
    "parse_source_text",
    "read_source",
    "SUPPORTED_SUFFIXES",
]

SUPPORTED_SUFFIXES = (".csv", ".json", ".xlsx")


def parse_source_text(
    content: str, filename: str, strict: bool = False
) -> tuple[list[str], list[RawRecord]]:
    """Parse already-read text, choosing the format from the file name."""
    if filename.lower().endswith(".json"):
        return parse_json_export(content)
    return parse_csv(content, strict=strict)


def read_source(path: Path, strict: bool = False) -> tuple[list[str], list[RawRecord]]:
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise FormatError(f"unsupported file type: {path.name} (expected one of {', '.join(SUPPORTED_SUFFIXES)})")
    if not path.exists():
        raise FormatError(f"file not found: {path}")
    if suffix == ".xlsx":
        return read_excel_export(path)
    try:
        # utf-8-sig: Excel で保存された CSV の BOM を除去
        content = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise FormatError(f"failed to read {path.name}: {e}") from e
    return parse_source_text(content, path.name, strict=strict)
