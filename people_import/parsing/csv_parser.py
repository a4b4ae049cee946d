from __future__ import annotations

import logging
import re

from ..models.raw_record import RawRecord

"""CSV line parser.

Delimiter `,`, quote char `"`, doubled quote `""` as an escaped quote inside a
quoted field. Fields are whitespace trimmed. Line breaks inside quoted fields
are not supported (each physical line is one row).
"""

logger = logging.getLogger(__name__)

__all__ = [
    "FormatError",
    "parse_csv_line",
    "parse_csv",
]

_LINE_SPLIT = re.compile(r"\r?\n")


class FormatError(Exception):
    """Raised when the source file cannot be turned into header + data rows."""


def parse_csv_line(line: str) -> list[str]:
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)
    while i < n:
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < n and line[i + 1] == '"':
                current.append('"')
                i += 1  # skip escaped quote
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    fields.append("".join(current).strip())
    return fields


def parse_csv(content: str, strict: bool = False) -> tuple[list[str], list[RawRecord]]:
    """Parse CSV text into (headers, rows).

    Steps:
    1. Trim the text and split on CRLF/LF; fewer than 2 lines is a FormatError
    2. First line is the header
    3. Blank lines are ignored
    4. Rows whose field count differs from the header are dropped
       (strict=True: FormatError instead)
    """
    lines = _LINE_SPLIT.split(content.strip())
    if len(lines) < 2:
        raise FormatError("CSV file must have headers and at least one data row")

    headers = parse_csv_line(lines[0])
    rows: list[RawRecord] = []
    for index, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        values = parse_csv_line(line)
        if len(values) != len(headers):
            if strict:
                raise FormatError(
                    f"Row {index}: expected {len(headers)} fields, got {len(values)}"
                )
            logger.debug("row=%d dropped: %d fields (header has %d)", index, len(values), len(headers))
            continue
        rows.append(RawRecord(row_number=index, values=dict(zip(headers, values, strict=True))))
    return headers, rows
