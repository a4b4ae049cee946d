from __future__ import annotations

import json
from typing import Any

from ..models.raw_record import RawRecord
from .csv_parser import FormatError

"""Planning Center API export reader.

Expected envelope: {"data": [{"attributes": {...}}, ...]}. Each item is turned
into a row keyed by the same column names a Planning Center CSV export uses,
so the regular header dictionary maps it.
"""

# column -> attribute names tried in order
EXPORT_COLUMNS: dict[str, tuple[str, ...]] = {
    "First Name": ("first_name", "given_name"),
    "Last Name": ("last_name", "family_name"),
    "Email": ("primary_email", "email"),
    "Phone": ("primary_phone", "phone"),
    "Status": ("membership", "status"),
    "Birthdate": ("birthdate",),
    "Address": ("street",),
    "City": ("city",),
    "State": ("state",),
    "Zip": ("zip",),
}

DEFAULT_EXPORT_STATUS = "visitor"


def _attribute(attrs: dict[str, Any], names: tuple[str, ...]) -> str:
    for name in names:
        value = attrs.get(name)
        if value:
            return str(value).strip()
    return ""


def parse_json_export(content: str) -> tuple[list[str], list[RawRecord]]:
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as e:
        raise FormatError(f"Invalid JSON: {e}") from e

    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list):
        raise FormatError("Invalid JSON format. Expected Planning Center API export.")
    if not data:
        raise FormatError("Planning Center export contains no records")

    headers = list(EXPORT_COLUMNS)
    rows: list[RawRecord] = []
    for index, item in enumerate(data, start=2):
        if not isinstance(item, dict):
            raise FormatError(f"Row {index}: expected an object, got {type(item).__name__}")
        attrs = item.get("attributes") or {}
        if not isinstance(attrs, dict):
            raise FormatError(f"Row {index}: attributes must be an object")
        values = {column: _attribute(attrs, names) for column, names in EXPORT_COLUMNS.items()}
        if not values["Status"]:
            values["Status"] = DEFAULT_EXPORT_STATUS
        rows.append(RawRecord(row_number=index, values=values))
    return headers, rows
