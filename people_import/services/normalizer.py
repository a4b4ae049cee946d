from __future__ import annotations

import re
from datetime import datetime
from typing import Any

import pandas as pd

from ..models.candidate import DATE_FIELDS, MemberStatus
from ..models.config_models import ImportConfig

"""Per-field value normalization.

- status: dictionary lookup (exact, then case-insensitive); unknown labels fall
  back to config.default_status, or raise UnknownStatusError in strict mode
- dates: three fixed patterns, then generic parsing; None when unparseable
- tags: split on `,` / `;`
Empty input always means "not set" (None).
"""

__all__ = [
    "UnknownStatusError",
    "normalize_value",
    "normalize_status",
    "parse_date",
    "split_tags",
]

# pattern, strptime format
_DATE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^\d{4}-\d{2}-\d{2}$"), "%Y-%m-%d"),  # YYYY-MM-DD
    (re.compile(r"^\d{2}/\d{2}/\d{4}$"), "%m/%d/%Y"),  # MM/DD/YYYY
    (re.compile(r"^\d{2}-\d{2}-\d{4}$"), "%m-%d-%Y"),  # MM-DD-YYYY
)

_TAG_SPLIT = re.compile(r"[,;]")

# pandas resolves these against the clock
_RELATIVE_DATE_WORDS = frozenset({"now", "today"})


class UnknownStatusError(ValueError):
    def __init__(self, label: str) -> None:
        super().__init__(f"Unknown status '{label}'")
        self.label = label


def parse_date(value: str) -> str | None:
    """Parse a date string into ISO YYYY-MM-DD, or None when every attempt fails."""
    value = value.strip()
    if not value:
        return None

    for pattern, fmt in _DATE_PATTERNS:
        if pattern.match(value):
            try:
                return datetime.strptime(value, fmt).date().isoformat()
            except ValueError:
                continue  # e.g. 13/45/2020 -> generic parser

    if value.lower() in _RELATIVE_DATE_WORDS:
        return None

    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date().isoformat()


def normalize_status(value: str, config: ImportConfig) -> str:
    label = value.strip()
    mapped = config.status_mappings.get(label)
    if mapped is None:
        lowered = label.lower()
        for key, status in config.status_mappings.items():
            if key.lower() == lowered:
                mapped = status
                break
    if mapped is None:
        if config.strict:
            raise UnknownStatusError(label)
        mapped = config.default_status
    # 設定経由の値も列挙値で検証 (ValueError)
    return MemberStatus(mapped).value


def split_tags(value: str) -> list[str]:
    return [t.strip() for t in _TAG_SPLIT.split(value) if t.strip()]


def normalize_value(value: str | None, target_field: str, config: ImportConfig) -> Any:
    if value is None or not value.strip():
        return None
    if target_field == "status":
        return normalize_status(value, config)
    if target_field in DATE_FIELDS:
        return parse_date(value)
    if target_field == "tags":
        return split_tags(value) or None
    return value.strip()
