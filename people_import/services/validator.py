from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.candidate import CandidateRecord
from ..models.config_models import ImportConfig
from ..models.import_result import ImportPreview
from ..models.raw_record import FieldMapping, RawRecord
from .field_mapper import MappingError, duplicate_targets
from .normalizer import UnknownStatusError, normalize_value

"""Record validation and duplicate detection.

generate_preview() walks the rows once, in order:
1. map + normalize the row into a CandidateRecord
2. reject it (row-indexed error) when first or last name is empty
3. otherwise flag it as a duplicate when its email, or failing that its full
   name, matches the existing roster or a row accepted earlier in the file.
   Duplicates are counted but stay in the committable list.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ExistingRecordIndex",
    "build_existing_index",
    "map_row",
    "generate_preview",
]


@dataclass(frozen=True)
class ExistingRecordIndex:
    """Lowercased emails and "first last" names of the existing roster."""
    emails: frozenset[str]
    names: frozenset[str]

    @classmethod
    def empty(cls) -> ExistingRecordIndex:
        return cls(emails=frozenset(), names=frozenset())

    def __len__(self) -> int:
        return max(len(self.emails), len(self.names))


def _field(person: Any, snake: str, camel: str) -> str:
    if isinstance(person, Mapping):
        value = person.get(snake)
        if value is None:
            value = person.get(camel)
    else:
        value = getattr(person, snake, None)
    return str(value).strip() if value else ""


def _full_name_key(first: str, last: str) -> str:
    return f"{first} {last}".lower()


def build_existing_index(existing: Iterable[Any]) -> ExistingRecordIndex:
    """Build the dedup index once from the already-loaded roster.

    Accepts mappings (snake_case or camelCase keys) or objects with
    first_name / last_name / email attributes.
    """
    emails: set[str] = set()
    names: set[str] = set()
    for person in existing:
        email = _field(person, "email", "email")
        if email:
            emails.add(email.lower())
        first = _field(person, "first_name", "firstName")
        last = _field(person, "last_name", "lastName")
        if first or last:
            names.add(_full_name_key(first, last))
    return ExistingRecordIndex(emails=frozenset(emails), names=frozenset(names))


def map_row(row: RawRecord, mappings: Sequence[FieldMapping], config: ImportConfig) -> CandidateRecord:
    """Apply mappings (in order, last write wins) and normalization to one row.

    Raises:
        UnknownStatusError: strict mode only, for unmapped status labels
    """
    values: dict[str, Any] = {}
    for m in mappings:
        if m.skipped:
            continue
        raw = row.get(m.source_field)
        if not raw:
            continue
        normalized = normalize_value(raw, m.target_field, config)
        if normalized is not None:
            values[m.target_field] = normalized
    return CandidateRecord(**values)


def generate_preview(
    rows: Sequence[RawRecord],
    mappings: Sequence[FieldMapping],
    existing_index: ExistingRecordIndex,
    config: ImportConfig,
    error_log: ErrorLogBuffer | None = None,
    source: str = "",
) -> ImportPreview:
    """Validate and dedup rows into an ImportPreview.

    Raises:
        MappingError: strict mode only, when two columns map to the same field
    """
    dupes = duplicate_targets(mappings)
    if dupes:
        if config.strict:
            detail = "; ".join(f"{t} <- {', '.join(s)}" for t, s in dupes.items())
            raise MappingError(f"multiple columns map to the same field: {detail}")
        logger.warning("multiple columns map to the same field (last wins): %s", sorted(dupes))

    records: list[CandidateRecord] = []
    errors: list[str] = []
    duplicate_rows: list[int] = []
    # ファイル内重複も検出するため既存集合のコピーへ追記していく
    seen_emails = set(existing_index.emails)
    seen_names = set(existing_index.names)

    def _reject(row: RawRecord, error_type: str, message: str) -> None:
        errors.append(f"Row {row.row_number}: {message}")
        if error_log is not None:
            error_log.append(ErrorRecord.create(source, row.row_number, error_type, message))

    for row in rows:
        try:
            candidate = map_row(row, mappings, config)
        except UnknownStatusError as e:
            _reject(row, "UNKNOWN_STATUS", str(e))
            continue

        if not candidate.has_required_names():
            _reject(row, "MISSING_NAME", "Missing first or last name")
            continue

        email_key = candidate.email.lower() if candidate.email else None
        name_key = _full_name_key(candidate.first_name or "", candidate.last_name or "")
        if (email_key and email_key in seen_emails) or name_key in seen_names:
            duplicate_rows.append(row.row_number)
            logger.debug("row=%d flagged as duplicate", row.row_number)

        if email_key:
            seen_emails.add(email_key)
        seen_names.add(name_key)
        records.append(candidate)

    logger.debug(
        "preview total=%d valid=%d duplicates=%d errors=%d",
        len(rows), len(records), len(duplicate_rows), len(errors),
    )
    return ImportPreview(
        total=len(rows),
        valid=len(records),
        duplicates=len(duplicate_rows),
        errors=errors,
        records=records,
        duplicate_rows=duplicate_rows,
    )
