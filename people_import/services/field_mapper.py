from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence

from ..config.defaults import GUESS_MAPPINGS
from ..models.candidate import TARGET_FIELDS
from ..models.raw_record import SKIP, FieldMapping

"""Header -> person field mapping.

auto_map() proposes a mapping from a header dictionary; the user (or --map on
the CLI) may override any entry with update_mapping() before the preview is
generated. Injectivity is not enforced here: see duplicate_targets() and the
strict mode check in the validator.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "MappingError",
    "auto_map",
    "guess_target",
    "update_mapping",
    "duplicate_targets",
    "mapping_warnings",
    "REQUIRED_TARGETS",
]

REQUIRED_TARGETS = ("first_name", "last_name")

_NON_ALNUM = re.compile(r"[^a-z0-9]")


class MappingError(Exception):
    """Raised for invalid mapping edits or (strict mode) non-injective mappings."""


def guess_target(header: str) -> str:
    normalized = _NON_ALNUM.sub("", header.lower())
    return GUESS_MAPPINGS.get(normalized, SKIP)


def auto_map(
    headers: Sequence[str],
    field_mappings: Mapping[str, str],
    guess: bool = False,
) -> list[FieldMapping]:
    """Map each header through the (case-sensitive) dictionary, "skip" when absent."""
    mappings: list[FieldMapping] = []
    for header in headers:
        target = field_mappings.get(header)
        if target is None and guess:
            target = guess_target(header)
            if target != SKIP:
                logger.debug("header=%r guessed target=%s", header, target)
        mappings.append(FieldMapping(source_field=header, target_field=target or SKIP))
    return mappings


def update_mapping(
    mappings: Sequence[FieldMapping], source_field: str, target_field: str
) -> list[FieldMapping]:
    if target_field != SKIP and target_field not in TARGET_FIELDS:
        raise MappingError(f"unknown target field: {target_field}")
    if not any(m.source_field == source_field for m in mappings):
        raise MappingError(f"unknown source column: {source_field}")
    return [
        FieldMapping(source_field=m.source_field, target_field=target_field)
        if m.source_field == source_field
        else m
        for m in mappings
    ]


def duplicate_targets(mappings: Sequence[FieldMapping]) -> dict[str, list[str]]:
    """Targets fed by more than one source column, in mapping order."""
    by_target: dict[str, list[str]] = {}
    for m in mappings:
        if m.skipped:
            continue
        by_target.setdefault(m.target_field, []).append(m.source_field)
    return {target: sources for target, sources in by_target.items() if len(sources) > 1}


def mapping_warnings(mappings: Sequence[FieldMapping]) -> list[str]:
    warnings: list[str] = []
    mapped = {m.target_field for m in mappings if not m.skipped}
    for required in REQUIRED_TARGETS:
        if required not in mapped:
            warnings.append(f"no column is mapped to {required}")
    for target, sources in duplicate_targets(mappings).items():
        # 後勝ち (last write wins)
        warnings.append(f"{target} is mapped from {', '.join(sources)} (last non-empty value wins)")
    return warnings
