from __future__ import annotations

from dataclasses import dataclass

"""RawRecord / FieldMapping models.

RawRecord represents one data row exactly as the parser produced it, before any
mapping or normalization is applied. FieldMapping pairs a source column with the
person field it feeds (or "skip").
"""

__all__ = [
    "RawRecord",
    "FieldMapping",
    "SKIP",
]

SKIP = "skip"


@dataclass(frozen=True)
class RawRecord:
    """Logical representation of a single source row (column name -> raw text).

    row_number is the physical row in the source file: the header is row 1,
    so the first data row is row 2.
    """
    row_number: int
    values: dict[str, str]

    def get(self, column: str) -> str:
        return self.values.get(column, "")


@dataclass(frozen=True)
class FieldMapping:
    source_field: str  # 元ファイルの列名
    target_field: str  # person field 名 or "skip"

    @property
    def skipped(self) -> bool:
        return self.target_field == SKIP
