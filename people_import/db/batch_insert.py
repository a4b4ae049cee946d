from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from psycopg2.extras import execute_values

from ..models.candidate import TARGET_FIELDS, CandidateRecord

"""PostgreSQL persistence for candidate records.

insert_people() does a single execute_values INSERT of one batch.
PeopleTableWriter wraps it as a run_import() write function with one
transaction per batch, so a failed batch is rolled back on its own and does not
poison the batches after it.
"""

__all__ = [
    "BatchInsertError",
    "InsertResult",
    "PERSON_COLUMNS",
    "insert_people",
    "validate_table_name",
    "PeopleTableWriter",
]

PERSON_COLUMNS: tuple[str, ...] = TARGET_FIELDS

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


class BatchInsertError(Exception):
    pass


@dataclass(frozen=True)
class InsertResult:
    inserted_rows: int


def validate_table_name(table: str) -> str:
    if not _TABLE_NAME.match(table):
        raise BatchInsertError(f"invalid table name: {table!r}")
    return table


def _row_values(record: CandidateRecord, columns: Sequence[str]) -> tuple[Any, ...]:
    # tags は list のまま渡す (psycopg2 が ARRAY に変換)
    return tuple(getattr(record, c) for c in columns)


def insert_people(
    cursor: Any,
    table: str,
    records: Sequence[CandidateRecord],
    columns: Sequence[str] = PERSON_COLUMNS,
    page_size: int = 1000,
) -> InsertResult:
    """Perform a batched INSERT using psycopg2.extras.execute_values.

    Parameters
    ----------
    cursor: psycopg2 cursor
    table: target table, validated as a (schema-qualified) identifier
    records: records to insert
    columns: person columns to insert, in order
    page_size: execute_values page_size
    """
    validate_table_name(table)
    if not records:
        return InsertResult(inserted_rows=0)

    cols_sql = ",".join(f'"{c}"' for c in columns)
    sql = f"INSERT INTO {table} ({cols_sql}) VALUES %s"
    rows = [_row_values(r, columns) for r in records]

    try:
        execute_values(cursor, sql, rows, page_size=page_size)
    except Exception as e:
        raise BatchInsertError(str(e)) from e
    return InsertResult(inserted_rows=len(rows))


class PeopleTableWriter:
    """run_import() write function backed by a psycopg2 connection."""

    def __init__(self, connection: Any, table: str = "people") -> None:
        self.connection = connection
        self.table = validate_table_name(table)
        self.inserted = 0

    def __call__(self, batch: list[CandidateRecord]) -> None:
        try:
            with self.connection.cursor() as cur:
                result = insert_people(cur, self.table, batch)
            self.connection.commit()
        except Exception:
            self.connection.rollback()
            raise
        self.inserted += result.inserted_rows
