from __future__ import annotations

from typing import Any

from .batch_insert import validate_table_name

"""Load the current roster for duplicate detection.

Only the columns the dedup index needs are fetched. The snapshot is taken once
before the preview; the importer never queries the store again mid-run.
"""


def fetch_existing_people(cursor: Any, table: str = "people") -> list[dict[str, Any]]:
    validate_table_name(table)
    cursor.execute(f"SELECT first_name, last_name, email FROM {table}")
    return [
        {"first_name": first, "last_name": last, "email": email}
        for first, last, email in cursor.fetchall()
    ]
