from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from people_import.db.batch_insert import (
    PERSON_COLUMNS,
    BatchInsertError,
    InsertResult,
    PeopleTableWriter,
    insert_people,
    validate_table_name,
)
from people_import.db.existing_people import fetch_existing_people
from people_import.models.candidate import CandidateRecord


class DummyCursor:
    def __init__(self, rows: list[tuple] | None = None) -> None:
        self.queries: list[str] = []
        self.rows_seen: list[list[tuple]] = []
        self.fetched = rows or []

    def execute(self, sql, params=None):
        self.queries.append(sql)

    def fetchall(self):
        return self.fetched


@pytest.fixture(autouse=True)
def patch_execute_values(monkeypatch):
    # execute_values を差し替えて psycopg2 の実接続なしでテスト
    import people_import.db.batch_insert as bi

    def fake_execute_values(cursor, sql, rows, page_size=1000, template=None):
        if getattr(cursor, "fail", False):
            raise RuntimeError("duplicate key value violates unique constraint")
        cursor.queries.append(sql)
        cursor.rows_seen.append(list(rows))

    monkeypatch.setattr(bi, "execute_values", fake_execute_values)
    return fake_execute_values


def test_insert_people_builds_insert_with_person_columns():
    cur = DummyCursor()
    records = [
        CandidateRecord(first_name="Jane", last_name="Doe", email="jane@x.com", tags=["choir"]),
        CandidateRecord(first_name="Bob", last_name="Ray", status="member"),
    ]
    res = insert_people(cur, "people", records)
    assert isinstance(res, InsertResult)
    assert res.inserted_rows == 2
    assert cur.queries[0].startswith('INSERT INTO people ("first_name","last_name","email"')
    assert cur.queries[0].endswith("VALUES %s")
    first_row = cur.rows_seen[0][0]
    assert len(first_row) == len(PERSON_COLUMNS)
    assert first_row[PERSON_COLUMNS.index("tags")] == ["choir"]
    assert cur.rows_seen[0][1][PERSON_COLUMNS.index("status")] == "member"


def test_insert_people_empty_batch_skips_execute():
    cur = DummyCursor()
    res = insert_people(cur, "people", [])
    assert res.inserted_rows == 0
    assert cur.queries == []


def test_insert_people_wraps_driver_errors():
    cur = DummyCursor()
    cur.fail = True
    with pytest.raises(BatchInsertError, match="duplicate key"):
        insert_people(cur, "people", [CandidateRecord(first_name="A", last_name="B")])


@pytest.mark.parametrize("name", ["people", "crm.people", "_p1"])
def test_validate_table_name_accepts_identifiers(name):
    assert validate_table_name(name) == name


@pytest.mark.parametrize("name", ["people; drop table x", "1people", "a.b.c", ""])
def test_validate_table_name_rejects_injection(name):
    with pytest.raises(BatchInsertError):
        validate_table_name(name)


def _connection(cursor: DummyCursor) -> MagicMock:
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cursor
    return conn


def test_people_table_writer_commits_each_batch():
    cur = DummyCursor()
    conn = _connection(cur)
    writer = PeopleTableWriter(conn, "people")
    writer([CandidateRecord(first_name="A", last_name="B")])
    writer([CandidateRecord(first_name="C", last_name="D")])
    assert conn.commit.call_count == 2
    conn.rollback.assert_not_called()
    assert writer.inserted == 2


def test_people_table_writer_rolls_back_and_reraises():
    cur = DummyCursor()
    cur.fail = True
    conn = _connection(cur)
    writer = PeopleTableWriter(conn, "people")
    with pytest.raises(BatchInsertError):
        writer([CandidateRecord(first_name="A", last_name="B")])
    conn.rollback.assert_called_once()
    conn.commit.assert_not_called()
    assert writer.inserted == 0


def test_fetch_existing_people():
    cur = DummyCursor(rows=[("Jane", "Doe", "jane@x.com"), ("Bob", "Ray", None)])
    people = fetch_existing_people(cur, "people")
    assert cur.queries == ["SELECT first_name, last_name, email FROM people"]
    assert people[1] == {"first_name": "Bob", "last_name": "Ray", "email": None}
