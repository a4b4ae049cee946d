from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import psycopg2

from people_import.cli import main as cli_main
from people_import.logging.init import reset_logging


def test_cli_mock_mode_success(temp_workdir: Path, write_source, capsys):
    reset_logging()
    source = write_source()
    code = cli_main([str(source)])
    out = capsys.readouterr().out
    assert code == 0
    assert "INFO preview total=3 valid=2 duplicates=1 errors=1" in out
    assert "INFO duplicate rows: 4" in out
    assert "Row 3: Missing first or last name" in out
    assert "mode=mock imported=2 failed=0" in out
    assert "SUMMARY total=3 valid=2 duplicates=1 errors=1 imported=2 failed=0 batches=1" in out


def test_cli_preview_only_does_not_import(temp_workdir: Path, write_source, capsys):
    reset_logging()
    source = write_source()
    code = cli_main([str(source), "--preview-only"])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY total=3 valid=2 duplicates=1 errors=1 imported=0 failed=0 batches=0 elapsed_sec=0" in out
    assert "mode=" not in out


def test_cli_output_jsonl(temp_workdir: Path, write_source, capsys):
    reset_logging()
    source = write_source()
    out_path = temp_workdir / "out" / "people.jsonl"
    code = cli_main([str(source), "--output", str(out_path)])
    assert code == 0
    lines = out_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["first_name"] == "Jane"
    assert first["status"] == "member"
    assert f"mode=file:{out_path}" in capsys.readouterr().out


def test_cli_writes_error_log(temp_workdir: Path, write_source, capsys):
    reset_logging()
    source = write_source()
    cli_main([str(source), "--preview-only"])
    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    rec = json.loads(logs[0].read_text(encoding="utf-8").splitlines()[0])
    assert rec["source"] == "people.csv"
    assert rec["row"] == 3
    assert rec["error_type"] == "MISSING_NAME"
    assert "error log:" in capsys.readouterr().out


def test_cli_existing_file_marks_duplicates(temp_workdir: Path, write_source, capsys):
    reset_logging()
    source = write_source()
    existing = write_source("existing.csv", "First Name,Last Name,Email\nJane,Doe,JANE@X.COM\n")
    code = cli_main([str(source), "--existing", str(existing), "--preview-only"])
    out = capsys.readouterr().out
    assert code == 0
    assert "existing roster: 1 people" in out
    assert "duplicates=2" in out


def test_cli_map_override(temp_workdir: Path, write_source, capsys):
    reset_logging()
    source = write_source(content="Given,Last Name\nJane,Doe\n")
    code = cli_main([str(source), "--map", "Given=first_name", "--preview-only"])
    out = capsys.readouterr().out
    assert code == 0
    assert "preview total=1 valid=1 duplicates=0 errors=0" in out


def test_cli_missing_name_mapping_warns(temp_workdir: Path, write_source, capsys):
    reset_logging()
    source = write_source(content="Given,Last Name\nJane,Doe\n")
    cli_main([str(source), "--preview-only"])
    out = capsys.readouterr().out
    assert "WARN" in out
    assert "first_name" in out


def test_cli_bad_map_target(temp_workdir: Path, write_source, capsys):
    reset_logging()
    source = write_source()
    code = cli_main([str(source), "--map", "Email=nickname"])
    assert code == 1
    assert "ERROR mapping:" in capsys.readouterr().out


def test_cli_missing_source_is_fatal(temp_workdir: Path, capsys):
    reset_logging()
    code = cli_main([str(temp_workdir / "data" / "nope.csv")])
    assert code == 1
    assert "ERROR format:" in capsys.readouterr().out


def test_cli_explicit_config_missing(temp_workdir: Path, write_source, capsys):
    reset_logging()
    source = write_source()
    code = cli_main([str(source), "--config", "config/missing.yml"])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_cli_strict_rejects_ragged_rows(temp_workdir: Path, write_source, capsys):
    reset_logging()
    source = write_source(content="First Name,Last Name\nJane,Doe\nJohn\n")
    assert cli_main([str(source), "--preview-only"]) == 0
    capsys.readouterr()
    reset_logging()
    code = cli_main([str(source), "--strict", "--preview-only"])
    assert code == 1
    assert "ERROR format:" in capsys.readouterr().out


def test_cli_debug_mode(temp_workdir: Path, write_source, capsys):
    reset_logging()
    source = write_source()
    code = cli_main([str(source), "--debug", "--preview-only"])
    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG mapping 'First Name' -> first_name" in out
    reset_logging()


def test_cli_database_mode(temp_workdir: Path, write_source, monkeypatch, capsys):
    reset_logging()
    monkeypatch.delenv("DISABLE_DB_CONNECT", raising=False)
    monkeypatch.setenv("DATABASE_URL", "postgresql://test/db")
    source = write_source()

    conn = MagicMock()
    cur = conn.cursor.return_value.__enter__.return_value
    cur.fetchall.return_value = [("Jane", "Doe", "jane@x.com")]
    calls = []
    monkeypatch.setattr(
        "people_import.db.batch_insert.execute_values",
        lambda cursor, sql, rows, page_size=1000: calls.append((sql, rows)),
    )
    with patch("people_import.cli.__main__.psycopg2.connect", return_value=conn) as mock_connect:
        code = cli_main([str(source)])
    out = capsys.readouterr().out
    assert code == 0
    mock_connect.assert_called_once_with("postgresql://test/db")
    assert "existing roster: 1 people" in out
    assert "duplicates=2" in out
    assert "mode=db:people imported=2 failed=0" in out
    assert len(calls) == 1
    assert calls[0][0].startswith("INSERT INTO people (")
    conn.commit.assert_called_once()
    conn.close.assert_called_once()


def test_cli_database_connect_failure_is_fatal(temp_workdir: Path, write_source, monkeypatch, capsys):
    reset_logging()
    monkeypatch.delenv("DISABLE_DB_CONNECT", raising=False)
    source = write_source()
    with patch(
        "people_import.cli.__main__.psycopg2.connect",
        side_effect=psycopg2.OperationalError("could not connect"),
    ):
        code = cli_main([str(source)])
    assert code == 1
    assert "ERROR database: could not connect" in capsys.readouterr().out
