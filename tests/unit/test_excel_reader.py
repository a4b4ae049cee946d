from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from people_import.parsing import FormatError, read_excel_export, read_source


def _make_xlsx(path: Path, rows: list[dict]) -> Path:
    pd.DataFrame(rows).to_excel(path, index=False)
    return path


def test_read_excel_export_reads_cells_as_text(tmp_path: Path):
    path = _make_xlsx(
        tmp_path / "people.xlsx",
        [
            {"First Name": "Jane", "Last Name": "Doe", "Zip": "02134", "Notes": "NA"},
            {"First Name": None, "Last Name": None, "Zip": None, "Notes": None},
            {"First Name": "Bob", "Last Name": "Ray", "Zip": "90210", "Notes": None},
        ],
    )
    headers, rows = read_excel_export(path)
    assert headers == ["First Name", "Last Name", "Zip", "Notes"]
    # 全セル空の行はスキップ
    assert [r.values["First Name"] for r in rows] == ["Jane", "Bob"]
    assert rows[0].row_number == 2
    assert rows[0].values["Zip"] == "02134"
    assert rows[0].values["Notes"] == "NA"
    assert rows[1].values["Notes"] == ""


def test_read_excel_export_header_only(tmp_path: Path):
    path = tmp_path / "empty.xlsx"
    pd.DataFrame(columns=["First Name", "Last Name"]).to_excel(path, index=False)
    with pytest.raises(FormatError):
        read_excel_export(path)


def test_read_source_dispatch(tmp_path: Path):
    csv_path = tmp_path / "people.csv"
    csv_path.write_text("\ufeffFirst Name,Last Name\nJane,Doe\n", encoding="utf-8")
    headers, rows = read_source(csv_path)
    assert headers == ["First Name", "Last Name"]
    assert rows[0].values["First Name"] == "Jane"

    xlsx_path = _make_xlsx(tmp_path / "people.xlsx", [{"First Name": "A", "Last Name": "B"}])
    headers, rows = read_source(xlsx_path)
    assert rows[0].values == {"First Name": "A", "Last Name": "B"}


def test_read_source_rejects_unknown_suffix_and_missing_file(tmp_path: Path):
    with pytest.raises(FormatError, match="unsupported"):
        read_source(tmp_path / "people.txt")
    with pytest.raises(FormatError, match="not found"):
        read_source(tmp_path / "missing.csv")
