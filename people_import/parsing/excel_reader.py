from __future__ import annotations

from pathlib import Path

import pandas as pd

from ..models.raw_record import RawRecord
from .csv_parser import FormatError

"""Spreadsheet (.xlsx) export reader.

The first sheet is read with every cell as text: row 1 is the header, rows 2+
are data. Cells pandas would turn into NaN are kept as empty strings so that
"NA"/"None" style values survive as text.
"""


def read_excel_export(path: Path, sheet_name: str | int = 0) -> tuple[list[str], list[RawRecord]]:
    try:
        df = pd.read_excel(path, sheet_name=sheet_name, dtype=str, keep_default_na=False)
    except (OSError, ValueError) as e:
        raise FormatError(f"failed to read spreadsheet {path.name}: {e}") from e

    headers = [str(c).strip() for c in df.columns.tolist()]
    if not headers or df.shape[0] == 0:
        raise FormatError("Spreadsheet must have headers and at least one data row")

    rows: list[RawRecord] = []
    # header is spreadsheet row 1 -> first data row is row 2
    for offset, raw in enumerate(df.itertuples(index=False, name=None)):
        values = ["" if pd.isna(v) else str(v).strip() for v in raw]
        if not any(values):
            continue  # 全セル空行はスキップ
        rows.append(RawRecord(row_number=offset + 2, values=dict(zip(headers, values, strict=False))))
    if not rows:
        raise FormatError("Spreadsheet must have headers and at least one data row")
    return headers, rows
