#!/usr/bin/env python3
"""Generate a synthetic Planning Center people export for manual and perf testing.

The output uses Planning Center CSV column names so it maps without overrides.
A share of rows repeats an earlier person (duplicate flag) and a share has no
first name (row error), so every branch of the preview shows up.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

FIRST_NAMES = ["Jane", "John", "Mary", "David", "Grace", "Samuel", "Ruth", "Peter", "Esther", "Paul"]
LAST_NAMES = ["Doe", "Smith", "Johnson", "Brown", "Garcia", "Miller", "Davis", "Wilson", "Moore", "Lee"]
STATUSES = ["Member", "Visitor", "Regular Attender", "Leader", "Inactive", "Guest", "Elder"]


def generate_people(
    rows: int,
    duplicate_ratio: float = 0.05,
    missing_name_ratio: float = 0.02,
    seed: int = 42,
) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    first = rng.choice(FIRST_NAMES, rows)
    last = rng.choice(LAST_NAMES, rows)
    serial = np.arange(1, rows + 1)
    emails = [f"{f.lower()}.{l.lower()}{n}@example.org" for f, l, n in zip(first, last, serial)]

    start = pd.Timestamp("1940-01-01")
    birth_offsets = rng.integers(0, 365 * 70, rows)
    birthdates = [(start + pd.Timedelta(days=int(d))).strftime("%m/%d/%Y") for d in birth_offsets]

    df = pd.DataFrame(
        {
            "First Name": first,
            "Last Name": last,
            "Email": emails,
            "Mobile Phone": [f"555-{n % 10000:04d}" for n in serial],
            "Membership Status": rng.choice(STATUSES, rows),
            "Birthdate": birthdates,
            "City": rng.choice(["Springfield", "Riverton", "Fairview"], rows),
        }
    )

    # 既存行の email をコピーして重複を作る
    dup_count = int(rows * duplicate_ratio)
    if dup_count and rows > 1:
        targets = rng.choice(np.arange(1, rows), dup_count, replace=False)
        sources = rng.integers(0, targets)
        df.loc[targets, "Email"] = df.loc[sources, "Email"].to_numpy()

    missing = int(rows * missing_name_ratio)
    if missing:
        df.loc[rng.choice(rows, missing, replace=False), "First Name"] = ""
    return df


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a synthetic Planning Center people export")
    parser.add_argument("output", type=Path, help="output path (.csv or .xlsx)")
    parser.add_argument("--rows", type=int, default=5_000)
    parser.add_argument("--duplicate-ratio", type=float, default=0.05)
    parser.add_argument("--missing-name-ratio", type=float, default=0.02)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    if args.rows < 1:
        print("ERROR: --rows must be >= 1", file=sys.stderr)
        return 1

    df = generate_people(args.rows, args.duplicate_ratio, args.missing_name_ratio, args.seed)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    if args.output.suffix.lower() == ".xlsx":
        df.to_excel(args.output, index=False)
    else:
        df.to_csv(args.output, index=False)
    print(f"Created {args.output} rows={len(df)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
