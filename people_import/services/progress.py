from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

A single bar counts committed records. In non-TTY environments (CI, pipes) the
bar is disabled so no ANSI control sequences end up in logs.
"""

__all__ = [
    "ImportProgressTracker",
    "is_tty_enabled",
    "percent_complete",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


def percent_complete(processed: int, total: int) -> int:
    """Progress percentage clamped to 0..100; an empty import is 100% done."""
    if total <= 0:
        return 100
    return max(0, min(100, round(processed / total * 100)))


class ImportProgressTracker:
    """Record-level progress bar for the batch importer."""

    def __init__(self, total_records: int, *, description: str = "Importing people") -> None:
        self.total_records = total_records
        self.description = description
        self.processed = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_records,
                desc=description,
                unit="person",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, records: int) -> None:
        self.processed += records
        if self.enabled and self.pbar is not None:
            self.pbar.update(records)

    def set_postfix(self, **kwargs: Any) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(**kwargs)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ImportProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
