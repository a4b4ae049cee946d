from __future__ import annotations

import json
import logging
from pathlib import Path

from ..models.candidate import CandidateRecord

"""Write functions usable with run_import() besides the database writer."""

logger = logging.getLogger(__name__)

__all__ = [
    "JsonLinesWriter",
    "DryRunWriter",
]


class JsonLinesWriter:
    """Append each record as one JSON object per line."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.written = 0

    def __call__(self, batch: list[CandidateRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            for record in batch:
                f.write(json.dumps(record.to_dict(), ensure_ascii=False) + "\n")
        self.written += len(batch)


class DryRunWriter:
    """Accepts every batch without persisting anything (mock mode)."""

    def __init__(self) -> None:
        self.batches: list[list[CandidateRecord]] = []

    @property
    def written(self) -> int:
        return sum(len(b) for b in self.batches)

    def __call__(self, batch: list[CandidateRecord]) -> None:
        logger.debug("mock write records=%d", len(batch))
        self.batches.append(list(batch))
