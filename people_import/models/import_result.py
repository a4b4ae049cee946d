from __future__ import annotations

import statistics
from dataclasses import dataclass, field

from .candidate import CandidateRecord

"""Preview and result models for the import pipeline.

ImportPreview is created once per "generate preview" action and replaced (never
merged) when the mapping changes. ImportResult is the terminal state of a run.
"""


@dataclass(frozen=True)
class ImportPreview:
    """Aggregated validation output shown before committing."""
    total: int  # 入力行数
    valid: int  # コミット対象件数 (duplicates 含む)
    duplicates: int  # 既存 or ファイル内重複件数
    errors: list[str]  # 行番号付きエラー文字列 (入力順)
    records: list[CandidateRecord]  # コミット対象
    duplicate_rows: list[int] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return len(self.errors)


@dataclass(frozen=True)
class ImportResult:
    """Success/failure counters accumulated across batches."""
    success: int
    failed: int
    total_batches: int = 0
    failed_batches: int = 0
    elapsed_seconds: float = 0.0
    avg_batch_seconds: float = 0.0
    p95_batch_seconds: float = 0.0

    @property
    def total(self) -> int:
        return self.success + self.failed


class BatchStatsAccumulator:
    """Helper class to accumulate per-batch write timings for ImportResult."""

    def __init__(self) -> None:
        self.batch_times: list[float] = []

    def add_batch_time(self, elapsed_seconds: float) -> None:
        """Add a batch timing measurement."""
        self.batch_times.append(elapsed_seconds)

    def get_stats(self) -> tuple[int, float, float]:
        """Calculate batch statistics.

        Returns:
            tuple: (total_batches, avg_batch_seconds, p95_batch_seconds)
        """
        if not self.batch_times:
            return (0, 0.0, 0.0)

        total_batches = len(self.batch_times)
        avg_batch_seconds = statistics.mean(self.batch_times)

        if total_batches == 1:
            p95_batch_seconds = self.batch_times[0]
        else:
            p95_batch_seconds = statistics.quantiles(
                self.batch_times, n=20, method='inclusive'
            )[18]  # 95th percentile

        return (total_batches, avg_batch_seconds, p95_batch_seconds)
