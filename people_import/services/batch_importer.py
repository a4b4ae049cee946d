from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.candidate import CandidateRecord
from ..models.config_models import DEFAULT_BATCH_SIZE
from ..models.import_result import BatchStatsAccumulator, ImportResult
from .progress import ImportProgressTracker, percent_complete

"""Batch importer.

Commits candidate records through a caller-supplied write function in
fixed-size chunks, strictly in input order and one chunk at a time.

Failure policy: when write() raises for a chunk, the whole chunk counts as
failed and the importer moves on to the next chunk. There is no retry and no
rollback of chunks already written, so re-running after a partial failure will
write the successful chunks again unless write() itself upserts.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "WriteFunction",
    "ProgressCallback",
    "run_import",
]

WriteFunction = Callable[[list[CandidateRecord]], object]
ProgressCallback = Callable[[int], None]


def run_import(
    records: Sequence[CandidateRecord],
    write: WriteFunction,
    batch_size: int = DEFAULT_BATCH_SIZE,
    on_progress: ProgressCallback | None = None,
    error_log: ErrorLogBuffer | None = None,
    source: str = "",
) -> ImportResult:
    """Write records in chunks of batch_size and return success/failure counts.

    Args:
        records: committable records, in the order they should be written
        write: persistence callback; any exception marks the chunk as failed
        batch_size: records per write() call
        on_progress: receives a 0..100 percentage after every chunk
        error_log: receives one BATCH_WRITE_ERROR record per failed chunk
        source: source file name used in error records

    Returns:
        ImportResult where success + failed == len(records)
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    total = len(records)
    success = 0
    failed = 0
    failed_batches = 0
    stats = BatchStatsAccumulator()
    run_start = time.perf_counter()

    if total == 0:
        if on_progress is not None:
            on_progress(100)
        return ImportResult(success=0, failed=0)

    with ImportProgressTracker(total) as progress:
        for batch_index, start in enumerate(range(0, total, batch_size)):
            batch = list(records[start:start + batch_size])
            batch_start = time.perf_counter()
            try:
                write(batch)
                success += len(batch)
            except Exception as e:
                failed += len(batch)
                failed_batches += 1
                logger.warning(
                    "batch=%d records=%d failed: %s", batch_index + 1, len(batch), e
                )
                if error_log is not None:
                    error_log.append(
                        ErrorRecord.create(
                            source,
                            -1,
                            "BATCH_WRITE_ERROR",
                            f"batch {batch_index + 1} ({len(batch)} records, offset {start}): {e}",
                        )
                    )
            finally:
                stats.add_batch_time(time.perf_counter() - batch_start)

            progress.advance(len(batch))
            progress.set_postfix(ok=success, failed=failed)
            if on_progress is not None:
                on_progress(percent_complete(start + batch_size, total))

    total_batches, avg_batch, p95_batch = stats.get_stats()
    elapsed = time.perf_counter() - run_start
    logger.debug(
        "import finished success=%d failed=%d batches=%d avg_batch_sec=%.4f",
        success, failed, total_batches, avg_batch,
    )
    return ImportResult(
        success=success,
        failed=failed,
        total_batches=total_batches,
        failed_batches=failed_batches,
        elapsed_seconds=elapsed,
        avg_batch_seconds=avg_batch,
        p95_batch_seconds=p95_batch,
    )
