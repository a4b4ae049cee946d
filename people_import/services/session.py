from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum

from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ImportConfig
from ..models.import_result import ImportPreview, ImportResult
from ..models.raw_record import FieldMapping, RawRecord
from ..parsing import FormatError, parse_source_text
from .batch_importer import ProgressCallback, WriteFunction, run_import
from .field_mapper import auto_map, update_mapping
from .validator import ExistingRecordIndex, generate_preview

"""Import session state machine.

upload -> mapping -> preview -> importing -> complete, with reset() back to
upload from any step and back_to_mapping() from preview. Every transition is a
pure function returning a new ImportSession; calling one from the wrong step
raises SessionStateError. Once importing has begun it runs to completion.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ImportStep",
    "ImportSession",
    "SessionStateError",
    "new_session",
    "load_source",
    "upload_text",
    "remap",
    "build_preview",
    "back_to_mapping",
    "begin_import",
    "finish_import",
    "run_session_import",
    "reset",
]


class ImportStep(Enum):
    UPLOAD = "upload"
    MAPPING = "mapping"
    PREVIEW = "preview"
    IMPORTING = "importing"
    COMPLETE = "complete"


class SessionStateError(Exception):
    """Raised when a transition is attempted from the wrong step."""


@dataclass(frozen=True)
class ImportSession:
    step: ImportStep = ImportStep.UPLOAD
    source_name: str = ""
    headers: list[str] = field(default_factory=list)
    rows: list[RawRecord] = field(default_factory=list)
    mappings: list[FieldMapping] = field(default_factory=list)
    preview: ImportPreview | None = None
    progress: int = 0  # 0..100
    result: ImportResult | None = None
    error: str | None = None  # 直近の表示用エラー (dismissible)


def _require(session: ImportSession, *steps: ImportStep) -> None:
    if session.step not in steps:
        expected = "/".join(s.value for s in steps)
        raise SessionStateError(f"cannot do this in step '{session.step.value}' (expected {expected})")


def new_session() -> ImportSession:
    return ImportSession()


def load_source(
    session: ImportSession,
    headers: list[str],
    rows: list[RawRecord],
    source_name: str,
    config: ImportConfig,
) -> ImportSession:
    """upload -> mapping with auto-mapped headers."""
    _require(session, ImportStep.UPLOAD)
    mappings = auto_map(headers, config.field_mappings, guess=config.guess_headers)
    logger.info(
        "source=%s rows=%d columns=%d mapped=%d",
        source_name, len(rows), len(headers), sum(1 for m in mappings if not m.skipped),
    )
    return ImportSession(
        step=ImportStep.MAPPING,
        source_name=source_name,
        headers=list(headers),
        rows=list(rows),
        mappings=mappings,
    )


def upload_text(session: ImportSession, content: str, filename: str, config: ImportConfig) -> ImportSession:
    """Parse uploaded text; a FormatError keeps the session in upload with error set."""
    _require(session, ImportStep.UPLOAD)
    try:
        headers, rows = parse_source_text(content, filename, strict=config.strict)
    except FormatError as e:
        return replace(session, error=str(e))
    return load_source(replace(session, error=None), headers, rows, filename, config)


def remap(session: ImportSession, source_field: str, target_field: str) -> ImportSession:
    _require(session, ImportStep.MAPPING)
    return replace(session, mappings=update_mapping(session.mappings, source_field, target_field))


def build_preview(
    session: ImportSession,
    existing_index: ExistingRecordIndex,
    config: ImportConfig,
    error_log: ErrorLogBuffer | None = None,
) -> ImportSession:
    """mapping -> preview. The preview replaces any earlier one."""
    _require(session, ImportStep.MAPPING)
    preview = generate_preview(
        session.rows,
        session.mappings,
        existing_index,
        config,
        error_log=error_log,
        source=session.source_name,
    )
    return replace(session, step=ImportStep.PREVIEW, preview=preview, error=None)


def back_to_mapping(session: ImportSession) -> ImportSession:
    _require(session, ImportStep.PREVIEW)
    return replace(session, step=ImportStep.MAPPING, preview=None)


def begin_import(session: ImportSession) -> ImportSession:
    _require(session, ImportStep.PREVIEW)
    return replace(session, step=ImportStep.IMPORTING, progress=0)


def finish_import(session: ImportSession, result: ImportResult) -> ImportSession:
    _require(session, ImportStep.IMPORTING)
    return replace(session, step=ImportStep.COMPLETE, progress=100, result=result)


def run_session_import(
    session: ImportSession,
    write: WriteFunction,
    config: ImportConfig,
    on_progress: ProgressCallback | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ImportSession:
    """preview -> importing -> complete, committing the preview's records."""
    importing = begin_import(session)
    if importing.preview is None:
        raise SessionStateError("no preview to import")
    result = run_import(
        importing.preview.records,
        write,
        batch_size=config.batch_size,
        on_progress=on_progress,
        error_log=error_log,
        source=importing.source_name,
    )
    return finish_import(importing, result)


def reset(session: ImportSession) -> ImportSession:
    """Any step -> upload, discarding all session data."""
    return new_session()
