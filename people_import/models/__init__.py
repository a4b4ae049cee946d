"""Domain models for the people import pipeline.

This package contains the value types that flow between the pipeline stages:
raw source rows, field mappings, candidate person records, the preview and
the final import result.
"""

from .candidate import TARGET_FIELDS, CandidateRecord, MemberStatus
from .config_models import DatabaseConfig, ImportConfig
from .import_result import ImportPreview, ImportResult
from .raw_record import FieldMapping, RawRecord

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "ImportConfig",
    # Pipeline models
    "RawRecord",
    "FieldMapping",
    "CandidateRecord",
    "MemberStatus",
    "TARGET_FIELDS",
    "ImportPreview",
    "ImportResult",
]
