from __future__ import annotations

from dataclasses import dataclass, field

from ..config.defaults import DEFAULT_FIELD_MAPPINGS, DEFAULT_STATUS_MAPPINGS
from .candidate import MemberStatus

"""Config dataclasses for the people import tool.

The field/status dictionaries are injectable so the same pipeline can be reused
for other source systems. Values loaded from YAML are merged over the built-in
Planning Center dictionaries (see config.loader).
"""

DEFAULT_BATCH_SIZE = 50
DEFAULT_TABLE = "people"


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None
    table: str = DEFAULT_TABLE


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for an import run."""
    field_mappings: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_FIELD_MAPPINGS))
    status_mappings: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_STATUS_MAPPINGS))
    default_status: str = MemberStatus.VISITOR.value  # 未知ステータスの寄せ先 (最小権限)
    batch_size: int = DEFAULT_BATCH_SIZE
    strict: bool = False  # True: 列数不一致/未知ステータス/重複マッピングをエラー扱い
    guess_headers: bool = False  # True: 辞書にないヘッダを正規化して推測
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
