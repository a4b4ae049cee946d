from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

"""CandidateRecord model and MemberStatus enum.

A CandidateRecord is a partially populated person produced by applying the field
mappings and normalizer to a RawRecord. It is what gets handed to the write
function in batches.
"""

__all__ = [
    "MemberStatus",
    "CandidateRecord",
    "TARGET_FIELDS",
    "DATE_FIELDS",
]


class MemberStatus(str, Enum):
    """Membership status of a person.

    VISITOR is the least-privileged category and the fallback for labels that
    cannot be mapped.
    """
    VISITOR = "visitor"
    REGULAR = "regular"
    MEMBER = "member"
    LEADER = "leader"
    INACTIVE = "inactive"

    @classmethod
    def values(cls) -> list[str]:
        return [m.value for m in cls]


# Order matters: this is also the column order used for database inserts.
TARGET_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "address",
    "city",
    "state",
    "zip",
    "birth_date",
    "join_date",
    "first_visit",
    "status",
    "notes",
    "tags",
)

DATE_FIELDS = frozenset({"birth_date", "join_date", "first_visit"})


@dataclass(frozen=True)
class CandidateRecord:
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    birth_date: str | None = None  # ISO YYYY-MM-DD
    join_date: str | None = None
    first_visit: str | None = None
    status: str | None = None  # MemberStatus value
    notes: str | None = None
    tags: list[str] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}"

    def has_required_names(self) -> bool:
        return bool(self.first_name) and bool(self.last_name)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict, dropping unset scalar fields.

        tags is always present (possibly empty) so that writers get a stable
        shape for the list column.
        """
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None}
