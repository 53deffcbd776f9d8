"""Table change event entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID

PROFILES_TABLE = "profiles"


class ChangeType(StrEnum):
    """Kind of row change reported by the store."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A cue that a row changed. Consumers refetch; they never apply it as a delta."""

    table: str
    change_type: ChangeType
    record_id: UUID | None = None
    occurred_at: datetime = field(default_factory=datetime.utcnow)
