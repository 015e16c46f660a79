from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_iso, to_iso
from ..common.records import bookkeeping_from_dict, bookkeeping_to_dict
from ..core.enums import Lifecycle


@dataclass(frozen=True)
class Student:
    """A dancer enrolled in exactly one class.

    ``joined_at`` opens the attendance eligibility window; it is None when the
    stored value could not be parsed.
    """

    id: str
    name: str
    class_id: str
    joined_at: Optional[datetime]
    archived: bool = False
    lifecycle: Lifecycle = Lifecycle.ACTIVE
    updated_at: Optional[datetime] = None
    synced: bool = field(default=False, compare=False)

    @property
    def on_roster(self) -> bool:
        return not self.archived and self.lifecycle is Lifecycle.ACTIVE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "classId": self.class_id,
            "joinedAtISO": to_iso(self.joined_at),
            "archived": self.archived,
            **bookkeeping_to_dict(self),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Student":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            class_id=str(data["classId"]),
            joined_at=parse_iso(data.get("joinedAtISO")),
            archived=bool(data.get("archived", False)),
            **bookkeeping_from_dict(data),
        )
