from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import to_iso
from ..common.records import bookkeeping_from_dict, bookkeeping_to_dict, require_timestamp
from ..core.enums import Lifecycle


@dataclass(frozen=True)
class PointEvent:
    """One entry of the append-only points ledger.

    ``session_id`` is only set for automatic grants that must happen at most
    once per register session (e.g. the "On Time" bonus).
    """

    id: str
    student_id: str
    class_id: str
    reason: str
    points: int
    created_at: datetime
    session_id: Optional[str] = None
    lifecycle: Lifecycle = Lifecycle.ACTIVE
    updated_at: Optional[datetime] = None
    synced: bool = field(default=False, compare=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "studentId": self.student_id,
            "classId": self.class_id,
            "reason": self.reason,
            "points": self.points,
            "createdAtISO": to_iso(self.created_at),
            "sessionId": self.session_id,
            **bookkeeping_to_dict(self),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PointEvent":
        return cls(
            id=str(data["id"]),
            student_id=str(data["studentId"]),
            class_id=str(data["classId"]),
            reason=str(data.get("reason") or ""),
            points=int(data.get("points") or 0),
            created_at=require_timestamp(data, "createdAtISO"),
            session_id=data.get("sessionId") or None,
            **bookkeeping_from_dict(data),
        )
