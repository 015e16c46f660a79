from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from ..common.datetime_utils import parse_iso, to_iso
from ..common.records import bookkeeping_from_dict, bookkeeping_to_dict, require_timestamp
from ..core.enums import Lifecycle, Mark

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisterSession:
    """One attendance-taking event for a class. Open while ``closed_at`` is None."""

    id: str
    class_id: str
    started_at: datetime
    closed_at: Optional[datetime] = None
    marks: Dict[str, Mark] = field(default_factory=dict)
    lifecycle: Lifecycle = Lifecycle.ACTIVE
    updated_at: Optional[datetime] = None
    synced: bool = field(default=False, compare=False)

    @property
    def is_open(self) -> bool:
        return self.closed_at is None

    def mark_for(self, student_id: str) -> Optional[Mark]:
        return self.marks.get(student_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "classId": self.class_id,
            "startedAtISO": to_iso(self.started_at),
            "closedAtISO": to_iso(self.closed_at),
            "marks": {sid: m.value for sid, m in self.marks.items()},
            **bookkeeping_to_dict(self),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RegisterSession":
        marks: Dict[str, Mark] = {}
        for student_id, raw in (data.get("marks") or {}).items():
            try:
                marks[str(student_id)] = Mark(raw)
            except ValueError:
                logger.warning("Ignoring unknown mark %r for student %s in session %s", raw, student_id, data.get("id"))
        return cls(
            id=str(data["id"]),
            class_id=str(data["classId"]),
            started_at=require_timestamp(data, "startedAtISO"),
            closed_at=parse_iso(data.get("closedAtISO")),
            marks=marks,
            **bookkeeping_from_dict(data),
        )
