from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import Mark


@dataclass(frozen=True)
class AttendanceStats:
    attended: int = 0
    counted: int = 0

    @property
    def ratio(self) -> float:
        return self.attended / self.counted if self.counted > 0 else 0.0

    @property
    def percentage(self) -> float:
        return self.ratio * 100

    def to_dict(self) -> dict:
        return {
            "attended": self.attended,
            "counted": self.counted,
            "percentage": round(self.percentage, 1),
        }


@dataclass(frozen=True)
class SessionHistoryRow:
    session_id: str
    started_at: datetime
    mark: Optional[Mark]

    def to_dict(self) -> dict:
        return {
            "sessionId": self.session_id,
            "startedAtISO": to_iso(self.started_at),
            "mark": self.mark.value if self.mark else None,
        }


@dataclass(frozen=True)
class LeaderboardRow:
    student_id: str
    name: str
    stats: AttendanceStats

    def to_dict(self) -> dict:
        return {"studentId": self.student_id, "name": self.name, **self.stats.to_dict()}
