from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from ..classes.model import DanceClass
from ..common.datetime_utils import parse_iso, to_iso
from ..common.records import bookkeeping_from_dict, bookkeeping_to_dict, require_timestamp
from ..core.enums import AwardCategory, AwardKind, DecidedBy, Lifecycle, PeriodKind
from ..points.model import PointEvent
from ..register.model import RegisterSession
from ..students.model import Student


@dataclass(frozen=True)
class AwardPeriod:
    """Tagged period an award is scoped to.

    Key formats: MONTH ``2025-03``, RANGE ``<fromISO>|<toISO>``,
    ACADEMIC_YEAR ``2024-2025``.
    """

    kind: PeriodKind
    key: str

    @classmethod
    def month(cls, key: str) -> "AwardPeriod":
        return cls(PeriodKind.MONTH, key)

    @classmethod
    def range(cls, start: datetime, end: datetime) -> "AwardPeriod":
        return cls(PeriodKind.RANGE, f"{to_iso(start)}|{to_iso(end)}")

    @classmethod
    def academic_year(cls, key: str) -> "AwardPeriod":
        return cls(PeriodKind.ACADEMIC_YEAR, key)

    def describe(self) -> str:
        if self.kind is PeriodKind.RANGE:
            start_s, _, end_s = self.key.partition("|")
            start, end = parse_iso(start_s), parse_iso(end_s)
            if start and end:
                if (start.year, start.month) == (end.year, end.month):
                    return start.strftime("%b %Y")
                if start.year == end.year:
                    return f"{start.strftime('%b')} - {end.strftime('%b')} {start.year}"
                return f"{start.strftime('%b %Y')} - {end.strftime('%b %Y')}"
        elif self.kind is PeriodKind.MONTH:
            parsed = parse_iso(f"{self.key}-01")
            if parsed:
                return parsed.strftime("%b %Y")
        elif self.kind is PeriodKind.ACADEMIC_YEAR:
            return f"Academic Year {self.key}"
        return self.key


@dataclass(frozen=True)
class AwardUnlock:
    id: str
    award_id: AwardKind
    student_id: str
    class_id: str
    period: AwardPeriod
    unlocked_at: datetime
    decided_by: DecidedBy
    lifecycle: Lifecycle = Lifecycle.ACTIVE
    updated_at: Optional[datetime] = None
    synced: bool = field(default=False, compare=False)

    @property
    def dedupe_key(self) -> tuple[str, str, str]:
        return (self.award_id.value, self.student_id, self.period.key)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "awardId": self.award_id.value,
            "studentId": self.student_id,
            "classId": self.class_id,
            "periodType": self.period.kind.value,
            "periodKey": self.period.key,
            "unlockedAtISO": to_iso(self.unlocked_at),
            "decidedBy": self.decided_by.value,
            **bookkeeping_to_dict(self),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AwardUnlock":
        return cls(
            id=str(data["id"]),
            award_id=AwardKind(data["awardId"]),
            student_id=str(data["studentId"]),
            class_id=str(data["classId"]),
            period=AwardPeriod(PeriodKind.parse(str(data["periodType"])), str(data["periodKey"])),
            unlocked_at=require_timestamp(data, "unlockedAtISO"),
            decided_by=DecidedBy(data.get("decidedBy") or DecidedBy.SYSTEM.value),
            **bookkeeping_from_dict(data),
        )


@dataclass(frozen=True)
class AwardDefinition:
    id: AwardKind
    name: str
    description: str
    category: AwardCategory


@dataclass(frozen=True)
class AwardCandidate:
    """Read-model: one ranked row produced by an evaluator."""

    student: Student
    score: float
    attendance_ratio: float = 0.0
    points_total: int = 0
    slope_per_day: Optional[float] = None
    sessions_used: Optional[int] = None
    first_date: Optional[datetime] = None
    last_date: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "studentId": self.student.id,
            "name": self.student.name,
            "score": self.score,
            "attendancePct": round(self.attendance_ratio * 100, 1),
            "pointsTotal": self.points_total,
            "slopePerDay": self.slope_per_day,
            "sessionsUsed": self.sessions_used,
            "firstDateISO": to_iso(self.first_date),
            "lastDateISO": to_iso(self.last_date),
        }


@dataclass(frozen=True)
class AwardSnapshot:
    """Everything an evaluator needs, captured once per evaluation pass."""

    students: Sequence[Student]
    sessions: Sequence[RegisterSession]
    points: Sequence[PointEvent]
    awards: Sequence[AwardUnlock] = ()
    classes: Sequence[DanceClass] = ()


@dataclass(frozen=True)
class ClassAwardsMeta:
    """Local-only Student of the Month bookkeeping for one class."""

    last_requested_at: Optional[datetime] = None
    last_winner_student_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "lastRequestedAtISO": to_iso(self.last_requested_at),
            "lastWinnerStudentId": self.last_winner_student_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClassAwardsMeta":
        return cls(
            last_requested_at=parse_iso(data.get("lastRequestedAtISO")),
            last_winner_student_id=data.get("lastWinnerStudentId") or None,
        )
