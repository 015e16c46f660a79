from __future__ import annotations

from enum import Enum


class Mark(str, Enum):
    """A student's recorded status for one register session."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
    EXCUSED = "EXCUSED"

    @property
    def attended(self) -> bool:
        return self in (Mark.PRESENT, Mark.LATE)

    @property
    def excused(self) -> bool:
        return self is Mark.EXCUSED


class Lifecycle(str, Enum):
    """Soft-delete state shared by every synced entity."""

    ACTIVE = "ACTIVE"
    DELETED = "DELETED"


class AwardKind(str, Enum):
    STUDENT_OF_MONTH = "student_of_month"
    MOST_IMPROVED = "most_improved_year"
    STUDENT_OF_YEAR = "student_of_year"


class AwardCategory(str, Enum):
    MONTHLY_BADGE = "MONTHLY_BADGE"
    MAJOR = "MAJOR"


class PeriodKind(str, Enum):
    """Which calendar window an award belongs to.

    Older records may still carry ``YEAR``/``CUSTOM``; see ``PeriodKind.parse``.
    """

    MONTH = "MONTH"
    RANGE = "RANGE"
    ACADEMIC_YEAR = "ACADEMIC_YEAR"

    @classmethod
    def parse(cls, value: str) -> "PeriodKind":
        legacy = {"YEAR": cls.ACADEMIC_YEAR, "CUSTOM": cls.RANGE}
        if value in legacy:
            return legacy[value]
        return cls(value)


class DecidedBy(str, Enum):
    SYSTEM = "SYSTEM"
    TEACHER = "TEACHER"
