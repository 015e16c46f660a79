from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from ..awards.model import AwardUnlock
from ..classes.model import DanceClass
from ..points.model import PointEvent
from ..register.model import RegisterSession
from ..students.model import Student


@dataclass(frozen=True)
class CollectionSpec:
    """How one record collection maps onto local keys and remote tables."""

    name: str
    table: str
    from_dict: Callable[[Mapping[str, Any]], Any]
    columns: tuple[str, ...]
    json_columns: tuple[str, ...] = ()
    bool_columns: tuple[str, ...] = ("deleted", "synced")

    def storage_key(self, prefix: str) -> str:
        return f"{prefix}{self.name}"


CLASSES = CollectionSpec(
    name="classes",
    table="classes",
    from_dict=DanceClass.from_dict,
    columns=("id", "name", "color", "deleted", "synced", "updatedAt"),
)

STUDENTS = CollectionSpec(
    name="students",
    table="students",
    from_dict=Student.from_dict,
    columns=("id", "name", "classId", "joinedAtISO", "archived", "deleted", "synced", "updatedAt"),
    bool_columns=("archived", "deleted", "synced"),
)

SESSIONS = CollectionSpec(
    name="sessions",
    table="sessions",
    from_dict=RegisterSession.from_dict,
    columns=("id", "classId", "startedAtISO", "closedAtISO", "marks", "deleted", "synced", "updatedAt"),
    json_columns=("marks",),
)

POINTS = CollectionSpec(
    name="points",
    table="points",
    from_dict=PointEvent.from_dict,
    columns=(
        "id", "studentId", "classId", "reason", "points", "createdAtISO", "sessionId",
        "deleted", "synced", "updatedAt",
    ),
)

AWARDS = CollectionSpec(
    name="awards",
    table="awards",
    from_dict=AwardUnlock.from_dict,
    columns=(
        "id", "awardId", "studentId", "classId", "periodType", "periodKey", "unlockedAtISO", "decidedBy",
        "deleted", "synced", "updatedAt",
    ),
)

ALL_COLLECTIONS: tuple[CollectionSpec, ...] = (CLASSES, STUDENTS, SESSIONS, POINTS, AWARDS)
COLLECTIONS_BY_NAME = {c.name: c for c in ALL_COLLECTIONS}
