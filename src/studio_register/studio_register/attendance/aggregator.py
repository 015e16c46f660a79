from __future__ import annotations

from datetime import datetime
from typing import Iterable, Iterator, Optional, Tuple

from ..common.records import is_active
from ..core.enums import Mark
from ..register.model import RegisterSession
from ..students.model import Student
from .model import AttendanceStats


def is_eligible(student: Student, session: RegisterSession) -> bool:
    """A session counts toward a student once they had joined, or if they were marked anyway."""
    if session.mark_for(student.id) is not None:
        return True
    if student.joined_at is None:
        return False
    return session.started_at >= student.joined_at


def counted_marks(
    student: Student,
    sessions: Iterable[RegisterSession],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> Iterator[Tuple[RegisterSession, Mark]]:
    """Yield ``(session, mark)`` for every session that contributes to the student's attendance.

    Only active sessions of the student's class are considered; sessions without a mark
    and EXCUSED marks never contribute. ``start``/``end`` are inclusive; None means unbounded.
    """
    for session in sessions:
        if not is_active(session) or session.class_id != student.class_id:
            continue
        if start is not None and session.started_at < start:
            continue
        if end is not None and session.started_at > end:
            continue
        if not is_eligible(student, session):
            continue
        mark = session.mark_for(student.id)
        if mark is None or mark.excused:
            continue
        yield session, mark


def compute_attendance_stats(
    student: Student,
    sessions: Iterable[RegisterSession],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> AttendanceStats:
    attended = counted = 0
    for _, mark in counted_marks(student, sessions, start, end):
        counted += 1
        if mark.attended:
            attended += 1
    return AttendanceStats(attended=attended, counted=counted)
