from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from ..classes.model import DanceClass
from ..common.records import active, find
from ..core.exceptions import NotFoundError
from ..points.ledger import points_by_reason, sum_points
from ..points.model import PointEvent
from ..register.model import RegisterSession
from ..storage.repository import CollectionRepository
from ..students.model import Student
from .aggregator import compute_attendance_stats
from .model import AttendanceStats, LeaderboardRow, SessionHistoryRow


class AttendanceService:
    """Attendance reports built on the aggregator."""

    def __init__(
        self,
        students: CollectionRepository[Student],
        sessions: CollectionRepository[RegisterSession],
        points: CollectionRepository[PointEvent],
        classes: CollectionRepository[DanceClass],
    ):
        self._students = students
        self._sessions = sessions
        self._points = points
        self._classes = classes

    def _student(self, student_id: str) -> Student:
        student = find(active(self._students.list_all()), student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def student_stats(
        self, student_id: str, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> AttendanceStats:
        return compute_attendance_stats(self._student(student_id), self._sessions.list_all(), start, end)

    def roster_percentages(self, class_id: str) -> Dict[str, AttendanceStats]:
        sessions = self._sessions.list_all()
        return {
            s.id: compute_attendance_stats(s, sessions)
            for s in self._students.list_all()
            if s.class_id == class_id and s.on_roster
        }

    def leaderboard(
        self, class_id: str, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[LeaderboardRow]:
        sessions = self._sessions.list_all()
        rows = [
            LeaderboardRow(student_id=s.id, name=s.name, stats=compute_attendance_stats(s, sessions, start, end))
            for s in self._students.list_all()
            if s.class_id == class_id and s.on_roster
        ]
        rows.sort(key=lambda r: (-r.stats.ratio, -r.stats.counted, r.name.casefold()))
        return rows

    def dashboard(self) -> dict:
        """Headline numbers: whole-percent average over every non-excused mark."""
        sessions = active(self._sessions.list_all())
        attended = counted = 0
        for session in sessions:
            for mark in session.marks.values():
                if mark.excused:
                    continue
                counted += 1
                if mark.attended:
                    attended += 1

        return {
            "averageAttendance": round(attended / counted * 100) if counted else 0,
            "activeStudents": sum(1 for s in self._students.list_all() if s.on_roster),
            "totalRegisters": len(sessions),
            "totalClasses": len(active(self._classes.list_all())),
        }

    def student_profile(self, student_id: str) -> dict:
        student = self._student(student_id)
        sessions = sorted(
            (s for s in active(self._sessions.list_all()) if s.class_id == student.class_id),
            key=lambda s: s.started_at,
            reverse=True,
        )
        points = self._points.list_all()
        cls = find(active(self._classes.list_all()), student.class_id)
        history = [SessionHistoryRow(s.id, s.started_at, s.mark_for(student.id)) for s in sessions if s.mark_for(student.id)]

        return {
            "student": student.to_dict(),
            "className": cls.name if cls else None,
            "attendance": compute_attendance_stats(student, sessions).to_dict(),
            "pointsTotal": sum_points(points, student.id),
            "pointsByReason": points_by_reason(points, student.id),
            "history": [row.to_dict() for row in history],
        }
