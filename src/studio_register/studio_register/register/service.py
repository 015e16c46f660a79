from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import List, Optional, Tuple

from ..awards.model import AwardUnlock
from ..awards.service import AwardsService
from ..classes.model import DanceClass
from ..common.datetime_utils import now_utc
from ..common.ids import new_id
from ..common.records import active, find, soft_delete, touch
from ..core.constants import ON_TIME_POINTS, ON_TIME_REASON
from ..core.enums import Mark
from ..core.exceptions import NotFoundError, ValidationError
from ..points.service import PointsService
from ..storage.repository import CollectionRepository
from ..students.model import Student
from .model import RegisterSession

logger = logging.getLogger(__name__)

_NEXT_MARK = {
    Mark.ABSENT: Mark.PRESENT,
    Mark.PRESENT: Mark.LATE,
    Mark.LATE: Mark.EXCUSED,
    Mark.EXCUSED: Mark.ABSENT,
}


class RegisterService:
    def __init__(
        self,
        sessions: CollectionRepository[RegisterSession],
        students: CollectionRepository[Student],
        classes: CollectionRepository[DanceClass],
        points: PointsService,
        awards: AwardsService,
        *,
        rng: random.Random | None = None,
    ):
        self._sessions = sessions
        self._students = students
        self._classes = classes
        self._points = points
        self._awards = awards
        self._rng = rng or random.Random()

    def get(self, session_id: str) -> RegisterSession:
        session = find(active(self._sessions.list_all()), session_id)
        if not session:
            raise NotFoundError("Register not found")
        return session

    def _require_open(self, session_id: str) -> RegisterSession:
        session = self.get(session_id)
        if not session.is_open:
            raise ValidationError("This register is closed")
        return session

    def _roster(self, class_id: str) -> List[Student]:
        return [s for s in self._students.list_all() if s.class_id == class_id and s.on_roster]

    def _replace(self, updated: RegisterSession) -> RegisterSession:
        self._sessions.save_all([updated if s.id == updated.id else s for s in self._sessions.list_all()])
        return updated

    def list_for_class(self, class_id: str) -> List[RegisterSession]:
        sessions = [s for s in active(self._sessions.list_all()) if s.class_id == class_id]
        return sorted(sessions, key=lambda s: s.started_at, reverse=True)

    def open_session_for_class(self, class_id: str) -> Optional[RegisterSession]:
        """The class's current open register, if there is one."""
        for s in active(self._sessions.list_all()):
            if s.class_id == class_id and s.is_open:
                return s
        return None

    def open_session(self, class_id: str, *, now: Optional[datetime] = None) -> RegisterSession:
        """Return the open register for the class, or start one with everyone marked ABSENT."""
        now = now or now_utc()
        if not find(active(self._classes.list_all()), class_id):
            raise NotFoundError("Class not found")

        existing = self.open_session_for_class(class_id)
        if existing:
            return existing

        marks = {
            s.id: Mark.ABSENT
            for s in self._roster(class_id)
            if s.joined_at is None or s.joined_at <= now
        }
        session = RegisterSession(id=new_id("session"), class_id=class_id, started_at=now, marks=marks, updated_at=now)
        self._sessions.save_all([*self._sessions.list_all(), session])
        logger.info("Opened register %s for class %s with %d student(s)", session.id, class_id, len(marks))
        return session

    def add_missing_marks(self, session_id: str, *, now: Optional[datetime] = None) -> RegisterSession:
        """Mark ABSENT every roster student who had joined by the start but has no mark yet."""
        session = self._require_open(session_id)
        missing = {
            s.id: Mark.ABSENT
            for s in self._roster(session.class_id)
            if s.id not in session.marks and s.joined_at is not None and s.joined_at <= session.started_at
        }
        if not missing:
            return session
        return self._replace(touch(session, now or now_utc(), marks={**session.marks, **missing}))

    def set_mark(self, session_id: str, student_id: str, mark: Mark | str, *, now: Optional[datetime] = None) -> RegisterSession:
        """Record a mark. Switching someone to PRESENT earns the On Time bonus once per register."""
        now = now or now_utc()
        try:
            mark = Mark(mark)
        except ValueError:
            raise ValidationError(f"Unknown mark: {mark}")

        session = self._require_open(session_id)
        student = find(active(self._students.list_all()), student_id)
        if not student or student.class_id != session.class_id:
            raise NotFoundError("Student not found in this class")

        previous = session.mark_for(student_id) or Mark.ABSENT
        updated = self._replace(touch(session, now, marks={**session.marks, student_id: mark}))

        if mark is Mark.PRESENT and previous is not Mark.PRESENT:
            self._points.grant_once(
                student_id, session.class_id, ON_TIME_REASON, ON_TIME_POINTS, session_id=session.id, now=now
            )
        return updated

    def cycle_mark(self, session_id: str, student_id: str, *, now: Optional[datetime] = None) -> RegisterSession:
        current = self.get(session_id).mark_for(student_id) or Mark.ABSENT
        return self.set_mark(session_id, student_id, _NEXT_MARK[current], now=now)

    def close_session(
        self, session_id: str, *, now: Optional[datetime] = None
    ) -> Tuple[RegisterSession, List[AwardUnlock]]:
        """Close the register, then unlock Student of the Month for the class if due."""
        now = now or now_utc()
        session = self._require_open(session_id)
        closed = self._replace(touch(session, now, closed_at=now))
        awards = self._awards.on_register_close(closed.class_id, now=now)
        return closed, awards

    def delete_session(self, session_id: str, *, now: Optional[datetime] = None) -> RegisterSession:
        return self._replace(soft_delete(self.get(session_id), now or now_utc()))

    def pick_random_attendee(self, session_id: str) -> Student:
        session = self.get(session_id)
        attendees = [s for s in self._roster(session.class_id) if session.mark_for(s.id) in (Mark.PRESENT, Mark.LATE)]
        if not attendees:
            raise ValidationError("No students marked Present or Late yet")
        return self._rng.choice(attendees)
