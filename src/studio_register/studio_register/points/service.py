from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, List, Optional

from ..common.datetime_utils import now_utc
from ..common.ids import new_id
from ..common.records import active, find, soft_delete
from ..common.validators import validate_points, validate_reason
from ..core.constants import POINT_PRESETS
from ..core.exceptions import NotFoundError, ValidationError
from ..storage.repository import CollectionRepository
from ..students.model import Student
from .ledger import has_grant, points_by_reason, sum_points
from .model import PointEvent

logger = logging.getLogger(__name__)


class PointsService:
    def __init__(self, points: CollectionRepository[PointEvent], students: CollectionRepository[Student]):
        self._points = points
        self._students = students

    def _require_student(self, student_id: str, class_id: str) -> Student:
        student = find(active(self._students.list_all()), student_id)
        if not student:
            raise NotFoundError("Student not found")
        if student.class_id != class_id:
            raise ValidationError("Student is not in this class")
        return student

    def grant(
        self,
        student_id: str,
        class_id: str,
        reason: str,
        points: object,
        *,
        session_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> PointEvent:
        now = now or now_utc()
        reason = validate_reason(reason)
        value = validate_points(points)
        self._require_student(student_id, class_id)

        event = PointEvent(
            id=new_id("point"),
            student_id=student_id,
            class_id=class_id,
            reason=reason,
            points=value,
            created_at=now,
            session_id=session_id,
            updated_at=now,
        )
        self._points.save_all([*self._points.list_all(), event])
        return event

    def grant_preset(self, preset_id: str, student_id: str, class_id: str, *, now: Optional[datetime] = None) -> PointEvent:
        for pid, label, value in POINT_PRESETS:
            if pid == preset_id:
                return self.grant(student_id, class_id, label, value, now=now)
        raise ValidationError(f"Unknown preset: {preset_id}")

    def grant_once(
        self,
        student_id: str,
        class_id: str,
        reason: str,
        points: int,
        *,
        session_id: str,
        now: Optional[datetime] = None,
    ) -> Optional[PointEvent]:
        """Grant unless the same (student, class, reason, session) grant already exists."""
        if has_grant(self._points.list_all(), student_id=student_id, class_id=class_id, reason=reason, session_id=session_id):
            logger.debug("%s already granted to %s for session %s", reason, student_id, session_id)
            return None
        return self.grant(student_id, class_id, reason, points, session_id=session_id, now=now)

    def revoke(self, point_id: str, *, now: Optional[datetime] = None) -> PointEvent:
        existing = self._points.list_all()
        event = find(active(existing), point_id)
        if not event:
            raise NotFoundError("Point grant not found")
        revoked = soft_delete(event, now or now_utc())
        self._points.save_all([revoked if p.id == point_id else p for p in existing])
        return revoked

    def list_for_student(self, student_id: str) -> List[PointEvent]:
        return sorted(
            (p for p in active(self._points.list_all()) if p.student_id == student_id),
            key=lambda p: p.created_at,
            reverse=True,
        )

    def total(
        self,
        student_id: str,
        class_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> int:
        return sum_points(self._points.list_all(), student_id, class_id, start, end)

    def breakdown_by_reason(self, student_id: str) -> Dict[str, int]:
        return points_by_reason(self._points.list_all(), student_id)
