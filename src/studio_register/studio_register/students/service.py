from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from ..classes.model import DanceClass
from ..common.datetime_utils import now_utc
from ..common.ids import new_id
from ..common.records import active, find, soft_delete, touch
from ..common.validators import validate_student_name
from ..core.exceptions import NotFoundError
from ..storage.repository import CollectionRepository
from .model import Student


class StudentService:
    def __init__(self, students: CollectionRepository[Student], classes: CollectionRepository[DanceClass]):
        self._students = students
        self._classes = classes

    def list_active(self, class_id: Optional[str] = None) -> List[Student]:
        """On-roster students (not archived, not deleted), optionally for one class."""
        return [
            s for s in self._students.list_all()
            if s.on_roster and (class_id is None or s.class_id == class_id)
        ]

    def list_archived(self, class_id: Optional[str] = None) -> List[Student]:
        return [
            s for s in active(self._students.list_all())
            if s.archived and (class_id is None or s.class_id == class_id)
        ]

    def get(self, student_id: str) -> Student:
        student = find(active(self._students.list_all()), student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def _require_class(self, class_id: str) -> None:
        if not find(active(self._classes.list_all()), class_id):
            raise NotFoundError("Class not found")

    def enroll(
        self,
        name: str,
        class_id: str,
        *,
        joined_at: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> Student:
        now = now or now_utc()
        name = validate_student_name(name)
        self._require_class(class_id)
        student = Student(
            id=new_id("student"),
            name=name,
            class_id=class_id,
            joined_at=joined_at or now,
            updated_at=now,
        )
        self._students.save_all([*self._students.list_all(), student])
        return student

    def _replace(self, updated: Student) -> Student:
        self._students.save_all([updated if s.id == updated.id else s for s in self._students.list_all()])
        return updated

    def rename(self, student_id: str, name: str, *, now: Optional[datetime] = None) -> Student:
        student = self.get(student_id)
        return self._replace(touch(student, now or now_utc(), name=validate_student_name(name)))

    def move(self, student_id: str, class_id: str, *, now: Optional[datetime] = None) -> Student:
        """Move to another class; attendance there only counts from now on."""
        now = now or now_utc()
        student = self.get(student_id)
        self._require_class(class_id)
        if student.class_id == class_id:
            return student
        return self._replace(touch(student, now, class_id=class_id, joined_at=now))

    def archive(self, student_id: str, *, now: Optional[datetime] = None) -> Student:
        return self._replace(touch(self.get(student_id), now or now_utc(), archived=True))

    def unarchive(self, student_id: str, *, now: Optional[datetime] = None) -> Student:
        return self._replace(touch(self.get(student_id), now or now_utc(), archived=False))

    def delete(self, student_id: str, *, now: Optional[datetime] = None) -> Student:
        return self._replace(soft_delete(self.get(student_id), now or now_utc()))
