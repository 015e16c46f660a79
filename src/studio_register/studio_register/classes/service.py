from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from ..common.datetime_utils import now_utc
from ..common.ids import new_id
from ..common.records import active, find, soft_delete, touch
from ..common.validators import validate_class_name, validate_color
from ..core.constants import CLASS_COLORS
from ..core.exceptions import NotFoundError, ValidationError
from ..storage.repository import CollectionRepository
from .model import DanceClass


class ClassService:
    def __init__(self, classes: CollectionRepository[DanceClass]):
        self._classes = classes

    def list_active(self) -> List[DanceClass]:
        return active(self._classes.list_all())

    def get(self, class_id: str) -> DanceClass:
        cls = find(self.list_active(), class_id)
        if not cls:
            raise NotFoundError("Class not found")
        return cls

    def _ensure_unique(self, name: str, *, exclude_id: Optional[str] = None) -> None:
        wanted = name.casefold()
        for c in self.list_active():
            if c.id != exclude_id and c.name.casefold() == wanted:
                raise ValidationError("A class with this name already exists")

    def create(self, name: str, color: Optional[str] = None, *, now: Optional[datetime] = None) -> DanceClass:
        now = now or now_utc()
        name = validate_class_name(name)
        self._ensure_unique(name)
        existing = self._classes.list_all()
        color = validate_color(color) if color else CLASS_COLORS[len(active(existing)) % len(CLASS_COLORS)]

        cls = DanceClass(id=new_id("class"), name=name, color=color, updated_at=now)
        self._classes.save_all([*existing, cls])
        return cls

    def _replace(self, updated: DanceClass) -> DanceClass:
        self._classes.save_all([updated if c.id == updated.id else c for c in self._classes.list_all()])
        return updated

    def rename(self, class_id: str, name: str, *, now: Optional[datetime] = None) -> DanceClass:
        cls = self.get(class_id)
        name = validate_class_name(name)
        self._ensure_unique(name, exclude_id=class_id)
        return self._replace(touch(cls, now or now_utc(), name=name))

    def recolor(self, class_id: str, color: str, *, now: Optional[datetime] = None) -> DanceClass:
        cls = self.get(class_id)
        return self._replace(touch(cls, now or now_utc(), color=validate_color(color)))

    def delete(self, class_id: str, *, now: Optional[datetime] = None) -> DanceClass:
        return self._replace(soft_delete(self.get(class_id), now or now_utc()))
