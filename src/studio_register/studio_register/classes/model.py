from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.records import bookkeeping_from_dict, bookkeeping_to_dict
from ..core.enums import Lifecycle


@dataclass(frozen=True)
class DanceClass:
    id: str
    name: str
    color: str
    lifecycle: Lifecycle = Lifecycle.ACTIVE
    updated_at: Optional[datetime] = None
    synced: bool = field(default=False, compare=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "color": self.color, **bookkeeping_to_dict(self)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DanceClass":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            color=str(data.get("color") or ""),
            **bookkeeping_from_dict(data),
        )
