"""Shared helpers for the synced record types.

Every collection record (class, student, session, point, award) carries the
same bookkeeping: ``id``, ``lifecycle``, ``updated_at`` and ``synced``. The
``synced`` flag is excluded from equality since it only describes whether the
remote mirror has caught up.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Protocol, TypeVar

from ..core.enums import Lifecycle
from .datetime_utils import parse_iso, to_iso


class SyncedRecord(Protocol):
    id: str
    lifecycle: Lifecycle
    updated_at: Optional[datetime]
    synced: bool

    def to_dict(self) -> dict: ...


R = TypeVar("R", bound=SyncedRecord)


def is_active(record: SyncedRecord) -> bool:
    return record.lifecycle is Lifecycle.ACTIVE


def active(records: Iterable[R]) -> List[R]:
    return [r for r in records if is_active(r)]


def find(records: Iterable[R], record_id: str) -> Optional[R]:
    for r in records:
        if r.id == record_id:
            return r
    return None


def touch(record: R, now: datetime, **changes: Any) -> R:
    """Apply ``changes`` and stamp the record as a fresh, unpushed local edit."""
    return replace(record, updated_at=now, synced=False, **changes)  # type: ignore[type-var]


def soft_delete(record: R, now: datetime) -> R:
    return touch(record, now, lifecycle=Lifecycle.DELETED)


def bookkeeping_to_dict(record: SyncedRecord) -> dict:
    return {
        "deleted": record.lifecycle is Lifecycle.DELETED,
        "synced": bool(record.synced),
        "updatedAt": to_iso(record.updated_at),
    }


def bookkeeping_from_dict(data: Mapping[str, Any]) -> dict:
    return {
        "lifecycle": Lifecycle.DELETED if data.get("deleted") else Lifecycle.ACTIVE,
        "updated_at": parse_iso(data.get("updatedAt")),
        "synced": bool(data.get("synced", False)),
    }


def require_timestamp(data: Mapping[str, Any], key: str) -> datetime:
    value = parse_iso(data.get(key))
    if value is None:
        raise ValueError(f"{key} is missing or not an ISO timestamp: {data.get(key)!r}")
    return value
