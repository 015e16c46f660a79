"""Read-only queries over the points ledger."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Optional

from ..common.records import is_active
from .model import PointEvent


def sum_points(
    points: Iterable[PointEvent],
    student_id: str,
    class_id: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> int:
    """Sum of non-deleted grants for a student (optionally one class), ``[start, end]`` inclusive."""
    total = 0
    for p in points:
        if not is_active(p) or p.student_id != student_id:
            continue
        if class_id is not None and p.class_id != class_id:
            continue
        if start is not None and p.created_at < start:
            continue
        if end is not None and p.created_at > end:
            continue
        total += p.points
    return total


def has_grant(
    points: Iterable[PointEvent],
    *,
    student_id: str,
    class_id: str,
    reason: str,
    session_id: Optional[str],
) -> bool:
    """True when an active grant with the same (student, class, reason, session) already exists."""
    return any(
        is_active(p)
        and p.student_id == student_id
        and p.class_id == class_id
        and p.reason == reason
        and p.session_id == session_id
        for p in points
    )


def points_by_reason(points: Iterable[PointEvent], student_id: str) -> Dict[str, int]:
    totals: Dict[str, int] = {}
    for p in sorted((p for p in points if is_active(p) and p.student_id == student_id), key=lambda p: p.created_at):
        totals[p.reason] = totals.get(p.reason, 0) + p.points
    return dict(sorted(totals.items(), key=lambda kv: (-kv[1], kv[0])))
