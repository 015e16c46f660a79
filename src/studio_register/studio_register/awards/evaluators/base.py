from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from ...attendance.aggregator import compute_attendance_stats
from ...core.enums import AwardKind
from ...points.ledger import sum_points
from ...students.model import Student
from ..model import AwardCandidate, AwardSnapshot


@dataclass(frozen=True)
class EvaluationWindow:
    start: datetime
    end: datetime


class AwardEvaluator(ABC):
    """Strategy Pattern: one ranking rule per award type.

    Implementations are pure: they read the snapshot and return candidates
    best-first, never persisting anything.
    """

    award_id: AwardKind

    @abstractmethod
    def rank(
        self,
        snapshot: AwardSnapshot,
        class_id: str,
        window: EvaluationWindow,
        *,
        previous_winner_id: Optional[str] = None,
    ) -> List[AwardCandidate]:
        raise NotImplementedError


def roster(snapshot: AwardSnapshot, class_id: str) -> List[Student]:
    return [s for s in snapshot.students if s.class_id == class_id and s.on_roster]


def name_key(name: str) -> tuple[str, str]:
    return (name.casefold(), name)


def weighted_ranking(
    students: Sequence[Student],
    snapshot: AwardSnapshot,
    window: EvaluationWindow,
    *,
    attendance_weight: float,
    points_weight: float,
) -> List[AwardCandidate]:
    """Score = attendance_weight * attendance ratio + points_weight * points / max points."""
    rows = []
    for student in students:
        stats = compute_attendance_stats(student, snapshot.sessions, window.start, window.end)
        points = sum_points(snapshot.points, student.id, student.class_id, window.start, window.end)
        rows.append((student, stats.ratio, points))

    max_points = max((points for _, _, points in rows), default=0)
    candidates = [
        AwardCandidate(
            student=student,
            score=attendance_weight * ratio + points_weight * (points / max_points if max_points > 0 else 0.0),
            attendance_ratio=ratio,
            points_total=points,
        )
        for student, ratio, points in rows
    ]
    candidates.sort(key=lambda c: (-c.score, -c.attendance_ratio, -c.points_total, name_key(c.student.name)))
    return candidates
