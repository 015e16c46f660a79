from __future__ import annotations

from typing import List, Optional

import numpy as np

from ...attendance.aggregator import counted_marks
from ...common.datetime_utils import days_between
from ...core.constants import MIN_IMPROVEMENT_SESSIONS
from ...core.enums import AwardKind
from ..model import AwardCandidate, AwardSnapshot
from .base import AwardEvaluator, EvaluationWindow, name_key, roster


def ols_slope(x: np.ndarray, y: np.ndarray) -> float:
    """Least-squares slope of y over x; 0 when every x is the same."""
    dx = x - x.mean()
    sxx = float(np.dot(dx, dx))
    if sxx == 0:
        return 0.0
    return float(np.dot(dx, y - y.mean()) / sxx)


class MostImprovedEvaluator(AwardEvaluator):
    """Ranks students by the trend of their attendance across the window.

    Each marked, non-excused session becomes a point (days since window start,
    1 if attended else 0). Students with fewer than four points are left out.
    """

    award_id = AwardKind.MOST_IMPROVED

    def __init__(self, min_sessions: int = MIN_IMPROVEMENT_SESSIONS):
        self._min_sessions = int(min_sessions)

    def rank(
        self,
        snapshot: AwardSnapshot,
        class_id: str,
        window: EvaluationWindow,
        *,
        previous_winner_id: Optional[str] = None,
    ) -> List[AwardCandidate]:
        candidates: List[AwardCandidate] = []
        for student in roster(snapshot, class_id):
            series = sorted(
                (session.started_at, 1.0 if mark.attended else 0.0)
                for session, mark in counted_marks(student, snapshot.sessions, window.start, window.end)
            )
            if len(series) < self._min_sessions:
                continue

            x = np.array([days_between(window.start, when) for when, _ in series])
            y = np.array([outcome for _, outcome in series])
            slope = ols_slope(x, y)
            candidates.append(
                AwardCandidate(
                    student=student,
                    score=slope,
                    attendance_ratio=float(y.mean()),
                    slope_per_day=slope,
                    sessions_used=len(series),
                    first_date=series[0][0],
                    last_date=series[-1][0],
                )
            )

        candidates.sort(key=lambda c: (-c.score, -(c.sessions_used or 0), name_key(c.student.name)))
        return candidates
