from __future__ import annotations

from typing import List, Optional

from ...core.constants import YEAR_ATTENDANCE_WEIGHT, YEAR_POINTS_WEIGHT
from ...core.enums import AwardKind
from ..model import AwardCandidate, AwardSnapshot
from .base import AwardEvaluator, EvaluationWindow, roster, weighted_ranking


class StudentOfYearEvaluator(AwardEvaluator):
    """0.6 * attendance + 0.4 * normalised points over the academic year."""

    award_id = AwardKind.STUDENT_OF_YEAR

    def rank(
        self,
        snapshot: AwardSnapshot,
        class_id: str,
        window: EvaluationWindow,
        *,
        previous_winner_id: Optional[str] = None,
    ) -> List[AwardCandidate]:
        return weighted_ranking(
            roster(snapshot, class_id),
            snapshot,
            window,
            attendance_weight=YEAR_ATTENDANCE_WEIGHT,
            points_weight=YEAR_POINTS_WEIGHT,
        )
