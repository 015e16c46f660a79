from __future__ import annotations

from typing import List, Optional

from ...core.constants import MONTH_ATTENDANCE_WEIGHT, MONTH_POINTS_WEIGHT
from ...core.enums import AwardKind
from ..model import AwardCandidate, AwardSnapshot
from .base import AwardEvaluator, EvaluationWindow, roster, weighted_ranking


class StudentOfMonthEvaluator(AwardEvaluator):
    """0.7 * attendance + 0.3 * normalised points over the window.

    If the previous winner would win again they swap places with the runner-up.
    """

    award_id = AwardKind.STUDENT_OF_MONTH

    def rank(
        self,
        snapshot: AwardSnapshot,
        class_id: str,
        window: EvaluationWindow,
        *,
        previous_winner_id: Optional[str] = None,
    ) -> List[AwardCandidate]:
        ranked = weighted_ranking(
            roster(snapshot, class_id),
            snapshot,
            window,
            attendance_weight=MONTH_ATTENDANCE_WEIGHT,
            points_weight=MONTH_POINTS_WEIGHT,
        )
        if previous_winner_id and len(ranked) > 1 and ranked[0].student.id == previous_winner_id:
            ranked[0], ranked[1] = ranked[1], ranked[0]
        return ranked
