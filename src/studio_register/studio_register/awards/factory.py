from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from ..core.enums import AwardKind
from ..core.exceptions import ValidationError
from .evaluators.base import AwardEvaluator
from .evaluators.most_improved import MostImprovedEvaluator
from .evaluators.student_of_month import StudentOfMonthEvaluator
from .evaluators.student_of_year import StudentOfYearEvaluator


def _default_evaluators() -> Dict[AwardKind, AwardEvaluator]:
    return {
        AwardKind.STUDENT_OF_MONTH: StudentOfMonthEvaluator(),
        AwardKind.MOST_IMPROVED: MostImprovedEvaluator(),
        AwardKind.STUDENT_OF_YEAR: StudentOfYearEvaluator(),
    }


@dataclass
class AwardEvaluatorFactory:
    """Factory Pattern: pick the ranking strategy for an award id."""

    evaluators: Dict[AwardKind, AwardEvaluator] = field(default_factory=_default_evaluators)

    def for_award(self, award_id: AwardKind | str) -> AwardEvaluator:
        try:
            kind = AwardKind(award_id)
        except ValueError:
            raise ValidationError(f"Unknown award: {award_id}")
        return self.evaluators[kind]
