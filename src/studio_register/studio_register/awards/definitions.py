from __future__ import annotations

from typing import Optional

from ..core.enums import AwardCategory, AwardKind
from .model import AwardDefinition

AWARD_DEFINITIONS: tuple[AwardDefinition, ...] = (
    AwardDefinition(
        id=AwardKind.STUDENT_OF_MONTH,
        name="Student of the Month",
        description="Outstanding attendance and participation in a given month",
        category=AwardCategory.MONTHLY_BADGE,
    ),
    AwardDefinition(
        id=AwardKind.MOST_IMPROVED,
        name="Most Improved",
        description="Greatest improvement in attendance over the academic year",
        category=AwardCategory.MAJOR,
    ),
    AwardDefinition(
        id=AwardKind.STUDENT_OF_YEAR,
        name="Student of the Year",
        description="Overall top performer for the academic year",
        category=AwardCategory.MAJOR,
    ),
)


def get_award_definition(award_id: AwardKind | str) -> Optional[AwardDefinition]:
    for definition in AWARD_DEFINITIONS:
        if definition.id == award_id:
            return definition
    return None
