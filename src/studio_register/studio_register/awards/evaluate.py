"""Pure award evaluation over an ``AwardSnapshot``.

Nothing here reads the clock or touches storage; callers pass ``now`` and
persist whatever is returned.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Mapping, Optional, Sequence

from ..common.datetime_utils import academic_year_bounds, month_key
from ..common.ids import new_id
from ..common.records import active
from ..core.constants import DEFAULT_TRAILING_AWARD_DAYS
from ..core.enums import AwardKind, DecidedBy
from .evaluators.base import EvaluationWindow
from .factory import AwardEvaluatorFactory
from .model import AwardCandidate, AwardPeriod, AwardSnapshot, AwardUnlock

logger = logging.getLogger(__name__)

_evaluators = AwardEvaluatorFactory()


def evaluate_student_of_month(
    snapshot: AwardSnapshot,
    class_id: str,
    start: datetime,
    end: datetime,
    *,
    previous_winner_id: Optional[str] = None,
) -> List[AwardCandidate]:
    evaluator = _evaluators.for_award(AwardKind.STUDENT_OF_MONTH)
    return evaluator.rank(snapshot, class_id, EvaluationWindow(start, end), previous_winner_id=previous_winner_id)


def evaluate_most_improved(snapshot: AwardSnapshot, class_id: str, now: datetime) -> List[AwardCandidate]:
    year = academic_year_bounds(now)
    return _evaluators.for_award(AwardKind.MOST_IMPROVED).rank(snapshot, class_id, EvaluationWindow(year.start, year.end))


def evaluate_student_of_year(snapshot: AwardSnapshot, class_id: str, now: datetime) -> List[AwardCandidate]:
    year = academic_year_bounds(now)
    return _evaluators.for_award(AwardKind.STUDENT_OF_YEAR).rank(snapshot, class_id, EvaluationWindow(year.start, year.end))


def award_exists(awards: Iterable[AwardUnlock], award_id: AwardKind, student_id: str, period_key: str) -> bool:
    key = (award_id.value, student_id, period_key)
    return any(a.dedupe_key == key for a in active(awards))


def previous_winner(
    awards: Iterable[AwardUnlock],
    class_id: str,
    *,
    exclude_period_key: Optional[str] = None,
) -> Optional[str]:
    """Student id of the most recent Student of the Month for the class.

    Awards filed under ``exclude_period_key`` are ignored, so the period being
    evaluated never demotes its own winner.
    """
    latest: Optional[AwardUnlock] = None
    for a in active(awards):
        if a.class_id != class_id or a.award_id is not AwardKind.STUDENT_OF_MONTH:
            continue
        if exclude_period_key is not None and a.period.key == exclude_period_key:
            continue
        if latest is None or a.unlocked_at > latest.unlocked_at:
            latest = a
    return latest.student_id if latest else None


def holds_period_award(awards: Iterable[AwardUnlock], award_id: AwardKind, class_id: str, period_key: str) -> bool:
    """True when the class already has an active ``award_id`` for ``period_key``, whoever won it."""
    return any(
        a.award_id is award_id and a.class_id == class_id and a.period.key == period_key for a in active(awards)
    )


def month_period(now: datetime, trailing_days: int = DEFAULT_TRAILING_AWARD_DAYS) -> AwardPeriod:
    """Automatic Student of the Month period: the calendar month the trailing window starts in."""
    return AwardPeriod.month(month_key(now - timedelta(days=trailing_days)))


def build_unlock(
    award_id: AwardKind,
    student_id: str,
    class_id: str,
    period: AwardPeriod,
    now: datetime,
    decided_by: DecidedBy,
) -> AwardUnlock:
    return AwardUnlock(
        id=new_id("award"),
        award_id=award_id,
        student_id=student_id,
        class_id=class_id,
        period=period,
        unlocked_at=now,
        decided_by=decided_by,
        updated_at=now,
    )


def _auto_unlock(
    award_id: AwardKind,
    ranked: Sequence[AwardCandidate],
    class_id: str,
    period: AwardPeriod,
    now: datetime,
    seen: List[AwardUnlock],
) -> Optional[AwardUnlock]:
    if not ranked:
        return None
    winner = ranked[0]
    if award_exists(seen, award_id, winner.student.id, period.key):
        return None
    unlock = build_unlock(award_id, winner.student.id, class_id, period, now, DecidedBy.SYSTEM)
    seen.append(unlock)
    return unlock


def awards_on_register_close(
    class_id: str,
    snapshot: AwardSnapshot,
    now: datetime,
    *,
    trailing_days: int = DEFAULT_TRAILING_AWARD_DAYS,
    fallback_winner_id: Optional[str] = None,
) -> List[AwardUnlock]:
    """Student of the Month over the trailing window ending ``now``, if the class has none for the period yet.

    The anti-repeat rule uses the class's winner from an earlier period, or
    ``fallback_winner_id`` when no earlier award is on record.
    """
    start = now - timedelta(days=trailing_days)
    period = month_period(now, trailing_days)
    if holds_period_award(snapshot.awards, AwardKind.STUDENT_OF_MONTH, class_id, period.key):
        return []

    prev = previous_winner(snapshot.awards, class_id, exclude_period_key=period.key) or fallback_winner_id
    ranked = evaluate_student_of_month(snapshot, class_id, start, now, previous_winner_id=prev)
    seen = list(snapshot.awards)
    unlock = _auto_unlock(AwardKind.STUDENT_OF_MONTH, ranked, class_id, period, now, seen)
    return [unlock] if unlock else []


def run_periodic_awards(
    snapshot: AwardSnapshot,
    now: datetime,
    *,
    trailing_days: int = DEFAULT_TRAILING_AWARD_DAYS,
    fallback_winners: Optional[Mapping[str, str]] = None,
) -> List[AwardUnlock]:
    """All three awards for every class with students, checked against persisted and same-batch awards.

    ``fallback_winners`` maps class id to a last Student of the Month winner,
    used when the awards hold no earlier-period winner for that class.
    """
    start = now - timedelta(days=trailing_days)
    year = academic_year_bounds(now)
    month = month_period(now, trailing_days)
    year_period = AwardPeriod.academic_year(year.key)
    fallback_winners = fallback_winners or {}

    class_ids = list(dict.fromkeys(s.class_id for s in active(snapshot.students)))
    seen = list(snapshot.awards)
    created: List[AwardUnlock] = []
    for class_id in class_ids:
        runs = []
        if not holds_period_award(seen, AwardKind.STUDENT_OF_MONTH, class_id, month.key):
            prev = previous_winner(seen, class_id, exclude_period_key=month.key) or fallback_winners.get(class_id)
            ranked = evaluate_student_of_month(snapshot, class_id, start, now, previous_winner_id=prev)
            runs.append((AwardKind.STUDENT_OF_MONTH, ranked, month))
        runs.append((AwardKind.MOST_IMPROVED, evaluate_most_improved(snapshot, class_id, now), year_period))
        runs.append((AwardKind.STUDENT_OF_YEAR, evaluate_student_of_year(snapshot, class_id, now), year_period))

        for award_id, ranked, period in runs:
            unlock = _auto_unlock(award_id, ranked, class_id, period, now, seen)
            if unlock:
                created.append(unlock)

    logger.debug("Periodic awards produced %d unlock(s) across %d class(es)", len(created), len(class_ids))
    return created
