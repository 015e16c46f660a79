from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from ..classes.model import DanceClass
from ..common.datetime_utils import academic_year_bounds, now_utc
from ..common.records import active, find
from ..core.constants import DEFAULT_TRAILING_AWARD_DAYS
from ..core.enums import AwardKind, DecidedBy
from ..core.exceptions import NotFoundError, ValidationError
from ..points.model import PointEvent
from ..register.model import RegisterSession
from ..storage.repository import CollectionRepository
from ..students.model import Student
from .definitions import AWARD_DEFINITIONS, get_award_definition
from .evaluate import (
    award_exists,
    awards_on_register_close,
    build_unlock,
    previous_winner,
    run_periodic_awards,
)
from .evaluators.base import EvaluationWindow
from .factory import AwardEvaluatorFactory
from .meta_store import AwardsMetaStore
from .model import AwardCandidate, AwardDefinition, AwardPeriod, AwardSnapshot, AwardUnlock, ClassAwardsMeta

logger = logging.getLogger(__name__)


class AwardsService:
    def __init__(
        self,
        awards: CollectionRepository[AwardUnlock],
        students: CollectionRepository[Student],
        sessions: CollectionRepository[RegisterSession],
        points: CollectionRepository[PointEvent],
        classes: CollectionRepository[DanceClass],
        meta: AwardsMetaStore,
        *,
        evaluator_factory: AwardEvaluatorFactory | None = None,
        trailing_days: int = DEFAULT_TRAILING_AWARD_DAYS,
    ):
        self._awards = awards
        self._students = students
        self._sessions = sessions
        self._points = points
        self._classes = classes
        self._meta = meta
        self._factory = evaluator_factory or AwardEvaluatorFactory()
        self._trailing_days = int(trailing_days)

    def definitions(self) -> tuple[AwardDefinition, ...]:
        return AWARD_DEFINITIONS

    def snapshot(self) -> AwardSnapshot:
        return AwardSnapshot(
            students=active(self._students.list_all()),
            sessions=active(self._sessions.list_all()),
            points=active(self._points.list_all()),
            awards=active(self._awards.list_all()),
            classes=active(self._classes.list_all()),
        )

    def _require_class(self, class_id: str) -> DanceClass:
        cls = find(active(self._classes.list_all()), class_id)
        if not cls:
            raise NotFoundError("Class not found")
        return cls

    def _previous_winner(self, class_id: str, snapshot: AwardSnapshot, period_key: str) -> Optional[str]:
        """Last Student of the Month winner from an earlier period, else the one kept in awards meta."""
        earlier = previous_winner(snapshot.awards, class_id, exclude_period_key=period_key)
        return earlier or self._meta.get(class_id).last_winner_student_id

    # ---- evaluation (read only) ----

    def month_window(
        self,
        class_id: str,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> EvaluationWindow:
        """Manual Student of the Month range: picks up where the last request left off."""
        now = now or now_utc()
        meta = self._meta.get(class_id)
        effective_end = end or now
        effective_start = meta.last_requested_at or start or (effective_end - timedelta(days=self._trailing_days))
        if effective_start > effective_end:
            raise ValidationError("Start date must be before end date")
        return EvaluationWindow(effective_start, effective_end)

    def candidates(
        self,
        award_id: AwardKind | str,
        class_id: str,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> tuple[List[AwardCandidate], AwardPeriod]:
        """Ranked suggestions plus the period a manual award would be filed under."""
        now = now or now_utc()
        self._require_class(class_id)
        evaluator = self._factory.for_award(award_id)
        snapshot = self.snapshot()

        if evaluator.award_id is AwardKind.STUDENT_OF_MONTH:
            window = self.month_window(class_id, start=start, end=end, now=now)
            period = AwardPeriod.range(window.start, window.end)
            prev = self._previous_winner(class_id, snapshot, period.key)
            return evaluator.rank(snapshot, class_id, window, previous_winner_id=prev), period

        year = academic_year_bounds(now)
        ranked = evaluator.rank(snapshot, class_id, EvaluationWindow(year.start, year.end))
        return ranked, AwardPeriod.academic_year(year.key)

    def evaluate_student_of_month(self, class_id: str, **kwargs) -> List[AwardCandidate]:
        return self.candidates(AwardKind.STUDENT_OF_MONTH, class_id, **kwargs)[0]

    def evaluate_most_improved(self, class_id: str, *, now: Optional[datetime] = None) -> List[AwardCandidate]:
        return self.candidates(AwardKind.MOST_IMPROVED, class_id, now=now)[0]

    def evaluate_student_of_year(self, class_id: str, *, now: Optional[datetime] = None) -> List[AwardCandidate]:
        return self.candidates(AwardKind.STUDENT_OF_YEAR, class_id, now=now)[0]

    # ---- unlocking ----

    def _persist(self, created: List[AwardUnlock]) -> None:
        if not created:
            return
        self._awards.save_all([*self._awards.list_all(), *created])
        for a in created:
            logger.info(
                "Award unlocked: %s for student %s in class %s (%s, %s)",
                a.award_id.value, a.student_id, a.class_id, a.period.key, a.decided_by.value,
            )

    def on_register_close(self, class_id: str, *, now: Optional[datetime] = None) -> List[AwardUnlock]:
        now = now or now_utc()
        created = awards_on_register_close(
            class_id,
            self.snapshot(),
            now,
            trailing_days=self._trailing_days,
            fallback_winner_id=self._meta.get(class_id).last_winner_student_id,
        )
        self._persist(created)
        return created

    def run_periodic_awards(self, *, now: Optional[datetime] = None) -> List[AwardUnlock]:
        now = now or now_utc()
        snapshot = self.snapshot()
        fallback: Dict[str, str] = {}
        for class_id in {s.class_id for s in snapshot.students}:
            winner = self._meta.get(class_id).last_winner_student_id
            if winner:
                fallback[class_id] = winner
        created = run_periodic_awards(snapshot, now, trailing_days=self._trailing_days, fallback_winners=fallback)
        self._persist(created)
        return created

    def award(
        self,
        award_id: AwardKind | str,
        class_id: str,
        student_id: Optional[str] = None,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> Optional[AwardUnlock]:
        """Teacher-decided award. ``student_id`` overrides the suggested winner.

        Returns None when the same award already exists for that student and period.
        """
        now = now or now_utc()
        kind = self._factory.for_award(award_id).award_id
        ranked, period = self.candidates(kind, class_id, start=start, end=end, now=now)

        if student_id:
            student = find(active(self._students.list_all()), student_id)
            if not student or student.class_id != class_id or not student.on_roster:
                raise NotFoundError("Student not found in this class")
            winner_id = student.id
        elif ranked:
            winner_id = ranked[0].student.id
        else:
            raise ValidationError("No eligible students for this award")

        if award_exists(self._awards.list_all(), kind, winner_id, period.key):
            logger.info("Skipping duplicate %s for student %s (%s)", kind.value, winner_id, period.key)
            return None

        unlock = build_unlock(kind, winner_id, class_id, period, now, DecidedBy.TEACHER)
        self._persist([unlock])
        if kind is AwardKind.STUDENT_OF_MONTH:
            self._meta.set(class_id, ClassAwardsMeta(last_requested_at=now, last_winner_student_id=winner_id))
        return unlock

    def awards_meta(self, class_id: str) -> ClassAwardsMeta:
        return self._meta.get(class_id)

    # ---- queries ----

    def list_active(self) -> List[AwardUnlock]:
        return sorted(active(self._awards.list_all()), key=lambda a: a.unlocked_at, reverse=True)

    def for_student(self, student_id: str) -> List[AwardUnlock]:
        return [a for a in self.list_active() if a.student_id == student_id]

    def for_class(self, class_id: str) -> List[AwardUnlock]:
        return [a for a in self.list_active() if a.class_id == class_id]

    def for_period(self, period_key: str) -> List[AwardUnlock]:
        return [a for a in self.list_active() if a.period.key == period_key]

    def latest_by_type(self, class_id: Optional[str] = None) -> Dict[AwardKind, AwardUnlock]:
        latest: Dict[AwardKind, AwardUnlock] = {}
        for a in self.list_active():
            if class_id is not None and a.class_id != class_id:
                continue
            latest.setdefault(a.award_id, a)
        return latest

    @staticmethod
    def describe_period(award: AwardUnlock) -> str:
        return award.period.describe()

    @staticmethod
    def award_name(award: AwardUnlock) -> str:
        definition = get_award_definition(award.award_id)
        return definition.name if definition else award.award_id.value
