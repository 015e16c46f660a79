from datetime import datetime, timezone

import pytest

from src.studio_register.studio_register.common.datetime_utils import to_iso
from src.studio_register.studio_register.core.enums import AwardKind, DecidedBy, Mark, PeriodKind
from src.studio_register.studio_register.core.exceptions import NotFoundError, ValidationError
from src.studio_register.studio_register.register.model import RegisterSession


def _dt(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


JAN_START = _dt(2025, 1, 1)
JAN_END = _dt(2025, 1, 31, 23, 59, 59)


@pytest.fixture
def studio(container):
    ballet = container.class_service.create("Ballet A", now=JAN_START)
    amelia = container.student_service.enroll("Amelia Hart", ballet.id, joined_at=JAN_START, now=JAN_START)
    ben = container.student_service.enroll("Ben Cole", ballet.id, joined_at=JAN_START, now=JAN_START)
    sessions = [
        RegisterSession(
            id=f"r{i}",
            class_id=ballet.id,
            started_at=_dt(2025, 1, day, 17),
            closed_at=_dt(2025, 1, day, 18),
            marks={amelia.id: Mark.PRESENT, ben.id: Mark.PRESENT if i % 2 else Mark.ABSENT},
        )
        for i, day in enumerate((5, 12, 19, 26))
    ]
    container.sessions_repo.save_all(sessions)
    return container, ballet, amelia, ben


def test_manual_student_of_month_is_teacher_range_award(studio, fixed_now):
    container, ballet, amelia, _ = studio
    service = container.awards_service

    unlock = service.award(AwardKind.STUDENT_OF_MONTH, ballet.id, start=JAN_START, end=JAN_END, now=fixed_now)

    assert unlock.student_id == amelia.id
    assert unlock.decided_by is DecidedBy.TEACHER
    assert unlock.period.kind is PeriodKind.RANGE
    assert unlock.period.key == f"{to_iso(JAN_START)}|{to_iso(JAN_END)}"
    assert service.list_active() == [unlock]

    meta = service.awards_meta(ballet.id)
    assert meta.last_requested_at == fixed_now
    assert meta.last_winner_student_id == amelia.id


def test_next_month_window_starts_where_last_request_ended(studio, fixed_now):
    container, ballet, amelia, ben = studio
    service = container.awards_service
    service.award(AwardKind.STUDENT_OF_MONTH, ballet.id, start=JAN_START, end=JAN_END, now=fixed_now)

    window = service.month_window(ballet.id, start=JAN_START, end=_dt(2025, 2, 28))
    assert window.start == fixed_now

    ranked = service.evaluate_student_of_month(ballet.id, end=_dt(2025, 2, 28), now=_dt(2025, 2, 28))
    assert ranked[0].student.id == ben.id


def test_month_window_rejects_inverted_range(studio):
    container, ballet, _, _ = studio

    with pytest.raises(ValidationError):
        container.awards_service.month_window(ballet.id, start=JAN_END, end=JAN_START)


def test_teacher_can_pick_a_different_student(studio, fixed_now):
    container, ballet, _, ben = studio

    unlock = container.awards_service.award(
        AwardKind.STUDENT_OF_MONTH, ballet.id, ben.id, start=JAN_START, end=JAN_END, now=fixed_now
    )

    assert unlock.student_id == ben.id
    assert container.awards_service.awards_meta(ballet.id).last_winner_student_id == ben.id


def test_unknown_student_override_is_rejected(studio, fixed_now):
    container, ballet, _, _ = studio

    with pytest.raises(NotFoundError):
        container.awards_service.award(AwardKind.STUDENT_OF_YEAR, ballet.id, "nobody", now=fixed_now)


def test_duplicate_yearly_award_is_skipped(studio, fixed_now):
    container, ballet, amelia, _ = studio
    service = container.awards_service

    first = service.award(AwardKind.MOST_IMPROVED, ballet.id, amelia.id, now=fixed_now)
    second = service.award(AwardKind.MOST_IMPROVED, ballet.id, amelia.id, now=fixed_now)

    assert first.period.kind is PeriodKind.ACADEMIC_YEAR
    assert first.period.key == "2024-2025"
    assert second is None
    assert len(service.for_student(amelia.id)) == 1


def test_candidates_for_unknown_class(studio):
    container, _, _, _ = studio

    with pytest.raises(NotFoundError):
        container.awards_service.candidates(AwardKind.STUDENT_OF_YEAR, "missing")


def test_queries_and_labels(studio, fixed_now):
    container, ballet, amelia, _ = studio
    service = container.awards_service
    yearly = service.award(AwardKind.STUDENT_OF_YEAR, ballet.id, now=fixed_now)

    assert yearly.student_id == amelia.id
    assert service.for_class(ballet.id) == [yearly]
    assert service.for_period("2024-2025") == [yearly]
    assert service.latest_by_type(ballet.id) == {AwardKind.STUDENT_OF_YEAR: yearly}
    assert service.award_name(yearly) == "Student of the Year"
    assert service.describe_period(yearly) == "Academic Year 2024-2025"


def test_periodic_run_demotes_last_manual_winner(studio, fixed_now):
    container, ballet, amelia, ben = studio
    service = container.awards_service
    service.award(AwardKind.STUDENT_OF_MONTH, ballet.id, start=JAN_START, end=JAN_END, now=fixed_now)

    created = service.run_periodic_awards(now=fixed_now)

    [monthly] = [a for a in created if a.award_id is AwardKind.STUDENT_OF_MONTH]
    assert monthly.student_id == ben.id
    assert monthly.period.key == "2025-01"
