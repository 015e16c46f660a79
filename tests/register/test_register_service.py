import random
from datetime import datetime, timezone

import pytest

from src.studio_register.studio_register.core.enums import AwardKind, DecidedBy, Mark, PeriodKind
from src.studio_register.studio_register.core.exceptions import NotFoundError, ValidationError
from src.studio_register.studio_register.register.service import RegisterService


def _dt(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


OPENED = _dt(2025, 1, 31, 17, 0)


@pytest.fixture
def ballet(container):
    cls = container.class_service.create("Ballet A", now=_dt(2025, 1, 1))
    amelia = container.student_service.enroll("Amelia Hart", cls.id, joined_at=_dt(2025, 1, 1))
    ben = container.student_service.enroll("Ben Cole", cls.id, joined_at=_dt(2025, 1, 1))
    return cls, amelia, ben


def test_open_register_marks_roster_absent(container, ballet):
    cls, amelia, ben = ballet
    container.student_service.enroll("Future Star", cls.id, joined_at=_dt(2025, 3, 1))

    session = container.register_service.open_session(cls.id, now=OPENED)

    assert session.is_open
    assert session.marks == {amelia.id: Mark.ABSENT, ben.id: Mark.ABSENT}
    assert container.register_service.open_session(cls.id, now=OPENED) == session
    assert container.register_service.open_session_for_class(cls.id) == session


def test_open_register_for_unknown_class(container):
    with pytest.raises(NotFoundError):
        container.register_service.open_session("missing", now=OPENED)


def test_on_time_bonus_is_granted_once_per_register(container, ballet):
    cls, amelia, _ = ballet
    register = container.register_service
    session = register.open_session(cls.id, now=OPENED)

    register.set_mark(session.id, amelia.id, Mark.PRESENT, now=OPENED)
    register.set_mark(session.id, amelia.id, Mark.ABSENT, now=OPENED)
    register.set_mark(session.id, amelia.id, "PRESENT", now=OPENED)

    [grant] = container.points_service.list_for_student(amelia.id)
    assert (grant.reason, grant.points, grant.session_id) == ("On Time", 1, session.id)


def test_late_does_not_earn_on_time_bonus(container, ballet):
    cls, amelia, _ = ballet
    session = container.register_service.open_session(cls.id, now=OPENED)

    container.register_service.set_mark(session.id, amelia.id, Mark.LATE, now=OPENED)

    assert container.points_service.total(amelia.id) == 0


def test_cycle_mark_order(container, ballet):
    cls, amelia, _ = ballet
    register = container.register_service
    session = register.open_session(cls.id, now=OPENED)

    seen = [register.cycle_mark(session.id, amelia.id, now=OPENED).mark_for(amelia.id) for _ in range(4)]

    assert seen == [Mark.PRESENT, Mark.LATE, Mark.EXCUSED, Mark.ABSENT]


def test_unknown_mark_and_student_are_rejected(container, ballet):
    cls, amelia, _ = ballet
    register = container.register_service
    session = register.open_session(cls.id, now=OPENED)
    other = container.class_service.create("Street Dance")
    stranger = container.student_service.enroll("Sam Stone", other.id)

    with pytest.raises(ValidationError):
        register.set_mark(session.id, amelia.id, "SICK", now=OPENED)
    with pytest.raises(NotFoundError):
        register.set_mark(session.id, stranger.id, Mark.PRESENT, now=OPENED)


def test_close_register_unlocks_student_of_month(container, ballet, fixed_now):
    cls, amelia, ben = ballet
    register = container.register_service
    session = register.open_session(cls.id, now=OPENED)
    register.set_mark(session.id, amelia.id, Mark.PRESENT, now=OPENED)
    register.cycle_mark(session.id, ben.id, now=OPENED)

    closed, [award] = register.close_session(session.id, now=fixed_now)

    assert closed.closed_at == fixed_now
    assert award.award_id is AwardKind.STUDENT_OF_MONTH
    assert award.decided_by is DecidedBy.SYSTEM
    assert award.period.kind is PeriodKind.MONTH
    assert award.period.key == "2025-01"
    assert container.student_service.get(award.student_id).name == "Amelia Hart"


def test_closed_register_rejects_changes(container, ballet, fixed_now):
    cls, amelia, _ = ballet
    register = container.register_service
    session = register.open_session(cls.id, now=OPENED)
    register.close_session(session.id, now=fixed_now)

    with pytest.raises(ValidationError, match="closed"):
        register.set_mark(session.id, amelia.id, Mark.PRESENT, now=fixed_now)
    with pytest.raises(ValidationError):
        register.close_session(session.id, now=fixed_now)

    reopened = register.open_session(cls.id, now=fixed_now)
    assert reopened.id != session.id


def test_second_close_in_same_month_does_not_duplicate_award(container, fixed_now):
    solo = container.class_service.create("Solo Jazz", now=_dt(2025, 1, 1))
    cara = container.student_service.enroll("Cara Dunn", solo.id, joined_at=_dt(2025, 1, 1))
    register = container.register_service
    first = register.open_session(solo.id, now=OPENED)
    register.set_mark(first.id, cara.id, Mark.PRESENT, now=OPENED)
    _, awards = register.close_session(first.id, now=OPENED)
    assert [a.student_id for a in awards] == [cara.id]

    second = register.open_session(solo.id, now=fixed_now)
    register.set_mark(second.id, cara.id, Mark.PRESENT, now=fixed_now)
    _, again = register.close_session(second.id, now=fixed_now)

    assert again == []
    assert len(container.awards_service.for_class(solo.id)) == 1


def test_add_missing_marks_only_for_students_who_had_joined(container, ballet):
    cls, _, _ = ballet
    register = container.register_service
    session = register.open_session(cls.id, now=OPENED)
    early = container.student_service.enroll("Cara Dunn", cls.id, joined_at=_dt(2025, 1, 20))
    later = container.student_service.enroll("Dev Ellis", cls.id, joined_at=_dt(2025, 2, 1))

    updated = register.add_missing_marks(session.id, now=OPENED)

    assert updated.mark_for(early.id) is Mark.ABSENT
    assert updated.mark_for(later.id) is None


def test_pick_random_attendee(container, ballet):
    cls, amelia, ben = ballet
    register = container.register_service
    session = register.open_session(cls.id, now=OPENED)

    with pytest.raises(ValidationError):
        register.pick_random_attendee(session.id)

    register.set_mark(session.id, ben.id, Mark.LATE, now=OPENED)
    assert register.pick_random_attendee(session.id) == container.student_service.get(ben.id)


def test_pick_random_attendee_uses_injected_rng(container, ballet):
    cls, amelia, ben = ballet
    service = RegisterService(
        container.sessions_repo,
        container.students_repo,
        container.classes_repo,
        container.points_service,
        container.awards_service,
        rng=random.Random(7),
    )
    session = service.open_session(cls.id, now=OPENED)
    service.set_mark(session.id, amelia.id, Mark.PRESENT, now=OPENED)
    service.set_mark(session.id, ben.id, Mark.PRESENT, now=OPENED)

    picks = {service.pick_random_attendee(session.id).id for _ in range(20)}

    assert picks <= {amelia.id, ben.id}


def test_deleted_register_is_gone(container, ballet):
    cls, _, _ = ballet
    register = container.register_service
    session = register.open_session(cls.id, now=OPENED)

    register.delete_session(session.id, now=OPENED)

    assert register.list_for_class(cls.id) == []
    with pytest.raises(NotFoundError):
        register.get(session.id)


def test_second_close_in_window_keeps_the_period_winner(container, ballet):
    cls, amelia, ben = ballet
    register = container.register_service

    for day in (20, 27):
        session = register.open_session(cls.id, now=_dt(2025, 1, day, 17))
        register.set_mark(session.id, amelia.id, Mark.PRESENT, now=_dt(2025, 1, day, 17, 5))
        register.close_session(session.id, now=_dt(2025, 1, day, 18))

    monthly = [a for a in container.awards_service.for_class(cls.id) if a.award_id is AwardKind.STUDENT_OF_MONTH]
    assert [(a.period.key, a.student_id) for a in monthly] == [("2024-12", amelia.id)]
    assert ben.id not in {a.student_id for a in monthly}
