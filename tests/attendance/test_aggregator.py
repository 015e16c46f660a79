from datetime import datetime, timezone

from src.studio_register.studio_register.attendance.aggregator import compute_attendance_stats
from src.studio_register.studio_register.core.enums import Lifecycle, Mark
from src.studio_register.studio_register.register.model import RegisterSession
from src.studio_register.studio_register.students.model import Student


def _dt(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def _session(session_id, day, marks, class_id="c1", **kwargs):
    return RegisterSession(id=session_id, class_id=class_id, started_at=_dt(2025, 1, day, 17, 0), marks=marks, **kwargs)


JAN_START = _dt(2025, 1, 1)
JAN_END = _dt(2025, 1, 31, 23, 59, 59)


def test_ballet_january_attendance():
    student = Student(id="x", name="Amelia Hart", class_id="c1", joined_at=_dt(2025, 1, 1))
    sessions = [
        _session("r1", 5, {"x": Mark.PRESENT}),
        _session("r2", 12, {"x": Mark.ABSENT}),
        _session("r3", 19, {"x": Mark.EXCUSED}),
    ]

    stats = compute_attendance_stats(student, sessions, JAN_START, JAN_END)

    assert (stats.attended, stats.counted) == (1, 2)
    assert stats.percentage == 50.0


def test_excused_marks_never_change_the_counts():
    student = Student(id="x", name="Amelia Hart", class_id="c1", joined_at=_dt(2025, 1, 1))
    sessions = [_session("r1", 5, {"x": Mark.LATE}), _session("r2", 12, {"x": Mark.ABSENT})]
    before = compute_attendance_stats(student, sessions)

    after = compute_attendance_stats(student, sessions + [_session("r3", 19, {"x": Mark.EXCUSED})])

    assert after == before


def test_sessions_before_joining_without_mark_are_ignored():
    student = Student(id="x", name="Late Joiner", class_id="c1", joined_at=_dt(2025, 2, 1))
    sessions = [_session("r1", 5, {}), _session("r2", 12, {"other": Mark.PRESENT})]

    stats = compute_attendance_stats(student, sessions)

    assert (stats.attended, stats.counted) == (0, 0)
    assert stats.ratio == 0.0
    assert stats.percentage == 0.0


def test_mark_before_joining_still_counts():
    student = Student(id="x", name="Early Bird", class_id="c1", joined_at=_dt(2025, 1, 20))
    sessions = [_session("r1", 5, {"x": Mark.PRESENT}), _session("r2", 26, {"x": Mark.ABSENT})]

    stats = compute_attendance_stats(student, sessions)

    assert (stats.attended, stats.counted) == (1, 2)


def test_unknown_join_date_only_counts_marked_sessions():
    student = Student(id="x", name="No Date", class_id="c1", joined_at=None)
    sessions = [_session("r1", 5, {}), _session("r2", 12, {"x": Mark.LATE})]

    stats = compute_attendance_stats(student, sessions)

    assert (stats.attended, stats.counted) == (1, 1)


def test_other_classes_and_deleted_sessions_are_ignored():
    student = Student(id="x", name="Amelia Hart", class_id="c1", joined_at=_dt(2025, 1, 1))
    sessions = [
        _session("r1", 5, {"x": Mark.PRESENT}),
        _session("r2", 6, {"x": Mark.ABSENT}, class_id="c2"),
        _session("r3", 12, {"x": Mark.ABSENT}, lifecycle=Lifecycle.DELETED),
    ]

    stats = compute_attendance_stats(student, sessions)

    assert stats.to_dict() == {"attended": 1, "counted": 1, "percentage": 100.0}
