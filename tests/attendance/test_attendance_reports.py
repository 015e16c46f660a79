from datetime import datetime, timezone

import pytest

from src.studio_register.studio_register.core.enums import Mark
from src.studio_register.studio_register.core.exceptions import NotFoundError
from src.studio_register.studio_register.register.model import RegisterSession


def _dt(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def ballet(container):
    cls = container.class_service.create("Ballet A")
    amelia = container.student_service.enroll("Amelia Hart", cls.id, joined_at=_dt(2025, 1, 1))
    ben = container.student_service.enroll("Ben Cole", cls.id, joined_at=_dt(2025, 1, 1))
    container.sessions_repo.save_all([
        RegisterSession(
            id="r1", class_id=cls.id, started_at=_dt(2025, 1, 5, 17),
            marks={amelia.id: Mark.PRESENT, ben.id: Mark.ABSENT},
        ),
        RegisterSession(
            id="r2", class_id=cls.id, started_at=_dt(2025, 1, 12, 17),
            marks={amelia.id: Mark.ABSENT, ben.id: Mark.LATE},
        ),
        RegisterSession(
            id="r3", class_id=cls.id, started_at=_dt(2025, 1, 19, 17),
            marks={amelia.id: Mark.EXCUSED, ben.id: Mark.PRESENT},
        ),
    ])
    container.points_service.grant(amelia.id, cls.id, "Focused", 3, now=_dt(2025, 1, 5, 17, 30))
    return cls, amelia, ben


def test_student_stats(container, ballet):
    _, amelia, ben = ballet
    reports = container.attendance_service

    assert reports.student_stats(amelia.id).to_dict() == {"attended": 1, "counted": 2, "percentage": 50.0}
    assert reports.student_stats(ben.id, _dt(2025, 1, 10), _dt(2025, 1, 31)).percentage == 100.0

    with pytest.raises(NotFoundError):
        reports.student_stats("missing")


def test_leaderboard_orders_by_attendance(container, ballet):
    cls, amelia, ben = ballet

    rows = container.attendance_service.leaderboard(cls.id)

    assert [r.student_id for r in rows] == [ben.id, amelia.id]
    assert rows[0].to_dict()["percentage"] == pytest.approx(66.7)
    assert set(container.attendance_service.roster_percentages(cls.id)) == {amelia.id, ben.id}


def test_dashboard_counts(container, ballet):
    dashboard = container.attendance_service.dashboard()

    assert dashboard == {"averageAttendance": 60, "activeStudents": 2, "totalRegisters": 3, "totalClasses": 1}


def test_student_profile(container, ballet):
    _, amelia, _ = ballet

    profile = container.attendance_service.student_profile(amelia.id)

    assert profile["className"] == "Ballet A"
    assert profile["pointsTotal"] == 3
    assert profile["pointsByReason"] == {"Focused": 3}
    assert [row["sessionId"] for row in profile["history"]] == ["r3", "r2", "r1"]
    assert profile["history"][0]["mark"] == "EXCUSED"
