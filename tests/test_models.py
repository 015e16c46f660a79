from datetime import datetime, timezone

import pytest

from src.studio_register.studio_register.awards.model import AwardPeriod, AwardUnlock
from src.studio_register.studio_register.common.datetime_utils import academic_year_bounds, parse_iso, to_iso
from src.studio_register.studio_register.core.enums import Lifecycle, Mark, PeriodKind
from src.studio_register.studio_register.points.model import PointEvent
from src.studio_register.studio_register.register.model import RegisterSession
from src.studio_register.studio_register.students.model import Student


def _award_row(period_type, period_key):
    return {
        "id": "a1",
        "awardId": "student_of_year",
        "studentId": "s1",
        "classId": "c1",
        "periodType": period_type,
        "periodKey": period_key,
        "unlockedAtISO": "2025-06-01T10:00:00.000Z",
        "decidedBy": "TEACHER",
    }


def test_legacy_period_types_are_migrated():
    assert AwardUnlock.from_dict(_award_row("YEAR", "2024-2025")).period.kind is PeriodKind.ACADEMIC_YEAR
    assert AwardUnlock.from_dict(_award_row("CUSTOM", "a|b")).period.kind is PeriodKind.RANGE

    row = AwardUnlock.from_dict(_award_row("YEAR", "2024-2025")).to_dict()
    assert row["periodType"] == "ACADEMIC_YEAR"


def test_deleted_flag_maps_to_lifecycle():
    student = Student.from_dict({"id": "s1", "name": "Amelia Hart", "classId": "c1", "deleted": True})

    assert student.lifecycle is Lifecycle.DELETED
    assert student.joined_at is None
    assert student.on_roster is False
    assert student.to_dict()["deleted"] is True


def test_unknown_marks_are_dropped():
    session = RegisterSession.from_dict(
        {"id": "r1", "classId": "c1", "startedAtISO": "2025-01-05T17:00:00Z", "marks": {"a": "PRESENT", "b": "SICK"}}
    )
    assert session.marks == {"a": Mark.PRESENT}


def test_point_event_requires_created_at():
    with pytest.raises(ValueError):
        PointEvent.from_dict({"id": "p1", "studentId": "s1", "classId": "c1", "reason": "Focused", "points": 3})


def test_synced_flag_does_not_affect_equality():
    row = {"id": "s1", "name": "Amelia Hart", "classId": "c1", "joinedAtISO": "2025-01-01T00:00:00Z"}
    assert Student.from_dict({**row, "synced": True}) == Student.from_dict({**row, "synced": False})


def test_iso_helpers_normalise_to_utc():
    assert to_iso(parse_iso("2025-01-05T18:00:00+01:00")) == "2025-01-05T17:00:00.000Z"
    assert parse_iso("2025-01-05") == datetime(2025, 1, 5, tzinfo=timezone.utc)
    assert parse_iso("not a date") is None


@pytest.mark.parametrize(
    "now, key",
    [
        (datetime(2024, 9, 1, tzinfo=timezone.utc), "2024-2025"),
        (datetime(2025, 3, 15, tzinfo=timezone.utc), "2024-2025"),
        (datetime(2025, 8, 20, tzinfo=timezone.utc), "2024-2025"),
    ],
)
def test_academic_year_bounds(now, key):
    year = academic_year_bounds(now)

    assert year.key == key
    assert year.start == datetime(2024, 9, 1, tzinfo=timezone.utc)
    assert year.end == datetime(2025, 7, 31, 23, 59, 59, 999000, tzinfo=timezone.utc)


def test_period_labels():
    assert AwardPeriod.month("2025-03").describe() == "Mar 2025"
    assert AwardPeriod.academic_year("2024-2025").describe() == "Academic Year 2024-2025"
    spring = AwardPeriod.range(
        datetime(2025, 3, 1, tzinfo=timezone.utc), datetime(2025, 5, 31, tzinfo=timezone.utc)
    )
    assert spring.describe() == "Mar - May 2025"
