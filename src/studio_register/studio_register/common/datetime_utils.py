from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

from ..core.constants import ACADEMIC_YEAR_END_MONTH, ACADEMIC_YEAR_START_MONTH


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def parse_iso(value: object) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Returns None for empty or unparseable input. Naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def start_of_day(d: date) -> datetime:
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


def end_of_day(d: date) -> datetime:
    return datetime.combine(d, time.max, tzinfo=timezone.utc)


def in_range(value: datetime, start: datetime, end: datetime) -> bool:
    """Inclusive on both bounds."""
    return start <= value <= end


def days_between(start: datetime, value: datetime) -> float:
    return (value - start).total_seconds() / 86400.0


def month_key(value: datetime) -> str:
    return f"{value.year:04d}-{value.month:02d}"


@dataclass(frozen=True)
class AcademicYear:
    start: datetime
    end: datetime
    key: str


def academic_year_bounds(now: datetime) -> AcademicYear:
    """Sep 1 00:00 through Jul 31 23:59:59.999 around ``now``.

    January through August belong to the year that started the previous
    September, so August still maps to the academic year that just ended.
    """
    start_year = now.year if now.month >= ACADEMIC_YEAR_START_MONTH else now.year - 1
    start = datetime(start_year, ACADEMIC_YEAR_START_MONTH, 1, tzinfo=timezone.utc)
    end = datetime(start_year + 1, ACADEMIC_YEAR_END_MONTH, 31, tzinfo=timezone.utc) + timedelta(days=1, milliseconds=-1)
    return AcademicYear(start=start, end=end, key=f"{start_year}-{start_year + 1}")
