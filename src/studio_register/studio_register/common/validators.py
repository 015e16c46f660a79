from __future__ import annotations

import re

from ..core.constants import MAX_POINTS_PER_GRANT
from ..core.exceptions import ValidationError

_CLASS_NAME_RE = re.compile(r"^[A-Za-z0-9\s\-&]+$")
_STUDENT_NAME_RE = re.compile(r"^[A-Za-z\s\-']+$")
_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_length(value: str, field_name: str, *, min_len: int, max_len: int) -> str:
    if len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    if len(value) > max_len:
        raise ValidationError(f"{field_name} must be no more than {max_len} characters")
    return value


def sanitize_input(value: str) -> str:
    """Strip angle brackets, collapse whitespace and cap the length at 500."""
    value = (value or "").strip()
    value = re.sub(r"[<>]", "", value)
    value = re.sub(r"\s+", " ", value)
    return value[:500]


def validate_class_name(value: str) -> str:
    name = require_length(require_non_empty(value, "Class name"), "Class name", min_len=2, max_len=30)
    if not _CLASS_NAME_RE.match(name):
        raise ValidationError("Class name can only contain letters, numbers, spaces, hyphens, and ampersands")
    return name


def validate_student_name(value: str) -> str:
    name = require_length(require_non_empty(sanitize_input(value), "Name"), "Name", min_len=2, max_len=50)
    if not _STUDENT_NAME_RE.match(name):
        raise ValidationError("Name can only contain letters, spaces, hyphens, and apostrophes")
    return name


def validate_color(value: str) -> str:
    color = require_non_empty(value, "Color")
    if not color.startswith("#"):
        raise ValidationError("Color must start with #")
    if not _COLOR_RE.match(color):
        raise ValidationError("Color must look like #RRGGBB")
    return color


def validate_reason(value: str) -> str:
    reason = require_non_empty(sanitize_input(value), "Reason")
    return require_length(reason, "Reason", min_len=2, max_len=100)


def validate_points(value: object) -> int:
    if isinstance(value, bool):
        raise ValidationError("Must be a valid number")
    try:
        points = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError("Must be a valid number")
    if points < 0:
        raise ValidationError("Points cannot be negative")
    if points > MAX_POINTS_PER_GRANT:
        raise ValidationError(f"Points cannot exceed {MAX_POINTS_PER_GRANT}")
    return points
