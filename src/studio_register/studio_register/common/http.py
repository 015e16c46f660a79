from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from flask import request

from ..core.exceptions import ValidationError
from .datetime_utils import end_of_day, parse_iso, parse_iso_date


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def optional_datetime(value: Any, field_name: str, *, inclusive_end: bool = False) -> Optional[datetime]:
    """Parse an optional query or body timestamp.

    With ``inclusive_end`` a bare YYYY-MM-DD covers the whole day.
    """
    if value in (None, ""):
        return None
    if inclusive_end and isinstance(value, str) and len(value.strip()) == 10:
        try:
            return end_of_day(parse_iso_date(value.strip()))
        except ValueError:
            raise ValidationError(f"{field_name} must be an ISO-8601 date or timestamp") from None
    parsed = parse_iso(value)
    if parsed is None:
        raise ValidationError(f"{field_name} must be an ISO-8601 date or timestamp")
    return parsed
