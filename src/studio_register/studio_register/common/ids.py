from __future__ import annotations

import uuid
from typing import Optional


def new_id(prefix: Optional[str] = None) -> str:
    raw = str(uuid.uuid4())
    return f"{prefix}_{raw}" if prefix else raw
