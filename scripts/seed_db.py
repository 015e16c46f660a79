"""Seed a demo studio into the local store.

Creates two classes with a handful of dancers, a few weeks of closed
registers and some point grants, so the awards pages have something to rank.
"""
from __future__ import annotations

import importlib
import sys
from datetime import timedelta
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.studio_register.studio_register.common.datetime_utils import now_utc
from src.studio_register.studio_register.container import build_container
from src.studio_register.studio_register.core.enums import Mark

DEMO = {
    "Ballet A": ["Amelia Hart", "Isla Brooks", "Freya Lane", "Poppy Reed"],
    "Street Dance": ["Leo Grant", "Maya Cole", "Noah Finch"],
}

_MARK_CYCLE = (Mark.PRESENT, Mark.PRESENT, Mark.LATE, Mark.ABSENT, Mark.PRESENT, Mark.EXCUSED)


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings=settings)
    now = now_utc()
    start = now - timedelta(weeks=6)

    for class_name, names in DEMO.items():
        existing = [c for c in container.class_service.list_active() if c.name.casefold() == class_name.casefold()]
        if existing:
            print(f"skip: {class_name} already exists")
            continue

        cls = container.class_service.create(class_name, now=start)
        students = [container.student_service.enroll(n, cls.id, joined_at=start, now=start) for n in names]

        for week in range(6):
            when = start + timedelta(weeks=week, hours=1)
            session = container.register_service.open_session(cls.id, now=when)
            for i, st in enumerate(students):
                mark = _MARK_CYCLE[(i + week) % len(_MARK_CYCLE)]
                container.register_service.set_mark(session.id, st.id, mark, now=when)
            container.register_service.close_session(session.id, now=when + timedelta(hours=1))

        for i, st in enumerate(students):
            preset = ("practice", "trying", "listening", "impress")[i % 4]
            container.points_service.grant_preset(preset, st.id, cls.id, now=now - timedelta(days=i))

        print(f"OK: seeded {class_name} ({len(students)} students, 6 registers)")

    if container.sync_manager.is_online:
        container.sync_manager.sync_to_cloud()


if __name__ == "__main__":
    main()
