"""Example: drive the service layer without Flask.

Controllers are a thin layer; everything below goes straight to the services
wired by ``build_container``.
"""

import importlib

from config import get_settings_module

from src.studio_register.studio_register.container import build_container
from src.studio_register.studio_register.core.enums import Mark


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings=settings, online=False)

    cls = container.class_service.create("Example Jazz")
    dancer = container.student_service.enroll("Ruby Stone", cls.id)
    session = container.register_service.open_session(cls.id)
    container.register_service.set_mark(session.id, dancer.id, Mark.PRESENT)
    _, awards = container.register_service.close_session(session.id)

    print(container.attendance_service.student_stats(dancer.id).to_dict())
    print([a.to_dict() for a in awards])


if __name__ == "__main__":
    main()
