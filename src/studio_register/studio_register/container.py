from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from .attendance.service import AttendanceService
from .awards.factory import AwardEvaluatorFactory
from .awards.meta_store import AwardsMetaStore
from .awards.service import AwardsService
from .classes.service import ClassService
from .common.datetime_utils import now_utc
from .core.constants import DEFAULT_STORAGE_PREFIX, DEFAULT_TRAILING_AWARD_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .points.service import PointsService
from .register.service import RegisterService
from .storage.local_store import JsonFileStore, LocalStore, MemoryStore
from .students.service import StudentService
from .sync.collections import AWARDS, CLASSES, POINTS, SESSIONS, STUDENTS
from .sync.manager import SyncedRepository, SyncManager
from .sync.mysql_remote_store import MySQLRemoteStore
from .sync.remote_store import RemoteStore


@dataclass(frozen=True)
class Container:
    local_store: LocalStore
    remote_store: Optional[RemoteStore]
    sync_manager: SyncManager

    classes_repo: SyncedRepository
    students_repo: SyncedRepository
    sessions_repo: SyncedRepository
    points_repo: SyncedRepository
    awards_repo: SyncedRepository
    awards_meta: AwardsMetaStore

    class_service: ClassService
    student_service: StudentService
    points_service: PointsService
    awards_service: AwardsService
    register_service: RegisterService
    attendance_service: AttendanceService


def _build_local_store(settings: Any) -> LocalStore:
    if getattr(settings, "LOCAL_STORE", "file") == "memory":
        return MemoryStore()
    return JsonFileStore(getattr(settings, "DATA_DIR", "data"))


def _build_remote_store(settings: Any) -> Optional[RemoteStore]:
    if not bool(getattr(settings, "SYNC_ENABLED", False)):
        return None
    config = DBConfig.from_mapping(getattr(settings, "REMOTE_DB_CONFIG"))
    return MySQLRemoteStore(DatabaseConnection(config))


def build_container(
    *,
    settings: Any,
    local_store: Optional[LocalStore] = None,
    remote_store: Optional[RemoteStore] = None,
    online: bool = True,
    clock: Callable[[], datetime] = now_utc,
) -> Container:
    """Wire every adapter and service once.

    ``local_store``/``remote_store`` override what ``settings`` would build.
    """
    prefix = getattr(settings, "STORAGE_PREFIX", DEFAULT_STORAGE_PREFIX)
    trailing_days = int(getattr(settings, "TRAILING_AWARD_DAYS", DEFAULT_TRAILING_AWARD_DAYS))

    local_store = local_store if local_store is not None else _build_local_store(settings)
    remote_store = remote_store if remote_store is not None else _build_remote_store(settings)
    sync_manager = SyncManager(local_store, remote_store, prefix=prefix, online=online, clock=clock)

    classes_repo = SyncedRepository(sync_manager, CLASSES)
    students_repo = SyncedRepository(sync_manager, STUDENTS)
    sessions_repo = SyncedRepository(sync_manager, SESSIONS)
    points_repo = SyncedRepository(sync_manager, POINTS)
    awards_repo = SyncedRepository(sync_manager, AWARDS)
    awards_meta = AwardsMetaStore(local_store, prefix=prefix)

    class_service = ClassService(classes_repo)
    student_service = StudentService(students_repo, classes_repo)
    points_service = PointsService(points_repo, students_repo)
    awards_service = AwardsService(
        awards_repo,
        students_repo,
        sessions_repo,
        points_repo,
        classes_repo,
        awards_meta,
        evaluator_factory=AwardEvaluatorFactory(),
        trailing_days=trailing_days,
    )
    register_service = RegisterService(sessions_repo, students_repo, classes_repo, points_service, awards_service)
    attendance_service = AttendanceService(students_repo, sessions_repo, points_repo, classes_repo)

    return Container(
        local_store=local_store,
        remote_store=remote_store,
        sync_manager=sync_manager,
        classes_repo=classes_repo,
        students_repo=students_repo,
        sessions_repo=sessions_repo,
        points_repo=points_repo,
        awards_repo=awards_repo,
        awards_meta=awards_meta,
        class_service=class_service,
        student_service=student_service,
        points_service=points_service,
        awards_service=awards_service,
        register_service=register_service,
        attendance_service=attendance_service,
    )
