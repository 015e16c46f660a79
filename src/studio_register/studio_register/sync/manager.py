from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..awards.model import AwardUnlock
from ..classes.model import DanceClass
from ..common.datetime_utils import now_utc, parse_iso, to_iso
from ..common.records import SyncedRecord
from ..core.constants import DEFAULT_STORAGE_PREFIX
from ..core.exceptions import RemoteStoreError
from ..points.model import PointEvent
from ..register.model import RegisterSession
from ..storage.local_store import LocalStore
from ..storage.record_store import load_records, save_records
from ..students.model import Student
from .collections import ALL_COLLECTIONS, AWARDS, CLASSES, POINTS, SESSIONS, STUDENTS, CollectionSpec
from .merge import merge_records
from .remote_store import RemoteStore

logger = logging.getLogger(__name__)


class SyncManager:
    """Offline-first access to every record collection.

    The local store is the source of truth for reads; every write lands there
    before any network attempt. The remote mirror is advisory: failures are
    logged and leave records ``synced=False`` for the next trigger (app start,
    next save, or an offline -> online transition).

    Build one per process and pass it by reference (see ``container``).
    """

    def __init__(
        self,
        local: LocalStore,
        remote: Optional[RemoteStore] = None,
        *,
        prefix: str = DEFAULT_STORAGE_PREFIX,
        online: bool = True,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._local = local
        self._remote = remote
        self._prefix = prefix
        self._online = bool(online)
        self._clock = clock
        self._local_lock = threading.RLock()
        self._sync_guard = threading.Lock()

    # ---- status ----

    @property
    def is_online(self) -> bool:
        return self._online and self._remote is not None

    @property
    def sync_in_progress(self) -> bool:
        return self._sync_guard.locked()

    def set_online(self, online: bool) -> None:
        was_online = self._online
        self._online = bool(online)
        if self._online and not was_online:
            logger.info("Back online, starting full sync")
            self.full_sync()

    def last_sync_time(self) -> Optional[datetime]:
        return parse_iso(self._local.get(self._key("last_sync")))

    # ---- local ----

    def _key(self, name: str) -> str:
        return f"{self._prefix}{name}"

    def load_local(self, spec: CollectionSpec) -> List[Any]:
        return load_records(self._local, spec.storage_key(self._prefix), spec.from_dict)

    def _save_local(self, spec: CollectionSpec, records: Sequence[SyncedRecord]) -> None:
        save_records(self._local, spec.storage_key(self._prefix), records)

    # ---- read ----

    def get(self, spec: CollectionSpec) -> List[Any]:
        """Local data, upgraded to the merged view when the remote answers."""
        local = self.load_local(spec)
        if not self.is_online:
            return local

        remote = self._fetch_remote(spec)
        if remote is None:
            return local

        with self._local_lock:
            merged = merge_records(self.load_local(spec), remote)
            self._save_local(spec, merged)
        return merged

    def _fetch_remote(self, spec: CollectionSpec) -> Optional[List[Any]]:
        assert self._remote is not None
        try:
            rows = self._remote.select_all(spec)
        except RemoteStoreError as e:
            logger.warning("Background sync failed for %s: %s", spec.name, e)
            return None

        records: List[Any] = []
        for row in rows:
            try:
                records.append(spec.from_dict(row))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Skipping malformed remote row in %s: %s", spec.table, e)
        return records

    # ---- write ----

    def save(self, spec: CollectionSpec, records: Sequence[Any]) -> List[Any]:
        """Persist the whole collection locally, then try to push it.

        Records that differ from the stored copy are flagged unsynced; those
        the caller did not stamp with a newer ``updated_at`` get ``now``.
        """
        with self._local_lock:
            stored = self._stamp_changes(self.load_local(spec), records)
            self._save_local(spec, stored)

        if self.is_online and any(not r.synced for r in stored):
            self.push(spec)
            return self.load_local(spec)
        return stored

    def _stamp_changes(self, previous: Sequence[Any], records: Sequence[Any]) -> List[Any]:
        now = self._clock()
        before_by_id: Dict[str, Any] = {r.id: r for r in previous}
        out: List[Any] = []
        for r in records:
            before = before_by_id.get(r.id)
            if before is not None and before == r:
                out.append(before)
                continue
            stamped_by_caller = r.updated_at is not None and (
                before is None or before.updated_at is None or r.updated_at > before.updated_at
            )
            if stamped_by_caller:
                out.append(replace(r, synced=False))
            else:
                out.append(replace(r, updated_at=now, synced=False))
        return out

    def push(self, spec: CollectionSpec) -> bool:
        """Upsert every unsynced record, then flag the pushed ones synced.

        Returns False when offline or when the remote rejected the batch.
        """
        if not self.is_online:
            return False
        assert self._remote is not None

        unsynced = [r for r in self.load_local(spec) if not r.synced]
        if not unsynced:
            return True

        try:
            self._remote.upsert(spec, [{**r.to_dict(), "synced": True} for r in unsynced])
        except RemoteStoreError as e:
            logger.warning("Failed to sync %s (%d record(s) left pending): %s", spec.name, len(unsynced), e)
            return False

        pushed = {r.id: r for r in unsynced}
        with self._local_lock:
            current = self.load_local(spec)
            # Anything edited while the upsert was in flight stays pending.
            updated = [replace(r, synced=True) if pushed.get(r.id) == r else r for r in current]
            self._save_local(spec, updated)
        return True

    # ---- full passes ----

    def sync_to_cloud(self) -> bool:
        """Push every collection. No-op (False) if offline or a pass is already running."""
        if not self.is_online:
            return False
        if not self._sync_guard.acquire(blocking=False):
            logger.debug("Sync already in progress, skipping")
            return False
        try:
            return self._push_all()
        finally:
            self._sync_guard.release()

    def sync_from_cloud(self) -> None:
        if not self.is_online:
            return
        for spec in ALL_COLLECTIONS:
            self.get(spec)
        logger.info("Sync from cloud completed")

    def full_sync(self) -> bool:
        """Pull + merge every collection, then push what is still pending."""
        if not self.is_online:
            return False
        if not self._sync_guard.acquire(blocking=False):
            logger.debug("Sync already in progress, skipping")
            return False
        try:
            for spec in ALL_COLLECTIONS:
                self.get(spec)
            return self._push_all()
        finally:
            self._sync_guard.release()

    def _push_all(self) -> bool:
        logger.info("Starting cloud sync")
        results = [self.push(spec) for spec in ALL_COLLECTIONS]
        if all(results):
            self._local.set(self._key("last_sync"), to_iso(self._clock()) or "")
            logger.info("Cloud sync completed successfully")
            return True
        logger.warning("Cloud sync finished with pending records")
        return False

    # ---- per-collection API ----

    def get_classes(self) -> List[DanceClass]:
        return self.get(CLASSES)

    def save_classes(self, classes: Sequence[DanceClass]) -> List[DanceClass]:
        return self.save(CLASSES, classes)

    def get_students(self) -> List[Student]:
        return self.get(STUDENTS)

    def save_students(self, students: Sequence[Student]) -> List[Student]:
        return self.save(STUDENTS, students)

    def get_sessions(self) -> List[RegisterSession]:
        return self.get(SESSIONS)

    def save_sessions(self, sessions: Sequence[RegisterSession]) -> List[RegisterSession]:
        return self.save(SESSIONS, sessions)

    def get_points(self) -> List[PointEvent]:
        return self.get(POINTS)

    def save_points(self, points: Sequence[PointEvent]) -> List[PointEvent]:
        return self.save(POINTS, points)

    def get_awards(self) -> List[AwardUnlock]:
        return self.get(AWARDS)

    def save_awards(self, awards: Sequence[AwardUnlock]) -> List[AwardUnlock]:
        return self.save(AWARDS, awards)


class SyncedRepository:
    """``CollectionRepository`` over one collection of a ``SyncManager``.

    Reads are local only; writes go through ``SyncManager.save``.
    """

    def __init__(self, manager: SyncManager, spec: CollectionSpec):
        self._manager = manager
        self._spec = spec

    def list_all(self) -> List[Any]:
        return self._manager.load_local(self._spec)

    def save_all(self, records: Sequence[Any]) -> None:
        self._manager.save(self._spec, records)
