from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from src.studio_register.studio_register.container import build_container
from src.studio_register.studio_register.core.exceptions import RemoteStoreError
from src.studio_register.studio_register.storage.local_store import MemoryStore


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeRemoteStore:
    """In-memory stand-in for the MySQL mirror; ``fail`` simulates a dead connection."""

    def __init__(self):
        self.tables: Dict[str, Dict[str, dict]] = {}
        self.fail = False
        self.upsert_calls = 0

    def select_all(self, spec) -> List[Dict[str, Any]]:
        if self.fail:
            raise RemoteStoreError("connection refused")
        return [dict(r) for r in self.tables.get(spec.table, {}).values()]

    def upsert(self, spec, rows) -> None:
        if self.fail:
            raise RemoteStoreError("connection refused")
        self.upsert_calls += 1
        table = self.tables.setdefault(spec.table, {})
        for row in rows:
            table[row["id"]] = dict(row)


TEST_SETTINGS = SimpleNamespace(
    LOCAL_STORE="memory",
    STORAGE_PREFIX="bb_",
    SYNC_ENABLED=False,
    TRAILING_AWARD_DAYS=30,
)


@pytest.fixture
def fixed_now() -> datetime:
    return utc(2025, 1, 31, 18, 0, 0)


@pytest.fixture
def container():
    return build_container(settings=TEST_SETTINGS, local_store=MemoryStore())


@pytest.fixture
def remote_store() -> FakeRemoteStore:
    return FakeRemoteStore()


@pytest.fixture
def make_clock():
    return FixedClock


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(utc(2025, 1, 1, 9, 0, 0))
