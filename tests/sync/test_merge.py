from datetime import datetime, timedelta, timezone

from src.studio_register.studio_register.classes.model import DanceClass
from src.studio_register.studio_register.core.enums import Lifecycle
from src.studio_register.studio_register.sync.merge import merge_records

T = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def _cls(id_, name, updated_at, *, synced=False, lifecycle=Lifecycle.ACTIVE):
    return DanceClass(id=id_, name=name, color="#F472B6", updated_at=updated_at, synced=synced, lifecycle=lifecycle)


def test_remote_wins_when_local_is_older_or_equal():
    remote = [_cls("c1", "Remote", T)]

    for local_ts in (T, T - timedelta(seconds=1)):
        merged = merge_records([_cls("c1", "Local", local_ts)], remote)
        assert merged == remote
        assert merged[0].name == "Remote"
        assert merged[0].synced is True


def test_strictly_newer_local_survives_and_needs_push():
    merged = merge_records([_cls("c1", "Local", T + timedelta(milliseconds=1))], [_cls("c1", "Remote", T)])

    assert merged[0].name == "Local"
    assert merged[0].synced is False


def test_local_only_records_are_kept_unsynced():
    merged = merge_records([_cls("c2", "Local only", T, synced=True)], [_cls("c1", "Remote", T)])

    assert [c.id for c in merged] == ["c1", "c2"]
    assert merged[1].synced is False


def test_missing_timestamp_means_remote_wins():
    merged = merge_records([_cls("c1", "Local", None)], [_cls("c1", "Remote", T)])
    assert merged[0].name == "Remote"

    merged = merge_records([_cls("c1", "Local", T)], [_cls("c1", "Remote", None)])
    assert merged[0].name == "Remote"


def test_soft_delete_propagates_by_timestamp():
    local = [_cls("c1", "Ballet A", T + timedelta(minutes=5), lifecycle=Lifecycle.DELETED)]
    merged = merge_records(local, [_cls("c1", "Ballet A", T)])

    assert merged[0].lifecycle is Lifecycle.DELETED


def test_merge_is_idempotent():
    local = [_cls("c1", "Newer", T + timedelta(hours=1)), _cls("c3", "Local only", T)]
    remote = [_cls("c1", "Older", T), _cls("c2", "Remote only", T)]

    once = merge_records(local, remote)
    assert merge_records(once, once) == once


def test_unreadable_remote_returns_local():
    local = [_cls("c1", "Local", T)]
    assert merge_records(local, None) == local
