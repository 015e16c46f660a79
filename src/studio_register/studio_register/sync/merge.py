from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from ..common.records import R


def merge_records(local: Sequence[R], remote: Optional[Sequence[R]]) -> List[R]:
    """Reconcile one collection: remote wins unless the local copy is strictly newer.

    Remote records are taken first and flagged synced. A local record survives
    only when its id is unknown remotely or its ``updated_at`` is strictly
    later than the remote one; either way it is flagged unsynced so the next
    push sends it out. A missing timestamp on either side counts as not newer.
    ``remote=None`` means the remote could not be read and returns ``local``.
    """
    if remote is None:
        return list(local)

    merged: Dict[str, R] = {}
    for item in remote:
        merged[item.id] = replace(item, synced=True)  # type: ignore[type-var]

    for item in local:
        theirs = merged.get(item.id)
        if theirs is None:
            merged[item.id] = replace(item, synced=False)  # type: ignore[type-var]
        elif _strictly_newer(item, theirs):
            merged[item.id] = replace(item, synced=False)  # type: ignore[type-var]

    return list(merged.values())


def _strictly_newer(mine: R, theirs: R) -> bool:
    if mine.updated_at is None or theirs.updated_at is None:
        return False
    return mine.updated_at > theirs.updated_at
