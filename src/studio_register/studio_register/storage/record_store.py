from __future__ import annotations

import json
import logging
from typing import Any, Callable, List, Mapping, Sequence, TypeVar

from ..common.records import SyncedRecord
from .local_store import LocalStore

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=SyncedRecord)


def load_records(store: LocalStore, key: str, from_dict: Callable[[Mapping[str, Any]], R]) -> List[R]:
    """Read a JSON array of records.

    Unparseable payloads yield an empty collection, malformed records are
    skipped; both are logged and never raised.
    """
    raw = store.get(key)
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Local collection %s is not valid JSON, using empty collection: %s", key, e)
        return []
    if not isinstance(items, list):
        logger.warning("Local collection %s is not a JSON array, using empty collection", key)
        return []

    out: List[R] = []
    for item in items:
        try:
            out.append(from_dict(item))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Skipping malformed record in %s: %s", key, e)
    return out


def save_records(store: LocalStore, key: str, records: Sequence[SyncedRecord]) -> None:
    store.set(key, json.dumps([r.to_dict() for r in records]))
