from __future__ import annotations

import json
import logging
from typing import Dict

from ..core.constants import DEFAULT_STORAGE_PREFIX
from ..storage.local_store import LocalStore
from .model import ClassAwardsMeta

logger = logging.getLogger(__name__)


class AwardsMetaStore:
    """Per-class Student of the Month bookkeeping.

    Kept on this device only (``<prefix>awards_meta``); it is never pushed.
    """

    def __init__(self, store: LocalStore, *, prefix: str = DEFAULT_STORAGE_PREFIX):
        self._store = store
        self._key = f"{prefix}awards_meta"

    def _load(self) -> Dict[str, dict]:
        raw = self._store.get(self._key)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Awards meta is not valid JSON, starting fresh: %s", e)
            return {}
        sotm = data.get("sotm") if isinstance(data, dict) else None
        return sotm if isinstance(sotm, dict) else {}

    def get(self, class_id: str) -> ClassAwardsMeta:
        entry = self._load().get(class_id)
        return ClassAwardsMeta.from_dict(entry) if isinstance(entry, dict) else ClassAwardsMeta()

    def set(self, class_id: str, meta: ClassAwardsMeta) -> None:
        sotm = self._load()
        sotm[class_id] = meta.to_dict()
        self._store.set(self._key, json.dumps({"sotm": sotm}))
