from __future__ import annotations

from typing import Any, Dict, List, Protocol, Sequence

from .collections import CollectionSpec


class RemoteStore(Protocol):
    """Shared, eventually-consistent mirror: one table per collection keyed by ``id``.

    Rows are wire dicts (the records' ``to_dict`` shape). Implementations raise
    ``RemoteStoreError`` on any connection or query failure.
    """

    def select_all(self, spec: CollectionSpec) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def upsert(self, spec: CollectionSpec, rows: Sequence[Dict[str, Any]]) -> None:
        """Insert-or-replace keyed by ``id``."""

        raise NotImplementedError
