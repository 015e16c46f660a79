from __future__ import annotations

from typing import List, Protocol, Sequence, TypeVar

T = TypeVar("T")


class CollectionRepository(Protocol[T]):
    """Whole-collection access used by the feature services.

    ``list_all`` includes soft-deleted records; callers filter with
    ``common.records.active``.
    """

    def list_all(self) -> List[T]:
        raise NotImplementedError

    def save_all(self, records: Sequence[T]) -> None:
        raise NotImplementedError
