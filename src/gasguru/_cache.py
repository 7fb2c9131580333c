"""Local mirror of one remote collection."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Generic, TypeVar

from gasguru.models._base import GuruBaseModel

RecordT = TypeVar("RecordT", bound=GuruBaseModel)


class CollectionCache(Generic[RecordT]):
    """Ordered list of records mirroring a collection between fetches.

    Records are frozen models; every mutation swaps whole records in or out
    so callers holding a previous :meth:`records` list never see it change.
    """

    def __init__(self) -> None:
        self._records: list[RecordT] = []
        self.loading = False

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[RecordT]:
        return iter(list(self._records))

    def records(self) -> list[RecordT]:
        return list(self._records)

    def replace_all(self, records: Iterable[RecordT]) -> None:
        self._records = list(records)

    def insert(self, record: RecordT, *, front: bool = False) -> None:
        if front:
            self._records = [record, *self._records]
        else:
            self._records = [*self._records, record]

    def replace(self, record: RecordT) -> bool:
        """Swap in *record* for the cached entry with the same id.

        Returns ``False`` (and leaves the cache untouched) when no entry
        matches.
        """
        for index, existing in enumerate(self._records):
            if getattr(existing, "id", None) == getattr(record, "id", None):
                updated = list(self._records)
                updated[index] = record
                self._records = updated
                return True
        return False

    def remove(self, record_id: str) -> bool:
        remaining = [r for r in self._records if getattr(r, "id", None) != record_id]
        removed = len(remaining) != len(self._records)
        self._records = remaining
        return removed

    def get(self, record_id: str) -> RecordT | None:
        for record in self._records:
            if getattr(record, "id", None) == record_id:
                return record
        return None
