"""Read-only, ordered catalog of photo records."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from core.models import PhotoRecord

NOT_FOUND = -1


class PhotoCatalog:
    """Immutable list of `PhotoRecord` in presentation order.

    The catalog is built once from the page data and never changes; photos
    uploaded later only show up after a reload.
    """

    def __init__(self, records: Iterable[PhotoRecord] | None = None) -> None:
        self._records: tuple[PhotoRecord, ...] = tuple(records or ())
        self._index: dict[str, int] = {}
        for i, rec in enumerate(self._records):
            if rec.id in self._index:
                raise ValueError(f"Duplicate photo id in catalog: {rec.id!r}")
            self._index[rec.id] = i

    def size(self) -> int:
        """Number of records (may be 0)."""
        return len(self._records)

    def index_of(self, photo_id: str | None) -> int:
        """Return the index of `photo_id`, or `NOT_FOUND`."""
        if not photo_id:
            return NOT_FOUND
        return self._index.get(photo_id, NOT_FOUND)

    def at(self, index: int) -> PhotoRecord:
        """Return the record at `index`; callers keep it within range."""
        if index < 0 or index >= len(self._records):
            raise IndexError(f"Catalog index out of range: {index}")
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PhotoRecord]:
        return iter(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)
