"""Deferred thumbnail fetching for the photo grid.

Images start out deferred and are fetched the first time their tile becomes
visible. Each image is fetched at most once and is untracked afterwards.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from loguru import logger


class LazyThumbnailLoader:
    """Bookkeeping for deferred grid images.

    Args:
        fetch: Callable `(key, url)` that issues the actual fetch.
    """

    def __init__(self, fetch: Callable[[str, str], None]) -> None:
        self._fetch = fetch
        self._deferred: dict[str, str] = {}
        self._failed: set[str] = set()

    def defer(self, key: str, url: str) -> None:
        """Track `key` without issuing any fetch."""
        self._deferred[key] = url

    def on_visible(self, keys: Iterable[str]) -> int:
        """Fetch every tracked key in `keys` once. Returns the fetch count."""
        issued = 0
        for key in keys:
            url = self._deferred.pop(key, None)
            if url is None:
                continue
            self._fetch(key, url)
            issued += 1
        return issued

    def mark_failed(self, key: str) -> bool:
        """Record a failed fetch; True only the first time for `key`."""
        if key in self._failed:
            return False
        self._failed.add(key)
        logger.warning("Thumbnail failed to load: {}", key)
        return True

    def is_pending(self, key: str) -> bool:
        return key in self._deferred

    def has_failed(self, key: str) -> bool:
        return key in self._failed

    @property
    def pending_count(self) -> int:
        return len(self._deferred)

    def clear(self) -> None:
        self._deferred.clear()
        self._failed.clear()
