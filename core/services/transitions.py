"""Request-generation tracking for asynchronous image loads.

There is no way to cancel an image load once issued. Instead every request is
stamped with a generation number, and a completion is only applied when its
generation is still the latest one.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LoadTicket:
    """Identifies one full-resolution load request.

    Attributes:
        generation: Counter value at the time of the request.
        index: Catalog index the load was issued for (-1 for ad-hoc photos).
        url: Image location being loaded.
        preview: True for the thumbnail shown while the full image loads.
    """

    generation: int
    index: int
    url: str
    preview: bool = False


class TransitionTracker:
    """Issue load tickets and tell stale completions from current ones."""

    def __init__(self) -> None:
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self, index: int, url: str) -> LoadTicket:
        """Start a new request, superseding every earlier ticket."""
        self._generation += 1
        return LoadTicket(generation=self._generation, index=index, url=url)

    def companion(self, ticket: LoadTicket, url: str) -> LoadTicket:
        """Preview ticket sharing the generation of `ticket`."""
        return LoadTicket(generation=ticket.generation, index=ticket.index, url=url, preview=True)

    def invalidate(self) -> None:
        """Make every outstanding ticket stale."""
        self._generation += 1

    def is_current(self, ticket: LoadTicket) -> bool:
        return ticket.generation == self._generation
