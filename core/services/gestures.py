"""Touch swipe classification, independent of any UI toolkit.

A gesture is tracked from start to end and only classified at the end, so a
slow drag never fires navigation mid-way. Vertical-dominant movement is
treated as scrolling and taps never navigate.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

MIN_SWIPE_DISTANCE = 50


class SwipeDirection(Enum):
    """Direction of a recognized horizontal swipe."""

    LEFT = "left"
    RIGHT = "right"


@dataclass
class PendingGesture:
    """Coordinates of the gesture in progress."""

    start_x: float | None = None
    start_y: float | None = None
    last_x: float | None = None
    last_y: float | None = None

    @property
    def started(self) -> bool:
        return self.start_x is not None and self.start_y is not None


class SwipeRecognizer:
    """Classify a single-finger touch interaction as a swipe or not."""

    def __init__(self, threshold: float = MIN_SWIPE_DISTANCE) -> None:
        self._threshold = max(float(threshold), float(MIN_SWIPE_DISTANCE))
        self.pending = PendingGesture()

    @property
    def threshold(self) -> float:
        return self._threshold

    def start(self, x: float, y: float) -> None:
        """Record the touch start point; the end point defaults to it."""
        self.pending = PendingGesture(start_x=x, start_y=y, last_x=x, last_y=y)

    def move(self, x: float, y: float) -> None:
        """Record the latest point without classifying."""
        if not self.pending.started:
            return
        self.pending.last_x = x
        self.pending.last_y = y

    def end(self, x: float | None = None, y: float | None = None) -> SwipeDirection | None:
        """Finish the gesture and return its direction, if it was a swipe.

        The tracked coordinates are reset whatever the outcome.
        """
        gesture = self.pending
        self.reset()
        if not gesture.started:
            return None
        x1 = x if x is not None else gesture.last_x
        y1 = y if y is not None else gesture.last_y
        dx = x1 - gesture.start_x
        dy = abs(y1 - gesture.start_y)
        if abs(dx) > self._threshold and abs(dx) > dy:
            return SwipeDirection.RIGHT if dx > 0 else SwipeDirection.LEFT
        return None

    def reset(self) -> None:
        self.pending = PendingGesture()
