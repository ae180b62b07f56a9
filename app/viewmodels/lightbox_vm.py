"""ViewModel for the full-window lightbox viewer.

Owns the carousel state, turns key presses and swipe gestures into
navigation, and orchestrates background image loads with fade transitions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger

from core.models import PhotoRecord
from core.services.catalog import NOT_FOUND, PhotoCatalog
from core.services.gestures import MIN_SWIPE_DISTANCE, SwipeDirection, SwipeRecognizer
from core.services.interfaces import ImageLoader, Viewport
from core.services.transitions import LoadTicket, TransitionTracker

KEY_ESCAPE = "Escape"
KEY_LEFT = "ArrowLeft"
KEY_RIGHT = "ArrowRight"


@dataclass
class CarouselState:
    """Mutable state of one lightbox controller."""

    current_index: int | None = None
    is_open: bool = False

    def reset(self) -> None:
        self.current_index = None
        self.is_open = False


class LightboxController:
    """Lightbox navigation over a `PhotoCatalog`.

    The host window constructs one instance and hands it to the views that
    forward input to it.
    """

    def __init__(
        self,
        catalog: PhotoCatalog,
        viewport: Viewport,
        loader: ImageLoader,
        swipe_threshold: float = MIN_SWIPE_DISTANCE,
    ) -> None:
        """Create a controller.

        Args:
            catalog: Photos available for navigation.
            viewport: Presentation surface.
            loader: Asynchronous image loader reporting to `on_image_loaded`.
            swipe_threshold: Minimum horizontal swipe distance in pixels.
        """
        self._catalog = catalog
        self._viewport = viewport
        self._loader = loader
        self._tracker = TransitionTracker()
        self._recognizer = SwipeRecognizer(swipe_threshold)
        self.state = CarouselState()
        self._displayed: PhotoRecord | None = None
        self._full_applied = False

    # Properties
    @property
    def is_open(self) -> bool:
        return self.state.is_open

    @property
    def current_index(self) -> int | None:
        return self.state.current_index

    @property
    def current_photo(self) -> PhotoRecord | None:
        """Record currently targeted by the viewer, if any."""
        return self._displayed

    @property
    def recognizer(self) -> SwipeRecognizer:
        return self._recognizer

    # Public API
    def open(self, photo: PhotoRecord) -> None:
        """Show `photo`, resolving its position in the catalog.

        Photos missing from the catalog are still shown; navigation then
        continues from the first catalog entry.
        """
        index: int | None = None
        if self._catalog.size() > 0:
            index = self._catalog.index_of(photo.id)
            if index == NOT_FOUND:
                logger.debug(
                    "Photo {} not in catalog, starting at index 0",
                    photo.id or photo.display_url,
                )
                index = 0

        self.state.current_index = index
        self.state.is_open = True
        self._recognizer.reset()

        self._viewport.set_scroll_locked(True)
        self._viewport.set_navigation_enabled(self._catalog.size() > 1)
        self._viewport.show_photo(photo)

        ticket = self._start_load(photo)
        if photo.preview_url and photo.preview_url != photo.display_url:
            self._loader.request(self._tracker.companion(ticket, photo.preview_url))
        self._loader.request(ticket)

    def close(self) -> None:
        """Hide the viewer and restore page scrolling."""
        if not self.state.is_open:
            return
        self.state.reset()
        self._recognizer.reset()
        self._tracker.invalidate()
        self._displayed = None
        self._viewport.hide()
        self._viewport.set_scroll_locked(False)

    def next(self) -> None:
        self._step(1)

    def previous(self) -> None:
        self._step(-1)

    def handle_key(self, key: str) -> bool:
        """Dispatch a key name; returns True when the key was consumed."""
        if not self.state.is_open:
            return False
        if key == KEY_ESCAPE:
            self.close()
        elif key == KEY_LEFT:
            self.previous()
        elif key == KEY_RIGHT:
            self.next()
        else:
            return False
        return True

    # Touch input
    def touch_start(self, x: float, y: float) -> None:
        if not self.state.is_open:
            return
        self._recognizer.start(x, y)

    def touch_move(self, x: float, y: float) -> None:
        if not self.state.is_open:
            return
        self._recognizer.move(x, y)

    def touch_end(self, x: float | None = None, y: float | None = None) -> SwipeDirection | None:
        """Finish a gesture and navigate if it was a horizontal swipe."""
        if not self.state.is_open:
            self._recognizer.reset()
            return None
        direction = self._recognizer.end(x, y)
        if direction is SwipeDirection.RIGHT:
            self.previous()
        elif direction is SwipeDirection.LEFT:
            self.next()
        return direction

    # Loader callback
    def on_image_loaded(self, ticket: LoadTicket, image: Any) -> None:
        """Apply a finished load unless a newer navigation superseded it."""
        if not self._is_current(ticket):
            logger.debug("Discarding stale image load: {} (gen {})", ticket.url, ticket.generation)
            return
        if ticket.preview:
            # Full image already on screen; a late preview must not replace it
            if image is None or self._full_applied:
                return
        elif image is None:
            logger.warning("Lightbox image failed to load: {}", ticket.url)
            return
        else:
            self._full_applied = True
        self._viewport.apply_image(self._displayed, image)

    # internals
    def _step(self, delta: int) -> None:
        size = self._catalog.size()
        if not self.state.is_open or size == 0:
            return
        current = self.state.current_index or 0
        self.state.current_index = (current + delta) % size
        record = self._catalog.at(self.state.current_index)
        self._viewport.begin_fade_out()
        self._loader.request(self._start_load(record))

    def _start_load(self, record: PhotoRecord) -> LoadTicket:
        self._displayed = record
        self._full_applied = False
        index = self.state.current_index if self.state.current_index is not None else -1
        return self._tracker.begin(index, record.display_url)

    def _is_current(self, ticket: LoadTicket) -> bool:
        if not self.state.is_open or not self._tracker.is_current(ticket):
            return False
        index = self.state.current_index if self.state.current_index is not None else -1
        return ticket.index == index
