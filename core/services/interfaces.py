"""Core service interfaces used by the lightbox controller.

The controller only talks to presentation and loading through these seams so
it can run without a GUI toolkit. The Qt views provide the real
implementations.
"""

from __future__ import annotations

from typing import Any

from core.models import PhotoRecord
from core.services.transitions import LoadTicket


class Viewport:
    """Presentation surface of the lightbox."""

    def show_photo(self, record: PhotoRecord) -> None:
        """Make the viewer visible with the metadata of `record`."""
        raise NotImplementedError

    def hide(self) -> None:
        """Hide the viewer."""
        raise NotImplementedError

    def begin_fade_out(self) -> None:
        """Start fading out the currently displayed image."""
        raise NotImplementedError

    def apply_image(self, record: PhotoRecord, image: Any) -> None:
        """Swap in a loaded image for `record` and fade it back in."""
        raise NotImplementedError

    def set_scroll_locked(self, locked: bool) -> None:
        """Suspend or restore scrolling of the page behind the viewer."""
        raise NotImplementedError

    def set_navigation_enabled(self, enabled: bool) -> None:
        """Show or hide the next/previous controls."""
        raise NotImplementedError


class ImageLoader:
    """Asynchronous loader for full-resolution lightbox images.

    Results are reported back through `LightboxController.on_image_loaded`
    with the same ticket, on a later event-loop turn. A failed load reports
    `None` as the image.
    """

    def request(self, ticket: LoadTicket) -> None:
        raise NotImplementedError
