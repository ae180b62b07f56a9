"""Host window of the photo wall: grid, photo count and lightbox overlay.

The window owns the `LightboxController` instance and wires every view event
to it directly; no global handle to the controller exists.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QMainWindow, QVBoxLayout, QWidget
from loguru import logger

from app.viewmodels.gallery_vm import GalleryVM
from app.viewmodels.lightbox_vm import LightboxController
from app.views.constants import DEFAULT_FADE_MS, DEFAULT_THUMB_SIZE, EMPTY_TEXT, WINDOW_TITLE
from app.views.gallery_grid import GalleryGrid
from app.views.image_tasks import ImageTaskRunner
from app.views.lightbox_view import LightboxView
from core.models import PhotoRecord
from core.services.gestures import MIN_SWIPE_DISTANCE


class MainWindow(QMainWindow):
    """Main application window."""

    # Signal used by ImageTaskRunner to hand results back to the GUI thread
    imageLoaded = Signal(str, str, object)  # token, url, QImage | None

    def __init__(
        self,
        vm: GalleryVM,
        image_service: Any | None = None,
        settings: Any | None = None,
    ) -> None:
        """Initialize MainWindow with its services and components.

        Args:
            vm: Gallery view-model with a loaded catalog
            image_service: Image service used for background loads
            settings: Settings instance for configuration
        """
        super().__init__()

        self._initialize_services(vm, image_service, settings)
        self._setup_ui()
        self._connect_signals()
        self.refresh()

    def _initialize_services(
        self, vm: GalleryVM, image_service: Any | None, settings: Any | None
    ) -> None:
        self._vm = vm
        self._img = image_service
        self._settings = settings

        self._thumb_size = DEFAULT_THUMB_SIZE
        self._fade_ms = DEFAULT_FADE_MS
        self._swipe_threshold = MIN_SWIPE_DISTANCE
        if self._settings is not None:
            self._thumb_size = self._settings.get_int("gallery.thumbnail_size", DEFAULT_THUMB_SIZE)
            self._fade_ms = self._settings.get_int("lightbox.fade_ms", DEFAULT_FADE_MS)
            self._swipe_threshold = self._settings.get_int(
                "lightbox.swipe_threshold", MIN_SWIPE_DISTANCE
            )

        self._runner = ImageTaskRunner(service=self._img, receiver=self)

    def _setup_ui(self) -> None:
        self.setWindowTitle(WINDOW_TITLE)

        central = QWidget(self)
        root = QVBoxLayout(central)

        header = QHBoxLayout()
        self.title_label = QLabel(WINDOW_TITLE)
        self.count_label = QLabel("")
        self.count_label.setObjectName("photo_count")
        header.addWidget(self.title_label)
        header.addStretch()
        header.addWidget(self.count_label)
        root.addLayout(header)

        self.empty_label = QLabel(EMPTY_TEXT)
        self.empty_label.setAlignment(Qt.AlignCenter)
        root.addWidget(self.empty_label)

        self.grid = GalleryGrid(central, self._runner, thumb_size=self._thumb_size)
        root.addWidget(self.grid, 1)
        self.setCentralWidget(central)

        self.lightbox = LightboxView(
            self, scroll_lock=self.grid.set_scroll_locked, fade_ms=self._fade_ms
        )
        self.controller = LightboxController(
            self._vm.catalog,
            self.lightbox,
            self._runner,
            swipe_threshold=self._swipe_threshold,
        )
        self.lightbox.bind(self.controller)

        self.resize(1100, 800)

    def _connect_signals(self) -> None:
        self.grid.photoActivated.connect(self.open_photo)
        self.imageLoaded.connect(self._on_image_loaded)

    # Public API
    def refresh(self) -> None:
        """Rebuild grid tiles and the photo-count text from the view-model."""
        tiles = self._vm.tiles
        title = WINDOW_TITLE
        if self._vm.event_slug:
            title = f"{WINDOW_TITLE} · {self._vm.event_slug}"
        self.setWindowTitle(title)
        self.title_label.setText(title)
        self.grid.set_photos(tiles)
        self.count_label.setText(self._vm.photo_count_text)
        self.empty_label.setVisible(not tiles)
        self.grid.setVisible(bool(tiles))

    def open_photo(self, photo: PhotoRecord) -> None:
        """Open the lightbox on `photo`, which may be outside the catalog."""
        self.controller.open(photo)

    # Qt events
    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self.lightbox.setGeometry(self.rect())

    # Image loading slot
    def _on_image_loaded(self, token: str, url: str, image: Any) -> None:
        """Route a finished background load to the lightbox or the grid."""
        try:
            if token.startswith("lightbox|"):
                ticket = self._runner.take_ticket(token)
                if ticket is None:
                    return
                self.controller.on_image_loaded(ticket, image)
            elif token.startswith("grid|"):
                self.grid.on_thumbnail_loaded(token, image)
        except Exception as ex:  # pragma: no cover - UI best effort
            logger.error("Handling loaded image {} failed: {}", url, ex)
