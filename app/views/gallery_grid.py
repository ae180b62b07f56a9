from __future__ import annotations

import math
from typing import Any

from PySide6.QtCore import QPoint, QRect, Qt, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import QFrame, QGridLayout, QLabel, QScrollArea, QVBoxLayout, QWidget
from loguru import logger

from app.viewmodels.photo_vm import PhotoVM
from app.views.constants import (
    DEFAULT_THUMB_SIZE,
    GRID_MARGIN_RATIO,
    GRID_MIN_THUMB_PX,
    GRID_SPACING_PX,
    LOADING_TEXT,
    THUMB_ERROR_CSS,
    THUMB_ERROR_TEXT,
)
from app.views.image_tasks import ImageTaskRunner
from core.services.lazy_loader import LazyThumbnailLoader


class PhotoTile(QFrame):
    """One grid cell: thumbnail, overlay info and a hidden error indicator."""

    clicked = Signal(object)  # PhotoRecord

    def __init__(self, vm: PhotoVM, side: int, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.vm = vm
        self.setCursor(Qt.PointingHandCursor)

        v = QVBoxLayout(self)
        v.setContentsMargins(0, 0, 0, 0)

        self.image_label = QLabel(LOADING_TEXT)
        self.image_label.setAlignment(Qt.AlignCenter)
        self.image_label.setToolTip(vm.alt_text)
        v.addWidget(self.image_label)

        self.error_label = QLabel(THUMB_ERROR_TEXT)
        self.error_label.setAlignment(Qt.AlignCenter)
        self.error_label.setWordWrap(True)
        self.error_label.setStyleSheet(THUMB_ERROR_CSS)
        self.error_label.setVisible(False)
        v.addWidget(self.error_label)

        self.info_label = QLabel("\n".join(vm.overlay_lines))
        self.info_label.setWordWrap(True)
        self.info_label.setVisible(bool(vm.overlay_lines))
        v.addWidget(self.info_label)

        self.set_side(side)

    def set_side(self, side: int) -> None:
        self.image_label.setFixedSize(side, side)
        self.error_label.setFixedSize(side, side)

    def set_image(self, image: Any) -> None:
        pm = QPixmap.fromImage(image)
        self.image_label.setPixmap(
            pm.scaled(
                self.image_label.width(),
                self.image_label.height(),
                Qt.KeepAspectRatio,
                Qt.SmoothTransformation,
            )
        )
        self.image_label.setText("")

    def show_error(self) -> None:
        """Hide the broken image and show the inline indicator instead."""
        self.image_label.setVisible(False)
        self.error_label.setVisible(True)

    @property
    def has_error(self) -> bool:
        return not self.error_label.isHidden()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        if event.button() == Qt.LeftButton:
            self.clicked.emit(self.vm.record)
            event.accept()
            return
        super().mouseReleaseEvent(event)


class GalleryGrid(QScrollArea):
    """Scrollable thumbnail grid with deferred loading.

    Thumbnails are only requested once their tile scrolls into view. Clicking
    a tile emits `photoActivated` with the tile's `PhotoRecord`.
    """

    photoActivated = Signal(object)  # PhotoRecord

    def __init__(
        self, parent: QWidget | None, task_runner: ImageTaskRunner, thumb_size: int | None = None
    ) -> None:
        super().__init__(parent)
        self._runner = task_runner
        self._thumb_size = int(thumb_size or DEFAULT_THUMB_SIZE)
        self._scroll_locked = False

        self.setWidgetResizable(True)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAsNeeded)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)

        self._container = QWidget()
        self._layout = QGridLayout(self._container)
        self._layout.setSpacing(GRID_SPACING_PX)
        self._layout.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setWidget(self._container)

        # state
        self._tiles: dict[str, PhotoTile] = {}
        self._order: list[str] = []
        self._tokens: dict[str, str] = {}  # token -> tile key
        self._cols = 1
        self._side = self._thumb_size
        self._lazy = LazyThumbnailLoader(self._fetch)

        self.verticalScrollBar().valueChanged.connect(lambda *_: self.check_visible())

    # Public API
    def set_photos(self, tiles: list[PhotoVM]) -> None:
        """Replace the grid content; every thumbnail starts deferred."""
        self.clear()
        self._cols, self._side = self._compute_grid_geometry()
        for vm in tiles:
            tile = PhotoTile(vm, self._side, self._container)
            tile.clicked.connect(self.photoActivated.emit)
            self._tiles[vm.key] = tile
            self._order.append(vm.key)
            self._lazy.defer(vm.key, vm.thumbnail_url)
        self._relayout()
        self.check_visible()

    def clear(self) -> None:
        for tile in self._tiles.values():
            self._layout.removeWidget(tile)
            tile.deleteLater()
        self._tiles.clear()
        self._order.clear()
        self._tokens.clear()
        self._lazy.clear()

    def tile(self, key: str) -> PhotoTile | None:
        return self._tiles.get(key)

    @property
    def lazy_loader(self) -> LazyThumbnailLoader:
        return self._lazy

    def check_visible(self) -> int:
        """Start fetches for deferred tiles intersecting the viewport."""
        if not self._tiles or not self.isVisible():
            return 0
        vp_rect = self.viewport().rect()
        visible: list[str] = []
        for key in self._order:
            if not self._lazy.is_pending(key):
                continue
            tile = self._tiles[key]
            top_left = tile.mapTo(self.viewport(), QPoint(0, 0))
            if QRect(top_left, tile.size()).intersects(vp_rect):
                visible.append(key)
        return self._lazy.on_visible(visible)

    def on_thumbnail_loaded(self, token: str, image: Any) -> None:
        key = self._tokens.pop(token, None)
        if key is None:
            return
        tile = self._tiles.get(key)
        if tile is None:
            return
        try:
            if image is None or image.isNull():
                if self._lazy.mark_failed(key):
                    tile.show_error()
                return
            tile.set_image(image)
        except Exception as ex:  # pragma: no cover - UI best effort
            logger.error("Update thumbnail failed: {}", ex)

    def set_scroll_locked(self, locked: bool) -> None:
        """Suspend wheel and scrollbar scrolling while the lightbox is open."""
        self._scroll_locked = locked
        self.verticalScrollBar().setEnabled(not locked)

    @property
    def scroll_locked(self) -> bool:
        return self._scroll_locked

    # Qt events
    def wheelEvent(self, event) -> None:  # type: ignore[override]
        if self._scroll_locked:
            event.accept()
            return
        super().wheelEvent(event)

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        cols, side = self._compute_grid_geometry()
        if self._tiles and (cols, side) != (self._cols, self._side):
            self._cols, self._side = cols, side
            for tile in self._tiles.values():
                tile.set_side(side)
            self._relayout()
        self.check_visible()

    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        self.check_visible()

    # internals
    def _fetch(self, key: str, url: str) -> None:
        token = self._runner.request_grid_thumbnail(key, url, self._side)
        self._tokens[token] = key

    def _relayout(self) -> None:
        self._apply_grid_margins()
        for tile in self._tiles.values():
            self._layout.removeWidget(tile)
        for i, key in enumerate(self._order):
            r, c = divmod(i, self._cols)
            self._layout.addWidget(self._tiles[key], r, c)
        self._layout.activate()

    def _apply_grid_margins(self) -> None:
        vp = self.viewport()
        w = max(1, vp.width())
        h = max(1, vp.height())
        m_lr = int(w * GRID_MARGIN_RATIO)
        m_tb = int(h * GRID_MARGIN_RATIO)
        self._layout.setContentsMargins(m_lr, m_tb, m_lr, m_tb)

    def _compute_grid_geometry(self) -> tuple[int, int]:
        vp_width = self.viewport().width()
        width = max(1, vp_width - 2 * int(vp_width * GRID_MARGIN_RATIO))
        spacing = GRID_SPACING_PX
        max_px = self._thumb_size if self._thumb_size > 0 else DEFAULT_THUMB_SIZE
        min_px = min(GRID_MIN_THUMB_PX, max_px)
        # Fewest columns that keep cells at or below max_px
        cols = max(1, math.ceil((width + spacing) / (max_px + spacing)))
        cell = (width - spacing * (cols - 1)) // cols
        if cell < min_px and cols > 1:
            cols -= 1
            cell = (width - spacing * (cols - 1)) // cols
        return cols, max(1, min(cell, max_px))
