"""Full-window lightbox overlay implementing the controller's `Viewport`."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from PySide6.QtCore import (
    QAbstractAnimation,
    QEasingCurve,
    QEvent,
    QPointF,
    QPropertyAnimation,
    Qt,
)
from PySide6.QtGui import QEventPoint, QPixmap
from PySide6.QtWidgets import (
    QGraphicsOpacityEffect,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.viewmodels.lightbox_vm import LightboxController
from app.views.constants import (
    DEFAULT_FADE_MS,
    KEY_NAMES,
    LIGHTBOX_BACKDROP_CSS,
    LOADING_TEXT,
    TAP_SLOP_PX,
)
from core.models import PhotoRecord
from core.services.interfaces import Viewport

_CHANGED_STATE = {
    QEvent.TouchBegin: QEventPoint.State.Pressed,
    QEvent.TouchUpdate: QEventPoint.State.Updated,
    QEvent.TouchEnd: QEventPoint.State.Released,
}


def changed_touch_point(event_type: Any, points: list[Any]) -> Any | None:
    """Return the touch point whose state changed with this event.

    Falls back to the first point when none carries the expected state.
    """
    if not points:
        return None
    wanted = _CHANGED_STATE.get(event_type)
    for point in points:
        if point.state() == wanted:
            return point
    return points[0]


class LightboxView(QWidget, Viewport):
    """Overlay showing one photo with close/previous/next controls.

    Input (keys, touch, pointer drags, buttons) is forwarded to the bound
    `LightboxController`; presentation calls come back through `Viewport`.
    """

    def __init__(
        self,
        parent: QWidget | None,
        scroll_lock: Callable[[bool], None] | None = None,
        fade_ms: int = DEFAULT_FADE_MS,
    ) -> None:
        super().__init__(parent)
        self._scroll_lock = scroll_lock
        self._fade_ms = max(0, int(fade_ms))
        self._controller: LightboxController | None = None
        self._pixmap: QPixmap | None = None
        self._press_pos: QPointF | None = None
        self._press_on_backdrop = False
        self.scroll_locked = False

        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setAttribute(Qt.WA_AcceptTouchEvents, True)
        self.setStyleSheet(LIGHTBOX_BACKDROP_CSS)
        self.setFocusPolicy(Qt.StrongFocus)

        self._setup_ui()
        self.setVisible(False)

    def _setup_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(16, 16, 16, 16)

        top = QHBoxLayout()
        top.addStretch()
        self.close_button = QPushButton("×")
        self.close_button.setFixedSize(40, 40)
        self.close_button.setFocusPolicy(Qt.NoFocus)
        top.addWidget(self.close_button)
        root.addLayout(top)

        middle = QHBoxLayout()
        self.prev_button = QPushButton("‹")
        self.prev_button.setToolTip("Previous photo (←)")
        self.prev_button.setFixedSize(48, 64)
        self.prev_button.setFocusPolicy(Qt.NoFocus)
        self.next_button = QPushButton("›")
        self.next_button.setToolTip("Next photo (→)")
        self.next_button.setFixedSize(48, 64)
        self.next_button.setFocusPolicy(Qt.NoFocus)

        self.image_label = QLabel(LOADING_TEXT)
        self.image_label.setAlignment(Qt.AlignCenter)
        self.image_label.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)
        self.image_label.setStyleSheet("color: white;")
        self._opacity = QGraphicsOpacityEffect(self.image_label)
        self._opacity.setOpacity(1.0)
        self.image_label.setGraphicsEffect(self._opacity)
        self._fade = QPropertyAnimation(self._opacity, b"opacity", self)
        self._fade.setEasingCurve(QEasingCurve.InOutQuad)

        middle.addWidget(self.prev_button)
        middle.addWidget(self.image_label, 1)
        middle.addWidget(self.next_button)
        root.addLayout(middle, 1)

        self.caption_label = QLabel("")
        self.caption_label.setAlignment(Qt.AlignCenter)
        self.caption_label.setStyleSheet("color: white;")
        root.addWidget(self.caption_label)

    def bind(self, controller: LightboxController) -> None:
        """Forward buttons and input events to `controller`."""
        self._controller = controller
        self.close_button.clicked.connect(controller.close)
        self.prev_button.clicked.connect(controller.previous)
        self.next_button.clicked.connect(controller.next)

    @property
    def opacity(self) -> float:
        """Target opacity of the image (1.0 shown, 0.0 faded out)."""
        if self._fade.state() == QAbstractAnimation.Running:
            return float(self._fade.endValue())
        return float(self._opacity.opacity())

    # Viewport
    def show_photo(self, record: PhotoRecord) -> None:
        self._fade.stop()
        self._opacity.setOpacity(1.0)
        self._pixmap = None
        self.image_label.clear()
        self.image_label.setText(LOADING_TEXT)
        self.caption_label.setText(_caption_text(record))
        if self.parentWidget() is not None:
            self.setGeometry(self.parentWidget().rect())
        self.setVisible(True)
        self.raise_()
        self.setFocus()

    def hide(self) -> None:  # type: ignore[override]
        self._fade.stop()
        self.setVisible(False)

    def begin_fade_out(self) -> None:
        self._animate_to(0.0)

    def apply_image(self, record: PhotoRecord, image: Any) -> None:
        try:
            pm = image if isinstance(image, QPixmap) else QPixmap.fromImage(image)
        except TypeError as ex:
            logger.error("Unsupported image for lightbox: {}", ex)
            return
        if pm.isNull():
            logger.warning("Lightbox received empty image for {}", record.display_url)
            return
        self._pixmap = pm
        self.image_label.setText("")
        self.caption_label.setText(_caption_text(record))
        self._apply_pixmap_fit()
        self._animate_to(1.0)

    def set_scroll_locked(self, locked: bool) -> None:
        self.scroll_locked = locked
        if self._scroll_lock is not None:
            self._scroll_lock(locked)

    def set_navigation_enabled(self, enabled: bool) -> None:
        self.prev_button.setVisible(enabled)
        self.next_button.setVisible(enabled)

    # Qt events
    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        name = KEY_NAMES.get(event.key())
        if name and self._controller is not None and self._controller.handle_key(name):
            event.accept()
            return
        super().keyPressEvent(event)

    def event(self, event: QEvent) -> bool:  # type: ignore[override]
        etype = event.type()
        if etype in (QEvent.TouchBegin, QEvent.TouchUpdate, QEvent.TouchEnd, QEvent.TouchCancel):
            self._handle_touch(event)
            event.accept()
            return True
        return super().event(event)

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if self._controller is None or event.button() != Qt.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        self._press_pos = pos
        self._press_on_backdrop = self.childAt(pos.toPoint()) is None
        self._controller.touch_start(pos.x(), pos.y())
        event.accept()

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        if self._controller is not None and self._press_pos is not None:
            pos = event.position()
            self._controller.touch_move(pos.x(), pos.y())
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        if self._controller is None or self._press_pos is None:
            super().mouseReleaseEvent(event)
            return
        pos = event.position()
        start = self._press_pos
        on_backdrop = self._press_on_backdrop
        self._press_pos = None
        self._press_on_backdrop = False
        direction = self._controller.touch_end(pos.x(), pos.y())
        moved = abs(pos.x() - start.x()) + abs(pos.y() - start.y())
        if direction is None and on_backdrop and moved <= TAP_SLOP_PX:
            # Click on the dimmed backdrop closes the viewer
            self._controller.close()
        event.accept()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._apply_pixmap_fit()

    # internals
    def _handle_touch(self, event: Any) -> None:
        if self._controller is None:
            return
        etype = event.type()
        if etype == QEvent.TouchCancel:
            self._controller.recognizer.reset()
            return
        point = changed_touch_point(etype, list(event.points()))
        if point is None:
            return
        pos = point.position()
        if etype == QEvent.TouchBegin:
            self._controller.touch_start(pos.x(), pos.y())
        elif etype == QEvent.TouchUpdate:
            self._controller.touch_move(pos.x(), pos.y())
        else:
            self._controller.touch_end(pos.x(), pos.y())

    def _animate_to(self, value: float) -> None:
        self._fade.stop()
        if self._fade_ms <= 0:
            self._opacity.setOpacity(value)
            return
        self._fade.setDuration(self._fade_ms)
        self._fade.setStartValue(self._opacity.opacity())
        self._fade.setEndValue(value)
        self._fade.start()

    def _apply_pixmap_fit(self) -> None:
        if self._pixmap is None or self._pixmap.isNull():
            return
        w = max(1, self.image_label.width())
        h = max(1, self.image_label.height())
        if self._pixmap.width() > w or self._pixmap.height() > h:
            self.image_label.setPixmap(
                self._pixmap.scaled(w, h, Qt.KeepAspectRatio, Qt.SmoothTransformation)
            )
        else:
            self.image_label.setPixmap(self._pixmap)


def _caption_text(record: PhotoRecord) -> str:
    parts = [record.caption, record.attribution_name or "", record.display_timestamp or ""]
    return " · ".join(p for p in parts if p)
