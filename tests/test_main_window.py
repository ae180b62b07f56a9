# tests/test_main_window.py
"""Integration tests wiring MainWindow, the grid and the lightbox controller."""

from unittest.mock import MagicMock

from PySide6.QtCore import Qt
from PySide6.QtGui import QImage
import pytest

from app.viewmodels.gallery_vm import GalleryVM
from app.views.main_window import MainWindow
from core.models import PhotoRecord
from core.services.catalog import PhotoCatalog
from infrastructure.catalog_repository import CatalogPage


def _vm(records, event_slug=None):
    repo = MagicMock()
    repo.load.return_value = CatalogPage(catalog=PhotoCatalog(records), event_slug=event_slug)
    vm = GalleryVM(repo)
    vm.load("gallery.json")
    return vm


@pytest.fixture
def window(qtbot, monkeypatch, records):
    win = MainWindow(vm=_vm(records), image_service=MagicMock())
    # Tickets are registered but no task reaches the thread pool
    monkeypatch.setattr(win._runner, "_start", lambda *args: None)
    qtbot.addWidget(win)
    win.show()
    qtbot.waitExposed(win)
    return win


@pytest.mark.qt
class TestMainWindow:
    def test_photo_count_shown(self, window):
        assert window.count_label.text() == "5 photos"
        assert window.empty_label.isHidden()

    def test_empty_catalog_shows_placeholder(self, qtbot):
        win = MainWindow(vm=_vm([]), image_service=None)
        qtbot.addWidget(win)
        assert win.count_label.text() == "0 photos"
        assert not win.empty_label.isHidden()
        assert win.grid.isHidden()
        assert win.windowTitle() == "Photo Wall"

    def test_event_slug_in_title(self, qtbot, records):
        win = MainWindow(vm=_vm(records, event_slug="summer-party"), image_service=None)
        qtbot.addWidget(win)
        assert win.windowTitle() == "Photo Wall · summer-party"
        assert win.title_label.text() == win.windowTitle()

    def test_tile_click_opens_lightbox(self, qtbot, window, records):
        qtbot.mouseClick(window.grid.tile("p3"), Qt.LeftButton)
        assert window.controller.is_open
        assert window.controller.current_index == 3
        assert window.lightbox.isVisible()
        assert window.grid.scroll_locked

    def test_loaded_image_routed_to_controller(self, window, records):
        window.open_photo(records[0])
        window.controller.next()
        gen = window.controller._tracker.generation
        url = records[1].display_url
        img = QImage(10, 10, QImage.Format_RGB32)
        img.fill(Qt.white)
        window.imageLoaded.emit(f"lightbox|{gen}|full|{url}", url, img)
        assert not window.lightbox.image_label.pixmap().isNull()

    def test_stale_token_dropped(self, window, records):
        window.open_photo(records[0])
        stale_gen = window.controller._tracker.generation
        window.controller.next()
        url = records[0].display_url
        img = QImage(4, 4, QImage.Format_RGB32)
        window.imageLoaded.emit(f"lightbox|{stale_gen}|full|{url}", url, img)
        assert window.lightbox.image_label.pixmap().isNull()

    def test_adhoc_open_and_close(self, qtbot, window):
        window.open_photo(PhotoRecord.adhoc("https://elsewhere.test/x.jpg", "x.jpg"))
        assert window.controller.current_index == 0
        qtbot.keyClick(window.lightbox, Qt.Key_Escape)
        assert not window.lightbox.isVisible()
        assert not window.grid.scroll_locked
