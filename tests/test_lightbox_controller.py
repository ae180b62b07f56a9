# tests/test_lightbox_controller.py
"""
Unit tests for LightboxController.

Covers:
- Opening and index resolution
- Wraparound navigation
- Keyboard and swipe input gating on the open state
- Stale completion discard and load failures
"""

import pytest

from app.viewmodels.lightbox_vm import LightboxController
from core.models import PhotoRecord
from core.services.catalog import PhotoCatalog
from core.services.gestures import SwipeDirection

IMAGE = object()


def _swipe(controller, dx, dy):
    controller.touch_start(300, 300)
    controller.touch_move(300 + dx, 300 + dy)
    return controller.touch_end()


class TestOpenClose:
    def test_open_resolves_catalog_index(self, controller, records, viewport):
        controller.open(records[3])
        assert controller.is_open
        assert controller.current_index == 3
        assert viewport.visible
        assert viewport.scroll_locked
        assert viewport.navigation_enabled is True
        assert controller.current_photo is records[3]

    def test_open_absent_photo_defaults_to_first(self, controller, viewport):
        adhoc = PhotoRecord.adhoc("https://elsewhere.test/x.jpg", "x.jpg")
        controller.open(adhoc)
        assert controller.current_index == 0
        assert viewport.shown_record is adhoc

    def test_open_requests_preview_then_full(self, controller, records, loader):
        controller.open(records[1])
        assert [t.preview for t in loader.requests] == [True, False]
        assert loader.requests[0].url == records[1].preview_url
        assert loader.requests[1].url == records[1].display_url

    def test_open_without_preview_requests_only_full(self, controller, loader, record_factory):
        catalog = PhotoCatalog([record_factory(7, preview=False)])
        ctl = LightboxController(catalog, controller._viewport, loader)
        ctl.open(catalog.at(0))
        assert len(loader.requests) == 1
        assert not loader.requests[0].preview

    def test_close_restores_scrolling(self, controller, records, viewport):
        controller.open(records[0])
        controller.close()
        assert not controller.is_open
        assert controller.current_index is None
        assert not viewport.visible
        assert not viewport.scroll_locked

    def test_close_when_closed_is_noop(self, controller, viewport):
        controller.close()
        assert viewport.calls == []

    def test_reopen_recomputes_index(self, controller, records):
        controller.open(records[1])
        controller.next()
        controller.next()
        controller.close()
        controller.open(records[4])
        assert controller.current_index == 4

    def test_single_photo_catalog_disables_navigation(self, viewport, loader, record_factory):
        catalog = PhotoCatalog([record_factory(1)])
        ctl = LightboxController(catalog, viewport, loader)
        ctl.open(catalog.at(0))
        assert viewport.navigation_enabled is False


class TestEmptyCatalog:
    def test_open_with_empty_catalog_does_not_crash(self, viewport, loader):
        ctl = LightboxController(PhotoCatalog(), viewport, loader)
        photo = PhotoRecord.adhoc("https://x.test/a.jpg")
        ctl.open(photo)
        assert ctl.is_open
        assert ctl.current_index is None
        assert viewport.navigation_enabled is False

    def test_navigation_is_noop(self, viewport, loader):
        ctl = LightboxController(PhotoCatalog(), viewport, loader)
        ctl.open(PhotoRecord.adhoc("https://x.test/a.jpg"))
        before = len(loader.requests)
        ctl.next()
        ctl.previous()
        assert ctl.current_index is None
        assert len(loader.requests) == before
        assert not viewport.faded_out

    def test_adhoc_image_still_applied(self, viewport, loader):
        ctl = LightboxController(PhotoCatalog(), viewport, loader)
        photo = PhotoRecord.adhoc("https://x.test/a.jpg")
        ctl.open(photo)
        ctl.on_image_loaded(loader.last, IMAGE)
        assert viewport.applied == [(photo, IMAGE)]


class TestNavigation:
    @pytest.mark.parametrize("start", [0, 2, 4])
    def test_next_wraps_around_to_start(self, controller, records, catalog, start):
        controller.open(records[start])
        for _ in range(catalog.size()):
            controller.next()
        assert controller.current_index == start

    @pytest.mark.parametrize("start", [0, 3, 4])
    def test_previous_is_inverse_of_next(self, controller, records, start):
        controller.open(records[start])
        controller.next()
        controller.previous()
        assert controller.current_index == start

    def test_edges_wrap(self, controller, records):
        controller.open(records[4])
        controller.next()
        assert controller.current_index == 0
        controller.previous()
        assert controller.current_index == 4

    def test_navigation_fades_and_loads_full_only(self, controller, records, loader, viewport):
        controller.open(records[0])
        loader.requests.clear()
        controller.next()
        assert viewport.faded_out
        assert len(loader.requests) == 1
        assert loader.requests[0].url == records[1].display_url
        assert not loader.requests[0].preview

    def test_navigation_while_closed_is_ignored(self, controller, loader):
        controller.next()
        controller.previous()
        assert controller.current_index is None
        assert loader.requests == []


class TestKeyboard:
    def test_arrow_right_while_closed_has_no_effect(self, controller, loader, viewport):
        assert controller.handle_key("ArrowRight") is False
        assert controller.current_index is None
        assert loader.requests == []
        assert viewport.calls == []

    def test_arrow_right_while_open_steps_once(self, controller, records):
        controller.open(records[1])
        assert controller.handle_key("ArrowRight") is True
        assert controller.current_index == 2

    def test_arrow_left_steps_back(self, controller, records):
        controller.open(records[1])
        controller.handle_key("ArrowLeft")
        assert controller.current_index == 0

    def test_escape_closes(self, controller, records, viewport):
        controller.open(records[1])
        controller.handle_key("Escape")
        assert not controller.is_open
        assert not viewport.visible

    def test_unrelated_key_not_consumed(self, controller, records):
        controller.open(records[1])
        assert controller.handle_key("Enter") is False
        assert controller.current_index == 1


class TestSwipe:
    def test_swipe_left_goes_next(self, controller, records):
        controller.open(records[1])
        assert _swipe(controller, -60, 10) is SwipeDirection.LEFT
        assert controller.current_index == 2

    def test_swipe_right_goes_previous(self, controller, records):
        controller.open(records[1])
        assert _swipe(controller, 60, 10) is SwipeDirection.RIGHT
        assert controller.current_index == 0

    @pytest.mark.parametrize("dx, dy", [(60, 80), (40, 5)])
    def test_non_swipes_do_not_navigate(self, controller, records, loader, dx, dy):
        controller.open(records[1])
        before = len(loader.requests)
        assert _swipe(controller, dx, dy) is None
        assert controller.current_index == 1
        assert len(loader.requests) == before

    def test_gesture_while_closed_ignored(self, controller):
        assert _swipe(controller, -200, 0) is None
        assert controller.current_index is None

    def test_close_mid_gesture_discards_it(self, controller, records):
        controller.open(records[1])
        controller.touch_start(300, 300)
        controller.touch_move(100, 300)
        controller.handle_key("Escape")
        assert controller.touch_end() is None
        controller.open(records[1])
        # Nothing left over from the aborted gesture
        assert controller.touch_end() is None
        assert controller.current_index == 1


class TestImageTransitions:
    def test_full_image_applied(self, controller, records, loader, viewport):
        controller.open(records[0])
        controller.next()
        controller.on_image_loaded(loader.last, IMAGE)
        assert viewport.applied == [(records[1], IMAGE)]
        assert not viewport.faded_out

    def test_stale_completion_discarded(self, controller, records, loader, viewport):
        controller.open(records[0])
        controller.next()
        slow = loader.last
        controller.next()
        fast = loader.last
        controller.on_image_loaded(fast, IMAGE)
        controller.on_image_loaded(slow, object())
        assert viewport.applied == [(records[2], IMAGE)]

    def test_completion_after_close_discarded(self, controller, records, loader, viewport):
        controller.open(records[0])
        ticket = loader.last
        controller.close()
        controller.on_image_loaded(ticket, IMAGE)
        assert viewport.applied == []

    def test_completion_from_previous_session_discarded(
        self, controller, records, loader, viewport
    ):
        controller.open(records[2])
        old = loader.last
        controller.close()
        controller.open(records[2])
        controller.on_image_loaded(old, IMAGE)
        assert viewport.applied == []

    def test_failure_leaves_index_and_does_not_retry(self, controller, records, loader, viewport):
        controller.open(records[0])
        controller.next()
        requests_before = len(loader.requests)
        controller.on_image_loaded(loader.last, None)
        assert controller.current_index == 1
        assert len(loader.requests) == requests_before
        assert viewport.applied == []
        assert viewport.faded_out

    def test_late_preview_does_not_replace_full(self, controller, records, loader, viewport):
        controller.open(records[0])
        preview, full = loader.requests
        controller.on_image_loaded(full, IMAGE)
        controller.on_image_loaded(preview, object())
        assert viewport.applied == [(records[0], IMAGE)]

    def test_preview_then_full(self, controller, records, loader, viewport):
        controller.open(records[0])
        preview, full = loader.requests
        thumb = object()
        controller.on_image_loaded(preview, thumb)
        controller.on_image_loaded(full, IMAGE)
        assert [img for _, img in viewport.applied] == [thumb, IMAGE]

    def test_completion_never_changes_index(self, controller, records, loader):
        controller.open(records[3])
        controller.on_image_loaded(loader.requests[0], IMAGE)
        controller.on_image_loaded(loader.last, None)
        assert controller.current_index == 3
