# tests/conftest.py
"""
Shared fixtures for the viewer tests.

Qt widget tests run on the offscreen platform and use pytest-qt's `qtbot`
and `qapp`. Controller tests use the plain fakes defined here instead of
real widgets and thread pools.

Run with:
    pytest -v
"""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest  # noqa: E402

from core.models import PhotoRecord  # noqa: E402
from core.services.catalog import PhotoCatalog  # noqa: E402


class FakeViewport:
    """Records every presentation call made by the controller."""

    def __init__(self):
        self.calls = []
        self.visible = False
        self.scroll_locked = False
        self.navigation_enabled = None
        self.faded_out = False
        self.shown_record = None
        self.applied = []

    def show_photo(self, record):
        self.calls.append(("show_photo", record.id))
        self.visible = True
        self.faded_out = False
        self.shown_record = record

    def hide(self):
        self.calls.append(("hide",))
        self.visible = False

    def begin_fade_out(self):
        self.calls.append(("begin_fade_out",))
        self.faded_out = True

    def apply_image(self, record, image):
        self.calls.append(("apply_image", record.id, image))
        self.applied.append((record, image))
        self.faded_out = False

    def set_scroll_locked(self, locked):
        self.calls.append(("set_scroll_locked", locked))
        self.scroll_locked = locked

    def set_navigation_enabled(self, enabled):
        self.navigation_enabled = enabled


class FakeLoader:
    """Collects load tickets; tests complete them explicitly."""

    def __init__(self):
        self.requests = []

    def request(self, ticket):
        self.requests.append(ticket)

    @property
    def full_requests(self):
        return [t for t in self.requests if not t.preview]

    @property
    def last(self):
        return self.full_requests[-1]


def make_record(n, preview=True):
    """Build a catalog record numbered `n`."""
    return PhotoRecord(
        id=f"p{n}",
        display_url=f"https://example.test/photos/{n}.jpg",
        caption=f"photo-{n}.jpg",
        preview_url=f"https://example.test/thumbs/{n}.jpg" if preview else None,
        attribution_name=f"user{n}",
        display_timestamp="01.06.2024 18:00",
    )


@pytest.fixture
def records():
    return [make_record(i) for i in range(5)]


@pytest.fixture
def catalog(records):
    return PhotoCatalog(records)


@pytest.fixture
def viewport():
    return FakeViewport()


@pytest.fixture
def loader():
    return FakeLoader()


@pytest.fixture
def controller(catalog, viewport, loader):
    from app.viewmodels.lightbox_vm import LightboxController

    return LightboxController(catalog, viewport, loader)


@pytest.fixture
def record_factory():
    return make_record
