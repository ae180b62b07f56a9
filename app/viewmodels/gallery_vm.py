"""ViewModel for the photo grid and its photo-count indicator."""

from __future__ import annotations

from loguru import logger

from app.viewmodels.photo_vm import PhotoVM
from core.services.catalog import PhotoCatalog


class GalleryVM:
    """Gallery view-model.

    Mediates between a repository providing the page's photo list and the
    grid view. Sorting and filtering are not supported, so every catalog
    photo is displayed.
    """

    def __init__(
        self,
        repo,
        show_username: bool | None = None,
        show_date: bool | None = None,
    ) -> None:
        """Create a GalleryVM.

        Args:
            repo: Repository with a `load(path)` method returning a `CatalogPage`.
            show_username: Overrides the page's attribution flag when not None.
            show_date: Overrides the page's date flag when not None.
        """
        self._repo = repo
        self._show_username_override = show_username
        self._show_date_override = show_date
        self.catalog = PhotoCatalog()
        self.show_username = True if show_username is None else show_username
        self.show_date = True if show_date is None else show_date
        self.event_slug: str | None = None

    def load(self, path: str | None) -> None:
        """Load the photo list at `path`; a missing input yields an empty catalog."""
        page = self._repo.load(path)
        self.catalog = page.catalog
        self.event_slug = page.event_slug
        self.show_username = (
            page.show_username
            if self._show_username_override is None
            else self._show_username_override
        )
        self.show_date = (
            page.show_date if self._show_date_override is None else self._show_date_override
        )
        logger.info("Gallery loaded {} photos from {}", self.catalog.size(), path or "(none)")

    @property
    def tiles(self) -> list[PhotoVM]:
        """Tile view models in display order."""
        return [
            PhotoVM(record=rec, show_username=self.show_username, show_date=self.show_date)
            for rec in self.catalog
        ]

    @property
    def total_count(self) -> int:
        return self.catalog.size()

    @property
    def displayed_count(self) -> int:
        # No filtering: everything in the catalog is displayed
        return self.catalog.size()

    @property
    def photo_count_text(self) -> str:
        """Text for the photo-count indicator."""
        return format_photo_count(self.displayed_count, self.total_count)


def format_photo_count(displayed: int, total: int) -> str:
    """Return "N photos", or "M of N photos" when only part is displayed."""
    noun = "photo" if total == 1 else "photos"
    if displayed == total:
        return f"{total} {noun}"
    return f"{displayed} of {total} {noun}"
