"""Core domain models for photo records shown on the wall."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PhotoRecord:
    """A single uploaded photo as supplied by the page data."""

    id: str
    display_url: str
    caption: str = ""
    preview_url: str | None = None
    attribution_name: str | None = None
    display_timestamp: str | None = None

    @property
    def preview_or_display(self) -> str:
        """Thumbnail URL, falling back to the full-resolution one."""
        return self.preview_url or self.display_url

    @classmethod
    def adhoc(
        cls,
        url: str,
        caption: str = "",
        attribution_name: str | None = None,
        display_timestamp: str | None = None,
    ) -> PhotoRecord:
        """Build a record for an image that is not part of any catalog."""
        return cls(
            id="",
            display_url=url,
            caption=caption,
            attribution_name=attribution_name,
            display_timestamp=display_timestamp,
        )
