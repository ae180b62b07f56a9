"""Lightweight view model wrapper around `PhotoRecord` for grid tiles."""

from __future__ import annotations

from dataclasses import dataclass

from core.models import PhotoRecord


@dataclass
class PhotoVM:
    """Expose tile-ready properties for the gallery grid."""

    record: PhotoRecord
    show_username: bool = True
    show_date: bool = True

    @property
    def key(self) -> str:
        """Stable identifier used for thumbnail requests."""
        return self.record.id or self.record.display_url

    @property
    def thumbnail_url(self) -> str:
        return self.record.preview_or_display

    @property
    def alt_text(self) -> str:
        """Caption, falling back to a generic label."""
        return self.record.caption or "Photo"

    @property
    def overlay_lines(self) -> list[str]:
        """Attribution and date lines shown over the tile."""
        lines: list[str] = []
        if self.show_username and self.record.attribution_name:
            lines.append(self.record.attribution_name)
        if self.show_date and self.record.display_timestamp:
            lines.append(self.record.display_timestamp)
        return lines
