"""JSON loading of the page's embedded photo list.

The server layer renders the gallery configuration as a JSON document:

    {"eventSlug": "...", "showUsername": true, "showDate": true,
     "photos": [{"id": 1, "url": "...", "thumbnail_url": "...", ...}]}

Rows that lack an image URL are skipped with a warning. A missing document
yields an empty catalog rather than an error.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any

from loguru import logger

from core.models import PhotoRecord
from core.services.catalog import PhotoCatalog


@dataclass
class CatalogPage:
    """Photo catalog plus the page-level display flags."""

    catalog: PhotoCatalog = field(default_factory=PhotoCatalog)
    show_username: bool = True
    show_date: bool = True
    event_slug: str | None = None


def _optional_str(value: Any) -> str | None:
    """Return `value` as a stripped string, or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_flag(value: Any, default: bool) -> bool:
    """Parse JSON flags that may arrive as bool, 0/1 or "true"/"false"."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes"}


def parse_photo(row: dict[str, Any]) -> PhotoRecord:
    """Build a `PhotoRecord` from one row of the photo list.

    Raises:
        ValueError: If the row has no `url`.
    """
    url = _optional_str(row.get("url"))
    if not url:
        raise ValueError("photo row has no url")
    photo_id = _optional_str(row.get("id")) or url
    return PhotoRecord(
        id=photo_id,
        display_url=url,
        caption=_optional_str(row.get("original_name")) or "",
        preview_url=_optional_str(row.get("thumbnail_url")),
        attribution_name=_optional_str(row.get("username")),
        display_timestamp=_optional_str(row.get("uploaded_at_formatted")),
    )


class JsonCatalogRepository:
    """Load the gallery photo list from a JSON document."""

    def load(self, json_path: str | None) -> CatalogPage:
        """Return the `CatalogPage` stored at `json_path`.

        A path that is missing or cannot be read yields an empty page.

        Raises:
            ValueError: If the file exists but is not a JSON object.
        """
        if not json_path:
            return CatalogPage()
        path = Path(json_path)
        if not path.exists():
            logger.warning("Catalog file not found: {}", path)
            return CatalogPage()
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as ex:
            raise ValueError(f"Catalog file is not valid JSON: {path} ({ex})") from ex
        except (OSError, UnicodeDecodeError) as ex:
            logger.warning("Catalog file could not be read: {} ({})", path, ex)
            return CatalogPage()
        return self.from_config(data)

    def from_config(self, data: Any) -> CatalogPage:
        """Build a `CatalogPage` from an already-decoded configuration."""
        if isinstance(data, list):
            data = {"photos": data}
        if not isinstance(data, dict):
            raise ValueError("Catalog configuration must be a JSON object")
        return CatalogPage(
            catalog=PhotoCatalog(self._iter_records(data.get("photos") or [])),
            show_username=parse_flag(data.get("showUsername"), True),
            show_date=parse_flag(data.get("showDate"), True),
            event_slug=_optional_str(data.get("eventSlug")),
        )

    def _iter_records(self, rows: Any) -> Iterator[PhotoRecord]:
        seen: set[str] = set()
        if not isinstance(rows, list):
            logger.error("Catalog photos entry is not a list: {}", type(rows).__name__)
            return
        for row in rows:
            try:
                if not isinstance(row, dict):
                    raise TypeError(f"unexpected row type {type(row).__name__}")
                record = parse_photo(row)
            except (ValueError, TypeError) as ex:
                logger.warning("Catalog row skipped: {} | row={}", ex, row)
                continue
            if record.id in seen:
                logger.warning("Duplicate photo id skipped: {}", record.id)
                continue
            seen.add(record.id)
            yield record
