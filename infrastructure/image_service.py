"""Image fetching, decoding, and caching utilities.

Images are addressed by opaque URL strings from the page data: `http(s)://`
locations are fetched with requests, `file://` URLs and plain paths are read
from disk. Decoding uses Qt first and Pillow as a fallback. Failures are
reported as `None`, never raised to the caller.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
import hashlib
import io
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse

from PIL import Image, ImageOps
from PySide6.QtCore import QBuffer, QByteArray, QIODevice, QSize, Qt
from PySide6.QtGui import QImage, QImageReader
from loguru import logger
import requests

DEFAULT_TIMEOUT_SECONDS = 15.0


def _compute_cache_key(url: str, size_key: int) -> str:
    """Compute a stable cache key from url and requested side."""
    sig = f"{url}|{int(size_key)}".encode("utf-8", errors="ignore")
    return hashlib.sha1(sig).hexdigest()


@dataclass
class _MemCacheItem:
    key: str
    image: QImage


class _LRUCache:
    def __init__(self, capacity: int) -> None:
        self._cap = max(1, int(capacity or 1))
        self._data: OrderedDict[str, _MemCacheItem] = OrderedDict()

    def get(self, key: str) -> QImage | None:
        """Return cached QImage for key, moving it to the MRU position."""
        item = self._data.get(key)
        if not item:
            return None
        self._data.move_to_end(key)
        return item.image

    def put(self, key: str, image: QImage) -> None:
        """Insert or update `key` with `image`, evicting LRU when over capacity."""
        self._data[key] = _MemCacheItem(key, image)
        self._data.move_to_end(key)
        while len(self._data) > self._cap:
            self._data.popitem(last=False)

    def __len__(self) -> int:
        return len(self._data)


class ImageService:
    """High-level image service with a memory cache and two decoders."""

    def __init__(self, settings: object | None = None, session: Any | None = None) -> None:
        """Initialize cache size and network timeout from settings."""
        self._mem_cap = 256
        self._timeout = DEFAULT_TIMEOUT_SECONDS
        if settings is not None:
            try:
                self._mem_cap = int(settings.get("image_cache.mem_items", 256) or 256)
            except (ValueError, TypeError):
                self._mem_cap = 256
            try:
                self._timeout = float(
                    settings.get("network.timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
                    or DEFAULT_TIMEOUT_SECONDS
                )
            except (ValueError, TypeError):
                self._timeout = DEFAULT_TIMEOUT_SECONDS
        self._session = session or requests.Session()
        self._mem_cache = _LRUCache(self._mem_cap)

    # Public API
    def get_thumbnail(self, url: str, size: int) -> QImage | None:
        """Return a grid thumbnail for `url` bounded by `size`."""
        return self._get_image(url, size)

    def get_full(self, url: str) -> QImage | None:
        """Return the full-resolution image for `url`."""
        return self._get_image(url, 0)

    # Internal helpers
    def _get_image(self, url: str, requested_side: int) -> QImage | None:
        """Get image via memory cache or fetch, decode and cache it."""
        key = _compute_cache_key(url, requested_side)
        img = self._mem_cache.get(key)
        if img is not None and not img.isNull():
            return img

        data = self._read_bytes(url)
        if data is None:
            return None
        img = self._decode(data, requested_side)
        if img is None or img.isNull():
            logger.warning("Could not decode image: {}", url)
            return None
        self._mem_cache.put(key, img)
        return img

    def _read_bytes(self, url: str) -> bytes | None:
        """Fetch raw bytes for `url` from the network or the filesystem."""
        parsed = urlparse(url)
        if parsed.scheme in {"http", "https"}:
            try:
                resp = self._session.get(url, timeout=self._timeout)
                resp.raise_for_status()
                return resp.content
            except requests.RequestException as ex:
                logger.warning("Image fetch failed for {}: {}", url, ex)
                return None
        path = Path(unquote(parsed.path)) if parsed.scheme == "file" else Path(url)
        try:
            return path.read_bytes()
        except OSError as ex:
            logger.warning("Image read failed for {}: {}", path, ex)
            return None

    def _decode(self, data: bytes, requested_side: int) -> QImage | None:
        """Decode with QImageReader, falling back to Pillow."""
        img = self._decode_via_qt(data, requested_side)
        if img is not None and not img.isNull():
            return img
        return self._decode_via_pillow(data, requested_side)

    def _decode_via_qt(self, data: bytes, requested_side: int) -> QImage | None:
        buf = QBuffer()
        buf.setData(QByteArray(data))
        buf.open(QIODevice.ReadOnly)
        try:
            reader = QImageReader(buf)
            reader.setAutoTransform(True)
            if requested_side and requested_side > 0 and reader.size().isValid():
                orig = reader.size()
                w, h = orig.width(), orig.height()
                if w > 0 and h > 0:
                    if w >= h:
                        nw = min(requested_side, w)
                        nh = int(h * (nw / max(1, w)))
                    else:
                        nh = min(requested_side, h)
                        nw = int(w * (nh / max(1, h)))
                    reader.setScaledSize(QSize(max(1, nw), max(1, nh)))
            img = reader.read()
            if img is None or img.isNull():
                logger.debug("QImageReader failed: {}", reader.errorString())
                return None
            if requested_side and requested_side > 0:
                if img.width() > requested_side or img.height() > requested_side:
                    img = img.scaled(
                        requested_side, requested_side, Qt.KeepAspectRatio, Qt.SmoothTransformation
                    )
            return img
        finally:
            buf.close()

    def _decode_via_pillow(self, data: bytes, requested_side: int) -> QImage | None:
        """Decode with Pillow for formats the Qt plugins do not cover."""
        try:
            with Image.open(io.BytesIO(data)) as im:
                try:
                    im = ImageOps.exif_transpose(im)
                except (OSError, ValueError, AttributeError):
                    pass
                if requested_side and requested_side > 0:
                    resampling = getattr(Image, "Resampling", Image)
                    im.thumbnail((requested_side, requested_side), resampling.LANCZOS)
                return self._pil_to_qimage(im)
        except (OSError, ValueError) as ex:
            logger.debug("Pillow decode failed: {}", ex)
            return None

    def _pil_to_qimage(self, pil_img: Any) -> QImage | None:
        """Convert a Pillow image to `QImage` and detach from the source buffer."""
        try:
            mode = pil_img.mode
            if mode not in ("RGBA", "RGB"):
                pil_img = pil_img.convert("RGBA")
                mode = pil_img.mode
            if mode == "RGB":
                data = pil_img.tobytes("raw", "RGB")
                qimg = QImage(
                    data, pil_img.width, pil_img.height, pil_img.width * 3, QImage.Format_RGB888
                )
            else:
                data = pil_img.tobytes("raw", "RGBA")
                qimg = QImage(
                    data, pil_img.width, pil_img.height, pil_img.width * 4, QImage.Format_RGBA8888
                )
            if qimg is None or qimg.isNull():
                return None
            return qimg.copy()
        except (ValueError, TypeError) as ex:
            logger.debug("PIL->QImage convert failed: {}", ex)
            return None
