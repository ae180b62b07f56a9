"""
UI/view constants centralized for reuse across view modules.

This module only centralizes magic numbers, texts and key mappings.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

from app.viewmodels.lightbox_vm import KEY_ESCAPE, KEY_LEFT, KEY_RIGHT

# Grid defaults
DEFAULT_THUMB_SIZE: int = 240  # overridable by settings.json
GRID_MIN_THUMB_PX: int = 160
GRID_SPACING_PX: int = 8
GRID_MARGIN_RATIO: float = 0.02  # left/right and top/bottom

# Lightbox defaults
DEFAULT_FADE_MS: int = 200
LIGHTBOX_BACKDROP_CSS: str = "background-color: rgba(0, 0, 0, 230);"
TAP_SLOP_PX: int = 10  # pointer travel still counted as a click

# Texts
WINDOW_TITLE: str = "Photo Wall"
EMPTY_TEXT: str = "No photos yet"
LOADING_TEXT: str = "Loading…"
THUMB_ERROR_TEXT: str = "⚠ Image could not be loaded"
THUMB_ERROR_CSS: str = "color: #dc3545; padding: 12px;"

# Qt key -> controller key name
KEY_NAMES: dict[int, str] = {
    Qt.Key_Escape: KEY_ESCAPE,
    Qt.Key_Left: KEY_LEFT,
    Qt.Key_Right: KEY_RIGHT,
}
