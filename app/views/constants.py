"""
UI/view constants centralized for reuse across view modules.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

WINDOW_TITLE: str = "Videolog"

# Metadata table
METADATA_HEADERS: list[str] = ["Format", "Common Key", "Key", "Value"]
COL_FORMAT: int = 0
COL_COMMON_KEY: int = 1
COL_KEY: int = 2
COL_VALUE: int = 3

# Data roles
ASSET_ROLE: int = Qt.UserRole  # MediaAsset on grid items
STUDIO_ROLE: int = Qt.UserRole + 1  # Studio on list items

# Messages
MSG_REQUESTING: str = "Requesting access to the video library..."
MSG_DENIED: str = "Access to the video library denied. Check the library folder in settings.json."
MSG_LOADING: str = "Loading videos..."
MSG_EMPTY: str = "No videos recorded here in the acceptance window."

# Grid defaults
DEFAULT_THUMB_SIZE: int = 256  # overridable by settings.json
GRID_SPACING_PX: int = 8
