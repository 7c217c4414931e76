"""Utilities for parsing media tag values (dates and ISO 6709 locations).

Parsing is best-effort and never raises: callers should expect `None` when a
value is missing or malformed.
"""

from __future__ import annotations

from datetime import datetime, timezone
import re

from loguru import logger

from core.models import GeoPoint

DISPLAY_DT_FMT = "%Y-%m-%d %H:%M:%S"

# +37.4757-122.2131+010.000/  or  +37.4757-122.2131/
_ISO6709_RE = re.compile(
    r"^\s*([+-]\d+(?:\.\d+)?)([+-]\d+(?:\.\d+)?)([+-]\d+(?:\.\d+)?)?(?:CRS[^/]*)?/?\s*$"
)


def parse_iso6709(value: str | None) -> GeoPoint | None:
    """Parse an ISO 6709 decimal-degree string into a `GeoPoint`."""
    if not value:
        return None
    m = _ISO6709_RE.match(str(value))
    if not m:
        logger.debug("Unrecognized ISO 6709 location: {}", value)
        return None
    try:
        lat = float(m.group(1))
        lon = float(m.group(2))
    except ValueError:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        logger.debug("Out of range ISO 6709 location: {}", value)
        return None
    return GeoPoint(lat, lon)


def parse_media_datetime(value: str | None) -> datetime | None:
    """Parse a container timestamp into an aware UTC datetime.

    Accepts ISO-8601 (`2024-12-27T10:00:00.000000Z`, with or without offset)
    and EXIF-style `YYYY:MM:DD HH:MM:SS`. Naive values are taken as UTC.
    """
    if not value:
        return None
    s = str(value).strip()
    try:
        if len(s) >= 19 and s[4] == ":" and s[7] == ":":
            dt = datetime.strptime(s[:19], "%Y:%m:%d %H:%M:%S")
        else:
            if s.endswith("Z"):
                s = s[:-1] + "+00:00"
            # QuickTime writes offsets like +0100
            s = re.sub(r"([+-]\d{2})(\d{2})$", r"\1:\2", s)
            dt = datetime.fromisoformat(s)
    except ValueError:
        logger.debug("Unparseable media timestamp: {}", value)
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_display_datetime(dt: datetime | None) -> str:
    """Format an aware datetime in local time for display; empty when None."""
    try:
        return dt.astimezone().strftime(DISPLAY_DT_FMT) if dt else ""
    except (ValueError, TypeError, AttributeError, OverflowError):
        return ""
