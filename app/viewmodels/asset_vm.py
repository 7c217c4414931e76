"""Lightweight view model wrapper around `MediaAsset`."""

from __future__ import annotations

from dataclasses import dataclass

from core.models import GeoPoint, MediaAsset
from core.services.geo import distance_m
from infrastructure.utils import format_display_datetime


@dataclass
class AssetVM:
    """Expose display strings for a video tile."""

    asset: MediaAsset
    studio_center: GeoPoint | None = None

    @property
    def file_name(self) -> str:
        """Base name of the file path."""
        return self.asset.file_name

    @property
    def recorded_at(self) -> str:
        """Creation date in local time, or empty."""
        return format_display_datetime(self.asset.creation_date)

    @property
    def duration_text(self) -> str:
        secs = self.asset.duration_s
        if secs is None:
            return ""
        minutes, seconds = divmod(int(round(secs)), 60)
        return f"{minutes}:{seconds:02d}"

    @property
    def distance_text(self) -> str:
        """Distance to the studio centre, e.g. "42 m"."""
        if self.asset.location is None or self.studio_center is None:
            return ""
        return f"{distance_m(self.asset.location, self.studio_center):.0f} m"

    @property
    def caption(self) -> str:
        parts = [self.file_name]
        details = " · ".join(p for p in (self.recorded_at, self.duration_text) if p)
        if details:
            parts.append(details)
        return "\n".join(parts)
