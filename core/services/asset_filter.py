"""Location/time filter over library assets with a write-once studio cache.

The first result computed for a studio is frozen for the lifetime of the
cache: later calls return the same tuple even if the library contents or the
acceptance window changed in the meantime. There is no invalidation path.
"""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from core.models import MediaAsset, Studio
from core.services.acceptance import AcceptanceWindow
from core.services.geo import distance_m
from core.services.interfaces import MediaLibrary
from core.services.permission import LibraryPermission


class AssetFilterCache:
    """Filters assets per studio and memoizes the result by studio identity."""

    def __init__(
        self, permission: LibraryPermission, window: AcceptanceWindow | None = None
    ) -> None:
        """Create a filter cache.

        Args:
            permission: Gate checked before any computation.
            window: Acceptance window (defaults to a rolling six months).
        """
        self._permission = permission
        self._window = window or AcceptanceWindow.rolling(6)
        self._cache: dict[str, tuple[MediaAsset, ...]] = {}

    @property
    def window(self) -> AcceptanceWindow:
        return self._window

    def cached(self, studio: Studio) -> tuple[MediaAsset, ...] | None:
        """Return the cached result for `studio`, or None."""
        return self._cache.get(studio.id)

    def is_cached(self, studio: Studio) -> bool:
        return studio.id in self._cache

    def filter_assets(
        self, studio: Studio, all_assets: Iterable[MediaAsset]
    ) -> tuple[MediaAsset, ...] | None:
        """Return assets recorded inside `studio`'s radius and the acceptance window.

        Returns the cached tuple when present. Returns None, without caching,
        while library access is not authorized.
        """
        hit = self._cache.get(studio.id)
        if hit is not None:
            return hit

        if not self._permission.is_authorized:
            logger.debug("Skip filtering for {}: library not authorized", studio.name)
            return None

        center = studio.center
        cutoff = self._window.cutoff()
        matched: list[MediaAsset] = []
        total = 0
        for asset in all_assets:
            total += 1
            if asset.location is None:
                continue
            # NaN distance or radius never counts as inside
            if not distance_m(asset.location, center) <= studio.radius_m:
                continue
            if not self._window.accepts(asset.creation_date, cutoff):
                continue
            matched.append(asset)

        result = self._cache.setdefault(studio.id, tuple(matched))
        logger.info(
            "Studio {}: {} of {} assets within {:.0f} m, {}",
            studio.name,
            len(result),
            total,
            studio.radius_m,
            self._window.describe(),
        )
        return result

    def assets_for(self, studio: Studio, library: MediaLibrary) -> tuple[MediaAsset, ...] | None:
        """Return the cached result or enumerate `library` once and filter it."""
        hit = self._cache.get(studio.id)
        if hit is not None:
            return hit
        if not self._permission.is_authorized:
            logger.debug("Skip enumeration for {}: library not authorized", studio.name)
            return None
        return self.filter_assets(studio, library.enumerate_video_assets())
