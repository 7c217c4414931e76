"""ViewModel owning the observable application state.

All setters are expected to run on the UI thread. Background work goes
through the `compute_*` methods, whose results are handed back to the
matching `on_*` setter once delivered to the UI thread. Every state change is
announced to subscribers as `(event, payload)`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from loguru import logger

from core.models import AuthorizationStatus, MediaAsset, MetadataReport, Studio
from core.services.asset_filter import AssetFilterCache
from core.services.interfaces import LibraryAccessError, MediaLibrary
from core.services.metadata_inspector import InspectionState, MetadataInspector
from core.services.permission import LibraryPermission
from core.services.studio_registry import StudioRegistry

Listener = Callable[[str, Any], None]

EVENT_AUTHORIZATION = "authorization"
EVENT_STUDIO_SELECTED = "studio_selected"
EVENT_ASSETS = "assets"
EVENT_ASSET_SELECTED = "asset_selected"
EVENT_METADATA = "metadata"


class MainVM:
    """Main application view-model.

    Mediates between the media library, the studio registry and the asset
    filter cache on one side and the Qt views on the other.
    """

    def __init__(
        self,
        library: MediaLibrary,
        registry: StudioRegistry,
        permission: LibraryPermission | None = None,
        asset_cache: AssetFilterCache | None = None,
    ) -> None:
        """Create a MainVM.

        Args:
            library: Media library backend.
            registry: Studios to offer.
            permission: Authorization holder (a fresh one by default).
            asset_cache: Filter cache sharing `permission` (created if omitted).
        """
        self._library = library
        self.registry = registry
        self.permission = permission or LibraryPermission()
        self.asset_cache = asset_cache or AssetFilterCache(self.permission)
        self._listeners: list[Listener] = []

        self.selected_studio: Studio | None = None
        self.studio_assets: dict[str, tuple[MediaAsset, ...]] = {}
        self.selected_asset: MediaAsset | None = None
        self.metadata_state = InspectionState.NOT_REQUESTED
        self.metadata_report: MetadataReport | None = None

    # Subscriptions
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener`; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self, event: str, payload: Any) -> None:
        for listener in list(self._listeners):
            listener(event, payload)

    # Authorization
    @property
    def authorization(self) -> AuthorizationStatus:
        return self.permission.status

    def compute_access(self) -> AuthorizationStatus:
        """Ask the library for access; safe to call off the UI thread.

        Nothing is recorded here, `on_access_result` stores the answer.
        """
        return LibraryPermission.ask(self._library)

    def on_access_result(self, status: AuthorizationStatus) -> None:
        self.permission.update(status)
        self._publish(EVENT_AUTHORIZATION, status)

    # Studios and assets
    @property
    def studios(self) -> tuple[Studio, ...]:
        return self.registry.studios

    def select_studio(self, studio: Studio) -> bool:
        """Select `studio`; returns True when its assets still need loading."""
        self.selected_studio = studio
        self.selected_asset = None
        self.metadata_report = None
        self.metadata_state = InspectionState.NOT_REQUESTED
        self._publish(EVENT_STUDIO_SELECTED, studio)
        cached = self.asset_cache.cached(studio)
        if cached is not None:
            self.on_assets_loaded(studio, cached)
            return False
        return self.permission.is_authorized

    def compute_assets(self, studio: Studio) -> tuple[MediaAsset, ...] | None:
        """Enumerate and filter once per studio; safe to call off the UI thread."""
        try:
            return self.asset_cache.assets_for(studio, self._library)
        except LibraryAccessError as ex:
            logger.warning("Asset enumeration refused for {}: {}", studio.name, ex)
            return None

    def on_assets_loaded(self, studio: Studio, assets: tuple[MediaAsset, ...] | None) -> None:
        if assets is None:
            return
        self.studio_assets[studio.id] = assets
        self._publish(EVENT_ASSETS, (studio, assets))

    def assets_of(self, studio: Studio) -> tuple[MediaAsset, ...]:
        return self.studio_assets.get(studio.id, ())

    # Metadata
    def select_asset(self, asset: MediaAsset) -> None:
        self.selected_asset = asset
        self.metadata_report = None
        self.metadata_state = InspectionState.REQUESTING
        self._publish(EVENT_ASSET_SELECTED, asset)

    def compute_metadata(self, asset: MediaAsset) -> MetadataReport:
        """Inspect `asset`; safe to call off the UI thread."""
        return MetadataInspector(self._library).inspect(asset)

    def on_metadata_loaded(self, report: MetadataReport) -> None:
        if self.selected_asset is None or report.asset.asset_id != self.selected_asset.asset_id:
            logger.debug("Dropping stale metadata for {}", report.asset.file_path)
            return
        self.metadata_report = report
        self.metadata_state = InspectionState.AVAILABLE if report.ok else InspectionState.FAILED
        self._publish(EVENT_METADATA, report)

    # Thumbnails
    def compute_thumbnail(self, asset: MediaAsset, size: int) -> Any:
        return self._library.fetch_thumbnail(asset, size)
