from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from core.models import AuthorizationStatus, MediaAsset, Studio
from core.services.acceptance import AcceptanceWindow
from core.services.asset_filter import AssetFilterCache
from core.services.interfaces import DecodableAsset, MetadataLoadError
from core.services.permission import LibraryPermission

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class FakeLibrary:
    """In-memory media library used across tests."""

    def __init__(
        self,
        assets: list[MediaAsset] | None = None,
        status: AuthorizationStatus = AuthorizationStatus.AUTHORIZED,
        formats: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        self.assets = list(assets or [])
        self.status = status
        self.formats = formats if formats is not None else {}
        self.broken_formats: set[str] = set()
        self.decodable_error: str | None = None
        self.enumerations = 0
        self.access_requests = 0

    def request_access(self) -> AuthorizationStatus:
        self.access_requests += 1
        return self.status

    def enumerate_video_assets(self) -> list[MediaAsset]:
        self.enumerations += 1
        return list(self.assets)

    def fetch_thumbnail(self, asset: MediaAsset, target_size: int) -> Any:
        return f"thumb:{asset.asset_id}:{target_size}"

    def load_decodable(self, asset: MediaAsset) -> DecodableAsset:
        if self.decodable_error:
            raise MetadataLoadError(self.decodable_error)
        return DecodableAsset(asset=asset, formats=dict(self.formats))

    def list_metadata_formats(self, decodable: DecodableAsset) -> list[str]:
        return list(decodable.formats)

    def load_metadata(self, decodable: DecodableAsset, fmt: str) -> list[tuple[str, Any]]:
        if fmt in self.broken_formats:
            raise MetadataLoadError(f"cannot decode {fmt}")
        return list(decodable.formats[fmt].items())


@pytest.fixture
def studio() -> Studio:
    return Studio(name="Test Studio", latitude=37.47567, longitude=-122.21316, radius_m=100.0)


@pytest.fixture
def window() -> AcceptanceWindow:
    return AcceptanceWindow.rolling(6, clock=lambda: NOW)


@pytest.fixture
def authorized() -> LibraryPermission:
    return LibraryPermission(AuthorizationStatus.AUTHORIZED)


@pytest.fixture
def cache(authorized: LibraryPermission, window: AcceptanceWindow) -> AssetFilterCache:
    return AssetFilterCache(authorized, window)
