"""Core service interfaces, errors and shared data structures.

The media library is the only external capability the core consumes. It is
expressed as a protocol so the filter, permission and metadata services can be
exercised against any backend (the local directory library, or a fake in
tests).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from core.models import AuthorizationStatus, MediaAsset


class VideologError(Exception):
    """Base class for application errors."""


class LibraryAccessError(VideologError):
    """Raised when the library is used before access was granted."""


class MetadataLoadError(VideologError):
    """Raised when an asset has no accessible decodable form."""


class ProbeError(VideologError):
    """Raised when a media probe cannot be run or parsed."""


@dataclass
class DecodableAsset:
    """Fully loaded, introspectable form of an asset.

    Attributes:
        asset: The asset this form was loaded for.
        formats: Mapping of format name to its raw key/value tags.
    """

    asset: MediaAsset
    formats: dict[str, dict[str, Any]] = field(default_factory=dict)


class MediaLibrary(Protocol):
    """Capability surface of a media library backend."""

    def request_access(self) -> AuthorizationStatus:
        """Ask for access to the library and return the resulting status."""
        raise NotImplementedError

    def enumerate_video_assets(self) -> Sequence[MediaAsset]:
        """Return every video asset in the library (requires access)."""
        raise NotImplementedError

    def fetch_thumbnail(self, asset: MediaAsset, target_size: int) -> Any:
        """Return a thumbnail image for `asset` bounded by `target_size`."""
        raise NotImplementedError

    def load_decodable(self, asset: MediaAsset) -> DecodableAsset:
        """Load the decodable form of `asset` or raise `MetadataLoadError`."""
        raise NotImplementedError

    def list_metadata_formats(self, decodable: DecodableAsset) -> list[str]:
        """Return the metadata format names available on `decodable`."""
        raise NotImplementedError

    def load_metadata(self, decodable: DecodableAsset, fmt: str) -> list[tuple[str, Any]]:
        """Return the raw (key, value) pairs of format `fmt`."""
        raise NotImplementedError
