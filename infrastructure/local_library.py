"""Directory-backed media library.

Treats a folder tree of video files as the user's media library. Assets are
enumerated in sorted path order and probed with ffprobe for their recorded
location and creation time. Probe results are memoized per file signature.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
import threading
from typing import Any

from loguru import logger

from core.models import AuthorizationStatus, MediaAsset
from core.services.interfaces import (
    DecodableAsset,
    LibraryAccessError,
    MetadataLoadError,
    ProbeError,
)
from infrastructure.ffprobe import ProbeResult, run_ffprobe

DEFAULT_VIDEO_EXTENSIONS = (".mov", ".mp4", ".m4v", ".avi", ".mkv", ".mts", ".3gp", ".webm")
CONTAINER_FORMAT = "container"


def _asset_id(path: str) -> str:
    return hashlib.sha1(path.encode("utf-8", errors="ignore")).hexdigest()[:16]


class LocalMediaLibrary:
    """Media library over a local directory, probed with ffprobe."""

    def __init__(
        self,
        root: str | Path,
        *,
        thumbnails: Any | None = None,
        ffprobe: str = "ffprobe",
        extensions: tuple[str, ...] = DEFAULT_VIDEO_EXTENSIONS,
    ) -> None:
        """Create a library.

        Args:
            root: Library root directory.
            thumbnails: Service with `get_thumbnail(path, size)`.
            ffprobe: ffprobe executable name or path.
            extensions: Lower-case video file suffixes to include.
        """
        self._root = Path(os.path.expanduser(str(root)))
        self._thumbs = thumbnails
        self._ffprobe = ffprobe
        self._extensions = tuple(e.lower() for e in extensions)
        self._status = AuthorizationStatus.NOT_DETERMINED
        self._probe_cache: dict[tuple[str, int, int], ProbeResult] = {}
        self._probe_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Any, thumbnails: Any | None = None) -> LocalMediaLibrary:
        root = settings.get("library.root") or str(Path.home() / "Movies")
        exts = settings.get("library.extensions")
        extensions = DEFAULT_VIDEO_EXTENSIONS
        if isinstance(exts, list) and exts:
            extensions = tuple(str(e).lower() for e in exts)
        return cls(
            root,
            thumbnails=thumbnails,
            ffprobe=str(settings.get("tools.ffprobe", "ffprobe") or "ffprobe"),
            extensions=extensions,
        )

    @property
    def root(self) -> Path:
        return self._root

    @property
    def status(self) -> AuthorizationStatus:
        return self._status

    def request_access(self) -> AuthorizationStatus:
        """Grant access when the root directory exists and is readable."""
        if self._root.is_dir() and os.access(self._root, os.R_OK | os.X_OK):
            self._status = AuthorizationStatus.AUTHORIZED
        else:
            logger.warning("Library root not accessible: {}", self._root)
            self._status = AuthorizationStatus.DENIED
        return self._status

    def _require_access(self) -> None:
        if self._status is not AuthorizationStatus.AUTHORIZED:
            raise LibraryAccessError(f"library access is {self._status.value}: {self._root}")

    def iter_video_paths(self) -> list[Path]:
        """Return video files under the root in sorted order."""
        found: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(self._root):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            for name in sorted(filenames):
                if name.startswith("."):
                    continue
                if Path(name).suffix.lower() in self._extensions:
                    found.append(Path(dirpath) / name)
        return found

    def enumerate_video_assets(self) -> list[MediaAsset]:
        """Probe every video file and return assets in enumeration order.

        Files that fail to probe are still listed, without location or date.
        """
        self._require_access()
        assets: list[MediaAsset] = []
        for path in self.iter_video_paths():
            probe = self._probe(str(path))
            if probe is None:
                assets.append(MediaAsset(asset_id=_asset_id(str(path)), file_path=str(path)))
                continue
            assets.append(
                MediaAsset(
                    asset_id=_asset_id(str(path)),
                    file_path=str(path),
                    location=probe.location,
                    creation_date=probe.creation_date,
                    duration_s=probe.duration_s,
                )
            )
        logger.info("Enumerated {} video assets under {}", len(assets), self._root)
        return assets

    def _probe(self, path: str) -> ProbeResult | None:
        try:
            st = os.stat(path)
        except OSError as ex:
            logger.warning("stat failed for {}: {}", path, ex)
            return None
        sig = (path, int(st.st_mtime_ns), int(st.st_size))
        with self._probe_lock:
            hit = self._probe_cache.get(sig)
        if hit is not None:
            return hit
        try:
            result = run_ffprobe(path, self._ffprobe)
        except ProbeError as ex:
            logger.warning("Probe failed: {}", ex)
            return None
        with self._probe_lock:
            self._probe_cache[sig] = result
        return result

    def fetch_thumbnail(self, asset: MediaAsset, target_size: int) -> Any:
        if self._thumbs is None:
            return None
        return self._thumbs.get_thumbnail(asset.file_path, target_size)

    def load_decodable(self, asset: MediaAsset) -> DecodableAsset:
        """Probe `asset` afresh and expose its container and stream tags."""
        if not os.path.isfile(asset.file_path):
            raise MetadataLoadError(f"file not found: {asset.file_path}")
        try:
            probe = run_ffprobe(asset.file_path, self._ffprobe)
        except ProbeError as ex:
            raise MetadataLoadError(str(ex)) from ex
        formats: dict[str, dict[str, Any]] = {CONTAINER_FORMAT: dict(probe.format_tags)}
        for name, tags in probe.stream_tags.items():
            formats[name] = dict(tags)
        return DecodableAsset(asset=asset, formats=formats)

    def list_metadata_formats(self, decodable: DecodableAsset) -> list[str]:
        return list(decodable.formats)

    def load_metadata(self, decodable: DecodableAsset, fmt: str) -> list[tuple[str, Any]]:
        try:
            tags = decodable.formats[fmt]
        except KeyError as ex:
            raise MetadataLoadError(f"unknown metadata format: {fmt}") from ex
        if not isinstance(tags, dict):
            raise MetadataLoadError(f"metadata format {fmt} is not a key/value map")
        return list(tags.items())
