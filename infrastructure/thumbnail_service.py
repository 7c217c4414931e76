"""Video thumbnail extraction and caching.

Frames are grabbed with ffmpeg, scaled with Pillow and handed to the UI as
`QImage`. Results are cached in memory (LRU) and on disk (JPEG written and
read through Pillow).
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
import hashlib
import io
import os
from pathlib import Path
import subprocess
from typing import Any

from PIL import Image, ImageOps, UnidentifiedImageError
from PySide6.QtGui import QColor, QImage
from loguru import logger

from infrastructure.logging import get_app_data_directory

FRAME_TIMEOUT_S = 30
PLACEHOLDER_SIDE = 64
PLACEHOLDER_GREY = 220


def _compute_cache_key(path: str, size_key: int) -> str:
    """Compute a stable cache key from path, mtime, size, and requested side."""
    try:
        st = os.stat(path)
        sig = f"{path}|{int(st.st_mtime_ns)}|{int(st.st_size)}|{int(size_key)}".encode(
            "utf-8", errors="ignore"
        )
    except OSError:
        sig = f"{path}|0|0|{int(size_key)}".encode("utf-8", errors="ignore")
    return hashlib.sha1(sig).hexdigest()


def _ensure_dir(p: Path) -> None:
    """Create directory `p` if missing (including parents)."""
    p.mkdir(parents=True, exist_ok=True)


def make_placeholder() -> QImage:
    img = QImage(PLACEHOLDER_SIDE, PLACEHOLDER_SIDE, QImage.Format_ARGB32)
    img.fill(QColor(PLACEHOLDER_GREY, PLACEHOLDER_GREY, PLACEHOLDER_GREY))
    return img


@dataclass
class _MemCacheItem:
    key: str
    image: QImage


class _LRUCache:
    def __init__(self, capacity: int) -> None:
        self._cap = max(1, int(capacity or 1))
        self._data: OrderedDict[str, _MemCacheItem] = OrderedDict()

    def __len__(self) -> int:
        return len(self._data)

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


class ThumbnailService:
    """Thumbnail service with memory/disk cache on top of ffmpeg frame grabs."""

    def __init__(self, settings: Any | None = None) -> None:
        """Initialize caches and tool paths from settings."""
        self._mem_cap = 512
        self._disk_dir = str(get_app_data_directory() / "thumbs")
        self._ffmpeg = "ffmpeg"
        if settings is not None:
            try:
                self._mem_cap = int(settings.get("thumbnail_mem_cache", 512) or 512)
            except (ValueError, TypeError):
                self._mem_cap = 512
            raw_dir = settings.get("thumbnail_disk_cache_dir", self._disk_dir)
            if isinstance(raw_dir, str) and raw_dir:
                self._disk_dir = os.path.expanduser(os.path.expandvars(raw_dir))
            self._ffmpeg = str(settings.get("tools.ffmpeg", "ffmpeg") or "ffmpeg")
        self._disk_path = Path(self._disk_dir)
        _ensure_dir(self._disk_path)
        self._mem_cache = _LRUCache(self._mem_cap)

    def get_thumbnail(self, path: str, size: int) -> QImage:
        """Return a thumbnail for video `path` bounded by `size` on each side.

        Never returns None: on failure a grey placeholder is returned and
        nothing is written to the disk cache.
        """
        key = _compute_cache_key(path, size)
        img = self._mem_cache.get(key)
        if img is not None and not img.isNull():
            return img

        disk_file = self._disk_path / f"{key}.jpg"
        if disk_file.exists():
            img = self._load_from_disk(disk_file)
            if img is not None:
                self._mem_cache.put(key, img)
                return img
            try:
                disk_file.unlink()
            except OSError:
                pass

        frame = self._load_from_source(path, size)
        if frame is None:
            return make_placeholder()
        img = self._pil_to_qimage(frame)
        if img is None:
            return make_placeholder()

        try:
            frame.save(str(disk_file), "JPEG", quality=85)
        except OSError as ex:
            logger.debug("Save disk cache failed for {}: {}", disk_file, ex)
        self._mem_cache.put(key, img)
        return img

    def _load_from_disk(self, disk_file: Path) -> QImage | None:
        try:
            with Image.open(disk_file) as im:
                im.load()
                return self._pil_to_qimage(im)
        except (OSError, ValueError, UnidentifiedImageError) as ex:
            logger.debug("Invalid disk cache entry {}: {}", disk_file, ex)
            return None

    def _load_from_source(self, path: str, requested_side: int) -> Image.Image | None:
        """Grab a frame one second in, falling back to the first frame."""
        for seek in ("1", "0"):
            data = self._grab_frame(path, seek)
            if data:
                frame = self._decode_and_scale(data, requested_side)
                if frame is not None:
                    return frame
        logger.debug("No thumbnail frame for {}", path)
        return None

    def _grab_frame(self, path: str, seek: str) -> bytes | None:
        cmd = [
            self._ffmpeg,
            "-v",
            "error",
            "-ss",
            seek,
            "-i",
            path,
            "-frames:v",
            "1",
            "-f",
            "image2pipe",
            "-vcodec",
            "mjpeg",
            "pipe:1",
        ]
        try:
            proc = subprocess.run(cmd, capture_output=True, timeout=FRAME_TIMEOUT_S, check=False)
        except (OSError, subprocess.TimeoutExpired) as ex:
            logger.debug("ffmpeg frame grab failed for {}: {}", path, ex)
            return None
        if proc.returncode != 0 or not proc.stdout:
            return None
        return proc.stdout

    def _decode_and_scale(self, data: bytes, requested_side: int) -> Image.Image | None:
        """Decode a grabbed JPEG frame into a detached, bounded RGB image."""
        try:
            with Image.open(io.BytesIO(data)) as im:
                frame = ImageOps.exif_transpose(im).convert("RGB")
            if requested_side and requested_side > 0:
                frame.thumbnail((requested_side, requested_side), Image.Resampling.LANCZOS)
            return frame
        except (OSError, ValueError, UnidentifiedImageError) as ex:
            logger.debug("Pillow decode failed: {}", ex)
            return None

    def _pil_to_qimage(self, pil_img: Any) -> QImage | None:
        """Convert a Pillow image to `QImage` and detach from the source buffer."""
        try:
            if pil_img.mode != "RGB":
                pil_img = pil_img.convert("RGB")
            data = pil_img.tobytes("raw", "RGB")
            qimg = QImage(
                data, pil_img.width, pil_img.height, pil_img.width * 3, QImage.Format_RGB888
            )
            if qimg.isNull():
                return None
            return qimg.copy()
        except (ValueError, TypeError) as ex:
            logger.debug("PIL->QImage convert failed: {}", ex)
            return None
