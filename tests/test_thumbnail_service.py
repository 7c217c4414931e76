from __future__ import annotations

import io
import subprocess

from PIL import Image
from PySide6.QtGui import QImage
import pytest

from infrastructure import thumbnail_service as thumbs_mod
from infrastructure.settings import JsonSettings
from infrastructure.thumbnail_service import PLACEHOLDER_SIDE, ThumbnailService, _LRUCache


def _jpeg(width: int, height: int) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (10, 120, 200)).save(buf, "JPEG")
    return buf.getvalue()


@pytest.fixture
def service(tmp_path) -> ThumbnailService:
    settings = JsonSettings(data={"thumbnail_disk_cache_dir": str(tmp_path / "thumbs")})
    return ThumbnailService(settings)


def test_lru_evicts_least_recently_used():
    cache = _LRUCache(2)
    a, b, c = (QImage(n, n, QImage.Format_RGB32) for n in (1, 2, 3))
    cache.put("a", a)
    cache.put("b", b)
    cache.get("a")
    cache.put("c", c)

    assert cache.get("b") is None
    assert cache.get("a") is a
    assert len(cache) == 2


def test_thumbnail_is_scaled_and_cached(service, tmp_path, monkeypatch):
    video = tmp_path / "clip.mov"
    video.write_bytes(b"\0")
    calls: list[list[str]] = []

    def _ffmpeg(cmd, **_kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, stdout=_jpeg(640, 360), stderr=b"")

    monkeypatch.setattr(thumbs_mod.subprocess, "run", _ffmpeg)

    img = service.get_thumbnail(str(video), 128)
    again = service.get_thumbnail(str(video), 128)

    assert (img.width(), img.height()) == (128, 72)
    assert again is img
    assert len(calls) == 1
    assert len(list((tmp_path / "thumbs").glob("*.jpg"))) == 1


def test_failed_grab_returns_placeholder_without_disk_write(service, tmp_path, monkeypatch):
    def _missing(*_args, **_kwargs):
        raise FileNotFoundError("ffmpeg")

    monkeypatch.setattr(thumbs_mod.subprocess, "run", _missing)

    img = service.get_thumbnail(str(tmp_path / "clip.mov"), 128)

    assert (img.width(), img.height()) == (PLACEHOLDER_SIDE, PLACEHOLDER_SIDE)
    assert list((tmp_path / "thumbs").glob("*.jpg")) == []


def test_falls_back_to_first_frame(service, tmp_path, monkeypatch):
    seeks: list[str] = []

    def _ffmpeg(cmd, **_kwargs):
        seek = cmd[cmd.index("-ss") + 1]
        seeks.append(seek)
        if seek == "1":
            return subprocess.CompletedProcess(cmd, 1, stdout=b"", stderr=b"short clip")
        return subprocess.CompletedProcess(cmd, 0, stdout=_jpeg(100, 200), stderr=b"")

    monkeypatch.setattr(thumbs_mod.subprocess, "run", _ffmpeg)

    img = service.get_thumbnail(str(tmp_path / "short.mov"), 50)

    assert seeks == ["1", "0"]
    assert (img.width(), img.height()) == (25, 50)
