from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from core.models import AuthorizationStatus, GeoPoint, MediaAsset
from core.services.interfaces import LibraryAccessError, MetadataLoadError, ProbeError
from infrastructure import local_library as local_library_mod
from infrastructure.ffprobe import ProbeResult
from infrastructure.local_library import CONTAINER_FORMAT, LocalMediaLibrary

PROBES = {
    "a.mov": ProbeResult(
        format_tags={
            "com.apple.quicktime.location.ISO6709": "+37.4757-122.2131+010.000/",
            "creation_time": "2026-10-01T10:00:00.000000Z",
        },
        stream_tags={"stream:0:video": {"encoder": "H.264"}},
        duration_s=3.0,
    ),
    "b.mp4": ProbeResult(format_tags={"creation_time": "2026-10-02T10:00:00Z"}),
}


@pytest.fixture
def library_root(tmp_path: Path) -> Path:
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "a.mov").write_bytes(b"\0")
    (tmp_path / "b.mp4").write_bytes(b"\0")
    (tmp_path / "broken.m4v").write_bytes(b"\0")
    (tmp_path / "notes.txt").write_text("not a video")
    (tmp_path / ".hidden.mov").write_bytes(b"\0")
    return tmp_path


@pytest.fixture
def probe_calls(monkeypatch) -> list[str]:
    calls: list[str] = []

    def _fake_probe(path: str, ffprobe: str = "ffprobe") -> ProbeResult:
        calls.append(path)
        name = Path(path).name
        if name not in PROBES:
            raise ProbeError(f"cannot probe {name}")
        return PROBES[name]

    monkeypatch.setattr(local_library_mod, "run_ffprobe", _fake_probe)
    return calls


def test_access_denied_for_missing_root(tmp_path):
    library = LocalMediaLibrary(tmp_path / "missing")

    assert library.request_access() is AuthorizationStatus.DENIED
    with pytest.raises(LibraryAccessError):
        library.enumerate_video_assets()


def test_enumeration_requires_access(library_root, probe_calls):
    library = LocalMediaLibrary(library_root)
    assert library.status is AuthorizationStatus.NOT_DETERMINED

    with pytest.raises(LibraryAccessError):
        library.enumerate_video_assets()
    assert probe_calls == []


def test_enumerates_videos_in_sorted_order(library_root, probe_calls):
    library = LocalMediaLibrary(library_root)
    assert library.request_access() is AuthorizationStatus.AUTHORIZED

    assets = library.enumerate_video_assets()

    assert [Path(a.file_path).name for a in assets] == ["b.mp4", "broken.m4v", "a.mov"]
    by_name = {Path(a.file_path).name: a for a in assets}
    assert by_name["a.mov"].location == GeoPoint(37.4757, -122.2131)
    assert by_name["a.mov"].creation_date == datetime(2026, 10, 1, 10, tzinfo=timezone.utc)
    assert by_name["a.mov"].duration_s == 3.0
    assert by_name["b.mp4"].location is None
    assert by_name["broken.m4v"].location is None
    assert by_name["broken.m4v"].creation_date is None


def test_probe_results_are_reused(library_root, probe_calls):
    library = LocalMediaLibrary(library_root)
    library.request_access()

    library.enumerate_video_assets()
    library.enumerate_video_assets()

    # broken.m4v is retried, the two good files are not
    assert len(probe_calls) == 4


def test_extension_filter(library_root, probe_calls):
    library = LocalMediaLibrary(library_root, extensions=(".MOV",))
    library.request_access()

    assert [Path(a.file_path).name for a in library.enumerate_video_assets()] == ["a.mov"]


def test_decodable_exposes_container_and_streams(library_root, probe_calls):
    library = LocalMediaLibrary(library_root)
    asset = MediaAsset(asset_id="a", file_path=str(library_root / "sub" / "a.mov"))

    decodable = library.load_decodable(asset)

    assert library.list_metadata_formats(decodable) == [CONTAINER_FORMAT, "stream:0:video"]
    assert ("encoder", "H.264") in library.load_metadata(decodable, "stream:0:video")
    with pytest.raises(MetadataLoadError):
        library.load_metadata(decodable, "stream:9:video")


def test_decodable_missing_file(tmp_path, probe_calls):
    library = LocalMediaLibrary(tmp_path)
    with pytest.raises(MetadataLoadError, match="file not found"):
        library.load_decodable(MediaAsset(asset_id="x", file_path=str(tmp_path / "gone.mov")))


def test_decodable_probe_failure(library_root, probe_calls):
    library = LocalMediaLibrary(library_root)
    with pytest.raises(MetadataLoadError, match="cannot probe"):
        library.load_decodable(MediaAsset(asset_id="x", file_path=str(library_root / "broken.m4v")))


def test_fetch_thumbnail_delegates(library_root):
    class _Thumbs:
        def get_thumbnail(self, path: str, size: int) -> str:
            return f"{Path(path).name}@{size}"

    library = LocalMediaLibrary(library_root, thumbnails=_Thumbs())
    asset = MediaAsset(asset_id="b", file_path=str(library_root / "b.mp4"))

    assert library.fetch_thumbnail(asset, 128) == "b.mp4@128"
    assert LocalMediaLibrary(library_root).fetch_thumbnail(asset, 128) is None
