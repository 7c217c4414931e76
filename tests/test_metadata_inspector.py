from __future__ import annotations

from conftest import FakeLibrary

from core.models import MediaAsset
from core.services.metadata_inspector import InspectionState, MetadataInspector, common_key_for

ASSET = MediaAsset(asset_id="clip", file_path="/videos/clip.mov")


def _library() -> FakeLibrary:
    return FakeLibrary(
        formats={
            "container": {
                "major_brand": "qt  ",
                "creation_time": "2026-10-01T10:00:00.000000Z",
                "com.apple.quicktime.location.ISO6709": "+37.4757-122.2131+010.000/",
                "com.apple.quicktime.make": "Apple",
            },
            "stream:0:video": {"handler_name": "Core Media Video", "encoder": "H.264"},
            "stream:1:audio": {"language": "und"},
        }
    )


def test_common_key_mapping_is_case_insensitive():
    assert common_key_for("Creation_Time") == "creationDate"
    assert common_key_for("com.apple.quicktime.location.ISO6709") == "location"
    assert common_key_for("major_brand") is None


def test_inspect_collects_common_keys_only():
    inspector = MetadataInspector(_library())
    report = inspector.inspect(ASSET)

    assert inspector.state is InspectionState.AVAILABLE
    assert report.ok
    assert [(i.format, i.common_key) for i in report.items] == [
        ("container", "creationDate"),
        ("container", "location"),
        ("container", "make"),
        ("stream:0:video", "software"),
        ("stream:1:audio", "language"),
    ]


def test_failed_format_does_not_abort_others():
    library = _library()
    library.broken_formats.add("stream:0:video")
    report = MetadataInspector(library).inspect(ASSET)

    assert report.ok
    assert report.format_errors == [("stream:0:video", "cannot decode stream:0:video")]
    assert {i.format for i in report.items} == {"container", "stream:1:audio"}


def test_missing_decodable_form_fails_inspection():
    library = _library()
    library.decodable_error = "file not found"
    inspector = MetadataInspector(library)
    report = inspector.inspect(ASSET)

    assert inspector.state is InspectionState.FAILED
    assert not report.ok
    assert report.error == "file not found"
    assert report.items == []


def test_initial_state_is_not_requested():
    assert MetadataInspector(_library()).state is InspectionState.NOT_REQUESTED
