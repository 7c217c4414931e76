"""Read-only metadata introspection for a single asset.

Each metadata format of the decodable asset is read independently. Only items
whose raw key maps onto a common (cross-format) key are reported, so QuickTime
`com.apple.quicktime.make`, a plain `make` tag and an ID3-ish `artist` all
surface under the same names.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from loguru import logger

from core.models import MediaAsset, MetadataItem, MetadataReport
from core.services.interfaces import MediaLibrary, MetadataLoadError

# raw key (lower-case) -> common key
COMMON_KEYS: dict[str, str] = {
    "creation_time": "creationDate",
    "date": "creationDate",
    "com.apple.quicktime.creationdate": "creationDate",
    "location": "location",
    "location-eng": "location",
    "com.apple.quicktime.location.iso6709": "location",
    "make": "make",
    "com.apple.quicktime.make": "make",
    "model": "model",
    "com.apple.quicktime.model": "model",
    "software": "software",
    "encoder": "software",
    "com.apple.quicktime.software": "software",
    "title": "title",
    "com.apple.quicktime.title": "title",
    "artist": "author",
    "author": "author",
    "com.apple.quicktime.author": "author",
    "description": "description",
    "comment": "description",
    "com.apple.quicktime.description": "description",
    "copyright": "copyright",
    "language": "language",
    "publisher": "publisher",
    "album": "albumName",
    "genre": "type",
}


def common_key_for(key: str) -> str | None:
    return COMMON_KEYS.get(key.strip().lower())


class InspectionState(str, Enum):
    NOT_REQUESTED = "not_requested"
    REQUESTING = "requesting"
    AVAILABLE = "available"
    FAILED = "failed"


class MetadataInspector:
    """Loads one asset's decodable form and collects its common-key metadata."""

    def __init__(self, library: MediaLibrary) -> None:
        self._library = library
        self.state = InspectionState.NOT_REQUESTED
        self.report: MetadataReport | None = None

    def inspect(self, asset: MediaAsset) -> MetadataReport:
        """Inspect `asset`; never raises for library failures.

        A failed decodable load marks the whole report failed. A failed format
        is recorded in `format_errors` and the remaining formats are still read.
        """
        self.state = InspectionState.REQUESTING
        report = MetadataReport(asset=asset)
        try:
            decodable = self._library.load_decodable(asset)
        except MetadataLoadError as ex:
            logger.warning("No decodable form for {}: {}", asset.file_path, ex)
            report.error = str(ex)
            return self._finish(report, InspectionState.FAILED)

        try:
            formats = self._library.list_metadata_formats(decodable)
        except MetadataLoadError as ex:
            logger.warning("Could not list metadata formats for {}: {}", asset.file_path, ex)
            report.error = str(ex)
            return self._finish(report, InspectionState.FAILED)

        for fmt in formats:
            try:
                pairs = self._library.load_metadata(decodable, fmt)
            except (MetadataLoadError, ValueError, TypeError) as ex:
                logger.warning("Metadata format {} failed for {}: {}", fmt, asset.file_path, ex)
                report.format_errors.append((fmt, str(ex)))
                continue
            report.items.extend(_common_items(fmt, pairs))

        logger.debug(
            "Inspected {}: {} items over {} formats",
            asset.file_path,
            len(report.items),
            len(formats),
        )
        return self._finish(report, InspectionState.AVAILABLE)

    def _finish(self, report: MetadataReport, state: InspectionState) -> MetadataReport:
        self.report = report
        self.state = state
        return report


def _common_items(fmt: str, pairs: list[tuple[str, Any]]) -> list[MetadataItem]:
    items: list[MetadataItem] = []
    for key, value in pairs:
        common = common_key_for(str(key))
        if common is None:
            continue
        items.append(MetadataItem(format=fmt, key=str(key), common_key=common, value=str(value)))
    return items
