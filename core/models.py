"""Core domain models for studios, media assets and metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
import uuid


class AuthorizationStatus(str, Enum):
    """Access state of the media library."""

    NOT_DETERMINED = "not_determined"
    AUTHORIZED = "authorized"
    DENIED = "denied"


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, eq=False)
class Studio:
    """A named geographic point of interest with an acceptance radius.

    Two studios are equal only when they share the same `id`, even if their
    coordinates match. Use `same_place` to compare the location fields.
    """

    name: str
    latitude: float
    longitude: float
    radius_m: float = 100.0
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Studio):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)

    def same_place(self, other: Studio) -> bool:
        """Return True when name, coordinates and radius are all equal."""
        return (
            self.name == other.name
            and self.latitude == other.latitude
            and self.longitude == other.longitude
            and self.radius_m == other.radius_m
        )


@dataclass(frozen=True)
class MediaAsset:
    """A single video item from the media library."""

    asset_id: str
    file_path: str
    location: GeoPoint | None = None
    creation_date: datetime | None = None
    duration_s: float | None = None

    @property
    def file_name(self) -> str:
        return self.file_path.replace("\\", "/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class MetadataItem:
    """One key/value pair read from a metadata format, with its common key."""

    format: str
    key: str
    common_key: str
    value: str


@dataclass
class MetadataReport:
    """Outcome of inspecting one asset's metadata.

    Attributes:
        asset: The inspected asset.
        items: Items exposing a common key, in format order.
        format_errors: Tuples of (format, reason) for formats that failed.
        error: Set when the decodable form could not be loaded at all.
    """

    asset: MediaAsset
    items: list[MetadataItem] = field(default_factory=list)
    format_errors: list[tuple[str, str]] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
