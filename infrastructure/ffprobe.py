"""Thin wrapper around `ffprobe` JSON output."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import json
import subprocess
from typing import Any

from loguru import logger

from core.models import GeoPoint
from core.services.interfaces import ProbeError
from infrastructure.utils import parse_iso6709, parse_media_datetime

PROBE_TIMEOUT_S = 30

# Tag names carrying a location, in preference order
LOCATION_TAGS = ("com.apple.quicktime.location.iso6709", "location", "location-eng")
# Tag names carrying the recording time, in preference order
CREATION_TAGS = ("com.apple.quicktime.creationdate", "creation_time", "date")


@dataclass
class ProbeResult:
    """Parsed subset of an ffprobe report.

    Attributes:
        format_tags: Container-level tags.
        stream_tags: Tags per stream, keyed by "stream:<index>:<codec_type>".
        duration_s: Container duration in seconds, when reported.
    """

    format_tags: dict[str, str] = field(default_factory=dict)
    stream_tags: dict[str, dict[str, str]] = field(default_factory=dict)
    duration_s: float | None = None

    def _lookup(self, names: tuple[str, ...]) -> str | None:
        sources = [self.format_tags, *self.stream_tags.values()]
        for name in names:
            for tags in sources:
                for key, value in tags.items():
                    if key.lower() == name and value:
                        return value
        return None

    @property
    def location(self) -> GeoPoint | None:
        return parse_iso6709(self._lookup(LOCATION_TAGS))

    @property
    def creation_date(self) -> datetime | None:
        return parse_media_datetime(self._lookup(CREATION_TAGS))


def parse_probe_output(raw: str) -> ProbeResult:
    """Parse `ffprobe -print_format json -show_format -show_streams` output."""
    try:
        data: Any = json.loads(raw or "{}")
    except json.JSONDecodeError as ex:
        raise ProbeError(f"invalid ffprobe JSON: {ex}") from ex
    if not isinstance(data, dict):
        raise ProbeError("ffprobe JSON is not an object")

    fmt = data.get("format") or {}
    result = ProbeResult(format_tags={str(k): str(v) for k, v in (fmt.get("tags") or {}).items()})
    try:
        if fmt.get("duration") is not None:
            result.duration_s = float(fmt["duration"])
    except (TypeError, ValueError):
        result.duration_s = None

    for pos, stream in enumerate(data.get("streams") or []):
        if not isinstance(stream, dict):
            continue
        tags = stream.get("tags") or {}
        if not tags:
            continue
        index = stream.get("index", pos)
        codec_type = stream.get("codec_type", "unknown")
        key = f"stream:{index}:{codec_type}"
        result.stream_tags[key] = {str(k): str(v) for k, v in tags.items()}
    return result


def run_ffprobe(
    path: str, ffprobe: str = "ffprobe", timeout: float = PROBE_TIMEOUT_S
) -> ProbeResult:
    """Run ffprobe on `path` and parse its JSON report.

    Raises:
        ProbeError: When ffprobe is missing, fails, times out, or emits bad JSON.
    """
    cmd = [
        ffprobe,
        "-v",
        "error",
        "-print_format",
        "json",
        "-show_format",
        "-show_streams",
        path,
    ]
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout, check=False)
    except FileNotFoundError as ex:
        raise ProbeError(f"ffprobe not found: {ffprobe}") from ex
    except subprocess.TimeoutExpired as ex:
        raise ProbeError(f"ffprobe timed out after {timeout}s for {path}") from ex
    except OSError as ex:
        raise ProbeError(f"ffprobe failed to start: {ex}") from ex
    if proc.returncode != 0:
        msg = (proc.stderr or "").strip() or f"exit code {proc.returncode}"
        raise ProbeError(f"ffprobe failed for {path}: {msg}")
    logger.trace("ffprobe ok: {}", path)
    return parse_probe_output(proc.stdout)
