"""Static registry of studios built once at start-up."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import math
from typing import Any

from loguru import logger

from core.models import Studio

DEFAULT_STUDIOS: tuple[Studio, ...] = (
    Studio(name="Inspiration Studios", latitude=37.484778, longitude=-122.228150, radius_m=100.0),
)


class StudioRegistry:
    """Ordered, read-only sequence of studios."""

    def __init__(self, studios: Iterable[Studio]) -> None:
        self._studios: tuple[Studio, ...] = tuple(studios)
        self._by_id = {s.id: s for s in self._studios}

    def __iter__(self) -> Iterator[Studio]:
        return iter(self._studios)

    def __len__(self) -> int:
        return len(self._studios)

    def __getitem__(self, index: int) -> Studio:
        return self._studios[index]

    @property
    def studios(self) -> tuple[Studio, ...]:
        return self._studios

    def get(self, studio_id: str) -> Studio | None:
        return self._by_id.get(studio_id)

    @classmethod
    def from_settings(cls, settings: Any | None) -> StudioRegistry:
        """Build from the `studios` list in settings, else the default studio.

        Expects entries like `{"name": ..., "latitude": ..., "longitude": ...,
        "radius_m": 100}`. Invalid entries, including non-finite coordinates
        and non-positive or non-finite radii, are logged and skipped.
        """
        raw = settings.get("studios", []) if settings is not None else []
        studios: list[Studio] = []
        if isinstance(raw, list):
            for entry in raw:
                if not isinstance(entry, dict):
                    logger.warning("Ignoring studio entry (not an object): {}", entry)
                    continue
                try:
                    studio = Studio(
                        name=str(entry.get("name") or "Unnamed studio"),
                        latitude=float(entry["latitude"]),
                        longitude=float(entry["longitude"]),
                        radius_m=float(entry.get("radius_m", 100.0)),
                    )
                except (KeyError, TypeError, ValueError) as ex:
                    logger.warning("Ignoring studio entry {}: {}", entry, ex)
                    continue
                if not all(math.isfinite(v) for v in (studio.latitude, studio.longitude)):
                    logger.warning("Ignoring studio entry {}: non-finite coordinates", entry)
                    continue
                if not math.isfinite(studio.radius_m) or studio.radius_m <= 0:
                    logger.warning("Ignoring studio entry {}: invalid radius", entry)
                    continue
                studios.append(studio)
        if not studios:
            logger.info("No studios configured, using defaults")
            return cls(DEFAULT_STUDIOS)
        return cls(studios)
