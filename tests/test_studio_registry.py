from __future__ import annotations

import pytest

from core.services.studio_registry import DEFAULT_STUDIOS, StudioRegistry
from infrastructure.settings import JsonSettings


def test_registry_is_ordered_and_indexable():
    settings = JsonSettings(
        data={
            "studios": [
                {"name": "North", "latitude": 10, "longitude": 20, "radius_m": 250},
                {"name": "South", "latitude": -10, "longitude": 20},
            ]
        }
    )
    registry = StudioRegistry.from_settings(settings)

    assert [s.name for s in registry] == ["North", "South"]
    assert len(registry) == 2
    assert registry[0].radius_m == 250
    assert registry[1].radius_m == 100
    assert registry.get(registry[1].id) is registry[1]
    assert registry.get("missing") is None


def test_invalid_entries_are_skipped():
    settings = JsonSettings(
        data={
            "studios": [
                "bogus",
                {"name": "No coords"},
                {"name": "Ok", "latitude": "1.5", "longitude": 2},
            ]
        }
    )
    registry = StudioRegistry.from_settings(settings)

    assert [s.name for s in registry] == ["Ok"]
    assert registry[0].latitude == 1.5


@pytest.mark.parametrize("radius", [float("nan"), float("inf"), -5, 0, "nan"])
def test_unusable_radius_is_skipped(radius):
    settings = JsonSettings(
        data={
            "studios": [
                {"name": "Broken", "latitude": 1, "longitude": 2, "radius_m": radius},
                {"name": "Fine", "latitude": 1, "longitude": 2, "radius_m": 50},
            ]
        }
    )
    registry = StudioRegistry.from_settings(settings)

    assert [s.name for s in registry] == ["Fine"]


def test_non_finite_coordinates_are_skipped():
    settings = JsonSettings(
        data={"studios": [{"name": "Nowhere", "latitude": "nan", "longitude": 2}]}
    )

    assert StudioRegistry.from_settings(settings).studios == DEFAULT_STUDIOS


def test_defaults_when_nothing_configured():
    empty = JsonSettings(data={"studios": []})

    assert StudioRegistry.from_settings(None).studios == DEFAULT_STUDIOS
    assert StudioRegistry.from_settings(empty).studios == DEFAULT_STUDIOS
    assert DEFAULT_STUDIOS[0].name == "Inspiration Studios"
