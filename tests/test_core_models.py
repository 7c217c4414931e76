from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from core.models import GeoPoint, Studio
from core.services.acceptance import AcceptanceWindow, as_utc, subtract_months
from core.services.geo import distance_m, offset_north


def test_studio_equality_is_by_identity():
    a = Studio(name="A", latitude=1.0, longitude=2.0)
    b = Studio(name="A", latitude=1.0, longitude=2.0)

    assert a != b
    assert a.same_place(b)
    assert len({a, b}) == 2


def test_studio_with_same_id_is_equal_even_if_moved():
    a = Studio(name="A", latitude=1.0, longitude=2.0, id="studio-1")
    moved = Studio(name="A", latitude=5.0, longitude=6.0, id="studio-1")

    assert a == moved
    assert hash(a) == hash(moved)
    assert not a.same_place(moved)


def test_distance_zero_at_same_point():
    p = GeoPoint(37.47567, -122.21316)
    assert distance_m(p, p) == 0.0


def test_distance_is_symmetric():
    a = GeoPoint(37.47567, -122.21316)
    b = GeoPoint(37.484778, -122.228150)
    assert distance_m(a, b) == pytest.approx(distance_m(b, a))


def test_distance_known_value():
    # One degree of latitude on the mean sphere
    d = distance_m(GeoPoint(0.0, 0.0), GeoPoint(1.0, 0.0))
    assert d == pytest.approx(111_195.08, rel=1e-6)


def test_offset_north_round_trips_through_distance():
    p = GeoPoint(37.47567, -122.21316)
    assert distance_m(p, offset_north(p, 50)) == pytest.approx(50, abs=1e-6)


@pytest.mark.parametrize(
    "start, months, expected",
    [
        (datetime(2026, 10, 19), 6, datetime(2026, 4, 19)),
        (datetime(2026, 3, 31), 1, datetime(2026, 2, 28)),
        (datetime(2024, 8, 31), 6, datetime(2024, 2, 29)),
        (datetime(2026, 2, 15), 14, datetime(2024, 12, 15)),
    ],
)
def test_subtract_months(start, months, expected):
    assert subtract_months(start, months) == expected


def test_rolling_window_cutoff_uses_clock():
    now = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)
    window = AcceptanceWindow.rolling(6, clock=lambda: now)

    assert window.cutoff() == datetime(2026, 4, 19, 8, 30, tzinfo=timezone.utc)
    assert window.describe() == "last 6 months"


def test_fixed_window_from_date():
    window = AcceptanceWindow.fixed(date(2024, 12, 1))

    assert window.is_fixed
    assert window.cutoff() == datetime(2024, 12, 1, tzinfo=timezone.utc)
    assert window.accepts(datetime(2024, 12, 1))
    assert not window.accepts(datetime(2024, 11, 30, 23, 59, 59))
    assert not window.accepts(None)


def test_negative_rolling_window_rejected():
    with pytest.raises(ValueError):
        AcceptanceWindow.rolling(-1)


def test_as_utc_converts_offsets():
    local = datetime(2026, 1, 1, 9, 0, tzinfo=timezone(timedelta(hours=-8)))
    assert as_utc(local) == datetime(2026, 1, 1, 17, 0, tzinfo=timezone.utc)
