import datetime as dt

import ephem
import pytest

from astro import (
    MoonCache,
    is_waxing,
    moon_emoji,
    moon_for_day,
    moon_phase_name,
    sun_times,
    to_local,
)

LAT, LON = 33.0, -82.8  # Washington County, GA


def test_full_and_new_moon():
    full = moon_for_day(dt.date(2024, 1, 25), LAT, LON)
    new = moon_for_day(dt.date(2024, 1, 11), LAT, LON)

    assert full.phase_name == "Full Moon"
    assert full.illumination > 97
    assert full.emoji == "🌕"
    assert new.phase_name == "New Moon"
    assert new.emoji == "🌑"


def test_waxing_between_new_and_full():
    assert is_waxing(dt.date(2024, 1, 18))
    assert not is_waxing(dt.date(2024, 2, 2))


@pytest.mark.parametrize(
    "percent, waxing, expected",
    [
        (1, True, "New Moon"),
        (20, True, "Waxing Crescent"),
        (20, False, "Waning Crescent"),
        (50, True, "First Quarter"),
        (50, False, "Last Quarter"),
        (80, True, "Waxing Gibbous"),
        (80, False, "Waning Gibbous"),
        (99, False, "Full Moon"),
    ],
)
def test_phase_names(percent, waxing, expected):
    assert moon_phase_name(percent, waxing) == expected


def test_emoji_buckets():
    assert [moon_emoji(p) for p in (0, 10, 30, 50, 80, 100)] == ["🌑", "🌒", "🌓", "🌔", "🌕", "🌕"]


def test_cache_is_filled_and_reused():
    cache = MoonCache()
    date = dt.date(2025, 11, 5)

    first = moon_for_day(date, LAT, LON, cache=cache)
    assert "2025-11-05" in cache
    assert len(cache) == 1

    again = moon_for_day(date, LAT, LON, cache=cache)
    assert again is first


def test_sun_times_are_local():
    times = sun_times(dt.date(2024, 6, 21), 43.2, -71.7, "America/New_York")
    assert times["sunrise"].startswith("05:")
    assert times["sunrise"].endswith("AM")
    assert times["sunset"].endswith("PM")


def test_sun_times_in_polar_day():
    times = sun_times(dt.date(2024, 6, 21), 80.0, 15.0, "Europe/Oslo")
    assert times == {"sunrise": "—", "sunset": "—"}


def test_to_local_unknown_zone_falls_back_to_utc():
    assert to_local(None, "UTC") is None
    local = to_local(ephem.Date("2024/06/21 12:00"), "Not/AZone")
    assert local.utcoffset() == dt.timedelta(0)
    assert local.hour == 12
