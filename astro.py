import datetime as dt
from dataclasses import dataclass
from typing import Dict, Optional

import ephem
import pytz

# ===================================================================
#                      ASTRONOMY FUNCTIONS
# ===================================================================


def make_observer(lat: float, lon: float, date: dt.date) -> ephem.Observer:
    obs = ephem.Observer()
    obs.lat = str(lat)
    obs.lon = str(lon)
    obs.elevation = 0
    obs.date = ephem.Date(date.strftime("%Y/%m/%d"))
    return obs


def _safe(fn, body):
    try:
        return fn(body)
    except (ephem.AlwaysUpError, ephem.NeverUpError):
        # polar day/night: no rise or set
        return None


def moon_percent(date: dt.date, lat: float, lon: float) -> float:
    obs = make_observer(lat, lon, date)
    # stable phase at local noon
    obs.date = ephem.Date(f"{date.strftime('%Y/%m/%d')} 12:00")
    return float(ephem.Moon(obs).phase)


def sun_for_day(date: dt.date, lat: float, lon: float) -> dict:
    obs = make_observer(lat, lon, date)
    sun = ephem.Sun()
    return {
        "sunrise": _safe(obs.next_rising, sun),
        "sunset": _safe(obs.next_setting, sun),
    }


def is_waxing(date: dt.date) -> bool:
    noon = ephem.Date(f"{date.strftime('%Y/%m/%d')} 12:00")
    return ephem.next_full_moon(noon) < ephem.next_new_moon(noon)


def moon_phase_name(percent: float, waxing: bool) -> str:
    if percent < 3:
        return "New Moon"
    if percent > 97:
        return "Full Moon"
    if 47 <= percent <= 53:
        return "First Quarter" if waxing else "Last Quarter"
    if percent < 50:
        return "Waxing Crescent" if waxing else "Waning Crescent"
    return "Waxing Gibbous" if waxing else "Waning Gibbous"


def moon_emoji(phase_percent: float) -> str:
    p = phase_percent
    if p < 5:
        return "🌑"
    if p < 25:
        return "🌒"
    if p < 45:
        return "🌓"
    if p < 65:
        return "🌔"
    return "🌕"


def to_local(ephem_time, tzname: str) -> Optional[dt.datetime]:
    if ephem_time is None:
        return None
    try:
        local_tz = pytz.timezone(tzname)
    except pytz.UnknownTimeZoneError:
        local_tz = pytz.utc
    utc_dt = ephem_time.datetime()
    return pytz.utc.localize(utc_dt).astimezone(local_tz)


def sun_times(date: dt.date, lat: float, lon: float, tzname: str) -> dict:
    """Local sunrise/sunset as 12-hour strings, '—' when the sun never crosses."""
    astro = sun_for_day(date, lat, lon)
    out = {}
    for key in ("sunrise", "sunset"):
        local = to_local(astro[key], tzname)
        out[key] = local.strftime("%I:%M %p") if local else "—"
    return out


# ===================================================================
#                         MOON DATA CACHE
# ===================================================================


@dataclass(frozen=True)
class MoonInfo:
    date: str
    phase_name: str
    illumination: float  # percent, 0-100
    emoji: str

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "phase_name": self.phase_name,
            "illumination": round(self.illumination, 1),
            "emoji": self.emoji,
        }


class MoonCache:
    """Date string -> MoonInfo. Never expires; a season is a few hundred keys."""

    def __init__(self):
        self._data: Dict[str, MoonInfo] = {}

    def __len__(self):
        return len(self._data)

    def __contains__(self, key):
        return key in self._data

    def get(self, key: str) -> Optional[MoonInfo]:
        return self._data.get(key)

    def put(self, info: MoonInfo) -> None:
        self._data[info.date] = info


def moon_for_day(date: dt.date, lat: float, lon: float, cache: Optional[MoonCache] = None) -> MoonInfo:
    key = date.isoformat()
    if cache is not None:
        hit = cache.get(key)
        if hit is not None:
            return hit

    pct = moon_percent(date, lat, lon)
    info = MoonInfo(
        date=key,
        phase_name=moon_phase_name(pct, is_waxing(date)),
        illumination=pct,
        emoji=moon_emoji(pct),
    )
    if cache is not None:
        cache.put(info)
    return info
