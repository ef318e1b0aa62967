import datetime as dt
import logging
from dataclasses import asdict, dataclass
from typing import Dict, Optional, Tuple

import requests

from models import ScoringFactors, WeatherFlags

logger = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"

DAILY_FIELDS = (
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_sum",
    "windspeed_10m_max",
    "winddirection_10m_dominant",
)

RAIN_IN = 0.05
FRONT_DROP_F = 10
HIGH_WIND_MPH = 15
VERY_WARM_F = 75
WARM_MONTHS = range(9, 13)
MM_PER_INCH = 25.4


class WeatherError(RuntimeError):
    """Forecast could not be loaded; nothing may be scored from it."""


@dataclass(frozen=True)
class DayWeather:
    date: str
    t_max_f: float
    t_min_f: float
    precip_in: float
    wind_max_mph: float
    wind_direction_deg: Optional[float] = None
    pressure_hpa: Optional[float] = None

    @property
    def precip_mm(self) -> float:
        return self.precip_in * MM_PER_INCH

    @property
    def t_mean_f(self) -> float:
        return (self.t_max_f + self.t_min_f) / 2.0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["precip_mm"] = round(self.precip_mm, 2)
        return data


@dataclass(frozen=True)
class ForecastRange:
    timezone: str
    days: Dict[str, DayWeather]

    def get(self, date: dt.date) -> Optional[DayWeather]:
        return self.days.get(date.isoformat())


# ===================================================================
#                       OPEN-METEO FETCH
# ===================================================================

def _noon_pressure(hourly: dict) -> Dict[str, float]:
    times = hourly.get("time")
    values = hourly.get("pressure_msl")
    out = {}
    if not isinstance(times, list) or not isinstance(values, list):
        return out
    for stamp, value in zip(times, values):
        if not isinstance(stamp, str) or not stamp.endswith("T12:00"):
            continue
        if isinstance(value, (int, float)):
            out[stamp[:10]] = float(value)
    return out


def _parse_days(daily: dict, pressures: Dict[str, float]) -> Dict[str, DayWeather]:
    try:
        times = daily["time"]
        cols = [daily[name] for name in DAILY_FIELDS[:4]]
    except KeyError as exc:
        raise WeatherError(f"Forecast is missing daily field {exc}") from exc
    if not isinstance(times, list):
        raise WeatherError("Forecast daily dates are not a list")
    directions = daily.get("winddirection_10m_dominant") or [None] * len(times)

    for name, col in zip(DAILY_FIELDS, cols + [directions]):
        if not isinstance(col, list) or len(col) != len(times):
            raise WeatherError(f"Forecast daily field '{name}' does not line up with its dates")

    days = {}
    for i, stamp in enumerate(times):
        t_max, t_min, precip, wind = (col[i] for col in cols)
        if t_max is None or t_min is None or precip is None or wind is None:
            # hole in the forecast; the day is unusable rather than zero
            continue
        try:
            days[stamp] = DayWeather(
                date=stamp,
                t_max_f=float(t_max),
                t_min_f=float(t_min),
                precip_in=float(precip),
                wind_max_mph=float(wind),
                wind_direction_deg=directions[i],
                pressure_hpa=pressures.get(stamp),
            )
        except (TypeError, ValueError) as exc:
            raise WeatherError(f"Forecast for {stamp} has a non-numeric reading") from exc
    return days


def fetch_daily_range(
    lat: float,
    lon: float,
    start: dt.date,
    end: dt.date,
    url: str = OPEN_METEO_URL,
    timeout: float = 10.0,
    session=None,
) -> ForecastRange:
    params = {
        "latitude": lat,
        "longitude": lon,
        "daily": ",".join(DAILY_FIELDS),
        "hourly": "pressure_msl",
        "timezone": "auto",
        "temperature_unit": "fahrenheit",
        "windspeed_unit": "mph",
        "precipitation_unit": "inch",
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
    }
    http = session or requests
    logger.debug("Requesting forecast %s..%s for %.4f,%.4f", start, end, lat, lon)

    try:
        resp = http.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as exc:
        logger.warning("Weather request failed: %s", exc)
        raise WeatherError("Weather request failed") from exc
    except ValueError as exc:
        raise WeatherError("Weather response was not JSON") from exc

    if not isinstance(data, dict):
        raise WeatherError("Weather response was not a JSON object")

    daily = data.get("daily")
    if not isinstance(daily, dict) or not daily.get("time"):
        raise WeatherError("No daily weather data available")

    hourly = data.get("hourly")
    days = _parse_days(daily, _noon_pressure(hourly if isinstance(hourly, dict) else {}))
    return ForecastRange(timezone=data.get("timezone") or "UTC", days=days)


def fetch_weather(lat: float, lon: float, date: dt.date, **kwargs) -> Tuple[DayWeather, Optional[DayWeather], str]:
    """Target-day weather, the day before (may be missing) and the local timezone."""
    prev_date = date - dt.timedelta(days=1)
    forecast = fetch_daily_range(lat, lon, prev_date, date, **kwargs)

    today = forecast.get(date)
    if today is None:
        raise WeatherError("Selected date not in weather forecast range")
    return today, forecast.get(prev_date), forecast.timezone


# ===================================================================
#                        WEATHER SIGNALS
# ===================================================================

def derive_flags(today: DayWeather, prev: Optional[DayWeather], target_date: dt.date) -> WeatherFlags:
    recent_rain = today.precip_in > RAIN_IN or (prev is not None and prev.precip_in > RAIN_IN)

    cold_front = False
    if prev is not None:
        drop = prev.t_max_f - today.t_max_f
        # big temp drop behind rain suggests a front
        if drop >= FRONT_DROP_F and prev.precip_in > RAIN_IN:
            cold_front = True

    return WeatherFlags(
        cold_front=cold_front,
        recent_rain=recent_rain,
        high_wind=today.wind_max_mph >= HIGH_WIND_MPH,
        very_warm=target_date.month in WARM_MONTHS and today.t_max_f >= VERY_WARM_F,
    )


def factors_from_weather(today, prev, target_date, time_of_day, terrain, hunting_pressure) -> ScoringFactors:
    return ScoringFactors(
        time_of_day=time_of_day,
        temperature_f=today.t_mean_f,
        wind_speed_mph=today.wind_max_mph,
        terrain=terrain,
        hunting_pressure=hunting_pressure,
        precipitation_mm=today.precip_mm,
        barometric_pressure_hpa=today.pressure_hpa,
        flags=derive_flags(today, prev, target_date),
    )


def summarize(today: DayWeather, prev: Optional[DayWeather]) -> Tuple[str, str]:
    """Headline and detail lines for the weather card."""
    rain = f'{today.precip_in:.2f}" precip' if today.precip_in > RAIN_IN else "little/no precip"
    summary = (
        f"For {today.date}: High {today.t_max_f:.0f}°F, Low {today.t_min_f:.0f}°F, "
        f"{rain}, {today.wind_max_mph:.0f} mph max wind."
    )

    details = ""
    if prev is not None:
        drop = prev.t_max_f - today.t_max_f
        sign = "-" if drop >= 0 else "+"
        details += f"Prev day high: {prev.t_max_f:.0f}°F (change of {sign}{abs(drop):.0f}°F). "
        if prev.precip_in > RAIN_IN:
            details += f'Prev day precip: {prev.precip_in:.2f}". '
    return summary, details.strip()
