"""Live odds for one hunt and the multi-day planner.

Both make exactly one forecast request and then score each day with the
pure rut/scoring core. A failed forecast stops everything: no score is
ever produced from partial weather.
"""

import datetime as dt
import logging
from dataclasses import dataclass
from typing import List, Optional

from astro import MoonCache, MoonInfo, moon_for_day, sun_times
from models import InvalidInput, ScoreResult, WeatherFlags
from rut import RutInfo, rut_phase
from scoring import ScoringPolicy, get_policy
from tips import describe_flags
from weather import (
    DayWeather,
    WeatherError,
    factors_from_weather,
    fetch_daily_range,
    fetch_weather,
    summarize,
)

logger = logging.getLogger(__name__)

MAX_FORECAST_DAYS = 16


@dataclass(frozen=True)
class OddsReport:
    date: dt.date
    rut: RutInfo
    weather: DayWeather
    prev_weather: Optional[DayWeather]
    flags: WeatherFlags
    result: ScoreResult
    moon: Optional[MoonInfo] = None
    sun: Optional[dict] = None

    def to_dict(self) -> dict:
        summary, details = summarize(self.weather, self.prev_weather)
        return {
            "date": self.date.isoformat(),
            "rut_phase": self.rut.phase.value,
            "rut_label": self.rut.label,
            "weather": self.weather.to_dict(),
            "prev_weather": self.prev_weather.to_dict() if self.prev_weather else None,
            "weather_summary": summary,
            "weather_details": details,
            "signals": describe_flags(self.flags),
            "flags": vars(self.flags).copy(),
            "sun": self.sun,
            "moon": self.moon.to_dict() if self.moon else None,
            **self.result.to_dict(),
        }


@dataclass(frozen=True)
class DayPlan:
    date: dt.date
    rut: RutInfo
    weather: DayWeather
    result: ScoreResult
    moon: Optional[MoonInfo] = None

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "weekday": self.date.strftime("%A"),
            "rut_phase": self.rut.phase.value,
            "rut_label": self.rut.label,
            "t_max_f": self.weather.t_max_f,
            "t_min_f": self.weather.t_min_f,
            "wind_max_mph": self.weather.wind_max_mph,
            "precip_in": self.weather.precip_in,
            "score": self.result.score,
            "chance_percent": self.result.chance_percent,
            "classification": self.result.classification,
            "badge": self.result.badge,
            "moon": self.moon.to_dict() if self.moon else None,
        }


def _resolve(policy) -> ScoringPolicy:
    return get_policy(policy) if isinstance(policy, str) else policy


def calculate_odds(
    date: dt.date,
    lat: float,
    lon: float,
    time_of_day,
    terrain,
    hunting_pressure,
    policy="additive",
    moon_cache: Optional[MoonCache] = None,
    **fetch_kwargs,
) -> OddsReport:
    if date is None:
        raise InvalidInput("Please pick a hunt date.")
    policy = _resolve(policy)

    rut = rut_phase(date)
    today, prev, tzname = fetch_weather(lat, lon, date, **fetch_kwargs)
    factors = factors_from_weather(today, prev, date, time_of_day, terrain, hunting_pressure)

    return OddsReport(
        date=date,
        rut=rut,
        weather=today,
        prev_weather=prev,
        flags=factors.flags,
        result=policy.score(rut.phase, factors),
        moon=moon_for_day(date, lat, lon, cache=moon_cache),
        sun=sun_times(date, lat, lon, tzname),
    )


def plan_days(
    start: dt.date,
    days: int,
    lat: float,
    lon: float,
    time_of_day,
    terrain,
    hunting_pressure,
    policy="additive",
    moon_cache: Optional[MoonCache] = None,
    **fetch_kwargs,
) -> List[DayPlan]:
    if not 1 <= days <= MAX_FORECAST_DAYS:
        raise InvalidInput(f"Plan length must be between 1 and {MAX_FORECAST_DAYS} days.")
    policy = _resolve(policy)

    end = start + dt.timedelta(days=days - 1)
    forecast = fetch_daily_range(lat, lon, start - dt.timedelta(days=1), end, **fetch_kwargs)

    plans = []
    for i in range(days):
        day = start + dt.timedelta(days=i)
        today = forecast.get(day)
        if today is None:
            logger.warning("No forecast for %s; skipping it in the plan", day)
            continue
        prev = forecast.get(day - dt.timedelta(days=1))

        rut = rut_phase(day)
        factors = factors_from_weather(today, prev, day, time_of_day, terrain, hunting_pressure)
        plans.append(
            DayPlan(
                date=day,
                rut=rut,
                weather=today,
                result=policy.score(rut.phase, factors),
                moon=moon_for_day(day, lat, lon, cache=moon_cache),
            )
        )

    if not plans:
        raise WeatherError("No forecast days available for the requested plan")
    return plans


def best_days(plans: List[DayPlan], n: int = 3) -> List[DayPlan]:
    return sorted(plans, key=lambda p: (-p.result.score, p.date))[:n]
