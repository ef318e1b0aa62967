import datetime as dt

import pytest
import requests


class FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


class FakeSession:
    """Stands in for requests: records calls, returns a canned forecast."""

    def __init__(self, payload=None, status=200, exc=None):
        self.payload = payload
        self.status = status
        self.exc = exc
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return FakeResponse(self.payload, self.status)


def build_forecast(start, days, overrides=None, pressure=1016.0, timezone="America/New_York"):
    """Open-Meteo shaped payload; `overrides` maps ISO date -> field values."""
    overrides = overrides or {}
    daily = {
        "time": [],
        "temperature_2m_max": [],
        "temperature_2m_min": [],
        "precipitation_sum": [],
        "windspeed_10m_max": [],
        "winddirection_10m_dominant": [],
    }
    hourly = {"time": [], "pressure_msl": []}

    for i in range(days):
        day = (start + dt.timedelta(days=i)).isoformat()
        row = {"t_max": 55.0, "t_min": 35.0, "precip": 0.0, "wind": 6.0, "dir": 270}
        row.update(overrides.get(day, {}))
        daily["time"].append(day)
        daily["temperature_2m_max"].append(row["t_max"])
        daily["temperature_2m_min"].append(row["t_min"])
        daily["precipitation_sum"].append(row["precip"])
        daily["windspeed_10m_max"].append(row["wind"])
        daily["winddirection_10m_dominant"].append(row["dir"])
        for hour in range(24):
            hourly["time"].append(f"{day}T{hour:02d}:00")
            hourly["pressure_msl"].append(row.get("pressure", pressure))

    return {"timezone": timezone, "daily": daily, "hourly": hourly}


@pytest.fixture
def forecast_session():
    def factory(start, days, overrides=None, **kwargs):
        return FakeSession(build_forecast(start, days, overrides, **kwargs))

    return factory
