import datetime as dt
from dataclasses import replace

import pytest
import requests

import weather
from app import WEATHER_ERROR_TEXT, create_app, parse_date
from config import Settings
from conftest import FakeSession, build_forecast
from models import InvalidInput

DATE = dt.date(2025, 10, 30)


@pytest.fixture
def settings():
    return Settings(open_meteo_url="http://forecast.test/v1/forecast", request_timeout=3.0)


@pytest.fixture
def client(settings):
    app = create_app(settings)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def live_weather(monkeypatch):
    session = FakeSession(build_forecast(DATE - dt.timedelta(days=1), 2))
    monkeypatch.setattr(weather.requests, "get", session.get)
    return session


@pytest.fixture
def broken_weather(monkeypatch):
    payload = build_forecast(DATE - dt.timedelta(days=1), 2)
    payload["daily"]["precipitation_sum"].pop()
    session = FakeSession(payload)
    monkeypatch.setattr(weather.requests, "get", session.get)
    return session


class RoutedSession:
    """Sends geocoder calls and forecast calls to separate fakes."""

    def __init__(self, geocoder, forecast):
        self.geocoder = geocoder
        self.forecast = forecast

    def get(self, url, params=None, timeout=None):
        target = self.forecast if url.startswith("http://forecast.test") else self.geocoder
        return target.get(url, params=params, timeout=timeout)


@pytest.fixture
def dead_weather(monkeypatch):
    session = FakeSession(exc=requests.ConnectionError("offline"))
    monkeypatch.setattr(weather.requests, "get", session.get)
    return session


ODDS_QUERY = {
    "date": DATE.isoformat(),
    "lat": "33.0",
    "lon": "-82.8",
    "timeOfDay": "evening",
    "terrain": "hardwoods",
    "huntingPressure": "low",
}


def test_parse_date():
    assert parse_date("2025-10-30") == DATE
    for bad in ("", None, "10/30/2025"):
        with pytest.raises(InvalidInput):
            parse_date(bad)


class TestApi:
    def test_rut_endpoint(self, client):
        resp = client.get("/api/rut?date=2025-11-26")
        assert resp.status_code == 200
        assert resp.get_json()["phase"] == "secondRut"

    def test_rut_endpoint_needs_date(self, client):
        assert client.get("/api/rut").status_code == 400

    def test_odds(self, client, live_weather):
        resp = client.get("/api/odds", query_string=ODDS_QUERY)

        assert resp.status_code == 200
        data = resp.get_json()
        # 65 peak + 6 evening + 5 low pressure
        assert data["score"] == 76
        assert data["policy"] == "additive"
        assert data["tips"][0].startswith("Key in on ridges")
        assert live_weather.calls[0]["url"] == "http://forecast.test/v1/forecast"
        assert live_weather.calls[0]["timeout"] == 3.0

    def test_odds_weighted(self, client, live_weather):
        resp = client.get("/api/odds", query_string={**ODDS_QUERY, "policy": "weighted"})
        assert resp.get_json()["classification"] in {"great", "good", "ok", "bad"}

    @pytest.mark.parametrize(
        "override",
        [{"lat": "north"}, {"lon": "200"}, {"date": ""}, {"terrain": "swamp"}, {"policy": "vibes"}],
    )
    def test_odds_rejects_bad_input(self, client, live_weather, override):
        resp = client.get("/api/odds", query_string={**ODDS_QUERY, **override})
        assert resp.status_code == 400
        assert live_weather.calls == []

    def test_odds_weather_down(self, client, dead_weather):
        resp = client.get("/api/odds", query_string=ODDS_QUERY)
        assert resp.status_code == 502
        assert resp.get_json() == {"error": WEATHER_ERROR_TEXT}

    def test_odds_malformed_forecast(self, client, broken_weather):
        resp = client.get("/api/odds", query_string=ODDS_QUERY)
        assert resp.status_code == 502
        assert resp.get_json() == {"error": WEATHER_ERROR_TEXT}

    def test_odds_with_zipcode(self, settings, live_weather, monkeypatch):
        geocoder = FakeSession(
            {
                "results": [
                    {
                        "geometry": {"lat": 32.98, "lng": -82.81},
                        "annotations": {"timezone": {"name": "America/New_York"}},
                    }
                ]
            }
        )
        monkeypatch.setattr(weather.requests, "get", RoutedSession(geocoder, live_weather).get)
        client = create_app(replace(settings, opencage_key="key")).test_client()

        resp = client.get("/api/odds", query_string={**ODDS_QUERY, "zipcode": "31082"})

        assert resp.status_code == 200
        assert resp.get_json()["location_note"] is None
        assert live_weather.calls[0]["params"]["latitude"] == 32.98

    def test_unknown_zipcode_uses_default_location_with_note(self, settings, live_weather, monkeypatch):
        geocoder = FakeSession({"results": []})
        monkeypatch.setattr(weather.requests, "get", RoutedSession(geocoder, live_weather).get)
        client = create_app(replace(settings, opencage_key="key")).test_client()

        resp = client.get("/api/odds", query_string={**ODDS_QUERY, "zipcode": "00000"})

        assert resp.status_code == 200
        assert "ZIP code 00000" in resp.get_json()["location_note"]
        assert live_weather.calls[0]["params"]["latitude"] == settings.default_lat

    @pytest.mark.parametrize("override", [{"terrain": "swamp"}, {"timeOfDay": "dusk"}, {"policy": "vibes"}])
    def test_bad_input_rejected_before_zip_lookup(self, settings, live_weather, monkeypatch, override):
        geocoder = FakeSession({"results": []})
        monkeypatch.setattr(weather.requests, "get", RoutedSession(geocoder, live_weather).get)
        client = create_app(replace(settings, opencage_key="key")).test_client()

        resp = client.get("/api/odds", query_string={**ODDS_QUERY, "zipcode": "31082", **override})

        assert resp.status_code == 400
        assert geocoder.calls == []
        assert live_weather.calls == []

    def test_plan(self, client, monkeypatch):
        start = dt.date(2025, 11, 20)
        session = FakeSession(build_forecast(start - dt.timedelta(days=1), 8))
        monkeypatch.setattr(weather.requests, "get", session.get)

        resp = client.get(
            "/api/plan", query_string={**ODDS_QUERY, "start": start.isoformat(), "days": "7"}
        )

        assert resp.status_code == 200
        data = resp.get_json()
        assert len(data["days"]) == 7
        assert data["best"][0] == "2025-11-24"

    def test_plan_bad_length(self, client, live_weather):
        resp = client.get("/api/plan", query_string={**ODDS_QUERY, "days": "lots"})
        assert resp.status_code == 400


class TestPage:
    def test_form_renders(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert b"Calculate Odds" in resp.data

    def test_post_shows_score(self, client, live_weather):
        resp = client.post("/", data=ODDS_QUERY)
        assert resp.status_code == 200
        assert b"Activity Score: 76 / 100" in resp.data
        assert b"Estimated chance of seeing deer in daylight: 76%" in resp.data

    def test_post_without_date(self, client, live_weather):
        resp = client.post("/", data={**ODDS_QUERY, "date": ""})
        assert b"Please pick a hunt date." in resp.data
        assert b"Activity Score" not in resp.data

    def test_post_weather_down(self, client, dead_weather):
        resp = client.post("/", data=ODDS_QUERY)
        assert b"Could not load weather" in resp.data
        assert b"Activity Score" not in resp.data

    def test_post_malformed_forecast(self, client, broken_weather):
        resp = client.post("/", data=ODDS_QUERY)
        assert resp.status_code == 200
        assert b"Could not load weather" in resp.data
        assert b"Activity Score" not in resp.data

    def test_post_shows_location_note(self, settings, live_weather, monkeypatch):
        geocoder = FakeSession({"results": []})
        monkeypatch.setattr(weather.requests, "get", RoutedSession(geocoder, live_weather).get)
        client = create_app(replace(settings, opencage_key="key")).test_client()

        resp = client.post("/", data={**ODDS_QUERY, "zipcode": "00000"})

        assert b"Could not find ZIP code 00000" in resp.data
        assert b"Activity Score" in resp.data
