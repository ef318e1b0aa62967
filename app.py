import datetime as dt
import logging

from flask import Flask, jsonify, render_template, request

from astro import MoonCache
from config import get_settings, setup_logging
from location import lookup_lat_lon, parse_coordinates
from models import HuntingPressure, InvalidInput, Terrain, TimeOfDay, parse_choice
from planner import best_days, calculate_odds, plan_days
from rut import rut_phase
from scoring import POLICIES, get_policy
from weather import WeatherError

logger = logging.getLogger(__name__)

WEATHER_ERROR_TEXT = (
    "Could not load weather or calculate odds. Try a date within the next "
    "16 days and check your connection."
)

# ===================================================================
#                       REQUEST PARSING
# ===================================================================


def parse_date(raw) -> dt.date:
    if not raw:
        raise InvalidInput("Please pick a hunt date.")
    try:
        return dt.date.fromisoformat(str(raw).strip())
    except ValueError:
        raise InvalidInput("Please pick a hunt date.") from None


def location_note(zipcode: str) -> str:
    return f"Could not find ZIP code {zipcode}; showing odds for the default location instead."


def parse_hunt(form, settings):
    """Validate a form/query mapping before anything is fetched or scored.

    Returns the keyword arguments for the planner plus a note that is set
    when a ZIP code could not be resolved and the default location is used.
    """
    time_of_day = parse_choice(TimeOfDay, form.get("timeOfDay", TimeOfDay.MORNING.value))
    terrain = parse_choice(Terrain, form.get("terrain", Terrain.MIXED.value))
    hunting_pressure = parse_choice(
        HuntingPressure, form.get("huntingPressure", HuntingPressure.MEDIUM.value)
    )

    policy_name = form.get("policy") or settings.scoring_policy
    try:
        policy = get_policy(policy_name)
    except ValueError as exc:
        raise InvalidInput(str(exc)) from None

    note = None
    zipcode = (form.get("zipcode") or "").strip()
    if zipcode:
        place = lookup_lat_lon(
            zipcode,
            settings.opencage_key,
            fallback=(settings.default_lat, settings.default_lon, settings.default_tz),
            url=settings.opencage_url,
        )
        lat, lon = place.lat, place.lon
        if place.fallback:
            note = location_note(zipcode)
    else:
        lat, lon = parse_coordinates(form.get("lat"), form.get("lon"))

    hunt = {
        "lat": lat,
        "lon": lon,
        "time_of_day": time_of_day,
        "terrain": terrain,
        "hunting_pressure": hunting_pressure,
        "policy": policy,
    }
    return hunt, note


# ===================================================================
#                            APP
# ===================================================================


def create_app(settings=None) -> Flask:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["SETTINGS"] = settings

    moon_cache = MoonCache()
    fetch_kwargs = {"url": settings.open_meteo_url, "timeout": settings.request_timeout}

    @app.route("/", methods=["GET", "POST"])
    def index():
        form = request.form if request.method == "POST" else request.args
        context = {
            "form": form,
            "policies": list(POLICIES),
            "default_policy": settings.scoring_policy,
            "default_lat": settings.default_lat,
            "default_lon": settings.default_lon,
            "today": dt.date.today().isoformat(),
            "report": None,
            "error": None,
        }

        if request.method == "POST":
            try:
                date = parse_date(form.get("date"))
                hunt, note = parse_hunt(form, settings)
                report = calculate_odds(date, moon_cache=moon_cache, **hunt, **fetch_kwargs)
                context["report"] = {**report.to_dict(), "location_note": note}
            except InvalidInput as exc:
                context["error"] = str(exc)
            except WeatherError as exc:
                logger.error("Odds calculation failed: %s", exc)
                context["error"] = WEATHER_ERROR_TEXT

        return render_template("index.html", **context)

    @app.route("/api/rut", methods=["GET"])
    def api_rut():
        try:
            date = parse_date(request.args.get("date"))
        except InvalidInput as exc:
            return jsonify({"error": str(exc)}), 400
        info = rut_phase(date)
        return jsonify(
            {"date": date.isoformat(), "phase": info.phase.value, "label": info.label, "factor": info.factor}
        )

    @app.route("/api/odds", methods=["GET"])
    def api_odds():
        try:
            date = parse_date(request.args.get("date"))
            hunt, note = parse_hunt(request.args, settings)
            report = calculate_odds(date, moon_cache=moon_cache, **hunt, **fetch_kwargs)
        except InvalidInput as exc:
            return jsonify({"error": str(exc)}), 400
        except WeatherError as exc:
            logger.error("Odds calculation failed: %s", exc)
            return jsonify({"error": WEATHER_ERROR_TEXT}), 502
        return jsonify({**report.to_dict(), "location_note": note})

    @app.route("/api/plan", methods=["GET"])
    def api_plan():
        try:
            raw_start = request.args.get("start")
            start = parse_date(raw_start) if raw_start else dt.date.today()
            try:
                days = int(request.args.get("days", settings.plan_days))
            except ValueError:
                raise InvalidInput("Plan length must be a whole number of days.") from None
            hunt, note = parse_hunt(request.args, settings)
            plans = plan_days(start, days, moon_cache=moon_cache, **hunt, **fetch_kwargs)
        except InvalidInput as exc:
            return jsonify({"error": str(exc)}), 400
        except WeatherError as exc:
            logger.error("Plan generation failed: %s", exc)
            return jsonify({"error": WEATHER_ERROR_TEXT}), 502

        return jsonify(
            {
                "start": start.isoformat(),
                "policy": hunt["policy"].name,
                "days": [p.to_dict() for p in plans],
                "best": [p.date.isoformat() for p in best_days(plans)],
                "location_note": note,
            }
        )

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
