import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Contoocook, NH
FALLBACK_LOCATION = (43.2287, -71.7134, "America/New_York")


@dataclass(frozen=True)
class Settings:
    open_meteo_url: str = "https://api.open-meteo.com/v1/forecast"
    opencage_url: str = "https://api.opencagedata.com/geocode/v1/json"
    opencage_key: str = ""
    request_timeout: float = 10.0
    default_lat: float = FALLBACK_LOCATION[0]
    default_lon: float = FALLBACK_LOCATION[1]
    default_tz: str = FALLBACK_LOCATION[2]
    scoring_policy: str = "additive"
    plan_days: int = 7
    log_level: str = "INFO"
    secret_key: str = "dev_secret"


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def get_settings() -> Settings:
    """Build settings from the environment (and .env, if present)."""
    defaults = Settings()
    return Settings(
        open_meteo_url=os.environ.get("OPEN_METEO_URL", defaults.open_meteo_url),
        opencage_url=os.environ.get("OPENCAGE_URL", defaults.opencage_url),
        opencage_key=os.environ.get("OPENCAGE_KEY", defaults.opencage_key),
        request_timeout=_env_float("REQUEST_TIMEOUT", defaults.request_timeout),
        default_lat=_env_float("DEFAULT_LAT", defaults.default_lat),
        default_lon=_env_float("DEFAULT_LON", defaults.default_lon),
        default_tz=os.environ.get("DEFAULT_TZ", defaults.default_tz),
        scoring_policy=os.environ.get("SCORING_POLICY", defaults.scoring_policy).lower(),
        plan_days=_env_int("PLAN_DAYS", defaults.plan_days),
        log_level=os.environ.get("LOG_LEVEL", defaults.log_level).upper(),
        secret_key=os.environ.get("SECRET_KEY", defaults.secret_key),
    )


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
