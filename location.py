import logging
import math
from typing import NamedTuple, Tuple

import requests

from config import FALLBACK_LOCATION
from models import InvalidInput

logger = logging.getLogger(__name__)

OPENCAGE_URL = "https://api.opencagedata.com/geocode/v1/json"

# ===================================================================
#                        LOCATION LOOKUP
# ===================================================================


class Location(NamedTuple):
    lat: float
    lon: float
    tz: str
    fallback: bool = False


def lookup_lat_lon(
    zipcode: str,
    api_key: str,
    fallback: Tuple[float, float, str] = FALLBACK_LOCATION,
    url: str = OPENCAGE_URL,
    timeout: float = 5.0,
) -> Location:
    fallback_location = Location(*fallback, fallback=True)
    if not api_key:
        logger.warning("No OpenCage key configured; using fallback location")
        return fallback_location

    try:
        resp = requests.get(
            url,
            params={"q": zipcode, "key": api_key, "countrycode": "us", "limit": 1},
            timeout=timeout,
        )
        resp.raise_for_status()
        data = resp.json()

        if data["results"]:
            r = data["results"][0]
            lat = r["geometry"]["lat"]
            lon = r["geometry"]["lng"]
            tz = r["annotations"]["timezone"]["name"]
            return Location(float(lat), float(lon), tz)
    except (requests.RequestException, ValueError, KeyError, TypeError, IndexError) as exc:
        logger.warning("ZIP lookup for %s failed: %s", zipcode, exc)
    else:
        logger.warning("ZIP lookup for %s found nothing; using fallback location", zipcode)

    return fallback_location


def parse_coordinates(lat, lon) -> Tuple[float, float]:
    try:
        lat_f = float(lat)
        lon_f = float(lon)
    except (TypeError, ValueError):
        raise InvalidInput("Please enter a valid latitude and longitude.") from None

    if not (math.isfinite(lat_f) and math.isfinite(lon_f)):
        raise InvalidInput("Please enter a valid latitude and longitude.")
    if not (-90 <= lat_f <= 90 and -180 <= lon_f <= 180):
        raise InvalidInput("Please enter a valid latitude and longitude.")
    return lat_f, lon_f
