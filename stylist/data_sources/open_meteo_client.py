"""Client for the Open-Meteo forecast API: hourly temperature/weather code per local day."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import List, Optional

import requests
import requests_cache
from retry_requests import retry

from stylist.errors import ForecastUnavailableError
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="open_meteo_client")

OPEN_METEO_BASE_URL = "https://api.open-meteo.com/v1"

HOURLY_VARS = ["temperature_2m", "weather_code"]

EXPECTED_HOURLY_UNITS = {
    "temperature_2m": "°C",
    "weather_code": "wmo code",
}

# Acceptable alternative spellings that should not trigger warnings.
ALLOWED_HOURLY_UNIT_SYNONYMS = {
    "temperature_2m": {"°C", "C", "celsius"},
    "weather_code": {"wmo code", "WMO code", ""},
}


@dataclass
class ForecastSample:
    """One local calendar day of hourly readings, indexed by local hour."""
    date: dt.date
    hourly_temperatures: List[Optional[float]]  # °C
    hourly_weather_codes: List[Optional[int]]
    timezone: Optional[str] = None
    times: List[str] = field(default_factory=list)


def build_http_session(
    *,
    cache_path: str | None = None,
    cache_ttl_seconds: int = 3600,
    retries: int = 3,
    backoff_factor: float = 0.2,
) -> requests.Session:
    """Return a requests session, cached and retried when configured."""
    if cache_path and cache_ttl_seconds > 0:
        session: requests.Session = requests_cache.CachedSession(cache_path, expire_after=cache_ttl_seconds)
        logger.info("Using requests_cache", extra={"cache_path": cache_path, "ttl": cache_ttl_seconds})
    else:
        session = requests.Session()
    if retries > 0:
        session = retry(session, retries=retries, backoff_factor=backoff_factor)
    return session


def _warn_on_unexpected_units(units: dict, *, context: str):
    """Log a warning if Open-Meteo returns units we did not request/expect."""
    if not units:
        return
    for name, expected in EXPECTED_HOURLY_UNITS.items():
        if name not in units:
            continue
        actual = units.get(name)
        if actual is not None and actual != expected:
            allowed = ALLOWED_HOURLY_UNIT_SYNONYMS.get(name, set())
            if actual not in allowed:
                logger.warning(
                    "Unexpected Open-Meteo unit",
                    extra={"context": context, "field": name, "unit": actual, "expected": expected},
                )


def _coerce_code(value) -> Optional[int]:
    """Weather codes arrive as ints (sometimes floats or null)."""
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class OpenMeteoClient:
    """Fetch daily hourly forecasts and timezone lookups from Open-Meteo."""

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        base_url: str = OPEN_METEO_BASE_URL,
        timeout: float = 10.0,
    ) -> None:
        self.session = session or requests.Session()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def forecast_url(self) -> str:
        return f"{self.base_url}/forecast"

    def _get(self, params: dict) -> dict:
        """GET the forecast endpoint and return the decoded JSON body."""
        try:
            resp = self.session.get(self.forecast_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.exceptions.RequestException as exc:
            raise ForecastUnavailableError(f"Open-Meteo request failed: {exc}") from exc
        except ValueError as exc:
            raise ForecastUnavailableError("Open-Meteo returned a non-JSON response") from exc

    def get_forecast(
        self,
        latitude: float,
        longitude: float,
        timezone: str,
        date: dt.date,
    ) -> ForecastSample:
        """Fetch hourly temperature (°C) and weather code for one local day."""
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "hourly": ",".join(HOURLY_VARS),
            "timezone": timezone,
            "start_date": date.isoformat(),
            "end_date": date.isoformat(),
            "temperature_unit": "celsius",
        }
        logger.debug("Fetching Open-Meteo forecast", extra={"date": date.isoformat(), "timezone": timezone})
        data = self._get(params)

        hourly = data.get("hourly") or {}
        _warn_on_unexpected_units(data.get("hourly_units") or {}, context="forecast_hourly")
        temps = hourly.get("temperature_2m")
        # older responses used the un-underscored name
        codes = hourly.get("weather_code", hourly.get("weathercode"))
        if not temps:
            raise ForecastUnavailableError(f"Open-Meteo returned no hourly temperatures for {date.isoformat()}")
        if codes is None:
            codes = [None] * len(temps)

        return ForecastSample(
            date=date,
            hourly_temperatures=list(temps),
            hourly_weather_codes=[_coerce_code(c) for c in codes],
            timezone=data.get("timezone", timezone),
            times=list(hourly.get("time") or []),
        )

    def resolve_timezone(self, latitude: float, longitude: float) -> Optional[str]:
        """Ask Open-Meteo which IANA timezone a coordinate falls in."""
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "timezone": "auto",
            "forecast_days": 1,
            "hourly": "temperature_2m",
        }
        data = self._get(params)
        return data.get("timezone") or None
