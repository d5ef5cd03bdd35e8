"""Turn raw hourly forecasts into the daily outlook used in the morning email."""
from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from stylist.data_sources import ForecastSample, WeatherProvider
from stylist.errors import ForecastUnavailableError
from stylist.recommendation import ClothingRecommendation, recommend
from stylist.weather_codes import describe_weather_code
from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="forecast_service")

NOON_INDEX = 12
# degrees °F of day-over-day change before we call it warmer/colder
COMPARISON_BAND_F = 2

WARMER = "Today will be warmer than yesterday."
COLDER = "Today will be colder than yesterday."
SAME = "Today will be about the same as yesterday."


@dataclass
class DailyOutlook:
    """Everything the daily email says about one user's day."""
    date: dt.date
    high_f: int
    low_f: int
    yesterday_high_f: Optional[int]
    weather_code: int
    description: str
    comparison: str
    recommendation: ClothingRecommendation


def celsius_to_fahrenheit(value_c: float) -> float:
    """°F = °C × 9/5 + 32"""
    return value_c * 9 / 5 + 32


def round_half_up(value: float) -> int:
    """Round to the nearest whole degree, .5 going up."""
    return int(math.floor(value + 0.5))


def _valid_temperatures(sample: ForecastSample) -> List[float]:
    """Drop null hours; raise if nothing usable is left."""
    temps = [t for t in sample.hourly_temperatures if t is not None]
    if not temps:
        raise ForecastUnavailableError(f"No temperatures in forecast for {sample.date.isoformat()}")
    return temps


def high_low_f(sample: ForecastSample) -> tuple[int, int]:
    """Return the rounded (high, low) in °F for a day of hourly °C readings."""
    temps = _valid_temperatures(sample)
    return (
        round_half_up(celsius_to_fahrenheit(max(temps))),
        round_half_up(celsius_to_fahrenheit(min(temps))),
    )


def representative_code(codes: Sequence[Optional[int]]) -> int:
    """Weather code at local noon, falling back to the first hour."""
    if len(codes) > NOON_INDEX and codes[NOON_INDEX] is not None:
        return int(codes[NOON_INDEX])
    if codes and codes[0] is not None:
        return int(codes[0])
    return 0


def compare_days(today_high_f: int, yesterday_high_f: Optional[int]) -> str:
    """Describe today's high relative to yesterday's."""
    if yesterday_high_f is None:
        return ""
    if today_high_f > yesterday_high_f + COMPARISON_BAND_F:
        return WARMER
    if today_high_f < yesterday_high_f - COMPARISON_BAND_F:
        return COLDER
    return SAME


def build_outlook(today: ForecastSample, yesterday: ForecastSample | None = None) -> DailyOutlook:
    """Derive the daily outlook from today's (and optionally yesterday's) forecast."""
    high_f, low_f = high_low_f(today)
    yesterday_high_f = None
    if yesterday is not None:
        yesterday_high_f, _ = high_low_f(yesterday)

    code = representative_code(today.hourly_weather_codes)
    outlook = DailyOutlook(
        date=today.date,
        high_f=high_f,
        low_f=low_f,
        yesterday_high_f=yesterday_high_f,
        weather_code=code,
        description=describe_weather_code(code),
        comparison=compare_days(high_f, yesterday_high_f),
        recommendation=recommend(high_f, low_f, code),
    )
    logger.debug(
        "Built daily outlook",
        extra={"date": today.date.isoformat(), "high_f": high_f, "low_f": low_f, "code": code},
    )
    return outlook


def get_outlook_for_location(
    provider: WeatherProvider,
    latitude: float,
    longitude: float,
    timezone: str,
    local_date: dt.date,
) -> DailyOutlook:
    """Fetch today's and yesterday's forecast for a location and build the outlook."""
    today = provider.get_forecast(latitude, longitude, timezone, local_date)
    yesterday = provider.get_forecast(latitude, longitude, timezone, local_date - dt.timedelta(days=1))
    return build_outlook(today, yesterday)
