"""Classification and plain-English descriptions for WMO weather codes.

Open-Meteo reports conditions as WMO codes (0 clear sky ... 99 thunderstorm
with heavy hail). The recommendation engine only cares about a handful of
bands; everything else is treated as clear.
"""

from __future__ import annotations

from enum import Enum


class WeatherCategory(str, Enum):
    """Coarse condition bucket used to pick an outfit modifier."""
    CLEAR = "clear"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    SNOWY = "snowy"


# inclusive code ranges
RAINY_CODES = range(61, 67 + 1)
SNOWY_CODES = range(71, 77 + 1)
CLOUDY_CODES = range(2, 3 + 1)

UNKNOWN_DESCRIPTION = "mixed conditions"

WEATHER_DESCRIPTIONS: dict[int, str] = {
    0: "clear sky",
    1: "mainly clear",
    2: "partly cloudy",
    3: "overcast",
    45: "foggy",
    48: "foggy with rime",
    51: "light drizzle",
    53: "moderate drizzle",
    55: "dense drizzle",
    61: "slight rain",
    63: "moderate rain",
    65: "heavy rain",
    71: "slight snow",
    73: "moderate snow",
    75: "heavy snow",
    80: "light rain showers",
    81: "moderate rain showers",
    82: "heavy rain showers",
    95: "thunderstorm",
    96: "thunderstorm with hail",
    99: "severe thunderstorm with hail",
}


def classify_weather_code(code: int) -> WeatherCategory:
    """Map a weather code to its category; unknown codes are CLEAR."""
    if code in RAINY_CODES:
        return WeatherCategory.RAINY
    if code in SNOWY_CODES:
        return WeatherCategory.SNOWY
    if code in CLOUDY_CODES:
        return WeatherCategory.CLOUDY
    return WeatherCategory.CLEAR


def describe_weather_code(code: int) -> str:
    """Return a short description such as "partly cloudy"."""
    return WEATHER_DESCRIPTIONS.get(code, UNKNOWN_DESCRIPTION)
