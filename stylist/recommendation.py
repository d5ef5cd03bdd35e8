"""Deterministic clothing recommendation from a day's temperatures and weather code.

The engine picks a base outfit from the daily high, optionally adds an
evening-layer note when the low drops well below the tier, then appends at
most one weather modifier (rain, snow or cloud).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from stylist.weather_codes import WeatherCategory, classify_weather_code


@dataclass(frozen=True)
class ClothingRecommendation:
    """What to wear and why."""
    outfit: str
    reason: str


@dataclass(frozen=True)
class _Tier:
    """Base outfit for highs at or above `min_high_f`."""
    min_high_f: float
    outfit: str
    reason: str
    # (low threshold, note) appended when the low falls below the threshold
    evening_layer: Optional[tuple[float, str]] = None


# Ordered warmest first; the first tier whose floor is <= the high wins.
TIERS: tuple[_Tier, ...] = (
    _Tier(
        90,
        "very light shorts, a tank top, and sandals",
        "It's extremely hot today, so wear the coolest clothes you have",
    ),
    _Tier(
        80,
        "light shorts, a breathable t-shirt, and sneakers or sandals",
        "It's hot today, so stay cool and comfortable",
    ),
    _Tier(
        70,
        "comfortable pants or shorts with a light shirt or blouse",
        "Warm weather, dress for comfort",
        evening_layer=(60, " (bring a light jacket for the evening)"),
    ),
    _Tier(
        60,
        "jeans or pants with a sweater or light jacket",
        "Mild temperatures, layers are a good idea",
        evening_layer=(50, " (bring a medium jacket for later)"),
    ),
    _Tier(
        45,
        "warm pants, a sweater, and a medium jacket",
        "Chilly weather, bundle up a bit",
    ),
    _Tier(
        30,
        "warm layers, a heavy coat, scarf, and gloves",
        "Cold weather ahead - stay warm and cozy",
    ),
)

COLDEST_TIER = _Tier(
    float("-inf"),
    "your warmest winter gear, including thermal layers, heavy coat, hat, scarf, and insulated boots",
    "It's freezing out there - dress for extreme cold",
)

# Rain gear is skipped in hot tiers, snow gear above this high.
RAIN_MAX_HIGH_F = 80
SNOW_MAX_HIGH_F = 40

RAIN_OUTFIT = " with a waterproof jacket or umbrella"
RAIN_REASON = " with rain protection"
SNOW_OUTFIT = " with waterproof boots and extra warm layers"
SNOW_REASON = " and snow gear"
CLOUD_OUTFIT = " (and maybe bring a light jacket just in case)"
CLOUD_REASON = " with cloud cover"


def _select_tier(high_temp_f: float) -> _Tier:
    """Return the tier for a daily high; boundaries belong to the warmer tier."""
    for tier in TIERS:
        if high_temp_f >= tier.min_high_f:
            return tier
    return COLDEST_TIER


def _weather_modifier(high_temp_f: float, category: WeatherCategory) -> tuple[str, str]:
    """Return the (outfit, reason) suffix for the day's conditions, or empty strings."""
    if category is WeatherCategory.RAINY and high_temp_f < RAIN_MAX_HIGH_F:
        return RAIN_OUTFIT, RAIN_REASON
    if category is WeatherCategory.SNOWY and high_temp_f < SNOW_MAX_HIGH_F:
        return SNOW_OUTFIT, SNOW_REASON
    if category is WeatherCategory.CLOUDY:
        return CLOUD_OUTFIT, CLOUD_REASON
    return "", ""


def recommend(high_temp_f: float, low_temp_f: float, weather_code: int) -> ClothingRecommendation:
    """Recommend an outfit for a day with the given high/low (°F) and weather code."""
    tier = _select_tier(high_temp_f)
    outfit = tier.outfit
    reason = tier.reason

    if tier.evening_layer is not None:
        threshold, note = tier.evening_layer
        if low_temp_f < threshold:
            outfit += note

    outfit_suffix, reason_suffix = _weather_modifier(high_temp_f, classify_weather_code(weather_code))
    return ClothingRecommendation(outfit=outfit + outfit_suffix, reason=reason + reason_suffix)
