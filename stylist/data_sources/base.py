"""Interfaces and helpers for weather data sources."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from stylist.data_sources.open_meteo_client import ForecastSample


class WeatherProvider(Protocol):
    """Interface for anything that can provide a day of hourly forecast data."""

    def get_forecast(
        self,
        latitude: float,
        longitude: float,
        timezone: str,
        date: dt.date,
    ) -> ForecastSample:
        """Return hourly °C temperatures and weather codes for one local day."""
        ...

    def resolve_timezone(self, latitude: float, longitude: float) -> Optional[str]:
        """Return the IANA timezone for a coordinate, or None if unknown."""
        ...


@dataclass
class CallableWeatherProvider(WeatherProvider):
    """Wrap plain callables so tests and alternate backends can be swapped in."""

    forecast: Callable[..., ForecastSample]
    timezone_lookup: Optional[Callable[..., Optional[str]]] = None

    def get_forecast(self, *args, **kwargs) -> ForecastSample:
        """Delegate to the configured forecast callable."""
        return self.forecast(*args, **kwargs)

    def resolve_timezone(self, *args, **kwargs) -> Optional[str]:
        """Delegate to the configured timezone callable, if any."""
        if self.timezone_lookup is None:
            return None
        return self.timezone_lookup(*args, **kwargs)
