"""Weather data sources."""

from .base import CallableWeatherProvider, WeatherProvider
from .open_meteo_client import ForecastSample, OpenMeteoClient, build_http_session

__all__ = [
    "CallableWeatherProvider",
    "WeatherProvider",
    "ForecastSample",
    "OpenMeteoClient",
    "build_http_session",
]
