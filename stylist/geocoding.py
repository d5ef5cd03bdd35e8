"""Reverse geocoding of a coordinate to a city name via OpenStreetMap Nominatim."""

from __future__ import annotations

from typing import Optional, Protocol

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="geocoding")

# Nominatim address keys, most specific first.
_CITY_KEYS = ("city", "town", "village", "hamlet", "state")


class CityLookup(Protocol):
    """Anything that can name the city at a coordinate."""

    def city_for(self, latitude: float, longitude: float) -> Optional[str]:
        ...


class NominatimCityLookup:
    """Reverse geocoder that degrades to None on any lookup failure."""

    def __init__(self, *, user_agent: str, timeout: float = 10.0, geolocator=None) -> None:
        self.geolocator = geolocator or Nominatim(user_agent=user_agent, timeout=timeout)

    def city_for(self, latitude: float, longitude: float) -> Optional[str]:
        """Return a city/town/village name, or None if nothing usable came back."""
        try:
            location = self.geolocator.reverse(
                (latitude, longitude),
                exactly_one=True,
                addressdetails=True,
                language="en",
            )
        except GeopyError as exc:
            logger.warning("Reverse geocoding failed", extra={"error": str(exc)})
            return None

        if location is None:
            logger.info("No reverse geocoding result", extra={"latitude": latitude, "longitude": longitude})
            return None

        address = (location.raw or {}).get("address", {})
        for key in _CITY_KEYS:
            if address.get(key):
                return address[key]
        return None
