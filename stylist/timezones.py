"""Timezone helpers: local hour matching and location-to-timezone fallbacks."""

from __future__ import annotations

import datetime as dt
import math
import re
from typing import Optional, Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from stylist.errors import UnknownTimezoneError
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="timezones")

# "UTC+3", "UTC-05:30", "GMT+1", "+02:00"
_FIXED_OFFSET_RE = re.compile(r"^(?:UTC|GMT)?\s*([+-])(\d{1,2})(?::?(\d{2}))?$", re.IGNORECASE)


class TimezoneResolver(Protocol):
    """Anything that can name the IANA zone for a coordinate."""

    def resolve_timezone(self, latitude: float, longitude: float) -> Optional[str]:
        ...


def _parse_fixed_offset(tz_name: str) -> Optional[dt.timezone]:
    """Parse a fixed UTC offset string, or return None."""
    stripped = tz_name.strip()
    if stripped.upper() in {"UTC", "GMT", "Z"}:
        return dt.timezone.utc
    match = _FIXED_OFFSET_RE.match(stripped)
    if not match:
        return None
    sign, hours, minutes = match.groups()
    delta = dt.timedelta(hours=int(hours), minutes=int(minutes or 0))
    if delta > dt.timedelta(hours=14):
        return None
    return dt.timezone(-delta if sign == "-" else delta, name=stripped)


def resolve_zone(tz_name: str) -> dt.tzinfo:
    """
    Return a tzinfo for an IANA zone name.

    Fixed-offset strings such as "UTC+3" are accepted only when the name is
    not an IANA zone; they carry no DST rules.
    """
    if not tz_name or not tz_name.strip():
        raise UnknownTimezoneError("Empty timezone")
    try:
        return ZoneInfo(tz_name.strip())
    except (ZoneInfoNotFoundError, ValueError, OSError):
        pass

    fixed = _parse_fixed_offset(tz_name)
    if fixed is None:
        raise UnknownTimezoneError(f"Unknown timezone: {tz_name}")
    logger.debug("Using fixed-offset timezone", extra={"tz_name": tz_name})
    return fixed


def is_iana_zone(tz_name: str | None) -> bool:
    """True when `tz_name` names a zone in the IANA database."""
    if not tz_name:
        return False
    try:
        ZoneInfo(tz_name.strip())
        return True
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False


def local_now(instant: dt.datetime, tz_name: str) -> dt.datetime:
    """Convert an instant to wall-clock time in `tz_name`; naive instants are UTC."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=dt.timezone.utc)
    return instant.astimezone(resolve_zone(tz_name))


def local_hour(instant: dt.datetime, tz_name: str) -> int:
    """Hour of day (0..23) of `instant` in `tz_name`, DST-aware."""
    return local_now(instant, tz_name).hour


def provider_zone_name(tz_name: str) -> str:
    """
    Name `tz_name` the way a forecast API expects it: an IANA zone.

    Whole-hour fixed offsets map to their "Etc/GMT" zone ("UTC+3" becomes
    "Etc/GMT-3"). Offsets with minutes have no IANA equivalent and raise
    UnknownTimezoneError.
    """
    if is_iana_zone(tz_name):
        return tz_name.strip()
    fixed = _parse_fixed_offset(tz_name or "")
    if fixed is None:
        raise UnknownTimezoneError(f"Unknown timezone: {tz_name}")

    offset_minutes = int(fixed.utcoffset(None).total_seconds() // 60)
    hours, minutes = divmod(offset_minutes, 60)
    if minutes:
        raise UnknownTimezoneError(f"Timezone {tz_name} has no IANA equivalent")
    name = "Etc/GMT" if hours == 0 else f"Etc/GMT{-hours:+d}"
    if not is_iana_zone(name):
        raise UnknownTimezoneError(f"Timezone {tz_name} has no IANA equivalent")
    return name


def estimate_timezone(longitude: float) -> str:
    """
    Rough fixed-offset zone from longitude alone (15 degrees per hour).

    Only a stand-in for when no real lookup succeeded: it ignores political
    borders and DST. Returned as an "Etc/GMT" name, whose sign is inverted
    (Etc/GMT+5 is UTC-5).
    """
    offset = int(math.floor(longitude / 15 + 0.5))
    offset = max(-12, min(12, offset))
    if offset == 0:
        return "Etc/GMT"
    return f"Etc/GMT{-offset:+d}"


def resolve_timezone_for_location(
    latitude: float,
    longitude: float,
    resolver: TimezoneResolver | None = None,
) -> str:
    """Name the timezone for a coordinate, falling back to the longitude estimate."""
    if resolver is not None:
        try:
            tz_name = resolver.resolve_timezone(latitude, longitude)
        except Exception as exc:
            logger.warning("Timezone lookup failed; estimating from longitude", extra={"error": str(exc)})
            tz_name = None
        if tz_name and is_iana_zone(tz_name):
            return tz_name

    estimated = estimate_timezone(longitude)
    logger.info(
        "Estimated timezone from longitude",
        extra={"latitude": latitude, "longitude": longitude, "timezone": estimated},
    )
    return estimated
