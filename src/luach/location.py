"""Location provider — geocoding an address and inferring a UTC offset for a coordinate."""

from datetime import date, datetime, time

import httpx
import structlog
from pytz import timezone
from timezonefinder import TimezoneFinder

from luach.models import GeoCoordinate

log = structlog.get_logger(__name__)

_NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
_USER_AGENT = "Luach/1.0 (hebrew event calendar)"

_tf: TimezoneFinder | None = None


class GeocodingError(Exception):
    """Geocoder call failure."""


def _finder() -> TimezoneFinder:
    global _tf
    if _tf is None:
        _tf = TimezoneFinder()
    return _tf


def geocode(address: str, client: httpx.Client | None = None) -> GeoCoordinate:
    """Resolve an address string to coordinates through Nominatim (OpenStreetMap).

    Args:
        address: Free-form address in any language.
        client: Optional httpx client (injected in tests).

    Returns:
        GeoCoordinate of the best match.

    Raises:
        GeocodingError: On HTTP failure or when the address cannot be found.
    """
    if not address or not address.strip():
        raise GeocodingError("Empty address")
    params = {"q": address, "format": "json", "limit": 1}
    headers = {"User-Agent": _USER_AGENT}
    try:
        if client is None:
            resp = httpx.get(_NOMINATIM_URL, params=params, headers=headers, timeout=10)
        else:
            resp = client.get(_NOMINATIM_URL, params=params, headers=headers, timeout=10)
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        raise GeocodingError(f"Nominatim request failed: {exc}") from exc

    results = resp.json()
    if not results:
        raise GeocodingError(f"Address not found: {address}")
    best = results[0]
    coord = GeoCoordinate(lat=float(best["lat"]), lng=float(best["lon"]))
    log.info("geocoded", address=address, lat=coord.lat, lng=coord.lng)
    return coord


def timezone_name(coord: GeoCoordinate) -> str | None:
    """IANA zone name at a coordinate, or None over open sea."""
    return _finder().timezone_at(lat=coord.lat, lng=coord.lng)


def utc_offset_hours(coord: GeoCoordinate, on: date, fallback: float = 2.0) -> float:
    """UTC offset in hours in effect at coord on the given date (noon local).

    Returns fallback when no zone covers the coordinate.
    """
    tz_str = timezone_name(coord)
    if tz_str is None:
        log.info("timezone_not_found", lat=coord.lat, lng=coord.lng, fallback=fallback)
        return fallback
    local = timezone(tz_str).localize(datetime.combine(on, time(12, 0)))
    offset = local.utcoffset()
    if offset is None:
        return fallback
    return offset.total_seconds() / 3600
