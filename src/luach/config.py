"""Environment-driven settings. Values come from the process environment or a .env file."""

import math
import os
from dataclasses import dataclass
from datetime import tzinfo

from dotenv import load_dotenv
from pytz import FixedOffset

from luach.models import DEFAULT_LOCATION, GeoCoordinate


class ConfigError(ValueError):
    """An environment variable holds a value that cannot be parsed."""


@dataclass(frozen=True)
class Settings:
    location: GeoCoordinate = DEFAULT_LOCATION
    utc_offset_hours: float = 2.0  # Israel Standard Time
    fire_log_retention_days: int = 2
    log_level: str = "INFO"
    events_file: str | None = None  # Used by the reminder CLI only
    fire_log_file: str | None = None


def fixed_zone(utc_offset_hours: float) -> tzinfo:
    """pytz zone for a whole-minute UTC offset."""
    return FixedOffset(int(round(utc_offset_hours * 60)))


def _float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name}={raw!r} is not a number") from exc
    if not math.isfinite(value):
        raise ConfigError(f"{name}={raw!r} is not finite")
    return value


def _int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name}={raw!r} is not an integer") from exc


def load_settings(dotenv: bool = True) -> Settings:
    """Build Settings from LUACH_* environment variables.

    Args:
        dotenv: Read a .env file first (existing variables win).

    Raises:
        ConfigError: On malformed numeric values.
    """
    if dotenv:
        load_dotenv()

    location = GeoCoordinate(
        lat=_float("LUACH_LAT", DEFAULT_LOCATION.lat),
        lng=_float("LUACH_LNG", DEFAULT_LOCATION.lng),
    )
    retention = _int("LUACH_FIRE_LOG_RETENTION_DAYS", 2)
    if retention < 1:
        raise ConfigError(f"LUACH_FIRE_LOG_RETENTION_DAYS={retention} must be at least 1")

    return Settings(
        location=location,
        utc_offset_hours=_float("LUACH_UTC_OFFSET", 2.0),
        fire_log_retention_days=retention,
        log_level=os.environ.get("LUACH_LOG_LEVEL", "INFO").upper(),
        events_file=os.environ.get("LUACH_EVENTS_FILE") or None,
        fire_log_file=os.environ.get("LUACH_FIRE_LOG_FILE") or None,
    )
