"""Solar computation layer — simplified sunrise/sunset model and the halachic times built on it.

The model is a sinusoidal approximation (declination plus a two-harmonic
equation of time), accurate to a few minutes at mid latitudes. It is not an
ephemeris. All times are decimal hours on a fixed UTC offset.
"""

import math
import warnings
from dataclasses import dataclass
from datetime import date, datetime

import structlog

from luach.config import fixed_zone
from luach.hebcal import normalize
from luach.models import DEFAULT_LOCATION, GeoCoordinate, ZmanimResult

log = structlog.get_logger(__name__)

SENTINEL = "--:--"
DEFAULT_UTC_OFFSET = 2.0


class DomainClampWarning(UserWarning):
    """The sun never crosses the horizon on this date at this latitude."""


@dataclass(frozen=True)
class SolarDay:
    """Decimal-hour solar events for one date. Sunrise/sunset are None in polar conditions."""

    solar_noon: float
    sunrise: float | None
    sunset: float | None

    @property
    def shaah_zmanit(self) -> float | None:
        """One twelfth of the sunrise-to-sunset span."""
        if self.sunrise is None or self.sunset is None:
            return None
        return (self.sunset - self.sunrise) / 12


def resolve_coordinate(lat: float | None, lng: float | None) -> GeoCoordinate:
    """Coordinate to compute with; the Jerusalem default when either value is missing."""
    if lat is None or lng is None or not (math.isfinite(lat) and math.isfinite(lng)):
        log.debug("location_unavailable", lat=lat, lng=lng)
        return DEFAULT_LOCATION
    return GeoCoordinate(lat=lat, lng=lng)


def day_of_year(value: date) -> int:
    return value.timetuple().tm_yday


def solar_declination(doy: int) -> float:
    """Declination of the sun in degrees."""
    return 23.45 * math.sin(math.radians(360 / 365 * (doy - 81)))


def equation_of_time(doy: int) -> float:
    """Apparent minus mean solar time, in minutes."""
    b = math.radians(360 / 364 * (doy - 81))
    return 9.87 * math.sin(2 * b) - 7.53 * math.cos(b) - 1.5 * math.sin(b)


def solar_day(
    value: date | datetime,
    coord: GeoCoordinate,
    utc_offset_hours: float = DEFAULT_UTC_OFFSET,
) -> SolarDay:
    """Solar noon, sunrise and sunset for the date of value.

    Emits DomainClampWarning and leaves sunrise/sunset unset when
    -tan(lat)·tan(dec) leaves [-1, 1].
    """
    doy = day_of_year(normalize(value, utc_offset_hours))
    declination = solar_declination(doy)

    # 4 minutes of clock time per degree away from the zone's base meridian
    longitude_minutes = 4 * (coord.lng - 15 * utc_offset_hours)
    solar_noon = 12 - longitude_minutes / 60 - equation_of_time(doy) / 60

    cos_h = -math.tan(math.radians(coord.lat)) * math.tan(math.radians(declination))
    if not -1 <= cos_h <= 1:
        warnings.warn(
            f"no sunrise/sunset at lat={coord.lat} on day {doy} (cos H = {cos_h:.3f})",
            DomainClampWarning,
            stacklevel=2,
        )
        log.warning("zmanim_domain_clamped", lat=coord.lat, day_of_year=doy, cos_h=round(cos_h, 3))
        return SolarDay(solar_noon=solar_noon, sunrise=None, sunset=None)

    hour_angle = math.degrees(math.acos(cos_h))
    half_day = hour_angle / 15
    return SolarDay(
        solar_noon=solar_noon,
        sunrise=solar_noon - half_day,
        sunset=solar_noon + half_day,
    )


def format_time(hours: float | None) -> str:
    """Decimal hours to zero-padded "HH:MM", wrapping past midnight. None gives the sentinel."""
    if hours is None or not math.isfinite(hours):
        return SENTINEL
    total = math.floor(hours * 60 + 0.5) % (24 * 60)
    return f"{total // 60:02d}:{total % 60:02d}"


def compute_zmanim(
    value: date | datetime,
    lat: float | None = None,
    lng: float | None = None,
    utc_offset_hours: float = DEFAULT_UTC_OFFSET,
) -> ZmanimResult:
    """Compute the daily halachic time table for a date and place.

    Args:
        value: Date (or instant) to compute for.
        lat: Latitude in degrees. Missing → Jerusalem.
        lng: Longitude in degrees. Missing → Jerusalem.
        utc_offset_hours: Fixed offset the times are expressed in.

    Returns:
        ZmanimResult of "HH:MM" strings. In polar conditions every point
        derived from sunrise or sunset is "--:--" and degenerate is True.
    """
    coord = resolve_coordinate(lat, lng)
    sun = solar_day(value, coord, utc_offset_hours)
    noon = sun.solar_noon
    sunrise, sunset, hour = sun.sunrise, sun.sunset, sun.shaah_zmanit

    def from_sunrise(offset_hours: float = 0.0, halachic_hours: float = 0.0) -> float | None:
        if sunrise is None or hour is None:
            return None
        return sunrise + offset_hours + halachic_hours * hour

    def from_noon(halachic_hours: float) -> float | None:
        if hour is None:
            return None
        return noon + halachic_hours * hour

    return ZmanimResult(
        alot_hashachar=format_time(from_sunrise(offset_hours=-1.2)),  # 72 minutes
        misheyakir=format_time(from_sunrise(offset_hours=-0.75)),  # 45 minutes
        sunrise=format_time(sunrise),
        shema_mga=format_time(from_sunrise(halachic_hours=2.25)),
        shema_gra=format_time(from_sunrise(halachic_hours=3)),
        tefillah_mga=format_time(from_sunrise(halachic_hours=3.25)),
        tefillah_gra=format_time(from_sunrise(halachic_hours=4)),
        chatzot=format_time(noon),
        mincha_gedola=format_time(from_noon(0.5)),
        mincha_ketana=format_time(from_noon(3.5)),
        plag_hamincha=format_time(from_sunrise(halachic_hours=10.75)),
        sunset=format_time(sunset),
        tzeit_hakochavim=format_time(None if sunset is None else sunset + 0.33),  # ~20 minutes
        degenerate=sunrise is None,
    )


def is_after_sunset(
    instant: datetime,
    lat: float | None = None,
    lng: float | None = None,
    utc_offset_hours: float = DEFAULT_UTC_OFFSET,
) -> bool:
    """Whether instant falls after the day's sunset, i.e. in the next Hebrew day.

    Naive instants are read as wall-clock time on the fixed offset.
    False when the sun does not set.
    """
    if instant.tzinfo is not None:
        instant = instant.astimezone(fixed_zone(utc_offset_hours))
    sun = solar_day(instant, resolve_coordinate(lat, lng), utc_offset_hours)
    if sun.sunset is None:
        return False
    return instant.hour + instant.minute / 60 + instant.second / 3600 > sun.sunset
