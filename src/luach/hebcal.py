"""Hebrew calendar layer — month-name oracle and month-boundary search.

The oracle answers a single question: which Hebrew month (by name) contains
a given Gregorian date. It is backed by pyluach. Day numbers, month lengths
and month navigation are then derived by walking day by day across
month-name changes, so all of the calendar's irregularity (29/30-day months,
variable Cheshvan and Kislev, the leap-year Adar) stays inside `month_name`.
"""

from collections.abc import Callable
from datetime import date, datetime, timedelta
from functools import lru_cache

import structlog
from pyluach.hebrewcal import HebrewDate, Year

from luach.config import fixed_zone
from luach.models import HebrewDateParts, MonthBounds
from luach.numerals import to_hebrew_numeral

log = structlog.get_logger(__name__)

MonthNameOracle = Callable[[date], str]

# Upper bound on any day-by-day walk; no Hebrew month exceeds 30 days
MAX_SEARCH_DAYS = 40

# pyluach month numbers run from Nisan (1) to Adar II (13)
TISHREI, ADAR = 7, 12

_MONTH_NAMES: dict[int, str] = {
    1: "ניסן",
    2: "אייר",
    3: "סיוון",
    4: "תמוז",
    5: "אב",
    6: "אלול",
    7: "תשרי",
    8: "חשוון",
    9: "כסלו",
    10: "טבת",
    11: "שבט",
    12: "אדר",
    13: "אדר ב׳",
}
ADAR_I_NAME = "אדר א׳"

MONTH_NAMES_EN: dict[str, str] = {
    "ניסן": "Nisan",
    "אייר": "Iyar",
    "סיוון": "Sivan",
    "תמוז": "Tamuz",
    "אב": "Av",
    "אלול": "Elul",
    "תשרי": "Tishrei",
    "חשוון": "Cheshvan",
    "כסלו": "Kislev",
    "טבת": "Tevet",
    "שבט": "Shevat",
    "אדר": "Adar",
    ADAR_I_NAME: "Adar I",
    "אדר ב׳": "Adar II",
}

GREGORIAN_MONTHS_HE = (
    "ינואר",
    "פברואר",
    "מרץ",
    "אפריל",
    "מאי",
    "יוני",
    "יולי",
    "אוגוסט",
    "ספטמבר",
    "אוקטובר",
    "נובמבר",
    "דצמבר",
)


class OracleBoundError(RuntimeError):
    """A month-boundary walk exceeded MAX_SEARCH_DAYS. The month-name oracle is broken."""


# --- Oracle ---


def is_leap_year(year: int) -> bool:
    """Years 3, 6, 8, 11, 14, 17 and 19 of each 19-year cycle carry Adar II."""
    return Year(year).leap


def from_hebrew(year: int, month: int, day: int) -> date:
    """Gregorian date of a Hebrew (year, month number, day)."""
    return HebrewDate(year, month, day).to_pydate()


def days_in_year(year: int) -> int:
    return (from_hebrew(year + 1, TISHREI, 1) - from_hebrew(year, TISHREI, 1)).days


@lru_cache(maxsize=1024)
def _to_hebrew(day: date) -> HebrewDate:
    return HebrewDate.from_pydate(day)


def _name_of(month: int, year: int) -> str:
    if month == ADAR and is_leap_year(year):
        return ADAR_I_NAME
    return _MONTH_NAMES[month]


def month_name(value: date | datetime) -> str:
    """Month-name oracle: canonical Hebrew name of the month containing value."""
    hd = _to_hebrew(normalize(value))
    return _name_of(hd.month, hd.year)


def hebrew_year(value: date | datetime) -> int:
    return _to_hebrew(normalize(value)).year


# --- Boundary search ---


def normalize(value: date | datetime, utc_offset_hours: float | None = None) -> date:
    """Reduce an instant to its calendar date.

    Aware datetimes are first moved to the fixed offset when one is given.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None and utc_offset_hours is not None:
            value = value.astimezone(fixed_zone(utc_offset_hours))
        return value.date()
    return value


def _first_day(day: date, target: str, oracle: MonthNameOracle) -> date:
    probe = day
    for _ in range(MAX_SEARCH_DAYS):
        previous = probe - timedelta(days=1)
        if oracle(previous) != target:
            return probe
        probe = previous
    log.error("oracle_bound_exceeded", date=day.isoformat(), month=target, direction="back")
    raise OracleBoundError(
        f"no start of {target!r} within {MAX_SEARCH_DAYS} days before {day.isoformat()}"
    )


def hebrew_date_parts(
    value: date | datetime, oracle: MonthNameOracle = month_name
) -> HebrewDateParts:
    """Convert a Gregorian date to its Hebrew day, month name and year.

    The day number is the 1-based distance from the first date whose
    predecessor carries a different month name. An injected oracle only
    supplies month names; the year always comes from `hebrew_year`.

    Raises:
        OracleBoundError: If no month start is found within MAX_SEARCH_DAYS.
    """
    day = normalize(value)
    target = oracle(day)
    first = _first_day(day, target, oracle)
    return HebrewDateParts(
        day=(day - first).days + 1, month_name=target, year=hebrew_year(day)
    )


def hebrew_month_bounds(
    value: date | datetime, oracle: MonthNameOracle = month_name
) -> MonthBounds:
    """First Gregorian date and length of the Hebrew month containing value.

    Raises:
        OracleBoundError: If either walk exceeds MAX_SEARCH_DAYS.
    """
    day = normalize(value)
    target = oracle(day)
    first = _first_day(day, target, oracle)

    length = 0
    probe = first
    while oracle(probe) == target:
        length += 1
        if length > MAX_SEARCH_DAYS:
            log.error(
                "oracle_bound_exceeded", date=day.isoformat(), month=target, direction="forward"
            )
            raise OracleBoundError(
                f"{target!r} still running {MAX_SEARCH_DAYS} days after {first.isoformat()}"
            )
        probe += timedelta(days=1)
    return MonthBounds(first_day=first, length=length)


def month_navigation(first_day: date, length: int, direction: int) -> date:
    """A probe date safely inside the next (direction > 0) or previous month.

    Jumps ten days past the end, or fifteen days before the start, so the
    result never depends on the neighbouring month's length.
    """
    if direction > 0:
        return first_day + timedelta(days=length + 10)
    if direction < 0:
        return first_day - timedelta(days=15)
    raise ValueError("direction must be positive or negative, not 0")


def shift_month(value: date | datetime, direction: int) -> MonthBounds:
    """Bounds of the Hebrew month before or after the one containing value."""
    current = hebrew_month_bounds(value)
    return hebrew_month_bounds(month_navigation(current.first_day, current.length, direction))


def month_grid(value: date | datetime) -> list[date]:
    """Every Gregorian date of the Hebrew month containing value, in order."""
    bounds = hebrew_month_bounds(value)
    return [bounds.first_day + timedelta(days=i) for i in range(bounds.length)]


# --- Display helpers ---


def is_rosh_chodesh(value: date | datetime) -> bool:
    """Day 30, or day 1 of any month other than Tishrei (Rosh Hashana)."""
    parts = hebrew_date_parts(value)
    return parts.day == 30 or (parts.day == 1 and parts.month_name != _MONTH_NAMES[TISHREI])


def hebrew_date_string(value: date | datetime) -> str:
    """Full Hebrew date in letters, e.g. 'א' בתשרי תשפ"ו'."""
    parts = hebrew_date_parts(value)
    return f"{to_hebrew_numeral(parts.day)} ב{parts.month_name} {to_hebrew_numeral(parts.year)}"


def hebrew_month_year(value: date | datetime) -> str:
    """Month heading, e.g. 'אדר תשפ"ו'."""
    day = normalize(value)
    return f"{month_name(day)} {to_hebrew_numeral(hebrew_year(day))}"


def gregorian_month_year(value: date | datetime) -> str:
    """Gregorian month heading in Hebrew, e.g. 'פברואר 2026'."""
    day = normalize(value)
    return f"{GREGORIAN_MONTHS_HE[day.month - 1]} {day.year}"
