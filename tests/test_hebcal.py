"""Tests for the Hebrew calendar oracle and the month-boundary search."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from pyluach.hebrewcal import HebrewDate as PyluachDate

from luach.hebcal import (
    MAX_SEARCH_DAYS,
    OracleBoundError,
    days_in_year,
    from_hebrew,
    gregorian_month_year,
    hebrew_date_parts,
    hebrew_date_string,
    hebrew_month_bounds,
    hebrew_month_year,
    hebrew_year,
    is_leap_year,
    is_rosh_chodesh,
    month_grid,
    month_name,
    month_navigation,
    normalize,
    shift_month,
)
from luach.models import HebrewDateParts, MonthBounds


@pytest.mark.parametrize(
    ("gregorian", "expected"),
    [
        (date(2025, 9, 23), HebrewDateParts(1, "תשרי", 5786)),  # Rosh Hashana
        (date(2025, 10, 2), HebrewDateParts(10, "תשרי", 5786)),  # Yom Kippur
        (date(2023, 12, 8), HebrewDateParts(25, "כסלו", 5784)),  # Chanukah
        (date(2024, 2, 10), HebrewDateParts(1, "אדר א׳", 5784)),
        (date(2024, 3, 24), HebrewDateParts(14, "אדר ב׳", 5784)),  # Purim, leap year
        (date(2024, 4, 23), HebrewDateParts(15, "ניסן", 5784)),  # Pesach
        (date(2026, 3, 3), HebrewDateParts(14, "אדר", 5786)),  # Purim, common year
        (date(2000, 1, 1), HebrewDateParts(23, "טבת", 5760)),
    ],
)
def test_known_conversions(gregorian: date, expected: HebrewDateParts) -> None:
    """Converts well-known dates."""
    assert hebrew_date_parts(gregorian) == expected


def test_leap_years_follow_metonic_cycle() -> None:
    """Seven leap years in every 19-year cycle, at the fixed positions."""
    leap = [y for y in range(5777, 5796) if is_leap_year(y)]
    assert leap == [5779, 5782, 5784, 5787, 5790, 5793, 5795]


@pytest.mark.parametrize("year", range(5760, 5800))
def test_year_lengths_are_valid(year: int) -> None:
    """Common years last 353-355 days, leap years 383-385."""
    valid = {383, 384, 385} if is_leap_year(year) else {353, 354, 355}
    assert days_in_year(year) in valid


def test_from_hebrew_inverts_conversion() -> None:
    """from_hebrew lands on the date that converts back to the same parts."""
    assert from_hebrew(5786, 7, 1) == date(2025, 9, 23)
    assert from_hebrew(5784, 13, 14) == date(2024, 3, 24)


def test_month_bounds_kislev_full() -> None:
    """Kislev 5786 starts on 2025-11-21 and has 30 days."""
    bounds = hebrew_month_bounds(date(2025, 12, 15))
    assert bounds == MonthBounds(first_day=date(2025, 11, 21), length=30)
    assert bounds.last_day == date(2025, 12, 20)


def test_month_bounds_deficient_year() -> None:
    """5784 is deficient: Cheshvan and Kislev both have 29 days."""
    assert hebrew_month_bounds(date(2023, 11, 1)).length == 29
    assert hebrew_month_bounds(date(2023, 12, 1)).length == 29


def test_month_bounds_adar_in_leap_year() -> None:
    """Adar I has 30 days and Adar II 29 in a leap year."""
    adar_i = hebrew_month_bounds(date(2024, 2, 20))
    adar_ii = hebrew_month_bounds(date(2024, 3, 20))
    assert adar_i == MonthBounds(first_day=date(2024, 2, 10), length=30)
    assert adar_ii == MonthBounds(first_day=date(2024, 3, 11), length=29)


def test_bounds_properties_hold_across_years() -> None:
    """First day is day 1, the last day keeps the name, the day after changes it."""
    day = date(2023, 1, 1)
    while day < date(2027, 1, 1):
        bounds = hebrew_month_bounds(day)
        first = hebrew_date_parts(bounds.first_day)
        assert first.day == 1
        assert bounds.length in (29, 30)
        assert month_name(bounds.last_day) == first.month_name
        assert month_name(bounds.last_day + timedelta(days=1)) != first.month_name
        assert hebrew_date_parts(day).day == (day - bounds.first_day).days + 1
        day += timedelta(days=5)


def test_normalize_instants() -> None:
    """Datetimes reduce to their calendar date, aware ones on the fixed offset."""
    assert normalize(date(2024, 1, 1)) == date(2024, 1, 1)
    assert normalize(datetime(2024, 1, 1, 23, 59)) == date(2024, 1, 1)
    late_utc = datetime(2024, 1, 1, 23, 0, tzinfo=timezone.utc)
    assert normalize(late_utc, utc_offset_hours=2) == date(2024, 1, 2)
    assert normalize(late_utc) == date(2024, 1, 1)


def test_datetime_and_date_agree() -> None:
    """Any time of day gives the same Hebrew date as the bare date."""
    assert hebrew_date_parts(datetime(2025, 9, 23, 23, 30)) == hebrew_date_parts(date(2025, 9, 23))


def test_navigation_next_then_previous_returns() -> None:
    """Next then previous lands back in the starting month."""
    start = date(2025, 12, 15)
    bounds = hebrew_month_bounds(start)
    forward = hebrew_month_bounds(month_navigation(bounds.first_day, bounds.length, 1))
    back = month_navigation(forward.first_day, forward.length, -1)
    assert hebrew_month_bounds(back) == bounds


def test_navigation_twice_forward_once_back() -> None:
    """Next, next, previous lands in the month after the start."""
    start = date(2024, 2, 20)  # Adar I 5784
    current = hebrew_month_bounds(start)
    for direction in (1, 1, -1):
        probe = month_navigation(current.first_day, current.length, direction)
        current = hebrew_month_bounds(probe)
    assert current == shift_month(start, 1)
    assert month_name(current.first_day) == "אדר ב׳"


def test_navigation_rejects_zero_direction() -> None:
    """Direction 0 is meaningless."""
    with pytest.raises(ValueError):
        month_navigation(date(2024, 1, 1), 30, 0)


def test_shift_month_crosses_year() -> None:
    """Previous month of Tishrei is Elul of the prior year."""
    elul = shift_month(date(2025, 9, 30), -1)
    assert month_name(elul.first_day) == "אלול"
    assert hebrew_year(elul.first_day) == 5785
    assert elul.length == 29


def test_month_grid_lists_every_day() -> None:
    """The grid holds consecutive dates for the whole month."""
    grid = month_grid(date(2025, 12, 1))
    assert grid[0] == date(2025, 11, 21)
    assert len(grid) == 30
    assert all((b - a).days == 1 for a, b in zip(grid, grid[1:]))


def test_constant_oracle_exceeds_bound() -> None:
    """An oracle that never changes name raises instead of looping."""
    with pytest.raises(OracleBoundError):
        hebrew_date_parts(date(2024, 1, 1), oracle=lambda d: "X")


def test_forward_walk_exceeds_bound() -> None:
    """A month that never ends is reported by the bounds search."""
    pivot = date(2024, 1, 1)

    def oracle(d: date) -> str:
        return "before" if d < pivot else "after"

    assert hebrew_date_parts(pivot + timedelta(days=3), oracle=oracle).day == 4
    with pytest.raises(OracleBoundError):
        hebrew_month_bounds(pivot, oracle=oracle)


def test_injected_oracle_keeps_calendar_year() -> None:
    """An injected oracle names the month; the year still comes from the calendar."""
    pivot = date(2024, 1, 1)

    def oracle(d: date) -> str:
        return "before" if d < pivot else "after"

    parts = hebrew_date_parts(pivot + timedelta(days=3), oracle=oracle)
    assert parts == HebrewDateParts(day=4, month_name="after", year=5784)


def test_boundary_walk_matches_library_day_numbers() -> None:
    """Day numbers found by walking agree with pyluach's own, across leap and common years."""
    day = date(2022, 9, 1)
    while day < date(2025, 10, 1):
        expected = PyluachDate.from_pydate(day)
        parts = hebrew_date_parts(day)
        assert (parts.day, parts.year) == (expected.day, expected.year), day
        day += timedelta(days=7)


def test_bound_failure_does_not_leak() -> None:
    """A failed calculation leaves later conversions intact."""
    with pytest.raises(OracleBoundError):
        hebrew_month_bounds(date(2024, 1, 1), oracle=lambda d: "X")
    assert hebrew_date_parts(date(2025, 9, 23)).day == 1


def test_bound_allows_longest_month() -> None:
    """The search bound leaves room for a 30-day month."""
    assert MAX_SEARCH_DAYS > 30
    assert hebrew_date_parts(date(2025, 12, 20)).day == 30


@pytest.mark.parametrize(
    ("gregorian", "expected"),
    [
        (date(2025, 9, 23), False),  # 1 Tishrei is Rosh Hashana
        (date(2025, 10, 22), True),  # 30 Tishrei
        (date(2025, 10, 23), True),  # 1 Cheshvan
        (date(2025, 10, 24), False),
        (date(2024, 3, 10), True),  # 30 Adar I
    ],
)
def test_rosh_chodesh(gregorian: date, expected: bool) -> None:
    """Rosh Chodesh is day 30 or day 1 outside Tishrei."""
    assert is_rosh_chodesh(gregorian) is expected


def test_display_strings() -> None:
    """Formatted headings use letter numerals."""
    assert hebrew_date_string(date(2025, 9, 23)) == "א' בתשרי תשפ\"ו"
    assert hebrew_month_year(date(2026, 3, 3)) == 'אדר תשפ"ו'
    assert gregorian_month_year(date(2026, 2, 14)) == "פברואר 2026"
