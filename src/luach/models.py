"""Data model definitions — boundaries between calendar, solar, reminder and study layers."""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class HebrewDateParts:
    """A Hebrew calendar date. Derived on demand, never stored."""

    day: int  # 1-30
    month_name: str  # Canonical Hebrew month name ("תשרי", "אדר ב׳", ...)
    year: int  # Anno Mundi year (5786)


@dataclass(frozen=True)
class MonthBounds:
    """Gregorian span of one Hebrew month."""

    first_day: date  # Gregorian date of day 1
    length: int  # 29 or 30

    @property
    def last_day(self) -> date:
        return date.fromordinal(self.first_day.toordinal() + self.length - 1)


@dataclass(frozen=True)
class GeoCoordinate:
    """Observer position. Supplied per calculation, never cached."""

    lat: float  # Latitude (decimal degrees)
    lng: float  # Longitude (decimal degrees)


DEFAULT_LOCATION = GeoCoordinate(lat=31.7683, lng=35.2137)  # Jerusalem


@dataclass(frozen=True)
class ZmanimResult:
    """Daily reference times as "HH:MM" strings. "--:--" marks an unresolved point."""

    alot_hashachar: str  # Dawn
    misheyakir: str  # Earliest tallit
    sunrise: str
    shema_mga: str  # Latest shema (Magen Avraham)
    shema_gra: str  # Latest shema (Vilna Gaon)
    tefillah_mga: str  # Latest shacharit (Magen Avraham)
    tefillah_gra: str  # Latest shacharit (Vilna Gaon)
    chatzot: str  # Solar noon
    mincha_gedola: str
    mincha_ketana: str
    plag_hamincha: str
    sunset: str
    tzeit_hakochavim: str  # Nightfall
    degenerate: bool = False  # Polar day/night: sunrise-based points are sentinels

    def as_dict(self) -> dict[str, str]:
        """Named time points in display order, without the degenerate flag."""
        return {name: getattr(self, name) for name in ZMANIM_ORDER}


ZMANIM_ORDER: tuple[str, ...] = (
    "alot_hashachar",
    "misheyakir",
    "sunrise",
    "shema_mga",
    "shema_gra",
    "tefillah_mga",
    "tefillah_gra",
    "chatzot",
    "mincha_gedola",
    "mincha_ketana",
    "plag_hamincha",
    "sunset",
    "tzeit_hakochavim",
)


@dataclass(frozen=True)
class ReminderPolicy:
    """How and when an event's reminder fires.

    lead_minutes selects the semantics:
    0 = none, 0 < n < 1440 = relative to the event time,
    n >= 1440 = whole days before at trigger_time, -1 = custom_date at trigger_time.
    """

    lead_minutes: int = 0
    trigger_time: str = "09:00"  # "HH:MM", unused for relative leads
    custom_date: date | None = None


@dataclass(frozen=True)
class CalendarEvent:
    """The slice of a stored event the reminder engine needs."""

    id: str
    date: date  # Gregorian date of the event
    event_time: str = "19:30"  # "HH:MM"
    title: str = ""
    reminder: ReminderPolicy = field(default_factory=ReminderPolicy)


@dataclass(frozen=True)
class StudySegment:
    """One named segment of a study cycle (a tractate, a book)."""

    name: str  # Display name ("ברכות")
    length: int  # Units (days) this segment occupies in the cycle
    link_key: str = ""  # Substituted into the cycle's link template ("Berakhot")
    first_unit: int = 1  # Number of the segment's first unit (a tractate starts at daf 2)


@dataclass(frozen=True)
class CycleConfig:
    """A fixed rotating study table."""

    key: str  # "bavli"
    title: str  # "דף היומי בבלי"
    category: str  # "גמרא"
    epoch: date  # First day of the cycle
    segments: tuple[StudySegment, ...]
    link_template: str  # Format string with {key} and {unit}
    unit_label: str  # "דף", "סימן", "יום"

    @property
    def total_length(self) -> int:
        return sum(s.length for s in self.segments)


@dataclass(frozen=True)
class CyclePosition:
    """Where a given date falls inside a study cycle."""

    cycle: str  # CycleConfig.key
    segment_name: str
    position: int  # 1-based offset within the segment
    unit: int  # Displayed unit number (position shifted by the segment's first_unit)
    label: str  # "ברכות דף ב'"
    display_link: str
