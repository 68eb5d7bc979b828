"""Daily study cycles — rotating segment tables indexed by days since an epoch."""

from datetime import date, datetime

from luach.hebcal import normalize
from luach.models import CycleConfig, CyclePosition, StudySegment
from luach.numerals import to_hebrew_numeral


def _tractate(name: str, link_key: str, last_daf: int) -> StudySegment:
    # Gemara pagination starts at daf 2
    return StudySegment(name=name, length=last_daf - 1, link_key=link_key, first_unit=2)


BAVLI = CycleConfig(
    key="bavli",
    title="דף היומי בבלי",
    category="גמרא",
    epoch=date(2020, 1, 5),  # Start of the 14th cycle
    segments=(
        _tractate("ברכות", "Berakhot", 64),
        _tractate("שבת", "Shabbat", 157),
        _tractate("עירובין", "Eruvin", 105),
        _tractate("פסחים", "Pesachim", 121),
        _tractate("שקלים", "Shekalim", 22),
        _tractate("יומא", "Yoma", 88),
        _tractate("סוכה", "Sukkah", 56),
        _tractate("ביצה", "Beitzah", 40),
        _tractate("ראש השנה", "Rosh_Hashanah", 35),
        _tractate("תענית", "Taanit", 31),
        _tractate("מגילה", "Megillah", 32),
        _tractate("מועד קטן", "Moed_Katan", 29),
        _tractate("חגיגה", "Chagigah", 27),
        _tractate("יבמות", "Yevamot", 122),
        _tractate("כתובות", "Ketubot", 112),
        _tractate("נדרים", "Nedarim", 91),
        _tractate("נזיר", "Nazir", 66),
        _tractate("סוטה", "Sotah", 49),
        _tractate("גיטין", "Gittin", 90),
        _tractate("קידושין", "Kiddushin", 82),
        _tractate("בבא קמא", "Bava_Kamma", 119),
        _tractate("בבא מציעא", "Bava_Metzia", 119),
        _tractate("בבא בתרא", "Bava_Batra", 176),
        _tractate("סנהדרין", "Sanhedrin", 113),
        _tractate("מכות", "Makkot", 24),
        _tractate("שבועות", "Shevuot", 49),
        _tractate("עבודה זרה", "Avodah_Zarah", 76),
        _tractate("הוריות", "Horayot", 14),
        _tractate("זבחים", "Zevachim", 120),
        _tractate("מנחות", "Menachot", 110),
        _tractate("חולין", "Chullin", 142),
        _tractate("בכורות", "Bekhorot", 61),
        _tractate("ערכין", "Arakhin", 34),
        _tractate("תמורה", "Temurah", 34),
        _tractate("כריתות", "Keritot", 28),
        _tractate("מעילה", "Meilah", 22),
        # Kinnim, Tamid and Middot continue Meilah's page numbering
        StudySegment(name="קינים", length=3, link_key="Kinnim", first_unit=23),
        StudySegment(name="תמיד", length=8, link_key="Tamid", first_unit=26),
        StudySegment(name="מידות", length=4, link_key="Middot", first_unit=34),
        _tractate("נידה", "Niddah", 73),
    ),
    link_template="https://www.sefaria.org/{key}.{unit}a?lang=he",
    unit_label="דף",
)

MISHNA_BERURA = CycleConfig(
    key="halacha",
    title="משנה ברורה",
    category="הלכה",
    epoch=date(2022, 10, 13),
    segments=(StudySegment(name="משנה ברורה", length=697, link_key="Mishnah_Berurah"),),
    link_template="https://www.sefaria.org/{key}.{unit}?lang=he",
    unit_label="סימן",
)

CHOFETZ_CHAIM = CycleConfig(
    key="chofetz_chaim",
    title="חפץ חיים",
    category="מוסר",
    epoch=date(2024, 1, 1),
    segments=(StudySegment(name="חפץ חיים", length=200, link_key="Chofetz_Chaim"),),
    link_template="https://www.sefaria.org/{key}?lang=he",
    unit_label="יום",
)

CYCLES: tuple[CycleConfig, ...] = (BAVLI, MISHNA_BERURA, CHOFETZ_CHAIM)


def locate(
    day: date,
    epoch: date,
    segments: tuple[StudySegment, ...] | list[StudySegment],
    total_length: int,
) -> tuple[StudySegment, int]:
    """Map a date to (segment, 1-based position) in a cycle repeating every total_length days.

    Dates before the epoch wrap backwards, so epoch - 1 day is the last unit
    of the last segment.

    Raises:
        ValueError: If total_length is not positive or the table is shorter than it.
    """
    if total_length <= 0:
        raise ValueError(f"total_length must be positive, got {total_length}")
    days = (day - epoch).days
    remaining = days % total_length  # floor modulo, never negative
    for segment in segments:
        if remaining < segment.length:
            return segment, remaining + 1
        remaining -= segment.length
    raise ValueError(
        f"segment table covers {sum(s.length for s in segments)} units, less than {total_length}"
    )


def locate_in_cycle(value: date | datetime, config: CycleConfig) -> CyclePosition:
    """Today's segment, position, label and link for one study cycle."""
    segment, position = locate(normalize(value), config.epoch, config.segments, config.total_length)
    unit = segment.first_unit + position - 1
    return CyclePosition(
        cycle=config.key,
        segment_name=segment.name,
        position=position,
        unit=unit,
        label=f"{segment.name} {config.unit_label} {to_hebrew_numeral(unit)}",
        display_link=config.link_template.format(key=segment.link_key, unit=unit),
    )


def daily_learning(value: date | datetime) -> dict[str, CyclePosition]:
    """Positions in every configured cycle, keyed by cycle key."""
    return {config.key: locate_in_cycle(value, config) for config in CYCLES}
