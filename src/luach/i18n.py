"""Simple two-language (he/en) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "he": "לוח עברי",
        "en": "Hebrew Calendar",
    },
    "label_date": {
        "he": "תאריך",
        "en": "Date",
    },
    "label_zmanim": {
        "he": "זמני היום",
        "en": "Daily Times",
    },
    "label_learning": {
        "he": "לימוד יומי",
        "en": "Daily Learning",
    },
    "label_location": {
        "he": "מיקום",
        "en": "Location",
    },
    "default_location": {
        "he": "ירושלים (ברירת מחדל)",
        "en": "Jerusalem (default)",
    },
    "polar_notice": {
        "he": "השמש אינה זורחת או שוקעת ביום זה במיקום זה.",
        "en": "The sun does not rise or set on this date at this location.",
    },
    "rosh_chodesh": {
        "he": "ראש חודש",
        "en": "Rosh Chodesh",
    },
    "btn_prev": {
        "he": "→ הקודם",
        "en": "← Previous",
    },
    "btn_next": {
        "he": "הבא ←",
        "en": "Next →",
    },
    "alot_hashachar": {
        "he": "עלות השחר",
        "en": "Dawn",
    },
    "misheyakir": {
        "he": "משיכיר",
        "en": "Earliest Tallit",
    },
    "sunrise": {
        "he": "הנץ החמה",
        "en": "Sunrise",
    },
    "shema_mga": {
        "he": 'סוף זמן ק"ש מג"א',
        "en": "Latest Shema (MGA)",
    },
    "shema_gra": {
        "he": 'סוף זמן ק"ש גר"א',
        "en": "Latest Shema (GRA)",
    },
    "tefillah_mga": {
        "he": 'סוף זמן תפילה מג"א',
        "en": "Latest Shacharit (MGA)",
    },
    "tefillah_gra": {
        "he": 'סוף זמן תפילה גר"א',
        "en": "Latest Shacharit (GRA)",
    },
    "chatzot": {
        "he": "חצות היום",
        "en": "Midday",
    },
    "mincha_gedola": {
        "he": "מנחה גדולה",
        "en": "Earliest Mincha",
    },
    "mincha_ketana": {
        "he": "מנחה קטנה",
        "en": "Mincha Ketana",
    },
    "plag_hamincha": {
        "he": "פלג המנחה",
        "en": "Plag HaMincha",
    },
    "sunset": {
        "he": "שקיעה",
        "en": "Sunset",
    },
    "tzeit_hakochavim": {
        "he": "צאת הכוכבים",
        "en": "Nightfall",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'he', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("he") or key
