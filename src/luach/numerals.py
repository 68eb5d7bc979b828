"""Hebrew letter numerals (gematria) for day, page, and year display."""

_UNITS = ("", "א", "ב", "ג", "ד", "ה", "ו", "ז", "ח", "ט")
_TENS = ("", "י", "כ", "ל", "מ", "נ", "ס", "ע", "פ", "צ")
_HUNDREDS = ("", "ק", "ר", "ש", "ת", "תק", "תר", "תש", "תת", "תתק")

# 15 and 16 would otherwise spell a form of the divine name
_TENS_UNITS_SUBSTITUTES = {15: "טו", 16: "טז"}

GERESH = "'"
GERSHAYIM = '"'


def to_hebrew_numeral(num: int) -> str:
    """Convert a positive integer to Hebrew letter notation.

    Thousands are dropped (5786 renders as תשפ"ו), matching how Hebrew years
    are conventionally written.

    Args:
        num: Number to render. Values <= 0 are returned as plain decimal.

    Returns:
        Letters with a geresh after a single letter ("ה'") or gershayim
        before the last letter ('תשפ"ו').
    """
    if num <= 0:
        return str(num)
    rest = num % 1000
    if rest == 0:
        return str(num)

    letters = _HUNDREDS[rest // 100]
    tens_units = rest % 100
    if tens_units in _TENS_UNITS_SUBSTITUTES:
        letters += _TENS_UNITS_SUBSTITUTES[tens_units]
    else:
        letters += _TENS[tens_units // 10] + _UNITS[tens_units % 10]

    if len(letters) == 1:
        return letters + GERESH
    return letters[:-1] + GERSHAYIM + letters[-1]
