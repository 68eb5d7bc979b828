"""Tests for the cyclic study index."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from luach.learning import (
    BAVLI,
    CHOFETZ_CHAIM,
    CYCLES,
    MISHNA_BERURA,
    daily_learning,
    locate,
    locate_in_cycle,
)
from luach.models import StudySegment

SMALL = (StudySegment("A", 3), StudySegment("B", 2))
SMALL_EPOCH = date(2024, 1, 1)


def test_bavli_table_size() -> None:
    """Forty segments covering the 2711-day cycle."""
    assert len(BAVLI.segments) == 40
    assert BAVLI.total_length == 2711


def test_bavli_epoch_is_berakhot_2() -> None:
    position = locate_in_cycle(BAVLI.epoch, BAVLI)
    assert position.segment_name == "ברכות"
    assert position.position == 1
    assert position.unit == 2
    assert position.label == "ברכות דף ב'"
    assert position.display_link == "https://www.sefaria.org/Berakhot.2a?lang=he"


def test_bavli_last_day_of_berakhot() -> None:
    position = locate_in_cycle(BAVLI.epoch + timedelta(days=62), BAVLI)
    assert (position.segment_name, position.unit) == ("ברכות", 64)


def test_bavli_shabbat_starts() -> None:
    """Shabbat daf 2 fell on 8 March 2020."""
    position = locate_in_cycle(date(2020, 3, 8), BAVLI)
    assert (position.segment_name, position.unit) == ("שבת", 2)
    assert position.display_link == "https://www.sefaria.org/Shabbat.2a?lang=he"


def test_bavli_before_epoch_wraps_to_niddah() -> None:
    """The day before the cycle starts is the end of the previous one."""
    position = locate_in_cycle(BAVLI.epoch - timedelta(days=1), BAVLI)
    assert position.segment_name == "נידה"
    assert position.position == 72
    assert position.unit == 73


def test_bavli_wraps_after_full_cycle() -> None:
    assert locate_in_cycle(BAVLI.epoch + timedelta(days=2711), BAVLI) == locate_in_cycle(
        BAVLI.epoch, BAVLI
    )


def test_bavli_kinnim_continues_meilah_pages() -> None:
    """Kinnim begins at page 23, right after Meilah's last daf."""
    offset = sum(s.length for s in BAVLI.segments[:36])
    position = locate_in_cycle(BAVLI.epoch + timedelta(days=offset), BAVLI)
    assert (position.segment_name, position.unit) == ("קינים", 23)


def test_every_cycle_day_resolves() -> None:
    """Each day of a full cycle maps into a unit inside its segment."""
    for days in range(BAVLI.total_length):
        position = locate_in_cycle(BAVLI.epoch + timedelta(days=days), BAVLI)
        assert position.unit >= 2


@pytest.mark.parametrize(
    ("offset", "expected"),
    [
        (0, ("A", 1)),
        (2, ("A", 3)),
        (3, ("B", 1)),
        (4, ("B", 2)),
        (5, ("A", 1)),
        (-1, ("B", 2)),
        (-5, ("A", 1)),
        (-6, ("B", 2)),
    ],
)
def test_locate_boundaries(offset: int, expected: tuple[str, int]) -> None:
    """Positions step through the table and wrap in both directions."""
    segment, position = locate(SMALL_EPOCH + timedelta(days=offset), SMALL_EPOCH, SMALL, 5)
    assert (segment.name, position) == expected


def test_locate_rejects_empty_cycle() -> None:
    with pytest.raises(ValueError):
        locate(SMALL_EPOCH, SMALL_EPOCH, SMALL, 0)


def test_locate_rejects_short_table() -> None:
    with pytest.raises(ValueError):
        locate(SMALL_EPOCH + timedelta(days=5), SMALL_EPOCH, SMALL, 6)


def test_mishna_berura() -> None:
    start = locate_in_cycle(MISHNA_BERURA.epoch, MISHNA_BERURA)
    assert start.unit == 1
    assert start.display_link == "https://www.sefaria.org/Mishnah_Berurah.1?lang=he"
    before = locate_in_cycle(MISHNA_BERURA.epoch - timedelta(days=1), MISHNA_BERURA)
    assert before.unit == 697


def test_chofetz_chaim_wraps() -> None:
    position = locate_in_cycle(CHOFETZ_CHAIM.epoch + timedelta(days=200), CHOFETZ_CHAIM)
    assert position.position == 1
    assert position.display_link == "https://www.sefaria.org/Chofetz_Chaim?lang=he"


def test_daily_learning_keys() -> None:
    """One position per configured cycle."""
    learning = daily_learning(date(2025, 9, 23))
    assert list(learning) == [c.key for c in CYCLES]
    assert all(p.cycle == key for key, p in learning.items())
