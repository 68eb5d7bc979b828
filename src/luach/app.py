"""Luach — read-only Streamlit page: Hebrew date, zmanim and daily learning for a day."""

import datetime
import html

import streamlit as st
from streamlit_js_eval import get_geolocation, streamlit_js_eval

from luach.config import load_settings
from luach.hebcal import (
    MONTH_NAMES_EN,
    gregorian_month_year,
    hebrew_date_parts,
    hebrew_date_string,
    hebrew_month_year,
    is_rosh_chodesh,
    month_grid,
    shift_month,
)
from luach.i18n import t
from luach.learning import CYCLES, daily_learning
from luach.location import utc_offset_hours
from luach.logging import setup_logging
from luach.models import GeoCoordinate
from luach.numerals import to_hebrew_numeral
from luach.zmanim import compute_zmanim, is_after_sunset


def _detect_lang() -> str:
    # navigator.language is read once and cached in session_state.
    # The first run returns None; the rerun triggered by streamlit_js_eval fills it in.
    if "lang" not in st.session_state:
        browser_lang: str | None = streamlit_js_eval(
            js_expressions="navigator.language", key="_lang_detect", height=0
        )
        if browser_lang is not None:
            st.session_state.lang = "he" if browser_lang.lower()[:2] in ("he", "iw") else "en"
    return st.session_state.get("lang", "he")


def _detect_location(fallback: GeoCoordinate) -> tuple[GeoCoordinate, bool]:
    """Browser geolocation when granted, else the configured default. Second item: is_default."""
    if "coord" not in st.session_state:
        loc = get_geolocation()
        if loc and "coords" in loc:
            st.session_state.coord = GeoCoordinate(
                lat=float(loc["coords"]["latitude"]), lng=float(loc["coords"]["longitude"])
            )
    coord = st.session_state.get("coord")
    if coord is None:
        return fallback, True
    return coord, False


def _render_month(day: datetime.date, lang: str) -> None:
    cells = month_grid(day)
    st.markdown(f"#### {hebrew_month_year(day)}  ·  {gregorian_month_year(cells[0])}")
    # Sunday-first week rows; blank cells pad the first week
    padding = (cells[0].weekday() + 1) % 7
    slots: list[datetime.date | None] = [None] * padding + list(cells)
    for start in range(0, len(slots), 7):
        columns = st.columns(7)
        for column, cell in zip(columns, slots[start : start + 7]):
            if cell is None:
                continue
            parts = hebrew_date_parts(cell)
            marker = "**" if cell == day else ""
            column.markdown(f"{marker}{to_hebrew_numeral(parts.day)}{marker}  \n{cell.day}")


def main() -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    lang = _detect_lang()
    st.set_page_config(page_title=t("page_title", lang), page_icon="✡", layout="centered")

    if "day" not in st.session_state:
        st.session_state.day = datetime.date.today()

    coord, is_default = _detect_location(settings.location)

    # --- Date controls ---
    col_prev, col_date, col_next = st.columns([1, 2, 1])
    with col_prev:
        if st.button(t("btn_prev", lang), key="prev_month", use_container_width=True):
            st.session_state.day = shift_month(st.session_state.day, -1).first_day
    with col_next:
        if st.button(t("btn_next", lang), key="next_month", use_container_width=True):
            st.session_state.day = shift_month(st.session_state.day, 1).first_day
    with col_date:
        st.session_state.day = st.date_input(t("label_date", lang), value=st.session_state.day)

    day: datetime.date = st.session_state.day
    parts = hebrew_date_parts(day)
    # a browser location keeps its own zone
    offset = (
        settings.utc_offset_hours
        if is_default
        else utc_offset_hours(coord, day, fallback=settings.utc_offset_hours)
    )

    heading = hebrew_date_string(day)
    if lang == "en":
        month_en = MONTH_NAMES_EN.get(parts.month_name, parts.month_name)
        heading += f" · {parts.day} {month_en} {parts.year}"

    st.title(heading)
    if is_rosh_chodesh(day):
        st.caption(t("rosh_chodesh", lang))
    if day == datetime.date.today() and is_after_sunset(
        datetime.datetime.now(), coord.lat, coord.lng, offset
    ):
        st.caption(hebrew_date_string(day + datetime.timedelta(days=1)))

    location_label = (
        t("default_location", lang) if is_default else f"{coord.lat:.4f}, {coord.lng:.4f}"
    )
    st.caption(f"{t('label_location', lang)}: {location_label}")

    # --- Zmanim ---
    st.subheader(t("label_zmanim", lang))
    zmanim = compute_zmanim(day, coord.lat, coord.lng, offset)
    if zmanim.degenerate:
        st.warning(t("polar_notice", lang))
    st.table({t(name, lang): [value] for name, value in zmanim.as_dict().items()})

    # --- Learning ---
    st.subheader(t("label_learning", lang))
    learning = daily_learning(day)
    for config in CYCLES:
        position = learning[config.key]
        st.markdown(
            f"**{html.escape(config.title)}** ({html.escape(config.category)}): "
            f"[{html.escape(position.label)}]({position.display_link})"
        )

    st.divider()
    _render_month(day, lang)


if __name__ == "__main__":
    main()
