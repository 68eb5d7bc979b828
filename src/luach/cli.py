"""Command-line entry points.

    luach-today  [--date YYYY-MM-DD] [--lat .. --lng .. | --address ..]
    luach-remind [--events events.json] [--fire-log fired.json] [--once]
"""

import argparse
import json
import sys
from collections.abc import Callable
from datetime import date
from pathlib import Path

import structlog

from luach.config import Settings, load_settings
from luach.hebcal import gregorian_month_year, hebrew_date_string, is_rosh_chodesh
from luach.i18n import t
from luach.learning import daily_learning
from luach.location import GeocodingError, geocode, utc_offset_hours
from luach.logging import setup_logging
from luach.models import CalendarEvent, GeoCoordinate
from luach.reminders import FireLog, ReminderPoller, event_from_dict
from luach.zmanim import compute_zmanim

log = structlog.get_logger(__name__)


def format_today(
    day: date, coord: GeoCoordinate, utc_offset_hours: float, lang: str = "he"
) -> str:
    """Plain-text day summary: dates, zmanim table and learning."""
    zmanim = compute_zmanim(day, coord.lat, coord.lng, utc_offset_hours)
    heading = f"{day.isoformat()}  {hebrew_date_string(day)}  ({gregorian_month_year(day)})"
    if is_rosh_chodesh(day):
        heading += f"  {t('rosh_chodesh', lang)}"

    lines = [heading, "", t("label_zmanim", lang)]
    for name, value in zmanim.as_dict().items():
        lines.append(f"  {t(name, lang):<24} {value}")
    if zmanim.degenerate:
        lines.append(f"  {t('polar_notice', lang)}")

    lines += ["", t("label_learning", lang)]
    for position in daily_learning(day).values():
        lines.append(f"  {position.label}  {position.display_link}")
    return "\n".join(lines)


def _resolve(args: argparse.Namespace, settings: Settings) -> tuple[GeoCoordinate, float]:
    """Coordinate and UTC offset for the summary.

    An explicit --utc-offset wins. Otherwise a coordinate given on the
    command line takes the offset of its own time zone on the requested date.
    """
    if args.address:
        coord = geocode(args.address)
    elif args.lat is not None and args.lng is not None:
        coord = GeoCoordinate(lat=args.lat, lng=args.lng)
    else:
        coord = settings.location
    if args.utc_offset is not None:
        return coord, args.utc_offset
    if coord == settings.location:
        return coord, settings.utc_offset_hours
    return coord, utc_offset_hours(coord, args.date, fallback=settings.utc_offset_hours)


def today_main(argv: list[str] | None = None) -> int:
    settings = load_settings()
    setup_logging(settings.log_level)

    parser = argparse.ArgumentParser(
        prog="luach-today", description="Hebrew date, zmanim and daily learning."
    )
    parser.add_argument("--date", type=date.fromisoformat, default=date.today())
    parser.add_argument("--lat", type=float)
    parser.add_argument("--lng", type=float)
    parser.add_argument("--address")
    parser.add_argument("--utc-offset", type=float, help="hours; defaults to the location's zone")
    parser.add_argument("--lang", choices=("he", "en"), default="he")
    args = parser.parse_args(argv)

    try:
        coord, offset = _resolve(args, settings)
    except GeocodingError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(format_today(args.date, coord, offset, args.lang))
    return 0


def load_events(path: Path) -> list[CalendarEvent]:
    """Read the stored event list (a JSON array). A missing file means no events.

    Entries that cannot be read are logged and skipped. A file that is not
    valid JSON raises ValueError.
    """
    if not path.exists():
        return []
    with path.open(encoding="utf-8") as f:
        raw = json.load(f)
    events = []
    for item in raw:
        try:
            events.append(event_from_dict(item))
        except (KeyError, TypeError, ValueError):
            log.exception("event_invalid", path=str(path))
    return events


def _events_source(path: Path) -> Callable[[], list[CalendarEvent]]:
    def load() -> list[CalendarEvent]:
        try:
            return load_events(path)
        except ValueError:
            # half-written file; the next tick reads it again
            log.exception("events_unreadable", path=str(path))
            return []

    return load


def load_fire_log(path: Path | None) -> FireLog:
    if path is None or not path.exists():
        return FireLog()
    with path.open(encoding="utf-8") as f:
        return FireLog.from_dict(json.load(f))


def save_fire_log(path: Path, fire_log: FireLog) -> None:
    path.write_text(json.dumps(fire_log.to_dict(), indent=2), encoding="utf-8")


def _print_notification(event: CalendarEvent) -> None:
    title = event.title or "תזכורת אירוע"
    print(f"[{event.date.isoformat()} {event.event_time}] {title}", flush=True)


def remind_main(argv: list[str] | None = None) -> int:
    settings = load_settings()
    setup_logging(settings.log_level)

    parser = argparse.ArgumentParser(
        prog="luach-remind", description="Poll event reminders once a minute."
    )
    parser.add_argument("--events", default=settings.events_file)
    parser.add_argument("--fire-log", default=settings.fire_log_file)
    parser.add_argument("--once", action="store_true", help="evaluate a single tick and exit")
    args = parser.parse_args(argv)

    if not args.events:
        parser.error("--events (or LUACH_EVENTS_FILE) is required")
    events_path = Path(args.events)
    fire_log_path = Path(args.fire_log) if args.fire_log else None

    poller = ReminderPoller(
        events=_events_source(events_path),
        notify=_print_notification,
        fire_log=load_fire_log(fire_log_path),
        utc_offset_hours=settings.utc_offset_hours,
        retention_days=settings.fire_log_retention_days,
        on_fire_log_change=(
            (lambda fl: save_fire_log(fire_log_path, fl)) if fire_log_path else None
        ),
    )
    if args.once:
        poller.tick()
        return 0
    try:
        poller.run_forever()
    except KeyboardInterrupt:
        log.info("interrupted")
    return 0
