"""Reminder layer — decides on each one-minute tick whether an event's reminder fires.

A reminder fires only when the wall clock reads exactly its target minute on
its target day, at most once per (reminder, day). A tick that misses the
minute (host asleep, process not running) skips that day's reminder.
"""

import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any

import schedule
import structlog

from luach.config import fixed_zone
from luach.models import CalendarEvent, ReminderPolicy

log = structlog.get_logger(__name__)

MINUTES_PER_DAY = 24 * 60
NO_REMINDER = 0
CUSTOM_DATE = -1

REMINDER_OPTIONS: tuple[tuple[int, str], ...] = (
    (NO_REMINDER, "ללא תזכורת"),
    (15, "15 דקות לפני"),
    (60, "שעה לפני"),
    (120, "שעתיים לפני"),
    (MINUTES_PER_DAY, "יום לפני"),
    (7 * MINUTES_PER_DAY, "שבוע לפני"),
    (CUSTOM_DATE, "תאריך מותאם אישית..."),
)

Notifier = Callable[[CalendarEvent], None]


class ReminderKind(Enum):
    NONE = "none"
    RELATIVE = "relative"  # Minutes before the event's own clock time
    DAYS_BEFORE = "days_before"  # Whole days before, at the policy's trigger time
    CUSTOM_DATE = "custom_date"  # An explicit date, at the policy's trigger time


def reminder_kind(policy: ReminderPolicy) -> ReminderKind:
    lead = policy.lead_minutes
    if lead == CUSTOM_DATE:
        return ReminderKind.CUSTOM_DATE
    if lead >= MINUTES_PER_DAY:
        return ReminderKind.DAYS_BEFORE
    if lead > 0:
        return ReminderKind.RELATIVE
    return ReminderKind.NONE


def parse_clock(text: str) -> datetime:
    """Parse "HH:MM" (hour may be one digit). Raises ValueError when malformed."""
    return datetime.strptime(text.strip(), "%H:%M")


@dataclass(frozen=True)
class ReminderTarget:
    day: date
    clock: str  # "HH:MM"


def reminder_target(event: CalendarEvent) -> ReminderTarget | None:
    """The single (day, minute) on which the event's reminder is due, or None."""
    policy = event.reminder
    kind = reminder_kind(policy)

    if kind is ReminderKind.RELATIVE:
        at = datetime.combine(event.date, parse_clock(event.event_time).time())
        at -= timedelta(minutes=policy.lead_minutes)
        return ReminderTarget(day=at.date(), clock=at.strftime("%H:%M"))

    if kind is ReminderKind.DAYS_BEFORE:
        day = event.date - timedelta(days=policy.lead_minutes // MINUTES_PER_DAY)
        return ReminderTarget(day=day, clock=parse_clock(policy.trigger_time).strftime("%H:%M"))

    if kind is ReminderKind.CUSTOM_DATE and policy.custom_date is not None:
        return ReminderTarget(
            day=policy.custom_date, clock=parse_clock(policy.trigger_time).strftime("%H:%M")
        )
    return None


@dataclass(frozen=True)
class FireLog:
    """Set of (reminder id, day) pairs that already fired. Immutable; updates return a new log."""

    entries: frozenset[tuple[str, date]] = field(default_factory=frozenset)

    def has(self, reminder_id: str, day: date) -> bool:
        return (reminder_id, day) in self.entries

    def record(self, reminder_id: str, day: date) -> "FireLog":
        return FireLog(self.entries | {(reminder_id, day)})

    def pruned(self, today: date, retention_days: int = 2) -> "FireLog":
        """Drop entries older than retention_days before today."""
        keep = frozenset(
            (rid, day) for rid, day in self.entries if (today - day).days < retention_days
        )
        if len(keep) != len(self.entries):
            log.debug("fire_log_pruned", dropped=len(self.entries) - len(keep))
        return FireLog(keep)

    def to_dict(self) -> dict[str, bool]:
        """JSON-friendly form: {"<id>|YYYY-MM-DD": true}."""
        return {f"{rid}|{day.isoformat()}": True for rid, day in sorted(self.entries)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FireLog":
        entries = set()
        for key, fired in data.items():
            if not fired:
                continue
            rid, sep, iso = key.rpartition("|")
            if not sep or not rid:
                raise ValueError(f"malformed fire log key: {key!r}")
            entries.add((rid, date.fromisoformat(iso)))
        return cls(frozenset(entries))


@dataclass(frozen=True)
class ReminderDecision:
    should_fire: bool
    fire_log: FireLog
    reason: str  # "fire", "no_reminder", "not_trigger_day", "not_trigger_minute", "duplicate"


def wall_clock(now: datetime, utc_offset_hours: float) -> datetime:
    """Naive local wall-clock time. Aware instants are moved to the fixed offset first."""
    if now.tzinfo is None:
        return now
    return now.astimezone(fixed_zone(utc_offset_hours)).replace(tzinfo=None)


def evaluate_reminder(
    event: CalendarEvent,
    now: datetime,
    fire_log: FireLog,
    utc_offset_hours: float = 2.0,
) -> ReminderDecision:
    """Decide whether event's reminder fires on this tick.

    Args:
        event: Event carrying the reminder policy.
        now: Current instant. Naive values are read as local wall-clock time.
        fire_log: Reminders already fired.
        utc_offset_hours: Fixed offset of the local wall clock.

    Returns:
        ReminderDecision. When should_fire is True, fire_log includes this firing.
    """
    target = reminder_target(event)
    if target is None:
        return ReminderDecision(False, fire_log, "no_reminder")

    local = wall_clock(now, utc_offset_hours)
    if local.date() != target.day:
        return ReminderDecision(False, fire_log, "not_trigger_day")
    if local.strftime("%H:%M") != target.clock:
        return ReminderDecision(False, fire_log, "not_trigger_minute")
    if fire_log.has(event.id, target.day):
        log.debug("duplicate_fire_suppressed", event_id=event.id, day=target.day.isoformat())
        return ReminderDecision(False, fire_log, "duplicate")

    log.info("reminder_fired", event_id=event.id, day=target.day.isoformat(), clock=target.clock)
    return ReminderDecision(True, fire_log.record(event.id, target.day), "fire")


def event_from_dict(data: Mapping[str, Any]) -> CalendarEvent:
    """Build a CalendarEvent from the stored event shape.

    Expects "id" and "date" (YYYY-MM-DD); optional "eventTime",
    "reminderMinutes", "reminderTime", "customReminderDate" and a title
    under "title" or "type".
    """
    custom = data.get("customReminderDate") or None
    return CalendarEvent(
        id=str(data["id"]),
        date=date.fromisoformat(data["date"]),
        event_time=data.get("eventTime") or "19:30",
        title=data.get("title") or data.get("type") or "",
        reminder=ReminderPolicy(
            lead_minutes=int(data.get("reminderMinutes") or 0),
            trigger_time=data.get("reminderTime") or "09:00",
            custom_date=date.fromisoformat(custom) if custom else None,
        ),
    )


class ReminderPoller:
    """Cooperative one-minute loop evaluating every event's reminder.

    Ticks are aligned to second :00 of each minute and run to completion
    before the next, so the fire log needs no locking.
    """

    def __init__(
        self,
        events: Callable[[], Iterable[CalendarEvent]],
        notify: Notifier,
        fire_log: FireLog | None = None,
        *,
        utc_offset_hours: float = 2.0,
        retention_days: int = 2,
        on_fire_log_change: Callable[[FireLog], None] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._events = events
        self._notify = notify
        self._utc_offset_hours = utc_offset_hours
        self._retention_days = retention_days
        self._on_fire_log_change = on_fire_log_change
        self._clock = clock
        self.fire_log = fire_log or FireLog()

    def tick(self, now: datetime | None = None) -> list[CalendarEvent]:
        """Evaluate all events once. Returns the events whose reminders fired."""
        now = now or self._clock()
        today = wall_clock(now, self._utc_offset_hours).date()
        current = self.fire_log.pruned(today, self._retention_days)

        fired: list[CalendarEvent] = []
        for event in self._events():
            try:
                decision = evaluate_reminder(event, now, current, self._utc_offset_hours)
            except ValueError:
                # malformed clock text in the stored event
                log.exception("reminder_invalid", event_id=event.id)
                continue
            current = decision.fire_log
            if not decision.should_fire:
                continue
            fired.append(event)
            try:
                self._notify(event)
            except Exception:
                # stays recorded in the fire log
                log.exception("notify_failed", event_id=event.id)

        changed = current != self.fire_log
        self.fire_log = current
        if changed and self._on_fire_log_change is not None:
            self._on_fire_log_change(current)
        return fired

    def schedule_on(self, scheduler: schedule.Scheduler) -> schedule.Job:
        return scheduler.every().minute.at(":00").do(self.tick)

    def run_forever(self, stop: threading.Event | None = None) -> None:
        """Tick every minute until stop is set."""
        stop = stop or threading.Event()
        scheduler = schedule.Scheduler()
        self.schedule_on(scheduler)
        log.info("reminder_poller_started")
        self.tick()
        while not stop.is_set():
            scheduler.run_pending()
            stop.wait(1)
        scheduler.clear()
        log.info("reminder_poller_stopped")
