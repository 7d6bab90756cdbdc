"""Render event dates and times for tickets.

Event dates are stored as UTC instants and rendered in the event's own
timezone using the organizer's token pattern (``MM/DD/YYYY HH:mm`` by
default). None of the functions here raise on missing input: absent
dates render as a fixed placeholder.
"""
import re
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.models.event_config import DEFAULT_DATE_FORMAT

DATE_TBA = "Date TBA"
NOT_AVAILABLE = "N/A"
RANGE_SEPARATOR = " – "  # en dash
DATE_ONLY_FALLBACK = "MM/DD/YYYY"

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
WEEKDAY_NAMES = [
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
]

# Longest tokens first so MMMM is not read as MM + MM
_TOKEN_RE = re.compile(r"YYYY|MMMM|MMM|MM|DD|HH|mm|ss")
# A time group such as " HH:mm", "THH:mm:ss", ", HH" or " at HH:mm"
_TIME_GROUP_RE = re.compile(r"[\s,T]*(?:(?:at|@)\s*)?(?:HH|mm|ss)(?:\s*:\s*(?:HH|mm|ss))*")


@dataclass(frozen=True)
class EventSchedule:
    """Everything needed to render an event's date window.

    If ``end`` is None the event is single-day regardless of
    ``is_single_day``.
    """

    start: datetime | None
    end: datetime | None = None
    timezone: str = "UTC"
    is_all_day: bool = False
    is_single_day: bool = False
    date_pattern: str = DEFAULT_DATE_FORMAT

    @property
    def single_day(self) -> bool:
        return self.is_single_day or self.end is None

    @classmethod
    def from_event(cls, event, default_timezone: str = "UTC") -> "EventSchedule":
        config = event.get_config()
        return cls(
            start=event.start_datetime,
            end=event.end_datetime,
            timezone=event.timezone or default_timezone,
            is_all_day=config.is_all_day,
            is_single_day=config.is_single_day_event,
            date_pattern=config.date_format,
        )


def resolve_timezone(name: str | None) -> tzinfo:
    """Look up an IANA timezone, falling back to UTC for unknown names."""
    if not name:
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return UTC


def to_local(instant: datetime, timezone: str | None) -> datetime:
    """Convert an instant to the given timezone. Naive values are UTC."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return instant.astimezone(resolve_timezone(timezone))


def strip_time_tokens(pattern: str) -> str:
    """Remove hour/minute/second tokens from a date pattern."""
    stripped = _TIME_GROUP_RE.sub("", pattern).strip(" ,")
    return stripped or DATE_ONLY_FALLBACK


def format_instant(instant: datetime, pattern: str, timezone: str | None) -> str:
    """Render ``instant`` in ``timezone`` using a token pattern.

    Supported tokens: YYYY, MMMM (January), MMM (Jan), MM, DD, HH, mm, ss.
    Everything else in the pattern is copied literally.
    """
    local = to_local(instant, timezone)
    month_name = MONTH_NAMES[local.month - 1]
    values = {
        "YYYY": f"{local.year:04d}",
        "MMMM": month_name,
        "MMM": month_name[:3],
        "MM": f"{local.month:02d}",
        "DD": f"{local.day:02d}",
        "HH": f"{local.hour:02d}",
        "mm": f"{local.minute:02d}",
        "ss": f"{local.second:02d}",
    }
    return _TOKEN_RE.sub(lambda match: values[match.group(0)], pattern)


def render_event_window(schedule: EventSchedule) -> str:
    """
    Render the start/end window of an event.

    - No dates at all: "Date TBA".
    - All-day events drop the time part of the pattern.
    - Single-day events, or start and end on the same local calendar day,
      render the start only.
    - Otherwise "{start} – {end}", or whichever of the two is present.
    """
    start, end = schedule.start, schedule.end
    if start is None and end is None:
        return DATE_TBA

    pattern = (
        strip_time_tokens(schedule.date_pattern)
        if schedule.is_all_day
        else schedule.date_pattern
    )

    def render(instant: datetime) -> str:
        return format_instant(instant, pattern, schedule.timezone)

    same_day = (
        start is not None
        and end is not None
        and to_local(start, schedule.timezone).date() == to_local(end, schedule.timezone).date()
    )

    if (schedule.is_single_day or same_day) and start is not None:
        return render(start)
    if start is not None and end is not None:
        return f"{render(start)}{RANGE_SEPARATOR}{render(end)}"
    return render(start if start is not None else end)


def render_long_date(instant: datetime | None, timezone: str | None) -> str:
    """Verbose date for "registered on" lines.

    Example: "Sunday, June 1, 2025 at 11:00 AM MST".
    """
    if instant is None:
        return NOT_AVAILABLE

    local = to_local(instant, timezone)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return (
        f"{WEEKDAY_NAMES[local.weekday()]}, {MONTH_NAMES[local.month - 1]} "
        f"{local.day}, {local.year} at {hour}:{local.minute:02d} {meridiem} "
        f"{local.tzname() or 'UTC'}"
    )


def timezone_abbreviation(timezone: str | None, at: datetime | None = None) -> str:
    """Short name of ``timezone`` at the given instant (default: now), e.g. "PST"."""
    local = to_local(at or datetime.now(UTC), timezone)
    return local.tzname() or "UTC"
