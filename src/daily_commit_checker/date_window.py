"""Civil-date helpers for deciding what "today" means in a given timezone."""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as date_parser

_OFFSET_PATTERN = re.compile(r"^(?:UTC|GMT)?([+-])(\d{1,2})(?::?(\d{2}))?$")


@dataclass(frozen=True)
class DateWindow:
    """Midnight-to-midnight span of one civil date in a fixed timezone."""

    day: date
    start: datetime
    end: datetime

    @property
    def tz(self) -> tzinfo:
        return self.start.tzinfo  # type: ignore[return-value]

    @property
    def start_iso(self) -> str:
        return self.start.isoformat()

    @property
    def end_iso(self) -> str:
        return self.end.isoformat()


def today_in(tz: tzinfo, now: datetime | None = None) -> date:
    """
    Return the civil date of an instant in a timezone.

    Args:
        tz: Timezone the date is read in
        now: Instant to convert; defaults to the current wall clock.
            Naive values are taken as UTC.

    Returns:
        The calendar date of ``now`` as seen in ``tz``
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(tz).date()


def compute_window(tz: tzinfo, now: datetime | None = None) -> DateWindow:
    """
    Build today's window: 00:00:00 to 23:59:59 of the civil date in ``tz``.

    Both ends carry ``tz`` so they serialize with an explicit offset,
    e.g. ``2024-03-06T00:00:00+09:00``.
    """
    day = today_in(tz, now)
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day, time.max.replace(microsecond=0), tzinfo=tz)
    return DateWindow(day=day, start=start, end=end)


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub timestamp such as ``2024-03-06T01:00:00Z``."""
    parsed = date_parser.isoparse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def civil_date_of(value: str, tz: tzinfo) -> date:
    """Return the civil date of a GitHub timestamp in ``tz``."""
    return parse_timestamp(value).astimezone(tz).date()


def parse_utc_offset(text: str) -> tzinfo:
    """
    Parse a timezone setting.

    Accepts ``UTC``/``Z``, fixed offsets (``+09:00``, ``-0530``, ``UTC+9``)
    and IANA zone names (``Asia/Seoul``).

    Raises:
        ValueError: If the text is not a recognizable timezone
    """
    cleaned = text.strip()
    if cleaned.upper() in {"UTC", "Z", "GMT"}:
        return timezone.utc

    match = _OFFSET_PATTERN.match(cleaned.upper())
    if match:
        sign, hours, minutes = match.groups()
        offset = timedelta(hours=int(hours), minutes=int(minutes or 0))
        if offset >= timedelta(hours=24):
            raise ValueError(f"UTC offset out of range: {text!r}")
        return timezone(-offset if sign == "-" else offset)

    try:
        return ZoneInfo(cleaned)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {text!r}") from e
