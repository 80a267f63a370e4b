# app/utils/time_utils.py
"""
Wall-clock time helpers.

Times of day travel through the system as "HH:MM" strings (24h). There is no
timezone model: a business lives in the ambient system timezone.
"""
import re
from datetime import date, datetime, timedelta
from typing import Union

MINUTES_PER_DAY = 24 * 60

_TIME_RE = re.compile(r"^(\d{2}):(\d{2})$")


def time_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight"""
    match = _TIME_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")

    return hour * 60 + minute


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to zero-padded "HH:MM" """
    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        raise ValueError(f"Minute offset {minutes} is outside a single day")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def add_minutes(value: str, duration: int) -> str:
    """
    End time for a start time plus a duration.

    Does not roll over midnight: a result past 23:59 raises ValueError.
    """
    return minutes_to_time(time_to_minutes(value) + duration)


def is_valid_time(value: str) -> bool:
    try:
        time_to_minutes(value)
    except ValueError:
        return False
    return True


def day_of_week(target: date) -> int:
    """Day of week with 0=Sunday .. 6=Saturday"""
    # date.weekday() is 0=Monday .. 6=Sunday
    return (target.weekday() + 1) % 7


def combine(target: date, value: str) -> datetime:
    """Naive datetime for a date and an "HH:MM" wall-clock time"""
    return datetime.combine(target, datetime.min.time()) + timedelta(minutes=time_to_minutes(value))


def to_wall_clock(value: datetime) -> datetime:
    """Drop tzinfo, converting aware datetimes to local wall-clock first"""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


Comparable = Union[str, int, datetime]


def intervals_overlap(start: Comparable, end: Comparable,
                      other_start: Comparable, other_end: Comparable) -> bool:
    """
    Three-way interval intersection test shared by slot generation and
    booking validation.

    Matches when start falls inside [other_start, other_end), when end falls
    inside (other_start, other_end], or when [start, end) covers the other
    interval. Intervals that only touch at a boundary do not overlap.
    Works for "HH:MM" strings (zero padded, so they sort lexically),
    minute offsets and datetimes.
    """
    return (
        (other_start <= start < other_end)
        or (other_start < end <= other_end)
        or (start <= other_start and end >= other_end)
    )


def ranges_overlap(start: datetime, end: datetime,
                   window_start: datetime, window_end: datetime) -> bool:
    """Half-open overlap: start < window_end and end > window_start"""
    return start < window_end and end > window_start


def parse_date(value: str) -> date:
    """
    Parse "YYYY-MM-DD" or a full ISO timestamp (as sent by browsers) to a
    calendar date in local wall-clock terms.
    """
    if "T" in value:
        return to_wall_clock(datetime.fromisoformat(value.replace("Z", "+00:00"))).date()
    return date.fromisoformat(value)
