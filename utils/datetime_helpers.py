"""
Timezone-aware date/time helpers and the scheduling calendar rules.

The calendar rules (weekends, business window, range expansion) are pure
functions; only get_today/get_now read the application config.
"""

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from flask import current_app

BUSINESS_HOURS_START = time(7, 0)
BUSINESS_HOURS_END = time(21, 0)

# Saturday and Sunday in date.weekday() numbering
WEEKEND_DAYS = (5, 6)


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    tz_name = current_app.config.get('TIMEZONE', 'Asia/Manila')
    return ZoneInfo(tz_name)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def get_now() -> datetime:
    """Get current datetime in the configured timezone."""
    return datetime.now(get_timezone())


def get_timestamp() -> str:
    """Current local time as an ISO string without offset, second precision."""
    return get_now().replace(tzinfo=None, microsecond=0).isoformat()


# =============================================================================
# PARSING
# =============================================================================

def parse_date(value) -> date | None:
    """
    Parse a date from a date object or a YYYY-MM-DD string.

    Longer ISO strings (timestamps) are truncated to their date part.

    Args:
        value: date, datetime, string or None

    Returns:
        date, or None for empty input

    Raises:
        ValueError: If the string is not a valid date
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value).strip()[:10], '%Y-%m-%d').date()


def parse_time(value) -> time | None:
    """
    Parse a time of day from a time object or an HH:MM[:SS] string.

    Args:
        value: time, string or None

    Returns:
        time, or None for empty input

    Raises:
        ValueError: If the string is not a valid time
    """
    if value is None or value == '':
        return None
    if isinstance(value, time):
        return value
    text = str(value).strip()
    for fmt in ('%H:%M', '%H:%M:%S'):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValueError(f'Invalid time: {value!r}')


def format_time(value: time) -> str:
    """Format a time as zero-padded HH:MM."""
    return value.strftime('%H:%M')


def combine_date_time(day: date, clock: time) -> datetime:
    """Combine an activity date and a clock time into a naive local datetime."""
    return datetime.combine(day, clock)


# =============================================================================
# CALENDAR RULES
# =============================================================================

def is_weekend(day: date) -> bool:
    """True for Saturday and Sunday."""
    return day.weekday() in WEEKEND_DAYS


def expand_date_range(start: date, end: date) -> list:
    """
    Expand an inclusive date range into its bookable days.

    Weekends are skipped. A range whose start is after its end is empty.

    Args:
        start: First day of the range
        end: Last day of the range (inclusive)

    Returns:
        list: Ascending list of weekday dates
    """
    days = []
    current = start
    while current <= end:
        if not is_weekend(current):
            days.append(current)
        current += timedelta(days=1)
    return days


def within_business_hours(
    value,
    start: time = BUSINESS_HOURS_START,
    end: time = BUSINESS_HOURS_END
) -> bool:
    """
    Check that a clock time falls inside the daily business window.

    Both bounds are inclusive, so a reservation may end exactly at closing.

    Args:
        value: time or HH:MM string
        start: Opening time
        end: Closing time

    Returns:
        bool: True if start <= value <= end
    """
    clock = parse_time(value)
    if clock is None:
        return False
    return start <= clock <= end


def earliest_bookable_date(today: date, min_advance_days: int = 2) -> date:
    """First activity date that satisfies the advance-notice rule."""
    return today + timedelta(days=min_advance_days)
