"""Workday calendar predicates (UTC, weekends only, no holidays)."""

from datetime import datetime, timezone

SATURDAY = 5
SUNDAY = 6
FRIDAY = 4

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def as_utc(dt: datetime) -> datetime:
    """Return dt in UTC; naive datetimes are taken to already be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def is_workday(dt: datetime) -> bool:
    """Check if the date is a workday (Monday to Friday)."""
    return as_utc(dt).weekday() not in (SATURDAY, SUNDAY)


def is_friday(dt: datetime) -> bool:
    """Check if the date is a Friday."""
    return as_utc(dt).weekday() == FRIDAY


def next_month_start(dt: datetime) -> datetime:
    """First instant (00:00:00 UTC) of the month after dt."""
    dt = as_utc(dt)
    if dt.month == 12:
        return datetime(dt.year + 1, 1, 1, tzinfo=timezone.utc)
    return datetime(dt.year, dt.month + 1, 1, tzinfo=timezone.utc)


def is_last_workday_of_month(dt: datetime) -> bool:
    """
    Heuristic month-end check.

    True when dt is a workday and 1 to 3 whole days remain until the first
    instant of the next month. This is a fixed lookahead, not an exact
    last-business-day rule: it is true for every workday in that window.
    """
    dt = as_utc(dt)
    days_until_next_month = (next_month_start(dt) - dt).days
    return 1 <= days_until_next_month <= 3 and is_workday(dt)


def time_info(dt: datetime) -> tuple[bool, bool, bool]:
    """Return (is_workday, is_friday, is_last_workday_of_month) for dt."""
    return is_workday(dt), is_friday(dt), is_last_workday_of_month(dt)


def describe_date(dt: datetime) -> str:
    """One-line human readable calendar classification of dt."""
    dt = as_utc(dt)
    workday, friday, last_workday = time_info(dt)

    def yes_no(flag: bool) -> str:
        return "Yes" if flag else "No"

    return (
        f"Date: {dt:%Y-%m-%d %H:%M:%S}, "
        f"Weekday: {WEEKDAY_NAMES[dt.weekday()]}, "
        f"Workday: {yes_no(workday)}, "
        f"Friday: {yes_no(friday)}, "
        f"Last workday of month: {yes_no(last_workday)}"
    )
