"""Next-fire computation for the periodic analysis runs.

All runs fire at 20:00:00 UTC:
- daily: the next workday
- weekly: the next Friday
- monthly: the month-end workday picked by is_last_workday_of_month
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from enum import Enum

from core.market_calendar import as_utc, is_friday, is_last_workday_of_month, is_workday

logger = logging.getLogger(__name__)

TARGET_HOUR = 20
TARGET_MINUTE = 0

ONE_DAY = timedelta(days=1)


class ScheduleMode(str, Enum):
    """Analysis cadence."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


SUPPORTED_MODES = tuple(m.value for m in ScheduleMode)


def _at_target_time(dt: datetime) -> datetime:
    return dt.replace(hour=TARGET_HOUR, minute=TARGET_MINUTE, second=0, microsecond=0)


def next_execution_time(mode: str, now: datetime) -> datetime:
    """
    Calculate the next fire instant for a schedule mode.

    Args:
        mode: "daily", "weekly" or "monthly"; anything else falls back to daily
        now: Current instant (naive values are taken as UTC)

    Returns:
        Aware UTC datetime at 20:00:00
    """
    now = as_utc(now)

    if mode == ScheduleMode.DAILY:
        next_time = _at_target_time(now)
        if next_time <= now:
            next_time += ONE_DAY
        while not is_workday(next_time):
            next_time += ONE_DAY
        return next_time

    if mode == ScheduleMode.WEEKLY:
        next_time = _at_target_time(now)
        while not is_friday(next_time) or next_time <= now:
            next_time += ONE_DAY
        return next_time

    if mode == ScheduleMode.MONTHLY:
        # Starts from tomorrow, so the result is always in the future
        check_date = _at_target_time(now) + ONE_DAY
        while not is_last_workday_of_month(check_date):
            check_date += ONE_DAY
        return _at_target_time(check_date)

    logger.warning(f"Unknown mode: {mode}, using daily mode")
    return next_execution_time(ScheduleMode.DAILY.value, now)
