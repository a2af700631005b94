"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timezone


def add_months(anchor: date, months: int, day: int) -> date:
    """
    Return `day` of the month `months` after `anchor`'s month.

    Days past the end of a short month clamp to its last day
    (31 in February -> 28 or 29).
    """
    month_index = anchor.year * 12 + (anchor.month - 1) + months
    year, month_zero = divmod(month_index, 12)
    last_day = calendar.monthrange(year, month_zero + 1)[1]
    return date(year, month_zero + 1, min(day, last_day))


def date_from_epoch_ms(value: float) -> date:
    """Convert a millisecond epoch timestamp (legacy backups) to a UTC calendar date"""
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).date()
