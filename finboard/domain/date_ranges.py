"""
Date range presets and month arithmetic.

All ranges are inclusive calendar-day ranges.
"""

import calendar
from datetime import date
from enum import Enum
from typing import Optional

from finboard.models.ledger import DateRange


class DateRangeKey(str, Enum):
    """Preset ranges offered by the dashboard."""
    CURRENT_MONTH = "current-month"
    PAST_2_MONTHS = "past-2-months"
    PAST_3_MONTHS = "past-3-months"
    PAST_6_MONTHS = "past-6-months"
    PAST_YEAR = "past-year"
    ALL_TIME = "all-time"


# Number of whole months (including the current one) each preset spans
_MONTH_SPANS = {
    DateRangeKey.CURRENT_MONTH: 1,
    DateRangeKey.PAST_2_MONTHS: 2,
    DateRangeKey.PAST_3_MONTHS: 3,
    DateRangeKey.PAST_6_MONTHS: 6,
    DateRangeKey.PAST_YEAR: 12,
}

ALL_TIME_YEARS = 5


def first_of_month(day: date) -> date:
    return day.replace(day=1)


def shift_month(month: date, delta: int) -> date:
    """First day of the month `delta` months away from `month`."""
    index = month.year * 12 + (month.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


def month_range(month: date) -> DateRange:
    """First through last day of the month containing `month`."""
    last_day = calendar.monthrange(month.year, month.month)[1]
    return DateRange(start=month.replace(day=1), end=month.replace(day=last_day))


def compute_date_range(
    key: Optional[DateRangeKey],
    today: Optional[date] = None,
) -> Optional[DateRange]:
    """
    Resolve a preset into a concrete range.

    Month presets run from the first day of the earliest month through
    the last day of the current month. ALL_TIME runs from the same day
    five years ago through today.

    Returns:
        The range, or None when no preset is given
    """
    if key is None:
        return None
    key = DateRangeKey(key)
    today = today or date.today()

    if key == DateRangeKey.ALL_TIME:
        year = today.year - ALL_TIME_YEARS
        last_day = calendar.monthrange(year, today.month)[1]
        start = date(year, today.month, min(today.day, last_day))
        return DateRange(start=start, end=today)

    start = shift_month(today, -(_MONTH_SPANS[key] - 1))
    return DateRange(start=start, end=month_range(today).end)
