# budget_tracker/windows.py
from __future__ import annotations

import logging
from calendar import monthrange
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional

from budget_tracker.core.models import Transaction

logger = logging.getLogger(__name__)


class WindowKind(str, Enum):
    CURRENT_MONTH = "current-month"
    LAST_MONTH = "last-month"
    LAST_QUARTER = "last-quarter"
    LAST_YEAR = "last-year"
    LAST_30_DAYS = "last-30-days"
    LAST_90_DAYS = "last-90-days"
    LAST_180_DAYS = "last-180-days"
    LAST_365_DAYS = "last-365-days"


ROLLING_DAYS = {
    WindowKind.LAST_30_DAYS: 30,
    WindowKind.LAST_90_DAYS: 90,
    WindowKind.LAST_180_DAYS: 180,
    WindowKind.LAST_365_DAYS: 365,
}


def add_months(moment: datetime, months: int) -> datetime:
    """Shift *moment* by whole calendar months, clamping the day of month."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def previous_month(now: datetime) -> tuple:
    if now.month == 1:
        return now.year - 1, 12
    return now.year, now.month - 1


def parse_window(value) -> Optional[WindowKind]:
    if isinstance(value, WindowKind):
        return value
    try:
        return WindowKind(value)
    except ValueError:
        return None


def window_start(window: WindowKind, now: datetime) -> Optional[datetime]:
    """Inclusive lower bound of an open-ended window, None for calendar months."""
    if window is WindowKind.LAST_QUARTER:
        return add_months(now, -3)
    if window is WindowKind.LAST_YEAR:
        return add_months(now, -12)
    if window in ROLLING_DAYS:
        return now - timedelta(days=ROLLING_DAYS[window])
    return None


def select_window(
    transactions: Iterable[Transaction], window, now: datetime
) -> List[Transaction]:
    """
    Return the transactions whose date falls inside *window* relative to *now*.

    Calendar windows (current/last month) match on (year, month); the other
    windows keep everything dated on or after their start. A value that is not
    a known WindowKind keeps every transaction. Input order is preserved.
    """
    kind = parse_window(window)
    if kind is None:
        logger.debug("Unknown window %r, passing all transactions through", window)
        return list(transactions)

    if kind is WindowKind.CURRENT_MONTH:
        target = (now.year, now.month)
        return [tx for tx in transactions if (tx.date.year, tx.date.month) == target]

    if kind is WindowKind.LAST_MONTH:
        target = previous_month(now)
        return [tx for tx in transactions if (tx.date.year, tx.date.month) == target]

    start = window_start(kind, now)
    return [tx for tx in transactions if tx.date >= start]


def window_label(window, now: datetime) -> str:
    kind = parse_window(window)
    if kind is WindowKind.CURRENT_MONTH:
        return now.strftime("%B")
    if kind is WindowKind.LAST_MONTH:
        year, month = previous_month(now)
        return datetime(year, month, 1).strftime("%B")
    if kind is WindowKind.LAST_QUARTER:
        return "Last 3 Months"
    if kind is WindowKind.LAST_YEAR:
        return "Past Year"
    if kind in ROLLING_DAYS:
        return f"Last {ROLLING_DAYS[kind]} Days"
    return "All Time"
