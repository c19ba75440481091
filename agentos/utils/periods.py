"""
Date and currency helpers for commission periods
"""
import calendar
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Tuple

CENT = Decimal("0.01")


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with stored timestamps"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def month_window(moment: datetime) -> Tuple[datetime, datetime]:
    """
    Inclusive bounds of the calendar month containing `moment`

    Returns:
        Tuple of (first day 00:00:00, last day 23:59:59.999999)
    """
    moment = as_utc(moment)
    last_day = calendar.monthrange(moment.year, moment.month)[1]
    start = moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    end = moment.replace(day=last_day, hour=23, minute=59, second=59, microsecond=999999)
    return start, end


def next_payout_date(moment: datetime) -> datetime:
    """Payouts happen on the 1st of the month after `moment`"""
    moment = as_utc(moment)
    if moment.month == 12:
        return moment.replace(year=moment.year + 1, month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    return moment.replace(month=moment.month + 1, day=1, hour=0, minute=0, second=0, microsecond=0)


def round_currency(value: float) -> float:
    """Round half-up to cents"""
    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))
