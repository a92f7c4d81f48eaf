"""
services/aggregation.py
-----------------------
Pure reductions over lists of expenses already filtered by the store,
plus the calendar-month bounds used by the by-month queries.

Both reductions return zero for an empty list instead of failing.
"""

import calendar
from datetime import MAXYEAR, MINYEAR, date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from models.expense import Expense
from utils.exceptions import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")


def total(expenses: Iterable[Expense], context: str = "") -> Decimal:
    """Exact Decimal sum of the amounts; 0 when there are none."""
    expenses = list(expenses)
    if not expenses:
        logger.warning(f"No expenses found to calculate total, for {context or 'query'}")
        return ZERO
    return sum((e.amount for e in expenses), ZERO)


def average(expenses: Iterable[Expense], context: str = "") -> Decimal:
    """
    Mean amount rounded half-up to 2 decimal places; 0 when there are none.

    Examples:
        amounts 10.00, 15.00, 20.00 -> 15.00
        amounts 0.01, 0.02          -> 0.02 (0.015 rounds up)
    """
    expenses = list(expenses)
    if not expenses:
        logger.warning(f"No expenses found to calculate average, for {context or 'query'}")
        return ZERO
    return (total(expenses, context) / len(expenses)).quantize(CENT, rounding=ROUND_HALF_UP)


def month_range(year: int, month: int) -> tuple[date, date]:
    """
    First and last calendar day of a month, leap years included.

    Raises:
        ValidationError: If month is not in 1..12 or year is not a calendar year.
    """
    if not 1 <= month <= 12:
        raise ValidationError(f"month must be between 1 and 12, got {month}", "month")
    if not MINYEAR <= year <= MAXYEAR:
        raise ValidationError(f"year must be between {MINYEAR} and {MAXYEAR}, got {year}", "month")
    _, last_day = calendar.monthrange(year, month)
    return date(year, month, 1), date(year, month, last_day)
