"""
handlers/parsing.py
-------------------
Turns Telegram command arguments into domain values.
Pure functions: every bad input becomes a ValidationError whose message
is safe to show to the user.
"""

from datetime import date
from typing import Optional

from models.expense import Expense, PaymentMethod
from utils.exceptions import ValidationError

FIELD_SEPARATOR = "|"
EXPENSE_FORMAT = "<amount> | <method> | <date> | <category> | <location> | <description>"

# Dimension keywords accepted by /total and /average, with their aliases.
DIMENSIONS = {
    "category": "category",
    "cat": "category",
    "month": "month",
    "method": "method",
    "payment": "method",
    "location": "location",
    "loc": "location",
}


def parse_id(text: str) -> int:
    """Parse a positive expense id."""
    try:
        value = int(text.strip().lstrip("#"))
    except (ValueError, AttributeError):
        raise ValidationError(f"expense id must be a whole number, got {text!r}", "id")
    if value <= 0:
        raise ValidationError(f"expense id must be positive, got {value}", "id")
    return value


def parse_date(text: str, today: Optional[date] = None) -> date:
    """Parse YYYY-MM-DD, or the words 'today' / 'yesterday'."""
    today = today or date.today()
    word = text.strip().lower()
    if word == "today":
        return today
    if word == "yesterday":
        return date.fromordinal(today.toordinal() - 1)
    try:
        return date.fromisoformat(word)
    except ValueError:
        raise ValidationError(f"date must look like YYYY-MM-DD, got {text!r}", "expense_date")


def parse_expense(args: list[str], today: Optional[date] = None) -> Expense:
    """
    Build an (unsaved, unvalidated) Expense from pipe-separated fields.

    Format: <amount> | <method> | <date> | <category> | <location> | <description>
    The description may itself contain '|'; only the first five separators split.

    Raises:
        ValidationError: On a wrong field count, unknown payment method or bad date.
    """
    parts = [p.strip() for p in " ".join(args).split(FIELD_SEPARATOR, 5)]
    if len(parts) != 6:
        raise ValidationError(f"expected 6 fields: {EXPENSE_FORMAT}")
    amount, method, when, category, location, description = parts
    return Expense(
        amount=amount,
        payment_method=PaymentMethod.parse(method),
        expense_date=parse_date(when, today),
        category=category,
        location=location,
        description=description,
    )


def parse_year_month(args: list[str], today: Optional[date] = None) -> tuple[int, int]:
    """
    Parse '<year> <month>', '<year>-<month>' or nothing (current month).
    """
    today = today or date.today()
    if not args:
        return today.year, today.month
    tokens = args[0].split("-", 1) if len(args) == 1 else args[:2]
    if len(tokens) != 2:
        raise ValidationError(f"month must look like '2024 3' or '2024-03', got {' '.join(args)!r}", "month")
    try:
        year, month = int(tokens[0]), int(tokens[1])
    except ValueError:
        raise ValidationError(f"year and month must be numbers, got {' '.join(args)!r}", "month")
    if not 1 <= month <= 12:
        raise ValidationError(f"month must be between 1 and 12, got {month}", "month")
    return year, month


def parse_category_filter(args: list[str]) -> tuple[str, Optional[tuple[int, int]]]:
    """
    Parse '<category...> [| <year> <month>]'.

    The category may contain spaces; a month, when given, follows a '|'.
    Returns the category and either (year, month) or None.
    """
    category, sep, when = " ".join(args).partition(FIELD_SEPARATOR)
    category = category.strip()
    if not category:
        raise ValidationError("category is required", "category")
    if not sep:
        return category, None
    if not when.split():
        raise ValidationError("expected a month after '|', e.g. '2024 3'", "month")
    return category, parse_year_month(when.split())


def parse_dimension(args: list[str]) -> tuple[str, list[str]]:
    """
    Split '/total <dimension> <value...>' into the canonical dimension and the rest.
    """
    if not args:
        raise ValidationError("choose one of: category, month, method, location")
    dimension = DIMENSIONS.get(args[0].strip().lower())
    if dimension is None:
        raise ValidationError(f"unknown grouping {args[0]!r}; use category, month, method or location")
    rest = args[1:]
    if dimension != "month" and not rest:
        raise ValidationError(f"missing {dimension} value")
    return dimension, rest
