"""
models/expense.py
-----------------
Domain model for a single recorded expense and its payment method.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, Union

from utils.exceptions import ValidationError

DESCRIPTION_MAX_LENGTH = 280

# Matches the NUMERIC(12,2) amount column: whole cents, at most 10 digits before the point.
AMOUNT_DECIMAL_PLACES = 2
AMOUNT_MAX_DIGITS = 12
AMOUNT_LIMIT = Decimal(10) ** (AMOUNT_MAX_DIGITS - AMOUNT_DECIMAL_PLACES)
CENT = Decimal(1).scaleb(-AMOUNT_DECIMAL_PLACES)


class PaymentMethod(str, Enum):
    """How an expense was paid. Stored in the database by name."""

    CASH = "CASH"
    DEBIT_CARD = "DEBIT_CARD"
    CREDIT_CARD = "CREDIT_CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    MOBILE_PAYMENT = "MOBILE_PAYMENT"
    PAYPAL = "PAYPAL"

    @classmethod
    def parse(cls, value: Union["PaymentMethod", str]) -> "PaymentMethod":
        """
        Resolve a member from itself or from its name.

        Matching ignores case and treats spaces and dashes as underscores,
        so "credit card", "Credit-Card" and "CREDIT_CARD" are all accepted.

        Raises:
            ValidationError: If the value names no payment method.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace("-", "_").replace(" ", "_")
            if key in cls.__members__:
                return cls[key]
        choices = ", ".join(cls.__members__)
        raise ValidationError(f"unknown payment method {value!r} (expected one of {choices})", "payment_method")

    def __str__(self) -> str:
        return self.value


def utc_now() -> datetime:
    """Timezone-aware current time, used by the stores for created_at/updated_at."""
    return datetime.now(timezone.utc)


def _to_decimal(value):
    """Coerce ints, floats and numeric strings to Decimal; leave anything else for validate()."""
    if isinstance(value, Decimal) or isinstance(value, bool):
        return value
    if isinstance(value, (int, str)):
        try:
            return Decimal(str(value).strip())
        except InvalidOperation:
            return value
    if isinstance(value, float):
        # str() first so 0.1 becomes Decimal("0.1"), not its binary expansion
        return Decimal(str(value))
    return value


@dataclass
class Expense:
    """
    Represents a single recorded outflow of money.

    Attributes:
        amount: Amount spent; strictly positive.
        payment_method: How it was paid.
        expense_date: Calendar date of the expense (no time component).
        category: Free-form category, matched exactly.
        location: Free-form place, matched by substring.
        description: Note of at most 280 characters; never blank.
        id: Store-assigned primary key (None until inserted).
        created_at: Set once by the store on insert.
        updated_at: Set on insert and refreshed on every update.
    """
    amount: Decimal
    payment_method: PaymentMethod
    expense_date: date
    category: str
    location: str
    description: str
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        self.amount = _to_decimal(self.amount)
        if isinstance(self.payment_method, str) and not isinstance(self.payment_method, PaymentMethod):
            self.payment_method = PaymentMethod.parse(self.payment_method)

    def validate(self) -> None:
        """
        Check every write-time invariant.

        Raises:
            ValidationError: On the first violated invariant, naming the field.
        """
        amount = self.amount
        if amount is None:
            raise ValidationError("amount is required", "amount")
        if not isinstance(amount, Decimal) or isinstance(amount, bool):
            raise ValidationError(f"amount must be a number, got {amount!r}", "amount")
        if not amount.is_finite():
            raise ValidationError("amount must be a finite number", "amount")
        if amount <= 0:
            raise ValidationError("Amount must be positive", "amount")
        if amount >= AMOUNT_LIMIT:
            raise ValidationError(f"amount must be less than {AMOUNT_LIMIT:,}", "amount")
        if amount != amount.quantize(CENT):
            raise ValidationError(
                f"amount must have at most {AMOUNT_DECIMAL_PLACES} decimal places, got {amount}", "amount"
            )

        if not isinstance(self.payment_method, PaymentMethod):
            raise ValidationError("payment method is required", "payment_method")

        if self.expense_date is None:
            raise ValidationError("expense date is required", "expense_date")
        if isinstance(self.expense_date, datetime) or not isinstance(self.expense_date, date):
            raise ValidationError("expense date must be a calendar date without time", "expense_date")

        for name in ("category", "location"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"{name} is required", name)

        if not isinstance(self.description, str) or not self.description.strip():
            raise ValidationError("Description is required", "description")
        if len(self.description) > DESCRIPTION_MAX_LENGTH:
            raise ValidationError(
                f"description must be at most {DESCRIPTION_MAX_LENGTH} characters "
                f"(got {len(self.description)})",
                "description",
            )

    def __str__(self) -> str:
        ref = f"#{self.id} | " if self.id is not None else ""
        return (
            f"{ref}{self.expense_date} | {self.amount:.2f} | {self.payment_method} | "
            f"{self.category} | {self.location} | {self.description}"
        )
