"""
utils/exceptions.py
-------------------
Domain errors raised by the store and the service layer.
Both propagate unchanged to the caller; nothing retries them.
"""

from typing import Optional


class ExpenseLedgerError(Exception):
    """Base class for all expense ledger errors."""


class NotFoundError(ExpenseLedgerError):
    """Raised when an expense is addressed by an id that does not exist."""

    def __init__(self, expense_id: int):
        self.expense_id = expense_id
        super().__init__(f"Expense not found with id: {expense_id}")


class ValidationError(ExpenseLedgerError):
    """
    Raised when a write would break an Expense invariant.

    Attributes:
        field: Name of the offending field, or None for non-field errors.
        message: Human-readable reason.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}" if field else message)
