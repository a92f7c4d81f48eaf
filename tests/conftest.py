from datetime import date
from decimal import Decimal

import pytest

from models.expense import Expense, PaymentMethod
from repositories.memory_repo import InMemoryExpenseRepository
from services.expense_service import ExpenseService


@pytest.fixture
def repo() -> InMemoryExpenseRepository:
    """A fresh, empty in-memory store."""
    return InMemoryExpenseRepository()


@pytest.fixture
def service(repo: InMemoryExpenseRepository) -> ExpenseService:
    return ExpenseService(repo=repo)


@pytest.fixture
def make_expense():
    """Factory for valid, unsaved expenses; override any field by keyword."""

    def _make(**overrides) -> Expense:
        fields = {
            "amount": Decimal("10.00"),
            "payment_method": PaymentMethod.CASH,
            "expense_date": date(2024, 3, 10),
            "category": "Food",
            "location": "Downtown Cafe",
            "description": "Lunch",
        }
        fields.update(overrides)
        return Expense(**fields)

    return _make
