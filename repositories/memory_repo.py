"""
repositories/memory_repo.py
----------------------------
In-process expense store with the same contract as ExpenseRepository.
Selected with STORAGE_BACKEND=memory; also backs the test suite.
Records live only as long as the process.
"""

import copy
import threading
from datetime import date

from models.expense import Expense, PaymentMethod, utc_now
from utils.exceptions import NotFoundError
from utils.logger import get_logger

logger = get_logger(__name__)


class InMemoryExpenseRepository:
    """Dict-backed store. Every read and write hands out copies, never the stored objects."""

    def __init__(self):
        self._rows: dict[int, Expense] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    # ── CREATE ────────────────────────────────────────────

    def add(self, expense: Expense) -> Expense:
        expense.validate()
        with self._lock:
            now = utc_now()
            expense.id = self._next_id
            expense.created_at = now
            expense.updated_at = now
            self._rows[expense.id] = copy.copy(expense)
            self._next_id += 1
        logger.info(f"Added expense #{expense.id} ({expense.amount} {expense.category})")
        return expense

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, expense_id: int) -> Expense:
        with self._lock:
            stored = self._rows.get(expense_id)
            if stored is None:
                raise NotFoundError(expense_id)
            return copy.copy(stored)

    def list_all(self) -> list[Expense]:
        return self._select(lambda e: True)

    def list_all_by_date_desc(self) -> list[Expense]:
        # Two stable sorts: id ascending, then date descending.
        rows = self.list_all()
        rows.sort(key=lambda e: e.expense_date, reverse=True)
        return rows

    def find_by_category(self, category: str) -> list[Expense]:
        return self._select(lambda e: e.category == category)

    def find_by_date_range(self, start: date, end: date) -> list[Expense]:
        return self._select(lambda e: start <= e.expense_date <= end)

    def find_by_payment_method(self, method: PaymentMethod) -> list[Expense]:
        method = PaymentMethod.parse(method)
        return self._select(lambda e: e.payment_method is method)

    def find_by_location(self, fragment: str) -> list[Expense]:
        needle = fragment.casefold()
        return self._select(lambda e: needle in e.location.casefold())

    def find_by_category_and_date_range(self, category: str, start: date, end: date) -> list[Expense]:
        return self._select(lambda e: e.category == category and start <= e.expense_date <= end)

    # ── UPDATE ────────────────────────────────────────────

    def update(self, expense_id: int, changes: Expense) -> Expense:
        changes.validate()
        with self._lock:
            stored = self._rows.get(expense_id)
            if stored is None:
                raise NotFoundError(expense_id)
            stored.amount = changes.amount
            stored.payment_method = changes.payment_method
            stored.expense_date = changes.expense_date
            stored.category = changes.category
            stored.location = changes.location
            stored.description = changes.description
            stored.updated_at = max(utc_now(), stored.updated_at)
            result = copy.copy(stored)
        logger.info(f"Updated expense #{expense_id}")
        return result

    # ── DELETE ────────────────────────────────────────────

    def delete(self, expense_id: int) -> None:
        with self._lock:
            if self._rows.pop(expense_id, None) is None:
                raise NotFoundError(expense_id)
        logger.info(f"Deleted expense #{expense_id}")

    # ── HELPERS ───────────────────────────────────────────

    def _select(self, predicate) -> list[Expense]:
        """Copies of all rows matching `predicate`, in id order."""
        with self._lock:
            return [copy.copy(e) for _, e in sorted(self._rows.items()) if predicate(e)]
