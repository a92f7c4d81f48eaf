"""
services/expense_service.py
----------------------------
Business logic for recording and querying expenses.
CRUD calls pass straight through to the store; the named aggregate queries
combine a store filter with one of the reductions in services.aggregation.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from models.expense import Expense, PaymentMethod
from repositories.factory import get_repository
from services.aggregation import average, month_range, total
from utils.logger import get_logger

logger = get_logger(__name__)


class ExpenseService:
    """
    Handles all business logic related to expenses.

    Errors from the store (NotFoundError, ValidationError, driver errors)
    propagate to the caller unchanged.
    """

    def __init__(self, repo=None):
        self.repo = repo if repo is not None else get_repository()

    # ── CRUD ──────────────────────────────────────────────

    def create_expense(self, expense: Expense) -> Expense:
        logger.info(f"Saving expense {expense.description!r}")
        return self.repo.add(expense)

    def get_expense(self, expense_id: int) -> Expense:
        logger.info(f"Getting expense by id {expense_id}")
        return self.repo.get_by_id(expense_id)

    def list_expenses(self) -> list[Expense]:
        logger.info("Getting all expenses")
        return self.repo.list_all()

    def update_expense(self, expense_id: int, changes: Expense) -> Expense:
        """
        Replace amount, payment method, date, category, location and
        description of an expense. id and created_at are kept.
        """
        logger.info(f"Updating expense with id: {expense_id}")
        return self.repo.update(expense_id, changes)

    def delete_expense(self, expense_id: int) -> None:
        logger.info(f"Deleting expense {expense_id}")
        self.repo.delete(expense_id)

    # ── TOTALS ────────────────────────────────────────────

    def total_by_category(self, category: str) -> Decimal:
        logger.info(f"Calculating total expenses for category: {category}")
        return total(self.repo.find_by_category(category), f"category: {category}")

    def total_in_month(self, year: int, month: int) -> Decimal:
        logger.info(f"Calculating total expenses for {month}/{year}")
        start, end = month_range(year, month)
        return total(self.repo.find_by_date_range(start, end), f"month: {month}/{year}")

    def total_by_payment_method(self, method: PaymentMethod) -> Decimal:
        method = PaymentMethod.parse(method)
        logger.info(f"Calculating total expenses for payment method: {method}")
        return total(self.repo.find_by_payment_method(method), f"payment method: {method}")

    def total_by_location(self, location: str) -> Decimal:
        logger.info(f"Calculating total expenses for location: {location}")
        return total(self.repo.find_by_location(location), f"location: {location}")

    # ── AVERAGES ──────────────────────────────────────────

    def average_by_category(self, category: str) -> Decimal:
        logger.info(f"Calculating average expense for category: {category}")
        return average(self.repo.find_by_category(category), f"category: {category}")

    def average_in_month(self, year: int, month: int) -> Decimal:
        logger.info(f"Calculating average expenses for {month}/{year}")
        start, end = month_range(year, month)
        return average(self.repo.find_by_date_range(start, end), f"month: {month}/{year}")

    def average_by_payment_method(self, method: PaymentMethod) -> Decimal:
        method = PaymentMethod.parse(method)
        logger.info(f"Calculating average expense for payment method: {method}")
        return average(self.repo.find_by_payment_method(method), f"payment method: {method}")

    def average_by_location(self, location: str) -> Decimal:
        logger.info(f"Calculating average expense for location: {location}")
        return average(self.repo.find_by_location(location), f"location: {location}")

    # ── RETRIEVAL ─────────────────────────────────────────

    def expenses_by_category(self, category: str) -> list[Expense]:
        logger.info(f"Fetching expenses for category: {category}")
        return self.repo.find_by_category(category)

    def expenses_in_date_range(self, start: date, end: date) -> list[Expense]:
        logger.info(f"Fetching expenses between {start} and {end}")
        return self.repo.find_by_date_range(start, end)

    def expenses_by_payment_method(self, method: PaymentMethod) -> list[Expense]:
        method = PaymentMethod.parse(method)
        logger.info(f"Fetching expenses for payment method: {method}")
        return self.repo.find_by_payment_method(method)

    def expenses_by_location(self, location: str) -> list[Expense]:
        logger.info(f"Fetching expenses for location containing: {location}")
        return self.repo.find_by_location(location)

    def expenses_sorted_by_date(self) -> list[Expense]:
        logger.info("Fetching all expenses ordered by date (newest first)")
        return self.repo.list_all_by_date_desc()

    def expenses_by_category_in_month(
        self, category: str, year: Optional[int] = None, month: Optional[int] = None
    ) -> list[Expense]:
        """Expenses of one category within a calendar month (defaults to the current month)."""
        today = date.today()
        y = today.year if year is None else year
        m = today.month if month is None else month
        logger.info(f"Fetching expenses for category {category} in {m}/{y}")
        start, end = month_range(y, m)
        return self.repo.find_by_category_and_date_range(category, start, end)
