"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of a month's expenses.
"""

import io

import pandas as pd

from models.expense import Expense
from repositories.factory import get_repository
from services.aggregation import average, month_range, total
from utils.logger import get_logger

logger = get_logger(__name__)

COLUMNS = ["ID", "Date", "Amount", "Payment Method", "Category", "Location", "Description"]


class ExportService:
    """Generates downloadable expense reports in CSV and Excel formats."""

    def __init__(self, repo=None):
        self.repo = repo if repo is not None else get_repository()

    def export_month_csv(self, year: int, month: int) -> io.BytesIO:
        """
        Export a month's expenses as a CSV file.

        Args:
            year: Year number.
            month: Month number (1-12).

        Returns:
            A BytesIO buffer containing UTF-8 (with BOM) CSV data.
        """
        expenses = self._month_expenses(year, month)
        df = self._to_frame(expenses)

        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8-sig")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} expenses for {month}/{year} as CSV")
        return buffer

    def export_month_excel(self, year: int, month: int) -> io.BytesIO:
        """
        Export a month's expenses as an Excel (.xlsx) file.

        The workbook has an "Expenses" sheet and, when the month is not
        empty, a "Summary" sheet with total and average per category.

        Returns:
            A BytesIO buffer containing the Excel data.
        """
        expenses = self._month_expenses(year, month)
        df = self._to_frame(expenses)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Expenses", index=False)
            if expenses:
                self._summary_frame(expenses).to_excel(writer, sheet_name="Summary", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(df)} expenses for {month}/{year} as Excel")
        return buffer

    # ── HELPERS ───────────────────────────────────────────

    def _month_expenses(self, year: int, month: int) -> list[Expense]:
        start, end = month_range(year, month)
        expenses = self.repo.find_by_date_range(start, end)
        return sorted(expenses, key=lambda e: (e.expense_date, e.id))

    @staticmethod
    def _to_frame(expenses: list[Expense]) -> pd.DataFrame:
        data = [
            {
                "ID": e.id,
                "Date": e.expense_date.isoformat(),
                # Excel and CSV consumers expect plain numbers
                "Amount": float(e.amount),
                "Payment Method": e.payment_method.value,
                "Category": e.category,
                "Location": e.location,
                "Description": e.description,
            }
            for e in expenses
        ]
        return pd.DataFrame(data, columns=COLUMNS)

    @staticmethod
    def _summary_frame(expenses: list[Expense]) -> pd.DataFrame:
        """Per-category count, total and half-up average, computed with the Decimal reductions."""
        by_category: dict[str, list[Expense]] = {}
        for e in expenses:
            by_category.setdefault(e.category, []).append(e)

        rows = [
            {
                "Category": category,
                "Count": len(items),
                "Total": float(total(items)),
                "Average": float(average(items)),
            }
            for category, items in sorted(by_category.items())
        ]
        return pd.DataFrame(rows, columns=["Category", "Count", "Total", "Average"])
