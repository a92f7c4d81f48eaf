"""
handlers/export_handler.py
---------------------------
Handles data export commands (CSV, Excel).
Delegates to ExportService.
"""

from telegram import Update
from telegram.ext import ContextTypes

from handlers.errors import replies_on_domain_errors
from handlers.parsing import parse_year_month
from services.export_service import ExportService
from utils.logger import get_logger

logger = get_logger(__name__)
export_service = ExportService()


@replies_on_domain_errors
async def export_csv_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /export_csv command - send a month's expenses as CSV.
    Optional: /export_csv 2024 3 (defaults to the current month).
    """
    year, month = parse_year_month(context.args or [])
    buffer = export_service.export_month_csv(year, month)
    await update.message.reply_document(
        document=buffer,
        filename=f"expenses_{year}_{month:02d}.csv",
        caption=f"Expenses for {month}/{year} (CSV)",
    )


@replies_on_domain_errors
async def export_excel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /export_excel command - send a month's expenses as Excel.
    Optional: /export_excel 2024 3 (defaults to the current month).
    """
    year, month = parse_year_month(context.args or [])
    buffer = export_service.export_month_excel(year, month)
    await update.message.reply_document(
        document=buffer,
        filename=f"expenses_{year}_{month:02d}.xlsx",
        caption=f"Expenses for {month}/{year} (Excel)",
    )
