"""
main.py
-------
Entry point for the Expense Ledger Telegram bot.

Responsibilities:
    - Initialize the database connection pool and schema (postgres backend).
    - Configure and start the Telegram bot with all handlers.
"""

from telegram import BotCommand, Update
from telegram.ext import Application, CommandHandler, ContextTypes

from config import STORAGE_BACKEND, TELEGRAM_BOT_TOKEN
from db.connection import close_pool, init_pool
from db.init_db import create_tables
from handlers.expense_handler import (
    add_command,
    average_command,
    category_command,
    delete_command,
    edit_command,
    expense_command,
    list_command,
    location_command,
    method_command,
    range_command,
    total_command,
)
from handlers.export_handler import export_csv_command, export_excel_command
from handlers.start_handler import help_command, start_command
from utils.logger import get_logger

logger = get_logger(__name__)

COMMANDS = {
    "start": (start_command, "Start the bot"),
    "help": (help_command, "Show all commands"),
    "add": (add_command, "Record an expense"),
    "expense": (expense_command, "Show one expense"),
    "edit": (edit_command, "Replace an expense"),
    "delete": (delete_command, "Delete an expense"),
    "list": (list_command, "All expenses, newest first"),
    "category": (category_command, "Expenses in a category"),
    "range": (range_command, "Expenses between two dates"),
    "method": (method_command, "Expenses by payment method"),
    "location": (location_command, "Expenses by location"),
    "total": (total_command, "Total for a slice"),
    "average": (average_command, "Average for a slice"),
    "export_csv": (export_csv_command, "Export a month as CSV"),
    "export_excel": (export_excel_command, "Export a month as Excel"),
}


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    await application.bot.set_my_commands(
        [BotCommand(name, description) for name, (_, description) in COMMANDS.items()]
    )
    logger.info("Bot commands menu registered successfully.")


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log unexpected handler failures and tell the user something went wrong."""
    logger.error(f"Unhandled error while processing {update}: {context.error}", exc_info=context.error)
    if isinstance(update, Update) and update.effective_message:
        await update.effective_message.reply_text("Something went wrong. Please try again later.")


def build_application(token: str = TELEGRAM_BOT_TOKEN) -> Application:
    """Build the Telegram application with every command handler registered."""
    app = Application.builder().token(token).post_init(set_bot_commands).build()
    for name, (callback, _) in COMMANDS.items():
        app.add_handler(CommandHandler(name, callback))
    app.add_error_handler(on_error)
    return app


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    if STORAGE_BACKEND == "postgres":
        logger.info("Initializing database...")
        init_pool()
        create_tables()
    else:
        logger.warning(f"Using the {STORAGE_BACKEND} store; expenses are lost on exit.")

    # ── 2. Build the Telegram application ─────────────────
    if not TELEGRAM_BOT_TOKEN:
        raise SystemExit("TELEGRAM_BOT_TOKEN is not set.")
    logger.info("Starting Telegram bot...")
    app = build_application()

    # ── 3. Start polling ──────────────────────────────────
    logger.info("Expense Ledger is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])

    # ── 4. Cleanup on shutdown ────────────────────────────
    if STORAGE_BACKEND == "postgres":
        close_pool()
    logger.info("Expense Ledger stopped.")


if __name__ == "__main__":
    main()
