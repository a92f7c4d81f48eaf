"""
handlers/start_handler.py
--------------------------
Handles /start and /help commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = """
Expense Ledger - your personal expense book.

Recording:
/add <amount> | <method> | <date> | <category> | <location> | <description>
/edit <id> <same six fields>
/delete <id>
/expense <id>

Browsing:
/list - everything, newest first
/category <name> [| <year> <month>]
/range <from> <to>
/method <payment method>
/location <text>

Numbers:
/total <category|month|method|location> <value>
/average <category|month|method|location> <value>

Export:
/export_csv [<year> <month>]
/export_excel [<year> <month>]

Payment methods: cash, debit_card, credit_card, bank_transfer, mobile_payment, paypal
Dates: YYYY-MM-DD, today or yesterday
"""


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - show welcome message."""
    user = update.effective_user
    logger.info(f"User {user.id} started the bot.")
    await update.message.reply_text(
        f"Hello {user.first_name}!\n"
        f"I keep track of your expenses.\n"
        f"Send /help to see every command."
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT.strip())
