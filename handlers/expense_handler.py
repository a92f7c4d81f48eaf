"""
handlers/expense_handler.py
----------------------------
Handles expense commands: recording, editing, deleting, listing and
aggregating. Delegates all logic to ExpenseService.
"""

from decimal import Decimal

from telegram import Update
from telegram.ext import ContextTypes

from config import DEFAULT_CURRENCY
from handlers.errors import replies_on_domain_errors
from handlers.parsing import (
    EXPENSE_FORMAT,
    parse_category_filter,
    parse_date,
    parse_dimension,
    parse_expense,
    parse_id,
    parse_year_month,
)
from models.expense import Expense, PaymentMethod
from services.expense_service import ExpenseService
from utils.logger import get_logger

logger = get_logger(__name__)
expense_service = ExpenseService()

# Telegram rejects messages over 4096 characters.
MAX_LISTED = 50


def format_money(amount: Decimal) -> str:
    return f"{amount:.2f} {DEFAULT_CURRENCY}"


def format_expense(e: Expense) -> str:
    return (
        f"#{e.id} | {e.expense_date} | {format_money(e.amount)}\n"
        f"  {e.category} @ {e.location} ({e.payment_method})\n"
        f"  {e.description}"
    )


def format_expense_list(title: str, expenses: list[Expense]) -> str:
    """Render a titled list with a count; long lists are cut at MAX_LISTED entries."""
    if not expenses:
        return f"{title}\nNo expenses found."
    lines = [f"{title} ({len(expenses)})"]
    lines.extend(format_expense(e) for e in expenses[:MAX_LISTED])
    if len(expenses) > MAX_LISTED:
        lines.append(f"... and {len(expenses) - MAX_LISTED} more")
    return "\n".join(lines)


async def _usage(update: Update, text: str) -> None:
    await update.message.reply_text(text)


# ── CRUD ──────────────────────────────────────────────────

@replies_on_domain_errors
async def add_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /add - record a new expense.
    Usage: /add 12.50 | cash | 2024-03-05 | Food | Downtown Cafe | Lunch
    """
    if not context.args:
        await _usage(update, f"Usage: /add {EXPENSE_FORMAT}\nExample: /add 12.50 | cash | today | Food | Downtown Cafe | Lunch")
        return
    saved = expense_service.create_expense(parse_expense(context.args))
    await update.message.reply_text(f"Recorded expense:\n{format_expense(saved)}")


@replies_on_domain_errors
async def expense_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /expense <id> - show one expense."""
    if not context.args:
        await _usage(update, "Usage: /expense <id>")
        return
    expense = expense_service.get_expense(parse_id(context.args[0]))
    await update.message.reply_text(
        f"{format_expense(expense)}\n"
        f"  created {expense.created_at:%Y-%m-%d %H:%M}, updated {expense.updated_at:%Y-%m-%d %H:%M}"
    )


@replies_on_domain_errors
async def edit_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /edit <id> <all six fields> - replace every field of an expense.
    Usage: /edit 5 15 | debit_card | 2024-03-05 | Food | Downtown Cafe | Lunch and coffee
    """
    if not context.args or len(context.args) < 2:
        await _usage(update, f"Usage: /edit <id> {EXPENSE_FORMAT}")
        return
    expense_id = parse_id(context.args[0])
    updated = expense_service.update_expense(expense_id, parse_expense(context.args[1:]))
    await update.message.reply_text(f"Updated expense:\n{format_expense(updated)}")


@replies_on_domain_errors
async def delete_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /delete <id> - permanently delete an expense."""
    if not context.args:
        await _usage(update, "Usage: /delete <id>\nExample: /delete 5")
        return
    expense_id = parse_id(context.args[0])
    expense_service.delete_expense(expense_id)
    await update.message.reply_text(f"Deleted expense #{expense_id}.")


# ── RETRIEVAL ─────────────────────────────────────────────

@replies_on_domain_errors
async def list_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /list - all expenses, newest first."""
    expenses = expense_service.expenses_sorted_by_date()
    await update.message.reply_text(format_expense_list("All expenses, newest first", expenses))


@replies_on_domain_errors
async def category_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Handle /category <name> [| <year> <month>] - expenses in one category,
    optionally limited to a month. The name may contain spaces.
    """
    if not context.args:
        await _usage(update, "Usage: /category <name> [| <year> <month>]\nExample: /category Eating Out | 2024 3")
        return
    category, month_filter = parse_category_filter(context.args)
    if month_filter:
        year, month = month_filter
        expenses = expense_service.expenses_by_category_in_month(category, year, month)
        title = f"Category {category} in {month}/{year}"
    else:
        expenses = expense_service.expenses_by_category(category)
        title = f"Category {category}"
    await update.message.reply_text(format_expense_list(title, expenses))


@replies_on_domain_errors
async def range_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /range <from> <to> - expenses dated within the range, inclusive."""
    if not context.args or len(context.args) < 2:
        await _usage(update, "Usage: /range <from> <to>\nExample: /range 2024-03-01 2024-03-31")
        return
    start, end = parse_date(context.args[0]), parse_date(context.args[1])
    expenses = expense_service.expenses_in_date_range(start, end)
    await update.message.reply_text(format_expense_list(f"From {start} to {end}", expenses))


@replies_on_domain_errors
async def method_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /method <payment method> - expenses paid a given way."""
    if not context.args:
        choices = ", ".join(m.value for m in PaymentMethod)
        await _usage(update, f"Usage: /method <payment method>\nOne of: {choices}")
        return
    method = PaymentMethod.parse(" ".join(context.args))
    expenses = expense_service.expenses_by_payment_method(method)
    await update.message.reply_text(format_expense_list(f"Paid by {method}", expenses))


@replies_on_domain_errors
async def location_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /location <text> - expenses whose location contains the text (any case)."""
    if not context.args:
        await _usage(update, "Usage: /location <text>\nExample: /location cafe")
        return
    fragment = " ".join(context.args)
    expenses = expense_service.expenses_by_location(fragment)
    await update.message.reply_text(format_expense_list(f"Location contains {fragment!r}", expenses))


# ── AGGREGATES ────────────────────────────────────────────

AGGREGATE_USAGE = (
    "Usage: /{cmd} <category|month|method|location> <value>\n"
    "Examples:\n"
    "  /{cmd} category Food\n"
    "  /{cmd} month 2024 3\n"
    "  /{cmd} method cash\n"
    "  /{cmd} location cafe"
)


def _aggregate(kind: str, args: list[str]) -> tuple[str, Decimal]:
    """
    Run the named total/average query for '/<kind> <dimension> <value>'.

    Returns:
        (label, value) where label describes the slice.
    """
    dimension, rest = parse_dimension(args)
    if dimension == "month":
        year, month = parse_year_month(rest)
        label = f"{month}/{year}"
        value = (expense_service.total_in_month if kind == "total" else expense_service.average_in_month)(year, month)
    elif dimension == "method":
        method = PaymentMethod.parse(" ".join(rest))
        label = f"payment method {method}"
        value = (
            expense_service.total_by_payment_method if kind == "total"
            else expense_service.average_by_payment_method
        )(method)
    elif dimension == "location":
        fragment = " ".join(rest)
        label = f"location containing {fragment!r}"
        value = (
            expense_service.total_by_location if kind == "total"
            else expense_service.average_by_location
        )(fragment)
    else:
        category = " ".join(rest)
        label = f"category {category}"
        value = (
            expense_service.total_by_category if kind == "total"
            else expense_service.average_by_category
        )(category)
    return label, value


@replies_on_domain_errors
async def total_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /total <dimension> <value> - sum of amounts for a slice."""
    if not context.args:
        await _usage(update, AGGREGATE_USAGE.format(cmd="total"))
        return
    label, value = _aggregate("total", context.args)
    await update.message.reply_text(f"Total for {label}: {format_money(value)}")


@replies_on_domain_errors
async def average_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /average <dimension> <value> - mean amount for a slice."""
    if not context.args:
        await _usage(update, AGGREGATE_USAGE.format(cmd="average"))
        return
    label, value = _aggregate("average", context.args)
    await update.message.reply_text(f"Average for {label}: {format_money(value)}")
