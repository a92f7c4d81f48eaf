"""
handlers/errors.py
------------------
Decorator that turns domain errors into chat replies.
"""

from functools import wraps
from typing import Callable

from telegram import Update
from telegram.ext import ContextTypes

from utils.exceptions import NotFoundError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


def replies_on_domain_errors(func: Callable):
    """
    Decorator for command handlers.

    Usage:
        @replies_on_domain_errors
        async def my_handler(update, context):
            ...

    Behavior:
        - NotFoundError and ValidationError are answered in the chat and logged at INFO.
        - Any other exception propagates to the application's error handler.
    """
    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE, *args, **kwargs):
        try:
            return await func(update, context, *args, **kwargs)
        except NotFoundError as e:
            logger.info(f"{func.__name__}: {e}")
            await update.message.reply_text(f"Not found: expense #{e.expense_id} does not exist.")
        except ValidationError as e:
            logger.info(f"{func.__name__}: rejected input ({e})")
            await update.message.reply_text(f"Invalid input: {e.message}")

    return wrapper
