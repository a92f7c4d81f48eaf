"""
repositories/factory.py
-----------------------
Picks the store implementation named by STORAGE_BACKEND.
"""

from functools import lru_cache
from typing import Optional

from config import STORAGE_BACKEND
from utils.logger import get_logger

logger = get_logger(__name__)

BACKENDS = ("postgres", "memory")


def get_repository(backend: Optional[str] = None):
    """
    Return the process-wide store for `backend` (STORAGE_BACKEND when omitted).

    One instance per backend, so every service shares the same records
    (this matters for the in-memory store). Names are matched ignoring
    case and surrounding spaces.

    Raises:
        ValueError: If the backend name is unknown.
    """
    name = (backend if backend is not None else STORAGE_BACKEND).strip().lower()
    return _build_repository(name)


@lru_cache(maxsize=None)
def _build_repository(backend: str):
    if backend == "postgres":
        from repositories.expense_repo import ExpenseRepository
        repo = ExpenseRepository()
    elif backend == "memory":
        from repositories.memory_repo import InMemoryExpenseRepository
        repo = InMemoryExpenseRepository()
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND {backend!r} (expected one of {', '.join(BACKENDS)})")
    logger.info(f"Using {backend} expense store.")
    return repo
