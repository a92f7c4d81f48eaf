"""Tests for store selection."""

import pytest

from repositories.expense_repo import ExpenseRepository
from repositories.factory import get_repository
from repositories.memory_repo import InMemoryExpenseRepository


def test_memory_backend_is_shared():
    repo = get_repository("memory")
    assert isinstance(repo, InMemoryExpenseRepository)
    assert get_repository("memory") is repo


def test_postgres_backend():
    assert isinstance(get_repository("postgres"), ExpenseRepository)


def test_unknown_backend():
    with pytest.raises(ValueError):
        get_repository("sqlite")


def test_default_and_explicit_name_share_one_store(monkeypatch):
    monkeypatch.setattr("repositories.factory.STORAGE_BACKEND", "memory")
    repo = get_repository()
    assert get_repository("memory") is repo
    assert get_repository(" Memory ") is repo
