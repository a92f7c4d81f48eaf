"""Tests for the PostgreSQL store, run against a mocked psycopg2 connection."""

from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import psycopg2
import pytest

from models.expense import PaymentMethod
from repositories.expense_repo import ExpenseRepository
from utils.exceptions import NotFoundError, ValidationError

CREATED = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
NOW = datetime(2024, 3, 2, 12, 30, tzinfo=timezone.utc)


def _row(expense_id=1, amount="10.00", method="CASH", day=date(2024, 3, 10),
         category="Food", location="Downtown Cafe", description="Lunch",
         created=CREATED, updated=CREATED):
    return (expense_id, Decimal(amount), method, day, category, location, description, created, updated)


@pytest.fixture
def cursor():
    return MagicMock()


@pytest.fixture
def conn(cursor, monkeypatch):
    connection = MagicMock()
    connection.cursor.return_value.__enter__.return_value = cursor
    monkeypatch.setattr("repositories.expense_repo.get_connection", lambda: connection)
    monkeypatch.setattr("repositories.expense_repo.release_connection", connection.released)
    monkeypatch.setattr("repositories.expense_repo.utc_now", lambda: NOW)
    return connection


@pytest.fixture
def pg_repo(conn) -> ExpenseRepository:
    return ExpenseRepository()


def _executed(cursor):
    sql, params = cursor.execute.call_args.args
    return " ".join(sql.split()), params


class TestAdd:
    def test_inserts_with_explicit_timestamps(self, pg_repo, conn, cursor, make_expense):
        cursor.fetchone.return_value = _row(expense_id=7, created=NOW, updated=NOW)
        expense = make_expense()

        saved = pg_repo.add(expense)

        sql, params = _executed(cursor)
        assert sql.startswith("INSERT INTO expenses")
        assert params == (Decimal("10.00"), "CASH", date(2024, 3, 10), "Food", "Downtown Cafe", "Lunch", NOW, NOW)
        assert saved is expense
        assert (saved.id, saved.created_at, saved.updated_at) == (7, NOW, NOW)
        conn.commit.assert_called_once()
        conn.released.assert_called_once_with(conn)

    def test_stored_amount_is_returned(self, pg_repo, cursor, make_expense):
        cursor.fetchone.return_value = _row(expense_id=8, amount="12.50", created=NOW, updated=NOW)
        saved = pg_repo.add(make_expense(amount="12.5"))
        assert str(saved.amount) == "12.50"

    @pytest.mark.parametrize("amount", ["0", "0.005", "10000000000"])
    def test_invalid_expense_never_reaches_the_database(self, pg_repo, conn, make_expense, amount):
        with pytest.raises(ValidationError):
            pg_repo.add(make_expense(amount=amount))
        conn.cursor.assert_not_called()

    def test_driver_errors_roll_back_and_propagate(self, pg_repo, conn, cursor, make_expense):
        cursor.execute.side_effect = psycopg2.OperationalError("connection lost")
        with pytest.raises(psycopg2.OperationalError):
            pg_repo.add(make_expense())
        conn.rollback.assert_called_once()
        conn.commit.assert_not_called()
        conn.released.assert_called_once_with(conn)


class TestRead:
    def test_get_by_id_maps_row(self, pg_repo, cursor):
        cursor.fetchall.return_value = [_row(expense_id=3, method="PAYPAL")]
        expense = pg_repo.get_by_id(3)
        assert expense.id == 3
        assert expense.payment_method is PaymentMethod.PAYPAL
        assert expense.amount == Decimal("10.00")
        assert _executed(cursor)[1] == (3,)

    def test_get_by_id_missing(self, pg_repo, cursor):
        cursor.fetchall.return_value = []
        with pytest.raises(NotFoundError):
            pg_repo.get_by_id(3)

    def test_date_descending_order(self, pg_repo, cursor):
        cursor.fetchall.return_value = []
        pg_repo.list_all_by_date_desc()
        assert "ORDER BY expense_date DESC, id ASC" in _executed(cursor)[0]

    def test_date_range_is_inclusive(self, pg_repo, cursor):
        cursor.fetchall.return_value = []
        pg_repo.find_by_date_range(date(2024, 2, 1), date(2024, 2, 29))
        sql, params = _executed(cursor)
        assert "expense_date BETWEEN %s AND %s" in sql
        assert params == (date(2024, 2, 1), date(2024, 2, 29))

    def test_payment_method_stored_by_name(self, pg_repo, cursor):
        cursor.fetchall.return_value = []
        pg_repo.find_by_payment_method("mobile payment")
        assert _executed(cursor)[1] == ("MOBILE_PAYMENT",)

    def test_location_is_case_insensitive_substring(self, pg_repo, cursor):
        cursor.fetchall.return_value = [_row()]
        found = pg_repo.find_by_location("Cafe")
        sql, params = _executed(cursor)
        assert "location ILIKE %s" in sql
        assert params == ("%Cafe%",)
        assert [e.location for e in found] == ["Downtown Cafe"]

    def test_location_escapes_like_wildcards(self, pg_repo, cursor):
        cursor.fetchall.return_value = []
        pg_repo.find_by_location("50%_off\\")
        assert _executed(cursor)[1] == ("%50\\%\\_off\\\\%",)

    def test_category_and_date_range(self, pg_repo, cursor):
        cursor.fetchall.return_value = []
        pg_repo.find_by_category_and_date_range("Food", date(2024, 3, 1), date(2024, 3, 31))
        sql, params = _executed(cursor)
        assert "category = %s AND expense_date BETWEEN %s AND %s" in sql
        assert params == ("Food", date(2024, 3, 1), date(2024, 3, 31))


class TestUpdate:
    def test_overwrites_fields_and_refreshes_updated_at(self, pg_repo, conn, cursor, make_expense):
        cursor.fetchone.return_value = _row(expense_id=4, amount="12.00", updated=NOW)
        updated = pg_repo.update(4, make_expense(amount="12.00"))

        sql, params = _executed(cursor)
        assert "updated_at = GREATEST(%s, updated_at)" in sql
        assert "created_at" not in sql.split("RETURNING")[0]
        assert params[-2:] == (NOW, 4)
        assert (updated.id, updated.created_at, updated.updated_at) == (4, CREATED, NOW)
        conn.commit.assert_called_once()

    def test_missing_id(self, pg_repo, conn, cursor, make_expense):
        cursor.fetchone.return_value = None
        with pytest.raises(NotFoundError):
            pg_repo.update(4, make_expense())
        conn.rollback.assert_not_called()
        conn.released.assert_called_once_with(conn)

    def test_invalid_values(self, pg_repo, conn, make_expense):
        with pytest.raises(ValidationError):
            pg_repo.update(4, make_expense(description=""))
        conn.cursor.assert_not_called()


class TestDelete:
    def test_deletes_row(self, pg_repo, conn, cursor):
        cursor.rowcount = 1
        pg_repo.delete(9)
        assert _executed(cursor) == ("DELETE FROM expenses WHERE id = %s;", (9,))
        conn.commit.assert_called_once()

    def test_missing_id(self, pg_repo, cursor):
        cursor.rowcount = 0
        with pytest.raises(NotFoundError):
            pg_repo.delete(9)
