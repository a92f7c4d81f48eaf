"""
repositories/expense_repo.py
-----------------------------
PostgreSQL data access layer for expenses.
All SQL queries related to the `expenses` table live here.
"""

from datetime import date

from db.connection import get_connection, release_connection
from models.expense import Expense, PaymentMethod, utc_now
from utils.exceptions import NotFoundError
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "id, amount, payment_method, expense_date, category, location, "
    "description, created_at, updated_at"
)


class ExpenseRepository:
    """Repository for CRUD operations and filtered queries on the expenses table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, expense: Expense) -> Expense:
        """
        Validate and insert a new expense.

        Args:
            expense: The Expense domain object to persist (id is ignored).

        Returns:
            The same Expense with `id`, `created_at` and `updated_at` populated.

        Raises:
            ValidationError: If the expense breaks an invariant.
        """
        expense.validate()
        now = utc_now()
        sql = f"""
            INSERT INTO expenses
                (amount, payment_method, expense_date, category, location,
                 description, created_at, updated_at)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {_COLUMNS};
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    expense.amount, expense.payment_method.value, expense.expense_date,
                    expense.category, expense.location, expense.description,
                    now, now,
                ))
                saved = self._row_to_expense(cur.fetchone())
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to add expense: {e}")
            raise
        finally:
            release_connection(conn)

        expense.id = saved.id
        expense.amount = saved.amount
        expense.created_at = saved.created_at
        expense.updated_at = saved.updated_at
        logger.info(f"Added expense #{expense.id} ({expense.amount} {expense.category})")
        return expense

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, expense_id: int) -> Expense:
        """
        Fetch a single expense by ID.

        Raises:
            NotFoundError: If no expense has that id.
        """
        rows = self._query(f"SELECT {_COLUMNS} FROM expenses WHERE id = %s;", (expense_id,))
        if not rows:
            raise NotFoundError(expense_id)
        return rows[0]

    def list_all(self) -> list[Expense]:
        """All expenses. Callers must not rely on the order."""
        return self._query(f"SELECT {_COLUMNS} FROM expenses ORDER BY id;")

    def list_all_by_date_desc(self) -> list[Expense]:
        """All expenses, most recent expense_date first; same-day ties in insertion order."""
        return self._query(f"SELECT {_COLUMNS} FROM expenses ORDER BY expense_date DESC, id ASC;")

    def find_by_category(self, category: str) -> list[Expense]:
        """Expenses whose category equals `category` exactly."""
        return self._query(
            f"SELECT {_COLUMNS} FROM expenses WHERE category = %s ORDER BY id;",
            (category,),
        )

    def find_by_date_range(self, start: date, end: date) -> list[Expense]:
        """
        Expenses dated within [start, end], both ends inclusive.
        A reversed range matches nothing.
        """
        return self._query(
            f"SELECT {_COLUMNS} FROM expenses WHERE expense_date BETWEEN %s AND %s ORDER BY id;",
            (start, end),
        )

    def find_by_payment_method(self, method: PaymentMethod) -> list[Expense]:
        """Expenses paid with `method`."""
        method = PaymentMethod.parse(method)
        return self._query(
            f"SELECT {_COLUMNS} FROM expenses WHERE payment_method = %s ORDER BY id;",
            (method.value,),
        )

    def find_by_location(self, fragment: str) -> list[Expense]:
        """
        Expenses whose location contains `fragment`, ignoring case.
        LIKE wildcards in the fragment are matched literally.
        """
        return self._query(
            f"SELECT {_COLUMNS} FROM expenses WHERE location ILIKE %s ESCAPE '\\' ORDER BY id;",
            (f"%{self._escape_like(fragment)}%",),
        )

    def find_by_category_and_date_range(self, category: str, start: date, end: date) -> list[Expense]:
        """Expenses in `category` dated within [start, end] inclusive."""
        return self._query(
            f"""
            SELECT {_COLUMNS} FROM expenses
            WHERE category = %s AND expense_date BETWEEN %s AND %s
            ORDER BY id;
            """,
            (category, start, end),
        )

    # ── UPDATE ────────────────────────────────────────────

    def update(self, expense_id: int, changes: Expense) -> Expense:
        """
        Overwrite every editable field of an existing expense.

        `id` and `created_at` are preserved; `updated_at` is refreshed and
        never moves backwards.

        Args:
            expense_id: Primary key of the expense to update.
            changes: Carrier of the new field values (its id/timestamps are ignored).

        Returns:
            The stored Expense after the update.

        Raises:
            ValidationError: If the new values break an invariant.
            NotFoundError: If no expense has that id.
        """
        changes.validate()
        sql = f"""
            UPDATE expenses
            SET amount = %s, payment_method = %s, expense_date = %s,
                category = %s, location = %s, description = %s,
                updated_at = GREATEST(%s, updated_at)
            WHERE id = %s
            RETURNING {_COLUMNS};
        """
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (
                    changes.amount, changes.payment_method.value, changes.expense_date,
                    changes.category, changes.location, changes.description,
                    utc_now(), expense_id,
                ))
                row = cur.fetchone()
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to update expense #{expense_id}: {e}")
            raise
        finally:
            release_connection(conn)

        if row is None:
            raise NotFoundError(expense_id)
        logger.info(f"Updated expense #{expense_id}")
        return self._row_to_expense(row)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, expense_id: int) -> None:
        """
        Permanently delete an expense.

        Raises:
            NotFoundError: If no expense has that id.
        """
        sql = "DELETE FROM expenses WHERE id = %s;"
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (expense_id,))
                deleted = cur.rowcount > 0
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Failed to delete expense #{expense_id}: {e}")
            raise
        finally:
            release_connection(conn)

        if not deleted:
            raise NotFoundError(expense_id)
        logger.info(f"Deleted expense #{expense_id}")

    # ── HELPERS ───────────────────────────────────────────

    def _query(self, sql: str, params: tuple = ()) -> list[Expense]:
        """Run a read-only query and map every row to an Expense."""
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                return [self._row_to_expense(r) for r in cur.fetchall()]
        finally:
            release_connection(conn)

    @staticmethod
    def _escape_like(fragment: str) -> str:
        return fragment.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

    @staticmethod
    def _row_to_expense(row: tuple) -> Expense:
        """Convert a database row tuple (in _COLUMNS order) to an Expense domain object."""
        return Expense(
            id=row[0],
            amount=row[1],
            payment_method=PaymentMethod(row[2]),
            expense_date=row[3],
            category=row[4],
            location=row[5],
            description=row[6],
            created_at=row[7],
            updated_at=row[8],
        )
