"""
db/init_db.py
-------------
Creates the expenses table if it does not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from db.connection import get_connection, release_connection
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Expenses table: one row per recorded outflow of money
CREATE TABLE IF NOT EXISTS expenses (
    id              BIGSERIAL PRIMARY KEY,
    amount          NUMERIC(12,2) NOT NULL CHECK (amount > 0),
    payment_method  VARCHAR(20) NOT NULL CHECK (payment_method IN (
                        'CASH', 'DEBIT_CARD', 'CREDIT_CARD',
                        'BANK_TRANSFER', 'MOBILE_PAYMENT', 'PAYPAL')),
    expense_date    DATE NOT NULL,
    category        TEXT NOT NULL,
    location        TEXT NOT NULL,
    description     VARCHAR(280) NOT NULL CHECK (btrim(description) <> ''),
    created_at      TIMESTAMPTZ NOT NULL,
    updated_at      TIMESTAMPTZ NOT NULL,
    CHECK (created_at <= updated_at)
);

-- Earlier schemas capped category/location at VARCHAR(100)/VARCHAR(255)
ALTER TABLE expenses
    ALTER COLUMN category TYPE TEXT,
    ALTER COLUMN location TYPE TEXT;

-- Indexes for the filtered queries
CREATE INDEX IF NOT EXISTS idx_expenses_date ON expenses(expense_date);
CREATE INDEX IF NOT EXISTS idx_expenses_category_date ON expenses(category, expense_date);
CREATE INDEX IF NOT EXISTS idx_expenses_payment_method ON expenses(payment_method);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to initialize schema: {e}")
        raise
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
