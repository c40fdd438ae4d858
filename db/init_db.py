"""
db/init_db.py
-------------
Creates the database schema (tables) if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

from config import DEFAULT_CATEGORIES
from db.connection import transaction
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Users table: every other table is scoped to a username
CREATE TABLE IF NOT EXISTS users (
    id              SERIAL PRIMARY KEY,
    username        VARCHAR(50) UNIQUE NOT NULL,
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Expenses table: the ledger
CREATE TABLE IF NOT EXISTS expenses (
    id              SERIAL PRIMARY KEY,
    username        VARCHAR(50) NOT NULL REFERENCES users(username) ON DELETE CASCADE,
    category        VARCHAR(100) NOT NULL CHECK (btrim(category) <> ''),
    amount          NUMERIC(12,2) NOT NULL CHECK (amount > 0),
    currency        VARCHAR(3) NOT NULL DEFAULT 'INR',
    receipt_path    VARCHAR(255),
    date            TIMESTAMP NOT NULL DEFAULT NOW(),
    created_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Recurring expenses table: templates materialized by the recurrence engine.
-- No CHECK on interval_type: unknown values are reported and skipped at runtime.
CREATE TABLE IF NOT EXISTS recurring_expenses (
    id                  SERIAL PRIMARY KEY,
    username            VARCHAR(50) NOT NULL REFERENCES users(username) ON DELETE CASCADE,
    description         VARCHAR(255) NOT NULL,
    amount              NUMERIC(12,2) NOT NULL CHECK (amount > 0),
    category            VARCHAR(100) NOT NULL,
    interval_type       VARCHAR(20) NOT NULL,
    start_date          DATE NOT NULL,
    last_applied_date   DATE CHECK (last_applied_date IS NULL OR last_applied_date >= start_date),
    created_at          TIMESTAMPTZ DEFAULT NOW()
);

-- Budgets table: monthly spending limits per category
CREATE TABLE IF NOT EXISTS budgets (
    id              SERIAL PRIMARY KEY,
    username        VARCHAR(50) NOT NULL REFERENCES users(username) ON DELETE CASCADE,
    category        VARCHAR(100) NOT NULL,
    monthly_limit   NUMERIC(12,2) NOT NULL CHECK (monthly_limit > 0),
    UNIQUE(username, category)
);

-- Categories table: shared catalog offered when adding expenses
CREATE TABLE IF NOT EXISTS categories (
    id              SERIAL PRIMARY KEY,
    name            VARCHAR(100) UNIQUE NOT NULL
);

-- Indexes for faster queries
CREATE INDEX IF NOT EXISTS idx_expenses_user_date ON expenses(username, date);
CREATE INDEX IF NOT EXISTS idx_expenses_category ON expenses(username, category);
CREATE INDEX IF NOT EXISTS idx_recurring_user ON recurring_expenses(username);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables, then seed the default
    categories if the catalog is empty.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    try:
        with transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
                cur.execute("SELECT COUNT(*) FROM categories;")
                if cur.fetchone()[0] == 0:
                    cur.executemany(
                        "INSERT INTO categories (name) VALUES (%s) ON CONFLICT (name) DO NOTHING;",
                        [(name,) for name in DEFAULT_CATEGORIES],
                    )
        logger.info("Database schema initialized successfully.")
    except Exception as e:
        logger.error(f"Failed to initialize schema: {e}")
        raise


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
