"""
repositories/expense_repo.py
-----------------------------
Data access layer for ledger entries.
All SQL queries related to the `expenses` table live here.
"""

from datetime import date
from typing import Optional

from db.connection import transaction
from models.expense import Expense, ExpenseFilter
from utils.dates import end_exclusive, start_of_day
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = "id, username, category, amount, currency, receipt_path, date, created_at"


def _like_pattern(keyword: str) -> str:
    """Escape LIKE wildcards so the keyword matches literally."""
    escaped = keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ExpenseRepository:
    """Repository for CRUD operations on the expenses table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, expense: Expense, conn=None) -> Expense:
        """
        Insert a new expense record.

        Args:
            expense: The Expense domain object to persist.
            conn: Optional open connection; the insert then joins its transaction.

        Returns:
            The same Expense with its `id` and `created_at` populated.
        """
        sql = """
            INSERT INTO expenses (username, category, amount, currency, receipt_path, date)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING id, created_at;
        """
        try:
            with transaction(conn) as c:
                with c.cursor() as cur:
                    cur.execute(sql, (
                        expense.owner, expense.category, expense.amount,
                        expense.currency, expense.receipt_path, expense.date,
                    ))
                    row = cur.fetchone()
                    expense.id = row[0]
                    expense.created_at = row[1]
        except Exception as e:
            logger.error(f"Failed to add expense for {expense.owner}: {e}")
            raise
        logger.info(f"Added expense #{expense.id} ({expense.category}) for {expense.owner}")
        return expense

    # ── READ ──────────────────────────────────────────────

    def get_by_id(self, expense_id: int, owner: str) -> Optional[Expense]:
        """
        Fetch a single expense by ID, scoped to its owner.

        Returns:
            An Expense object or None if not found.
        """
        sql = f"SELECT {_COLUMNS} FROM expenses WHERE id = %s AND username = %s;"
        with transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (expense_id, owner))
                row = cur.fetchone()
                return self._row_to_expense(row) if row else None

    def get_by_date_range(self, owner: str, start: date, end: date) -> list[Expense]:
        """
        Fetch all expenses for an owner within a date range.

        Args:
            owner: Username.
            start: First day (inclusive).
            end: Last day (inclusive, the whole day).

        Returns:
            List of Expense objects ordered by date descending.
        """
        sql = f"""
            SELECT {_COLUMNS} FROM expenses
            WHERE username = %s AND date >= %s AND date < %s
            ORDER BY date DESC, id DESC;
        """
        with transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (owner, start_of_day(start), end_exclusive(end)))
                return [self._row_to_expense(r) for r in cur.fetchall()]

    def search(self, owner: str, filters: ExpenseFilter, limit: Optional[int] = None) -> list[Expense]:
        """
        Fetch the owner's expenses matching every supplied filter.

        Returns:
            List of Expense objects ordered by date descending.
        """
        sql = f"SELECT {_COLUMNS} FROM expenses WHERE username = %s"
        params: list = [owner]
        if filters.category is not None:
            sql += " AND category = %s"
            params.append(filters.category)
        if filters.keyword is not None:
            sql += " AND category ILIKE %s ESCAPE '\\'"
            params.append(_like_pattern(filters.keyword))
        if filters.min_amount is not None:
            sql += " AND amount >= %s"
            params.append(filters.min_amount)
        if filters.max_amount is not None:
            sql += " AND amount <= %s"
            params.append(filters.max_amount)
        if filters.start_date is not None:
            sql += " AND date >= %s"
            params.append(start_of_day(filters.start_date))
        if filters.end_date is not None:
            sql += " AND date < %s"
            params.append(end_exclusive(filters.end_date))
        sql += " ORDER BY date DESC, id DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(limit)

        with transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql + ";", params)
                return [self._row_to_expense(r) for r in cur.fetchall()]

    # ── DELETE ────────────────────────────────────────────

    def delete(self, expense_id: int, owner: str) -> bool:
        """
        Delete an expense by ID, scoped to its owner.

        Returns:
            True if a row was deleted, False otherwise.
        """
        sql = "DELETE FROM expenses WHERE id = %s AND username = %s;"
        try:
            with transaction() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (expense_id, owner))
                    deleted = cur.rowcount > 0
        except Exception as e:
            logger.error(f"Failed to delete expense #{expense_id}: {e}")
            raise
        if deleted:
            logger.info(f"Deleted expense #{expense_id} for {owner}")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_expense(row: tuple) -> Expense:
        """Convert a database row tuple to an Expense domain object."""
        return Expense(
            id=row[0],
            owner=row[1],
            category=row[2],
            amount=row[3],
            currency=row[4],
            receipt_path=row[5],
            date=row[6],
            created_at=row[7],
        )
