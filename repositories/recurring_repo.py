"""
repositories/recurring_repo.py
-------------------------------
Data access layer for recurring expense definitions.
All SQL queries related to the `recurring_expenses` table live here.
"""

from datetime import date
from typing import Optional

from db.connection import transaction
from models.recurring import RecurringExpense
from utils.logger import get_logger

logger = get_logger(__name__)

_COLUMNS = (
    "id, username, description, amount, category, interval_type, "
    "start_date, last_applied_date, created_at"
)


class RecurringRepository:
    """Repository for CRUD operations on the recurring_expenses table."""

    # ── CREATE ────────────────────────────────────────────

    def add(self, definition: RecurringExpense) -> RecurringExpense:
        """
        Insert a new recurring expense definition.

        Returns:
            The same object with its `id` and `created_at` populated.
        """
        sql = """
            INSERT INTO recurring_expenses
                (username, description, amount, category, interval_type, start_date, last_applied_date)
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING id, created_at;
        """
        try:
            with transaction() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (
                        definition.owner, definition.description, definition.amount,
                        definition.category, definition.interval, definition.start_date,
                        definition.last_applied_date,
                    ))
                    row = cur.fetchone()
                    definition.id = row[0]
                    definition.created_at = row[1]
        except Exception as e:
            logger.error(f"Failed to add recurring expense: {e}")
            raise
        logger.info(f"Added recurring expense '{definition.description}' #{definition.id}")
        return definition

    # ── READ ──────────────────────────────────────────────

    def get_all(self, owner: str) -> list[RecurringExpense]:
        """Get all recurring definitions of an owner, oldest first."""
        sql = f"SELECT {_COLUMNS} FROM recurring_expenses WHERE username = %s ORDER BY id;"
        with transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (owner,))
                return [self._row_to_definition(r) for r in cur.fetchall()]

    def get_for_update(self, definition_id: int, owner: str, conn) -> Optional[RecurringExpense]:
        """
        Re-read a definition and lock its row until `conn` commits.

        Concurrent catch-ups of the same definition queue on this lock, so
        the second one sees the marker written by the first.
        """
        sql = f"SELECT {_COLUMNS} FROM recurring_expenses WHERE id = %s AND username = %s FOR UPDATE;"
        with conn.cursor() as cur:
            cur.execute(sql, (definition_id, owner))
            row = cur.fetchone()
            return self._row_to_definition(row) if row else None

    # ── UPDATE ────────────────────────────────────────────

    def update_last_applied(self, definition_id: int, last_applied: date, conn=None) -> bool:
        """
        Move the last-applied marker forward. Never moves it backwards.

        Returns:
            True if the marker changed.
        """
        sql = """
            UPDATE recurring_expenses SET last_applied_date = %s
            WHERE id = %s AND (last_applied_date IS NULL OR last_applied_date < %s);
        """
        with transaction(conn) as c:
            with c.cursor() as cur:
                cur.execute(sql, (last_applied, definition_id, last_applied))
                updated = cur.rowcount > 0
        if updated:
            logger.info(f"Recurring #{definition_id} last applied on {last_applied}")
        return updated

    # ── DELETE ────────────────────────────────────────────

    def delete(self, definition_id: int, owner: str) -> bool:
        """Delete a recurring definition by ID, scoped to its owner."""
        sql = "DELETE FROM recurring_expenses WHERE id = %s AND username = %s;"
        try:
            with transaction() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (definition_id, owner))
                    deleted = cur.rowcount > 0
        except Exception as e:
            logger.error(f"Failed to delete recurring #{definition_id}: {e}")
            raise
        if deleted:
            logger.info(f"Deleted recurring expense #{definition_id}")
        return deleted

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _row_to_definition(row: tuple) -> RecurringExpense:
        """Convert a database row tuple to a RecurringExpense domain object."""
        return RecurringExpense(
            id=row[0],
            owner=row[1],
            description=row[2],
            amount=row[3],
            category=row[4],
            interval=row[5],
            start_date=row[6],
            last_applied_date=row[7],
            created_at=row[8],
        )
