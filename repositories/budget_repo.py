"""
repositories/budget_repo.py
-----------------------------
Data access layer for monthly budgets.
"""

from db.connection import transaction
from models.budget import Budget
from utils.logger import get_logger

logger = get_logger(__name__)


class BudgetRepository:
    """Repository for CRUD operations on the budgets table."""

    def set_budget(self, budget: Budget) -> Budget:
        """Set or update the limit for a category."""
        sql = """
            INSERT INTO budgets (username, category, monthly_limit)
            VALUES (%s, %s, %s)
            ON CONFLICT (username, category)
            DO UPDATE SET monthly_limit = EXCLUDED.monthly_limit
            RETURNING id;
        """
        try:
            with transaction() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (budget.owner, budget.category, budget.monthly_limit))
                    budget.id = cur.fetchone()[0]
        except Exception as e:
            logger.error(f"Failed to set budget: {e}")
            raise
        return budget

    def get_all_budgets(self, owner: str) -> list[Budget]:
        """Get all budget limits of an owner."""
        sql = "SELECT id, username, category, monthly_limit FROM budgets WHERE username = %s ORDER BY category;"
        with transaction() as conn:
            with conn.cursor() as cur:
                cur.execute(sql, (owner,))
                return [self._row_to_budget(r) for r in cur.fetchall()]

    def delete_budget(self, owner: str, category: str) -> bool:
        """Delete the budget limit of a category."""
        sql = "DELETE FROM budgets WHERE username = %s AND category = %s;"
        try:
            with transaction() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (owner, category))
                    return cur.rowcount > 0
        except Exception as e:
            logger.error(f"Failed to delete budget: {e}")
            raise

    @staticmethod
    def _row_to_budget(row: tuple) -> Budget:
        return Budget(id=row[0], owner=row[1], category=row[2], monthly_limit=row[3])
