"""
repositories/category_repo.py
------------------------------
Data access layer for the shared category catalog.
"""

from db.connection import transaction
from utils.logger import get_logger

logger = get_logger(__name__)


class CategoryRepository:
    """Repository for the categories table."""

    def get_all(self) -> list[str]:
        """All category names, alphabetically."""
        with transaction() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT name FROM categories ORDER BY name;")
                return [r[0] for r in cur.fetchall()]

    def add(self, name: str, conn=None) -> bool:
        """
        Register a category.

        Args:
            name: Category name.
            conn: Optional open connection; the insert then joins its transaction.

        Returns:
            True if it was new, False if it already existed.
        """
        sql = "INSERT INTO categories (name) VALUES (%s) ON CONFLICT (name) DO NOTHING;"
        with transaction(conn) as c:
            with c.cursor() as cur:
                cur.execute(sql, (name,))
                added = cur.rowcount > 0
        if added:
            logger.info(f"Added category '{name}'")
        return added

    def delete(self, name: str) -> bool:
        """Remove a category from the catalog. Existing expenses keep their category."""
        with transaction() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM categories WHERE name = %s;", (name,))
                return cur.rowcount > 0
