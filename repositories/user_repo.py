"""
repositories/user_repo.py
--------------------------
Data access layer for user records.
"""

from db.connection import transaction
from utils.logger import get_logger

logger = get_logger(__name__)


class UserRepository:
    """Repository for CRUD operations on the users table."""

    def ensure_user(self, username: str) -> dict:
        """
        Insert a user if they don't exist, or return the existing record.
        Uses PostgreSQL's ON CONFLICT (upsert) for atomicity.

        Returns:
            Dict with user data: {'id', 'username'}.
        """
        sql = """
            INSERT INTO users (username)
            VALUES (%s)
            ON CONFLICT (username) DO UPDATE SET username = EXCLUDED.username
            RETURNING id, username;
        """
        try:
            with transaction() as conn:
                with conn.cursor() as cur:
                    cur.execute(sql, (username,))
                    row = cur.fetchone()
        except Exception as e:
            logger.error(f"Failed to ensure user {username}: {e}")
            raise
        return {"id": row[0], "username": row[1]}

    def get_all_usernames(self) -> list[str]:
        """Every known username, in registration order."""
        with transaction() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT username FROM users ORDER BY id;")
                return [r[0] for r in cur.fetchall()]
