"""
main.py
-------
Entry point for the expense tracker core.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Run the session-start catch-up of recurring expenses for every user.

Usage:
    python main.py              → catch up as of today
    python main.py 2024-04-20   → catch up as of a given date
"""

import sys
from datetime import date

from db.connection import close_pool, init_pool
from db.init_db import create_tables
from repositories.user_repo import UserRepository
from services.session_service import SessionService
from utils.errors import StoreError
from utils.logger import get_logger

logger = get_logger(__name__)


def catch_up_all_users(today: date) -> int:
    """
    Start a session for every known user.

    A store failure for one user is logged and the next user is processed.

    Returns:
        Total number of expenses inserted.
    """
    session_service = SessionService()
    total = 0
    for username in UserRepository().get_all_usernames():
        try:
            total += session_service.start(username, today)
        except StoreError as e:
            logger.error(f"Catch-up for {username} failed, retry on next start: {e}")
    return total


def main() -> None:
    """Initialize the store and apply due recurring expenses."""
    today = date.fromisoformat(sys.argv[1]) if len(sys.argv) > 1 else date.today()

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    try:
        create_tables()

        # ── 2. Recurring catch-up ─────────────────────────
        logger.info(f"Applying recurring expenses due up to {today}...")
        total = catch_up_all_users(today)
        logger.info(f"Done: {total} recurring expense(s) applied.")
    finally:
        # ── 3. Cleanup ────────────────────────────────────
        close_pool()


if __name__ == "__main__":
    main()
