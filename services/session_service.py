"""
services/session_service.py
----------------------------
Work done once when a user's session starts (login or process boot).
"""

from datetime import date
from typing import Optional

from repositories.user_repo import UserRepository
from services.recurring_service import RecurringService
from utils.logger import get_logger

logger = get_logger(__name__)


class SessionService:
    """Registers the user and brings their recurring expenses up to date."""

    def __init__(self, user_repo=None, recurring_service=None):
        self.user_repo = user_repo or UserRepository()
        self.recurring_service = recurring_service or RecurringService()

    def start(self, owner: str, today: Optional[date] = None,
              timeout_ms: Optional[int] = None) -> int:
        """
        Ensure `owner` exists, then catch up their recurring expenses.

        Returns:
            Number of expenses the catch-up inserted.

        Raises:
            StoreError: If the store is unavailable; the session should retry.
        """
        self.user_repo.ensure_user(owner)
        inserted = self.recurring_service.apply_due(owner, today, timeout_ms=timeout_ms)
        logger.info(f"Session started for {owner}: {inserted} recurring expense(s) applied")
        return inserted
