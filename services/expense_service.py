"""
services/expense_service.py
----------------------------
Business logic for recording and removing expenses.
"""

from datetime import datetime
from typing import Optional

from config import RECENT_EXPENSES_LIMIT
from db.connection import transaction
from models.expense import Expense, ExpenseFilter
from repositories.category_repo import CategoryRepository
from repositories.expense_repo import ExpenseRepository
from utils.errors import NotFoundError
from utils.logger import get_logger

logger = get_logger(__name__)


class ExpenseService:
    """
    Handles direct expense entry by a user.

    Workflow:
        1. Validate the input (the Expense model rejects bad values).
        2. Persist via the repository.
        3. Register a previously unseen category in the catalog, in the
           same transaction as the expense.
    """

    def __init__(self, expense_repo=None, category_repo=None, transaction_factory=None):
        self.repo = expense_repo or ExpenseRepository()
        self.category_repo = category_repo or CategoryRepository()
        self.transaction = transaction_factory or transaction

    def add_expense(self, owner: str, category: str, amount,
                    currency: Optional[str] = None,
                    receipt_path: Optional[str] = None,
                    when: Optional[datetime] = None) -> Expense:
        """
        Record an expense.

        Args:
            owner: Username.
            category: Spending category.
            amount: Positive amount; rounded to cents.
            currency: 3-letter code (default: INR).
            receipt_path: Optional receipt reference.
            when: Timestamp (default: now).

        Returns:
            The saved Expense with its id.

        Raises:
            ValidationError: On a non-positive amount, blank category or bad currency.
            StoreError: If either insert fails; nothing is saved.
        """
        expense = Expense(
            owner=owner,
            category=category,
            amount=amount,
            currency=currency,
            receipt_path=receipt_path,
            date=when or datetime.now(),
        )
        with self.transaction() as conn:
            saved = self.repo.add(expense, conn=conn)
            self.category_repo.add(saved.category, conn=conn)
        return saved

    def get_expense(self, owner: str, expense_id: int) -> Expense:
        """
        Raises:
            NotFoundError: If the owner has no expense with this id.
        """
        expense = self.repo.get_by_id(expense_id, owner)
        if expense is None:
            raise NotFoundError(f"Expense #{expense_id} not found")
        return expense

    def delete_expense(self, owner: str, expense_id: int) -> None:
        """
        Delete one of the owner's expenses.

        Raises:
            NotFoundError: If the owner has no expense with this id.
        """
        if not self.repo.delete(expense_id, owner):
            raise NotFoundError(f"Expense #{expense_id} not found")

    def recent_expenses(self, owner: str, limit: int = RECENT_EXPENSES_LIMIT) -> list[Expense]:
        """The owner's latest expenses, newest first."""
        return self.repo.search(owner, ExpenseFilter(), limit=limit)
