"""
services/budget_service.py
---------------------------
Business logic for monthly budget limits and tracking.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from models.budget import Budget
from models.expense import clean_category
from models.money import ZERO
from models.reports import BudgetStatus
from repositories.budget_repo import BudgetRepository
from services.analytics_service import AnalyticsService
from utils.errors import NotFoundError
from utils.logger import get_logger

logger = get_logger(__name__)


class BudgetService:
    """
    Manages monthly budget limits and reports spending against them.

    Alert thresholds are not decided here: `budget_status` only supplies
    (category, spent, limit) and callers derive percentages and alerts.
    """

    def __init__(self, budget_repo=None, analytics=None):
        self.budget_repo = budget_repo or BudgetRepository()
        self.analytics = analytics or AnalyticsService()

    def set_budget(self, owner: str, category: str, limit) -> Budget:
        """
        Set the monthly limit of a category, replacing any existing limit.

        Raises:
            ValidationError: On a blank category or non-positive limit.
        """
        budget = self.budget_repo.set_budget(
            Budget(owner=owner, category=category, monthly_limit=limit)
        )
        logger.info(f"Budget for '{budget.category}' set to {budget.monthly_limit} for {owner}")
        return budget

    def delete_budget(self, owner: str, category: str) -> None:
        """
        Remove the limit of a category.

        Raises:
            NotFoundError: If the owner has no budget for this category.
        """
        category = clean_category(category)
        if not self.budget_repo.delete_budget(owner, category):
            raise NotFoundError(f"No budget set for category '{category}'")

    def list_budgets(self, owner: str) -> list[Budget]:
        """All budgets of an owner, ordered by category name."""
        return sorted(self.budget_repo.get_all_budgets(owner), key=lambda b: b.category)

    def budget_status(self, owner: str, today: Optional[date] = None) -> list[BudgetStatus]:
        """
        Spending of the current month against every budget.

        Returns:
            One entry per budget, ordered by category name. Categories with
            no spend this month report 0.00.
        """
        today = today or date.today()
        budgets = self.list_budgets(owner)
        if not budgets:
            return []
        spending: dict[str, Decimal] = self.analytics.category_breakdown(owner, today.month, today.year)
        return [
            BudgetStatus(
                category=b.category,
                spent=spending.get(b.category, ZERO),
                limit=b.monthly_limit,
            )
            for b in budgets
        ]
