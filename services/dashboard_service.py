"""
services/dashboard_service.py
------------------------------
Builds the monthly dashboard: totals, top category, recent expenses and
budget alerts. The alert threshold policy lives here, not in BudgetService.
"""

from datetime import date
from typing import Optional

from config import BUDGET_ALERT_THRESHOLD, RECENT_EXPENSES_LIMIT
from models.reports import BudgetAlert, BudgetStatus, DashboardSummary
from services.analytics_service import AnalyticsService
from services.budget_service import BudgetService
from services.expense_service import ExpenseService


def percent_used(status: BudgetStatus) -> float:
    """Share of the limit already spent, in percent."""
    if status.limit <= 0:
        return 0.0
    return float(status.spent / status.limit * 100)


def budget_alerts(statuses: list[BudgetStatus],
                  threshold: float = BUDGET_ALERT_THRESHOLD) -> list[BudgetAlert]:
    """Budgets whose usage is at or above `threshold` percent."""
    alerts = []
    for status in statuses:
        pct = percent_used(status)
        if pct >= threshold:
            alerts.append(BudgetAlert(
                category=status.category,
                spent=status.spent,
                limit=status.limit,
                percent=round(pct, 1),
            ))
    return alerts


class DashboardService:
    """Composes the analytics and budget services into one summary."""

    def __init__(self, analytics=None, budget_service=None, expense_service=None,
                 alert_threshold: float = BUDGET_ALERT_THRESHOLD):
        self.analytics = analytics or AnalyticsService()
        self.budget_service = budget_service or BudgetService(analytics=self.analytics)
        self.expense_service = expense_service or ExpenseService()
        self.alert_threshold = alert_threshold

    def summary(self, owner: str, today: Optional[date] = None,
                recent_limit: int = RECENT_EXPENSES_LIMIT) -> DashboardSummary:
        """Dashboard figures for the month containing `today`."""
        today = today or date.today()
        month, year = today.month, today.year
        return DashboardSummary(
            year=year,
            month=month,
            monthly_total=self.analytics.total_for_month(owner, month, year),
            top_category=self.analytics.top_category_for_month(owner, month, year),
            expense_count=self.analytics.expense_count_for_month(owner, month, year),
            recent=self.expense_service.recent_expenses(owner, recent_limit),
            budget_alerts=budget_alerts(
                self.budget_service.budget_status(owner, today), self.alert_threshold
            ),
        )
