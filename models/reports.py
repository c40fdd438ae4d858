"""
models/reports.py
-----------------
Derived values returned by the analytics and budget services.
None of these are persisted.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from models.expense import Expense


@dataclass(frozen=True)
class MonthlyTrendPoint:
    """Total spend of one calendar month."""
    year: int
    month: int
    total: Decimal


@dataclass(frozen=True)
class BudgetStatus:
    """Spent-vs-limit snapshot of one category for the current month."""
    category: str
    spent: Decimal
    limit: Decimal


@dataclass(frozen=True)
class BudgetAlert:
    """A budget whose usage reached the alert threshold."""
    category: str
    spent: Decimal
    limit: Decimal
    percent: float


@dataclass
class DashboardSummary:
    """Everything shown on the dashboard for one month."""
    year: int
    month: int
    monthly_total: Decimal
    top_category: str
    expense_count: int
    recent: list[Expense] = field(default_factory=list)
    budget_alerts: list[BudgetAlert] = field(default_factory=list)

    @property
    def label(self) -> str:
        """Human-readable month, e.g. 'April 2024'."""
        return date(self.year, self.month, 1).strftime("%B %Y")
