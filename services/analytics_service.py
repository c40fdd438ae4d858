"""
services/analytics_service.py
------------------------------
Read-only financial aggregates over an owner's ledger: monthly totals,
category breakdowns, trends, daily spending and spend predictions.

All aggregates are computed from the rows returned by the repository, so
ordering and tie-breaking are decided here and never by the database.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional

from config import PREDICTION_LOOKBACK_MONTHS, TREND_MONTHS
from models.expense import Expense, ExpenseFilter
from models.money import ZERO, round_half_up
from models.reports import MonthlyTrendPoint
from repositories.expense_repo import ExpenseRepository
from utils.dates import month_bounds, shift_month
from utils.errors import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

NO_CATEGORY = "N/A"
# Longest trend or prediction window accepted, in months.
MAX_WINDOW_MONTHS = 1200


def _check_month(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9999:
        raise ValidationError(f"Invalid year {year}")


def _check_window(months: int, name: str) -> None:
    if not 1 <= months <= MAX_WINDOW_MONTHS:
        raise ValidationError(
            f"{name} must be between 1 and {MAX_WINDOW_MONTHS}, got {months}"
        )


def _month_start(today: date, delta: int) -> date:
    """First day of the month `delta` months from today's month."""
    try:
        year, month = shift_month(today.year, today.month, delta)
    except ValueError as e:
        raise ValidationError(f"Window reaches outside the calendar from {today}") from e
    return date(year, month, 1)


def _ranked(totals: dict[str, Decimal]) -> dict[str, Decimal]:
    """Order category totals by amount descending, then by name."""
    return dict(sorted(totals.items(), key=lambda item: (-item[1], item[0])))


class AnalyticsService:
    """Computes aggregates for dashboards, reports and forecasts."""

    def __init__(self, expense_repo=None):
        self.repo = expense_repo or ExpenseRepository()

    def _month_expenses(self, owner: str, month: int, year: int) -> list[Expense]:
        _check_month(month, year)
        start, end = month_bounds(year, month)
        return self.repo.get_by_date_range(owner, start, end)

    # ── Monthly figures ───────────────────────────────────

    def total_for_month(self, owner: str, month: int, year: int) -> Decimal:
        """Sum of all expenses in a calendar month (0.00 if none)."""
        return sum((e.amount for e in self._month_expenses(owner, month, year)), ZERO)

    def expense_count_for_month(self, owner: str, month: int, year: int) -> int:
        """Number of expenses recorded in a calendar month."""
        return len(self._month_expenses(owner, month, year))

    def category_breakdown(self, owner: str, month: int, year: int) -> dict[str, Decimal]:
        """
        Spend per category for a calendar month.

        Returns:
            Ordered dict: largest total first, equal totals by category name.
            Empty if the month has no expenses.
        """
        totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for e in self._month_expenses(owner, month, year):
            totals[e.category] += e.amount
        return _ranked(totals)

    def top_category_for_month(self, owner: str, month: int, year: int) -> str:
        """
        Category with the largest spend in the month. On a tie the
        alphabetically first category wins. "N/A" when there is no spend.
        """
        breakdown = self.category_breakdown(owner, month, year)
        return next(iter(breakdown), NO_CATEGORY)

    def daily_spending(self, owner: str, month: int, year: int) -> dict[int, Decimal]:
        """Spend per day of month, only for days with spend, in day order."""
        daily: dict[int, Decimal] = defaultdict(lambda: ZERO)
        for e in self._month_expenses(owner, month, year):
            daily[e.date.day] += e.amount
        return dict(sorted(daily.items()))

    # ── Multi-month figures ───────────────────────────────

    def monthly_trend(self, owner: str, num_months: int = TREND_MONTHS,
                      today: Optional[date] = None) -> list[MonthlyTrendPoint]:
        """
        Monthly totals for the last `num_months` calendar months, ending
        with the current month, oldest first.

        Months without expenses are left out, so the series may have gaps.
        """
        _check_window(num_months, "num_months")
        today = today or date.today()
        start = _month_start(today, -(num_months - 1))
        end = month_bounds(today.year, today.month)[1]

        totals: dict[tuple[int, int], Decimal] = defaultdict(lambda: ZERO)
        for e in self.repo.get_by_date_range(owner, start, end):
            totals[(e.date.year, e.date.month)] += e.amount
        return [
            MonthlyTrendPoint(year=y, month=m, total=total)
            for (y, m), total in sorted(totals.items())
        ]

    def predictions(self, owner: str, lookback_months: int = PREDICTION_LOOKBACK_MONTHS,
                    today: Optional[date] = None) -> dict[str, Decimal]:
        """
        Expected monthly spend per category.

        The window is the `lookback_months` full calendar months before the
        current month. For each category the prediction is its total spend
        in the window divided by the number of months in which it had any
        spend, rounded half-up to cents. Categories with no spend in the
        window are left out.

        This is a plain historical average: no trend, weighting or
        seasonality is applied.

        Returns:
            Ordered dict: largest window total first, ties by category name.
        """
        _check_window(lookback_months, "lookback_months")
        today = today or date.today()
        start = _month_start(today, -lookback_months)
        last = _month_start(today, -1)
        end = month_bounds(last.year, last.month)[1]

        sums: dict[str, Decimal] = defaultdict(lambda: ZERO)
        active_months: dict[str, set[tuple[int, int]]] = defaultdict(set)
        for e in self.repo.get_by_date_range(owner, start, end):
            sums[e.category] += e.amount
            active_months[e.category].add((e.date.year, e.date.month))

        return {
            category: round_half_up(total / len(active_months[category]))
            for category, total in _ranked(sums).items()
        }

    def prediction_total(self, owner: str, lookback_months: int = PREDICTION_LOOKBACK_MONTHS,
                         today: Optional[date] = None) -> Decimal:
        """Sum of all category predictions."""
        return sum(self.predictions(owner, lookback_months, today).values(), ZERO)

    # ── Search ────────────────────────────────────────────

    def search_expenses(self, owner: str, filters: Optional[ExpenseFilter] = None,
                        limit: Optional[int] = None) -> list[Expense]:
        """
        The owner's expenses matching every supplied filter, newest first.
        No filters returns the whole ledger.
        """
        return self.repo.search(owner, filters or ExpenseFilter(), limit=limit)
