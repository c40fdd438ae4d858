"""Tests for services.analytics_service aggregates."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from models.expense import ExpenseFilter
from models.reports import MonthlyTrendPoint
from utils.errors import ValidationError


class TestMonthlyFigures:
    """Tests for totals, breakdowns and the top category."""

    def test_empty_month(self, analytics) -> None:
        """No expenses: zero total, N/A top category, empty breakdown."""
        assert analytics.total_for_month("alice", 3, 2024) == Decimal("0")
        assert analytics.top_category_for_month("alice", 3, 2024) == "N/A"
        assert analytics.category_breakdown("alice", 3, 2024) == {}
        assert analytics.daily_spending("alice", 3, 2024) == {}
        assert analytics.expense_count_for_month("alice", 3, 2024) == 0

    def test_total_only_counts_the_month(self, analytics, add_expense) -> None:
        add_expense("alice", "Food", "10.25", datetime(2024, 3, 1, 0, 0))
        add_expense("alice", "Food", "4.75", datetime(2024, 3, 31, 23, 59))
        add_expense("alice", "Food", "100", datetime(2024, 2, 29, 23, 59))
        add_expense("alice", "Food", "100", datetime(2024, 4, 1, 0, 0))

        assert analytics.total_for_month("alice", 3, 2024) == Decimal("15.00")
        assert analytics.expense_count_for_month("alice", 3, 2024) == 2

    def test_scoped_to_owner(self, analytics, add_expense) -> None:
        add_expense("alice", "Food", "10", date(2024, 3, 5))
        add_expense("bob", "Food", "99", date(2024, 3, 5))

        assert analytics.total_for_month("alice", 3, 2024) == Decimal("10.00")
        assert analytics.category_breakdown("bob", 3, 2024) == {"Food": Decimal("99.00")}

    def test_breakdown_ordered_by_total_then_name(self, analytics, add_expense) -> None:
        add_expense("alice", "Transport", "30", date(2024, 3, 2))
        add_expense("alice", "Food", "20", date(2024, 3, 3))
        add_expense("alice", "Food", "30", date(2024, 3, 4))
        add_expense("alice", "Health", "30", date(2024, 3, 5))

        breakdown = analytics.category_breakdown("alice", 3, 2024)

        assert list(breakdown.items()) == [
            ("Food", Decimal("50.00")),
            ("Health", Decimal("30.00")),
            ("Transport", Decimal("30.00")),
        ]

    def test_total_equals_sum_of_breakdown(self, analytics, add_expense) -> None:
        for day, (category, amount) in enumerate(
            [("Food", "12.10"), ("Rent", "900"), ("Food", "7.35"), ("Other", "0.01")], start=1
        ):
            add_expense("alice", category, amount, date(2024, 5, day))

        breakdown = analytics.category_breakdown("alice", 5, 2024)

        assert analytics.total_for_month("alice", 5, 2024) == sum(breakdown.values())

    def test_top_category_tie_goes_to_alphabetically_first(self, analytics, add_expense) -> None:
        add_expense("alice", "Transport", "50", date(2024, 3, 2))
        add_expense("alice", "Entertainment", "50", date(2024, 3, 3))

        assert analytics.top_category_for_month("alice", 3, 2024) == "Entertainment"

    def test_daily_spending(self, analytics, add_expense) -> None:
        add_expense("alice", "Food", "5", datetime(2024, 3, 9, 8, 0))
        add_expense("alice", "Food", "7.50", datetime(2024, 3, 9, 20, 0))
        add_expense("alice", "Rent", "1000", datetime(2024, 3, 1, 0, 0))

        assert analytics.daily_spending("alice", 3, 2024) == {
            1: Decimal("1000.00"),
            9: Decimal("12.50"),
        }
        assert list(analytics.daily_spending("alice", 3, 2024)) == [1, 9]

    def test_rejects_invalid_month(self, analytics) -> None:
        with pytest.raises(ValidationError):
            analytics.total_for_month("alice", 13, 2024)


class TestMonthlyTrend:
    """Tests for monthly_trend."""

    def test_trailing_months_oldest_first_with_gaps(self, analytics, add_expense) -> None:
        add_expense("alice", "Food", "99", date(2023, 12, 31))  # before the window
        add_expense("alice", "Food", "10", date(2024, 1, 5))
        add_expense("alice", "Rent", "20", date(2024, 1, 20))
        add_expense("alice", "Food", "30", date(2024, 3, 7))
        add_expense("alice", "Food", "5", date(2024, 6, 30))

        trend = analytics.monthly_trend("alice", 6, today=date(2024, 6, 15))

        assert trend == [
            MonthlyTrendPoint(2024, 1, Decimal("30.00")),
            MonthlyTrendPoint(2024, 3, Decimal("30.00")),
            MonthlyTrendPoint(2024, 6, Decimal("5.00")),
        ]

    def test_window_crosses_year(self, analytics, add_expense) -> None:
        add_expense("alice", "Food", "10", date(2023, 11, 30))
        add_expense("alice", "Food", "10", date(2023, 12, 1))
        add_expense("alice", "Food", "20", date(2024, 1, 31))

        trend = analytics.monthly_trend("alice", 2, today=date(2024, 1, 1))

        assert [(p.year, p.month) for p in trend] == [(2023, 12), (2024, 1)]

    def test_empty_ledger(self, analytics) -> None:
        assert analytics.monthly_trend("alice", 6, today=date(2024, 6, 15)) == []

    def test_rejects_empty_window(self, analytics) -> None:
        with pytest.raises(ValidationError):
            analytics.monthly_trend("alice", 0)

    @pytest.mark.parametrize("num_months", [1201, 10**6])
    def test_rejects_oversized_window(self, analytics, num_months) -> None:
        with pytest.raises(ValidationError):
            analytics.monthly_trend("alice", num_months, today=date(2024, 6, 15))

    def test_rejects_window_before_year_one(self, analytics) -> None:
        with pytest.raises(ValidationError):
            analytics.monthly_trend("alice", 12, today=date(1, 3, 1))


class TestPredictions:
    """Tests for predictions."""

    def test_average_over_active_months(self, analytics, add_expense) -> None:
        """Food was active in two of three months: divide by two, not three."""
        add_expense("alice", "Food", "100", date(2024, 1, 10))
        add_expense("alice", "Food", "50", date(2024, 1, 20))
        add_expense("alice", "Food", "51", date(2024, 3, 10))
        add_expense("alice", "Rent", "1000", date(2024, 2, 1))

        predictions = analytics.predictions("alice", 3, today=date(2024, 4, 10))

        assert predictions == {
            "Rent": Decimal("1000.00"),
            "Food": Decimal("100.50"),
        }

    def test_rounds_half_up(self, analytics, add_expense) -> None:
        add_expense("alice", "Food", "0.01", date(2024, 1, 10))
        add_expense("alice", "Food", "0.02", date(2024, 2, 10))

        predictions = analytics.predictions("alice", 3, today=date(2024, 4, 10))

        assert predictions == {"Food": Decimal("0.02")}

    def test_excludes_current_month_and_older_activity(self, analytics, add_expense) -> None:
        add_expense("alice", "Travel", "500", date(2023, 12, 31))
        add_expense("alice", "Health", "80", date(2024, 4, 1))
        add_expense("alice", "Food", "30", date(2024, 3, 31))

        predictions = analytics.predictions("alice", 3, today=date(2024, 4, 10))

        assert predictions == {"Food": Decimal("30.00")}

    def test_never_exceeds_average_of_monthly_sums(self, analytics, add_expense) -> None:
        for month, amount in [(1, "10.10"), (2, "20.20"), (3, "33.33")]:
            add_expense("alice", "Food", amount, date(2024, month, 15))

        food = analytics.predictions("alice", 3, today=date(2024, 4, 1))["Food"]

        assert food <= (Decimal("10.10") + Decimal("20.20") + Decimal("33.33")) / 3 + Decimal("0.005")
        assert food == Decimal("21.21")

    def test_prediction_total(self, analytics, add_expense) -> None:
        add_expense("alice", "Food", "100", date(2024, 2, 10))
        add_expense("alice", "Rent", "1000", date(2024, 2, 1))

        assert analytics.prediction_total("alice", 3, today=date(2024, 4, 10)) == Decimal("1100.00")

    @pytest.mark.parametrize("lookback", [0, 1201, 10**6])
    def test_rejects_invalid_lookback(self, analytics, lookback) -> None:
        with pytest.raises(ValidationError):
            analytics.predictions("alice", lookback, today=date(2024, 4, 10))

    def test_rejects_lookback_before_year_one(self, analytics) -> None:
        with pytest.raises(ValidationError):
            analytics.predictions("alice", 1, today=date(1, 1, 15))

    def test_empty_window(self, analytics) -> None:
        assert analytics.predictions("alice", 3, today=date(2024, 4, 10)) == {}
        assert analytics.prediction_total("alice", 3, today=date(2024, 4, 10)) == Decimal("0")


class TestSearchExpenses:
    """Tests for search_expenses."""

    @pytest.fixture
    def ledger(self, add_expense):
        return [
            add_expense("alice", "Food", "12.50", datetime(2024, 3, 1, 9, 0)),
            add_expense("alice", "Fast Food", "8", datetime(2024, 3, 10, 13, 0)),
            add_expense("alice", "Rent", "1000", datetime(2024, 3, 15, 0, 0)),
            add_expense("alice", "Transport", "45", datetime(2024, 3, 31, 22, 30)),
            add_expense("bob", "Food", "5", datetime(2024, 3, 5, 12, 0)),
        ]

    def test_no_filters_returns_everything_newest_first(self, analytics, ledger) -> None:
        results = analytics.search_expenses("alice")
        assert [e.category for e in results] == ["Transport", "Rent", "Fast Food", "Food"]

    def test_category_is_exact(self, analytics, ledger) -> None:
        results = analytics.search_expenses("alice", ExpenseFilter(category="Food"))
        assert [e.amount for e in results] == [Decimal("12.50")]

    def test_keyword_is_case_insensitive_substring(self, analytics, ledger) -> None:
        results = analytics.search_expenses("alice", ExpenseFilter(keyword="food"))
        assert [e.category for e in results] == ["Fast Food", "Food"]

    def test_amount_bounds_are_inclusive(self, analytics, ledger) -> None:
        results = analytics.search_expenses(
            "alice", ExpenseFilter(min_amount="8", max_amount="45")
        )
        assert [e.amount for e in results] == [Decimal("45.00"), Decimal("8.00"), Decimal("12.50")]

    def test_end_date_includes_the_whole_day(self, analytics, ledger) -> None:
        results = analytics.search_expenses(
            "alice", ExpenseFilter(start_date=date(2024, 3, 10), end_date=date(2024, 3, 31))
        )
        assert [e.category for e in results] == ["Transport", "Rent", "Fast Food"]

    def test_blank_filters_mean_no_constraint(self, analytics, ledger) -> None:
        results = analytics.search_expenses("alice", ExpenseFilter(category="  ", keyword=""))
        assert len(results) == 4

    def test_filters_combine(self, analytics, ledger) -> None:
        results = analytics.search_expenses(
            "alice", ExpenseFilter(keyword="o", max_amount="20", start_date=date(2024, 3, 2))
        )
        assert [e.category for e in results] == ["Fast Food"]

    def test_limit(self, analytics, ledger) -> None:
        assert len(analytics.search_expenses("alice", limit=2)) == 2
