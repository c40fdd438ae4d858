"""
Shared fixtures: in-memory repositories standing in for PostgreSQL.

The fakes keep the same method signatures as the real repositories and a
`transaction()` context manager that restores a snapshot of the store when
the block raises, so rollback behaviour can be tested without a database.
"""

import copy
import itertools
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal

import pytest

from models.budget import Budget
from models.expense import Expense, ExpenseFilter
from models.recurring import RecurringExpense
from services.analytics_service import AnalyticsService
from services.budget_service import BudgetService
from services.category_service import CategoryService
from services.dashboard_service import DashboardService
from services.expense_service import ExpenseService
from services.export_service import ExportService
from services.recurring_service import RecurringService
from services.session_service import SessionService
from utils.dates import end_exclusive, start_of_day


class InMemoryStore:
    """Tables as plain Python collections."""

    def __init__(self):
        self.expenses: list[Expense] = []
        self.definitions: dict[int, RecurringExpense] = {}
        self.budgets: dict[tuple[str, str], Budget] = {}
        self.categories: set[str] = set()
        self.users: list[str] = []
        self.ids = itertools.count(1)
        self.transactions = 0

    @contextmanager
    def transaction(self, conn=None, timeout_ms=None):
        if conn is not None:
            yield conn
            return
        snapshot = copy.deepcopy((self.expenses, self.definitions, self.categories))
        self.transactions += 1
        try:
            yield self
        except Exception:
            self.expenses, self.definitions, self.categories = snapshot
            raise


def matches(filters: ExpenseFilter, expense: Expense) -> bool:
    """In-memory counterpart of the WHERE clause built by ExpenseRepository.search."""
    if filters.category is not None and expense.category != filters.category:
        return False
    if filters.keyword is not None and filters.keyword.lower() not in expense.category.lower():
        return False
    if filters.min_amount is not None and expense.amount < filters.min_amount:
        return False
    if filters.max_amount is not None and expense.amount > filters.max_amount:
        return False
    if filters.start_date is not None and expense.date < start_of_day(filters.start_date):
        return False
    if filters.end_date is not None and expense.date >= end_exclusive(filters.end_date):
        return False
    return True


class FakeExpenseRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    def add(self, expense: Expense, conn=None) -> Expense:
        expense.id = next(self.store.ids)
        expense.created_at = datetime.now()
        self.store.expenses.append(copy.copy(expense))
        return expense

    def get_by_id(self, expense_id, owner):
        for e in self.store.expenses:
            if e.id == expense_id and e.owner == owner:
                return copy.copy(e)
        return None

    def get_by_date_range(self, owner, start: date, end: date):
        return self.search(owner, ExpenseFilter(start_date=start, end_date=end))

    def search(self, owner, filters: ExpenseFilter, limit=None):
        rows = [
            copy.copy(e) for e in self.store.expenses
            if e.owner == owner and matches(filters, e)
        ]
        rows.sort(key=lambda e: (e.date, e.id), reverse=True)
        return rows[:limit] if limit is not None else rows

    def delete(self, expense_id, owner) -> bool:
        before = len(self.store.expenses)
        self.store.expenses = [
            e for e in self.store.expenses
            if not (e.id == expense_id and e.owner == owner)
        ]
        return len(self.store.expenses) < before


class FakeRecurringRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store
        self.marker_writes = 0

    def add(self, definition: RecurringExpense) -> RecurringExpense:
        definition.id = next(self.store.ids)
        self.store.definitions[definition.id] = copy.copy(definition)
        return definition

    def get_all(self, owner):
        return [
            copy.copy(d) for _, d in sorted(self.store.definitions.items())
            if d.owner == owner
        ]

    def get_for_update(self, definition_id, owner, conn):
        d = self.store.definitions.get(definition_id)
        return copy.copy(d) if d is not None and d.owner == owner else None

    def update_last_applied(self, definition_id, last_applied, conn=None) -> bool:
        d = self.store.definitions[definition_id]
        self.marker_writes += 1
        if d.last_applied_date is None or d.last_applied_date < last_applied:
            d.last_applied_date = last_applied
            return True
        return False

    def delete(self, definition_id, owner) -> bool:
        d = self.store.definitions.get(definition_id)
        if d is None or d.owner != owner:
            return False
        del self.store.definitions[definition_id]
        return True


class FakeBudgetRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    def set_budget(self, budget: Budget) -> Budget:
        key = (budget.owner, budget.category)
        existing = self.store.budgets.get(key)
        budget.id = existing.id if existing else next(self.store.ids)
        self.store.budgets[key] = copy.copy(budget)
        return budget

    def get_all_budgets(self, owner):
        return [copy.copy(b) for (o, _), b in self.store.budgets.items() if o == owner]

    def delete_budget(self, owner, category) -> bool:
        return self.store.budgets.pop((owner, category), None) is not None


class FakeCategoryRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    def get_all(self):
        return sorted(self.store.categories)

    def add(self, name, conn=None) -> bool:
        if name in self.store.categories:
            return False
        self.store.categories.add(name)
        return True

    def delete(self, name) -> bool:
        if name not in self.store.categories:
            return False
        self.store.categories.remove(name)
        return True


class FakeUserRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    def ensure_user(self, username):
        if username not in self.store.users:
            self.store.users.append(username)
        return {"id": self.store.users.index(username) + 1, "username": username}

    def get_all_usernames(self):
        return list(self.store.users)


# ── Fixtures ──────────────────────────────────────────────


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def expense_repo(store):
    return FakeExpenseRepository(store)


@pytest.fixture
def recurring_repo(store):
    return FakeRecurringRepository(store)


@pytest.fixture
def budget_repo(store):
    return FakeBudgetRepository(store)


@pytest.fixture
def category_repo(store):
    return FakeCategoryRepository(store)


@pytest.fixture
def recurring_service(store, recurring_repo, expense_repo):
    return RecurringService(
        recurring_repo=recurring_repo,
        expense_repo=expense_repo,
        transaction_factory=store.transaction,
    )


@pytest.fixture
def analytics(expense_repo):
    return AnalyticsService(expense_repo=expense_repo)


@pytest.fixture
def budget_service(budget_repo, analytics):
    return BudgetService(budget_repo=budget_repo, analytics=analytics)


@pytest.fixture
def expense_service(store, expense_repo, category_repo):
    return ExpenseService(
        expense_repo=expense_repo,
        category_repo=category_repo,
        transaction_factory=store.transaction,
    )


@pytest.fixture
def category_service(category_repo):
    return CategoryService(category_repo=category_repo)


@pytest.fixture
def dashboard_service(analytics, budget_service, expense_service):
    return DashboardService(
        analytics=analytics,
        budget_service=budget_service,
        expense_service=expense_service,
        alert_threshold=80,
    )


@pytest.fixture
def export_service(expense_repo):
    return ExportService(expense_repo=expense_repo)


@pytest.fixture
def session_service(store, recurring_service):
    return SessionService(user_repo=FakeUserRepository(store), recurring_service=recurring_service)


@pytest.fixture
def add_expense(expense_repo):
    """Insert a ledger row directly: add_expense("alice", "Food", "12.50", datetime(...))."""
    def _add(owner, category, amount, when):
        if not isinstance(when, datetime):
            when = datetime.combine(when, datetime.min.time())
        return expense_repo.add(
            Expense(owner=owner, category=category, amount=Decimal(str(amount)), date=when)
        )
    return _add
