"""
services/recurring_service.py
------------------------------
Business logic for recurring expenses: managing definitions and catching
the ledger up with every period that has elapsed since the last run.
"""

import threading
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterator, Optional

from dateutil.relativedelta import relativedelta

from config import DEFAULT_CURRENCY
from db.connection import transaction
from models.expense import Expense
from models.recurring import DAILY, INTERVALS, MONTHLY, WEEKLY, RecurringExpense
from repositories.expense_repo import ExpenseRepository
from repositories.recurring_repo import RecurringRepository
from utils.dates import start_of_day
from utils.errors import (
    CatchUpError,
    ConfigurationError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from utils.logger import get_logger

logger = get_logger(__name__)

# One lock per owner: catch-ups for the same owner run one at a time,
# different owners run in parallel. Each entry is [lock, holders] and is
# dropped once no call holds or waits for it.
_owner_locks: dict[str, list] = {}
_registry_lock = threading.Lock()


@contextmanager
def _owner_lock(owner: str) -> Iterator[None]:
    with _registry_lock:
        entry = _owner_locks.setdefault(owner, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _registry_lock:
            entry[1] -= 1
            if entry[1] == 0:
                del _owner_locks[owner]


def next_due(reference: date, interval: str, anchor_day: int) -> date:
    """
    Advance `reference` by one interval.

    Monthly steps land on `anchor_day` (the start date's day of month),
    clamped to the last day of shorter months: Jan 31 → Feb 29 → Mar 31.

    Raises:
        ConfigurationError: If the interval is not daily, weekly or monthly.
    """
    if interval == DAILY:
        return reference + timedelta(days=1)
    if interval == WEEKLY:
        return reference + timedelta(days=7)
    if interval == MONTHLY:
        return reference + relativedelta(months=1, day=anchor_day)
    raise ConfigurationError(f"Unknown recurrence interval {interval!r}")


def due_dates(definition: RecurringExpense, today: date) -> list[date]:
    """
    Every due date of `definition` after its last-applied marker, up to
    and including `today`, oldest first.

    A definition that was never applied is first due on its start date.
    """
    if definition.interval not in INTERVALS:
        raise ConfigurationError(
            f"Unknown recurrence interval {definition.interval!r} on #{definition.id}"
        )
    anchor_day = definition.start_date.day
    if definition.last_applied_date is None:
        candidate = definition.start_date
    else:
        candidate = next_due(definition.last_applied_date, definition.interval, anchor_day)

    dates = []
    while candidate <= today:
        dates.append(candidate)
        candidate = next_due(candidate, definition.interval, anchor_day)
    return dates


class RecurringService:
    """
    Handles all business logic for recurring expenses.

    Responsibilities:
        - Create, list and delete recurring definitions.
        - Materialize every elapsed period as one ledger entry, exactly once.
    """

    def __init__(self, recurring_repo=None, expense_repo=None, transaction_factory=None):
        self.repo = recurring_repo or RecurringRepository()
        self.expense_repo = expense_repo or ExpenseRepository()
        self.transaction = transaction_factory or transaction

    # ── Catalog ───────────────────────────────────────────

    def add_definition(self, owner: str, category: str, amount, interval: str,
                       start_date: Optional[date] = None,
                       description: str = "") -> RecurringExpense:
        """
        Create a recurring expense definition.

        Raises:
            ValidationError: On a bad amount, blank category or unknown interval.
        """
        definition = RecurringExpense(
            owner=owner,
            category=category,
            amount=amount,
            interval=interval,
            start_date=start_date or date.today(),
            description=description,
        )
        if definition.interval not in INTERVALS:
            raise ValidationError(
                f"Interval must be one of {', '.join(INTERVALS)}, got {interval!r}"
            )
        return self.repo.add(definition)

    def list_definitions(self, owner: str) -> list[RecurringExpense]:
        """All recurring definitions of an owner."""
        return self.repo.get_all(owner)

    def delete_definition(self, owner: str, definition_id: int) -> None:
        """
        Delete one of the owner's definitions. Expenses it already generated stay.

        Raises:
            NotFoundError: If the owner has no definition with this id.
        """
        if not self.repo.delete(definition_id, owner):
            raise NotFoundError(f"Recurring expense #{definition_id} not found")

    def monthly_commitment(self, owner: str) -> Decimal:
        """Sum of all monthly definitions' amounts."""
        return sum(
            (d.amount for d in self.repo.get_all(owner) if d.interval == MONTHLY),
            Decimal("0.00"),
        )

    # ── Catch-up ──────────────────────────────────────────

    def apply_due(self, owner: str, today: Optional[date] = None,
                  timeout_ms: Optional[int] = None) -> int:
        """
        Write one expense per elapsed period of every definition of `owner`
        and advance each definition's last-applied marker.

        Each definition is caught up in its own transaction: its expenses
        and its new marker are committed together or not at all. Calling
        this again with the same `today` inserts nothing.

        Args:
            owner: Username.
            today: Reference date (default: today).
            timeout_ms: Statement timeout for each store transaction.

        Returns:
            Number of expenses inserted.

        Raises:
            CatchUpError: If the store failed for one or more definitions.
                The others are still processed and committed.
            StoreError: If the definitions cannot be listed at all.
        """
        if today is None:
            today = date.today()
        elif isinstance(today, datetime):
            today = today.date()

        inserted = 0
        failed: list[int] = []
        with _owner_lock(owner):
            for definition in self.repo.get_all(owner):
                try:
                    if not due_dates(definition, today):
                        continue
                    count = self._apply_definition(owner, definition.id, today, timeout_ms)
                except ConfigurationError as e:
                    logger.warning(f"Skipping recurring #{definition.id} for {owner}: {e}")
                    continue
                except StoreError as e:
                    logger.error(f"Catch-up of recurring #{definition.id} for {owner} failed: {e}")
                    failed.append(definition.id)
                    continue
                if count:
                    logger.info(
                        f"Applied {count} period(s) of '{definition.description}' "
                        f"(#{definition.id}) for {owner}"
                    )
                inserted += count

        if failed:
            raise CatchUpError(owner, inserted, failed)
        return inserted

    def _apply_definition(self, owner: str, definition_id: int, today: date,
                          timeout_ms: Optional[int]) -> int:
        """Catch up a single definition inside one locked transaction."""
        with self.transaction(timeout_ms=timeout_ms) as conn:
            definition = self.repo.get_for_update(definition_id, owner, conn)
            if definition is None:
                return 0
            dates = due_dates(definition, today)
            for due in dates:
                self.expense_repo.add(
                    Expense(
                        owner=owner,
                        category=definition.category,
                        amount=definition.amount,
                        currency=DEFAULT_CURRENCY,
                        date=start_of_day(due),
                    ),
                    conn=conn,
                )
            if dates:
                self.repo.update_last_applied(definition.id, dates[-1], conn=conn)
            return len(dates)
