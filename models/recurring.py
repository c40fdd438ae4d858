"""
models/recurring.py
-------------------
Domain model for recurring expense definitions.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from models.expense import clean_category
from models.money import to_amount
from utils.errors import ValidationError

DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
INTERVALS = (DAILY, WEEKLY, MONTHLY)


@dataclass
class RecurringExpense:
    """
    Template for periodically generated expenses (rent, subscriptions, ...).

    Attributes:
        owner: Username the definition belongs to.
        category: Category given to every generated expense.
        amount: Positive amount of every generated expense.
        interval: 'daily' | 'weekly' | 'monthly'. Stored values are not
            checked here; the recurrence engine reports unknown ones.
        start_date: First due date.
        description: Friendly name (defaults to the category).
        last_applied_date: Last due date already written to the ledger.
        id: Database primary key (None for new records).
        created_at: Timestamp when the record was created.
    """
    owner: str
    category: str
    amount: Decimal
    interval: str
    start_date: date = field(default_factory=date.today)
    description: str = ""
    last_applied_date: Optional[date] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.owner:
            raise ValidationError("Owner is required.")
        self.category = clean_category(self.category)
        self.amount = to_amount(self.amount)
        self.interval = (self.interval or "").strip().lower()
        if isinstance(self.start_date, datetime):
            self.start_date = self.start_date.date()
        if isinstance(self.last_applied_date, datetime):
            self.last_applied_date = self.last_applied_date.date()
        self.description = (self.description or "").strip() or self.category
        if self.last_applied_date is not None and self.last_applied_date < self.start_date:
            raise ValidationError(
                f"last_applied_date {self.last_applied_date} is before start_date {self.start_date}"
            )

    def __str__(self) -> str:
        last = self.last_applied_date or "never"
        return (
            f"#{self.id} {self.description}: {self.amount:.2f} ({self.interval}) "
            f"from {self.start_date}, last applied {last}"
        )
