"""
models/expense.py
-----------------
Domain model for ledger entries and the filters used to search them.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from config import DEFAULT_CURRENCY
from models.money import to_amount, to_decimal
from utils.dates import start_of_day
from utils.errors import ValidationError


def clean_category(category: Optional[str]) -> str:
    """Strip a category name; blank names are rejected."""
    if category is None or not str(category).strip():
        raise ValidationError("Category cannot be empty.")
    return str(category).strip()


def clean_currency(currency: Optional[str]) -> str:
    """Normalize a 3-letter currency code; None means the default currency."""
    if currency is None:
        return DEFAULT_CURRENCY
    code = str(currency).strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValidationError(f"Currency must be a 3-letter code, got {currency!r}")
    return code


@dataclass
class Expense:
    """
    Represents a single expense in the ledger.

    Attributes:
        owner: Username the record belongs to.
        category: Spending category (e.g., Food, Rent).
        amount: Positive amount with two fractional digits.
        date: Timestamp of the expense.
        currency: ISO currency code (default: INR).
        receipt_path: Optional reference to a stored receipt.
        id: Database primary key (None for new records).
        created_at: Timestamp when the record was created.

    Raises:
        ValidationError: On a non-positive amount, blank category or bad currency.
    """
    owner: str
    category: str
    amount: Decimal
    date: datetime = field(default_factory=datetime.now)
    currency: str = DEFAULT_CURRENCY
    receipt_path: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.owner:
            raise ValidationError("Owner is required.")
        self.category = clean_category(self.category)
        self.amount = to_amount(self.amount)
        self.currency = clean_currency(self.currency)
        if not isinstance(self.date, datetime):
            if not isinstance(self.date, date):
                raise ValidationError(f"Date must be a date or datetime, got {self.date!r}")
            self.date = start_of_day(self.date)
        if self.receipt_path is not None and not self.receipt_path.strip():
            self.receipt_path = None

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency} | {self.category} | {self.date:%d-%m-%Y %H:%M}"


@dataclass
class ExpenseFilter:
    """
    Search criteria for ledger queries. Every field is optional; a missing
    (or blank) field places no constraint on the result.

    Attributes:
        category: Exact category name.
        keyword: Case-insensitive substring of the category name.
        min_amount: Inclusive lower bound on the amount.
        max_amount: Inclusive upper bound on the amount.
        start_date: First day included.
        end_date: Last day included (the whole day).
    """
    category: Optional[str] = None
    keyword: Optional[str] = None
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def __post_init__(self) -> None:
        self.category = self.category.strip() if self.category and self.category.strip() else None
        self.keyword = self.keyword.strip() if self.keyword and self.keyword.strip() else None
        if self.min_amount is not None:
            self.min_amount = to_decimal(self.min_amount, "min_amount")
        if self.max_amount is not None:
            self.max_amount = to_decimal(self.max_amount, "max_amount")
        if isinstance(self.start_date, datetime):
            self.start_date = self.start_date.date()
        if isinstance(self.end_date, datetime):
            self.end_date = self.end_date.date()
