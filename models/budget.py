"""
models/budget.py
----------------
Domain model for monthly category budgets.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from models.expense import clean_category
from models.money import to_amount
from utils.errors import ValidationError


@dataclass
class Budget:
    """
    A monthly spending limit for one category. At most one per
    (owner, category) pair; setting it again replaces the limit.
    """
    owner: str
    category: str
    monthly_limit: Decimal
    id: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.owner:
            raise ValidationError("Owner is required.")
        self.category = clean_category(self.category)
        self.monthly_limit = to_amount(self.monthly_limit, "monthly_limit")
