"""
utils/errors.py
---------------
Exception hierarchy shared by every layer.

    ValidationError     bad amount / category / date, rejected before the store
    NotFoundError       nothing matches owner + id for a scoped delete
    ConfigurationError  unknown recurrence interval
    StoreError          connectivity or timeout failure, safe to retry
"""


class ExpenseTrackerError(Exception):
    """Base class for all application errors."""


class ValidationError(ExpenseTrackerError, ValueError):
    """Raised when input data does not meet validation requirements."""


class NotFoundError(ExpenseTrackerError, LookupError):
    """Raised when no record owned by the caller matches the given id."""


class ConfigurationError(ExpenseTrackerError):
    """Raised when a stored definition carries a value the engine cannot interpret."""


class StoreError(ExpenseTrackerError):
    """Raised when the database is unreachable or a statement times out."""

    retryable = True


class CatchUpError(StoreError):
    """
    Raised by the recurrence engine when one or more definitions could not
    be caught up. Definitions that succeeded are already committed.

    Attributes:
        inserted: Number of expense records committed during the pass.
        failed: Ids of the definitions whose marker was left unchanged.
    """

    def __init__(self, owner: str, inserted: int, failed: list[int]):
        self.owner = owner
        self.inserted = inserted
        self.failed = failed
        super().__init__(
            f"Recurring catch-up for '{owner}' failed for definitions {failed} "
            f"({inserted} records committed)"
        )
