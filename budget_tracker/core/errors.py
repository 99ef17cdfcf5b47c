"""Exceptions raised by the budget tracker stores and aggregation code."""


class BudgetTrackerError(Exception):
    """Base class for all budget tracker errors."""


class ValidationError(BudgetTrackerError, ValueError):
    """Raised when a record to be written does not meet validation rules."""


class NotFoundError(BudgetTrackerError, LookupError):
    """Raised when a referenced transaction, budget or user does not exist."""


class InvalidBudget(BudgetTrackerError, ValueError):
    """Raised when a budget with a non-positive limit reaches the evaluator."""
