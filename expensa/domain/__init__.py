"""Domain models and types for expensa.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from expensa.domain.models import (
    Budget,
    Category,
    EntityId,
    Expense,
    LedgerState,
    Money,
    RecurringExpense,
    Settings,
    Subscription,
)

__all__ = [
    "Budget",
    "Category",
    "EntityId",
    "Expense",
    "LedgerState",
    "Money",
    "RecurringExpense",
    "Settings",
    "Subscription",
]
