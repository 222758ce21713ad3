"""Commands accepted by the ledger state machine.

Each command describes one intended mutation and carries exactly the payload it
needs. Commands are immutable values; applying them never changes the command.
"""

from dataclasses import dataclass
from typing import Any, Union

from expensa.domain.models import (
    Budget,
    Category,
    EntityId,
    Expense,
    LedgerState,
    RecurringExpense,
    Subscription,
)


@dataclass(frozen=True)
class AddExpense:
    expense: Expense


@dataclass(frozen=True)
class UpdateExpense:
    expense: Expense


@dataclass(frozen=True)
class DeleteExpense:
    id: EntityId


@dataclass(frozen=True)
class SetBudget:
    """Upsert a budget by its (category, period) pair."""

    budget: Budget


@dataclass(frozen=True)
class UpdateBudget:
    budget: Budget


@dataclass(frozen=True)
class DeleteBudget:
    id: EntityId


@dataclass(frozen=True)
class AddRecurringExpense:
    recurring: RecurringExpense


@dataclass(frozen=True)
class UpdateRecurringExpense:
    recurring: RecurringExpense


@dataclass(frozen=True)
class DeleteRecurringExpense:
    id: EntityId


@dataclass(frozen=True)
class AddSubscription:
    subscription: Subscription


@dataclass(frozen=True)
class UpdateSubscription:
    subscription: Subscription


@dataclass(frozen=True)
class DeleteSubscription:
    id: EntityId


@dataclass(frozen=True)
class ToggleSubscription:
    """Flip is_active on a subscription."""

    id: EntityId


@dataclass(frozen=True)
class AddCategory:
    category: Category


@dataclass(frozen=True)
class UpdateCategory:
    category: Category


@dataclass(frozen=True)
class DeleteCategory:
    """Remove a category unless an expense, budget or recurring expense uses it."""

    id: EntityId


@dataclass(frozen=True)
class UpdateSettings:
    """Shallow-merge the given fields into Settings.

    Keys are Settings field names (currency, theme, date_format).
    """

    changes: dict[str, Any]


@dataclass(frozen=True)
class LoadState:
    """Replace the whole snapshot, e.g. after loading from storage."""

    state: LedgerState


Command = Union[
    AddExpense,
    UpdateExpense,
    DeleteExpense,
    SetBudget,
    UpdateBudget,
    DeleteBudget,
    AddRecurringExpense,
    UpdateRecurringExpense,
    DeleteRecurringExpense,
    AddSubscription,
    UpdateSubscription,
    DeleteSubscription,
    ToggleSubscription,
    AddCategory,
    UpdateCategory,
    DeleteCategory,
    UpdateSettings,
    LoadState,
]
