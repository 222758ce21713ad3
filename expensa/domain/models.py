"""Domain type definitions for expensa.

These types form the ledger's data model:
- Money: Amount as a Decimal in the ledger's currency unit
- EntityId: Opaque, stable identifier of any entity
- Expense, Budget, RecurringExpense, Subscription, Category: ledger entities
- LedgerState: The immutable snapshot holding every collection plus Settings

Every dataclass is frozen and every collection is a tuple, so a snapshot can be
shared with readers while a new one is being built.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Literal, NewType

# Amounts are Decimals so sums never drift the way floats do
Money = NewType("Money", Decimal)

# Ids are opaque strings, compared only for equality
EntityId = NewType("EntityId", str)

Period = Literal["daily", "weekly", "monthly"]
Frequency = Literal["daily", "weekly", "monthly", "yearly"]
BillingCycle = Literal["monthly", "yearly"]
Theme = Literal["light", "dark"]

PERIODS: tuple[Period, ...] = ("daily", "weekly", "monthly")
FREQUENCIES: tuple[Frequency, ...] = ("daily", "weekly", "monthly", "yearly")
BILLING_CYCLES: tuple[BillingCycle, ...] = ("monthly", "yearly")


def new_id() -> EntityId:
    """Generate a fresh entity id."""
    return EntityId(uuid.uuid4().hex)


@dataclass(frozen=True)
class Expense:
    """Immutable expense record."""

    id: EntityId
    amount: Money
    description: str
    category: EntityId
    date: date
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class Budget:
    """Spending cap for a category over a period.

    start_date is informational: progress is always measured against the
    current period window.
    """

    id: EntityId
    category: EntityId
    amount: Money
    period: Period
    start_date: date


@dataclass(frozen=True)
class RecurringExpense:
    """Template that generates expenses on a schedule.

    end_date is inclusive: an occurrence falling on it is still generated.
    """

    id: EntityId
    amount: Money
    description: str
    category: EntityId
    frequency: Frequency
    start_date: date
    end_date: date | None = None


@dataclass(frozen=True)
class Subscription:
    """Tracked subscription. Never generates expenses on its own."""

    id: EntityId
    name: str
    amount: Money
    category: EntityId
    billing_cycle: BillingCycle
    start_date: date
    next_billing_date: date
    is_active: bool = True
    icon: str | None = None
    color: str | None = None


@dataclass(frozen=True)
class Category:
    """Immutable expense category."""

    id: EntityId
    name: str
    color: str
    icon: str | None = None


@dataclass(frozen=True)
class Settings:
    """Presentation and aggregation settings."""

    currency: str = "INR"
    theme: Theme = "light"
    date_format: str = "MM/dd/yyyy"


@dataclass(frozen=True)
class LedgerState:
    """One snapshot of the whole ledger.

    Insertion order of each collection is kept for display only.
    """

    expenses: tuple[Expense, ...] = ()
    budgets: tuple[Budget, ...] = ()
    recurring_expenses: tuple[RecurringExpense, ...] = ()
    subscriptions: tuple[Subscription, ...] = ()
    categories: tuple[Category, ...] = ()
    settings: Settings = field(default_factory=Settings)


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id=EntityId("1"), name="Food", color="#FF6B6B", icon="🍔"),
    Category(id=EntityId("2"), name="Transport", color="#4ECDC4", icon="🚗"),
    Category(id=EntityId("3"), name="Entertainment", color="#45B7D1", icon="🎬"),
    Category(id=EntityId("4"), name="Bills", color="#FFA07A", icon="💳"),
    Category(id=EntityId("5"), name="Shopping", color="#98D8C8", icon="🛍️"),
    Category(id=EntityId("6"), name="Other", color="#95A5A6", icon="📦"),
)

DEFAULT_SETTINGS = Settings()


def default_state() -> LedgerState:
    """Build the snapshot used when nothing has been persisted yet."""
    return LedgerState(categories=DEFAULT_CATEGORIES, settings=DEFAULT_SETTINGS)
