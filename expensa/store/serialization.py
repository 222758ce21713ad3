"""Conversion between LedgerState and its persisted JSON shape.

The persisted shape uses camelCase keys so blobs written by earlier versions of
the tracker load unchanged. Amounts are written as strings to keep Decimal
precision; collections missing from older blobs load as empty.
"""

from decimal import Decimal
from typing import Any

from expensa.dates import parse_date
from expensa.domain.models import (
    DEFAULT_SETTINGS,
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


def _money(value: Any) -> Money:
    return Money(Decimal(str(value)))


def expense_to_dict(expense: Expense, amount_as_number: bool = False) -> dict[str, Any]:
    """Convert an expense to a JSON-ready dictionary.

    Args:
        expense: Expense to convert.
        amount_as_number: Write the amount as a float instead of a string.

    Returns:
        Dictionary with id, amount, description, category, date, tags.
    """
    return {
        "id": expense.id,
        "amount": float(expense.amount) if amount_as_number else str(expense.amount),
        "description": expense.description,
        "category": expense.category,
        "date": expense.date.isoformat(),
        "tags": list(expense.tags),
    }


def expense_from_dict(data: dict[str, Any]) -> Expense:
    """Build an expense from its persisted dictionary."""
    return Expense(
        id=EntityId(str(data["id"])),
        amount=_money(data["amount"]),
        description=data["description"],
        category=EntityId(str(data["category"])),
        date=parse_date(data["date"]),
        tags=tuple(data.get("tags") or ()),
    )


def budget_to_dict(budget: Budget) -> dict[str, Any]:
    return {
        "id": budget.id,
        "category": budget.category,
        "amount": str(budget.amount),
        "period": budget.period,
        "startDate": budget.start_date.isoformat(),
    }


def budget_from_dict(data: dict[str, Any]) -> Budget:
    return Budget(
        id=EntityId(str(data["id"])),
        category=EntityId(str(data["category"])),
        amount=_money(data["amount"]),
        period=data["period"],
        start_date=parse_date(data["startDate"]),
    )


def recurring_to_dict(recurring: RecurringExpense) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": recurring.id,
        "amount": str(recurring.amount),
        "description": recurring.description,
        "category": recurring.category,
        "frequency": recurring.frequency,
        "startDate": recurring.start_date.isoformat(),
    }
    if recurring.end_date is not None:
        data["endDate"] = recurring.end_date.isoformat()
    return data


def recurring_from_dict(data: dict[str, Any]) -> RecurringExpense:
    end_date = data.get("endDate")
    return RecurringExpense(
        id=EntityId(str(data["id"])),
        amount=_money(data["amount"]),
        description=data["description"],
        category=EntityId(str(data["category"])),
        frequency=data["frequency"],
        start_date=parse_date(data["startDate"]),
        end_date=parse_date(end_date) if end_date else None,
    )


def subscription_to_dict(subscription: Subscription) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": subscription.id,
        "name": subscription.name,
        "amount": str(subscription.amount),
        "category": subscription.category,
        "billingCycle": subscription.billing_cycle,
        "startDate": subscription.start_date.isoformat(),
        "nextBillingDate": subscription.next_billing_date.isoformat(),
        "isActive": subscription.is_active,
    }
    if subscription.icon is not None:
        data["icon"] = subscription.icon
    if subscription.color is not None:
        data["color"] = subscription.color
    return data


def subscription_from_dict(data: dict[str, Any]) -> Subscription:
    return Subscription(
        id=EntityId(str(data["id"])),
        name=data["name"],
        amount=_money(data["amount"]),
        category=EntityId(str(data["category"])),
        billing_cycle=data["billingCycle"],
        start_date=parse_date(data["startDate"]),
        next_billing_date=parse_date(data["nextBillingDate"]),
        is_active=bool(data.get("isActive", True)),
        icon=data.get("icon"),
        color=data.get("color"),
    )


def category_to_dict(category: Category) -> dict[str, Any]:
    data: dict[str, Any] = {"id": category.id, "name": category.name, "color": category.color}
    if category.icon is not None:
        data["icon"] = category.icon
    return data


def category_from_dict(data: dict[str, Any]) -> Category:
    return Category(
        id=EntityId(str(data["id"])),
        name=data["name"],
        color=data["color"],
        icon=data.get("icon"),
    )


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    return {
        "currency": settings.currency,
        "theme": settings.theme,
        "dateFormat": settings.date_format,
    }


def settings_from_dict(data: dict[str, Any]) -> Settings:
    return Settings(
        currency=data.get("currency", DEFAULT_SETTINGS.currency),
        theme=data.get("theme", DEFAULT_SETTINGS.theme),
        date_format=data.get("dateFormat", DEFAULT_SETTINGS.date_format),
    )


def state_to_dict(state: LedgerState) -> dict[str, Any]:
    """Convert a snapshot to its persisted dictionary.

    Args:
        state: Snapshot to convert.

    Returns:
        JSON-ready dictionary.
    """
    return {
        "expenses": [expense_to_dict(e) for e in state.expenses],
        "budgets": [budget_to_dict(b) for b in state.budgets],
        "recurringExpenses": [recurring_to_dict(r) for r in state.recurring_expenses],
        "subscriptions": [subscription_to_dict(s) for s in state.subscriptions],
        "categories": [category_to_dict(c) for c in state.categories],
        "settings": settings_to_dict(state.settings),
    }


def state_from_dict(data: dict[str, Any]) -> LedgerState:
    """Build a snapshot from its persisted dictionary.

    Args:
        data: Dictionary as written by state_to_dict (or an older blob).

    Returns:
        LedgerState.

    Raises:
        KeyError: If a required entity field is missing.
        ValueError: If a date cannot be parsed.
        decimal.InvalidOperation: If an amount cannot be parsed.
    """
    return LedgerState(
        expenses=tuple(expense_from_dict(e) for e in data.get("expenses", [])),
        budgets=tuple(budget_from_dict(b) for b in data.get("budgets", [])),
        recurring_expenses=tuple(recurring_from_dict(r) for r in data.get("recurringExpenses", [])),
        subscriptions=tuple(subscription_from_dict(s) for s in data.get("subscriptions", [])),
        categories=tuple(category_from_dict(c) for c in data.get("categories", [])),
        settings=settings_from_dict(data.get("settings", {})),
    )
