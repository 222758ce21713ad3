"""Ledger state machine.

This module contains the functional core for ledger mutations:
- No I/O operations (no database, no console, no files)
- No side effects: every transition returns a new LedgerState
- Unknown ids and unrecognised commands are no-ops, never errors
- Easy to test

A transition that changes nothing returns the very same snapshot object, which
is how apply_checked reports rejected commands.
"""

from dataclasses import fields, replace
from typing import Any, Protocol, TypeVar

from expensa.domain.commands import (
    AddCategory,
    AddExpense,
    AddRecurringExpense,
    AddSubscription,
    Command,
    DeleteBudget,
    DeleteCategory,
    DeleteExpense,
    DeleteRecurringExpense,
    DeleteSubscription,
    LoadState,
    SetBudget,
    ToggleSubscription,
    UpdateBudget,
    UpdateCategory,
    UpdateExpense,
    UpdateRecurringExpense,
    UpdateSettings,
    UpdateSubscription,
)
from expensa.domain.models import Budget, EntityId, LedgerState, Settings


class _HasId(Protocol):
    @property
    def id(self) -> EntityId: ...


T = TypeVar("T", bound=_HasId)

SETTINGS_FIELDS = frozenset(f.name for f in fields(Settings))


def _replace_by_id(items: tuple[T, ...], item: T) -> tuple[T, ...]:
    """Replace every entry sharing item's id, or return items untouched."""
    if not any(existing.id == item.id for existing in items):
        return items
    return tuple(item if existing.id == item.id else existing for existing in items)


def _remove_by_id(items: tuple[T, ...], item_id: EntityId) -> tuple[T, ...]:
    """Drop entries with item_id, or return items untouched."""
    if not any(existing.id == item_id for existing in items):
        return items
    return tuple(existing for existing in items if existing.id != item_id)


def _with(state: LedgerState, **changes: Any) -> LedgerState:
    """Return a new snapshot only when some collection actually changed."""
    if all(getattr(state, name) is value for name, value in changes.items()):
        return state
    return replace(state, **changes)


def _upsert_budget(budgets: tuple[Budget, ...], budget: Budget) -> tuple[Budget, ...]:
    """Replace the first budget with the same (category, period), else append."""
    for index, existing in enumerate(budgets):
        if existing.category == budget.category and existing.period == budget.period:
            return budgets[:index] + (budget,) + budgets[index + 1 :]
    return budgets + (budget,)


def category_in_use(state: LedgerState, category_id: EntityId) -> bool:
    """Check whether any expense, budget or recurring expense references a category.

    Subscriptions are not considered.

    Args:
        state: Snapshot to inspect.
        category_id: Category id to look for.

    Returns:
        True if the category is referenced.
    """
    return (
        any(expense.category == category_id for expense in state.expenses)
        or any(budget.category == category_id for budget in state.budgets)
        or any(recurring.category == category_id for recurring in state.recurring_expenses)
    )


def _merge_settings(settings: Settings, changes: dict[str, Any]) -> Settings:
    known = {key: value for key, value in changes.items() if key in SETTINGS_FIELDS}
    merged = replace(settings, **known)
    return settings if merged == settings else merged


def apply(state: LedgerState, command: Command) -> LedgerState:
    """Apply one command to a snapshot.

    Deterministic and total: the same (state, command) always yields the same
    result, the input snapshot is never modified, and commands that cannot apply
    (unknown id, category in use, unrecognised command) return state unchanged.

    Args:
        state: Current snapshot.
        command: Mutation to apply.

    Returns:
        The next snapshot (the same object if nothing changed).
    """
    match command:
        case AddExpense(expense=expense):
            return replace(state, expenses=state.expenses + (expense,))
        case UpdateExpense(expense=expense):
            return _with(state, expenses=_replace_by_id(state.expenses, expense))
        case DeleteExpense(id=expense_id):
            return _with(state, expenses=_remove_by_id(state.expenses, expense_id))

        case SetBudget(budget=budget):
            return replace(state, budgets=_upsert_budget(state.budgets, budget))
        case UpdateBudget(budget=budget):
            return _with(state, budgets=_replace_by_id(state.budgets, budget))
        case DeleteBudget(id=budget_id):
            return _with(state, budgets=_remove_by_id(state.budgets, budget_id))

        case AddRecurringExpense(recurring=recurring):
            return replace(state, recurring_expenses=state.recurring_expenses + (recurring,))
        case UpdateRecurringExpense(recurring=recurring):
            return _with(state, recurring_expenses=_replace_by_id(state.recurring_expenses, recurring))
        case DeleteRecurringExpense(id=recurring_id):
            return _with(state, recurring_expenses=_remove_by_id(state.recurring_expenses, recurring_id))

        case AddSubscription(subscription=subscription):
            return replace(state, subscriptions=state.subscriptions + (subscription,))
        case UpdateSubscription(subscription=subscription):
            return _with(state, subscriptions=_replace_by_id(state.subscriptions, subscription))
        case DeleteSubscription(id=subscription_id):
            return _with(state, subscriptions=_remove_by_id(state.subscriptions, subscription_id))
        case ToggleSubscription(id=subscription_id):
            toggled = tuple(
                replace(sub, is_active=not sub.is_active) if sub.id == subscription_id else sub
                for sub in state.subscriptions
            )
            if toggled == state.subscriptions:
                return state
            return replace(state, subscriptions=toggled)

        case AddCategory(category=category):
            return replace(state, categories=state.categories + (category,))
        case UpdateCategory(category=category):
            return _with(state, categories=_replace_by_id(state.categories, category))
        case DeleteCategory(id=category_id):
            if category_in_use(state, category_id):
                return state
            return _with(state, categories=_remove_by_id(state.categories, category_id))

        case UpdateSettings(changes=changes):
            return _with(state, settings=_merge_settings(state.settings, changes))

        case LoadState(state=loaded):
            return loaded

        case _:
            return state


def apply_checked(state: LedgerState, command: Command) -> tuple[LedgerState, bool]:
    """Apply a command and report whether it changed anything.

    Args:
        state: Current snapshot.
        command: Mutation to apply.

    Returns:
        Tuple of (next_state, changed). changed is False for rejected or no-op commands.
    """
    new_state = apply(state, command)
    return new_state, new_state is not state


def apply_all(state: LedgerState, commands: list[Command]) -> LedgerState:
    """Replay a sequence of commands from a starting snapshot.

    Replaying the same commands from equal snapshots always yields equal
    results; this is the fold that determinism is checked against, and a way
    to rebuild a ledger from a recorded command history.

    Args:
        state: Starting snapshot.
        commands: Commands in the order they were dispatched.

    Returns:
        The final snapshot.
    """
    for command in commands:
        state = apply(state, command)
    return state
