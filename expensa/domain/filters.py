"""Pure functions for searching and ordering expenses.

Every criterion is optional and inert by default; active criteria combine with
logical AND. Sorting is stable, so ties keep the collection's original order.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Literal

from expensa.domain.models import EntityId, Expense, Money

SortKey = Literal["date", "amount", "category"]
SortOrder = Literal["asc", "desc"]

SORT_KEYS: tuple[SortKey, ...] = ("date", "amount", "category")


@dataclass(frozen=True)
class ExpenseFilters:
    """Immutable search criteria.

    A min_amount or max_amount of 0 means the bound is unset.
    """

    query: str = ""
    category: EntityId | None = None
    date_from: date | None = None
    date_to: date | None = None
    min_amount: Money = Money(Decimal("0"))
    max_amount: Money = Money(Decimal("0"))
    sort_by: SortKey = "date"
    sort_order: SortOrder = "desc"


def matches_query(expense: Expense, query: str) -> bool:
    """Check case-insensitive substring match against description or any tag.

    Args:
        expense: Expense to test.
        query: Search text (empty matches everything).

    Returns:
        True if the description or a tag contains the query.
    """
    if not query:
        return True
    needle = query.lower()
    return needle in expense.description.lower() or any(needle in tag.lower() for tag in expense.tags)


def build_predicates(filters: ExpenseFilters) -> list[Callable[[Expense], bool]]:
    """Turn active criteria into predicates.

    Args:
        filters: Search criteria.

    Returns:
        List of predicates, one per active criterion.
    """
    predicates: list[Callable[[Expense], bool]] = []

    if filters.query:
        predicates.append(lambda e: matches_query(e, filters.query))
    if filters.category:
        predicates.append(lambda e: e.category == filters.category)
    if filters.date_from is not None:
        predicates.append(lambda e: e.date >= filters.date_from)  # type: ignore[operator]
    if filters.date_to is not None:
        predicates.append(lambda e: e.date <= filters.date_to)  # type: ignore[operator]
    if filters.min_amount > 0:
        predicates.append(lambda e: e.amount >= filters.min_amount)
    if filters.max_amount > 0:
        predicates.append(lambda e: e.amount <= filters.max_amount)

    return predicates


def sort_key(key: SortKey) -> Callable[[Expense], Any]:
    """Return the single-key comparator value for a sort key."""
    if key == "amount":
        return lambda e: e.amount
    if key == "category":
        return lambda e: e.category
    return lambda e: e.date


def filter_expenses(expenses: Iterable[Expense], filters: ExpenseFilters | None = None) -> list[Expense]:
    """Filter and order expenses.

    Args:
        expenses: Expense collection (left untouched).
        filters: Search criteria. Defaults to no filtering, newest first.

    Returns:
        New list of matching expenses in the requested order.
    """
    if filters is None:
        filters = ExpenseFilters()

    predicates = build_predicates(filters)
    matched = [expense for expense in expenses if all(p(expense) for p in predicates)]

    # reverse=True keeps ties in insertion order
    return sorted(matched, key=sort_key(filters.sort_by), reverse=filters.sort_order == "desc")
