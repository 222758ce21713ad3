"""Pure functions for totals, budget progress and spending breakdowns.

This module contains the functional core for reporting operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are Decimals (Money type).
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from expensa.dates import last_n_days, period_range
from expensa.domain.models import Budget, EntityId, Expense, Money, Period, RecurringExpense, Subscription

ZERO = Money(Decimal("0"))

# Average weeks per month, as used for monthly equivalents
WEEKS_PER_MONTH = Decimal("4.33")
DAYS_PER_MONTH = Decimal("30")
MONTHS_PER_YEAR = Decimal("12")


@dataclass(frozen=True)
class BudgetProgress:
    """Immutable budget progress for the current period window."""

    spent: Money
    remaining: Money
    percentage: float


@dataclass(frozen=True)
class TrendPoint:
    """Immutable spending total for one calendar day."""

    date: date
    amount: Money


def total(expenses: Iterable[Expense]) -> Money:
    """Sum expense amounts.

    Args:
        expenses: Expenses to sum.

    Returns:
        Total amount.
    """
    return Money(sum((expense.amount for expense in expenses), ZERO))


def total_by_category(expenses: Iterable[Expense], category: EntityId) -> Money:
    """Sum expenses belonging to one category.

    Args:
        expenses: Expenses to sum.
        category: Category id to keep.

    Returns:
        Total amount for the category.
    """
    return total(expense for expense in expenses if expense.category == category)


def total_by_period(expenses: Iterable[Expense], period: Period, reference: date | None = None) -> Money:
    """Sum expenses inside the canonical window for a period.

    Args:
        expenses: Expenses to sum.
        period: "daily" (the day), "weekly" (Monday-Sunday) or "monthly" (calendar month).
        reference: Date the window must contain. Defaults to today.

    Returns:
        Total amount inside the window.
    """
    if reference is None:
        reference = date.today()
    start, end = period_range(period, reference)
    return total(expense for expense in expenses if start <= expense.date <= end)


def total_by_category_and_period(
    expenses: Iterable[Expense],
    category: EntityId,
    period: Period,
    reference: date | None = None,
) -> Money:
    """Sum one category's expenses inside a period window."""
    return total_by_period(
        (expense for expense in expenses if expense.category == category),
        period,
        reference,
    )


def calculate_budget_percentage(spent: Money, budget: Money) -> float:
    """Calculate percentage of budget used.

    Args:
        spent: Amount spent.
        budget: Budget amount.

    Returns:
        Percentage of budget used (0-100+), or 0 when the budget is not positive.
    """
    if budget <= 0:
        return 0.0
    return float(spent / budget * 100)


def budget_progress(budget: Budget, expenses: Iterable[Expense], reference: date | None = None) -> BudgetProgress:
    """Measure a budget against spending in its current period window.

    Args:
        budget: Budget to measure.
        expenses: All expenses (filtered here by the budget's category).
        reference: Date the period window must contain. Defaults to today.

    Returns:
        BudgetProgress; remaining never drops below zero.
    """
    spent = total_by_category_and_period(expenses, budget.category, budget.period, reference)
    remaining = Money(max(ZERO, budget.amount - spent))

    return BudgetProgress(
        spent=spent,
        remaining=remaining,
        percentage=calculate_budget_percentage(spent, budget.amount),
    )


def spending_by_category(expenses: Iterable[Expense]) -> dict[EntityId, Money]:
    """Sum spending per category.

    Args:
        expenses: Expenses to group.

    Returns:
        Dictionary of category id to total, only for categories that occur.
    """
    breakdown: dict[EntityId, Money] = {}
    for expense in expenses:
        breakdown[expense.category] = Money(breakdown.get(expense.category, ZERO) + expense.amount)
    return breakdown


def sort_breakdown(breakdown: dict[EntityId, Money], sort_by: str = "value") -> list[tuple[EntityId, Money]]:
    """Sort a category breakdown by value (largest first) or by id.

    Args:
        breakdown: Dictionary of category totals.
        sort_by: Sort method - "value" or "alpha".

    Returns:
        Sorted list of (category, amount) tuples.
    """
    if sort_by == "alpha":
        return sorted(breakdown.items(), key=lambda x: x[0])
    return sorted(breakdown.items(), key=lambda x: x[1], reverse=True)


def spending_trend(expenses: Iterable[Expense], days: int = 30, today: date | None = None) -> list[TrendPoint]:
    """Build a zero-filled daily spending series ending today.

    Args:
        expenses: Expenses to bucket.
        days: Number of days in the series.
        today: Last day of the series. Defaults to today.

    Returns:
        Exactly `days` points, oldest first, one per calendar day.
    """
    if today is None:
        today = date.today()

    buckets: dict[date, Money] = {day: ZERO for day in last_n_days(days, today)}
    for expense in expenses:
        if expense.date in buckets:
            buckets[expense.date] = Money(buckets[expense.date] + expense.amount)

    return [TrendPoint(date=day, amount=amount) for day, amount in buckets.items()]


def average_spending(expenses: Iterable[Expense]) -> Money:
    """Average amount per expense, 0 when there are none."""
    items = list(expenses)
    if not items:
        return ZERO
    return Money(total(items) / len(items))


def subscription_monthly_cost(subscription: Subscription) -> Money:
    """Monthly cost of a subscription (yearly cycles are spread over 12 months)."""
    if subscription.billing_cycle == "yearly":
        return Money(subscription.amount / MONTHS_PER_YEAR)
    return subscription.amount


def subscriptions_monthly_total(subscriptions: Iterable[Subscription]) -> Money:
    """Monthly cost of all active subscriptions."""
    return Money(sum((subscription_monthly_cost(sub) for sub in subscriptions if sub.is_active), ZERO))


def subscriptions_yearly_total(subscriptions: Iterable[Subscription]) -> Money:
    """Yearly cost of all active subscriptions."""
    return Money(subscriptions_monthly_total(subscriptions) * MONTHS_PER_YEAR)


def recurring_monthly_equivalent(recurring: RecurringExpense) -> Money:
    """Approximate monthly cost of a recurring expense."""
    if recurring.frequency == "weekly":
        return Money(recurring.amount * WEEKS_PER_MONTH)
    if recurring.frequency == "daily":
        return Money(recurring.amount * DAYS_PER_MONTH)
    if recurring.frequency == "yearly":
        return Money(recurring.amount / MONTHS_PER_YEAR)
    return recurring.amount


def recurring_monthly_total(recurring_expenses: Iterable[RecurringExpense]) -> Money:
    """Approximate monthly cost of all recurring expenses."""
    return Money(sum((recurring_monthly_equivalent(r) for r in recurring_expenses), ZERO))


def calculate_histogram_bar_length(
    amount: Money,
    max_amount: Money,
    bar_width: int,
) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)
