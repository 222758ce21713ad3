"""Pure functions producing spending-optimisation suggestions.

Suggestions are derived from a snapshot only; nothing here changes the ledger.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Literal

from expensa.domain.currency import format_money
from expensa.domain.models import Budget, EntityId, LedgerState, Money, Subscription
from expensa.domain.report import (
    ZERO,
    budget_progress,
    recurring_monthly_total,
    spending_by_category,
    subscription_monthly_cost,
    subscriptions_monthly_total,
    total_by_period,
)

Impact = Literal["high", "medium", "low"]
SuggestionType = Literal["budget", "subscription", "category", "recurring", "general"]

IMPACT_ORDER: dict[str, int] = {"high": 3, "medium": 2, "low": 1}

YEARLY_DISCOUNT = Decimal("0.15")
YEARLY_SWITCH_THRESHOLD = Decimal("500")
SUBSCRIPTION_SHARE_LIMIT = Decimal("0.3")
SUBSCRIPTION_SAVINGS_RATE = Decimal("0.2")
CATEGORY_SHARE_LIMIT = 40
CATEGORY_MONTH_FLOOR = Decimal("10000")
RECURRING_COUNT_LIMIT = 5
RECURRING_SHARE_LIMIT = Decimal("0.5")
HIGH_MONTHLY_SPENDING = Decimal("50000")


@dataclass(frozen=True)
class Suggestion:
    """Immutable savings suggestion."""

    id: str
    type: SuggestionType
    title: str
    description: str
    impact: Impact
    savings: Money | None = None


def _category_name(state: LedgerState, category_id: EntityId) -> str:
    for category in state.categories:
        if category.id == category_id:
            return category.name
    return category_id


def budget_suggestions(state: LedgerState, today: date) -> list[Suggestion]:
    """Flag budgets that are exceeded or above 80% used."""
    currency = state.settings.currency
    suggestions: list[Suggestion] = []

    for budget in state.budgets:
        progress = budget_progress(budget, state.expenses, today)
        name = _category_name(state, budget.category)

        if progress.percentage > 100:
            over = Money(progress.spent - budget.amount)
            suggestions.append(
                Suggestion(
                    id=f"budget-over-{budget.id}",
                    type="budget",
                    title=f"Over Budget: {name}",
                    description=(
                        f"You've exceeded your {budget.period} budget by {format_money(over, currency)}. "
                        "Consider reviewing expenses in this category."
                    ),
                    impact="high" if over > budget.amount * Decimal("0.5") else "medium",
                    savings=over,
                )
            )
        elif progress.percentage > 80:
            suggestions.append(
                Suggestion(
                    id=f"budget-warning-{budget.id}",
                    type="budget",
                    title=f"Approaching Budget Limit: {name}",
                    description=(
                        f"You've used {progress.percentage:.1f}% of your {budget.period} budget. "
                        f"Only {format_money(progress.remaining, currency)} remaining."
                    ),
                    impact="medium",
                )
            )

    return suggestions


def _group_by_name(subscriptions: list[Subscription]) -> dict[str, list[Subscription]]:
    groups: dict[str, list[Subscription]] = {}
    for sub in subscriptions:
        groups.setdefault(sub.name.lower(), []).append(sub)
    return groups


def subscription_suggestions(state: LedgerState, month_total: Money) -> list[Suggestion]:
    """Flag duplicate, switchable and oversized subscription spending."""
    currency = state.settings.currency
    active = [sub for sub in state.subscriptions if sub.is_active]
    if not active:
        return []

    suggestions: list[Suggestion] = []

    for key, group in _group_by_name(active).items():
        if len(group) < 2:
            continue
        group_total = subscriptions_monthly_total(group)
        savings = Money(group_total - subscription_monthly_cost(group[0]))
        suggestions.append(
            Suggestion(
                id=f"duplicate-sub-{key}",
                type="subscription",
                title=f"Duplicate Subscriptions: {group[0].name}",
                description=(
                    f"You have {len(group)} active subscriptions for {group[0].name}. "
                    f"Consider canceling duplicates to save {format_money(savings, currency)}/month."
                ),
                impact="high",
                savings=savings,
            )
        )

    for sub in active:
        if sub.billing_cycle != "monthly":
            continue
        potential = Money(sub.amount * 12 * YEARLY_DISCOUNT)
        if potential > YEARLY_SWITCH_THRESHOLD:
            suggestions.append(
                Suggestion(
                    id=f"yearly-save-{sub.id}",
                    type="subscription",
                    title=f"Switch to Yearly: {sub.name}",
                    description=(
                        f"Consider switching {sub.name} to yearly billing. "
                        f"You could save approximately {format_money(potential, currency)} per year."
                    ),
                    impact="medium",
                    savings=potential,
                )
            )

    monthly = subscriptions_monthly_total(active)
    if monthly > month_total * SUBSCRIPTION_SHARE_LIMIT:
        share = f"{monthly / month_total * 100:.1f}%" if month_total > 0 else "all"
        suggestions.append(
            Suggestion(
                id="high-subscription-spending",
                type="subscription",
                title="High Subscription Spending",
                description=(
                    f"Your subscriptions account for {share} of monthly spending "
                    f"({format_money(monthly, currency)}/month). Review and cancel unused subscriptions."
                ),
                impact="high",
                savings=Money(monthly * SUBSCRIPTION_SAVINGS_RATE),
            )
        )

    return suggestions


def category_suggestions(state: LedgerState, month_total: Money) -> list[Suggestion]:
    """Flag categories that dominate spending in a heavy month."""
    if month_total <= CATEGORY_MONTH_FLOOR:
        return []

    suggestions: list[Suggestion] = []
    for category_id, amount in spending_by_category(state.expenses).items():
        share = float(amount / month_total * 100)
        if share > CATEGORY_SHARE_LIMIT:
            name = _category_name(state, category_id)
            suggestions.append(
                Suggestion(
                    id=f"category-high-{category_id}",
                    type="category",
                    title=f"High Spending: {name}",
                    description=(
                        f"{name} accounts for {share:.1f}% of your monthly spending. "
                        "Consider setting a budget or reviewing expenses in this category."
                    ),
                    impact="medium",
                )
            )
    return suggestions


def recurring_suggestions(state: LedgerState, month_total: Money) -> list[Suggestion]:
    """Flag a large set of recurring expenses that dominates monthly spending."""
    if len(state.recurring_expenses) <= RECURRING_COUNT_LIMIT:
        return []

    recurring_total = recurring_monthly_total(state.recurring_expenses)
    if recurring_total <= month_total * RECURRING_SHARE_LIMIT:
        return []

    return [
        Suggestion(
            id="review-recurring",
            type="recurring",
            title="Review Recurring Expenses",
            description=(
                f"You have {len(state.recurring_expenses)} recurring expenses totaling "
                f"{format_money(recurring_total, state.settings.currency)}/month. "
                "Review them to identify any you no longer need."
            ),
            impact="medium",
        )
    ]


def general_suggestions(state: LedgerState, month_total: Money) -> list[Suggestion]:
    """General advice for heavy spending or an empty ledger."""
    suggestions: list[Suggestion] = []

    if month_total > HIGH_MONTHLY_SPENDING:
        suggestions.append(
            Suggestion(
                id="general-high-spending",
                type="general",
                title="High Monthly Spending",
                description=(
                    f"Your monthly spending is {format_money(month_total, state.settings.currency)}. "
                    "Consider creating budgets for major categories to better control expenses."
                ),
                impact="medium",
            )
        )

    if not state.expenses:
        suggestions.append(
            Suggestion(
                id="start-tracking",
                type="general",
                title="Start Tracking Your Expenses",
                description=(
                    "Begin tracking your expenses to get personalized spending insights "
                    "and optimization suggestions."
                ),
                impact="high",
            )
        )

    return suggestions


def suggest_savings(state: LedgerState, today: date | None = None) -> list[Suggestion]:
    """Collect every suggestion for a snapshot, most impactful first.

    Args:
        state: Snapshot to analyse.
        today: Reference day for period windows. Defaults to today.

    Returns:
        Suggestions ordered high, medium, low (stable within a level).
    """
    if today is None:
        today = date.today()

    month_total = total_by_period(state.expenses, "monthly", today)

    suggestions = (
        budget_suggestions(state, today)
        + subscription_suggestions(state, month_total)
        + category_suggestions(state, month_total)
        + recurring_suggestions(state, month_total)
        + general_suggestions(state, month_total)
    )
    return sorted(suggestions, key=lambda s: IMPACT_ORDER[s.impact], reverse=True)


def total_potential_savings(suggestions: list[Suggestion]) -> Money:
    """Sum the savings of all suggestions that carry one."""
    return Money(sum((s.savings for s in suggestions if s.savings is not None), ZERO))


def budgets_over_limit(state: LedgerState, today: date | None = None) -> list[Budget]:
    """List budgets whose current-period spending exceeds the cap."""
    return [budget for budget in state.budgets if budget_progress(budget, state.expenses, today).percentage > 100]
