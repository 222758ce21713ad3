"""Tests for expensa.domain.insights savings suggestions."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

from expensa.domain.insights import budgets_over_limit, suggest_savings, total_potential_savings
from expensa.domain.models import (
    Budget,
    EntityId,
    Expense,
    Money,
    Subscription,
    default_state,
)

TODAY = date(2024, 1, 15)


def make_expense(expense_id: str, amount: str, category: str = "1") -> Expense:
    return Expense(
        id=EntityId(expense_id),
        amount=Money(Decimal(amount)),
        description="Item",
        category=EntityId(category),
        date=TODAY,
    )


def make_subscription(sub_id: str, name: str, amount: str) -> Subscription:
    return Subscription(
        id=EntityId(sub_id),
        name=name,
        amount=Money(Decimal(amount)),
        category=EntityId("3"),
        billing_cycle="monthly",
        start_date=date(2024, 1, 1),
        next_billing_date=date(2024, 2, 1),
    )


class TestSuggestSavings:
    """Tests for suggest_savings."""

    def test_empty_ledger_suggests_tracking(self) -> None:
        """Should suggest starting to track when there are no expenses."""
        suggestions = suggest_savings(default_state(), TODAY)
        assert [s.id for s in suggestions] == ["start-tracking"]

    def test_over_budget(self) -> None:
        """Should flag an exceeded budget with the overspend as savings."""
        budget = Budget(
            id=EntityId("b1"),
            category=EntityId("1"),
            amount=Money(Decimal("100")),
            period="monthly",
            start_date=date(2024, 1, 1),
        )
        state = replace(default_state(), expenses=(make_expense("e1", "120"),), budgets=(budget,))

        suggestions = suggest_savings(state, TODAY)
        over = [s for s in suggestions if s.id == "budget-over-b1"]

        assert len(over) == 1
        assert over[0].savings == Decimal("20")
        assert over[0].impact == "medium"
        assert budgets_over_limit(state, TODAY) == [budget]

    def test_duplicate_subscriptions(self) -> None:
        """Should flag active subscriptions sharing a name."""
        state = replace(
            default_state(),
            expenses=(make_expense("e1", "5000"),),
            subscriptions=(make_subscription("s1", "Netflix", "100"), make_subscription("s2", "netflix", "100")),
        )

        suggestions = suggest_savings(state, TODAY)
        duplicate = next(s for s in suggestions if s.id == "duplicate-sub-netflix")

        assert duplicate.impact == "high"
        assert duplicate.savings == Decimal("100")

    def test_sorted_by_impact(self) -> None:
        """Should list high impact suggestions before medium and low."""
        state = replace(
            default_state(),
            expenses=(make_expense("e1", "60000"),),
            subscriptions=(make_subscription("s1", "Gym", "3000"), make_subscription("s2", "Gym", "3000")),
        )

        impacts = [s.impact for s in suggest_savings(state, TODAY)]

        assert impacts == sorted(impacts, key=lambda i: {"high": 0, "medium": 1, "low": 2}[i])

    def test_total_potential_savings_skips_missing(self) -> None:
        """Should sum only suggestions that carry savings."""
        suggestions = suggest_savings(default_state(), TODAY)
        assert total_potential_savings(suggestions) == Decimal("0")
