"""Tests for expensa.domain.report pure functions."""

from datetime import date
from decimal import Decimal

from expensa.domain.models import Budget, EntityId, Expense, Money, RecurringExpense, Subscription
from expensa.domain.report import (
    average_spending,
    budget_progress,
    calculate_budget_percentage,
    calculate_histogram_bar_length,
    recurring_monthly_equivalent,
    sort_breakdown,
    spending_by_category,
    spending_trend,
    subscriptions_monthly_total,
    subscriptions_yearly_total,
    total,
    total_by_category,
    total_by_period,
)


def make_expense(amount: str, day: date, category: str = "1") -> Expense:
    return Expense(
        id=EntityId(f"{category}-{day.isoformat()}-{amount}"),
        amount=Money(Decimal(amount)),
        description="Item",
        category=EntityId(category),
        date=day,
    )


def make_budget(amount: str, period: str = "monthly", category: str = "1") -> Budget:
    return Budget(
        id=EntityId("b1"),
        category=EntityId(category),
        amount=Money(Decimal(amount)),
        period=period,  # type: ignore[arg-type]
        start_date=date(2024, 1, 1),
    )


def make_subscription(amount: str, cycle: str = "monthly", active: bool = True) -> Subscription:
    return Subscription(
        id=EntityId(f"s-{amount}"),
        name="Service",
        amount=Money(Decimal(amount)),
        category=EntityId("3"),
        billing_cycle=cycle,  # type: ignore[arg-type]
        start_date=date(2024, 1, 1),
        next_billing_date=date(2024, 2, 1),
        is_active=active,
    )


class TestTotals:
    """Tests for total helpers."""

    def test_total_of_empty_is_zero(self) -> None:
        """Should return 0 for no expenses."""
        assert total([]) == Decimal("0")

    def test_total_by_category(self) -> None:
        """Should sum only one category."""
        expenses = [
            make_expense("10", date(2024, 1, 1), "1"),
            make_expense("5", date(2024, 1, 1), "2"),
            make_expense("2.50", date(2024, 1, 2), "1"),
        ]
        assert total_by_category(expenses, EntityId("1")) == Decimal("12.50")

    def test_total_by_period_windows(self) -> None:
        """Should use the day, the Monday-Sunday week and the calendar month."""
        # 2024-01-10 is a Wednesday
        expenses = [
            make_expense("1", date(2024, 1, 10)),
            make_expense("2", date(2024, 1, 8)),
            make_expense("4", date(2024, 1, 14)),
            make_expense("8", date(2024, 1, 1)),
            make_expense("16", date(2024, 2, 1)),
        ]
        reference = date(2024, 1, 10)

        assert total_by_period(expenses, "daily", reference) == Decimal("1")
        assert total_by_period(expenses, "weekly", reference) == Decimal("7")
        assert total_by_period(expenses, "monthly", reference) == Decimal("15")

    def test_average_spending(self) -> None:
        """Should average per expense and return 0 when empty."""
        expenses = [make_expense("10", date(2024, 1, 1)), make_expense("20", date(2024, 1, 2))]

        assert average_spending(expenses) == Decimal("15")
        assert average_spending([]) == Decimal("0")


class TestBudgetProgress:
    """Tests for budget progress."""

    def test_progress_within_budget(self) -> None:
        """Should report spent, remaining and percentage."""
        expenses = [make_expense("25", date(2024, 1, 5)), make_expense("25", date(2024, 1, 20))]

        progress = budget_progress(make_budget("100"), expenses, date(2024, 1, 31))

        assert progress.spent == Decimal("50")
        assert progress.remaining == Decimal("50")
        assert progress.percentage == 50.0

    def test_remaining_never_negative(self) -> None:
        """Should clamp remaining to zero when over budget."""
        expenses = [make_expense("150", date(2024, 1, 5))]

        progress = budget_progress(make_budget("100"), expenses, date(2024, 1, 10))

        assert progress.remaining == Decimal("0")
        assert progress.percentage == 150.0

    def test_zero_budget_is_zero_percent(self) -> None:
        """Should report 0% when the budget amount is 0."""
        assert calculate_budget_percentage(Money(Decimal("50")), Money(Decimal("0"))) == 0.0

    def test_ignores_spending_outside_window(self) -> None:
        """Should only count spending in the current period window."""
        expenses = [make_expense("40", date(2023, 12, 31)), make_expense("10", date(2024, 1, 2))]

        progress = budget_progress(make_budget("100"), expenses, date(2024, 1, 15))

        assert progress.spent == Decimal("10")


class TestBreakdownAndTrend:
    """Tests for category breakdown and the daily trend."""

    def test_spending_by_category_only_present(self) -> None:
        """Should include only categories that occur."""
        expenses = [make_expense("10", date(2024, 1, 1), "1"), make_expense("5", date(2024, 1, 1), "2")]

        assert spending_by_category(expenses) == {"1": Decimal("10"), "2": Decimal("5")}

    def test_sort_breakdown_by_value(self) -> None:
        """Should sort largest first by default."""
        breakdown = {EntityId("a"): Money(Decimal("5")), EntityId("b"): Money(Decimal("50"))}
        assert [c for c, _ in sort_breakdown(breakdown)] == ["b", "a"]
        assert [c for c, _ in sort_breakdown(breakdown, "alpha")] == ["a", "b"]

    def test_trend_has_one_point_per_day(self) -> None:
        """Should return exactly 30 zero-filled points, oldest first."""
        today = date(2024, 3, 10)
        expenses = [make_expense("7", date(2024, 3, 10)), make_expense("3", date(2024, 3, 10))]

        points = spending_trend(expenses, 30, today)

        assert len(points) == 30
        assert points[0].date == date(2024, 2, 10)
        assert points[-1].date == today
        assert points[-1].amount == Decimal("10")
        assert points[0].amount == Decimal("0")


class TestMonthlyEquivalents:
    """Tests for subscription and recurring rollups."""

    def test_subscription_totals_skip_paused(self) -> None:
        """Should count active subscriptions only, spreading yearly over 12 months."""
        subs = [
            make_subscription("100"),
            make_subscription("1200", "yearly"),
            make_subscription("999", active=False),
        ]

        assert subscriptions_monthly_total(subs) == Decimal("200")
        assert subscriptions_yearly_total(subs) == Decimal("2400")

    def test_recurring_monthly_equivalent(self) -> None:
        """Should scale weekly by 4.33 and daily by 30."""
        weekly = RecurringExpense(
            id=EntityId("w"),
            amount=Money(Decimal("100")),
            description="Groceries",
            category=EntityId("1"),
            frequency="weekly",
            start_date=date(2024, 1, 1),
        )

        assert recurring_monthly_equivalent(weekly) == Decimal("433.00")


class TestCalculateHistogramBarLength:
    """Tests for calculate_histogram_bar_length."""

    def test_full_bar_for_max(self) -> None:
        """Should use the full width for the maximum amount."""
        assert calculate_histogram_bar_length(Money(Decimal("50")), Money(Decimal("50")), 40) == 40

    def test_zero_max(self) -> None:
        """Should return 0 when the maximum is 0."""
        assert calculate_histogram_bar_length(Money(Decimal("0")), Money(Decimal("0")), 40) == 0
