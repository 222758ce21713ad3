"""Tests for expensa.domain.recurrence generator."""

from datetime import date
from decimal import Decimal

from expensa.domain.models import EntityId, Expense, LedgerState, Money, RecurringExpense
from expensa.domain.recurrence import (
    due_expenses,
    due_occurrence,
    find_anchor_date,
    generate_recurring,
    occurrence_id,
)


def make_recurring(
    frequency: str = "monthly",
    start: date = date(2024, 1, 1),
    end: date | None = None,
) -> RecurringExpense:
    return RecurringExpense(
        id=EntityId("rent"),
        amount=Money(Decimal("1000")),
        description="Rent",
        category=EntityId("4"),
        frequency=frequency,  # type: ignore[arg-type]
        start_date=start,
        end_date=end,
    )


def recorded(day: date, description: str = "Rent", category: str = "4") -> Expense:
    return Expense(
        id=EntityId(f"x-{day.isoformat()}"),
        amount=Money(Decimal("1000")),
        description=description,
        category=EntityId(category),
        date=day,
    )


class TestFindAnchorDate:
    """Tests for find_anchor_date."""

    def test_defaults_to_start_date(self) -> None:
        """Should use the start date when nothing matches."""
        assert find_anchor_date(make_recurring(), ()) == date(2024, 1, 1)

    def test_uses_latest_matching_expense(self) -> None:
        """Should anchor on the most recent expense with same description and category."""
        expenses = (recorded(date(2024, 2, 1)), recorded(date(2024, 3, 1)), recorded(date(2024, 1, 1)))
        assert find_anchor_date(make_recurring(), expenses) == date(2024, 3, 1)

    def test_ignores_other_category(self) -> None:
        """Should ignore expenses with the same description in another category."""
        expenses = (recorded(date(2024, 5, 1), category="1"),)
        assert find_anchor_date(make_recurring(), expenses) == date(2024, 1, 1)


class TestDueOccurrence:
    """Tests for due_occurrence."""

    def test_not_due_before_next_period(self) -> None:
        """Should return None before the next occurrence arrives."""
        assert due_occurrence(make_recurring(), (), date(2024, 1, 31)) is None

    def test_due_on_next_period(self) -> None:
        """Should return the occurrence on the day it falls."""
        assert due_occurrence(make_recurring(), (), date(2024, 2, 1)) == date(2024, 2, 1)

    def test_end_date_is_inclusive(self) -> None:
        """Should still generate an occurrence falling on the end date."""
        recurring = make_recurring(end=date(2024, 2, 1))
        assert due_occurrence(recurring, (), date(2024, 3, 1)) == date(2024, 2, 1)

    def test_past_end_date(self) -> None:
        """Should stop once the next occurrence is after the end date."""
        recurring = make_recurring(end=date(2024, 1, 31))
        assert due_occurrence(recurring, (), date(2024, 3, 1)) is None

    def test_month_end_is_clamped(self) -> None:
        """Should clamp 31 January to the last day of February."""
        recurring = make_recurring(start=date(2024, 1, 31))
        assert due_occurrence(recurring, (), date(2024, 3, 15)) == date(2024, 2, 29)

    def test_weekly_and_daily(self) -> None:
        """Should advance by a week or a day."""
        assert due_occurrence(make_recurring("weekly"), (), date(2024, 1, 8)) == date(2024, 1, 8)
        assert due_occurrence(make_recurring("daily"), (), date(2024, 1, 2)) == date(2024, 1, 2)


class TestGenerateRecurring:
    """Tests for generate_recurring and due_expenses."""

    def test_rent_generated_once(self) -> None:
        """Should add one Rent expense dated 2024-02-01."""
        state = LedgerState(recurring_expenses=(make_recurring(),))

        new_state = generate_recurring(state, date(2024, 2, 1))

        assert len(new_state.expenses) == 1
        expense = new_state.expenses[0]
        assert expense.date == date(2024, 2, 1)
        assert expense.amount == Decimal("1000")
        assert expense.description == "Rent"
        assert expense.category == "4"
        assert expense.tags == ()

    def test_second_run_same_day_adds_nothing(self) -> None:
        """Should be idempotent within a day."""
        state = LedgerState(recurring_expenses=(make_recurring(),))

        once = generate_recurring(state, date(2024, 2, 1))
        twice = generate_recurring(once, date(2024, 2, 1))

        assert twice is once

    def test_one_occurrence_per_run_without_catch_up(self) -> None:
        """Should produce at most one occurrence per template per run."""
        state = LedgerState(recurring_expenses=(make_recurring(),))

        commands = due_expenses(state, date(2024, 6, 15))

        assert [c.expense.date for c in commands] == [date(2024, 2, 1)]

    def test_catch_up_backfills_every_period(self) -> None:
        """Should backfill each missed month when catching up."""
        state = LedgerState(recurring_expenses=(make_recurring(),))

        new_state = generate_recurring(state, date(2024, 4, 15), catch_up=True)

        assert [e.date for e in new_state.expenses] == [date(2024, 2, 1), date(2024, 3, 1), date(2024, 4, 1)]

    def test_catch_up_respects_end_date(self) -> None:
        """Should stop backfilling at the end date."""
        state = LedgerState(recurring_expenses=(make_recurring(end=date(2024, 3, 1)),))

        new_state = generate_recurring(state, date(2024, 12, 1), catch_up=True)

        assert [e.date for e in new_state.expenses] == [date(2024, 2, 1), date(2024, 3, 1)]

    def test_generated_ids_are_deterministic(self) -> None:
        """Should derive the expense id from the template id and date."""
        recurring = make_recurring()
        state = LedgerState(recurring_expenses=(recurring,))

        new_state = generate_recurring(state, date(2024, 2, 1))

        assert new_state.expenses[0].id == occurrence_id(recurring, date(2024, 2, 1))
        assert new_state.expenses[0].id == "rent-2024-02-01"

    def test_nothing_due_returns_same_state(self) -> None:
        """Should return the identical snapshot when nothing is due."""
        state = LedgerState(recurring_expenses=(make_recurring(),))
        assert generate_recurring(state, date(2024, 1, 15)) is state
