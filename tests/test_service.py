"""Tests for expensa.service LedgerService and RecurrenceScheduler."""

import sqlite3
import threading
from datetime import date
from decimal import Decimal

from expensa.domain.commands import AddExpense, AddRecurringExpense, DeleteExpense
from expensa.domain.models import EntityId, Expense, LedgerState, Money, RecurringExpense, default_state
from expensa.service import LedgerService, RecurrenceScheduler


def make_expense(expense_id: str = "e1") -> Expense:
    return Expense(
        id=EntityId(expense_id),
        amount=Money(Decimal("10")),
        description="Tea",
        category=EntityId("1"),
        date=date(2024, 1, 1),
    )


RENT = RecurringExpense(
    id=EntityId("rent"),
    amount=Money(Decimal("1000")),
    description="Rent",
    category=EntityId("4"),
    frequency="monthly",
    start_date=date(2024, 1, 1),
)


class TestDispatch:
    """Tests for LedgerService.dispatch."""

    def test_default_state(self) -> None:
        """Should start from the default state."""
        assert LedgerService().state == default_state()

    def test_changed_command_saves(self) -> None:
        """Should persist each changed snapshot and report True."""
        saved: list[LedgerState] = []
        service = LedgerService(save=saved.append)

        assert service.dispatch(AddExpense(make_expense())) is True
        assert saved == [service.state]

    def test_noop_does_not_save(self) -> None:
        """Should report False and skip saving for no-op commands."""
        saved: list[LedgerState] = []
        service = LedgerService(save=saved.append)

        assert service.dispatch(DeleteExpense(EntityId("missing"))) is False
        assert saved == []

    def test_save_failure_keeps_transition(self) -> None:
        """Should keep the in-memory state when saving fails."""

        def failing_save(state: LedgerState) -> None:
            raise sqlite3.OperationalError("disk I/O error")

        service = LedgerService(save=failing_save)

        assert service.dispatch(AddExpense(make_expense())) is True
        assert len(service.state.expenses) == 1

    def test_old_snapshot_unchanged(self) -> None:
        """Should leave snapshots handed out earlier untouched."""
        service = LedgerService()
        before = service.state

        service.dispatch(AddExpense(make_expense()))

        assert before.expenses == ()


class TestGenerateRecurring:
    """Tests for LedgerService.generate_recurring."""

    def test_generates_due_expense_once(self) -> None:
        """Should add the due occurrence and nothing on the second run."""
        saved: list[LedgerState] = []
        service = LedgerService(save=saved.append, today=lambda: date(2024, 2, 1))
        service.dispatch(AddRecurringExpense(RENT))

        first = service.generate_recurring()
        second = service.generate_recurring()

        assert [e.date for e in first] == [date(2024, 2, 1)]
        assert second == []
        assert len(service.state.expenses) == 1
        assert len(saved) == 2

    def test_catch_up(self) -> None:
        """Should backfill every missed period when configured."""
        service = LedgerService(
            state=LedgerState(recurring_expenses=(RENT,)),
            today=lambda: date(2024, 3, 1),
            catch_up=True,
        )

        generated = service.generate_recurring()

        assert [e.date for e in generated] == [date(2024, 2, 1), date(2024, 3, 1)]


class TestRecurrenceScheduler:
    """Tests for RecurrenceScheduler."""

    def test_start_runs_immediately_and_stop_cancels(self) -> None:
        """Should run once on start and stop scheduling after stop."""
        service = LedgerService(
            state=LedgerState(recurring_expenses=(RENT,)),
            today=lambda: date(2024, 2, 1),
        )
        scheduler = RecurrenceScheduler(service, interval_seconds=3600)

        scheduler.start()
        assert scheduler.running is True
        assert len(service.state.expenses) == 1

        scheduler.stop()
        assert scheduler.running is False

    def test_repeats_on_interval(self) -> None:
        """Should invoke the generator again after each interval."""
        calls = threading.Event()
        count = 0

        class CountingService(LedgerService):
            def generate_recurring(self) -> list[Expense]:
                nonlocal count
                count += 1
                if count >= 3:
                    calls.set()
                return []

        scheduler = RecurrenceScheduler(CountingService(), interval_seconds=0.01)
        scheduler.start()
        try:
            assert calls.wait(timeout=5)
        finally:
            scheduler.stop()
