"""Pure functions for materialising recurring expenses.

For each template the generator finds the most recent matching expense (same
description and category), advances it by one unit of the template's frequency,
and emits an AddExpense when that date has arrived and is not yet recorded.

Running the generator again on the same day produces nothing new: the emitted
expense becomes the next anchor and the (description, category, date) check
blocks duplicates.
"""

from datetime import date

from expensa.dates import next_occurrence
from expensa.domain.commands import AddExpense
from expensa.domain.ledger import apply
from expensa.domain.models import EntityId, Expense, LedgerState, RecurringExpense


def occurrence_id(recurring: RecurringExpense, occurrence: date) -> EntityId:
    """Build the deterministic id of a generated expense."""
    return EntityId(f"{recurring.id}-{occurrence.isoformat()}")


def _matches(expense: Expense, recurring: RecurringExpense) -> bool:
    return expense.description == recurring.description and expense.category == recurring.category


def find_anchor_date(recurring: RecurringExpense, expenses: tuple[Expense, ...]) -> date:
    """Find the date the next occurrence is counted from.

    Args:
        recurring: Template to look up.
        expenses: Current expense collection.

    Returns:
        Date of the latest expense matching the template, or the template's start date.
    """
    matching = [expense.date for expense in expenses if _matches(expense, recurring)]
    return max(matching, default=recurring.start_date)


def is_recorded(recurring: RecurringExpense, expenses: tuple[Expense, ...], occurrence: date) -> bool:
    """Check whether an occurrence already exists as an expense."""
    return any(_matches(expense, recurring) and expense.date == occurrence for expense in expenses)


def due_occurrence(recurring: RecurringExpense, expenses: tuple[Expense, ...], today: date) -> date | None:
    """Compute the template's next due occurrence, if any.

    Args:
        recurring: Template to evaluate.
        expenses: Current expense collection.
        today: Current calendar day.

    Returns:
        Occurrence date when it is due and not yet recorded, otherwise None.
    """
    occurrence = next_occurrence(find_anchor_date(recurring, expenses), recurring.frequency)

    if occurrence > today:
        return None
    if recurring.end_date is not None and occurrence > recurring.end_date:
        return None
    if is_recorded(recurring, expenses, occurrence):
        return None
    return occurrence


def build_occurrence(recurring: RecurringExpense, occurrence: date) -> Expense:
    """Create the expense a template produces for one occurrence."""
    return Expense(
        id=occurrence_id(recurring, occurrence),
        amount=recurring.amount,
        description=recurring.description,
        category=recurring.category,
        date=occurrence,
        tags=(),
    )


def due_expenses(state: LedgerState, today: date, catch_up: bool = False) -> list[AddExpense]:
    """Decide which recurring expenses are due.

    Without catch_up at most one occurrence is produced per template, even when
    several periods have elapsed since the anchor. With catch_up the template is
    advanced repeatedly until nothing more is due, backfilling every gap.

    Args:
        state: Current snapshot.
        today: Current calendar day.
        catch_up: Whether to backfill all missed periods.

    Returns:
        AddExpense commands in template order (oldest occurrence first per template).
    """
    commands: list[AddExpense] = []
    expenses = state.expenses

    for recurring in state.recurring_expenses:
        while True:
            occurrence = due_occurrence(recurring, expenses, today)
            if occurrence is None:
                break
            expense = build_occurrence(recurring, occurrence)
            commands.append(AddExpense(expense))
            expenses = expenses + (expense,)
            if not catch_up:
                break

    return commands


def generate_recurring(state: LedgerState, today: date, catch_up: bool = False) -> LedgerState:
    """Apply every due occurrence to a snapshot.

    Args:
        state: Current snapshot.
        today: Current calendar day.
        catch_up: Whether to backfill all missed periods.

    Returns:
        Snapshot including the generated expenses (the same object if none were due).
    """
    for command in due_expenses(state, today, catch_up):
        state = apply(state, command)
    return state

