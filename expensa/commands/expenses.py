"""Expense commands (add, edit, delete, list)."""

import re
from dataclasses import replace
from datetime import date
from decimal import Decimal

from rich.table import Table

from expensa.commands.common import (
    category_label,
    console,
    fail,
    money,
    open_ledger,
    parse_amount_input,
    parse_date_input,
    resolve_category,
)
from expensa.domain.commands import AddExpense, DeleteExpense, UpdateExpense
from expensa.domain.filters import SORT_KEYS, ExpenseFilters, filter_expenses
from expensa.domain.models import EntityId, Expense, Money, new_id
from expensa.domain.validation import validate_expense_input

_GENERATED_ID = re.compile(r"^(?P<template>.+?)(?P<date>-\d{4}-\d{2}-\d{2})$")


def parse_tags(tags: str | None) -> tuple[str, ...]:
    """Split a comma-separated tag list, dropping blanks."""
    if not tags:
        return ()
    return tuple(tag.strip() for tag in tags.split(",") if tag.strip())


def add_command(
    amount: str,
    description: str,
    category: str,
    date_str: str | None = None,
    tags: str | None = None,
) -> None:
    """Record a new expense."""
    service, _ = open_ledger()
    state = service.state

    try:
        parsed_amount = parse_amount_input(amount)
        expense_date = parse_date_input(date_str) if date_str else date.today()
    except ValueError as e:
        fail(str(e))

    resolved = resolve_category(state, category)
    category_id = resolved.id if resolved else EntityId(category)

    is_valid, error = validate_expense_input(parsed_amount, description, category_id, state)
    if not is_valid:
        fail(error or "Invalid expense")

    expense = Expense(
        id=new_id(),
        amount=parsed_amount,
        description=description.strip(),
        category=category_id,
        date=expense_date,
        tags=parse_tags(tags),
    )
    service.dispatch(AddExpense(expense))

    console.print("[green]✓[/green] Expense added:")
    console.print(f"  ID: {expense.id}")
    console.print(f"  Date: {expense.date.isoformat()}")
    console.print(f"  Description: {expense.description}")
    console.print(f"  Amount: {money(state, expense.amount)}")
    console.print(f"  Category: {category_label(state, expense.category)}")


def short_id(expense_id: str) -> str:
    """Shortened id for display.

    Generated ids ("<template id>-YYYY-MM-DD") keep their date suffix, since
    every occurrence of a template shares the same leading characters.
    """
    match = _GENERATED_ID.match(expense_id)
    if match:
        return f"{match['template'][:8]}{match['date']}"
    return expense_id[:8]


def find_expense(expenses: tuple[Expense, ...], expense_id: str) -> Expense | None:
    """Find an expense by full id, unique id prefix or short_id form."""
    matches = [e for e in expenses if e.id == expense_id]
    if not matches:
        matches = [e for e in expenses if e.id.startswith(expense_id)]
    if not matches:
        short = _GENERATED_ID.match(expense_id)
        if short:
            matches = [e for e in expenses if e.id.startswith(short["template"]) and e.id.endswith(short["date"])]
    return matches[0] if len(matches) == 1 else None


def edit_command(
    expense_id: str,
    amount: str | None = None,
    description: str | None = None,
    category: str | None = None,
    date_str: str | None = None,
    tags: str | None = None,
) -> None:
    """Replace fields of an existing expense."""
    service, _ = open_ledger()
    state = service.state

    existing = find_expense(state.expenses, expense_id)
    if existing is None:
        fail(f"Expense not found: {expense_id}")

    updated = existing
    try:
        if amount is not None:
            updated = replace(updated, amount=parse_amount_input(amount))
        if date_str is not None:
            updated = replace(updated, date=parse_date_input(date_str))
    except ValueError as e:
        fail(str(e))

    if description is not None:
        updated = replace(updated, description=description.strip())
    if category is not None:
        resolved = resolve_category(state, category)
        updated = replace(updated, category=resolved.id if resolved else EntityId(category))
    if tags is not None:
        updated = replace(updated, tags=parse_tags(tags))

    is_valid, error = validate_expense_input(updated.amount, updated.description, updated.category, state)
    if not is_valid:
        fail(error or "Invalid expense")

    if service.dispatch(UpdateExpense(updated)):
        console.print(f"[green]✓[/green] Expense {updated.id} updated")
    else:
        console.print("[yellow]Nothing changed[/yellow]")


def delete_command(expense_id: str) -> None:
    """Delete an expense."""
    service, _ = open_ledger()

    existing = find_expense(service.state.expenses, expense_id)
    if existing is None:
        fail(f"Expense not found: {expense_id}")

    service.dispatch(DeleteExpense(existing.id))
    console.print(f"[green]✓[/green] Deleted {existing.description} ({existing.date.isoformat()})")


def list_command(
    query: str = "",
    category: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    min_amount: str | None = None,
    max_amount: str | None = None,
    sort_by: str = "date",
    ascending: bool = False,
    limit: int | None = 50,
) -> None:
    """List expenses matching the given filters."""
    service, _ = open_ledger()
    state = service.state

    if sort_by not in SORT_KEYS:
        fail(f"Sort key must be one of: {', '.join(SORT_KEYS)}")

    category_id: EntityId | None = None
    if category:
        resolved = resolve_category(state, category)
        category_id = resolved.id if resolved else EntityId(category)

    try:
        filters = ExpenseFilters(
            query=query,
            category=category_id,
            date_from=parse_date_input(date_from) if date_from else None,
            date_to=parse_date_input(date_to) if date_to else None,
            min_amount=parse_amount_input(min_amount) if min_amount else Money(Decimal("0")),
            max_amount=parse_amount_input(max_amount) if max_amount else Money(Decimal("0")),
            sort_by=sort_by,  # type: ignore[arg-type]
            sort_order="asc" if ascending else "desc",
        )
    except ValueError as e:
        fail(str(e))

    expenses = filter_expenses(state.expenses, filters)
    total_matches = len(expenses)
    if limit is not None:
        expenses = expenses[:limit]

    if not expenses:
        console.print("[yellow]No expenses found[/yellow]")
        return

    table = Table(title=f"Expenses (showing {len(expenses)} of {total_matches})")
    table.add_column("ID", style="dim", no_wrap=True, min_width=19)
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Amount", justify="right")
    table.add_column("Category", style="magenta")
    table.add_column("Tags", style="dim")

    for expense in expenses:
        table.add_row(
            short_id(expense.id),
            expense.date.isoformat(),
            expense.description,
            f"[red]{money(state, expense.amount)}[/red]",
            category_label(state, expense.category),
            ", ".join(expense.tags),
        )

    console.print(table)
