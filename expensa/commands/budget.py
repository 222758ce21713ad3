"""Budget commands (set, status, delete)."""

from datetime import date

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
from expensa.dates import period_range
from expensa.domain.commands import DeleteBudget, SetBudget
from expensa.domain.insights import budgets_over_limit
from expensa.domain.models import Budget, new_id
from expensa.domain.report import budget_progress
from expensa.domain.validation import validate_budget_input


def format_budget_percentage(percentage: float) -> str:
    """Format budget usage with color based on percentage.

    Args:
        percentage: Budget usage percentage.

    Returns:
        Colored string for budget display.
    """
    text = f"{percentage:.0f}%"
    if percentage > 100:
        return f"[red]{text}[/red]"
    elif percentage > 80:
        return f"[yellow]{text}[/yellow]"
    else:
        return f"[green]{text}[/green]"


def set_command(category: str, amount: str, period: str = "monthly", start: str | None = None) -> None:
    """Create or replace the budget for a (category, period) pair."""
    service, _ = open_ledger()
    state = service.state

    resolved = resolve_category(state, category)
    if resolved is None:
        fail(f"Unknown category: {category}")

    try:
        cap = parse_amount_input(amount)
        start_date = parse_date_input(start) if start else date.today()
    except ValueError as e:
        fail(str(e))

    is_valid, error = validate_budget_input(cap, period)
    if not is_valid:
        fail(error or "Invalid budget")

    budget = Budget(
        id=new_id(),
        category=resolved.id,
        amount=cap,
        period=period,  # type: ignore[arg-type]
        start_date=start_date,
    )
    service.dispatch(SetBudget(budget))
    console.print(f"[green]✓[/green] {period.capitalize()} budget for {resolved.name} set to {money(state, cap)}")


def status_command(reference: str | None = None) -> None:
    """Show every budget's progress in its current period window."""
    service, _ = open_ledger()
    state = service.state

    try:
        reference_date = parse_date_input(reference) if reference else service.today()
    except ValueError as e:
        fail(str(e))

    if not state.budgets:
        console.print("[yellow]No budgets set[/yellow]")
        console.print("[dim]Use 'expensa budget set CATEGORY AMOUNT' to create one[/dim]")
        return

    table = Table(title=f"Budget status ({reference_date.isoformat()})")
    table.add_column("ID", style="dim")
    table.add_column("Category", style="magenta")
    table.add_column("Period", style="cyan")
    table.add_column("Window", style="dim")
    table.add_column("Budget", justify="right")
    table.add_column("Spent", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Used", justify="right")

    for budget in state.budgets:
        progress = budget_progress(budget, state.expenses, reference_date)
        start, end = period_range(budget.period, reference_date)
        table.add_row(
            budget.id[:8],
            category_label(state, budget.category),
            budget.period,
            f"{start.isoformat()} → {end.isoformat()}",
            money(state, budget.amount),
            money(state, progress.spent),
            money(state, progress.remaining),
            format_budget_percentage(progress.percentage),
        )

    console.print(table)

    over = budgets_over_limit(state, reference_date)
    if over:
        names = ", ".join(category_label(state, b.category) for b in over)
        console.print(f"\n[red]Over budget:[/red] {names}")


def delete_command(budget_id: str) -> None:
    """Delete a budget by id (or unique id prefix)."""
    service, _ = open_ledger()

    matches = [b for b in service.state.budgets if b.id == budget_id or b.id.startswith(budget_id)]
    if len(matches) != 1:
        fail(f"Budget not found: {budget_id}")

    service.dispatch(DeleteBudget(matches[0].id))
    console.print(f"[green]✓[/green] Budget for {category_label(service.state, matches[0].category)} deleted")
