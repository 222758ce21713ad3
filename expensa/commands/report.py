"""Report, insights and export commands for viewing ledger data."""

from datetime import date
from decimal import Decimal
from pathlib import Path

from rich.table import Table

from expensa.commands.common import (
    category_label,
    console,
    fail,
    money,
    open_ledger,
    parse_date_input,
    resolve_category,
)
from expensa.dates import format_date, period_range
from expensa.domain.filters import SORT_KEYS, ExpenseFilters, filter_expenses
from expensa.domain.insights import suggest_savings, total_potential_savings
from expensa.domain.models import EntityId, LedgerState, Money
from expensa.domain.report import (
    ZERO,
    average_spending,
    calculate_histogram_bar_length,
    recurring_monthly_total,
    sort_breakdown,
    spending_by_category,
    spending_trend,
    subscriptions_monthly_total,
    total_by_period,
)
from expensa.export import export_filename, write_export

IMPACT_STYLES = {"high": "red", "medium": "yellow", "low": "green"}


def render_breakdown_line(
    state: LedgerState,
    category_id: EntityId,
    amount: Money,
    histogram: bool,
    max_amount: Money,
    bar_width: int,
) -> None:
    """Render a single category line of the breakdown.

    Args:
        state: Snapshot used for labels and currency.
        category_id: Category being rendered.
        amount: Amount spent in the category.
        histogram: Whether to show histogram bars.
        max_amount: Maximum amount for histogram scaling.
        bar_width: Width of histogram bar in characters.
    """
    label = category_label(state, category_id)
    amount_display = money(state, amount)

    if histogram:
        bar = "█" * calculate_histogram_bar_length(amount, max_amount, bar_width)
        console.print(f"  {label:20} {amount_display:>14} {bar}")
    else:
        console.print(f"  {label}: {amount_display}")


def render_trend(state: LedgerState, days: int, today: date, bar_width: int) -> None:
    """Render the zero-filled daily spending series as a bar chart."""
    points = spending_trend(state.expenses, days, today)
    peak = max((p.amount for p in points), default=ZERO)

    console.print(f"\n[bold]Last {days} days[/bold]")
    for point in points:
        bar = "▇" * calculate_histogram_bar_length(point.amount, peak, bar_width)
        label = format_date(point.date, "MMM d")
        amount = money(state, point.amount) if point.amount else "[dim]-[/dim]"
        console.print(f"  {label:>7} {amount:>14} {bar}")


def report_command(
    sort_by: str = "value",
    histogram: bool = True,
    reference: str | None = None,
    trend_days: int = 0,
) -> None:
    """Show spending totals, the monthly category breakdown and an optional trend."""
    if sort_by not in ("value", "alpha"):
        fail("Sort must be 'value' or 'alpha'")

    service, _ = open_ledger()
    state = service.state

    try:
        reference_date = parse_date_input(reference) if reference else service.today()
    except ValueError as e:
        fail(str(e))

    month_start, month_end = period_range("monthly", reference_date)
    console.print(f"\n[bold]Spending report: {format_date(month_start, 'MMMM yyyy')}[/bold]\n")

    console.print(f"  Today:      {money(state, total_by_period(state.expenses, 'daily', reference_date))}")
    console.print(f"  This week:  {money(state, total_by_period(state.expenses, 'weekly', reference_date))}")
    console.print(f"  This month: {money(state, total_by_period(state.expenses, 'monthly', reference_date))}")
    console.print(f"  Average per expense: {money(state, average_spending(state.expenses))}")

    committed = recurring_monthly_total(state.recurring_expenses) + subscriptions_monthly_total(state.subscriptions)
    if committed:
        console.print(f"  Committed monthly (recurring + subscriptions): {money(state, Money(committed))}")

    month_expenses = [e for e in state.expenses if month_start <= e.date <= month_end]
    breakdown = sort_breakdown(spending_by_category(month_expenses), sort_by)

    if not breakdown:
        console.print("\n[yellow]No spending this month[/yellow]")
    else:
        console.print("\n[bold red]By category[/bold red]")
        max_amount = max(amount for _, amount in breakdown)
        for category_id, amount in breakdown:
            render_breakdown_line(state, category_id, amount, histogram, max_amount, 40)

    if trend_days > 0:
        render_trend(state, trend_days, reference_date, 40)


def insights_command() -> None:
    """Show savings suggestions for the current ledger."""
    service, _ = open_ledger()
    state = service.state

    suggestions = suggest_savings(state, service.today())
    if not suggestions:
        console.print("[green]No suggestions - spending looks healthy[/green]")
        return

    table = Table(title="Savings suggestions")
    table.add_column("Impact", justify="center")
    table.add_column("Type", style="cyan")
    table.add_column("Suggestion", style="white")
    table.add_column("Savings", justify="right")

    for suggestion in suggestions:
        style = IMPACT_STYLES[suggestion.impact]
        table.add_row(
            f"[{style}]{suggestion.impact}[/{style}]",
            suggestion.type,
            f"[bold]{suggestion.title}[/bold]\n{suggestion.description}",
            money(state, suggestion.savings) if suggestion.savings is not None else "-",
        )

    console.print(table)

    potential = total_potential_savings(suggestions)
    if potential > Decimal("0"):
        console.print(f"\nPotential monthly savings: [bold green]{money(state, potential)}[/bold green]")


def export_command(
    kind: str = "csv",
    output: str | None = None,
    query: str = "",
    category: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
    sort_by: str = "date",
    ascending: bool = False,
) -> None:
    """Export (optionally filtered) expenses to CSV or JSON."""
    if kind not in ("csv", "json"):
        fail("Format must be 'csv' or 'json'")
    if sort_by not in SORT_KEYS:
        fail(f"Sort key must be one of: {', '.join(SORT_KEYS)}")

    service, _ = open_ledger()
    state = service.state

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
            sort_by=sort_by,  # type: ignore[arg-type]
            sort_order="asc" if ascending else "desc",
        )
    except ValueError as e:
        fail(str(e))

    expenses = filter_expenses(state.expenses, filters)
    if output:
        destination = Path(output).expanduser()
    else:
        destination = Path.cwd() / export_filename(kind, service.today())  # type: ignore[arg-type]

    try:
        written = write_export(expenses, kind, destination, state.settings, state.categories)  # type: ignore[arg-type]
    except OSError as e:
        fail(f"Export failed: {e}")

    console.print(f"[green]✓[/green] Exported {len(expenses)} expenses to {written}")
