"""Recurring expense and subscription commands."""

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
from expensa.dates import add_months, add_years, days_until, next_occurrence
from expensa.domain.commands import (
    AddRecurringExpense,
    AddSubscription,
    DeleteRecurringExpense,
    DeleteSubscription,
    ToggleSubscription,
)
from expensa.domain.models import EntityId, RecurringExpense, Subscription, new_id
from expensa.domain.recurrence import find_anchor_date
from expensa.domain.report import (
    recurring_monthly_equivalent,
    subscription_monthly_cost,
    subscriptions_monthly_total,
    subscriptions_yearly_total,
)
from expensa.domain.validation import validate_billing_cycle, validate_expense_input, validate_frequency


def _match_id(ids: list[EntityId], value: str) -> EntityId | None:
    if value in ids:
        return EntityId(value)
    matches = [i for i in ids if i.startswith(value)]
    return matches[0] if len(matches) == 1 else None


def add_recurring_command(
    amount: str,
    description: str,
    category: str,
    frequency: str = "monthly",
    start: str | None = None,
    end: str | None = None,
) -> None:
    """Create a recurring expense template."""
    service, _ = open_ledger()
    state = service.state

    is_valid, error = validate_frequency(frequency)
    if not is_valid:
        fail(error or "Invalid frequency")

    try:
        parsed_amount = parse_amount_input(amount)
        start_date = parse_date_input(start) if start else date.today()
        end_date = parse_date_input(end) if end else None
    except ValueError as e:
        fail(str(e))

    resolved = resolve_category(state, category)
    category_id = resolved.id if resolved else EntityId(category)

    is_valid, error = validate_expense_input(parsed_amount, description, category_id, state)
    if not is_valid:
        fail(error or "Invalid recurring expense")

    if end_date is not None and end_date < start_date:
        fail("End date cannot be before start date")

    recurring = RecurringExpense(
        id=new_id(),
        amount=parsed_amount,
        description=description.strip(),
        category=category_id,
        frequency=frequency,  # type: ignore[arg-type]
        start_date=start_date,
        end_date=end_date,
    )
    service.dispatch(AddRecurringExpense(recurring))
    console.print(
        f"[green]✓[/green] {recurring.description}: {money(state, parsed_amount)} {frequency} "
        f"from {start_date.isoformat()}"
    )

    # Templates starting in the past may already be due
    for expense in service.generate_recurring():
        console.print(f"[dim]↻ Recorded {expense.description} on {expense.date.isoformat()}[/dim]")


def list_recurring_command() -> None:
    """List recurring expense templates with their next occurrence."""
    service, _ = open_ledger()
    state = service.state

    if not state.recurring_expenses:
        console.print("[yellow]No recurring expenses[/yellow]")
        return

    table = Table(title="Recurring expenses")
    table.add_column("ID", style="dim")
    table.add_column("Description", style="white")
    table.add_column("Amount", justify="right")
    table.add_column("Frequency", style="cyan")
    table.add_column("Category", style="magenta")
    table.add_column("Next", style="cyan")
    table.add_column("Ends", style="dim")
    table.add_column("≈ Monthly", justify="right")

    for recurring in state.recurring_expenses:
        upcoming = next_occurrence(find_anchor_date(recurring, state.expenses), recurring.frequency)
        ended = recurring.end_date is not None and upcoming > recurring.end_date
        table.add_row(
            recurring.id[:8],
            recurring.description,
            money(state, recurring.amount),
            recurring.frequency,
            category_label(state, recurring.category),
            "[dim]ended[/dim]" if ended else upcoming.isoformat(),
            recurring.end_date.isoformat() if recurring.end_date else "-",
            money(state, recurring_monthly_equivalent(recurring)),
        )

    console.print(table)


def delete_recurring_command(recurring_id: str) -> None:
    """Delete a recurring expense template. Generated expenses are kept."""
    service, _ = open_ledger()

    matched = _match_id([r.id for r in service.state.recurring_expenses], recurring_id)
    if matched is None:
        fail(f"Recurring expense not found: {recurring_id}")

    service.dispatch(DeleteRecurringExpense(matched))
    console.print("[green]✓[/green] Recurring expense deleted")


def run_recurring_command() -> None:
    """Materialise due recurring expenses now."""
    service, _ = open_ledger(generate=False)
    generated = service.generate_recurring()

    if not generated:
        console.print("[dim]Nothing due[/dim]")
        return

    for expense in generated:
        console.print(
            f"[green]✓[/green] {expense.description} {money(service.state, expense.amount)} "
            f"on {expense.date.isoformat()}"
        )


def add_subscription_command(
    name: str,
    amount: str,
    category: str,
    cycle: str = "monthly",
    start: str | None = None,
    icon: str | None = None,
    color: str | None = None,
) -> None:
    """Track a subscription."""
    service, _ = open_ledger()
    state = service.state

    is_valid, error = validate_billing_cycle(cycle)
    if not is_valid:
        fail(error or "Invalid billing cycle")

    try:
        parsed_amount = parse_amount_input(amount)
        start_date = parse_date_input(start) if start else date.today()
    except ValueError as e:
        fail(str(e))

    if parsed_amount < 0:
        fail("Amount cannot be negative")

    resolved = resolve_category(state, category)
    if resolved is None:
        fail(f"Unknown category: {category}")

    next_billing = add_months(start_date, 1) if cycle == "monthly" else add_years(start_date, 1)

    subscription = Subscription(
        id=new_id(),
        name=name.strip(),
        amount=parsed_amount,
        category=resolved.id,
        billing_cycle=cycle,  # type: ignore[arg-type]
        start_date=start_date,
        next_billing_date=next_billing,
        is_active=True,
        icon=icon,
        color=color,
    )
    service.dispatch(AddSubscription(subscription))
    per = "mo" if cycle == "monthly" else "yr"
    console.print(f"[green]✓[/green] {subscription.name} added: {money(state, parsed_amount)}/{per}")


def list_subscriptions_command() -> None:
    """List subscriptions with monthly and yearly totals."""
    service, _ = open_ledger()
    state = service.state
    today = service.today()

    if not state.subscriptions:
        console.print("[yellow]No subscriptions[/yellow]")
        return

    table = Table(title="Subscriptions")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="white")
    table.add_column("Amount", justify="right")
    table.add_column("Cycle", style="cyan")
    table.add_column("≈ Monthly", justify="right")
    table.add_column("Next billing", style="cyan")
    table.add_column("Status", justify="center")

    for sub in state.subscriptions:
        days = days_until(sub.next_billing_date, today)
        when = f"{sub.next_billing_date.isoformat()} ({days:+d}d)"
        table.add_row(
            sub.id[:8],
            f"{sub.icon} {sub.name}" if sub.icon else sub.name,
            money(state, sub.amount),
            sub.billing_cycle,
            money(state, subscription_monthly_cost(sub)),
            when,
            "[green]active[/green]" if sub.is_active else "[dim]paused[/dim]",
        )

    console.print(table)
    console.print(f"Monthly total: [bold]{money(state, subscriptions_monthly_total(state.subscriptions))}[/bold]")
    console.print(f"Yearly total:  [bold]{money(state, subscriptions_yearly_total(state.subscriptions))}[/bold]")


def toggle_subscription_command(subscription_id: str) -> None:
    """Pause or resume a subscription."""
    service, _ = open_ledger()

    matched = _match_id([s.id for s in service.state.subscriptions], subscription_id)
    if matched is None:
        fail(f"Subscription not found: {subscription_id}")

    service.dispatch(ToggleSubscription(matched))
    sub = next(s for s in service.state.subscriptions if s.id == matched)
    console.print(f"[green]✓[/green] {sub.name} is now {'active' if sub.is_active else 'paused'}")


def delete_subscription_command(subscription_id: str) -> None:
    """Stop tracking a subscription."""
    service, _ = open_ledger()

    matched = _match_id([s.id for s in service.state.subscriptions], subscription_id)
    if matched is None:
        fail(f"Subscription not found: {subscription_id}")

    service.dispatch(DeleteSubscription(matched))
    console.print("[green]✓[/green] Subscription deleted")
