"""CLI entry point for expensa."""

import time
import tomllib

import typer

from expensa.commands.admin import (
    add_category_command,
    backup_command,
    config_command,
    delete_category_command,
    init_command,
    list_categories_command,
    settings_command,
)
from expensa.commands.budget import delete_command as delete_budget_command
from expensa.commands.budget import set_command, status_command
from expensa.commands.common import console, fail, open_ledger
from expensa.commands.expenses import add_command, delete_command, edit_command, list_command
from expensa.commands.recurring import (
    add_recurring_command,
    add_subscription_command,
    delete_recurring_command,
    delete_subscription_command,
    list_recurring_command,
    list_subscriptions_command,
    run_recurring_command,
    toggle_subscription_command,
)
from expensa.commands.report import export_command, insights_command, report_command
from expensa.config import load_app_config
from expensa.log import configure_logging
from expensa.service import RecurrenceScheduler

app = typer.Typer(
    name="expensa",
    help="Expensa - personal expense tracking with budgets, recurring expenses and subscriptions",
    add_completion=False,
)
budget_app = typer.Typer(help="Manage spending caps per category", no_args_is_help=True)
recurring_app = typer.Typer(help="Manage recurring expense templates", no_args_is_help=True)
subscription_app = typer.Typer(help="Track subscriptions", no_args_is_help=True)
category_app = typer.Typer(help="Manage expense categories", no_args_is_help=True)

app.add_typer(budget_app, name="budget")
app.add_typer(recurring_app, name="recurring")
app.add_typer(subscription_app, name="subscription")
app.add_typer(category_app, name="category")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at INFO level to stderr"),
) -> None:
    """Expensa - personal expense tracking with budgets, recurring expenses and subscriptions."""
    try:
        config = load_app_config()
    except tomllib.TOMLDecodeError as e:
        fail(f"Invalid config file: {e}")
    configure_logging("INFO" if verbose else config.log_level, config.log_json)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Reset an existing database to the default ledger"),
) -> None:
    """Initialize expensa database and configuration."""
    init_command(force)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: next to the database)"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


@app.command()
def add(
    amount: str,
    description: str,
    category: str,
    date: str = typer.Option(None, "--date", "-d", help="Expense date (default: today)"),
    tags: str = typer.Option(None, "--tags", "-t", help="Comma-separated tags"),
) -> None:
    """Record an expense."""
    add_command(amount, description, category, date, tags)


@app.command()
def edit(
    expense_id: str,
    amount: str = typer.Option(None, "--amount", help="New amount"),
    description: str = typer.Option(None, "--description", help="New description"),
    category: str = typer.Option(None, "--category", help="New category (name or id)"),
    date: str = typer.Option(None, "--date", help="New date"),
    tags: str = typer.Option(None, "--tags", help="New comma-separated tags"),
) -> None:
    """Edit an expense."""
    edit_command(expense_id, amount, description, category, date, tags)


@app.command()
def delete(expense_id: str) -> None:
    """Delete an expense."""
    delete_command(expense_id)


@app.command(name="list")
def list_expenses(
    query: str = typer.Option("", "--search", "-s", help="Match description or tags"),
    category: str = typer.Option(None, "--category", "-c", help="Category name or id"),
    date_from: str = typer.Option(None, "--from", help="Earliest date (inclusive)"),
    date_to: str = typer.Option(None, "--to", help="Latest date (inclusive)"),
    min_amount: str = typer.Option(None, "--min", help="Minimum amount"),
    max_amount: str = typer.Option(None, "--max", help="Maximum amount"),
    sort_by: str = typer.Option("date", "--sort", help="Sort by 'date', 'amount' or 'category'"),
    ascending: bool = typer.Option(False, "--asc", help="Sort ascending (default: descending)"),
    limit: int = typer.Option(50, help="Maximum expenses to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all matching expenses"),
) -> None:
    """List and search your expenses."""
    limit_or_all = None if all else limit
    list_command(query, category, date_from, date_to, min_amount, max_amount, sort_by, ascending, limit_or_all)


@budget_app.command(name="set")
def budget_set(
    category: str,
    amount: str,
    period: str = typer.Option("monthly", "--period", "-p", help="'daily', 'weekly' or 'monthly'"),
    start: str = typer.Option(None, "--start", help="Start date (default: today)"),
) -> None:
    """Set the budget for a category and period."""
    set_command(category, amount, period, start)


@budget_app.command(name="status")
def budget_status(
    date: str = typer.Option(None, "--date", help="Reference date (default: today)"),
) -> None:
    """Show budget progress."""
    status_command(date)


@budget_app.command(name="delete")
def budget_delete(budget_id: str) -> None:
    """Delete a budget."""
    delete_budget_command(budget_id)


@recurring_app.command(name="add")
def recurring_add(
    amount: str,
    description: str,
    category: str,
    frequency: str = typer.Option("monthly", "--frequency", "-f", help="'daily', 'weekly', 'monthly' or 'yearly'"),
    start: str = typer.Option(None, "--start", help="First occurrence (default: today)"),
    end: str = typer.Option(None, "--end", help="Last date an occurrence may fall on"),
) -> None:
    """Add a recurring expense."""
    add_recurring_command(amount, description, category, frequency, start, end)


@recurring_app.command(name="list")
def recurring_list() -> None:
    """List recurring expenses."""
    list_recurring_command()


@recurring_app.command(name="delete")
def recurring_delete(recurring_id: str) -> None:
    """Delete a recurring expense."""
    delete_recurring_command(recurring_id)


@recurring_app.command(name="run")
def recurring_run() -> None:
    """Record every recurring expense that is due."""
    run_recurring_command()


@recurring_app.command(name="watch")
def recurring_watch(
    interval: float = typer.Option(None, "--interval", help="Hours between runs (overrides config)"),
) -> None:
    """Keep running and record due recurring expenses on an interval."""
    service, config = open_ledger(generate=False)
    hours = interval if interval is not None else config.recurrence_interval_hours

    scheduler = RecurrenceScheduler(service, interval_seconds=hours * 60 * 60)
    console.print(f"[cyan]Checking recurring expenses every {hours:g}h. Press Ctrl+C to stop.[/cyan]")
    scheduler.start()

    try:
        while scheduler.running:
            time.sleep(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped[/yellow]")
    finally:
        scheduler.stop()


@subscription_app.command(name="add")
def subscription_add(
    name: str,
    amount: str,
    category: str,
    cycle: str = typer.Option("monthly", "--cycle", help="'monthly' or 'yearly'"),
    start: str = typer.Option(None, "--start", help="Start date (default: today)"),
    icon: str = typer.Option(None, "--icon", help="Display icon"),
    color: str = typer.Option(None, "--color", help="Display color"),
) -> None:
    """Add a subscription."""
    add_subscription_command(name, amount, category, cycle, start, icon, color)


@subscription_app.command(name="list")
def subscription_list() -> None:
    """List subscriptions and their totals."""
    list_subscriptions_command()


@subscription_app.command(name="toggle")
def subscription_toggle(subscription_id: str) -> None:
    """Pause or resume a subscription."""
    toggle_subscription_command(subscription_id)


@subscription_app.command(name="delete")
def subscription_delete(subscription_id: str) -> None:
    """Delete a subscription."""
    delete_subscription_command(subscription_id)


@category_app.command(name="add")
def category_add(
    name: str,
    color: str = typer.Option("#95A5A6", "--color", help="Display color"),
    icon: str = typer.Option(None, "--icon", help="Display icon"),
) -> None:
    """Add (or restyle) a category."""
    add_category_command(name, color, icon)


@category_app.command(name="list")
def category_list() -> None:
    """List categories."""
    list_categories_command()


@category_app.command(name="delete")
def category_delete(category: str) -> None:
    """Delete an unused category."""
    delete_category_command(category)


@app.command()
def settings(
    currency: str = typer.Option(None, "--currency", help="Currency code, e.g. INR, USD, EUR"),
    theme: str = typer.Option(None, "--theme", help="'light' or 'dark'"),
    date_format: str = typer.Option(None, "--date-format", help="Date pattern, e.g. dd/MM/yyyy"),
) -> None:
    """Show or change ledger settings."""
    settings_command(currency, theme, date_format)


@app.command(name="config")
def show_or_set_config(
    name: str = typer.Argument(None, help="Option to set, e.g. recurrence.catch_up"),
    value: str = typer.Argument(None, help="New value"),
) -> None:
    """Show the config file or set one option."""
    config_command(name, value)


@app.command(name="report")
def report(
    sort_by: str = typer.Option("value", help="Sort by 'value' or 'alpha'"),
    histogram: bool = typer.Option(True, help="Show histogram of your spending"),
    date: str = typer.Option(None, "--date", help="Reference date (default: today)"),
    trend: int = typer.Option(0, "--trend", help="Show daily spending for the last N days"),
) -> None:
    """Show your spending breakdown."""
    report_command(sort_by, histogram, date, trend)


@app.command()
def insights() -> None:
    """Show savings suggestions."""
    insights_command()


@app.command()
def export(
    kind: str = typer.Option("csv", "--format", help="'csv' or 'json'"),
    output: str = typer.Option(None, "--output", "-o", help="Output file (default: ./expenses_<date>.<format>)"),
    query: str = typer.Option("", "--search", "-s", help="Match description or tags"),
    category: str = typer.Option(None, "--category", "-c", help="Category name or id"),
    date_from: str = typer.Option(None, "--from", help="Earliest date (inclusive)"),
    date_to: str = typer.Option(None, "--to", help="Latest date (inclusive)"),
    sort_by: str = typer.Option("date", "--sort", help="Sort by 'date', 'amount' or 'category'"),
    ascending: bool = typer.Option(False, "--asc", help="Sort ascending"),
) -> None:
    """Export your expenses to CSV or JSON."""
    export_command(kind, output, query, category, date_from, date_to, sort_by, ascending)


if __name__ == "__main__":
    app()
