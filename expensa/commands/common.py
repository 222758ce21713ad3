"""Helpers shared by CLI commands: console, input parsing and ledger loading."""

import sqlite3
import sys
from datetime import date
from decimal import InvalidOperation
from functools import partial
from pathlib import Path
from typing import NoReturn

import pandas as pd
from rich.console import Console

from expensa.config import AppConfig, load_app_config
from expensa.dates import parse_date
from expensa.domain.currency import format_money, parse_money
from expensa.domain.models import Category, EntityId, LedgerState, Money
from expensa.service import LedgerService
from expensa.store import database_exists, init_database, load_or_default, save_state

console = Console()


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]{message}[/red]", style="bold")
    sys.exit(1)


def parse_date_input(raw_date: str) -> date:
    """Parse a user-entered date.

    ISO dates are taken as-is; anything else goes through pandas.to_datetime
    with day-first preference, so "31/01/2025" is the 31st of January.

    Args:
        raw_date: Date text, e.g. "2025-01-31" or "31/01/2025".

    Returns:
        Calendar date.

    Raises:
        ValueError: If the date cannot be parsed.
    """
    try:
        return parse_date(raw_date)
    except ValueError:
        pass

    try:
        return pd.to_datetime(raw_date, dayfirst=True).date()
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw_date}': {e}") from e


def parse_amount_input(raw_amount: str) -> Money:
    """Parse a user-entered amount such as "250", "1,250.50" or "₹1,250".

    Currency symbols and separators are dropped by parse_money; letters are
    refused, so "nan", "inf" and "1e5" never reach the ledger.

    Raises:
        ValueError: If the amount is not a finite number.
    """
    if any(ch.isalpha() for ch in raw_amount) or not any(ch.isdigit() for ch in raw_amount):
        raise ValueError(f"Invalid amount '{raw_amount}'")

    amount = parse_money(raw_amount)
    if not amount.is_finite():
        raise ValueError(f"Invalid amount '{raw_amount}'")
    return amount


def resolve_category(state: LedgerState, value: str) -> Category | None:
    """Find a category by id or (case-insensitive) name.

    Args:
        state: Snapshot holding the categories.
        value: Category id or name.

    Returns:
        Matching Category or None.
    """
    for category in state.categories:
        if category.id == value:
            return category
    lowered = value.lower()
    for category in state.categories:
        if category.name.lower() == lowered:
            return category
    return None


def category_label(state: LedgerState, category_id: EntityId) -> str:
    """Display label for a category id (icon and name when known)."""
    for category in state.categories:
        if category.id == category_id:
            return f"{category.icon} {category.name}" if category.icon else category.name
    return category_id


def money(state: LedgerState, amount: Money) -> str:
    """Format an amount in the ledger's currency."""
    return format_money(amount, state.settings.currency)


def open_ledger(config_path: Path | None = None, generate: bool = True) -> tuple[LedgerService, AppConfig]:
    """Load the persisted ledger into a service.

    Creates the database on first use and runs the recurrence generator once,
    as every process start does.

    Args:
        config_path: Config file to read. If None, uses default location.
        generate: Whether to run the recurrence generator after loading.

    Returns:
        Tuple of (service, config).
    """
    config = load_app_config(config_path)

    try:
        if not database_exists(config.db_path):
            init_database(config.db_path)
        state = load_or_default(config.db_path)
    except sqlite3.Error as e:
        fail(f"Database error: {e}")
    except (ValueError, KeyError, InvalidOperation) as e:
        fail(f"Stored ledger is corrupt: {e}")

    service = LedgerService(
        state=state,
        save=partial(save_state, db_path=config.db_path),
        catch_up=config.recurrence_catch_up,
    )

    if generate:
        for expense in service.generate_recurring():
            console.print(
                f"[dim]↻ Recorded recurring {expense.description} "
                f"({money(service.state, expense.amount)}) on {expense.date.isoformat()}[/dim]"
            )

    return service, config
