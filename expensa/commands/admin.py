"""Admin commands for init, backup, categories, settings and config."""

import shutil
import sqlite3
import sys
from datetime import datetime
from pathlib import Path

from rich.table import Table

from expensa.commands.common import console, fail, open_ledger, resolve_category
from expensa.config import (
    DEFAULT_CONFIG,
    create_default_config,
    get_config_path,
    load_app_config,
    load_config,
    parse_option,
    set_option,
)
from expensa.domain.commands import AddCategory, DeleteCategory, UpdateCategory, UpdateSettings
from expensa.domain.ledger import category_in_use
from expensa.domain.models import Category, default_state, new_id
from expensa.store import get_saved_at, init_database, save_state


def init_command(force: bool = False) -> None:
    """Initialize expensa database and configuration."""
    config_path = get_config_path()
    config_exists = config_path.exists()

    if not config_exists:
        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")

    db_path = load_app_config(config_path).db_path
    db_exists = db_path.exists()

    # Guard: refuse to overwrite without force flag
    if db_exists and not force:
        console.print("[red]Initialization failed:[/red]", style="bold")
        console.print(f"  Database already exists: {db_path}")
        console.print("\n[yellow]Use 'expensa init --force' to reset it to the default ledger[/yellow]")
        sys.exit(1)

    try:
        console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
        init_database(db_path)
        save_state(default_state(), db_path)
        console.print("[green]✓[/green] Database initialized with default categories")
    except sqlite3.Error as e:
        fail(f"Database error: {e}")
    except OSError as e:
        fail(f"Filesystem error: {e}")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Database: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def backup_command(output_dir: str | None = None) -> None:
    """Backup database and configuration files."""
    config_path = get_config_path()
    db_path = load_app_config(config_path).db_path

    if not db_path.exists():
        fail("Database not found. Run 'expensa init' first.")

    backup_dir = Path(output_dir).expanduser() if output_dir else db_path.parent / "backups"
    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    try:
        db_backup = backup_dir / f"expensa_{timestamp}.db"
        shutil.copy2(db_path, db_backup)
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        if config_path.exists():
            config_backup = backup_dir / f"config_{timestamp}.toml"
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

        console.print("\n[green]Backup complete![/green]", style="bold")
        console.print(f"[dim]Last saved: {get_saved_at(db_path) or 'never'}[/dim]")

    except (OSError, sqlite3.Error) as e:
        fail(f"Backup failed: {e}")


def list_categories_command() -> None:
    """List categories and whether they are in use."""
    service, _ = open_ledger()
    state = service.state

    table = Table(title="Categories")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="white")
    table.add_column("Color", style="cyan")
    table.add_column("In use", justify="center")

    for category in state.categories:
        name = f"{category.icon} {category.name}" if category.icon else category.name
        table.add_row(
            category.id,
            name,
            f"[{category.color}]■[/{category.color}] {category.color}",
            "✓" if category_in_use(state, category.id) else "",
        )

    console.print(table)


def add_category_command(name: str, color: str = "#95A5A6", icon: str | None = None) -> None:
    """Add a category, or update color/icon of an existing one with the same name."""
    service, _ = open_ledger()

    existing = resolve_category(service.state, name)
    if existing is not None:
        updated = Category(id=existing.id, name=existing.name, color=color, icon=icon or existing.icon)
        service.dispatch(UpdateCategory(updated))
        console.print(f"[green]✓[/green] Category '{existing.name}' updated")
        return

    category = Category(id=new_id(), name=name.strip(), color=color, icon=icon)
    service.dispatch(AddCategory(category))
    console.print(f"[green]✓[/green] Category '{category.name}' added (ID: {category.id})")


def delete_category_command(category: str) -> None:
    """Delete a category that nothing references."""
    service, _ = open_ledger()

    resolved = resolve_category(service.state, category)
    if resolved is None:
        fail(f"Unknown category: {category}")

    if not service.dispatch(DeleteCategory(resolved.id)):
        console.print(
            f"[yellow]Category '{resolved.name}' is used by expenses, budgets or recurring expenses "
            "and was not deleted[/yellow]"
        )
        sys.exit(1)

    console.print(f"[green]✓[/green] Category '{resolved.name}' deleted")


def settings_command(
    currency: str | None = None,
    theme: str | None = None,
    date_format: str | None = None,
) -> None:
    """Show or change ledger settings."""
    service, _ = open_ledger()

    changes: dict[str, str] = {}
    if currency:
        changes["currency"] = currency.upper()
    if theme:
        if theme not in ("light", "dark"):
            fail("Theme must be 'light' or 'dark'")
        changes["theme"] = theme
    if date_format:
        changes["date_format"] = date_format

    if changes and service.dispatch(UpdateSettings(changes)):
        console.print("[green]✓[/green] Settings updated")

    settings = service.state.settings
    console.print(f"  Currency: {settings.currency}")
    console.print(f"  Theme: {settings.theme}")
    console.print(f"  Date format: {settings.date_format}")


def config_command(name: str | None = None, value: str | None = None) -> None:
    """Show the config file, or set one "section.key" option in it."""
    config_path = get_config_path()

    if name is None:
        try:
            config = load_config(config_path)
        except FileNotFoundError:
            config = {}
        console.print(f"[dim]Config: {config_path}[/dim]")
        for section, defaults in DEFAULT_CONFIG.items():
            for key, default in defaults.items():
                current = config.get(section, {}).get(key, default)
                console.print(f"  {section}.{key} = {current!r}")
        return

    if value is None:
        fail(f"Missing value for '{name}'")

    try:
        section, key, parsed = parse_option(name, value)
        set_option(section, key, parsed, config_path)
    except ValueError as e:
        fail(str(e))
    except OSError as e:
        fail(f"Filesystem error: {e}")

    console.print(f"[green]✓[/green] Set {section}.{key} = {parsed!r}")
