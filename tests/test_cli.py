"""Smoke tests for the expensa CLI."""

import json
from decimal import Decimal
from pathlib import Path

import pytest
import tomli_w
from typer.testing import CliRunner

from expensa.cli import app
from expensa.commands.expenses import short_id
from expensa.config import load_app_config
from expensa.store import load_state

runner = CliRunner()


@pytest.fixture
def db_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    config_home = tmp_path / "config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))

    path = tmp_path / "data" / "expensa.db"
    config_file = config_home / "expensa" / "config.toml"
    config_file.parent.mkdir(parents=True)
    with open(config_file, "wb") as f:
        tomli_w.dump({"ledger": {"db_path": str(path)}}, f)
    return path


class TestExpenseCommands:
    """Tests for add, list and delete."""

    def test_add_persists_expense(self, db_path: Path) -> None:
        """Should store the expense under the resolved category."""
        result = runner.invoke(app, ["add", "250", "Groceries", "food", "--date", "2024-01-05", "--tags", "home"])

        assert result.exit_code == 0, result.output
        state = load_state(db_path)
        assert state is not None
        assert len(state.expenses) == 1
        assert state.expenses[0].category == "1"
        assert state.expenses[0].tags == ("home",)

    def test_add_rejects_non_positive_amount(self, db_path: Path) -> None:
        """Should exit with status 1 for a zero amount."""
        result = runner.invoke(app, ["add", "0", "Nothing", "Food"])

        assert result.exit_code == 1
        assert "Amount must be positive" in result.output

    def test_list_filters_by_search(self, db_path: Path) -> None:
        """Should list only matching expenses."""
        runner.invoke(app, ["add", "250", "Groceries", "Food", "--date", "2024-01-05"])
        runner.invoke(app, ["add", "40", "Bus ticket", "Transport", "--date", "2024-01-06"])

        result = runner.invoke(app, ["list", "--search", "bus"])

        assert result.exit_code == 0, result.output
        assert "Bus ticket" in result.output
        assert "Groceries" not in result.output


class TestCategoryCommands:
    """Tests for category management."""

    def test_delete_in_use_category_is_refused(self, db_path: Path) -> None:
        """Should keep a category that an expense uses."""
        runner.invoke(app, ["add", "250", "Groceries", "Food", "--date", "2024-01-05"])

        result = runner.invoke(app, ["category", "delete", "Food"])

        assert result.exit_code == 1
        state = load_state(db_path)
        assert state is not None
        assert "Food" in [c.name for c in state.categories]

    def test_delete_unused_category(self, db_path: Path) -> None:
        """Should delete a category nothing references."""
        result = runner.invoke(app, ["category", "delete", "Other"])

        assert result.exit_code == 0, result.output
        state = load_state(db_path)
        assert state is not None
        assert "Other" not in [c.name for c in state.categories]


class TestBudgetAndExport:
    """Tests for budgets and export."""

    def test_budget_set_replaces_same_period(self, db_path: Path) -> None:
        """Should keep one monthly budget per category."""
        runner.invoke(app, ["budget", "set", "Food", "5000"])
        result = runner.invoke(app, ["budget", "set", "Food", "6000"])

        assert result.exit_code == 0, result.output
        state = load_state(db_path)
        assert state is not None
        assert len(state.budgets) == 1
        assert str(state.budgets[0].amount) == "6000"

    def test_export_json(self, db_path: Path, tmp_path: Path) -> None:
        """Should write the filtered expenses to the output file."""
        runner.invoke(app, ["add", "250", "Groceries", "Food", "--date", "2024-01-05"])
        output = tmp_path / "export.json"

        result = runner.invoke(app, ["export", "--format", "json", "--output", str(output)])

        assert result.exit_code == 0, result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert [e["description"] for e in data] == ["Groceries"]


class TestRecurringCommands:
    """Tests for recurring expenses."""

    def test_past_start_generates_occurrence(self, db_path: Path) -> None:
        """Should record the first due occurrence right after adding a past template."""
        result = runner.invoke(
            app,
            ["recurring", "add", "1000", "Rent", "Bills", "--start", "2024-01-01", "--end", "2024-02-15"],
        )

        assert result.exit_code == 0, result.output
        state = load_state(db_path)
        assert state is not None
        assert [e.date.isoformat() for e in state.expenses] == ["2024-02-01"]

    def test_run_twice_adds_nothing_more(self, db_path: Path) -> None:
        """Should not duplicate occurrences across runs."""
        runner.invoke(
            app,
            ["recurring", "add", "1000", "Rent", "Bills", "--start", "2024-01-01", "--end", "2024-02-15"],
        )

        result = runner.invoke(app, ["recurring", "run"])

        assert result.exit_code == 0, result.output
        state = load_state(db_path)
        assert state is not None
        assert len(state.expenses) == 1


class TestAmountInput:
    """Tests for amount parsing at the command line."""

    def test_nan_is_rejected(self, db_path: Path) -> None:
        """Should exit with a message instead of storing NaN."""
        result = runner.invoke(app, ["add", "nan", "Mystery", "Food"])

        assert result.exit_code == 1
        assert "Invalid amount" in result.output

    def test_infinity_is_rejected(self, db_path: Path) -> None:
        """Should exit with a message instead of storing Infinity."""
        result = runner.invoke(app, ["add", "inf", "Mystery", "Food"])

        assert result.exit_code == 1
        assert "Invalid amount" in result.output

    def test_currency_symbol_and_separators(self, db_path: Path) -> None:
        """Should accept amounts typed with a symbol and thousands separators."""
        result = runner.invoke(app, ["add", "₹1,250.50", "Rent share", "Bills", "--date", "2024-01-05"])

        assert result.exit_code == 0, result.output
        state = load_state(db_path)
        assert state is not None
        assert state.expenses[0].amount == Decimal("1250.50")


class TestGeneratedExpenseIds:
    """Tests for editing and deleting expenses made from recurring templates."""

    def test_delete_with_listed_id(self, db_path: Path) -> None:
        """Should delete one generated occurrence by the ID that list prints."""
        runner.invoke(app, ["config", "recurrence.catch_up", "true"])
        runner.invoke(
            app,
            [
                "recurring", "add", "1000", "Rent", "Bills",
                "--frequency", "yearly", "--start", "2020-01-01", "--end", "2022-06-30",
            ],
        )
        state = load_state(db_path)
        assert state is not None
        generated = state.expenses
        assert [e.date.isoformat() for e in generated] == ["2021-01-01", "2022-01-01"]

        shown = short_id(generated[0].id)
        listing = runner.invoke(app, ["list"])
        assert shown in listing.output

        result = runner.invoke(app, ["delete", shown])

        assert result.exit_code == 0, result.output
        state = load_state(db_path)
        assert state is not None
        assert [e.id for e in state.expenses] == [generated[1].id]


class TestConfigCommand:
    """Tests for the config command."""

    def test_set_option(self, db_path: Path) -> None:
        """Should write a typed value into the config file."""
        result = runner.invoke(app, ["config", "recurrence.interval_hours", "6"])

        assert result.exit_code == 0, result.output
        config = load_app_config()
        assert config.recurrence_interval_hours == 6
        assert config.db_path == db_path

    def test_unknown_option_is_rejected(self, db_path: Path) -> None:
        """Should exit with status 1 for an option that does not exist."""
        result = runner.invoke(app, ["config", "ledger.colour", "blue"])

        assert result.exit_code == 1
        assert "Unknown option" in result.output
