"""Tests for expensa.export CSV and JSON output."""

import json
from datetime import date
from decimal import Decimal
from pathlib import Path

from expensa.domain.models import DEFAULT_CATEGORIES, EntityId, Expense, Money, Settings
from expensa.export import expenses_to_csv, expenses_to_json, export_filename, write_export

EXPENSES = [
    Expense(
        id=EntityId("e1"),
        amount=Money(Decimal("1250.5")),
        description='Dinner "out"',
        category=EntityId("1"),
        date=date(2024, 1, 5),
        tags=("friends", "weekend"),
    ),
    Expense(
        id=EntityId("e2"),
        amount=Money(Decimal("40")),
        description="Bus",
        category=EntityId("2"),
        date=date(2024, 1, 6),
    ),
]


class TestCsv:
    """Tests for expenses_to_csv."""

    def test_header_and_quoting(self) -> None:
        """Should quote every field and use category names."""
        lines = expenses_to_csv(EXPENSES, Settings(), DEFAULT_CATEGORIES).splitlines()

        assert lines[0] == '"Date","Amount","Description","Category","Tags"'
        assert lines[1] == '"01/05/2024","₹1,250.50","Dinner ""out""","Food","friends, weekend"'
        assert lines[2] == '"01/06/2024","₹40.00","Bus","Transport",""'

    def test_uses_settings_format(self) -> None:
        """Should apply the configured currency and date format."""
        settings = Settings(currency="EUR", date_format="dd-MM-yyyy")
        lines = expenses_to_csv(EXPENSES[1:], settings).splitlines()

        assert lines[1] == '"06-01-2024","€40.00","Bus","2",""'

    def test_empty_export_has_header(self) -> None:
        """Should still write the header for no expenses."""
        assert expenses_to_csv([], Settings()).strip() == '"Date","Amount","Description","Category","Tags"'


class TestJson:
    """Tests for expenses_to_json."""

    def test_numbers_and_iso_dates(self) -> None:
        """Should write numeric amounts and ISO dates."""
        data = json.loads(expenses_to_json(EXPENSES))

        assert data[0]["amount"] == 1250.5
        assert data[0]["date"] == "2024-01-05"
        assert data[0]["tags"] == ["friends", "weekend"]


class TestWriteExport:
    """Tests for write_export and export_filename."""

    def test_filename(self) -> None:
        """Should embed the date and extension."""
        assert export_filename("csv", date(2024, 1, 31)) == "expenses_2024-01-31.csv"

    def test_writes_file(self, tmp_path: Path) -> None:
        """Should write the export to the given path."""
        output = tmp_path / "out" / "expenses.json"

        written = write_export(EXPENSES, "json", output, Settings())

        assert written == output
        assert len(json.loads(output.read_text(encoding="utf-8"))) == 2
