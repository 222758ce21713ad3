"""Export of expense collections to CSV and JSON.

CSV rows follow the column order Date, Amount, Description, Category, Tags with
every field quoted. JSON is the expense list in its persisted shape, amounts as
numbers.
"""

import csv
import json
from collections.abc import Iterable
from datetime import date
from pathlib import Path
from typing import Literal

import pandas as pd

from expensa.dates import format_date
from expensa.domain.currency import format_money
from expensa.domain.models import Category, Expense, Settings
from expensa.store.serialization import expense_to_dict

ExportFormat = Literal["csv", "json"]

CSV_COLUMNS = ["Date", "Amount", "Description", "Category", "Tags"]


def expenses_to_frame(
    expenses: Iterable[Expense],
    settings: Settings,
    categories: Iterable[Category] = (),
) -> pd.DataFrame:
    """Build the display table used for CSV export.

    Args:
        expenses: Expenses to export, in output order.
        settings: Supplies currency and date format.
        categories: Used to show category names instead of ids.

    Returns:
        DataFrame with the CSV columns, all values as strings.
    """
    names = {category.id: category.name for category in categories}
    rows = [
        {
            "Date": format_date(expense.date, settings.date_format),
            "Amount": format_money(expense.amount, settings.currency),
            "Description": expense.description,
            "Category": names.get(expense.category, expense.category),
            "Tags": ", ".join(expense.tags),
        }
        for expense in expenses
    ]
    return pd.DataFrame(rows, columns=CSV_COLUMNS, dtype=str)


def expenses_to_csv(
    expenses: Iterable[Expense],
    settings: Settings,
    categories: Iterable[Category] = (),
) -> str:
    """Render expenses as CSV with every field quoted.

    Returns:
        CSV text with a header row and one row per expense.
    """
    frame = expenses_to_frame(expenses, settings, categories)
    return frame.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n")


def expenses_to_json(expenses: Iterable[Expense]) -> str:
    """Render expenses as an indented JSON array."""
    return json.dumps(
        [expense_to_dict(expense, amount_as_number=True) for expense in expenses],
        indent=2,
        ensure_ascii=False,
    )


def export_filename(kind: ExportFormat, today: date) -> str:
    """Build the default export filename, e.g. expenses_2025-01-31.csv."""
    return f"expenses_{today.isoformat()}.{kind}"


def write_export(
    expenses: Iterable[Expense],
    kind: ExportFormat,
    output: Path,
    settings: Settings,
    categories: Iterable[Category] = (),
) -> Path:
    """Write an export file.

    Args:
        expenses: Expenses to export.
        kind: "csv" or "json".
        output: Destination file path.
        settings: Supplies currency and date format for CSV.
        categories: Used to show category names in CSV.

    Returns:
        The path written.

    Raises:
        OSError: If the file cannot be written.
    """
    if kind == "csv":
        content = expenses_to_csv(expenses, settings, categories)
    else:
        content = expenses_to_json(expenses)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    return output
