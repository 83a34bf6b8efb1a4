"""Console interface for the finance tracker."""

from __future__ import annotations

import argparse
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable, List, Optional

from finance_core.config import Settings
from finance_core.exceptions import ExportError, NotFoundError, ValidationError
from finance_core.exporter import ExcelExporter
from finance_core.logging_setup import configure_logging, get_logger
from finance_core.models import Expense, ExpenseCategory
from finance_core.services import LedgerService
from finance_core.validators import format_amount, is_future_date, parse_amount, parse_date

Ask = Callable[[str], str]
Echo = Callable[[str], None]

MENU = """
=== PERSONAL EXPENSE TRACKER ===
1. Add expense
2. View statistics
3. View expenses by date
4. Export to Excel
5. Exit"""

EXPORT_MENU = """
--- EXPORT TO EXCEL ---
1. Export all expenses
2. Export by category
3. Export by date"""

CATEGORIES: List[ExpenseCategory] = list(ExpenseCategory)

logger = get_logger("finance_core.cli")


def _format_expense(expense: Expense) -> str:
    description = expense.description or "-"
    return (
        f"{expense.date.isoformat()} {format_amount(expense.amount)}\n"
        f"  Category: {expense.category}\n"
        f"  Description: {description}"
    )


def _percentage(part: Decimal, whole: Decimal) -> str:
    if not whole:
        return "0.0%"
    return f"{part / whole * 100:.1f}%"


def _print_categories(echo: Echo) -> None:
    for index, category in enumerate(CATEGORIES, start=1):
        echo(f"{index}. {category}")


def prompt_amount(ask: Ask, echo: Echo) -> Decimal:
    while True:
        raw = ask("Enter amount: ").strip()
        if not raw:
            echo("Amount cannot be empty")
            continue
        try:
            return parse_amount(raw)
        except ValidationError as exc:
            echo(f"Invalid amount: {exc}. Please use a format like 10.50")


def prompt_category(ask: Ask, echo: Echo) -> ExpenseCategory:
    echo("\nSelect category:")
    _print_categories(echo)
    while True:
        raw = ask("Enter category number: ").strip()
        if not raw:
            echo("Category selection cannot be empty")
            continue
        if not raw.isdigit():
            echo("Invalid number format. Please enter a number.")
            continue
        choice = int(raw)
        if 1 <= choice <= len(CATEGORIES):
            return CATEGORIES[choice - 1]
        echo(f"Please enter a number between 1 and {len(CATEGORIES)}")


def prompt_date(ask: Ask, echo: Echo, today: date, *, confirm_future: bool = True) -> date:
    """Ask for a date; blank input means today.

    Future dates are accepted only after the user confirms them.
    """
    while True:
        raw = ask("Enter date (YYYY-MM-DD) or press Enter for today: ").strip()
        if not raw:
            return today
        try:
            value = parse_date(raw)
        except ValidationError:
            echo("Invalid date format. Please use YYYY-MM-DD format.")
            continue
        if confirm_future and is_future_date(value, today):
            answer = ask("Warning: Date is in the future. Is this intentional? (y/n): ")
            if answer.strip().lower() != "y":
                continue
        return value


def handle_add(ledger: LedgerService, ask: Ask, echo: Echo, today: date) -> None:
    echo("\n--- ADDING NEW EXPENSE ---")
    amount = prompt_amount(ask, echo)
    category = prompt_category(ask, echo)
    spent_on = prompt_date(ask, echo, today)
    description = ask("Enter description (optional): ")
    try:
        expense = ledger.append(Expense(amount, category, spent_on, description))
    except ValidationError as exc:
        echo(f"Error: {exc}")
        echo("Please try again.")
        return
    echo("\nExpense added successfully!")
    echo(str(expense))


def handle_statistics(ledger: LedgerService, echo: Echo) -> None:
    echo("\n--- EXPENSE STATISTICS ---")
    if not ledger.count():
        echo("No expenses recorded yet.")
        return
    total = ledger.total_amount()
    echo(f"Total expenses: {format_amount(total)} ({ledger.count()} records)")
    echo("\nExpenses by category:")
    for category, amount in ledger.sorted_category_totals():
        echo(f"  {category}: {format_amount(amount)} ({_percentage(amount, total)})")


def handle_by_date(ledger: LedgerService, ask: Ask, echo: Echo, today: date) -> None:
    echo("\n--- EXPENSES BY DATE ---")
    on = prompt_date(ask, echo, today, confirm_future=False)
    records = ledger.records_for_date(on)
    if not records:
        echo("No expenses found for this date.")
        return
    echo(f"Expenses for {on.isoformat()} (total {format_amount(ledger.total_amount_for_date(on))}):")
    echo("------------------------")
    for expense in records:
        echo(_format_expense(expense))


def handle_export(
    ledger: LedgerService, exporter: ExcelExporter, ask: Ask, echo: Echo, today: date
) -> Optional[Path]:
    echo(EXPORT_MENU)
    choice = ask("Choose an option: ").strip()
    records = ledger.all_records()
    try:
        if choice == "1":
            if not records:
                echo("No expenses to export.")
                return None
            path = exporter.export_all(records)
        elif choice == "2":
            path = exporter.export_by_category(records, prompt_category(ask, echo))
        elif choice == "3":
            path = exporter.export_by_date(records, prompt_date(ask, echo, today, confirm_future=False))
        else:
            echo("Invalid option. Please choose 1-3.")
            return None
    except (ValidationError, NotFoundError) as exc:
        echo(f"Export failed: {exc}")
        return None
    except ExportError as exc:
        logger.error("Export failed: %s", exc)
        echo(f"Export failed: {exc}")
        return None
    echo("\nSuccessfully exported expenses!")
    echo(f"File created: {path}")
    return path


def run(
    ledger: LedgerService,
    exporter: ExcelExporter,
    ask: Ask = input,
    echo: Echo = print,
    today: Callable[[], date] = date.today,
) -> int:
    """Run the interactive menu until the user exits or input ends."""
    while True:
        echo(MENU)
        try:
            choice = ask("Choose an option: ").strip()
            if choice == "1":
                handle_add(ledger, ask, echo, today())
            elif choice == "2":
                handle_statistics(ledger, echo)
            elif choice == "3":
                handle_by_date(ledger, ask, echo, today())
            elif choice == "4":
                handle_export(ledger, exporter, ask, echo, today())
            elif choice == "5":
                echo("Goodbye!")
                return 0
            else:
                echo("Invalid option. Please choose 1-5.")
        except (EOFError, KeyboardInterrupt):
            echo("\nInput stream closed. Exiting.")
            return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Personal expense tracker")
    parser.add_argument(
        "--export-dir",
        type=Path,
        help="Directory for Excel exports (default: ./exports)",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level such as DEBUG or INFO (default: INFO)",
    )
    return parser


def main(argv: Optional[List[str]] = None, ask: Ask = input, echo: Echo = print) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env().override(export_dir=args.export_dir, log_level=args.log_level)
    configure_logging(settings.log_level)

    ledger = LedgerService()
    exporter = ExcelExporter(settings.export_dir)
    return run(ledger, exporter, ask=ask, echo=echo)


if __name__ == "__main__":
    raise SystemExit(main())
