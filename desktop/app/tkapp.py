"""Tkinter desktop application for the finance tracker."""

from __future__ import annotations

import argparse
import tkinter as tk
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from tkinter import messagebox, ttk
from typing import Callable, Iterable, List, Optional, Sequence

from finance_core.config import Settings
from finance_core.exceptions import ExportError, NotFoundError, ValidationError
from finance_core.exporter import ExcelExporter
from finance_core.logging_setup import configure_logging
from finance_core.models import Expense, ExpenseCategory
from finance_core.services import LedgerService
from finance_core.validators import DATE_FORMAT, is_future_date, parse_date


PRIMARY_BG = "#0f172a"
SECONDARY_BG = "#1e293b"
ACCENT_BG = "#1d4ed8"
ACCENT_ACTIVE_BG = "#2563eb"
TEXT_PRIMARY = "#e2e8f0"
TEXT_MUTED = "#94a3b8"

CATEGORY_LABELS = [category.label for category in ExpenseCategory]


def _current_date() -> str:
    return date.today().strftime(DATE_FORMAT)


def sanitize_amount_input(raw: Optional[str]) -> str:
    if raw is None:
        return ""
    return raw.replace(",", "").strip()


def format_amount_display(value: Decimal | str) -> str:
    if isinstance(value, Decimal):
        return f"{value:,.2f}"
    sanitized = sanitize_amount_input(value)
    if not sanitized:
        return ""
    try:
        amount = Decimal(sanitized)
    except InvalidOperation:
        return value.strip()
    return f"{amount:,.2f}"


def validate_form(amount: str, category: str, date_text: str) -> List[str]:
    """Return user-facing messages for every problem in the add-expense form."""
    errors: List[str] = []

    amount_text = sanitize_amount_input(amount)
    if not amount_text:
        errors.append("Amount is required.")
    else:
        try:
            amount_value = Decimal(amount_text)
        except InvalidOperation:
            errors.append("Amount must be a number.")
        else:
            if not amount_value.is_finite() or amount_value <= 0:
                errors.append("Amount must be greater than zero.")

    if category.strip() not in CATEGORY_LABELS:
        errors.append("Category is required.")

    if not date_text.strip():
        errors.append("Date is required.")
    else:
        try:
            parse_date(date_text)
        except ValidationError:
            errors.append("Date must use the YYYY-MM-DD format.")

    return errors


class ExpenseTab(ttk.Frame):
    """Form and table for recording and browsing expenses."""

    def __init__(
        self,
        master: tk.Misc,
        ledger: LedgerService,
        on_change: Callable[[], None],
    ) -> None:
        super().__init__(master, padding=16, style="Panel.TFrame")
        self.ledger = ledger
        self.on_change = on_change

        self.amount_var = tk.StringVar()
        self.category_var = tk.StringVar(value=CATEGORY_LABELS[0])
        self.date_var = tk.StringVar(value=_current_date())
        self.description_var = tk.StringVar()
        self.filter_date_var = tk.StringVar()

        self._build_form()
        self._build_table()
        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)

    def _build_form(self) -> None:
        form = ttk.LabelFrame(self, text="Add Expense", style="Card.TLabelframe")
        form.grid(row=0, column=0, sticky="ew", padx=4, pady=(0, 12))
        form.columnconfigure(0, weight=1)
        form.columnconfigure(1, weight=1)

        def add_field(label: str, var: tk.StringVar, column: int, row: int) -> ttk.Entry:
            ttk.Label(form, text=label, style="FormLabel.TLabel").grid(
                column=column, row=row, sticky="w", padx=4, pady=4
            )
            entry = ttk.Entry(form, textvariable=var, style="App.TEntry")
            entry.grid(column=column, row=row + 1, sticky="ew", padx=4, pady=(0, 8))
            return entry

        amount_entry = add_field("Amount", self.amount_var, 0, 0)
        amount_entry.bind("<FocusOut>", self._handle_amount_focus_out)

        ttk.Label(form, text="Category", style="FormLabel.TLabel").grid(
            column=1, row=0, sticky="w", padx=4, pady=4
        )
        ttk.Combobox(
            form,
            textvariable=self.category_var,
            values=CATEGORY_LABELS,
            state="readonly",
            style="App.TCombobox",
        ).grid(column=1, row=1, sticky="ew", padx=4, pady=(0, 8))

        add_field("Date (YYYY-MM-DD)", self.date_var, 0, 2)
        add_field("Description", self.description_var, 1, 2)

        button_row = ttk.Frame(form, style="Panel.TFrame")
        button_row.grid(column=0, row=4, columnspan=2, sticky="e", padx=4, pady=4)
        ttk.Button(
            button_row,
            text="Reset",
            command=self.reset_form,
            style="Secondary.TButton",
        ).grid(column=0, row=0, padx=4)
        ttk.Button(
            button_row,
            text="Add Expense",
            command=self.submit,
            style="Primary.TButton",
        ).grid(column=1, row=0, padx=4)

    def _build_table(self) -> None:
        table_frame = ttk.Frame(self, style="Panel.TFrame")
        table_frame.grid(row=1, column=0, sticky="nsew")
        table_frame.columnconfigure(0, weight=1)
        table_frame.rowconfigure(1, weight=1)

        filter_bar = ttk.Frame(table_frame, style="Panel.TFrame")
        filter_bar.grid(row=0, column=0, columnspan=2, sticky="ew", pady=(0, 8))
        ttk.Label(filter_bar, text="Show date (YYYY-MM-DD)", style="FormLabel.TLabel").grid(
            row=0, column=0, padx=4
        )
        ttk.Entry(filter_bar, textvariable=self.filter_date_var, style="App.TEntry").grid(
            row=0, column=1, padx=4
        )
        ttk.Button(
            filter_bar, text="Filter", command=self.populate, style="Secondary.TButton"
        ).grid(row=0, column=2, padx=4)
        ttk.Button(
            filter_bar, text="Show All", command=self.clear_filter, style="Secondary.TButton"
        ).grid(row=0, column=3, padx=4)

        columns = ("date", "amount", "category", "description")
        self.tree = ttk.Treeview(
            table_frame,
            columns=columns,
            show="headings",
            height=10,
            style="App.Treeview",
        )
        for key in columns:
            width = 120 if key in ("date", "amount") else 220
            self.tree.heading(key, text=key.capitalize(), anchor="w")
            self.tree.column(key, width=width, anchor="w")

        vsb = ttk.Scrollbar(table_frame, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscroll=vsb.set)

        self.tree.grid(row=1, column=0, sticky="nsew")
        vsb.grid(row=1, column=1, sticky="ns")

    def submit(self) -> None:
        errors = validate_form(self.amount_var.get(), self.category_var.get(), self.date_var.get())
        if errors:
            messagebox.showerror("Invalid Expense", "\n".join(errors), parent=self)
            return

        spent_on = parse_date(self.date_var.get())
        if is_future_date(spent_on) and not messagebox.askyesno(
            "Future Date", "The date is in the future. Is this intentional?", parent=self
        ):
            return

        try:
            self.ledger.append(
                Expense(
                    sanitize_amount_input(self.amount_var.get()),
                    ExpenseCategory.parse(self.category_var.get()),
                    spent_on,
                    self.description_var.get(),
                )
            )
        except ValidationError as exc:
            messagebox.showerror("Invalid Expense", str(exc), parent=self)
            return

        self.reset_form()
        self.populate()
        self.on_change()

    def visible_records(self) -> Sequence[Expense]:
        filter_text = self.filter_date_var.get().strip()
        if not filter_text:
            return self.ledger.all_records()
        return self.ledger.records_for_date(parse_date(filter_text))

    def populate(self) -> None:
        try:
            records = self.visible_records()
        except ValidationError as exc:
            messagebox.showerror("Invalid Filter", str(exc), parent=self)
            return
        self.tree.delete(*self.tree.get_children())
        for expense in records:
            values = (
                expense.date.strftime(DATE_FORMAT),
                format_amount_display(expense.amount),
                expense.category.label,
                expense.description or "-",
            )
            self.tree.insert("", "end", values=values)

    def clear_filter(self) -> None:
        self.filter_date_var.set("")
        self.populate()

    def reset_form(self) -> None:
        self.amount_var.set("")
        self.description_var.set("")
        self.date_var.set(_current_date())

    def _handle_amount_focus_out(self, _event: object) -> None:
        self.amount_var.set(format_amount_display(self.amount_var.get()))


class StatisticsTab(ttk.Frame):
    """Per-category breakdown and spreadsheet export actions."""

    def __init__(self, master: tk.Misc, ledger: LedgerService, exporter: ExcelExporter) -> None:
        super().__init__(master, padding=16, style="Panel.TFrame")
        self.ledger = ledger
        self.exporter = exporter
        self.export_category_var = tk.StringVar(value=CATEGORY_LABELS[0])
        self.export_date_var = tk.StringVar(value=_current_date())

        self.columnconfigure(0, weight=1)
        self.rowconfigure(0, weight=1)

        self.tree = ttk.Treeview(
            self, columns=("category", "total"), show="headings", height=12, style="App.Treeview"
        )
        self.tree.heading("category", text="Category", anchor="w")
        self.tree.heading("total", text="Total", anchor="w")
        self.tree.column("category", width=260, anchor="w")
        self.tree.column("total", width=140, anchor="w")
        self.tree.grid(row=0, column=0, sticky="nsew")

        export_box = ttk.LabelFrame(self, text="Export to Excel", style="Card.TLabelframe")
        export_box.grid(row=1, column=0, sticky="ew", pady=(12, 0))
        ttk.Button(
            export_box, text="Export All", command=self.export_all, style="Primary.TButton"
        ).grid(row=0, column=0, padx=4, pady=4, sticky="w")
        ttk.Combobox(
            export_box,
            textvariable=self.export_category_var,
            values=CATEGORY_LABELS,
            state="readonly",
            style="App.TCombobox",
        ).grid(row=1, column=0, padx=4, pady=4, sticky="ew")
        ttk.Button(
            export_box, text="Export Category", command=self.export_category, style="Secondary.TButton"
        ).grid(row=1, column=1, padx=4, pady=4)
        ttk.Entry(export_box, textvariable=self.export_date_var, style="App.TEntry").grid(
            row=2, column=0, padx=4, pady=4, sticky="ew"
        )
        ttk.Button(
            export_box, text="Export Date", command=self.export_date, style="Secondary.TButton"
        ).grid(row=2, column=1, padx=4, pady=4)

    def populate(self) -> None:
        self.tree.delete(*self.tree.get_children())
        for category, total in self.ledger.sorted_category_totals():
            self.tree.insert("", "end", values=(category.label, format_amount_display(total)))

    def export_all(self) -> None:
        self._run_export(lambda records: self.exporter.export_all(records))

    def export_category(self) -> None:
        self._run_export(
            lambda records: self.exporter.export_by_category(records, self.export_category_var.get())
        )

    def export_date(self) -> None:
        self._run_export(lambda records: self.exporter.export_by_date(records, self.export_date_var.get()))

    def _run_export(self, action: Callable[[Iterable[Expense]], Path]) -> None:
        try:
            path = action(self.ledger.all_records())
        except (ValidationError, NotFoundError) as exc:
            messagebox.showwarning("Nothing to Export", str(exc), parent=self)
            return
        except ExportError as exc:
            messagebox.showerror("Export Failed", str(exc), parent=self)
            return
        messagebox.showinfo("Export Complete", f"File created:\n{path}", parent=self)


class FinanceTrackerApp(tk.Tk):
    """Main application window."""

    def __init__(self, settings: Settings) -> None:
        super().__init__()
        self.title("Personal Expense Tracker")
        self.geometry("960x640")
        self.minsize(820, 560)
        self.configure(bg=PRIMARY_BG)

        self._configure_styles()

        self.ledger = LedgerService()
        self.exporter = ExcelExporter(settings.export_dir)

        self.total_var = tk.StringVar(value="0.00")
        self.count_var = tk.StringVar(value="0")
        self.today_var = tk.StringVar(value="0.00")

        self._build_layout()
        self.refresh_all()

    def _configure_styles(self) -> None:
        style = ttk.Style(self)
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass

        style.configure("TFrame", background=PRIMARY_BG)
        style.configure("TLabel", background=PRIMARY_BG, foreground=TEXT_PRIMARY)

        style.configure("Panel.TFrame", background=SECONDARY_BG, relief="flat")
        style.configure("Card.TLabelframe", background=SECONDARY_BG, foreground=TEXT_PRIMARY)
        style.configure("Card.TLabelframe.Label", background=SECONDARY_BG, foreground=TEXT_PRIMARY)
        style.configure("Header.TFrame", background=PRIMARY_BG)
        style.configure("Summary.TFrame", background=SECONDARY_BG)
        style.configure("Metric.TFrame", background=SECONDARY_BG)

        style.configure("FormLabel.TLabel", background=SECONDARY_BG, foreground=TEXT_MUTED, font=("Segoe UI", 9))
        style.configure("Header.TLabel", background=PRIMARY_BG, foreground=TEXT_PRIMARY, font=("Segoe UI", 20, "bold"))
        style.configure("MetricLabel.TLabel", background=SECONDARY_BG, foreground=TEXT_MUTED, font=("Segoe UI", 9, "bold"))
        style.configure("MetricValue.TLabel", background=SECONDARY_BG, foreground=TEXT_PRIMARY, font=("Segoe UI", 16, "bold"))

        style.configure(
            "App.TEntry",
            fieldbackground=SECONDARY_BG,
            background=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            insertcolor=TEXT_PRIMARY,
            bordercolor=ACCENT_BG,
        )
        style.configure(
            "App.TCombobox",
            fieldbackground=SECONDARY_BG,
            background=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            arrowcolor=TEXT_PRIMARY,
        )
        style.map("App.TCombobox", fieldbackground=[("readonly", SECONDARY_BG)])

        style.configure(
            "Primary.TButton",
            background=ACCENT_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=ACCENT_BG,
            padding=(18, 6),
        )
        style.map("Primary.TButton", background=[("active", ACCENT_ACTIVE_BG)])
        style.configure(
            "Secondary.TButton",
            background=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=SECONDARY_BG,
            padding=(14, 6),
        )
        style.map("Secondary.TButton", background=[("active", ACCENT_BG)])

        style.configure(
            "App.Treeview",
            background=SECONDARY_BG,
            fieldbackground=SECONDARY_BG,
            foreground=TEXT_PRIMARY,
            bordercolor=SECONDARY_BG,
            rowheight=28,
        )
        style.configure("App.Treeview.Heading", background=SECONDARY_BG, foreground=TEXT_MUTED, relief="flat")
        style.map("App.Treeview", background=[("selected", ACCENT_BG)])

        style.configure("App.TNotebook", background=PRIMARY_BG, borderwidth=0)
        style.configure("App.TNotebook.Tab", background=SECONDARY_BG, foreground=TEXT_MUTED, padding=(16, 10))
        style.map("App.TNotebook.Tab", background=[("selected", ACCENT_BG)])

    def _build_layout(self) -> None:
        self.columnconfigure(0, weight=1)
        self.rowconfigure(2, weight=1)

        header = ttk.Frame(self, padding=20, style="Header.TFrame")
        header.grid(row=0, column=0, sticky="ew")
        ttk.Label(header, text="Personal Expense Tracker", style="Header.TLabel").grid(row=0, column=0, sticky="w")

        summary = ttk.Frame(self, padding=(20, 10), style="Summary.TFrame")
        summary.grid(row=1, column=0, sticky="ew")
        summary.columnconfigure((0, 1, 2), weight=1)

        def build_metric(column: int, label: str, var: tk.StringVar) -> None:
            container = ttk.Frame(summary, style="Metric.TFrame", padding=(16, 12))
            container.grid(row=0, column=column, sticky="ew", padx=6)
            ttk.Label(container, text=label, style="MetricLabel.TLabel").grid(row=0, column=0, sticky="w")
            ttk.Label(container, textvariable=var, style="MetricValue.TLabel").grid(row=1, column=0, sticky="w")

        build_metric(0, "Total Spent", self.total_var)
        build_metric(1, "Spent Today", self.today_var)
        build_metric(2, "Records", self.count_var)

        notebook = ttk.Notebook(self, style="App.TNotebook")
        notebook.grid(row=2, column=0, sticky="nsew")

        self.expense_tab = ExpenseTab(notebook, self.ledger, self.refresh_all)
        self.statistics_tab = StatisticsTab(notebook, self.ledger, self.exporter)

        notebook.add(self.expense_tab, text="Expenses", padding=4)
        notebook.add(self.statistics_tab, text="Statistics", padding=4)

    def refresh_all(self) -> None:
        self.expense_tab.populate()
        self.statistics_tab.populate()
        self.total_var.set(format_amount_display(self.ledger.total_amount()))
        self.today_var.set(format_amount_display(self.ledger.total_amount_for_date(date.today())))
        self.count_var.set(str(self.ledger.count()))


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Tkinter desktop app for the finance tracker")
    parser.add_argument(
        "--export-dir",
        type=Path,
        help="Directory for Excel exports (default: ./exports)",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    settings = Settings.from_env().override(export_dir=args.export_dir)
    configure_logging(settings.log_level)
    app = FinanceTrackerApp(settings)
    app.mainloop()


if __name__ == "__main__":  # pragma: no cover - manual execution
    main()
