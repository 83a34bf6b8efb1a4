"""Spreadsheet export of expenses to ``.xlsx`` workbooks."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .exceptions import ExportError, MissingFieldError, NotFoundError, ValidationError
from .logging_setup import get_logger
from .models import Expense, ExpenseCategory
from .validators import DATE_FORMAT, validate_date

HEADERS = ("Date", "Amount", "Category", "Description")
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
CURRENCY_FORMAT = "#,##0.00"
MIN_COLUMN_WIDTH = 12
MAX_SHEET_TITLE = 31
UNSAFE_NAME_CHARS = re.compile(r'[\\/:*?"<>|\[\]]')

_THIN = Side(style="thin")
_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
_HEADER_FONT = Font(bold=True, color="FFFFFF")
_HEADER_FILL = PatternFill(fill_type="solid", start_color="1F3864", end_color="1F3864")


def safe_name(label: str) -> str:
    """Replace characters that are invalid in file names and sheet titles."""
    return UNSAFE_NAME_CHARS.sub("_", label)


class ExcelExporter:
    """Renders expense lists into timestamped workbooks under ``export_dir``."""

    def __init__(
        self,
        export_dir: Path = Path("exports"),
        *,
        clock: Callable[[], datetime] = datetime.now,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._export_dir = Path(export_dir)
        self._clock = clock
        self._logger = logger or get_logger(__name__)

    @property
    def export_dir(self) -> Path:
        return self._export_dir

    # Public API -----------------------------------------------------------
    def export_all(self, expenses: Optional[Sequence[Expense]]) -> Path:
        records = self._require_records(expenses)
        path = self._write(records, prefix="all_expenses", sheet_title="All Expenses")
        self._logger.info("Exported %d expenses to %s", len(records), path)
        return path

    def export_by_category(self, expenses: Optional[Sequence[Expense]], category: object) -> Path:
        if expenses is None:
            raise MissingFieldError("expenses list is required")
        target = ExpenseCategory.parse(category)
        filtered = [expense for expense in expenses if expense.category is target]
        if not filtered:
            raise NotFoundError(f"No expenses found for category: {target}")

        name = safe_name(target.label)
        path = self._write(
            filtered,
            prefix=f"category_{name}",
            sheet_title=name,
            summary_label="Total for category:",
        )
        self._logger.info("Exported %d expenses for category %s to %s", len(filtered), target, path)
        return path

    def export_by_date(self, expenses: Optional[Sequence[Expense]], on: object) -> Path:
        if expenses is None:
            raise MissingFieldError("expenses list is required")
        target: date = validate_date(on)
        filtered = [expense for expense in expenses if expense.date == target]
        if not filtered:
            raise NotFoundError(f"No expenses found for date: {target.strftime(DATE_FORMAT)}")

        formatted = target.strftime(DATE_FORMAT)
        path = self._write(
            filtered,
            prefix=f"date_{formatted}",
            sheet_title=f"Date {formatted}",
            summary_label="Total for date:",
        )
        self._logger.info("Exported %d expenses for date %s to %s", len(filtered), formatted, path)
        return path

    # Internal helpers -----------------------------------------------------
    @staticmethod
    def _require_records(expenses: Optional[Sequence[Expense]]) -> List[Expense]:
        if expenses is None:
            raise MissingFieldError("expenses list is required")
        records = list(expenses)
        if not records:
            raise ValidationError("expenses list cannot be empty")
        return records

    def _ensure_export_dir(self) -> None:
        if self._export_dir.exists():
            return
        try:
            self._export_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ExportError(f"Unable to create export directory {self._export_dir}") from exc
        self._logger.info("Created export directory: %s", self._export_dir.resolve())

    def _target_path(self, prefix: str) -> Path:
        stem = f"{prefix}_{self._clock().strftime(TIMESTAMP_FORMAT)}"
        candidate = self._export_dir / f"{stem}.xlsx"
        counter = 1
        while candidate.exists():
            candidate = self._export_dir / f"{stem}_{counter}.xlsx"
            counter += 1
        return candidate

    def _write(
        self,
        expenses: List[Expense],
        *,
        prefix: str,
        sheet_title: str,
        summary_label: Optional[str] = None,
    ) -> Path:
        self._ensure_export_dir()
        path = self._target_path(prefix)

        workbook = Workbook()
        sheet = workbook.active
        sheet.title = sheet_title[:MAX_SHEET_TITLE]
        _write_header(sheet)
        _write_rows(sheet, expenses)
        if summary_label:
            _write_summary(sheet, summary_label, sum((e.amount for e in expenses), start=Decimal("0.00")))
        _size_columns(sheet)

        temp_path = path.with_name(path.name + ".tmp")
        try:
            workbook.save(temp_path)
            # Rename so a crash never leaves a half-written workbook under the final name.
            temp_path.replace(path)
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            self._logger.error("Failed to export expenses to %s: %s", path, exc)
            raise ExportError(f"Error exporting to Excel: {exc}") from exc
        return path


def _write_header(sheet: Worksheet) -> None:
    for column, title in enumerate(HEADERS, start=1):
        cell = sheet.cell(row=1, column=column, value=title)
        cell.font = _HEADER_FONT
        cell.fill = _HEADER_FILL
        cell.border = _BORDER
        cell.alignment = Alignment(horizontal="center")


def _write_rows(sheet: Worksheet, expenses: Iterable[Expense]) -> None:
    for row, expense in enumerate(expenses, start=2):
        values = (
            expense.date.strftime(DATE_FORMAT),
            float(expense.amount),
            expense.category.label,
            expense.description,
        )
        for column, value in enumerate(values, start=1):
            cell = sheet.cell(row=row, column=column, value=value)
            cell.border = _BORDER
            if column == 2:
                cell.number_format = CURRENCY_FORMAT


def _write_summary(sheet: Worksheet, label: str, total: Decimal) -> None:
    # One blank row separates the data from the summary line.
    row = sheet.max_row + 2
    sheet.cell(row=row, column=1, value=label)
    total_cell = sheet.cell(row=row, column=2, value=float(total))
    total_cell.number_format = CURRENCY_FORMAT


def _size_columns(sheet: Worksheet) -> None:
    for index, column_cells in enumerate(sheet.iter_cols(min_col=1, max_col=len(HEADERS)), start=1):
        longest = max((len(str(cell.value)) for cell in column_cells if cell.value is not None), default=0)
        sheet.column_dimensions[get_column_letter(index)].width = max(longest + 2, MIN_COLUMN_WIDTH)
