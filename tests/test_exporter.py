from __future__ import annotations

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from openpyxl import Workbook, load_workbook

from finance_core.exceptions import ExportError, MissingFieldError, NotFoundError, ValidationError
from finance_core.exporter import ExcelExporter, safe_name
from finance_core.models import Expense, ExpenseCategory


def _rows(path: Path):
    workbook = load_workbook(path)
    sheet = workbook.active
    return sheet, [tuple(cell.value for cell in row) for row in sheet.iter_rows()]


def test_export_all_creates_directory_and_workbook(exporter, export_dir, sample_expenses):
    assert not export_dir.exists()

    path = exporter.export_all(sample_expenses)

    assert path == export_dir / "all_expenses_2024-01-03_12-30-45.xlsx"
    assert path.exists()
    sheet, rows = _rows(path)
    assert sheet.title == "All Expenses"
    assert rows[0] == ("Date", "Amount", "Category", "Description")
    assert rows[1] == ("2024-01-01", 100, "Products", "milk")
    assert rows[2][:3] == ("2024-01-01", 50, "Taxi")
    assert len(rows) == 4
    assert sheet.cell(row=1, column=1).font.bold
    assert sheet.cell(row=2, column=2).number_format == "#,##0.00"


def test_same_second_exports_do_not_collide(exporter, sample_expenses):
    first = exporter.export_all(sample_expenses)
    second = exporter.export_all(sample_expenses)

    assert first != second
    assert second.name == "all_expenses_2024-01-03_12-30-45_1.xlsx"
    assert not list(first.parent.glob("*.tmp"))


def test_export_all_refuses_empty_or_missing_input(exporter, export_dir):
    with pytest.raises(ValidationError, match="empty"):
        exporter.export_all([])
    with pytest.raises(MissingFieldError):
        exporter.export_all(None)
    assert not export_dir.exists()


def test_export_by_category_adds_summary_row(exporter, sample_expenses):
    path = exporter.export_by_category(sample_expenses, ExpenseCategory.PRODUCTS)

    assert path.name == "category_Products_2024-01-03_12-30-45.xlsx"
    sheet, rows = _rows(path)
    assert sheet.title == "Products"
    assert [row[2] for row in rows[1:3]] == ["Products", "Products"]
    assert rows[3] == (None, None, None, None)
    assert rows[4][:2] == ("Total for category:", 130)


def test_export_by_category_without_matches_fails(exporter, sample_expenses, export_dir):
    with pytest.raises(NotFoundError, match="Charity"):
        exporter.export_by_category(sample_expenses, "Charity")
    assert not export_dir.exists()


def test_long_category_names_fit_sheet_title_limit(exporter):
    expense = Expense(Decimal("15"), ExpenseCategory.INTERNET, date(2024, 1, 1))

    path = exporter.export_by_category([expense], ExpenseCategory.INTERNET)

    sheet, _ = _rows(path)
    assert sheet.title == "Internet and Mobile Communicati"


def test_export_by_date_adds_summary_row(exporter, sample_expenses):
    path = exporter.export_by_date(sample_expenses, date(2024, 1, 1))

    assert path.name.startswith("date_2024-01-01_")
    sheet, rows = _rows(path)
    assert sheet.title == "Date 2024-01-01"
    assert len(rows) == 5
    assert rows[4][:2] == ("Total for date:", 150)


def test_export_by_date_accepts_iso_strings_and_reports_misses(exporter, sample_expenses):
    assert exporter.export_by_date(sample_expenses, "2024-01-02").exists()
    with pytest.raises(NotFoundError):
        exporter.export_by_date(sample_expenses, date(2025, 5, 5))
    with pytest.raises(MissingFieldError):
        exporter.export_by_date(sample_expenses, None)


def test_unwritable_target_raises_export_error(tmp_path, sample_expenses):
    blocker = tmp_path / "exports"
    blocker.write_text("not a directory")
    exporter = ExcelExporter(blocker)

    with pytest.raises(ExportError):
        exporter.export_all(sample_expenses)


def test_failed_save_leaves_no_temp_file(monkeypatch, exporter, export_dir, sample_expenses):
    def save_partially(workbook, filename):
        Path(filename).write_bytes(b"PK\x03\x04")
        raise OSError("disk full")

    monkeypatch.setattr(Workbook, "save", save_partially)

    with pytest.raises(ExportError, match="disk full"):
        exporter.export_all(sample_expenses)

    assert list(export_dir.iterdir()) == []


def test_safe_name_replaces_reserved_characters():
    assert safe_name('a/b:c*d?"e<f>g|h[i]') == "a_b_c_d__e_f_g_h_i_"
