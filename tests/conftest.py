"""Shared fixtures for the finance tracker test-suite."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from finance_core.exporter import ExcelExporter
from finance_core.models import Expense, ExpenseCategory
from finance_core.services import LedgerService

FIXED_NOW = datetime(2024, 1, 3, 12, 30, 45)


@pytest.fixture(autouse=True)
def _restore_finance_core_logger():
    # Entry points call configure_logging(), which leaves the package logger
    # non-propagating; pytest then attaches its capture handlers to it in
    # later tests. Restore the logger state after every test.
    logger = logging.getLogger("finance_core")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def ledger() -> LedgerService:
    return LedgerService()


@pytest.fixture
def sample_expenses() -> list:
    return [
        Expense(Decimal("100"), ExpenseCategory.PRODUCTS, date(2024, 1, 1), "milk"),
        Expense(Decimal("50"), ExpenseCategory.TAXI, date(2024, 1, 1), ""),
        Expense(Decimal("30"), ExpenseCategory.PRODUCTS, date(2024, 1, 2), "bread"),
    ]


@pytest.fixture
def filled_ledger(ledger: LedgerService, sample_expenses: list) -> LedgerService:
    for expense in sample_expenses:
        ledger.append(expense)
    return ledger


@pytest.fixture
def export_dir(tmp_path: Path) -> Path:
    # Not created up front; the exporter must create it on demand.
    return tmp_path / "exports"


@pytest.fixture
def exporter(export_dir: Path) -> ExcelExporter:
    return ExcelExporter(export_dir, clock=lambda: FIXED_NOW)
