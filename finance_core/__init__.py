"""Core business logic package for the finance tracker."""

from .config import Settings
from .exceptions import ExportError, MissingFieldError, NotFoundError, ValidationError
from .exporter import ExcelExporter
from .models import Expense, ExpenseCategory
from .services import LedgerService

__all__ = [
    "Expense",
    "ExpenseCategory",
    "LedgerService",
    "ExcelExporter",
    "Settings",
    "ExportError",
    "MissingFieldError",
    "NotFoundError",
    "ValidationError",
]
