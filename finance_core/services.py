"""Framework-agnostic ledger service for the finance tracker."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from .exceptions import MissingFieldError, ValidationError
from .logging_setup import get_logger
from .models import Expense, ExpenseCategory
from .validators import DATE_FORMAT, parse_amount, validate_date

ZERO = Decimal("0.00")


def _sum_amounts(expenses: Iterable[Expense]) -> Decimal:
    return sum((expense.amount for expense in expenses), start=ZERO)


class LedgerService:
    """Append-only, in-memory collection of expenses and its queries."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._expenses: List[Expense] = []
        self._logger = logger or get_logger(__name__)

    # Commands -------------------------------------------------------------
    def append(self, expense: Expense) -> Expense:
        """Validate and store an expense at the end of the ledger."""
        self._validate(expense)
        self._expenses.append(expense)
        self._logger.info(
            "Added expense: %s in category %s", f"{expense.amount:.2f}", expense.category
        )
        return expense

    # Queries --------------------------------------------------------------
    def total_amount(self) -> Decimal:
        total = _sum_amounts(self._expenses)
        self._logger.debug("Calculated total expenses: %s", total)
        return total

    def total_amount_for_date(self, on: date) -> Decimal:
        target = validate_date(on)
        total = _sum_amounts(expense for expense in self._expenses if expense.date == target)
        self._logger.debug("Calculated total for %s: %s", target.strftime(DATE_FORMAT), total)
        return total

    def total_amount_for_category(self, category: object) -> Decimal:
        return _sum_amounts(self.records_for_category(category))

    def category_totals(self) -> Dict[ExpenseCategory, Decimal]:
        totals: Dict[ExpenseCategory, Decimal] = {}
        for expense in self._expenses:
            totals[expense.category] = totals.get(expense.category, ZERO) + expense.amount
        self._logger.debug("Calculated category totals for %d expenses", len(self._expenses))
        return totals

    def sorted_category_totals(self) -> List[Tuple[ExpenseCategory, Decimal]]:
        """Category totals ordered by amount descending, then by label."""
        return sorted(
            self.category_totals().items(),
            key=lambda item: (-item[1], item[0].label),
        )

    def records_for_date(self, on: date) -> Tuple[Expense, ...]:
        target = validate_date(on)
        matches = tuple(expense for expense in self._expenses if expense.date == target)
        self._logger.debug("Found %d expenses for %s", len(matches), target.strftime(DATE_FORMAT))
        return matches

    def records_for_category(self, category: object) -> Tuple[Expense, ...]:
        target = ExpenseCategory.parse(category)
        return tuple(expense for expense in self._expenses if expense.category is target)

    def all_records(self) -> Tuple[Expense, ...]:
        """Return a read-only snapshot of every expense in insertion order."""
        self._logger.debug("Returning all expenses (count: %d)", len(self._expenses))
        return tuple(self._expenses)

    def count(self) -> int:
        return len(self._expenses)

    def __len__(self) -> int:
        return len(self._expenses)

    def snapshot(self) -> Dict[str, object]:
        """Return a serialisable view used by the HTTP API."""
        return {
            "expenses": [expense.to_dict() for expense in self._expenses],
            "total": f"{self.total_amount():.2f}",
            "count": len(self._expenses),
        }

    # Internal helpers -----------------------------------------------------
    @staticmethod
    def _validate(expense: object) -> None:
        # Frozen dataclasses can still be altered through object.__setattr__.
        if expense is None:
            raise MissingFieldError("expense is required")
        if not isinstance(expense, Expense):
            raise ValidationError("only Expense records can be appended")
        if expense.category is None:
            raise MissingFieldError("category is required")
        if expense.date is None:
            raise MissingFieldError("date is required")
        if parse_amount(expense.amount) != expense.amount or not isinstance(expense.amount, Decimal):
            raise ValidationError("amount must be a Decimal with two decimal places")
        if not isinstance(expense.category, ExpenseCategory):
            raise ValidationError("category must be an ExpenseCategory")
        if type(expense.date) is not date:
            raise ValidationError("date must be a calendar date")
