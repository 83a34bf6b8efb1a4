from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal

import pytest

from finance_core.exceptions import MissingFieldError, ValidationError
from finance_core.models import Expense, ExpenseCategory
from finance_core.services import LedgerService


def _tampered(**changes) -> Expense:
    expense = Expense(Decimal("10"), ExpenseCategory.OTHER, date(2024, 1, 1))
    for name, value in changes.items():
        object.__setattr__(expense, name, value)
    return expense


def test_empty_ledger_reports_zero_everywhere(ledger):
    assert ledger.total_amount() == 0
    assert ledger.category_totals() == {}
    assert ledger.count() == 0
    assert len(ledger) == 0
    assert ledger.all_records() == ()


def test_reference_scenario(filled_ledger):
    assert filled_ledger.total_amount() == Decimal("180")
    assert filled_ledger.category_totals() == {
        ExpenseCategory.PRODUCTS: Decimal("130"),
        ExpenseCategory.TAXI: Decimal("50"),
    }
    assert filled_ledger.total_amount_for_date(date(2024, 1, 1)) == Decimal("150")
    assert len(filled_ledger.records_for_date(date(2024, 1, 2))) == 1


def test_append_grows_count_and_total_by_record_amount(ledger, sample_expenses):
    for expense in sample_expenses:
        count_before, total_before = ledger.count(), ledger.total_amount()
        assert ledger.append(expense) is expense
        assert ledger.count() == count_before + 1
        assert ledger.total_amount() == total_before + expense.amount


def test_duplicates_are_stored_independently(ledger, sample_expenses):
    ledger.append(sample_expenses[0])
    ledger.append(sample_expenses[0])

    assert ledger.count() == 2
    assert ledger.total_amount() == Decimal("200")


@pytest.mark.parametrize(
    "amount", [Decimal("0"), Decimal("-5"), "oops", 10.5, Decimal("10.005")]
)
def test_append_revalidates_amount(filled_ledger, amount):
    with pytest.raises(ValidationError):
        filled_ledger.append(_tampered(amount=amount))

    assert filled_ledger.count() == 3
    assert filled_ledger.total_amount() == Decimal("180")


@pytest.mark.parametrize("field", ["category", "date"])
def test_append_reports_missing_fields(ledger, field):
    with pytest.raises(MissingFieldError, match=field):
        ledger.append(_tampered(**{field: None}))
    assert ledger.count() == 0


@pytest.mark.parametrize("value", ["2024-01-01", datetime(2024, 1, 1, 9, 0)])
def test_append_rejects_dates_that_are_not_calendar_dates(filled_ledger, value):
    with pytest.raises(ValidationError, match="date"):
        filled_ledger.append(_tampered(date=value))

    assert filled_ledger.count() == 3
    assert filled_ledger.total_amount_for_date(date(2024, 1, 1)) == Decimal("150")


def test_append_rejects_none_and_foreign_objects(ledger):
    with pytest.raises(MissingFieldError):
        ledger.append(None)
    with pytest.raises(ValidationError):
        ledger.append({"amount": 1})  # type: ignore[arg-type]
    with pytest.raises(ValidationError):
        ledger.append(_tampered(category="Taxi"))
    assert ledger.count() == 0


def test_category_totals_sum_to_total(filled_ledger):
    assert sum(filled_ledger.category_totals().values()) == filled_ledger.total_amount()


def test_sorted_category_totals_orders_by_amount_descending(filled_ledger):
    filled_ledger.append(Expense(Decimal("50"), ExpenseCategory.CAR, date(2024, 1, 3)))

    ordered = filled_ledger.sorted_category_totals()

    assert [category for category, _ in ordered] == [
        ExpenseCategory.PRODUCTS,
        ExpenseCategory.CAR,
        ExpenseCategory.TAXI,
    ]


def test_records_for_date_is_ordered_subset(filled_ledger, sample_expenses):
    target = date(2024, 1, 1)

    matches = filled_ledger.records_for_date(target)

    assert matches == tuple(e for e in filled_ledger.all_records() if e.date == target)
    assert matches == (sample_expenses[0], sample_expenses[1])
    assert filled_ledger.total_amount_for_date(target) == sum(e.amount for e in matches)


def test_date_queries_without_match_return_empty(filled_ledger):
    assert filled_ledger.records_for_date(date(2030, 1, 1)) == ()
    assert filled_ledger.total_amount_for_date(date(2030, 1, 1)) == 0


def test_date_queries_require_a_date(filled_ledger):
    with pytest.raises(MissingFieldError):
        filled_ledger.total_amount_for_date(None)  # type: ignore[arg-type]
    with pytest.raises(MissingFieldError):
        filled_ledger.records_for_date(None)  # type: ignore[arg-type]


def test_category_queries(filled_ledger):
    assert len(filled_ledger.records_for_category("Products")) == 2
    assert filled_ledger.total_amount_for_category(ExpenseCategory.TAXI) == Decimal("50")
    assert filled_ledger.records_for_category(ExpenseCategory.CHARITY) == ()


def test_all_records_is_a_snapshot(filled_ledger, sample_expenses):
    snapshot = filled_ledger.all_records()
    copied = list(snapshot)
    copied.clear()

    assert isinstance(snapshot, tuple)
    assert filled_ledger.count() == 3
    assert filled_ledger.total_amount() == Decimal("180")

    filled_ledger.append(sample_expenses[0])
    assert len(snapshot) == 3


def test_snapshot_is_serialisable(filled_ledger):
    payload = filled_ledger.snapshot()

    assert payload["count"] == 3
    assert payload["total"] == "180.00"
    assert payload["expenses"][0]["description"] == "milk"


def test_injected_logger_records_appends_but_not_failures(caplog, sample_expenses):
    logger = logging.getLogger("tests.ledger")
    ledger = LedgerService(logger=logger)
    caplog.set_level(logging.DEBUG, logger="tests.ledger")

    ledger.append(sample_expenses[0])
    with pytest.raises(ValidationError):
        ledger.append(_tampered(amount=Decimal("-1")))

    messages = [record.getMessage() for record in caplog.records]
    assert "Added expense: 100.00 in category Products" in messages
    assert not [record for record in caplog.records if record.levelno >= logging.WARNING]
