"""Flask REST API exposing the finance tracker ledger."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from flask import Flask, jsonify, request
from flask_cors import CORS

from finance_core.config import Settings
from finance_core.exceptions import ExportError, NotFoundError, ValidationError
from finance_core.exporter import ExcelExporter
from finance_core.logging_setup import configure_logging
from finance_core.models import Expense, ExpenseCategory
from finance_core.services import LedgerService
from finance_core.validators import is_future_date, validate_date


def create_app(
    settings: Optional[Settings] = None,
    *,
    today: Callable[[], date] = date.today,
) -> Flask:
    app = Flask(__name__)
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    if settings.is_dev:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    elif settings.allowed_origins:
        CORS(app, resources={r"/*": {"origins": list(settings.allowed_origins)}}, supports_credentials=True)
    else:
        CORS(app)

    # The ledger lives for the lifetime of the process; nothing is persisted.
    ledger = LedgerService()
    exporter = ExcelExporter(settings.export_dir)

    def _success(payload: Any, status: int = 200):
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(NotFoundError)
    def handle_not_found(exc: NotFoundError):
        return _handle_error(exc, 404, "No matching expenses")

    @app.errorhandler(ExportError)
    def handle_export_error(exc: ExportError):
        return _handle_error(exc, 500, "Export error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _query_date() -> Optional[date]:
        raw = request.args.get("date")
        if raw in (None, ""):
            return None
        return validate_date(raw)

    def _totals_payload(totals: Iterable[Tuple[ExpenseCategory, Decimal]]) -> List[Dict[str, str]]:
        return [
            {"category": category.label, "total": f"{amount:.2f}"} for category, amount in totals
        ]

    @app.get("/categories")
    def list_categories():
        items = [{"name": category.name, "label": category.label} for category in ExpenseCategory]
        return _success({"items": items})

    @app.get("/expenses")
    def list_expenses():
        records = ledger.all_records()
        on = _query_date()
        if on is not None:
            records = ledger.records_for_date(on)
        category = request.args.get("category")
        if category:
            target = ExpenseCategory.parse(category)
            records = tuple(expense for expense in records if expense.category is target)
        total = sum((expense.amount for expense in records), start=Decimal("0.00"))
        return _success({
            "items": [expense.to_dict() for expense in records],
            "total": f"{total:.2f}",
        })

    @app.post("/expenses")
    def create_expense():
        payload = _json_body()
        expense = Expense.from_dict(payload)
        # Future dates need an explicit confirmation, as in the console and desktop apps.
        if is_future_date(expense.date, today()) and payload.get("confirm_future") is not True:
            raise ValidationError("date is in the future; resend with confirm_future set to true")
        ledger.append(expense)
        return _success(expense.to_dict(), 201)

    @app.get("/snapshot")
    def snapshot():
        return _success(ledger.snapshot())

    @app.get("/summary")
    def summary():
        on = _query_date()
        body: Dict[str, Any] = {
            "total": f"{ledger.total_amount():.2f}",
            "count": ledger.count(),
            "categories": _totals_payload(ledger.sorted_category_totals()),
        }
        if on is not None:
            body["date"] = on.isoformat()
            body["date_total"] = f"{ledger.total_amount_for_date(on):.2f}"
        return _success(body)

    @app.post("/exports")
    def create_export():
        payload = _json_body()
        kind = str(payload.get("kind") or "all").strip().lower()
        records = ledger.all_records()
        if kind == "all":
            path = exporter.export_all(records)
        elif kind == "category":
            path = exporter.export_by_category(records, payload.get("category"))
        elif kind == "date":
            path = exporter.export_by_date(records, payload.get("date"))
        else:
            raise ValidationError("kind must be one of: all, category, date")
        return _success({"path": str(path)}, 201)

    return app
