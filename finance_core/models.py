"""Data models for the finance tracker domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict

from .exceptions import MissingFieldError, ValidationError
from .validators import DATE_FORMAT, normalize_description, parse_amount, validate_date

__all__ = ["Expense", "ExpenseCategory"]


class ExpenseCategory(Enum):
    """Closed set of spending categories used for aggregation."""

    PRODUCTS = "Products"
    CAFE = "Cafe and Restaurants"
    TAXI = "Taxi"
    PUBLIC_TRANSPORT = "Public Transport"
    INTERNET = "Internet and Mobile Communications"
    CLOTHES = "Clothes and Shoes"
    ELECTRONICS = "Electronics"
    BEAUTY = "Beauty and Health"
    SPORT = "Sport and Fitness"
    UTILITIES = "Utilities"
    EDUCATION = "Education"
    CAR = "Car"
    ENTERTAINMENT = "Entertainment"
    CHARITY = "Charity"
    OTHER = "Other"

    @property
    def label(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: object) -> "ExpenseCategory":
        """Resolve a category from a member, a member name or a display label."""
        if isinstance(value, cls):
            return value
        if value is None:
            raise MissingFieldError("category is required")
        if not isinstance(value, str):
            raise ValidationError("category must be a string")
        canonical = value.strip()
        if not canonical:
            raise MissingFieldError("category is required")
        lowered = canonical.lower()
        for member in cls:
            if member.name.lower() == lowered or member.value.lower() == lowered:
                return member
        raise ValidationError(f"Unknown category: {canonical}")


@dataclass(frozen=True)
class Expense:
    amount: Decimal
    category: ExpenseCategory
    date: date
    description: str = ""

    def __post_init__(self) -> None:
        # Normalise through object.__setattr__ since the dataclass is frozen.
        object.__setattr__(self, "amount", parse_amount(self.amount))
        object.__setattr__(self, "category", ExpenseCategory.parse(self.category))
        object.__setattr__(self, "date", validate_date(self.date))
        object.__setattr__(self, "description", normalize_description(self.description))

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives."""
        return {
            "amount": f"{self.amount:.2f}",
            "category": self.category.label,
            "date": self.date.strftime(DATE_FORMAT),
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expense":
        """Hydrate an Expense from JSON-native data."""
        return cls(
            amount=data.get("amount"),
            category=data.get("category"),
            date=data.get("date"),
            description=data.get("description"),
        )

    def __str__(self) -> str:
        parts = [self.date.strftime(DATE_FORMAT), self.category.label, f"{self.amount:.2f}"]
        if self.description:
            parts.append(self.description)
        return " | ".join(parts)
