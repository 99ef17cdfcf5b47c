# budget_tracker/core/validation.py
from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping

from budget_tracker.core.errors import ValidationError
from budget_tracker.core.models import BudgetPeriod

TRANSACTION_FIELDS = ("amount", "description", "category", "date", "is_expense")
BUDGET_FIELDS = ("category", "amount", "period")


def _parse_amount(value: Any, label: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{label} must be a number")
    try:
        # str() so 84.2 stays 84.2 rather than its binary expansion
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{label} must be a number") from None
    # must also survive the float conversion done when rendering JSON
    if not amount.is_finite() or not math.isfinite(float(amount)):
        raise ValidationError(f"{label} must be a number")
    if amount <= 0:
        raise ValidationError(f"{label} must be positive")
    return amount


def _naive_local(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return _naive_local(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            text = value.strip()
            if text.endswith(("Z", "z")):
                text = text[:-1] + "+00:00"
            return _naive_local(datetime.fromisoformat(text))
        except ValueError:
            raise ValidationError(f"Invalid date: {value!r}") from None
    raise ValidationError(f"Invalid date: {value!r}")


def _parse_category(value: Any) -> str:
    category = str(value or "").strip()
    if not category:
        raise ValidationError("Category is required")
    return category


def _check_keys(fields: Mapping[str, Any], allowed) -> None:
    unknown = sorted(set(fields) - set(allowed))
    if unknown:
        raise ValidationError(f"Unknown field(s): {', '.join(unknown)}")


def _check_required(fields: Mapping[str, Any], required) -> None:
    missing = [name for name in required if name not in fields]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")


def clean_transaction(fields: Mapping[str, Any], partial: bool = False) -> Dict[str, Any]:
    """Validate and normalise the writable fields of a transaction.

    With ``partial`` set only the keys present in *fields* are checked, which
    is what an update needs. Raises :class:`ValidationError` on the first
    problem found.
    """
    _check_keys(fields, TRANSACTION_FIELDS)
    if not partial:
        _check_required(fields, TRANSACTION_FIELDS)

    cleaned: Dict[str, Any] = {}
    if "amount" in fields:
        cleaned["amount"] = _parse_amount(fields["amount"], "Amount")
    if "description" in fields:
        description = str(fields["description"] or "").strip()
        if len(description) < 3:
            raise ValidationError("Description must be at least 3 characters")
        cleaned["description"] = description
    if "category" in fields:
        cleaned["category"] = _parse_category(fields["category"])
    if "date" in fields:
        cleaned["date"] = _parse_datetime(fields["date"])
    if "is_expense" in fields:
        if not isinstance(fields["is_expense"], bool):
            raise ValidationError("is_expense must be true or false")
        cleaned["is_expense"] = fields["is_expense"]
    return cleaned


def clean_budget(fields: Mapping[str, Any], partial: bool = False) -> Dict[str, Any]:
    """Validate and normalise the writable fields of a budget."""
    _check_keys(fields, BUDGET_FIELDS)
    if not partial:
        _check_required(fields, BUDGET_FIELDS)

    cleaned: Dict[str, Any] = {}
    if "category" in fields:
        cleaned["category"] = _parse_category(fields["category"])
    if "amount" in fields:
        cleaned["amount"] = _parse_amount(fields["amount"], "Budget amount")
    if "period" in fields:
        try:
            cleaned["period"] = BudgetPeriod(fields["period"])
        except ValueError:
            raise ValidationError(
                "Period must be monthly, quarterly, or yearly"
            ) from None
    return cleaned


def clean_username(username: Any) -> str:
    name = str(username or "").strip()
    if not name:
        raise ValidationError("Username is required")
    return name
