from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Field shapes only; value rules (positive amounts, description length,
# period names) are enforced by budget_tracker.core.validation.
Amount = Union[int, float, str]


class TransactionIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: Amount
    description: str
    category: str
    date: Union[datetime, str]
    is_expense: bool = Field(..., alias="isExpense")
    # Accepted from the income form, not stored.
    is_recurring: bool = Field(False, alias="isRecurring")

    def store_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"is_recurring"})


class TransactionPatch(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    amount: Optional[Amount] = None
    description: Optional[str] = None
    category: Optional[str] = None
    date: Optional[Union[datetime, str]] = None
    is_expense: Optional[bool] = Field(None, alias="isExpense")
    is_recurring: Optional[bool] = Field(None, alias="isRecurring")

    def store_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude={"is_recurring"})


class BudgetIn(BaseModel):
    amount: Amount
    category: str
    period: str


class BudgetPatch(BaseModel):
    amount: Optional[Amount] = None
    category: Optional[str] = None
    period: Optional[str] = None

    def store_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)
