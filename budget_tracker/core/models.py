# budget_tracker/core/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Tuple


class BudgetPeriod(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class User:
    id: int
    username: str
    password: str


@dataclass(frozen=True)
class Transaction:
    id: int
    amount: Decimal
    description: str
    category: str
    date: datetime
    is_expense: bool
    owner_id: int
    created_at: datetime


@dataclass(frozen=True)
class Budget:
    id: int
    category: str
    amount: Decimal
    owner_id: int
    period: BudgetPeriod
    created_at: datetime


@dataclass(frozen=True)
class BudgetStatus:
    """Progress of one budget against the spend recorded for its category."""

    budget_id: int
    category: str
    budgeted: Decimal
    spent: Decimal
    raw_percentage: int
    is_over_budget: bool

    @property
    def percentage(self) -> int:
        """Progress-bar value, capped at 100."""
        return min(100, self.raw_percentage)

    @property
    def percent_over(self) -> int:
        return self.raw_percentage - 100 if self.is_over_budget else 0


@dataclass(frozen=True)
class DailyCashFlow:
    day: date
    income: Decimal
    expenses: Decimal


@dataclass(frozen=True)
class DashboardSummary:
    current_balance: Decimal
    total_income: Decimal
    total_expenses: Decimal
    monthly_income: Decimal
    monthly_expenses: Decimal
    budget_used: int
    budget_total: Decimal
    category_expenses: Dict[str, Decimal]
    budget_status: List[BudgetStatus]
    recent_transactions: List[Transaction]


@dataclass(frozen=True)
class Report:
    window: str
    label: str
    total_income: Decimal
    total_expenses: Decimal
    net_savings: Decimal
    net_savings_percentage: Optional[int]
    expense_breakdown: List[Tuple[str, Decimal]] = field(default_factory=list)
    income_breakdown: List[Tuple[str, Decimal]] = field(default_factory=list)
    budget_progress: List[BudgetStatus] = field(default_factory=list)
