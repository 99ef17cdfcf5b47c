from datetime import datetime
from decimal import Decimal
from itertools import count

import pytest

from budget_tracker.core.models import Budget, BudgetPeriod, Transaction
from budget_tracker.stores.memory import MemoryStore


@pytest.fixture
def make_tx():
    ids = count(1)

    def _make(amount, date, is_expense=True, category="Food & Dining",
              description="Test purchase", owner_id=1):
        return Transaction(
            id=next(ids),
            amount=Decimal(str(amount)),
            description=description,
            category=category,
            date=date,
            is_expense=is_expense,
            owner_id=owner_id,
            created_at=datetime(2025, 1, 1),
        )

    return _make


@pytest.fixture
def make_budget():
    ids = count(1)

    def _make(category, amount, owner_id=1, period=BudgetPeriod.MONTHLY):
        return Budget(
            id=next(ids),
            category=category,
            amount=Decimal(str(amount)),
            owner_id=owner_id,
            period=period,
            created_at=datetime(2025, 1, 1),
        )

    return _make


@pytest.fixture
def memory_store():
    return MemoryStore()
