from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import Decimal

from budget_tracker.stores.base import BaseStore
from budget_tracker.windows import add_months

logger = logging.getLogger(__name__)

DEMO_USERNAME = "demo"


def seed_demo_data(store: BaseStore, now: datetime | None = None):
    """Create the demo user with a month of sample activity and budgets.

    Does nothing when the demo user already exists. Returns the demo user.
    """
    existing = store.get_user_by_username(DEMO_USERNAME)
    if existing is not None:
        return existing

    now = now or datetime.now()
    user = store.create_user(DEMO_USERNAME, "password")

    samples = [
        ("3240.00", "Monthly Salary", "Salary", add_months(now, -1), False),
        ("84.20", "Grocery Shopping", "Food & Dining", now, True),
        ("56.80", "Restaurant Dinner", "Food & Dining", now - timedelta(days=3), True),
        ("124.99", "Online Shopping", "Shopping", now - timedelta(days=5), True),
        ("84.20", "Utility Bill", "Bills & Utilities", now - timedelta(days=6), True),
    ]
    for amount, description, category, when, is_expense in samples:
        store.create_transaction(
            user.id,
            amount=Decimal(amount),
            description=description,
            category=category,
            date=when,
            is_expense=is_expense,
        )

    for category, amount in [
        ("Food & Dining", 500),
        ("Transportation", 300),
        ("Entertainment", 150),
        ("Shopping", 400),
        ("Bills & Utilities", 350),
    ]:
        store.create_budget(user.id, category=category, amount=amount, period="monthly")

    logger.info("Seeded demo data for user %s", user.id)
    return user
