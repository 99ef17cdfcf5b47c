from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional

from budget_tracker.core.errors import NotFoundError, ValidationError
from budget_tracker.core.models import Budget, Transaction, User
from budget_tracker.core.validation import clean_budget, clean_transaction, clean_username
from budget_tracker.stores.base import BaseStore

logger = logging.getLogger(__name__)


class MemoryStore(BaseStore):
    """Process-local store keeping every record in plain dicts."""

    def __init__(self, config: dict | None = None) -> None:
        self.config = config or {}
        self._users: Dict[int, User] = {}
        self._transactions: Dict[int, Transaction] = {}
        self._budgets: Dict[int, Budget] = {}
        self._user_ids = itertools.count(1)
        self._transaction_ids = itertools.count(1)
        self._budget_ids = itertools.count(1)
        self._lock = threading.Lock()

    # Users

    def create_user(self, username: str, password: str) -> User:
        name = clean_username(username)
        with self._lock:
            if any(u.username == name for u in self._users.values()):
                raise ValidationError(f"Username already taken: {name}")
            user = User(id=next(self._user_ids), username=name, password=password)
            self._users[user.id] = user
        logger.debug("Created user %s (%s)", user.id, name)
        return user

    def get_user(self, user_id: int) -> User:
        with self._lock:
            user = self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            return next(
                (u for u in self._users.values() if u.username == username), None
            )

    # Transactions

    def list_transactions(self, owner_id: int | None = None) -> List[Transaction]:
        with self._lock:
            txs = list(self._transactions.values())
        if owner_id is not None:
            txs = [tx for tx in txs if tx.owner_id == owner_id]
        return txs

    def get_transaction(self, transaction_id: int) -> Transaction:
        with self._lock:
            tx = self._transactions.get(transaction_id)
        if tx is None:
            raise NotFoundError("Transaction not found")
        return tx

    def create_transaction(self, owner_id: int, **fields) -> Transaction:
        cleaned = clean_transaction(fields)
        with self._lock:
            tx = Transaction(
                id=next(self._transaction_ids),
                owner_id=owner_id,
                created_at=datetime.now(),
                **cleaned,
            )
            self._transactions[tx.id] = tx
        logger.debug("Created transaction %s for owner %s", tx.id, owner_id)
        return tx

    def update_transaction(self, transaction_id: int, **changes) -> Transaction:
        cleaned = clean_transaction(changes, partial=True)
        with self._lock:
            existing = self._transactions.get(transaction_id)
            if existing is None:
                raise NotFoundError("Transaction not found")
            updated = replace(existing, **cleaned)
            self._transactions[transaction_id] = updated
        logger.debug("Updated transaction %s: %s", transaction_id, sorted(cleaned))
        return updated

    def delete_transaction(self, transaction_id: int) -> None:
        with self._lock:
            if self._transactions.pop(transaction_id, None) is None:
                raise NotFoundError("Transaction not found")
        logger.debug("Deleted transaction %s", transaction_id)

    # Budgets

    def list_budgets(self, owner_id: int | None = None) -> List[Budget]:
        with self._lock:
            budgets = list(self._budgets.values())
        if owner_id is not None:
            budgets = [b for b in budgets if b.owner_id == owner_id]
        return budgets

    def get_budget(self, budget_id: int) -> Budget:
        with self._lock:
            budget = self._budgets.get(budget_id)
        if budget is None:
            raise NotFoundError("Budget not found")
        return budget

    def create_budget(self, owner_id: int, **fields) -> Budget:
        cleaned = clean_budget(fields)
        with self._lock:
            budget = Budget(
                id=next(self._budget_ids),
                owner_id=owner_id,
                created_at=datetime.now(),
                **cleaned,
            )
            self._budgets[budget.id] = budget
        logger.debug("Created budget %s (%s) for owner %s", budget.id, budget.category, owner_id)
        return budget

    def update_budget(self, budget_id: int, **changes) -> Budget:
        cleaned = clean_budget(changes, partial=True)
        with self._lock:
            existing = self._budgets.get(budget_id)
            if existing is None:
                raise NotFoundError("Budget not found")
            updated = replace(existing, **cleaned)
            self._budgets[budget_id] = updated
        logger.debug("Updated budget %s: %s", budget_id, sorted(cleaned))
        return updated

    def delete_budget(self, budget_id: int) -> None:
        with self._lock:
            if self._budgets.pop(budget_id, None) is None:
                raise NotFoundError("Budget not found")
        logger.debug("Deleted budget %s", budget_id)
