# budget_tracker/stores/base.py
from abc import ABC, abstractmethod
from typing import List, Optional

from budget_tracker.core.models import Budget, Transaction, User


class BaseStore(ABC):
    """
    Keyed record store for users, transactions and budgets.

    Listings are returned in insertion order. Lookups by id raise
    NotFoundError when the id is unknown; writes raise ValidationError
    for malformed input.
    """

    @abstractmethod
    def create_user(self, username: str, password: str) -> User:
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> User:
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        pass

    @abstractmethod
    def list_transactions(self, owner_id: Optional[int] = None) -> List[Transaction]:
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Transaction:
        pass

    @abstractmethod
    def create_transaction(self, owner_id: int, **fields) -> Transaction:
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: int, **changes) -> Transaction:
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        pass

    @abstractmethod
    def list_budgets(self, owner_id: Optional[int] = None) -> List[Budget]:
        pass

    @abstractmethod
    def get_budget(self, budget_id: int) -> Budget:
        pass

    def get_budget_by_category(
        self, category: str, owner_id: Optional[int] = None
    ) -> Optional[Budget]:
        """Return the first budget defined for *category*, if any."""
        return next(
            (b for b in self.list_budgets(owner_id) if b.category == category),
            None,
        )

    @abstractmethod
    def create_budget(self, owner_id: int, **fields) -> Budget:
        pass

    @abstractmethod
    def update_budget(self, budget_id: int, **changes) -> Budget:
        pass

    @abstractmethod
    def delete_budget(self, budget_id: int) -> None:
        pass
