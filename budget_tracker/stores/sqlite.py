from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional

from budget_tracker.core.errors import NotFoundError, ValidationError
from budget_tracker.core.models import Budget, BudgetPeriod, Transaction, User
from budget_tracker.core.validation import clean_budget, clean_transaction, clean_username
from budget_tracker.stores.base import BaseStore

logger = logging.getLogger(__name__)

_TRANSACTION_COLUMNS = "id, amount, description, category, date, is_expense, owner_id, created_at"
_BUDGET_COLUMNS = "id, category, amount, owner_id, period, created_at"


def _init_db(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL
        );
        CREATE TABLE IF NOT EXISTS transactions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            amount TEXT NOT NULL,
            description TEXT NOT NULL,
            category TEXT NOT NULL,
            date TEXT NOT NULL,
            is_expense INTEGER NOT NULL,
            owner_id INTEGER NOT NULL,
            created_at TEXT NOT NULL
        );
        CREATE TABLE IF NOT EXISTS budgets (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            category TEXT NOT NULL,
            amount TEXT NOT NULL,
            owner_id INTEGER NOT NULL,
            period TEXT NOT NULL,
            created_at TEXT NOT NULL
        );
        """
    )
    conn.commit()


def _row_to_transaction(row) -> Transaction:
    return Transaction(
        id=int(row[0]),
        amount=Decimal(row[1]),
        description=row[2],
        category=row[3],
        date=datetime.fromisoformat(row[4]),
        is_expense=bool(row[5]),
        owner_id=int(row[6]),
        created_at=datetime.fromisoformat(row[7]),
    )


def _row_to_budget(row) -> Budget:
    return Budget(
        id=int(row[0]),
        category=row[1],
        amount=Decimal(row[2]),
        owner_id=int(row[3]),
        period=BudgetPeriod(row[4]),
        created_at=datetime.fromisoformat(row[5]),
    )


def _to_column(value):
    # Amounts are stored as TEXT so Decimal values survive unchanged.
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, BudgetPeriod):
        return value.value
    if isinstance(value, bool):
        return int(value)
    return value


class SQLiteStore(BaseStore):
    """Store backed by a SQLite database file, one connection per call."""

    def __init__(self, config: dict | None = None, db_path: str | None = None) -> None:
        cfg = (config or {}).get("store", {})
        self.db_path = str(db_path or cfg.get("db_path") or "smartbudget.db")
        path = Path(self.db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(path)
        try:
            _init_db(conn)
        finally:
            conn.close()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    # Users

    def create_user(self, username: str, password: str) -> User:
        name = clean_username(username)
        conn = self._connect()
        try:
            try:
                cur = conn.execute(
                    "INSERT INTO users (username, password) VALUES (?, ?)",
                    (name, password),
                )
            except sqlite3.IntegrityError:
                raise ValidationError(f"Username already taken: {name}") from None
            conn.commit()
            user = User(id=int(cur.lastrowid), username=name, password=password)
        finally:
            conn.close()
        logger.debug("Created user %s (%s)", user.id, name)
        return user

    def get_user(self, user_id: int) -> User:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT id, username, password FROM users WHERE id = ?", (user_id,)
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            raise NotFoundError("User not found")
        return User(id=int(row[0]), username=row[1], password=row[2])

    def get_user_by_username(self, username: str) -> Optional[User]:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT id, username, password FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return User(id=int(row[0]), username=row[1], password=row[2])

    # Shared helpers

    def _list(self, table: str, columns: str, owner_id: int | None):
        query = f"SELECT {columns} FROM {table}"
        params: list = []
        if owner_id is not None:
            query += " WHERE owner_id = ?"
            params.append(owner_id)
        query += " ORDER BY id"
        conn = self._connect()
        try:
            return conn.execute(query, params).fetchall()
        finally:
            conn.close()

    def _get(self, table: str, columns: str, record_id: int):
        conn = self._connect()
        try:
            return conn.execute(
                f"SELECT {columns} FROM {table} WHERE id = ?", (record_id,)
            ).fetchone()
        finally:
            conn.close()

    def _insert(self, table: str, values: Dict[str, object]) -> int:
        names = list(values)
        placeholders = ", ".join("?" for _ in names)
        conn = self._connect()
        try:
            cur = conn.execute(
                f"INSERT INTO {table} ({', '.join(names)}) VALUES ({placeholders})",
                [_to_column(values[n]) for n in names],
            )
            conn.commit()
            return int(cur.lastrowid)
        finally:
            conn.close()

    def _update(self, table: str, record_id: int, changes: Dict[str, object]) -> bool:
        conn = self._connect()
        try:
            if not changes:
                row = conn.execute(
                    f"SELECT 1 FROM {table} WHERE id = ?", (record_id,)
                ).fetchone()
                return row is not None
            assignments = ", ".join(f"{name} = ?" for name in changes)
            cur = conn.execute(
                f"UPDATE {table} SET {assignments} WHERE id = ?",
                [_to_column(v) for v in changes.values()] + [record_id],
            )
            conn.commit()
            return cur.rowcount > 0
        finally:
            conn.close()

    def _delete(self, table: str, record_id: int) -> bool:
        conn = self._connect()
        try:
            cur = conn.execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
            conn.commit()
            return cur.rowcount > 0
        finally:
            conn.close()

    # Transactions

    def list_transactions(self, owner_id: int | None = None) -> List[Transaction]:
        rows = self._list("transactions", _TRANSACTION_COLUMNS, owner_id)
        return [_row_to_transaction(r) for r in rows]

    def get_transaction(self, transaction_id: int) -> Transaction:
        row = self._get("transactions", _TRANSACTION_COLUMNS, transaction_id)
        if row is None:
            raise NotFoundError("Transaction not found")
        return _row_to_transaction(row)

    def create_transaction(self, owner_id: int, **fields) -> Transaction:
        values = clean_transaction(fields)
        values["owner_id"] = owner_id
        values["created_at"] = datetime.now()
        new_id = self._insert("transactions", values)
        logger.debug("Created transaction %s for owner %s", new_id, owner_id)
        return self.get_transaction(new_id)

    def update_transaction(self, transaction_id: int, **changes) -> Transaction:
        cleaned = clean_transaction(changes, partial=True)
        if not self._update("transactions", transaction_id, cleaned):
            raise NotFoundError("Transaction not found")
        logger.debug("Updated transaction %s: %s", transaction_id, sorted(cleaned))
        return self.get_transaction(transaction_id)

    def delete_transaction(self, transaction_id: int) -> None:
        if not self._delete("transactions", transaction_id):
            raise NotFoundError("Transaction not found")
        logger.debug("Deleted transaction %s", transaction_id)

    # Budgets

    def list_budgets(self, owner_id: int | None = None) -> List[Budget]:
        rows = self._list("budgets", _BUDGET_COLUMNS, owner_id)
        return [_row_to_budget(r) for r in rows]

    def get_budget(self, budget_id: int) -> Budget:
        row = self._get("budgets", _BUDGET_COLUMNS, budget_id)
        if row is None:
            raise NotFoundError("Budget not found")
        return _row_to_budget(row)

    def create_budget(self, owner_id: int, **fields) -> Budget:
        values = clean_budget(fields)
        values["owner_id"] = owner_id
        values["created_at"] = datetime.now()
        new_id = self._insert("budgets", values)
        logger.debug("Created budget %s for owner %s", new_id, owner_id)
        return self.get_budget(new_id)

    def update_budget(self, budget_id: int, **changes) -> Budget:
        cleaned = clean_budget(changes, partial=True)
        if not self._update("budgets", budget_id, cleaned):
            raise NotFoundError("Budget not found")
        logger.debug("Updated budget %s: %s", budget_id, sorted(cleaned))
        return self.get_budget(budget_id)

    def delete_budget(self, budget_id: int) -> None:
        if not self._delete("budgets", budget_id):
            raise NotFoundError("Budget not found")
        logger.debug("Deleted budget %s", budget_id)
