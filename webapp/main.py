from __future__ import annotations

import logging
from typing import Dict

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from budget_tracker.config import load_config
from budget_tracker.core.errors import InvalidBudget, NotFoundError, ValidationError
from budget_tracker.dashboard import build_cash_flow, build_dashboard, build_report
from budget_tracker.payloads import (
    budget_payload,
    cash_flow_payload,
    dashboard_payload,
    report_payload,
    transaction_payload,
)
from budget_tracker.seed import seed_demo_data
from budget_tracker.stores import get_store
from budget_tracker.stores.base import BaseStore
from budget_tracker.windows import WindowKind
from webapp.schemas import BudgetIn, BudgetPatch, TransactionIn, TransactionPatch

logger = logging.getLogger(__name__)


def _store(request: Request) -> BaseStore:
    return request.app.state.store


def _owner_id(request: Request) -> int:
    return int(request.app.state.config.get("default_owner_id", 1))


def create_app(config: Dict[str, object] | None = None, store: BaseStore | None = None) -> FastAPI:
    """Build the API around one store instance shared by every request."""
    config = config if config is not None else load_config()
    if store is None:
        store = get_store(config)
        if config.get("seed_demo_data"):
            seed_demo_data(store)

    app = FastAPI(title="SmartBudget API")
    app.state.config = config
    app.state.store = store

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse({"message": str(exc)}, status_code=400)

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse({"message": str(exc)}, status_code=404)

    @app.exception_handler(InvalidBudget)
    async def invalid_budget(request: Request, exc: InvalidBudget):
        logger.error("Invalid budget while composing %s: %s", request.url.path, exc)
        return JSONResponse({"message": str(exc)}, status_code=500)

    # Transactions

    @app.get("/api/transactions")
    async def list_transactions(store=Depends(_store), owner_id=Depends(_owner_id)):
        return [transaction_payload(tx) for tx in store.list_transactions(owner_id)]

    @app.get("/api/transactions/{transaction_id}")
    async def get_transaction(transaction_id: int, store=Depends(_store)):
        return transaction_payload(store.get_transaction(transaction_id))

    @app.post("/api/transactions", status_code=201)
    async def create_transaction(
        body: TransactionIn, store=Depends(_store), owner_id=Depends(_owner_id)
    ):
        tx = store.create_transaction(owner_id, **body.store_fields())
        return transaction_payload(tx)

    @app.put("/api/transactions/{transaction_id}")
    async def update_transaction(
        transaction_id: int, body: TransactionPatch, store=Depends(_store)
    ):
        store.get_transaction(transaction_id)
        tx = store.update_transaction(transaction_id, **body.store_fields())
        return transaction_payload(tx)

    @app.delete("/api/transactions/{transaction_id}", status_code=204)
    async def delete_transaction(transaction_id: int, store=Depends(_store)):
        store.delete_transaction(transaction_id)
        return Response(status_code=204)

    # Budgets

    @app.get("/api/budgets")
    async def list_budgets(store=Depends(_store), owner_id=Depends(_owner_id)):
        return [budget_payload(b) for b in store.list_budgets(owner_id)]

    @app.get("/api/budgets/{budget_id}")
    async def get_budget(budget_id: int, store=Depends(_store)):
        return budget_payload(store.get_budget(budget_id))

    @app.post("/api/budgets", status_code=201)
    async def create_budget(body: BudgetIn, store=Depends(_store), owner_id=Depends(_owner_id)):
        budget = store.create_budget(owner_id, **body.model_dump())
        return budget_payload(budget)

    @app.put("/api/budgets/{budget_id}")
    async def update_budget(budget_id: int, body: BudgetPatch, store=Depends(_store)):
        store.get_budget(budget_id)
        budget = store.update_budget(budget_id, **body.store_fields())
        return budget_payload(budget)

    @app.delete("/api/budgets/{budget_id}", status_code=204)
    async def delete_budget(budget_id: int, store=Depends(_store)):
        store.delete_budget(budget_id)
        return Response(status_code=204)

    # Summaries

    @app.get("/api/dashboard")
    async def dashboard(store=Depends(_store), owner_id=Depends(_owner_id)):
        summary = build_dashboard(
            store, owner_id, recent_limit=int(config.get("recent_limit", 5))
        )
        return dashboard_payload(summary)

    @app.get("/api/reports")
    async def reports(
        window: str = WindowKind.CURRENT_MONTH.value,
        store=Depends(_store),
        owner_id=Depends(_owner_id),
    ):
        return report_payload(build_report(store, owner_id, window))

    @app.get("/api/charts/cash-flow")
    async def cash_flow(
        window: str = WindowKind.LAST_30_DAYS.value,
        store=Depends(_store),
        owner_id=Depends(_owner_id),
    ):
        return cash_flow_payload(build_cash_flow(store, owner_id, window))

    @app.get("/api/categories")
    async def categories():
        return config.get("categories", {})

    return app
