"""Dashboard and report composition over one owner's records."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Sequence

from budget_tracker.aggregation import (
    ZERO,
    daily_cash_flow,
    ranked_breakdown,
    sum_by_category,
    total_for,
)
from budget_tracker.budgets import evaluate, percent_of
from budget_tracker.core.models import (
    Budget,
    DailyCashFlow,
    DashboardSummary,
    Report,
    Transaction,
)
from budget_tracker.stores.base import BaseStore
from budget_tracker.windows import WindowKind, parse_window, select_window, window_label

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5


def recent_transactions(
    transactions: Sequence[Transaction], limit: int = RECENT_LIMIT
) -> List[Transaction]:
    """Latest transactions first; equal dates keep their store order."""
    return sorted(transactions, key=lambda tx: tx.date, reverse=True)[:limit]


def compose_dashboard(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    now: datetime,
    recent_limit: int = RECENT_LIMIT,
) -> DashboardSummary:
    total_income = total_for(transactions, is_expense=False)
    total_expenses = total_for(transactions, is_expense=True)

    this_month = select_window(transactions, WindowKind.CURRENT_MONTH, now)
    monthly_income = total_for(this_month, is_expense=False)
    monthly_expenses = total_for(this_month, is_expense=True)

    # Duplicate categories each contribute their full amount.
    budget_total = sum((b.amount for b in budgets), ZERO)
    if budget_total:
        budget_used = min(100, percent_of(monthly_expenses, budget_total))
    else:
        budget_used = 0

    category_expenses = sum_by_category(transactions, is_expense=True)

    return DashboardSummary(
        current_balance=total_income - total_expenses,
        total_income=total_income,
        total_expenses=total_expenses,
        monthly_income=monthly_income,
        monthly_expenses=monthly_expenses,
        budget_used=budget_used,
        budget_total=budget_total,
        category_expenses=category_expenses,
        budget_status=evaluate(budgets, category_expenses),
        recent_transactions=recent_transactions(transactions, recent_limit),
    )


def compose_report(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    window,
    now: datetime,
) -> Report:
    """Summarise income, spend and budget progress for one window.

    The net savings percentage is ``None`` when there is no income in the
    window.
    """
    selected = select_window(transactions, window, now)
    expenses_by_category = sum_by_category(selected, is_expense=True)
    income_by_category = sum_by_category(selected, is_expense=False)
    total_income = total_for(selected, is_expense=False)
    total_expenses = total_for(selected, is_expense=True)
    net_savings = total_income - total_expenses

    kind = parse_window(window)
    return Report(
        window=kind.value if kind else str(window),
        label=window_label(window, now),
        total_income=total_income,
        total_expenses=total_expenses,
        net_savings=net_savings,
        net_savings_percentage=percent_of(net_savings, total_income) if total_income else None,
        expense_breakdown=ranked_breakdown(expenses_by_category),
        income_breakdown=ranked_breakdown(income_by_category),
        budget_progress=evaluate(budgets, expenses_by_category),
    )


def build_dashboard(
    store: BaseStore,
    owner_id: int,
    now: datetime | None = None,
    recent_limit: int = RECENT_LIMIT,
) -> DashboardSummary:
    now = now or datetime.now()
    transactions = store.list_transactions(owner_id)
    budgets = store.list_budgets(owner_id)
    logger.debug(
        "Composing dashboard for owner %s from %d transaction(s), %d budget(s)",
        owner_id, len(transactions), len(budgets),
    )
    return compose_dashboard(transactions, budgets, now, recent_limit)


def build_report(
    store: BaseStore, owner_id: int, window, now: datetime | None = None
) -> Report:
    now = now or datetime.now()
    return compose_report(
        store.list_transactions(owner_id), store.list_budgets(owner_id), window, now
    )


def build_cash_flow(
    store: BaseStore,
    owner_id: int,
    window=WindowKind.LAST_30_DAYS,
    now: datetime | None = None,
) -> List[DailyCashFlow]:
    now = now or datetime.now()
    selected = select_window(store.list_transactions(owner_id), window, now)
    return daily_cash_flow(selected)
