from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Tuple

from budget_tracker.core.models import DailyCashFlow, Transaction

ZERO = Decimal("0")


def sum_by_category(
    transactions: Iterable[Transaction], is_expense: bool
) -> Dict[str, Decimal]:
    """Total the amounts of matching transactions per category.

    Only categories with at least one matching transaction appear, in the
    order they are first seen.
    """
    totals: Dict[str, Decimal] = {}
    for tx in transactions:
        if tx.is_expense != is_expense:
            continue
        totals[tx.category] = totals.get(tx.category, ZERO) + tx.amount
    return totals


def total_for(transactions: Iterable[Transaction], is_expense: bool) -> Decimal:
    return sum((tx.amount for tx in transactions if tx.is_expense == is_expense), ZERO)


def ranked_breakdown(category_sums: Mapping[str, Decimal]) -> List[Tuple[str, Decimal]]:
    """Categories by descending amount; equal amounts keep mapping order."""
    return sorted(category_sums.items(), key=lambda item: item[1], reverse=True)


def daily_cash_flow(transactions: Iterable[Transaction]) -> List[DailyCashFlow]:
    income: Dict = defaultdict(lambda: ZERO)
    expenses: Dict = defaultdict(lambda: ZERO)
    for tx in transactions:
        day = tx.date.date()
        if tx.is_expense:
            expenses[day] += tx.amount
        else:
            income[day] += tx.amount
    days = sorted(set(income) | set(expenses))
    return [DailyCashFlow(day=d, income=income[d], expenses=expenses[d]) for d in days]
