# budget_tracker/budgets.py
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Mapping

from budget_tracker.core.errors import InvalidBudget
from budget_tracker.core.models import Budget, BudgetStatus

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def percent_of(part: Decimal, whole: Decimal) -> int:
    """Whole-number percentage of *part* in *whole*, rounding halves up.

    *whole* must be non-zero; callers decide what a zero denominator means.
    """
    ratio = Decimal(part) / Decimal(whole) * HUNDRED
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def evaluate_budget(budget: Budget, spent: Decimal) -> BudgetStatus:
    if budget.amount <= 0:
        raise InvalidBudget(
            f"Budget {budget.id} ({budget.category}) has a non-positive amount: {budget.amount}"
        )
    return BudgetStatus(
        budget_id=budget.id,
        category=budget.category,
        budgeted=budget.amount,
        spent=spent,
        raw_percentage=percent_of(spent, budget.amount),
        is_over_budget=spent > budget.amount,
    )


def evaluate(
    budgets: Iterable[Budget], category_spend: Mapping[str, Decimal]
) -> List[BudgetStatus]:
    """Compare each budget with the spend recorded for its category.

    Output follows the order of *budgets*. Budgets sharing a category are
    each evaluated against the same spend.
    """
    return [
        evaluate_budget(budget, category_spend.get(budget.category, ZERO))
        for budget in budgets
    ]
