"""
Budget Aggregation Engine

Computes spent-per-category, utilization and month-level statistics from
budgets x transactions x date range.

DESIGN DECISION: Everything here is a pure function of its inputs.
Progress is recomputed whenever budgets, transactions or the active month
change; nothing derived is ever cached or persisted.

Sign convention: positive amounts are outflows. Spent is the SIGNED sum,
so refunds reduce it.
"""

import calendar
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from finboard.domain.categories import CategoryKey
from finboard.models.ledger import (
    Budget,
    BudgetProgressEntry,
    BudgetStats,
    DateRange,
    Transaction,
)


NEAR_LIMIT_MIN_PERCENT = Decimal("80")
NEAR_LIMIT_MAX_PERCENT = Decimal("100")
MAX_NEAR_LIMIT_CATEGORIES = 3

_HUNDRED = Decimal("100")
_ZERO = Decimal("0")


class BudgetCalculator:
    """Stateless budget math."""

    @staticmethod
    def calculate_spent(
        transactions: Iterable[Transaction],
        category_id: str,
        start: date,
        end: date,
    ) -> Decimal:
        """
        Sum the amounts of transactions in a category within [start, end].

        A transaction matches when its raw category code equals category_id
        case-insensitively, or when both display names are equal.
        """
        key = CategoryKey(category_id)
        total = _ZERO
        for transaction in transactions:
            if not key.matches(transaction.category.primary):
                continue
            if start <= transaction.date <= end:
                total += transaction.amount
        return total

    @staticmethod
    def calculate_percentage(amount: Decimal, spent: Decimal) -> float:
        """Utilization clamped to [0, 100]; 0 when nothing is budgeted."""
        if amount == 0:
            return 0.0
        percent = spent / amount * _HUNDRED
        return float(max(_ZERO, min(_HUNDRED, percent)))

    @staticmethod
    def calculate_remaining(amount: Decimal, spent: Decimal) -> Decimal:
        return max(_ZERO, amount - spent)

    @staticmethod
    def is_over_budget(amount: Decimal, spent: Decimal) -> bool:
        return spent > amount

    @classmethod
    def compute_progress(
        cls,
        budgets: Sequence[Budget],
        transactions: Sequence[Transaction],
        date_range: DateRange,
    ) -> list[BudgetProgressEntry]:
        """Attach spent and percentage to every budget, in budget order."""
        entries = []
        for budget in budgets:
            spent = cls.calculate_spent(
                transactions, budget.category, date_range.start, date_range.end
            )
            entries.append(BudgetProgressEntry(
                id=budget.id,
                category=budget.category,
                amount=budget.amount,
                spent=spent,
                percentage=cls.calculate_percentage(budget.amount, spent),
            ))
        return entries

    @classmethod
    def compute_stats(
        cls,
        entries: Sequence[BudgetProgressEntry],
        reference_month: date,
        today: Optional[date] = None,
    ) -> BudgetStats:
        """
        Month-level statistics across all entries.

        Args:
            entries: Budgets with progress for the month
            reference_month: Any day inside the month being viewed
            today: Override for the current day (defaults to date.today())
        """
        today = today or date.today()

        total_budgeted = sum((e.amount for e in entries), _ZERO)
        total_spent = sum((e.spent for e in entries), _ZERO)

        over_budget = [e.category for e in entries if cls.is_over_budget(e.amount, e.spent)]

        near_limit = []
        for entry in entries:
            if entry.amount <= 0:
                continue
            utilization = entry.spent / entry.amount * _HUNDRED
            if NEAR_LIMIT_MIN_PERCENT <= utilization <= NEAR_LIMIT_MAX_PERCENT:
                near_limit.append(entry.category)
                if len(near_limit) == MAX_NEAR_LIMIT_CATEGORIES:
                    break

        total_days = calendar.monthrange(reference_month.year, reference_month.month)[1]
        viewed = (reference_month.year, reference_month.month)
        current = (today.year, today.month)
        if viewed < current:
            days_remaining = 0
        elif viewed > current:
            days_remaining = total_days
        else:
            days_remaining = total_days - today.day

        return BudgetStats(
            total_budgeted=total_budgeted,
            total_spent=total_spent,
            variance=total_budgeted - total_spent,
            over_budget_count=len(over_budget),
            over_budget_categories=over_budget,
            active_budget_categories=[e.category for e in entries],
            near_limit_categories=near_limit,
            total_days=total_days,
            days_remaining=days_remaining,
        )
