"""
Filter & Sort Pipeline

Pure, composable transaction filters. filter() always applies them in the
same order: search -> category -> date range -> sort by date descending.
Sorting is applied even when no criteria are set, so the output order is
always deterministic.
"""

from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict

from finboard.domain.categories import CategoryKey
from finboard.models.ledger import DateRange, Transaction


class FilterCriteria(BaseModel):
    """Active filters for a transaction list. Unset fields are skipped."""
    model_config = ConfigDict(frozen=True)

    search: Optional[str] = None
    category: Optional[str] = None
    date_range: Optional[DateRange] = None


class TransactionFilter:
    """Stateless transaction filtering."""

    @staticmethod
    def filter_by_search(
        transactions: Sequence[Transaction],
        search: str,
    ) -> list[Transaction]:
        """Case-insensitive substring match on name or merchant."""
        needle = search.strip().lower()
        if not needle:
            return list(transactions)
        return [
            t for t in transactions
            if needle in (t.name or "").lower() or needle in (t.merchant or "").lower()
        ]

    @staticmethod
    def filter_by_category(
        transactions: Sequence[Transaction],
        category: str,
    ) -> list[Transaction]:
        key = CategoryKey(category)
        return [t for t in transactions if key.matches(t.category.primary)]

    @staticmethod
    def filter_by_date_range(
        transactions: Sequence[Transaction],
        date_range: DateRange,
    ) -> list[Transaction]:
        return [t for t in transactions if date_range.contains(t.date)]

    @staticmethod
    def sort_by_date(transactions: Sequence[Transaction]) -> list[Transaction]:
        """Newest first. Stable, so same-day transactions keep their order."""
        return sorted(transactions, key=lambda t: t.date, reverse=True)

    @classmethod
    def filter(
        cls,
        transactions: Sequence[Transaction],
        criteria: FilterCriteria,
    ) -> list[Transaction]:
        result = list(transactions)

        if criteria.search:
            result = cls.filter_by_search(result, criteria.search)

        if criteria.category:
            result = cls.filter_by_category(result, criteria.category)

        if criteria.date_range:
            result = cls.filter_by_date_range(result, criteria.date_range)

        return cls.sort_by_date(result)
