"""
Transactions Controller

All transactions for a date-range preset, with local search, category
selection and pagination on top.

Search is debounced and purely local; it never triggers a fetch.
The page resets to 1 whenever search, category, range or the account
selection changes, and is clamped to the last page when the list shrinks.
"""

import math
from typing import Optional

from finboard.audit import AuditLogger
from finboard.config import DashboardSettings
from finboard.controllers.account_filter import AccountFilter
from finboard.controllers.base import ReactiveFetchController
from finboard.controllers.messages import LOAD_TRANSACTIONS_FAILED, status_message
from finboard.domain.categories import format_category_name
from finboard.domain.date_ranges import DateRangeKey, compute_date_range
from finboard.domain.transaction_filter import FilterCriteria, TransactionFilter
from finboard.models.ledger import AccountFilterState, DateRange, Transaction
from finboard.services.gateway import LedgerGatewayInterface
from finboard.sync import DebounceSlot


class TransactionsController(ReactiveFetchController[tuple[Transaction, ...]]):
    """The transactions table."""

    name = "transactions"

    def __init__(
        self,
        gateway: LedgerGatewayInterface,
        account_filter: AccountFilter,
        settings: Optional[DashboardSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        range_key: Optional[DateRangeKey] = None,
        search: str = "",
        category: Optional[str] = None,
    ):
        super().__init__(gateway, account_filter, settings, audit_logger)
        self._range_key = DateRangeKey(range_key) if range_key else None
        self.search = search
        self._applied_search = search
        self.selected_category = category
        self._current_page = 1
        self._selection_key = account_filter.state.selection_key
        self._search_slot = DebounceSlot(
            self._settings.search_debounce_seconds,
            self._apply_search,
        )

    # ----- fetch hooks -----

    def current_range(self) -> Optional[DateRange]:
        return compute_date_range(self._range_key)

    async def _fetch(
        self,
        date_range: Optional[DateRange],
        account_ids: Optional[list[str]],
    ) -> tuple[Transaction, ...]:
        transactions = await self._gateway.get_transactions(
            start_date=date_range.start if date_range else None,
            end_date=date_range.end if date_range else None,
            account_ids=account_ids,
        )
        return tuple(transactions)

    def _empty_data(self) -> tuple[Transaction, ...]:
        return ()

    def _error_message(self, error: Exception) -> Optional[str]:
        return status_message(error, LOAD_TRANSACTIONS_FAILED)

    def _failure_data(self, error: Exception) -> tuple[Transaction, ...]:
        return ()

    def _on_data_changed(self) -> None:
        if self.selected_category and self.selected_category not in self.categories:
            self.selected_category = None

    async def _on_accounts_changed(self, state: AccountFilterState) -> None:
        if state.selection_key != self._selection_key:
            self._selection_key = state.selection_key
            self._current_page = 1
        await self.load()

    def stop(self) -> None:
        super().stop()
        self._search_slot.cancel()

    # ----- inputs -----

    @property
    def range_key(self) -> Optional[DateRangeKey]:
        return self._range_key

    def set_date_range(self, range_key: Optional[DateRangeKey]) -> None:
        self._range_key = DateRangeKey(range_key) if range_key else None
        self._current_page = 1
        self._schedule_range_load()

    def set_search(self, text: str) -> None:
        """Update the search box. Filtering follows after the debounce delay."""
        self.search = text
        self._current_page = 1
        self._search_slot.schedule(text)

    def _apply_search(self, text: str) -> None:
        self._applied_search = text

    @property
    def applied_search(self) -> str:
        return self._applied_search

    def flush_search(self) -> None:
        self._search_slot.flush()

    def set_selected_category(self, category: Optional[str]) -> None:
        self.selected_category = category or None
        self._current_page = 1

    # ----- derived views -----

    @property
    def all_transactions(self) -> tuple[Transaction, ...]:
        return self.data

    @property
    def filtered(self) -> list[Transaction]:
        criteria = FilterCriteria(
            search=self._applied_search or None,
            category=self.selected_category,
            date_range=self.current_range(),
        )
        return TransactionFilter.filter(self.data, criteria)

    @property
    def categories(self) -> list[str]:
        """Display names of every category in the fetched set."""
        return sorted({format_category_name(t.category.primary) for t in self.data})

    @property
    def total_items(self) -> int:
        return len(self.filtered)

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_items / self._settings.page_size))

    @property
    def current_page(self) -> int:
        if self._current_page > self.total_pages:
            self._current_page = self.total_pages
        return self._current_page

    def set_current_page(self, page: int) -> None:
        self._current_page = max(1, min(page, self.total_pages))

    @property
    def page_items(self) -> list[Transaction]:
        page_size = self._settings.page_size
        start = (self.current_page - 1) * page_size
        return self.filtered[start:start + page_size]
