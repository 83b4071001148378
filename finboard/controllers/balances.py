"""
Balances Controller

Latest balances overview for the selected accounts.

The ledger only serves the latest snapshot; the end date is passed along
for forward compatibility and only decides WHEN to refetch. End date
changes are debounced, and the end date present at construction never
causes a second fetch.
"""

from datetime import date
from typing import Optional

from finboard.audit import AuditLogger
from finboard.config import DashboardSettings
from finboard.controllers.account_filter import AccountFilter
from finboard.controllers.base import ReactiveFetchController
from finboard.controllers.messages import LOAD_BALANCES_FAILED, exception_message
from finboard.models.ledger import BalancesOverview, DateRange
from finboard.services.gateway import LedgerGatewayInterface


class BalancesController(ReactiveFetchController[Optional[BalancesOverview]]):
    """The balances overview card."""

    name = "balances"

    def __init__(
        self,
        gateway: LedgerGatewayInterface,
        account_filter: AccountFilter,
        settings: Optional[DashboardSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        end_date: Optional[date] = None,
    ):
        super().__init__(gateway, account_filter, settings, audit_logger)
        self._end_date = end_date

    def current_range(self) -> Optional[DateRange]:
        return None

    def compute_signature(self) -> str:
        end = self._end_date.isoformat() if self._end_date else ""
        return f":{end}:{self._account_filter.state.selection_key}"

    async def _fetch(
        self,
        date_range: Optional[DateRange],
        account_ids: Optional[list[str]],
    ) -> BalancesOverview:
        return await self._gateway.get_balances_overview(
            account_ids=account_ids,
            end_date=self._end_date,
        )

    def _empty_data(self) -> Optional[BalancesOverview]:
        return None

    def _error_message(self, error: Exception) -> Optional[str]:
        return exception_message(error, LOAD_BALANCES_FAILED)

    @property
    def end_date(self) -> Optional[date]:
        return self._end_date

    def set_end_date(self, end_date: Optional[date]) -> None:
        self._end_date = end_date
        self._schedule_range_load()

    def _on_range_settled(self, signature: str):
        if self._end_date is None:
            return None
        return self.load()
