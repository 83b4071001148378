"""
Net Worth Controller

Daily net worth series for a date-range preset, plus the chart math the
view needs (padded y-axis domain and highlighted points).

Without a preset there is nothing to chart: the series is empty and no
request is made.
"""

from typing import Optional

from finboard.audit import AuditLogger
from finboard.config import DashboardSettings
from finboard.controllers.account_filter import AccountFilter
from finboard.controllers.base import ReactiveFetchController
from finboard.controllers.messages import LOAD_NET_WORTH_FAILED, exception_message
from finboard.domain.chart_domain import (
    calculate_net_dot_indices,
    calculate_net_y_axis_domain,
)
from finboard.domain.date_ranges import DateRangeKey, compute_date_range
from finboard.models.ledger import DateRange, NetWorthPoint
from finboard.services.gateway import LedgerGatewayInterface


class NetWorthController(ReactiveFetchController[tuple[NetWorthPoint, ...]]):
    """The net worth chart."""

    name = "net_worth"
    requires_range = True

    def __init__(
        self,
        gateway: LedgerGatewayInterface,
        account_filter: AccountFilter,
        settings: Optional[DashboardSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        range_key: Optional[DateRangeKey] = DateRangeKey.PAST_6_MONTHS,
    ):
        super().__init__(gateway, account_filter, settings, audit_logger)
        self._range_key = DateRangeKey(range_key) if range_key else None

    def current_range(self) -> Optional[DateRange]:
        return compute_date_range(self._range_key)

    async def _fetch(
        self,
        date_range: Optional[DateRange],
        account_ids: Optional[list[str]],
    ) -> tuple[NetWorthPoint, ...]:
        points = await self._gateway.get_net_worth_over_time(
            date_range.start,
            date_range.end,
            account_ids=account_ids,
        )
        return tuple(points)

    def _empty_data(self) -> tuple[NetWorthPoint, ...]:
        return ()

    def _error_message(self, error: Exception) -> Optional[str]:
        return exception_message(error, LOAD_NET_WORTH_FAILED)

    def _failure_data(self, error: Exception) -> tuple[NetWorthPoint, ...]:
        return ()

    @property
    def range_key(self) -> Optional[DateRangeKey]:
        return self._range_key

    def set_range(self, range_key: Optional[DateRangeKey]) -> None:
        self._range_key = DateRangeKey(range_key) if range_key else None
        self._schedule_range_load()

    @property
    def series(self) -> tuple[NetWorthPoint, ...]:
        return self.data

    @property
    def y_domain(self) -> Optional[tuple[float, float]]:
        return calculate_net_y_axis_domain(self.data)

    @property
    def dot_indices(self) -> set[int]:
        return calculate_net_dot_indices(self.data, self._settings.max_chart_dots)
