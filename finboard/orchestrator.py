"""
Main Orchestrator for finboard

This module ties the gateway, the account filter and the four controllers
into one dashboard:

1. Start: load accounts, then let every controller run its first load
2. Account changes: the account filter notifies every controller
3. Refresh: every controller reloads, concurrently
4. Shutdown: stop timers, close the HTTP client

DESIGN DECISION: Controllers never talk to each other. The only shared
state is the account filter, and every load goes through the same
guards (deferral, signature, empty selection, last request wins).
"""

import asyncio
from typing import Optional

from finboard.audit import AuditLogger
from finboard.config import Settings, get_settings
from finboard.controllers import (
    AccountFilter,
    BalancesController,
    BudgetsController,
    NetWorthController,
    TransactionsController,
)
from finboard.domain.date_ranges import DateRangeKey
from finboard.services.gateway import HttpLedgerGateway, LedgerGatewayInterface


class Dashboard:
    """
    The dashboard's data layer.

    Owns one controller per view and the account filter they share.
    """

    def __init__(
        self,
        gateway: LedgerGatewayInterface,
        settings: Optional[Settings] = None,
        audit_logger: Optional[AuditLogger] = None,
        transactions_range: Optional[DateRangeKey] = DateRangeKey.CURRENT_MONTH,
        net_worth_range: Optional[DateRangeKey] = DateRangeKey.PAST_6_MONTHS,
    ):
        settings = settings or get_settings()
        dashboard_settings = settings.dashboard

        self._gateway = gateway
        self._audit_logger = audit_logger or AuditLogger(dashboard_settings.audit_history_size)

        self.account_filter = AccountFilter(gateway, self._audit_logger)
        self.budgets = BudgetsController(
            gateway, self.account_filter, dashboard_settings, self._audit_logger,
        )
        self.transactions = TransactionsController(
            gateway, self.account_filter, dashboard_settings, self._audit_logger,
            range_key=transactions_range,
        )
        self.balances = BalancesController(
            gateway, self.account_filter, dashboard_settings, self._audit_logger,
        )
        self.net_worth = NetWorthController(
            gateway, self.account_filter, dashboard_settings, self._audit_logger,
            range_key=net_worth_range,
        )

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    @property
    def controllers(self) -> tuple:
        return (self.budgets, self.transactions, self.balances, self.net_worth)

    async def start(self) -> None:
        """
        Load accounts, then every view.

        Controllers subscribe first so the account load reaches them;
        each then runs its own first load. Loads that would repeat the
        same signature are skipped by the controllers themselves.
        """
        for controller in self.controllers:
            controller.attach()
        await self.account_filter.load()
        await asyncio.gather(*(controller.start() for controller in self.controllers))

    async def refresh_all(self) -> None:
        """Reload every view, bypassing the signature guard."""
        await asyncio.gather(*(controller.refresh() for controller in self.controllers))

    async def aclose(self) -> None:
        for controller in self.controllers:
            controller.stop()
        if isinstance(self._gateway, HttpLedgerGateway):
            await self._gateway.aclose()


def create_app_components(
    settings: Optional[Settings] = None,
    gateway: Optional[LedgerGatewayInterface] = None,
) -> tuple[Dashboard, LedgerGatewayInterface, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to the cached environment settings
        gateway: Gateway to use; defaults to the HTTP gateway

    Returns:
        (dashboard, gateway, audit_logger)
    """
    settings = settings or get_settings()
    gateway = gateway or HttpLedgerGateway(settings.gateway)
    audit_logger = AuditLogger(settings.dashboard.audit_history_size)

    dashboard = Dashboard(gateway, settings=settings, audit_logger=audit_logger)
    return dashboard, gateway, audit_logger
