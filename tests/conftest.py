"""
Shared fixtures.

Controllers and the dashboard run against FakeLedgerGateway, an in-memory
ledger that records every call and can be told to fail or to block.
"""

import asyncio
from datetime import date
from decimal import Decimal
from typing import Optional

import pytest

from finboard.config import DashboardSettings
from finboard.models.ledger import (
    Account,
    BalancesOverview,
    BalanceTotals,
    Budget,
    NetWorthPoint,
    Transaction,
    TransactionCategory,
)
from finboard.services.gateway import LedgerGatewayInterface


class FakeLedgerGateway(LedgerGatewayInterface):
    """In-memory ledger for tests."""

    def __init__(
        self,
        accounts: Optional[list[Account]] = None,
        transactions: Optional[list[Transaction]] = None,
        budgets: Optional[list[Budget]] = None,
        net_worth: Optional[list[NetWorthPoint]] = None,
    ):
        self.accounts = list(accounts or [])
        self.transactions = list(transactions or [])
        self.budgets = list(budgets or [])
        self.net_worth = list(net_worth or [])
        self.balances = BalancesOverview(
            as_of="2024-06-30",
            overall=BalanceTotals(cash=Decimal("1000"), net=Decimal("1000")),
        )
        self.calls: list[tuple[str, dict]] = []
        self.errors: dict[str, Exception] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self._next_id = 1

    def fail(self, method: str, error: Exception) -> None:
        self.errors[method] = error

    def recover(self, method: str) -> None:
        self.errors.pop(method, None)

    def calls_to(self, method: str) -> list[dict]:
        return [kwargs for name, kwargs in self.calls if name == method]

    async def _enter(self, method: str, **kwargs) -> None:
        self.calls.append((method, kwargs))
        gate = self.gates.get(method)
        if gate is not None:
            await gate.wait()
        error = self.errors.get(method)
        if error is not None:
            raise error

    async def get_accounts(self):
        await self._enter("get_accounts")
        return list(self.accounts)

    async def get_transactions(self, start_date=None, end_date=None, account_ids=None):
        await self._enter(
            "get_transactions",
            start_date=start_date,
            end_date=end_date,
            account_ids=account_ids,
        )
        return [
            t for t in self.transactions
            if (start_date is None or t.date >= start_date)
            and (end_date is None or t.date <= end_date)
        ]

    async def get_budgets(self):
        await self._enter("get_budgets")
        return list(self.budgets)

    async def create_budget(self, category, amount):
        await self._enter("create_budget", category=category, amount=amount)
        budget = Budget(id=f"srv-{self._next_id}", category=category, amount=amount)
        self._next_id += 1
        self.budgets.append(budget)
        return budget

    async def update_budget(self, budget_id, amount=None, category=None):
        await self._enter("update_budget", budget_id=budget_id, amount=amount, category=category)
        for index, budget in enumerate(self.budgets):
            if budget.id == budget_id:
                updated = budget.model_copy(update={
                    "amount": budget.amount if amount is None else amount,
                    "category": category or budget.category,
                })
                self.budgets[index] = updated
                return updated
        raise KeyError(budget_id)

    async def delete_budget(self, budget_id):
        await self._enter("delete_budget", budget_id=budget_id)
        self.budgets = [b for b in self.budgets if b.id != budget_id]

    async def get_balances_overview(self, account_ids=None, start_date=None, end_date=None):
        await self._enter(
            "get_balances_overview",
            account_ids=account_ids,
            start_date=start_date,
            end_date=end_date,
        )
        return self.balances

    async def get_net_worth_over_time(self, start_date, end_date, account_ids=None):
        await self._enter(
            "get_net_worth_over_time",
            start_date=start_date,
            end_date=end_date,
            account_ids=account_ids,
        )
        return list(self.net_worth)


@pytest.fixture
def make_transaction():
    """Factory for transactions; amounts are outflows unless negative."""
    counter = {"n": 0}

    def _make(
        category: str = "FOOD_AND_DRINK",
        amount: str = "10",
        day: date = date(2024, 6, 15),
        name: str = "Coffee Shop",
        merchant: Optional[str] = None,
    ) -> Transaction:
        counter["n"] += 1
        return Transaction(
            id=f"t{counter['n']}",
            date=day,
            name=name,
            merchant=merchant,
            amount=Decimal(amount),
            category=TransactionCategory(primary=category),
            account_name="Checking",
            account_type="depository",
        )

    return _make


@pytest.fixture
def accounts():
    return [
        Account(id="a1", name="Checking", institution_name="First Bank"),
        Account(id="a2", name="Savings", institution_name="First Bank"),
        Account(id="a3", name="Card", institution_name="Second Bank"),
    ]


@pytest.fixture
def settings():
    """Dashboard settings with short debounce windows."""
    return DashboardSettings(
        search_debounce_ms=20,
        range_debounce_ms=20,
        page_size=10,
        max_chart_dots=30,
    )


@pytest.fixture
def gateway(accounts):
    return FakeLedgerGateway(accounts=accounts)


@pytest.fixture
def make_gateway():
    """Build a FakeLedgerGateway with custom contents."""
    return FakeLedgerGateway
