"""
Account Filter

Holds which accounts the user wants to see and tells every subscribed
controller when that changes.

Selection reconciliation when the account universe is (re)loaded:
- nothing selected yet: select everything
- everything was selected: keep everything selected, including new accounts
- otherwise: keep only the selected ids that still exist
"""

import asyncio
from typing import Awaitable, Callable, Iterable, Optional

from finboard.audit import AuditLogger
from finboard.models.audit import AuditEventBuilder
from finboard.models.ledger import Account, AccountFilterState
from finboard.services.gateway import GatewayError, LedgerGatewayInterface


Subscriber = Callable[[AccountFilterState], Awaitable[None]]


class AccountFilter:
    """Account selection shared by all controllers."""

    def __init__(
        self,
        gateway: LedgerGatewayInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._gateway = gateway
        self._audit = audit_logger
        self._accounts: list[Account] = []
        self._state = AccountFilterState()
        self._loading = False
        self._subscribers: list[Subscriber] = []

    @property
    def state(self) -> AccountFilterState:
        return self._state

    @property
    def accounts(self) -> tuple[Account, ...]:
        return tuple(self._accounts)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def selected_account_ids(self) -> frozenset[str]:
        return self._state.selected_account_ids

    @property
    def all_account_ids(self) -> tuple[str, ...]:
        return self._state.all_account_ids

    @property
    def is_all_accounts_selected(self) -> bool:
        return self._state.is_all_accounts_selected

    @property
    def accounts_by_bank(self) -> dict[str, list[Account]]:
        """Accounts grouped by institution, in first-seen order."""
        groups: dict[str, list[Account]] = {}
        for account in self._accounts:
            groups.setdefault(account.institution_name, []).append(account)
        return groups

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for selection changes.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def _notify(self) -> None:
        if self._subscribers:
            await asyncio.gather(*(callback(self._state) for callback in list(self._subscribers)))

    @staticmethod
    def reconcile(
        previous: AccountFilterState,
        new_ids: tuple[str, ...],
    ) -> frozenset[str]:
        """Carry a selection over to a new account universe."""
        if not previous.selected_account_ids:
            return frozenset(new_ids)
        if previous.is_all_accounts_selected:
            return frozenset(new_ids)
        return previous.selected_account_ids.intersection(new_ids)

    async def load(self) -> None:
        """
        Load the account universe and reconcile the selection.

        Subscribers are always notified afterwards, so controllers that
        deferred while accounts were loading get their turn.
        """
        self._loading = True
        try:
            accounts = await self._gateway.get_accounts()
        except GatewayError as e:
            self._accounts = []
            self._state = AccountFilterState()
            if self._audit:
                await self._audit.log_external_service_error(
                    service="ledger.accounts",
                    error_message=str(e),
                    status=e.status,
                )
        except Exception as e:
            if self._audit:
                await self._audit.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"operation": "load_accounts"},
                )
            raise
        else:
            self._accounts = list(accounts)
            new_ids = tuple(account.id for account in self._accounts)
            self._state = AccountFilterState(
                selected_account_ids=self.reconcile(self._state, new_ids),
                all_account_ids=new_ids,
            )
            if self._audit:
                await self._audit.log(AuditEventBuilder.accounts_loaded(
                    account_count=len(new_ids),
                    selected_count=len(self._state.selected_account_ids),
                ))
        finally:
            self._loading = False

        await self._notify()

    async def set_selected(self, account_ids: Iterable[str]) -> None:
        await self._apply(frozenset(account_ids))

    async def toggle_account(self, account_id: str) -> None:
        selected = self._state.selected_account_ids
        if account_id in selected:
            await self._apply(selected - {account_id})
        else:
            await self._apply(selected | {account_id})

    async def toggle_bank(self, bank_name: str) -> None:
        """Deselect the bank if all its accounts are selected, else select them all."""
        bank_ids = {a.id for a in self.accounts_by_bank.get(bank_name, [])}
        selected = self._state.selected_account_ids
        if bank_ids.issubset(selected):
            await self._apply(selected - bank_ids)
        else:
            await self._apply(selected | bank_ids)

    async def _apply(self, selected: frozenset[str]) -> None:
        if selected == self._state.selected_account_ids:
            return
        self._state = self._state.model_copy(update={"selected_account_ids": selected})
        if self._audit:
            await self._audit.log(
                AuditEventBuilder.account_filter_changed(self._state.selection_key)
            )
        await self._notify()
