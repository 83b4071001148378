"""
Reactive Fetch Controller

DESIGN DECISION: Every account-scoped view (budgets, transactions, balances,
net worth) fetches through the same state machine:

    IDLE -> LOADING -> READY          first load
    READY -> REFRESHING -> READY      any later load
    LOADING -> IDLE                   first load failed
    REFRESHING -> READY               later load failed, old data kept visible

LOADING blocks the view; REFRESHING never blanks it.

Guards applied to every non-forced load, in order:
1. Accounts still loading: defer. The account filter notifies us when done.
2. Signature unchanged: skip. Signature = "{start}:{end}:{selection_key}".
3. Empty selection: no gateway call. Data becomes empty and the load counts
   as completed, so nothing spins forever.

Superseded fetches: last request wins. Each load bumps a generation counter;
a response that comes back for an older generation is discarded.
"""

import asyncio
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from finboard.audit import AuditLogger
from finboard.config import DashboardSettings, get_settings
from finboard.controllers.account_filter import AccountFilter
from finboard.controllers.messages import error_status
from finboard.models.audit import AuditEvent, AuditEventBuilder
from finboard.models.ledger import AccountFilterState, DateRange
from finboard.services.gateway import LedgerGatewayInterface
from finboard.sync import DebounceSlot


D = TypeVar("D")


class FetchState(str, Enum):
    """Lifecycle of a controller's data."""
    IDLE = "idle"
    LOADING = "loading"
    REFRESHING = "refreshing"
    READY = "ready"


class ReactiveFetchController(ABC, Generic[D]):
    """
    Base class for account-scoped views.

    Subclasses provide the range, the fetch, and the error wording.
    """

    name = "controller"

    # When True, a missing range means "nothing to show" rather than "no filter"
    requires_range = False

    clears_error_on_fetch = True

    def __init__(
        self,
        gateway: LedgerGatewayInterface,
        account_filter: AccountFilter,
        settings: Optional[DashboardSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._gateway = gateway
        self._account_filter = account_filter
        self._settings = settings or get_settings().dashboard
        self._audit = audit_logger

        self.state = FetchState.IDLE
        self.error: Optional[str] = None
        self.data: D = self._empty_data()

        self._has_loaded = False
        self._last_signature: Optional[str] = None
        self._generation = 0
        self._unsubscribe = None
        self._range_slot = DebounceSlot(
            self._settings.range_debounce_seconds,
            self._on_range_settled,
        )

    # ----- subclass hooks -----

    @abstractmethod
    def current_range(self) -> Optional[DateRange]:
        """The range the next load should use."""
        pass

    @abstractmethod
    async def _fetch(self, date_range: Optional[DateRange], account_ids: Optional[list[str]]) -> D:
        """Fetch data from the gateway."""
        pass

    @abstractmethod
    def _empty_data(self) -> D:
        pass

    @abstractmethod
    def _error_message(self, error: Exception) -> Optional[str]:
        """User-facing message for a failed fetch; None leaves the error slot alone."""
        pass

    def _failure_data(self, error: Exception) -> D:
        """Data to show after a failed fetch. Keeps the old data by default."""
        return self.data

    def _on_data_changed(self) -> None:
        pass

    # ----- state -----

    @property
    def loading(self) -> bool:
        return self.state == FetchState.LOADING

    @property
    def refreshing(self) -> bool:
        return self.state == FetchState.REFRESHING

    @property
    def has_loaded(self) -> bool:
        return self._has_loaded

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def accounts(self) -> AccountFilterState:
        return self._account_filter.state

    def compute_signature(self) -> str:
        date_range = self.current_range()
        range_key = date_range.key if date_range else ":"
        return f"{range_key}:{self._account_filter.state.selection_key}"

    # ----- lifecycle -----

    async def start(self) -> None:
        """Subscribe to account changes and run the first load."""
        self.attach()
        await self.load()

    def stop(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        self._range_slot.cancel()

    def attach(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._account_filter.subscribe(self._on_accounts_changed)

    async def _on_accounts_changed(self, state: AccountFilterState) -> None:
        await self.load()

    def _schedule_range_load(self) -> None:
        """Debounce a range change; the load runs once the range settles."""
        self._range_slot.schedule(self.compute_signature())

    def _on_range_settled(self, signature: str):
        return self.load()

    async def flush_pending(self) -> None:
        """Run a pending debounced load now and wait for it."""
        self._range_slot.flush()
        await self._range_slot.join()

    async def refresh(self) -> None:
        """Reload even if nothing changed."""
        await self.load(force=True)

    # ----- loading -----

    async def _log(self, event: AuditEvent) -> None:
        if self._audit:
            await self._audit.log(event)

    def _complete(self, data: D) -> None:
        self.data = data
        if self.clears_error_on_fetch:
            self.error = None
        self._has_loaded = True
        self.state = FetchState.READY
        self._on_data_changed()

    async def load(self, force: bool = False) -> None:
        """
        Load data for the current range and account selection.

        Failures never propagate; they land in `error`.
        """
        signature = self.compute_signature()

        if self._account_filter.loading:
            await self._log(AuditEventBuilder.fetch_skipped(self.name, signature, "accounts_loading"))
            return

        if not force and signature == self._last_signature:
            await self._log(AuditEventBuilder.fetch_skipped(self.name, signature, "unchanged_signature"))
            return

        self._last_signature = signature
        self._generation += 1
        generation = self._generation
        filter_state = self._account_filter.state
        date_range = self.current_range()

        if filter_state.is_empty_selection:
            self._complete(self._empty_data())
            await self._log(AuditEventBuilder.empty_selection(self.name, signature))
            return

        if self.requires_range and date_range is None:
            self._complete(self._empty_data())
            await self._log(AuditEventBuilder.fetch_skipped(self.name, signature, "no_range"))
            return

        self.state = FetchState.REFRESHING if self._has_loaded else FetchState.LOADING
        if self.clears_error_on_fetch:
            self.error = None
        await self._log(AuditEventBuilder.fetch_started(
            self.name, signature, refreshing=self._has_loaded, generation=generation
        ))

        try:
            result = await self._fetch(date_range, filter_state.account_ids_param)
        except asyncio.CancelledError:
            if generation == self._generation:
                self.state = FetchState.READY if self._has_loaded else FetchState.IDLE
            raise
        except Exception as e:
            if generation != self._generation:
                await self._log(AuditEventBuilder.fetch_superseded(
                    self.name, generation, self._generation
                ))
                return
            message = self._error_message(e)
            if message is not None:
                self.error = message
            self.data = self._failure_data(e)
            self.state = FetchState.READY if self._has_loaded else FetchState.IDLE
            self._on_data_changed()
            await self._log(AuditEventBuilder.fetch_failed(
                self.name, signature, str(e), status=error_status(e)
            ))
            return

        if generation != self._generation:
            await self._log(AuditEventBuilder.fetch_superseded(
                self.name, generation, self._generation
            ))
            return

        self.data = result
        self._has_loaded = True
        self.state = FetchState.READY
        self._on_data_changed()
        await self._log(AuditEventBuilder.fetch_completed(
            self.name, signature, item_count=_count(result)
        ))


def _count(data: Any) -> int:
    if data is None:
        return 0
    try:
        return len(data)
    except TypeError:
        return 1
