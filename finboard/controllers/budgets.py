"""
Budgets Controller

Budget list with optimistic mutations, plus the month's transactions that
budget progress is computed from.

Two loads are involved:
- the budget list, fetched once; its first fetch blocks (`is_loading`)
- the month's transactions, fetched through the shared state machine
  whenever the month or the account selection changes

Error wording:
- add: duplicate -> validation_error; 409 -> duplicate message;
  401 -> log in again; otherwise "Failed to create budget.". Re-raises.
- update/remove: 401 -> log in again; otherwise the generic message.
  They return False instead of raising.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional
from uuid import uuid4

from finboard.audit import AuditLogger
from finboard.config import DashboardSettings
from finboard.controllers.account_filter import AccountFilter
from finboard.controllers.base import ReactiveFetchController
from finboard.controllers.messages import (
    DELETE_BUDGET_FAILED,
    LOAD_BUDGETS_FAILED,
    UPDATE_BUDGET_FAILED,
    create_budget_message,
    error_status,
    status_message,
)
from finboard.domain.budget_calculator import BudgetCalculator
from finboard.domain.date_ranges import first_of_month, month_range, shift_month
from finboard.models.audit import AuditEventBuilder
from finboard.models.ledger import (
    AccountFilterState,
    Budget,
    BudgetProgressEntry,
    BudgetStats,
    DateRange,
    Transaction,
)
from finboard.services.gateway import LedgerGatewayInterface
from finboard.sync import OptimisticCollection
from finboard.validation import BudgetValidationError, BudgetValidator, ValidationIssue


class BudgetsController(ReactiveFetchController[tuple[Transaction, ...]]):
    """Budgets for one month at a time."""

    name = "budgets"

    # Transaction fetch failures are silent here; `error` belongs to budget operations
    clears_error_on_fetch = False

    def __init__(
        self,
        gateway: LedgerGatewayInterface,
        account_filter: AccountFilter,
        settings: Optional[DashboardSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        month: Optional[date] = None,
    ):
        super().__init__(gateway, account_filter, settings, audit_logger)
        self._month = first_of_month(month or date.today())
        self._budgets: OptimisticCollection[Budget] = OptimisticCollection(
            entity_type="budget",
            audit_logger=audit_logger,
        )
        self._budgets_loaded = False
        self.is_loading = False
        self.validation_error: Optional[str] = None

    # ----- fetch hooks -----

    def current_range(self) -> DateRange:
        return month_range(self._month)

    async def _fetch(
        self,
        date_range: Optional[DateRange],
        account_ids: Optional[list[str]],
    ) -> tuple[Transaction, ...]:
        transactions = await self._gateway.get_transactions(
            start_date=date_range.start,
            end_date=date_range.end,
            account_ids=account_ids,
        )
        return tuple(transactions)

    def _empty_data(self) -> tuple[Transaction, ...]:
        return ()

    def _error_message(self, error: Exception) -> Optional[str]:
        return None

    def _failure_data(self, error: Exception) -> tuple[Transaction, ...]:
        return ()

    # ----- lifecycle -----

    async def start(self) -> None:
        self.attach()
        if await self.load_budgets():
            await self.load()

    async def reload(self) -> None:
        """Load budgets if needed, then refetch the month's transactions."""
        if await self.load_budgets():
            await self.load(force=True)

    async def refresh(self) -> None:
        if await self.load_budgets(force=True):
            await self.load(force=True)

    async def _on_accounts_changed(self, state: AccountFilterState) -> None:
        if self._budgets_loaded:
            await self.load()

    def _on_range_settled(self, signature: str):
        if self._budgets_loaded:
            return self.load()
        return None

    async def load_budgets(self, force: bool = False) -> bool:
        """
        Fetch the budget list.

        Only the first successful fetch blocks; later calls return at once
        unless forced.

        Returns:
            True when budgets are available
        """
        self.error = None
        self.validation_error = None

        if self._budgets_loaded and not force:
            return True

        first_load = not self._budgets_loaded
        if first_load:
            self.is_loading = True
        try:
            budgets = await self._gateway.get_budgets()
        except Exception as e:
            if first_load:
                self._budgets.replace_all([])
            self.error = status_message(e, LOAD_BUDGETS_FAILED)
            await self._log(AuditEventBuilder.fetch_failed(
                "budget_list", "", str(e), status=error_status(e)
            ))
            return self._budgets_loaded
        finally:
            self.is_loading = False

        self._budgets.replace_all(budgets)
        self._budgets_loaded = True
        await self._log(AuditEventBuilder.fetch_completed("budget_list", "", len(budgets)))
        return True

    # ----- month navigation -----

    @property
    def month(self) -> date:
        return self._month

    @property
    def month_label(self) -> str:
        return self._month.strftime("%B %Y")

    @property
    def range(self) -> DateRange:
        return self.current_range()

    def set_month(self, value: date) -> None:
        month = first_of_month(value)
        if month == self._month:
            return
        self._month = month
        self._schedule_range_load()

    def go_to_previous_month(self) -> None:
        self.set_month(shift_month(self._month, -1))

    def go_to_next_month(self) -> None:
        self.set_month(shift_month(self._month, 1))

    def go_to_current_month(self) -> None:
        self.set_month(date.today())

    # ----- derived views -----

    @property
    def budgets(self) -> tuple[Budget, ...]:
        return self._budgets.items

    @property
    def budgets_loaded(self) -> bool:
        return self._budgets_loaded

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self.data

    @property
    def transactions_loading(self) -> bool:
        return self.loading or self.refreshing

    @property
    def computed_budgets(self) -> list[BudgetProgressEntry]:
        return BudgetCalculator.compute_progress(self.budgets, self.transactions, self.range)

    def compute_stats(self, today: Optional[date] = None) -> BudgetStats:
        return BudgetCalculator.compute_stats(self.computed_budgets, self._month, today)

    @property
    def stats(self) -> BudgetStats:
        return self.compute_stats()

    @property
    def categories(self) -> list[str]:
        return sorted(b.category for b in self.budgets)

    @property
    def used_categories(self) -> set[str]:
        return {b.category for b in self.budgets}

    @property
    def category_options(self) -> list[str]:
        """Raw category codes seen in the month's transactions."""
        return sorted({t.category.primary or "OTHER" for t in self.transactions})

    # ----- mutations -----

    async def _reject(self, message: str, issues: list[ValidationIssue]) -> None:
        self.validation_error = message
        await self._log(AuditEventBuilder.validation_failed(
            "budget", [issue.model_dump() for issue in issues]
        ))

    async def add(self, category: str, amount: Any) -> Budget:
        """
        Create a budget optimistically.

        Returns:
            The server's budget

        Raises:
            BudgetValidationError: Rejected before any remote call
            GatewayError: The ledger refused; the temporary entry is gone
        """
        self.validation_error = None
        self.error = None

        validator = BudgetValidator(self.budgets)
        try:
            parsed = validator.raise_for_new(category, amount)
        except BudgetValidationError as e:
            await self._reject(str(e), e.issues)
            raise

        temp = Budget(id=f"temp-{uuid4().hex}", category=category, amount=parsed)
        try:
            return await self._budgets.create(
                temp,
                lambda: self._gateway.create_budget(temp.category, parsed),
            )
        except Exception as e:
            self.error = create_budget_message(e, category)
            raise

    async def update(self, budget_id: str, amount: Any) -> bool:
        """Change a budget's amount optimistically. Returns False on failure."""
        self.validation_error = None
        self.error = None

        result = BudgetValidator().validate_update(amount)
        if not result.is_valid:
            await self._reject(result.first_message, result.issues)
            return False
        parsed: Decimal = result.amount

        try:
            await self._budgets.update(
                budget_id,
                lambda budget: budget.model_copy(update={"amount": parsed}),
                lambda: self._gateway.update_budget(budget_id, amount=parsed),
            )
        except Exception as e:
            self.error = status_message(e, UPDATE_BUDGET_FAILED)
            return False
        return True

    async def remove(self, budget_id: str) -> bool:
        """Delete a budget optimistically. Returns False on failure."""
        self.error = None
        try:
            await self._budgets.delete(
                budget_id,
                lambda: self._gateway.delete_budget(budget_id),
            )
        except Exception as e:
            self.error = status_message(e, DELETE_BUDGET_FAILED)
            return False
        return True
