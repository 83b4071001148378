"""
Abstract Ledger Gateway Interface

DESIGN DECISION: We define an abstract interface for the ledger API.
This allows us to:
1. Swap the HTTP implementation for another transport
2. Use in-memory fakes for testing
3. Keep the controllers decoupled from request details

The interface is intentionally small - only what the dashboard reads
and the three budget mutations it performs.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional

from finboard.models.ledger import (
    Account,
    BalancesOverview,
    Budget,
    NetWorthPoint,
    Transaction,
)


class LedgerGatewayInterface(ABC):
    """
    Abstract interface for ledger and budget operations.

    Any gateway implementation must implement these methods.
    Failures are raised as GatewayError subclasses.
    """

    @abstractmethod
    async def get_accounts(self) -> list[Account]:
        """
        List the user's linked accounts.

        Returns:
            All accounts, in server order
        """
        pass

    @abstractmethod
    async def get_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_ids: Optional[list[str]] = None,
    ) -> list[Transaction]:
        """
        List transactions with optional filters.

        Args:
            start_date: Only transactions on or after this day
            end_date: Only transactions on or before this day
            account_ids: Restrict to these accounts; None means all

        Returns:
            Transactions transformed to the client shape
        """
        pass

    @abstractmethod
    async def get_budgets(self) -> list[Budget]:
        """
        List all budgets.

        Returns:
            Budgets with amounts coerced to Decimal
        """
        pass

    @abstractmethod
    async def create_budget(self, category: str, amount: Decimal) -> Budget:
        """
        Create a budget.

        Returns:
            The server-assigned budget (new id)

        Raises:
            ConflictError: If a budget for the category already exists
        """
        pass

    @abstractmethod
    async def update_budget(
        self,
        budget_id: str,
        amount: Optional[Decimal] = None,
        category: Optional[str] = None,
    ) -> Budget:
        """
        Update an existing budget.

        Raises:
            NotFoundError: If the budget doesn't exist
        """
        pass

    @abstractmethod
    async def delete_budget(self, budget_id: str) -> None:
        """
        Delete a budget by ID.
        """
        pass

    @abstractmethod
    async def get_balances_overview(
        self,
        account_ids: Optional[list[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> BalancesOverview:
        """
        Get the latest balances snapshot.

        The date range is accepted for forward compatibility only;
        the server always returns the latest snapshot.
        """
        pass

    @abstractmethod
    async def get_net_worth_over_time(
        self,
        start_date: date,
        end_date: date,
        account_ids: Optional[list[str]] = None,
    ) -> list[NetWorthPoint]:
        """
        Get the daily net worth series for a range.
        """
        pass


class GatewayError(Exception):
    """Base exception for gateway operations."""

    default_status: int = 0

    def __init__(self, message: str = "Request failed", status: Optional[int] = None):
        self.status = self.default_status if status is None else status
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class AuthenticationError(GatewayError):
    """Not authenticated (401)."""
    default_status = 401

    def __init__(self, message: str = "Authentication required", status: Optional[int] = None):
        super().__init__(message, status)


class ForbiddenError(GatewayError):
    """Access forbidden (403)."""
    default_status = 403


class NotFoundError(GatewayError):
    """Entity not found (404)."""
    default_status = 404


class ConflictError(GatewayError):
    """Attempted to create a duplicate entity (409)."""
    default_status = 409


class RequestValidationError(GatewayError):
    """The server rejected the request payload (400/422)."""
    default_status = 400


class ServerError(GatewayError):
    """The server failed to handle the request (5xx)."""
    default_status = 500


class NetworkError(GatewayError):
    """The request never got an HTTP answer."""
    default_status = 0

    def __init__(self, message: str = "Network connection failed", status: Optional[int] = None):
        super().__init__(message, status)
