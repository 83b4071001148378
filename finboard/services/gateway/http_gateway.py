"""
HTTP Ledger Gateway

DESIGN DECISION: The ledger API is plain JSON over HTTP, so we talk to it
with a single shared httpx.AsyncClient.

This gateway handles:
1. Bearer authentication
2. Mapping HTTP failures onto the GatewayError hierarchy
3. Retrying transient failures (network errors, 429/502/503/504) on
   idempotent methods; a POST is sent exactly once
4. Converting wire records into client models

Budget amounts are sent as strings on the wire; responses may carry
amounts as strings or numbers and are always coerced to Decimal.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from finboard.config import GatewaySettings, get_settings
from finboard.models.ledger import (
    Account,
    BalancesOverview,
    Budget,
    BudgetRecord,
    NetWorthPoint,
    Transaction,
    TransactionRecord,
)
from finboard.services.gateway.interface import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    GatewayError,
    LedgerGatewayInterface,
    NetworkError,
    NotFoundError,
    RequestValidationError,
    ServerError,
)


RETRYABLE_STATUSES = frozenset({429, 502, 503, 504})
IDEMPOTENT_METHODS = frozenset({"GET", "PUT", "DELETE"})


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, NetworkError):
        return True
    return isinstance(exc, GatewayError) and exc.status in RETRYABLE_STATUSES


def _extract_error_message(response: httpx.Response) -> str:
    """Pull a readable message out of an error response."""
    try:
        payload = response.json()
    except ValueError:
        text = response.text.strip()
        if text and len(text) < 500:
            return text
        return f"{response.status_code} {response.reason_phrase or 'Error'}"

    if isinstance(payload, str) and payload:
        return payload
    if isinstance(payload, dict):
        for key in ("message", "error", "detail", "msg"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return f"{response.status_code} {response.reason_phrase or 'Error'}"


def error_from_response(response: httpx.Response) -> GatewayError:
    """Map a failed response onto the gateway exception hierarchy."""
    status = response.status_code
    message = _extract_error_message(response)

    if status == 401:
        return AuthenticationError(message)
    if status == 403:
        return ForbiddenError(message)
    if status == 404:
        return NotFoundError(message)
    if status == 409:
        return ConflictError(message)
    if status in (400, 422):
        return RequestValidationError(message, status=status)
    if status >= 500:
        return ServerError(message, status=status)
    return GatewayError(message, status=status)


def _account_params(account_ids: Optional[list[str]]) -> list[tuple[str, str]]:
    return [("account_ids[]", account_id) for account_id in account_ids or []]


def _date_params(
    start_date: Optional[date],
    end_date: Optional[date],
) -> list[tuple[str, str]]:
    params = []
    if start_date:
        params.append(("start_date", start_date.isoformat()))
    if end_date:
        params.append(("end_date", end_date.isoformat()))
    return params


class HttpLedgerGateway(LedgerGatewayInterface):
    """
    httpx implementation of the ledger gateway.

    One AsyncClient is created lazily and reused; call aclose() on shutdown.
    """

    def __init__(
        self,
        settings: Optional[GatewaySettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._settings = settings or get_settings().gateway
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Content-Type": "application/json"}
            if self._settings.api_token:
                headers["Authorization"] = f"Bearer {self._settings.api_token}"
            self._client = httpx.AsyncClient(
                base_url=self._settings.base_url,
                headers=headers,
                timeout=self._settings.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        params: Optional[list[tuple[str, str]]] = None,
        json: Optional[dict] = None,
    ) -> Any:
        client = self._get_client()
        try:
            response = await client.request(method, path, params=params or None, json=json)
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request timeout: {e}")
        except httpx.TransportError as e:
            raise NetworkError(f"Network error: {e}")

        if response.status_code >= 400:
            raise error_from_response(response)

        if not response.content:
            return None
        return response.json()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[list[tuple[str, str]]] = None,
        json: Optional[dict] = None,
    ) -> Any:
        """
        Send a request, retrying transient failures with exponential backoff.

        Only idempotent methods are retried; a POST is sent exactly once.
        """
        attempts = self._settings.max_retries if method in IDEMPOTENT_METHODS else 1
        retrying = AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(
                multiplier=self._settings.retry_min_wait_seconds,
                min=self._settings.retry_min_wait_seconds,
                max=self._settings.retry_max_wait_seconds,
            ),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                payload = await self._send(method, path, params=params, json=json)
        return payload

    async def get_accounts(self) -> list[Account]:
        payload = await self._request("GET", "/accounts")
        if not isinstance(payload, list):
            return []
        return [Account.model_validate(item) for item in payload]

    async def get_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_ids: Optional[list[str]] = None,
    ) -> list[Transaction]:
        params = _date_params(start_date, end_date) + _account_params(account_ids)
        payload = await self._request("GET", "/transactions", params=params)
        if not isinstance(payload, list):
            return []
        return [TransactionRecord.model_validate(item).to_transaction() for item in payload]

    async def get_budgets(self) -> list[Budget]:
        payload = await self._request("GET", "/budgets")
        if not isinstance(payload, list):
            return []
        return [BudgetRecord.model_validate(item).to_budget() for item in payload]

    async def create_budget(self, category: str, amount: Decimal) -> Budget:
        payload = await self._request(
            "POST",
            "/budgets",
            json={"category": category, "amount": str(amount)},
        )
        return BudgetRecord.model_validate(payload).to_budget(fallback_amount=amount)

    async def update_budget(
        self,
        budget_id: str,
        amount: Optional[Decimal] = None,
        category: Optional[str] = None,
    ) -> Budget:
        body: dict[str, str] = {}
        if category:
            body["category"] = category
        if amount is not None:
            body["amount"] = str(amount)
        payload = await self._request("PUT", f"/budgets/{budget_id}", json=body)
        return BudgetRecord.model_validate(payload).to_budget(fallback_amount=amount)

    async def delete_budget(self, budget_id: str) -> None:
        await self._request("DELETE", f"/budgets/{budget_id}")

    async def get_balances_overview(
        self,
        account_ids: Optional[list[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> BalancesOverview:
        params = _account_params(account_ids) + _date_params(start_date, end_date)
        payload = await self._request("GET", "/analytics/balances-overview", params=params)
        return BalancesOverview.model_validate(payload)

    async def get_net_worth_over_time(
        self,
        start_date: date,
        end_date: date,
        account_ids: Optional[list[str]] = None,
    ) -> list[NetWorthPoint]:
        params = _date_params(start_date, end_date) + _account_params(account_ids)
        payload = await self._request("GET", "/analytics/net-worth-over-time", params=params)
        if not isinstance(payload, list):
            return []
        return [
            NetWorthPoint.model_validate(point if isinstance(point, dict) else {})
            for point in payload
        ]
