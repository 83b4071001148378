"""Account-scoped reactive fetch controllers."""

from finboard.controllers.account_filter import AccountFilter
from finboard.controllers.balances import BalancesController
from finboard.controllers.base import FetchState, ReactiveFetchController
from finboard.controllers.budgets import BudgetsController
from finboard.controllers.messages import (
    ErrorKind,
    classify_error,
    sanitize_error_message,
)
from finboard.controllers.net_worth import NetWorthController
from finboard.controllers.transactions import TransactionsController

__all__ = [
    "AccountFilter",
    "BalancesController",
    "BudgetsController",
    "ErrorKind",
    "FetchState",
    "NetWorthController",
    "ReactiveFetchController",
    "TransactionsController",
    "classify_error",
    "sanitize_error_message",
]
