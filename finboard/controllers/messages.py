"""
User-facing error messages.

Controllers turn gateway failures into these strings; nothing else in the
package formats errors for people.
"""

import re
from enum import Enum
from typing import Optional

from finboard.services.gateway import AuthenticationError, NetworkError
from finboard.validation import duplicate_budget_message


NOT_AUTHENTICATED = "You are not authenticated. Please log in again."
CREATE_BUDGET_FAILED = "Failed to create budget."
UPDATE_BUDGET_FAILED = "Failed to update budget."
DELETE_BUDGET_FAILED = "Failed to delete budget."
LOAD_BUDGETS_FAILED = "Failed to load budgets."
LOAD_TRANSACTIONS_FAILED = "Failed to load transactions."
LOAD_BALANCES_FAILED = "Failed to load balances overview"
LOAD_NET_WORTH_FAILED = "Failed to load net worth"


def error_status(error: BaseException) -> Optional[int]:
    """HTTP status carried by an error, if any."""
    status = getattr(error, "status", None)
    return status if isinstance(status, int) and not isinstance(status, bool) else None


def status_message(error: BaseException, fallback: str) -> str:
    """401 gets the log-in-again message; everything else the fallback."""
    if error_status(error) == 401:
        return NOT_AUTHENTICATED
    return fallback


def create_budget_message(error: BaseException, category: str) -> str:
    status = error_status(error)
    if status == 409:
        return duplicate_budget_message(category)
    if status == 401:
        return NOT_AUTHENTICATED
    return CREATE_BUDGET_FAILED


def exception_message(error: BaseException, fallback: str) -> str:
    """The exception's own message, or the fallback when it has none."""
    return str(error) or fallback


class ErrorKind(str, Enum):
    """Coarse error classes for a top-level error display."""
    AUTH = "auth"
    NETWORK = "network"
    SERVER = "server"
    GENERIC = "generic"


_NETWORK_HINTS = ("Failed to fetch", "Network error", "DNS resolution")


def classify_error(error: BaseException) -> ErrorKind:
    """Classify an error for display. Has no effect on data state."""
    message = str(error)
    if isinstance(error, AuthenticationError) or "Authentication required" in message:
        return ErrorKind.AUTH

    if isinstance(error, NetworkError) or any(hint in message for hint in _NETWORK_HINTS):
        return ErrorKind.NETWORK

    status = error_status(error)
    if status is not None and status >= 500:
        return ErrorKind.SERVER

    return ErrorKind.GENERIC


_SENSITIVE_PATTERNS = (
    re.compile(r"password=\w+", re.IGNORECASE),
    re.compile(r"token=[\w-]+", re.IGNORECASE),
    re.compile(r"key=[\w-]+", re.IGNORECASE),
    re.compile(r"secret=\w+", re.IGNORECASE),
    re.compile(r"api_key=[\w-]+", re.IGNORECASE),
)


def sanitize_error_message(message: str) -> str:
    """Redact credential-looking fragments before showing a message."""
    for pattern in _SENSITIVE_PATTERNS:
        message = pattern.sub("[REDACTED]", message)
    return message
