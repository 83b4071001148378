"""
Ledger Gateway Package

Provides the abstract gateway interface, its exception hierarchy and the
httpx implementation. Designed to be swappable.
"""

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
from finboard.services.gateway.http_gateway import (
    HttpLedgerGateway,
    error_from_response,
)

__all__ = [
    # Interface
    "LedgerGatewayInterface",
    # Exceptions
    "AuthenticationError",
    "ConflictError",
    "ForbiddenError",
    "GatewayError",
    "NetworkError",
    "NotFoundError",
    "RequestValidationError",
    "ServerError",
    # HTTP implementation
    "HttpLedgerGateway",
    "error_from_response",
]
