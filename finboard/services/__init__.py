"""Services package."""

from finboard.services.gateway import (
    AuthenticationError,
    ConflictError,
    ForbiddenError,
    GatewayError,
    HttpLedgerGateway,
    LedgerGatewayInterface,
    NetworkError,
    NotFoundError,
    RequestValidationError,
    ServerError,
)

__all__ = [
    # Gateway
    "HttpLedgerGateway",
    "LedgerGatewayInterface",
    # Gateway errors
    "AuthenticationError",
    "ConflictError",
    "ForbiddenError",
    "GatewayError",
    "NetworkError",
    "NotFoundError",
    "RequestValidationError",
    "ServerError",
]
