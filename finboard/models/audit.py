"""
Audit Models for finboard

Every fetch decision and every optimistic mutation is logged.
This provides:
1. Traceability of why a view refetched (or did not)
2. Debugging information for stale-data and rollback reports
3. A record of what the user changed and whether the ledger accepted it

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Fetch controllers and the mutation executor each have their own family.
    """
    # Fetch lifecycle
    FETCH_STARTED = "fetch_started"
    FETCH_SKIPPED = "fetch_skipped"
    FETCH_COMPLETED = "fetch_completed"
    FETCH_FAILED = "fetch_failed"
    FETCH_SUPERSEDED = "fetch_superseded"
    EMPTY_SELECTION = "empty_selection"

    # Account filter
    ACCOUNTS_LOADED = "accounts_loaded"
    ACCOUNT_FILTER_CHANGED = "account_filter_changed"

    # Optimistic mutations
    MUTATION_APPLIED = "mutation_applied"
    MUTATION_CONFIRMED = "mutation_confirmed"
    MUTATION_ROLLED_BACK = "mutation_rolled_back"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # System events
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'budget', 'transactions', 'balances')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one optimistic mutation)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.fetch_skipped("transactions", signature, "unchanged_signature")
        event = AuditEventBuilder.mutation_rolled_back("budget", "update", budget_id, str(exc), correlation_id)
    """

    @staticmethod
    def fetch_started(
        controller: str,
        signature: str,
        refreshing: bool,
        generation: int,
    ) -> AuditEvent:
        phase = "refresh" if refreshing else "first load"
        return AuditEvent(
            event_type=AuditEventType.FETCH_STARTED,
            severity=AuditSeverity.DEBUG,
            entity_type=controller,
            description=f"{controller}: {phase} started",
            details={
                "signature": signature,
                "refreshing": refreshing,
                "generation": generation,
            },
        )

    @staticmethod
    def fetch_skipped(
        controller: str,
        signature: str,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FETCH_SKIPPED,
            severity=AuditSeverity.DEBUG,
            entity_type=controller,
            description=f"{controller}: fetch skipped ({reason})",
            details={
                "signature": signature,
                "reason": reason,
            },
        )

    @staticmethod
    def fetch_completed(
        controller: str,
        signature: str,
        item_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FETCH_COMPLETED,
            entity_type=controller,
            description=f"{controller}: loaded {item_count} items",
            details={
                "signature": signature,
                "item_count": item_count,
            },
        )

    @staticmethod
    def fetch_failed(
        controller: str,
        signature: str,
        error_message: str,
        status: Optional[int] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FETCH_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=controller,
            description=f"{controller}: fetch failed",
            error_code=str(status) if status is not None else None,
            error_message=error_message,
            details={
                "signature": signature,
            },
        )

    @staticmethod
    def fetch_superseded(
        controller: str,
        generation: int,
        current_generation: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FETCH_SUPERSEDED,
            severity=AuditSeverity.DEBUG,
            entity_type=controller,
            description=f"{controller}: discarded response from superseded request",
            details={
                "generation": generation,
                "current_generation": current_generation,
            },
        )

    @staticmethod
    def empty_selection(
        controller: str,
        signature: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EMPTY_SELECTION,
            entity_type=controller,
            description=f"{controller}: no accounts selected, showing empty state",
            details={
                "signature": signature,
            },
        )

    @staticmethod
    def accounts_loaded(
        account_count: int,
        selected_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_LOADED,
            entity_type="accounts",
            description=f"Loaded {account_count} accounts ({selected_count} selected)",
            details={
                "account_count": account_count,
                "selected_count": selected_count,
            },
        )

    @staticmethod
    def account_filter_changed(
        selection_key: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_FILTER_CHANGED,
            entity_type="accounts",
            description="Account selection changed",
            details={
                "selection_key": selection_key,
            },
            is_user_action=True,
        )

    @staticmethod
    def mutation_applied(
        entity_type: str,
        operation: str,
        entity_id: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MUTATION_APPLIED,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Optimistic {operation} applied to {entity_type}",
            details={
                "operation": operation,
            },
            is_user_action=True,
        )

    @staticmethod
    def mutation_confirmed(
        entity_type: str,
        operation: str,
        entity_id: str,
        correlation_id: UUID,
        server_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MUTATION_CONFIRMED,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Ledger confirmed {operation} of {entity_type}",
            details={
                "operation": operation,
                "server_id": server_id,
            },
        )

    @staticmethod
    def mutation_rolled_back(
        entity_type: str,
        operation: str,
        entity_id: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MUTATION_ROLLED_BACK,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Rolled back optimistic {operation} of {entity_type}",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def validation_failed(
        entity_type: str,
        issues: list[dict],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            description=f"Validation failed with {len(issues)} issues",
            details={
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        status: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_code=str(status) if status is not None else None,
            error_message=error_message,
            details={
                "service": service,
            },
            correlation_id=correlation_id,
        )
