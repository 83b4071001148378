"""
Data Models Package

This package contains all Pydantic models used in finboard.
All data flowing between the gateway and the controllers conforms to these schemas.
"""

from finboard.models.ledger import (
    Account,
    AccountFilterState,
    BalancesOverview,
    BalanceTotals,
    BankBalanceTotals,
    Budget,
    BudgetProgressEntry,
    BudgetRecord,
    BudgetStats,
    CategoryTagTheme,
    DateRange,
    NetWorthPoint,
    Transaction,
    TransactionCategory,
    TransactionRecord,
    calendar_day,
)
from finboard.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "Account",
    "AccountFilterState",
    "BalancesOverview",
    "BalanceTotals",
    "BankBalanceTotals",
    "Budget",
    "BudgetProgressEntry",
    "BudgetRecord",
    "BudgetStats",
    "CategoryTagTheme",
    "DateRange",
    "NetWorthPoint",
    "Transaction",
    "TransactionCategory",
    "TransactionRecord",
    "calendar_day",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
