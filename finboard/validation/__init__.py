"""Budget input validation."""

from finboard.validation.validator import (
    BudgetValidationError,
    BudgetValidator,
    DuplicateBudgetError,
    ValidationIssue,
    ValidationResult,
    duplicate_budget_message,
    parse_amount,
)

__all__ = [
    "BudgetValidationError",
    "BudgetValidator",
    "DuplicateBudgetError",
    "ValidationIssue",
    "ValidationResult",
    "duplicate_budget_message",
    "parse_amount",
]
