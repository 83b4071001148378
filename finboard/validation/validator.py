"""
Budget Input Validation

DESIGN DECISION: Budget input is checked on the client BEFORE any optimistic
change is applied. A rejected input never touches the cache and never reaches
the ledger.

Checks:
- Category is present
- Amount is a finite, non-negative number
- No existing budget has the same category (case-insensitive)

The ledger enforces uniqueness too (409). The client check exists so the
common case fails fast with a precise message.

IMPORTANT: Validation NEVER silently fixes input.
It reports every issue it finds.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field

from finboard.models.ledger import Budget


class ValidationIssue(BaseModel):
    """A single problem with budget input."""

    field: str
    issue_type: str = Field(
        ...,
        description="missing, invalid_value or duplicate"
    )
    message: str


class ValidationResult(BaseModel):
    """Outcome of validating one budget input."""

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    amount: Optional[Decimal] = Field(
        default=None,
        description="The amount as Decimal, when it could be parsed"
    )

    @property
    def first_message(self) -> Optional[str]:
        return self.issues[0].message if self.issues else None


class BudgetValidationError(ValueError):
    """Budget input was rejected before reaching the ledger."""

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.issues = issues or []


class DuplicateBudgetError(BudgetValidationError):
    """A budget for the category already exists."""

    def __init__(self, category: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(duplicate_budget_message(category), issues)
        self.category = category


def duplicate_budget_message(category: str) -> str:
    return f'A budget for "{category}" already exists.'


def parse_amount(value: Any) -> Optional[Decimal]:
    """Parse an amount into a finite Decimal, or None."""
    if isinstance(value, bool):
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not amount.is_finite():
        return None
    return amount


class BudgetValidator:
    """Validates budget input against the budgets currently in view."""

    def __init__(self, existing: Iterable[Budget] = ()):
        """
        Args:
            existing: Budgets to check for duplicate categories
        """
        self._existing = list(existing)

    def category_exists(self, category: str) -> bool:
        wanted = (category or "").strip().lower()
        return any((b.category or "").lower() == wanted for b in self._existing)

    def _validate_amount(self, amount: Any) -> tuple[Optional[Decimal], list[ValidationIssue]]:
        parsed = parse_amount(amount)
        if parsed is None:
            return None, [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be a number.",
            )]
        if parsed < 0:
            return parsed, [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount cannot be negative.",
            )]
        return parsed, []

    def validate_new(self, category: str, amount: Any) -> ValidationResult:
        """Validate input for a new budget."""
        issues = []

        if not (category or "").strip():
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required.",
            ))
        elif self.category_exists(category):
            issues.append(ValidationIssue(
                field="category",
                issue_type="duplicate",
                message=duplicate_budget_message(category),
            ))

        parsed, amount_issues = self._validate_amount(amount)
        issues.extend(amount_issues)

        return ValidationResult(is_valid=not issues, issues=issues, amount=parsed)

    def validate_update(self, amount: Any) -> ValidationResult:
        """Validate a new amount for an existing budget."""
        parsed, issues = self._validate_amount(amount)
        return ValidationResult(is_valid=not issues, issues=issues, amount=parsed)

    def raise_for_new(self, category: str, amount: Any) -> Decimal:
        """
        Validate a new budget, raising on the first problem.

        Returns:
            The parsed amount

        Raises:
            DuplicateBudgetError: If the category is already budgeted
            BudgetValidationError: For any other problem
        """
        result = self.validate_new(category, amount)
        if result.is_valid:
            return result.amount

        if any(issue.issue_type == "duplicate" for issue in result.issues):
            raise DuplicateBudgetError(category, result.issues)
        raise BudgetValidationError(result.first_message, result.issues)
