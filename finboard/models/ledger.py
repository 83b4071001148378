"""
Core Data Models for finboard

These models define the schemas for everything that flows between the
ledger gateway, the aggregation engine and the controllers.
They are designed to:
1. Enforce type safety at runtime
2. Normalize wire quirks (string amounts, missing categories) in one place
3. Be immutable once fetched, so snapshots can be compared by value

DESIGN DECISION: Money is Decimal everywhere. Only chart series use float,
because they feed axis math rather than accounting.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# Alias so models with a field called "date" can still name the type.
CalendarDate = date


def calendar_day(value: Any) -> date:
    """
    Truncate a date-like value to its calendar day.

    Aware datetimes are converted to UTC first; naive ones are taken as-is.
    This is the only truncation applied anywhere in the package.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return date.fromisoformat(text)
        return calendar_day(datetime.fromisoformat(text.replace("Z", "+00:00")))
    raise ValueError(f"Not a calendar date: {value!r}")


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionCategory(BaseModel):
    """Category as classified upstream."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    primary: str = Field(
        default="OTHER",
        description="Raw category code, e.g. FOOD_AND_DRINK"
    )
    detailed: Optional[str] = None
    confidence_level: Optional[str] = None


class Transaction(BaseModel):
    """
    A single ledger transaction.

    Sign convention: positive amount = outflow (expense).
    Immutable once fetched; lists of these are replaced wholesale.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str
    date: CalendarDate = Field(
        ...,
        description="Calendar day of the transaction"
    )
    name: str = Field(
        default="Unknown",
        description="Display name (merchant name or 'Unknown')"
    )
    merchant: Optional[str] = None
    amount: Decimal
    category: TransactionCategory = Field(default_factory=TransactionCategory)
    account_name: str = ""
    account_type: str = ""
    account_mask: Optional[str] = None
    running_balance: Optional[Decimal] = None

    @field_validator('date', mode='before')
    @classmethod
    def truncate_to_day(cls, v: Any) -> CalendarDate:
        return calendar_day(v)


# =============================================================================
# BUDGETS
# =============================================================================

class Budget(BaseModel):
    """
    A planned spending amount for one category.

    Unique per category (case-insensitive). Optimistic entries carry a
    temporary id until the server answers.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str
    category: str = Field(
        ...,
        min_length=1,
        description="Raw category code"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Planned amount"
    )


class BudgetProgressEntry(Budget):
    """A budget with its derived progress for the active month."""

    spent: Decimal = Field(
        default=Decimal("0"),
        description="Signed sum of matching transactions"
    )
    percentage: float = Field(
        default=0.0,
        ge=0.0,
        le=100.0,
        description="Clamped utilization"
    )


class BudgetStats(BaseModel):
    """Month-level statistics across all budget entries."""

    total_budgeted: Decimal = Decimal("0")
    total_spent: Decimal = Decimal("0")
    variance: Decimal = Field(
        default=Decimal("0"),
        description="total_budgeted - total_spent; negative when overspent"
    )
    over_budget_count: int = 0
    over_budget_categories: list[str] = Field(default_factory=list)
    active_budget_categories: list[str] = Field(default_factory=list)
    near_limit_categories: list[str] = Field(
        default_factory=list,
        max_length=3,
    )
    total_days: int = Field(ge=28, le=31)
    days_remaining: int = Field(ge=0, le=31)


# =============================================================================
# RANGES & FILTERS
# =============================================================================

class DateRange(BaseModel):
    """Inclusive calendar-day range."""
    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @model_validator(mode='after')
    def validate_order(self) -> 'DateRange':
        if self.end < self.start:
            raise ValueError("Range end cannot be before start")
        return self

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def key(self) -> str:
        """ISO start and end joined by a colon, as used in fetch signatures."""
        return f"{self.start.isoformat()}:{self.end.isoformat()}"


class Account(BaseModel):
    """A linked bank account as seen by the account filter."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str = "Account"
    account_type: str = "other"
    balance_current: Optional[Decimal] = None
    mask: Optional[str] = None
    institution_name: str = "Unknown Bank"

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        return str(v)

    @field_validator('institution_name', mode='before')
    @classmethod
    def default_institution(cls, v: Any) -> str:
        return v or "Unknown Bank"


class AccountFilterState(BaseModel):
    """
    Which accounts the user wants to see.

    CRITICAL: when the universe is non-empty and nothing is selected, every
    dependent view shows an explicit empty state. It never falls back to an
    unfiltered fetch.
    """
    model_config = ConfigDict(frozen=True)

    selected_account_ids: frozenset[str] = Field(default_factory=frozenset)
    all_account_ids: tuple[str, ...] = ()

    @property
    def is_all_accounts_selected(self) -> bool:
        return bool(self.all_account_ids) and self.selected_account_ids.issuperset(
            self.all_account_ids
        )

    @property
    def is_empty_selection(self) -> bool:
        return bool(self.all_account_ids) and not self.selected_account_ids

    @property
    def should_filter(self) -> bool:
        return bool(self.selected_account_ids) and not self.is_all_accounts_selected

    @property
    def selection_key(self) -> str:
        """Normalized selection used in fetch signatures."""
        if self.is_empty_selection:
            return "none"
        if self.should_filter:
            return ",".join(sorted(self.selected_account_ids))
        return "all"

    @property
    def account_ids_param(self) -> Optional[list[str]]:
        """Account ids to send to the server, or None for no filter."""
        if self.should_filter:
            return sorted(self.selected_account_ids)
        return None


# =============================================================================
# ANALYTICS
# =============================================================================

class CategoryTagTheme(BaseModel):
    """Stable color theme for a category tag."""
    model_config = ConfigDict(frozen=True)

    key: str
    ring: str
    ring_hex: str


class NetWorthPoint(BaseModel):
    """One point of the net worth series."""
    model_config = ConfigDict(frozen=True)

    date: str = ""
    value: float = 0.0

    @field_validator('date', mode='before')
    @classmethod
    def default_date(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator('value', mode='before')
    @classmethod
    def coerce_value(cls, v: Any) -> float:
        """Unparseable values count as zero."""
        try:
            number = float(v)
        except (TypeError, ValueError):
            return 0.0
        return 0.0 if number != number else number


class BalanceTotals(BaseModel):
    """Balance totals for one scope (overall or one bank)."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    cash: Decimal = Decimal("0")
    credit: Decimal = Field(
        default=Decimal("0"),
        description="Negative when money is owed"
    )
    loan: Decimal = Field(
        default=Decimal("0"),
        description="Negative when money is owed"
    )
    investments: Decimal = Decimal("0")
    positives_total: Decimal = Decimal("0")
    negatives_total: Decimal = Decimal("0")
    net: Decimal = Decimal("0")
    ratio: Optional[float] = None


class BankBalanceTotals(BalanceTotals):
    """Balance totals for a single bank."""

    bank_id: str
    bank_name: str


class BalancesOverview(BaseModel):
    """
    Latest-only balances snapshot.

    The gateway accepts a date range for forward compatibility,
    but the server always answers with the latest snapshot.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    as_of: str
    overall: BalanceTotals
    banks: list[BankBalanceTotals] = Field(default_factory=list)
    mixed_currency: bool = False


# =============================================================================
# WIRE RECORDS - shapes as the ledger API sends them
# =============================================================================

class TransactionRecord(BaseModel):
    """Transaction as returned by GET /transactions."""
    model_config = ConfigDict(extra="ignore")

    id: str
    date: str
    merchant_name: Optional[str] = None
    amount: Decimal
    category_primary: Optional[str] = None
    category_detailed: Optional[str] = None
    category_confidence: Optional[str] = None
    account_name: str = ""
    account_type: str = ""
    account_mask: Optional[str] = None
    running_balance: Optional[Decimal] = None

    @field_validator('id', 'date', mode='before')
    @classmethod
    def coerce_str(cls, v: Any) -> str:
        return str(v)

    def to_transaction(self) -> Transaction:
        """Transform 1:1 into the client Transaction shape."""
        return Transaction(
            id=self.id,
            date=self.date,
            name=self.merchant_name or "Unknown",
            merchant=self.merchant_name,
            amount=self.amount,
            category=TransactionCategory(
                primary=self.category_primary or "OTHER",
                detailed=self.category_detailed or None,
                confidence_level=self.category_confidence or None,
            ),
            account_name=self.account_name,
            account_type=self.account_type,
            account_mask=self.account_mask,
            running_balance=self.running_balance,
        )


class BudgetRecord(BaseModel):
    """Budget as returned by the /budgets endpoints (amount may be a string)."""
    model_config = ConfigDict(extra="ignore")

    id: str
    category: str
    amount: Optional[Decimal] = None

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v: Any) -> str:
        return str(v)

    def to_budget(self, fallback_amount: Optional[Decimal] = None) -> Budget:
        amount = self.amount
        if amount is None:
            amount = fallback_amount if fallback_amount is not None else Decimal("0")
        return Budget(id=self.id, category=self.category, amount=amount)
