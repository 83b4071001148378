"""
Tests for finboard

Test strategy:
1. Unit tests for individual components (models, calculators, filters)
2. Controller tests against an in-memory gateway
3. No real API calls in tests (httpx.MockTransport for the HTTP gateway)
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

from finboard.models.ledger import (
    Account,
    AccountFilterState,
    BalancesOverview,
    Budget,
    BudgetRecord,
    DateRange,
    NetWorthPoint,
    Transaction,
    TransactionRecord,
    calendar_day,
)
from finboard.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestLedgerModels:
    """Tests for ledger Pydantic models."""

    def test_transaction_creation(self):
        """Test Transaction model creation with defaults."""
        txn = Transaction(id="t1", date=date(2024, 6, 1), amount=Decimal("12.50"))
        assert txn.name == "Unknown"
        assert txn.category.primary == "OTHER"
        assert txn.amount == Decimal("12.50")

    def test_transaction_truncates_timestamp_to_day(self):
        """Test that timestamps are truncated once, in UTC."""
        txn = Transaction(id="t1", date="2024-06-01T23:30:00-02:00", amount="1")
        assert txn.date == date(2024, 6, 2)

    def test_transaction_is_immutable(self):
        """Test that fetched transactions cannot be modified."""
        txn = Transaction(id="t1", date=date(2024, 6, 1), amount=Decimal("1"))
        with pytest.raises(ValueError):
            txn.amount = Decimal("2")

    def test_calendar_day_accepts_dates_and_strings(self):
        """Test calendar_day on the formats the ledger sends."""
        assert calendar_day("2024-06-01") == date(2024, 6, 1)
        assert calendar_day("2024-06-01T10:00:00Z") == date(2024, 6, 1)
        assert calendar_day(datetime(2024, 6, 1, 1, 0, tzinfo=timezone.utc)) == date(2024, 6, 1)
        with pytest.raises(ValueError):
            calendar_day(20240601)

    def test_budget_rejects_negative_amount(self):
        """Test that negative budget amounts are rejected."""
        with pytest.raises(ValueError):
            Budget(id="b1", category="groceries", amount=Decimal("-1"))

    def test_budget_rejects_empty_category(self):
        """Test that a category is required."""
        with pytest.raises(ValueError):
            Budget(id="b1", category="   ", amount=Decimal("10"))

    def test_date_range_order_validation(self):
        """Test that range end cannot be before start."""
        with pytest.raises(ValueError, match="Range end cannot be before start"):
            DateRange(start=date(2024, 6, 2), end=date(2024, 6, 1))

    def test_date_range_is_inclusive(self):
        """Test DateRange.contains on both bounds."""
        rng = DateRange(start=date(2024, 6, 1), end=date(2024, 6, 30))
        assert rng.contains(date(2024, 6, 1))
        assert rng.contains(date(2024, 6, 30))
        assert not rng.contains(date(2024, 7, 1))
        assert rng.key == "2024-06-01:2024-06-30"

    def test_account_defaults_institution(self):
        """Test that a missing institution falls back to Unknown Bank."""
        account = Account(id=7, name="Card", institution_name=None)
        assert account.id == "7"
        assert account.institution_name == "Unknown Bank"

    def test_net_worth_point_coerces_bad_values(self):
        """Test that unparseable net worth values become zero."""
        assert NetWorthPoint(date="2024-06-01", value="abc").value == 0.0
        assert NetWorthPoint(date="2024-06-01", value=None).value == 0.0
        assert NetWorthPoint(date="2024-06-01", value="1500.5").value == 1500.5
        assert NetWorthPoint(date=None, value=1).date == ""

    def test_balances_overview_reads_camel_case(self):
        """Test that camelCase wire keys are accepted."""
        overview = BalancesOverview.model_validate({
            "asOf": "2024-06-30",
            "overall": {"cash": "100", "positivesTotal": "100", "negativesTotal": "-20", "net": "80"},
            "banks": [{"bankId": "b1", "bankName": "First Bank", "net": "80"}],
            "mixedCurrency": False,
        })
        assert overview.as_of == "2024-06-30"
        assert overview.overall.negatives_total == Decimal("-20")
        assert overview.banks[0].bank_name == "First Bank"
        assert overview.overall.ratio is None


class TestWireRecords:
    """Tests for the shapes the ledger API sends."""

    def test_transaction_record_defaults(self):
        """Test missing merchant and category defaults."""
        record = TransactionRecord.model_validate({
            "id": 42,
            "date": "2024-06-03",
            "amount": "19.99",
            "account_name": "Checking",
            "account_type": "depository",
        })
        txn = record.to_transaction()
        assert txn.id == "42"
        assert txn.name == "Unknown"
        assert txn.merchant is None
        assert txn.category.primary == "OTHER"
        assert txn.amount == Decimal("19.99")

    def test_transaction_record_maps_category_fields(self):
        """Test that category_* fields land in the category."""
        txn = TransactionRecord.model_validate({
            "id": "t1",
            "date": "2024-06-03T12:00:00Z",
            "merchant_name": "Blue Bottle",
            "amount": 4.5,
            "category_primary": "FOOD_AND_DRINK",
            "category_detailed": "FOOD_AND_DRINK_COFFEE",
            "category_confidence": "HIGH",
        }).to_transaction()
        assert txn.name == "Blue Bottle"
        assert txn.merchant == "Blue Bottle"
        assert txn.category.detailed == "FOOD_AND_DRINK_COFFEE"
        assert txn.category.confidence_level == "HIGH"
        assert txn.date == date(2024, 6, 3)

    def test_budget_record_coerces_string_amount(self):
        """Test that string amounts are coerced to Decimal."""
        budget = BudgetRecord.model_validate({"id": 1, "category": "groceries", "amount": "200.00"}).to_budget()
        assert budget.id == "1"
        assert budget.amount == Decimal("200.00")

    def test_budget_record_falls_back_to_sent_amount(self):
        """Test that a response without an amount keeps the requested one."""
        budget = BudgetRecord.model_validate({"id": "b1", "category": "rent"}).to_budget(Decimal("900"))
        assert budget.amount == Decimal("900")


class TestAccountFilterState:
    """Tests for derived account selection state."""

    def test_all_selected(self):
        """Test that selecting every account means no filter."""
        state = AccountFilterState(
            selected_account_ids=frozenset({"a1", "a2"}),
            all_account_ids=("a1", "a2"),
        )
        assert state.is_all_accounts_selected is True
        assert state.selection_key == "all"
        assert state.account_ids_param is None

    def test_partial_selection_key_is_sorted(self):
        """Test the normalized key for a partial selection."""
        state = AccountFilterState(
            selected_account_ids=frozenset({"a3", "a1"}),
            all_account_ids=("a1", "a2", "a3"),
        )
        assert state.is_all_accounts_selected is False
        assert state.selection_key == "a1,a3"
        assert state.account_ids_param == ["a1", "a3"]

    def test_empty_selection(self):
        """Test that an empty selection over a known universe is 'none'."""
        state = AccountFilterState(
            selected_account_ids=frozenset(),
            all_account_ids=("a1", "a2", "a3"),
        )
        assert state.is_empty_selection is True
        assert state.selection_key == "none"

    def test_empty_universe_is_not_empty_selection(self):
        """Test that no accounts at all is not an empty selection."""
        state = AccountFilterState()
        assert state.is_empty_selection is False
        assert state.is_all_accounts_selected is False
        assert state.selection_key == "all"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.FETCH_COMPLETED,
            description="transactions: loaded 3 items",
        )
        assert event.event_type == AuditEventType.FETCH_COMPLETED
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo == timezone.utc
        assert event.to_log_dict()["timestamp"].endswith("+00:00")

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.MUTATION_CONFIRMED,
            description="Ledger confirmed create of budget",
            details={"operation": "create"},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "mutation_confirmed"
        assert log_dict["details"]["operation"] == "create"

    def test_audit_event_builder_mutation_rolled_back(self):
        """Test AuditEventBuilder.mutation_rolled_back."""
        correlation_id = uuid4()

        event = AuditEventBuilder.mutation_rolled_back(
            entity_type="budget",
            operation="update",
            entity_id="b1",
            error_message="Internal error",
            correlation_id=correlation_id,
        )

        assert event.event_type == AuditEventType.MUTATION_ROLLED_BACK
        assert event.severity == AuditSeverity.WARNING
        assert event.entity_id == "b1"
        assert event.correlation_id == correlation_id
        assert event.error_message == "Internal error"

    def test_audit_event_builder_fetch_failed(self):
        """Test AuditEventBuilder.fetch_failed keeps the status."""
        event = AuditEventBuilder.fetch_failed(
            controller="balances",
            signature=":2024-06-30:all",
            error_message="Bad gateway",
            status=502,
        )
        assert event.event_type == AuditEventType.FETCH_FAILED
        assert event.error_code == "502"
        assert event.details["signature"] == ":2024-06-30:all"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
