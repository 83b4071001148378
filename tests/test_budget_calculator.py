"""Tests for the budget aggregation engine."""

import pytest
from datetime import date
from decimal import Decimal

from finboard.domain.budget_calculator import BudgetCalculator
from finboard.models.ledger import Budget, BudgetProgressEntry, DateRange


JUNE = DateRange(start=date(2024, 6, 1), end=date(2024, 6, 30))


def entry(category, amount, spent):
    return BudgetProgressEntry(
        id=f"b-{category}",
        category=category,
        amount=Decimal(amount),
        spent=Decimal(spent),
        percentage=BudgetCalculator.calculate_percentage(Decimal(amount), Decimal(spent)),
    )


class TestCalculateSpent:
    """Tests for spent-per-category."""

    def test_sums_matching_category_in_range(self, make_transaction):
        """Test the basic groceries scenario."""
        transactions = [make_transaction(category="groceries", amount="150", day=date(2024, 6, 10))]
        spent = BudgetCalculator.calculate_spent(transactions, "groceries", JUNE.start, JUNE.end)
        assert spent == Decimal("150")

    def test_dual_raw_and_display_match(self, make_transaction):
        """Test raw-code and display-name matching both count."""
        transactions = [
            make_transaction(category="FOOD_AND_DRINK", amount="10"),
            make_transaction(category="food_and_drink", amount="5"),
            make_transaction(category="TRANSPORTATION", amount="99"),
        ]
        assert BudgetCalculator.calculate_spent(
            transactions, "Food And Drink", JUNE.start, JUNE.end
        ) == Decimal("15")

    def test_range_is_inclusive(self, make_transaction):
        """Test both range bounds are included."""
        transactions = [
            make_transaction(category="rent", amount="1", day=date(2024, 5, 31)),
            make_transaction(category="rent", amount="2", day=date(2024, 6, 1)),
            make_transaction(category="rent", amount="4", day=date(2024, 6, 30)),
            make_transaction(category="rent", amount="8", day=date(2024, 7, 1)),
        ]
        assert BudgetCalculator.calculate_spent(transactions, "rent", JUNE.start, JUNE.end) == Decimal("6")

    def test_signed_sum_includes_refunds(self, make_transaction):
        """Test that refunds (negative amounts) reduce spent."""
        transactions = [
            make_transaction(category="shopping", amount="50"),
            make_transaction(category="shopping", amount="-20"),
        ]
        assert BudgetCalculator.calculate_spent(transactions, "shopping", JUNE.start, JUNE.end) == Decimal("30")


class TestPercentageAndRemaining:
    """Tests for utilization math."""

    def test_scenario_percentage(self):
        """Test 150 of 200 is 75% and not over budget."""
        assert BudgetCalculator.calculate_percentage(Decimal("200"), Decimal("150")) == 75.0
        assert BudgetCalculator.is_over_budget(Decimal("200"), Decimal("150")) is False

    def test_zero_amount_guard(self):
        """Test that a zero budget never divides."""
        assert BudgetCalculator.calculate_percentage(Decimal("0"), Decimal("500")) == 0.0

    @pytest.mark.parametrize("amount,spent", [
        ("0", "0"), ("1", "0"), ("1", "1"), ("1", "1000000"),
        ("100", "80"), ("0.01", "5"), ("100", "-50"),
    ])
    def test_percentage_is_clamped(self, amount, spent):
        """Test percentage stays in [0, 100]."""
        result = BudgetCalculator.calculate_percentage(Decimal(amount), Decimal(spent))
        assert 0.0 <= result <= 100.0

    def test_remaining_never_negative(self):
        """Test remaining is floored at zero."""
        assert BudgetCalculator.calculate_remaining(Decimal("100"), Decimal("40")) == Decimal("60")
        assert BudgetCalculator.calculate_remaining(Decimal("100"), Decimal("140")) == Decimal("0")

    def test_over_budget_is_strict(self):
        """Test that spending exactly the budget is not over."""
        assert BudgetCalculator.is_over_budget(Decimal("100"), Decimal("100")) is False
        assert BudgetCalculator.is_over_budget(Decimal("100"), Decimal("100.01")) is True


class TestComputeProgress:
    """Tests for per-budget progress."""

    def test_progress_in_budget_order(self, make_transaction):
        """Test entries follow budget order and carry spent and percentage."""
        budgets = [
            Budget(id="b1", category="groceries", amount=Decimal("200")),
            Budget(id="b2", category="rent", amount=Decimal("1000")),
        ]
        transactions = [make_transaction(category="groceries", amount="150")]
        entries = BudgetCalculator.compute_progress(budgets, transactions, JUNE)
        assert [e.id for e in entries] == ["b1", "b2"]
        assert entries[0].spent == Decimal("150")
        assert entries[0].percentage == 75.0
        assert entries[1].spent == Decimal("0")


class TestComputeStats:
    """Tests for month-level statistics."""

    def test_totals_and_variance(self):
        """Test totals and a negative variance when overspent."""
        stats = BudgetCalculator.compute_stats(
            [entry("groceries", "200", "150"), entry("dining", "100", "180")],
            date(2024, 6, 1),
            today=date(2024, 6, 10),
        )
        assert stats.total_budgeted == Decimal("300")
        assert stats.total_spent == Decimal("330")
        assert stats.variance == Decimal("-30")
        assert stats.over_budget_count == 1
        assert stats.over_budget_categories == ["dining"]
        assert stats.active_budget_categories == ["groceries", "dining"]

    def test_near_limit_capped_at_three(self):
        """Test near-limit uses 80..100% inclusive and keeps the first three."""
        entries = [
            entry("a", "100", "80"),
            entry("b", "100", "79.99"),
            entry("c", "100", "100"),
            entry("d", "100", "90"),
            entry("e", "100", "95"),
            entry("f", "100", "101"),
        ]
        stats = BudgetCalculator.compute_stats(entries, date(2024, 6, 1), today=date(2024, 6, 10))
        assert stats.near_limit_categories == ["a", "c", "d"]

    def test_days_remaining_current_month(self):
        """Test days remaining in the current month."""
        stats = BudgetCalculator.compute_stats([], date(2024, 6, 1), today=date(2024, 6, 10))
        assert stats.total_days == 30
        assert stats.days_remaining == 20

    def test_days_remaining_past_and_future(self):
        """Test past months have none left and future months have all."""
        past = BudgetCalculator.compute_stats([], date(2024, 2, 1), today=date(2024, 6, 10))
        future = BudgetCalculator.compute_stats([], date(2024, 7, 1), today=date(2024, 6, 10))
        assert past.total_days == 29
        assert past.days_remaining == 0
        assert future.total_days == 31
        assert future.days_remaining == 31

    def test_empty_entries(self):
        """Test stats with no budgets."""
        stats = BudgetCalculator.compute_stats([], date(2024, 6, 1), today=date(2024, 6, 30))
        assert stats.total_budgeted == Decimal("0")
        assert stats.over_budget_count == 0
        assert stats.days_remaining == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
