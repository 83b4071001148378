"""Tests for chart axis padding and dot downsampling."""

import math

from finboard.domain.chart_domain import (
    MIN_AXIS_PADDING,
    calculate_net_dot_indices,
    calculate_net_y_axis_domain,
)
from finboard.models.ledger import NetWorthPoint


def series(values):
    return [NetWorthPoint(date=f"2024-01-{i + 1:02d}", value=v) for i, v in enumerate(values)]


class TestYAxisDomain:
    """Tests for the padded y-axis domain."""

    def test_empty_series(self):
        """Test that no data gives no domain."""
        assert calculate_net_y_axis_domain([]) is None

    def test_flat_series_uses_minimum_padding(self):
        """Test a flat series gets at least the minimum padding."""
        assert calculate_net_y_axis_domain(series([1000, 1000])) == (500.0, 1500.0)

    def test_flat_large_series_uses_ratio(self):
        """Test 10% padding once it exceeds the minimum."""
        low, high = calculate_net_y_axis_domain(series([100000]))
        assert math.isclose(low, 90000.0)
        assert math.isclose(high, 110000.0)

    def test_span_padding(self):
        """Test 8% of span padding for a wide series."""
        low, high = calculate_net_y_axis_domain(series([0, 100000]))
        assert math.isclose(low, -8000.0)
        assert math.isclose(high, 108000.0)

    def test_narrow_span_uses_minimum(self):
        """Test a narrow span is padded by the minimum."""
        low, high = calculate_net_y_axis_domain(series([100, 200]))
        assert low == 100 - MIN_AXIS_PADDING
        assert high == 200 + MIN_AXIS_PADDING

    def test_non_finite_values_ignored(self):
        """Test infinities are skipped."""
        assert calculate_net_y_axis_domain(series([math.inf, -math.inf])) is None
        low, high = calculate_net_y_axis_domain(series([math.inf, 1000, 1000]))
        assert (low, high) == (500.0, 1500.0)


class TestDotIndices:
    """Tests for change-point marker selection."""

    def test_only_change_points(self):
        """Test that unchanged points are not marked."""
        assert calculate_net_dot_indices(series([1, 1, 2, 2, 3])) == {2, 4}

    def test_flat_series_has_no_dots(self):
        """Test a flat series."""
        assert calculate_net_dot_indices(series([5, 5, 5])) == set()
        assert calculate_net_dot_indices([]) == set()

    def test_downsampled_to_max_with_last(self):
        """Test 100 change-points are reduced to at most 30, keeping the last."""
        values = list(range(101))
        indices = calculate_net_dot_indices(series(values), max_dots=30)
        assert 0 < len(indices) <= 30
        assert 100 in indices
        assert all(1 <= i <= 100 for i in indices)

    def test_under_limit_keeps_all(self):
        """Test that a short series keeps every change-point."""
        indices = calculate_net_dot_indices(series(list(range(10))), max_dots=30)
        assert indices == set(range(1, 10))

    def test_single_dot_is_last_change(self):
        """Test max_dots of one keeps only the last change-point."""
        assert calculate_net_dot_indices(series([1, 2, 3, 4]), max_dots=1) == {3}
