"""Pure domain logic: categories, budget math, filtering, chart math, date ranges."""

from finboard.domain.budget_calculator import BudgetCalculator
from finboard.domain.categories import (
    TAG_THEMES,
    CategoryKey,
    format_category_name,
    get_tag_theme_for_category,
)
from finboard.domain.chart_domain import (
    calculate_net_dot_indices,
    calculate_net_y_axis_domain,
)
from finboard.domain.date_ranges import (
    DateRangeKey,
    compute_date_range,
    month_range,
    shift_month,
)
from finboard.domain.transaction_filter import FilterCriteria, TransactionFilter

__all__ = [
    "BudgetCalculator",
    "CategoryKey",
    "DateRangeKey",
    "FilterCriteria",
    "TAG_THEMES",
    "TransactionFilter",
    "calculate_net_dot_indices",
    "calculate_net_y_axis_domain",
    "compute_date_range",
    "format_category_name",
    "get_tag_theme_for_category",
    "month_range",
    "shift_month",
]
