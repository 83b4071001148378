"""
Chart Domain / Downsampling Calculator

Axis padding and marker selection for the net worth chart.
Non-finite values are ignored everywhere.
"""

import math
from typing import Optional, Sequence

from finboard.models.ledger import NetWorthPoint


MIN_AXIS_PADDING = 500.0
FLAT_SERIES_PADDING_RATIO = 0.1
SPAN_PADDING_RATIO = 0.08
DEFAULT_MAX_DOTS = 30


def calculate_net_y_axis_domain(
    series: Sequence[NetWorthPoint],
) -> Optional[tuple[float, float]]:
    """
    Compute a padded (low, high) y-axis domain.

    Returns None for an empty series or one with no finite values.
    The returned domain always has high > low, even for a flat series.
    """
    values = [p.value for p in series if math.isfinite(p.value)]
    if not values:
        return None

    low = min(values)
    high = max(values)

    if low == high:
        padding = max(abs(high) * FLAT_SERIES_PADDING_RATIO, MIN_AXIS_PADDING)
        return (high - padding, high + padding)

    padding = max((high - low) * SPAN_PADDING_RATIO, MIN_AXIS_PADDING)
    return (low - padding, high + padding)


def calculate_net_dot_indices(
    series: Sequence[NetWorthPoint],
    max_dots: int = DEFAULT_MAX_DOTS,
) -> set[int]:
    """
    Pick the indices worth marking on the chart.

    Only change-points (value differs from the previous point) qualify.
    When there are more than max_dots of them, they are strided evenly
    so at most max_dots are returned. The last change-point is always
    included.
    """
    change_points = []
    for i in range(1, len(series)):
        prev = series[i - 1].value
        curr = series[i].value
        if not (math.isfinite(prev) and math.isfinite(curr)):
            continue
        if curr != prev:
            change_points.append(i)

    if not change_points or max_dots < 1:
        return set()

    if len(change_points) <= max_dots:
        return set(change_points)

    if max_dots == 1:
        return {change_points[-1]}

    # Reserve one slot for the final change-point.
    stride = math.ceil((len(change_points) - 1) / (max_dots - 1))
    selected = set(change_points[0:len(change_points) - 1:stride])
    selected.add(change_points[-1])
    return selected
