"""
Drawdown and extrema calculation utilities.
Pure functions over a value series with matching dates.
"""

import numpy as np
from datetime import date
from typing import List, Dict, Union


class DrawdownError(Exception):
    """Raised when drawdown calculation fails."""
    pass


def value_extrema(
    values: List[float],
    dates: List[date]
) -> Dict[str, Union[float, date]]:
    """
    Find the minimum and maximum values with the dates they occurred.

    Ties resolve to the first occurrence.

    Returns:
        Dictionary with min_value, min_date, max_value, max_date

    Raises:
        DrawdownError: If inputs are empty or lengths differ
    """
    if not values:
        raise DrawdownError("Insufficient data: need at least 1 value")

    if len(values) != len(dates):
        raise DrawdownError("Values and dates must have same length")

    min_idx = 0
    max_idx = 0
    for i in range(1, len(values)):
        if values[i] < values[min_idx]:
            min_idx = i
        if values[i] > values[max_idx]:
            max_idx = i

    return {
        'min_value': values[min_idx],
        'min_date': dates[min_idx],
        'max_value': values[max_idx],
        'max_date': dates[max_idx],
    }


def max_drawdown_pct(values: List[float]) -> float:
    """
    Largest peak-to-trough decline in percent (0 or negative).

    Formula: min over t of (v_t / max(v_0..v_t) - 1) × 100

    Raises:
        DrawdownError: If values are empty or not positive
    """
    if not values:
        raise DrawdownError("Insufficient data: need at least 1 value")

    if any(v <= 0 for v in values):
        raise DrawdownError("Zero or negative values not allowed")

    values_array = np.asarray(values, dtype=np.float64)

    # Track running maximum (peak)
    running_max = np.maximum.accumulate(values_array)
    drawdowns = (values_array / running_max) - 1

    return float(drawdowns.min()) * 100
