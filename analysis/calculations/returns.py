"""
Returns calculation utilities.
Pure functions for total and annualized returns of a value series.
"""

from datetime import date
from typing import List

# Spans at or below this fraction of a year (~7 days) are not annualized
MIN_YEAR_FRACTION = 0.02
DAYS_PER_YEAR = 365


class ReturnsError(Exception):
    """Raised when returns calculation fails."""
    pass


def percent_change(initial_value: float, current_value: float) -> float:
    """
    Calculate percentage change between two values.

    Formula: (current - initial) / initial × 100

    Raises:
        ReturnsError: If initial value is zero
    """
    if initial_value == 0:
        raise ReturnsError("Initial value must be non-zero")

    return (current_value - initial_value) / initial_value * 100


def year_fraction(start: date, end: date) -> float:
    """Elapsed calendar days between two dates as a fraction of a 365-day year."""
    return (end - start).days / DAYS_PER_YEAR


def annualized_return(
    initial_value: float,
    current_value: float,
    years: float
) -> float:
    """
    Calculate compound annualized return in percent.

    Formula: ((current / initial) ^ (1 / years) - 1) × 100

    Args:
        initial_value: Value at the start of the span
        current_value: Value at the end of the span
        years: Length of the span in years

    Returns:
        Annualized return in percent, or 0.0 when years <= MIN_YEAR_FRACTION
        (use is_annualizable to tell the cases apart)

    Raises:
        ReturnsError: If values are not positive
    """
    if not is_annualizable(years):
        return 0.0

    if initial_value <= 0 or current_value < 0:
        raise ReturnsError("Values must be positive to annualize")

    return ((current_value / initial_value) ** (1 / years) - 1) * 100


def is_annualizable(years: float) -> bool:
    """Whether a span is long enough for a stable annualized figure."""
    return years > MIN_YEAR_FRACTION


def simple_daily_returns(values: List[float]) -> List[float]:
    """
    Calculate simple period-over-period returns.

    Formula: r_i = (v_i - v_{i-1}) / v_{i-1}

    Args:
        values: Values in chronological order

    Returns:
        List of returns (length = len(values) - 1)

    Raises:
        ReturnsError: If a previous value is zero
    """
    returns = []
    for i in range(1, len(values)):
        previous = values[i - 1]
        if previous == 0:
            raise ReturnsError(f"Zero value at position {i - 1}")
        returns.append((values[i] - previous) / previous)

    return returns
