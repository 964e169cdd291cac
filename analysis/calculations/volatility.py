"""
Volatility calculation utilities.
Pure functions for annualized volatility of simple daily returns.
"""

import math
import numpy as np
from typing import List

from analysis.calculations.returns import simple_daily_returns, ReturnsError
from analysis.errors import MissingPriceDataError

TRADING_DAYS_PER_YEAR = 252


class VolatilityError(Exception):
    """Raised when volatility calculation fails."""
    pass


def population_std(returns: List[float]) -> float:
    """
    Population standard deviation (ddof=0) of a return series.

    Raises:
        VolatilityError: If returns are empty or contain NaN/inf
    """
    if len(returns) == 0:
        raise VolatilityError("Insufficient data: need at least 1 return")

    returns_array = np.asarray(returns, dtype=np.float64)

    if np.any(np.isnan(returns_array)):
        raise VolatilityError("NaN values not allowed in returns")

    if np.any(np.isinf(returns_array)):
        raise VolatilityError("Infinite values not allowed in returns")

    return float(np.std(returns_array, ddof=0))


def annualized_volatility_pct(
    values: List[float],
    annualize: int = TRADING_DAYS_PER_YEAR
) -> float:
    """
    Calculate annualized volatility of a daily value series in percent.

    Formula: σ = std_pop(simple daily returns) × √annualize × 100

    Args:
        values: Daily values in chronological order
        annualize: Periods per year

    Returns:
        Annualized volatility in percent (25.0 = 25%)

    Raises:
        VolatilityError: If fewer than 2 values
        MissingPriceDataError: If a value before the last is zero
    """
    if len(values) < 2:
        raise VolatilityError("Insufficient data: need at least 2 values")

    try:
        returns = simple_daily_returns(values)
    except ReturnsError as e:
        raise MissingPriceDataError(str(e)) from e

    return population_std(returns) * math.sqrt(annualize) * 100
