"""
Tests for volatility calculation utilities.
Synthetic data where the population standard deviation is known.
"""

import pytest
import math

from analysis.calculations.volatility import (
    population_std,
    annualized_volatility_pct,
    VolatilityError
)
from analysis.errors import MissingPriceDataError


class TestPopulationStd:
    """Tests for population_std function."""

    def test_known_values(self):
        """Returns +0.1 and -0.1 have mean 0 and population std 0.1."""
        assert abs(population_std([0.1, -0.1]) - 0.1) < 1e-12

    def test_population_not_sample(self):
        """ddof=0: divides by n, not n - 1."""
        returns = [0.01, 0.02, 0.03, 0.04]
        mean = sum(returns) / 4
        expected = math.sqrt(sum((r - mean) ** 2 for r in returns) / 4)

        assert population_std(returns) == pytest.approx(expected)

    def test_constant_returns(self):
        assert population_std([0.001] * 10) == pytest.approx(0.0, abs=1e-15)

    def test_empty(self):
        with pytest.raises(VolatilityError, match="Insufficient data"):
            population_std([])

    def test_nan(self):
        with pytest.raises(VolatilityError, match="NaN"):
            population_std([0.1, float('nan')])

    def test_inf(self):
        with pytest.raises(VolatilityError, match="Infinite"):
            population_std([0.1, float('inf')])


class TestAnnualizedVolatility:
    """Tests for annualized_volatility_pct function."""

    def test_known_series(self):
        """100 -> 110 -> 99 gives std 0.1, annualized by sqrt(252), in percent."""
        result = annualized_volatility_pct([100.0, 110.0, 99.0])

        assert result == pytest.approx(0.1 * math.sqrt(252) * 100)

    def test_flat_series(self):
        assert annualized_volatility_pct([1000.0] * 20) == 0.0

    def test_custom_annualization(self):
        result = annualized_volatility_pct([100.0, 110.0, 99.0], annualize=12)

        assert result == pytest.approx(0.1 * math.sqrt(12) * 100)

    def test_single_value(self):
        with pytest.raises(VolatilityError, match="at least 2 values"):
            annualized_volatility_pct([100.0])

    def test_zero_value(self):
        with pytest.raises(MissingPriceDataError, match="Zero value at position 1"):
            annualized_volatility_pct([100.0, 0.0, 50.0])
