"""
Tests for returns calculation utilities.
"""

import pytest
from datetime import date

from analysis.calculations.returns import (
    percent_change,
    year_fraction,
    annualized_return,
    is_annualizable,
    simple_daily_returns,
    ReturnsError
)


class TestPercentChange:
    """Tests for percent_change function."""

    def test_gain(self):
        assert percent_change(1000.0, 1150.0) == pytest.approx(15.0)

    def test_loss(self):
        assert percent_change(200.0, 150.0) == pytest.approx(-25.0)

    def test_zero_initial(self):
        with pytest.raises(ReturnsError, match="non-zero"):
            percent_change(0.0, 10.0)


class TestAnnualizedReturn:
    """Tests for year_fraction and annualized_return."""

    def test_year_fraction_full_year(self):
        """365 calendar days is exactly one year."""
        assert year_fraction(date(2023, 1, 1), date(2024, 1, 1)) == 1.0

    def test_annualized_one_year(self):
        """Over one year the annualized return equals the total return."""
        assert annualized_return(1000.0, 1100.0, 1.0) == pytest.approx(10.0)

    def test_annualized_half_year(self):
        """A half-year gain compounds to the annual rate."""
        # (1.05)^2 - 1 = 10.25%
        assert annualized_return(100.0, 105.0, 0.5) == pytest.approx(10.25)

    def test_short_span_not_annualized(self):
        """A week or less returns 0."""
        years = year_fraction(date(2024, 1, 1), date(2024, 1, 8))

        assert not is_annualizable(years)
        assert annualized_return(100.0, 110.0, years) == 0.0

    def test_threshold_boundary(self):
        """The threshold itself is not annualized; just above it is."""
        assert not is_annualizable(0.02)
        assert is_annualizable(0.0201)

    def test_non_positive_initial(self):
        with pytest.raises(ReturnsError, match="positive"):
            annualized_return(0.0, 100.0, 1.0)


class TestSimpleDailyReturns:
    """Tests for simple_daily_returns function."""

    def test_basic(self):
        returns = simple_daily_returns([100.0, 110.0, 99.0])

        assert returns == pytest.approx([0.1, -0.1])

    def test_single_value(self):
        assert simple_daily_returns([100.0]) == []

    def test_zero_previous_value(self):
        with pytest.raises(ReturnsError, match="Zero value at position 1"):
            simple_daily_returns([100.0, 0.0, 50.0])
