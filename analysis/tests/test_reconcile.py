"""
Tests for reconciliation of NAV and distribution series.
"""

import pytest
from datetime import date, timedelta

from analysis.calculations.reconcile import reconcile
from analysis.errors import InvalidDistributionRatioError
from analysis.models import NavPoint, DistributionEvent, ReconciledPoint


class TestReconcile:
    """Tests for reconcile function."""

    def test_reinvest_ratio_on_distribution_date(self):
        """Ratio is distribution / reinvestment price on the distribution date."""
        navs = [
            NavPoint(date(2024, 1, 1), 10.0),
            NavPoint(date(2024, 1, 2), 11.0),
        ]
        dists = [DistributionEvent(date(2024, 1, 2), 0.5, 11.0)]

        result = reconcile(navs, dists)

        assert len(result) == 2
        assert result[0].reinvest_ratio == 0.0
        assert result[1].reinvest_ratio == 0.5 / 11.0
        assert abs(result[1].reinvest_ratio - 0.0454545) < 1e-6
        assert result[1].nav == 11.0

    def test_ratio_uses_distribution_price(self):
        """Distribution record's own price wins over the priced series."""
        navs = [NavPoint(date(2024, 1, 2), 12.0)]
        dists = [DistributionEvent(date(2024, 1, 2), 0.6, 10.0)]

        result = reconcile(navs, dists)

        assert result[0].reinvest_ratio == pytest.approx(0.06)
        # NAV still comes from the priced series
        assert result[0].nav == 12.0

    def test_output_sorted_regardless_of_input_order(self):
        """Output is ascending by date for shuffled input."""
        base = date(2024, 3, 1)
        navs = [NavPoint(base + timedelta(days=i), 10.0 + i) for i in [4, 1, 3, 0, 2]]
        dists = [
            DistributionEvent(base + timedelta(days=3), 0.1, 13.0),
            DistributionEvent(base + timedelta(days=1), 0.1, 11.0),
        ]

        result = reconcile(navs, dists)

        assert [p.date for p in result] == [base + timedelta(days=i) for i in range(5)]
        for i in range(len(result) - 1):
            assert result[i].date < result[i + 1].date

    def test_union_of_dates_with_nav_fallback(self):
        """Distribution date without a NAV appears, priced from the distribution."""
        navs = [
            NavPoint(date(2024, 1, 1), 10.0),
            NavPoint(date(2024, 1, 3), 10.5),
        ]
        dists = [DistributionEvent(date(2024, 1, 2), 0.2, 10.2)]

        result = reconcile(navs, dists)

        assert [p.date for p in result] == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]
        assert result[1].nav == 10.2
        assert result[1].reinvest_ratio == pytest.approx(0.2 / 10.2)

    def test_fixed_nav_forced_to_constant(self):
        """Fixed-NAV instrument has NAV 1.0 everywhere, priced record or not."""
        navs = [NavPoint(date(2024, 1, 1), 0.9987)]
        dists = [
            DistributionEvent(date(2024, 1, 1), 0.0001, 1.0),
            DistributionEvent(date(2024, 1, 2), 0.0002, None),
        ]

        result = reconcile(navs, dists, is_fixed_nav=True)

        assert [p.nav for p in result] == [1.0, 1.0]
        assert result[0].reinvest_ratio == pytest.approx(0.0001)
        assert result[1].reinvest_ratio == pytest.approx(0.0002)

    def test_no_distributions(self):
        """Zero distribution events give ratio 0 on every date."""
        navs = [NavPoint(date(2024, 1, d), 10.0 + d) for d in range(1, 6)]

        result = reconcile(navs, [])

        assert len(result) == 5
        assert all(p.reinvest_ratio == 0.0 for p in result)

    def test_zero_reinvestment_price(self):
        """Zero reinvestment price is an error, with context."""
        navs = [NavPoint(date(2024, 1, 1), 10.0)]
        dists = [DistributionEvent(date(2024, 1, 1), 0.5, 0.0)]

        with pytest.raises(InvalidDistributionRatioError, match="Reinvestment price") as exc_info:
            reconcile(navs, dists, instrument='AGTHX')

        assert exc_info.value.instrument == 'AGTHX'
        assert exc_info.value.date == date(2024, 1, 1)
        assert 'AGTHX' in str(exc_info.value)

    def test_missing_reinvestment_price(self):
        """Missing reinvestment price is an error even when a NAV exists."""
        navs = [NavPoint(date(2024, 1, 1), 10.0)]
        dists = [DistributionEvent(date(2024, 1, 1), 0.5, None)]

        with pytest.raises(InvalidDistributionRatioError):
            reconcile(navs, dists)

    def test_same_date_events_sum(self):
        """Two events on one date contribute the sum of their ratios."""
        navs = [NavPoint(date(2024, 12, 16), 50.0)]
        dists = [
            DistributionEvent(date(2024, 12, 16), 0.5, 50.0),
            DistributionEvent(date(2024, 12, 16), 1.0, 50.0),
        ]

        result = reconcile(navs, dists)

        assert len(result) == 1
        assert result[0].reinvest_ratio == pytest.approx(0.03)

    def test_deterministic(self):
        """Identical inputs give identical outputs."""
        navs = [NavPoint(date(2024, 1, d), 10.0 + d / 7) for d in range(1, 10)]
        dists = [DistributionEvent(date(2024, 1, 5), 0.3, 10.7)]

        assert reconcile(navs, dists) == reconcile(list(reversed(navs)), dists)

    def test_empty_inputs(self):
        """Empty inputs give an empty series."""
        assert reconcile([], []) == []

    def test_returns_reconciled_points(self):
        """Output records are ReconciledPoint."""
        result = reconcile([NavPoint(date(2024, 1, 1), 10.0)], [])

        assert result == [ReconciledPoint(date(2024, 1, 1), 10.0, 0.0)]
