"""
Tests for shared record types.
"""

import pytest
from dataclasses import FrozenInstanceError
from datetime import date

from analysis.models import NavPoint, DistributionEvent, PortfolioPoint, PortfolioSeries


def make_series():
    points = (
        PortfolioPoint(date(2024, 12, 2), {'AGTHX': 100.0}, 100.0),
        PortfolioPoint(date(2024, 12, 3), {'AGTHX': 105.0}, 105.0),
    )
    return PortfolioSeries('Test', points, final_units={'AGTHX': 1.0})


class TestRecords:
    """Tests for record serialization and immutability."""

    def test_frozen(self):
        point = NavPoint(date(2024, 12, 2), 78.41)

        with pytest.raises(FrozenInstanceError):
            point.nav = 80.0

    def test_to_dict_iso_dates(self):
        event = DistributionEvent(date(2024, 12, 16), 0.5, None)

        assert event.to_dict() == {
            'date': '2024-12-16',
            'distribution_per_unit': 0.5,
            'nav_at_distribution': None,
        }


class TestPortfolioSeries:
    """Tests for PortfolioSeries helpers."""

    def test_accessors(self):
        series = make_series()

        assert len(series) == 2
        assert series.dates == [date(2024, 12, 2), date(2024, 12, 3)]
        assert series.values == [100.0, 105.0]
        assert series.value_by_date()[date(2024, 12, 3)] == 105.0
        assert [p.total_value for p in series] == [100.0, 105.0]

    def test_to_dict(self):
        result = make_series().to_dict()

        assert result['name'] == 'Test'
        assert result['points'][0]['date'] == '2024-12-02'
        assert result['final_units'] == {'AGTHX': 1.0}
