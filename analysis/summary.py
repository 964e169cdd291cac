"""
Performance summary - composes return, extrema, drawdown and volatility
calculations into a PerformanceSummary for one portfolio series.
"""

import logging

from analysis.calculations.returns import (
    percent_change,
    year_fraction,
    annualized_return,
    is_annualizable
)
from analysis.calculations.volatility import annualized_volatility_pct
from analysis.calculations.drawdown import value_extrema, max_drawdown_pct
from analysis.errors import EmptyWindowError, MissingPriceDataError, DegenerateStatistic
from analysis.models import PortfolioSeries, PerformanceSummary

logger = logging.getLogger(__name__)


def summarize(series: PortfolioSeries) -> PerformanceSummary:
    """
    Calculate summary statistics over a portfolio's full daily series.

    Annualized return is 0 when the span is about a week or less, and
    volatility is 0 with a single point; both cases are listed in
    PerformanceSummary.degenerate.

    Args:
        series: Portfolio series in ascending date order

    Returns:
        PerformanceSummary

    Raises:
        EmptyWindowError: If the series has no points
        MissingPriceDataError: If any daily value is zero or negative
    """
    if len(series) == 0:
        raise EmptyWindowError(f"Portfolio {series.name} has no daily values")

    values = series.values
    dates = series.dates

    for point in series:
        if point.total_value <= 0:
            raise MissingPriceDataError(
                f"Portfolio {series.name} has non-positive value {point.total_value}",
                date=point.date
            )

    initial_value = values[0]
    current_value = values[-1]
    degenerate = []

    # Returns
    years = year_fraction(dates[0], dates[-1])
    if is_annualizable(years):
        annualized = annualized_return(initial_value, current_value, years)
    else:
        annualized = 0.0
        degenerate.append(DegenerateStatistic.ANNUALIZED_RETURN.value)

    # Volatility
    if len(values) >= 2:
        volatility = annualized_volatility_pct(values)
    else:
        volatility = 0.0
        degenerate.append(DegenerateStatistic.VOLATILITY.value)

    extrema = value_extrema(values, dates)

    if degenerate:
        logger.debug(f"Degenerate statistics for {series.name}: {degenerate}")

    return PerformanceSummary(
        name=series.name,
        initial_value=initial_value,
        current_value=current_value,
        absolute_change=current_value - initial_value,
        percent_change=percent_change(initial_value, current_value),
        annualized_return_pct=annualized,
        min_value=extrema['min_value'],
        min_date=extrema['min_date'],
        max_value=extrema['max_value'],
        max_date=extrema['max_date'],
        annualized_volatility_pct=volatility,
        max_drawdown_pct=max_drawdown_pct(values),
        degenerate=tuple(degenerate),
        final_units=dict(series.final_units)
    )
