"""
Comparative analysis of two portfolios.
Aligns both series from their first common date, indexes them to 100 and
summarizes each portfolio over its own full history.
"""

import logging
from typing import List, Tuple

from analysis.errors import InsufficientAlignmentError
from analysis.models import PortfolioSeries, ComparisonPoint, ComparisonResult
from analysis.summary import summarize

logger = logging.getLogger(__name__)

INDEX_BASE = 100.0


def align(
    portfolio_a: PortfolioSeries,
    portfolio_b: PortfolioSeries
) -> List[ComparisonPoint]:
    """
    Align two portfolios on shared dates and index both to 100.

    Dates before the first date both portfolios report are discarded; after
    it, only dates present in both series are kept (no forward fill).

    indexX(d) = totalX(d) / totalX(first common date) × 100
    index_difference = index_b - index_a (positive means B outperforms A)

    Raises:
        InsufficientAlignmentError: If the portfolios share no date, or a
            portfolio's value on the first common date is zero
    """
    values_a = portfolio_a.value_by_date()
    values_b = portfolio_b.value_by_date()

    common_dates = sorted(set(values_a) & set(values_b))
    if not common_dates:
        raise InsufficientAlignmentError(
            f"Portfolios {portfolio_a.name} and {portfolio_b.name} share no common date"
        )

    first_common = common_dates[0]
    base_a = values_a[first_common]
    base_b = values_b[first_common]

    if base_a == 0 or base_b == 0:
        raise InsufficientAlignmentError(
            "Cannot index a zero value on the first common date",
            date=first_common
        )

    aligned = []
    for day in common_dates:
        value_a = values_a[day]
        value_b = values_b[day]
        index_a = value_a / base_a * INDEX_BASE
        index_b = value_b / base_b * INDEX_BASE
        aligned.append(
            ComparisonPoint(
                date=day,
                value_a=value_a,
                value_b=value_b,
                index_a=index_a,
                index_b=index_b,
                index_difference=index_b - index_a
            )
        )

    logger.debug(
        f"Aligned {portfolio_a.name} vs {portfolio_b.name}: {len(aligned)} common dates "
        f"from {first_common}"
    )

    return aligned


def compare(
    portfolio_a: PortfolioSeries,
    portfolio_b: PortfolioSeries
) -> ComparisonResult:
    """
    Compare two portfolios.

    Args:
        portfolio_a: Baseline portfolio (e.g. a money market fund)
        portfolio_b: Candidate portfolio

    Returns:
        ComparisonResult with both summaries and the aligned, indexed series

    Raises:
        InsufficientAlignmentError: If the portfolios cannot be aligned
        EmptyWindowError, MissingPriceDataError: From summarizing either side
    """
    aligned = align(portfolio_a, portfolio_b)

    return ComparisonResult(
        summary_a=summarize(portfolio_a),
        summary_b=summarize(portfolio_b),
        aligned_series=tuple(aligned),
        first_common_date=aligned[0].date
    )


def final_index_difference(result: ComparisonResult) -> Tuple[float, float, float]:
    """Latest (index_a, index_b, index_difference) of a comparison."""
    last = result.aligned_series[-1]
    return last.index_a, last.index_b, last.index_difference
