"""
Reconciliation of a NAV series and a distribution series for one instrument.
Pure function producing a date-sorted series with a per-date reinvestment ratio.
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence

from analysis.errors import InvalidDistributionRatioError
from analysis.models import NavPoint, DistributionEvent, ReconciledPoint

logger = logging.getLogger(__name__)

# Reinvestment price of a money market fund
FIXED_NAV = 1.0


def reconcile(
    nav_series: Sequence[NavPoint],
    distribution_series: Sequence[DistributionEvent],
    is_fixed_nav: bool = False,
    *,
    instrument: Optional[str] = None,
    fixed_nav: float = FIXED_NAV
) -> List[ReconciledPoint]:
    """
    Merge NAV points and distribution events onto one ascending date axis.

    The output covers the union of both date sets. NAV on a date comes from
    the NAV series, falling back to the distribution record's own price when
    the NAV series lacks that date. For a fixed-NAV instrument the NAV is
    always the constant.

    Reinvestment ratio = distribution_per_unit / nav_at_distribution on
    distribution dates, else 0. Several events on the same date contribute
    the sum of their ratios.

    Args:
        nav_series: NAV observations, any order
        distribution_series: Distribution events, any order
        is_fixed_nav: True for instruments priced at a constant NAV
        instrument: Identifier used in error context
        fixed_nav: The constant NAV for fixed-NAV instruments

    Returns:
        List of ReconciledPoint sorted by date, oldest first

    Raises:
        InvalidDistributionRatioError: If a distribution has a zero or missing
            reinvestment price
    """
    # Later records win on duplicate dates
    nav_by_date: Dict[date, float] = {}
    for point in nav_series:
        nav_by_date[point.date] = point.nav

    ratio_by_date: Dict[date, float] = {}
    dist_nav_by_date: Dict[date, float] = {}
    for event in distribution_series:
        price = fixed_nav if is_fixed_nav else event.nav_at_distribution
        if price is None or price <= 0:
            raise InvalidDistributionRatioError(
                f"Reinvestment price must be positive, got {price}",
                instrument=instrument,
                date=event.date
            )

        ratio = event.distribution_per_unit / price
        ratio_by_date[event.date] = ratio_by_date.get(event.date, 0.0) + ratio
        dist_nav_by_date[event.date] = price

    all_dates = sorted(set(nav_by_date) | set(ratio_by_date))

    reconciled = []
    for day in all_dates:
        if is_fixed_nav:
            nav = fixed_nav
        elif day in nav_by_date:
            nav = nav_by_date[day]
        else:
            nav = dist_nav_by_date.get(day)

        reconciled.append(
            ReconciledPoint(
                date=day,
                nav=nav,
                reinvest_ratio=ratio_by_date.get(day, 0.0)
            )
        )

    logger.debug(
        f"Reconciled {instrument or 'instrument'}: {len(nav_by_date)} NAV dates, "
        f"{len(ratio_by_date)} distribution dates, {len(reconciled)} points"
    )

    return reconciled
