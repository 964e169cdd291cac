"""
Distribution reinvestment simulation for a single instrument.
Walks a reconciled series forward, compounding units on every distribution.
"""

import logging
from datetime import date
from typing import List, Optional, Sequence

from analysis.errors import EmptyWindowError, MissingPriceDataError
from analysis.models import ReconciledPoint, SimulatedPoint

logger = logging.getLogger(__name__)


def simulate(
    reconciled: Sequence[ReconciledPoint],
    starting_units: float,
    start_date: Optional[date] = None,
    *,
    instrument: Optional[str] = None
) -> List[SimulatedPoint]:
    """
    Simulate holdings under automatic distribution reinvestment.

    On a date with reinvest_ratio > 0 the units grow by units * ratio before
    that date is valued, i.e. the distribution is reinvested at that day's NAV.

    Args:
        reconciled: Reconciler output, ascending by date
        starting_units: Units held at the start date (must be positive)
        start_date: First date to include (None keeps the whole series)
        instrument: Identifier used in error context

    Returns:
        List of SimulatedPoint, one per date on or after start_date

    Raises:
        ValueError: If starting_units is not positive
        EmptyWindowError: If no dates remain after filtering
        MissingPriceDataError: If a date in the window has no NAV, or a
            zero NAV
    """
    if starting_units <= 0:
        raise ValueError(f"starting_units must be positive, got {starting_units}")

    window = [
        point for point in reconciled
        if start_date is None or point.date >= start_date
    ]

    if not window:
        raise EmptyWindowError(
            f"No data on or after start date {start_date}",
            instrument=instrument
        )

    # Check every date up front so a gap never turns into a silent zero
    for index, point in enumerate(window):
        if point.nav is None:
            raise MissingPriceDataError(
                "No NAV available",
                instrument=instrument,
                date=point.date
            )

        if point.nav <= 0:
            raise MissingPriceDataError(
                "Starting NAV is zero" if index == 0 else f"NAV is {point.nav}",
                instrument=instrument,
                date=point.date
            )

    initial_value = starting_units * window[0].nav

    units = starting_units
    simulated = []

    for point in window:
        if point.reinvest_ratio > 0:
            units += units * point.reinvest_ratio

        value = units * point.nav
        simulated.append(
            SimulatedPoint(
                date=point.date,
                holding_units=units,
                nav=point.nav,
                value=value,
                change_from_start_pct=(value - initial_value) / initial_value * 100
            )
        )

    logger.debug(
        f"Simulated {instrument or 'instrument'}: {len(simulated)} days from "
        f"{simulated[0].date} to {simulated[-1].date}, units {starting_units} -> {units}"
    )

    return simulated
