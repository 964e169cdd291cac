"""
Portfolio aggregation - combines per-instrument simulations into one series.
Components without an observation on a date contribute their last known value.
"""

import logging
from datetime import date
from typing import Dict, Mapping, Sequence

from analysis.errors import EmptyWindowError
from analysis.models import SimulatedPoint, PortfolioPoint, PortfolioSeries

logger = logging.getLogger(__name__)


def aggregate(
    simulated_by_instrument: Mapping[str, Sequence[SimulatedPoint]],
    name: str = "Portfolio"
) -> PortfolioSeries:
    """
    Combine simulated holdings into a daily portfolio value series.

    The output covers the union of all component dates in ascending order.
    Each instrument's last known value starts at 0 and is updated on every
    date it reports; the total on a date is the sum of last known values, so
    a component that does not report on a date is carried forward, not
    dropped.

    Args:
        simulated_by_instrument: Mapping of instrument id to its simulation
        name: Display name of the portfolio

    Returns:
        PortfolioSeries with one point per date

    Raises:
        EmptyWindowError: If there are no instruments or an instrument has
            no simulated points
    """
    if not simulated_by_instrument:
        raise EmptyWindowError(f"Portfolio {name} has no instruments")

    value_lookup: Dict[str, Dict[date, float]] = {}
    all_dates = set()

    for instrument, series in simulated_by_instrument.items():
        if not series:
            raise EmptyWindowError("No simulated points", instrument=instrument)
        value_lookup[instrument] = {point.date: point.value for point in series}
        all_dates.update(value_lookup[instrument])

    instruments = list(simulated_by_instrument)
    last_known = {instrument: 0.0 for instrument in instruments}

    points = []
    for day in sorted(all_dates):
        for instrument in instruments:
            observed = value_lookup[instrument].get(day)
            if observed is not None:
                last_known[instrument] = observed

        points.append(
            PortfolioPoint(
                date=day,
                component_values=dict(last_known),
                total_value=sum(last_known[instrument] for instrument in instruments)
            )
        )

    final_units = {
        instrument: series[-1].holding_units
        for instrument, series in simulated_by_instrument.items()
    }

    logger.debug(f"Aggregated {name}: {len(instruments)} instruments, {len(points)} dates")

    return PortfolioSeries(name=name, points=tuple(points), final_units=final_units)
