"""
Guardrails for analysis engine - validation and safety checks on input records.
Blocks on malformed data, warns on gaps the Reconciler will fill.
"""

import warnings
from typing import List, Sequence

from analysis.models import NavPoint, DistributionEvent
from ingestion.transforms.validators import (
    validate_nav_point,
    validate_distribution_event,
    ValidationError
)


class DataQualityError(Exception):
    """Raised when data quality issues require user intervention."""
    pass


class DataQualityWarning(UserWarning):
    """Raised when data quality issues should be noted but don't block execution."""
    pass


def check_instrument_records(
    instrument: str,
    nav_series: Sequence[NavPoint],
    distribution_series: Sequence[DistributionEvent],
    is_fixed_nav: bool = False
) -> List[str]:
    """
    Check one instrument's records before reconciliation.

    Args:
        instrument: Instrument identifier
        nav_series: NAV points
        distribution_series: Distribution events
        is_fixed_nav: Fixed-NAV instruments need no priced series

    Returns:
        List of warning messages (also emitted as DataQualityWarning)

    Raises:
        DataQualityError: If records are invalid or dates are duplicated
    """
    issues = []

    for point in nav_series:
        try:
            validate_nav_point(point)
        except ValidationError as e:
            raise DataQualityError(f"{instrument} NAV on {point.date}: {e}") from e

    for event in distribution_series:
        try:
            validate_distribution_event(event)
        except ValidationError as e:
            raise DataQualityError(f"{instrument} distribution on {event.date}: {e}") from e

    _check_unique_dates(instrument, 'NAV', [p.date for p in nav_series])
    _check_unique_dates(instrument, 'distribution', [e.date for e in distribution_series])

    if not nav_series and not distribution_series:
        raise DataQualityError(f"{instrument} has no records")

    if not is_fixed_nav:
        nav_dates = {p.date for p in nav_series}
        unpriced = sorted(e.date for e in distribution_series if e.date not in nav_dates)
        if unpriced:
            issues.append(
                f"{instrument} has {len(unpriced)} distribution dates without a NAV "
                f"(first {unpriced[0]}); using the distribution price"
            )

        zero_navs = [p.date for p in nav_series if p.nav == 0]
        if zero_navs:
            issues.append(
                f"{instrument} has {len(zero_navs)} zero NAV values (first {zero_navs[0]})"
            )

    for message in issues:
        warnings.warn(message, DataQualityWarning)

    return issues


def _check_unique_dates(instrument: str, kind: str, dates: list) -> None:
    seen = set()
    for day in dates:
        if day in seen:
            raise DataQualityError(f"{instrument} has duplicate {kind} date {day}")
        seen.add(day)
