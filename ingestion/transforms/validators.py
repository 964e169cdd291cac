"""
Core validators for typed NAV and distribution records.
Pure functions - no IO, network, or side effects.
"""

import math
from datetime import date

from analysis.models import NavPoint, DistributionEvent


class ValidationError(ValueError):
    """Raised when data validation fails."""
    pass


def validate_nav_point(point: NavPoint) -> None:
    """
    Validate a NAV point.

    Raises:
        ValidationError: If validation fails
    """
    if not isinstance(point.date, date):
        raise ValidationError(f"date must be date, got {type(point.date)}")

    _check_number('nav', point.nav)

    if point.nav < 0:
        raise ValidationError(f"nav must be non-negative, got {point.nav}")


def validate_distribution_event(event: DistributionEvent) -> None:
    """
    Validate a distribution event.

    A missing reinvestment price passes here; it is the Reconciler's job to
    reject it, with instrument context.

    Raises:
        ValidationError: If validation fails
    """
    if not isinstance(event.date, date):
        raise ValidationError(f"date must be date, got {type(event.date)}")

    _check_number('distribution_per_unit', event.distribution_per_unit)

    if event.distribution_per_unit < 0:
        raise ValidationError(
            f"distribution_per_unit must be non-negative, got {event.distribution_per_unit}"
        )

    if event.nav_at_distribution is not None:
        _check_number('nav_at_distribution', event.nav_at_distribution)

        if event.nav_at_distribution < 0:
            raise ValidationError(
                f"nav_at_distribution must be non-negative, got {event.nav_at_distribution}"
            )


def _check_number(field: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field} must be numeric, got {type(value)}")

    if not math.isfinite(value):
        raise ValidationError(f"{field} must be finite, got {value}")
