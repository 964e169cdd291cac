"""
Error kinds surfaced by the reconciliation and analytics engine.
Structural errors abort the affected instrument or comparison; degenerate
statistics are flagged in the summary instead of raised.
"""

from datetime import date
from enum import Enum
from typing import Optional


class AnalysisError(Exception):
    """Base class for structural errors, carrying instrument and date context."""

    def __init__(
        self,
        message: str,
        instrument: Optional[str] = None,
        date: Optional[date] = None
    ):
        self.instrument = instrument
        self.date = date

        context = []
        if instrument is not None:
            context.append(f"instrument={instrument}")
        if date is not None:
            context.append(f"date={date.isoformat()}")

        if context:
            message = f"{message} ({', '.join(context)})"
        super().__init__(message)


class MissingPriceDataError(AnalysisError):
    """Raised when a date inside the window has no usable NAV."""
    pass


class InvalidDistributionRatioError(AnalysisError):
    """Raised when a distribution has a zero or missing reinvestment price."""
    pass


class EmptyWindowError(AnalysisError):
    """Raised when no data points remain after filtering by start date."""
    pass


class InsufficientAlignmentError(AnalysisError):
    """Raised when two portfolios cannot be aligned on a common date."""
    pass


class DegenerateStatistic(str, Enum):
    """Statistics reported as 0 because the sample is too short."""
    ANNUALIZED_RETURN = "annualized_return"
    VOLATILITY = "volatility"
