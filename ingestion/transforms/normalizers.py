"""
Normalizers for transforming provider rows to typed NAV and distribution records.
Pure functions - no IO, network, or side effects.
Minimal normalization - only when necessary.
"""

from datetime import date, datetime
from typing import Dict, Any, List, Optional, Union

from dateutil import parser as date_parser

from analysis.models import NavPoint, DistributionEvent

# Components summed into a mutual fund's total distribution
MUTUAL_FUND_COMPONENTS = (
    'regular_dividend',
    'special_dividend',
    'long_term_gains',
    'short_term_gains',
)

MONEY_MARKET_NAV = 1.0


class NormalizationError(ValueError):
    """Raised when a provider row cannot be coerced to a record."""
    pass


def parse_date(value: Union[str, date, datetime]) -> date:
    """
    Coerce a provider date to a date object.

    ISO strings parse directly; other formats (e.g. 01/15/24) go through
    dateutil, month first.
    """
    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if not isinstance(value, str) or not value.strip():
        raise NormalizationError(f"Invalid date value: {value!r}")

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        return date_parser.parse(text, dayfirst=False).date()
    except (ValueError, OverflowError) as e:
        raise NormalizationError(f"Unparseable date: {value!r}") from e


def parse_amount(value: Any) -> Optional[float]:
    """
    Coerce a currency cell to float.

    Strips '$' and ',' from strings. Blank cells and None give None.
    """
    if value is None:
        return None

    if isinstance(value, (int, float)):
        # NaN from pandas means a blank cell
        if value != value:
            return None
        return float(value)

    text = str(value).replace('$', '').replace(',', '').strip()
    if not text:
        return None

    try:
        return float(text)
    except ValueError as e:
        raise NormalizationError(f"Invalid amount: {value!r}") from e


def normalize_nav_rows(raw_rows: List[Dict[str, Any]]) -> List[NavPoint]:
    """
    Transform raw {date, nav} rows to NavPoints.

    Rows with a blank NAV are dropped: a missing observation is absent, never
    zero. Duplicate dates keep the last row to handle corrections.

    Returns:
        NavPoints sorted by date
    """
    by_date: Dict[date, NavPoint] = {}

    for raw in raw_rows:
        nav = parse_amount(raw.get('nav'))
        if nav is None:
            continue

        row_date = parse_date(raw.get('date'))
        by_date[row_date] = NavPoint(date=row_date, nav=nav)

    return [by_date[d] for d in sorted(by_date)]


def normalize_distribution_rows(raw_rows: List[Dict[str, Any]]) -> List[DistributionEvent]:
    """
    Transform raw {date, distribution, nav} rows to DistributionEvents.

    Rows whose distribution is blank or zero carry no reinvestment and are
    dropped. A blank or zero reinvestment NAV is kept as None so the
    Reconciler can reject it instead of dividing by a default.

    Returns:
        DistributionEvents sorted by date
    """
    by_date: Dict[date, DistributionEvent] = {}

    for raw in raw_rows:
        row_date = parse_date(raw.get('date'))
        distribution = parse_amount(raw.get('distribution'))
        if not distribution:
            continue

        nav = parse_amount(raw.get('nav'))

        by_date[row_date] = DistributionEvent(
            date=row_date,
            distribution_per_unit=distribution,
            nav_at_distribution=nav if nav else None
        )

    return [by_date[d] for d in sorted(by_date)]


def normalize_mutual_fund_distributions(
    raw_rows: List[Dict[str, Any]]
) -> List[DistributionEvent]:
    """
    Transform mutual fund distribution rows to DistributionEvents.

    Total distribution is the sum of regular and special dividends plus
    long- and short-term capital gains; blank components count as 0.
    The 'nav' column is the reinvestment price.

    Args:
        raw_rows: Rows keyed by record_date, the component names and nav

    Returns:
        DistributionEvents sorted by date
    """
    rows = []
    for raw in raw_rows:
        total = sum(parse_amount(raw.get(field)) or 0.0 for field in MUTUAL_FUND_COMPONENTS)
        rows.append({
            'date': raw.get('record_date', raw.get('date')),
            'distribution': total,
            'nav': raw.get('nav'),
        })

    return normalize_distribution_rows(rows)


def normalize_money_market_rates(raw_rows: List[Dict[str, Any]]) -> List[DistributionEvent]:
    """
    Transform money market daily rate rows to DistributionEvents.

    Each row carries the daily accrual per unit ('rate') and an 'as_of'
    date. The reinvestment price is always 1.00.
    """
    rows = [
        {
            'date': raw.get('as_of', raw.get('date')),
            'distribution': raw.get('rate'),
            'nav': MONEY_MARKET_NAV,
        }
        for raw in raw_rows
    ]

    return normalize_distribution_rows(rows)
