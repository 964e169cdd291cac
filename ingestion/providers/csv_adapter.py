"""
CSV adapter - read NAV and distribution files in the supported layouts.
File IO allowed here, but minimal business logic.
"""

import pandas as pd
from pathlib import Path
from typing import Dict, Any, List, Union

NAV_COLUMNS = ['date', 'nav']
DISTRIBUTION_COLUMNS = ['date', 'distribution', 'nav']
MUTUAL_FUND_COLUMNS = [
    'record_date',
    'regular_dividend',
    'special_dividend',
    'long_term_gains',
    'short_term_gains',
    'nav',
]
MONEY_MARKET_COLUMNS = ['as_of', 'rate']


class CsvAdapterError(Exception):
    """Raised when a CSV file cannot be read."""
    pass


def read_nav_rows(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Read a NAV file with columns date,nav.
    Returns raw rows - normalization happens later.

    Raises:
        CsvAdapterError: If the file is missing or lacks required columns
    """
    return _read_rows(path, NAV_COLUMNS)


def read_distribution_rows(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Read a distribution file with columns date,distribution,nav.
    Returns raw rows - normalization happens later.

    Raises:
        CsvAdapterError: If the file is missing or lacks required columns
    """
    return _read_rows(path, DISTRIBUTION_COLUMNS)


def read_mutual_fund_rows(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read a mutual fund distribution file with dividend and capital gain columns."""
    return _read_rows(path, MUTUAL_FUND_COLUMNS)


def read_money_market_rows(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Read a money market file of daily accrual rates (as_of,rate)."""
    return _read_rows(path, MONEY_MARKET_COLUMNS)


def _read_rows(path: Union[str, Path], columns: List[str]) -> List[Dict[str, Any]]:
    csv_path = Path(path)
    if not csv_path.exists():
        raise CsvAdapterError(f"File not found: {csv_path}")

    try:
        # Keep cells as strings; currency and date cleanup belongs to normalizers
        data = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise CsvAdapterError(f"Failed to read {csv_path}: {e}") from e

    data.columns = [str(c).strip().lower() for c in data.columns]

    missing = set(columns) - set(data.columns)
    if missing:
        raise CsvAdapterError(f"{csv_path} missing required columns: {sorted(missing)}")

    return data[columns].to_dict('records')
