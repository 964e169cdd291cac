"""
Orchestrated comparison job - records and configuration to ComparisonResult.
Loads and checks records, calls pure functions per instrument, joins the
results into portfolios and compares them.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Any, List, Optional, Sequence, Tuple

from analysis.calculations.aggregate import aggregate
from analysis.calculations.reconcile import reconcile
from analysis.calculations.reinvestment import simulate
from analysis.comparison import compare
from analysis.config import AppConfig, InstrumentConfig, PortfolioConfig
from analysis.errors import AnalysisError, EmptyWindowError
from analysis.guardrails import check_instrument_records, DataQualityError
from analysis.models import (
    NavPoint,
    DistributionEvent,
    ReconciledPoint,
    PortfolioSeries,
    ComparisonResult
)
from ingestion.providers.csv_adapter import (
    read_nav_rows,
    read_distribution_rows,
    read_mutual_fund_rows,
    read_money_market_rows
)
from ingestion.transforms.normalizers import (
    normalize_nav_rows,
    normalize_distribution_rows,
    normalize_mutual_fund_distributions,
    normalize_money_market_rates
)

logger = logging.getLogger(__name__)

ON_ERROR_POLICIES = ('raise', 'skip')

# Errors that exclude one instrument under the 'skip' policy
INSTRUMENT_ERRORS = (AnalysisError, DataQualityError)

# Reader and normalizer for each distribution file layout
DISTRIBUTION_LOADERS = {
    'canonical': (read_distribution_rows, normalize_distribution_rows),
    'mutual_fund': (read_mutual_fund_rows, normalize_mutual_fund_distributions),
    'money_market': (read_money_market_rows, normalize_money_market_rates),
}


class AnalysisJobError(Exception):
    """Raised when the comparison job cannot run."""
    pass


@dataclass(frozen=True)
class InstrumentRecords:
    """Parsed input records for one instrument."""
    instrument_id: str
    nav_series: Tuple[NavPoint, ...] = ()
    distribution_series: Tuple[DistributionEvent, ...] = ()


@dataclass
class ComparisonJobResult:
    comparison: ComparisonResult
    portfolio_a: PortfolioSeries
    portfolio_b: PortfolioSeries
    excluded: Dict[str, str] = field(default_factory=dict)
    duration_seconds: float = 0.0

    def to_dict(self, include_series: bool = False) -> Dict[str, Any]:
        result = {
            'status': 'completed',
            'comparison': self.comparison.to_dict(),
            'excluded': dict(self.excluded),
            'duration_seconds': self.duration_seconds,
        }
        if include_series:
            result['portfolio_a'] = self.portfolio_a.to_dict()
            result['portfolio_b'] = self.portfolio_b.to_dict()
        return result


def load_instrument_records(instrument: InstrumentConfig) -> InstrumentRecords:
    """
    Read and normalize an instrument's CSV files.

    The distributions file is read in the instrument's distribution_format.

    Raises:
        CsvAdapterError: If a configured file cannot be read
        NormalizationError: If a row cannot be coerced
    """
    nav_series: List[NavPoint] = []
    distribution_series: List[DistributionEvent] = []

    if instrument.nav_file is not None:
        nav_series = normalize_nav_rows(read_nav_rows(instrument.nav_file))

    if instrument.distributions_file is not None:
        read_rows, normalize = DISTRIBUTION_LOADERS[instrument.distribution_format]
        distribution_series = normalize(read_rows(instrument.distributions_file))

    logger.info(
        f"Loaded {instrument.instrument_id}: {len(nav_series)} NAV points, "
        f"{len(distribution_series)} distributions"
    )

    return InstrumentRecords(
        instrument_id=instrument.instrument_id,
        nav_series=tuple(nav_series),
        distribution_series=tuple(distribution_series)
    )


def load_all_records(config: AppConfig) -> Dict[str, InstrumentRecords]:
    """Load records for every instrument held by the compared portfolios."""
    return {
        instrument_id: load_instrument_records(config.instruments[instrument_id])
        for instrument_id in config.held_instruments()
    }


def reconcile_instrument(
    instrument: InstrumentConfig,
    records: Optional[InstrumentRecords]
) -> List[ReconciledPoint]:
    """
    Check and reconcile one instrument's records.

    Raises:
        EmptyWindowError: If no records were supplied
        DataQualityError: If records fail guardrail checks
        InvalidDistributionRatioError: From reconciliation
    """
    if records is None:
        raise EmptyWindowError("No records supplied", instrument=instrument.instrument_id)

    check_instrument_records(
        instrument.instrument_id,
        records.nav_series,
        records.distribution_series,
        is_fixed_nav=instrument.fixed_nav
    )

    return reconcile(
        records.nav_series,
        records.distribution_series,
        is_fixed_nav=instrument.fixed_nav,
        instrument=instrument.instrument_id,
        fixed_nav=instrument.fixed_nav_value
    )


def build_portfolio(
    portfolio: PortfolioConfig,
    reconciled_by_instrument: Dict[str, List[ReconciledPoint]],
    excluded: Dict[str, str],
    on_error: str = 'raise'
) -> PortfolioSeries:
    """
    Simulate every holding of a portfolio and aggregate the results.

    Holdings whose instrument is already excluded are left out. Under the
    'skip' policy a holding that fails to simulate is excluded as well.

    Raises:
        AnalysisError: From simulation (under 'raise') or aggregation
    """
    simulated = {}

    for holding in portfolio.holdings:
        instrument_id = holding.instrument_id
        if instrument_id in excluded:
            continue

        try:
            simulated[instrument_id] = simulate(
                reconciled_by_instrument[instrument_id],
                holding.units,
                holding.start_date,
                instrument=instrument_id
            )
        except AnalysisError as e:
            if on_error == 'raise':
                raise
            logger.warning(f"Excluding {instrument_id} from {portfolio.name}: {e}")
            excluded[f"{portfolio.key}:{instrument_id}"] = str(e)

    return aggregate(simulated, name=portfolio.name)


def run_comparison(
    config: AppConfig,
    records: Dict[str, InstrumentRecords],
    on_error: str = 'raise',
    max_workers: int = 1
) -> ComparisonJobResult:
    """
    Run the full comparison of the baseline and candidate portfolios.

    Args:
        config: Instruments, portfolios and comparison pair
        records: Parsed records by instrument id
        on_error: 'raise' aborts on the first instrument error; 'skip'
            excludes the instrument and continues with the rest
        max_workers: Threads used to reconcile instruments (1 = sequential)

    Returns:
        ComparisonJobResult

    Raises:
        AnalysisJobError: If arguments are invalid
        AnalysisError, DataQualityError: Under 'raise', or when a portfolio
            cannot be built or compared at all
    """
    if on_error not in ON_ERROR_POLICIES:
        raise AnalysisJobError(f"on_error must be one of {ON_ERROR_POLICIES}, got {on_error}")

    if max_workers < 1:
        raise AnalysisJobError("max_workers must be >= 1")

    start_time = datetime.now()
    instrument_ids = config.held_instruments()

    logger.info(
        f"Comparing {config.baseline.name} vs {config.candidate.name} "
        f"over {len(instrument_ids)} instruments"
    )

    outcomes = _run_per_instrument(
        instrument_ids,
        lambda instrument_id: reconcile_instrument(
            config.instruments[instrument_id],
            records.get(instrument_id)
        ),
        max_workers
    )

    reconciled_by_instrument: Dict[str, List[ReconciledPoint]] = {}
    excluded: Dict[str, str] = {}

    for instrument_id, reconciled, error in outcomes:
        if error is None:
            reconciled_by_instrument[instrument_id] = reconciled
            continue

        if on_error == 'raise':
            raise error
        logger.warning(f"Excluding {instrument_id}: {error}")
        excluded[instrument_id] = str(error)

    portfolio_a = build_portfolio(config.baseline, reconciled_by_instrument, excluded, on_error)
    portfolio_b = build_portfolio(config.candidate, reconciled_by_instrument, excluded, on_error)

    comparison = compare(portfolio_a, portfolio_b)

    duration = (datetime.now() - start_time).total_seconds()
    logger.info(
        f"Comparison complete: {len(comparison.aligned_series)} aligned dates, "
        f"{len(excluded)} excluded, {duration:.2f}s"
    )

    return ComparisonJobResult(
        comparison=comparison,
        portfolio_a=portfolio_a,
        portfolio_b=portfolio_b,
        excluded=excluded,
        duration_seconds=duration
    )


def _run_per_instrument(
    instrument_ids: Sequence[str],
    task: Callable[[str], Any],
    max_workers: int
) -> List[Tuple[str, Any, Optional[Exception]]]:
    """
    Run task for every instrument, returning outcomes in input order.

    Instrument-level errors are captured in the outcome; anything else
    propagates.
    """
    def capture(instrument_id: str) -> Tuple[str, Any, Optional[Exception]]:
        try:
            return instrument_id, task(instrument_id), None
        except INSTRUMENT_ERRORS as e:
            return instrument_id, None, e

    if max_workers == 1:
        return [capture(instrument_id) for instrument_id in instrument_ids]

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(capture, instrument_ids))
