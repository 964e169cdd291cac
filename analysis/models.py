"""
Typed records shared by every stage of the engine.
All records are frozen; each stage returns new records instead of mutating its inputs.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Any, Optional, Tuple, Iterator, List


@dataclass(frozen=True)
class NavPoint:
    """Net asset value of one instrument on one date."""
    date: date
    nav: float

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date.isoformat(), 'nav': self.nav}


@dataclass(frozen=True)
class DistributionEvent:
    """
    Income or capital-gain distribution paid on one date.

    nav_at_distribution is the reinvestment price. It may be None when the
    provider left it blank; the Reconciler refuses to derive a ratio from it.
    """
    date: date
    distribution_per_unit: float
    nav_at_distribution: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'distribution_per_unit': self.distribution_per_unit,
            'nav_at_distribution': self.nav_at_distribution,
        }


@dataclass(frozen=True)
class ReconciledPoint:
    date: date
    nav: Optional[float]
    reinvest_ratio: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'nav': self.nav,
            'reinvest_ratio': self.reinvest_ratio,
        }


@dataclass(frozen=True)
class SimulatedPoint:
    """Holding of one instrument after reinvesting that day's distribution."""
    date: date
    holding_units: float
    nav: float
    value: float
    change_from_start_pct: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'holding_units': self.holding_units,
            'nav': self.nav,
            'value': self.value,
            'change_from_start_pct': self.change_from_start_pct,
        }


@dataclass(frozen=True)
class PortfolioPoint:
    date: date
    component_values: Dict[str, float]
    total_value: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'component_values': dict(self.component_values),
            'total_value': self.total_value,
        }


@dataclass(frozen=True)
class PortfolioSeries:
    """
    Combined daily value of a set of holdings.

    Points are in ascending date order. final_units holds the unit count of
    each instrument at its last observation.
    """
    name: str
    points: Tuple[PortfolioPoint, ...]
    final_units: Dict[str, float] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[PortfolioPoint]:
        return iter(self.points)

    @property
    def dates(self) -> List[date]:
        return [p.date for p in self.points]

    @property
    def values(self) -> List[float]:
        return [p.total_value for p in self.points]

    def value_by_date(self) -> Dict[date, float]:
        return {p.date: p.total_value for p in self.points}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'points': [p.to_dict() for p in self.points],
            'final_units': dict(self.final_units),
        }


@dataclass(frozen=True)
class ComparisonPoint:
    date: date
    value_a: float
    value_b: float
    index_a: float
    index_b: float
    index_difference: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'value_a': self.value_a,
            'value_b': self.value_b,
            'index_a': self.index_a,
            'index_b': self.index_b,
            'index_difference': self.index_difference,
        }


@dataclass(frozen=True)
class PerformanceSummary:
    """
    Summary statistics for one portfolio over its full series.

    degenerate lists statistics that were reported as 0 because the series
    was too short for them to be meaningful.
    """
    name: str
    initial_value: float
    current_value: float
    absolute_change: float
    percent_change: float
    annualized_return_pct: float
    min_value: float
    min_date: date
    max_value: float
    max_date: date
    annualized_volatility_pct: float
    max_drawdown_pct: float = 0.0
    degenerate: Tuple[str, ...] = ()
    final_units: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'initial_value': self.initial_value,
            'current_value': self.current_value,
            'absolute_change': self.absolute_change,
            'percent_change': self.percent_change,
            'annualized_return_pct': self.annualized_return_pct,
            'min_value': self.min_value,
            'min_date': self.min_date.isoformat(),
            'max_value': self.max_value,
            'max_date': self.max_date.isoformat(),
            'annualized_volatility_pct': self.annualized_volatility_pct,
            'max_drawdown_pct': self.max_drawdown_pct,
            'degenerate': list(self.degenerate),
            'final_units': dict(self.final_units),
        }


@dataclass(frozen=True)
class ComparisonResult:
    summary_a: PerformanceSummary
    summary_b: PerformanceSummary
    aligned_series: Tuple[ComparisonPoint, ...]
    first_common_date: date

    def to_dict(self) -> Dict[str, Any]:
        return {
            'summary_a': self.summary_a.to_dict(),
            'summary_b': self.summary_b.to_dict(),
            'first_common_date': self.first_common_date.isoformat(),
            'aligned_series': [p.to_dict() for p in self.aligned_series],
        }
