"""
Portfolio comparison configuration.
Loads instruments, holdings and the comparison pair from a YAML file.
"""

import os
import yaml
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_CONFIG_PATH = './config/portfolios.yml'

# Layouts a distributions file may use
DISTRIBUTION_FORMATS = ('canonical', 'mutual_fund', 'money_market')


class ConfigError(Exception):
    """Raised when configuration is missing or invalid."""
    pass


@dataclass
class InstrumentConfig:
    """Configuration for one instrument."""
    instrument_id: str
    fixed_nav: bool = False
    fixed_nav_value: float = 1.0
    nav_file: Optional[Path] = None
    distributions_file: Optional[Path] = None
    distribution_format: str = 'canonical'

    def __post_init__(self):
        if not self.instrument_id or not isinstance(self.instrument_id, str):
            raise ConfigError("instrument id must be non-empty string")

        if self.fixed_nav_value <= 0:
            raise ConfigError(f"{self.instrument_id}: fixed_nav_value must be positive")

        if self.distribution_format not in DISTRIBUTION_FORMATS:
            raise ConfigError(
                f"{self.instrument_id}: distribution_format must be one of "
                f"{DISTRIBUTION_FORMATS}, got {self.distribution_format}"
            )


@dataclass
class HoldingConfig:
    """Initial holding of one instrument inside a portfolio."""
    instrument_id: str
    units: float
    start_date: date

    def __post_init__(self):
        if self.units <= 0:
            raise ConfigError(f"{self.instrument_id}: units must be positive, got {self.units}")


@dataclass
class PortfolioConfig:
    key: str
    name: str
    holdings: List[HoldingConfig] = field(default_factory=list)

    def __post_init__(self):
        if not self.holdings:
            raise ConfigError(f"Portfolio {self.key} has no holdings")


@dataclass
class ComparisonConfig:
    baseline: str
    candidate: str


@dataclass
class AppConfig:
    instruments: Dict[str, InstrumentConfig]
    portfolios: Dict[str, PortfolioConfig]
    comparison: ComparisonConfig

    def __post_init__(self):
        for portfolio in self.portfolios.values():
            for holding in portfolio.holdings:
                if holding.instrument_id not in self.instruments:
                    raise ConfigError(
                        f"Portfolio {portfolio.key} holds unknown instrument {holding.instrument_id}"
                    )

        for key in (self.comparison.baseline, self.comparison.candidate):
            if key not in self.portfolios:
                raise ConfigError(f"Comparison refers to unknown portfolio {key}")

    @property
    def baseline(self) -> PortfolioConfig:
        return self.portfolios[self.comparison.baseline]

    @property
    def candidate(self) -> PortfolioConfig:
        return self.portfolios[self.comparison.candidate]

    def held_instruments(self) -> List[str]:
        """Instrument ids held by either compared portfolio, in config order."""
        held = []
        for portfolio in (self.baseline, self.candidate):
            for holding in portfolio.holdings:
                if holding.instrument_id not in held:
                    held.append(holding.instrument_id)
        return held


def load_config(config_path: Optional[Union[str, Path]] = None) -> AppConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to config file (defaults to FUND_COMPARE_CONFIG env
            or ./config/portfolios.yml). Relative data file paths resolve
            against the config file's directory.

    Returns:
        AppConfig

    Raises:
        ConfigError: If the file cannot be loaded or is invalid
    """
    if config_path is None:
        config_path = os.getenv('FUND_COMPARE_CONFIG', DEFAULT_CONFIG_PATH)

    config_file = Path(config_path)
    if not config_file.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to load config: {e}") from e

    return parse_config(raw, base_dir=config_file.parent)


def parse_config(raw: Dict[str, Any], base_dir: Path = Path('.')) -> AppConfig:
    """
    Build AppConfig from a parsed YAML mapping.

    Raises:
        ConfigError: If required sections are missing or invalid
    """
    if not isinstance(raw, dict):
        raise ConfigError("Config must be a mapping")

    for section in ('instruments', 'portfolios', 'comparison'):
        if section not in raw:
            raise ConfigError(f"Config missing '{section}' section")

    instruments = {
        instrument_id: _parse_instrument(instrument_id, entry or {}, base_dir)
        for instrument_id, entry in raw['instruments'].items()
    }

    portfolios = {
        key: _parse_portfolio(key, entry or {})
        for key, entry in raw['portfolios'].items()
    }

    comparison = raw['comparison'] or {}
    try:
        comparison_config = ComparisonConfig(
            baseline=comparison['baseline'],
            candidate=comparison['candidate']
        )
    except KeyError as e:
        raise ConfigError(f"Comparison missing {e}") from e

    return AppConfig(
        instruments=instruments,
        portfolios=portfolios,
        comparison=comparison_config
    )


def _parse_instrument(instrument_id: str, entry: Dict[str, Any], base_dir: Path) -> InstrumentConfig:
    return InstrumentConfig(
        instrument_id=str(instrument_id),
        fixed_nav=bool(entry.get('fixed_nav', False)),
        fixed_nav_value=float(entry.get('fixed_nav_value', 1.0)),
        nav_file=_resolve(entry.get('nav_file'), base_dir),
        distributions_file=_resolve(entry.get('distributions_file'), base_dir),
        distribution_format=entry.get('distribution_format', 'canonical')
    )


def _parse_portfolio(key: str, entry: Dict[str, Any]) -> PortfolioConfig:
    default_start = entry.get('start_date')

    holdings = []
    for instrument_id, holding in (entry.get('holdings') or {}).items():
        if isinstance(holding, dict):
            units = holding.get('units')
            start = holding.get('start_date', default_start)
        else:
            units = holding
            start = default_start

        if units is None or start is None:
            raise ConfigError(f"Portfolio {key}: {instrument_id} needs units and start_date")

        holdings.append(
            HoldingConfig(
                instrument_id=str(instrument_id),
                units=float(units),
                start_date=_to_date(start)
            )
        )

    return PortfolioConfig(key=key, name=entry.get('name', key), holdings=holdings)


def _to_date(value: Union[str, date]) -> date:
    # YAML parses unquoted ISO dates itself
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as e:
        raise ConfigError(f"Invalid date: {value}") from e


def _resolve(path: Optional[str], base_dir: Path) -> Optional[Path]:
    if path is None:
        return None
    resolved = Path(path)
    if not resolved.is_absolute():
        resolved = base_dir / resolved
    return resolved


def get_log_level() -> str:
    """Log level from FUND_COMPARE_LOG_LEVEL (default WARNING)."""
    return os.getenv('FUND_COMPARE_LOG_LEVEL', 'WARNING').upper()
