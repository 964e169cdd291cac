#!/usr/bin/env python3
"""
Main CLI for the fund portfolio comparison engine.
Usage: python cli.py compare [options]
"""

import sys
import json
import logging
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from analysis.analysis_job import run_comparison, load_all_records, AnalysisJobError
from analysis.comparison import final_index_difference
from analysis.config import load_config, get_log_level, ConfigError
from analysis.errors import AnalysisError
from analysis.guardrails import DataQualityError
from ingestion.providers.csv_adapter import CsvAdapterError
from ingestion.transforms.normalizers import NormalizationError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Compare two fund portfolios with distribution reinvestment',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py compare
  python cli.py compare --config config/portfolios.yml --skip-failed
  python cli.py compare --workers 4 --series > comparison.json
        """
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    compare_parser = subparsers.add_parser('compare', help='Run the portfolio comparison')
    compare_parser.add_argument('--config',
                                help='Path to YAML config (default: $FUND_COMPARE_CONFIG or ./config/portfolios.yml)')
    compare_parser.add_argument('--skip-failed',
                                action='store_true',
                                help='Exclude instruments with data errors instead of failing')
    compare_parser.add_argument('--workers',
                                type=int,
                                default=1,
                                help='Threads used to reconcile instruments (default: 1)')
    compare_parser.add_argument('--series',
                                action='store_true',
                                help='Include both full portfolio series in the output')
    compare_parser.add_argument('--quiet', '-q',
                                action='store_true',
                                help='JSON only, no summary on stderr')

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=get_log_level(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    if args.command == 'compare':
        return run_compare(args)

    return 1


def run_compare(args: argparse.Namespace) -> int:
    """Load config and records, run the comparison and print JSON."""
    try:
        config = load_config(args.config)
        records = load_all_records(config)
        result = run_comparison(
            config,
            records,
            on_error='skip' if args.skip_failed else 'raise',
            max_workers=args.workers
        )
    except (ConfigError, CsvAdapterError, NormalizationError) as e:
        print(f"ERROR: Input error: {e}", file=sys.stderr)
        return 1
    except (AnalysisError, DataQualityError, AnalysisJobError) as e:
        print(f"ERROR: Comparison failed: {e}", file=sys.stderr)
        return 1

    json.dump(result.to_dict(include_series=args.series), sys.stdout, indent=2, default=str)
    sys.stdout.write('\n')

    if not args.quiet:
        _show_quick_summary(result)

    return 0


def _show_quick_summary(result) -> None:
    """Show quick summary of the comparison on stderr."""
    comparison = result.comparison
    index_a, index_b, difference = final_index_difference(comparison)

    for summary, index in ((comparison.summary_a, index_a), (comparison.summary_b, index_b)):
        print(f"{summary.name}:", file=sys.stderr)
        print(f"   Value: {summary.initial_value:,.2f} -> {summary.current_value:,.2f} "
              f"({summary.percent_change:+.2f}%)", file=sys.stderr)
        print(f"   Annualized Return: {summary.annualized_return_pct:+.2f}%", file=sys.stderr)
        print(f"   Volatility: {summary.annualized_volatility_pct:.2f}%", file=sys.stderr)
        print(f"   Index since {comparison.first_common_date}: {index:.2f}", file=sys.stderr)

    print(f"Index difference (B - A): {difference:+.2f}", file=sys.stderr)

    for instrument, message in result.excluded.items():
        print(f"WARNING: Excluded {instrument}: {message}", file=sys.stderr)


if __name__ == '__main__':
    sys.exit(main())
